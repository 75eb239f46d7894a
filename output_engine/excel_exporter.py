"""
Excel exporter — writes the visible tracker rows and their KPIs to .xlsx.

The workbook has two sheets:
  1. "Visible Records"  — the filtered rows (Stage column colour-coded)
  2. "Summary"          — KPIs, top winners and the monthly tariff trend

Stage colours:
  COD: Dark green   PPA: Green   LOA: Amber   e-RA: Blue   NA: Grey
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import List, Sequence

import openpyxl
from openpyxl.styles import (
    Alignment,
    Border,
    Font,
    PatternFill,
    Side,
)
from openpyxl.utils import get_column_letter

from analytics.aggregates import AggregateSnapshot
from ingest.models import PLACEHOLDER, BidRecord
from ingest.stages import STAGE_COD, STAGE_ERA, STAGE_LOA, STAGE_PPA
import config

logger = logging.getLogger(__name__)

RECORDS_SHEET = "Visible Records"
SUMMARY_SHEET = "Summary"

# ── Colour fills ──────────────────────────────────────────────────────────────
FILL_COD     = PatternFill("solid", fgColor="1A7A3C")   # Dark green
FILL_PPA     = PatternFill("solid", fgColor="4CAF50")   # Green
FILL_LOA     = PatternFill("solid", fgColor="FFC107")   # Amber
FILL_ERA     = PatternFill("solid", fgColor="2563EB")   # Blue
FILL_NA      = PatternFill("solid", fgColor="B0BEC5")   # Grey
FILL_HEADER  = PatternFill("solid", fgColor="1B3A6B")   # Navy blue header
FILL_ALT_ROW = PatternFill("solid", fgColor="F0F4FF")   # Light blue alt row

FONT_HEADER = Font(name="Calibri", bold=True, color="FFFFFF", size=11)
FONT_BODY   = Font(name="Calibri", size=10)
FONT_BOLD   = Font(name="Calibri", bold=True, color="1B3A6B", size=10)
FONT_STAGE  = Font(name="Calibri", bold=True, color="FFFFFF", size=10)

THIN_BORDER = Border(
    left=Side(style="thin", color="D0D7E5"),
    right=Side(style="thin", color="D0D7E5"),
    top=Side(style="thin", color="D0D7E5"),
    bottom=Side(style="thin", color="D0D7E5"),
)

COLUMN_DEFS = [
    # (header,            width, attr_or_method)
    ("#",                 5,     None),
    ("Authority",         16,    "authority_name"),
    ("Level",             10,    "authority_level"),
    ("Category",          12,    "category"),
    ("Type",              18,    "type"),
    ("RFS No.",           34,    "rfs_no"),
    ("RFS Date",          13,    "display_rfs_date"),
    ("e-RA Date",         13,    "display_era_date"),
    ("Company",           22,    "company"),
    ("Group Company",     22,    "group_company"),
    ("Bid (MW)",          10,    "bid_capacity_mw"),
    ("Won (MW)",          10,    "won_capacity_mw"),
    ("Final Tariff",      11,    "final_tariff"),
    ("Stage",             8,     "stage"),
    ("Status",            24,    "status_raw"),
    ("Bidding Result",    20,    "bidding_result"),
    ("Any Success",       11,    "any_success"),
    ("Remarks",           30,    "remarks"),
]

_STAGE_FILLS = {
    STAGE_COD: FILL_COD,
    STAGE_PPA: FILL_PPA,
    STAGE_LOA: FILL_LOA,
    STAGE_ERA: FILL_ERA,
}


def _stage_fill(stage: str) -> PatternFill:
    return _STAGE_FILLS.get(stage, FILL_NA)


def _get_value(record: BidRecord, attr: str):
    """Extract a cell value from a BidRecord using attribute or method name."""
    if attr is None:
        return ""
    val = getattr(record, attr, None)
    if callable(val):
        val = val()
    if isinstance(val, bool):
        return "✓" if val else "✗"
    if val is None:
        return PLACEHOLDER
    return val


def _header_cell(ws, row: int, col: int, value: str) -> None:
    cell = ws.cell(row=row, column=col, value=value)
    cell.font = FONT_HEADER
    cell.fill = FILL_HEADER
    cell.alignment = Alignment(horizontal="center", vertical="center", wrap_text=True)
    cell.border = THIN_BORDER


def _write_records_sheet(ws, records: Sequence[BidRecord], run_date: str) -> None:
    """Write the visible records into a worksheet."""

    # ── Title row ─────────────────────────────────────────────────────────────
    ws.merge_cells(f"A1:{get_column_letter(len(COLUMN_DEFS))}1")
    title_cell = ws["A1"]
    title_cell.value = f"Bidding Tracker  |  Exported: {run_date}  |  {len(records)} row(s)"
    title_cell.font = Font(name="Calibri", bold=True, size=13, color="1B3A6B")
    title_cell.alignment = Alignment(horizontal="center", vertical="center")
    ws.row_dimensions[1].height = 24

    # ── Header row ────────────────────────────────────────────────────────────
    for col_idx, (header, width, _) in enumerate(COLUMN_DEFS, start=1):
        _header_cell(ws, 2, col_idx, header)
        ws.column_dimensions[get_column_letter(col_idx)].width = width
    ws.row_dimensions[2].height = 22

    # ── Data rows ─────────────────────────────────────────────────────────────
    for row_idx, record in enumerate(records, start=1):
        excel_row = row_idx + 2
        alt = (row_idx % 2 == 0)

        for col_idx, (header, _, attr) in enumerate(COLUMN_DEFS, start=1):
            value = row_idx if header == "#" else _get_value(record, attr)

            cell = ws.cell(row=excel_row, column=col_idx, value=value)
            cell.border = THIN_BORDER
            cell.font = FONT_BODY
            cell.alignment = Alignment(
                vertical="center",
                wrap_text=(header in ("RFS No.", "Status", "Remarks")),
            )

            if alt and header != "Stage":
                cell.fill = FILL_ALT_ROW

            if header == "Stage":
                cell.fill = _stage_fill(record.stage)
                cell.font = FONT_STAGE
                cell.alignment = Alignment(horizontal="center", vertical="center")

            if header == "Company":
                cell.font = FONT_BOLD

    # ── Freeze panes & auto-filter ────────────────────────────────────────────
    ws.freeze_panes = "A3"
    ws.auto_filter.ref = f"A2:{get_column_letter(len(COLUMN_DEFS))}{len(records) + 2}"


def _write_table(ws, start_row: int, title: str, headers: List[str], rows: List[list]) -> int:
    """Write a small titled table; returns the next free row."""
    ws.cell(row=start_row, column=1, value=title).font = Font(
        name="Calibri", bold=True, size=12, color="1B3A6B"
    )
    for col_idx, header in enumerate(headers, start=1):
        _header_cell(ws, start_row + 1, col_idx, header)
    for offset, values in enumerate(rows, start=2):
        for col_idx, value in enumerate(values, start=1):
            cell = ws.cell(row=start_row + offset, column=col_idx, value=value)
            cell.font = FONT_BODY
            cell.border = THIN_BORDER
    return start_row + len(rows) + 3


def _write_summary_sheet(ws, snapshot: AggregateSnapshot) -> None:
    for col, width in zip("ABC", (34, 20, 16)):
        ws.column_dimensions[col].width = width

    tariff = snapshot.weighted_avg_tariff
    kpis = [
        ["Unique tenders", snapshot.tender_count],
        ["Tendered capacity (MW, approx.)", round(snapshot.tendered_capacity_mw, 2)],
        ["Visible rows", snapshot.row_count],
        ["Successful rows", snapshot.success_count],
        ["Win rate (%)", round(snapshot.win_rate, 2)],
        ["Total bid capacity (MW)", round(snapshot.total_bid_mw, 2)],
        ["Total won capacity (MW)", round(snapshot.total_won_mw, 2)],
        ["Weighted avg. final tariff", round(tariff, 4) if tariff is not None else PLACEHOLDER],
    ]
    next_row = _write_table(ws, 1, "Key figures", ["Metric", "Value"], kpis)

    winners = [[w.name, round(w.won_mw, 2)] for w in snapshot.top_winners]
    next_row = _write_table(ws, next_row, "Top winners by won capacity", ["Group company", "Won (MW)"], winners)

    trend = [
        [p.month, round(p.weighted_avg_tariff, 4), round(p.won_mw, 2)]
        for p in snapshot.monthly_trend
    ]
    _write_table(ws, next_row, "Monthly tariff trend (by e-RA date)",
                 ["Month", "Weighted tariff", "Won (MW)"], trend)


def export_to_excel(
    records: Sequence[BidRecord],
    snapshot: AggregateSnapshot,
    output_dir: str = None,
) -> str:
    """
    Write the two-sheet Excel report and return the file path.

    Args:
        records:     Visible (filtered) records.
        snapshot:    Aggregates computed over the same records.
        output_dir:  Directory to save the file. Defaults to config.OUTPUT_DIR.

    Returns:
        Absolute path of the saved .xlsx file.
    """
    out_dir = Path(output_dir or config.OUTPUT_DIR)
    out_dir.mkdir(parents=True, exist_ok=True)

    run_date = datetime.now().strftime("%d %b %Y %H:%M")
    date_tag = datetime.now().strftime("%Y-%m-%d")
    filepath = out_dir / config.OUTPUT_FILENAME.format(date=date_tag)

    wb = openpyxl.Workbook()

    ws1 = wb.active
    ws1.title = RECORDS_SHEET
    _write_records_sheet(ws1, records, run_date)

    ws2 = wb.create_sheet(SUMMARY_SHEET)
    _write_summary_sheet(ws2, snapshot)

    wb.save(filepath)
    logger.info("Excel saved: %s", filepath.resolve())
    return str(filepath.resolve())
