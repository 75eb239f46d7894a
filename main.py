"""
main.py — command-line entry point for the Bidding Tracker.

Usage:
    python main.py                          # Summarise the bundled sample
    python main.py tracker.csv              # Summarise a CSV / TSV / XLSX tracker
    python main.py tracker.csv --stage LOA  # Only rows at the LOA stage
    python main.py tracker.csv --search acme --export
"""

import argparse
import logging
import sys
from typing import List, Optional

import config

# ── Logging setup ─────────────────────────────────────────────────────────────
_handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
if config.LOG_FILE:
    _handlers.append(logging.FileHandler(config.LOG_FILE, encoding="utf-8"))

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s  %(levelname)-8s  %(name)s  —  %(message)s",
    datefmt="%H:%M:%S",
    handlers=_handlers,
)
logger = logging.getLogger("main")

# ── Project imports ───────────────────────────────────────────────────────────
from analytics.aggregates import AggregateSnapshot, summarize
from filters.tracker_filter import RecordFilter, filter_records
from ingest.loader import TrackerState
from ingest.models import PLACEHOLDER, BidRecord
from ingest.stages import STAGES
from ingest.sources import (
    WORKBOOK_EXTENSIONS,
    BaseSource,
    FileSource,
    SampleSource,
    WorkbookSource,
)
from output_engine.excel_exporter import export_to_excel


def _build_source(path: Optional[str]) -> BaseSource:
    if not path:
        return SampleSource()
    if path.lower().endswith(WORKBOOK_EXTENSIONS):
        return WorkbookSource(path)
    return FileSource(path)


def run_tracker(
    path: Optional[str] = None,
    record_filter: RecordFilter = RecordFilter(),
    top_n: Optional[int] = None,
    export: bool = False,
    output_dir: Optional[str] = None,
) -> int:
    """
    Full cycle:  read → parse → filter → summarise → (export).
    Returns a process exit code.
    """
    state = TrackerState().with_source(_build_source(path))
    if state.error:
        logger.error("Could not load tracker: %s", state.error)
        return 1

    state = state.with_filter(record_filter)
    visible = filter_records(state.records, state.record_filter)
    snapshot = summarize(visible, top_n)

    _print_summary(state, visible, snapshot)

    if export:
        filepath = export_to_excel(visible, snapshot, output_dir)
        logger.info("Report saved: %s", filepath)
    return 0


def _fmt(n: Optional[float], digits: int = 2) -> str:
    if n is None:
        return PLACEHOLDER
    return f"{n:,.{digits}f}"


def _print_summary(state: TrackerState, visible: List[BidRecord], s: AggregateSnapshot) -> None:
    """Print a readable summary to stdout."""
    print()
    print("━" * 72)
    print(f"  BIDDING TRACKER  —  {state.source}")
    print("━" * 72)
    print(f"  Records loaded        : {len(state.records):>8}")
    print(f"  Visible rows          : {s.row_count:>8}")
    print(f"  Unique tenders        : {s.tender_count:>8}")
    print(f"  Tendered cap. (MW)    : {_fmt(s.tendered_capacity_mw):>8}")
    print(f"  Bid capacity (MW)     : {_fmt(s.total_bid_mw):>8}")
    print(f"  Won capacity (MW)     : {_fmt(s.total_won_mw):>8}")
    print(f"  Wtd. avg. tariff      : {_fmt(s.weighted_avg_tariff, 3):>8}")
    print(f"  Win rate              : {s.win_rate:>7.1f}%  ({s.success_count} success rows)")
    print("━" * 72)

    if not visible:
        print("  No rows match the current filters.")
        print()
        return

    if s.top_winners:
        print("  Top winners (won MW):")
        for i, w in enumerate(s.top_winners, 1):
            print(f"    {i:>2}. {w.name[:40]:<40}  {_fmt(w.won_mw):>10}")
        print()

    print(f"  {'Month':<8}  {'Wtd tariff':>10}  {'Won MW':>10}")
    print(f"  {'─'*8}  {'─'*10}  {'─'*10}")
    for p in s.monthly_trend:
        print(f"  {p.month:<8}  {_fmt(p.weighted_avg_tariff, 3):>10}  {_fmt(p.won_mw):>10}")
    print("━" * 72)


# ── CLI ───────────────────────────────────────────────────────────────────────

def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Bidding tracker — KPIs for energy capacity tenders"
    )
    parser.add_argument(
        "path",
        nargs="?",
        default=None,
        help="CSV / TSV / XLSX tracker file (default: bundled sample)",
    )
    parser.add_argument("--authority", default="", help="Only this bidding authority")
    parser.add_argument("--category", default="", help="Only this category")
    parser.add_argument("--stage", default="", choices=("",) + STAGES, help="Only this stage")
    parser.add_argument("--search", default="", help="Case-insensitive text search")
    parser.add_argument(
        "--top",
        type=int,
        default=None,
        help="How many top winners to show (default: read from tracker_settings.yaml)",
    )
    parser.add_argument(
        "--export",
        action="store_true",
        help="Also write an Excel report of the visible rows",
    )
    parser.add_argument(
        "--output-dir",
        default=None,
        help="Where to write the Excel report (default: output_dir in settings)",
    )
    args = parser.parse_args(argv)

    record_filter = RecordFilter.from_mapping({
        "authority": args.authority,
        "category": args.category,
        "stage": args.stage,
        "q": args.search,
    })
    return run_tracker(
        path=args.path,
        record_filter=record_filter,
        top_n=args.top,
        export=args.export,
        output_dir=args.output_dir,
    )


if __name__ == "__main__":
    sys.exit(main())
