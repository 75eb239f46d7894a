"""
Data model for a single bidding-tracker row.
The record builder produces tuples of BidRecord objects; everything
downstream (filters, aggregates, exporters) reads them and never mutates.
"""

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ingest.stages import derive_stage

PLACEHOLDER = "—"


@dataclass(frozen=True)
class BidRecord:
    # ── Identity ─────────────────────────────────────────────────────────────
    record_id: str = ""               # "<authority>__<rfs>__<company>__<row>"

    # ── Authority ────────────────────────────────────────────────────────────
    authority_name: str = ""
    authority_level: str = PLACEHOLDER    # "State" | "Central" | …

    # ── Tender ───────────────────────────────────────────────────────────────
    tender_capacity_mw: Optional[float] = None
    category: str = PLACEHOLDER
    type: str = PLACEHOLDER
    connectivity: str = PLACEHOLDER       # "ISTS" | "STU" | …

    # ── Timeline ─────────────────────────────────────────────────────────────
    rfs_no: str = PLACEHOLDER             # tender reference, groups "unique tenders"
    rfs_date: Optional[date] = None
    rfs_financial_year: str = ""
    era_date: Optional[date] = None       # reverse-auction day, buckets the trend
    era_financial_year: str = ""

    # ── Participant ──────────────────────────────────────────────────────────
    company: str = ""
    group_company: str = ""               # falls back to company

    # ── Outcome ──────────────────────────────────────────────────────────────
    won_capacity_mw: Optional[float] = None
    final_tariff: Optional[float] = None
    initial_tariff: Optional[float] = None
    signed_ppa_capacity_mw: Optional[float] = None
    bid_capacity_mw: Optional[float] = None
    bidding_result: str = PLACEHOLDER
    any_success: Optional[bool] = None    # None = not recorded

    # ── Status ───────────────────────────────────────────────────────────────
    status_raw: str = PLACEHOLDER
    remarks: str = ""

    @property
    def stage(self) -> str:
        return derive_stage(self.status_raw)

    @property
    def winner_group(self) -> str:
        return self.group_company or self.company

    def display_era_date(self) -> str:
        if self.era_date:
            return self.era_date.strftime("%d %b %Y")
        return PLACEHOLDER

    def display_rfs_date(self) -> str:
        if self.rfs_date:
            return self.rfs_date.strftime("%d %b %Y")
        return PLACEHOLDER
