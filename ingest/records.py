"""
Record builder: turns parsed header + data rows into BidRecord objects.

Cells are coerced per field type before the record is created. A row with
no bidding authority, no RFS number and no company carries nothing to
identify it and is skipped.
"""

import logging
from typing import List, Optional, Sequence

from ingest.coercion import parse_flexible_date, to_number, to_tri_bool
from ingest.columns import ColumnIndex
from ingest.models import PLACEHOLDER, BidRecord

logger = logging.getLogger(__name__)

# ── Header labels as they appear in the tracker sheet ─────────────────────────
H_TENDER_CAPACITY  = "Tender Capacity"
H_CATEGORY         = "Category"
H_TYPE             = "Type"
H_CONNECTIVITY     = "Connectivity"
H_RFS_NO           = "RFS No."
H_RFS_DATE         = "RFS Date"
H_RFS_FY           = "RFS Financial Year"
H_ERA_DATE         = "eRA"
H_ERA_FY           = "Financial Year"
H_COMPANY          = "Company"
H_GROUP_COMPANY    = "Group Company"
H_WON_CAPACITY     = "Won Capacity"
H_FINAL_TARIFF     = "Final Tariff"
H_INITIAL_TARIFF   = "Initial Tariff"
H_STATUS           = "Status (e-RA/LOA/PPA/COD)"
H_SIGNED_PPA       = "Signed PPA Cap. (MW)"
H_REMARKS          = "Remarks"
H_BID_CAPACITY     = "Bid Capacity"
H_BIDDING_RESULT   = "Bidding Result"
H_ANY_SUCCESS      = "Any Success"

ID_SEPARATOR = "__"


def make_record_id(authority: str, rfs_no: str, company: str, row_index: int) -> str:
    parts = [authority or "NA", rfs_no or "NA", company or "NA", str(row_index)]
    return ID_SEPARATOR.join(parts)


def build_record(columns: ColumnIndex, row: Sequence[str], row_index: int) -> Optional[BidRecord]:
    """Build one record, or return None if the row has no identity."""
    authority = columns.authority_name(row)
    rfs_no = columns.get(row, H_RFS_NO)
    company = columns.get(row, H_COMPANY)

    if not authority and not rfs_no and not company:
        return None

    return BidRecord(
        record_id=make_record_id(authority, rfs_no, company, row_index),
        authority_name=authority,
        authority_level=columns.authority_level(row) or PLACEHOLDER,
        tender_capacity_mw=to_number(columns.get(row, H_TENDER_CAPACITY)),
        category=columns.get(row, H_CATEGORY) or PLACEHOLDER,
        type=columns.get(row, H_TYPE) or PLACEHOLDER,
        connectivity=columns.get(row, H_CONNECTIVITY) or PLACEHOLDER,
        rfs_no=rfs_no or PLACEHOLDER,
        rfs_date=parse_flexible_date(columns.get(row, H_RFS_DATE)),
        rfs_financial_year=columns.get(row, H_RFS_FY),
        era_date=parse_flexible_date(columns.get(row, H_ERA_DATE)),
        era_financial_year=columns.get(row, H_ERA_FY),
        company=company,
        group_company=columns.get(row, H_GROUP_COMPANY) or company,
        won_capacity_mw=to_number(columns.get(row, H_WON_CAPACITY)),
        final_tariff=to_number(columns.get(row, H_FINAL_TARIFF)),
        initial_tariff=to_number(columns.get(row, H_INITIAL_TARIFF)),
        signed_ppa_capacity_mw=to_number(columns.get(row, H_SIGNED_PPA)),
        bid_capacity_mw=to_number(columns.get(row, H_BID_CAPACITY)),
        bidding_result=columns.get(row, H_BIDDING_RESULT) or PLACEHOLDER,
        any_success=to_tri_bool(columns.get(row, H_ANY_SUCCESS)),
        status_raw=columns.get(row, H_STATUS) or PLACEHOLDER,
        remarks=columns.get(row, H_REMARKS),
    )


def build_records(headers: Sequence[str], rows: Sequence[Sequence[str]]) -> List[BidRecord]:
    """Build records for every identifiable row, keeping input order."""
    columns = ColumnIndex.from_headers(headers)
    records: List[BidRecord] = []
    for row_index, row in enumerate(rows):
        record = build_record(columns, row, row_index)
        if record is not None:
            records.append(record)

    dropped = len(rows) - len(records)
    if dropped:
        logger.debug("Skipped %d row(s) with no authority, RFS No. or company.", dropped)
    return records
