"""
Filter engine — narrows the record set to what the dashboard shows.

A record is visible when:
  - every active dropdown (authority, category, stage) equals its value, and
  - the search text, if any, appears somewhere in its text fields
    (case-insensitive substring over one joined string)

"All" or an empty value switches a dropdown off.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Mapping

from ingest.models import BidRecord

logger = logging.getLogger(__name__)

ALL = "All"
HAYSTACK_SEPARATOR = " | "


def _normalise(text: str) -> str:
    return (text or "").lower().strip()


def _is_active(value: str) -> bool:
    return bool(value) and value != ALL


@dataclass(frozen=True)
class RecordFilter:
    authority: str = ALL
    category: str = ALL
    stage: str = ALL
    search: str = ""

    @classmethod
    def from_mapping(cls, args: Mapping) -> "RecordFilter":
        """Build a filter from query-string style keys (authority, category, stage, q)."""
        return cls(
            authority=args.get("authority") or ALL,
            category=args.get("category") or ALL,
            stage=args.get("stage") or ALL,
            search=args.get("q") or args.get("search") or "",
        )

    def is_empty(self) -> bool:
        return not (
            _is_active(self.authority)
            or _is_active(self.category)
            or _is_active(self.stage)
            or _normalise(self.search)
        )


@dataclass(frozen=True)
class FilterOptions:
    authorities: List[str] = field(default_factory=list)
    categories: List[str] = field(default_factory=list)
    stages: List[str] = field(default_factory=list)


def haystack(record: BidRecord) -> str:
    """All searchable text of a record, lower-cased, as one string."""
    return HAYSTACK_SEPARATOR.join([
        record.authority_name,
        record.category,
        record.type,
        record.connectivity,
        record.rfs_no,
        record.company,
        record.group_company,
        record.status_raw,
        record.bidding_result,
        record.remarks,
    ]).lower()


def matches(record: BidRecord, record_filter: RecordFilter) -> bool:
    if _is_active(record_filter.authority) and record.authority_name != record_filter.authority:
        return False
    if _is_active(record_filter.category) and record.category != record_filter.category:
        return False
    if _is_active(record_filter.stage) and record.stage != record_filter.stage:
        return False

    needle = _normalise(record_filter.search)
    if needle and needle not in haystack(record):
        return False
    return True


def filter_records(
    records: Iterable[BidRecord],
    record_filter: RecordFilter,
) -> List[BidRecord]:
    """
    Return the visible records, in their original order.

    Args:
        records:        The full record set of the current load.
        record_filter:  Dropdown values and search text.
    """
    records = list(records)
    if record_filter.is_empty():
        return records

    visible = [r for r in records if matches(r, record_filter)]
    logger.info(
        "Filter result: %d/%d records visible (%s).",
        len(visible), len(records), record_filter,
    )
    return visible


def _distinct_sorted(values: Iterable[str]) -> List[str]:
    return sorted({v for v in values if v})


def filter_options(records: Iterable[BidRecord]) -> FilterOptions:
    """Dropdown choices, taken from the full (unfiltered) record set."""
    records = list(records)
    return FilterOptions(
        authorities=_distinct_sorted(r.authority_name for r in records),
        categories=_distinct_sorted(r.category for r in records),
        stages=_distinct_sorted(r.stage for r in records),
    )
