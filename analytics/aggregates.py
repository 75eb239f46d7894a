"""
Aggregation engine: the KPI figures and chart series for the visible records.

Everything is recomputed from scratch for each filter change; nothing here
caches or mutates. Grouping keeps first-seen order because the tendered
capacity figure depends on it.

  tendered capacity: per RFS No., the first row that states a tender
                     capacity counts once; RFSs without one count as 0
  weighted tariff:   final tariff weighted by won capacity
  win rate:          rows with Any Success = yes, as % of visible rows
  top winners:       won capacity per group company, top N
  monthly trend:     weighted tariff + won capacity per e-RA month
"""

import math
from dataclasses import dataclass, field
from datetime import date
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

import config
from ingest.models import PLACEHOLDER, BidRecord

UNKNOWN_MONTH = "Unknown"


@dataclass(frozen=True)
class WinnerShare:
    name: str
    won_mw: float


@dataclass(frozen=True)
class MonthlyPoint:
    month: str                     # "YYYY-MM" or "Unknown"
    weighted_avg_tariff: float     # 0.0 when no row had tariff + won capacity
    won_mw: float


@dataclass(frozen=True)
class AggregateSnapshot:
    tender_count: int = 0
    tendered_capacity_mw: float = 0.0
    row_count: int = 0
    success_count: int = 0
    win_rate: float = 0.0
    total_bid_mw: float = 0.0
    total_won_mw: float = 0.0
    weighted_avg_tariff: Optional[float] = None
    top_winners: List[WinnerShare] = field(default_factory=list)
    monthly_trend: List[MonthlyPoint] = field(default_factory=list)


def _usable(x: Optional[float]) -> bool:
    return x is not None and math.isfinite(x)


def weighted_average(pairs: Iterable[Tuple[Optional[float], Optional[float]]]) -> Optional[float]:
    """
    Σ value·weight / Σ weight over (value, weight) pairs.
    Pairs with a missing value, or a missing / non-positive weight, are skipped.
    Returns None when no weight is left.
    """
    total = 0.0
    weight_sum = 0.0
    for value, weight in pairs:
        if not _usable(value) or not _usable(weight) or weight <= 0:
            continue
        total += value * weight
        weight_sum += weight
    return total / weight_sum if weight_sum > 0 else None


def group_by(records: Iterable[BidRecord], key: Callable[[BidRecord], str]) -> Dict[str, List[BidRecord]]:
    """Group records by key, keeping first-seen group order and row order."""
    groups: Dict[str, List[BidRecord]] = {}
    for record in records:
        groups.setdefault(key(record) or PLACEHOLDER, []).append(record)
    return groups


def _sum(values: Iterable[Optional[float]]) -> float:
    return sum((v for v in values if v is not None), 0.0)


def _won_tariff_pairs(records: Iterable[BidRecord]):
    return [(r.final_tariff, r.won_capacity_mw) for r in records]


def tendered_capacity(records: Sequence[BidRecord]) -> float:
    total = 0.0
    for rows in group_by(records, lambda r: r.rfs_no).values():
        first = next((r.tender_capacity_mw for r in rows if r.tender_capacity_mw is not None), None)
        total += first or 0.0
    return total


def win_rate(records: Sequence[BidRecord]) -> float:
    if not records:
        return 0.0
    successes = sum(1 for r in records if r.any_success is True)
    return successes / len(records) * 100


def top_winners(records: Sequence[BidRecord], limit: Optional[int] = None) -> List[WinnerShare]:
    limit = config.TOP_WINNERS_LIMIT if limit is None else limit
    shares = [
        WinnerShare(name=name, won_mw=_sum(r.won_capacity_mw for r in rows))
        for name, rows in group_by(records, lambda r: r.winner_group).items()
    ]
    shares = [s for s in shares if s.won_mw > 0]
    shares.sort(key=lambda s: s.won_mw, reverse=True)
    return shares[:limit]


def month_key(d: Optional[date]) -> str:
    if d is None:
        return UNKNOWN_MONTH
    return f"{d.year}-{d.month:02d}"


def monthly_trend(records: Sequence[BidRecord]) -> List[MonthlyPoint]:
    groups = group_by(records, lambda r: month_key(r.era_date))
    points = []
    for month in sorted(groups):
        rows = groups[month]
        points.append(MonthlyPoint(
            month=month,
            weighted_avg_tariff=weighted_average(_won_tariff_pairs(rows)) or 0.0,
            won_mw=_sum(r.won_capacity_mw for r in rows),
        ))
    return points


def summarize(records: Sequence[BidRecord], top_n: Optional[int] = None) -> AggregateSnapshot:
    """Every KPI and chart series for one set of visible records."""
    records = list(records)
    return AggregateSnapshot(
        tender_count=len(group_by(records, lambda r: r.rfs_no)),
        tendered_capacity_mw=tendered_capacity(records),
        row_count=len(records),
        success_count=sum(1 for r in records if r.any_success is True),
        win_rate=win_rate(records),
        total_bid_mw=_sum(r.bid_capacity_mw for r in records),
        total_won_mw=_sum(r.won_capacity_mw for r in records),
        weighted_avg_tariff=weighted_average(_won_tariff_pairs(records)),
        top_winners=top_winners(records, top_n),
        monthly_trend=monthly_trend(records),
    )
