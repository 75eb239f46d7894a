"""
Tests for the aggregation engine.
"""

import math
from datetime import date

import pytest

from analytics.aggregates import (
    UNKNOWN_MONTH,
    month_key,
    monthly_trend,
    summarize,
    tendered_capacity,
    top_winners,
    weighted_average,
    win_rate,
)
from ingest.models import BidRecord


def _rec(**kwargs) -> BidRecord:
    return BidRecord(**kwargs)


class TestWeightedAverage:

    def test_empty(self):
        assert weighted_average([]) is None

    def test_zero_total_weight(self):
        assert weighted_average([(1.0, 0.0), (2.0, 0.0), (3.0, None)]) is None

    def test_skips_unusable_pairs(self):
        pairs = [(2.0, 10.0), (None, 5.0), (4.0, -3.0), (math.nan, 1.0), (100.0, math.inf), (4.0, 10.0)]
        assert weighted_average(pairs) == pytest.approx(3.0)

    def test_scale_invariant(self):
        pairs = [(2.52, 300.0), (2.53, 600.0), (3.31, 400.0)]
        base = weighted_average(pairs)
        scaled = weighted_average([(v, w * 7.5) for v, w in pairs])
        assert scaled == pytest.approx(base)


class TestTenderedCapacity:

    def test_first_stated_capacity_per_rfs(self):
        records = [
            _rec(rfs_no="RFS-A", tender_capacity_mw=None),
            _rec(rfs_no="RFS-A", tender_capacity_mw=100.0),
            _rec(rfs_no="RFS-B", tender_capacity_mw=50.0),
            _rec(rfs_no="RFS-A", tender_capacity_mw=200.0),
        ]
        assert tendered_capacity(records) == 150.0

    def test_rfs_without_capacity_counts_zero(self, scenario_records):
        assert tendered_capacity(scenario_records) == 0.0


class TestWinRate:

    def test_no_rows_is_zero(self):
        rate = win_rate([])
        assert rate == 0.0
        assert rate is not None

    def test_only_true_counts(self):
        records = [_rec(any_success=True), _rec(any_success=False), _rec(any_success=None), _rec(any_success=False)]
        assert win_rate(records) == 25.0


class TestTopWinners:

    def test_grouped_sorted_and_positive(self):
        records = [
            _rec(company="A1", group_company="A", won_capacity_mw=100.0),
            _rec(company="B", won_capacity_mw=300.0),
            _rec(company="A2", group_company="A", won_capacity_mw=250.0),
            _rec(company="C", won_capacity_mw=0.0),
            _rec(company="D", won_capacity_mw=None),
        ]
        winners = top_winners(records)
        assert [(w.name, w.won_mw) for w in winners] == [("A", 350.0), ("B", 300.0)]

    def test_limit(self):
        records = [_rec(company=f"Co{i}", won_capacity_mw=float(i + 1)) for i in range(12)]
        winners = top_winners(records, limit=10)
        assert len(winners) == 10
        assert winners[0].name == "Co11"
        assert winners[-1].name == "Co2"


class TestMonthlyTrend:

    def test_month_key(self):
        assert month_key(date(2025, 3, 14)) == "2025-03"
        assert month_key(None) == UNKNOWN_MONTH

    def test_buckets_sorted_unknown_last(self):
        records = [
            _rec(era_date=None, won_capacity_mw=5.0),
            _rec(era_date=date(2025, 11, 29), won_capacity_mw=275.0, final_tariff=1.5),
            _rec(era_date=date(2024, 12, 1), won_capacity_mw=100.0, final_tariff=2.0),
            _rec(era_date=date(2024, 12, 20), won_capacity_mw=300.0, final_tariff=3.0),
        ]
        trend = monthly_trend(records)
        assert [p.month for p in trend] == ["2024-12", "2025-11", UNKNOWN_MONTH]
        assert trend[0].weighted_avg_tariff == pytest.approx(2.75)
        assert trend[0].won_mw == 400.0
        assert trend[2].weighted_avg_tariff == 0.0
        assert trend[2].won_mw == 5.0


class TestSummarize:

    def test_scenario(self, scenario_records):
        s = summarize(scenario_records)
        assert s.row_count == 2
        assert s.tender_count == 1
        assert s.tendered_capacity_mw == 0.0
        assert s.weighted_avg_tariff == pytest.approx(1.5)
        assert s.total_won_mw == 275.0
        assert s.win_rate == 0.0

    def test_empty(self):
        s = summarize([])
        assert s.row_count == 0
        assert s.win_rate == 0.0
        assert s.weighted_avg_tariff is None
        assert s.top_winners == []
        assert s.monthly_trend == []

    def test_sample(self, sample_records):
        s = summarize(sample_records)
        assert s.tender_count == 4
        assert s.tendered_capacity_mw == 4200.0
        assert s.row_count == 8
        assert s.success_count == 5
        assert s.win_rate == pytest.approx(62.5)
        assert s.total_bid_mw == 2700.0
        assert s.total_won_mw == 1875.0
        assert s.weighted_avg_tariff == pytest.approx(4772.5 / 1875)
        assert [w.name for w in s.top_winners] == [
            "Avaada Group", "ReNew", "Acme Solar Holdings", "NTPC", "Ecoren Energy",
        ]
        assert [p.month for p in s.monthly_trend] == ["2025-03", "2025-04", "2025-11", UNKNOWN_MONTH]
        march = s.monthly_trend[0]
        assert march.won_mw == 1200.0
        assert march.weighted_avg_tariff == pytest.approx(2.53)

    def test_top_n(self, sample_records):
        assert len(summarize(sample_records, top_n=2).top_winners) == 2
