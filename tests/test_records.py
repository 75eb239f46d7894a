"""
Tests for building BidRecords from parsed rows, including stage derivation.
"""

from dataclasses import replace

import pytest

from ingest.models import PLACEHOLDER
from ingest.parser import parse_delimited
from ingest.records import build_records, make_record_id
from ingest.stages import STAGE_COD, STAGE_ERA, STAGE_LOA, STAGE_NA, STAGE_PPA, derive_stage


class TestDeriveStage:

    @pytest.mark.parametrize("status,expected", [
        ("LOA then COD", STAGE_COD),
        ("", STAGE_NA),
        ("Not Applicable", STAGE_NA),
        ("  not applicable ", STAGE_NA),
        ("PPA signed", STAGE_PPA),
        ("LOA issued", STAGE_LOA),
        ("e-RA", STAGE_ERA),
        ("eRA done", STAGE_ERA),
        ("E RA completed", STAGE_ERA),
        ("Bid submitted", STAGE_NA),
        (PLACEHOLDER, STAGE_NA),
    ])
    def test_classify(self, status, expected):
        assert derive_stage(status) == expected

    def test_ppa_beats_loa(self):
        assert derive_stage("LOA and PPA") == STAGE_PPA


class TestScenario:

    def test_two_records(self, scenario_records):
        assert len(scenario_records) == 2

    def test_stages(self, scenario_records):
        assert [r.stage for r in scenario_records] == [STAGE_ERA, STAGE_LOA]

    def test_authority_from_duplicate_columns(self, scenario_records):
        first = scenario_records[0]
        assert first.authority_name == "APTransco"
        assert first.authority_level == "State"

    def test_ids(self, scenario_records):
        assert [r.record_id for r in scenario_records] == [
            "APTransco__RFS-1__Ecoren__0",
            "APTransco__RFS-1__Acme__1",
        ]

    def test_typed_fields(self, scenario_records):
        ecoren, acme = scenario_records
        assert ecoren.won_capacity_mw == 275.0
        assert ecoren.final_tariff == 1.5
        assert acme.won_capacity_mw == 0.0
        assert acme.final_tariff is None

    def test_missing_columns_degrade(self, scenario_records):
        r = scenario_records[0]
        assert r.tender_capacity_mw is None
        assert r.era_date is None
        assert r.any_success is None
        assert r.category == PLACEHOLDER
        assert r.bidding_result == PLACEHOLDER
        assert r.remarks == ""
        assert r.group_company == "Ecoren"


class TestBuildRecords:

    def test_identityless_rows_dropped_but_counted_in_ids(self):
        table = parse_delimited(
            "Bidding Authority,RFS No.,Company,Category\n"
            ",,,RE\n"
            "SECI,,,\n"
        )
        records = build_records(table.headers, table.rows)
        assert len(records) == 1
        assert records[0].record_id == "SECI__NA__NA__1"
        assert records[0].rfs_no == PLACEHOLDER
        assert records[0].company == ""

    def test_company_alone_is_enough(self):
        table = parse_delimited("Company,Won Capacity\nAcme,\" 1,200 \"\n")
        records = build_records(table.headers, table.rows)
        assert records[0].authority_name == ""
        assert records[0].won_capacity_mw == 1200.0

    def test_group_company_used_when_present(self):
        table = parse_delimited("Company,Group Company\nAvaada Energy,Avaada Group\n")
        assert build_records(table.headers, table.rows)[0].group_company == "Avaada Group"

    def test_stage_follows_status(self, scenario_records):
        changed = replace(scenario_records[1], status_raw="COD achieved")
        assert changed.stage == STAGE_COD

    def test_all_header_fields(self, sample_records):
        r = sample_records[3]
        assert r.company == "Avaada Energy"
        assert r.group_company == "Avaada Group"
        assert r.tender_capacity_mw == 1200.0
        assert r.connectivity == "ISTS"
        assert r.type == "Solar"
        assert r.rfs_financial_year == "FY 2025"
        assert r.era_financial_year == "FY 2025"
        assert r.initial_tariff == 2.60
        assert r.signed_ppa_capacity_mw == 600.0
        assert r.bid_capacity_mw == 600.0
        assert r.any_success is True
        assert r.stage == STAGE_PPA

    def test_quoted_thousands(self, sample_records):
        nhpc = [r for r in sample_records if r.authority_name == "NHPC"]
        assert all(r.tender_capacity_mw == 1500.0 for r in nhpc)

    @pytest.mark.parametrize("delimiter", [",", "\t"])
    def test_one_record_per_identified_row(self, delimiter):
        header = delimiter.join(["Bidding Authority", "Bidding Authority", "RFS No.", "Company", "Won Capacity"])
        lines = [header]
        expected = 0
        for i in range(20):
            if i % 5 == 4:
                lines.append(delimiter.join(["", "", "", "", str(i)]))
            else:
                lines.append(delimiter.join([f"Auth{i % 3}", "State", f"RFS-{i}", f"Co{i}", str(i)]))
                expected += 1
            if i % 7 == 0:
                lines.append("")
        table = parse_delimited("\n".join(lines))
        assert len(build_records(table.headers, table.rows)) == expected


class TestMakeRecordId:

    def test_placeholders(self):
        assert make_record_id("", "", "", 3) == "NA__NA__NA__3"
