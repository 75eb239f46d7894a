"""
Tests for tracker input sources.
"""

import io
from datetime import datetime

import openpyxl
import pytest

from ingest.loader import load_records
from ingest.sample import SAMPLE_TRACKER
from ingest.sources import (
    FileSource,
    SampleSource,
    TextSource,
    WorkbookSource,
    source_for_upload,
)


def _make_workbook(path):
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.append(["Bidding Authority", "Bidding Authority", "RFS No.", "Company", "eRA", "Won Capacity", "Remarks"])
    ws.append(["SECI", "Central", "SECI-XVII", "Acme Solar", datetime(2025, 3, 14), 300.0, 'L1, "final"'])
    ws.append(["NHPC", "Central", "NHPC-T3", "ReNew", None, 1500, "tab\there"])
    wb.save(path)
    wb.close()


class TestTextSources:

    def test_text_source(self):
        assert TextSource("a,b").run() == "a,b"

    def test_sample_source(self):
        assert SampleSource().run() == SAMPLE_TRACKER

    def test_file_source_strips_bom(self, tmp_path, scenario_text):
        path = tmp_path / "tracker.csv"
        path.write_bytes(b"\xef\xbb\xbf" + scenario_text.encode("utf-8"))
        text = FileSource(path).run()
        assert text.startswith("Bidding Authority")
        assert len(load_records(text)) == 2


class TestWorkbookSource:

    def test_renders_first_sheet(self, tmp_path):
        path = tmp_path / "tracker.xlsx"
        _make_workbook(path)

        records = load_records(WorkbookSource(path).run())
        assert len(records) == 2

        seci, nhpc = records
        assert seci.authority_level == "Central"
        assert seci.era_date == datetime(2025, 3, 14).date()
        assert seci.won_capacity_mw == 300.0
        assert seci.remarks == 'L1, "final"'
        assert nhpc.won_capacity_mw == 1500.0
        assert nhpc.era_date is None
        assert nhpc.remarks == "tab here"

    def test_from_stream(self, tmp_path):
        path = tmp_path / "tracker.xlsx"
        _make_workbook(path)
        src = WorkbookSource(io.BytesIO(path.read_bytes()), label="upload.xlsx")
        assert src.label == "upload.xlsx"
        assert "SECI-XVII" in src.run()


class TestSourceForUpload:

    def test_csv(self, scenario_text):
        src = source_for_upload("t.csv", scenario_text.encode("utf-8"))
        assert isinstance(src, TextSource)
        assert src.label == "t.csv"
        assert src.run() == scenario_text

    def test_xlsx(self, tmp_path):
        path = tmp_path / "tracker.xlsx"
        _make_workbook(path)
        src = source_for_upload("Tracker.XLSX", path.read_bytes())
        assert isinstance(src, WorkbookSource)

    def test_unsupported(self):
        with pytest.raises(ValueError, match="Unsupported"):
            source_for_upload("tracker.pdf", b"%PDF")
