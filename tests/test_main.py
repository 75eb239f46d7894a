"""
Tests for the command-line entry point.
"""

import main


class TestMain:

    def test_sample_summary(self, capsys):
        assert main.main([]) == 0
        out = capsys.readouterr().out
        assert "BIDDING TRACKER" in out
        assert "Sample tracker" in out
        assert "Avaada Group" in out

    def test_filters(self, capsys):
        assert main.main(["--stage", "COD"]) == 0
        out = capsys.readouterr().out
        assert "NTPC" in out
        assert "Avaada Group" not in out

    def test_no_matches(self, capsys):
        assert main.main(["--search", "no such company"]) == 0
        assert "No rows match" in capsys.readouterr().out

    def test_file_and_export(self, tmp_path, scenario_text):
        path = tmp_path / "tracker.tsv"
        path.write_text(scenario_text.replace(",", "\t"), encoding="utf-8")
        assert main.main([str(path), "--export", "--output-dir", str(tmp_path)]) == 0
        assert list(tmp_path.glob("bidding_tracker_*.xlsx"))

    def test_missing_file(self, tmp_path):
        assert main.main([str(tmp_path / "missing.csv")]) == 1

    def test_bad_content(self, tmp_path):
        path = tmp_path / "empty.csv"
        path.write_text("Bidding Authority,Company\n", encoding="utf-8")
        assert main.main([str(path)]) == 1
