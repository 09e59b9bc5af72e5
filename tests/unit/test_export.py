"""
Unit tests for exporting one radio's reports.
"""

import json
import zipfile

import pytest

from pulitzer.reporting.export import NoReportsFoundError, export_reports
from pulitzer.reporting.utils import ReportWriteError


class TestExportReports:
    """Tests for export_reports()."""

    def test_zip_keeps_relative_paths(self, sample_tree):
        path = export_reports(sample_tree, "baofeng", "dm32uv", "zip")
        assert path == sample_tree / "exports" / "baofeng_dm32uv_reports.zip"
        with zipfile.ZipFile(path) as zf:
            names = sorted(zf.namelist())
            assert names == [
                "api/baofeng/dm32uv/api_docs.html",
                "protocol/read/baofeng/dm32uv/read_analysis.html",
                "protocol/write/baofeng/dm32uv/write_analysis.html",
            ]
            original = (sample_tree / "api" / "baofeng" / "dm32uv" / "api_docs.html").read_bytes()
            assert zf.read("api/baofeng/dm32uv/api_docs.html") == original

    def test_json_payload(self, sample_tree, tmp_path):
        out_dir = tmp_path / "out"
        path = export_reports(sample_tree, "baofeng", "dm32uv", "JSON", output_dir=out_dir)
        assert path == out_dir / "baofeng_dm32uv_reports.json"
        payload = json.loads(path.read_text(encoding="utf-8"))
        assert payload["vendor"] == "baofeng"
        assert payload["model"] == "dm32uv"
        assert payload["report_count"] == 3
        rel_paths = [r["path"] for r in payload["reports"]]
        # Newest first, same as the dashboard
        assert rel_paths[0] == "api/baofeng/dm32uv/api_docs.html"
        assert {r["type"] for r in payload["reports"]} == {"read", "write", "api"}

    def test_export_is_not_reindexed(self, sample_tree):
        export_reports(sample_tree, "baofeng", "dm32uv", "json")
        path = export_reports(sample_tree, "baofeng", "dm32uv", "json")
        payload = json.loads(path.read_text(encoding="utf-8"))
        assert payload["report_count"] == 3

    @pytest.mark.parametrize("fmt", ["pdf", "tar", ""])
    def test_unsupported_format(self, sample_tree, fmt):
        with pytest.raises(ValueError, match="Unsupported export format"):
            export_reports(sample_tree, "baofeng", "dm32uv", fmt)
        assert not (sample_tree / "exports").exists()

    def test_nothing_to_export(self, sample_tree):
        with pytest.raises(NoReportsFoundError):
            export_reports(sample_tree, "anytone", "at878", "zip")

    def test_write_failure(self, sample_tree, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("file, not a directory")
        with pytest.raises(ReportWriteError):
            export_reports(sample_tree, "baofeng", "dm32uv", "zip", output_dir=blocker / "out")

    def test_partial_zip_removed_on_failure(self, sample_tree, tmp_path, monkeypatch):
        def fail_write(self, *args, **kwargs):
            raise OSError(28, "No space left on device")

        monkeypatch.setattr(zipfile.ZipFile, "write", fail_write)
        out_dir = tmp_path / "out"
        with pytest.raises(ReportWriteError):
            export_reports(sample_tree, "baofeng", "dm32uv", "zip", output_dir=out_dir)
        assert not (out_dir / "baofeng_dm32uv_reports.zip").exists()
