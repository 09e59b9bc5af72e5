"""
Unit tests for the filesystem helpers.
"""

from datetime import datetime

import pytest

from pulitzer.reporting.utils import (
    ReportWriteError,
    ensure_directory_exists,
    format_file_size,
    format_time,
    get_file_extension,
    relative_link,
    write_html,
)


class TestFormatFileSize:
    """Tests for format_file_size()."""

    @pytest.mark.parametrize("size,expected", [
        (0, "0 B"),
        (1023, "1023 B"),
        (1024, "1.0 KB"),
        (1536, "1.5 KB"),
        (1024 * 1024, "1.0 MB"),
        (5 * 1024 ** 3, "5.0 GB"),
    ])
    def test_sizes(self, size, expected):
        assert format_file_size(size) == expected


class TestFormatTime:

    def test_layout(self):
        assert format_time(datetime(2006, 1, 2, 15, 4, 5)) == "Jan 02, 2006 15:04:05"


class TestPathHelpers:

    def test_ensure_directory_exists_creates_nested(self, tmp_path):
        target = tmp_path / "a" / "b" / "c"
        assert ensure_directory_exists(target) == target
        assert target.is_dir()
        # Idempotent
        ensure_directory_exists(target)

    def test_get_file_extension_lowercases(self):
        assert get_file_extension("reports/X.HTML") == ".html"
        assert get_file_extension("noext") == ""

    def test_relative_link_uses_forward_slashes(self, tmp_path):
        root = tmp_path / "reports"
        link = relative_link(root / "index.html", root / "api" / "baofeng" / "dm32uv")
        assert link == "../../../index.html"

    def test_relative_link_same_directory(self, tmp_path):
        assert relative_link(tmp_path / "index.html", tmp_path) == "index.html"


class TestWriteHtml:

    def test_creates_parents_and_writes_utf8(self, tmp_path):
        path = write_html(tmp_path / "deep" / "page.html", "<p>\U0001F4E5</p>")
        assert path.read_text(encoding="utf-8") == "<p>\U0001F4E5</p>"

    def test_failure_names_path(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        target = blocker / "page.html"
        with pytest.raises(ReportWriteError) as excinfo:
            write_html(target, "<p></p>")
        assert excinfo.value.path == target
        assert str(target) in str(excinfo.value)
