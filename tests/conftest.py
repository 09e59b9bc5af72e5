"""Shared fixtures: throwaway reports trees."""

import os
from pathlib import Path
from typing import Optional

import pytest


def _write_report(root: Path, rel_path: str, content: str = "<html></html>",
                  mtime: Optional[float] = None) -> Path:
    path = root.joinpath(*rel_path.split("/"))
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    if mtime is not None:
        os.utime(path, (mtime, mtime))
    return path


@pytest.fixture
def reports_root(tmp_path):
    root = tmp_path / "reports"
    root.mkdir()
    return root


@pytest.fixture
def make_report(reports_root):
    """Factory: make_report('api/v/m/x.html', mtime=...) -> Path."""
    def factory(rel_path, content="<html></html>", mtime=None):
        return _write_report(reports_root, rel_path, content, mtime)
    return factory


@pytest.fixture
def sample_tree(reports_root, make_report):
    """Read, write and API reports for baofeng/dm32uv plus one misplaced file."""
    make_report("protocol/read/baofeng/dm32uv/read_analysis.html", mtime=1_700_000_000)
    make_report("protocol/write/baofeng/dm32uv/write_analysis.html", mtime=1_700_000_100)
    make_report("api/baofeng/dm32uv/api_docs.html", mtime=1_700_000_200)
    make_report("unknown_layout/x.html", mtime=1_700_000_300)
    return reports_root
