"""
Filesystem helpers shared by the index and API-doc generators.

format_file_size, format_time and get_file_extension are also part of the
public API for analyzers that name and describe their own report files.
"""

import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Union

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

_SIZE_UNIT = 1024
_SIZE_PREFIXES = "KMGTPE"


class ReportingError(Exception):
    """Base class for failures while generating reports."""

    def __init__(self, message: str, path: PathLike):
        super().__init__(f"{message}: {path}")
        self.path = Path(path)


class ReportWriteError(ReportingError):
    """Raised when a generated HTML file cannot be written."""
    pass


def format_file_size(size: int) -> str:
    """
    Return a human-readable file size.

    >>> format_file_size(512)
    '512 B'
    >>> format_file_size(1536)
    '1.5 KB'
    """
    if size < _SIZE_UNIT:
        return f"{size} B"
    div, exp = _SIZE_UNIT, 0
    n = size // _SIZE_UNIT
    while n >= _SIZE_UNIT:
        div *= _SIZE_UNIT
        exp += 1
        n //= _SIZE_UNIT
    return f"{size / div:.1f} {_SIZE_PREFIXES[exp]}B"


def format_time(moment: datetime) -> str:
    """Format a timestamp as e.g. 'Jan 02, 2006 15:04:05'."""
    return moment.strftime("%b %d, %Y %H:%M:%S")


def ensure_directory_exists(path: PathLike) -> Path:
    path = Path(path)
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_file_extension(path: PathLike) -> str:
    """Lower-cased extension including the leading dot ('' if none)."""
    return Path(path).suffix.lower()


def relative_link(target: PathLike, start_dir: PathLike) -> str:
    """Relative href from a directory to a file, always with '/' separators."""
    rel = os.path.relpath(Path(target), Path(start_dir))
    return Path(rel).as_posix()


def write_html(path: PathLike, html: str) -> Path:
    """
    Write an HTML document, creating parent directories.

    Raises
    ------
    ReportWriteError
        If the directory cannot be created or the file cannot be written.
    """
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(html, encoding="utf-8")
    except OSError as exc:
        raise ReportWriteError(f"Could not write report ({exc.strerror or exc})", path) from exc
    return path
