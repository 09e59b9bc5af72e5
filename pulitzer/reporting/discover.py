"""
Discovery of report files under the reports root.

The walker collects raw filesystem facts; the classifier maps each file's
position in the directory layout onto (type, vendor, model):

    reports/protocol/{read|write}/<vendor>/<model>/*.html
    reports/{api|firmware|codeplug|cps}/<vendor>/<model>/*.html

Files outside that layout are skipped without error.
"""

import logging
import os
import stat
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator, Optional

from pulitzer.reporting.models import ClassifiedReport, ReportRecord
from pulitzer.reporting.utils import PathLike, ReportingError

logger = logging.getLogger(__name__)

DEFAULT_EXTENSION = ".html"
DEFAULT_INDEX_NAME = "index.html"

PROTOCOL_DIR = "protocol"
PROTOCOL_TYPES = ("read", "write")
TOP_LEVEL_TYPES = ("api", "firmware", "codeplug", "cps")

_TYPE_TITLES = {
    "read": "Read Protocol Analysis",
    "write": "Write Protocol Analysis",
    "api": "API Documentation",
    "firmware": "Firmware Analysis",
    "codeplug": "Codeplug Analysis",
    "cps": "CPS Analysis",
}


class ReportDiscoveryError(ReportingError):
    """Raised when the reports tree cannot be walked."""
    pass


def _raise_walk_error(exc: OSError) -> None:
    raise ReportDiscoveryError(
        f"Error walking reports directory ({exc.strerror or exc})",
        exc.filename or "",
    ) from exc


def discover_reports(
    reports_root: PathLike,
    *,
    extension: str = DEFAULT_EXTENSION,
    index_name: str = DEFAULT_INDEX_NAME,
) -> Iterator[ReportRecord]:
    """
    Yield a ReportRecord for every report file under reports_root.

    A report file is a regular file whose name ends with *extension*
    (case-insensitive) and is not named like the index page. Directory
    symlinks are not followed. Records come out in traversal order.

    Raises
    ------
    ReportDiscoveryError
        On the first unreadable directory or file (including broken
        symlinks); discovery does not continue past it.
    """
    root = Path(reports_root)
    if not root.is_dir():
        raise ReportDiscoveryError("Reports root is not a directory", root)

    suffix = extension.lower()
    for dirpath, _dirnames, filenames in os.walk(root, onerror=_raise_walk_error):
        for name in filenames:
            if name == index_name or not name.lower().endswith(suffix):
                continue
            path = Path(dirpath) / name
            try:
                st = path.stat()
            except OSError as exc:
                raise ReportDiscoveryError(
                    f"Cannot stat report file ({exc.strerror or exc})", path
                ) from exc
            if not stat.S_ISREG(st.st_mode):
                continue
            yield ReportRecord(
                path=path,
                size=st.st_size,
                modified_at=datetime.fromtimestamp(st.st_mtime, tz=timezone.utc).astimezone(),
            )


def report_type_to_title(report_type: str, filename: str) -> str:
    """Human-readable title for a report type, falling back to the filename."""
    if report_type in _TYPE_TITLES:
        return _TYPE_TITLES[report_type]
    return Path(filename).stem.replace("_", " ")


def classify_report(record: ReportRecord, reports_root: PathLike) -> Optional[ClassifiedReport]:
    """
    Place a discovered file into the type/vendor/model hierarchy.

    Returns None for files outside the expected layout.
    """
    try:
        rel = record.path.relative_to(Path(reports_root))
    except ValueError:
        logger.debug("Skipping file outside reports root: %s", record.path)
        return None

    parts = rel.parts
    if parts and parts[0] == PROTOCOL_DIR:
        # protocol/<read|write>/<vendor>/<model>/<file>
        if len(parts) < 5 or parts[1] not in PROTOCOL_TYPES:
            logger.debug("Skipping unclassified protocol report: %s", rel)
            return None
        report_type, vendor, model = parts[1], parts[2], parts[3]
    elif parts and parts[0] in TOP_LEVEL_TYPES:
        # <type>/<vendor>/<model>/<file>
        if len(parts) < 4:
            logger.debug("Skipping report with too few path segments: %s", rel)
            return None
        report_type, vendor, model = parts[0], parts[1], parts[2]
    else:
        logger.debug("Skipping report with unknown layout: %s", rel)
        return None

    return ClassifiedReport.from_record(
        record,
        rel_path=rel.as_posix(),
        title=report_type_to_title(report_type, record.path.name),
        report_type=report_type,
        vendor=vendor,
        model=model,
    )
