"""
Export the reports of one vendor/model out of the reports tree.

Formats:
    zip   archive of the report files, paths kept relative to the root
    json  the vendor/model bucket as metadata (no report contents)
"""

import json
import logging
import zipfile
from pathlib import Path
from typing import Optional

from pulitzer.reporting.discover import DEFAULT_EXTENSION, DEFAULT_INDEX_NAME
from pulitzer.reporting.index_generator import collect_index_aggregate
from pulitzer.reporting.utils import (
    PathLike,
    ReportingError,
    ReportWriteError,
    ensure_directory_exists,
)

logger = logging.getLogger(__name__)

EXPORT_FORMATS = ("zip", "json")


class NoReportsFoundError(ReportingError):
    """Raised when a vendor/model has nothing to export."""
    pass


def export_reports(
    reports_root: PathLike,
    vendor: str,
    model: str,
    fmt: str = "zip",
    *,
    output_dir: Optional[PathLike] = None,
    extension: str = DEFAULT_EXTENSION,
    index_name: str = DEFAULT_INDEX_NAME,
) -> Path:
    """
    Export every indexed report of vendor/model.

    Args:
        reports_root: Root of the reports tree.
        vendor: Vendor directory name.
        model: Model directory name.
        fmt: 'zip' or 'json'.
        output_dir: Destination directory (defaults to reports_root/exports).

    Returns:
        Path of the written export file.

    Raises:
        ValueError: Unsupported format.
        NoReportsFoundError: No indexed reports for vendor/model.
        ReportDiscoveryError: The reports tree could not be walked.
        ReportWriteError: The export file could not be written.
    """
    fmt = fmt.lower()
    if fmt not in EXPORT_FORMATS:
        raise ValueError(f"Unsupported export format {fmt!r}; choose one of {EXPORT_FORMATS}")

    reports_root = Path(reports_root)
    aggregate = collect_index_aggregate(reports_root, extension=extension, index_name=index_name)
    reports = aggregate.bucket(vendor, model)
    if not reports:
        raise NoReportsFoundError(f"No reports found for {vendor} {model}", reports_root)

    output_dir = Path(output_dir) if output_dir is not None else reports_root / "exports"
    output_path = output_dir / f"{vendor}_{model}_reports.{fmt}"

    try:
        ensure_directory_exists(output_dir)
        if fmt == "zip":
            with zipfile.ZipFile(output_path, "w", compression=zipfile.ZIP_DEFLATED) as zf:
                for report in reports:
                    zf.write(report.path, arcname=report.rel_path)
        else:
            payload = {
                "vendor": vendor,
                "model": model,
                "generated_at": aggregate.generated_at.isoformat(timespec="seconds"),
                "report_count": len(reports),
                "reports": [r.to_dict() for r in reports],
            }
            with open(output_path, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2)
    except OSError as exc:
        if output_path.is_file():
            output_path.unlink()
        raise ReportWriteError(f"Could not write export ({exc.strerror or exc})", output_path) from exc

    logger.info("Exported %d %s %s report(s) to %s", len(reports), vendor, model, output_path)
    return output_path
