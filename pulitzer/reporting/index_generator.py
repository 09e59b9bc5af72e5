"""
Generate the self-contained index.html dashboard for the reports tree.

The dashboard is re-derived from the filesystem on every run: walk the
reports root, classify each file by its position in the directory layout,
group by vendor and model, and render one section per report type.
Concurrent runs race on the output file (last writer wins).
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from pulitzer.reporting.discover import (
    DEFAULT_EXTENSION,
    DEFAULT_INDEX_NAME,
    classify_report,
    discover_reports,
    report_type_to_title,
)
from pulitzer.reporting.models import (
    REPORT_TYPES,
    ClassifiedReport,
    IndexAggregate,
    newest_first,
)
from pulitzer.reporting.templates import render_template
from pulitzer.reporting.utils import (
    PathLike,
    ReportWriteError,
    ensure_directory_exists,
    relative_link,
    write_html,
)

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "REDBUG Reports"

_TYPE_DESCRIPTIONS = {
    "read": "Captured read-protocol traffic between programming software and radio.",
    "write": "Captured write-protocol traffic between programming software and radio.",
    "api": "Documented protocol commands with payloads, responses and timing.",
    "firmware": "Firmware image analysis.",
    "codeplug": "Codeplug layout and field analysis.",
    "cps": "Customer programming software analysis.",
}


def build_index_aggregate(
    reports: Iterable[ClassifiedReport],
    *,
    skipped_count: int = 0,
    now: Optional[datetime] = None,
) -> IndexAggregate:
    """
    Group classified reports by vendor and model.

    Buckets are filled in arrival order and then sorted newest first, ties
    broken by relative path. Vendor and model keys come out sorted.

    Args:
        reports: Classified reports, in any order.
        skipped_count: Number of discovered files the classifier dropped.
        now: Generation timestamp (defaults to the current time).

    Returns:
        The populated IndexAggregate.
    """
    grouped: Dict[str, Dict[str, List[ClassifiedReport]]] = {}
    total = 0
    for report in reports:
        grouped.setdefault(report.vendor, {}).setdefault(report.model, []).append(report)
        total += 1

    vendor_reports = {
        vendor: {
            model: newest_first(grouped[vendor][model])
            for model in sorted(grouped[vendor])
        }
        for vendor in sorted(grouped)
    }

    return IndexAggregate(
        vendor_reports=vendor_reports,
        total_count=total,
        vendor_count=len(vendor_reports),
        model_count=sum(len(models) for models in vendor_reports.values()),
        generated_at=now if now is not None else datetime.now(),
        skipped_count=skipped_count,
    )


def collect_index_aggregate(
    reports_root: PathLike,
    *,
    extension: str = DEFAULT_EXTENSION,
    index_name: str = DEFAULT_INDEX_NAME,
    now: Optional[datetime] = None,
) -> IndexAggregate:
    """
    Walk, classify and aggregate every report under reports_root.

    Raises
    ------
    ReportDiscoveryError
        If the tree cannot be walked; no partial aggregate is returned.
    """
    reports_root = Path(reports_root)
    classified = []
    skipped = 0
    for record in discover_reports(reports_root, extension=extension, index_name=index_name):
        report = classify_report(record, reports_root)
        if report is None:
            skipped += 1
        else:
            classified.append(report)

    if skipped:
        logger.info("%d report file(s) outside the expected layout were skipped", skipped)
    return build_index_aggregate(classified, skipped_count=skipped, now=now)


def _sections(aggregate: IndexAggregate) -> List[Dict[str, Any]]:
    """Non-empty report-type sections in display order."""
    by_type = aggregate.reports_by_type()
    sections = []
    for rtype in REPORT_TYPES:
        reports = by_type.get(rtype)
        if not reports:
            continue
        sections.append({
            "type": rtype,
            "label": report_type_to_title(rtype, rtype),
            "description": _TYPE_DESCRIPTIONS[rtype],
            "reports": reports,
        })
    return sections


def render_index_html(
    aggregate: IndexAggregate,
    *,
    title: str = DEFAULT_TITLE,
    reports_root_name: str = "reports",
    link_prefix: str = "",
) -> str:
    """
    Render the dashboard for an aggregate.

    Report links are the reports' paths relative to the root, prefixed with
    *link_prefix* when the dashboard does not live in the root itself.
    """
    return render_template(
        "index.html",
        title=title,
        aggregate=aggregate,
        sections=_sections(aggregate),
        generated_at=aggregate.generated_at.strftime("%B %d, %Y %H:%M:%S"),
        reports_root_name=reports_root_name,
        link_prefix=link_prefix,
    )


def update_index_page(
    reports_root: PathLike,
    *,
    title: str = DEFAULT_TITLE,
    extension: str = DEFAULT_EXTENSION,
    index_name: str = DEFAULT_INDEX_NAME,
    output_path: Optional[PathLike] = None,
) -> Path:
    """
    Regenerate the dashboard for the reports tree.

    Args:
        reports_root: Root of the reports tree (created if missing).
        title: Dashboard heading.
        extension: Report file extension to index.
        index_name: File name of the dashboard inside reports_root.
        output_path: Override output path (defaults to reports_root/index_name).

    Returns:
        Path to the generated HTML file.

    Raises:
        ReportDiscoveryError: The tree could not be walked.
        ReportWriteError: The dashboard could not be written.
    """
    reports_root = Path(reports_root)
    try:
        ensure_directory_exists(reports_root)
    except OSError as exc:
        raise ReportWriteError(f"Could not create reports root ({exc.strerror or exc})", reports_root) from exc
    output_path = Path(output_path) if output_path is not None else reports_root / index_name
    root_link = relative_link(reports_root, output_path.parent)
    link_prefix = "" if root_link == "." else root_link + "/"

    aggregate = collect_index_aggregate(reports_root, extension=extension, index_name=index_name)
    html = render_index_html(
        aggregate,
        title=title,
        reports_root_name=reports_root.name,
        link_prefix=link_prefix,
    )

    output_path = write_html(output_path, html)
    logger.info(
        "Generated index dashboard: %s (%d reports, %d vendors, %d models)",
        output_path,
        aggregate.total_count,
        aggregate.vendor_count,
        aggregate.model_count,
    )
    return output_path
