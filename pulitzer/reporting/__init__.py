"""
Report indexing and API documentation.

Quick start::

    from pathlib import Path

    from pulitzer.reporting import CommandAPIRecord, generate_api_doc_html

    generate_api_doc_html(
        [CommandAPIRecord(command='READ_CONFIG', hex_value='5200', ascii_value='R.')],
        'dm32uv_read_api_docs.html',
        'read',
        'baofeng',
        'dm32uv',
        reports_root=Path('reports'),
    )

The dashboard at ``reports/index.html`` is refreshed automatically; call
``update_index_page()`` to rebuild it on its own.

Analyzer output saved as JSON (CamelCase keys such as ``HexValue``) loads
with ``CommandAPIRecord.from_dict()``.
"""

from pulitzer.reporting.api_docs import (
    generate_api_doc_html,
    get_report_path,
    get_style_config,
    render_api_doc_html,
)
from pulitzer.reporting.discover import (
    ReportDiscoveryError,
    classify_report,
    discover_reports,
    report_type_to_title,
)
from pulitzer.reporting.index_generator import (
    build_index_aggregate,
    collect_index_aggregate,
    render_index_html,
    update_index_page,
)
from pulitzer.reporting.models import (
    ClassifiedReport,
    CommandAPIRecord,
    IndexAggregate,
    Mode,
    ReportRecord,
    StyleConfig,
)
from pulitzer.reporting.utils import (
    ReportingError,
    ReportWriteError,
    format_file_size,
    format_time,
    get_file_extension,
)

__all__ = [
    "ClassifiedReport",
    "CommandAPIRecord",
    "IndexAggregate",
    "Mode",
    "ReportRecord",
    "StyleConfig",
    "ReportingError",
    "ReportDiscoveryError",
    "ReportWriteError",
    "discover_reports",
    "classify_report",
    "report_type_to_title",
    "build_index_aggregate",
    "collect_index_aggregate",
    "render_index_html",
    "update_index_page",
    "get_report_path",
    "get_style_config",
    "render_api_doc_html",
    "generate_api_doc_html",
    "format_file_size",
    "format_time",
    "get_file_extension",
]
