"""
Searchable API documentation for observed protocol commands.

Called by the protocol analyzer with the commands it has catalogued; writes
one self-contained HTML page under the reports tree and then refreshes the
dashboard so the new page is linked.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Iterable, Optional, Union

from pulitzer.reporting.models import (
    REPORT_TYPE_CODEPLUG,
    REPORT_TYPE_CPS,
    REPORT_TYPE_FIRMWARE,
    REPORT_TYPE_READ_ANALYSIS,
    REPORT_TYPE_READ_API,
    REPORT_TYPE_WRITE_ANALYSIS,
    REPORT_TYPE_WRITE_API,
    CommandAPIRecord,
    Mode,
    StyleConfig,
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

DEFAULT_REPORTS_ROOT = Path("reports")

_READ_STYLE = StyleConfig(
    primary_color="#2980b9",
    secondary_color="#3498db",
    title="Read Protocol API Documentation",
    icon="\U0001F4E5",
    header_bg_color="#eaf2f8",
    border_color="#3498db",
    mode_label="Read Mode",
    command_label="Read Command",
)

_WRITE_STYLE = StyleConfig(
    primary_color="#c0392b",
    secondary_color="#e74c3c",
    title="Write Protocol API Documentation",
    icon="\U0001F4E4",
    header_bg_color="#f9ebea",
    border_color="#e74c3c",
    mode_label="Write Mode",
    command_label="Write Command",
)

# report type -> subdirectory (relative to the reports root) before vendor/model
_REPORT_SUBDIRS = {
    REPORT_TYPE_READ_API: ("api",),
    REPORT_TYPE_WRITE_API: ("api",),
    "api": ("api",),
    REPORT_TYPE_READ_ANALYSIS: ("protocol", "read"),
    "read": ("protocol", "read"),
    REPORT_TYPE_WRITE_ANALYSIS: ("protocol", "write"),
    "write": ("protocol", "write"),
    REPORT_TYPE_CODEPLUG: ("codeplug",),
    REPORT_TYPE_FIRMWARE: ("firmware",),
    REPORT_TYPE_CPS: ("cps",),
}

_FALLBACK_SUBDIR = Path("protocol", "other")


def get_style_config(mode: Union[Mode, str]) -> StyleConfig:
    """Colour scheme and labels for read or write documentation."""
    if Mode.parse(mode) is Mode.READ:
        return _READ_STYLE
    return _WRITE_STYLE


def get_report_path(
    vendor: str,
    model: str,
    report_type: str,
    filename: str,
    reports_root: PathLike = DEFAULT_REPORTS_ROOT,
) -> Path:
    """
    Location for a new report file, creating its directory.

    Parameters
    ----------
    vendor, model : str
        Radio identifiers used as directory names.
    report_type : str
        One of the REPORT_TYPE_* identifiers (or a bare classifier type
        such as 'read' or 'api'). Unrecognised types go to protocol/other,
        without vendor/model subdirectories.
    filename : str
        Name of the report file.
    reports_root : path
        Root of the reports tree.

    Returns
    -------
    Path
        reports_root/<subdir>/<vendor>/<model>/<filename>; the parent
        directory exists when this returns.

    Raises
    ------
    ReportWriteError
        If the directory cannot be created.
    """
    subdir = _REPORT_SUBDIRS.get(report_type)
    if subdir is None:
        logger.debug("Unrecognised report type %r, using %s", report_type, _FALLBACK_SUBDIR)
        directory = Path(reports_root) / _FALLBACK_SUBDIR
    else:
        directory = Path(reports_root).joinpath(*subdir, vendor, model)

    try:
        ensure_directory_exists(directory)
    except OSError as exc:
        raise ReportWriteError(f"Could not create report directory ({exc.strerror or exc})", directory) from exc
    return directory / filename


def render_api_doc_html(
    api_docs: Iterable[CommandAPIRecord],
    mode: Union[Mode, str],
    vendor: str,
    model: str,
    *,
    index_href: str = "index.html",
    generated_at: Optional[datetime] = None,
) -> str:
    """Render the API documentation page without touching the filesystem."""
    if generated_at is None:
        generated_at = datetime.now()
    return render_template(
        "api_doc.html",
        commands=list(api_docs),
        style=get_style_config(mode),
        vendor=vendor,
        model=model,
        index_href=index_href,
        generated_at=generated_at.strftime("%Y-%m-%d %H:%M:%S"),
    )


def generate_api_doc_html(
    api_docs: Iterable[CommandAPIRecord],
    filename: str,
    mode: Union[Mode, str],
    vendor: str,
    model: str,
    *,
    reports_root: PathLike = DEFAULT_REPORTS_ROOT,
    update_index: bool = True,
    index_name: str = "index.html",
) -> Path:
    """
    Write API documentation for a vendor/model and refresh the dashboard.

    Parameters
    ----------
    api_docs : iterable of CommandAPIRecord
        Commands in display order.
    filename : str
        Output file name; the directory follows the report-type convention
        (read and write docs both live under api/<vendor>/<model>/).
    mode : Mode or str
        'read' or 'write'; selects colours and labels.
    vendor, model : str
        Radio identifiers.
    reports_root : path
        Root of the reports tree.
    update_index : bool
        Regenerate the dashboard afterwards. Failures there are logged and
        do not affect the documentation that was already written.

    Returns
    -------
    Path
        Path of the written documentation file.

    Raises
    ------
    ReportWriteError
        If the documentation file cannot be written.
    """
    mode = Mode.parse(mode)
    reports_root = Path(reports_root)
    report_type = REPORT_TYPE_READ_API if mode is Mode.READ else REPORT_TYPE_WRITE_API

    output_path = get_report_path(vendor, model, report_type, filename, reports_root)
    html = render_api_doc_html(
        api_docs,
        mode,
        vendor,
        model,
        index_href=relative_link(reports_root / index_name, output_path.parent),
    )
    write_html(output_path, html)
    logger.info("%s API documentation saved to: %s", mode.value.capitalize(), output_path)

    if update_index:
        try:
            from pulitzer.reporting.index_generator import update_index_page

            update_index_page(reports_root, index_name=index_name)
        except Exception as exc:
            logger.warning("Failed to regenerate index after writing %s: %s", output_path, exc)

    return output_path
