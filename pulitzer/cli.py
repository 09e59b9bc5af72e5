#!/usr/bin/env python3
"""
Report generation command line.

Usage:
    # Regenerate reports/index.html from the reports tree
    pulitzer generate-index

    # Check for and list the reports of one radio
    pulitzer view baofeng dm32uv
    pulitzer view baofeng dm32uv --open

    # Export one radio's reports
    pulitzer export baofeng dm32uv --format=zip
    pulitzer export baofeng dm32uv --format=json --output /tmp/exports

    # Use a different reports tree or config file
    pulitzer --reports-root /data/reports generate-index
    pulitzer --config pulitzer.yaml generate-index
"""

import argparse
import logging
import sys
import webbrowser
from pathlib import Path
from typing import Any, Dict, List, Optional

from pulitzer.config import ConfigurationError, get_config_value, load_config
from pulitzer.reporting.export import EXPORT_FORMATS, NoReportsFoundError, export_reports
from pulitzer.reporting.index_generator import collect_index_aggregate, update_index_page
from pulitzer.reporting.utils import ReportingError, format_file_size, format_time

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pulitzer",
        description="Report generation system for REDBUG protocol analyses",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "examples:\n"
            "  pulitzer generate-index\n"
            "  pulitzer view baofeng dm32uv\n"
            "  pulitzer export baofeng dm32uv --format=json\n"
        ),
    )
    parser.add_argument(
        "--reports-root",
        type=Path,
        default=None,
        help="Root of the reports tree (default: reports.root from config)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="YAML configuration file merged over the packaged defaults",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", metavar="<command>")
    subparsers.required = True

    subparsers.add_parser(
        "generate-index",
        help="Generate or update the main index page",
        description="Generate or update the main index page",
    )

    view = subparsers.add_parser(
        "view",
        help="View reports for a specific radio",
        description="View reports for a specific radio",
    )
    view.add_argument("vendor")
    view.add_argument("model")
    view.add_argument(
        "--open",
        action="store_true",
        dest="open_browser",
        help="Open the index page in the default browser",
    )

    export = subparsers.add_parser(
        "export",
        help="Export reports to different formats",
        description="Export reports to different formats",
    )
    export.add_argument("vendor")
    export.add_argument("model")
    export.add_argument(
        "--format",
        dest="fmt",
        default=None,
        help=f"Export format: {', '.join(EXPORT_FORMATS)} (default: export.default_format from config)",
    )
    export.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Directory for the export file (default: <reports-root>/exports)",
    )

    return parser


def _setup_logging(level: str) -> None:
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)


def _resolve_root(args: argparse.Namespace, config: Dict[str, Any]) -> Path:
    root = args.reports_root or Path(get_config_value(config, "reports.root"))
    return root.expanduser().resolve()


def cmd_generate_index(reports_root: Path, config: Dict[str, Any]) -> int:
    path = update_index_page(
        reports_root,
        title=get_config_value(config, "index.title"),
        extension=get_config_value(config, "reports.extension"),
        index_name=get_config_value(config, "reports.index_name"),
    )
    print(f"Index page updated successfully: {path}")
    return 0


def cmd_view(reports_root: Path, config: Dict[str, Any], vendor: str, model: str,
             open_browser: bool = False) -> int:
    read_dir = reports_root / "protocol" / "read" / vendor / model
    if not read_dir.is_dir():
        print(f"No reports found for {vendor} {model}")
        return 1

    extension = get_config_value(config, "reports.extension")
    index_name = get_config_value(config, "reports.index_name")
    aggregate = collect_index_aggregate(reports_root, extension=extension, index_name=index_name)
    reports = aggregate.bucket(vendor, model)

    print(f"Reports for {vendor} {model}:")
    if not reports:
        print("  (directory exists but contains no indexed reports)")
    for r in reports:
        print(f"  {r.title:<32} {format_file_size(r.size):>10}  {format_time(r.modified_at)}  {r.rel_path}")

    if open_browser:
        index_path = update_index_page(
            reports_root,
            title=get_config_value(config, "index.title"),
            extension=extension,
            index_name=index_name,
        )
        print(f"Opening {index_path}...")
        webbrowser.open(index_path.resolve().as_uri())
    return 0


def cmd_export(reports_root: Path, config: Dict[str, Any], vendor: str, model: str,
               fmt: Optional[str] = None, output: Optional[Path] = None) -> int:
    fmt = fmt or get_config_value(config, "export.default_format")
    if output is None:
        output = Path(get_config_value(config, "export.output_dir", "exports")).expanduser()
        if not output.is_absolute():
            output = reports_root / output

    print(f"Exporting {vendor} {model} reports to {fmt} format...")
    try:
        path = export_reports(
            reports_root,
            vendor,
            model,
            fmt,
            output_dir=output,
            extension=get_config_value(config, "reports.extension"),
            index_name=get_config_value(config, "reports.index_name"),
        )
    except NoReportsFoundError:
        print(f"No reports found for {vendor} {model}")
        return 1
    except ValueError as exc:
        logger.error("%s", exc)
        return 1

    print(f"Export written to: {path}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
    except ConfigurationError as exc:
        _setup_logging("INFO")
        logger.error("Configuration error: %s", exc)
        return 2

    _setup_logging("DEBUG" if args.verbose else get_config_value(config, "logging.level", "INFO"))
    reports_root = _resolve_root(args, config)
    logger.debug("Reports root: %s", reports_root)

    try:
        if args.command == "generate-index":
            return cmd_generate_index(reports_root, config)
        if args.command == "view":
            return cmd_view(reports_root, config, args.vendor, args.model, args.open_browser)
        if args.command == "export":
            return cmd_export(reports_root, config, args.vendor, args.model, args.fmt, args.output)
    except ReportingError as exc:
        logger.error("%s", exc)
        return 1

    parser.error(f"Unknown command: {args.command}")
    return 2


if __name__ == "__main__":
    sys.exit(main())
