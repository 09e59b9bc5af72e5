"""
Data model for report indexing and API documentation.

Everything here is request-scoped: structures are built from the filesystem
(or handed over by the protocol analyzer) for a single generation run and
discarded afterwards.

CommandAPIRecord.from_dict is the public entry point for analyzer output
loaded from JSON.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterator, List, Mapping, Optional

# Report types recognised by the classifier, in dashboard display order
REPORT_TYPES = ("read", "write", "api", "firmware", "codeplug", "cps")

# Report-type identifiers used when choosing where a new report is written
REPORT_TYPE_READ_ANALYSIS = "read_analysis"
REPORT_TYPE_WRITE_ANALYSIS = "write_analysis"
REPORT_TYPE_READ_API = "read_api"
REPORT_TYPE_WRITE_API = "write_api"
REPORT_TYPE_CODEPLUG = "codeplug"
REPORT_TYPE_FIRMWARE = "firmware"
REPORT_TYPE_CPS = "cps"


class Mode(str, Enum):
    """Read/write axis selecting colour scheme and labels."""

    READ = "read"
    WRITE = "write"

    @classmethod
    def parse(cls, value: Any) -> "Mode":
        """Accept a Mode or a case-insensitive 'read'/'write' string."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"mode must be 'read' or 'write', got {value!r}")


@dataclass(frozen=True)
class ReportRecord:
    """A report file as found on disk (modified_at is timezone-aware)."""
    path: Path
    size: int
    modified_at: datetime


@dataclass(frozen=True)
class ClassifiedReport:
    """A ReportRecord placed into the vendor/model/type hierarchy."""
    path: Path
    rel_path: str
    size: int
    modified_at: datetime
    title: str
    type: str
    vendor: str
    model: str

    @classmethod
    def from_record(
        cls,
        record: ReportRecord,
        *,
        rel_path: str,
        title: str,
        report_type: str,
        vendor: str,
        model: str,
    ) -> "ClassifiedReport":
        return cls(
            path=record.path,
            rel_path=rel_path,
            size=record.size,
            modified_at=record.modified_at,
            title=title,
            type=report_type,
            vendor=vendor,
            model=model,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-friendly dictionary."""
        return {
            'path': self.rel_path,
            'title': self.title,
            'type': self.type,
            'vendor': self.vendor,
            'model': self.model,
            'size': self.size,
            'modified_at': self.modified_at.isoformat(timespec="seconds"),
        }


def newest_first(reports: List[ClassifiedReport]) -> List[ClassifiedReport]:
    """Order reports by modification time descending, ties by relative path."""
    ordered = sorted(reports, key=lambda r: r.rel_path)
    # list.sort is stable with reverse=True, so the path order survives ties
    ordered.sort(key=lambda r: r.modified_at, reverse=True)
    return ordered


@dataclass
class IndexAggregate:
    """
    Everything the dashboard needs, grouped vendor -> model -> reports.

    Vendor and model keys are kept in ascending order and every bucket is
    ordered newest first.
    """
    vendor_reports: Dict[str, Dict[str, List[ClassifiedReport]]] = field(default_factory=dict)
    total_count: int = 0
    vendor_count: int = 0
    model_count: int = 0
    generated_at: datetime = field(default_factory=datetime.now)
    skipped_count: int = 0

    def iter_reports(self) -> Iterator[ClassifiedReport]:
        for models in self.vendor_reports.values():
            for reports in models.values():
                yield from reports

    def reports_by_type(self) -> Dict[str, List[ClassifiedReport]]:
        """Flatten the buckets into one newest-first list per report type."""
        by_type: Dict[str, List[ClassifiedReport]] = {}
        for report in self.iter_reports():
            by_type.setdefault(report.type, []).append(report)
        return {rtype: newest_first(reports) for rtype, reports in by_type.items()}

    def bucket(self, vendor: str, model: str) -> List[ClassifiedReport]:
        return list(self.vendor_reports.get(vendor, {}).get(model, []))


@dataclass(frozen=True)
class CommandAPIRecord:
    """One distinct protocol command observed by the analyzer."""
    command: str
    hex_value: str = ""
    ascii_value: str = ""
    description: str = ""
    response_type: str = ""
    response_hex: str = ""
    response_ascii: str = ""
    frequency_count: int = 0
    timing_average: str = ""
    data_category: str = ""
    success_rate: str = ""

    # Analyzer JSON keys -> field names
    _ALIASES = {
        'Command': 'command',
        'HexValue': 'hex_value',
        'ASCIIValue': 'ascii_value',
        'Description': 'description',
        'ResponseType': 'response_type',
        'ResponseHex': 'response_hex',
        'ResponseASCII': 'response_ascii',
        'FrequencyCount': 'frequency_count',
        'TimingAverage': 'timing_average',
        'DataCategory': 'data_category',
        'SuccessRate': 'success_rate',
    }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CommandAPIRecord":
        """
        Build a record from analyzer output.

        Accepts both snake_case field names and the analyzer's CamelCase keys;
        unknown keys are ignored.
        """
        fields_: Dict[str, Any] = {}
        for key, value in data.items():
            name = cls._ALIASES.get(key, key)
            if name in cls.__dataclass_fields__:
                fields_[name] = value
        if 'command' not in fields_:
            raise ValueError("command record is missing 'command'")
        if 'frequency_count' in fields_:
            fields_['frequency_count'] = int(fields_['frequency_count'] or 0)
        return cls(**fields_)


@dataclass(frozen=True)
class StyleConfig:
    """Colour scheme and labels for one Mode."""
    primary_color: str
    secondary_color: str
    title: str
    icon: str
    header_bg_color: str
    border_color: str
    mode_label: str
    command_label: str
    response_label: str = "Radio Response"
