"""Export module for generating reports and data exports."""

from .json_exporter import JSONExporter
from .csv_exporter import CSVExporter
from .report import (
    available_formats,
    build_summary,
    export_results,
    register_format,
    write_report,
)

__all__ = [
    "JSONExporter",
    "CSVExporter",
    "available_formats",
    "build_summary",
    "export_results",
    "register_format",
    "write_report",
]
