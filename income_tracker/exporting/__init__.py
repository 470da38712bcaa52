"""Export pipeline package."""

from income_tracker.exporting.exporter import (
    CSV_BASE_HEADER,
    ExportPipeline,
    UnsupportedExportFormatError,
    entries_to_csv,
    entries_to_json,
    format_plain_number,
)

__all__ = [
    "CSV_BASE_HEADER",
    "ExportPipeline",
    "UnsupportedExportFormatError",
    "entries_to_csv",
    "entries_to_json",
    "format_plain_number",
]
