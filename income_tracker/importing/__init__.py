"""Import pipeline package."""

from income_tracker.importing.parsers import (
    CSV_COLUMNS,
    ParseOutcome,
    RowParseError,
    detect_format,
    parse_csv,
    parse_file,
    parse_json,
)
from income_tracker.importing.pipeline import ImportPipeline

__all__ = [
    "CSV_COLUMNS",
    "ImportPipeline",
    "ParseOutcome",
    "RowParseError",
    "detect_format",
    "parse_csv",
    "parse_file",
    "parse_json",
]
