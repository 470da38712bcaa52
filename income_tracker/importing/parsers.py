"""
Import File Parsers

Turn the text of an import file into CandidateRecords. Parsers never
validate values; they only decide which raw value belongs to which field.

CSV handling is naive: rows are split on every comma, and each
cell loses one leading and one trailing double quote. Quoted cells with
embedded commas are not supported.
"""

import json
from typing import Optional, Union

from pydantic import BaseModel, Field

from income_tracker.models.transfer import (
    CandidateField,
    CandidateRecord,
    FileFormat,
    ImportIssue,
    ImportIssueKind,
)


INVALID_JSON_MESSAGE = "Invalid JSON format"
CSV_TOO_SHORT_MESSAGE = "CSV file must have at least a header and one data row"
UNSUPPORTED_FORMAT_MESSAGE = "Unsupported file format. Please use JSON or CSV files."
UNDECODABLE_MESSAGE = "File is not valid UTF-8 text"

# Recognised CSV header cells (trimmed, lower-cased) -> candidate field.
CSV_COLUMNS: dict[str, CandidateField] = {
    "date": CandidateField.DATE,
    "category": CandidateField.CATEGORY,
    "description": CandidateField.DESCRIPTION,
    "amount": CandidateField.AMOUNT,
    "currency": CandidateField.CURRENCY,
    "payment status": CandidateField.PAYMENT_STATUS,
    "paymentstatus": CandidateField.PAYMENT_STATUS,
}


class RowParseError(ValueError):
    """A CSV data row could not be converted into a candidate."""
    pass


class ParseOutcome(BaseModel):
    """Candidates and parse-level issues for one file."""

    file_format: Optional[FileFormat] = None
    candidates: list[CandidateRecord] = Field(default_factory=list)
    issues: list[ImportIssue] = Field(default_factory=list)

    @property
    def is_fatal(self) -> bool:
        return any(issue.kind == ImportIssueKind.FATAL for issue in self.issues)

    @classmethod
    def fatal(cls, message: str, file_format: Optional[FileFormat] = None) -> "ParseOutcome":
        return cls(
            file_format=file_format,
            issues=[ImportIssue(kind=ImportIssueKind.FATAL, message=message)],
        )


def detect_format(filename: str) -> Optional[FileFormat]:
    """
    File format from the text after the last dot (case-insensitive), or None.

    A bare ".json" counts as JSON.
    """
    if "." not in filename:
        return None
    suffix = filename.rsplit(".", 1)[1].lower()
    try:
        return FileFormat(suffix)
    except ValueError:
        return None


def decode_content(content: Union[bytes, str]) -> str:
    """
    Decode raw file bytes as UTF-8, dropping a leading byte order mark.

    Raises:
        UnicodeDecodeError: If the bytes are not UTF-8
    """
    if isinstance(content, str):
        return content.lstrip("\ufeff")
    return content.decode("utf-8-sig")


# =============================================================================
# JSON
# =============================================================================

def parse_json(text: str) -> ParseOutcome:
    """
    Parse a JSON import.

    A top-level object is treated as a one-element array. Unknown keys are
    ignored; a non-object element becomes an empty candidate.
    """
    try:
        data = json.loads(text)
    except ValueError:
        return ParseOutcome.fatal(INVALID_JSON_MESSAGE, FileFormat.JSON)

    items = data if isinstance(data, list) else [data]

    candidates = []
    for position, item in enumerate(items, start=1):
        fields = {}
        if isinstance(item, dict):
            fields = {
                field: item[field.value]
                for field in CandidateField
                if field.value in item
            }
        candidates.append(CandidateRecord(
            position=position,
            source=FileFormat.JSON,
            fields=fields,
        ))

    return ParseOutcome(file_format=FileFormat.JSON, candidates=candidates)


# =============================================================================
# CSV
# =============================================================================

def _clean_cell(value: str) -> str:
    """Trim, then strip one leading and one trailing double quote."""
    value = value.strip()
    if value.startswith('"'):
        value = value[1:]
    if value.endswith('"'):
        value = value[:-1]
    return value


def _parse_header(line: str) -> list[Optional[CandidateField]]:
    return [CSV_COLUMNS.get(cell.strip().lower()) for cell in line.split(",")]


def _parse_row(
    line: str,
    columns: list[Optional[CandidateField]],
) -> dict[CandidateField, str]:
    """
    Map one data row onto the header columns.

    Raises:
        RowParseError: If the row has non-empty cells beyond the header
    """
    values = [_clean_cell(cell) for cell in line.split(",")]

    overflow = values[len(columns):]
    if any(overflow):
        raise RowParseError(
            f"expected at most {len(columns)} values, found {len(values)} "
            "(commas inside values are not supported)"
        )

    fields = {}
    for column, value in zip(columns, values):
        if column is None:
            continue
        if column == CandidateField.PAYMENT_STATUS:
            value = value.lower()
        fields[column] = value
    return fields


def parse_csv(text: str) -> ParseOutcome:
    """
    Parse a CSV import.

    The first non-blank line is the header. Each remaining non-blank line is
    one record; its position counts data rows only, and its line number is
    the physical line in the file. Rows that fail to convert are reported
    and skipped.
    """
    lines = [
        (number, line)
        for number, line in enumerate(text.split("\n"), start=1)
        if line.strip()
    ]
    if len(lines) < 2:
        return ParseOutcome.fatal(CSV_TOO_SHORT_MESSAGE, FileFormat.CSV)

    columns = _parse_header(lines[0][1])

    outcome = ParseOutcome(file_format=FileFormat.CSV)
    for position, (number, line) in enumerate(lines[1:], start=1):
        try:
            fields = _parse_row(line, columns)
        except ValueError as e:
            outcome.issues.append(ImportIssue(
                kind=ImportIssueKind.PARSE,
                message=f"error parsing row: {e}",
                position=position,
                line=number,
            ))
            continue

        outcome.candidates.append(CandidateRecord(
            position=position,
            line=number,
            source=FileFormat.CSV,
            fields=fields,
        ))

    return outcome


def parse_file(
    filename: str,
    content: Union[bytes, str],
    supported_formats: Optional[list[str]] = None,
) -> ParseOutcome:
    """
    Dispatch on the file extension and parse.

    Args:
        filename: Original file name (only the extension is used)
        content: Raw file bytes or already-decoded text
        supported_formats: Extensions accepted; defaults to all known formats

    Returns:
        ParseOutcome; a fatal outcome carries exactly one issue and no candidates
    """
    file_format = detect_format(filename)
    if file_format is None or (
        supported_formats is not None and file_format.value not in supported_formats
    ):
        return ParseOutcome.fatal(UNSUPPORTED_FORMAT_MESSAGE)

    try:
        text = decode_content(content)
    except UnicodeDecodeError:
        return ParseOutcome.fatal(UNDECODABLE_MESSAGE, file_format)

    if file_format == FileFormat.JSON:
        return parse_json(text)
    return parse_csv(text)
