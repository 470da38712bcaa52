"""
Export Pipeline

Serializes a (usually filtered) set of entries to CSV or JSON.

CSV layout is fixed:
    Date,Category,Description,Amount,Currency,Payment Status,BDT Amount
The last column is the amount converted to the reference currency, rounded
half-up to 2 decimals. Only Description is quoted (inner quotes doubled).

JSON is an array of entry objects with camelCase keys in a stable order,
indented by two spaces.
"""

import json
from datetime import datetime
from decimal import Decimal
from typing import Callable, Iterable, Optional, Union

from income_tracker.config import ExportSettings, get_settings
from income_tracker.currency import CurrencyNormalizer, get_normalizer, round_money
from income_tracker.models.entry import WorkEntry
from income_tracker.models.transfer import ExportPayload, FileFormat


CSV_BASE_HEADER = ("Date", "Category", "Description", "Amount", "Currency", "Payment Status")

JSON_FIELD_ORDER = (
    "id",
    "date",
    "category",
    "description",
    "amount",
    "currency",
    "paymentStatus",
    "createdAt",
    "updatedAt",
)

CONTENT_TYPES = {
    FileFormat.CSV: "text/csv;charset=utf-8",
    FileFormat.JSON: "application/json;charset=utf-8",
}


class UnsupportedExportFormatError(ValueError):
    """Requested export format is neither CSV nor JSON."""
    pass


def format_plain_number(amount: Decimal) -> str:
    """Shortest plain notation: 500, 12.5, 0.001 (never exponents)."""
    return format(amount.normalize(), "f")


def _json_number(amount: Decimal) -> Union[int, float]:
    if amount == amount.to_integral_value():
        return int(amount)
    return float(amount)


def _quote(value: str) -> str:
    return '"' + value.replace('"', '""') + '"'


def entries_to_json(entries: Iterable[WorkEntry]) -> str:
    """JSON array with stable camelCase field order."""
    rows = []
    for entry in entries:
        row = {
            "id": entry.id,
            "date": entry.date,
            "category": entry.category,
            "description": entry.description,
            "amount": _json_number(entry.amount),
            "currency": entry.currency,
            "paymentStatus": entry.payment_status.value,
            "createdAt": entry.created_at.isoformat(),
            "updatedAt": entry.updated_at.isoformat(),
        }
        rows.append({key: row[key] for key in JSON_FIELD_ORDER})
    return json.dumps(rows, indent=2, ensure_ascii=False)


def entries_to_csv(
    entries: Iterable[WorkEntry],
    normalizer: Optional[CurrencyNormalizer] = None,
) -> str:
    """CSV report with the fixed 7-column header."""
    normalizer = normalizer or get_normalizer()
    header = CSV_BASE_HEADER + (f"{normalizer.reference_code} Amount",)

    lines = [",".join(header)]
    for entry in entries:
        reference_amount = round_money(normalizer.to_reference(entry.amount, entry.currency))
        lines.append(",".join([
            entry.date,
            entry.category,
            _quote(entry.description),
            format_plain_number(entry.amount),
            entry.currency,
            entry.payment_status.value,
            f"{reference_amount:.2f}",
        ]))
    return "\n".join(lines)


class ExportPipeline:
    """
    Builds export payloads.

    The pipeline does not touch the file system; the payload is handed to
    whatever saves or downloads it.
    """

    def __init__(
        self,
        normalizer: Optional[CurrencyNormalizer] = None,
        settings: Optional[ExportSettings] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._normalizer = normalizer or get_normalizer()
        self._settings = settings or get_settings().exporting
        self._clock = clock or datetime.now

    def build_filename(self, file_format: FileFormat) -> str:
        timestamp = self._clock().strftime(self._settings.timestamp_format)
        return f"{self._settings.filename_prefix}-{timestamp}.{file_format.value}"

    def export(
        self,
        entries: Iterable[WorkEntry],
        file_format: Union[FileFormat, str] = FileFormat.CSV,
    ) -> ExportPayload:
        """
        Serialize entries.

        Raises:
            UnsupportedExportFormatError: If the format is not csv or json
        """
        try:
            file_format = FileFormat(file_format)
        except ValueError:
            raise UnsupportedExportFormatError(
                f"Unsupported export format: {file_format}. Use csv or json."
            )

        entries = list(entries)
        if file_format == FileFormat.JSON:
            text = entries_to_json(entries)
        else:
            text = entries_to_csv(entries, self._normalizer)

        return ExportPayload(
            filename=self.build_filename(file_format),
            content_type=CONTENT_TYPES[file_format],
            file_format=file_format,
            content=text.encode("utf-8"),
            entry_count=len(entries),
        )
