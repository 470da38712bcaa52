"""Record validation package."""

from income_tracker.validation.validator import (
    DEFAULT_PAYMENT_STATUS,
    RecordValidator,
    ValidationOutcome,
    coerce_payment_status,
    parse_amount,
)

__all__ = [
    "DEFAULT_PAYMENT_STATUS",
    "RecordValidator",
    "ValidationOutcome",
    "coerce_payment_status",
    "parse_amount",
]
