"""
Record Validation

Turns a loosely-typed CandidateRecord (parsed from a CSV or JSON import)
into a trusted EntryDraft, or refuses it with a RecordRejection.

Checks run in a fixed order and the first failure wins:

STAGE 1 - REQUIRED FIELDS:
- date, category, description, amount, currency must be present
- amount only has to be present (0 is a valid amount)

STAGE 2 - FORMAT:
- date must look like YYYY-MM-DD (shape only, no calendar check)
- amount must be a finite number >= 0 (within double range)

STAGE 3 - DEFAULTS:
- payment status outside {paid, unpaid} becomes unpaid
- missing payment status becomes unpaid

Rejections never raise. A batch is always validated to the end.
"""

import math
import re
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, Optional, Union

from income_tracker.models.entry import EntryDraft, PaymentStatus
from income_tracker.models.transfer import (
    CandidateField,
    CandidateRecord,
    RecordRejection,
    RejectionReason,
)


DATE_FORMAT = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")

REQUIRED_FIELDS = (
    CandidateField.DATE,
    CandidateField.CATEGORY,
    CandidateField.DESCRIPTION,
    CandidateField.AMOUNT,
    CandidateField.CURRENCY,
)

# Policy for payment statuses that are missing or not recognised.
DEFAULT_PAYMENT_STATUS = PaymentStatus.UNPAID

ValidationOutcome = Union[EntryDraft, RecordRejection]


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def parse_amount(value: Any) -> Optional[Decimal]:
    """
    Parse an amount from a number or numeric string.

    Returns None if the value is not a finite, non-negative number.
    Finite means representable as a double, so "1e400" is refused.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, (int, float)):
        amount = Decimal(str(value))
    elif isinstance(value, str):
        try:
            amount = Decimal(value.strip())
        except InvalidOperation:
            return None
    else:
        return None

    if not amount.is_finite() or not math.isfinite(float(amount)) or amount < 0:
        return None
    return amount


def coerce_payment_status(value: Any) -> PaymentStatus:
    """Exact 'paid' / 'unpaid'; anything else falls back to the default."""
    if value == PaymentStatus.PAID.value:
        return PaymentStatus.PAID
    if value == PaymentStatus.UNPAID.value:
        return PaymentStatus.UNPAID
    return DEFAULT_PAYMENT_STATUS


class RecordValidator:
    """
    Validates candidate records one at a time.

    This is the only conversion point from CandidateRecord to EntryDraft.
    """

    def _reject(
        self,
        candidate: CandidateRecord,
        reason: RejectionReason,
    ) -> RecordRejection:
        return RecordRejection(
            position=candidate.position,
            line=candidate.line,
            reason=reason,
        )

    def validate(self, candidate: CandidateRecord) -> ValidationOutcome:
        """
        Validate a single candidate.

        Returns:
            EntryDraft on success, RecordRejection otherwise
        """
        # Stage 1: required fields
        missing = [
            field for field in REQUIRED_FIELDS
            if (
                candidate.get(field) is None
                if field == CandidateField.AMOUNT
                else _is_blank(candidate.get(field))
            )
        ]
        if missing:
            return self._reject(candidate, RejectionReason.MISSING_REQUIRED_FIELDS)

        # Stage 2: formats
        raw_date = candidate.get(CandidateField.DATE)
        if not isinstance(raw_date, str) or not DATE_FORMAT.fullmatch(raw_date.strip()):
            return self._reject(candidate, RejectionReason.INVALID_DATE_FORMAT)

        amount = parse_amount(candidate.get(CandidateField.AMOUNT))
        if amount is None:
            return self._reject(candidate, RejectionReason.INVALID_AMOUNT)

        # Stage 3: lenient defaults
        payment_status = coerce_payment_status(
            candidate.get(CandidateField.PAYMENT_STATUS)
        )

        return EntryDraft(
            date=raw_date.strip(),
            category=str(candidate.get(CandidateField.CATEGORY)),
            description=str(candidate.get(CandidateField.DESCRIPTION)),
            amount=amount,
            currency=str(candidate.get(CandidateField.CURRENCY)),
            payment_status=payment_status,
        )

    def validate_batch(
        self,
        candidates: Iterable[CandidateRecord],
    ) -> tuple[list[tuple[CandidateRecord, EntryDraft]], list[RecordRejection]]:
        """
        Validate every candidate, keeping input order.

        Returns:
            (accepted (candidate, draft) pairs, rejections)
        """
        accepted = []
        rejected = []
        for candidate in candidates:
            outcome = self.validate(candidate)
            if isinstance(outcome, RecordRejection):
                rejected.append(outcome)
            else:
                accepted.append((candidate, outcome))
        return accepted, rejected
