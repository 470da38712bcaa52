"""Tests for the record validator."""

from decimal import Decimal

from income_tracker.models.entry import EntryDraft, PaymentStatus
from income_tracker.models.transfer import (
    CandidateField,
    CandidateRecord,
    FileFormat,
    RecordRejection,
    RejectionReason,
)
from income_tracker.validation import RecordValidator, parse_amount


def make_candidate(position: int = 1, **overrides) -> CandidateRecord:
    fields = {
        CandidateField.DATE: "2024-01-15",
        CandidateField.CATEGORY: "freelance",
        CandidateField.DESCRIPTION: "Logo design",
        CandidateField.AMOUNT: "500",
        CandidateField.CURRENCY: "USD",
    }
    for key, value in overrides.items():
        field = CandidateField[key.upper()]
        if value is None:
            fields.pop(field, None)
        else:
            fields[field] = value
    return CandidateRecord(position=position, source=FileFormat.JSON, fields=fields)


class TestRecordValidator:
    """Tests for validator boundaries."""

    def setup_method(self):
        self.validator = RecordValidator()

    def test_valid_record(self):
        """Test that a complete record becomes a draft."""
        draft = self.validator.validate(make_candidate())
        assert isinstance(draft, EntryDraft)
        assert draft.amount == Decimal("500")
        assert draft.payment_status == PaymentStatus.UNPAID

    def test_zero_amount_accepted(self):
        """Test amount "0" is a valid amount."""
        draft = self.validator.validate(make_candidate(amount="0"))
        assert isinstance(draft, EntryDraft)
        assert draft.amount == Decimal("0")

    def test_numeric_zero_amount_accepted(self):
        """Test amount 0 from JSON counts as present."""
        draft = self.validator.validate(make_candidate(amount=0))
        assert isinstance(draft, EntryDraft)

    def test_negative_amount_rejected(self):
        """Test amount "-1" is rejected."""
        result = self.validator.validate(make_candidate(amount="-1"))
        assert isinstance(result, RecordRejection)
        assert result.reason == RejectionReason.INVALID_AMOUNT

    def test_non_numeric_amounts_rejected(self):
        """Test non-numeric, empty and non-finite amounts."""
        for value in ("abc", "", "NaN", "Infinity", True):
            result = self.validator.validate(make_candidate(amount=value))
            assert isinstance(result, RecordRejection), value
            assert result.reason == RejectionReason.INVALID_AMOUNT

    def test_amounts_beyond_double_range_rejected(self):
        """Test exponents that overflow a double are invalid amounts."""
        for value in ("1e1000000", "1e400", Decimal("1e400")):
            result = self.validator.validate(make_candidate(amount=value))
            assert isinstance(result, RecordRejection), value
            assert result.reason == RejectionReason.INVALID_AMOUNT

    def test_short_date_rejected(self):
        """Test date "2024-1-5" is rejected."""
        result = self.validator.validate(make_candidate(date="2024-1-5"))
        assert isinstance(result, RecordRejection)
        assert result.reason == RejectionReason.INVALID_DATE_FORMAT

    def test_non_string_date_rejected(self):
        """Test a numeric date is a format error."""
        result = self.validator.validate(make_candidate(date=20240115))
        assert result.reason == RejectionReason.INVALID_DATE_FORMAT

    def test_calendar_validity_not_checked(self):
        """Test that only the date shape is checked."""
        draft = self.validator.validate(make_candidate(date="2024-02-31"))
        assert isinstance(draft, EntryDraft)
        assert draft.date == "2024-02-31"

    def test_missing_description_rejected(self):
        """Test a missing description."""
        result = self.validator.validate(make_candidate(description=None))
        assert isinstance(result, RecordRejection)
        assert result.reason == RejectionReason.MISSING_REQUIRED_FIELDS

    def test_blank_required_field_rejected(self):
        """Test a whitespace-only field counts as missing."""
        result = self.validator.validate(make_candidate(currency="   "))
        assert result.reason == RejectionReason.MISSING_REQUIRED_FIELDS

    def test_missing_fields_checked_first(self):
        """Test that the first failing stage wins."""
        result = self.validator.validate(make_candidate(date="bad", description=None))
        assert result.reason == RejectionReason.MISSING_REQUIRED_FIELDS

    def test_unknown_payment_status_coerced(self):
        """Test paymentStatus "maybe" silently becomes unpaid."""
        draft = self.validator.validate(make_candidate(payment_status="maybe"))
        assert isinstance(draft, EntryDraft)
        assert draft.payment_status == PaymentStatus.UNPAID

    def test_paid_status_kept(self):
        """Test paymentStatus "paid" is kept."""
        draft = self.validator.validate(make_candidate(payment_status="paid"))
        assert draft.payment_status == PaymentStatus.PAID

    def test_rejection_keeps_position_and_line(self):
        """Test rejections carry the candidate's numbering."""
        candidate = CandidateRecord(
            position=4,
            line=7,
            source=FileFormat.CSV,
            fields={CandidateField.DATE: "2024-01-15"},
        )
        result = self.validator.validate(candidate)
        assert result.position == 4
        assert result.line == 7

    def test_validate_batch_keeps_order(self):
        """Test batch validation splits accepted and rejected records."""
        candidates = [
            make_candidate(1),
            make_candidate(2, amount="-5"),
            make_candidate(3, description="Second"),
        ]
        accepted, rejected = self.validator.validate_batch(candidates)
        assert [c.position for c, _ in accepted] == [1, 3]
        assert [r.position for r in rejected] == [2]


class TestParseAmount:
    """Tests for amount parsing."""

    def test_accepts_numbers_and_strings(self):
        """Test the accepted input types."""
        assert parse_amount(12.5) == Decimal("12.5")
        assert parse_amount(" 7 ") == Decimal("7")
        assert parse_amount(Decimal("3")) == Decimal("3")

    def test_rejects_other_types(self):
        """Test that lists and None are not amounts."""
        assert parse_amount([1]) is None
        assert parse_amount(None) is None

    def test_double_range(self):
        """Test the largest doubles pass and anything beyond is refused."""
        assert parse_amount("1e308") == Decimal("1e308")
        assert parse_amount("1e-400") == Decimal("1e-400")
        assert parse_amount("1e309") is None
