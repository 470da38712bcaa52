"""Tests for filtering, aggregation and report breakdowns."""

import pytest
from datetime import date, datetime, timezone
from decimal import Decimal
from uuid import uuid4

from income_tracker.currency import get_normalizer
from income_tracker.models.entry import PaymentStatus, ReportFilter, WorkEntry
from income_tracker.reference import DEFAULT_CATEGORIES, FALLBACK_CATEGORY_COLOR
from income_tracker.reports import (
    apply_filter,
    category_breakdown,
    category_totals,
    compare_periods,
    compute_statistics,
    daily_income_series,
    matches,
    summarize_entries,
    top_category,
    total_income,
)


CREATED = datetime(2024, 1, 1, tzinfo=timezone.utc)


def make_entry(entry_date, amount="100", currency="BDT", category="freelance",
               status=PaymentStatus.PAID) -> WorkEntry:
    return WorkEntry(
        id=str(uuid4()),
        date=entry_date,
        category=category,
        description="Work",
        amount=Decimal(amount),
        currency=currency,
        payment_status=status,
        created_at=CREATED,
        updated_at=CREATED,
    )


def sample_entries() -> list[WorkEntry]:
    return [
        make_entry("2024-03-10", "100", "USD", "freelance", PaymentStatus.PAID),
        make_entry("2024-03-01", "1000", "BDT", "consulting", PaymentStatus.UNPAID),
        make_entry("2024-01-05", "10", "EUR", "consulting", PaymentStatus.PAID),
        make_entry("2023-12-31", "50", "BDT", "others", PaymentStatus.UNPAID),
    ]


class TestFilters:
    """Tests for the filter engine."""

    def test_start_date_is_inclusive_lower_bound(self):
        """Test {startDate: 2024-01-15} keeps only the later entry."""
        entries = [make_entry("2024-01-01"), make_entry("2024-02-01")]
        result = apply_filter(entries, ReportFilter(start_date="2024-01-15"))
        assert [e.date for e in result] == ["2024-02-01"]

    def test_date_bounds_are_inclusive(self):
        """Test both bounds include the boundary dates."""
        entries = [make_entry("2024-01-01"), make_entry("2024-01-31"), make_entry("2024-02-01")]
        report_filter = ReportFilter(start_date="2024-01-01", end_date="2024-01-31")
        assert [e.date for e in apply_filter(entries, report_filter)] == [
            "2024-01-01",
            "2024-01-31",
        ]

    def test_exact_match_fields(self):
        """Test category, currency and payment status equality."""
        entries = sample_entries()
        report_filter = ReportFilter(category="consulting", payment_status="paid")
        result = apply_filter(entries, report_filter)
        assert len(result) == 1
        assert result[0].currency == "EUR"
        assert len(apply_filter(entries, ReportFilter(currency="BDT"))) == 2

    def test_empty_filter_keeps_everything(self):
        """Test absent fields are no constraint."""
        entries = sample_entries()
        assert apply_filter(entries, ReportFilter(category="")) == entries
        assert apply_filter(entries) == entries
        assert matches(entries[0])

    def test_filter_keeps_order(self):
        """Test results keep their input order."""
        entries = sample_entries()
        result = apply_filter(entries, ReportFilter(end_date="2024-03-05"))
        assert result == [entries[1], entries[2], entries[3]]


class TestStatistics:
    """Tests for the aggregation engine."""

    def test_statistics_for_fixed_day(self):
        """Test every statistic against a fixed 'today'."""
        stats = compute_statistics(sample_entries(), today=date(2024, 3, 10))

        assert stats.total_entries == 4
        assert stats.total_income == Decimal("13250")
        assert stats.today_income == Decimal("11000")
        assert stats.month_income == Decimal("12000")
        assert stats.year_income == Decimal("13200")
        assert stats.avg_daily_income == Decimal("1200")
        assert stats.avg_monthly_income == Decimal("4400")
        assert stats.paid_income == Decimal("12200")
        assert stats.unpaid_income == Decimal("1050")
        assert stats.paid_entries == 2
        assert stats.unpaid_entries == 2
        assert stats.top_category == "freelance"

    def test_empty_set(self):
        """Test an empty entry set gives zeros and no top category."""
        stats = compute_statistics([], today=date(2024, 3, 10))
        assert stats.total_income == Decimal("0")
        assert stats.avg_daily_income == Decimal("0")
        assert stats.top_category == ""
        assert stats.total_entries == 0

    def test_top_category_tie_goes_to_first_seen(self):
        """Test ties between categories."""
        entries = [
            make_entry("2024-01-01", "100", category="atik"),
            make_entry("2024-01-02", "100", category="asif"),
        ]
        assert top_category(category_totals(entries)) == "atik"
        assert top_category({}) == ""

    def test_unknown_currency_counted_at_face_value(self):
        """Test aggregation never fails on unknown codes."""
        stats = compute_statistics([make_entry("2024-03-10", "7", "XYZ")], today=date(2024, 3, 10))
        assert stats.total_income == Decimal("7")

    def test_total_matches_independent_normalized_sum(self):
        """Test aggregation and filtering share the same normalization."""
        entries = sample_entries()
        normalizer = get_normalizer()
        expected = sum(
            (normalizer.to_reference(e.amount, e.currency) for e in apply_filter(entries)),
            Decimal("0"),
        )
        stats = compute_statistics(entries, today=date(2024, 3, 10))
        assert stats.total_income == expected
        assert total_income(entries) == expected


class TestPeriodComparison:
    """Tests for month and year comparisons."""

    def test_month_and_year_change(self):
        """Test percentage change against the previous period."""
        entries = sample_entries() + [make_entry("2024-02-15", "6000")]
        month, year = compare_periods(entries, today=date(2024, 3, 10))

        assert month.current_total == Decimal("12000")
        assert month.previous_total == Decimal("6000")
        assert month.change_percent == Decimal("100")
        assert year.current_total == Decimal("19200")
        assert year.previous_total == Decimal("50")

    def test_no_previous_period_is_zero_change(self):
        """Test that an empty previous period does not divide by zero."""
        month, _ = compare_periods([make_entry("2024-03-01")], today=date(2024, 3, 10))
        assert month.change_percent == Decimal("0")

    def test_january_compares_with_december(self):
        """Test the month rollover."""
        entries = [make_entry("2023-12-20", "200"), make_entry("2024-01-02", "100")]
        month, year = compare_periods(entries, today=date(2024, 1, 5))
        assert month.previous_total == Decimal("200")
        assert month.change_percent == Decimal("-50")
        assert year.previous_total == Decimal("200")


class TestCategoryBreakdown:
    """Tests for the per-category split."""

    def test_every_known_category_has_a_row(self):
        """Test zero rows for unused categories."""
        rows = category_breakdown([])
        assert [row.category_id for row in rows] == [c.id for c in DEFAULT_CATEGORIES]
        assert all(row.total_amount == 0 for row in rows)

    def test_paid_unpaid_split(self):
        """Test amounts and counts per payment status."""
        rows = {row.category_id: row for row in category_breakdown(sample_entries())}
        consulting = rows["consulting"]
        assert consulting.total_amount == Decimal("2200")
        assert consulting.paid_amount == Decimal("1200")
        assert consulting.unpaid_amount == Decimal("1000")
        assert consulting.paid_entries == 1
        assert consulting.unpaid_entries == 1
        assert consulting.total_entries == 2

    def test_unknown_category_gets_fallback_row(self):
        """Test dangling category ids are still counted."""
        rows = category_breakdown([make_entry("2024-01-01", category="mystery")])
        last = rows[-1]
        assert last.category_id == "mystery"
        assert last.name == "mystery"
        assert last.color == FALLBACK_CATEGORY_COLOR
        assert last.total_amount == Decimal("100")

    def test_breakdown_sums_to_total(self):
        """Test no entry is lost or double counted."""
        entries = sample_entries() + [make_entry("2024-01-01", category="mystery")]
        rows = category_breakdown(entries)
        assert sum(row.total_amount for row in rows) == total_income(entries)


class TestDailySeries:
    """Tests for the daily income series."""

    def test_series_ends_today(self):
        """Test one point per day, oldest first, with short labels."""
        entries = [
            make_entry("2024-01-03", "10"),
            make_entry("2024-01-03", "5"),
            make_entry("2024-01-01", "1", "USD"),
            make_entry("2023-12-31", "999"),
        ]
        series = daily_income_series(entries, today=date(2024, 1, 3), days=3)
        assert [p.date for p in series] == ["2024-01-01", "2024-01-02", "2024-01-03"]
        assert [p.label for p in series] == ["Jan 01", "Jan 02", "Jan 03"]
        assert [p.income for p in series] == [Decimal("110"), Decimal("0"), Decimal("15")]

    def test_default_length(self):
        """Test the default 30-day window."""
        assert len(daily_income_series([], today=date(2024, 3, 10))) == 30

    def test_rejects_empty_window(self):
        """Test days must be positive."""
        with pytest.raises(ValueError):
            daily_income_series([], today=date(2024, 3, 10), days=0)


class TestFilteredSummary:
    """Tests for the count, total and average of a result set."""

    def test_average_per_entry(self):
        """Test totals are in BDT and the average divides by the entry count."""
        summary = summarize_entries([
            make_entry("2024-03-10", "100", "USD"),
            make_entry("2024-03-01", "1000", "BDT"),
        ])
        assert summary.entry_count == 2
        assert summary.total_amount == Decimal("12000")
        assert summary.average_amount == Decimal("6000")

    def test_empty_set(self):
        """Test no entries gives zeros instead of dividing by zero."""
        summary = summarize_entries([])
        assert summary.entry_count == 0
        assert summary.total_amount == Decimal("0")
        assert summary.average_amount == Decimal("0")
