"""
Aggregation Engine

Dashboard statistics over the full (unfiltered) entry set. Every amount is
converted to the reference currency before it is summed.

DESIGN DECISION: The averages divide by today's calendar position, not by
the span of the data:
    avg_daily_income   = month_income / day of month
    avg_monthly_income = year_income / month number (1-12)
They describe "so far this month / this year" and are skewed for datasets
that only contain older entries.
"""

from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from income_tracker.currency import CurrencyNormalizer, get_normalizer
from income_tracker.models.entry import PaymentStatus, Statistics, WorkEntry


def reference_amount(
    entry: WorkEntry,
    normalizer: Optional[CurrencyNormalizer] = None,
) -> Decimal:
    """The entry's amount in the reference currency."""
    normalizer = normalizer or get_normalizer()
    return normalizer.to_reference(entry.amount, entry.currency)


def total_income(
    entries: Iterable[WorkEntry],
    normalizer: Optional[CurrencyNormalizer] = None,
) -> Decimal:
    normalizer = normalizer or get_normalizer()
    return sum(
        (reference_amount(entry, normalizer) for entry in entries),
        Decimal("0"),
    )


def category_totals(
    entries: Iterable[WorkEntry],
    normalizer: Optional[CurrencyNormalizer] = None,
) -> dict[str, Decimal]:
    """Reference-currency total per category id, in first-seen order."""
    normalizer = normalizer or get_normalizer()
    totals: dict[str, Decimal] = {}
    for entry in entries:
        totals[entry.category] = (
            totals.get(entry.category, Decimal("0"))
            + reference_amount(entry, normalizer)
        )
    return totals


def top_category(totals: dict[str, Decimal]) -> str:
    """Category with the largest total; ties go to the first seen, empty -> ''."""
    if not totals:
        return ""
    # max() keeps the first of equal maxima
    return max(totals, key=totals.__getitem__)


def compute_statistics(
    entries: Iterable[WorkEntry],
    today: Optional[date] = None,
    normalizer: Optional[CurrencyNormalizer] = None,
) -> Statistics:
    """
    Compute dashboard statistics.

    Args:
        entries: The full entry snapshot
        today: Local calendar date to bucket against (defaults to date.today())
        normalizer: Currency normalizer (defaults to the static table)
    """
    today = today or date.today()
    normalizer = normalizer or get_normalizer()

    today_key = today.isoformat()
    month_key = today_key[:7]
    year_key = today_key[:4]

    entries = list(entries)
    stats = Statistics()

    for entry in entries:
        amount = reference_amount(entry, normalizer)

        stats.total_entries += 1
        stats.total_income += amount

        if entry.date == today_key:
            stats.today_income += amount
        if entry.date[:7] == month_key:
            stats.month_income += amount
        if entry.date[:4] == year_key:
            stats.year_income += amount

        if entry.payment_status == PaymentStatus.PAID:
            stats.paid_income += amount
            stats.paid_entries += 1
        else:
            stats.unpaid_income += amount
            stats.unpaid_entries += 1

    stats.top_category = top_category(category_totals(entries, normalizer))
    stats.avg_daily_income = stats.month_income / today.day
    stats.avg_monthly_income = stats.year_income / today.month

    return stats
