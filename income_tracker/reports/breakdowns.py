"""
Report Breakdowns

Period comparisons, per-category splits, the daily income series and the
filtered summary shown on the reports page. All amounts are in the reference
currency.
"""

from datetime import date, timedelta
from decimal import Decimal
from typing import Iterable, Optional

from income_tracker.currency import CurrencyNormalizer, get_normalizer
from income_tracker.models.entry import (
    Category,
    CategoryBreakdown,
    DailyIncomePoint,
    FilteredSummary,
    PaymentStatus,
    PeriodComparison,
    WorkEntry,
)
from income_tracker.reference import DEFAULT_CATEGORIES, category_color, category_label
from income_tracker.reports.statistics import reference_amount, total_income


def _previous_month(today: date) -> str:
    if today.month == 1:
        return f"{today.year - 1:04d}-12"
    return f"{today.year:04d}-{today.month - 1:02d}"


def change_percent(current: Decimal, previous: Decimal) -> Decimal:
    """Percent change from previous to current; 0 when previous is 0."""
    if previous <= 0:
        return Decimal("0")
    return (current - previous) / previous * 100


def _sum_where(
    entries: list[WorkEntry],
    prefix: str,
    normalizer: CurrencyNormalizer,
) -> Decimal:
    return sum(
        (reference_amount(e, normalizer) for e in entries if e.date.startswith(prefix)),
        Decimal("0"),
    )


def compare_periods(
    entries: Iterable[WorkEntry],
    today: Optional[date] = None,
    normalizer: Optional[CurrencyNormalizer] = None,
) -> tuple[PeriodComparison, PeriodComparison]:
    """
    This month vs last month, and this year vs last year.

    Returns:
        (month comparison, year comparison)
    """
    today = today or date.today()
    normalizer = normalizer or get_normalizer()
    entries = list(entries)

    month_current = _sum_where(entries, today.isoformat()[:7], normalizer)
    month_previous = _sum_where(entries, _previous_month(today), normalizer)
    year_current = _sum_where(entries, f"{today.year:04d}-", normalizer)
    year_previous = _sum_where(entries, f"{today.year - 1:04d}-", normalizer)

    return (
        PeriodComparison(
            label="month",
            current_total=month_current,
            previous_total=month_previous,
            change_percent=change_percent(month_current, month_previous),
        ),
        PeriodComparison(
            label="year",
            current_total=year_current,
            previous_total=year_previous,
            change_percent=change_percent(year_current, year_previous),
        ),
    )


def category_breakdown(
    entries: Iterable[WorkEntry],
    categories: Iterable[Category] = DEFAULT_CATEGORIES,
    normalizer: Optional[CurrencyNormalizer] = None,
) -> list[CategoryBreakdown]:
    """
    Totals per category, split by payment status.

    Every known category gets a row (possibly all zeros). Entries pointing
    at unknown category ids get extra rows after the known ones, labelled
    with the fallback name and color.
    """
    normalizer = normalizer or get_normalizer()

    rows: dict[str, CategoryBreakdown] = {
        category.id: CategoryBreakdown(
            category_id=category.id,
            name=category.name,
            color=category.color,
        )
        for category in categories
    }

    for entry in entries:
        row = rows.get(entry.category)
        if row is None:
            row = rows[entry.category] = CategoryBreakdown(
                category_id=entry.category,
                name=category_label(entry.category),
                color=category_color(entry.category),
            )

        amount = reference_amount(entry, normalizer)
        row.total_amount += amount
        row.total_entries += 1
        if entry.payment_status == PaymentStatus.PAID:
            row.paid_amount += amount
            row.paid_entries += 1
        else:
            row.unpaid_amount += amount
            row.unpaid_entries += 1

    return list(rows.values())


def daily_income_series(
    entries: Iterable[WorkEntry],
    today: Optional[date] = None,
    days: int = 30,
    normalizer: Optional[CurrencyNormalizer] = None,
) -> list[DailyIncomePoint]:
    """One point per calendar day, oldest first, ending today."""
    if days < 1:
        raise ValueError("days must be at least 1")
    today = today or date.today()
    normalizer = normalizer or get_normalizer()

    start = today - timedelta(days=days - 1)
    points = {}
    for offset in range(days):
        day = start + timedelta(days=offset)
        key = day.isoformat()
        points[key] = DailyIncomePoint(date=key, label=day.strftime("%b %d"))

    for entry in entries:
        point = points.get(entry.date)
        if point is not None:
            point.income += reference_amount(entry, normalizer)

    return list(points.values())


def summarize_entries(
    entries: Iterable[WorkEntry],
    normalizer: Optional[CurrencyNormalizer] = None,
) -> FilteredSummary:
    """Entry count, reference total and average per entry."""
    entries = list(entries)
    total = total_income(entries, normalizer)
    average = total / len(entries) if entries else Decimal("0")
    return FilteredSummary(
        entry_count=len(entries),
        total_amount=total,
        average_amount=average,
    )
