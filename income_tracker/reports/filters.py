"""
Filter Engine

Pure predicate composition over entries. An entry passes when every field
present in the ReportFilter matches:
- start_date / end_date: inclusive, compared as strings (valid because
  dates are zero-padded YYYY-MM-DD)
- category, currency, payment_status: exact equality
"""

from typing import Callable, Iterable, Optional

from income_tracker.models.entry import ReportFilter, WorkEntry


Predicate = Callable[[WorkEntry], bool]


def build_predicates(report_filter: ReportFilter) -> list[Predicate]:
    """One predicate per present filter field."""
    predicates: list[Predicate] = []

    if report_filter.start_date:
        start = report_filter.start_date
        predicates.append(lambda entry: entry.date >= start)
    if report_filter.end_date:
        end = report_filter.end_date
        predicates.append(lambda entry: entry.date <= end)
    if report_filter.category:
        category = report_filter.category
        predicates.append(lambda entry: entry.category == category)
    if report_filter.currency:
        currency = report_filter.currency
        predicates.append(lambda entry: entry.currency == currency)
    if report_filter.payment_status:
        status = report_filter.payment_status
        predicates.append(lambda entry: entry.payment_status == status)

    return predicates


def matches(entry: WorkEntry, report_filter: Optional[ReportFilter] = None) -> bool:
    if report_filter is None:
        return True
    return all(predicate(entry) for predicate in build_predicates(report_filter))


def apply_filter(
    entries: Iterable[WorkEntry],
    report_filter: Optional[ReportFilter] = None,
) -> list[WorkEntry]:
    """Entries passing the filter, in their original order."""
    if report_filter is None:
        return list(entries)
    predicates = build_predicates(report_filter)
    return [entry for entry in entries if all(p(entry) for p in predicates)]
