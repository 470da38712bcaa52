"""Filtering, aggregation and report breakdowns."""

from income_tracker.reports.breakdowns import (
    category_breakdown,
    change_percent,
    compare_periods,
    daily_income_series,
    summarize_entries,
)
from income_tracker.reports.filters import apply_filter, build_predicates, matches
from income_tracker.reports.statistics import (
    category_totals,
    compute_statistics,
    reference_amount,
    top_category,
    total_income,
)

__all__ = [
    "apply_filter",
    "build_predicates",
    "category_breakdown",
    "category_totals",
    "change_percent",
    "compare_periods",
    "compute_statistics",
    "daily_income_series",
    "matches",
    "reference_amount",
    "summarize_entries",
    "top_category",
    "total_income",
]
