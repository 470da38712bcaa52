"""Static reference data: currencies and categories."""

from income_tracker.reference.categories import (
    DEFAULT_CATEGORIES,
    FALLBACK_CATEGORY_COLOR,
    category_color,
    category_label,
    get_category_by_id,
)
from income_tracker.reference.currencies import (
    CURRENCIES,
    REFERENCE_CURRENCY_CODE,
    get_currency_by_code,
)

__all__ = [
    "CURRENCIES",
    "DEFAULT_CATEGORIES",
    "FALLBACK_CATEGORY_COLOR",
    "REFERENCE_CURRENCY_CODE",
    "category_color",
    "category_label",
    "get_category_by_id",
    "get_currency_by_code",
]
