"""
Static category table and display fallbacks.

Entries may reference a category id that is not in the table. Such entries
are still counted everywhere; they are only displayed with the raw id as
their label and a neutral grey.
"""

from typing import Optional

from income_tracker.models.entry import Category


FALLBACK_CATEGORY_COLOR = "#6B7280"

DEFAULT_CATEGORIES: tuple[Category, ...] = (
    Category(id="asif", name="ASIF", color="#3B82F6", description="ASIF related work"),
    Category(id="atik", name="ATIK", color="#10B981", description="ATIK related work"),
    Category(id="freelance", name="Freelance", color="#F59E0B", description="Freelance projects"),
    Category(id="consulting", name="Consulting", color="#8B5CF6", description="Consulting work"),
    Category(id="others", name="Others", color="#6B7280", description="Other income sources"),
)


def get_category_by_id(category_id: str) -> Optional[Category]:
    for category in DEFAULT_CATEGORIES:
        if category.id == category_id:
            return category
    return None


def category_label(category_id: str) -> str:
    """Display name, falling back to the raw id."""
    category = get_category_by_id(category_id)
    return category.name if category else category_id


def category_color(category_id: str) -> str:
    """Display color, falling back to neutral grey."""
    category = get_category_by_id(category_id)
    return category.color if category else FALLBACK_CATEGORY_COLOR
