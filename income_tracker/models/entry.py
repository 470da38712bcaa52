"""
Core Data Models for Income Tracker

These models define the schemas for all entry data flowing through the system.
They are designed to:
1. Enforce type safety at runtime
2. Speak camelCase on the wire while staying snake_case in Python
3. Be serializable for storage, logging and export

DESIGN DECISION: Dates are kept as zero-padded "YYYY-MM-DD" strings, not
datetime.date. Filtering and period bucketing compare them as strings, and
the importer only checks the shape of a date, not its calendar validity.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)
from pydantic.alias_generators import to_camel


DATE_PATTERN = r"^[0-9]{4}-[0-9]{2}-[0-9]{2}$"


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class PaymentStatus(str, Enum):
    """Whether the income for an entry has been received."""
    PAID = "paid"
    UNPAID = "unpaid"


# =============================================================================
# REFERENCE DATA
# =============================================================================

class Category(BaseModel):
    """
    A work category.

    Entries reference categories by id only; an entry may point at an id
    that is not in the table and is then displayed with a fallback label.
    """
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    color: str = Field(
        ...,
        pattern=r"^#[0-9A-Fa-f]{6}$",
        description="Display color as #RRGGBB"
    )
    description: Optional[str] = None


class Currency(BaseModel):
    """
    A currency with its static conversion rate.

    rate converts one unit of this currency into the reference currency.
    """
    model_config = ConfigDict(frozen=True)

    code: str = Field(..., min_length=1, max_length=10)
    name: str
    symbol: str
    rate: Decimal = Field(
        ...,
        gt=0,
        description="Units of reference currency per one unit of this currency"
    )


# =============================================================================
# CORE ENTRY MODELS
# =============================================================================

class EntryDraft(BaseModel):
    """
    A validated work entry that has not been stored yet.

    This is what the record validator produces and what the entry store
    accepts on insert. The store assigns id and timestamps.
    """
    model_config = ConfigDict(
        str_strip_whitespace=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    date: str = Field(
        ...,
        pattern=DATE_PATTERN,
        description="Work date as YYYY-MM-DD"
    )
    category: str = Field(
        ...,
        min_length=1,
        description="Category id (soft reference)"
    )
    description: str = Field(
        ...,
        min_length=1,
        description="What the work was"
    )
    amount: Decimal = Field(
        ...,
        ge=0,
        description="Amount in the entry's own currency"
    )
    currency: str = Field(
        ...,
        min_length=1,
        description="Currency code (soft reference)"
    )
    payment_status: PaymentStatus = Field(
        default=PaymentStatus.UNPAID,
        description="Payment status"
    )


class WorkEntry(EntryDraft):
    """
    A stored work entry.

    id is immutable; updated_at advances on every mutation.
    Instances are frozen - updates produce a new WorkEntry.
    """
    model_config = ConfigDict(frozen=True)

    id: str = Field(
        ...,
        min_length=1,
        description="Opaque unique identifier assigned by the store"
    )
    created_at: datetime = Field(
        ...,
        description="When the entry was created (store clock)"
    )
    updated_at: datetime = Field(
        ...,
        description="Last mutation timestamp (store clock)"
    )

    def to_draft(self) -> EntryDraft:
        """Strip store-assigned fields."""
        return EntryDraft(
            date=self.date,
            category=self.category,
            description=self.description,
            amount=self.amount,
            currency=self.currency,
            payment_status=self.payment_status,
        )


class EntryUpdate(BaseModel):
    """
    Partial replacement of entry fields.

    Only fields explicitly given (and not None) are applied.
    """
    model_config = ConfigDict(
        str_strip_whitespace=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    date: Optional[str] = Field(default=None, pattern=DATE_PATTERN)
    category: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = Field(default=None, min_length=1)
    amount: Optional[Decimal] = Field(default=None, ge=0)
    currency: Optional[str] = Field(default=None, min_length=1)
    payment_status: Optional[PaymentStatus] = None

    def changes(self) -> dict:
        """Fields to apply, keyed by Python field name."""
        return self.model_dump(exclude_unset=True, exclude_none=True)

    @property
    def is_empty(self) -> bool:
        return not self.changes()


# =============================================================================
# QUERY MODELS
# =============================================================================

class ReportFilter(BaseModel):
    """
    Declarative entry filter.

    Every field is optional; an absent field (None or "") is no constraint.
    Date bounds are inclusive and compared as strings.
    """
    model_config = ConfigDict(
        str_strip_whitespace=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    start_date: Optional[str] = None
    end_date: Optional[str] = None
    category: Optional[str] = None
    currency: Optional[str] = None
    payment_status: Optional[PaymentStatus] = None

    @field_validator('*', mode='before')
    @classmethod
    def blank_means_absent(cls, v):
        """Cleared form inputs arrive as empty strings."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @property
    def is_empty(self) -> bool:
        return not self.model_dump(exclude_none=True)


# =============================================================================
# DERIVED MODELS (never persisted)
# =============================================================================

class Statistics(BaseModel):
    """
    Dashboard statistics over the full entry set.

    All amounts are in the reference currency.
    """

    total_income: Decimal = Decimal("0")
    today_income: Decimal = Decimal("0")
    month_income: Decimal = Decimal("0")
    year_income: Decimal = Decimal("0")
    avg_daily_income: Decimal = Decimal("0")
    avg_monthly_income: Decimal = Decimal("0")
    top_category: str = ""
    total_entries: int = Field(default=0, ge=0)
    paid_income: Decimal = Decimal("0")
    unpaid_income: Decimal = Decimal("0")
    paid_entries: int = Field(default=0, ge=0)
    unpaid_entries: int = Field(default=0, ge=0)


class PeriodComparison(BaseModel):
    """Total for a period against the period before it."""

    label: str = Field(..., description="e.g. 'month' or 'year'")
    current_total: Decimal
    previous_total: Decimal
    change_percent: Decimal = Field(
        ...,
        description="Percent change; 0 when the previous total is 0"
    )


class CategoryBreakdown(BaseModel):
    """Per-category totals split by payment status."""

    category_id: str
    name: str
    color: str
    total_amount: Decimal = Decimal("0")
    paid_amount: Decimal = Decimal("0")
    unpaid_amount: Decimal = Decimal("0")
    total_entries: int = 0
    paid_entries: int = 0
    unpaid_entries: int = 0

    @property
    def paid_share_percent(self) -> Decimal:
        if not self.total_amount:
            return Decimal("0")
        return self.paid_amount / self.total_amount * 100


class DailyIncomePoint(BaseModel):
    """One day of the daily income series."""

    date: str
    label: str = Field(..., description="Short display label, e.g. 'Jan 05'")
    income: Decimal = Decimal("0")


class FilteredSummary(BaseModel):
    """Count, total and per-entry average of the filtered entries."""

    entry_count: int = Field(default=0, ge=0)
    total_amount: Decimal = Decimal("0")
    average_amount: Decimal = Field(
        default=Decimal("0"),
        description="total_amount / entry_count; 0 when there are no entries"
    )
