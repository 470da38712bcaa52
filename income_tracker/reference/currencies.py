"""
Static currency table.

Rates convert one unit of a currency into Bangladeshi Taka (BDT), the
reference currency. Every rate is strictly positive.
"""

from decimal import Decimal
from typing import Optional

from income_tracker.models.entry import Currency


REFERENCE_CURRENCY_CODE = "BDT"

CURRENCIES: tuple[Currency, ...] = (
    Currency(code="USD", name="US Dollar", symbol="$", rate=Decimal("110.0")),
    Currency(code="BDT", name="Bangladeshi Taka", symbol="৳", rate=Decimal("1.0")),
    Currency(code="INR", name="Indian Rupee", symbol="₹", rate=Decimal("1.32")),
    Currency(code="EUR", name="Euro", symbol="€", rate=Decimal("120.0")),
    Currency(code="GBP", name="British Pound", symbol="£", rate=Decimal("140.0")),
    Currency(code="BTC", name="Bitcoin", symbol="₿", rate=Decimal("4620000.0")),
    Currency(code="ETH", name="Ethereum", symbol="Ξ", rate=Decimal("275000.0")),
)


def get_currency_by_code(code: str) -> Optional[Currency]:
    """Exact-code lookup; None for unknown codes."""
    for currency in CURRENCIES:
        if currency.code == code:
            return currency
    return None
