"""
Currency Normalizer

Converts (amount, currency code) pairs into the reference currency using
the static rate table, and back.

DESIGN DECISION: Unknown currency codes pass through unconverted instead of
raising. Aggregation and export rely on conversion never throwing, so an
entry with a code missing from the table is counted at face value.
"""

from decimal import ROUND_HALF_UP, Decimal
from functools import lru_cache
from typing import Iterable, Optional, Union

from income_tracker.config import get_settings
from income_tracker.models.entry import Currency
from income_tracker.reference.currencies import CURRENCIES


Amount = Union[Decimal, int, float, str]

CENT = Decimal("0.01")


def coerce_amount(amount: Amount) -> Decimal:
    if isinstance(amount, Decimal):
        return amount
    return Decimal(str(amount))


def round_money(amount: Decimal) -> Decimal:
    """Round half-up to two decimal places."""
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


class CurrencyNormalizer:
    """
    Converts amounts to and from the reference currency.

    The table is checked once at construction: codes are unique, every rate
    is positive and the reference currency has a rate of exactly 1.
    """

    def __init__(
        self,
        currencies: Iterable[Currency] = CURRENCIES,
        reference_code: Optional[str] = None,
    ):
        self._currencies: dict[str, Currency] = {}
        for currency in currencies:
            if currency.code in self._currencies:
                raise ValueError(f"Duplicate currency code: {currency.code}")
            if currency.rate <= 0:
                raise ValueError(f"Currency rate must be positive: {currency.code}")
            self._currencies[currency.code] = currency

        self._reference_code = reference_code or get_settings().app.reference_currency
        reference = self._currencies.get(self._reference_code)
        if reference is None:
            raise ValueError(f"Reference currency not in table: {self._reference_code}")
        if reference.rate != 1:
            raise ValueError(
                f"Reference currency {self._reference_code} must have rate 1, "
                f"got {reference.rate}"
            )

    @property
    def reference_code(self) -> str:
        return self._reference_code

    @property
    def currencies(self) -> list[Currency]:
        return list(self._currencies.values())

    def get_currency(self, code: str) -> Optional[Currency]:
        return self._currencies.get(code)

    def to_reference(self, amount: Amount, currency_code: str) -> Decimal:
        """amount * rate; unknown codes pass through unchanged."""
        value = coerce_amount(amount)
        currency = self._currencies.get(currency_code)
        if currency is None:
            return value
        return value * currency.rate

    def from_reference(self, amount: Amount, currency_code: str) -> Decimal:
        """amount / rate; unknown codes pass through unchanged."""
        value = coerce_amount(amount)
        currency = self._currencies.get(currency_code)
        if currency is None:
            return value
        return value / currency.rate

    def format_amount(self, amount: Amount, currency_code: str) -> str:
        """Format as '<symbol> 12.34', using the code when the symbol is unknown."""
        currency = self._currencies.get(currency_code)
        symbol = currency.symbol if currency else currency_code
        return f"{symbol} {round_money(coerce_amount(amount)):.2f}"


@lru_cache()
def get_normalizer() -> CurrencyNormalizer:
    """Normalizer over the static table (cached)."""
    return CurrencyNormalizer()


def to_reference(amount: Amount, currency_code: str) -> Decimal:
    return get_normalizer().to_reference(amount, currency_code)


def from_reference(amount: Amount, currency_code: str) -> Decimal:
    return get_normalizer().from_reference(amount, currency_code)
