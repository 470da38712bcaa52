"""Currency normalization package."""

from income_tracker.currency.normalizer import (
    CurrencyNormalizer,
    coerce_amount,
    from_reference,
    get_normalizer,
    round_money,
    to_reference,
)

__all__ = [
    "CurrencyNormalizer",
    "coerce_amount",
    "from_reference",
    "get_normalizer",
    "round_money",
    "to_reference",
]
