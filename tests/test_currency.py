"""Tests for the currency normalizer and reference tables."""

import pytest
from decimal import Decimal

from income_tracker.currency import CurrencyNormalizer, get_normalizer, round_money
from income_tracker.models.entry import Currency
from income_tracker.reference import (
    CURRENCIES,
    DEFAULT_CATEGORIES,
    FALLBACK_CATEGORY_COLOR,
    category_color,
    category_label,
    get_currency_by_code,
)


class TestCurrencyNormalizer:
    """Tests for conversion to and from the reference currency."""

    def test_to_reference(self):
        """Test amount * rate conversion."""
        normalizer = CurrencyNormalizer()
        assert normalizer.to_reference(500, "USD") == Decimal("55000")
        assert normalizer.to_reference("100", "INR") == Decimal("132")
        assert normalizer.to_reference(Decimal("7"), "BDT") == Decimal("7")

    def test_round_trip_for_every_currency(self):
        """Test to_reference(from_reference(x)) == x within tolerance."""
        normalizer = CurrencyNormalizer()
        for currency in CURRENCIES:
            for value in (Decimal("0"), Decimal("1"), Decimal("12.34"), Decimal("987654.321")):
                back = normalizer.to_reference(
                    normalizer.from_reference(value, currency.code),
                    currency.code,
                )
                assert abs(back - value) < Decimal("1e-9")

    def test_unknown_code_passes_through(self):
        """Test that unknown codes are not converted and never raise."""
        normalizer = CurrencyNormalizer()
        assert normalizer.to_reference(42, "XYZ") == Decimal("42")
        assert normalizer.from_reference(42, "XYZ") == Decimal("42")

    def test_reference_code_defaults_to_settings(self):
        """Test that the reference currency comes from settings."""
        assert get_normalizer().reference_code == "BDT"

    def test_rejects_duplicate_codes(self):
        """Test that the table must have unique codes."""
        usd = get_currency_by_code("USD")
        bdt = get_currency_by_code("BDT")
        with pytest.raises(ValueError):
            CurrencyNormalizer([usd, usd, bdt], reference_code="BDT")

    def test_rejects_missing_reference(self):
        """Test that the reference currency must be in the table."""
        with pytest.raises(ValueError):
            CurrencyNormalizer([get_currency_by_code("USD")], reference_code="BDT")

    def test_rejects_reference_rate_other_than_one(self):
        """Test that the reference currency must have rate 1."""
        with pytest.raises(ValueError):
            CurrencyNormalizer(CURRENCIES, reference_code="USD")

    def test_rejects_non_positive_rate(self):
        """Test that a zero rate is refused even if the model was bypassed."""
        broken = Currency.model_construct(code="ZZZ", name="Broken", symbol="z", rate=Decimal("0"))
        with pytest.raises(ValueError):
            CurrencyNormalizer(list(CURRENCIES) + [broken], reference_code="BDT")

    def test_format_amount(self):
        """Test display formatting with half-up rounding."""
        normalizer = CurrencyNormalizer()
        assert normalizer.format_amount(Decimal("12.345"), "USD") == "$ 12.35"
        assert normalizer.format_amount(3, "XYZ") == "XYZ 3.00"

    def test_round_money_half_up(self):
        """Test that .005 rounds away from zero."""
        assert round_money(Decimal("0.005")) == Decimal("0.01")
        assert round_money(Decimal("2.675")) == Decimal("2.68")


class TestReferenceTables:
    """Tests for static reference data."""

    def test_every_rate_is_positive(self):
        """Test the static currency table."""
        assert all(currency.rate > 0 for currency in CURRENCIES)
        assert get_currency_by_code("BDT").rate == Decimal("1")

    def test_category_ids_are_unique(self):
        """Test the static category table."""
        ids = [category.id for category in DEFAULT_CATEGORIES]
        assert len(ids) == len(set(ids))

    def test_category_fallbacks(self):
        """Test display fallbacks for unknown category ids."""
        assert category_label("freelance") == "Freelance"
        assert category_label("mystery") == "mystery"
        assert category_color("mystery") == FALLBACK_CATEGORY_COLOR
