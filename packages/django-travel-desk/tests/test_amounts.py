"""Tests for amount coercion and currency display."""
import pytest
from decimal import Decimal

from django.test import override_settings

from django_travel_desk.amounts import (
    CURRENCY_DECIMALS,
    format_currency,
    quantize_amount,
    to_amount,
    to_count,
    to_flag,
)


class TestToAmount:
    """Test suite for to_amount() coercion."""

    @pytest.mark.parametrize("value, expected", [
        (Decimal("19.99"), Decimal("19.99")),
        (500, Decimal("500")),
        ("500", Decimal("500")),
        (" 250.50 ", Decimal("250.50")),
        (19.99, Decimal("19.99")),
    ])
    def test_valid_values_become_decimal(self, value, expected):
        """Numeric values of any type should become the same Decimal."""
        result = to_amount(value)
        assert result == expected
        assert isinstance(result, Decimal)

    @pytest.mark.parametrize("value", [
        None, "", "abc", "12abc", "NaN", "Infinity", float("nan"), float("inf"), [], {},
    ])
    def test_invalid_values_become_zero(self, value):
        """Unparseable input should normalize to zero, never raise."""
        assert to_amount(value) == Decimal("0")

    def test_negative_values_become_zero(self):
        """Prices are never negative."""
        assert to_amount("-10") == Decimal("0")
        assert to_amount(-0.01) == Decimal("0")

    def test_booleans_are_not_amounts(self):
        """A checkbox value should not be read as 1."""
        assert to_amount(True) == Decimal("0")

    def test_float_goes_through_str(self):
        """0.1 should not carry binary float noise."""
        assert to_amount(0.1) == Decimal("0.1")

    @pytest.mark.parametrize("value", [
        "1e1000000",
        "-1e1000000",
        "1e-1000000",
        Decimal("9.9e999999"),
        Decimal("sNaN"),
        "sNaN",
        "9" * 100,
        10 ** 100,
    ])
    def test_extreme_values_become_zero(self, value):
        """Values no money column can hold normalize to zero, never raise."""
        assert to_amount(value) == Decimal("0")

    def test_largest_storable_amount_is_kept(self):
        assert to_amount("999999999999999.9999") == Decimal("999999999999999.9999")
        assert to_amount("1e15") == Decimal("0")


class TestToCount:
    """Test suite for to_count() coercion."""

    def test_int_passes_through(self):
        assert to_count(3) == 3

    def test_string_is_parsed(self):
        assert to_count("2") == 2

    def test_fraction_is_truncated(self):
        assert to_count("2.7") == 2

    def test_missing_falls_back_to_default(self):
        """Missing passenger count means one passenger."""
        assert to_count(None) == 1
        assert to_count("") == 1

    def test_garbage_falls_back_to_default(self):
        assert to_count("many") == 1
        assert to_count("many", default=0) == 0

    def test_negative_falls_back_to_default(self):
        assert to_count(-2) == 1

    def test_explicit_zero_is_kept(self):
        """Zero is a real answer, distinct from missing."""
        assert to_count(0) == 0
        assert to_count("0") == 0

    @pytest.mark.parametrize("value", [
        "1e999999999",
        "1e1000000",
        Decimal("sNaN"),
        "9" * 100,
        10 ** 100,
        float("inf"),
        100_001,
    ])
    def test_extreme_counts_fall_back_to_default(self, value):
        """Huge counts must neither hang nor raise."""
        assert to_count(value) == 1

    def test_whitespace_falls_back_to_default(self):
        assert to_count("   ") == 1


class TestToFlag:
    """Test suite for to_flag() toggle coercion."""

    @pytest.mark.parametrize("value", [True, "true", "True", " on ", "yes", "1", 1])
    def test_truthy_values(self, value):
        assert to_flag(value) is True

    @pytest.mark.parametrize("value", [False, None, "", "false", "off", "no", "0", 0, "abc", []])
    def test_falsy_values(self, value):
        """A "false" string from a form must not switch a toggle on."""
        assert to_flag(value) is False


class TestQuantizeAmount:
    """Test suite for display quantization."""

    def test_aed_rounds_to_2_decimals(self):
        assert quantize_amount(Decimal("333.3333"), "AED") == Decimal("333.33")

    def test_uses_bankers_rounding(self):
        """Quantization should use ROUND_HALF_EVEN."""
        assert quantize_amount(Decimal("10.005"), "AED") == Decimal("10.00")
        assert quantize_amount(Decimal("10.015"), "AED") == Decimal("10.02")

    def test_zero_decimal_currency(self):
        assert quantize_amount(Decimal("1999.5"), "JPY") == Decimal("2000")

    def test_unknown_currency_defaults_to_2(self):
        assert quantize_amount(Decimal("1.234"), "XYZ") == Decimal("1.23")

    def test_booking_currencies_defined(self):
        for currency in ['AED', 'USD', 'EUR', 'GBP', 'SAR', 'INR', 'PKR']:
            assert CURRENCY_DECIMALS[currency] == 2

    def test_quantize_does_not_raise_on_garbage(self):
        assert quantize_amount("abc", "AED") == Decimal("0.00")


class TestFormatCurrency:
    """Test suite for format_currency()."""

    def test_formats_with_thousands_separator(self):
        assert format_currency(Decimal("1100"), "AED") == "AED 1,100.00"

    def test_small_amounts(self):
        assert format_currency(Decimal("5.5"), "USD") == "USD 5.50"

    @override_settings(TRAVEL_DESK_CURRENCY="SAR")
    def test_defaults_to_configured_currency(self):
        assert format_currency(Decimal("550")) == "SAR 550.00"

    def test_default_currency_is_aed(self):
        assert format_currency(0) == "AED 0.00"
