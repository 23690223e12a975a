"""Tests for Decimal money helpers (sitecost_kernel.domain.values)."""

from decimal import ROUND_DOWN, Decimal

import pytest

from sitecost_kernel.domain.values import (
    ZERO,
    format_amount,
    format_currency,
    round_money,
    to_decimal,
)


class TestToDecimal:

    def test_none_is_zero(self):
        assert to_decimal(None) == ZERO

    def test_float_goes_through_str(self):
        assert to_decimal(125000.5) == Decimal("125000.5")
        assert to_decimal(0.1) == Decimal("0.1")

    def test_int_and_string(self):
        assert to_decimal(800) == Decimal("800")
        assert to_decimal(" 150.50 ") == Decimal("150.50")

    def test_decimal_passthrough(self):
        value = Decimal("1.005")
        assert to_decimal(value) is value

    @pytest.mark.parametrize("bad", [True, False, "abc", "", "NaN", "Infinity", float("inf")])
    def test_rejects_non_numbers(self, bad):
        with pytest.raises(ValueError):
            to_decimal(bad)


class TestRounding:

    def test_half_up(self):
        assert round_money(Decimal("0.005")) == Decimal("0.01")
        assert round_money(Decimal("2.675")) == Decimal("2.68")

    def test_negative_half_up_away_from_zero(self):
        assert round_money(Decimal("-0.005")) == Decimal("-0.01")

    def test_custom_places_and_mode(self):
        assert round_money(Decimal("1.239"), decimal_places=1, rounding=ROUND_DOWN) == Decimal("1.2")
        assert round_money(Decimal("1.5"), decimal_places=0) == Decimal("2")


class TestFormatting:

    def test_format_amount(self):
        assert format_amount(Decimal("200")) == "200.00"
        assert format_amount(Decimal("0.01")) == "0.01"
        assert format_amount(Decimal("1234567.891")) == "1234567.89"

    def test_format_currency(self):
        assert format_currency(Decimal("1234.5")) == "R 1,234.50"

    def test_format_currency_negative(self):
        assert format_currency(Decimal("-200")) == "R -200.00"

    def test_format_currency_separator_and_symbol(self):
        assert format_currency(Decimal("1234567"), symbol="$", thousands_separator=" ") == "$ 1 234 567.00"
