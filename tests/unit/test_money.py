"""
Unit tests for Money and Currency.

Verifies:
- Decimal precision is kept until presentation rounding
- Rounding follows the currency's decimal places
- Mixed-currency arithmetic is refused
"""

from decimal import Decimal

import pytest

from tour_kernel.domain.values import Currency, Money


class TestCurrency:
    def test_code_is_normalized(self):
        assert Currency(" usd ").code == "USD"

    def test_unknown_code_rejected(self):
        with pytest.raises(ValueError):
            Currency("XXY")

    def test_blank_code_rejected(self):
        with pytest.raises(ValueError):
            Currency("")

    def test_decimal_places(self):
        assert Currency("USD").decimal_places == 2
        assert Currency("JPY").decimal_places == 0

    def test_quantum(self):
        assert Currency("USD").quantum == Decimal("0.01")
        assert Currency("JPY").quantum == Decimal("1")
        assert Currency("KWD").quantum == Decimal("0.001")


class TestMoneyConstruction:
    def test_of_string(self):
        money = Money.of("100.50", "EUR")
        assert money.amount == Decimal("100.50")
        assert money.currency == Currency("EUR")

    def test_of_int(self):
        assert Money.of(12, "USD").amount == Decimal("12")

    def test_zero(self):
        assert Money.zero("TRY").is_zero

    def test_invalid_amount(self):
        with pytest.raises(ValueError):
            Money("abc", "USD")

    def test_invalid_currency_type(self):
        with pytest.raises(TypeError):
            Money(Decimal("1"), 840)


class TestMoneyArithmetic:
    def test_addition(self):
        assert Money.of("10.10", "USD") + Money.of("0.20", "USD") == Money.of("10.30", "USD")

    def test_subtraction(self):
        assert Money.of("10", "USD") - Money.of("2.5", "USD") == Money.of("7.5", "USD")

    def test_multiply_by_decimal(self):
        assert Money.of("150", "USD") * Decimal("8") == Money.of("1200", "USD")

    def test_divide(self):
        assert (Money.of("100", "USD") / 4).amount == Decimal("25")

    def test_total(self):
        amounts = [Money.of("1.10", "USD"), Money.of("2.20", "USD")]
        assert Money.total(amounts, "USD") == Money.of("3.30", "USD")
        assert Money.total([], "EUR") == Money.zero("EUR")

    def test_ordering(self):
        assert Money.of("1", "USD") < Money.of("2", "USD") <= Money.of("2", "USD")

    def test_mixed_currency_addition_rejected(self):
        with pytest.raises(ValueError):
            Money.of("1", "USD") + Money.of("1", "EUR")

    def test_mixed_currency_comparison_rejected(self):
        with pytest.raises(ValueError):
            Money.of("1", "USD") < Money.of("1", "EUR")


class TestMoneyRounding:
    def test_round_half_up(self):
        assert Money.of("10.555", "USD").round().amount == Decimal("10.56")

    def test_round_down(self):
        assert Money.of("10.554", "USD").round().amount == Decimal("10.55")

    def test_zero_decimal_currency(self):
        assert Money.of("1000.5", "JPY").round().amount == Decimal("1001")

    def test_unrounded_sum_keeps_precision(self):
        third = Money.of("100", "USD") / 3
        total = third + third + third
        assert total.round().amount == Decimal("100.00")
