"""
Test suite for currency module

Tests fixed-point Money arithmetic, rounding at the decimal boundary,
and parsing of user-entered amounts.
"""

import pytest
from decimal import Decimal

from atm_terminal.currency import Money, Currency, decimal_from_string


class TestMoney:
    """Test Money class operations"""

    def test_money_from_decimal(self):
        """Test conversion from major units to integer minor units"""
        money = Money.from_decimal(Decimal('100.50'), Currency.INR)
        assert money.minor_units == 10050
        assert money.amount == Decimal('100.50')
        assert money.currency == Currency.INR

        # Rounding half up to currency precision
        assert Money.from_decimal(Decimal('100.555'), Currency.USD).minor_units == 10056
        assert Money.from_decimal(Decimal('100.7'), Currency.JPY).minor_units == 101

        # Strings and ints are accepted at the boundary
        assert Money.from_decimal("20000.00").minor_units == 2000000
        assert Money.from_decimal(5).amount == Decimal('5.00')

    def test_money_rejects_float_minor_units(self):
        """Test that Money cannot be built from non-integer minor units"""
        with pytest.raises(TypeError):
            Money(10.5, Currency.INR)

        with pytest.raises(TypeError):
            Money(True, Currency.INR)

    def test_money_rejects_non_finite(self):
        with pytest.raises(ValueError):
            Money.from_decimal(Decimal('NaN'))

    def test_money_rejects_values_beyond_context_precision(self):
        with pytest.raises(ValueError):
            Money.from_decimal("1" * 30)

    def test_money_arithmetic_is_exact(self):
        """Test that repeated small amounts do not drift"""
        ten_paise = Money.from_decimal("0.10")
        total = Money.zero()
        for _ in range(10):
            total = total + ten_paise
        assert total == Money.from_decimal("1.00")

        result = Money.from_decimal("100.50") - Money.from_decimal("50.25")
        assert result.amount == Decimal('50.25')

        assert (-Money.from_decimal("5")).amount == Decimal('-5.00')
        assert abs(Money.from_decimal("-5")).amount == Decimal('5.00')

    def test_money_comparison(self):
        """Test Money comparison operations"""
        money1 = Money.from_decimal("100.00")
        money2 = Money.from_decimal("50.00")
        money3 = Money.from_decimal("100.00")

        assert money1 == money3
        assert money1 != money2
        assert money1 > money2
        assert money2 < money1
        assert money1 >= money3
        assert money1 <= money3

    def test_money_currency_mismatch(self):
        """Test that operations with different currencies raise errors"""
        inr_money = Money.from_decimal("100.00", Currency.INR)
        usd_money = Money.from_decimal("100.00", Currency.USD)

        with pytest.raises(ValueError, match="Cannot add INR and USD"):
            inr_money + usd_money

        with pytest.raises(ValueError, match="Cannot subtract INR and USD"):
            inr_money - usd_money

        with pytest.raises(ValueError, match="Cannot compare INR and USD"):
            inr_money < usd_money

        assert inr_money != usd_money

    def test_money_state_checks(self):
        """Test Money state checking methods"""
        assert Money.zero().is_zero()
        assert Money.from_decimal("0.01").is_positive()
        assert Money.from_decimal("-0.01").is_negative()
        assert not Money.zero().is_positive()

    def test_money_string_formatting(self):
        """Test Money string representation"""
        assert Money.from_decimal("1234.5").to_plain_string() == "1234.50"
        assert Money.from_decimal("1234567.89").to_string() == "INR 1,234,567.89"
        assert Money.from_decimal("1234", Currency.JPY).to_string() == "JPY 1,234"
        assert str(Money.from_decimal("1000")) == "INR 1,000.00"


class TestDecimalParsing:
    """Test decimal_from_string helper"""

    @pytest.mark.parametrize("text, expected", [
        ("1500", Decimal("1500")),
        ("1500.75", Decimal("1500.75")),
        ("₹2,500.00", Decimal("2500.00")),
        ("1,00,000", Decimal("100000")),
        ("12,50", Decimal("12.50")),
        ("  -5 ", Decimal("-5")),
    ])
    def test_valid_inputs(self, text, expected):
        assert decimal_from_string(text) == expected

    def test_currency_code_is_accepted(self):
        assert decimal_from_string("INR 500") == Decimal("500")
        assert decimal_from_string("500 usd") == Decimal("500")

    @pytest.mark.parametrize("text", ["", "abc", "1.2.3", "--", "1e5", "5abc0", "1-2", "12$34"])
    def test_invalid_inputs(self, text):
        with pytest.raises(ValueError):
            decimal_from_string(text)
