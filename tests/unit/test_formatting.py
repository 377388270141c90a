"""Tests for display formatting of amounts."""

from decimal import Decimal

import pytest

from ops_kernel.utils.formatting import amount_in_words, format_currency


class TestFormatCurrency:

    @pytest.mark.parametrize("amount,expected", [
        (Decimal("157528"), "₹1,57,528.00"),
        (Decimal("0"), "₹0.00"),
        (Decimal("999"), "₹999.00"),
        (Decimal("1000"), "₹1,000.00"),
        (Decimal("12345678.9"), "₹1,23,45,678.90"),
        (Decimal("10.005"), "₹10.01"),
        (Decimal("-2500"), "-₹2,500.00"),
    ])
    def test_inr_indian_grouping(self, amount, expected):
        assert format_currency(amount) == expected

    def test_usd_thousands_grouping(self):
        assert format_currency(Decimal("1234567.5"), "USD") == "$1,234,567.50"

    def test_zero_decimal_currency(self):
        assert format_currency(Decimal("1500.6"), "JPY") == "¥1,501"

    def test_currency_without_symbol_uses_code(self):
        assert format_currency(Decimal("100"), "AED") == "AED 100.00"

    def test_three_decimal_currency(self):
        assert format_currency(Decimal("1.2345"), "KWD") == "KWD 1.235"

    def test_unknown_currency_rejected(self):
        with pytest.raises(ValueError):
            format_currency(Decimal("1"), "XYZ")

    def test_non_numeric_rejected(self):
        with pytest.raises(ValueError):
            format_currency("a lot")


class TestAmountInWords:

    @pytest.mark.parametrize("amount,expected", [
        (Decimal("0"), "Zero"),
        (Decimal("7"), "Seven"),
        (Decimal("19"), "Nineteen"),
        (Decimal("40"), "Forty"),
        (Decimal("105"), "One Hundred Five"),
        (Decimal("1000"), "One Thousand"),
        (Decimal("156940"), "One Lakh Fifty Six Thousand Nine Hundred Forty"),
        (Decimal("10000000"), "One Crore"),
        (Decimal("25000000"), "Two Crore Fifty Lakh"),
    ])
    def test_whole_rupees(self, amount, expected):
        assert amount_in_words(amount) == expected

    def test_rupees_and_paise(self):
        assert amount_in_words(Decimal("1500.75")) == (
            "One Thousand Five Hundred And Seventy Five Paise"
        )

    def test_paise_only(self):
        assert amount_in_words(Decimal("0.5")) == "Fifty Paise"

    def test_paise_rounded_half_up(self):
        assert amount_in_words(Decimal("2.005")) == "Two And One Paise"

    def test_negative(self):
        assert amount_in_words(Decimal("-12")) == "Minus Twelve"

    def test_non_numeric_rejected(self):
        with pytest.raises(ValueError):
            amount_in_words(None)
