"""Tests for the currency registry."""

from decimal import Decimal

import pytest

from ops_kernel.domain.currency import CurrencyRegistry


class TestCurrencyRegistry:

    def test_inr_is_registered(self):
        info = CurrencyRegistry.get_info("inr")

        assert info.code == "INR"
        assert info.symbol == "₹"
        assert info.quantum == Decimal("0.01")

    def test_zero_decimal_quantum(self):
        assert CurrencyRegistry.get_info("JPY").quantum == Decimal("1")

    @pytest.mark.parametrize("code, exponent", [("JPY", 0), ("INR", -2), ("OMR", -3)])
    def test_quantum_exponent_matches_places(self, code, exponent):
        assert CurrencyRegistry.get_info(code).quantum.as_tuple().exponent == exponent

    def test_unknown_code_defaults_to_two_places(self):
        assert CurrencyRegistry.get_decimal_places("ZZZ") == 2
        assert CurrencyRegistry.get_info("ZZZ") is None

    def test_validate_normalizes(self):
        assert CurrencyRegistry.validate(" usd ") == "USD"

    @pytest.mark.parametrize("code", ["", None, "RUPEE", "XYZ"])
    def test_validate_rejects(self, code):
        with pytest.raises(ValueError):
            CurrencyRegistry.validate(code)

    def test_is_valid(self):
        assert CurrencyRegistry.is_valid("EUR")
        assert not CurrencyRegistry.is_valid("")
        assert "INR" in CurrencyRegistry.all_codes()
