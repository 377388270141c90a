"""Tests for the domain validation helpers."""

from decimal import Decimal

import pytest

from ops_kernel.domain.dtos import ValidationError, ValidationResult
from ops_kernel.domain.validation import (
    NEGATIVE_AMOUNT,
    NOT_A_NUMBER,
    PERCENT_OUT_OF_RANGE,
    REQUIRED_FIELD_MISSING,
    check_non_negative,
    check_percentage,
    check_required_text,
    to_decimal,
)


class TestToDecimal:

    @pytest.mark.parametrize("value,expected", [
        (5, Decimal("5")),
        ("12.50", Decimal("12.50")),
        (" 7 ", Decimal("7")),
        (0.1, Decimal("0.1")),
        (Decimal("3.14"), Decimal("3.14")),
    ])
    def test_converts(self, value, expected):
        assert to_decimal(value) == expected

    @pytest.mark.parametrize("value", [
        None, True, False, "", "abc", "NaN", "Infinity", float("inf"), [1], object(),
    ])
    def test_rejects(self, value):
        assert to_decimal(value) is None


class TestChecks:

    def test_non_negative_records_negative(self):
        errors: list[ValidationError] = []

        check_non_negative(Decimal("-0.01"), "labor_cost", errors)

        assert [(e.code, e.field) for e in errors] == [(NEGATIVE_AMOUNT, "labor_cost")]

    def test_non_number_reported_once(self):
        errors: list[ValidationError] = []

        result = check_non_negative("x", "qty", errors)

        assert result == Decimal("0")
        assert [e.code for e in errors] == [NOT_A_NUMBER]

    @pytest.mark.parametrize("value,valid", [
        (0, True), (100, True), (Decimal("99.99"), True),
        (Decimal("-0.01"), False), (Decimal("100.01"), False),
    ])
    def test_percentage_bounds(self, value, valid):
        errors: list[ValidationError] = []

        check_percentage(value, "discount_percent", errors)

        assert (not errors) == valid
        if not valid:
            assert errors[0].code == PERCENT_OUT_OF_RANGE

    @pytest.mark.parametrize("value", ["", "   ", None, 42])
    def test_required_text(self, value):
        errors: list[ValidationError] = []

        check_required_text(value, "customer.name", errors)

        assert errors[0].code == REQUIRED_FIELD_MISSING
        assert errors[0].field == "customer.name"

    def test_required_text_accepts_value(self):
        errors: list[ValidationError] = []

        check_required_text("Acme Traders", "customer.name", errors)

        assert errors == []


class TestValidationResult:

    def test_truthiness(self):
        assert ValidationResult.success()
        assert not ValidationResult.failure(ValidationError(code="X", message="bad"))

    def test_from_errors(self):
        assert ValidationResult.from_errors([]).is_valid
        result = ValidationResult.from_errors([ValidationError(code="X", message="bad")])
        assert not result.is_valid
        assert len(result.errors) == 1
