"""
Lightweight domain validation helpers.

Pure checks with no I/O.  Each ``check_*`` helper appends a
``ValidationError`` to the caller's list instead of raising, so a whole
draft can be validated in one pass and every problem reported together.
"""

from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation
from typing import Any

from ops_kernel.domain.dtos import ValidationError

NOT_A_NUMBER = "NOT_A_NUMBER"
NEGATIVE_AMOUNT = "NEGATIVE_AMOUNT"
PERCENT_OUT_OF_RANGE = "PERCENT_OUT_OF_RANGE"
REQUIRED_FIELD_MISSING = "REQUIRED_FIELD_MISSING"
AMOUNT_NOT_POSITIVE = "AMOUNT_NOT_POSITIVE"
INVALID_GSTIN = "INVALID_GSTIN"

_ZERO = Decimal("0")
_HUNDRED = Decimal("100")

# 2-digit state code, 10-character PAN, entity number, "Z", check character.
_GSTIN_PATTERN = re.compile(r"[0-9]{2}[A-Z]{5}[0-9]{4}[A-Z][0-9A-Z]Z[0-9A-Z]")


def to_decimal(value: Any) -> Decimal | None:
    """
    Convert a numeric input to a finite Decimal.

    Floats go through ``str()`` so ``0.1`` becomes ``Decimal("0.1")`` and not
    its binary expansion.  Returns None for booleans, NaN, infinities and
    anything that does not parse as a number.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, (int, float, str)):
        try:
            result = Decimal(str(value).strip())
        except InvalidOperation:
            return None
    else:
        return None
    if not result.is_finite():
        return None
    return result


def check_number(value: Any, field: str, errors: list[ValidationError]) -> Decimal:
    """Coerce ``value``; record NOT_A_NUMBER and return zero on failure."""
    result = to_decimal(value)
    if result is None:
        errors.append(ValidationError(
            code=NOT_A_NUMBER,
            message=f"must be a number, got {value!r}",
            field=field,
        ))
        return _ZERO
    return result


def check_non_negative(value: Any, field: str, errors: list[ValidationError]) -> Decimal:
    """Coerce ``value`` and require it to be >= 0."""
    before = len(errors)
    result = check_number(value, field, errors)
    if len(errors) == before and result < _ZERO:
        errors.append(ValidationError(
            code=NEGATIVE_AMOUNT,
            message=f"must not be negative, got {result}",
            field=field,
        ))
    return result


def check_positive(value: Any, field: str, errors: list[ValidationError]) -> Decimal:
    """Coerce ``value`` and require it to be > 0."""
    before = len(errors)
    result = check_number(value, field, errors)
    if len(errors) == before and result <= _ZERO:
        errors.append(ValidationError(
            code=AMOUNT_NOT_POSITIVE,
            message=f"must be greater than zero, got {result}",
            field=field,
        ))
    return result


def check_percentage(value: Any, field: str, errors: list[ValidationError]) -> Decimal:
    """Coerce ``value`` and require it to lie in [0, 100]."""
    before = len(errors)
    result = check_number(value, field, errors)
    if len(errors) == before and not (_ZERO <= result <= _HUNDRED):
        errors.append(ValidationError(
            code=PERCENT_OUT_OF_RANGE,
            message=f"must be between 0 and 100, got {result}",
            field=field,
        ))
    return result


def check_required_text(value: Any, field: str, errors: list[ValidationError]) -> None:
    """Require a non-blank string."""
    if not isinstance(value, str) or not value.strip():
        errors.append(ValidationError(
            code=REQUIRED_FIELD_MISSING,
            message="is required",
            field=field,
        ))


def check_gstin(value: Any, field: str, errors: list[ValidationError]) -> None:
    """Require a 15-character GSTIN when one is given."""
    if value is None:
        return
    if not isinstance(value, str) or not _GSTIN_PATTERN.fullmatch(value):
        errors.append(ValidationError(
            code=INVALID_GSTIN,
            message=f"is not a valid GSTIN, got {value!r}",
            field=field,
        ))
