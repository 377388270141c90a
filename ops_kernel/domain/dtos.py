"""
Validation DTOs.

Non-raising representation of validation failures.  Engines and services
collect every ``ValidationError`` for an input before deciding whether to
proceed, then either return a ``ValidationResult`` or raise
``ValidationFailedError`` carrying the same tuple.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ValidationError:
    """
    A single validation error.

    Contract:
        Carries a machine-readable code, human-readable message, optional field
        path (e.g. ``items[2].unit_price``), and optional details dict.

    Non-goals:
        - Does NOT raise exceptions -- it IS the error representation.
    """

    code: str
    message: str
    field: str | None = None
    details: dict[str, Any] | None = None


@dataclass(frozen=True)
class ValidationResult:
    """
    Result of validation.

    Guarantees:
        - errors is always a tuple (never None)
        - bool(result) == result.is_valid
    """

    is_valid: bool
    errors: tuple[ValidationError, ...] = field(default_factory=tuple)

    @classmethod
    def success(cls) -> ValidationResult:
        """Create a successful validation result."""
        return cls(is_valid=True, errors=())

    @classmethod
    def failure(cls, *errors: ValidationError) -> ValidationResult:
        """Create a failed validation result."""
        return cls(is_valid=False, errors=tuple(errors))

    @classmethod
    def from_errors(cls, errors: list[ValidationError] | tuple[ValidationError, ...]) -> ValidationResult:
        """Success when ``errors`` is empty, failure otherwise."""
        if not errors:
            return cls.success()
        return cls.failure(*errors)

    def __bool__(self) -> bool:
        return self.is_valid
