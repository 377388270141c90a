"""
Shared helpers for priced documents (``ops_modules._document_helpers``).

Responsibility
--------------
Customer details and draft validation shared by quotations and invoices.
A draft is checked in one pass and every problem is reported together,
before any number is allocated or any row is written.

Architecture position
---------------------
**Modules layer** -- pure functions, ZERO I/O.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Sequence

from ops_engines.comparison import PricedDocument
from ops_engines.totals import CostParameters, LineItem, TotalsBreakdown, validate_totals_input
from ops_kernel.domain.dtos import ValidationError
from ops_kernel.domain.validation import (
    REQUIRED_FIELD_MISSING,
    check_gstin,
    check_required_text,
)
from ops_kernel.exceptions import ValidationFailedError

NO_LINE_ITEMS = "NO_LINE_ITEMS"


@dataclass(frozen=True)
class CustomerInfo:
    """Bill-to details captured on a quotation or invoice."""

    name: str
    email: str = ""
    address: str = ""
    contact_person: str | None = None
    phone: str | None = None
    gstin: str | None = None

    def __post_init__(self) -> None:
        if isinstance(self.gstin, str):
            object.__setattr__(self, "gstin", self.gstin.strip().upper() or None)


def validate_priced_draft(
    customer: CustomerInfo,
    items: Sequence[LineItem],
    cost: CostParameters,
    labor_tax_rate: Decimal,
) -> list[ValidationError]:
    """Every problem with a quotation or invoice draft, empty if none."""
    errors: list[ValidationError] = []
    check_required_text(customer.name, "customer.name", errors)
    check_gstin(customer.gstin, "customer.gstin", errors)

    if not items:
        errors.append(ValidationError(
            code=NO_LINE_ITEMS,
            message="at least one line item is required",
            field="items",
        ))
    for index, item in enumerate(items):
        check_required_text(item.description, f"items[{index}].description", errors)
        if not isinstance(item.id, str) or not item.id.strip():
            errors.append(ValidationError(
                code=REQUIRED_FIELD_MISSING,
                message="is required",
                field=f"items[{index}].id",
            ))

    errors.extend(validate_totals_input(items, cost, labor_tax_rate).errors)
    return errors


def with_default_tax_rate(
    items: Sequence[LineItem],
    default_rate: Decimal,
) -> tuple[LineItem, ...]:
    """Lines as given, with ``default_rate`` filled in where no GST rate was stated."""
    return tuple(
        item if item.tax_rate is not None else replace(item, tax_rate=default_rate)
        for item in items
    )


def raise_if_invalid(errors: list[ValidationError]) -> None:
    if errors:
        raise ValidationFailedError(errors)


def priced_document(
    reference: str,
    items: Sequence[LineItem],
    cost: CostParameters,
    totals: TotalsBreakdown,
) -> PricedDocument:
    """Snapshot for the comparison engine."""
    return PricedDocument(
        reference=reference,
        items=tuple(items),
        cost=cost,
        grand_total=totals.grand_total,
    )
