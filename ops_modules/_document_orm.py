"""
Shared ORM columns for priced documents (``ops_modules._document_orm``).

Responsibility
--------------
Quotations and invoices persist the same things: bill-to details, cost
parameters, the tax flag and the cached ``TotalsBreakdown``.  Their line
tables share the same columns too.  The mixins here declare those columns
once; each module's ``orm.py`` adds its own table name, keys and
relationships.

The breakdown is written once at creation time and read back verbatim.  It
is never recomputed from the lines.

Architecture position
---------------------
**Modules layer** -- persistence.  Imports from ``ops_kernel.db.base``
(through the concrete models) and from ``ops_engines.totals`` for the
value objects.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Sequence

from sqlalchemy import JSON, Boolean, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from ops_engines.totals import (
    LABOR_TAX_LINE_ID,
    CostParameters,
    LineItem,
    TaxLine,
    TotalsBreakdown,
)
from ops_modules._document_helpers import CustomerInfo

_ZERO = Decimal("0")


class PricedDocumentColumns:
    """Columns common to the ``quotations`` and ``invoices`` tables."""

    customer_name: Mapped[str] = mapped_column(String(255), nullable=False)
    customer_email: Mapped[str] = mapped_column(String(255), default="")
    customer_address: Mapped[str] = mapped_column(Text, default="")
    customer_contact_person: Mapped[str | None] = mapped_column(String(255), nullable=True)
    customer_phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    customer_gstin: Mapped[str | None] = mapped_column(String(15), nullable=True)
    po_number: Mapped[str | None] = mapped_column(String(100), nullable=True)

    # Inputs
    labor_cost: Mapped[Decimal] = mapped_column(nullable=False)
    discount_percent: Mapped[Decimal] = mapped_column(nullable=False)
    tax_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False)
    labor_tax_rate: Mapped[Decimal] = mapped_column(nullable=False)

    # Cached breakdown
    items_subtotal: Mapped[Decimal] = mapped_column(nullable=False)
    subtotal_with_labor: Mapped[Decimal] = mapped_column(nullable=False)
    discount_amount: Mapped[Decimal] = mapped_column(nullable=False)
    amount_after_discount: Mapped[Decimal] = mapped_column(nullable=False)
    tax_amount: Mapped[Decimal] = mapped_column(nullable=False)
    labor_taxable_amount: Mapped[Decimal] = mapped_column(nullable=False)
    labor_tax_amount: Mapped[Decimal] = mapped_column(nullable=False)
    grand_total: Mapped[Decimal] = mapped_column(nullable=False)

    status: Mapped[str] = mapped_column(String(50), nullable=False)


class PricedLineColumns:
    """Columns common to the ``quotation_lines`` and ``invoice_lines`` tables."""

    line_number: Mapped[int] = mapped_column(nullable=False)
    item_id: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    quantity: Mapped[Decimal] = mapped_column(nullable=False)
    unit: Mapped[str] = mapped_column(String(50), default="nos")
    unit_price: Mapped[Decimal] = mapped_column(nullable=False)
    tax_rate: Mapped[Decimal] = mapped_column(nullable=False)
    serial_numbers: Mapped[list] = mapped_column(JSON, default=list)
    # NULL when the document is a bill of supply
    taxable_amount: Mapped[Decimal | None] = mapped_column(nullable=True)
    line_tax_amount: Mapped[Decimal | None] = mapped_column(nullable=True)

    def to_line_item(self) -> LineItem:
        return LineItem(
            id=self.item_id,
            description=self.description,
            quantity=self.quantity,
            unit_price=self.unit_price,
            tax_rate=self.tax_rate,
            unit=self.unit,
            serial_numbers=tuple(self.serial_numbers or ()),
        )

    def to_tax_line(self) -> TaxLine | None:
        if self.line_tax_amount is None:
            return None
        return TaxLine(
            item_id=self.item_id,
            taxable_amount=self.taxable_amount,
            tax_rate=self.tax_rate,
            tax_amount=self.line_tax_amount,
        )


def line_columns(item: LineItem, line_number: int, totals: TotalsBreakdown) -> dict:
    """Column values for one line, including its cached tax."""
    tax_line = next((t for t in totals.tax_lines if t.item_id == item.id), None)
    return {
        "line_number": line_number,
        "item_id": item.id,
        "description": item.description,
        "quantity": item.quantity,
        "unit": item.unit,
        "unit_price": item.unit_price,
        "tax_rate": item.applied_tax_rate,
        "serial_numbers": list(item.serial_numbers),
        "taxable_amount": tax_line.taxable_amount if tax_line else None,
        "line_tax_amount": tax_line.tax_amount if tax_line else None,
    }


def document_columns(
    customer: CustomerInfo,
    cost: CostParameters,
    tax_enabled: bool,
    labor_tax_rate: Decimal,
    totals: TotalsBreakdown,
) -> dict:
    """Column values for the document row."""
    labor_line = next(
        (t for t in totals.tax_lines if t.item_id == LABOR_TAX_LINE_ID), None
    )
    return {
        "customer_name": customer.name,
        "customer_email": customer.email,
        "customer_address": customer.address,
        "customer_contact_person": customer.contact_person,
        "customer_phone": customer.phone,
        "customer_gstin": customer.gstin,
        "labor_cost": cost.labor_cost,
        "discount_percent": cost.discount_percent,
        "tax_enabled": tax_enabled,
        "labor_tax_rate": labor_tax_rate,
        "items_subtotal": totals.items_subtotal,
        "subtotal_with_labor": totals.subtotal_with_labor,
        "discount_amount": totals.discount_amount,
        "amount_after_discount": totals.amount_after_discount,
        "tax_amount": totals.tax_amount,
        "labor_taxable_amount": labor_line.taxable_amount if labor_line else _ZERO,
        "labor_tax_amount": totals.labor_tax_amount,
        "grand_total": totals.grand_total,
    }


def customer_from_row(row: PricedDocumentColumns) -> CustomerInfo:
    return CustomerInfo(
        name=row.customer_name,
        email=row.customer_email or "",
        address=row.customer_address or "",
        contact_person=row.customer_contact_person,
        phone=row.customer_phone,
        gstin=row.customer_gstin,
    )


def cost_from_row(row: PricedDocumentColumns) -> CostParameters:
    return CostParameters(
        labor_cost=row.labor_cost,
        discount_percent=row.discount_percent,
    )


def breakdown_from_row(
    row: PricedDocumentColumns,
    lines: Sequence[PricedLineColumns],
) -> TotalsBreakdown:
    """Rebuild the cached breakdown exactly as it was stored."""
    tax_lines: list[TaxLine] = []
    if row.tax_enabled:
        tax_lines = [t for t in (line.to_tax_line() for line in lines) if t is not None]
        if row.labor_cost > _ZERO:
            tax_lines.append(TaxLine(
                item_id=LABOR_TAX_LINE_ID,
                taxable_amount=row.labor_taxable_amount,
                tax_rate=row.labor_tax_rate,
                tax_amount=row.labor_tax_amount,
            ))
    return TotalsBreakdown(
        items_subtotal=row.items_subtotal,
        subtotal_with_labor=row.subtotal_with_labor,
        discount_amount=row.discount_amount,
        amount_after_discount=row.amount_after_discount,
        tax_amount=row.tax_amount,
        grand_total=row.grand_total,
        labor_tax_amount=row.labor_tax_amount,
        tax_lines=tuple(tax_lines),
    )
