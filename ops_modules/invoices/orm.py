"""
Invoice ORM Models (``ops_modules.invoices.orm``).

Responsibility
--------------
SQLAlchemy persistence models for invoices.  Maps the frozen ``Invoice``
dataclass to the ``invoices``, ``invoice_lines`` and ``invoice_payments``
tables.

Architecture position
---------------------
**Modules layer** -- persistence.  Imports from ``ops_kernel.db.base``
and sibling ``models.py``.  MUST NOT be imported by ``ops_kernel``.

Invariants enforced
-------------------
* Payment rows are only ever inserted.  ``sequence`` records recording
  order and is unique per invoice.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy import Date, ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ops_kernel.db.base import TrackedBase
from ops_modules._document_orm import (
    PricedDocumentColumns,
    PricedLineColumns,
    breakdown_from_row,
    cost_from_row,
    customer_from_row,
    document_columns,
    line_columns,
)


# ---------------------------------------------------------------------------
# 1. InvoiceModel
# ---------------------------------------------------------------------------


class InvoiceModel(PricedDocumentColumns, TrackedBase):
    """
    ORM model for invoices.

    Guarantees:
        - invoice_number is unique (uq_invoices_invoice_number).
        - The breakdown columns hold the totals computed at creation (or
          copied from the source quotation).
        - status stored as the InvoiceStatus display value.
    """

    __tablename__ = "invoices"

    __table_args__ = (
        UniqueConstraint("invoice_number", name="uq_invoices_invoice_number"),
        Index("idx_invoices_status", "status"),
        Index("idx_invoices_quote_number", "quote_number"),
    )

    invoice_number: Mapped[str] = mapped_column(String(50), nullable=False)
    invoice_date: Mapped[date] = mapped_column(Date, nullable=False)
    quote_number: Mapped[str | None] = mapped_column(String(50), nullable=True)

    lines: Mapped[list["InvoiceLineModel"]] = relationship(
        back_populates="invoice",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="InvoiceLineModel.line_number",
    )

    payments: Mapped[list["InvoicePaymentModel"]] = relationship(
        back_populates="invoice",
        cascade="all",
        lazy="selectin",
        order_by="InvoicePaymentModel.sequence",
    )

    def to_dto(self):
        """Convert ORM model to frozen dataclass."""
        from ops_kernel.domain.lifecycle import InvoiceStatus
        from ops_modules.invoices.models import Invoice

        return Invoice(
            id=self.id,
            invoice_number=self.invoice_number,
            customer=customer_from_row(self),
            invoice_date=self.invoice_date,
            items=tuple(line.to_line_item() for line in self.lines),
            cost=cost_from_row(self),
            tax_enabled=self.tax_enabled,
            labor_tax_rate=self.labor_tax_rate,
            totals=breakdown_from_row(self, self.lines),
            status=InvoiceStatus(self.status),
            payments=tuple(payment.to_dto() for payment in self.payments),
            quote_number=self.quote_number,
            po_number=self.po_number,
        )

    @classmethod
    def from_dto(cls, dto, created_by_id: UUID) -> "InvoiceModel":
        """Create ORM model (with lines and payments) from frozen dataclass."""
        model = cls(
            id=dto.id,
            invoice_number=dto.invoice_number,
            invoice_date=dto.invoice_date,
            quote_number=dto.quote_number,
            po_number=dto.po_number,
            status=dto.status.value,
            created_by_id=created_by_id,
            **document_columns(
                dto.customer, dto.cost, dto.tax_enabled, dto.labor_tax_rate, dto.totals
            ),
        )
        model.lines = [
            InvoiceLineModel(
                created_by_id=created_by_id,
                **line_columns(item, number, dto.totals),
            )
            for number, item in enumerate(dto.items, start=1)
        ]
        model.payments = [
            InvoicePaymentModel.from_dto(payment, sequence, created_by_id)
            for sequence, payment in enumerate(dto.payments, start=1)
        ]
        return model

    def __repr__(self) -> str:
        return f"<InvoiceModel {self.invoice_number}: {self.status}>"


# ---------------------------------------------------------------------------
# 2. InvoiceLineModel
# ---------------------------------------------------------------------------


class InvoiceLineModel(PricedLineColumns, TrackedBase):
    """ORM model for invoice line items."""

    __tablename__ = "invoice_lines"

    __table_args__ = (
        UniqueConstraint(
            "invoice_id", "line_number", name="uq_invoice_lines_line_number"
        ),
        UniqueConstraint(
            "invoice_id", "item_id", name="uq_invoice_lines_item_id"
        ),
    )

    invoice_id: Mapped[UUID] = mapped_column(
        ForeignKey("invoices.id"), nullable=False
    )

    invoice: Mapped["InvoiceModel"] = relationship(back_populates="lines")

    def __repr__(self) -> str:
        return f"<InvoiceLineModel {self.line_number}: {self.item_id}>"


# ---------------------------------------------------------------------------
# 3. InvoicePaymentModel
# ---------------------------------------------------------------------------


class InvoicePaymentModel(TrackedBase):
    """
    ORM model for payments received against an invoice.

    Guarantees:
        - (invoice_id, sequence) is unique.
        - payment_ref is unique across all invoices.
    """

    __tablename__ = "invoice_payments"

    __table_args__ = (
        UniqueConstraint("invoice_id", "sequence", name="uq_invoice_payments_sequence"),
        UniqueConstraint("payment_ref", name="uq_invoice_payments_payment_ref"),
        Index("idx_invoice_payments_payment_date", "payment_date"),
    )

    invoice_id: Mapped[UUID] = mapped_column(
        ForeignKey("invoices.id"), nullable=False
    )
    sequence: Mapped[int] = mapped_column(nullable=False)
    payment_ref: Mapped[str] = mapped_column(String(100), nullable=False)
    amount: Mapped[Decimal] = mapped_column(nullable=False)
    payment_date: Mapped[date] = mapped_column(Date, nullable=False)
    method: Mapped[str] = mapped_column(String(20), nullable=False)

    invoice: Mapped["InvoiceModel"] = relationship(back_populates="payments")

    def to_dto(self):
        """Convert ORM model to frozen dataclass."""
        from ops_engines.payment_ledger import Payment, PaymentMethod

        return Payment(
            id=self.payment_ref,
            amount=self.amount,
            payment_date=self.payment_date,
            method=PaymentMethod(self.method),
        )

    @classmethod
    def from_dto(cls, dto, sequence: int, created_by_id: UUID) -> "InvoicePaymentModel":
        """Create ORM model from frozen dataclass."""
        return cls(
            sequence=sequence,
            payment_ref=dto.id,
            amount=dto.amount,
            payment_date=dto.payment_date,
            method=dto.method.value,
            created_by_id=created_by_id,
        )

    def __repr__(self) -> str:
        return f"<InvoicePaymentModel {self.payment_ref}: {self.amount}>"
