"""
Quotation ORM Models (``ops_modules.quotations.orm``).

Responsibility
--------------
SQLAlchemy persistence models for quotations.  Maps the frozen
``Quotation`` dataclass to the ``quotations`` and ``quotation_lines``
tables.

Architecture position
---------------------
**Modules layer** -- persistence.  Imports from ``ops_kernel.db.base``
and sibling ``models.py``.  MUST NOT be imported by ``ops_kernel``.
"""

from __future__ import annotations

from datetime import date
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


class QuotationModel(PricedDocumentColumns, TrackedBase):
    """
    ORM model for quotations.

    Guarantees:
        - quote_number is unique (uq_quotations_quote_number).
        - The breakdown columns hold the totals computed at creation.
        - status stored as the QuotationStatus display value.
    """

    __tablename__ = "quotations"

    __table_args__ = (
        UniqueConstraint("quote_number", name="uq_quotations_quote_number"),
        Index("idx_quotations_status", "status"),
        Index("idx_quotations_quote_date", "quote_date"),
    )

    quote_number: Mapped[str] = mapped_column(String(50), nullable=False)
    quote_date: Mapped[date] = mapped_column(Date, nullable=False)

    lines: Mapped[list["QuotationLineModel"]] = relationship(
        back_populates="quotation",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="QuotationLineModel.line_number",
    )

    def to_dto(self):
        """Convert ORM model to frozen dataclass."""
        from ops_kernel.domain.lifecycle import QuotationStatus
        from ops_modules.quotations.models import Quotation

        return Quotation(
            id=self.id,
            quote_number=self.quote_number,
            customer=customer_from_row(self),
            quote_date=self.quote_date,
            items=tuple(line.to_line_item() for line in self.lines),
            cost=cost_from_row(self),
            tax_enabled=self.tax_enabled,
            labor_tax_rate=self.labor_tax_rate,
            totals=breakdown_from_row(self, self.lines),
            status=QuotationStatus(self.status),
            po_number=self.po_number,
        )

    @classmethod
    def from_dto(cls, dto, created_by_id: UUID) -> "QuotationModel":
        """Create ORM model (with lines) from frozen dataclass."""
        model = cls(
            id=dto.id,
            quote_number=dto.quote_number,
            quote_date=dto.quote_date,
            po_number=dto.po_number,
            status=dto.status.value,
            created_by_id=created_by_id,
            **document_columns(
                dto.customer, dto.cost, dto.tax_enabled, dto.labor_tax_rate, dto.totals
            ),
        )
        model.lines = [
            QuotationLineModel(
                created_by_id=created_by_id,
                **line_columns(item, number, dto.totals),
            )
            for number, item in enumerate(dto.items, start=1)
        ]
        return model

    def __repr__(self) -> str:
        return f"<QuotationModel {self.quote_number}: {self.status}>"


class QuotationLineModel(PricedLineColumns, TrackedBase):
    """
    ORM model for quotation line items.

    Guarantees:
        - (quotation_id, line_number) is unique.
        - (quotation_id, item_id) is unique.
    """

    __tablename__ = "quotation_lines"

    __table_args__ = (
        UniqueConstraint(
            "quotation_id", "line_number", name="uq_quotation_lines_line_number"
        ),
        UniqueConstraint(
            "quotation_id", "item_id", name="uq_quotation_lines_item_id"
        ),
    )

    quotation_id: Mapped[UUID] = mapped_column(
        ForeignKey("quotations.id"), nullable=False
    )

    quotation: Mapped["QuotationModel"] = relationship(back_populates="lines")

    def __repr__(self) -> str:
        return f"<QuotationLineModel {self.line_number}: {self.item_id}>"
