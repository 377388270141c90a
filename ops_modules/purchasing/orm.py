"""
Purchasing ORM Models (``ops_modules.purchasing.orm``).

Responsibility
--------------
SQLAlchemy persistence models for purchase orders.  Maps the frozen
``PurchaseOrder`` dataclass to the ``purchase_orders`` and
``purchase_order_lines`` tables.

Architecture position
---------------------
**Modules layer** -- persistence.  Imports from ``ops_kernel.db.base``
and sibling ``models.py``.  MUST NOT be imported by ``ops_kernel``.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy import Date, ForeignKey, Index, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ops_kernel.db.base import TrackedBase


class PurchaseOrderModel(TrackedBase):
    """
    ORM model for purchase orders.

    Guarantees:
        - po_number is unique (uq_purchase_orders_po_number).
        - received_date is set only when the order is Completed.
    """

    __tablename__ = "purchase_orders"

    __table_args__ = (
        UniqueConstraint("po_number", name="uq_purchase_orders_po_number"),
        Index("idx_purchase_orders_status", "status"),
        Index("idx_purchase_orders_supplier", "supplier"),
    )

    po_number: Mapped[str] = mapped_column(String(50), nullable=False)
    supplier: Mapped[str] = mapped_column(String(255), nullable=False)
    order_date: Mapped[date] = mapped_column(Date, nullable=False)
    total: Mapped[Decimal] = mapped_column(nullable=False)
    status: Mapped[str] = mapped_column(String(50), nullable=False)
    received_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    lines: Mapped[list["PurchaseOrderLineModel"]] = relationship(
        back_populates="purchase_order",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="PurchaseOrderLineModel.line_number",
    )

    def to_dto(self):
        """Convert ORM model to frozen dataclass."""
        from ops_kernel.domain.lifecycle import PurchaseOrderStatus
        from ops_modules.purchasing.models import PurchaseOrder

        return PurchaseOrder(
            id=self.id,
            po_number=self.po_number,
            supplier=self.supplier,
            order_date=self.order_date,
            lines=tuple(line.to_dto() for line in self.lines),
            total=self.total,
            status=PurchaseOrderStatus(self.status),
            received_date=self.received_date,
        )

    @classmethod
    def from_dto(cls, dto, created_by_id: UUID) -> "PurchaseOrderModel":
        """Create ORM model (with lines) from frozen dataclass."""
        model = cls(
            id=dto.id,
            po_number=dto.po_number,
            supplier=dto.supplier,
            order_date=dto.order_date,
            total=dto.total,
            status=dto.status.value,
            received_date=dto.received_date,
            created_by_id=created_by_id,
        )
        model.lines = [
            PurchaseOrderLineModel(
                line_number=number,
                item_id=line.item_id,
                name=line.name,
                quantity=line.quantity,
                unit_price=line.unit_price,
                created_by_id=created_by_id,
            )
            for number, line in enumerate(dto.lines, start=1)
        ]
        return model

    def __repr__(self) -> str:
        return f"<PurchaseOrderModel {self.po_number}: {self.status}>"


class PurchaseOrderLineModel(TrackedBase):
    """ORM model for purchase order lines."""

    __tablename__ = "purchase_order_lines"

    __table_args__ = (
        UniqueConstraint(
            "purchase_order_id", "line_number", name="uq_purchase_order_lines_line_number"
        ),
    )

    purchase_order_id: Mapped[UUID] = mapped_column(
        ForeignKey("purchase_orders.id"), nullable=False
    )
    line_number: Mapped[int] = mapped_column(nullable=False)
    item_id: Mapped[str] = mapped_column(String(100), nullable=False)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    quantity: Mapped[Decimal] = mapped_column(nullable=False)
    unit_price: Mapped[Decimal] = mapped_column(nullable=False)

    purchase_order: Mapped["PurchaseOrderModel"] = relationship(back_populates="lines")

    def to_dto(self):
        from ops_modules.purchasing.models import PurchaseOrderLine

        return PurchaseOrderLine(
            item_id=self.item_id,
            name=self.name,
            quantity=self.quantity,
            unit_price=self.unit_price,
        )
