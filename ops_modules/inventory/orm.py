"""
Inventory ORM Models (``ops_modules.inventory.orm``).

Responsibility
--------------
SQLAlchemy persistence model for the stock catalogue.  Maps the frozen
``InventoryItem`` dataclass to the ``inventory_items`` table.

Architecture position
---------------------
**Modules layer** -- persistence.  Imports from ``ops_kernel.db.base``
and sibling ``models.py``.  MUST NOT be imported by ``ops_kernel``.
"""

from __future__ import annotations

from decimal import Decimal
from uuid import UUID

from sqlalchemy import Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from ops_kernel.db.base import TrackedBase


class InventoryItemModel(TrackedBase):
    """
    ORM model for catalogue items.

    Guarantees:
        - item_code is unique (uq_inventory_items_item_code).
    """

    __tablename__ = "inventory_items"

    __table_args__ = (
        UniqueConstraint("item_code", name="uq_inventory_items_item_code"),
        Index("idx_inventory_items_category", "category"),
        Index("idx_inventory_items_supplier", "supplier"),
    )

    item_code: Mapped[str] = mapped_column(String(50), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    category: Mapped[str] = mapped_column(String(50), nullable=False)
    price: Mapped[Decimal] = mapped_column(nullable=False)
    stock: Mapped[int] = mapped_column(nullable=False, default=0)
    supplier: Mapped[str | None] = mapped_column(String(255), nullable=True)
    part_number: Mapped[str | None] = mapped_column(String(100), nullable=True)

    def to_dto(self):
        """Convert ORM model to frozen dataclass."""
        from ops_modules.inventory.models import InventoryCategory, InventoryItem

        return InventoryItem(
            id=self.id,
            item_code=self.item_code,
            name=self.name,
            category=InventoryCategory(self.category),
            price=self.price,
            stock=self.stock,
            supplier=self.supplier,
            part_number=self.part_number,
        )

    @classmethod
    def from_dto(cls, dto, created_by_id: UUID) -> "InventoryItemModel":
        return cls(
            id=dto.id,
            item_code=dto.item_code,
            name=dto.name,
            category=dto.category.value,
            price=dto.price,
            stock=dto.stock,
            supplier=dto.supplier,
            part_number=dto.part_number,
            created_by_id=created_by_id,
        )

    def __repr__(self) -> str:
        return f"<InventoryItemModel {self.item_code}: {self.name}>"
