"""
Purchasing Domain Models (``ops_modules.purchasing.models``).

Responsibility
--------------
Frozen dataclass value objects for purchase orders raised to suppliers.

Architecture position
---------------------
**Modules layer** -- pure data definitions with ZERO I/O.

Invariants enforced
-------------------
* All models are ``frozen=True``.
* ``total`` is the exact sum of ``quantity * unit_price`` over the ordered
  lines; purchase orders carry no tax, discount or labor.
* A stored order holds only lines with positive quantity and price.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from uuid import UUID

from ops_kernel.domain.lifecycle import PurchaseOrderStatus
from ops_kernel.domain.validation import to_decimal


@dataclass(frozen=True)
class PurchaseOrderLine:
    """One item ordered from a supplier."""

    item_id: str
    name: str
    quantity: Decimal
    unit_price: Decimal

    def __post_init__(self) -> None:
        for name in ("quantity", "unit_price"):
            converted = to_decimal(getattr(self, name))
            if converted is not None:
                object.__setattr__(self, name, converted)

    @property
    def amount(self) -> Decimal:
        return self.quantity * self.unit_price

    @property
    def is_ordered(self) -> bool:
        """A line counts only with a positive quantity at a positive price."""
        quantity = to_decimal(self.quantity)
        unit_price = to_decimal(self.unit_price)
        return (
            quantity is not None
            and unit_price is not None
            and quantity > 0
            and unit_price > 0
        )


@dataclass(frozen=True)
class PurchaseOrderDraft:
    """
    Everything needed to raise a purchase order.

    Lines left at zero quantity or zero price are not ordered; a draft built
    from a supplier's catalogue starts with every item at quantity zero.
    """

    supplier: str
    lines: tuple[PurchaseOrderLine, ...]
    order_date: date | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "lines", tuple(self.lines))

    @property
    def ordered_lines(self) -> tuple[PurchaseOrderLine, ...]:
        return tuple(line for line in self.lines if line.is_ordered)


@dataclass(frozen=True)
class PurchaseOrder:
    """A stored purchase order."""

    id: UUID
    po_number: str
    supplier: str
    order_date: date
    lines: tuple[PurchaseOrderLine, ...] = field(default_factory=tuple)
    total: Decimal = Decimal("0")
    status: PurchaseOrderStatus = PurchaseOrderStatus.PENDING
    received_date: date | None = None
