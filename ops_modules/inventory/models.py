"""
Inventory Domain Models (``ops_modules.inventory.models``).

Responsibility
--------------
Frozen dataclass value objects for the stock catalogue: the items the
business sells and buys, with their supplier and on-hand stock.

Architecture position
---------------------
**Modules layer** -- pure data definitions with ZERO I/O.

Invariants enforced
-------------------
* All models are ``frozen=True``.
* ``item_code`` is the business key (``CAM-001``); it is unique.
* ``stock`` is a whole number of units, never negative.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from uuid import UUID

from ops_kernel.domain.validation import to_decimal


class InventoryCategory(str, Enum):
    """Catalogue grouping used for filtering."""

    CAMERA = "Camera"
    DVR_NVR = "DVR/NVR"
    CABLE = "Cable"
    ACCESSORY = "Accessory"


@dataclass(frozen=True)
class InventoryItemDraft:
    """Everything needed to add an item to the catalogue."""

    item_code: str
    name: str
    category: InventoryCategory | str
    price: Decimal
    stock: int = 0
    supplier: str | None = None
    part_number: str | None = None

    def __post_init__(self) -> None:
        converted = to_decimal(self.price)
        if converted is not None:
            object.__setattr__(self, "price", converted)


@dataclass(frozen=True)
class InventoryItem:
    """A stored catalogue item."""

    id: UUID
    item_code: str
    name: str
    category: InventoryCategory
    price: Decimal
    stock: int
    supplier: str | None = None
    part_number: str | None = None
