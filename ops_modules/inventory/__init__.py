"""
Inventory Module.

The stock catalogue: items, their suppliers and on-hand stock.
"""

from ops_modules.inventory.models import InventoryCategory, InventoryItem, InventoryItemDraft

__all__ = [
    "InventoryCategory",
    "InventoryItem",
    "InventoryItemDraft",
]
