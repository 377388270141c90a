"""
Purchasing Module.

Purchase orders raised to suppliers and received into stock.
"""

from ops_modules.purchasing.models import PurchaseOrder, PurchaseOrderDraft, PurchaseOrderLine

__all__ = [
    "PurchaseOrder",
    "PurchaseOrderDraft",
    "PurchaseOrderLine",
]
