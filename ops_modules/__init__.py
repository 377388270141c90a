"""
Operations Hub Modules.

Thin orchestration layers over the kernel and the engines.
Each module contains:
- Domain models (drafts and stored documents)
- ORM models (persistence, ``to_dto`` / ``from_dto``)
- A service that owns the transaction boundary

Modules:
- Quotations: priced offers, Draft -> Sent -> Approved | Rejected
- Invoices: billing, payments, comparison with the source quotation
- Purchasing: purchase orders to suppliers
- Inventory: the stock catalogue that seeds purchase orders

Actual computation lives in ``ops_engines``.
"""

from ops_modules import inventory, invoices, purchasing, quotations

__all__ = [
    "inventory",
    "invoices",
    "purchasing",
    "quotations",
]
