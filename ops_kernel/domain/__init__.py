"""
Pure domain layer.

Value objects, validation DTOs and document state machines with NO
dependencies on:
- ORM (SQLAlchemy)
- Database
- I/O

Everything here is immutable and deterministic.  ``clock.SystemClock`` is
the one sanctioned boundary for wall-clock time.
"""

from ops_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from ops_kernel.domain.currency import CurrencyInfo, CurrencyRegistry
from ops_kernel.domain.dtos import ValidationError, ValidationResult
from ops_kernel.domain.lifecycle import (
    INVOICE_TRANSITIONS,
    PURCHASE_ORDER_TRANSITIONS,
    QUOTATION_TRANSITIONS,
    TERMINAL_INVOICE_STATUSES,
    InvoiceStatus,
    PurchaseOrderStatus,
    QuotationStatus,
    can_transition,
    require_transition,
)

__all__ = [
    "Clock",
    "DeterministicClock",
    "SystemClock",
    "CurrencyInfo",
    "CurrencyRegistry",
    "ValidationError",
    "ValidationResult",
    "INVOICE_TRANSITIONS",
    "PURCHASE_ORDER_TRANSITIONS",
    "QUOTATION_TRANSITIONS",
    "TERMINAL_INVOICE_STATUSES",
    "InvoiceStatus",
    "PurchaseOrderStatus",
    "QuotationStatus",
    "can_transition",
    "require_transition",
]
