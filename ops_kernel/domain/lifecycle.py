"""
Document lifecycle state machines (``ops_kernel.domain.lifecycle``).

Responsibility
--------------
Status enums and transition tables for quotations, invoices and purchase
orders.  The tables are the only source of truth for which status changes
are legal; services call ``require_transition`` before persisting a new
status.

Architecture position
---------------------
**Kernel domain layer** -- pure value objects.  ZERO I/O.

Invariants enforced
-------------------
* Terminal states have no outgoing edges.
* Invoice: Pending -> Partially Paid -> Paid is monotonic while payments
  accumulate; Cancelled is reachable only from Pending or Partially Paid.
* Quotation: Draft -> Sent -> Approved | Rejected.
* Purchase order: Pending -> Completed | Cancelled.
"""

from __future__ import annotations

from enum import Enum

from ops_kernel.exceptions import InvalidTransitionError


# =========================================================================
# Invoice
# =========================================================================


class InvoiceStatus(str, Enum):
    """Invoice lifecycle states."""

    PENDING = "Pending"
    PARTIALLY_PAID = "Partially Paid"
    PAID = "Paid"
    CANCELLED = "Cancelled"


INVOICE_TRANSITIONS: dict[InvoiceStatus, frozenset[InvoiceStatus]] = {
    InvoiceStatus.PENDING: frozenset({
        InvoiceStatus.PARTIALLY_PAID,
        InvoiceStatus.PAID,
        InvoiceStatus.CANCELLED,
    }),
    InvoiceStatus.PARTIALLY_PAID: frozenset({
        InvoiceStatus.PAID,
        InvoiceStatus.CANCELLED,
    }),
    InvoiceStatus.PAID: frozenset(),
    InvoiceStatus.CANCELLED: frozenset(),
}

TERMINAL_INVOICE_STATUSES: frozenset[InvoiceStatus] = frozenset({
    InvoiceStatus.PAID,
    InvoiceStatus.CANCELLED,
})


# =========================================================================
# Quotation
# =========================================================================


class QuotationStatus(str, Enum):
    """Quotation lifecycle states."""

    DRAFT = "Draft"
    SENT = "Sent"
    APPROVED = "Approved"
    REJECTED = "Rejected"


QUOTATION_TRANSITIONS: dict[QuotationStatus, frozenset[QuotationStatus]] = {
    QuotationStatus.DRAFT: frozenset({QuotationStatus.SENT}),
    QuotationStatus.SENT: frozenset({
        QuotationStatus.APPROVED,
        QuotationStatus.REJECTED,
    }),
    QuotationStatus.APPROVED: frozenset(),
    QuotationStatus.REJECTED: frozenset(),
}


# =========================================================================
# Purchase order
# =========================================================================


class PurchaseOrderStatus(str, Enum):
    """Purchase order lifecycle states."""

    PENDING = "Pending"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


PURCHASE_ORDER_TRANSITIONS: dict[PurchaseOrderStatus, frozenset[PurchaseOrderStatus]] = {
    PurchaseOrderStatus.PENDING: frozenset({
        PurchaseOrderStatus.COMPLETED,
        PurchaseOrderStatus.CANCELLED,
    }),
    PurchaseOrderStatus.COMPLETED: frozenset(),
    PurchaseOrderStatus.CANCELLED: frozenset(),
}


# =========================================================================
# Transition checks
# =========================================================================


def can_transition(table: dict, from_status: Enum, to_status: Enum) -> bool:
    """True if ``from_status -> to_status`` is an edge in ``table``."""
    return to_status in table.get(from_status, frozenset())


def is_terminal(table: dict, status: Enum) -> bool:
    """True if ``status`` has no outgoing edges."""
    return not table.get(status, frozenset())


def require_transition(
    table: dict,
    from_status: Enum,
    to_status: Enum,
    document_type: str,
) -> None:
    """Raise InvalidTransitionError unless the transition is legal."""
    if not can_transition(table, from_status, to_status):
        raise InvalidTransitionError(
            document_type=document_type,
            from_status=from_status.value,
            to_status=to_status.value,
        )
