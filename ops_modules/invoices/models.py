"""
Invoice Domain Models (``ops_modules.invoices.models``).

Responsibility
--------------
Frozen dataclass value objects for invoices: the draft, the stored invoice
with its cached breakdown and its append-only payment history.

Architecture position
---------------------
**Modules layer** -- pure data definitions with ZERO I/O.  Consumed by
``InvoiceService`` and returned to callers.

Invariants enforced
-------------------
* All models are ``frozen=True``.
* ``payments`` is in recording order and only ever grows.
* ``amount_paid`` / ``amount_due`` are derived from ``payments`` and the
  cached grand total by the payment ledger engine, never stored.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from uuid import UUID

from ops_engines.payment_ledger import Payment, fold_payments
from ops_engines.totals import CostParameters, LineItem, TotalsBreakdown
from ops_kernel.domain.lifecycle import InvoiceStatus
from ops_modules._document_helpers import CustomerInfo


@dataclass(frozen=True)
class InvoiceDraft:
    """
    Everything needed to create an invoice directly.

    ``tax_enabled`` None means the configured default; False produces a bill
    of supply.  ``invoice_date`` None means today.  ``quote_number`` links
    the invoice to an existing quotation without copying it.  Lines with no
    ``tax_rate`` take the configured default item rate.
    """

    customer: CustomerInfo
    items: tuple[LineItem, ...]
    cost: CostParameters = field(default_factory=CostParameters)
    tax_enabled: bool | None = None
    invoice_date: date | None = None
    quote_number: str | None = None
    po_number: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "items", tuple(self.items))


@dataclass(frozen=True)
class Invoice:
    """A stored invoice."""

    id: UUID
    invoice_number: str
    customer: CustomerInfo
    invoice_date: date
    items: tuple[LineItem, ...]
    cost: CostParameters
    tax_enabled: bool
    labor_tax_rate: Decimal
    totals: TotalsBreakdown
    status: InvoiceStatus = InvoiceStatus.PENDING
    payments: tuple[Payment, ...] = ()
    quote_number: str | None = None
    po_number: str | None = None

    @property
    def grand_total(self) -> Decimal:
        return self.totals.grand_total

    @property
    def amount_paid(self) -> Decimal:
        return fold_payments(self.payments)

    @property
    def amount_due(self) -> Decimal:
        """Negative when the customer has overpaid."""
        return self.grand_total - self.amount_paid

    @property
    def document_title(self) -> str:
        return "Tax Invoice" if self.tax_enabled else "Bill of Supply"
