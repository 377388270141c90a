"""
Quotation Domain Models (``ops_modules.quotations.models``).

Responsibility
--------------
Frozen dataclass value objects for quotations: the draft a user fills in
and the stored quotation with its cached breakdown.

Architecture position
---------------------
**Modules layer** -- pure data definitions with ZERO I/O.  Consumed by
``QuotationService`` and returned to callers.

Invariants enforced
-------------------
* All models are ``frozen=True``.
* Line items and cost parameters never change after creation; only
  ``status`` evolves.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from uuid import UUID

from ops_engines.totals import CostParameters, LineItem, TotalsBreakdown
from ops_kernel.domain.lifecycle import QuotationStatus
from ops_modules._document_helpers import CustomerInfo


@dataclass(frozen=True)
class QuotationDraft:
    """
    Everything needed to create a quotation.

    ``tax_enabled`` None means the configured default.  ``quote_date`` None
    means today.
    """

    customer: CustomerInfo
    items: tuple[LineItem, ...]
    cost: CostParameters = field(default_factory=CostParameters)
    tax_enabled: bool | None = None
    quote_date: date | None = None
    po_number: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "items", tuple(self.items))


@dataclass(frozen=True)
class Quotation:
    """A stored quotation."""

    id: UUID
    quote_number: str
    customer: CustomerInfo
    quote_date: date
    items: tuple[LineItem, ...]
    cost: CostParameters
    tax_enabled: bool
    labor_tax_rate: Decimal
    totals: TotalsBreakdown
    status: QuotationStatus = QuotationStatus.DRAFT
    po_number: str | None = None

    @property
    def grand_total(self) -> Decimal:
        return self.totals.grand_total
