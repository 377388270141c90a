"""
Module: ops_engines
Responsibility:
    Package entrypoint that re-exports the public symbols of the pure
    calculation engines.  This is the import surface for ops_modules and
    for rendering code that needs a document's breakdown.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import ops_kernel.domain and ops_kernel.exceptions.
    MUST NOT import ops_modules or ops_kernel.db.

Invariants enforced:
    - Purity: engines never read the clock, never log and never touch a
      database.  Dates arrive as parameters.
    - Decimal-only arithmetic: floats are converted through ``str()`` at
      the boundary and never used in a calculation.
    - Determinism: identical inputs always produce identical outputs.

Failure modes:
    - ValidationFailedError for out-of-range or non-numeric inputs.
    - InvalidPaymentAmountError for a payment that is not positive.

Usage:
    from ops_engines.totals import CostParameters, LineItem, compute_totals
    from ops_engines.payment_ledger import Payment, apply_payment
    from ops_engines.comparison import PricedDocument, compare_documents
"""

from ops_engines.comparison import (
    ComparisonReport,
    Discrepancy,
    DiscrepancyKind,
    PricedDocument,
    compare_documents,
)
from ops_engines.payment_ledger import (
    LedgerSummary,
    Payment,
    PaymentApplication,
    PaymentMethod,
    apply_payment,
    fold_payments,
    recommend_status,
    summarize_ledger,
)
from ops_engines.totals import (
    DEFAULT_LABOR_TAX_RATE,
    LABOR_TAX_LINE_ID,
    CostParameters,
    LineItem,
    TaxLine,
    TotalsBreakdown,
    compute_totals,
    round_grand_total,
    validate_totals_input,
)

__all__ = [
    # Totals
    "DEFAULT_LABOR_TAX_RATE",
    "LABOR_TAX_LINE_ID",
    "CostParameters",
    "LineItem",
    "TaxLine",
    "TotalsBreakdown",
    "compute_totals",
    "round_grand_total",
    "validate_totals_input",
    # Payment ledger
    "LedgerSummary",
    "Payment",
    "PaymentApplication",
    "PaymentMethod",
    "apply_payment",
    "fold_payments",
    "recommend_status",
    "summarize_ledger",
    # Comparison
    "ComparisonReport",
    "Discrepancy",
    "DiscrepancyKind",
    "PricedDocument",
    "compare_documents",
]
