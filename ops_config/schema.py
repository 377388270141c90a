"""
HubConfig schema.

The typed, frozen form of a configuration set.  YAML files are parsed into
these types by the loader; ``get_active_config()`` returns a ``HubConfig``.
Amounts and rates are Decimal, never float.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

# ---------------------------------------------------------------------------
# Tax
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TaxPolicy:
    """How GST is applied to new documents."""

    enabled_by_default: bool = True
    labor_tax_rate: Decimal = Decimal("18")
    default_item_tax_rate: Decimal = Decimal("18")


# ---------------------------------------------------------------------------
# Document numbering
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class NumberingPolicy:
    """Prefixes and zero-padding for ``<PREFIX>-<YYYY>-<NNNN>`` numbers."""

    quotation_prefix: str = "QT"
    invoice_prefix: str = "INV"
    purchase_order_prefix: str = "PO"
    width: int = 4


# ---------------------------------------------------------------------------
# Payments
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PaymentPolicy:
    """Rules for recording payments against invoices."""

    allow_overpayment: bool = True
    lock_timeout_seconds: float = 10.0


# ---------------------------------------------------------------------------
# Root
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class HubConfig:
    """A complete, validated configuration set."""

    config_id: str
    version: int
    currency: str = "INR"
    tax: TaxPolicy = field(default_factory=TaxPolicy)
    numbering: NumberingPolicy = field(default_factory=NumberingPolicy)
    payments: PaymentPolicy = field(default_factory=PaymentPolicy)
    checksum: str = ""
