"""
Comparison Engine - Report how an invoice differs from its quotation.

Pure functions with deterministic behavior. No I/O.

Items are matched by id.  Discrepancies are reported in a stable order:
quotation items in quotation order (missing or changed), then items that
only appear on the invoice in invoice order, then labor cost, discount and
grand total.  Numeric fields compare by value, so ``18`` and ``18.00`` are
equal.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Sequence

from ops_engines.totals import CostParameters, LineItem


class DiscrepancyKind(str, Enum):
    """What kind of difference was found."""

    ITEM_MISSING = "item_missing"  # on the quotation, not the invoice
    ITEM_ADDED = "item_added"  # on the invoice, not the quotation
    ITEM_CHANGED = "item_changed"
    LABOR_COST = "labor_cost"
    DISCOUNT = "discount"
    GRAND_TOTAL = "grand_total"


@dataclass(frozen=True)
class PricedDocument:
    """The priced content of a quotation or invoice."""

    reference: str
    items: tuple[LineItem, ...]
    cost: CostParameters
    grand_total: Decimal

    def __post_init__(self) -> None:
        object.__setattr__(self, "items", tuple(self.items))


@dataclass(frozen=True)
class Discrepancy:
    """One difference between the two documents."""

    kind: DiscrepancyKind
    field: str
    quotation_value: str | None = None
    invoice_value: str | None = None
    item_id: str | None = None

    def describe(self) -> str:
        if self.kind == DiscrepancyKind.ITEM_MISSING:
            return f"Item {self.item_id} ({self.quotation_value}) is quoted but not invoiced"
        if self.kind == DiscrepancyKind.ITEM_ADDED:
            return f"Item {self.item_id} ({self.invoice_value}) is invoiced but was not quoted"
        label = self.field.replace("_", " ")
        if self.item_id is not None:
            label = f"Item {self.item_id} {label}"
        else:
            label = label[:1].upper() + label[1:]
        return f"{label}: quoted {self.quotation_value}, invoiced {self.invoice_value}"


@dataclass(frozen=True)
class ComparisonReport:
    """All discrepancies between a quotation and an invoice."""

    quotation_reference: str
    invoice_reference: str
    discrepancies: tuple[Discrepancy, ...] = field(default_factory=tuple)

    @property
    def matches(self) -> bool:
        return not self.discrepancies

    def summary_lines(self) -> list[str]:
        if self.matches:
            return [
                f"Invoice {self.invoice_reference} matches quotation "
                f"{self.quotation_reference} exactly."
            ]
        lines = [
            f"Invoice {self.invoice_reference} differs from quotation "
            f"{self.quotation_reference} in {len(self.discrepancies)} place(s):"
        ]
        lines.extend(f"- {d.describe()}" for d in self.discrepancies)
        return lines


_ITEM_FIELDS = ("description", "quantity", "unit_price", "tax_rate")


def _item_changes(quoted: LineItem, invoiced: LineItem) -> list[Discrepancy]:
    changes: list[Discrepancy] = []
    for name in _ITEM_FIELDS:
        q_val = getattr(quoted, name)
        i_val = getattr(invoiced, name)
        if name == "description":
            differs = q_val.strip() != i_val.strip()
        else:
            differs = q_val != i_val
        if differs:
            changes.append(Discrepancy(
                kind=DiscrepancyKind.ITEM_CHANGED,
                field=name,
                quotation_value=str(q_val),
                invoice_value=str(i_val),
                item_id=quoted.id,
            ))
    return changes


def compare_documents(
    quotation: PricedDocument,
    invoice: PricedDocument,
) -> ComparisonReport:
    """
    Compare an invoice against the quotation it was raised from.

    Returns:
        ComparisonReport; ``matches`` is True when nothing differs.
    """
    discrepancies: list[Discrepancy] = []
    invoiced_by_id = {item.id: item for item in invoice.items}
    quoted_ids = {item.id for item in quotation.items}

    for quoted in quotation.items:
        invoiced = invoiced_by_id.get(quoted.id)
        if invoiced is None:
            discrepancies.append(Discrepancy(
                kind=DiscrepancyKind.ITEM_MISSING,
                field="item",
                quotation_value=quoted.description,
                item_id=quoted.id,
            ))
        else:
            discrepancies.extend(_item_changes(quoted, invoiced))

    for invoiced in invoice.items:
        if invoiced.id not in quoted_ids:
            discrepancies.append(Discrepancy(
                kind=DiscrepancyKind.ITEM_ADDED,
                field="item",
                invoice_value=invoiced.description,
                item_id=invoiced.id,
            ))

    scalar_checks: Sequence[tuple[DiscrepancyKind, str, Decimal, Decimal]] = (
        (DiscrepancyKind.LABOR_COST, "labor_cost",
         quotation.cost.labor_cost, invoice.cost.labor_cost),
        (DiscrepancyKind.DISCOUNT, "discount_percent",
         quotation.cost.discount_percent, invoice.cost.discount_percent),
        (DiscrepancyKind.GRAND_TOTAL, "grand_total",
         quotation.grand_total, invoice.grand_total),
    )
    for kind, name, q_val, i_val in scalar_checks:
        if q_val != i_val:
            discrepancies.append(Discrepancy(
                kind=kind,
                field=name,
                quotation_value=str(q_val),
                invoice_value=str(i_val),
            ))

    return ComparisonReport(
        quotation_reference=quotation.reference,
        invoice_reference=invoice.reference,
        discrepancies=tuple(discrepancies),
    )
