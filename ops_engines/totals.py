"""
Totals Engine - Turn line items and cost parameters into a money breakdown.

Pure functions with deterministic behavior. No I/O, no logging.

One canonical calculation shared by quotation creation, invoice creation,
payment tracking and document rendering:

    items_subtotal        = sum(quantity * unit_price)
    subtotal_with_labor   = items_subtotal + labor_cost
    discount_amount       = subtotal_with_labor * discount_percent / 100
    amount_after_discount = subtotal_with_labor - discount_amount
    item tax              = quantity * unit_price * (1 - discount/100) * tax_rate/100
    labor tax             = labor_cost * (1 - discount/100) * labor_tax_rate/100
    grand_total           = round_half_up(amount_after_discount + tax_amount, 0)

The document-level discount is spread proportionally over every line before
tax.  Labor is taxed as a service at ``labor_tax_rate`` (configured, 18 by
default); pass ``labor_tax_rate=0`` for an items-only tax base.  Nothing is
rounded except the grand total.

Usage:
    from decimal import Decimal
    from ops_engines.totals import CostParameters, LineItem, compute_totals

    items = [
        LineItem(id="item-1", description="16-Channel NVR", quantity=1,
                 unit_price=Decimal("80000"), tax_rate=Decimal("18")),
    ]
    totals = compute_totals(
        items,
        CostParameters(labor_cost=Decimal("20000"), discount_percent=Decimal("5")),
    )
    print(totals.grand_total)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import ROUND_HALF_EVEN, ROUND_HALF_UP, Context, Decimal, localcontext
from typing import Any, Sequence

from ops_kernel.domain.dtos import ValidationError, ValidationResult
from ops_kernel.domain.validation import (
    check_non_negative,
    check_percentage,
    to_decimal,
)
from ops_kernel.exceptions import ValidationFailedError

# ============================================================================
# Constants
# ============================================================================

_ZERO = Decimal("0")
_ONE = Decimal("1")
_HUNDRED = Decimal("100")

# Grand totals are whole currency units, matching display and payment matching.
_GRAND_TOTAL_QUANTUM = Decimal("1")

# Arithmetic context for every calculation, independent of the caller's
# thread context.  Wide enough that no intermediate is ever rounded.
CALCULATION_CONTEXT = Context(prec=50, rounding=ROUND_HALF_EVEN)

DEFAULT_LABOR_TAX_RATE = Decimal("18")
LABOR_TAX_LINE_ID = "labor"

DUPLICATE_ITEM_ID = "DUPLICATE_ITEM_ID"


def _normalize(value: Any) -> Any:
    """Decimal if the value converts cleanly, otherwise unchanged for validation."""
    converted = to_decimal(value)
    return value if converted is None else converted


# ============================================================================
# Value Objects
# ============================================================================


@dataclass(frozen=True)
class LineItem:
    """
    A single priced line on a quotation or invoice.

    Numeric fields are converted to Decimal on construction when possible.
    Range checks happen in ``validate_totals_input`` so that every problem
    in a draft is reported at once.
    """

    id: str
    description: str
    quantity: Decimal
    unit_price: Decimal
    tax_rate: Decimal | None = None
    unit: str = "nos"
    serial_numbers: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "quantity", _normalize(self.quantity))
        object.__setattr__(self, "unit_price", _normalize(self.unit_price))
        if self.tax_rate is not None:
            object.__setattr__(self, "tax_rate", _normalize(self.tax_rate))
        object.__setattr__(self, "serial_numbers", tuple(self.serial_numbers))

    @property
    def line_amount(self) -> Decimal:
        """Pre-tax, pre-discount amount: quantity * unit_price."""
        return self.quantity * self.unit_price

    @property
    def applied_tax_rate(self) -> Decimal:
        """GST rate charged on this line; a line with no rate carries no tax."""
        return _ZERO if self.tax_rate is None else self.tax_rate


@dataclass(frozen=True)
class CostParameters:
    """Document-level labor cost and discount percentage."""

    labor_cost: Decimal = Decimal("0")
    discount_percent: Decimal = Decimal("0")

    def __post_init__(self) -> None:
        object.__setattr__(self, "labor_cost", _normalize(self.labor_cost))
        object.__setattr__(self, "discount_percent", _normalize(self.discount_percent))


@dataclass(frozen=True)
class TaxLine:
    """Tax computed for one line item (or for labor, id ``"labor"``)."""

    item_id: str
    taxable_amount: Decimal  # after the proportional discount
    tax_rate: Decimal
    tax_amount: Decimal


@dataclass(frozen=True)
class TotalsBreakdown:
    """
    Complete monetary breakdown of a document.

    Derived once from line items and cost parameters and never mutated.
    ``grand_total`` is the only rounded value.
    """

    items_subtotal: Decimal
    subtotal_with_labor: Decimal
    discount_amount: Decimal
    amount_after_discount: Decimal
    tax_amount: Decimal
    grand_total: Decimal
    labor_tax_amount: Decimal = Decimal("0")
    tax_lines: tuple[TaxLine, ...] = field(default_factory=tuple)

    @classmethod
    def zero(cls) -> TotalsBreakdown:
        return cls(
            items_subtotal=_ZERO,
            subtotal_with_labor=_ZERO,
            discount_amount=_ZERO,
            amount_after_discount=_ZERO,
            tax_amount=_ZERO,
            grand_total=_ZERO,
        )

    @property
    def item_tax_amount(self) -> Decimal:
        """Tax on line items only (excludes labor)."""
        return self.tax_amount - self.labor_tax_amount

    def tax_for_item(self, item_id: str) -> Decimal:
        """Tax charged on one line, zero if the line carries none."""
        for line in self.tax_lines:
            if line.item_id == item_id:
                return line.tax_amount
        return _ZERO


# ============================================================================
# Validation
# ============================================================================


def validate_totals_input(
    items: Sequence[LineItem],
    params: CostParameters,
    labor_tax_rate: Decimal | int | str = DEFAULT_LABOR_TAX_RATE,
) -> ValidationResult:
    """
    Check every numeric input without raising.

    Rejects negative quantities, prices and labor cost, percentages outside
    [0, 100], non-numeric values and duplicate item ids.  Never clamps.
    """
    errors: list[ValidationError] = []
    seen_ids: set[str] = set()

    for index, item in enumerate(items):
        prefix = f"items[{index}]"
        if item.id in seen_ids:
            errors.append(ValidationError(
                code=DUPLICATE_ITEM_ID,
                message=f"item id {item.id!r} appears more than once",
                field=f"{prefix}.id",
            ))
        seen_ids.add(item.id)
        check_non_negative(item.quantity, f"{prefix}.quantity", errors)
        check_non_negative(item.unit_price, f"{prefix}.unit_price", errors)
        if item.tax_rate is not None:
            check_percentage(item.tax_rate, f"{prefix}.tax_rate", errors)

    check_non_negative(params.labor_cost, "labor_cost", errors)
    check_percentage(params.discount_percent, "discount_percent", errors)
    check_percentage(labor_tax_rate, "labor_tax_rate", errors)

    return ValidationResult.from_errors(errors)


# ============================================================================
# Calculation
# ============================================================================


def round_grand_total(amount: Decimal) -> Decimal:
    """Round half-up to whole currency units."""
    return amount.quantize(
        _GRAND_TOTAL_QUANTUM, rounding=ROUND_HALF_UP, context=CALCULATION_CONTEXT,
    )


def compute_totals(
    items: Sequence[LineItem],
    params: CostParameters,
    tax_enabled: bool = True,
    labor_tax_rate: Decimal | int | str = DEFAULT_LABOR_TAX_RATE,
) -> TotalsBreakdown:
    """
    Compute the full breakdown for a set of line items.

    Args:
        items: Line items; may be empty.
        params: Labor cost and discount percentage.
        tax_enabled: False for a bill of supply (no GST at all).
        labor_tax_rate: Percentage applied to the discounted labor cost
            when tax is enabled.

    Returns:
        TotalsBreakdown with exact intermediates and a rounded grand total.

    Raises:
        ValidationFailedError: If any input fails validation.  No partial
            breakdown is produced.
    """
    items = tuple(items)
    validation = validate_totals_input(items, params, labor_tax_rate)
    if not validation:
        raise ValidationFailedError(validation.errors)

    with localcontext(CALCULATION_CONTEXT):
        return _compute(items, params, tax_enabled, to_decimal(labor_tax_rate))


def _compute(
    items: tuple[LineItem, ...],
    params: CostParameters,
    tax_enabled: bool,
    labor_rate: Decimal,
) -> TotalsBreakdown:
    keep_fraction = _ONE - params.discount_percent / _HUNDRED

    items_subtotal = sum((item.line_amount for item in items), _ZERO)
    subtotal_with_labor = items_subtotal + params.labor_cost
    discount_amount = subtotal_with_labor * (params.discount_percent / _HUNDRED)
    amount_after_discount = subtotal_with_labor - discount_amount

    tax_lines: list[TaxLine] = []
    labor_tax_amount = _ZERO
    if tax_enabled:
        for item in items:
            taxable = item.line_amount * keep_fraction
            tax_lines.append(TaxLine(
                item_id=item.id,
                taxable_amount=taxable,
                tax_rate=item.applied_tax_rate,
                tax_amount=taxable * (item.applied_tax_rate / _HUNDRED),
            ))
        labor_taxable = params.labor_cost * keep_fraction
        labor_tax_amount = labor_taxable * (labor_rate / _HUNDRED)
        if params.labor_cost > _ZERO:
            tax_lines.append(TaxLine(
                item_id=LABOR_TAX_LINE_ID,
                taxable_amount=labor_taxable,
                tax_rate=labor_rate,
                tax_amount=labor_tax_amount,
            ))

    tax_amount = sum((line.tax_amount for line in tax_lines), _ZERO)

    return TotalsBreakdown(
        items_subtotal=items_subtotal,
        subtotal_with_labor=subtotal_with_labor,
        discount_amount=discount_amount,
        amount_after_discount=amount_after_discount,
        tax_amount=tax_amount,
        grand_total=round_grand_total(amount_after_discount + tax_amount),
        labor_tax_amount=labor_tax_amount,
        tax_lines=tuple(tax_lines),
    )
