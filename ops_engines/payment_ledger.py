"""
Payment Ledger Engine - Fold an invoice's payments into paid/due and status.

Pure functions with deterministic behavior. No I/O, no logging.

Payments are append-only: once recorded they are never edited or removed.
Cancelling an invoice changes its status; it never deletes payments.  The
reducer trusts the caller to hand it the complete, unaltered history.

Status recommendation (evaluated only when a payment is applied):
    terminal status (Paid, Cancelled)  -> unchanged
    amount_paid >= grand_total         -> Paid
    amount_paid > 0                    -> Partially Paid
    otherwise                          -> unchanged

Usage:
    from decimal import Decimal
    from datetime import date
    from ops_engines.payment_ledger import Payment, PaymentMethod, apply_payment
    from ops_kernel.domain.lifecycle import InvoiceStatus

    result = apply_payment(
        grand_total=Decimal("24780"),
        existing_payments=(),
        new_payment=Payment("pay-1", Decimal("10000"), date(2026, 1, 5), PaymentMethod.ONLINE),
        current_status=InvoiceStatus.PENDING,
    )
    print(result.amount_due, result.new_status)  # 14780 Partially Paid
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, Sequence

from ops_kernel.domain.dtos import ValidationError
from ops_kernel.domain.lifecycle import (
    INVOICE_TRANSITIONS,
    TERMINAL_INVOICE_STATUSES,
    InvoiceStatus,
    can_transition,
)
from ops_kernel.domain.validation import NEGATIVE_AMOUNT, NOT_A_NUMBER, to_decimal
from ops_kernel.exceptions import InvalidPaymentAmountError, ValidationFailedError

_ZERO = Decimal("0")


class PaymentMethod(str, Enum):
    """How the customer paid."""

    ONLINE = "Online"
    CASH = "Cash"
    CARD = "Card"
    OTHER = "Other"


@dataclass(frozen=True)
class Payment:
    """
    A payment received against an invoice. Immutable once recorded.

    The amount is converted to Decimal on construction; a value that is not
    a number at all raises InvalidPaymentAmountError immediately.  Sign
    checks happen in the reducer, before folding.
    """

    id: str
    amount: Decimal
    payment_date: date
    method: PaymentMethod = PaymentMethod.ONLINE

    def __post_init__(self) -> None:
        amount = to_decimal(self.amount)
        if amount is None:
            raise InvalidPaymentAmountError(str(self.amount), self.id)
        object.__setattr__(self, "amount", amount)
        object.__setattr__(self, "method", PaymentMethod(self.method))


@dataclass(frozen=True)
class PaymentApplication:
    """Outcome of applying one new payment to an invoice's history."""

    payments: tuple[Payment, ...]
    amount_paid: Decimal
    amount_due: Decimal  # negative when overpaid
    previous_status: InvoiceStatus
    new_status: InvoiceStatus

    @property
    def status_changed(self) -> bool:
        return self.new_status != self.previous_status


@dataclass(frozen=True)
class LedgerSummary:
    """Read-only view of an invoice's payment position."""

    grand_total: Decimal
    amount_paid: Decimal
    amount_due: Decimal
    payment_count: int
    status: InvoiceStatus

    @property
    def is_settled(self) -> bool:
        return self.amount_due <= _ZERO


def _require_grand_total(grand_total: Any) -> Decimal:
    total = to_decimal(grand_total)
    if total is None:
        raise ValidationFailedError([ValidationError(
            code=NOT_A_NUMBER,
            message=f"must be a number, got {grand_total!r}",
            field="grand_total",
        )])
    if total < _ZERO:
        raise ValidationFailedError([ValidationError(
            code=NEGATIVE_AMOUNT,
            message=f"must not be negative, got {total}",
            field="grand_total",
        )])
    return total


def fold_payments(payments: Sequence[Payment]) -> Decimal:
    """
    Sum payment amounts.

    Every amount is checked before any is added, so the result is never
    negative and order never matters.

    Raises:
        InvalidPaymentAmountError: If any amount is zero or negative.
    """
    for payment in payments:
        if payment.amount <= _ZERO:
            raise InvalidPaymentAmountError(str(payment.amount), payment.id)
    return sum((p.amount for p in payments), _ZERO)


def recommend_status(
    amount_paid: Decimal,
    grand_total: Decimal,
    current_status: InvoiceStatus,
) -> InvoiceStatus:
    """Status an invoice should move to after a payment event."""
    current_status = InvoiceStatus(current_status)
    if current_status in TERMINAL_INVOICE_STATUSES:
        return current_status

    if amount_paid >= grand_total:
        candidate = InvoiceStatus.PAID
    elif amount_paid > _ZERO:
        candidate = InvoiceStatus.PARTIALLY_PAID
    else:
        return current_status

    if candidate == current_status or can_transition(
        INVOICE_TRANSITIONS, current_status, candidate
    ):
        return candidate
    return current_status


def apply_payment(
    grand_total: Decimal | int | str,
    existing_payments: Sequence[Payment],
    new_payment: Payment,
    current_status: InvoiceStatus | str,
) -> PaymentApplication:
    """
    Append a payment to the history and recompute the ledger.

    Args:
        grand_total: The invoice's cached grand total.
        existing_payments: Payments already recorded, in recording order.
        new_payment: The payment being recorded.
        current_status: The invoice's status before this payment.

    Returns:
        PaymentApplication with the extended history, amount paid, amount
        due and the recommended status.

    Raises:
        ValidationFailedError: If grand_total is negative or not a number.
        InvalidPaymentAmountError: If any payment amount is not positive.
    """
    total = _require_grand_total(grand_total)
    status = InvoiceStatus(current_status)

    payments = tuple(existing_payments) + (new_payment,)
    amount_paid = fold_payments(payments)

    return PaymentApplication(
        payments=payments,
        amount_paid=amount_paid,
        amount_due=total - amount_paid,
        previous_status=status,
        new_status=recommend_status(amount_paid, total, status),
    )


def summarize_ledger(
    grand_total: Decimal | int | str,
    payments: Sequence[Payment],
    status: InvoiceStatus | str,
) -> LedgerSummary:
    """Amount paid and due for display; never changes the status."""
    total = _require_grand_total(grand_total)
    amount_paid = fold_payments(payments)
    return LedgerSummary(
        grand_total=total,
        amount_paid=amount_paid,
        amount_due=total - amount_paid,
        payment_count=len(payments),
        status=InvoiceStatus(status),
    )
