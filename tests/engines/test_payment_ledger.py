"""
Tests for the Payment Ledger Engine.

Covers:
- Amount paid / amount due after each payment
- Status recommendation (Pending -> Partially Paid -> Paid)
- Terminal statuses are never changed by a payment
- Rejection of zero, negative and non-numeric amounts
- Order independence of the fold
"""

from datetime import date
from decimal import Decimal
from itertools import permutations

import pytest

from ops_engines.payment_ledger import (
    Payment,
    PaymentMethod,
    apply_payment,
    fold_payments,
    recommend_status,
    summarize_ledger,
)
from ops_kernel.domain.lifecycle import InvoiceStatus
from ops_kernel.exceptions import InvalidPaymentAmountError, ValidationFailedError

GRAND_TOTAL = Decimal("24780")


def _payment(payment_id: str, amount, method=PaymentMethod.ONLINE) -> Payment:
    return Payment(payment_id, amount, date(2026, 1, 20), method)


class TestApplyPayment:

    def test_first_partial_payment(self):
        result = apply_payment(
            GRAND_TOTAL, (), _payment("p1", Decimal("10000")), InvoiceStatus.PENDING,
        )

        assert result.amount_paid == Decimal("10000")
        assert result.amount_due == Decimal("14780")
        assert result.new_status == InvoiceStatus.PARTIALLY_PAID
        assert result.status_changed

    def test_settling_payment(self):
        existing = (_payment("p1", Decimal("10000")),)

        result = apply_payment(
            GRAND_TOTAL, existing, _payment("p2", Decimal("14780")),
            InvoiceStatus.PARTIALLY_PAID,
        )

        assert result.amount_paid == GRAND_TOTAL
        assert result.amount_due == Decimal("0")
        assert result.new_status == InvoiceStatus.PAID
        assert [p.id for p in result.payments] == ["p1", "p2"]

    def test_single_full_payment_from_pending(self):
        result = apply_payment(
            GRAND_TOTAL, (), _payment("p1", GRAND_TOTAL), InvoiceStatus.PENDING,
        )

        assert result.new_status == InvoiceStatus.PAID

    def test_further_partial_payment_keeps_status(self):
        existing = (_payment("p1", Decimal("5000")),)

        result = apply_payment(
            GRAND_TOTAL, existing, _payment("p2", Decimal("5000")),
            InvoiceStatus.PARTIALLY_PAID,
        )

        assert result.new_status == InvoiceStatus.PARTIALLY_PAID
        assert not result.status_changed
        assert result.amount_due == Decimal("14780")

    def test_overpayment_gives_negative_due(self):
        result = apply_payment(
            GRAND_TOTAL, (), _payment("p1", Decimal("25000")), InvoiceStatus.PENDING,
        )

        assert result.amount_due == Decimal("-220")
        assert result.new_status == InvoiceStatus.PAID

    def test_status_accepts_plain_string(self):
        result = apply_payment(GRAND_TOTAL, (), _payment("p1", 1), "Pending")

        assert result.previous_status is InvoiceStatus.PENDING

    def test_does_not_mutate_existing_history(self):
        existing = [_payment("p1", 100)]

        apply_payment(GRAND_TOTAL, existing, _payment("p2", 200), InvoiceStatus.PARTIALLY_PAID)

        assert len(existing) == 1

    def test_zero_grand_total_settles_on_any_payment(self):
        result = apply_payment(0, (), _payment("p1", 1), InvoiceStatus.PENDING)

        assert result.new_status == InvoiceStatus.PAID
        assert result.amount_due == Decimal("-1")


class TestTerminalStatuses:

    @pytest.mark.parametrize("status", [InvoiceStatus.PAID, InvoiceStatus.CANCELLED])
    def test_payment_does_not_change_terminal_status(self, status):
        result = apply_payment(GRAND_TOTAL, (), _payment("p1", 100), status)

        assert result.new_status == status
        assert not result.status_changed

    def test_recommend_status_leaves_cancelled_alone(self):
        status = recommend_status(GRAND_TOTAL, GRAND_TOTAL, InvoiceStatus.CANCELLED)

        assert status == InvoiceStatus.CANCELLED

    def test_recommend_status_without_payment_is_unchanged(self):
        status = recommend_status(Decimal("0"), GRAND_TOTAL, InvoiceStatus.PENDING)

        assert status == InvoiceStatus.PENDING


class TestInvalidAmounts:

    @pytest.mark.parametrize("amount", [0, Decimal("-1"), "-0.01"])
    def test_non_positive_amount_rejected(self, amount):
        with pytest.raises(InvalidPaymentAmountError) as exc_info:
            apply_payment(GRAND_TOTAL, (), _payment("bad", amount), InvoiceStatus.PENDING)

        assert exc_info.value.payment_id == "bad"
        assert exc_info.value.code == "INVALID_PAYMENT_AMOUNT"

    @pytest.mark.parametrize("amount", ["abc", None, float("nan"), True])
    def test_non_numeric_amount_rejected_on_construction(self, amount):
        with pytest.raises(InvalidPaymentAmountError):
            _payment("bad", amount)

    def test_invalid_payment_in_history_rejected(self):
        history = (_payment("p1", 100), _payment("p2", -50))

        with pytest.raises(InvalidPaymentAmountError) as exc_info:
            fold_payments(history)

        assert exc_info.value.payment_id == "p2"

    def test_negative_grand_total_rejected(self):
        with pytest.raises(ValidationFailedError) as exc_info:
            apply_payment(-1, (), _payment("p1", 100), InvoiceStatus.PENDING)

        assert exc_info.value.errors[0].field == "grand_total"

    def test_non_numeric_grand_total_rejected(self):
        with pytest.raises(ValidationFailedError):
            summarize_ledger("lots", (), InvoiceStatus.PENDING)


class TestFold:

    def test_empty_history(self):
        assert fold_payments(()) == Decimal("0")

    def test_order_independent(self):
        payments = [
            _payment("a", Decimal("1000.50")),
            _payment("b", Decimal("2000.25"), PaymentMethod.CASH),
            _payment("c", Decimal("0.25"), PaymentMethod.CARD),
        ]

        totals = {fold_payments(order) for order in permutations(payments)}

        assert totals == {Decimal("3001.00")}

    def test_float_amount_converted_exactly(self):
        payment = _payment("p1", 0.1)

        assert payment.amount == Decimal("0.1")

    def test_method_coerced_from_string(self):
        payment = Payment("p1", 100, date(2026, 1, 20), "Cash")

        assert payment.method is PaymentMethod.CASH


class TestLedgerSummary:

    def test_summary_of_partial_history(self):
        summary = summarize_ledger(
            GRAND_TOTAL,
            (_payment("p1", 10000), _payment("p2", 4780)),
            InvoiceStatus.PARTIALLY_PAID,
        )

        assert summary.amount_paid == Decimal("14780")
        assert summary.amount_due == Decimal("10000")
        assert summary.payment_count == 2
        assert not summary.is_settled

    def test_summary_never_changes_status(self):
        summary = summarize_ledger(GRAND_TOTAL, (_payment("p1", GRAND_TOTAL),), "Pending")

        assert summary.status == InvoiceStatus.PENDING
        assert summary.is_settled
