"""
Typed Exception Hierarchy for the Operations Hub Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

Callers (UI handlers, document renderers, API layers) must be able to tell a
rejected discount percentage from a rejected payment without parsing message
strings.  Every error therefore:
  1. Has its own exception class (catch by type, not message)
  2. Carries a ``code`` class attribute (machine-readable, API-safe)
  3. Stores its context as attributes (not just a message string)

Example:
    try:
        totals = compute_totals(items, params)
    except ValidationFailedError as e:
        return {"error": e.code, "fields": [err.field for err in e.errors]}

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    OpsHubError (base)
    |
    +-- ValidationFailedError
    |
    +-- PaymentError
    |   +-- InvalidPaymentAmountError
    |   +-- OverpaymentError
    |   +-- PaymentNotAllowedError
    |
    +-- DocumentError
    |   +-- DocumentNotFoundError
    |   +-- QuotationNotApprovedError
    |
    +-- WorkflowError
    |   +-- InvalidTransitionError
    |
    +-- ConcurrencyError
        +-- DocumentLockTimeoutError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category     | Code                    | When Raised
-------------|-------------------------|------------------------------------------
Validation   | VALIDATION_FAILED       | Negative/out-of-range number, missing field
-------------|-------------------------|------------------------------------------
Payment      | INVALID_PAYMENT_AMOUNT  | Payment amount is zero, negative or not a number
             | OVERPAYMENT             | Payment exceeds amount due (when disallowed)
             | PAYMENT_NOT_ALLOWED     | Invoice is Paid or Cancelled
-------------|-------------------------|------------------------------------------
Document     | DOCUMENT_NOT_FOUND      | No document with that number
             | QUOTATION_NOT_APPROVED  | Invoice requested from a non-approved quote
-------------|-------------------------|------------------------------------------
Workflow     | INVALID_TRANSITION      | Status change not in the transition table
-------------|-------------------------|------------------------------------------
Concurrency  | DOCUMENT_LOCK_TIMEOUT   | Per-document write lock not acquired in time

Validation and payment errors are raised before any computation or write;
nothing is ever partially applied.  No error here is transient, so none is
retried automatically.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ops_kernel.domain.dtos import ValidationError


class OpsHubError(Exception):
    """
    Base exception for all operations hub errors.

    All subclasses must have a ``code`` class attribute for machine-readable
    error identification.
    """

    code: str = "OPS_HUB_ERROR"


# Validation


class ValidationFailedError(OpsHubError):
    """
    One or more inputs failed validation.

    Carries every ``ValidationError`` found, not just the first, so callers
    can present all problems at once.
    """

    code: str = "VALIDATION_FAILED"

    def __init__(self, errors: tuple[ValidationError, ...] | list[ValidationError]):
        self.errors = tuple(errors)
        summary = "; ".join(
            f"{e.field}: {e.message}" if e.field else e.message
            for e in self.errors
        )
        super().__init__(f"Validation failed ({len(self.errors)} error(s)): {summary}")


# Payment-related exceptions


class PaymentError(OpsHubError):
    """Base exception for payment-related errors."""

    code: str = "PAYMENT_ERROR"


class InvalidPaymentAmountError(PaymentError):
    """Payment amount is not a positive number."""

    code: str = "INVALID_PAYMENT_AMOUNT"

    def __init__(self, amount: str, payment_id: str | None = None):
        self.amount = amount
        self.payment_id = payment_id
        suffix = f" (payment {payment_id})" if payment_id else ""
        super().__init__(f"Payment amount must be positive, got {amount}{suffix}")


class OverpaymentError(PaymentError):
    """Payment would take the amount paid beyond the invoice grand total."""

    code: str = "OVERPAYMENT"

    def __init__(self, invoice_number: str, amount: str, amount_due: str):
        self.invoice_number = invoice_number
        self.amount = amount
        self.amount_due = amount_due
        super().__init__(
            f"Payment of {amount} exceeds amount due {amount_due} "
            f"on invoice {invoice_number}"
        )


class PaymentNotAllowedError(PaymentError):
    """Invoice is in a status that does not accept payments."""

    code: str = "PAYMENT_NOT_ALLOWED"

    def __init__(self, invoice_number: str, status: str):
        self.invoice_number = invoice_number
        self.status = status
        super().__init__(
            f"Invoice {invoice_number} is {status} and cannot accept payments"
        )


# Document-related exceptions


class DocumentError(OpsHubError):
    """Base exception for document errors."""

    code: str = "DOCUMENT_ERROR"


class DocumentNotFoundError(DocumentError):
    """Document with the given number was not found."""

    code: str = "DOCUMENT_NOT_FOUND"

    def __init__(self, document_type: str, document_number: str):
        self.document_type = document_type
        self.document_number = document_number
        super().__init__(f"{document_type} not found: {document_number}")


class QuotationNotApprovedError(DocumentError):
    """Invoice generation requested for a quotation that is not approved."""

    code: str = "QUOTATION_NOT_APPROVED"

    def __init__(self, quote_number: str, status: str):
        self.quote_number = quote_number
        self.status = status
        super().__init__(
            f"Quotation {quote_number} is {status}; only Approved quotations "
            f"can be invoiced"
        )


# Workflow exceptions


class WorkflowError(OpsHubError):
    """Base exception for document lifecycle errors."""

    code: str = "WORKFLOW_ERROR"


class InvalidTransitionError(WorkflowError):
    """Requested status change is not a legal transition."""

    code: str = "INVALID_TRANSITION"

    def __init__(self, document_type: str, from_status: str, to_status: str):
        self.document_type = document_type
        self.from_status = from_status
        self.to_status = to_status
        super().__init__(
            f"Illegal {document_type} transition: {from_status} -> {to_status}"
        )


# Concurrency exceptions


class ConcurrencyError(OpsHubError):
    """Base exception for concurrency errors."""

    code: str = "CONCURRENCY_ERROR"


class DocumentLockTimeoutError(ConcurrencyError):
    """Per-document write lock could not be acquired in time."""

    code: str = "DOCUMENT_LOCK_TIMEOUT"

    def __init__(self, document_key: str, timeout_seconds: float):
        self.document_key = document_key
        self.timeout_seconds = timeout_seconds
        super().__init__(
            f"Timed out after {timeout_seconds}s waiting for lock on {document_key}"
        )
