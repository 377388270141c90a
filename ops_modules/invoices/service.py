"""
Invoice Module Service - Create invoices, record payments, compare with quotations.

Thin glue layer that:
1. Calls the totals engine for new invoices (or copies an approved
   quotation's cached breakdown verbatim)
2. Calls the payment ledger engine when a payment is recorded
3. Calls the comparison engine to diff an invoice against its quotation
4. Allocates invoice numbers from SequenceService

All computation lives in engines.  This service owns the transaction
boundary: it commits on success and rolls back on failure.

Recording a payment is one atomic read-modify-write per invoice: the
per-document lock is taken first, the invoice row is re-read under
``SELECT ... FOR UPDATE``, the ledger is reduced, the payment row and
the new status are written and the transaction commits, all before the
lock is released.

Usage:
    service = InvoiceService(session, clock=clock)
    invoice = service.create_from_quotation("QT-2026-0001", actor_id=actor_id)
    invoice = service.record_payment(
        invoice.invoice_number, Decimal("10000"), actor_id=actor_id,
    )
    print(invoice.status, invoice.amount_due)
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Sequence
from uuid import UUID, uuid4

from sqlalchemy import select
from sqlalchemy.orm import Session

from ops_config import HubConfig, get_active_config
from ops_engines.comparison import ComparisonReport, compare_documents
from ops_engines.payment_ledger import (
    LedgerSummary,
    Payment,
    PaymentMethod,
    apply_payment,
    summarize_ledger,
)
from ops_engines.totals import compute_totals
from ops_kernel.domain.clock import Clock, SystemClock
from ops_kernel.domain.lifecycle import (
    INVOICE_TRANSITIONS,
    TERMINAL_INVOICE_STATUSES,
    InvoiceStatus,
    QuotationStatus,
    require_transition,
)
from ops_kernel.exceptions import (
    DocumentNotFoundError,
    OverpaymentError,
    PaymentNotAllowedError,
    QuotationNotApprovedError,
)
from ops_kernel.logging_config import LogContext, get_logger
from ops_kernel.services.document_lock import DocumentLockRegistry, get_document_locks
from ops_kernel.services.sequence_service import SequenceService
from ops_modules._document_helpers import (
    priced_document,
    raise_if_invalid,
    validate_priced_draft,
    with_default_tax_rate,
)
from ops_modules.invoices.models import Invoice, InvoiceDraft
from ops_modules.invoices.orm import InvoiceModel, InvoicePaymentModel
from ops_modules.quotations.orm import QuotationModel

logger = get_logger("modules.invoices.service")


class InvoiceService:
    """
    Orchestrates invoice operations through the engines.

    Engine composition:
    - compute_totals: breakdown for directly created invoices
    - apply_payment / summarize_ledger: payment folding and status
    - compare_documents: invoice vs. source quotation

    Transaction boundary: this service commits on success, rolls back on failure.
    """

    def __init__(
        self,
        session: Session,
        clock: Clock | None = None,
        config: HubConfig | None = None,
        locks: DocumentLockRegistry | None = None,
    ):
        self._session = session
        self._clock = clock or SystemClock()
        self._config = config or get_active_config()
        self._locks = locks or get_document_locks()
        self._sequences = SequenceService(session, width=self._config.numbering.width)

    def _next_invoice_number(self, invoice_date: date) -> str:
        return self._sequences.next_document_number(
            self._config.numbering.invoice_prefix, invoice_date.year
        )

    # =========================================================================
    # Creation
    # =========================================================================

    def create_invoice(self, draft: InvoiceDraft, actor_id: UUID) -> Invoice:
        """
        Create a Pending invoice with its breakdown computed once.

        A draft may name the quotation it answers (``quote_number``); the
        quotation must exist but its figures are not copied, so the two can
        later be compared with ``compare_with_quotation``.

        Raises:
            ValidationFailedError: If the draft has any problem.
            DocumentNotFoundError: If the named quotation does not exist.
        """
        labor_tax_rate = self._config.tax.labor_tax_rate
        items = with_default_tax_rate(draft.items, self._config.tax.default_item_tax_rate)
        tax_enabled = (
            self._config.tax.enabled_by_default
            if draft.tax_enabled is None
            else draft.tax_enabled
        )

        try:
            raise_if_invalid(
                validate_priced_draft(draft.customer, items, draft.cost, labor_tax_rate)
            )
            if draft.quote_number is not None:
                self._load_quotation(draft.quote_number)
            totals = compute_totals(items, draft.cost, tax_enabled, labor_tax_rate)

            invoice_date = draft.invoice_date or self._clock.today()
            invoice = Invoice(
                id=uuid4(),
                invoice_number=self._next_invoice_number(invoice_date),
                customer=draft.customer,
                invoice_date=invoice_date,
                items=items,
                cost=draft.cost,
                tax_enabled=tax_enabled,
                labor_tax_rate=labor_tax_rate,
                totals=totals,
                status=InvoiceStatus.PENDING,
                quote_number=draft.quote_number,
                po_number=draft.po_number,
            )
            self._session.add(InvoiceModel.from_dto(invoice, created_by_id=actor_id))
            self._session.commit()

        except Exception:
            self._session.rollback()
            logger.warning(
                "invoice_create_failed",
                extra={"customer": draft.customer.name, "actor_id": str(actor_id)},
                exc_info=True,
            )
            raise

        logger.info("invoice_created", extra={
            "invoice_number": invoice.invoice_number,
            "customer": invoice.customer.name,
            "line_count": len(invoice.items),
            "tax_enabled": tax_enabled,
            "grand_total": str(invoice.grand_total),
            "actor_id": str(actor_id),
        })
        return invoice

    def create_from_quotation(
        self,
        quote_number: str,
        actor_id: UUID,
        invoice_date: date | None = None,
    ) -> Invoice:
        """
        Raise an invoice from an Approved quotation.

        Items, cost parameters, the tax flag and the cached breakdown are
        copied verbatim.  Nothing is recomputed, so the invoice total always
        equals the quoted total even if tax settings changed in between.

        Raises:
            DocumentNotFoundError: If the quotation does not exist.
            QuotationNotApprovedError: If the quotation is not Approved.
        """
        with LogContext.bind(document_id=quote_number, actor_id=str(actor_id)):
            try:
                quotation = self._load_quotation(quote_number).to_dto()
                if quotation.status != QuotationStatus.APPROVED:
                    raise QuotationNotApprovedError(quote_number, quotation.status.value)

                invoice_date = invoice_date or self._clock.today()
                invoice = Invoice(
                    id=uuid4(),
                    invoice_number=self._next_invoice_number(invoice_date),
                    customer=quotation.customer,
                    invoice_date=invoice_date,
                    items=quotation.items,
                    cost=quotation.cost,
                    tax_enabled=quotation.tax_enabled,
                    labor_tax_rate=quotation.labor_tax_rate,
                    totals=quotation.totals,
                    status=InvoiceStatus.PENDING,
                    quote_number=quote_number,
                    po_number=quotation.po_number,
                )
                self._session.add(InvoiceModel.from_dto(invoice, created_by_id=actor_id))
                self._session.commit()

            except Exception:
                self._session.rollback()
                raise

            logger.info("invoice_created_from_quotation", extra={
                "invoice_number": invoice.invoice_number,
                "quote_number": quote_number,
                "grand_total": str(invoice.grand_total),
            })
            return invoice

    # =========================================================================
    # Payments
    # =========================================================================

    def record_payment(
        self,
        invoice_number: str,
        amount: Decimal | int | str,
        actor_id: UUID,
        method: PaymentMethod | str = PaymentMethod.ONLINE,
        payment_date: date | None = None,
        payment_id: str | None = None,
    ) -> Invoice:
        """
        Append a payment and move the invoice to its recommended status.

        Raises:
            DocumentNotFoundError: If the invoice does not exist.
            PaymentNotAllowedError: If the invoice is Paid or Cancelled.
            InvalidPaymentAmountError: If the amount is not a positive number.
            OverpaymentError: If overpayment is disabled and the amount
                exceeds the amount due.
            DocumentLockTimeoutError: If another writer holds the invoice
                for longer than the configured timeout.
        """
        timeout = self._config.payments.lock_timeout_seconds

        with LogContext.bind(document_id=invoice_number, actor_id=str(actor_id)):
            with self._locks.hold(invoice_number, timeout=timeout):
                try:
                    self._session.expire_all()
                    model = self._load(invoice_number, for_update=True)
                    current_status = InvoiceStatus(model.status)
                    if current_status in TERMINAL_INVOICE_STATUSES:
                        raise PaymentNotAllowedError(invoice_number, current_status.value)

                    payment = Payment(
                        id=payment_id or str(uuid4()),
                        amount=amount,
                        payment_date=payment_date or self._clock.today(),
                        method=method,
                    )
                    existing = tuple(p.to_dto() for p in model.payments)
                    application = apply_payment(
                        model.grand_total, existing, payment, current_status
                    )

                    if (
                        not self._config.payments.allow_overpayment
                        and application.amount_due < 0
                    ):
                        raise OverpaymentError(
                            invoice_number,
                            str(payment.amount),
                            str(application.amount_due + payment.amount),
                        )

                    if application.status_changed:
                        require_transition(
                            INVOICE_TRANSITIONS,
                            current_status,
                            application.new_status,
                            "invoice",
                        )
                        model.status = application.new_status.value

                    model.payments.append(InvoicePaymentModel.from_dto(
                        payment, sequence=len(existing) + 1, created_by_id=actor_id
                    ))
                    model.updated_by_id = actor_id
                    self._session.commit()

                except Exception:
                    self._session.rollback()
                    logger.warning(
                        "invoice_payment_rejected",
                        extra={"invoice_number": invoice_number, "amount": str(amount)},
                        exc_info=True,
                    )
                    raise

                logger.info("invoice_payment_recorded", extra={
                    "invoice_number": invoice_number,
                    "payment_id": payment.id,
                    "amount": str(payment.amount),
                    "method": payment.method.value,
                    "amount_paid": str(application.amount_paid),
                    "amount_due": str(application.amount_due),
                })
                if application.status_changed:
                    logger.info("invoice_status_changed", extra={
                        "invoice_number": invoice_number,
                        "from_status": application.previous_status.value,
                        "to_status": application.new_status.value,
                    })
                return model.to_dto()

    def ledger_summary(self, invoice_number: str) -> LedgerSummary:
        """Amount paid and due for an invoice."""
        model = self._load(invoice_number)
        return summarize_ledger(
            model.grand_total,
            [p.to_dto() for p in model.payments],
            model.status,
        )

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def cancel_invoice(self, invoice_number: str, actor_id: UUID) -> Invoice:
        """
        Pending or Partially Paid -> Cancelled.  Payments are kept.

        Raises:
            InvalidTransitionError: If the invoice is Paid or already Cancelled.
        """
        timeout = self._config.payments.lock_timeout_seconds

        with LogContext.bind(document_id=invoice_number, actor_id=str(actor_id)):
            with self._locks.hold(invoice_number, timeout=timeout):
                try:
                    self._session.expire_all()
                    model = self._load(invoice_number, for_update=True)
                    from_status = InvoiceStatus(model.status)
                    require_transition(
                        INVOICE_TRANSITIONS, from_status, InvoiceStatus.CANCELLED, "invoice"
                    )
                    model.status = InvoiceStatus.CANCELLED.value
                    model.updated_by_id = actor_id
                    self._session.commit()
                except Exception:
                    self._session.rollback()
                    raise

                logger.info("invoice_status_changed", extra={
                    "invoice_number": invoice_number,
                    "from_status": from_status.value,
                    "to_status": InvoiceStatus.CANCELLED.value,
                    "payment_count": len(model.payments),
                })
                return model.to_dto()

    # =========================================================================
    # Comparison
    # =========================================================================

    def compare_with_quotation(self, invoice_number: str) -> ComparisonReport:
        """
        Diff an invoice against the quotation it was raised from or linked to.

        Raises:
            DocumentNotFoundError: If the invoice does not exist, is not
                linked to a quotation, or the quotation is gone.
        """
        invoice = self._load(invoice_number).to_dto()
        if invoice.quote_number is None:
            raise DocumentNotFoundError("Quotation", f"(none linked to {invoice_number})")

        quotation = self._load_quotation(invoice.quote_number).to_dto()

        report = compare_documents(
            priced_document(quotation.quote_number, quotation.items, quotation.cost, quotation.totals),
            priced_document(invoice.invoice_number, invoice.items, invoice.cost, invoice.totals),
        )
        logger.info("invoice_compared_with_quotation", extra={
            "invoice_number": invoice_number,
            "quote_number": quotation.quote_number,
            "discrepancy_count": len(report.discrepancies),
        })
        return report

    # =========================================================================
    # Queries
    # =========================================================================

    def get_invoice(self, invoice_number: str) -> Invoice:
        """
        Raises:
            DocumentNotFoundError: If no invoice has that number.
        """
        return self._load(invoice_number).to_dto()

    def list_invoices(self, status: InvoiceStatus | None = None) -> Sequence[Invoice]:
        """All invoices, optionally filtered by status, in number order."""
        stmt = select(InvoiceModel).order_by(InvoiceModel.invoice_number)
        if status is not None:
            stmt = stmt.where(InvoiceModel.status == InvoiceStatus(status).value)
        return [model.to_dto() for model in self._session.scalars(stmt)]

    def _load(self, invoice_number: str, for_update: bool = False) -> InvoiceModel:
        stmt = select(InvoiceModel).where(InvoiceModel.invoice_number == invoice_number)
        if for_update:
            stmt = stmt.with_for_update().execution_options(populate_existing=True)
        model = self._session.scalars(stmt).one_or_none()
        if model is None:
            raise DocumentNotFoundError("Invoice", invoice_number)
        return model

    def _load_quotation(self, quote_number: str) -> QuotationModel:
        model = self._session.scalars(
            select(QuotationModel).where(QuotationModel.quote_number == quote_number)
        ).one_or_none()
        if model is None:
            raise DocumentNotFoundError("Quotation", quote_number)
        return model
