"""
Quotation Module Service - Create quotations and move them through their lifecycle.

Thin glue layer that:
1. Validates the draft (all problems reported at once)
2. Calls the totals engine for the breakdown
3. Allocates the quotation number from SequenceService
4. Persists the quotation with its cached breakdown

All computation lives in engines.  This service owns the transaction
boundary: it commits on success and rolls back on failure.

Usage:
    service = QuotationService(session, clock=clock)
    quote = service.create_quotation(draft, actor_id=actor_id)
    service.send_quotation(quote.quote_number, actor_id=actor_id)
    service.approve_quotation(quote.quote_number, actor_id=actor_id)
"""

from __future__ import annotations

from typing import Sequence
from uuid import UUID, uuid4

from sqlalchemy import select
from sqlalchemy.orm import Session

from ops_config import HubConfig, get_active_config
from ops_engines.totals import compute_totals
from ops_kernel.domain.clock import Clock, SystemClock
from ops_kernel.domain.lifecycle import (
    QUOTATION_TRANSITIONS,
    QuotationStatus,
    require_transition,
)
from ops_kernel.exceptions import DocumentNotFoundError
from ops_kernel.logging_config import LogContext, get_logger
from ops_kernel.services.sequence_service import SequenceService
from ops_modules._document_helpers import (
    raise_if_invalid,
    validate_priced_draft,
    with_default_tax_rate,
)
from ops_modules.quotations.models import Quotation, QuotationDraft
from ops_modules.quotations.orm import QuotationModel

logger = get_logger("modules.quotations.service")


class QuotationService:
    """
    Orchestrates quotation operations.

    Transaction boundary: this service commits on success, rolls back on failure.
    """

    def __init__(
        self,
        session: Session,
        clock: Clock | None = None,
        config: HubConfig | None = None,
    ):
        self._session = session
        self._clock = clock or SystemClock()
        self._config = config or get_active_config()
        self._sequences = SequenceService(session, width=self._config.numbering.width)

    # =========================================================================
    # Creation
    # =========================================================================

    def create_quotation(self, draft: QuotationDraft, actor_id: UUID) -> Quotation:
        """
        Create a Draft quotation with its breakdown computed once.

        Raises:
            ValidationFailedError: If the draft has any problem.
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
            totals = compute_totals(items, draft.cost, tax_enabled, labor_tax_rate)

            quote_date = draft.quote_date or self._clock.today()
            quote_number = self._sequences.next_document_number(
                self._config.numbering.quotation_prefix, quote_date.year
            )

            quotation = Quotation(
                id=uuid4(),
                quote_number=quote_number,
                customer=draft.customer,
                quote_date=quote_date,
                items=items,
                cost=draft.cost,
                tax_enabled=tax_enabled,
                labor_tax_rate=labor_tax_rate,
                totals=totals,
                status=QuotationStatus.DRAFT,
                po_number=draft.po_number,
            )
            self._session.add(QuotationModel.from_dto(quotation, created_by_id=actor_id))
            self._session.commit()

        except Exception:
            self._session.rollback()
            logger.warning(
                "quotation_create_failed",
                extra={"customer": draft.customer.name, "actor_id": str(actor_id)},
                exc_info=True,
            )
            raise

        logger.info("quotation_created", extra={
            "quote_number": quote_number,
            "customer": draft.customer.name,
            "line_count": len(items),
            "tax_enabled": tax_enabled,
            "grand_total": str(totals.grand_total),
            "actor_id": str(actor_id),
        })
        return quotation

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def send_quotation(self, quote_number: str, actor_id: UUID) -> Quotation:
        """Draft -> Sent."""
        return self._transition(quote_number, QuotationStatus.SENT, actor_id)

    def approve_quotation(self, quote_number: str, actor_id: UUID) -> Quotation:
        """Sent -> Approved."""
        return self._transition(quote_number, QuotationStatus.APPROVED, actor_id)

    def reject_quotation(self, quote_number: str, actor_id: UUID) -> Quotation:
        """Sent -> Rejected."""
        return self._transition(quote_number, QuotationStatus.REJECTED, actor_id)

    def _transition(
        self,
        quote_number: str,
        to_status: QuotationStatus,
        actor_id: UUID,
    ) -> Quotation:
        with LogContext.bind(document_id=quote_number, actor_id=str(actor_id)):
            try:
                model = self._load(quote_number, for_update=True)
                from_status = QuotationStatus(model.status)
                require_transition(
                    QUOTATION_TRANSITIONS, from_status, to_status, "quotation"
                )
                model.status = to_status.value
                model.updated_by_id = actor_id
                self._session.commit()
            except Exception:
                self._session.rollback()
                raise

            logger.info("quotation_status_changed", extra={
                "quote_number": quote_number,
                "from_status": from_status.value,
                "to_status": to_status.value,
            })
            return model.to_dto()

    # =========================================================================
    # Queries
    # =========================================================================

    def get_quotation(self, quote_number: str) -> Quotation:
        """
        Raises:
            DocumentNotFoundError: If no quotation has that number.
        """
        return self._load(quote_number).to_dto()

    def list_quotations(
        self,
        status: QuotationStatus | None = None,
    ) -> Sequence[Quotation]:
        """All quotations, optionally filtered by status, in number order."""
        stmt = select(QuotationModel).order_by(QuotationModel.quote_number)
        if status is not None:
            stmt = stmt.where(QuotationModel.status == QuotationStatus(status).value)
        return [model.to_dto() for model in self._session.scalars(stmt)]

    def _load(self, quote_number: str, for_update: bool = False) -> QuotationModel:
        stmt = select(QuotationModel).where(QuotationModel.quote_number == quote_number)
        if for_update:
            stmt = stmt.with_for_update().execution_options(populate_existing=True)
        model = self._session.scalars(stmt).one_or_none()
        if model is None:
            raise DocumentNotFoundError("Quotation", quote_number)
        return model
