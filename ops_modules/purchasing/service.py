"""
Purchasing Module Service - Raise, receive and cancel purchase orders.

This service owns the transaction boundary: it commits on success and
rolls back on failure.

Usage:
    service = PurchasingService(session, clock=clock)
    po = service.create_purchase_order(draft, actor_id=actor_id)
    po = service.receive_purchase_order(po.po_number, actor_id=actor_id)
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Sequence
from uuid import UUID, uuid4

from sqlalchemy import select
from sqlalchemy.orm import Session

from ops_config import HubConfig, get_active_config
from ops_kernel.domain.clock import Clock, SystemClock
from ops_kernel.domain.dtos import ValidationError
from ops_kernel.domain.lifecycle import (
    PURCHASE_ORDER_TRANSITIONS,
    PurchaseOrderStatus,
    require_transition,
)
from ops_kernel.domain.validation import check_non_negative, check_required_text
from ops_kernel.exceptions import DocumentNotFoundError
from ops_kernel.logging_config import LogContext, get_logger
from ops_kernel.services.sequence_service import SequenceService
from ops_modules._document_helpers import NO_LINE_ITEMS, raise_if_invalid
from ops_modules.purchasing.models import PurchaseOrder, PurchaseOrderDraft
from ops_modules.purchasing.orm import PurchaseOrderModel

logger = get_logger("modules.purchasing.service")


def validate_purchase_order_draft(draft: PurchaseOrderDraft) -> list[ValidationError]:
    """Every problem with a purchase order draft, empty if none."""
    errors: list[ValidationError] = []
    check_required_text(draft.supplier, "supplier", errors)
    for index, line in enumerate(draft.lines):
        prefix = f"lines[{index}]"
        check_required_text(line.name, f"{prefix}.name", errors)
        check_non_negative(line.quantity, f"{prefix}.quantity", errors)
        check_non_negative(line.unit_price, f"{prefix}.unit_price", errors)
    if not draft.ordered_lines:
        errors.append(ValidationError(
            code=NO_LINE_ITEMS,
            message="at least one line needs a positive quantity and price",
            field="lines",
        ))
    return errors


class PurchasingService:
    """
    Orchestrates purchase order operations.

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

    def create_purchase_order(
        self,
        draft: PurchaseOrderDraft,
        actor_id: UUID,
    ) -> PurchaseOrder:
        """
        Raise a Pending purchase order from the draft's ordered lines.

        Raises:
            ValidationFailedError: If the draft has any problem.
        """
        try:
            raise_if_invalid(validate_purchase_order_draft(draft))

            order_date = draft.order_date or self._clock.today()
            order = PurchaseOrder(
                id=uuid4(),
                po_number=self._sequences.next_document_number(
                    self._config.numbering.purchase_order_prefix, order_date.year
                ),
                supplier=draft.supplier.strip(),
                order_date=order_date,
                lines=draft.ordered_lines,
                total=sum((line.amount for line in draft.ordered_lines), Decimal("0")),
                status=PurchaseOrderStatus.PENDING,
            )
            self._session.add(PurchaseOrderModel.from_dto(order, created_by_id=actor_id))
            self._session.commit()

        except Exception:
            self._session.rollback()
            raise

        logger.info("purchase_order_created", extra={
            "po_number": order.po_number,
            "supplier": order.supplier,
            "line_count": len(order.lines),
            "total": str(order.total),
            "actor_id": str(actor_id),
        })
        return order

    def receive_purchase_order(
        self,
        po_number: str,
        actor_id: UUID,
        received_date: date | None = None,
    ) -> PurchaseOrder:
        """Pending -> Completed, stamping the received date."""
        return self._transition(
            po_number,
            PurchaseOrderStatus.COMPLETED,
            actor_id,
            received_date=received_date or self._clock.today(),
        )

    def cancel_purchase_order(self, po_number: str, actor_id: UUID) -> PurchaseOrder:
        """Pending -> Cancelled."""
        return self._transition(po_number, PurchaseOrderStatus.CANCELLED, actor_id)

    def _transition(
        self,
        po_number: str,
        to_status: PurchaseOrderStatus,
        actor_id: UUID,
        received_date: date | None = None,
    ) -> PurchaseOrder:
        with LogContext.bind(document_id=po_number, actor_id=str(actor_id)):
            try:
                model = self._load(po_number, for_update=True)
                from_status = PurchaseOrderStatus(model.status)
                require_transition(
                    PURCHASE_ORDER_TRANSITIONS, from_status, to_status, "purchase order"
                )
                model.status = to_status.value
                if received_date is not None:
                    model.received_date = received_date
                model.updated_by_id = actor_id
                self._session.commit()
            except Exception:
                self._session.rollback()
                raise

            logger.info("purchase_order_status_changed", extra={
                "po_number": po_number,
                "from_status": from_status.value,
                "to_status": to_status.value,
            })
            return model.to_dto()

    def get_purchase_order(self, po_number: str) -> PurchaseOrder:
        """
        Raises:
            DocumentNotFoundError: If no purchase order has that number.
        """
        return self._load(po_number).to_dto()

    def list_purchase_orders(
        self,
        status: PurchaseOrderStatus | None = None,
    ) -> Sequence[PurchaseOrder]:
        stmt = select(PurchaseOrderModel).order_by(PurchaseOrderModel.po_number)
        if status is not None:
            stmt = stmt.where(
                PurchaseOrderModel.status == PurchaseOrderStatus(status).value
            )
        return [model.to_dto() for model in self._session.scalars(stmt)]

    def _load(self, po_number: str, for_update: bool = False) -> PurchaseOrderModel:
        stmt = select(PurchaseOrderModel).where(PurchaseOrderModel.po_number == po_number)
        if for_update:
            stmt = stmt.with_for_update().execution_options(populate_existing=True)
        model = self._session.scalars(stmt).one_or_none()
        if model is None:
            raise DocumentNotFoundError("Purchase order", po_number)
        return model
