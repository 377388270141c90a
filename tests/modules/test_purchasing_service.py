"""Tests for PurchasingService."""

from datetime import date
from decimal import Decimal

import pytest

from ops_kernel.domain.lifecycle import PurchaseOrderStatus
from ops_kernel.domain.validation import NEGATIVE_AMOUNT, NOT_A_NUMBER
from ops_kernel.exceptions import (
    DocumentNotFoundError,
    InvalidTransitionError,
    ValidationFailedError,
)
from ops_modules.purchasing.models import PurchaseOrderDraft, PurchaseOrderLine
from ops_modules._document_helpers import NO_LINE_ITEMS
from ops_modules.purchasing.service import validate_purchase_order_draft
from tests.modules.conftest import DOCUMENT_DATE


class TestValidatePurchaseOrderDraft:

    def test_valid(self, purchase_order_draft):
        assert validate_purchase_order_draft(purchase_order_draft) == []

    def test_missing_supplier_and_lines(self):
        errors = validate_purchase_order_draft(PurchaseOrderDraft(supplier="", lines=()))

        assert {e.field for e in errors} == {"supplier", "lines"}

    def test_bad_lines(self):
        draft = PurchaseOrderDraft(
            supplier="Acme Supply",
            lines=(
                PurchaseOrderLine("a", "Bracket", Decimal("-1"), Decimal("10")),
                PurchaseOrderLine("b", "", "ten", Decimal("10")),
            ),
        )

        errors = validate_purchase_order_draft(draft)

        assert [(e.field, e.code) for e in errors if e.code != "REQUIRED_FIELD_MISSING"] == [
            ("lines[0].quantity", NEGATIVE_AMOUNT),
            ("lines[1].quantity", NOT_A_NUMBER),
            ("lines", NO_LINE_ITEMS),
        ]
        assert "lines[1].name" in {e.field for e in errors}

    def test_zero_lines_only_is_rejected(self):
        draft = PurchaseOrderDraft(
            supplier="Acme Supply",
            lines=(
                PurchaseOrderLine("CAM-001", "Dome camera", Decimal("0"), Decimal("0")),
                PurchaseOrderLine("CAM-002", "Bullet camera", Decimal("4"), Decimal("0")),
            ),
        )

        errors = validate_purchase_order_draft(draft)

        assert [(e.field, e.code) for e in errors] == [("lines", NO_LINE_ITEMS)]


class TestPurchasingService:

    def test_create(self, purchasing_service, purchase_order_draft, test_actor_id):
        order = purchasing_service.create_purchase_order(
            purchase_order_draft, actor_id=test_actor_id,
        )

        assert order.po_number == "PO-2026-0001"
        assert order.status == PurchaseOrderStatus.PENDING
        assert order.order_date == DOCUMENT_DATE
        assert order.total == Decimal("36905.00")
        assert order.received_date is None

    def test_round_trip(self, purchasing_service, purchase_order_draft, test_actor_id, session):
        created = purchasing_service.create_purchase_order(
            purchase_order_draft, actor_id=test_actor_id,
        )
        session.expunge_all()

        loaded = purchasing_service.get_purchase_order(created.po_number)

        assert loaded.lines == created.lines
        assert loaded.total == created.total
        assert loaded.supplier == "Hikvision Distributors"

    def test_unordered_lines_dropped(self, purchasing_service, test_actor_id):
        draft = PurchaseOrderDraft(
            supplier="SecureTech Distributors",
            lines=(
                PurchaseOrderLine("CAM-001", "Hikvision 5MP Dome Camera", Decimal("6"), Decimal("4500")),
                PurchaseOrderLine("NVR-001", "Dahua 16-Channel NVR", Decimal("0"), Decimal("25000")),
            ),
        )

        order = purchasing_service.create_purchase_order(draft, actor_id=test_actor_id)

        assert [line.item_id for line in order.lines] == ["CAM-001"]
        assert order.total == Decimal("27000")
        assert purchasing_service.get_purchase_order(order.po_number).lines == order.lines

    def test_all_zero_draft_rejected(self, purchasing_service, test_actor_id):
        draft = PurchaseOrderDraft(
            supplier="SecureTech Distributors",
            lines=(PurchaseOrderLine("CAM-001", "Hikvision 5MP Dome Camera", 0, 0),),
        )

        with pytest.raises(ValidationFailedError):
            purchasing_service.create_purchase_order(draft, actor_id=test_actor_id)

        assert purchasing_service.list_purchase_orders() == []

    def test_invalid_draft_rejected(self, purchasing_service, test_actor_id):
        with pytest.raises(ValidationFailedError):
            purchasing_service.create_purchase_order(
                PurchaseOrderDraft(supplier="x", lines=()), actor_id=test_actor_id,
            )

        assert purchasing_service.list_purchase_orders() == []

    def test_receive(self, purchasing_service, purchase_order_draft, test_actor_id):
        order = purchasing_service.create_purchase_order(
            purchase_order_draft, actor_id=test_actor_id,
        )

        received = purchasing_service.receive_purchase_order(
            order.po_number, actor_id=test_actor_id, received_date=date(2026, 1, 20),
        )

        assert received.status == PurchaseOrderStatus.COMPLETED
        assert received.received_date == date(2026, 1, 20)

    def test_receive_defaults_to_today(self, purchasing_service, purchase_order_draft, test_actor_id):
        order = purchasing_service.create_purchase_order(
            purchase_order_draft, actor_id=test_actor_id,
        )

        received = purchasing_service.receive_purchase_order(order.po_number, actor_id=test_actor_id)

        assert received.received_date == DOCUMENT_DATE

    def test_cancel(self, purchasing_service, purchase_order_draft, test_actor_id):
        order = purchasing_service.create_purchase_order(
            purchase_order_draft, actor_id=test_actor_id,
        )

        cancelled = purchasing_service.cancel_purchase_order(order.po_number, actor_id=test_actor_id)

        assert cancelled.status == PurchaseOrderStatus.CANCELLED
        assert cancelled.received_date is None

    def test_completed_cannot_be_cancelled(
        self, purchasing_service, purchase_order_draft, test_actor_id,
    ):
        order = purchasing_service.create_purchase_order(
            purchase_order_draft, actor_id=test_actor_id,
        )
        purchasing_service.receive_purchase_order(order.po_number, actor_id=test_actor_id)

        with pytest.raises(InvalidTransitionError):
            purchasing_service.cancel_purchase_order(order.po_number, actor_id=test_actor_id)

    def test_list_by_status(self, purchasing_service, purchase_order_draft, test_actor_id):
        first = purchasing_service.create_purchase_order(
            purchase_order_draft, actor_id=test_actor_id,
        )
        purchasing_service.create_purchase_order(purchase_order_draft, actor_id=test_actor_id)
        purchasing_service.receive_purchase_order(first.po_number, actor_id=test_actor_id)

        completed = purchasing_service.list_purchase_orders(PurchaseOrderStatus.COMPLETED)

        assert [o.po_number for o in completed] == ["PO-2026-0001"]
        assert len(purchasing_service.list_purchase_orders()) == 2

    def test_unknown(self, purchasing_service):
        with pytest.raises(DocumentNotFoundError) as exc_info:
            purchasing_service.get_purchase_order("PO-2026-0404")

        assert exc_info.value.document_type == "Purchase order"
