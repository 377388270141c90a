"""Tests for InventoryService."""

import dataclasses
from decimal import Decimal

import pytest

from ops_kernel.domain.validation import AMOUNT_NOT_POSITIVE, REQUIRED_FIELD_MISSING
from ops_kernel.exceptions import DocumentNotFoundError, ValidationFailedError
from ops_modules._document_helpers import NO_LINE_ITEMS
from ops_modules.inventory.models import InventoryCategory, InventoryItemDraft
from ops_modules.inventory.service import (
    DUPLICATE_ITEM_CODE,
    INVALID_CATEGORY,
    INVALID_STOCK,
    validate_item_draft,
)
from ops_modules.purchasing.service import validate_purchase_order_draft


class TestValidateItemDraft:

    def test_valid(self):
        draft = InventoryItemDraft("ACC-001", "12V 10A Power Supply", "Accessory", "1200")

        assert validate_item_draft(draft) == []

    def test_every_problem_reported(self):
        draft = InventoryItemDraft("", "", "Drone", Decimal("0"), stock=-3)

        errors = validate_item_draft(draft)

        assert [(e.field, e.code) for e in errors] == [
            ("item_code", REQUIRED_FIELD_MISSING),
            ("name", REQUIRED_FIELD_MISSING),
            ("price", AMOUNT_NOT_POSITIVE),
            ("category", INVALID_CATEGORY),
            ("stock", INVALID_STOCK),
        ]

    @pytest.mark.parametrize("stock", [1.5, True, "5"])
    def test_stock_must_be_whole_units(self, stock):
        draft = InventoryItemDraft("ACC-001", "Power Supply", "Accessory", "1200", stock=stock)

        assert [e.code for e in validate_item_draft(draft)] == [INVALID_STOCK]


class TestInventoryService:

    def test_create_and_get(self, inventory_service, test_actor_id):
        draft = InventoryItemDraft(
            " CBL-001 ", "D-Link Cat-6 Ethernet Cable (305m)", InventoryCategory.CABLE,
            Decimal("8500"), stock=5, supplier="Cables & More", part_number="",
        )

        created = inventory_service.create_item(draft, actor_id=test_actor_id)
        loaded = inventory_service.get_item("CBL-001")

        assert loaded == created
        assert loaded.item_code == "CBL-001"
        assert loaded.category == InventoryCategory.CABLE
        assert loaded.price == Decimal("8500")
        assert loaded.part_number is None

    def test_duplicate_code_rejected(self, inventory_service, stocked_catalogue, test_actor_id):
        draft = InventoryItemDraft("CAM-001", "Another camera", "Camera", Decimal("999"))

        with pytest.raises(ValidationFailedError) as exc_info:
            inventory_service.create_item(draft, actor_id=test_actor_id)

        assert [e.code for e in exc_info.value.errors] == [DUPLICATE_ITEM_CODE]
        assert len(inventory_service.list_items()) == len(stocked_catalogue)

    def test_unknown_item(self, inventory_service):
        with pytest.raises(DocumentNotFoundError) as exc_info:
            inventory_service.get_item("CAM-404")

        assert exc_info.value.document_type == "Inventory item"

    def test_list_in_code_order(self, inventory_service, stocked_catalogue):
        codes = [item.item_code for item in inventory_service.list_items()]

        assert codes == ["ACC-002", "CAM-001", "CAM-002", "NVR-001"]

    def test_filter_by_category(self, inventory_service, stocked_catalogue):
        cameras = inventory_service.list_items(category="Camera")

        assert [item.item_code for item in cameras] == ["CAM-001", "CAM-002"]

    @pytest.mark.parametrize("term, expected", [
        ("dome", ["CAM-001"]),
        ("nvr5216", ["NVR-001"]),
        ("CAMERA", ["CAM-001", "CAM-002"]),
        ("%", []),
    ])
    def test_search_name_and_part_number(self, inventory_service, stocked_catalogue, term, expected):
        found = inventory_service.list_items(search=term)

        assert [item.item_code for item in found] == expected

    def test_category_and_search_combined(self, inventory_service, stocked_catalogue):
        found = inventory_service.list_items(category=InventoryCategory.CAMERA, search="bullet")

        assert [item.item_code for item in found] == ["CAM-002"]

    def test_list_suppliers(self, inventory_service, stocked_catalogue):
        assert inventory_service.list_suppliers() == [
            "Cables & More", "SecureTech Distributors", "Vision Systems Inc.",
        ]


class TestSupplierPurchaseOrderDraft:

    def test_lists_supplier_items_at_zero(self, inventory_service, stocked_catalogue):
        draft = inventory_service.purchase_order_draft_for_supplier("SecureTech Distributors")

        assert draft.supplier == "SecureTech Distributors"
        assert [(line.item_id, line.quantity, line.unit_price) for line in draft.lines] == [
            ("CAM-001", Decimal("0"), Decimal("4500")),
            ("NVR-001", Decimal("0"), Decimal("25000")),
        ]
        assert [e.code for e in validate_purchase_order_draft(draft)] == [NO_LINE_ITEMS]

    def test_filled_draft_orders_only_given_quantities(
        self, inventory_service, purchasing_service, stocked_catalogue, test_actor_id,
    ):
        draft = inventory_service.purchase_order_draft_for_supplier("SecureTech Distributors")
        draft = dataclasses.replace(draft, lines=tuple(
            dataclasses.replace(line, quantity=Decimal("3")) if line.item_id == "NVR-001" else line
            for line in draft.lines
        ))

        order = purchasing_service.create_purchase_order(draft, actor_id=test_actor_id)

        assert [line.item_id for line in order.lines] == ["NVR-001"]
        assert order.total == Decimal("75000")

    def test_unknown_supplier(self, inventory_service, stocked_catalogue):
        with pytest.raises(DocumentNotFoundError):
            inventory_service.purchase_order_draft_for_supplier("Nobody Ltd")
