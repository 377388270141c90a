"""
Inventory Module Service - Maintain the stock catalogue.

Items are looked up by their business code (``CAM-001``) and filtered by
category or by a search term matched against the name and part number.
A supplier's catalogue also seeds purchase order drafts: every item the
supplier carries becomes a line at its catalogue price and quantity zero,
and only the lines given a quantity are ordered.

This service owns the transaction boundary: it commits on success and
rolls back on failure.

Usage:
    service = InventoryService(session)
    item = service.create_item(draft, actor_id=actor_id)
    cameras = service.list_items(category=InventoryCategory.CAMERA)
"""

from __future__ import annotations

from typing import Sequence
from uuid import UUID, uuid4

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from ops_kernel.domain.dtos import ValidationError
from ops_kernel.domain.validation import check_positive, check_required_text
from ops_kernel.exceptions import DocumentNotFoundError
from ops_kernel.logging_config import get_logger
from ops_modules._document_helpers import raise_if_invalid
from ops_modules.inventory.models import InventoryCategory, InventoryItem, InventoryItemDraft
from ops_modules.inventory.orm import InventoryItemModel
from ops_modules.purchasing.models import PurchaseOrderDraft, PurchaseOrderLine

logger = get_logger("modules.inventory.service")

DUPLICATE_ITEM_CODE = "DUPLICATE_ITEM_CODE"
INVALID_CATEGORY = "INVALID_CATEGORY"
INVALID_STOCK = "INVALID_STOCK"


def _blank_to_none(value: str | None) -> str | None:
    if value is None:
        return None
    return value.strip() or None


def validate_item_draft(draft: InventoryItemDraft) -> list[ValidationError]:
    """Every problem with a catalogue draft, empty if none."""
    errors: list[ValidationError] = []
    check_required_text(draft.item_code, "item_code", errors)
    check_required_text(draft.name, "name", errors)
    check_positive(draft.price, "price", errors)

    try:
        InventoryCategory(draft.category)
    except ValueError:
        errors.append(ValidationError(
            code=INVALID_CATEGORY,
            message=f"must be one of {[c.value for c in InventoryCategory]}, got {draft.category!r}",
            field="category",
        ))

    if isinstance(draft.stock, bool) or not isinstance(draft.stock, int) or draft.stock < 0:
        errors.append(ValidationError(
            code=INVALID_STOCK,
            message=f"must be a whole number of units >= 0, got {draft.stock!r}",
            field="stock",
        ))
    return errors


class InventoryService:
    """
    Catalogue operations.

    Transaction boundary: this service commits on success, rolls back on failure.
    """

    def __init__(self, session: Session):
        self._session = session

    def create_item(self, draft: InventoryItemDraft, actor_id: UUID) -> InventoryItem:
        """
        Add an item to the catalogue.

        Raises:
            ValidationFailedError: If the draft has any problem, including an
                item code that is already in use.
        """
        try:
            errors = validate_item_draft(draft)
            item_code = draft.item_code.strip() if isinstance(draft.item_code, str) else ""
            if item_code and self._find(item_code) is not None:
                errors.append(ValidationError(
                    code=DUPLICATE_ITEM_CODE,
                    message=f"item code {item_code!r} is already in use",
                    field="item_code",
                ))
            raise_if_invalid(errors)

            item = InventoryItem(
                id=uuid4(),
                item_code=item_code,
                name=draft.name.strip(),
                category=InventoryCategory(draft.category),
                price=draft.price,
                stock=draft.stock,
                supplier=_blank_to_none(draft.supplier),
                part_number=_blank_to_none(draft.part_number),
            )
            self._session.add(InventoryItemModel.from_dto(item, created_by_id=actor_id))
            self._session.commit()

        except Exception:
            self._session.rollback()
            raise

        logger.info("inventory_item_created", extra={
            "item_code": item.item_code,
            "category": item.category,
            "stock": item.stock,
            "actor_id": str(actor_id),
        })
        return item

    def get_item(self, item_code: str) -> InventoryItem:
        """
        Raises:
            DocumentNotFoundError: If no item has that code.
        """
        model = self._find(item_code)
        if model is None:
            raise DocumentNotFoundError("Inventory item", item_code)
        return model.to_dto()

    def list_items(
        self,
        category: InventoryCategory | str | None = None,
        search: str | None = None,
    ) -> Sequence[InventoryItem]:
        """
        Catalogue items in code order.

        ``search`` matches case-insensitively anywhere in the name or the
        part number.
        """
        stmt = select(InventoryItemModel).order_by(InventoryItemModel.item_code)
        if category is not None:
            stmt = stmt.where(InventoryItemModel.category == InventoryCategory(category).value)
        if search and search.strip():
            term = search.strip()
            stmt = stmt.where(or_(
                InventoryItemModel.name.icontains(term, autoescape=True),
                InventoryItemModel.part_number.icontains(term, autoescape=True),
            ))
        return [model.to_dto() for model in self._session.scalars(stmt)]

    def list_suppliers(self) -> list[str]:
        """Distinct suppliers named in the catalogue, sorted."""
        stmt = (
            select(InventoryItemModel.supplier)
            .where(InventoryItemModel.supplier.is_not(None))
            .distinct()
            .order_by(InventoryItemModel.supplier)
        )
        return list(self._session.scalars(stmt))

    def purchase_order_draft_for_supplier(self, supplier: str) -> PurchaseOrderDraft:
        """
        Draft listing every item the supplier carries at quantity zero.

        Raises:
            DocumentNotFoundError: If the catalogue has no item from that supplier.
        """
        stmt = (
            select(InventoryItemModel)
            .where(InventoryItemModel.supplier == supplier)
            .order_by(InventoryItemModel.item_code)
        )
        items = [model.to_dto() for model in self._session.scalars(stmt)]
        if not items:
            raise DocumentNotFoundError("Supplier", supplier)
        return PurchaseOrderDraft(
            supplier=supplier,
            lines=tuple(
                PurchaseOrderLine(item.item_code, item.name, 0, item.price)
                for item in items
            ),
        )

    def _find(self, item_code: str) -> InventoryItemModel | None:
        return self._session.scalars(
            select(InventoryItemModel).where(InventoryItemModel.item_code == item_code)
        ).one_or_none()
