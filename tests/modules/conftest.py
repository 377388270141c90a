"""
Shared fixtures for module tests.

Provides services bound to the per-test database, a sample customer and
the reference two-item draft.  All dates are deterministic.

DESIGN RULE: Every fixture is opt-in.  No autouse.  Each test explicitly
declares which services and documents it depends on in its function
signature.
"""

from datetime import date
from decimal import Decimal

import pytest

from ops_engines.totals import CostParameters, LineItem
from ops_modules._document_helpers import CustomerInfo
from ops_modules.inventory.models import InventoryItemDraft
from ops_modules.inventory.service import InventoryService
from ops_modules.invoices.models import InvoiceDraft
from ops_modules.invoices.service import InvoiceService
from ops_modules.purchasing.models import PurchaseOrderDraft, PurchaseOrderLine
from ops_modules.purchasing.service import PurchasingService
from ops_modules.quotations.models import QuotationDraft
from ops_modules.quotations.service import QuotationService

# ---------------------------------------------------------------------------
# Deterministic reference data
# ---------------------------------------------------------------------------

DOCUMENT_DATE = date(2026, 1, 15)

REFERENCE_GRAND_TOTAL = Decimal("156940")


def reference_items() -> tuple[LineItem, ...]:
    return (
        LineItem(
            id="item-1", description="16-Channel NVR", quantity=Decimal("1"),
            unit_price=Decimal("80000"), tax_rate=Decimal("18"),
            serial_numbers=("NVR-0001",),
        ),
        LineItem(
            id="item-2", description="4TB Surveillance HDD", quantity=Decimal("1"),
            unit_price=Decimal("40000"), tax_rate=Decimal("18"),
        ),
    )


REFERENCE_COST = CostParameters(labor_cost=Decimal("20000"), discount_percent=Decimal("5"))


# ---------------------------------------------------------------------------
# Services
# ---------------------------------------------------------------------------


@pytest.fixture
def quotation_service(session, deterministic_clock, hub_config):
    return QuotationService(session, clock=deterministic_clock, config=hub_config)


@pytest.fixture
def invoice_service(session, deterministic_clock, hub_config, document_locks):
    return InvoiceService(
        session, clock=deterministic_clock, config=hub_config, locks=document_locks,
    )


@pytest.fixture
def purchasing_service(session, deterministic_clock, hub_config):
    return PurchasingService(session, clock=deterministic_clock, config=hub_config)


@pytest.fixture
def inventory_service(session):
    return InventoryService(session)


# ---------------------------------------------------------------------------
# Drafts
# ---------------------------------------------------------------------------


@pytest.fixture
def sample_customer() -> CustomerInfo:
    return CustomerInfo(
        name="Acme Traders",
        email="accounts@acme.example",
        address="12 MG Road, Bengaluru",
        contact_person="R. Iyer",
        phone="+91 80 5550 1234",
    )


@pytest.fixture
def quotation_draft(sample_customer) -> QuotationDraft:
    return QuotationDraft(
        customer=sample_customer,
        items=reference_items(),
        cost=REFERENCE_COST,
        po_number="CUST-PO-77",
    )


@pytest.fixture
def invoice_draft(sample_customer) -> InvoiceDraft:
    return InvoiceDraft(
        customer=sample_customer,
        items=reference_items(),
        cost=REFERENCE_COST,
    )


@pytest.fixture
def purchase_order_draft() -> PurchaseOrderDraft:
    return PurchaseOrderDraft(
        supplier="Hikvision Distributors",
        lines=(
            PurchaseOrderLine("cam-1", "Dome camera 4MP", Decimal("10"), Decimal("2450.50")),
            PurchaseOrderLine("cbl-1", "CAT6 cable 305m", Decimal("2"), Decimal("6200")),
        ),
    )


# ---------------------------------------------------------------------------
# Persisted documents
# ---------------------------------------------------------------------------


@pytest.fixture
def approved_quotation(quotation_service, quotation_draft, test_actor_id):
    quote = quotation_service.create_quotation(quotation_draft, actor_id=test_actor_id)
    quotation_service.send_quotation(quote.quote_number, actor_id=test_actor_id)
    return quotation_service.approve_quotation(quote.quote_number, actor_id=test_actor_id)


@pytest.fixture
def pending_invoice(invoice_service, invoice_draft, test_actor_id):
    return invoice_service.create_invoice(invoice_draft, actor_id=test_actor_id)


CATALOGUE = (
    InventoryItemDraft("CAM-001", "Hikvision 5MP Dome Camera", "Camera", Decimal("4500"),
                       stock=25, supplier="SecureTech Distributors", part_number="DS-2CE76H0T-ITPF"),
    InventoryItemDraft("CAM-002", "CP Plus 2.4MP Bullet Camera", "Camera", Decimal("2200"),
                       stock=40, supplier="Vision Systems Inc.", part_number="CP-UNC-TA21L3"),
    InventoryItemDraft("NVR-001", "Dahua 16-Channel NVR", "DVR/NVR", Decimal("25000"),
                       stock=10, supplier="SecureTech Distributors", part_number="NVR5216-4KS2"),
    InventoryItemDraft("ACC-002", "Waterproof Junction Box", "Accessory", Decimal("250"),
                       stock=100, supplier="Cables & More", part_number="JB-WP-01"),
)


@pytest.fixture
def stocked_catalogue(inventory_service, test_actor_id):
    return [inventory_service.create_item(draft, actor_id=test_actor_id) for draft in CATALOGUE]
