"""Shared fixtures: a fully prepared purchase order and its records."""

from datetime import datetime

import pytest

from models import (
    CompanySettings,
    LineItem,
    PackInputs,
    ProductIdentifiers,
    Project,
    PurchaseOrder,
    ReadinessRecord,
    ShippingSpecs,
    Supplier,
)


@pytest.fixture
def generated_at():
    return datetime(2026, 3, 2, 10, 30)


@pytest.fixture
def ready_record():
    """Readiness record satisfying every readiness rule."""
    return ReadinessRecord(
        needs_fnsku=True,
        units_per_carton=24,
        cartons_count=10,
        carton_length_cm=30,
        carton_width_cm=20,
        carton_height_cm=15,
        carton_weight_kg=5.5,
        labels_generated_at=datetime(2026, 3, 1, 9, 0),
        labels_qty=30,
        labels_template="A4_30UP",
    )


@pytest.fixture
def identifiers():
    return ProductIdentifiers(
        gtin_code="8437012345678",
        gtin_type="EAN",
        fnsku="X001ABC123",
        asin="B0TEST1234",
        sku="FD-MUG-001",
    )


@pytest.fixture
def project():
    return Project(id="prj-1", name="Ceramic Coffee Mug 350ml", sku="FD-MUG-001", project_code="PRJ-001")


@pytest.fixture
def supplier():
    return Supplier(
        name="Ningbo Ceramics Co., Ltd.",
        address="88 Industrial Road, Ningbo, China",
        contact_name="Lily Chen",
        phone="+86 574 1234 5678",
        email="lily@ningbo-ceramics.example",
    )


@pytest.fixture
def company():
    return CompanySettings(
        company_name="Acme Goods",
        legal_name="Acme Goods S.L.",
        address="Carrer Major 1",
        postal_code="08001",
        city="Barcelona",
        country="Spain",
        email="orders@acme.example",
        phone="+34 600 000 000",
        tax_id="B12345678",
    )


@pytest.fixture
def purchase_order():
    return PurchaseOrder(
        id="po-1",
        po_number="PO-2026-001",
        order_date=datetime(2026, 2, 15),
        currency="USD",
        incoterm="FCA",
        incoterm_location="Ningbo",
        payment_terms="30% deposit, 70% before shipment",
        quote_ref="Q-889",
        production_lead_time="35 days",
        delivery_address="Forwarder warehouse, Ningbo",
        items=[
            LineItem(ref="MUG-350", description="Ceramic mug 350ml, white", quantity=240, unit_price=1.235),
            LineItem(ref="BOX-1", description="Printed gift box", quantity=240, unit_price=0.18),
        ],
        shipping=ShippingSpecs(total_cartons="10", gross_weight="55", shipping_mark="ACME / PO-2026-001"),
        notes="Pack each mug in a bubble bag.",
        project_id="prj-1",
    )


@pytest.fixture
def pack_inputs(purchase_order, supplier, project, company, identifiers, ready_record):
    return PackInputs(
        purchase_order=purchase_order,
        supplier=supplier,
        project=project,
        company=company,
        identifiers=identifiers,
        readiness=ready_record,
    )
