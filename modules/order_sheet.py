"""
Purchase order sheet.

The document the manufacturer signs: buyer and supplier details, delivery
address, commercial terms, the priced line items with a grand total, the
shipping specs and a signature block.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from config import Config
from models.records import PackInputs
from modules.document_layout import Column, PageComposer
from modules.formatting import (
    format_date,
    format_money,
    format_quantity,
    format_timestamp,
    format_unit_price,
)
from modules.surface import DrawingSurface, ReportLabSurface
from logging_config import get_logger

logger = get_logger(__name__)

ITEM_COLUMNS = [
    Column("Ref.", 18),
    Column("Description", 52),
    Column("Qty", 16, "center"),
    Column("UOM", 14, "center"),
    Column("Unit Price", 24, "right"),
    Column("Line Total", 26, "right"),
    Column("Notes", 30),
]


def render_order_sheet(
    inputs: PackInputs,
    generated_at: Optional[datetime] = None,
    surface: Optional[DrawingSurface] = None,
) -> bytes:
    """
    Render the purchase order sheet.

    Args:
        inputs: Order, supplier and buyer company records
        generated_at: Timestamp printed in the footer (defaults to now)
        surface: Drawing backend; an A4 PDF surface by default

    Returns:
        PDF bytes (empty for a non-PDF surface)
    """
    po = inputs.purchase_order
    company = inputs.company
    supplier = inputs.supplier
    generated_at = generated_at or datetime.now()
    company_name = company.company_name or Config.COMPANY_NAME

    if surface is None:
        surface = ReportLabSurface(
            title=f"Purchase Order {po.display_number}",
            author=Config.APP_NAME,
            invariant=Config.PDF_INVARIANT,
        )
    page = PageComposer(surface, footer_text=f"Generated by {Config.APP_NAME} - {format_timestamp(generated_at)}")

    banner = f"{company_name.upper()} - PURCHASE ORDER" if company_name else "PURCHASE ORDER"
    page.title(banner)

    # Reference block: buyer on the left, order references on the right
    page.key_values(
        [
            ("Buyer:", company.legal_name or company_name),
            ("HQ Address:", company.full_address),
            ("Mail:", company.email),
            ("Tax ID:", company.tax_id),
        ],
        [
            ("P.O. Ref:", po.display_number),
            ("Date:", format_date(po.order_date)),
            ("Quote Ref:", po.quote_ref),
            ("Currency:", po.currency),
        ],
        label_width=24,
    )
    page.spacer(4)

    page.split_sections("SUPPLIER DETAILS", "BUYER DETAILS")
    page.key_values(
        [
            ("Name", supplier.name),
            ("Address", supplier.address),
            ("Contact", supplier.contact_name),
            ("Phone", supplier.phone),
            ("Email", supplier.email),
        ],
        [
            ("Company", company_name),
            ("Responsible", company.legal_name),
            ("Tax ID", company.tax_id),
            ("Phone", company.phone),
            ("Email", company.email),
        ],
        label_width=24,
    )
    page.spacer(3)

    delivery = [
        ("Address", po.delivery_address),
        ("Contact", po.delivery_contact),
        ("Phone", po.delivery_phone),
        ("Email", po.delivery_email),
    ]
    if any(value for _, value in delivery):
        page.section("DELIVERY ADDRESS")
        page.key_values(delivery, label_width=28)
        page.spacer(3)

    incoterm = " ".join(part for part in (po.incoterm, po.incoterm_location) if part)
    terms = [
        ("Payment terms", po.payment_terms),
        ("Incoterm", incoterm),
        ("Sample lead time", po.sample_lead_time),
        ("Production lead time", po.production_lead_time),
        ("Quote validity", po.quote_validity),
    ]
    if any(value for _, value in terms):
        page.section("COMMERCIAL TERMS")
        page.key_values(terms, label_width=45)
        page.spacer(3)

    page.section("PRODUCT DETAILS")
    rows = [
        [
            item.ref,
            item.description,
            format_quantity(item.quantity),
            item.unit,
            format_unit_price(item.unit_price),
            format_money(item.line_total),
            item.notes,
        ]
        for item in po.items
    ]
    rows.append(["", "TOTAL", "", "", "", f"{format_money(po.grand_total)} {po.currency}", ""])
    page.table(ITEM_COLUMNS, rows, emphasized=1)
    page.spacer(6)

    shipping = po.shipping
    specs = [
        ("Total cartons", shipping.total_cartons),
        ("Net weight (kg)", shipping.net_weight),
        ("Gross weight (kg)", shipping.gross_weight),
        ("Total volume (CBM)", shipping.total_volume),
        ("Carton size", shipping.carton_size),
        ("Shipping mark", shipping.shipping_mark),
    ]
    if any(value for _, value in specs) or po.notes:
        page.section("SHIPPING SPECS & NOTES")
        page.key_values(specs, label_width=40)
        if po.notes:
            page.spacer(1)
            page.key_values([("Notes:", po.notes)], label_width=40)
        page.spacer(3)

    _signature_block(page)

    content = page.finish()
    logger.info(f"Order sheet for {po.display_number}: {len(po.items)} item(s), {surface.page_number} page(s)")
    return content


def _signature_block(page: PageComposer) -> None:
    page.ensure_space(28)
    page.spacer(14)
    s = page.surface
    line_width = 60
    right_x = s.page_width - page.margin - line_width
    s.line(page.margin, page.y, page.margin + line_width, page.y)
    s.line(right_x, page.y, right_x + line_width, page.y)
    page.spacer(4)
    s.text(page.margin, page.y, "Buyer Signature", size=8)
    s.text(right_x, page.y, "Supplier Signature", size=8)
    page.spacer(4)
