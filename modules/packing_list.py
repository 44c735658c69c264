"""Packing list sent to the manufacturer with the pack."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from config import Config
from models.records import PackInputs, ReadinessRecord
from modules.document_layout import Column, KeyValue, PageComposer
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
    Column("Description", 80),
    Column("Quantity", 25, "center"),
    Column("Unit", 20, "center"),
    Column("Unit Price", 27, "right"),
    Column("Total", 28, "right"),
]


def packaging_facts(readiness: ReadinessRecord) -> list[KeyValue]:
    """
    Packaging rows of the packing list.

    Totals are derived only when both operands are present; a missing fact
    is left out rather than printed as zero.
    """
    facts: list[KeyValue] = []
    if readiness.cartons_count:
        facts.append(("Cartons:", str(readiness.cartons_count)))
    if readiness.units_per_carton:
        facts.append(("Units per carton:", str(readiness.units_per_carton)))
    if readiness.total_units is not None:
        facts.append(("Total units:", str(readiness.total_units)))
    if readiness.has_dimensions:
        dims = " x ".join(
            format_quantity(v)
            for v in (readiness.carton_length_cm, readiness.carton_width_cm, readiness.carton_height_cm)
        )
        facts.append(("Dimensions (L x W x H):", f"{dims} cm"))
    if readiness.carton_weight_kg:
        facts.append(("Weight per carton:", f"{format_quantity(readiness.carton_weight_kg)} kg"))
    if readiness.total_weight_kg is not None:
        facts.append(("Total weight:", f"{readiness.total_weight_kg:.2f} kg"))
    return facts


def render_packing_list(
    inputs: PackInputs,
    generated_at: Optional[datetime] = None,
    surface: Optional[DrawingSurface] = None,
) -> bytes:
    po = inputs.purchase_order
    company = inputs.company
    project = inputs.project
    generated_at = generated_at or datetime.now()
    company_name = company.company_name or Config.COMPANY_NAME

    if surface is None:
        surface = ReportLabSurface(
            title=f"Packing List {po.display_number}",
            author=Config.APP_NAME,
            invariant=Config.PDF_INVARIANT,
        )
    page = PageComposer(surface, footer_text=f"Generated by {Config.APP_NAME} - {format_timestamp(generated_at)}")

    page.title(f"{company_name.upper()} - PACKING LIST" if company_name else "PACKING LIST")
    for line in (company.legal_name, company.full_address, f"Tax ID: {company.tax_id}" if company.tax_id else ""):
        if line:
            page.centered_line(line)
    page.right_line(f"Date: {format_date(generated_at)}")
    page.spacer(4)

    project_info = ""
    if project.name or project.display_sku:
        project_info = f"{project.name} ({project.display_sku})" if project.display_sku else project.name
    page.key_values(
        [
            ("PO Number:", po.display_number),
            ("Project:", project_info),
            ("Supplier:", inputs.supplier.name),
        ],
        label_width=35,
        size=10,
        step=7,
    )
    page.spacer(3)

    if po.items:
        page.heading("Items:")
        rows = [
            [
                item.description,
                format_quantity(item.quantity or 0),
                item.unit,
                format_unit_price(item.unit_price),
                format_money(item.line_total) if item.unit_price is not None else "",
            ]
            for item in po.items
        ]
        page.table(ITEM_COLUMNS, rows, size=9)
        page.spacer(6)

    readiness = inputs.readiness
    if readiness is not None:
        facts = packaging_facts(readiness)
        if facts:
            page.heading("Packaging Information:")
            page.key_values(facts, label_width=60, size=9)
            page.spacer(4)

        if readiness.notes:
            page.heading("Notes:")
            page.paragraph(readiness.notes, size=9)

    content = page.finish()
    logger.info(f"Packing list for {po.display_number}: {surface.page_number} page(s)")
    return content
