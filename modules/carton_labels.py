"""
Carton labels.

One label per carton, numbered ``CARTON K of N``. A page holds one label at
full size or two stacked labels of half height.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Tuple

from config import Config
from models.records import PackInputs
from modules.document_layout import fit_size, fit_text
from modules.formatting import format_date, format_quantity
from modules.surface import DrawingSurface, ReportLabSurface
from logging_config import get_logger

logger = get_logger(__name__)

MARGIN = 15.0
PADDING = 5.0
MUTED_COLOR = "#808080"


def carton_boxes(page_size: Tuple[float, float], labels_per_page: int) -> List[Tuple[float, float, float, float]]:
    """``(x, y, width, height)`` of each label position on a page."""
    if labels_per_page not in (1, 2):
        raise ValueError(f"Carton labels per page must be 1 or 2, got {labels_per_page}")
    width, height = page_size
    label_width = width - 2 * MARGIN
    if labels_per_page == 1:
        return [(MARGIN, MARGIN, label_width, height - 2 * MARGIN)]
    label_height = (height - 3 * MARGIN) / 2
    return [
        (MARGIN, MARGIN, label_width, label_height),
        (MARGIN, 2 * MARGIN + label_height, label_width, label_height),
    ]


def render_carton_labels(
    inputs: PackInputs,
    labels_per_page: Optional[int] = None,
    generated_at: Optional[datetime] = None,
    surface: Optional[DrawingSurface] = None,
) -> bytes:
    """
    Render one label per carton.

    Raises:
        ValueError: no readiness record, cartons count not set, or an
            unsupported ``labels_per_page``
    """
    readiness = inputs.readiness
    if readiness is None or readiness.cartons_count is None or readiness.cartons_count <= 0:
        raise ValueError("Cartons count is required to generate carton labels")
    labels_per_page = labels_per_page or Config.CARTON_LABELS_PER_PAGE
    generated_at = generated_at or datetime.now()

    po = inputs.purchase_order
    if surface is None:
        surface = ReportLabSurface(
            title=f"Carton Labels {po.display_number}",
            author=Config.APP_NAME,
            invariant=Config.PDF_INVARIANT,
        )
    boxes = carton_boxes((surface.page_width, surface.page_height), labels_per_page)

    company_name = inputs.company.company_name or Config.COMPANY_NAME
    sku = inputs.project.display_sku
    total = readiness.cartons_count
    lines = []
    if readiness.units_per_carton:
        lines.append(f"Units: {readiness.units_per_carton}")
    if readiness.has_dimensions:
        dims = " x ".join(
            format_quantity(v)
            for v in (readiness.carton_length_cm, readiness.carton_width_cm, readiness.carton_height_cm)
        )
        lines.append(f"Dimensions: {dims} cm")
    if readiness.carton_weight_kg:
        lines.append(f"Weight: {format_quantity(readiness.carton_weight_kg)} kg")

    for number in range(1, total + 1):
        position = (number - 1) % labels_per_page
        if number > 1 and position == 0:
            surface.new_page()
        x, y, width, height = boxes[position]
        _draw_label(surface, x, y, width, height, company_name, po.display_number, sku, f"CARTON {number} of {total}", lines, generated_at)

    logger.info(f"Carton labels for {po.display_number}: {total} label(s), {surface.page_number} page(s)")
    return surface.finish()


def _draw_label(
    s: DrawingSurface,
    x: float,
    y: float,
    width: float,
    height: float,
    company_name: str,
    po_number: str,
    sku: str,
    carton_line: str,
    lines: List[str],
    generated_at: datetime,
) -> None:
    s.rect(x, y, width, height, line_width=0.5)
    left = x + PADDING
    inner = width - 2 * PADDING
    cursor = y + PADDING + 5

    if company_name:
        s.text(left, cursor, fit_text(s, company_name, inner, 12, bold=True), size=12, bold=True)
        cursor += 6

    s.text(left, cursor, "PO Number:", size=10, bold=True)
    s.text(left + 30, cursor, fit_text(s, po_number, inner - 30, 10), size=10)
    cursor += 6

    if sku:
        s.text(left, cursor, "SKU:", size=10, bold=True)
        s.text(left + 30, cursor, fit_text(s, sku, inner - 30, 10), size=10)
        cursor += 6

    cursor += 2
    size = fit_size(s, carton_line, inner, 14, 8, bold=True)
    s.text(left, cursor, carton_line, size=size, bold=True)
    cursor += 8

    for line in lines:
        s.text(left, cursor, line, size=10)
        cursor += 5

    cursor += 3
    s.line(left, cursor, x + width - PADDING, cursor, line_width=0.3)

    s.text(left, y + height - PADDING, f"Generated: {format_date(generated_at)}", size=7, color=MUTED_COLOR)
