"""
Identification label layout.

Places N copies of a product identification label on label stock and draws
the identifier text and a Code128 barcode into each cell.

Two stocks are supported:
    A4_30UP      3 x 10 grid of 63.5 x 38.1 mm cells
    LABEL_40x30  one 40 x 30 mm label centred on an A4 page

Cell ``i`` (0-based, row-major) of a sheet sits at
``(col, row) = (i % cols, i // cols)`` and its top-left corner at
``margin + index * (cell + gutter)`` on each axis, plus the calibration
offset shared by all cells. Label ``capacity`` starts a new sheet at index 0.

``test_print`` replaces the content with alignment guides so an operator can
check the stock against the printer before a full run.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Set, Tuple

from config import Config
from core.exceptions import BarcodeEncodingError
from models.pack import LabelConfiguration, LabelTemplate
from models.records import ProductIdentifiers, Project
from modules.barcodes import BarcodeCache
from modules.document_layout import PT_TO_MM, fit_size, fit_text
from modules.surface import A4_MM, DrawingSurface, ReportLabSurface
from logging_config import get_logger

logger = get_logger(__name__)

GUIDE_COLOR = "#E11D48"
CROSSHAIR_COLOR = "#2563EB"
BORDER_COLOR = "#C8C8C8"
MIN_BARCODE_HEIGHT_MM = 4.0


@dataclass(frozen=True)
class SheetSpec:
    """
    Physical geometry of one label stock, in millimetres.

    When ``centered`` is set the margins are derived so the grid sits in the
    middle of the page. Without an explicit page size the page is sized to
    the grid with the margins mirrored on the opposite edges.
    """

    label_width: float
    label_height: float
    columns: int
    rows: int
    margin_top: float = 0.0
    margin_left: float = 0.0
    gutter_x: float = 0.0
    gutter_y: float = 0.0
    page_width: Optional[float] = None
    page_height: Optional[float] = None
    centered: bool = False

    @property
    def capacity(self) -> int:
        return self.columns * self.rows

    @property
    def grid_width(self) -> float:
        return self.columns * self.label_width + (self.columns - 1) * self.gutter_x

    @property
    def grid_height(self) -> float:
        return self.rows * self.label_height + (self.rows - 1) * self.gutter_y

    @property
    def page_size(self) -> Tuple[float, float]:
        width = self.page_width if self.page_width is not None else self.grid_width + 2 * self.margin_left
        height = self.page_height if self.page_height is not None else self.grid_height + 2 * self.margin_top
        return width, height

    @property
    def origin(self) -> Tuple[float, float]:
        """Top-left corner of the first cell, before calibration offsets."""
        if self.centered:
            width, height = self.page_size
            return (width - self.grid_width) / 2, (height - self.grid_height) / 2
        return self.margin_left, self.margin_top


MULTI_UP_SHEET = SheetSpec(
    label_width=63.5,
    label_height=38.1,
    columns=3,
    rows=10,
    margin_top=4.76,
    margin_left=3.18,
    gutter_x=2.54,
    gutter_y=2.54,
)

SINGLE_LABEL_SHEET = SheetSpec(
    label_width=40.0,
    label_height=30.0,
    columns=1,
    rows=1,
    page_width=A4_MM[0],
    page_height=A4_MM[1],
    centered=True,
)

SHEETS: Dict[LabelTemplate, SheetSpec] = {
    LabelTemplate.MULTI_UP: MULTI_UP_SHEET,
    LabelTemplate.SINGLE: SINGLE_LABEL_SHEET,
}


@dataclass(frozen=True)
class LabelStyle:
    """Type sizes (pt) and spacing (mm) of the label content."""

    padding: float
    primary_size: float
    secondary_size: float
    name_size: float
    min_size: float = 5.0


STYLES: Dict[LabelTemplate, LabelStyle] = {
    LabelTemplate.MULTI_UP: LabelStyle(padding=2.0, primary_size=10, secondary_size=8, name_size=7),
    LabelTemplate.SINGLE: LabelStyle(padding=1.5, primary_size=9, secondary_size=7, name_size=6),
}


@dataclass(frozen=True)
class LabelSlot:
    """Where one label lands."""

    sequence: int
    """0-based position in the whole run."""

    page: int
    """0-based sheet number."""

    index: int
    """0-based cell index within its sheet."""

    column: int
    row: int
    x: float
    y: float
    width: float
    height: float

    @property
    def center(self) -> Tuple[float, float]:
        return self.x + self.width / 2, self.y + self.height / 2


def compute_layout(
    count: int,
    sheet: SheetSpec,
    offset_x_mm: float = 0.0,
    offset_y_mm: float = 0.0,
) -> List[LabelSlot]:
    """
    Place ``count`` labels on as many sheets as needed.

    Raises:
        ValueError: if ``count`` is less than 1
    """
    if count < 1:
        raise ValueError(f"Label count must be at least 1, got {count}")

    origin_x, origin_y = sheet.origin
    slots = []
    for sequence in range(count):
        page, index = divmod(sequence, sheet.capacity)
        column, row = index % sheet.columns, index // sheet.columns
        slots.append(
            LabelSlot(
                sequence=sequence,
                page=page,
                index=index,
                column=column,
                row=row,
                x=origin_x + column * (sheet.label_width + sheet.gutter_x) + offset_x_mm,
                y=origin_y + row * (sheet.label_height + sheet.gutter_y) + offset_y_mm,
                width=sheet.label_width,
                height=sheet.label_height,
            )
        )
    return slots


def render_identification_labels(
    identifiers: Optional[ProductIdentifiers],
    config: LabelConfiguration,
    project: Optional[Project] = None,
    *,
    surface: Optional[DrawingSurface] = None,
    invariant: Optional[bool] = None,
) -> bytes:
    """
    Render a run of identification labels.

    Args:
        identifiers: Product identifiers; FNSKU (or else a real GTIN) is printed and encoded
        config: Template, quantity, optional lines, calibration offsets, test print
        project: Supplies the product name and the fallback SKU
        surface: Drawing backend; a PDF surface sized to the stock by default
        invariant: Reproducible PDF output (defaults to Config.PDF_INVARIANT)

    Returns:
        PDF bytes (empty for a non-PDF surface)

    Raises:
        ValueError: nothing to encode and not a test print
    """
    code = identifiers.label_code() if identifiers else None
    if code is None and not config.test_print:
        raise ValueError("FNSKU or GTIN is required to generate identification labels")

    sheet = SHEETS[config.template]
    style = STYLES[config.template]
    slots = compute_layout(config.quantity, sheet, config.offset_x_mm, config.offset_y_mm)

    if surface is None:
        surface = ReportLabSurface(
            sheet.page_size,
            title="Identification labels",
            author=Config.APP_NAME,
            invariant=Config.PDF_INVARIANT if invariant is None else invariant,
        )

    renderer = _LabelRenderer(surface, style, code, identifiers, project, config)
    current_page = 0
    for slot in slots:
        if slot.page != current_page:
            surface.new_page()
            current_page = slot.page
        if config.test_print:
            _draw_guides(surface, slot)
        else:
            renderer.draw(slot)

    pages = slots[-1].page + 1
    logger.info(
        f"Laid out {len(slots)} {config.template.value} labels on {pages} page(s)"
        f"{' (test print)' if config.test_print else ''}"
    )
    return surface.finish()


class _LabelRenderer:
    """Draws the content of one label cell; holds the per-run barcode cache."""

    def __init__(
        self,
        surface: DrawingSurface,
        style: LabelStyle,
        code: Optional[Tuple[str, str]],
        identifiers: Optional[ProductIdentifiers],
        project: Optional[Project],
        config: LabelConfiguration,
    ):
        self.surface = surface
        self.style = style
        self.caption, self.payload = code or ("", "")
        sku = (identifiers.sku if identifiers else "") or (project.display_sku if project else "")
        self.sku = sku if config.include_sku else ""
        self.name = (project.name if project else "") if config.include_name else ""
        self.barcodes = BarcodeCache()
        self._fallbacks: Set[str] = set()

    def draw(self, slot: LabelSlot) -> None:
        s = self.surface
        style = self.style
        s.rect(slot.x, slot.y, slot.width - 0.5, slot.height - 0.5, stroke=BORDER_COLOR, line_width=0.1)

        left = slot.x + style.padding
        inner_width = slot.width - 2 * style.padding
        y = slot.y + style.padding

        primary = f"{self.caption}: {self.payload}"
        size = fit_size(s, primary, inner_width, style.primary_size, style.min_size, bold=True)
        y += size * PT_TO_MM
        s.text(left, y, fit_text(s, primary, inner_width, size, bold=True), size=size, bold=True)

        if self.sku:
            y += style.secondary_size * PT_TO_MM * 1.2
            line = fit_text(s, f"SKU: {self.sku}", inner_width, style.secondary_size)
            s.text(left, y, line, size=style.secondary_size, color="#646464")

        if self.name:
            y += style.name_size * PT_TO_MM * 1.2
            line = fit_text(s, self.name, inner_width, style.name_size)
            s.text(left, y, line, size=style.name_size, color="#505050")

        top = y + 1.0
        bottom = slot.y + slot.height - style.padding
        height = bottom - top
        if height < MIN_BARCODE_HEIGHT_MM:
            return
        try:
            image = self.barcodes.get(self.payload)
        except BarcodeEncodingError as exc:
            if self.payload not in self._fallbacks:
                logger.warning(f"Barcode fallback to text: {exc}")
                self._fallbacks.add(self.payload)
            self._draw_text_fallback(left, top, inner_width, height)
            return
        s.image(image, left, top, inner_width, height)

    def _draw_text_fallback(self, x: float, top: float, width: float, height: float) -> None:
        s = self.surface
        size = fit_size(s, self.payload, width, 12, self.style.min_size, mono=True)
        baseline = top + height / 2 + size * PT_TO_MM / 3
        s.text(x + width / 2, baseline, fit_text(s, self.payload, width, size, mono=True), size=size, align="center", mono=True)


def _draw_guides(surface: DrawingSurface, slot: LabelSlot) -> None:
    """Alignment guides: dashed cell outline, centre crosshair and the cell's row/column."""
    surface.rect(slot.x, slot.y, slot.width, slot.height, stroke=GUIDE_COLOR, line_width=0.3, dash=(1.0, 1.0))
    cx, cy = slot.center
    surface.line(slot.x, cy, slot.x + slot.width, cy, color=CROSSHAIR_COLOR, line_width=0.1)
    surface.line(cx, slot.y, cx, slot.y + slot.height, color=CROSSHAIR_COLOR, line_width=0.1)
    surface.text(slot.x + 1.5, slot.y + 3.5, f"R{slot.row + 1} C{slot.column + 1}", size=6, color=GUIDE_COLOR)
