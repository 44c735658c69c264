"""
ZPL output for thermal label printers.

Each label is a self-contained ``^XA ... ^XZ`` block: a border, the
identifier, optional SKU and product name lines and a Code128 symbol of the
same identifier. Coordinates are authored in dots at 203 dpi and scaled to
the printer's density.
"""

from __future__ import annotations

import math
from typing import Optional

from config import Config
from models.pack import LabelConfiguration
from models.records import ProductIdentifiers, Project
from logging_config import get_logger

logger = get_logger(__name__)

MAX_NAME_LENGTH = 40


def scale(value: int, dpi: int) -> int:
    """Convert a coordinate at the base density to ``dpi``, rounding half up."""
    return int(math.floor(value * dpi / Config.ZPL_BASE_DPI + 0.5))


def field_data(value: str) -> str:
    """Strip the ZPL command prefixes so text cannot start a new command."""
    return value.replace("^", "").replace("~", "")


def generate_labels_zpl(
    code: str,
    sku: str = "",
    product_name: str = "",
    quantity: int = 1,
    include_sku: bool = True,
    include_name: bool = True,
    dpi: Optional[int] = None,
) -> str:
    """
    Build the ZPL program for ``quantity`` identical labels.

    Raises:
        ValueError: empty code, quantity below 1 or non-positive dpi
    """
    if not code:
        raise ValueError("FNSKU or GTIN is required to generate ZPL")
    if quantity < 1:
        raise ValueError(f"Label quantity must be at least 1, got {quantity}")
    dpi = dpi or Config.ZPL_DEFAULT_DPI
    if dpi <= 0:
        raise ValueError(f"Printer density must be positive, got {dpi}")

    def s(value: int) -> int:
        return scale(value, dpi)

    code = field_data(code)
    name = field_data(product_name)
    if len(name) > MAX_NAME_LENGTH:
        name = name[:MAX_NAME_LENGTH] + "..."

    block = [
        "^XA",
        f"^FO{s(50)},{s(50)}^GB{s(700)},{s(400)},3^FS",
        f"^FO{s(70)},{s(80)}^A0N,{s(50)},{s(50)}^FD{code}^FS",
    ]
    if include_sku and sku:
        block.append(f"^FO{s(70)},{s(140)}^A0N,{s(30)},{s(30)}^FDSKU: {field_data(sku)}^FS")
    if include_name and name:
        block.append(f"^FO{s(70)},{s(180)}^A0N,{s(25)},{s(25)}^FD{name}^FS")
    block.append(f"^FO{s(70)},{s(250)}^BCN,{s(100)},Y,N,N^FD{code}^FS")
    block.append("^XZ")

    label = "\n".join(block) + "\n"
    logger.debug(f"ZPL: {quantity} label(s) for {code} at {dpi} dpi")
    return label * quantity


def render_labels_zpl(
    identifiers: Optional[ProductIdentifiers],
    config: LabelConfiguration,
    project: Optional[Project] = None,
    dpi: Optional[int] = None,
) -> str:
    """ZPL counterpart of the PDF identification labels for the same configuration."""
    code = identifiers.label_code() if identifiers else None
    if code is None:
        raise ValueError("FNSKU or GTIN is required to generate ZPL")
    sku = (identifiers.sku if identifiers else "") or (project.display_sku if project else "")
    return generate_labels_zpl(
        code[1],
        sku=sku,
        product_name=project.name if project else "",
        quantity=config.quantity,
        include_sku=config.include_sku,
        include_name=config.include_name,
        dpi=dpi,
    )
