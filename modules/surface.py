"""
Drawing surfaces for the document renderers.

Renderers draw in millimetres with the origin at the top-left corner of the
page and never touch a PDF library directly. ``ReportLabSurface`` turns the
calls into a PDF; ``RecordingSurface`` keeps them as a list of operations,
which is what the layout tests inspect.
"""

from __future__ import annotations

import io
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

from reportlab.lib.colors import HexColor
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader
from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.pdfgen import canvas

A4_MM: Tuple[float, float] = (A4[0] / mm, A4[1] / mm)  # 210 x 297

BLACK = "#000000"
WHITE = "#FFFFFF"


def font_name(bold: bool = False, mono: bool = False) -> str:
    if mono:
        return "Courier-Bold" if bold else "Courier"
    return "Helvetica-Bold" if bold else "Helvetica"


class DrawingSurface(ABC):
    """
    Minimal drawing interface shared by all output backends.

    Coordinates and sizes are millimetres; ``y`` grows downwards. For text,
    ``y`` is the baseline. Font sizes are points.
    """

    def __init__(self, page_size: Tuple[float, float] = A4_MM):
        self.page_width, self.page_height = page_size
        self.page_number = 1

    @abstractmethod
    def text(
        self,
        x: float,
        y: float,
        value: str,
        *,
        size: float = 9,
        bold: bool = False,
        color: str = BLACK,
        align: str = "left",
        mono: bool = False,
    ) -> None:
        """Draw one line of text. ``align`` is left, center or right of ``x``."""

    @abstractmethod
    def rect(
        self,
        x: float,
        y: float,
        width: float,
        height: float,
        *,
        stroke: Optional[str] = BLACK,
        fill: Optional[str] = None,
        line_width: float = 0.2,
        dash: Optional[Sequence[float]] = None,
    ) -> None:
        """Draw a rectangle whose top-left corner is (x, y)."""

    @abstractmethod
    def line(
        self,
        x1: float,
        y1: float,
        x2: float,
        y2: float,
        *,
        color: str = BLACK,
        line_width: float = 0.2,
        dash: Optional[Sequence[float]] = None,
    ) -> None:
        """Draw a straight line."""

    @abstractmethod
    def image(self, data: bytes, x: float, y: float, width: float, height: float) -> None:
        """Draw an encoded raster image (PNG/JPEG) stretched to the box."""

    @abstractmethod
    def _start_page(self) -> None:
        """Backend hook: close the current page and open the next one."""

    @abstractmethod
    def finish(self) -> bytes:
        """Close the document and return its bytes."""

    def new_page(self) -> None:
        self._start_page()
        self.page_number += 1

    def text_width(self, value: str, *, size: float = 9, bold: bool = False, mono: bool = False) -> float:
        """Width of ``value`` in millimetres, from the standard font metrics."""
        return stringWidth(value, font_name(bold, mono), size) / mm


class ReportLabSurface(DrawingSurface):
    """Renders to a PDF held in memory."""

    def __init__(
        self,
        page_size: Tuple[float, float] = A4_MM,
        title: str = "",
        author: str = "",
        invariant: bool = False,
    ):
        super().__init__(page_size)
        self._buffer = io.BytesIO()
        self._canvas = canvas.Canvas(
            self._buffer,
            pagesize=(self.page_width * mm, self.page_height * mm),
            invariant=1 if invariant else 0,
        )
        if title:
            self._canvas.setTitle(title)
        if author:
            self._canvas.setAuthor(author)

    def _y(self, y: float) -> float:
        return (self.page_height - y) * mm

    def _apply_dash(self, dash: Optional[Sequence[float]]) -> None:
        if dash:
            self._canvas.setDash([d * mm for d in dash])
        else:
            self._canvas.setDash()

    def text(self, x, y, value, *, size=9, bold=False, color=BLACK, align="left", mono=False):
        c = self._canvas
        c.setFont(font_name(bold, mono), size)
        c.setFillColor(HexColor(color))
        if align == "center":
            c.drawCentredString(x * mm, self._y(y), value)
        elif align == "right":
            c.drawRightString(x * mm, self._y(y), value)
        else:
            c.drawString(x * mm, self._y(y), value)

    def rect(self, x, y, width, height, *, stroke=BLACK, fill=None, line_width=0.2, dash=None):
        c = self._canvas
        if stroke:
            c.setStrokeColor(HexColor(stroke))
            c.setLineWidth(line_width * mm)
            self._apply_dash(dash)
        if fill:
            c.setFillColor(HexColor(fill))
        c.rect(
            x * mm,
            self._y(y + height),
            width * mm,
            height * mm,
            stroke=1 if stroke else 0,
            fill=1 if fill else 0,
        )

    def line(self, x1, y1, x2, y2, *, color=BLACK, line_width=0.2, dash=None):
        c = self._canvas
        c.setStrokeColor(HexColor(color))
        c.setLineWidth(line_width * mm)
        self._apply_dash(dash)
        c.line(x1 * mm, self._y(y1), x2 * mm, self._y(y2))

    def image(self, data, x, y, width, height):
        self._canvas.drawImage(
            ImageReader(io.BytesIO(data)),
            x * mm,
            self._y(y + height),
            width=width * mm,
            height=height * mm,
            preserveAspectRatio=False,
            mask="auto",
        )

    def _start_page(self) -> None:
        self._canvas.showPage()

    def finish(self) -> bytes:
        self._canvas.save()
        return self._buffer.getvalue()


@dataclass
class DrawOp:
    """One recorded drawing call."""

    kind: str
    page: int
    args: Dict[str, Any] = field(default_factory=dict)


class RecordingSurface(DrawingSurface):
    """Keeps every drawing call in ``ops``; produces no bytes."""

    def __init__(self, page_size: Tuple[float, float] = A4_MM):
        super().__init__(page_size)
        self.ops: List[DrawOp] = []

    def _record(self, kind: str, **args: Any) -> None:
        self.ops.append(DrawOp(kind, self.page_number, args))

    def text(self, x, y, value, *, size=9, bold=False, color=BLACK, align="left", mono=False):
        self._record("text", x=x, y=y, value=value, size=size, bold=bold, color=color, align=align, mono=mono)

    def rect(self, x, y, width, height, *, stroke=BLACK, fill=None, line_width=0.2, dash=None):
        self._record("rect", x=x, y=y, width=width, height=height, stroke=stroke, fill=fill, dash=dash)

    def line(self, x1, y1, x2, y2, *, color=BLACK, line_width=0.2, dash=None):
        self._record("line", x1=x1, y1=y1, x2=x2, y2=y2, color=color, dash=dash)

    def image(self, data, x, y, width, height):
        self._record("image", x=x, y=y, width=width, height=height, size=len(data))

    def _start_page(self) -> None:
        self._record("page_break")

    def finish(self) -> bytes:
        return b""

    @property
    def page_count(self) -> int:
        return self.page_number

    def of_kind(self, kind: str) -> List[DrawOp]:
        return [op for op in self.ops if op.kind == kind]

    def texts(self, page: Optional[int] = None) -> List[str]:
        return [
            op.args["value"]
            for op in self.of_kind("text")
            if page is None or op.page == page
        ]
