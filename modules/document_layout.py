"""
Page composition helpers for the multi-page documents.

``PageComposer`` keeps a vertical cursor on a drawing surface and offers the
blocks the order sheet and packing list are made of: title banner, section
bars, one- or two-column key/value rows, tables that continue on the next
page with their header repeated, wrapped paragraphs, and a footer with the
page number on every page.
"""

from __future__ import annotations

from dataclasses import dataclass
from itertools import zip_longest
from typing import List, Optional, Sequence, Tuple

from modules.surface import BLACK, WHITE, DrawingSurface

PT_TO_MM = 25.4 / 72

PRIMARY_COLOR = "#4F46E5"
HEADER_BG = "#F9FAFB"
BORDER_COLOR = "#E5E7EB"
MUTED_COLOR = "#808080"

ELLIPSIS = "..."


# =============================================================================
# TEXT FITTING
# =============================================================================

def fit_text(
    surface: DrawingSurface,
    text: str,
    width: float,
    size: float,
    bold: bool = False,
    mono: bool = False,
) -> str:
    """Truncate ``text`` with an ellipsis so it fits in ``width`` mm."""
    if surface.text_width(text, size=size, bold=bold, mono=mono) <= width:
        return text
    cut = len(text)
    while cut > 0:
        candidate = text[:cut].rstrip() + ELLIPSIS
        if surface.text_width(candidate, size=size, bold=bold, mono=mono) <= width:
            return candidate
        cut -= 1
    return ""


def fit_size(
    surface: DrawingSurface,
    text: str,
    width: float,
    size: float,
    min_size: float,
    bold: bool = False,
    mono: bool = False,
) -> float:
    """Largest font size, down to ``min_size`` in 0.5 pt steps, at which ``text`` fits."""
    while size > min_size and surface.text_width(text, size=size, bold=bold, mono=mono) > width:
        size -= 0.5
    return max(size, min_size)


def wrap_text(
    surface: DrawingSurface,
    text: str,
    width: float,
    size: float,
    bold: bool = False,
) -> List[str]:
    """Greedy word wrap; words longer than a line are split."""
    lines: List[str] = []
    for paragraph in text.splitlines() or [""]:
        current = ""
        for word in paragraph.split():
            candidate = f"{current} {word}" if current else word
            if surface.text_width(candidate, size=size, bold=bold) <= width:
                current = candidate
                continue
            if current:
                lines.append(current)
            while surface.text_width(word, size=size, bold=bold) > width and len(word) > 1:
                cut = len(word) - 1
                while cut > 1 and surface.text_width(word[:cut], size=size, bold=bold) > width:
                    cut -= 1
                lines.append(word[:cut])
                word = word[cut:]
            current = word
        lines.append(current)
    return lines


# =============================================================================
# TABLES
# =============================================================================

@dataclass(frozen=True)
class Column:
    header: str
    width: float
    align: str = "left"


KeyValue = Tuple[str, Optional[str]]


def present(pairs: Sequence[KeyValue]) -> List[Tuple[str, str]]:
    """Drop pairs whose value is missing; missing fields are omitted, not blanked."""
    return [(label, str(value)) for label, value in pairs if value not in (None, "")]


class PageComposer:
    """Vertical-flow layout on top of a ``DrawingSurface``."""

    FOOTER_SPACE = 14.0

    def __init__(self, surface: DrawingSurface, margin: float = 15.0, footer_text: str = ""):
        self.surface = surface
        self.margin = margin
        self.footer_text = footer_text
        self.y = margin

    # -- geometry -------------------------------------------------------------

    @property
    def content_width(self) -> float:
        return self.surface.page_width - 2 * self.margin

    @property
    def bottom(self) -> float:
        return self.surface.page_height - self.margin - self.FOOTER_SPACE

    def ensure_space(self, height: float) -> bool:
        """Start a new page when ``height`` does not fit. Returns True on a break."""
        if self.y + height > self.bottom:
            self.page_break()
            return True
        return False

    def page_break(self) -> None:
        self._draw_footer()
        self.surface.new_page()
        self.y = self.margin + 5

    def spacer(self, height: float) -> None:
        self.y += height

    # -- blocks ---------------------------------------------------------------

    def title(self, text: str, size: float = 16) -> None:
        self.ensure_space(12)
        self.surface.text(self.surface.page_width / 2, self.y + size * PT_TO_MM, text, size=size, bold=True, align="center")
        self.y += 12

    def centered_line(self, text: str, size: float = 9) -> None:
        self.ensure_space(5)
        self.surface.text(self.surface.page_width / 2, self.y + 3, text, size=size, align="center")
        self.y += 5

    def right_line(self, text: str, size: float = 9) -> None:
        self.ensure_space(5)
        self.surface.text(self.surface.page_width - self.margin, self.y + 3, text, size=size, align="right")
        self.y += 5

    def heading(self, text: str, size: float = 11) -> None:
        self.ensure_space(12)
        self.surface.text(self.margin, self.y + 4, text, size=size, bold=True)
        self.y += 7

    def section(self, text: str) -> None:
        """Shaded full-width bar with a bold caption."""
        self.ensure_space(17)
        self.surface.rect(self.margin, self.y, self.content_width, 7, stroke=None, fill=HEADER_BG)
        self.surface.text(self.margin + 2, self.y + 5, text, size=9, bold=True)
        self.y += 10

    def split_sections(self, left: str, right: str) -> None:
        """Two shaded bars side by side."""
        self.ensure_space(17)
        half = self.content_width / 2
        self.surface.rect(self.margin, self.y, half - 2, 7, stroke=None, fill=HEADER_BG)
        self.surface.rect(self.margin + half + 2, self.y, half - 2, 7, stroke=None, fill=HEADER_BG)
        self.surface.text(self.margin + 2, self.y + 5, left, size=9, bold=True)
        self.surface.text(self.margin + half + 4, self.y + 5, right, size=9, bold=True)
        self.y += 10

    def key_values(
        self,
        left: Sequence[KeyValue],
        right: Optional[Sequence[KeyValue]] = None,
        label_width: float = 30.0,
        size: float = 8,
        step: float = 5.0,
    ) -> None:
        """
        Rows of bold label + value. With ``right`` the block is split in two
        columns that are filled independently.
        """
        s = self.surface
        columns = [present(left)]
        if right is not None:
            columns.append(present(right))
        column_width = self.content_width / len(columns)
        line_height = size * PT_TO_MM * 1.3

        for row in zip_longest(*columns):
            cells = []
            for position, pair in enumerate(row):
                if pair is None:
                    continue
                x = self.margin + position * (column_width + (2 if position else 0))
                value_width = column_width - label_width - 4
                lines = wrap_text(s, pair[1], value_width, size)[:3]
                cells.append((x, pair[0], lines))
            height = max(len(lines) for _, _, lines in cells)
            self.ensure_space(step + (height - 1) * line_height)
            for x, label, lines in cells:
                s.text(x, self.y, fit_text(s, label, label_width - 1, size, bold=True), size=size, bold=True)
                for offset, line in enumerate(lines):
                    s.text(x + label_width, self.y + offset * line_height, line, size=size)
            self.y += step + (height - 1) * line_height

    def paragraph(self, text: str, size: float = 8) -> None:
        line_height = size * PT_TO_MM * 1.4
        for line in wrap_text(self.surface, text, self.content_width, size):
            self.ensure_space(line_height)
            self.surface.text(self.margin, self.y, line, size=size)
            self.y += line_height

    def table(
        self,
        columns: Sequence[Column],
        rows: Sequence[Sequence[str]],
        emphasized: int = 0,
        size: float = 8,
        row_height: float = 6.0,
        header: bool = True,
    ) -> None:
        """
        Draw a table. The last ``emphasized`` rows are bold on a shaded
        background (totals). The header repeats after every page break.
        """
        s = self.surface
        first_body = len(rows) - emphasized

        def draw_header() -> None:
            x = self.margin
            width = sum(col.width for col in columns)
            s.rect(x, self.y, width, row_height, stroke=None, fill=PRIMARY_COLOR)
            for col in columns:
                self._cell(x, col, col.header, size, bold=True, color=WHITE, row_height=row_height)
                x += col.width
            self.y += row_height

        self.ensure_space(row_height * (2 if header else 1))
        if header:
            draw_header()

        for index, row in enumerate(rows):
            if self.ensure_space(row_height) and header:
                draw_header()
            strong = index >= first_body
            x = self.margin
            width = sum(col.width for col in columns)
            s.rect(x, self.y, width, row_height, stroke=BORDER_COLOR, fill=HEADER_BG if strong else None, line_width=0.1)
            for col, value in zip(columns, row):
                self._cell(x, col, value, size, bold=strong, color=BLACK, row_height=row_height)
                x += col.width
            self.y += row_height

    def _cell(self, x: float, col: Column, value: str, size: float, bold: bool, color: str, row_height: float) -> None:
        pad = 1.5
        text = fit_text(self.surface, value, col.width - 2 * pad, size, bold=bold)
        if not text:
            return
        baseline = self.y + row_height / 2 + size * PT_TO_MM / 3
        if col.align == "right":
            self.surface.text(x + col.width - pad, baseline, text, size=size, bold=bold, color=color, align="right")
        elif col.align == "center":
            self.surface.text(x + col.width / 2, baseline, text, size=size, bold=bold, color=color, align="center")
        else:
            self.surface.text(x + pad, baseline, text, size=size, bold=bold, color=color)

    # -- completion -----------------------------------------------------------

    def _draw_footer(self) -> None:
        s = self.surface
        baseline = s.page_height - 10
        if self.footer_text:
            s.text(s.page_width / 2, baseline, self.footer_text, size=7, color=MUTED_COLOR, align="center")
        s.text(s.page_width - self.margin, baseline, f"Page {s.page_number}", size=7, color=MUTED_COLOR, align="right")

    def finish(self) -> bytes:
        """Draw the last footer and close the document."""
        self._draw_footer()
        return self.surface.finish()
