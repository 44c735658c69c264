"""Reads generated PDFs back to report page count and page size."""

from __future__ import annotations

import io
from typing import Any, Dict

from pypdf import PdfReader
from pypdf.errors import PdfReadError

from logging_config import get_logger

logger = get_logger(__name__)

POINTS_PER_MM = 72 / 25.4


class PDFAnalyzer:
    """Extract minimal metadata from PDF bytes, resilient to malformed input."""

    def analyze(self, content: bytes, name: str = "") -> Dict[str, Any]:
        info: Dict[str, Any] = {
            "name": name,
            "pages": 0,
            "size_kb": round(len(content) / 1024, 2),
            "page_size_mm": None,
        }

        try:
            reader = PdfReader(io.BytesIO(content))
            info["pages"] = len(reader.pages)
            if reader.pages:
                box = reader.pages[0].mediabox
                info["page_size_mm"] = (
                    round(float(box.width) / POINTS_PER_MM, 1),
                    round(float(box.height) / POINTS_PER_MM, 1),
                )
        except (PdfReadError, ValueError) as exc:
            logger.warning(f"PDF analysis of {name or 'document'} failed: {exc}")
            info["error"] = f"PDF analysis failed: {exc}"

        return info
