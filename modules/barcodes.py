"""Code128 barcode images for identification labels."""

from __future__ import annotations

import io
from typing import Dict, Optional

from barcode import Code128
from barcode.errors import BarcodeError
from barcode.writer import ImageWriter

from core.exceptions import BarcodeEncodingError

# Bars only; the human-readable text is drawn by the label layout itself
WRITER_OPTIONS = {
    "module_width": 0.2,
    "module_height": 12.0,
    "quiet_zone": 2.0,
    "write_text": False,
    "dpi": 300,
}


def render_code128(payload: str, options: Optional[Dict[str, object]] = None) -> bytes:
    """
    Encode ``payload`` literally as a Code128 symbol.

    Returns:
        PNG bytes

    Raises:
        BarcodeEncodingError: payload empty, outside printable ASCII, or
            rejected by the encoder
    """
    if not payload:
        raise BarcodeEncodingError(payload, "payload is empty")
    bad = [ch for ch in payload if not 32 <= ord(ch) <= 126]
    if bad:
        raise BarcodeEncodingError(payload, f"unsupported characters {''.join(bad)!r}")

    writer_options = dict(WRITER_OPTIONS)
    writer_options.update(options or {})

    buffer = io.BytesIO()
    try:
        Code128(payload, writer=ImageWriter()).write(buffer, writer_options)
    except (BarcodeError, ValueError, KeyError, OSError) as exc:
        raise BarcodeEncodingError(payload, str(exc) or exc.__class__.__name__) from exc
    return buffer.getvalue()


class BarcodeCache:
    """
    Per-render memo of encoded symbols.

    A label run prints the same payload on every cell; encoding it once is
    enough. Failures are remembered too so the fallback is decided once.
    """

    def __init__(self) -> None:
        self._images: Dict[str, bytes] = {}
        self._failures: Dict[str, BarcodeEncodingError] = {}

    def get(self, payload: str) -> bytes:
        if payload in self._failures:
            raise self._failures[payload]
        if payload not in self._images:
            try:
                self._images[payload] = render_code128(payload)
            except BarcodeEncodingError as exc:
                self._failures[payload] = exc
                raise
        return self._images[payload]
