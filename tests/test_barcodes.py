"""
Unit tests for Code128 symbol rendering.
"""

import io

import pytest
from unittest.mock import patch
from PIL import Image

from core.exceptions import BarcodeEncodingError
from modules.barcodes import BarcodeCache, render_code128


class TestRenderCode128:

    def test_png_output(self):
        data = render_code128("X001ABC123")

        image = Image.open(io.BytesIO(data))
        assert image.format == "PNG"
        assert image.width > image.height

    def test_longer_payload_gives_wider_symbol(self):
        short = Image.open(io.BytesIO(render_code128("X001")))
        long = Image.open(io.BytesIO(render_code128("X001ABC123XYZ789")))

        assert long.width > short.width

    @pytest.mark.parametrize("payload", ["", "café", "TAB\tHERE"])
    def test_rejects_unencodable_payload(self, payload):
        with pytest.raises(BarcodeEncodingError):
            render_code128(payload)


class TestBarcodeCache:

    def test_encodes_each_payload_once(self):
        cache = BarcodeCache()

        with patch("modules.barcodes.render_code128", return_value=b"png") as encoder:
            assert cache.get("X001") == b"png"
            assert cache.get("X001") == b"png"
            cache.get("X002")

        assert encoder.call_count == 2

    def test_remembers_failures(self):
        cache = BarcodeCache()
        error = BarcodeEncodingError("bad", "nope")

        with patch("modules.barcodes.render_code128", side_effect=error) as encoder:
            for _ in range(3):
                with pytest.raises(BarcodeEncodingError):
                    cache.get("bad")

        assert encoder.call_count == 1
