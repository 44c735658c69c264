"""
Unit tests for the identification label layout engine.

Layout assertions run against a RecordingSurface; one test renders a real PDF
and reads it back with pypdf.
"""

import pytest
from unittest.mock import patch

from config import Config
from core.exceptions import BarcodeEncodingError
from models import LabelConfiguration, LabelTemplate, ProductIdentifiers
from modules.label_layout import (
    GUIDE_COLOR,
    MULTI_UP_SHEET,
    SINGLE_LABEL_SHEET,
    compute_layout,
    render_identification_labels,
)
from modules.pdf_analyzer import PDFAnalyzer
from modules.surface import RecordingSurface


def _boxes_overlap(a, b):
    return not (
        a.x + a.width <= b.x
        or b.x + b.width <= a.x
        or a.y + a.height <= b.y
        or b.y + b.height <= a.y
    )


class TestComputeLayout:

    @pytest.mark.parametrize("count", [1, 2, 3, 4, 17, 29, 30])
    def test_one_sheet_unique_cells(self, count):
        slots = compute_layout(count, MULTI_UP_SHEET)

        assert {slot.page for slot in slots} == {0}
        assert len({(slot.column, slot.row) for slot in slots}) == count
        for i, a in enumerate(slots):
            for b in slots[i + 1:]:
                assert not _boxes_overlap(a, b)

    def test_label_31_starts_a_new_sheet(self):
        slots = compute_layout(31, MULTI_UP_SHEET)

        assert slots[29].page == 0
        assert slots[30].page == 1
        assert slots[30].index == 0
        assert (slots[30].column, slots[30].row) == (0, 0)
        assert (slots[30].x, slots[30].y) == (slots[0].x, slots[0].y)

    def test_row_major_positions(self):
        slots = compute_layout(5, MULTI_UP_SHEET)

        assert [(s.column, s.row) for s in slots] == [(0, 0), (1, 0), (2, 0), (0, 1), (1, 1)]
        assert slots[1].x == pytest.approx(3.18 + 63.5 + 2.54)
        assert slots[3].y == pytest.approx(4.76 + 38.1 + 2.54)

    def test_offsets_shift_every_cell(self):
        plain = compute_layout(4, MULTI_UP_SHEET)
        shifted = compute_layout(4, MULTI_UP_SHEET, offset_x_mm=1.5, offset_y_mm=-0.5)

        for a, b in zip(plain, shifted):
            assert b.x == pytest.approx(a.x + 1.5)
            assert b.y == pytest.approx(a.y - 0.5)

    def test_single_label_is_centered_one_per_page(self):
        slots = compute_layout(3, SINGLE_LABEL_SHEET)

        assert [slot.page for slot in slots] == [0, 1, 2]
        assert slots[0].x == pytest.approx((210 - 40) / 2, abs=0.01)
        assert slots[0].y == pytest.approx((297 - 30) / 2, abs=0.01)

    def test_rejects_zero_count(self):
        with pytest.raises(ValueError):
            compute_layout(0, MULTI_UP_SHEET)


class TestRenderLabels:

    def test_label_content(self, identifiers, project):
        surface = RecordingSurface(MULTI_UP_SHEET.page_size)
        config = LabelConfiguration(quantity=2)

        render_identification_labels(identifiers, config, project, surface=surface)

        texts = surface.texts()
        assert texts.count("FNSKU: X001ABC123") == 2
        assert "SKU: FD-MUG-001" in texts
        assert "Ceramic Coffee Mug 350ml" in texts
        assert len(surface.of_kind("image")) == 2

    def test_optional_lines_can_be_left_out(self, identifiers, project):
        surface = RecordingSurface(MULTI_UP_SHEET.page_size)
        config = LabelConfiguration(include_sku=False, include_name=False)

        render_identification_labels(identifiers, config, project, surface=surface)

        assert surface.texts() == ["FNSKU: X001ABC123"]

    def test_gtin_used_without_fnsku(self, project):
        surface = RecordingSurface(MULTI_UP_SHEET.page_size)
        identifiers = ProductIdentifiers(gtin_code="8437012345678", gtin_type="ean")

        render_identification_labels(identifiers, LabelConfiguration(), project, surface=surface)

        assert "EAN: 8437012345678" in surface.texts()

    def test_requires_a_code(self, project):
        with pytest.raises(ValueError, match="FNSKU or GTIN"):
            render_identification_labels(None, LabelConfiguration(), project, surface=RecordingSurface())

    def test_31_labels_use_two_pages(self, identifiers, project):
        surface = RecordingSurface(MULTI_UP_SHEET.page_size)

        render_identification_labels(identifiers, LabelConfiguration(quantity=31), project, surface=surface)

        assert surface.page_count == 2
        assert len(surface.of_kind("page_break")) == 1

    def test_barcode_failure_falls_back_to_text(self, identifiers, project):
        surface = RecordingSurface(MULTI_UP_SHEET.page_size)
        error = BarcodeEncodingError("X001ABC123", "encoder unavailable")

        with patch("modules.barcodes.render_code128", side_effect=error) as encoder, \
                patch("modules.label_layout.logger") as logger:
            render_identification_labels(identifiers, LabelConfiguration(quantity=3), project, surface=surface)

        assert surface.of_kind("image") == []
        mono = [op for op in surface.of_kind("text") if op.args["mono"]]
        assert [op.args["value"] for op in mono] == ["X001ABC123"] * 3
        assert encoder.call_count == 1
        assert logger.warning.call_count == 1

    def test_test_print_draws_guides_only(self, identifiers, project):
        surface = RecordingSurface(MULTI_UP_SHEET.page_size)
        config = LabelConfiguration(quantity=4, test_print=True)

        render_identification_labels(identifiers, config, project, surface=surface)

        assert surface.texts() == ["R1 C1", "R1 C2", "R1 C3", "R2 C1"]
        guides = [op for op in surface.of_kind("rect") if op.args["stroke"] == GUIDE_COLOR]
        assert len(guides) == 4
        assert all(op.args["dash"] for op in guides)
        assert len(surface.of_kind("line")) == 8
        assert surface.of_kind("image") == []

    def test_test_print_without_identifiers(self, project):
        surface = RecordingSurface()
        config = LabelConfiguration(template=LabelTemplate.SINGLE, test_print=True)

        render_identification_labels(None, config, project, surface=surface)

        assert surface.texts() == ["R1 C1"]

    def test_pdf_output(self, identifiers, project):
        content = render_identification_labels(
            identifiers, LabelConfiguration(template=LabelTemplate.SINGLE, quantity=2), project, invariant=True
        )

        info = PDFAnalyzer().analyze(content)
        assert content.startswith(b"%PDF")
        assert info["pages"] == 2
        assert info["page_size_mm"] == (210.0, 297.0)


class TestLabelQuantity:

    def test_quantity_is_capped(self):
        with pytest.raises(ValueError, match="at most"):
            LabelConfiguration(quantity=Config.MAX_LABEL_QUANTITY + 1)

    def test_largest_run_is_accepted(self):
        assert LabelConfiguration(quantity=Config.MAX_LABEL_QUANTITY).quantity == Config.MAX_LABEL_QUANTITY
