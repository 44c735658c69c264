"""
Unit tests for document number and date formatting.
"""

from datetime import datetime
from decimal import Decimal

import pytest

from modules.formatting import (
    format_date,
    format_money,
    format_quantity,
    format_timestamp,
    format_unit_price,
)


class TestNumbers:

    @pytest.mark.parametrize(
        "value,expected",
        [
            (0, "0.00"),
            (1234.5, "1,234.50"),
            (Decimal("296.4"), "296.40"),
            (Decimal("0.125"), "0.13"),
            (1000000, "1,000,000.00"),
        ],
    )
    def test_money(self, value, expected):
        assert format_money(value) == expected

    def test_unit_price_keeps_three_decimals(self):
        assert format_unit_price(1.235) == "1.235"
        assert format_unit_price(0.18) == "0.180"
        assert format_unit_price(None) == ""

    def test_quantity(self):
        assert format_quantity(30.0) == "30"
        assert format_quantity(5.5) == "5.5"
        assert format_quantity(None) == ""


class TestDates:

    def test_date(self):
        assert format_date(datetime(2026, 3, 2)) == "02/03/2026"
        assert format_date(None) == ""

    def test_timestamp(self):
        assert format_timestamp(datetime(2026, 3, 2, 9, 5)) == "02/03/2026 09:05"
