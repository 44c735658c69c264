"""Number and date formatting shared by the document renderers."""

from __future__ import annotations

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Union

Number = Union[int, float, Decimal]


def format_money(value: Number) -> str:
    """
    Monetary amount with 2 decimals and thousands separators.

    Example: 1234.5 -> "1,234.50"
    """
    amount = Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    return f"{amount:,.2f}"


def format_unit_price(value: Optional[Number]) -> str:
    """Unit price with 3 decimals, keeping the sub-cent part used in line totals."""
    if value is None:
        return ""
    amount = Decimal(str(value)).quantize(Decimal("0.001"), rounding=ROUND_HALF_UP)
    return f"{amount:,.3f}"


def format_quantity(value: Optional[Number]) -> str:
    """
    Quantity or measurement without a trailing ".0".

    Example: 30.0 -> "30", 5.5 -> "5.5"
    """
    if value is None:
        return ""
    number = float(value)
    if number.is_integer():
        return str(int(number))
    return f"{number:g}"


def format_date(value: Optional[datetime]) -> str:
    """Day/month/year, e.g. 02/03/2026."""
    if value is None:
        return ""
    return value.strftime("%d/%m/%Y")


def format_timestamp(value: datetime) -> str:
    return value.strftime("%d/%m/%Y %H:%M")
