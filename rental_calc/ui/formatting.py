"""
Display formatting for calculator results.

Non-finite values (NaN, infinity) are shown as zero.
"""

import math
from typing import Optional

from rental_calc.config import get_settings


def _finite_or_zero(value: float) -> float:
    return value if math.isfinite(value) else 0.0


def format_currency(value: float, symbol: Optional[str] = None) -> str:
    """
    Format a dollar amount with no decimals, e.g. -1234.6 -> "-$1,235".
    """
    if symbol is None:
        symbol = get_settings().currency_symbol

    value = _finite_or_zero(value)
    text = f"{abs(value):,.0f}"
    sign = "-" if value < 0 and text != "0" else ""
    return f"{sign}{symbol}{text}"


def format_percent(value: float) -> str:
    """Format a percentage with one decimal, e.g. 6.192 -> "6.2%"."""
    return f"{_finite_or_zero(value):.1f}%"
