"""Fixed-point helpers for 18-decimal (WAD) amounts.

USD amounts, prices and ratios are plain ints scaled by ``WAD``.
All conversions into WAD round down (floor).
"""

from decimal import Decimal, ROUND_FLOOR
from typing import Any

from src.core.constants import WAD


def to_wad(value: Any) -> int:
    """Convert a human-readable number (str, int, float, Decimal) to WAD, flooring."""
    if value is None:
        return 0
    if isinstance(value, bool):
        raise TypeError("bool is not a numeric amount")
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return int((value * WAD).to_integral_value(rounding=ROUND_FLOOR))


def from_wad(value: int) -> Decimal:
    """Convert a WAD int to a Decimal (exact)."""
    return Decimal(value) / Decimal(WAD)


def mul_div(a: int, b: int, denominator: int) -> int:
    """Compute ``a * b // denominator`` on ints (floor)."""
    if denominator == 0:
        raise ZeroDivisionError("mul_div denominator is zero")
    return a * b // denominator


def token_to_usd(amount: int, decimals: int, price_wad: int) -> int:
    """Value ``amount`` raw token units at ``price_wad`` USD per whole token.

    The result is in WAD USD regardless of the token's own precision.
    """
    return mul_div(amount, price_wad, 10**decimals)


def format_wad(value: int, places: int = 6) -> str:
    """Format a WAD amount for display, e.g. ``20.000000``."""
    return f"{from_wad(value):.{places}f}"
