"""Coercion and clamping helpers for raw score input.

Score cells arrive as numbers, numeric strings, blanks or nulls depending on
whether they came from the spreadsheet, a form field or a JSON client. These
helpers turn all of them into finite numbers without ever raising.
"""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, TypeVar

__all__ = [
    "clamp",
    "safe_round",
    "to_float_safe",
    "to_int_safe",
]


NumericT = TypeVar("NumericT", int, float)


def clamp(value: NumericT, min_value: NumericT, max_value: NumericT) -> NumericT:
    """Clamp ``value`` into ``[min_value, max_value]``.

    Example:
        >>> clamp(12, 0, 10)
        10
        >>> clamp(-3, 0, 10)
        0
    """
    if min_value > max_value:
        raise ValueError(f"min_value ({min_value}) must be <= max_value ({max_value})")
    return max(min_value, min(value, max_value))


def to_float_safe(value: Any, default: float = 0.0) -> float:
    """Convert to a finite float, falling back to ``default``.

    Blank strings, ``None``, booleans, NaN and infinities all map to the default.

    Example:
        >>> to_float_safe("7.5")
        7.5
        >>> to_float_safe("")
        0.0
    """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return default
    try:
        result = float(value)
    except (ValueError, TypeError):
        return default
    if math.isnan(result) or math.isinf(result):
        return default
    return result


def to_int_safe(value: Any, default: int = 0) -> int:
    """Convert to int by truncation, falling back to ``default``.

    Example:
        >>> to_int_safe("3")
        3
        >>> to_int_safe("2.9")
        2
        >>> to_int_safe("x")
        0
    """
    number = to_float_safe(value, default=float("nan"))
    if math.isnan(number):
        return default
    return int(number)


def safe_round(value: float, decimals: int = 1) -> float:
    """Round half-up through ``Decimal`` so 72.25 becomes 72.3, not 72.2.

    Example:
        >>> safe_round(72.25)
        72.3
    """
    quantizer = Decimal(10) ** -decimals
    return float(Decimal(str(value)).quantize(quantizer, rounding=ROUND_HALF_UP))
