"""Normalization and rounding helpers.

Centralizes defensive parsing of API values and the half-up rounding the
efficiency formulas rely on.
"""

from __future__ import annotations

import math
from typing import Any


def safe_float(value: Any) -> float | None:
    if value is None or value == "" or value == "--":
        return None
    if isinstance(value, bool):
        return float(value)
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(result):
        return None
    return result


def safe_int(value: Any) -> int | None:
    parsed = safe_float(value)
    if parsed is None or math.isinf(parsed):
        return None
    return int(parsed)


def is_finite(value: Any) -> bool:
    """Return ``True`` for real numbers that are neither NaN nor infinite."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, ties towards positive infinity.

    ``round()`` uses banker's rounding, which would move ties such as
    ``2.5`` down to ``2``.
    """
    return math.floor(value + 0.5)


def round2(value: float) -> float:
    """Round to two decimals (currency precision), ties away from zero."""
    scaled = abs(value) * 100
    # Absorb binary representation error so 1.005 rounds to 1.01.
    rounded = math.floor(scaled + 0.5 + 1e-9) / 100
    return math.copysign(rounded, value) if rounded else 0.0
