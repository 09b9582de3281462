"""Consolidated utility functions for the dpr_finance package."""
import math
from typing import Any, Optional


def as_float(v: Any, default: Optional[float] = None) -> Optional[float]:
    """Safely convert value to float with fallback."""
    if v is None:
        return default
    try:
        return float(v)
    except (ValueError, TypeError):
        return default


def as_int(v: Any, default: Optional[int] = None) -> Optional[int]:
    """Safely convert value to int with fallback."""
    if v is None:
        return default
    try:
        return int(v)
    except (ValueError, TypeError):
        return default


def round_to(value: float, digits: int) -> float:
    """Round half up (towards +inf) to ``digits`` decimals.

    Matches ``Math.round(x * 10**d) / 10**d`` rather than Python's banker's
    rounding. Non-finite values pass through untouched.
    """
    if not math.isfinite(value):
        return value
    scale = 10.0 ** digits
    return math.floor(value * scale + 0.5) / scale


def round2(value: float) -> float:
    """Round a monetary figure to 2 decimals at the point of emission."""
    return round_to(value, 2)
