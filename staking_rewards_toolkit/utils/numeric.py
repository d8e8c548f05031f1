"""
Numeric primitives for amounts coming off the wire.

Service payloads mix numbers and numeric strings. Everything that feeds a
sum goes through `to_number` first so that no NaN or infinity can reach an
aggregate. None of these helpers raise.
"""

import math
import re
from typing import Any

from staking_rewards_toolkit.shared.constants import ChartConstants

# Leading float literal, as accepted by a lenient parse ("12.5 EGLD" -> 12.5)
_LEADING_FLOAT = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")


def to_number(value: Any) -> float:
    """
    Parse a string or pass through a number; non-finite results become 0.

    Booleans and None are treated as absent (0.0).
    """
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        match = _LEADING_FLOAT.match(value.strip())
        if not match:
            return 0.0
        try:
            number = float(match.group(0))
        except ValueError:
            return 0.0
    else:
        return 0.0
    return number if math.isfinite(number) else 0.0


def clamp_non_neg(value: Any) -> float:
    """max(0, to_number(value))."""
    return max(0.0, to_number(value))


def clamp(value: float, low: float, high: float) -> float:
    """Clamp value to [low, high]."""
    return max(low, min(high, value))


def to_ratio(pct: Any) -> float:
    """Convert a percentage to a ratio clamped into [0, 1]."""
    number = to_number(pct)
    return clamp(number / 100.0, 0.0, 1.0)


def snap_zero(value: float, epsilon: float = ChartConstants.ZERO_EPSILON) -> float:
    """Treat magnitudes below epsilon as exactly zero."""
    return 0.0 if abs(value) < epsilon else value


def safe_divide(numerator: float, denominator: float, default: float = 0.0) -> float:
    """Division that returns `default` for a zero or non-finite denominator."""
    if denominator == 0 or not math.isfinite(denominator):
        return default
    result = numerator / denominator
    return result if math.isfinite(result) else default


def round_preserving_zero(value: float, digits: int) -> float:
    """
    Round for compactness without flipping zero-ness.

    A non-zero value that would round to 0 keeps its original value, and
    zero stays zero.
    """
    if value == 0:
        return 0.0
    rounded = round(value, digits)
    return value if rounded == 0 else rounded


def format_numeric(value: Any, max_fraction_digits: int = 2) -> str:
    """Group thousands and trim trailing zeros; non-numeric input is echoed."""
    if isinstance(value, bool):
        return str(value)
    try:
        number = float(value)
    except (TypeError, ValueError):
        return str(value)
    if not math.isfinite(number):
        return str(value)
    text = f"{number:,.{max_fraction_digits}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return "0" if text in ("-0", "") else text


def format_share(pct: float, max_fraction_digits: int = 2) -> str:
    """Format a value already expressed in percent: 12.5 -> '12.5%'."""
    return f"{format_numeric(to_number(pct), max_fraction_digits)}%"


def format_percent(ratio: float, max_fraction_digits: int = 2) -> str:
    """Format a ratio as percent: 0.125 -> '12.5%'."""
    return format_share(to_number(ratio) * 100.0, max_fraction_digits)
