"""
Safe numeric parsing and rounding helpers.

Raw call rows arrive loosely typed: durations and costs may be numbers,
strings with comma decimals ("12,5"), empty strings or garbage. Every helper
here degrades to a safe default instead of raising, so one malformed row can
never fail a whole report.

Rounding follows the "half away from zero" convention used by the dashboards
consuming these figures (Python's built-in round() uses banker's rounding,
which would make 2.5 -> 2).
"""

import math
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Optional


def parse_number(value: Any) -> float:
    """
    Parse a loosely typed numeric value.

    Args:
        value: int, float, numeric string (comma or dot decimals), or anything else

    Returns:
        The parsed float, or 0.0 for None, booleans, blanks, NaN/inf and
        unparseable input.

    Example:
        >>> parse_number("12,5")
        12.5
        >>> parse_number("n/a")
        0.0
    """
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float, Decimal)):
        number = float(value)
    elif isinstance(value, str):
        sanitized = value.strip().replace(",", ".")
        if not sanitized:
            return 0.0
        try:
            number = float(sanitized)
        except ValueError:
            return 0.0
    else:
        return 0.0
    if not math.isfinite(number):
        return 0.0
    return number


def parse_optional_number(value: Any) -> Optional[float]:
    """Like parse_number, but keeps None (and blank strings) as None."""
    if value is None:
        return None
    if isinstance(value, str) and not value.strip():
        return None
    return parse_number(value)


def safe_divide(numerator: float, denominator: float) -> float:
    """Divide, returning 0.0 when the denominator is zero or missing."""
    if not denominator:
        return 0.0
    return numerator / denominator


def round_half_up(value: float, digits: int = 0) -> float:
    """
    Round half away from zero to a fixed number of decimals.

    Non-finite input rounds to 0.0.
    """
    if value is None or not math.isfinite(value):
        return 0.0
    quantum = Decimal(1).scaleb(-digits)
    try:
        rounded = Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        return 0.0
    return float(rounded)


def round_int(value: float) -> int:
    """Round half away from zero to an int."""
    return int(round_half_up(value, 0))


def round1(value: float) -> float:
    """Round to one decimal (percentages and deltas)."""
    return round_half_up(value, 1)


def percentage(part: float, whole: float) -> float:
    """Share of `part` in `whole` as a one-decimal percentage; 0.0 on empty whole."""
    if not whole:
        return 0.0
    return round1(part / whole * 100)
