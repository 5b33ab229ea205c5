"""
Display formatting contracts for report metrics.

Formats follow Spanish (es-ES) conventions: "." groups thousands, "," is the
decimal separator, and the euro sign trails the amount.

- counts:      12345       -> "12.345"
- currency:    1234.6      -> "1.235 €"
- percentages: 0.4534      -> "45,3 %"   (input is a fraction)
- durations:   3725 s      -> "1h 2m";  75 s -> "1 min 15s"
"""

import math
from typing import Optional

from call_analytics.utils.labels import LabelResolver, resolve_label
from call_analytics.utils.numbers import round_half_up, round_int


def _group_thousands(digits: str) -> str:
    groups = []
    while len(digits) > 3:
        groups.insert(0, digits[-3:])
        digits = digits[:-3]
    groups.insert(0, digits)
    return ".".join(groups)


def format_count(value: float) -> str:
    """Integer with "." thousands separators."""
    number = round_int(value)
    sign = "-" if number < 0 else ""
    return f"{sign}{_group_thousands(str(abs(number)))}"


def format_decimal(value: float, digits: int) -> str:
    """Fixed-decimal number with Spanish separators."""
    rounded = round_half_up(value, digits)
    sign = "-" if rounded < 0 else ""
    text = f"{abs(rounded):.{digits}f}"
    if digits > 0:
        integer_part, fraction = text.split(".")
        return f"{sign}{_group_thousands(integer_part)},{fraction}"
    return f"{sign}{_group_thousands(text)}"


def format_currency(value: float) -> str:
    """Whole euros, e.g. "1.235 €"."""
    return f"{format_count(value)} €"


def format_percent(fraction: float) -> str:
    """
    Format a fraction as a percentage with at most one decimal.

    Trailing ",0" is dropped, matching Intl percent formatting
    (0.5 -> "50 %", 0.4534 -> "45,3 %").
    """
    value = round_half_up(fraction * 100, 1)
    if value == math.floor(value):
        return f"{format_count(value)} %"
    return f"{format_decimal(value, 1)} %"


def format_delta(delta: float) -> str:
    """
    Plain one-decimal number as used inside delta labels and insight copy.

    Whole values drop the decimal (20.0 -> "20", -12.5 -> "-12.5").
    """
    text = f"{round_half_up(delta, 1):.1f}"
    if text.endswith(".0"):
        text = text[:-2]
    return "0" if text == "-0" else text


def format_ratio(value: float) -> str:
    """Two-decimal ratio, e.g. tickets per call ("0.35")."""
    return f"{round_half_up(value, 2):.2f}"


def format_duration(seconds: Optional[float]) -> str:
    """
    Human duration: "Xh Ym" from one hour upwards, otherwise "X min Ys".
    """
    if not seconds:
        return "0 min 0s"
    total = round_int(seconds)
    if total >= 3600:
        return f"{total // 3600}h {(total % 3600) // 60}m"
    return f"{total // 60} min {total % 60}s"


def sanitize_label(
    value: Optional[str],
    fallback_key: str,
    resolver: Optional[LabelResolver] = None,
) -> str:
    """Trimmed label, or the resolved fallback label when blank."""
    trimmed = (value or "").strip()
    if trimmed:
        return trimmed
    return resolve_label(fallback_key, resolver)
