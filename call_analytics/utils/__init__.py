"""
Leaf helpers shared by models and services: safe numeric parsing, display
formatting, keyword filters and the default label table.

This package must not import from call_analytics.models or
call_analytics.services.
"""

from call_analytics.utils.dates import end_of_day, start_of_day, to_local
from call_analytics.utils.filters import (
    DEFAULT_EXCLUDED_TICKET_KEYWORDS,
    contains_any,
    should_exclude_type,
)
from call_analytics.utils.formatting import (
    format_count,
    format_currency,
    format_decimal,
    format_delta,
    format_duration,
    format_percent,
    format_ratio,
    sanitize_label,
)
from call_analytics.utils.labels import DEFAULT_LABELS, LabelResolver, resolve_label
from call_analytics.utils.numbers import (
    parse_number,
    parse_optional_number,
    percentage,
    round1,
    round_half_up,
    round_int,
    safe_divide,
)

__all__ = [
    'end_of_day',
    'start_of_day',
    'to_local',
    'DEFAULT_EXCLUDED_TICKET_KEYWORDS',
    'contains_any',
    'should_exclude_type',
    'format_count',
    'format_currency',
    'format_decimal',
    'format_delta',
    'format_duration',
    'format_percent',
    'format_ratio',
    'sanitize_label',
    'DEFAULT_LABELS',
    'LabelResolver',
    'resolve_label',
    'parse_number',
    'parse_optional_number',
    'percentage',
    'round1',
    'round_half_up',
    'round_int',
    'safe_divide',
]
