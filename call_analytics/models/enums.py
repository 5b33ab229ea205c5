"""
Enumeration definitions for the call analytics reporting engine.

All enums inherit from both `str` and `Enum` so they serialize as plain strings
in Pydantic models and API responses.
"""

from enum import Enum


class TrendDirection(str, Enum):
    """
    Direction of a period-over-period change.

    The Period Comparator always reports the raw mathematical direction;
    the Metric Builder may invert it for metrics where lower is better.
    """
    UP = "up"
    DOWN = "down"
    FLAT = "flat"


class Cohort(str, Enum):
    """
    Benchmark tier assigned to a metric against configured thresholds.

    - top: value reaches the top threshold
    - average: value reaches the average threshold but not the top one
    - bottom: everything else
    """
    TOP = "top"
    AVERAGE = "average"
    BOTTOM = "bottom"


class Impact(str, Enum):
    """Impact level of a generated priority item."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class TicketStatus(str, Enum):
    """
    Normalized ticket status buckets.

    Raw status strings are mixed Spanish/Catalan/English free text; they are
    mapped onto these three buckets by ordered keyword checks.
    """
    OPEN = "open"
    IN_PROGRESS = "in_progress"
    CLOSED = "closed"


class TemporalMode(str, Enum):
    """
    Bucketing granularity for volume series.

    - hourly: one bucket per hour of every calendar date in range
    - daily: one bucket per calendar date in range
    """
    HOURLY = "hourly"
    DAILY = "daily"
