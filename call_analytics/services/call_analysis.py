"""
Call analyzer: answered/missed split, business-hours coverage, response-time
distribution and per-channel breakdown for one period.

Classification Rules:
    - answered iff parsed duration > 0, otherwise missed
    - business hours come from BusinessHoursConfig (default Mon-Fri,
      09:00-17:00, end exclusive) evaluated on the record's local time
    - response buckets use the first threshold the duration fits, in
      ascending order; missed calls (duration 0) land in "<30s"
    - bucket percentages are relative to all calls, not answered calls only
    - calls without a channel identifier are grouped under the "other
      channel" label instead of being dropped

CallAnalysis keeps rates as fractions (0-1); build_call_performance turns
them into the one-decimal percentages of CallPerformanceSummary and adds the
deltas against the previous period.
"""

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Tuple

from call_analytics.models.schemas import (
    BusinessHoursConfig,
    CallPerformanceSummary,
    ChannelSummary,
    RawCallRecord,
    ResponseBucket,
)
from call_analytics.services.comparison import calculate_delta
from call_analytics.utils.dates import to_local
from call_analytics.utils.formatting import sanitize_label
from call_analytics.utils.labels import LabelResolver
from call_analytics.utils.numbers import percentage, round1, round_int, safe_divide


# (label, inclusive upper bound in seconds), ascending
RESPONSE_BUCKETS: Tuple[Tuple[str, float], ...] = (
    ("<30s", 30),
    ("30-60s", 60),
    (">60s", math.inf),
)


@dataclass
class CallAnalysis:
    """
    Call classification of one period.

    Attributes:
        total: All calls (answered + missed).
        answered: Calls with a positive duration.
        missed: Calls without a positive duration.
        answered_rate: answered / total (0 when empty).
        answered_within_hours: Answered calls inside business hours.
        answered_outside_hours: Answered calls outside business hours.
        within_hours_rate: answered_within_hours / answered (0 when none answered).
        outside_hours_rate: answered_outside_hours / answered.
        distribution: Response-time buckets in RESPONSE_BUCKETS order.
        channels: Per-channel summaries, busiest first.
    """
    total: int = 0
    answered: int = 0
    missed: int = 0
    answered_rate: float = 0.0
    answered_within_hours: int = 0
    answered_outside_hours: int = 0
    within_hours_rate: float = 0.0
    outside_hours_rate: float = 0.0
    distribution: List[ResponseBucket] = field(default_factory=list)
    channels: List[ChannelSummary] = field(default_factory=list)


def is_within_business_hours(
    moment: datetime,
    business_hours: Optional[BusinessHoursConfig] = None,
) -> bool:
    """True when `moment` falls on a business weekday inside [startHour, endHour)."""
    hours = business_hours or BusinessHoursConfig()
    local = to_local(moment, hours.timezone)
    return local.weekday() in hours.weekdays and hours.startHour <= local.hour < hours.endHour


def _bucket_index(duration: float) -> int:
    for index, (_, upper) in enumerate(RESPONSE_BUCKETS):
        if duration <= upper:
            return index
    return len(RESPONSE_BUCKETS) - 1


def analyze_calls(
    calls: Iterable[RawCallRecord],
    business_hours: Optional[BusinessHoursConfig] = None,
    resolver: Optional[LabelResolver] = None,
) -> CallAnalysis:
    """
    Classify the calls of one period.

    Args:
        calls: Call records of the period
        business_hours: Attended window; Mon-Fri 09:00-17:00 when None
        resolver: Optional label resolver for the "other channel" label

    Returns:
        CallAnalysis with fraction rates.
    """
    hours = business_hours or BusinessHoursConfig()

    answered = 0
    missed = 0
    within = 0
    outside = 0
    bucket_counts = [0] * len(RESPONSE_BUCKETS)
    channel_totals: Dict[str, List[float]] = {}

    for call in calls:
        duration = call.duration

        if duration > 0:
            answered += 1
            if is_within_business_hours(call.created_at, hours):
                within += 1
            else:
                outside += 1
        else:
            missed += 1

        bucket_counts[_bucket_index(duration)] += 1

        channel = sanitize_label(call.channel_id, "channel.other", resolver)
        totals = channel_totals.setdefault(channel, [0, 0.0])
        totals[0] += 1
        totals[1] += duration

    total = answered + missed

    distribution = [
        ResponseBucket(label=label, count=count, percentage=percentage(count, total))
        for (label, _), count in zip(RESPONSE_BUCKETS, bucket_counts)
    ]

    channels = [
        ChannelSummary(
            channel=channel,
            calls=int(count),
            avgDuration=round_int(safe_divide(duration_sum, count)),
        )
        for channel, (count, duration_sum) in channel_totals.items()
    ]
    channels.sort(key=lambda summary: summary.calls, reverse=True)

    return CallAnalysis(
        total=total,
        answered=answered,
        missed=missed,
        answered_rate=safe_divide(answered, total),
        answered_within_hours=within,
        answered_outside_hours=outside,
        within_hours_rate=safe_divide(within, answered),
        outside_hours_rate=safe_divide(outside, answered),
        distribution=distribution,
        channels=channels,
    )


def build_call_performance(
    current: CallAnalysis,
    previous: Optional[CallAnalysis] = None,
) -> CallPerformanceSummary:
    """
    Report-facing call performance with percentage rates and deltas.

    answeredDelta compares answered rates; missedDelta compares missed counts.
    Without a previous analysis both deltas are (None, flat).
    """
    return CallPerformanceSummary(
        total=current.total,
        answered=current.answered,
        missed=current.missed,
        answeredRate=round1(current.answered_rate * 100),
        answeredDelta=calculate_delta(
            current.answered_rate,
            previous.answered_rate if previous else None,
        ),
        missedDelta=calculate_delta(
            current.missed,
            previous.missed if previous else None,
        ),
        answeredWithinHours=current.answered_within_hours,
        answeredOutsideHours=current.answered_outside_hours,
        withinHoursRate=round1(current.within_hours_rate * 100),
        outsideHoursRate=round1(current.outside_hours_rate * 100),
        responseDistribution=list(current.distribution),
        channels=list(current.channels),
    )
