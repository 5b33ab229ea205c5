"""
Date helpers for bucketing timestamps in local time.

Source timestamps may be timezone-aware (timestamptz columns) or naive.
Bucketing works on naive local wall-clock values: aware values are converted
to the configured zone (or kept in their own offset when none is configured)
and then stripped of tzinfo.
"""

from datetime import datetime, time
from typing import Optional
from zoneinfo import ZoneInfo


def to_local(moment: datetime, timezone: Optional[str] = None) -> datetime:
    """Naive local wall-clock time of `moment`."""
    if moment.tzinfo is None:
        return moment
    if timezone:
        moment = moment.astimezone(ZoneInfo(timezone))
    return moment.replace(tzinfo=None)


def start_of_day(moment: datetime) -> datetime:
    return datetime.combine(moment.date(), time.min, tzinfo=moment.tzinfo)


def end_of_day(moment: datetime) -> datetime:
    return datetime.combine(moment.date(), time.max, tzinfo=moment.tzinfo)
