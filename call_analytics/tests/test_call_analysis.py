"""
Test suite for the call analyzer.

The tests verify:
1. Answered/missed split on parsed duration
2. Business-hours window (weekdays, end hour exclusive, timezone aware)
3. Response-time buckets and their percentages over all calls
4. Channel grouping with the "other channel" fallback
5. Report-facing performance summary and deltas
"""

from datetime import datetime, timezone
from typing import List

import pytest

from call_analytics.models.enums import TrendDirection
from call_analytics.models.schemas import BusinessHoursConfig, RawCallRecord
from call_analytics.services.call_analysis import (
    RESPONSE_BUCKETS,
    analyze_calls,
    build_call_performance,
    is_within_business_hours,
)


# =============================================================================
# BUSINESS HOURS
# =============================================================================


class TestBusinessHours:
    """Tests for is_within_business_hours."""

    @pytest.mark.parametrize("moment, expected", [
        (datetime(2025, 6, 2, 10, 0), True),
        (datetime(2025, 6, 2, 9, 0), True),
        (datetime(2025, 6, 2, 16, 59), True),
        (datetime(2025, 6, 2, 17, 0), False),
        (datetime(2025, 6, 2, 8, 59), False),
        (datetime(2025, 6, 7, 10, 0), False),
        (datetime(2025, 6, 8, 12, 0), False),
    ])
    def test_default_window(self, moment: datetime, expected: bool) -> None:
        """Monday to Friday, 09:00 inclusive to 17:00 exclusive."""
        result = is_within_business_hours(moment)
        assert result is expected, f"{moment} expected {expected}, got {result}"

    def test_custom_window(self) -> None:
        """Saturday mornings count when configured."""
        hours = BusinessHoursConfig(weekdays=[5], startHour=8, endHour=14)
        assert is_within_business_hours(datetime(2025, 6, 7, 8, 30), hours)
        assert not is_within_business_hours(datetime(2025, 6, 2, 10, 0), hours)

    def test_timezone_conversion(self) -> None:
        """07:30 UTC is 09:30 in Madrid: inside the window only with the zone set."""
        moment = datetime(2025, 6, 2, 7, 30, tzinfo=timezone.utc)
        assert is_within_business_hours(moment, BusinessHoursConfig(timezone="Europe/Madrid"))
        assert not is_within_business_hours(moment, BusinessHoursConfig())

    def test_invalid_weekday_rejected(self) -> None:
        """Weekdays use Monday=0 .. Sunday=6."""
        with pytest.raises(ValueError):
            BusinessHoursConfig(weekdays=[7])


# =============================================================================
# CALL CLASSIFICATION
# =============================================================================


class TestAnalyzeCalls:
    """Tests for analyze_calls."""

    def test_answered_missed_split(self, ten_calls: List[RawCallRecord]) -> None:
        """Answered iff duration > 0."""
        analysis = analyze_calls(ten_calls)

        assert analysis.total == 10
        assert analysis.answered == 7
        assert analysis.missed == 3
        assert analysis.answered_rate == pytest.approx(0.7)

    def test_business_hours_split(self, ten_calls: List[RawCallRecord]) -> None:
        """All answered calls of the sample fall between 09:00 and 16:00 on a Monday."""
        analysis = analyze_calls(ten_calls)

        assert analysis.answered_within_hours == 7
        assert analysis.answered_outside_hours == 0
        assert analysis.within_hours_rate == 1.0

    def test_no_answered_calls(self, make_call) -> None:
        """Rates stay at zero when nothing was answered."""
        analysis = analyze_calls([make_call(duration=None), make_call(duration=0)])

        assert analysis.answered == 0
        assert analysis.missed == 2
        assert analysis.within_hours_rate == 0.0
        assert analysis.outside_hours_rate == 0.0

    def test_empty_period(self) -> None:
        """No calls still yields every bucket at zero."""
        analysis = analyze_calls([])

        assert analysis.total == 0
        assert analysis.answered_rate == 0.0
        assert [bucket.count for bucket in analysis.distribution] == [0, 0, 0]
        assert analysis.channels == []

    def test_response_distribution(self, ten_calls: List[RawCallRecord]) -> None:
        """Missed calls land in the first bucket; percentages are over all calls."""
        analysis = analyze_calls(ten_calls)
        distribution = {bucket.label: bucket for bucket in analysis.distribution}

        assert [bucket.label for bucket in analysis.distribution] == [
            label for label, _ in RESPONSE_BUCKETS
        ]
        assert distribution["<30s"].count == 3
        assert distribution["30-60s"].count == 1
        assert distribution[">60s"].count == 6
        assert distribution[">60s"].percentage == 60.0
        assert sum(bucket.count for bucket in analysis.distribution) == analysis.total

    @pytest.mark.parametrize("duration, label", [
        (1, "<30s"),
        (30, "<30s"),
        (30.5, "30-60s"),
        (60, "30-60s"),
        (61, ">60s"),
        (5000, ">60s"),
    ])
    def test_bucket_boundaries(self, make_call, duration, label) -> None:
        """Upper bounds are inclusive."""
        analysis = analyze_calls([make_call(duration=duration)])
        counts = {bucket.label: bucket.count for bucket in analysis.distribution}
        assert counts[label] == 1, f"{duration}s expected in {label}, got {counts}"

    def test_channels(self, make_call) -> None:
        """Calls without channel are grouped under the fallback label, busiest first."""
        calls = [
            make_call(duration=30, channel=None),
            make_call(duration=60, channel="34600111222"),
            make_call(duration=120, channel="34600111222"),
        ]
        analysis = analyze_calls(calls)

        assert [channel.channel for channel in analysis.channels] == ["34600111222", "Otro canal"]
        assert analysis.channels[0].calls == 2
        assert analysis.channels[0].avgDuration == 90
        assert analysis.channels[1].avgDuration == 30

    def test_channel_fallback_uses_resolver(self, make_call) -> None:
        """The fallback channel label goes through the label resolver."""
        analysis = analyze_calls(
            [make_call(duration=10)],
            resolver=lambda key: "Other" if key == "channel.other" else "",
        )
        assert analysis.channels[0].channel == "Other"


# =============================================================================
# PERFORMANCE SUMMARY
# =============================================================================


class TestCallPerformance:
    """Tests for build_call_performance."""

    def test_rates_are_percentages(self, ten_calls: List[RawCallRecord]) -> None:
        """Fractions become one-decimal percentages."""
        summary = build_call_performance(analyze_calls(ten_calls))

        assert summary.answeredRate == 70.0
        assert summary.withinHoursRate == 100.0
        assert summary.outsideHoursRate == 0.0

    def test_without_previous_period(self, ten_calls: List[RawCallRecord]) -> None:
        """No previous analysis: both deltas are undefined."""
        summary = build_call_performance(analyze_calls(ten_calls))

        assert summary.answeredDelta.delta is None
        assert summary.missedDelta.delta is None
        assert summary.missedDelta.trend == TrendDirection.FLAT

    def test_deltas_against_previous_period(self, ten_calls, make_call) -> None:
        """Answered rate 70 % vs 50 % is +40 %; missed 3 vs 5 is -40 %."""
        previous = [make_call(duration=60) for _ in range(5)] + [
            make_call(duration=None) for _ in range(5)
        ]
        summary = build_call_performance(analyze_calls(ten_calls), analyze_calls(previous))

        assert summary.answeredDelta.delta == 40.0, f"Got {summary.answeredDelta}"
        assert summary.answeredDelta.trend == TrendDirection.UP
        assert summary.missedDelta.delta == -40.0, f"Got {summary.missedDelta}"
        assert summary.missedDelta.trend == TrendDirection.DOWN
