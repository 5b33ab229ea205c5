'''
Call Analytics Test Suite

Test Modules:
-------------
- test_utils.py: Number parsing, rounding, es-ES formatting, labels, filters, dates
- test_stats_summary.py: Period statistics and the open + resolved == total invariant
- test_call_analysis.py: Answered/missed split, business hours, response buckets, channels
- test_ticket_analysis.py: Status normalization, service mapping order, ticket rollups
- test_temporal.py: Dense hourly/daily fill, peaks, moving average, heatmap grid
- test_comparison.py: Period-over-period deltas and trend inversion
- test_economics.py: Cost model, recovered revenue and ROI
- test_benchmarks.py: Cohort thresholds as inclusive lower bounds
- test_metrics.py: Metric order, formatting and trend polarity
- test_insights.py: Insight precedence and cap, priority checks
- test_record_fetcher.py: Pagination, re-filtering, failure policy (async, mocked pool)
- test_reporting.py: Report assembly end to end, period helpers
- test_api.py: HTTP error mapping and report round trip

Running Tests:
--------------
    pip install -e ".[test]"
    pytest -v

Configuration:
--------------
See conftest.py for shared fixtures and test configuration.
'''

__all__ = []
