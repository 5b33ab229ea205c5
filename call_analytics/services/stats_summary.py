"""
Stats summarizer: reduce one period's raw calls and tickets to DashboardStats.

Call Aggregation:
    - totalCalls counts every record
    - durations are summed only over parseable, positive values; the count of
      those records is the denominator of avgCallDuration, so an unanswered
      call adds to totalCalls but not to the average
    - totalCost sums positive costs, rounded to cents
    - avgScore (score-carrying tenants) is the mean of positive scores

Ticket Aggregation:
    Tickets matching the hung-up call keywords are dropped before anything
    is counted. A remaining ticket is resolved when its status contains a
    closed-state keyword; every other ticket is open, so
    openTickets + resolvedTickets == totalTickets always holds.

Malformed numbers never raise; they were already coerced to 0 or None at the
ingestion boundary.
"""

from typing import Iterable, Optional, Sequence

from call_analytics.models.schemas import DashboardStats, RawCallRecord, RawTicketRecord
from call_analytics.services.ticket_analysis import filter_tickets, is_resolved_status
from call_analytics.utils.numbers import round_half_up, round_int


def summarize_stats(
    calls: Iterable[RawCallRecord],
    tickets: Iterable[RawTicketRecord],
    excluded_keywords: Optional[Sequence[str]] = None,
    include_score: bool = False,
) -> DashboardStats:
    """
    Summarize one reporting period.

    Args:
        calls: Call records already limited to the period
        tickets: Ticket records already limited to the period
        excluded_keywords: Hung-up call keywords (tenant override); default list when None
        include_score: Compute avgScore for tenants that record satisfaction

    Returns:
        DashboardStats for the period.

    Example:
        >>> stats = summarize_stats(calls, tickets)
        >>> stats.openTickets + stats.resolvedTickets == stats.totalTickets
        True
    """
    total_calls = 0
    total_call_time = 0.0
    valid_durations = 0
    total_cost = 0.0
    score_sum = 0.0
    score_count = 0

    for call in calls:
        total_calls += 1

        duration = call.duration
        if duration > 0:
            total_call_time += duration
            valid_durations += 1

        cost = call.cost or 0.0
        if cost > 0:
            total_cost += cost

        score = call.score or 0.0
        if score > 0:
            score_sum += score
            score_count += 1

    sanitized = filter_tickets(tickets, excluded_keywords)
    total_tickets = len(sanitized)
    resolved_tickets = sum(1 for ticket in sanitized if is_resolved_status(ticket.ticket_status))

    avg_call_duration = round_int(total_call_time / valid_durations) if valid_durations else 0

    avg_score = None
    if include_score:
        avg_score = round_half_up(score_sum / score_count, 2) if score_count else 0.0

    return DashboardStats(
        totalCalls=total_calls,
        avgCallDuration=avg_call_duration,
        totalCallTime=round_int(total_call_time),
        totalCost=round_half_up(total_cost, 2),
        totalTickets=total_tickets,
        openTickets=total_tickets - resolved_tickets,
        resolvedTickets=resolved_tickets,
        avgScore=avg_score,
    )
