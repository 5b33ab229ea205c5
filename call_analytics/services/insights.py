"""
Rule-based insight and priority generation.

Insights are produced in a fixed precedence order and capped at MAX_INSIGHTS,
so when the cap truncates, the higher-precedence rules win:

    1. resolution rate delta (improves / drops)
    2. backlog (open tickets > 0)
    3. average satisfaction (score tenants)
    4. peak trend bucket (highest calls > 0, first on ties)
    5. dominant ticket status (highest percentage, first on ties; needs tickets)
    6. net impact sign
    7. top service share
    8. busiest agent
    9. recovered revenue (> 0)
    10. missed-call cost

Priorities are fixed checks with fixed impact levels:

    missed calls > 0                 -> high    recover-missed-calls
    open status share > 30 %         -> high    close-open-tickets
    a top service exists             -> medium  service-automation
    net impact < 0                   -> medium  roi-recovery
    first agent with > 5 open        -> low     agent-support
"""

from typing import List, Optional, Sequence

from call_analytics.models.enums import Impact, TicketStatus, TrendDirection
from call_analytics.models.schemas import (
    DashboardStats,
    EconomicSummary,
    PriorityItem,
    ReportMetric,
    TicketPerformance,
    TrendPoint,
)
from call_analytics.utils.formatting import format_count, format_currency, format_delta
from call_analytics.utils.labels import LabelResolver, resolve_label

MAX_INSIGHTS = 6
OPEN_SHARE_THRESHOLD = 30.0
AGENT_OPEN_THRESHOLD = 5


def _find_metric(metrics: Sequence[ReportMetric], metric_id: str) -> Optional[ReportMetric]:
    return next((metric for metric in metrics if metric.id == metric_id), None)


def generate_insights(
    stats: DashboardStats,
    metrics: Sequence[ReportMetric],
    trend: Sequence[TrendPoint],
    ticket_performance: TicketPerformance,
    economic: Optional[EconomicSummary] = None,
    include_score: bool = False,
    resolver: Optional[LabelResolver] = None,
) -> List[str]:
    """
    Natural-language insights for a report, at most MAX_INSIGHTS.

    Args:
        stats: Stats of the reporting period
        metrics: Output of build_report_metrics
        trend: Trend points of the period
        ticket_performance: Ticket rollups of the period
        economic: Economic summary, if computed
        include_score: Whether the tenant records satisfaction scores
        resolver: Optional label resolver

    Returns:
        Insight sentences in precedence order.
    """
    insights: List[str] = []

    resolution = _find_metric(metrics, "resolutionRate")
    if resolution is not None and resolution.delta is not None:
        if resolution.trend == TrendDirection.UP:
            insights.append(resolve_label(
                "insights.resolutionUp", resolver, delta=format_delta(resolution.delta),
            ))
        elif resolution.trend == TrendDirection.DOWN:
            insights.append(resolve_label(
                "insights.resolutionDown", resolver, delta=format_delta(abs(resolution.delta)),
            ))

    if stats.openTickets > 0:
        insights.append(resolve_label(
            "insights.backlog", resolver, value=format_count(stats.openTickets),
        ))

    if include_score:
        score = _find_metric(metrics, "avgScore")
        if score is not None:
            insights.append(resolve_label("insights.score", resolver, value=score.value))

    peak = max(trend, key=lambda point: point.calls, default=None)
    if peak is not None and peak.calls > 0:
        insights.append(resolve_label(
            "insights.peak", resolver, label=peak.label, calls=peak.calls,
        ))

    dominant = max(ticket_performance.statuses, key=lambda status: status.percentage, default=None)
    if dominant is not None and dominant.count > 0:
        insights.append(resolve_label(
            "insights.dominantStatus", resolver,
            label=dominant.label, percentage=f"{dominant.percentage:.1f}",
        ))

    net_impact = _find_metric(metrics, "netImpact")
    if net_impact is not None and economic is not None:
        key = "insights.netImpactPositive" if economic.netImpact >= 0 else "insights.netImpactNegative"
        insights.append(resolve_label(key, resolver, value=net_impact.value))

    if ticket_performance.services:
        top_service = ticket_performance.services[0]
        insights.append(resolve_label(
            "insights.topService", resolver,
            service=top_service.service, percentage=format_delta(top_service.percentage),
        ))

    if ticket_performance.agents:
        top_agent = ticket_performance.agents[0]
        insights.append(resolve_label(
            "insights.topAgent", resolver, agent=top_agent.agent, tickets=top_agent.tickets,
        ))

    if economic is not None and economic.recoveredRevenue > 0:
        insights.append(resolve_label(
            "insights.recoveredRevenue", resolver, value=format_currency(economic.recoveredRevenue),
        ))

    missed_cost = _find_metric(metrics, "missedCallCost")
    if missed_cost is not None:
        insights.append(resolve_label("insights.missedCallCost", resolver, value=missed_cost.value))

    return insights[:MAX_INSIGHTS]


def build_priorities(
    ticket_performance: TicketPerformance,
    economic: EconomicSummary,
    resolver: Optional[LabelResolver] = None,
) -> List[PriorityItem]:
    """Prioritized action items, in check order."""
    priorities: List[PriorityItem] = []

    if economic.missedCalls > 0:
        priorities.append(PriorityItem(
            id="recover-missed-calls",
            impact=Impact.HIGH,
            title=resolve_label("priorities.recoverMissedCalls.title", resolver),
            description=resolve_label(
                "priorities.recoverMissedCalls.description", resolver,
                missed=economic.missedCalls, cost=format_currency(economic.missedCallCost),
            ),
            referenceMetric="missedCalls",
        ))

    open_status = next(
        (status for status in ticket_performance.statuses if status.status == TicketStatus.OPEN),
        None,
    )
    if open_status is not None and open_status.percentage > OPEN_SHARE_THRESHOLD:
        priorities.append(PriorityItem(
            id="close-open-tickets",
            impact=Impact.HIGH,
            title=resolve_label("priorities.closeOpenTickets.title", resolver),
            description=resolve_label(
                "priorities.closeOpenTickets.description", resolver,
                count=open_status.count, percentage=format_delta(open_status.percentage),
            ),
            referenceMetric="openTickets",
        ))

    if ticket_performance.services:
        top_service = ticket_performance.services[0]
        priorities.append(PriorityItem(
            id="service-automation",
            impact=Impact.MEDIUM,
            title=resolve_label(
                "priorities.serviceAutomation.title", resolver, service=top_service.service.lower(),
            ),
            description=resolve_label(
                "priorities.serviceAutomation.description", resolver,
                service=top_service.service, percentage=format_delta(top_service.percentage),
            ),
            referenceMetric=top_service.service,
        ))

    if economic.netImpact < 0:
        priorities.append(PriorityItem(
            id="roi-recovery",
            impact=Impact.MEDIUM,
            title=resolve_label("priorities.roiRecovery.title", resolver),
            description=resolve_label("priorities.roiRecovery.description", resolver),
            referenceMetric="roi",
        ))

    overloaded = next(
        (agent for agent in ticket_performance.agents if agent.open > AGENT_OPEN_THRESHOLD),
        None,
    )
    if overloaded is not None:
        priorities.append(PriorityItem(
            id="agent-support",
            impact=Impact.LOW,
            title=resolve_label("priorities.agentSupport.title", resolver, agent=overloaded.agent),
            description=resolve_label(
                "priorities.agentSupport.description", resolver,
                agent=overloaded.agent, open=overloaded.open,
            ),
            referenceMetric=overloaded.agent,
        ))

    return priorities
