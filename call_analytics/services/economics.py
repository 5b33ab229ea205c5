"""
Economic impact model.

Converts one period's call statistics into cost, savings and ROI figures using
the configurable cost model (EconomicsConfig):

    missedCallCost    = round(missed * missedCallCost)
    automationSavings = round(total * automationCoverage * automationSavingsPerCall)
    humanSavings      = round(total * automationCoverage * (avgCallDuration / 3600) * hourlyRate)
    missedRecovered   = max(previousMissed - currentMissed, 0)
    recoveredRevenue  = round(missedRecovered * conversionRate * avgTicketValue)
    netImpact         = automationSavings + humanSavings + recoveredRevenue - missedCallCost
    roi               = round(netImpact / missedCallCost, 2) if missedCallCost > 0 else None

Rounding is half away from zero. Without a previous analysis the previous
missed count defaults to the current one, so no revenue is "recovered".
"""

from typing import Optional

from call_analytics.models.schemas import DashboardStats, EconomicSummary, EconomicsConfig
from call_analytics.services.call_analysis import CallAnalysis
from call_analytics.utils.numbers import round_half_up, round_int


def compute_economic_summary(
    stats: DashboardStats,
    current_calls: CallAnalysis,
    previous_calls: Optional[CallAnalysis] = None,
    config: Optional[EconomicsConfig] = None,
) -> EconomicSummary:
    """
    Compute the economic impact of a period.

    Args:
        stats: DashboardStats of the current period (avgCallDuration)
        current_calls: Call analysis of the current period
        previous_calls: Call analysis of the comparison period, if any
        config: Cost model; defaults when None

    Returns:
        EconomicSummary with integer euro figures and optional ROI.

    Example:
        >>> summary = compute_economic_summary(stats, current, previous, config)
        >>> summary.netImpact == (summary.automationSavings + summary.humanSavings
        ...                       + summary.recoveredRevenue - summary.missedCallCost)
        True
    """
    config = config or EconomicsConfig()

    missed = current_calls.missed
    total = current_calls.total

    missed_call_cost = round_int(missed * config.missedCallCost)
    automation_savings = round_int(total * config.automationCoverage * config.automationSavingsPerCall)

    hours_saved = total * config.automationCoverage * (stats.avgCallDuration / 3600)
    human_savings = round_int(hours_saved * config.hourlyRate)

    previous_missed = previous_calls.missed if previous_calls is not None else missed
    missed_recovered = max(previous_missed - missed, 0)
    recovered_revenue = round_int(missed_recovered * config.conversionRate * config.avgTicketValue)

    net_impact = automation_savings + human_savings + recovered_revenue - missed_call_cost
    roi = round_half_up(net_impact / missed_call_cost, 2) if missed_call_cost > 0 else None

    return EconomicSummary(
        missedCalls=missed,
        missedCallCost=missed_call_cost,
        automationSavings=automation_savings,
        humanSavings=human_savings,
        recoveredRevenue=recovered_revenue,
        netImpact=net_impact,
        roi=roi,
    )
