"""
Ticket categorization and service mapping.

Raw ticket rows carry free-text type and status labels written by agents in
Spanish, Catalan or English. This module normalizes them:

Status Normalization:
    Ordered first-match-wins keyword table. A status containing any closed
    keyword is closed; otherwise any in-progress keyword makes it in progress;
    anything else (including blank) is open.

Service Mapping (three phases):
    1. Exact lookup of the trimmed, lowercased type in EXACT_SERVICE_MATCHES
    2. Ordered keyword table SERVICE_CATEGORIES; first category with any
       substring hit wins. Order is part of the contract: "emergencia averia"
       is an Averías ticket because Averías is checked before Urgentes.
    3. The trimmed original label, so emerging incident types stay visible
    Blank types map to the "uncategorized" label.

Rollups:
    - statuses: always open, in_progress, closed (in that order) with
      percentage of all tickets and delta against the previous period
    - services: count, share of all tickets, and a status split whose
      percentages are relative to the service's own count
    - agents: tickets, resolved and open per sanitized assignee

Every rollup runs on tickets that survived the exclusion filter.
"""

from collections import Counter
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from call_analytics.models.enums import TicketStatus
from call_analytics.models.schemas import (
    RawTicketRecord,
    TicketAgentSummary,
    TicketPerformance,
    TicketServiceSummary,
    TicketStatusSummary,
    TicketTypeSlice,
)
from call_analytics.services.comparison import calculate_delta
from call_analytics.utils.filters import contains_any, should_exclude_type
from call_analytics.utils.formatting import sanitize_label
from call_analytics.utils.labels import LabelResolver, resolve_label
from call_analytics.utils.numbers import percentage


# =============================================================================
# Status Keyword Tables
# =============================================================================

CLOSED_STATUS_KEYWORDS: Tuple[str, ...] = (
    "cerr",
    "resuelto",
    "resolt",
    "tancat",
    "finaliz",
    "finalitzat",
    "completad",
    "completat",
    "closed",
    "resolved",
)

IN_PROGRESS_STATUS_KEYWORDS: Tuple[str, ...] = (
    "progres",
    "proces",
    "in progress",
    "asignad",
    "en curso",
    "assigned",
)

# Evaluated in order; first hit wins, default OPEN
STATUS_RULES: Tuple[Tuple[TicketStatus, Tuple[str, ...]], ...] = (
    (TicketStatus.CLOSED, CLOSED_STATUS_KEYWORDS),
    (TicketStatus.IN_PROGRESS, IN_PROGRESS_STATUS_KEYWORDS),
)

STATUS_ORDER: Tuple[TicketStatus, ...] = (
    TicketStatus.OPEN,
    TicketStatus.IN_PROGRESS,
    TicketStatus.CLOSED,
)


# =============================================================================
# Service Tables
# =============================================================================

EXACT_SERVICE_MATCHES: Dict[str, str] = {
    "averias": "Averías",
    "averia": "Averías",
    "anular_cita": "Anular Cita",
    "anular cita": "Anular Cita",
    "cancelar_cita": "Anular Cita",
    "cancelar cita": "Anular Cita",
    "consulta": "Consultas",
    "informacion": "Consultas",
    "información": "Consultas",
    "reparacion": "Reparaciones",
    "reparación": "Reparaciones",
    "instalacion": "Instalaciones",
    "instalación": "Instalaciones",
    "mantenimiento": "Mantenimiento",
    "queja": "Otros",
    "reclamacion": "Otros",
    "reclamación": "Otros",
    "urgente": "Urgentes",
    "emergencia": "Urgentes",
    "presupuesto": "Presupuestos",
    "garantia": "Garantías",
    "garantía": "Garantías",
}

SERVICE_CATEGORIES: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("Averías", ("aver", "averia", "break", "fault", "fail", "no funciona", "no va", "estropeado", "dañado")),
    ("Anular Cita", ("anular", "cancel", "cita", "appointment", "cancelar")),
    ("Consultas", ("consulta", "informacion", "info", "pregunta", "duda", "ayuda")),
    ("Reparaciones", ("repar", "repair", "fix", "arregl", "solucion")),
    ("Instalaciones", ("instal", "install", "montaje", "colocacion")),
    ("Mantenimiento", ("maint", "manten", "service", "revision", "check")),
    ("Otros", ("complaint", "queja", "reclam", "denuncia", "insatisfecho", "general", "otro", "misc")),
    ("Urgentes", ("urgent", "emergenc", "emergencia", "prioritario", "critico")),
    ("Presupuestos", ("presupuest", "budget", "cotizacion", "precio", "coste")),
    ("Garantías", ("garant", "warranty", "devolucion", "return")),
)


# =============================================================================
# Classification
# =============================================================================


def normalize_status(value: Optional[str]) -> TicketStatus:
    """Map a raw status string onto open / in_progress / closed."""
    for status, keywords in STATUS_RULES:
        if contains_any(value, keywords):
            return status
    return TicketStatus.OPEN


def is_resolved_status(value: Optional[str]) -> bool:
    """True when the raw status contains any closed-state keyword."""
    return normalize_status(value) == TicketStatus.CLOSED


def map_service_category(
    ticket_type: Optional[str],
    resolver: Optional[LabelResolver] = None,
) -> str:
    """
    Map a raw ticket type onto a named service category.

    Example:
        >>> map_service_category("  AVERIAS ")
        'Averías'
        >>> map_service_category("Mantenimiento preventivo")
        'Mantenimiento'
        >>> map_service_category("Limpieza")
        'Limpieza'
    """
    if not ticket_type or not ticket_type.strip():
        return resolve_label("service.uncategorized", resolver)

    normalized = ticket_type.strip().lower()

    exact = EXACT_SERVICE_MATCHES.get(normalized)
    if exact:
        return exact

    for label, keywords in SERVICE_CATEGORIES:
        if any(keyword in normalized for keyword in keywords):
            return label

    return ticket_type.strip()


def filter_tickets(
    tickets: Iterable[RawTicketRecord],
    excluded_keywords: Optional[Sequence[str]] = None,
) -> List[RawTicketRecord]:
    """Drop tickets whose type marks a hung-up or unfinished call."""
    return [
        ticket for ticket in tickets
        if not should_exclude_type(ticket.ticket_type, excluded_keywords)
    ]


# =============================================================================
# Rollups
# =============================================================================


def _count_statuses(tickets: Iterable[RawTicketRecord]) -> Counter:
    return Counter(normalize_status(ticket.ticket_status) for ticket in tickets)


def analyze_tickets(
    current: Iterable[RawTicketRecord],
    previous: Iterable[RawTicketRecord] = (),
    excluded_keywords: Optional[Sequence[str]] = None,
    resolver: Optional[LabelResolver] = None,
) -> TicketPerformance:
    """
    Build status, service and agent rollups for the current period.

    Args:
        current: Tickets of the reporting period
        previous: Tickets of the comparison period (status deltas only)
        excluded_keywords: Hung-up call keywords; tenant default when None
        resolver: Optional label resolver

    Returns:
        TicketPerformance with statuses in fixed order and services/agents
        sorted by count descending (ties keep first-seen order).
    """
    current_filtered = filter_tickets(current, excluded_keywords)
    previous_filtered = filter_tickets(previous, excluded_keywords)

    status_counts = _count_statuses(current_filtered)
    previous_status_counts = _count_statuses(previous_filtered)

    service_counts: Dict[str, Counter] = {}
    agent_counts: Dict[str, Dict[str, int]] = {}

    for ticket in current_filtered:
        status = normalize_status(ticket.ticket_status)

        service = map_service_category(ticket.ticket_type, resolver)
        service_counts.setdefault(service, Counter())[status] += 1

        agent = sanitize_label(ticket.assignee, "agent.unassigned", resolver)
        entry = agent_counts.setdefault(agent, {"tickets": 0, "resolved": 0, "open": 0})
        entry["tickets"] += 1
        if status == TicketStatus.CLOSED:
            entry["resolved"] += 1
        else:
            entry["open"] += 1

    # Percentages of an empty period stay at zero
    total = len(current_filtered) or 1

    statuses = []
    for status in STATUS_ORDER:
        count = status_counts.get(status, 0)
        statuses.append(TicketStatusSummary(
            status=status,
            label=resolve_label(f"status.{status.value}", resolver),
            count=count,
            percentage=percentage(count, total),
            delta=calculate_delta(count, previous_status_counts.get(status, 0)),
        ))

    services = []
    for service, counts in service_counts.items():
        count = sum(counts.values())
        closed = counts.get(TicketStatus.CLOSED, 0)
        open_count = counts.get(TicketStatus.OPEN, 0)
        in_progress = counts.get(TicketStatus.IN_PROGRESS, 0)
        services.append(TicketServiceSummary(
            service=service,
            count=count,
            percentage=percentage(count, total),
            closedCount=closed,
            openCount=open_count,
            inProgressCount=in_progress,
            closedPercentage=percentage(closed, count),
            pendingPercentage=percentage(open_count + in_progress, count),
        ))
    services.sort(key=lambda summary: summary.count, reverse=True)

    agents = [
        TicketAgentSummary(agent=agent, tickets=v["tickets"], resolved=v["resolved"], open=v["open"])
        for agent, v in agent_counts.items()
    ]
    agents.sort(key=lambda summary: summary.tickets, reverse=True)

    return TicketPerformance(statuses=statuses, services=services, agents=agents)


def build_ticket_types(
    tickets: Iterable[RawTicketRecord],
    excluded_keywords: Optional[Sequence[str]] = None,
    resolver: Optional[LabelResolver] = None,
) -> List[TicketTypeSlice]:
    """Distribution of raw (trimmed) ticket types, largest first."""
    counts: Counter = Counter(
        sanitize_label(ticket.ticket_type, "ticketType.unknown", resolver)
        for ticket in filter_tickets(tickets, excluded_keywords)
    )
    total = sum(counts.values()) or 1
    return [
        TicketTypeSlice(label=label, value=value, percentage=percentage(value, total))
        for label, value in counts.most_common()
    ]
