"""
Default label table and label resolution.

The engine emits semantic keys wherever human-facing copy is needed. Callers
may pass a resolver `(key) -> str` (their own i18n layer); when no resolver is
given, or it returns an empty value, the built-in Spanish defaults below are
used. Keys containing `{placeholders}` are message templates filled with
str.format().
"""

from typing import Callable, Dict, Optional

LabelResolver = Callable[[str], str]


DEFAULT_LABELS: Dict[str, str] = {
    # Fallback buckets
    "channel.other": "Otro canal",
    "agent.unassigned": "Sin asignar",
    "service.uncategorized": "Sin Categoría",
    "ticketType.unknown": "Sin tipo",
    # Ticket status buckets
    "status.open": "Abiertos",
    "status.in_progress": "En progreso",
    "status.closed": "Cerrados",
    # Weekday labels (Monday first)
    "weekday.0": "Lun",
    "weekday.1": "Mar",
    "weekday.2": "Mié",
    "weekday.3": "Jue",
    "weekday.4": "Vie",
    "weekday.5": "Sáb",
    "weekday.6": "Dom",
    # Metric labels
    "metrics.totalCalls": "Volumen de llamadas",
    "metrics.totalTickets": "Tickets creados",
    "metrics.avgHandleTime": "Tiempo medio de gestión",
    "metrics.totalCallTime": "Tiempo total",
    "metrics.answeredWithinHoursRate": "% Llamadas atendidas en horario",
    "metrics.answeredOutsideHoursRate": "% Llamadas atendidas fuera de horario",
    "metrics.resolutionRate": "Resolución de tickets",
    "metrics.openTickets": "Tickets abiertos",
    "metrics.totalCost": "Coste total",
    "metrics.avgScore": "Satisfacción promedio",
    "metrics.missedCallCost": "Coste llamadas perdidas",
    "metrics.automationSavings": "Ahorro por automatización",
    "metrics.humanSavings": "Ahorro humano estimado",
    "metrics.recoveredRevenue": "Ingresos recuperados",
    "metrics.netImpact": "Impacto neto",
    "metrics.ticketsPerCall": "Tickets por llamada",
    # Metric hints
    "hints.resolutionRate": "Tickets resueltos / total tickets",
    "hints.openTickets": "Menor es mejor",
    "hints.totalCost": "Coste estimado asociado al tiempo de llamada",
    "hints.avgScore": "Índice de calidad percibida",
    "hints.missedCallCost": "{missed} llamadas perdidas sin seguimiento",
    "hints.automationSavings": "Estimación de ahorro generado por el agente virtual",
    "hints.humanSavings": "Horas ahorradas x coste horario",
    "hints.recoveredRevenue": "Estimación por llamadas recuperadas",
    "hints.netImpact": "Ahorro - coste por llamadas sin atender",
    "hints.ticketsPerCall": "Ratio de tickets generados por llamada atendida",
    # Benchmarks
    "benchmarks.resolutionRate": "Resolución de tickets",
    "benchmarks.resolutionRate.top": "Por encima del percentil 75 del sector",
    "benchmarks.resolutionRate.average": "En la media del sector",
    "benchmarks.resolutionRate.bottom": "Por debajo del percentil 25: oportunidad de mejora",
    "benchmarks.avgHandleTime": "Tiempo medio de llamada",
    "benchmarks.avgHandleTime.top": "Gestión ágil vs. benchmark",
    "benchmarks.avgHandleTime.average": "En línea con la media",
    "benchmarks.avgHandleTime.bottom": "Duraciones elevadas: revisar capacitación y scripts",
    "benchmarks.ticketsPerCall": "Tickets por llamada",
    "benchmarks.ticketsPerCall.top": "Gran capacidad de upselling/service",
    "benchmarks.ticketsPerCall.average": "Ratio equilibrado",
    "benchmarks.ticketsPerCall.bottom": "Baja conversión: evaluar cross-selling y scripts",
    # Insights
    "insights.resolutionUp": "La resolución de tickets mejora {delta}% respecto al periodo anterior.",
    "insights.resolutionDown": "Atención: la resolución de tickets cae {delta}%. Revisa flujos y SLA.",
    "insights.backlog": (
        "Existen {value} tickets abiertos. Prioriza los estados con mayor volumen "
        "para aliviar el backlog."
    ),
    "insights.score": (
        "La satisfacción promedio se sitúa en {value}. Refuerza las franjas con "
        "mejor valoración."
    ),
    "insights.peak": (
        "El pico de actividad se concentra en \"{label}\" con {calls} llamadas. "
        "Considera reforzar el equipo en esa franja."
    ),
    "insights.dominantStatus": (
        "El estado predominante es \"{label}\" ({percentage}%). Ajusta recursos "
        "para equilibrar el flujo."
    ),
    "insights.netImpactPositive": (
        "Impacto neto del periodo: {value}. Refuerza los flujos que generan mayor ahorro."
    ),
    "insights.netImpactNegative": (
        "Impacto neto del periodo: {value}. El coste de llamadas perdidas supera "
        "el ahorro generado."
    ),
    "insights.topService": (
        "{service} concentra {percentage}% de las solicitudes. Crea guías o "
        "automatizaciones específicas para reducir tiempos."
    ),
    "insights.topAgent": (
        "{agent} gestiona {tickets} tickets. Revisa disponibilidad o reasigna casos "
        "para equilibrar carga."
    ),
    "insights.recoveredRevenue": (
        "Se han recuperado {value} en ingresos estimados al reducir llamadas perdidas."
    ),
    "insights.missedCallCost": (
        "Coste potencial de llamadas perdidas: {value}. Refuerza atención en "
        "horarios críticos."
    ),
    # Priorities
    "priorities.recoverMissedCalls.title": "Recuperar llamadas perdidas",
    "priorities.recoverMissedCalls.description": (
        "Existen {missed} llamadas sin seguimiento con un coste estimado de {cost}. "
        "Refuerza cobertura en las franjas pico."
    ),
    "priorities.closeOpenTickets.title": "Reducir backlog de tickets",
    "priorities.closeOpenTickets.description": (
        "{count} tickets abiertos ({percentage}%) ralentizan la experiencia. "
        "Prioriza cierres y automatiza seguimientos."
    ),
    "priorities.serviceAutomation.title": "Automatizar {service}",
    "priorities.serviceAutomation.description": (
        "{service} representa {percentage}% de las incidencias. Revisa flujos "
        "específicos y FAQs para reducir contacto humano."
    ),
    "priorities.roiRecovery.title": "Optimizar ROI",
    "priorities.roiRecovery.description": (
        "El impacto neto es negativo. Revisa horarios pico e incrementa "
        "automatización para invertir la tendencia."
    ),
    "priorities.agentSupport.title": "Refuerzo para {agent}",
    "priorities.agentSupport.description": (
        "{agent} mantiene {open} tickets abiertos. Revisa asignaciones o apóyalo "
        "con entrenamiento."
    ),
}


def resolve_label(key: str, resolver: Optional[LabelResolver] = None, **params) -> str:
    """
    Resolve a label key to display text.

    Args:
        key: Semantic label key (e.g. "metrics.totalCalls")
        resolver: Optional caller-supplied lookup; empty results fall back to defaults
        **params: Values for template placeholders

    Returns:
        The resolved (and formatted) label. Unknown keys resolve to the key itself.
    """
    text = resolver(key) if resolver else None
    if not text:
        text = DEFAULT_LABELS.get(key, key)
    if params:
        try:
            return text.format(**params)
        except (KeyError, IndexError, ValueError):
            # A resolver template with foreign placeholders falls back to ours
            return DEFAULT_LABELS.get(key, key).format(**params)
    return text
