"""
Test suite for ticket categorization and rollups.

The tests verify:
1. Status normalization is an ordered, first-match-wins keyword table
2. Service mapping: exact lookup, ordered keywords, then the raw label
3. Hung-up call tickets are excluded from every rollup
4. Service status splits add up and are relative to the service count
5. Status buckets come in fixed order with deltas against the previous period
"""

from typing import List

import pytest

from call_analytics.models.enums import TicketStatus, TrendDirection
from call_analytics.models.schemas import RawTicketRecord
from call_analytics.services.ticket_analysis import (
    SERVICE_CATEGORIES,
    STATUS_ORDER,
    analyze_tickets,
    build_ticket_types,
    filter_tickets,
    is_resolved_status,
    map_service_category,
    normalize_status,
)


# =============================================================================
# STATUS NORMALIZATION
# =============================================================================


class TestNormalizeStatus:
    """Tests for normalize_status."""

    @pytest.mark.parametrize("raw, expected", [
        ("Cerrado", TicketStatus.CLOSED),
        ("cerrada", TicketStatus.CLOSED),
        ("Resuelto", TicketStatus.CLOSED),
        ("Tancat", TicketStatus.CLOSED),
        ("Finalizado", TicketStatus.CLOSED),
        ("Closed", TicketStatus.CLOSED),
        ("En progreso", TicketStatus.IN_PROGRESS),
        ("En proceso", TicketStatus.IN_PROGRESS),
        ("Asignado", TicketStatus.IN_PROGRESS),
        ("assigned", TicketStatus.IN_PROGRESS),
        ("Abierto", TicketStatus.OPEN),
        ("Nuevo", TicketStatus.OPEN),
        ("", TicketStatus.OPEN),
        (None, TicketStatus.OPEN),
    ])
    def test_keyword_buckets(self, raw, expected) -> None:
        """Mixed-language statuses map onto three buckets."""
        result = normalize_status(raw)
        assert result == expected, f"{raw!r} expected {expected}, got {result}"

    def test_closed_checked_before_in_progress(self) -> None:
        """A status matching both tables is closed."""
        assert normalize_status("Cerrado (en proceso de facturación)") == TicketStatus.CLOSED

    def test_is_resolved_status(self) -> None:
        """Only closed statuses count as resolved."""
        assert is_resolved_status("Resuelto")
        assert not is_resolved_status("En proceso")
        assert not is_resolved_status(None)


# =============================================================================
# SERVICE MAPPING
# =============================================================================


class TestMapServiceCategory:
    """Tests for map_service_category."""

    @pytest.mark.parametrize("raw, expected", [
        ("averias", "Averías"),
        ("  AVERIAS ", "Averías"),
        ("anular_cita", "Anular Cita"),
        ("consulta", "Consultas"),
        ("urgente", "Urgentes"),
        ("garantía", "Garantías"),
    ])
    def test_exact_matches(self, raw, expected) -> None:
        """Trimmed, lowercased exact lookups."""
        assert map_service_category(raw) == expected

    @pytest.mark.parametrize("raw, expected", [
        ("Caldera no funciona", "Averías"),
        ("Cancelación de visita", "Anular Cita"),
        ("Pregunta sobre factura", "Consultas"),
        ("Reparar persiana", "Reparaciones"),
        ("Instalar aire acondicionado", "Instalaciones"),
        ("Mantenimiento preventivo", "Mantenimiento"),
        ("Queja del cliente", "Otros"),
        ("Presupuesto reforma", "Presupuestos"),
        ("Garantia lavadora", "Garantías"),
    ])
    def test_keyword_matches(self, raw, expected) -> None:
        """Substring keywords identify the category."""
        result = map_service_category(raw)
        assert result == expected, f"{raw!r} expected {expected}, got {result}"

    def test_category_order_decides_overlaps(self) -> None:
        """Earlier categories win when several keyword lists match."""
        assert map_service_category("emergencia averia") == "Averías"
        assert map_service_category("cita urgente") == "Anular Cita"
        assert map_service_category("consulta presupuesto") == "Consultas"

    def test_category_table_order(self) -> None:
        """Averías is checked first and Urgentes after Otros."""
        labels = [label for label, _ in SERVICE_CATEGORIES]
        assert labels[0] == "Averías"
        assert labels.index("Otros") < labels.index("Urgentes")

    def test_unknown_types_keep_their_label(self) -> None:
        """Unmatched types stay visible under their trimmed label."""
        assert map_service_category("  Limpieza ") == "Limpieza"

    @pytest.mark.parametrize("raw", [None, "", "   "])
    def test_blank_types_are_uncategorized(self, raw) -> None:
        """Blank types map to the uncategorized label."""
        assert map_service_category(raw) == "Sin Categoría"

    def test_mapping_is_deterministic(self) -> None:
        """The same input always maps to the same category."""
        inputs = ["averias", "Cita médica", "Limpieza", "urgent repair", None]
        first = [map_service_category(value) for value in inputs]
        second = [map_service_category(value) for value in inputs]
        assert first == second


# =============================================================================
# ROLLUPS
# =============================================================================


class TestAnalyzeTickets:
    """Tests for analyze_tickets."""

    def test_services_after_exclusion(self, five_tickets: List[RawTicketRecord]) -> None:
        """The hung-up call ticket is dropped before services are counted."""
        performance = analyze_tickets(five_tickets)
        services = {service.service: service for service in performance.services}

        assert sum(service.count for service in performance.services) == 4
        assert services["Averías"].count == 2
        assert services["Anular Cita"].count == 1
        assert services["Consultas"].count == 1
        assert performance.services[0].service == "Averías"
        assert services["Averías"].percentage == 50.0

    def test_service_split_relative_to_service(self, five_tickets: List[RawTicketRecord]) -> None:
        """closed/pending percentages are shares of the service's own count."""
        averias = analyze_tickets(five_tickets).services[0]

        assert averias.closedCount == 1
        assert averias.openCount == 1
        assert averias.inProgressCount == 0
        assert averias.closedPercentage == 50.0
        assert averias.pendingPercentage == 50.0

    @pytest.mark.parametrize("statuses", [
        ["Cerrado", "Abierto", "En proceso", "Tancat", None],
        ["Resuelto"] * 3,
        ["Asignado", "Asignado", "Nuevo"],
    ])
    def test_service_split_adds_up(self, make_ticket, statuses) -> None:
        """closed + open + in progress == count for every service."""
        tickets = [make_ticket("averias", status) for status in statuses]
        tickets += [make_ticket("Limpieza", status) for status in statuses]

        for service in analyze_tickets(tickets).services:
            total = service.closedCount + service.openCount + service.inProgressCount
            assert total == service.count, f"Split of {service.service} does not add up"

    def test_statuses_in_fixed_order(self, five_tickets: List[RawTicketRecord]) -> None:
        """open, in_progress, closed, with percentages of all tickets."""
        statuses = analyze_tickets(five_tickets).statuses

        assert [status.status for status in statuses] == list(STATUS_ORDER)
        assert [status.count for status in statuses] == [1, 1, 2]
        assert [status.percentage for status in statuses] == [25.0, 25.0, 50.0]
        assert [status.label for status in statuses] == ["Abiertos", "En progreso", "Cerrados"]

    def test_status_deltas(self, five_tickets, make_ticket) -> None:
        """Deltas compare counts with the previous period."""
        previous = [make_ticket("averias", "Abierto"), make_ticket("averias", "Abierto")]
        statuses = {s.status: s for s in analyze_tickets(five_tickets, previous).statuses}

        assert statuses[TicketStatus.OPEN].delta.delta == -50.0
        assert statuses[TicketStatus.OPEN].delta.trend == TrendDirection.DOWN
        assert statuses[TicketStatus.CLOSED].delta.delta is None

    def test_agents(self, five_tickets, make_ticket) -> None:
        """Agents are sanitized; unassigned tickets get the fallback label."""
        tickets = list(five_tickets) + [make_ticket("consulta", "Abierto", "  ")]
        agents = {agent.agent: agent for agent in analyze_tickets(tickets).agents}

        assert agents["Marta"].tickets == 2
        assert agents["Marta"].resolved == 1
        assert agents["Marta"].open == 1
        assert agents["Sin asignar"].tickets == 1

    def test_empty_period(self) -> None:
        """No tickets: three zero status buckets and no services."""
        performance = analyze_tickets([])

        assert [status.count for status in performance.statuses] == [0, 0, 0]
        assert [status.percentage for status in performance.statuses] == [0.0, 0.0, 0.0]
        assert performance.services == []
        assert performance.agents == []


class TestTicketTypes:
    """Tests for build_ticket_types and filter_tickets."""

    def test_raw_type_distribution(self, five_tickets: List[RawTicketRecord]) -> None:
        """Raw labels, largest first, excluded types dropped."""
        slices = build_ticket_types(five_tickets)

        assert [(s.label, s.value) for s in slices] == [
            ("averias", 2), ("anular_cita", 1), ("consulta", 1)
        ]
        assert slices[0].percentage == 50.0

    def test_blank_type_label(self, make_ticket) -> None:
        """Blank types are grouped under the unknown label."""
        slices = build_ticket_types([make_ticket(None), make_ticket("  ")])
        assert [(s.label, s.value) for s in slices] == [("Sin tipo", 2)]

    def test_filter_tickets(self, five_tickets: List[RawTicketRecord]) -> None:
        """filter_tickets only drops excluded types."""
        kept = filter_tickets(five_tickets)
        assert len(kept) == 4
        assert all(ticket.ticket_type != "llamada colgada" for ticket in kept)
