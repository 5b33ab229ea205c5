"""
Test suite for the paginated record fetcher.

The tests verify:
1. Identifier validation and the paginated SQL
2. Paging stops at the first short page with LIMIT/OFFSET bookkeeping
3. Client-side re-filtering to the inclusive [start, end] window
4. Database failures abort the fetch with RecordFetchError
5. Row validation skips unparseable rows instead of failing
6. Concurrent fetch of both periods

The asyncpg pool is mocked; `fetch` is an AsyncMock returning row dicts.
"""

import asyncio
from datetime import datetime
from typing import Any, Dict, List

import asyncpg
import pytest

from call_analytics.models.schemas import DateRange, TenantProfile
from call_analytics.services.record_fetcher import (
    RecordFetchError,
    build_page_query,
    fetch_all_records,
    fetch_period_records,
    parse_call_rows,
    parse_ticket_rows,
    refilter_rows,
    validate_identifier,
)


COLUMNS = ["id", "created_at", "call_duration_seconds"]


def rows_at(*hours: int) -> List[Dict[str, Any]]:
    """Call rows on 2 June 2025 at the given hours."""
    return [
        {"id": index, "created_at": datetime(2025, 6, 2, hour), "call_duration_seconds": 60}
        for index, hour in enumerate(hours)
    ]


@pytest.fixture
def profile() -> TenantProfile:
    return TenantProfile(name="Test", callsTable="calls", ticketsTable="tickets")


# =============================================================================
# SQL HELPERS
# =============================================================================


class TestQueryBuilding:
    """Tests for validate_identifier and build_page_query."""

    def test_valid_identifier_is_quoted(self) -> None:
        """Plain identifiers are double-quoted."""
        assert validate_identifier("call_logs_tecnics_bcn_sat") == '"call_logs_tecnics_bcn_sat"'

    @pytest.mark.parametrize("name", ["calls; DROP TABLE x", "1calls", "", "a-b", 'a"b', None])
    def test_invalid_identifier(self, name) -> None:
        """Anything but a plain identifier is rejected."""
        with pytest.raises(ValueError):
            validate_identifier(name)

    def test_page_query(self) -> None:
        """Newest first, bound range and pagination parameters."""
        query = build_page_query("calls", ["id", "created_at"])
        assert query == (
            'SELECT "id", "created_at" FROM "calls" '
            "WHERE created_at >= $1 AND created_at <= $2 "
            "ORDER BY created_at DESC LIMIT $3 OFFSET $4"
        )

    def test_page_query_requires_columns(self) -> None:
        """An empty column list is rejected."""
        with pytest.raises(ValueError):
            build_page_query("calls", [])


# =============================================================================
# PAGINATION
# =============================================================================


class TestFetchAllRecords:
    """Tests for fetch_all_records."""

    @pytest.mark.asyncio
    async def test_pages_until_short_page(self, mock_pool, single_day_range) -> None:
        """Two full pages and a short one: three queries with advancing offsets."""
        mock_pool.fetch.side_effect = [rows_at(9, 10), rows_at(11, 12), rows_at(13)]

        rows = await fetch_all_records(mock_pool, "calls", COLUMNS, single_day_range, page_size=2)

        assert len(rows) == 5, f"Expected 5 rows, got {len(rows)}"
        assert mock_pool.fetch.await_count == 3
        offsets = [call.args[4] for call in mock_pool.fetch.await_args_list]
        assert offsets == [0, 2, 4], f"Unexpected offsets {offsets}"
        limits = {call.args[3] for call in mock_pool.fetch.await_args_list}
        assert limits == {2}

    @pytest.mark.asyncio
    async def test_exact_multiple_needs_empty_page(self, mock_pool, single_day_range) -> None:
        """A full last page is followed by one empty page."""
        mock_pool.fetch.side_effect = [rows_at(9, 10), []]

        rows = await fetch_all_records(mock_pool, "calls", COLUMNS, single_day_range, page_size=2)

        assert len(rows) == 2
        assert mock_pool.fetch.await_count == 2

    @pytest.mark.asyncio
    async def test_binds_range(self, mock_pool, single_day_range) -> None:
        """The range bounds are bound parameters, not interpolated."""
        await fetch_all_records(mock_pool, "calls", COLUMNS, single_day_range)

        args = mock_pool.fetch.await_args.args
        assert args[1] == single_day_range.start
        assert args[2] == single_day_range.end
        assert "2025" not in args[0]

    @pytest.mark.asyncio
    async def test_refilters_loose_source(self, mock_pool, single_day_range) -> None:
        """Rows outside the window returned by a loose source are dropped."""
        outside = {"id": 99, "created_at": datetime(2025, 6, 3, 0, 0, 1)}
        mock_pool.fetch.side_effect = [rows_at(10) + [outside]]

        rows = await fetch_all_records(mock_pool, "calls", COLUMNS, single_day_range)

        assert [row["id"] for row in rows] == [0]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("error", [
        asyncpg.exceptions.UndefinedTableError('relation "calls" does not exist'),
        asyncpg.InterfaceError("pool is closed"),
        OSError("connection reset"),
        asyncio.TimeoutError(),
    ])
    async def test_failure_aborts(self, mock_pool, single_day_range, error) -> None:
        """Any source failure raises RecordFetchError; no partial rows are returned."""
        mock_pool.fetch.side_effect = [rows_at(9, 10), error]

        with pytest.raises(RecordFetchError) as exc_info:
            await fetch_all_records(mock_pool, "calls", COLUMNS, single_day_range, page_size=2)

        assert exc_info.value.table == "calls"
        assert exc_info.value.__cause__ is error

    @pytest.mark.asyncio
    async def test_invalid_arguments(self, mock_pool, single_day_range) -> None:
        """Bad identifiers and page sizes fail before querying."""
        with pytest.raises(ValueError):
            await fetch_all_records(mock_pool, "calls;--", COLUMNS, single_day_range)
        with pytest.raises(ValueError):
            await fetch_all_records(mock_pool, "calls", COLUMNS, single_day_range, page_size=0)

        mock_pool.fetch.assert_not_awaited()


# =============================================================================
# RE-FILTERING AND PARSING
# =============================================================================


class TestRowHandling:
    """Tests for refilter_rows and row parsing."""

    def test_refilter_is_inclusive(self, single_day_range: DateRange) -> None:
        """Both window bounds are kept."""
        rows = [
            {"id": 1, "created_at": single_day_range.start},
            {"id": 2, "created_at": single_day_range.end},
            {"id": 3, "created_at": datetime(2025, 6, 1, 23, 59, 59)},
        ]
        assert [row["id"] for row in refilter_rows(rows, single_day_range)] == [1, 2]

    def test_refilter_parses_iso_strings(self, single_day_range: DateRange) -> None:
        """ISO strings are parsed; unparseable timestamps are skipped."""
        rows = [
            {"id": 1, "created_at": "2025-06-02T10:00:00"},
            {"id": 2, "created_at": "not a date"},
            {"id": 3, "created_at": None},
        ]
        kept = refilter_rows(rows, single_day_range)

        assert [row["id"] for row in kept] == [1]
        assert kept[0]["created_at"] == datetime(2025, 6, 2, 10, 0)

    def test_refilter_aware_rows(self) -> None:
        """Aware timestamps compare against an aware window."""
        date_range = DateRange(
            start=datetime.fromisoformat("2025-06-02T00:00:00+00:00"),
            end=datetime.fromisoformat("2025-06-02T23:59:59+00:00"),
        )
        rows = [
            {"id": 1, "created_at": "2025-06-02T10:00:00Z"},
            {"id": 2, "created_at": "2025-06-03T10:00:00Z"},
        ]
        assert [row["id"] for row in refilter_rows(rows, date_range)] == [1]

    def test_parse_call_rows(self) -> None:
        """Source column names and loose numbers are accepted."""
        rows = [
            {"id": 1, "created_at": datetime(2025, 6, 2, 10), "call_duration_seconds": "12,5",
             "call_cost": "0,40", "phone_id": 34600111222},
            {"id": 2, "created_at": "garbage"},
            {"id": 3},
        ]
        calls = parse_call_rows(rows)

        assert len(calls) == 1, "Rows without a valid created_at are skipped"
        assert calls[0].duration_seconds == 12.5
        assert calls[0].cost == 0.4
        assert calls[0].channel_id == "34600111222"

    def test_parse_ticket_rows(self) -> None:
        """user_name maps onto the assignee."""
        rows = [{"id": 7, "created_at": datetime(2025, 6, 2), "ticket_type": "averias",
                 "ticket_status": "Abierto", "user_name": "Marta"}]
        tickets = parse_ticket_rows(rows)

        assert tickets[0].assignee == "Marta"
        assert tickets[0].ticket_type == "averias"


# =============================================================================
# PERIOD FETCH
# =============================================================================


class TestFetchPeriodRecords:
    """Tests for fetch_period_records."""

    @pytest.mark.asyncio
    async def test_fetches_four_sets(self, mock_pool, profile, june_range) -> None:
        """Current and previous calls and tickets are fetched independently."""
        may_range = DateRange(start=datetime(2025, 5, 1), end=datetime(2025, 5, 31, 23, 59, 59))

        async def fake_fetch(query, start, end, limit, offset):
            if '"calls"' in query:
                return [{"id": 1, "created_at": start, "call_duration_seconds": 60},
                        {"id": 2, "created_at": end, "call_duration_seconds": None}]
            return [{"id": 1, "created_at": start, "ticket_type": "averias",
                     "ticket_status": "Cerrado", "user_name": "Marta"}]

        mock_pool.fetch.side_effect = fake_fetch

        records = await fetch_period_records(mock_pool, profile, june_range, may_range)

        assert len(records.current_calls) == 2
        assert len(records.previous_calls) == 2
        assert len(records.current_tickets) == 1
        assert len(records.previous_tickets) == 1
        assert records.current_calls[0].created_at == june_range.start
        assert records.previous_calls[0].created_at == may_range.start
        assert mock_pool.fetch.await_count == 4

    @pytest.mark.asyncio
    async def test_failure_propagates(self, mock_pool, profile, june_range) -> None:
        """One failing table fails the whole period fetch."""
        async def fake_fetch(query, *args):
            if '"tickets"' in query:
                raise OSError("connection refused")
            return []

        mock_pool.fetch.side_effect = fake_fetch

        with pytest.raises(RecordFetchError) as exc_info:
            await fetch_period_records(mock_pool, profile, june_range, june_range)

        assert exc_info.value.table == "tickets"
