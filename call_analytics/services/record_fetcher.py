"""
Paginated retrieval of raw call and ticket rows for a reporting period.

This module is the only place the reporting engine touches the database. It
implements the narrow fetch contract the aggregation core depends on:

- fetch_all_records: page through one tenant table for a [start, end] window
  (LIMIT/OFFSET, newest first) until a short page signals completion, then
  re-filter client-side so rows outside the window never reach the engine
- parse_call_rows / parse_ticket_rows: validate loosely typed rows into
  immutable RawCallRecord / RawTicketRecord snapshots, skipping rows whose
  timestamp cannot be parsed
- fetch_period_records: fetch current and previous calls/tickets concurrently

Failure Policy:
    Any database or network error aborts the whole fetch with RecordFetchError.
    There is no partial result; the caller reports a single failure.

Identifier Safety:
    Table and column names come from tenant configuration, never from request
    input, but they are still validated against a strict identifier pattern
    before being interpolated into SQL. Values are always bound parameters.
"""

import asyncio
import logging
import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

import asyncpg
from pydantic import ValidationError

from call_analytics.models.schemas import (
    DateRange,
    RawCallRecord,
    RawTicketRecord,
    TenantProfile,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Constants
# =============================================================================

DEFAULT_PAGE_SIZE = 1000

_IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

# Failures that abort a report
_FETCH_ERRORS = (asyncpg.PostgresError, asyncpg.InterfaceError, OSError, asyncio.TimeoutError)


# =============================================================================
# Exceptions
# =============================================================================


class RecordFetchError(RuntimeError):
    """Raised when the record source fails; the report cannot be produced."""

    def __init__(self, table: str, message: str):
        self.table = table
        super().__init__(f"Failed to fetch records from {table}: {message}")


# =============================================================================
# Data Classes
# =============================================================================


@dataclass
class PeriodRecords:
    """
    Raw records of a current period and its comparison period.

    The four sets are fetched independently and never share state.
    """
    current_calls: List[RawCallRecord] = field(default_factory=list)
    current_tickets: List[RawTicketRecord] = field(default_factory=list)
    previous_calls: List[RawCallRecord] = field(default_factory=list)
    previous_tickets: List[RawTicketRecord] = field(default_factory=list)


# =============================================================================
# SQL Helpers
# =============================================================================


def validate_identifier(name: str) -> str:
    """
    Validate a SQL identifier and return it double-quoted.

    Raises:
        ValueError: If the name is not a plain identifier.
    """
    if not isinstance(name, str) or not _IDENTIFIER_PATTERN.match(name):
        raise ValueError(f"Invalid SQL identifier: {name!r}")
    return f'"{name}"'


def build_page_query(table: str, columns: Sequence[str]) -> str:
    """
    Build the paginated select for one table.

    Parameters: $1 start, $2 end, $3 limit, $4 offset.
    """
    if not columns:
        raise ValueError("At least one column is required")
    column_list = ", ".join(validate_identifier(column) for column in columns)
    return (
        f"SELECT {column_list} FROM {validate_identifier(table)} "
        f"WHERE created_at >= $1 AND created_at <= $2 "
        f"ORDER BY created_at DESC "
        f"LIMIT $3 OFFSET $4"
    )


# =============================================================================
# Timestamp Reconciliation
# =============================================================================


def _coerce_timestamp(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        return value
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return None
    return None


def _align(moment: datetime, reference: datetime) -> datetime:
    """Make `moment` comparable with `reference` when only one is tz-aware."""
    if moment.tzinfo is not None and reference.tzinfo is None:
        return moment.astimezone().replace(tzinfo=None)
    if moment.tzinfo is None and reference.tzinfo is not None:
        return moment.replace(tzinfo=reference.tzinfo)
    return moment


def within_range(moment: datetime, date_range: DateRange) -> bool:
    """Inclusive range check tolerant of naive/aware mismatches."""
    start = date_range.start
    end = date_range.end
    return _align(start, moment) <= moment <= _align(end, moment)


def refilter_rows(
    rows: Iterable[Mapping[str, Any]],
    date_range: DateRange,
    table: str = "",
) -> List[Dict[str, Any]]:
    """
    Keep only rows whose created_at falls inside the range.

    Rows with a missing or unparseable created_at are skipped and logged.
    """
    kept: List[Dict[str, Any]] = []
    skipped = 0
    for row in rows:
        record = dict(row)
        moment = _coerce_timestamp(record.get("created_at"))
        if moment is None:
            skipped += 1
            continue
        if within_range(moment, date_range):
            record["created_at"] = moment
            kept.append(record)

    if skipped:
        logger.warning(f"Skipped {skipped} rows from {table or 'source'} with unparseable created_at")
    return kept


# =============================================================================
# Pagination
# =============================================================================


async def fetch_all_records(
    pool: asyncpg.Pool,
    table: str,
    columns: Sequence[str],
    date_range: DateRange,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> List[Dict[str, Any]]:
    """
    Fetch every row of `table` inside `date_range`.

    Pages are requested newest first until a page shorter than `page_size`
    comes back. The result is re-filtered client-side to [start, end]
    inclusive, so a source that filters loosely (timezone drift, missing
    WHERE support) still yields an exact window.

    Args:
        pool: asyncpg pool (anything exposing `await pool.fetch(query, *args)`)
        table: Source table name
        columns: Columns to select; must include created_at
        date_range: Inclusive reporting window
        page_size: Rows per page

    Returns:
        Row dicts, newest first, with created_at parsed to datetime.

    Raises:
        ValueError: If the table or a column is not a valid identifier.
        RecordFetchError: If the database fails while paging.
    """
    if page_size < 1:
        raise ValueError("page_size must be positive")

    query = build_page_query(table, columns)
    rows: List[Mapping[str, Any]] = []
    offset = 0
    pages = 0

    try:
        while True:
            batch = await pool.fetch(query, date_range.start, date_range.end, page_size, offset)
            batch = list(batch or [])
            rows.extend(batch)
            pages += 1
            if len(batch) < page_size:
                break
            offset += page_size
    except _FETCH_ERRORS as e:
        logger.error(f"Record fetch failed for {table} at offset {offset}: {e}")
        raise RecordFetchError(table, str(e)) from e

    filtered = refilter_rows(rows, date_range, table)
    logger.info(
        f"Fetched {len(rows)} rows from {table} in {pages} page(s); "
        f"{len(filtered)} inside range"
    )
    return filtered


# =============================================================================
# Row Parsing
# =============================================================================


def parse_call_rows(rows: Iterable[Mapping[str, Any]]) -> List[RawCallRecord]:
    """Validate call rows, skipping (and logging) rows that cannot be parsed."""
    records: List[RawCallRecord] = []
    for row in rows:
        try:
            records.append(RawCallRecord.model_validate(dict(row)))
        except ValidationError as e:
            logger.warning(f"Skipping call row {row.get('id')!r}: {e.error_count()} validation error(s)")
    return records


def parse_ticket_rows(rows: Iterable[Mapping[str, Any]]) -> List[RawTicketRecord]:
    """Validate ticket rows, skipping (and logging) rows that cannot be parsed."""
    records: List[RawTicketRecord] = []
    for row in rows:
        try:
            records.append(RawTicketRecord.model_validate(dict(row)))
        except ValidationError as e:
            logger.warning(f"Skipping ticket row {row.get('id')!r}: {e.error_count()} validation error(s)")
    return records


# =============================================================================
# Period Fetch
# =============================================================================


async def fetch_call_records(
    pool: asyncpg.Pool,
    profile: TenantProfile,
    date_range: DateRange,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> List[RawCallRecord]:
    rows = await fetch_all_records(pool, profile.callsTable, profile.callColumns, date_range, page_size)
    return parse_call_rows(rows)


async def fetch_ticket_records(
    pool: asyncpg.Pool,
    profile: TenantProfile,
    date_range: DateRange,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> List[RawTicketRecord]:
    rows = await fetch_all_records(pool, profile.ticketsTable, profile.ticketColumns, date_range, page_size)
    return parse_ticket_rows(rows)


async def fetch_period_records(
    pool: asyncpg.Pool,
    profile: TenantProfile,
    current: DateRange,
    previous: DateRange,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> PeriodRecords:
    """
    Fetch current and previous calls and tickets concurrently.

    The first failure propagates; the caller never sees a partially filled
    PeriodRecords.
    """
    current_calls, current_tickets, previous_calls, previous_tickets = await asyncio.gather(
        fetch_call_records(pool, profile, current, page_size),
        fetch_ticket_records(pool, profile, current, page_size),
        fetch_call_records(pool, profile, previous, page_size),
        fetch_ticket_records(pool, profile, previous, page_size),
    )
    return PeriodRecords(
        current_calls=current_calls,
        current_tickets=current_tickets,
        previous_calls=previous_calls,
        previous_tickets=previous_tickets,
    )
