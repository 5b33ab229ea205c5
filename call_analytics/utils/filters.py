"""
Keyword filters applied to raw ticket labels.

Some ticket types are artifacts of calls that were hung up or never finished
rather than real incidents. Those tickets are dropped from every ticket-derived
statistic. The keyword list differs slightly between tenants (spellings,
Catalan vs Spanish), so it is configuration: the default below is only used
when no tenant override is provided.
"""

from typing import Iterable, Optional, Sequence

DEFAULT_EXCLUDED_TICKET_KEYWORDS: Sequence[str] = (
    "llamada colgada",
    "llamada no final",
    "sin finalizar",
    "trucada no final",
    "trucada penjada",
    "no final",
)


def contains_any(text: Optional[str], keywords: Iterable[str]) -> bool:
    """Case-insensitive substring match against any keyword."""
    lowered = (text or "").lower()
    return any(keyword.lower() in lowered for keyword in keywords)


def should_exclude_type(
    ticket_type: Optional[str],
    keywords: Optional[Iterable[str]] = None,
) -> bool:
    """True when the ticket type marks an unfinished/hung-up call."""
    if keywords is None:
        keywords = DEFAULT_EXCLUDED_TICKET_KEYWORDS
    return contains_any(ticket_type, keywords)
