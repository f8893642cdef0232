"""Validation and defaulting of incoming search requests."""

import logging
import math
from dataclasses import dataclass
from typing import Any

from fulltext_gateway.core.config import Settings
from fulltext_gateway.schemas.fulltext import SearchRequest

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NormalizedSearchRequest:
    """Search request with every default resolved."""

    q: str
    services: tuple[str, ...]
    levels: tuple[str, ...]
    time_gte: Any
    time_lte: Any
    size: int
    pit_id: str | None
    keep_alive: str
    cursor: tuple[Any, ...] | None
    highlight: bool = True
    include_timeline: bool = True
    include_facets: bool = True


def as_unique_list(value: str | list[str] | tuple[str, ...] | None) -> list[str]:
    """Accept a scalar or a sequence; drop empties and duplicates, keep order."""
    if value is None:
        return []
    if isinstance(value, str):
        value = [value]
    seen: list[str] = []
    for item in value:
        if item and item not in seen:
            seen.append(item)
    return seen


def clamp_size(size: Any, default: int, maximum: int) -> int:
    """
    Resolve the effective page size.

    Absent, zero, or non-numeric sizes fall back to ``default``; numeric
    strings are accepted. The result always lies in ``[1, maximum]``.
    """
    if isinstance(size, bool) or size is None:
        return default
    try:
        number = float(size)
    except (TypeError, ValueError):
        return default
    if math.isnan(number) or number == 0:
        return default
    if math.isinf(number):
        return maximum if number > 0 else 1
    return max(1, min(int(number), maximum))


def normalize_search_request(
    request: SearchRequest | None, config: Settings
) -> NormalizedSearchRequest:
    """Apply defaults and coercions to a raw search request."""
    request = request or SearchRequest()

    q = request.q if request.q and request.q.strip() else config.SEARCH_DEFAULT_QUERY

    time_gte = request.time.gte if request.time and request.time.gte else None
    time_lte = request.time.lte if request.time and request.time.lte else None

    pit_id = request.pit.id if request.pit and request.pit.id else None
    keep_alive = (
        request.pit.keep_alive
        if request.pit and request.pit.keep_alive
        else config.PIT_DEFAULT_KEEP_ALIVE
    )

    cursor = tuple(request.cursor) if request.cursor else None
    if cursor and pit_id is None:
        # A cursor is only valid against the PIT that produced it
        logger.warning("Ignoring search_after cursor supplied without a PIT id")
        cursor = None

    return NormalizedSearchRequest(
        q=q,
        services=tuple(as_unique_list(request.services)),
        levels=tuple(as_unique_list(request.levels)),
        time_gte=time_gte or config.SEARCH_DEFAULT_TIME_GTE,
        time_lte=time_lte or config.SEARCH_DEFAULT_TIME_LTE,
        size=clamp_size(request.size, config.SEARCH_DEFAULT_SIZE, config.SEARCH_MAX_SIZE),
        pit_id=pit_id,
        keep_alive=keep_alive,
        cursor=cursor,
        highlight=request.highlight,
        include_timeline=request.include_timeline,
        include_facets=request.include_facets,
    )
