"""Log search service: one search page and one PIT release per call."""

import logging
import time
from typing import Any

from fulltext_gateway.core.app_exceptions import BadRequestError
from fulltext_gateway.core.config import Settings
from fulltext_gateway.schemas.fulltext import SearchRequest, SearchResponse
from fulltext_gateway.search.aggregations import attach_aggregations
from fulltext_gateway.search.engine import SearchEngine
from fulltext_gateway.search.pagination import PaginationManager
from fulltext_gateway.search.query_composer import compose_query
from fulltext_gateway.search.request_normalizer import (
    NormalizedSearchRequest,
    normalize_search_request,
)
from fulltext_gateway.search.rescore import attach_rescore
from fulltext_gateway.search.response_projector import project_response

logger = logging.getLogger(__name__)


def build_search_body(request: NormalizedSearchRequest, config: Settings) -> dict[str, Any]:
    """Compose query, rescore and aggregation stages (no pagination yet)."""
    body = compose_query(request, config)
    attach_rescore(body, request, config)
    attach_aggregations(body, request, config)
    return body


def search_logs(
    engine: SearchEngine,
    raw_request: SearchRequest | None,
    config: Settings,
) -> SearchResponse:
    """
    Execute one page of a log search.

    Args:
        engine: Shared engine adapter
        raw_request: Request body as received (None means all defaults)
        config: Settings with search defaults and scoring parameters

    Returns:
        Projected page with the current PIT and the next cursor.

    Raises:
        UpstreamError: The engine rejected or failed the call. Nothing is
            retried; the caller re-issues the request.
    """
    start = time.perf_counter()
    request = normalize_search_request(raw_request, config)
    pages = PaginationManager(engine, index=config.LOG_INDEX_PATTERN)

    body = build_search_body(request, config)
    pit = pages.acquire(request)
    PaginationManager.apply(body, pit, request.cursor)

    # Until the result is built the caller has no way to learn a fresh PIT id
    try:
        response = engine.search(body)
        pit = PaginationManager.advance(pit, response)
        result = project_response(response, pit, request)
    except Exception:
        pages.abandon(pit)
        raise

    logger.info(
        "Log search completed",
        extra={
            "total": result.total,
            "returned": len(result.hits),
            "size": request.size,
            "first_page": request.cursor is None,
            "latency_ms": int((time.perf_counter() - start) * 1000),
        },
    )
    return result


def close_point_in_time(engine: SearchEngine, pit_id: str | None, config: Settings) -> None:
    """
    Release a PIT on the caller's behalf.

    Independent of any earlier search outcome: a failed search never blocks
    closing its PIT.

    Raises:
        BadRequestError: ``pit_id`` is missing (the engine is not contacted).
        UpstreamError: The engine refused, e.g. unknown or already-closed id.
    """
    if not pit_id:
        raise BadRequestError("Missing PIT id")
    PaginationManager(engine, index=config.LOG_INDEX_PATTERN).release(pit_id)
