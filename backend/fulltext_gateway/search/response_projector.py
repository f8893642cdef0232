"""Projection of engine results into the gateway response shape."""

from typing import Any

from fulltext_gateway.schemas.fulltext import (
    Facets,
    NormalizedHit,
    PointInTimeOut,
    SearchResponse,
)
from fulltext_gateway.search.aggregations import TIMELINE_AGGREGATION
from fulltext_gateway.search.engine import EngineResponse
from fulltext_gateway.search.pagination import PointInTime
from fulltext_gateway.search.request_normalizer import NormalizedSearchRequest


def _error_code(source: dict[str, Any]) -> Any:
    # Documents may store error.code nested or as a dotted key
    error = source.get("error")
    if isinstance(error, dict):
        return error.get("code")
    return source.get("error.code")


def project_hit(hit: dict[str, Any]) -> NormalizedHit:
    """Map one engine hit onto the whitelisted hit fields."""
    source = hit.get("_source") or {}
    fragments = (hit.get("highlight") or {}).get("message") or []
    return NormalizedHit(
        id=hit["_id"],
        sort=hit.get("sort"),
        timestamp=source.get("@timestamp"),
        level=source.get("level"),
        service=source.get("service"),
        error_code=_error_code(source),
        host=source.get("host"),
        path=source.get("path"),
        message=source.get("message"),
        snippet=fragments[0] if fragments else None,
        score=hit.get("_score"),
    )


def _buckets(aggregations: dict[str, Any], name: str) -> list[dict[str, Any]]:
    return list((aggregations.get(name) or {}).get("buckets") or [])


def project_facets(aggregations: dict[str, Any] | None) -> Facets | None:
    """Facet buckets, or None when the engine returned none of them."""
    if not aggregations:
        return None
    if not any(name in aggregations for name in ("by_service", "by_level", "by_error_code")):
        return None
    return Facets(
        services=_buckets(aggregations, "by_service"),
        levels=_buckets(aggregations, "by_level"),
        error_codes=_buckets(aggregations, "by_error_code"),
    )


def project_timeline(aggregations: dict[str, Any] | None) -> list[dict[str, Any]] | None:
    """Histogram buckets, or None when the engine returned no timeline."""
    if not aggregations or TIMELINE_AGGREGATION not in aggregations:
        return None
    return _buckets(aggregations, TIMELINE_AGGREGATION)


def next_cursor(hits: list[NormalizedHit]) -> list[Any] | None:
    """Sort values of the last hit; None for an empty page."""
    if not hits:
        return None
    return hits[-1].sort


def project_response(
    response: EngineResponse,
    pit: PointInTime,
    request: NormalizedSearchRequest,
) -> SearchResponse:
    """
    Build the client-facing result for one page.

    ``pit`` must already reflect any rotation reported by the engine.
    Facets and timeline are only included when they were requested and
    the engine produced them.
    """
    hits = [project_hit(hit) for hit in response.hits]
    return SearchResponse(
        ok=True,
        total=response.total,
        pit=PointInTimeOut(id=pit.id, keep_alive=pit.keep_alive),
        hits=hits,
        facets=project_facets(response.aggregations) if request.include_facets else None,
        timeline=project_timeline(response.aggregations) if request.include_timeline else None,
        next_cursor=next_cursor(hits),
    )
