"""Facet and timeline aggregations."""

from typing import Any

from fulltext_gateway.core.config import Settings
from fulltext_gateway.search.request_normalizer import NormalizedSearchRequest

# aggregation name -> (field, max buckets)
FACET_AGGREGATIONS: dict[str, tuple[str, int]] = {
    "by_service": ("service", 25),
    "by_level": ("level", 8),
    "by_error_code": ("error.code", 20),
}

TIMELINE_AGGREGATION = "timeline"


def build_facet_aggregations() -> dict[str, Any]:
    """Top-N term buckets per facet field."""
    return {
        name: {"terms": {"field": field, "size": size}}
        for name, (field, size) in FACET_AGGREGATIONS.items()
    }


def build_timeline_aggregation(config: Settings) -> dict[str, Any]:
    """Fixed-width histogram over the timestamp field."""
    return {
        TIMELINE_AGGREGATION: {
            "date_histogram": {
                "field": "@timestamp",
                "fixed_interval": config.TIMELINE_INTERVAL,
            }
        }
    }


def build_aggregations(
    request: NormalizedSearchRequest, config: Settings
) -> dict[str, Any] | None:
    """Return the ``aggs`` section, or None when nothing was requested."""
    aggs: dict[str, Any] = {}
    if request.include_facets:
        aggs.update(build_facet_aggregations())
    if request.include_timeline:
        aggs.update(build_timeline_aggregation(config))
    return aggs or None


def attach_aggregations(
    body: dict[str, Any], request: NormalizedSearchRequest, config: Settings
) -> dict[str, Any]:
    """Add the aggregation section to a composed body (in place)."""
    aggs = build_aggregations(request, config)
    if aggs:
        body["aggs"] = aggs
    return body
