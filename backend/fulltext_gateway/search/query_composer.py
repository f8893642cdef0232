"""Query builder for log search."""

import re
from typing import Any

from fulltext_gateway.core.config import Settings
from fulltext_gateway.search.request_normalizer import NormalizedSearchRequest

TIMESTAMP_FIELD = "@timestamp"

# Structured leg: message dominates, the rest break ties
LEXICAL_FIELDS = ["message^4", "service", "path", "error.code", "host"]
FUZZY_FIELDS = ["message^3", "path", "service", "host"]

SOURCE_INCLUDES = ["@timestamp", "level", "service", "error.code", "host", "path", "message"]

# (@timestamp desc, _shard_doc desc) is a total order inside one PIT
SORT = [{TIMESTAMP_FIELD: "desc"}, {"_shard_doc": "desc"}]

_UNSAFE_CHARS = re.compile(r'[^\w\s"]')


def sanitize_query(q: str) -> str:
    """Replace operator characters with spaces for the fuzzy leg."""
    return _UNSAFE_CHARS.sub(" ", str(q))


def build_lexical_legs(q: str) -> list[dict[str, Any]]:
    """
    Build the two match legs.

    Both are placed in ``bool.must`` so a document has to satisfy the
    operator-aware leg *and* the typo-tolerant leg.
    """
    return [
        {
            "simple_query_string": {
                "query": q,
                "fields": LEXICAL_FIELDS,
                "default_operator": "and",
            }
        },
        {
            "multi_match": {
                "query": sanitize_query(q),
                "fields": FUZZY_FIELDS,
                "fuzziness": "AUTO",
                "prefix_length": 2,
            }
        },
    ]


def build_filters(request: NormalizedSearchRequest) -> list[dict[str, Any]]:
    """Build the non-scoring filter clauses."""
    filter_clauses: list[dict[str, Any]] = [
        {"range": {TIMESTAMP_FIELD: {"gte": request.time_gte, "lte": request.time_lte}}}
    ]

    if request.levels:
        filter_clauses.append({"terms": {"level": list(request.levels)}})

    if request.services:
        filter_clauses.append({"terms": {"service": list(request.services)}})

    return filter_clauses


def build_decay_function(config: Settings) -> dict[str, Any]:
    """Exponential recency decay anchored at now."""
    return {
        "exp": {
            TIMESTAMP_FIELD: {
                "origin": "now",
                "scale": config.DECAY_SCALE,
                "decay": config.DECAY_FACTOR,
            }
        }
    }


def build_highlight() -> dict[str, Any]:
    """One short message fragment per hit."""
    return {"fields": {"message": {"fragment_size": 180, "number_of_fragments": 1}}}


def compose_query(request: NormalizedSearchRequest, config: Settings) -> dict[str, Any]:
    """
    Build the base search body: scored query, sort, and field whitelist.

    Args:
        request: Normalized search request
        config: Settings carrying the decay parameters

    Returns:
        Elasticsearch search body without pagination, rescore or aggregations.
    """
    body: dict[str, Any] = {
        "size": request.size,
        "track_total_hits": True,
        "track_scores": True,
        "query": {
            "function_score": {
                "query": {
                    "bool": {
                        "must": build_lexical_legs(request.q),
                        "filter": build_filters(request),
                    }
                },
                "functions": [build_decay_function(config)],
                "score_mode": "multiply",
                "boost_mode": "multiply",
            }
        },
        "sort": SORT,
        "_source": {"includes": SOURCE_INCLUDES},
    }

    if request.highlight:
        body["highlight"] = build_highlight()

    return body
