"""Phrase-proximity rescoring over the top of the result window."""

from typing import Any

from fulltext_gateway.core.config import Settings
from fulltext_gateway.search.query_composer import sanitize_query
from fulltext_gateway.search.request_normalizer import NormalizedSearchRequest

MAX_WINDOW = 1000
PHRASE_SLOP = 1
PHRASE_BOOST = 6
QUERY_WEIGHT = 1
RESCORE_QUERY_WEIGHT = 2


def build_rescore(request: NormalizedSearchRequest, config: Settings) -> dict[str, Any]:
    """Rerank the top ``min(size, 1000)`` hits by message phrase proximity."""
    phrase = config.SEARCH_RESCORE_PHRASE or sanitize_query(request.q).strip()
    return {
        "window_size": min(MAX_WINDOW, request.size),
        "query": {
            "rescore_query": {
                "match_phrase": {
                    "message": {
                        "query": phrase,
                        "slop": PHRASE_SLOP,
                        "boost": PHRASE_BOOST,
                    }
                }
            },
            "query_weight": QUERY_WEIGHT,
            "rescore_query_weight": RESCORE_QUERY_WEIGHT,
        },
    }


def attach_rescore(
    body: dict[str, Any], request: NormalizedSearchRequest, config: Settings
) -> dict[str, Any]:
    """Add the rescore stage to a composed body (in place)."""
    if config.SEARCH_RESCORE_ENABLED:
        body["rescore"] = build_rescore(request, config)
    return body
