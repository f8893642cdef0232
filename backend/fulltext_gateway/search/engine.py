"""Boundary adapter between the gateway and the Elasticsearch client.

Every engine call goes through :class:`SearchEngine`. It is the only place
that knows the client's response envelope and exception types: responses are
normalized into :class:`EngineResponse` once, and failures are logged in full
and re-raised as :class:`UpstreamError`.
"""

import logging
from dataclasses import dataclass, field
from typing import Any

from elasticsearch import ApiError, Elasticsearch
from elasticsearch.exceptions import TransportError

from fulltext_gateway.core.app_exceptions import UpstreamError
from fulltext_gateway.middleware.prometheus_metrics import (
    engine_errors_total,
    pit_operations_total,
)
from fulltext_gateway.search.es_client import ping as es_ping

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EngineResponse:
    """Search response with the engine envelope stripped."""

    total: int
    hits: list[dict[str, Any]] = field(default_factory=list)
    aggregations: dict[str, Any] | None = None
    pit_id: str | None = None

    @classmethod
    def from_raw(cls, raw: Any) -> "EngineResponse":
        """Normalize a client response (ApiResponse or plain dict)."""
        body = getattr(raw, "body", raw)
        hits_section = body.get("hits") or {}
        total = hits_section.get("total", 0)
        if isinstance(total, dict):
            total = total.get("value", 0)
        return cls(
            total=int(total or 0),
            hits=list(hits_section.get("hits") or []),
            aggregations=body.get("aggregations"),
            pit_id=body.get("pit_id"),
        )


def _describe_failure(exc: Exception, fallback: str) -> tuple[int | None, Any]:
    """Extract (status, client-facing error) from a client exception."""
    if isinstance(exc, ApiError):
        body = exc.body if isinstance(exc.body, dict) else {}
        return exc.meta.status, body.get("error") or fallback
    return None, fallback


class SearchEngine:
    """Thin, stateless wrapper around a shared Elasticsearch client."""

    def __init__(self, client: Elasticsearch):
        self.client = client

    def _fail(self, operation: str, exc: Exception, fallback: str) -> UpstreamError:
        status_code, error = _describe_failure(exc, fallback)
        detail = exc.body if isinstance(exc, ApiError) else exc
        logger.error(
            f"[fulltext/{operation}] error: {detail}",
            extra={"operation": operation, "upstream_status": status_code},
            exc_info=exc,
        )
        engine_errors_total.labels(operation=operation).inc()
        return UpstreamError(error=error, status_code=status_code)

    def open_point_in_time(self, index: str, keep_alive: str) -> str:
        """Open a PIT on ``index`` and return its id."""
        try:
            response = self.client.open_point_in_time(index=index, keep_alive=keep_alive)
        except (ApiError, TransportError) as e:
            raise self._fail("open-pit", e, "Open PIT error") from e
        pit_operations_total.labels(operation="open").inc()
        return getattr(response, "body", response)["id"]

    def close_point_in_time(self, pit_id: str) -> None:
        """Release a PIT. Unknown or already-closed ids surface as UpstreamError."""
        try:
            self.client.close_point_in_time(id=pit_id)
        except (ApiError, TransportError) as e:
            raise self._fail("close-pit", e, "Close PIT error") from e
        pit_operations_total.labels(operation="close").inc()

    def search(self, body: dict[str, Any]) -> EngineResponse:
        """Run a composed search body (PIT searches carry no index)."""
        try:
            response = self.client.search(body=body)
        except (ApiError, TransportError) as e:
            raise self._fail("search", e, "Search error") from e
        return EngineResponse.from_raw(response)

    def ping(self) -> bool:
        """Report engine reachability without raising."""
        return es_ping(self.client)
