"""Pydantic schemas for the fulltext search endpoints."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class TimeRange(BaseModel):
    """Timestamp bounds. Values are passed to the engine untouched."""

    gte: Any = None
    lte: Any = None


class PitToken(BaseModel):
    """Point-in-time handle as sent by the client."""

    id: str | None = None
    keep_alive: str | None = None


class SearchRequest(BaseModel):
    """Raw search request body."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    q: str | None = Field(None, description="simple_query_string syntax")
    services: str | list[str] | None = None
    levels: str | list[str] | None = None
    time: TimeRange | None = None
    size: Any = Field(None, description="Page size, clamped to [1, 1000]")
    pit: PitToken | None = None
    cursor: list[Any] | None = Field(None, description="nextCursor of the previous page")
    highlight: bool = True
    include_timeline: bool = Field(True, alias="includeTimeline")
    include_facets: bool = Field(True, alias="includeFacets")


class PointInTimeOut(BaseModel):
    """Current PIT returned with every page."""

    id: str
    keep_alive: str


class NormalizedHit(BaseModel):
    """Single log line.

    Source fields are copied as stored, so ECS-style objects (``host.name``)
    and numeric levels pass through unchanged.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str
    sort: list[Any] | None = None
    timestamp: Any = None
    level: Any = None
    service: Any = None
    error_code: Any = Field(None, alias="errorCode")
    host: Any = None
    path: Any = None
    message: Any = None
    snippet: str | None = None
    score: float | None = None


class Facets(BaseModel):
    """Term buckets (``{key, doc_count}``) per facet field."""

    model_config = ConfigDict(populate_by_name=True)

    services: list[dict[str, Any]] = Field(default_factory=list)
    levels: list[dict[str, Any]] = Field(default_factory=list)
    error_codes: list[dict[str, Any]] = Field(default_factory=list, alias="errorCodes")


class SearchResponse(BaseModel):
    """Search response (stable contract)."""

    model_config = ConfigDict(populate_by_name=True)

    ok: bool = True
    total: int
    pit: PointInTimeOut
    hits: list[NormalizedHit]
    facets: Facets | None = None
    timeline: list[dict[str, Any]] | None = None
    next_cursor: list[Any] | None = Field(None, alias="nextCursor")

    def to_payload(self) -> dict[str, Any]:
        """Serialize, dropping the optional sections that were not produced."""
        payload = self.model_dump(by_alias=True, mode="json")
        for key in ("facets", "timeline"):
            if payload[key] is None:
                payload.pop(key)
        return payload


class ClosePitRequest(BaseModel):
    """Close-PIT request body."""

    id: str | None = None


class ClosePitResponse(BaseModel):
    """Close-PIT acknowledgement."""

    ok: bool = True
