"""Point-in-time lifecycle and search_after cursor threading.

A paginated session moves through three states:

    FRESH  -- no PIT id supplied; one is opened for this call
    ACTIVE -- a PIT id is held; the engine may rotate it on every page
    CLOSED -- the caller released it via close-pit

Pages are always addressed with PIT + ``search_after``. Offset pagination
(``from``) is never emitted: under concurrent writes it skips or repeats rows.
"""

import enum
import logging
from dataclasses import dataclass, replace
from typing import Any

from fulltext_gateway.core.app_exceptions import UpstreamError
from fulltext_gateway.search.engine import EngineResponse, SearchEngine
from fulltext_gateway.search.request_normalizer import NormalizedSearchRequest

logger = logging.getLogger(__name__)


class PitState(str, enum.Enum):
    FRESH = "fresh"
    ACTIVE = "active"
    CLOSED = "closed"


@dataclass(frozen=True)
class PointInTime:
    """The current PIT for one call."""

    id: str
    keep_alive: str
    opened_here: bool = False


def pit_state(request: NormalizedSearchRequest) -> PitState:
    """State the caller is in when the request arrives."""
    return PitState.ACTIVE if request.pit_id else PitState.FRESH


class PaginationManager:
    """Owns PIT acquisition, rotation and release for search calls."""

    def __init__(self, engine: SearchEngine, index: str):
        self.engine = engine
        self.index = index

    def acquire(self, request: NormalizedSearchRequest) -> PointInTime:
        """Reuse the caller's PIT or open a new one (FRESH -> ACTIVE)."""
        if pit_state(request) is PitState.ACTIVE:
            return PointInTime(id=request.pit_id, keep_alive=request.keep_alive)

        pit_id = self.engine.open_point_in_time(index=self.index, keep_alive=request.keep_alive)
        logger.info("Opened point-in-time", extra={"index": self.index, "keep_alive": request.keep_alive})
        return PointInTime(id=pit_id, keep_alive=request.keep_alive, opened_here=True)

    @staticmethod
    def apply(
        body: dict[str, Any], pit: PointInTime, cursor: tuple[Any, ...] | None
    ) -> dict[str, Any]:
        """Attach ``pit`` and, for follow-up pages, ``search_after`` (in place)."""
        body.pop("from", None)
        body["pit"] = {"id": pit.id, "keep_alive": pit.keep_alive}
        if cursor:
            body["search_after"] = list(cursor)
        return body

    @staticmethod
    def advance(pit: PointInTime, response: EngineResponse) -> PointInTime:
        """Thread a rotated PIT id from the engine response (ACTIVE -> ACTIVE)."""
        if response.pit_id and response.pit_id != pit.id:
            logger.debug("Point-in-time id rotated by engine")
            return replace(pit, id=response.pit_id)
        return pit

    def abandon(self, pit: PointInTime) -> None:
        """
        Best-effort release of a PIT opened by a call that then failed.

        The caller never received its id, so nobody else could close it.
        Failures are logged; the original error is what propagates.
        """
        if not pit.opened_here:
            return
        try:
            self.engine.close_point_in_time(pit.id)
        except UpstreamError as e:
            logger.warning(f"Failed to release abandoned point-in-time: {e}")

    def release(self, pit_id: str) -> PitState:
        """Close a PIT on the caller's request (ACTIVE -> CLOSED)."""
        self.engine.close_point_in_time(pit_id)
        logger.info("Closed point-in-time")
        return PitState.CLOSED
