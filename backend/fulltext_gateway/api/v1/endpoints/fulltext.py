"""Fulltext log search endpoints."""

from typing import Annotated

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse

from fulltext_gateway.core.config import Settings
from fulltext_gateway.core.dependencies import get_search_engine, get_settings
from fulltext_gateway.schemas.fulltext import (
    ClosePitRequest,
    ClosePitResponse,
    SearchRequest,
    SearchResponse,
)
from fulltext_gateway.search.engine import SearchEngine
from fulltext_gateway.search.fulltext_service import close_point_in_time, search_logs

router = APIRouter()

# Plain ``def`` handlers: the engine client blocks, so FastAPI runs them
# in its threadpool.


@router.post("/search", response_model=SearchResponse)
def search(
    payload: Annotated[SearchRequest | None, Body()] = None,
    engine: SearchEngine = Depends(get_search_engine),
    config: Settings = Depends(get_settings),
) -> JSONResponse:
    """
    Search logs with PIT + search_after pagination.

    First page: omit ``pit`` and ``cursor``; a PIT is opened. Next pages:
    send back ``pit`` and ``nextCursor`` as ``cursor``. Release the PIT with
    ``/close-pit`` when done.
    """
    result = search_logs(engine, payload, config)
    return JSONResponse(content=result.to_payload())


@router.post("/close-pit", response_model=ClosePitResponse)
def close_pit(
    payload: Annotated[ClosePitRequest | None, Body()] = None,
    engine: SearchEngine = Depends(get_search_engine),
    config: Settings = Depends(get_settings),
) -> ClosePitResponse:
    """Close a PIT when the client is done paginating."""
    close_point_in_time(engine, payload.id if payload else None, config)
    return ClosePitResponse()
