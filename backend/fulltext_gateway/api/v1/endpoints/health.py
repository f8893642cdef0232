"""Health and readiness endpoints."""

from typing import Literal

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from fulltext_gateway.core.config import Settings
from fulltext_gateway.core.dependencies import get_search_engine, get_settings
from fulltext_gateway.core.errors import get_request_id
from fulltext_gateway.search.engine import SearchEngine

router = APIRouter(tags=["Health"])


class HealthResponse(BaseModel):
    """Health check response."""

    status: Literal["ok"] = "ok"


class ReadinessCheck(BaseModel):
    """Individual readiness check result."""

    status: Literal["ok", "down"]
    message: str | None = None


class ReadinessResponse(BaseModel):
    """Readiness check response."""

    status: Literal["ok", "down"]
    checks: dict[str, ReadinessCheck]
    request_id: str


@router.get(
    "/health",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    summary="Health check",
    description="Simple health check endpoint. Returns 200 if the API is running.",
)
async def health_check() -> HealthResponse:
    """Health check endpoint - just checks if the process is alive."""
    return HealthResponse(status="ok")


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    summary="Readiness check",
    description="Returns 200 when the search engine answers a ping, 503 otherwise.",
)
def readiness_check(
    request: Request,
    engine: SearchEngine = Depends(get_search_engine),
    config: Settings = Depends(get_settings),
) -> JSONResponse:
    """Readiness check endpoint - checks the search engine."""
    request_id = get_request_id(request)

    if engine.ping():
        check = ReadinessCheck(status="ok")
    else:
        check = ReadinessCheck(status="down", message=f"{config.ELASTICSEARCH_URL} unreachable")

    body = ReadinessResponse(
        status=check.status,
        checks={"elasticsearch": check},
        request_id=request_id,
    )
    return JSONResponse(
        status_code=status.HTTP_200_OK if check.status == "ok" else status.HTTP_503_SERVICE_UNAVAILABLE,
        content=body.model_dump(),
    )
