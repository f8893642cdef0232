"""Error handling and consistent error response format."""

import logging
import uuid
from typing import Any

from fastapi import HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from fulltext_gateway.core.app_exceptions import AppError
from fulltext_gateway.core.config import settings

logger = logging.getLogger(__name__)


class ErrorResponse(BaseModel):
    """Error envelope shared by every endpoint.

    Format: {ok: false, error, request_id}
    ``error`` is either a message string or the engine's structured error.
    """

    ok: bool = False
    error: Any
    request_id: str | None = None


def get_request_id(request: Request) -> str:
    """Get request ID from request state or generate new one."""
    if hasattr(request.state, "request_id"):
        return request.state.request_id
    return str(uuid.uuid4())


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle request validation errors (422)."""
    request_id = get_request_id(request)

    details: list[dict[str, Any]] = []
    for error in exc.errors():
        details.append(
            {
                "field": ".".join(str(loc) for loc in error.get("loc", [])),
                "issue": error.get("msg", "Validation error"),
                "type": error.get("type", "validation_error"),
            }
        )

    logger.info("Request validation failed", extra={"request_id": request_id, "errors": details})

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=ErrorResponse(
            error={"message": "Invalid request data", "details": details},
            request_id=request_id,
        ).model_dump(),
    )


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handle HTTP exceptions, including AppError subclasses."""
    request_id = get_request_id(request)

    if isinstance(exc, AppError):
        error = exc.error
    elif isinstance(exc.detail, dict) and "error" in exc.detail:
        error = exc.detail["error"]
    else:
        error = exc.detail if isinstance(exc.detail, str) else str(exc.detail)

    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(error=error, request_id=request_id).model_dump(),
        headers=getattr(exc, "headers", None),
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unhandled exceptions (500)."""
    request_id = get_request_id(request)

    logger.error(
        "Unhandled exception",
        extra={"request_id": request_id, "path": request.url.path},
        exc_info=exc,
    )

    # Internal details stay out of production responses
    if settings.ENV == "prod":
        error: Any = "Internal server error"
    else:
        error = {"message": str(exc) or "Internal server error", "type": type(exc).__name__}

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponse(error=error, request_id=request_id).model_dump(),
    )
