"""Request id assignment and per-request access logging."""

import time
import uuid
from collections.abc import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from fulltext_gateway.core.logging import get_logger, request_id_var

REQUEST_ID_HEADER = "X-Request-ID"

logger = get_logger(__name__)


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Tag each call with a request id.

    An incoming ``X-Request-ID`` is reused; otherwise a UUID is generated.
    The id is exposed on ``request.state`` (error envelopes), in the logging
    context (every record logged while serving the call) and on the response.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.state.request_id = request_id
        token = request_id_var.set(request_id)
        route = {"method": request.method, "path": request.url.path}

        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "Request failed",
                extra={**route, "status_code": 500, "latency_ms": _elapsed_ms(start), "error": str(e)},
                exc_info=True,
            )
            raise
        finally:
            request_id_var.reset(token)

        response.headers[REQUEST_ID_HEADER] = request_id
        logger.info(
            "Request completed",
            extra={
                **route,
                "request_id": request_id,
                "status_code": response.status_code,
                "latency_ms": _elapsed_ms(start),
            },
        )
        return response
