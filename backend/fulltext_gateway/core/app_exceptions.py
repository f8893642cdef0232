"""Application-specific exceptions for consistent error handling."""

from typing import Any

from fastapi import HTTPException, status


class AppError(HTTPException):
    """Gateway error rendered as ``{ok: false, error}``."""

    def __init__(self, status_code: int, error: Any):
        """Initialize application error."""
        super().__init__(status_code=status_code, detail={"ok": False, "error": error})
        self.error = error


class BadRequestError(AppError):
    """Client sent a structurally incomplete request."""

    def __init__(self, error: Any):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, error=error)


class UpstreamError(AppError):
    """The search engine rejected the call or could not be reached.

    ``status_code`` is the engine-reported HTTP status when one is available,
    otherwise 500. ``error`` is the engine's structured error object when
    present, otherwise a generic message.
    """

    def __init__(self, error: Any, status_code: int | None = None):
        super().__init__(
            status_code=status_code or status.HTTP_500_INTERNAL_SERVER_ERROR,
            error=error,
        )

