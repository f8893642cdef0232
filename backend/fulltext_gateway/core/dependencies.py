"""FastAPI dependencies for the shared engine handle and settings."""

from fastapi import HTTPException, Request, status

from fulltext_gateway.core.config import Settings, settings
from fulltext_gateway.search.engine import SearchEngine


def get_settings() -> Settings:
    """Dependency returning the process settings."""
    return settings


def get_search_engine(request: Request) -> SearchEngine:
    """Dependency returning the engine adapter created at start-up."""
    engine = getattr(request.app.state, "search_engine", None)
    if engine is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Search engine not initialized",
        )
    return engine
