"""FastAPI application factory and main entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from fulltext_gateway.api.v1.router import api_router
from fulltext_gateway.common.request_id import RequestIDMiddleware
from fulltext_gateway.core.config import settings
from fulltext_gateway.core.errors import (
    general_exception_handler,
    http_exception_handler,
    validation_exception_handler,
)
from fulltext_gateway.core.logging import get_logger, setup_logging
from fulltext_gateway.middleware.prometheus_metrics import PrometheusMetricsMiddleware
from fulltext_gateway.search.engine import SearchEngine
from fulltext_gateway.search.es_client import create_es_client

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    setup_logging()
    # Tests may install their own engine before start-up
    owns_client = getattr(app.state, "search_engine", None) is None
    if owns_client:
        app.state.search_engine = SearchEngine(create_es_client(settings))
    logger.info(
        "Fulltext gateway started",
        extra={"elasticsearch_url": settings.ELASTICSEARCH_URL, "index": settings.LOG_INDEX_PATTERN},
    )
    yield
    # Shutdown
    if owns_client:
        app.state.search_engine.client.close()
        app.state.search_engine = None


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        description="Full-text log search over Elasticsearch with PIT pagination",
        openapi_url="/openapi.json" if settings.ENV != "prod" else None,
        docs_url="/docs" if settings.ENV != "prod" else None,
        redoc_url="/redoc" if settings.ENV != "prod" else None,
        lifespan=lifespan,
    )

    # Last added is outermost
    app.add_middleware(PrometheusMetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Add exception handlers
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    # Include API routers
    app.include_router(api_router, prefix=settings.API_PREFIX)

    @app.get("/", tags=["Root"])
    async def root():
        """Root endpoint - API information."""
        return {
            "message": settings.PROJECT_NAME,
            "version": settings.VERSION,
            "docs_url": "/docs" if settings.ENV != "prod" else None,
        }

    @app.get("/metrics", tags=["Root"], include_in_schema=False)
    async def metrics() -> Response:
        """Prometheus exposition."""
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    return app


# Create app instance
app = create_app()
