"""API v1 router - includes all v1 endpoints."""

from fastapi import APIRouter

from fulltext_gateway.api.v1.endpoints import fulltext, health

api_router = APIRouter()

api_router.include_router(health.router, prefix="", tags=["Health"])
api_router.include_router(fulltext.router, prefix="", tags=["Fulltext"])
