"""Prometheus metrics middleware and search-domain counters."""

import time
from collections.abc import Callable

from fastapi import Request, Response
from prometheus_client import Counter, Histogram
from starlette.middleware.base import BaseHTTPMiddleware

# HTTP request counter: http_requests_total{method, route, status}
http_requests_total = Counter(
    "http_requests_total",
    "Total number of HTTP requests",
    ["method", "route", "status"],
)

# HTTP request duration histogram: http_request_duration_seconds{method, route}
http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "route"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
)

# Point-in-time lifecycle: fulltext_pit_operations_total{operation}
pit_operations_total = Counter(
    "fulltext_pit_operations_total",
    "Point-in-time handles opened and closed by the gateway",
    ["operation"],
)

# Failed engine calls: fulltext_engine_errors_total{operation}
engine_errors_total = Counter(
    "fulltext_engine_errors_total",
    "Search engine calls that failed",
    ["operation"],
)


class PrometheusMetricsMiddleware(BaseHTTPMiddleware):
    """Middleware to collect Prometheus metrics for HTTP requests."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Process request and collect metrics."""
        start_time = time.perf_counter()

        response = await call_next(request)

        # Route template when matched, raw path otherwise
        route = request.url.path
        if request.scope.get("route"):
            route = getattr(request.scope["route"], "path", route)

        duration = time.perf_counter() - start_time
        http_requests_total.labels(
            method=request.method, route=route, status=str(response.status_code)
        ).inc()
        http_request_duration_seconds.labels(method=request.method, route=route).observe(duration)

        return response
