from __future__ import annotations

import time

from fastapi import Request
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest
from starlette.responses import Response

from src.app.settings import settings

REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "path", "status"],
)
REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "path"],
)
SEARCH_OUTCOMES = Counter(
    "search_requests_total",
    "Search pipeline calls by outcome",
    ["outcome"],
)
SEARCH_SOURCES = Histogram(
    "search_sources_count",
    "Chunks kept after reranking per search",
    buckets=(0, 1, 2, 5, 10, 15, 25, 50, 100),
)


async def metrics_middleware(request: Request, call_next):
    if not settings.metrics_enabled:
        return await call_next(request)
    path = request.url.path
    if path == "/metrics":
        return await call_next(request)
    start = time.monotonic()
    status = 500
    try:
        response = await call_next(request)
        status = response.status_code
        return response
    finally:
        duration = time.monotonic() - start
        REQUEST_COUNT.labels(request.method, path, str(status)).inc()
        REQUEST_LATENCY.labels(request.method, path).observe(duration)


def record_search(outcome: str, sources: int = 0) -> None:
    """Count a finished search and the number of sources it used."""
    if not settings.metrics_enabled:
        return
    SEARCH_OUTCOMES.labels(outcome).inc()
    if outcome == "ok":
        SEARCH_SOURCES.observe(sources)


def metrics_response() -> Response:
    if not settings.metrics_enabled:
        return Response(status_code=404)
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)
