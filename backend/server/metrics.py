"""Prometheus metrics for the HTTP surface (scraped at GET /metrics)."""
from __future__ import annotations

from fastapi import Request
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest

HTTP_REQUESTS = Counter(
    "memo_http_requests_total",
    "HTTP requests handled, by method, route and status.",
    ["method", "path", "status"],
)
HTTP_REQUEST_DURATION = Histogram(
    "memo_http_request_duration_seconds",
    "HTTP request latency in seconds, by method and route.",
    ["method", "path"],
)


def _route_label(request: Request) -> str:
    # Route template keeps label cardinality bounded; unmatched paths fall back to the raw path.
    route = request.scope.get("route")
    return getattr(route, "path", None) or request.url.path


def observe_request(request: Request, *, status: int, elapsed_seconds: float) -> None:
    path = _route_label(request)
    HTTP_REQUESTS.labels(method=request.method, path=path, status=str(status)).inc()
    HTTP_REQUEST_DURATION.labels(method=request.method, path=path).observe(max(0.0, elapsed_seconds))


def render_latest() -> bytes:
    return generate_latest()


__all__ = ["CONTENT_TYPE_LATEST", "observe_request", "render_latest"]
