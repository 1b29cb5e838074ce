"""Liveness / readiness / aggregated health, plus the Prometheus scrape endpoint."""
from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, Response
from fastapi.responses import JSONResponse

from domain.memo import MemoStoreUnavailableError
from server.api.rest.dependencies import get_health_components
from server.metrics import CONTENT_TYPE_LATEST, render_latest
from server.models.schemas import ComponentHealth, HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/system", tags=["system"])
metrics_router = APIRouter(tags=["system"])


async def _check_component(name: str, component: Any) -> ComponentHealth:
    ping = getattr(component, "ping", None)
    if not callable(ping):
        return ComponentHealth(status="UP", backend="memory")
    backend = getattr(component, "backend_name", "postgres")
    describe = getattr(component, "describe", None)
    try:
        ok = await ping()
        detail = describe() if callable(describe) else None
    except (MemoStoreUnavailableError, OSError) as e:
        logger.warning("health check failed: component=%s error=%s", name, e)
        return ComponentHealth(status="DOWN", backend=backend, detail=str(e))
    return ComponentHealth(status="UP" if ok else "DOWN", backend=backend, detail=detail)


async def _collect(components: Dict[str, Any]) -> HealthResponse:
    results = {name: await _check_component(name, c) for name, c in components.items()}
    overall = "UP" if all(r.status == "UP" for r in results.values()) else "DOWN"
    return HealthResponse(status=overall, components=results)


@router.get("/live")
async def live() -> Dict[str, str]:
    return {"status": "UP"}


@router.get("/ready", response_model=HealthResponse)
async def ready(components: Dict[str, Any] = Depends(get_health_components)):
    health = await _collect(components)
    if health.status != "UP":
        return JSONResponse(status_code=503, content=health.model_dump())
    return health


@router.get("/health", response_model=HealthResponse)
async def health(components: Dict[str, Any] = Depends(get_health_components)) -> HealthResponse:
    """Aggregated component health; always 200 so dashboards can read the body."""
    return await _collect(components)


@metrics_router.get("/metrics", include_in_schema=False)
async def metrics() -> Response:
    return Response(content=render_latest(), media_type=CONTENT_TYPE_LATEST)
