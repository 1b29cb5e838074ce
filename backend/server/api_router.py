from __future__ import annotations

from fastapi import APIRouter

import server.api.rest.v1.conversations as conversations_v1
import server.api.rest.v1.memo as memo_v1
import server.api.rest.v1.system as system_v1

# Canonical API router aggregator (v1 only).
api_router = APIRouter()
api_router.include_router(conversations_v1.router)
api_router.include_router(memo_v1.router)
api_router.include_router(system_v1.router)
api_router.include_router(system_v1.metrics_router)

__all__ = ["api_router"]
