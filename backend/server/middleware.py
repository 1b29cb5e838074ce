from __future__ import annotations

import logging
import time
import uuid

from fastapi import Request

from config.settings import CORRELATION_ID_HEADER
from infrastructure.utils import format_kv, reset_correlation_id, set_correlation_id
from server.metrics import observe_request

logger = logging.getLogger(__name__)

_MAX_INBOUND_ID_CHARS = 128


def _inbound_correlation_id(request: Request) -> str:
    raw = (request.headers.get(CORRELATION_ID_HEADER) or "").strip()
    if raw and len(raw) <= _MAX_INBOUND_ID_CHARS:
        return raw
    return str(uuid.uuid4())


async def correlation_id_middleware(request: Request, call_next):
    """Propagate (or mint) a correlation id and echo it on the response."""
    correlation_id = _inbound_correlation_id(request)
    request.state.correlation_id = correlation_id
    token = set_correlation_id(correlation_id)
    started = time.perf_counter()
    status = 500
    try:
        response = await call_next(request)
        status = response.status_code
    finally:
        reset_correlation_id(token)
        observe_request(request, status=status, elapsed_seconds=time.perf_counter() - started)
    response.headers[CORRELATION_ID_HEADER] = correlation_id
    logger.info(
        "[http] %s",
        format_kv(
            method=request.method,
            path=request.url.path,
            status=status,
            elapsed_ms=round((time.perf_counter() - started) * 1000, 2),
            correlation_id=correlation_id,
        ),
    )
    return response
