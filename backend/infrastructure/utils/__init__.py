from __future__ import annotations

from infrastructure.utils.event_logger import EventLogger  # noqa: F401
from infrastructure.utils.log_format import format_kv  # noqa: F401
from infrastructure.utils.request_context import (  # noqa: F401
    get_correlation_id,
    reset_correlation_id,
    set_correlation_id,
)

__all__ = [
    "EventLogger",
    "format_kv",
    "get_correlation_id",
    "reset_correlation_id",
    "set_correlation_id",
]
