from __future__ import annotations

import json
from datetime import datetime
from typing import Any, Iterable
from uuid import UUID

# Keep log lines short; memo bodies can be up to a few thousand characters.
MAX_VALUE_CHARS = 120


def _clip(text: str) -> str:
    if len(text) <= MAX_VALUE_CHARS:
        return text
    return text[:MAX_VALUE_CHARS] + f"...(+{len(text) - MAX_VALUE_CHARS})"


def _format_value(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, str):
        return json.dumps(_clip(value), ensure_ascii=False)
    if isinstance(value, (list, tuple, dict)):
        return _clip(json.dumps(value, ensure_ascii=False, default=str))
    return json.dumps(_clip(str(value)), ensure_ascii=False)


def format_kv(**fields: Any) -> str:
    """
    Render a compact single-line key=value log string.

    Example:
      event="saved" user_id="u1" conversation_id="c1" chars=42
    """
    items: Iterable[tuple[str, Any]] = fields.items()
    parts: list[str] = []
    for key, value in items:
        if value is None:
            continue
        parts.append(f"{key}={_format_value(value)}")
    return " ".join(parts)
