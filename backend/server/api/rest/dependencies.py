from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any, Dict

from fastapi import Depends

from application.conversation.conversation_service import ConversationService
from application.memo.memo_service import MemoService
from config.settings import (
    AUTO_REGISTER_USERS,
    HEALTH_DISK_MIN_FREE_MB,
    HEALTH_DISK_PATH,
    MEMO_MAX_CHARS,
    MEMO_STRIP_WHITESPACE,
)
from domain.memo import MemoPolicy
from infrastructure.health import DiskSpaceIndicator
from server.api.rest.auth import get_current_user_id

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def _build_stores() -> Dict[str, Any]:
    from config.database import get_postgres_dsn, get_postgres_pool_size

    dsn = get_postgres_dsn()
    if dsn:
        from infrastructure.persistence.postgres.conversation_registry import PostgresConversationRegistry
        from infrastructure.persistence.postgres.memo_store import PostgresMemoStore
        from infrastructure.persistence.postgres.user_directory import PostgresUserDirectory

        min_size, max_size = get_postgres_pool_size()
        logger.info("Using PostgreSQL stores")
        return {
            "users": PostgresUserDirectory(dsn=dsn, min_size=min_size, max_size=max_size),
            "conversations": PostgresConversationRegistry(dsn=dsn, min_size=min_size, max_size=max_size),
            "memos": PostgresMemoStore(dsn=dsn, min_size=min_size, max_size=max_size),
        }

    from infrastructure.persistence.postgres.conversation_registry import InMemoryConversationRegistry
    from infrastructure.persistence.postgres.memo_store import InMemoryMemoStore
    from infrastructure.persistence.postgres.user_directory import InMemoryUserDirectory

    logger.info("POSTGRES_DSN/POSTGRES_HOST not set; using in-memory stores")
    return {
        "users": InMemoryUserDirectory(),
        "conversations": InMemoryConversationRegistry(),
        "memos": InMemoryMemoStore(),
    }


def get_user_directory():
    return _build_stores()["users"]


def get_conversation_registry():
    return _build_stores()["conversations"]


def get_memo_store():
    return _build_stores()["memos"]


def get_memo_policy() -> MemoPolicy:
    return MemoPolicy(max_chars=int(MEMO_MAX_CHARS), strip_whitespace=bool(MEMO_STRIP_WHITESPACE))


def get_memo_service(
    store=Depends(get_memo_store),
    conversations=Depends(get_conversation_registry),
    users=Depends(get_user_directory),
    policy: MemoPolicy = Depends(get_memo_policy),
) -> MemoService:
    return MemoService(store=store, conversations=conversations, users=users, policy=policy)


def get_conversation_service(
    registry=Depends(get_conversation_registry),
    users=Depends(get_user_directory),
) -> ConversationService:
    return ConversationService(registry=registry, users=users)


async def get_authenticated_user_id(
    user_id: str = Depends(get_current_user_id),
    users=Depends(get_user_directory),
) -> str:
    """Authenticated caller id; registers it in the user directory when enabled."""
    if AUTO_REGISTER_USERS:
        await users.ensure_user(user_id=user_id)
    return user_id


def get_health_components() -> Dict[str, Any]:
    """Components checked by the system health endpoints."""
    return {
        "db": _build_stores()["memos"],
        "diskSpace": DiskSpaceIndicator(path=HEALTH_DISK_PATH, threshold_bytes=HEALTH_DISK_MIN_FREE_MB * 1024 * 1024),
    }


async def shutdown_dependencies() -> None:
    """Best-effort shutdown hooks for long-lived adapters (connection pools)."""
    if _build_stores.cache_info().currsize == 0:
        return
    for store in _build_stores().values():
        close = getattr(store, "close", None)
        if callable(close):
            await close()
