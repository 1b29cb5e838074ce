from __future__ import annotations

import logging
from typing import Set

from application.ports.user_directory_port import UserDirectoryPort
from infrastructure.persistence.postgres.base import AsyncpgPoolStore

logger = logging.getLogger(__name__)


class InMemoryUserDirectory(UserDirectoryPort):
    def __init__(self) -> None:
        self._ids: Set[str] = set()

    async def user_exists(self, *, user_id: str) -> bool:
        return str(user_id) in self._ids

    async def ensure_user(self, *, user_id: str) -> None:
        self._ids.add(str(user_id))

    async def close(self) -> None:
        return None


class PostgresUserDirectory(AsyncpgPoolStore, UserDirectoryPort):
    """Existence checks against chat_users (asyncpg)."""

    store_name = "user directory"

    async def user_exists(self, *, user_id: str) -> bool:
        async with self._connection() as conn:
            found = await conn.fetchval("SELECT 1 FROM chat_users WHERE id = $1", str(user_id))
            return found is not None

    async def ensure_user(self, *, user_id: str) -> None:
        async with self._connection() as conn:
            await conn.execute(
                "INSERT INTO chat_users (id) VALUES ($1) ON CONFLICT (id) DO NOTHING",
                str(user_id),
            )
