from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple

from application.ports.memo_store_port import MemoStorePort
from domain.memo import Memo, MemoReferenceNotFoundError
from infrastructure.persistence.postgres.base import AsyncpgPoolStore

logger = logging.getLogger(__name__)

_MEMO_COLUMNS = "user_id, conversation_id, content, created_at, updated_at"


def _row_to_memo(row: Any) -> Memo:
    return Memo(
        user_id=str(row["user_id"]),
        conversation_id=str(row["conversation_id"]),
        content=str(row["content"]),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


class InMemoryMemoStore(MemoStorePort):
    """In-memory memo store for dev/tests when Postgres is not configured.

    The upsert body has no await points, so it runs atomically on the event loop.
    """

    def __init__(self) -> None:
        self._rows: Dict[Tuple[str, str], Memo] = {}

    async def upsert_memo(self, *, user_id: str, conversation_id: str, content: str) -> Memo:
        key = (str(user_id), str(conversation_id))
        now = datetime.now(timezone.utc)
        current = self._rows.get(key)
        memo = Memo(
            user_id=key[0],
            conversation_id=key[1],
            content=str(content),
            created_at=current.created_at if current else now,
            updated_at=now,
        )
        self._rows[key] = memo
        return memo

    async def get_memo(self, *, user_id: str, conversation_id: str) -> Optional[Memo]:
        return self._rows.get((str(user_id), str(conversation_id)))

    async def delete_memo(self, *, user_id: str, conversation_id: str) -> bool:
        return self._rows.pop((str(user_id), str(conversation_id)), None) is not None

    async def count(self) -> int:
        return len(self._rows)

    async def close(self) -> None:
        return None


class PostgresMemoStore(AsyncpgPoolStore, MemoStorePort):
    """PostgreSQL memo store (asyncpg).

    Table:
      - conversation_memos(user_id, conversation_id, content, created_at, updated_at,
        primary key (user_id, conversation_id))
    """

    store_name = "memo store"

    async def upsert_memo(self, *, user_id: str, conversation_id: str, content: str) -> Memo:
        import asyncpg  # type: ignore

        async with self._connection() as conn:
            try:
                row = await conn.fetchrow(
                    f"""
                    INSERT INTO conversation_memos (user_id, conversation_id, content)
                    VALUES ($1, $2, $3)
                    ON CONFLICT (user_id, conversation_id)
                    DO UPDATE SET
                        content = EXCLUDED.content,
                        updated_at = clock_timestamp()
                    RETURNING {_MEMO_COLUMNS}
                    """,
                    str(user_id),
                    str(conversation_id),
                    str(content),
                )
            except asyncpg.ForeignKeyViolationError as exc:
                # User or conversation removed between the service check and the write.
                raise MemoReferenceNotFoundError(
                    "user or conversation no longer exists",
                    entity="conversation",
                    entity_id=str(conversation_id),
                ) from exc
            if not row:
                raise RuntimeError("failed to upsert memo")
            return _row_to_memo(row)

    async def get_memo(self, *, user_id: str, conversation_id: str) -> Optional[Memo]:
        async with self._connection() as conn:
            row = await conn.fetchrow(
                f"""
                SELECT {_MEMO_COLUMNS}
                FROM conversation_memos
                WHERE user_id = $1 AND conversation_id = $2
                """,
                str(user_id),
                str(conversation_id),
            )
            return _row_to_memo(row) if row else None

    async def delete_memo(self, *, user_id: str, conversation_id: str) -> bool:
        async with self._connection() as conn:
            result = await conn.execute(
                "DELETE FROM conversation_memos WHERE user_id = $1 AND conversation_id = $2",
                str(user_id),
                str(conversation_id),
            )
            # asyncpg returns: "DELETE <n>"
            try:
                return int(str(result).split()[-1]) > 0
            except (IndexError, ValueError):
                return False
