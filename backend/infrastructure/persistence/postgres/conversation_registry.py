from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from uuid import uuid4

from application.ports.conversation_registry_port import ConversationRegistryPort
from domain.conversation import Conversation, check_fork_parent
from infrastructure.persistence.postgres.base import AsyncpgPoolStore

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "New conversation"


def _new_conversation_id() -> str:
    return str(uuid4())


def _row_to_conversation(row: Any) -> Conversation:
    fork_ids = row["fork_ids"] if "fork_ids" in row.keys() else None
    return Conversation(
        id=str(row["id"]),
        user_id=str(row["user_id"]),
        title=str(row["title"] or DEFAULT_TITLE),
        parent_id=str(row["parent_id"]) if row["parent_id"] is not None else None,
        created_at=row["created_at"],
        fork_ids=tuple(str(x) for x in (fork_ids or []) if x is not None),
    )


class InMemoryConversationRegistry(ConversationRegistryPort):
    """In-memory conversation registry for dev/tests when Postgres is not configured."""

    def __init__(self) -> None:
        self._rows: Dict[str, Conversation] = {}

    def _with_forks(self, conv: Conversation) -> Conversation:
        forks = sorted(
            (c for c in self._rows.values() if c.parent_id == conv.id),
            key=lambda c: (c.created_at or datetime.min.replace(tzinfo=timezone.utc), c.id),
        )
        return Conversation(
            id=conv.id,
            user_id=conv.user_id,
            title=conv.title,
            parent_id=conv.parent_id,
            created_at=conv.created_at,
            fork_ids=tuple(c.id for c in forks),
        )

    async def create_conversation(
        self,
        *,
        user_id: str,
        title: Optional[str] = None,
        parent_id: Optional[str] = None,
        conversation_id: Optional[str] = None,
    ) -> Conversation:
        if parent_id is not None:
            check_fork_parent(user_id=user_id, parent=self._rows.get(str(parent_id)), parent_id=str(parent_id))
        conv = Conversation(
            id=str(conversation_id or _new_conversation_id()),
            user_id=str(user_id),
            title=(title or "").strip() or DEFAULT_TITLE,
            parent_id=str(parent_id) if parent_id is not None else None,
            created_at=datetime.now(timezone.utc),
        )
        self._rows[conv.id] = conv
        return conv

    async def get_conversation(self, *, conversation_id: str) -> Optional[Conversation]:
        conv = self._rows.get(str(conversation_id))
        return self._with_forks(conv) if conv else None

    async def list_conversations(self, *, user_id: str, limit: int = 50, offset: int = 0) -> List[Conversation]:
        rows = [c for c in self._rows.values() if c.user_id == str(user_id)]
        rows.sort(
            key=lambda c: (c.created_at or datetime.min.replace(tzinfo=timezone.utc), c.id),
            reverse=True,
        )
        return [self._with_forks(c) for c in rows[int(offset) : int(offset) + int(limit)]]

    async def close(self) -> None:
        return None


class PostgresConversationRegistry(AsyncpgPoolStore, ConversationRegistryPort):
    """PostgreSQL conversation registry (asyncpg).

    Table:
      - chat_conversations(id text pk, user_id fk, title, parent_id fk nullable, created_at)
    """

    store_name = "conversation registry"

    _SELECT_WITH_FORKS = """
        SELECT c.id, c.user_id, c.title, c.parent_id, c.created_at,
               ARRAY(
                   SELECT f.id FROM chat_conversations f
                   WHERE f.parent_id = c.id
                   ORDER BY f.created_at, f.id
               ) AS fork_ids
        FROM chat_conversations c
    """

    async def create_conversation(
        self,
        *,
        user_id: str,
        title: Optional[str] = None,
        parent_id: Optional[str] = None,
        conversation_id: Optional[str] = None,
    ) -> Conversation:
        async with self._connection() as conn:
            async with conn.transaction():
                if parent_id is not None:
                    parent_row = await conn.fetchrow(
                        "SELECT id, user_id, title, parent_id, created_at FROM chat_conversations WHERE id = $1",
                        str(parent_id),
                    )
                    parent = _row_to_conversation(parent_row) if parent_row else None
                    check_fork_parent(user_id=user_id, parent=parent, parent_id=str(parent_id))

                await conn.execute(
                    "INSERT INTO chat_users (id) VALUES ($1) ON CONFLICT (id) DO NOTHING",
                    str(user_id),
                )
                row = await conn.fetchrow(
                    """
                    INSERT INTO chat_conversations (id, user_id, title, parent_id)
                    VALUES ($1, $2, $3, $4)
                    RETURNING id, user_id, title, parent_id, created_at
                    """,
                    str(conversation_id or _new_conversation_id()),
                    str(user_id),
                    (title or "").strip() or DEFAULT_TITLE,
                    str(parent_id) if parent_id is not None else None,
                )
                if not row:
                    raise RuntimeError("failed to create conversation")
                return _row_to_conversation(row)

    async def get_conversation(self, *, conversation_id: str) -> Optional[Conversation]:
        async with self._connection() as conn:
            row = await conn.fetchrow(
                self._SELECT_WITH_FORKS + " WHERE c.id = $1",
                str(conversation_id),
            )
            return _row_to_conversation(row) if row else None

    async def list_conversations(self, *, user_id: str, limit: int = 50, offset: int = 0) -> List[Conversation]:
        async with self._connection() as conn:
            rows = await conn.fetch(
                self._SELECT_WITH_FORKS
                + """
                WHERE c.user_id = $1
                ORDER BY c.created_at DESC, c.id DESC
                LIMIT $2 OFFSET $3
                """,
                str(user_id),
                int(limit),
                int(offset),
            )
            return [_row_to_conversation(r) for r in rows]
