from __future__ import annotations

from typing import Optional, Protocol

from domain.memo import Memo


class MemoStorePort(Protocol):
    """Memo persistence port.

    Contract:
    - `upsert_memo` is a single atomic insert-or-update keyed by
      (user_id, conversation_id). Concurrent calls for one key never produce
      two rows; the last writer's content wins and created_at is kept.
    - `delete_memo` returns whether a row was removed; callers treat both
      outcomes as success.
    - Connectivity failures surface as MemoStoreUnavailableError.
    """

    async def upsert_memo(self, *, user_id: str, conversation_id: str, content: str) -> Memo:
        ...

    async def get_memo(self, *, user_id: str, conversation_id: str) -> Optional[Memo]:
        ...

    async def delete_memo(self, *, user_id: str, conversation_id: str) -> bool:
        ...

    async def close(self) -> None:
        ...
