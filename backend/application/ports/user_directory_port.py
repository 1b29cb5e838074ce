from __future__ import annotations

from typing import Protocol


class UserDirectoryPort(Protocol):
    async def user_exists(self, *, user_id: str) -> bool:
        ...

    async def ensure_user(self, *, user_id: str) -> None:
        """Register the user if unknown (no-op otherwise)."""
        ...

    async def close(self) -> None:
        ...
