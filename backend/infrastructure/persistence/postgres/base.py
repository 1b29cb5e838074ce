from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

from domain.memo import MemoStoreUnavailableError
from infrastructure.persistence.postgres.schema import SCHEMA_STATEMENTS

logger = logging.getLogger(__name__)


def _is_connectivity_error(exc: BaseException) -> bool:
    # ConnectionRefusedError is the common dev failure (POSTGRES_* set, no server).
    if isinstance(exc, (OSError, asyncio.TimeoutError)):
        return True
    try:
        import asyncpg  # type: ignore
    except ImportError:
        return False
    return isinstance(
        exc,
        (
            asyncpg.PostgresConnectionError,
            asyncpg.CannotConnectNowError,
            asyncpg.TooManyConnectionsError,
        ),
    )


class AsyncpgPoolStore:
    """Lazy asyncpg pool shared by the Postgres adapters.

    Subclasses use `async with self._connection() as conn:`; connectivity
    failures come out as MemoStoreUnavailableError, everything else propagates
    unchanged.
    """

    store_name = "postgres"
    backend_name = "postgres"

    def __init__(
        self,
        *,
        dsn: str,
        min_size: int = 1,
        max_size: int = 10,
    ) -> None:
        self._dsn = dsn
        self._min_size = min_size
        self._max_size = max_size
        self._pool = None
        self._pool_lock = asyncio.Lock()

    async def _ensure_schema(self) -> None:
        """Best-effort schema bootstrap for dev; production should use migrations."""
        pool = self._pool
        if pool is None:
            return
        async with pool.acquire() as conn:
            for statement in SCHEMA_STATEMENTS:
                try:
                    await conn.execute(statement)
                except Exception as e:
                    logger.warning("Failed to ensure %s schema: %s", self.store_name, e)

    async def _get_pool(self):
        if self._pool is not None:
            return self._pool
        async with self._pool_lock:
            if self._pool is not None:
                return self._pool
            # Lazy import so unit tests can run without asyncpg installed if not used.
            import asyncpg  # type: ignore

            self._pool = await asyncpg.create_pool(
                self._dsn,
                min_size=self._min_size,
                max_size=self._max_size,
                ssl=False,
            )
            await self._ensure_schema()
            logger.info("PostgreSQL %s pool initialized", self.store_name)
            return self._pool

    @asynccontextmanager
    async def _connection(self) -> AsyncIterator[Any]:
        try:
            pool = await self._get_pool()
            async with pool.acquire() as conn:
                yield conn
        except MemoStoreUnavailableError:
            raise
        except Exception as exc:
            if _is_connectivity_error(exc):
                raise MemoStoreUnavailableError(f"{self.store_name} is unavailable: {exc}") from exc
            raise

    async def ping(self) -> bool:
        async with self._connection() as conn:
            return (await conn.fetchval("SELECT 1")) == 1

    async def close(self) -> None:
        if self._pool is not None:
            await self._pool.close()
            self._pool = None
            logger.info("PostgreSQL %s pool closed", self.store_name)
