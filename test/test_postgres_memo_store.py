import re
import sys
import unittest
from datetime import datetime, timezone
from pathlib import Path
from unittest.mock import patch

_BACKEND_ROOT = Path(__file__).resolve().parents[1] / "backend"
if str(_BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(_BACKEND_ROOT))

import asyncpg

from domain.memo import MemoReferenceNotFoundError, MemoStoreUnavailableError
from infrastructure.persistence.postgres.memo_store import PostgresMemoStore


class _FakeConn:
    def __init__(self, *, row=None, execute_result="DELETE 1", error: Exception | None = None) -> None:
        self.row = row
        self.execute_result = execute_result
        self.error = error
        self.calls: list[tuple[str, tuple]] = []

    async def fetchrow(self, sql, *args):
        self.calls.append((sql, args))
        if self.error is not None:
            raise self.error
        return self.row

    async def execute(self, sql, *args):
        self.calls.append((sql, args))
        if self.error is not None:
            raise self.error
        return self.execute_result


class _Acquire:
    def __init__(self, conn: _FakeConn) -> None:
        self._conn = conn

    async def __aenter__(self):
        return self._conn

    async def __aexit__(self, *exc):
        return False


class _FakePool:
    def __init__(self, conn: _FakeConn) -> None:
        self._conn = conn

    def acquire(self):
        return _Acquire(self._conn)

    async def close(self) -> None:
        return None


def _store_with(conn: _FakeConn) -> PostgresMemoStore:
    store = PostgresMemoStore(dsn="postgresql://unused")
    store._pool = _FakePool(conn)
    return store


class TestPostgresMemoStore(unittest.IsolatedAsyncioTestCase):
    async def test_upsert_is_single_insert_on_conflict_statement(self):
        now = datetime.now(timezone.utc)
        conn = _FakeConn(
            row={"user_id": "u1", "conversation_id": "c1", "content": "hi", "created_at": now, "updated_at": now}
        )
        memo = await _store_with(conn).upsert_memo(user_id="u1", conversation_id="c1", content="hi")

        self.assertEqual(memo.content, "hi")
        self.assertEqual(len(conn.calls), 1)
        sql, args = conn.calls[0]
        self.assertIn("ON CONFLICT (user_id, conversation_id)", sql)
        self.assertIn("DO UPDATE", sql)
        self.assertNotIn("created_at =", sql)
        self.assertEqual(args, ("u1", "c1", "hi"))

    async def test_upsert_update_clause_never_touches_identity_or_created_at(self):
        now = datetime.now(timezone.utc)
        conn = _FakeConn(
            row={"user_id": "u1", "conversation_id": "c1", "content": "v2", "created_at": now, "updated_at": now}
        )
        await _store_with(conn).upsert_memo(user_id="u1", conversation_id="c1", content="v2")

        sql, _ = conn.calls[0]
        match = re.search(r"DO UPDATE SET(.*?)RETURNING", sql, re.S)
        self.assertIsNotNone(match, sql)
        assigned = {part.split("=", 1)[0].strip() for part in match.group(1).split(",") if part.strip()}
        self.assertEqual(assigned, {"content", "updated_at"})

    async def test_foreign_key_violation_maps_to_reference_not_found(self):
        conn = _FakeConn(error=asyncpg.ForeignKeyViolationError("fk"))
        with self.assertRaises(MemoReferenceNotFoundError):
            await _store_with(conn).upsert_memo(user_id="u1", conversation_id="gone", content="x")

    async def test_delete_reports_row_count(self):
        self.assertTrue(await _store_with(_FakeConn(execute_result="DELETE 1")).delete_memo(user_id="u1", conversation_id="c1"))
        self.assertFalse(await _store_with(_FakeConn(execute_result="DELETE 0")).delete_memo(user_id="u1", conversation_id="c1"))

    async def test_get_missing_returns_none(self):
        self.assertIsNone(await _store_with(_FakeConn(row=None)).get_memo(user_id="u1", conversation_id="c1"))

    async def test_connection_refused_is_unavailable(self):
        store = PostgresMemoStore(dsn="postgresql://unused")
        with patch.object(store, "_get_pool", side_effect=ConnectionRefusedError(111, "Connection refused")):
            with self.assertRaises(MemoStoreUnavailableError):
                await store.get_memo(user_id="u1", conversation_id="c1")

    async def test_dropped_connection_mid_query_is_unavailable(self):
        conn = _FakeConn(error=asyncpg.ConnectionDoesNotExistError("connection was closed in the middle of operation"))
        with self.assertRaises(MemoStoreUnavailableError):
            await _store_with(conn).get_memo(user_id="u1", conversation_id="c1")
