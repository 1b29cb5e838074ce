import sys
import unittest
from pathlib import Path
from unittest.mock import patch

_BACKEND_ROOT = Path(__file__).resolve().parents[1] / "backend"
if str(_BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(_BACKEND_ROOT))

from fastapi.testclient import TestClient

from domain.conversation import ConversationForkError
from infrastructure.persistence.postgres.conversation_registry import InMemoryConversationRegistry
from infrastructure.persistence.postgres.user_directory import InMemoryUserDirectory
from server.main import app


class TestInMemoryConversationRegistry(unittest.IsolatedAsyncioTestCase):
    async def test_fork_links_parent_and_child(self):
        registry = InMemoryConversationRegistry()
        root = await registry.create_conversation(user_id="u1", title="root")
        fork = await registry.create_conversation(user_id="u1", title="what if", parent_id=root.id)

        self.assertTrue(fork.is_fork)
        self.assertEqual(fork.parent_id, root.id)
        refreshed = await registry.get_conversation(conversation_id=root.id)
        self.assertFalse(refreshed.is_fork)
        self.assertEqual(refreshed.fork_ids, (fork.id,))

    async def test_fork_of_fork_is_rejected(self):
        registry = InMemoryConversationRegistry()
        root = await registry.create_conversation(user_id="u1")
        fork = await registry.create_conversation(user_id="u1", parent_id=root.id)
        with self.assertRaises(ConversationForkError):
            await registry.create_conversation(user_id="u1", parent_id=fork.id)

    async def test_fork_of_foreign_or_missing_parent_is_rejected(self):
        registry = InMemoryConversationRegistry()
        root = await registry.create_conversation(user_id="u1")
        with self.assertRaises(ConversationForkError):
            await registry.create_conversation(user_id="u2", parent_id=root.id)
        with self.assertRaises(ConversationForkError):
            await registry.create_conversation(user_id="u1", parent_id="missing")

    async def test_blank_title_gets_default(self):
        registry = InMemoryConversationRegistry()
        conv = await registry.create_conversation(user_id="u1", title="   ")
        self.assertEqual(conv.title, "New conversation")

    async def test_list_is_scoped_to_user(self):
        registry = InMemoryConversationRegistry()
        await registry.create_conversation(user_id="u1")
        await registry.create_conversation(user_id="u1")
        await registry.create_conversation(user_id="u2")
        self.assertEqual(len(await registry.list_conversations(user_id="u1")), 2)
        self.assertEqual(len(await registry.list_conversations(user_id="u1", limit=1)), 1)


class TestConversationApi(unittest.TestCase):
    def setUp(self) -> None:
        from config import settings
        from server.api.rest import dependencies as deps

        self._patch = patch.object(settings, "AUTH_MODE", "header")
        self._patch.start()
        self.users = InMemoryUserDirectory()
        self.registry = InMemoryConversationRegistry()
        app.dependency_overrides[deps.get_user_directory] = lambda: self.users
        app.dependency_overrides[deps.get_conversation_registry] = lambda: self.registry
        self.client = TestClient(app)

    def tearDown(self) -> None:
        app.dependency_overrides = {}
        self._patch.stop()

    def test_create_fork_and_fetch(self):
        h = {"x-user-id": "u1"}
        root = self.client.post("/api/v1/conversations", json={"title": "root"}, headers=h).json()
        resp = self.client.post("/api/v1/conversations", json={"parent_id": root["id"]}, headers=h)
        self.assertEqual(resp.status_code, 200, resp.text)
        fork = resp.json()
        self.assertTrue(fork["is_fork"])

        resp = self.client.get(f"/api/v1/conversations/{root['id']}", headers=h)
        self.assertEqual(resp.status_code, 200, resp.text)
        self.assertEqual(resp.json()["fork_ids"], [fork["id"]])

        resp = self.client.post("/api/v1/conversations", json={"parent_id": fork["id"]}, headers=h)
        self.assertEqual(resp.status_code, 400, resp.text)
        self.assertEqual(resp.json()["detail"]["field"], "parent_id")

        resp = self.client.get("/api/v1/conversations", headers=h)
        self.assertEqual(len(resp.json()), 2)

    def test_creating_a_conversation_registers_the_user(self):
        self.client.post("/api/v1/conversations", json={}, headers={"x-user-id": "new-user"})
        self.assertIn("new-user", self.users._ids)

    def test_foreign_conversation_is_forbidden(self):
        root = self.client.post("/api/v1/conversations", json={}, headers={"x-user-id": "u1"}).json()
        resp = self.client.get(f"/api/v1/conversations/{root['id']}", headers={"x-user-id": "u2"})
        self.assertEqual(resp.status_code, 403, resp.text)
        resp = self.client.get("/api/v1/conversations/missing", headers={"x-user-id": "u2"})
        self.assertEqual(resp.status_code, 404, resp.text)
