from __future__ import annotations

import logging
from typing import List, Optional

from application.ports.conversation_registry_port import ConversationRegistryPort
from application.ports.user_directory_port import UserDirectoryPort
from domain.conversation import (
    Conversation,
    ConversationAccessDeniedError,
    ConversationNotFoundError,
)
from infrastructure.utils import format_kv

logger = logging.getLogger(__name__)


class ConversationService:
    """Owner-scoped access to the conversation registry (incl. one-level forks)."""

    def __init__(self, *, registry: ConversationRegistryPort, users: UserDirectoryPort) -> None:
        self._registry = registry
        self._users = users

    async def create_conversation(
        self,
        *,
        requester_id: str,
        title: Optional[str] = None,
        parent_id: Optional[str] = None,
    ) -> Conversation:
        await self._users.ensure_user(user_id=requester_id)
        conv = await self._registry.create_conversation(user_id=requester_id, title=title, parent_id=parent_id)
        logger.info(
            "[conversation] %s",
            format_kv(event="created", user_id=requester_id, conversation_id=conv.id, parent_id=conv.parent_id),
        )
        return conv

    async def get_conversation(self, *, requester_id: str, conversation_id: str) -> Conversation:
        conv = await self._registry.get_conversation(conversation_id=conversation_id)
        if conv is None:
            raise ConversationNotFoundError(f"conversation not found: {conversation_id}")
        if conv.user_id != str(requester_id):
            raise ConversationAccessDeniedError("conversation belongs to another user")
        return conv

    async def list_conversations(self, *, requester_id: str, limit: int = 50, offset: int = 0) -> List[Conversation]:
        return await self._registry.list_conversations(user_id=requester_id, limit=limit, offset=offset)
