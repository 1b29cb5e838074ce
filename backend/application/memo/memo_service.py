"""
会话备忘录（Personal Memo）应用服务。

MemoService 位于 API 层与存储端口之间：先做身份校验和内容校验（两者都在任何
持久化之前完成），再确认用户与会话存在，最后把 UPSERT 交给 MemoStorePort。
"""

from __future__ import annotations

import logging
from typing import Optional

from application.ports.conversation_registry_port import ConversationRegistryPort
from application.ports.memo_store_port import MemoStorePort
from application.ports.user_directory_port import UserDirectoryPort
from domain.memo import (
    Memo,
    MemoAccessDeniedError,
    MemoPolicy,
    MemoReferenceNotFoundError,
    normalize_memo_content,
)
from infrastructure.utils.event_logger import EventLogger

logger = logging.getLogger(__name__)


def _require_owner(*, requester_id: str, user_id: str) -> None:
    if not requester_id or str(requester_id) != str(user_id):
        raise MemoAccessDeniedError("memo is only accessible by its owner")


class MemoService:
    """Owner-scoped save/get/delete for conversation memos.

    Attributes:
        _store: memo persistence (atomic upsert lives there, not here)
        _conversations: existence/ownership lookup for conversation ids
        _users: existence lookup for user ids
        _policy: content rules (max length, whitespace handling)
    """

    def __init__(
        self,
        *,
        store: MemoStorePort,
        conversations: ConversationRegistryPort,
        users: UserDirectoryPort,
        policy: Optional[MemoPolicy] = None,
    ) -> None:
        self._store = store
        self._conversations = conversations
        self._users = users
        self._policy = policy or MemoPolicy()

    @property
    def policy(self) -> MemoPolicy:
        return self._policy

    async def save_memo(
        self,
        *,
        requester_id: str,
        user_id: str,
        conversation_id: str,
        content: str,
        request_id: Optional[str] = None,
    ) -> Memo:
        """Create the memo for (user, conversation) or overwrite its content.

        Raises:
            MemoAccessDeniedError: requester is not `user_id`, or the
                conversation belongs to someone else
            MemoValidationError: content empty or longer than policy.max_chars
            MemoReferenceNotFoundError: user or conversation does not exist
            MemoStoreUnavailableError: storage unreachable (not retried)
        """
        events = EventLogger(
            logger,
            "[memo]",
            base_fields={"op": "save", "user_id": user_id, "conversation_id": conversation_id, "request_id": request_id},
        )
        try:
            _require_owner(requester_id=requester_id, user_id=user_id)
            text = normalize_memo_content(content, policy=self._policy)
        except Exception as exc:
            events.warning("rejected", reason=type(exc).__name__)
            raise

        if not await self._users.user_exists(user_id=user_id):
            events.warning("rejected", reason="user_not_found")
            raise MemoReferenceNotFoundError(f"user not found: {user_id}", entity="user", entity_id=user_id)

        conversation = await self._conversations.get_conversation(conversation_id=conversation_id)
        if conversation is None:
            events.warning("rejected", reason="conversation_not_found")
            raise MemoReferenceNotFoundError(
                f"conversation not found: {conversation_id}",
                entity="conversation",
                entity_id=conversation_id,
            )
        if conversation.user_id != str(user_id):
            events.warning("rejected", reason="conversation_not_owned")
            raise MemoAccessDeniedError("conversation belongs to another user")

        memo = await self._store.upsert_memo(user_id=user_id, conversation_id=conversation_id, content=text)
        events.info("saved", chars=len(memo.content))
        return memo

    async def get_memo(
        self,
        *,
        requester_id: str,
        user_id: str,
        conversation_id: str,
    ) -> Optional[Memo]:
        _require_owner(requester_id=requester_id, user_id=user_id)
        return await self._store.get_memo(user_id=user_id, conversation_id=conversation_id)

    async def delete_memo(
        self,
        *,
        requester_id: str,
        user_id: str,
        conversation_id: str,
        request_id: Optional[str] = None,
    ) -> bool:
        """Remove the memo if present. Always succeeds for the owner.

        Returns whether a row was actually removed (informational only).
        """
        _require_owner(requester_id=requester_id, user_id=user_id)
        removed = await self._store.delete_memo(user_id=user_id, conversation_id=conversation_id)
        EventLogger(logger, "[memo]", include_seq=False, include_elapsed=False).info(
            "deleted",
            user_id=user_id,
            conversation_id=conversation_id,
            removed=removed,
            request_id=request_id,
        )
        return removed
