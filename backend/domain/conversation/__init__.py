from __future__ import annotations

from domain.conversation.conversation import (
    Conversation,
    ConversationAccessDeniedError,
    ConversationForkError,
    ConversationNotFoundError,
    check_fork_parent,
)

__all__ = [
    "Conversation",
    "ConversationAccessDeniedError",
    "ConversationForkError",
    "ConversationNotFoundError",
    "check_fork_parent",
]
