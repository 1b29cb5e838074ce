from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional, Tuple


class ConversationForkError(ValueError):
    """Invalid fork request: missing or foreign parent, or a fork of a fork."""


class ConversationNotFoundError(LookupError):
    pass


class ConversationAccessDeniedError(PermissionError):
    pass


@dataclass(frozen=True)
class Conversation:
    id: str
    user_id: str
    title: str = "New conversation"
    # Set only on forks; forks never have forks of their own.
    parent_id: Optional[str] = None
    created_at: Optional[datetime] = None
    fork_ids: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def is_fork(self) -> bool:
        return self.parent_id is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "title": self.title,
            "parent_id": self.parent_id,
            "is_fork": self.is_fork,
            "fork_ids": list(self.fork_ids),
            "created_at": self.created_at,
        }


def check_fork_parent(*, user_id: str, parent: Optional[Conversation], parent_id: str) -> None:
    """Validate that `parent` may receive a new fork for `user_id`.

    Depth is limited to one level: a fork cannot itself be forked.
    """
    if parent is None:
        raise ConversationForkError(f"parent conversation not found: {parent_id}")
    if parent.user_id != str(user_id):
        raise ConversationForkError("parent conversation belongs to another user")
    if parent.is_fork:
        raise ConversationForkError("cannot fork a forked conversation (max depth is 1)")
