from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict


@dataclass(frozen=True)
class Memo:
    """A private note one user keeps on one conversation.

    (user_id, conversation_id) is the identity; there is never more than one
    memo per pair.
    """

    user_id: str
    conversation_id: str
    content: str
    created_at: datetime
    updated_at: datetime

    def to_dict(self) -> Dict[str, Any]:
        return {
            "user_id": self.user_id,
            "conversation_id": self.conversation_id,
            "content": self.content,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }
