from __future__ import annotations

from typing import List, Optional, Protocol

from domain.conversation import Conversation


class ConversationRegistryPort(Protocol):
    """会话注册表 Port（接口）。

    约定：
    - fork 只允许一层（parent 本身不能是 fork）。
    - get_conversation 返回的对象带有 fork_ids，便于前端切换显示状态。
    """

    async def create_conversation(
        self,
        *,
        user_id: str,
        title: Optional[str] = None,
        parent_id: Optional[str] = None,
        conversation_id: Optional[str] = None,
    ) -> Conversation:
        ...

    async def get_conversation(self, *, conversation_id: str) -> Optional[Conversation]:
        ...

    async def list_conversations(self, *, user_id: str, limit: int = 50, offset: int = 0) -> List[Conversation]:
        ...

    async def close(self) -> None:
        ...
