from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class MemoSaveRequest(BaseModel):
    """保存/更新备忘录请求模型"""
    # Length rules live in the domain policy so violations come back as 400 with a field hint.
    content: str = Field(..., description="备忘录内容（最多 2000 字符）")


class MemoResponse(BaseModel):
    """备忘录响应模型"""
    user_id: str
    conversation_id: str
    content: str
    created_at: datetime
    updated_at: datetime


class ConversationCreateRequest(BaseModel):
    """创建会话请求模型（parent_id 不为空时表示 fork）"""
    title: Optional[str] = Field(default=None, description="会话标题（可选）")
    parent_id: Optional[str] = Field(default=None, description="父会话ID（仅支持一层 fork）")


class ConversationResponse(BaseModel):
    """会话响应模型"""
    id: str
    user_id: str
    title: str
    parent_id: Optional[str] = None
    is_fork: bool = False
    fork_ids: List[str] = Field(default_factory=list)
    created_at: Optional[datetime] = None


class ComponentHealth(BaseModel):
    status: str
    backend: Optional[str] = None
    detail: Optional[str] = None


class HealthResponse(BaseModel):
    """系统健康检查响应"""
    status: str
    components: dict[str, ComponentHealth] = Field(default_factory=dict)
