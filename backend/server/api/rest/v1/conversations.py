"""Conversation registry endpoints (create / fork / lookup)."""
from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, Query

from application.conversation.conversation_service import ConversationService
from server.api.rest.dependencies import get_authenticated_user_id, get_conversation_service
from server.api.rest.errors import HANDLED_ERRORS, to_http_exception
from server.models.schemas import ConversationCreateRequest, ConversationResponse

router = APIRouter(prefix="/api/v1", tags=["conversations"])


@router.post("/conversations", response_model=ConversationResponse)
async def create_conversation(
    req: ConversationCreateRequest,
    current_user_id: str = Depends(get_authenticated_user_id),
    service: ConversationService = Depends(get_conversation_service),
) -> ConversationResponse:
    """创建会话；传入 parent_id 时创建该会话的 fork（只允许一层）。"""
    try:
        conv = await service.create_conversation(
            requester_id=current_user_id,
            title=req.title,
            parent_id=req.parent_id,
        )
    except HANDLED_ERRORS as e:
        raise to_http_exception(e) from e
    return ConversationResponse(**conv.to_dict())


@router.get("/conversations", response_model=List[ConversationResponse])
async def list_conversations(
    limit: int = Query(50, ge=1, le=100, description="返回数量限制"),
    offset: int = Query(0, ge=0, description="分页偏移量"),
    current_user_id: str = Depends(get_authenticated_user_id),
    service: ConversationService = Depends(get_conversation_service),
) -> List[ConversationResponse]:
    """列出当前用户的会话，按创建时间倒序。"""
    try:
        rows = await service.list_conversations(requester_id=current_user_id, limit=limit, offset=offset)
    except HANDLED_ERRORS as e:
        raise to_http_exception(e) from e
    return [ConversationResponse(**c.to_dict()) for c in rows]


@router.get("/conversations/{conversation_id}", response_model=ConversationResponse)
async def get_conversation(
    conversation_id: str,
    current_user_id: str = Depends(get_authenticated_user_id),
    service: ConversationService = Depends(get_conversation_service),
) -> ConversationResponse:
    try:
        conv = await service.get_conversation(requester_id=current_user_id, conversation_id=conversation_id)
    except HANDLED_ERRORS as e:
        raise to_http_exception(e) from e
    return ConversationResponse(**conv.to_dict())
