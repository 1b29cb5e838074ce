"""Conversation memo endpoints (one private note per user and conversation)."""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import Response

from application.memo.memo_service import MemoService
from server.api.rest.dependencies import get_authenticated_user_id, get_memo_service
from server.api.rest.errors import HANDLED_ERRORS, to_http_exception
from server.models.schemas import MemoResponse, MemoSaveRequest

router = APIRouter(prefix="/api/v1", tags=["memo-v1"])


def _request_id(request: Request) -> Optional[str]:
    return getattr(request.state, "correlation_id", None)


@router.put("/conversations/{conversation_id}/memo", response_model=MemoResponse)
async def save_memo(
    conversation_id: str,
    req: MemoSaveRequest,
    request: Request,
    user_id: Optional[str] = Query(default=None, description="用户ID（可选，必须与登录用户一致）"),
    current_user_id: str = Depends(get_authenticated_user_id),
    service: MemoService = Depends(get_memo_service),
) -> MemoResponse:
    """创建或覆盖当前用户在该会话上的备忘录（UPSERT）。"""
    try:
        memo = await service.save_memo(
            requester_id=current_user_id,
            user_id=user_id or current_user_id,
            conversation_id=conversation_id,
            content=req.content,
            request_id=_request_id(request),
        )
    except HANDLED_ERRORS as e:
        raise to_http_exception(e) from e
    return MemoResponse(**memo.to_dict())


@router.get("/conversations/{conversation_id}/memo", response_model=MemoResponse)
async def get_memo(
    conversation_id: str,
    user_id: Optional[str] = Query(default=None, description="用户ID（可选，必须与登录用户一致）"),
    current_user_id: str = Depends(get_authenticated_user_id),
    service: MemoService = Depends(get_memo_service),
) -> MemoResponse:
    try:
        memo = await service.get_memo(
            requester_id=current_user_id,
            user_id=user_id or current_user_id,
            conversation_id=conversation_id,
        )
    except HANDLED_ERRORS as e:
        raise to_http_exception(e) from e
    if memo is None:
        raise HTTPException(status_code=404, detail={"error": "not_found", "message": "memo not found", "entity": "memo"})
    return MemoResponse(**memo.to_dict())


@router.delete("/conversations/{conversation_id}/memo", status_code=204, response_class=Response)
async def delete_memo(
    conversation_id: str,
    request: Request,
    user_id: Optional[str] = Query(default=None, description="用户ID（可选，必须与登录用户一致）"),
    current_user_id: str = Depends(get_authenticated_user_id),
    service: MemoService = Depends(get_memo_service),
) -> Response:
    # Idempotent: deleting a memo that does not exist is still 204.
    try:
        await service.delete_memo(
            requester_id=current_user_id,
            user_id=user_id or current_user_id,
            conversation_id=conversation_id,
            request_id=_request_id(request),
        )
    except HANDLED_ERRORS as e:
        raise to_http_exception(e) from e
    return Response(status_code=204)
