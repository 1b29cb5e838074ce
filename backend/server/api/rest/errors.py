from __future__ import annotations

from fastapi import HTTPException

from domain.conversation import (
    ConversationAccessDeniedError,
    ConversationForkError,
    ConversationNotFoundError,
)
from domain.memo import (
    MemoAccessDeniedError,
    MemoReferenceNotFoundError,
    MemoStoreUnavailableError,
    MemoValidationError,
)


def to_http_exception(exc: Exception) -> HTTPException:
    """Map a domain error to the HTTP status the client uses to pick its messaging.

    `detail.error` is one of: validation_error, not_found, forbidden, unavailable.
    Unknown exceptions are not mapped; callers re-raise them.
    """
    if isinstance(exc, MemoValidationError):
        return HTTPException(
            status_code=400,
            detail={"error": "validation_error", "message": str(exc), "field": exc.field},
        )
    if isinstance(exc, ConversationForkError):
        return HTTPException(
            status_code=400,
            detail={"error": "validation_error", "message": str(exc), "field": "parent_id"},
        )
    if isinstance(exc, MemoReferenceNotFoundError):
        return HTTPException(
            status_code=404,
            detail={"error": "not_found", "message": str(exc), "entity": exc.entity},
        )
    if isinstance(exc, ConversationNotFoundError):
        return HTTPException(
            status_code=404,
            detail={"error": "not_found", "message": str(exc), "entity": "conversation"},
        )
    if isinstance(exc, (MemoAccessDeniedError, ConversationAccessDeniedError)):
        return HTTPException(status_code=403, detail={"error": "forbidden", "message": str(exc)})
    if isinstance(exc, MemoStoreUnavailableError):
        return HTTPException(status_code=503, detail={"error": "unavailable", "message": str(exc)})
    raise TypeError(f"unmapped error type: {type(exc).__name__}")


HANDLED_ERRORS = (
    MemoValidationError,
    MemoReferenceNotFoundError,
    MemoAccessDeniedError,
    MemoStoreUnavailableError,
    ConversationForkError,
    ConversationNotFoundError,
    ConversationAccessDeniedError,
)
