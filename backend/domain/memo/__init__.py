from __future__ import annotations

from domain.memo.errors import (
    MemoAccessDeniedError,
    MemoError,
    MemoReferenceNotFoundError,
    MemoStoreUnavailableError,
    MemoValidationError,
)
from domain.memo.memo import Memo
from domain.memo.policy import DEFAULT_MEMO_MAX_CHARS, MemoPolicy, normalize_memo_content

__all__ = [
    "DEFAULT_MEMO_MAX_CHARS",
    "Memo",
    "MemoAccessDeniedError",
    "MemoError",
    "MemoPolicy",
    "MemoReferenceNotFoundError",
    "MemoStoreUnavailableError",
    "MemoValidationError",
    "normalize_memo_content",
]
