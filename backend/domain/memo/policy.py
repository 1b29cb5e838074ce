from __future__ import annotations

from dataclasses import dataclass

from domain.memo.errors import MemoValidationError

DEFAULT_MEMO_MAX_CHARS = 2000


@dataclass(frozen=True)
class MemoPolicy:
    max_chars: int = DEFAULT_MEMO_MAX_CHARS
    # Opt-in: strip surrounding whitespace from what gets stored.
    strip_whitespace: bool = False


def normalize_memo_content(content: object, *, policy: MemoPolicy) -> str:
    """Return the content to persist, or raise MemoValidationError.

    Length is counted in characters (code points), not bytes, on the content
    exactly as the caller sent it.
    """
    if not isinstance(content, str):
        raise MemoValidationError("content must be a string")
    if len(content) > int(policy.max_chars):
        raise MemoValidationError(
            f"content exceeds {int(policy.max_chars)} characters (got {len(content)})"
        )
    if not content.strip():
        raise MemoValidationError("content is required")
    return content.strip() if policy.strip_whitespace else content
