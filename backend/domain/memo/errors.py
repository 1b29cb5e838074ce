from __future__ import annotations

from typing import Optional


class MemoError(Exception):
    """Root of the memo error taxonomy; routers map each subclass to one status code."""


class MemoValidationError(MemoError, ValueError):
    """Content rejected before any persistence attempt."""

    def __init__(self, message: str, *, field: str = "content") -> None:
        super().__init__(message)
        self.field = field


class MemoReferenceNotFoundError(MemoError, LookupError):
    """The referenced user or conversation does not exist."""

    def __init__(self, message: str, *, entity: str, entity_id: Optional[str] = None) -> None:
        super().__init__(message)
        self.entity = entity
        self.entity_id = entity_id


class MemoAccessDeniedError(MemoError, PermissionError):
    """Requesting identity is not the memo owner."""


class MemoStoreUnavailableError(MemoError, ConnectionError):
    """Underlying storage could not be reached. Never retried internally."""
