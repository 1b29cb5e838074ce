import os
from typing import Optional


def _get_env_int(key: str, default: int) -> int:
    raw = os.getenv(key)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"环境变量 {key} 需要整数值，但当前为 {raw}") from exc


def get_postgres_dsn() -> Optional[str]:
    """Accessor for the Postgres DSN backing users, conversations and memos.

    Returns None when neither POSTGRES_DSN nor POSTGRES_HOST is set; callers
    then fall back to in-memory stores. `.env` loading is centralized in
    `config/settings.py`, so only environment variables are read here.
    """

    dsn = (os.getenv("POSTGRES_DSN") or "").strip()
    if dsn:
        return dsn

    host = (os.getenv("POSTGRES_HOST") or "").strip()
    if not host:
        return None

    port = _get_env_int("POSTGRES_PORT", 5432)
    user = os.getenv("POSTGRES_USER", "postgres")
    password = os.getenv("POSTGRES_PASSWORD", "postgres")
    db = os.getenv("POSTGRES_DB", "memo_chat")
    return f"postgresql://{user}:{password}@{host}:{port}/{db}"


def get_postgres_pool_size() -> tuple[int, int]:
    return (
        max(1, _get_env_int("POSTGRES_POOL_MIN", 1)),
        max(1, _get_env_int("POSTGRES_POOL_MAX", 10)),
    )
