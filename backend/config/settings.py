import os

from dotenv import load_dotenv

from domain.memo import DEFAULT_MEMO_MAX_CHARS

# Service-side settings: HTTP/runtime switches, auth and memo rules.
# Connection details for Postgres live in `config/database.py`.
load_dotenv(override=True)


def _get_env_int(key: str, default: int) -> int:
    """读取整型环境变量，未设置时返回默认值"""
    raw = os.getenv(key)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"环境变量 {key} 需要整数值，但实际为 {raw}") from exc


def _get_env_bool(key: str, default: bool) -> bool:
    """读取布尔型环境变量，支持 true/false/1/0 等表达"""
    raw = os.getenv(key)
    if raw is None or raw == "":
        return default
    return raw.strip().lower() in {"1", "true", "y", "yes", "on"}


# ===== FastAPI / Uvicorn 运行参数 =====

SERVER_HOST = os.getenv("SERVER_HOST", "0.0.0.0")  # 服务监听地址
SERVER_PORT = _get_env_int("SERVER_PORT", 8000)  # 服务端口
SERVER_RELOAD = _get_env_bool("SERVER_RELOAD", False)  # 热重载开关
SERVER_LOG_LEVEL = os.getenv("SERVER_LOG_LEVEL", "info")  # 日志等级
SERVER_WORKERS = _get_env_int("SERVER_WORKERS", 2) or 2

UVICORN_CONFIG = {
    "host": SERVER_HOST,
    "port": SERVER_PORT,
    "reload": SERVER_RELOAD,
    "log_level": SERVER_LOG_LEVEL,
    "workers": SERVER_WORKERS,
}

# ===== Memo =====

MEMO_MAX_CHARS = _get_env_int("MEMO_MAX_CHARS", DEFAULT_MEMO_MAX_CHARS) or DEFAULT_MEMO_MAX_CHARS
MEMO_STRIP_WHITESPACE = _get_env_bool("MEMO_STRIP_WHITESPACE", False)

# ===== Auth =====
#
# - "header" (default): an upstream gateway injects the authenticated user id
#   in AUTH_USER_ID_HEADER.
# - "jwt": Authorization: Bearer <jwt>, verified with AUTH_JWT_SECRET; user id
#   taken from the "sub" or "user_id" claim.

AUTH_MODE = os.getenv("AUTH_MODE", "header").strip().lower() or "header"
AUTH_USER_ID_HEADER = os.getenv("AUTH_USER_ID_HEADER", "x-user-id").strip() or "x-user-id"
AUTH_JWT_SECRET = os.getenv("AUTH_JWT_SECRET", "").strip()
_algs = os.getenv("AUTH_JWT_ALGORITHMS", "HS256").strip()
AUTH_JWT_ALGORITHMS = tuple(a.strip() for a in _algs.split(",") if a.strip()) or ("HS256",)

# Dev convenience: register an authenticated identity in the user directory on
# first request. Creating a conversation always registers its owner.
AUTO_REGISTER_USERS = _get_env_bool("AUTO_REGISTER_USERS", False)

# ===== Observability =====

CORRELATION_ID_HEADER = os.getenv("CORRELATION_ID_HEADER", "X-Correlation-ID").strip() or "X-Correlation-ID"

# diskSpace health component: DOWN when free space on HEALTH_DISK_PATH drops
# below HEALTH_DISK_MIN_FREE_MB.
HEALTH_DISK_PATH = os.getenv("HEALTH_DISK_PATH", ".").strip() or "."
HEALTH_DISK_MIN_FREE_MB = max(0, _get_env_int("HEALTH_DISK_MIN_FREE_MB", 10))
