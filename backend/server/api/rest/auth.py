from __future__ import annotations

from typing import Mapping, Optional

import jwt
from fastapi import Header, HTTPException, Request

from config import settings


def _bearer_token(authorization: Optional[str]) -> str:
    raw = (authorization or "").strip()
    if not raw:
        return ""
    if raw.lower().startswith("bearer "):
        return raw.split(" ", 1)[1].strip()
    return raw


def _decode_jwt(token: str) -> dict:
    secret = settings.AUTH_JWT_SECRET
    if not secret:
        raise HTTPException(status_code=500, detail="JWT secret not configured")
    try:
        return jwt.decode(token, secret, algorithms=list(settings.AUTH_JWT_ALGORITHMS))
    except jwt.PyJWTError as exc:
        raise HTTPException(status_code=401, detail="Invalid token") from exc


def read_user_id_header(headers: Mapping[str, str]) -> Optional[str]:
    name = (settings.AUTH_USER_ID_HEADER or "x-user-id").strip()
    if not name:
        return None
    for k, v in headers.items():
        if k.lower() == name.lower() and v and v.strip():
            return v.strip()
    return None


def resolve_user_id(*, authorization: Optional[str], header_user_id: Optional[str]) -> str:
    """Resolve the authenticated user id for this request.

    - jwt mode: only a valid signed token counts; identity from "sub" or "user_id".
    - header mode: trust the id injected by the upstream gateway.
    """
    if (settings.AUTH_MODE or "").lower() == "jwt":
        token = _bearer_token(authorization)
        if not token:
            raise HTTPException(status_code=401, detail="Unauthorized")
        claims = _decode_jwt(token)
        uid = claims.get("sub") or claims.get("user_id")
        if uid:
            return str(uid)
        raise HTTPException(status_code=401, detail="Invalid token: missing user_id")

    if header_user_id:
        return str(header_user_id)
    raise HTTPException(
        status_code=401,
        detail=f"Unauthorized: missing '{settings.AUTH_USER_ID_HEADER}' header",
    )


def get_current_user_id(
    request: Request,
    authorization: Optional[str] = Header(default=None),
) -> str:
    return resolve_user_id(
        authorization=authorization,
        header_user_id=read_user_id_header(request.headers),
    )
