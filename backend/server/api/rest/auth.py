from __future__ import annotations

import hmac
import logging
import time
from typing import Any, Optional

import jwt
from fastapi import Header, Request

from config.settings import (
    ADMIN_API_KEY,
    AUTH_JWT_ALGORITHMS,
    AUTH_JWT_SECRET,
    AUTH_JWT_TTL_S,
    AUTH_TRUST_USER_HEADER,
    AUTH_USER_ID_HEADER,
)
from domain.errors import AuthenticationRequiredError

logger = logging.getLogger(__name__)


def _bearer_token(authorization: Optional[str]) -> str:
    raw = (authorization or "").strip()
    if not raw:
        return ""
    if raw.lower().startswith("bearer "):
        return raw.split(" ", 1)[1].strip()
    return raw


def _positive_int(value: Any) -> Optional[int]:
    s = str(value or "").strip()
    if not (s.isascii() and s.isdigit()):
        return None
    parsed = int(s)
    return parsed if parsed > 0 else None


def issue_token(user_id: int) -> Optional[str]:
    """Sign an access token for the mini-app; None when token auth is disabled."""
    if not AUTH_JWT_SECRET:
        return None
    now = int(time.time())
    claims = {"sub": str(int(user_id)), "iat": now, "exp": now + int(AUTH_JWT_TTL_S)}
    return jwt.encode(claims, AUTH_JWT_SECRET, algorithm=AUTH_JWT_ALGORITHMS[0])


def _decode_token(token: str) -> dict:
    try:
        return jwt.decode(token, AUTH_JWT_SECRET, algorithms=list(AUTH_JWT_ALGORITHMS))
    except jwt.ExpiredSignatureError as exc:
        raise AuthenticationRequiredError("token expired") from exc
    except jwt.InvalidTokenError as exc:
        raise AuthenticationRequiredError("invalid token") from exc


def resolve_user_id(*, authorization: Optional[str], header_user_id: Optional[str]) -> Optional[int]:
    """Resolve the caller's internal user id, or None for anonymous callers.

    Priority:
    1) If AUTH_TRUST_USER_HEADER is enabled, accept the id injected by the gateway.
    2) If AUTH_JWT_SECRET is set, read "sub" from a bearer token.
    A presented but invalid token is rejected rather than treated as anonymous.
    """
    if AUTH_TRUST_USER_HEADER and header_user_id:
        uid = _positive_int(header_user_id)
        if uid is None:
            raise AuthenticationRequiredError(f"invalid {AUTH_USER_ID_HEADER} header")
        return uid

    token = _bearer_token(authorization)
    if not token or not AUTH_JWT_SECRET:
        return None
    claims = _decode_token(token)
    uid = _positive_int(claims.get("sub") or claims.get("user_id"))
    if uid is None:
        raise AuthenticationRequiredError("invalid token: missing user id")
    return uid


def get_current_user_id(request: Request) -> Optional[int]:
    """FastAPI dependency; the sync façade rejects None on watch-state routes."""
    return resolve_user_id(
        authorization=request.headers.get("authorization"),
        header_user_id=request.headers.get(AUTH_USER_ID_HEADER),
    )


def require_admin(authorization: Optional[str] = Header(default=None)) -> None:
    """Admin gate: accept "Bearer <ADMIN_API_KEY>". Unset key disables admin routes."""
    if not ADMIN_API_KEY:
        raise AuthenticationRequiredError("admin access is disabled")
    presented = _bearer_token(authorization).encode("utf-8")
    if not hmac.compare_digest(presented, ADMIN_API_KEY.encode("utf-8")):
        raise AuthenticationRequiredError("admin credentials required")
