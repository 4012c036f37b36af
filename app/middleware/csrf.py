"""CSRF 보호 미들웨어 및 토큰 유틸리티.

CSRF protection. Tokens have the form ``random:timestamp:signature`` where
the signature is HMAC-SHA256 over ``user_id:random:timestamp`` with
CSRF_SECRET, so a token is only valid for the user it was issued to and
only for CSRF_TOKEN_EXPIRE_MINUTES.

When CSRF_PROTECTION_ENABLED is set, state-changing ``/api/`` requests
(everything except GET, HEAD and OPTIONS) must send the token in the
X-CSRF-Token header. Login, registration and token refresh are exempt
because no user is authenticated yet.
"""

import hashlib
import hmac
import logging
import secrets
import time
from typing import Any

import jwt
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from app.config import settings
from app.utils.jwt import decode_token

logger = logging.getLogger(__name__)

CSRF_HEADER: str = "X-CSRF-Token"
SAFE_METHODS: frozenset[str] = frozenset({"GET", "HEAD", "OPTIONS"})
EXEMPT_PATHS: frozenset[str] = frozenset({
    "/api/v1/auth/login",
    "/api/v1/auth/register",
    "/api/v1/auth/refresh",
})


def _sign(user_id: str, nonce: str, issued_at: int) -> str:
    message: bytes = f"{user_id}:{nonce}:{issued_at}".encode("utf-8")
    return hmac.new(settings.CSRF_SECRET.encode("utf-8"), message, hashlib.sha256).hexdigest()


def generate_csrf_token(user_id: str, now: float | None = None) -> str:
    """사용자에게 묶인 CSRF 토큰을 생성합니다."""
    nonce: str = secrets.token_hex(16)
    issued_at: int = int(time.time() if now is None else now)
    return f"{nonce}:{issued_at}:{_sign(str(user_id), nonce, issued_at)}"


def validate_csrf_token(token: str | None, user_id: str, now: float | None = None) -> bool:
    """CSRF 토큰의 서명과 유효 기간을 검증합니다."""
    if not token:
        return False
    parts: list[str] = token.split(":")
    if len(parts) != 3:
        return False
    nonce, issued_raw, signature = parts
    try:
        issued_at: int = int(issued_raw)
    except ValueError:
        return False
    age: float = (time.time() if now is None else now) - issued_at
    if age < 0 or age > settings.CSRF_TOKEN_EXPIRE_MINUTES * 60:
        return False
    return hmac.compare_digest(signature, _sign(str(user_id), nonce, issued_at))


def _bearer_user_id(request: Request) -> str | None:
    header: str = request.headers.get("authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token:
        return None
    try:
        payload: dict = decode_token(token)
    except jwt.InvalidTokenError:
        return None
    return payload.get("sub")


class CSRFMiddleware(BaseHTTPMiddleware):
    """상태 변경 API 요청의 X-CSRF-Token 헤더를 검증하는 미들웨어."""

    def __init__(self, app: Any) -> None:
        super().__init__(app)

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path: str = request.url.path
        if (
            not settings.CSRF_PROTECTION_ENABLED
            or request.method in SAFE_METHODS
            or not path.startswith("/api/")
            or path in EXEMPT_PATHS
        ):
            return await call_next(request)

        user_id: str | None = _bearer_user_id(request)
        # 인증 실패는 라우터의 401 처리에 맡김 — Unauthenticated requests get 401 downstream
        if user_id is None:
            return await call_next(request)

        if not validate_csrf_token(request.headers.get(CSRF_HEADER), user_id):
            logger.warning("CSRF validation failed for user %s on %s %s", user_id, request.method, path)
            return JSONResponse(status_code=403, content={"detail": "Invalid or missing CSRF token"})
        return await call_next(request)
