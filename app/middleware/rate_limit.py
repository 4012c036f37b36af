"""요청 제한 미들웨어 — 고정 창(fixed window) 방식, 프로세스 메모리 저장.

Rate limiting middleware. Counts requests per ``ip:path`` in fixed windows
(default 100 per 60 seconds). Login and registration share a stricter
per-ip budget. Every limited response carries X-RateLimit-Limit,
X-RateLimit-Remaining and X-RateLimit-Reset headers; exceeding the budget
returns 429 with Retry-After.
"""

import logging
import time
from typing import Any

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from app.config import settings
from app.services.audit_service import client_ip

logger = logging.getLogger(__name__)

# 엄격한 제한 경로 — Paths sharing the stricter auth budget
AUTH_PATHS: frozenset[str] = frozenset({"/api/v1/auth/login", "/api/v1/auth/register"})
# 제한 제외 경로 — Paths never limited
_SKIP_PATHS: frozenset[str] = frozenset({"/health", "/docs", "/redoc", "/openapi.json"})


class FixedWindowLimiter:
    """키별 고정 창 카운터.

    In-memory fixed window counter. Expired windows are pruned lazily.
    """

    def __init__(self) -> None:
        self._windows: dict[str, tuple[float, int]] = {}
        self._last_prune: float = 0.0

    def hit(self, key: str, limit: int, window: int, now: float | None = None) -> tuple[bool, int, int]:
        """요청 1건을 기록합니다.

        Returns:
            tuple[bool, int, int]: (허용 여부, 남은 횟수, 창 종료 UNIX 초)
                                   (allowed, remaining, reset epoch seconds)
        """
        now = time.time() if now is None else now
        self._prune(now, window)
        started, count = self._windows.get(key, (now, 0))
        if now - started >= window:
            started, count = now, 0
        count += 1
        self._windows[key] = (started, count)
        reset_at: int = int(started + window)
        return count <= limit, max(0, limit - count), reset_at

    def _prune(self, now: float, window: int) -> None:
        if now - self._last_prune < window:
            return
        self._last_prune = now
        for key in [k for k, (started, _) in self._windows.items() if now - started >= window]:
            del self._windows[key]

    def reset(self) -> None:
        self._windows.clear()


class RateLimitMiddleware(BaseHTTPMiddleware):
    """ip:path 단위 요청 제한 미들웨어.

    Limits are read from settings unless overridden in the constructor.
    RATE_LIMIT_ENABLED is checked on every request so it can be toggled at
    runtime.
    """

    def __init__(
        self,
        app: Any,
        requests: int | None = None,
        window_seconds: int | None = None,
        auth_requests: int | None = None,
    ) -> None:
        super().__init__(app)
        self.requests: int = requests or settings.RATE_LIMIT_REQUESTS
        self.window_seconds: int = window_seconds or settings.RATE_LIMIT_WINDOW_SECONDS
        self.auth_requests: int = auth_requests or settings.AUTH_RATE_LIMIT_REQUESTS
        self.limiter: FixedWindowLimiter = FixedWindowLimiter()

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path: str = request.url.path
        if not settings.RATE_LIMIT_ENABLED or path in _SKIP_PATHS or request.method == "OPTIONS":
            return await call_next(request)

        ip: str = client_ip(request) or "unknown"
        if path in AUTH_PATHS:
            key, limit = f"{ip}:auth", self.auth_requests
        else:
            key, limit = f"{ip}:{path}", self.requests

        allowed, remaining, reset_at = self.limiter.hit(key, limit, self.window_seconds)
        headers: dict[str, str] = {
            "X-RateLimit-Limit": str(limit),
            "X-RateLimit-Remaining": str(remaining),
            "X-RateLimit-Reset": str(reset_at),
        }
        if not allowed:
            retry_after: int = max(1, reset_at - int(time.time()))
            logger.warning("Rate limit exceeded for %s on %s", ip, path)
            return JSONResponse(
                status_code=429,
                content={"detail": "Too many requests, please try again later"},
                headers={**headers, "Retry-After": str(retry_after)},
            )

        response: Response = await call_next(request)
        response.headers.update(headers)
        return response
