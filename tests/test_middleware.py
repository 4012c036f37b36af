"""미들웨어 테스트 — 요청 제한, CSRF, 보안 헤더, 로그 마스킹.

Middleware tests. Rate limiting and CSRF run against a small standalone
FastAPI app so the counters start empty in every test.
"""

import time

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from app.config import settings
from app.middleware.axiom_logging import mask_sensitive
from app.middleware.csrf import CSRFMiddleware, generate_csrf_token, validate_csrf_token
from app.middleware.rate_limit import FixedWindowLimiter, RateLimitMiddleware
from app.utils.jwt import create_access_token


def _mini_app(*middleware) -> FastAPI:
    mini = FastAPI()

    @mini.get("/api/ping")
    async def ping() -> dict:
        return {"ok": True}

    @mini.post("/api/items")
    async def create_item() -> dict:
        return {"created": True}

    @mini.post("/api/v1/auth/login")
    async def login() -> dict:
        return {"token": "x"}

    for cls, kwargs in middleware:
        mini.add_middleware(cls, **kwargs)
    return mini


def _client(app: FastAPI) -> AsyncClient:
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")


class TestFixedWindowLimiter:
    """고정 창 카운터 테스트."""

    def test_counts_and_resets(self):
        limiter = FixedWindowLimiter()
        assert limiter.hit("k", 2, 60, now=1000.0) == (True, 1, 1060)
        assert limiter.hit("k", 2, 60, now=1001.0) == (True, 0, 1060)
        assert limiter.hit("k", 2, 60, now=1002.0) == (False, 0, 1060)
        # 창이 지나면 초기화 — New window after expiry
        assert limiter.hit("k", 2, 60, now=1060.0) == (True, 1, 1120)

    def test_keys_are_independent(self):
        limiter = FixedWindowLimiter()
        limiter.hit("a", 1, 60, now=0.0)
        allowed, _, _ = limiter.hit("b", 1, 60, now=0.0)
        assert allowed


class TestRateLimitMiddleware:
    """요청 제한 미들웨어 테스트."""

    @pytest.fixture(autouse=True)
    def _enable(self, monkeypatch):
        monkeypatch.setattr(settings, "RATE_LIMIT_ENABLED", True)

    async def test_default_limit(self):
        """기본 100회 초과 시 429."""
        app = _mini_app((RateLimitMiddleware, {}))
        async with _client(app) as ac:
            for _ in range(100):
                res = await ac.get("/api/ping")
                assert res.status_code == 200
            res = await ac.get("/api/ping")
        assert res.status_code == 429
        assert res.headers["X-RateLimit-Limit"] == "100"
        assert res.headers["X-RateLimit-Remaining"] == "0"
        assert int(res.headers["Retry-After"]) >= 1

    async def test_headers_on_success(self):
        app = _mini_app((RateLimitMiddleware, {"requests": 5}))
        async with _client(app) as ac:
            res = await ac.get("/api/ping")
        assert res.headers["X-RateLimit-Limit"] == "5"
        assert res.headers["X-RateLimit-Remaining"] == "4"
        assert int(res.headers["X-RateLimit-Reset"]) > int(time.time())

    async def test_paths_counted_separately(self):
        app = _mini_app((RateLimitMiddleware, {"requests": 1}))
        async with _client(app) as ac:
            assert (await ac.get("/api/ping")).status_code == 200
            assert (await ac.post("/api/items")).status_code == 200
            assert (await ac.get("/api/ping")).status_code == 429

    async def test_auth_paths_use_stricter_budget(self):
        app = _mini_app((RateLimitMiddleware, {"auth_requests": 2}))
        async with _client(app) as ac:
            for _ in range(2):
                assert (await ac.post("/api/v1/auth/login")).status_code == 200
            res = await ac.post("/api/v1/auth/login")
        assert res.status_code == 429
        assert res.headers["X-RateLimit-Limit"] == "2"

    async def test_disabled(self, monkeypatch):
        monkeypatch.setattr(settings, "RATE_LIMIT_ENABLED", False)
        app = _mini_app((RateLimitMiddleware, {"requests": 1}))
        async with _client(app) as ac:
            await ac.get("/api/ping")
            res = await ac.get("/api/ping")
        assert res.status_code == 200
        assert "X-RateLimit-Limit" not in res.headers


class TestCsrfTokens:
    """CSRF 토큰 생성/검증 테스트."""

    def test_valid_for_issuing_user_only(self):
        token = generate_csrf_token("user-1")
        assert validate_csrf_token(token, "user-1")
        assert not validate_csrf_token(token, "user-2")

    def test_expiry(self):
        issued = 1_000_000.0
        token = generate_csrf_token("user-1", now=issued)
        ttl = settings.CSRF_TOKEN_EXPIRE_MINUTES * 60
        assert validate_csrf_token(token, "user-1", now=issued + ttl)
        assert not validate_csrf_token(token, "user-1", now=issued + ttl + 1)

    def test_malformed(self):
        assert not validate_csrf_token(None, "user-1")
        assert not validate_csrf_token("abc", "user-1")
        assert not validate_csrf_token("a:notanumber:c", "user-1")

    def test_tampered_signature(self):
        nonce, issued, signature = generate_csrf_token("user-1").split(":")
        forged = f"{nonce}:{issued}:{'0' * len(signature)}"
        assert not validate_csrf_token(forged, "user-1")


class TestCsrfMiddleware:
    """CSRF 미들웨어 테스트."""

    @pytest.fixture(autouse=True)
    def _enable(self, monkeypatch):
        monkeypatch.setattr(settings, "CSRF_PROTECTION_ENABLED", True)

    def _bearer(self, user_id: str = "user-1") -> dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token({'sub': user_id})}"}

    async def test_missing_token_rejected(self):
        async with _client(_mini_app((CSRFMiddleware, {}))) as ac:
            res = await ac.post("/api/items", headers=self._bearer())
        assert res.status_code == 403

    async def test_valid_token_accepted(self):
        headers = {**self._bearer(), "X-CSRF-Token": generate_csrf_token("user-1")}
        async with _client(_mini_app((CSRFMiddleware, {}))) as ac:
            res = await ac.post("/api/items", headers=headers)
        assert res.status_code == 200

    async def test_token_of_other_user_rejected(self):
        headers = {**self._bearer("user-1"), "X-CSRF-Token": generate_csrf_token("user-2")}
        async with _client(_mini_app((CSRFMiddleware, {}))) as ac:
            res = await ac.post("/api/items", headers=headers)
        assert res.status_code == 403

    async def test_safe_methods_and_exempt_paths(self):
        async with _client(_mini_app((CSRFMiddleware, {}))) as ac:
            assert (await ac.get("/api/ping", headers=self._bearer())).status_code == 200
            assert (await ac.post("/api/v1/auth/login", headers=self._bearer())).status_code == 200

    async def test_unauthenticated_passes_through(self):
        async with _client(_mini_app((CSRFMiddleware, {}))) as ac:
            res = await ac.post("/api/items")
        assert res.status_code == 200


class TestSecurityHeaders:
    """보안 헤더 테스트 (메인 앱)."""

    async def test_headers_present(self, client: AsyncClient):
        res = await client.get("/health")
        assert res.json() == {"status": "ok"}
        assert res.headers["X-Content-Type-Options"] == "nosniff"
        assert res.headers["X-Frame-Options"] == "DENY"
        assert res.headers["Referrer-Policy"] == "strict-origin-when-cross-origin"
        assert "Strict-Transport-Security" not in res.headers

    async def test_hsts_in_production(self, client: AsyncClient, monkeypatch):
        monkeypatch.setattr(settings, "ENVIRONMENT", "production")
        res = await client.get("/health")
        assert res.headers["Strict-Transport-Security"].startswith("max-age=")


class TestMaskSensitive:
    """로그 마스킹 테스트."""

    def test_nested_fields(self):
        data = {
            "email": "a@shiftboard.jp",
            "password": "secret123",
            "profile": {"refresh_token": "abc", "name": "A"},
            "items": [{"api_key": "k"}],
        }
        assert mask_sensitive(data) == {
            "email": "a@shiftboard.jp",
            "password": "***",
            "profile": {"refresh_token": "***", "name": "A"},
            "items": [{"api_key": "***"}],
        }

    def test_depth_limit(self):
        deep = {"a": {"b": {"c": {"d": {"e": {"f": {"g": 1}}}}}}}
        masked = mask_sensitive(deep)
        assert masked["a"]["b"]["c"]["d"]["e"]["f"] == "..."
