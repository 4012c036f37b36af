"""인증 API 테스트 — 회원가입, 로그인, 토큰 갱신, 로그아웃, /me, CSRF 토큰.

Auth API tests — Registration, login, token refresh, logout, /me and the
CSRF token endpoint.
"""

from httpx import AsyncClient
from sqlalchemy import select

from app.middleware.csrf import validate_csrf_token
from app.models.audit_log import AuditLog
from app.models.store import Store
from tests.conftest import auth_header

AUTH = "/api/v1/auth"


# ===== Register =====

class TestRegister:
    """회원가입 테스트."""

    async def test_register_into_store(self, client: AsyncClient, store):
        """지정 매장으로 가입 — STAFF 역할, 201."""
        res = await client.post(f"{AUTH}/register", json={
            "name": "New Staff",
            "email": "New.Staff@shiftboard.jp",
            "password": "password123",
            "store_id": str(store.id),
        })
        assert res.status_code == 201
        user = res.json()["user"]
        assert user["role"] == "STAFF"
        assert user["email"] == "new.staff@shiftboard.jp"
        assert user["store_name"] == "Test Store"

    async def test_register_default_store(self, client: AsyncClient, db):
        """store_id 없이 가입하면 기본 매장이 생성됩니다."""
        res = await client.post(f"{AUTH}/register", json={
            "name": "Walk In",
            "email": "walkin@shiftboard.jp",
            "password": "password123",
        })
        assert res.status_code == 201
        stores = (await db.execute(select(Store))).scalars().all()
        assert len(stores) == 1

    async def test_register_duplicate_email(self, client: AsyncClient, staff_user):
        """중복 이메일은 409."""
        res = await client.post(f"{AUTH}/register", json={
            "name": "Dup",
            "email": "STAFF@shiftboard.jp",
            "password": "password123",
        })
        assert res.status_code == 409

    async def test_register_unknown_store(self, client: AsyncClient):
        """존재하지 않는 매장은 404."""
        res = await client.post(f"{AUTH}/register", json={
            "name": "Lost",
            "email": "lost@shiftboard.jp",
            "password": "password123",
            "store_id": "00000000-0000-0000-0000-000000000001",
        })
        assert res.status_code == 404

    async def test_register_short_password(self, client: AsyncClient):
        """8자 미만 비밀번호는 검증 오류(400)."""
        res = await client.post(f"{AUTH}/register", json={
            "name": "Short",
            "email": "short@shiftboard.jp",
            "password": "short",
        })
        assert res.status_code == 400
        assert "errors" in res.json()


# ===== Login =====

class TestLogin:
    """로그인 테스트."""

    async def test_login_success(self, client: AsyncClient, db, staff_user):
        """로그인 성공 — 토큰 쌍과 USER_LOGIN 감사 로그."""
        res = await client.post(f"{AUTH}/login", json={
            "email": "staff@shiftboard.jp",
            "password": "staff1234",
        })
        assert res.status_code == 200
        data = res.json()
        assert data["token_type"] == "bearer"
        assert data["access_token"] and data["refresh_token"]

        entries = (await db.execute(select(AuditLog))).scalars().all()
        assert [e.action_type for e in entries] == ["USER_LOGIN"]

    async def test_login_email_case_insensitive(self, client: AsyncClient, staff_user):
        res = await client.post(f"{AUTH}/login", json={
            "email": "Staff@ShiftBoard.jp",
            "password": "staff1234",
        })
        assert res.status_code == 200

    async def test_login_wrong_password(self, client: AsyncClient, staff_user):
        res = await client.post(f"{AUTH}/login", json={
            "email": "staff@shiftboard.jp",
            "password": "wrong-password",
        })
        assert res.status_code == 401

    async def test_login_inactive_user(self, client: AsyncClient, db, staff_user):
        """비활성 계정 로그인 실패."""
        staff_user.is_active = False
        await db.flush()
        res = await client.post(f"{AUTH}/login", json={
            "email": "staff@shiftboard.jp",
            "password": "staff1234",
        })
        assert res.status_code == 401


# ===== Token Refresh / Logout =====

class TestTokenLifecycle:
    """토큰 갱신 및 로그아웃 테스트."""

    async def _login(self, client: AsyncClient) -> dict:
        res = await client.post(f"{AUTH}/login", json={
            "email": "staff@shiftboard.jp",
            "password": "staff1234",
        })
        return res.json()

    async def test_refresh_rotates_token(self, client: AsyncClient, staff_user):
        """갱신 후 이전 리프레시 토큰은 사용할 수 없습니다."""
        tokens = await self._login(client)
        res = await client.post(f"{AUTH}/refresh", json={"refresh_token": tokens["refresh_token"]})
        assert res.status_code == 200
        new_tokens = res.json()
        assert new_tokens["refresh_token"] != tokens["refresh_token"]

        again = await client.post(f"{AUTH}/refresh", json={"refresh_token": tokens["refresh_token"]})
        assert again.status_code == 401

    async def test_refresh_invalid_token(self, client: AsyncClient):
        res = await client.post(f"{AUTH}/refresh", json={"refresh_token": "invalid.token.here"})
        assert res.status_code == 401

    async def test_access_token_rejected_as_refresh(self, client: AsyncClient, staff_user):
        tokens = await self._login(client)
        res = await client.post(f"{AUTH}/refresh", json={"refresh_token": tokens["access_token"]})
        assert res.status_code == 401

    async def test_logout_revokes_refresh_token(self, client: AsyncClient, db, staff_user):
        tokens = await self._login(client)
        res = await client.post(f"{AUTH}/logout", json={"refresh_token": tokens["refresh_token"]})
        assert res.status_code == 204

        res = await client.post(f"{AUTH}/refresh", json={"refresh_token": tokens["refresh_token"]})
        assert res.status_code == 401
        actions = (await db.execute(select(AuditLog.action_type))).scalars().all()
        assert "USER_LOGOUT" in actions

    async def test_multiple_sessions(self, client: AsyncClient, staff_user):
        """여러 세션의 리프레시 토큰은 서로 독립적입니다."""
        first = await self._login(client)
        second = await self._login(client)
        await client.post(f"{AUTH}/logout", json={"refresh_token": first["refresh_token"]})
        res = await client.post(f"{AUTH}/refresh", json={"refresh_token": second["refresh_token"]})
        assert res.status_code == 200


# ===== Me / CSRF =====

class TestMe:
    """/me 및 CSRF 토큰 테스트."""

    async def test_me(self, client: AsyncClient, staff_user, staff_token):
        res = await client.get(f"{AUTH}/me", headers=auth_header(staff_token))
        assert res.status_code == 200
        data = res.json()
        assert data["email"] == "staff@shiftboard.jp"
        assert data["store_name"] == "Test Store"
        assert data["is_super_admin"] is False

    async def test_me_without_token(self, client: AsyncClient):
        res = await client.get(f"{AUTH}/me")
        assert res.status_code == 401

    async def test_me_with_garbage_token(self, client: AsyncClient):
        res = await client.get(f"{AUTH}/me", headers=auth_header("not-a-jwt"))
        assert res.status_code == 401

    async def test_me_inactive_user(self, client: AsyncClient, db, staff_user, staff_token):
        staff_user.is_active = False
        await db.flush()
        res = await client.get(f"{AUTH}/me", headers=auth_header(staff_token))
        assert res.status_code == 401

    async def test_csrf_token_bound_to_user(self, client: AsyncClient, staff_user, staff_token):
        res = await client.get(f"{AUTH}/csrf-token", headers=auth_header(staff_token))
        assert res.status_code == 200
        data = res.json()
        assert data["expires_in"] == 3600
        assert validate_csrf_token(data["csrf_token"], str(staff_user.id))
        assert not validate_csrf_token(data["csrf_token"], "someone-else")
