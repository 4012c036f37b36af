"""매장 설정 API 테스트 — 설정 조회/수정, 백업/복원, 매장 정보.

Store settings API tests.
"""

from httpx import AsyncClient
from sqlalchemy import select

from app.models.audit_log import AuditLog
from tests.conftest import auth_header, create_shift, tomorrow_at

ADMIN = "/api/v1/admin"


class TestStoreSettings:
    """매장 설정 테스트."""

    async def test_get_defaults(self, client: AsyncClient, admin_token):
        res = await client.get(f"{ADMIN}/settings", headers=auth_header(admin_token))
        assert res.status_code == 200
        data = res.json()
        assert data["min_shift_hours"] == 2
        assert data["max_shift_hours"] == 8
        assert data["timezone"] == "UTC"

    async def test_staff_forbidden(self, client: AsyncClient, staff_token):
        res = await client.get(f"{ADMIN}/settings", headers=auth_header(staff_token))
        assert res.status_code == 403

    async def test_partial_update(self, client: AsyncClient, db, admin_token):
        res = await client.put(f"{ADMIN}/settings", headers=auth_header(admin_token), json={
            "max_shift_hours": 10,
            "timezone": "Asia/Tokyo",
        })
        assert res.status_code == 200
        data = res.json()
        assert data["max_shift_hours"] == 10
        assert data["min_shift_hours"] == 2
        assert data["timezone"] == "Asia/Tokyo"

        actions = (await db.execute(select(AuditLog.action_type))).scalars().all()
        assert actions == ["SETTINGS_UPDATED"]

    async def test_min_above_max(self, client: AsyncClient, admin_token):
        res = await client.put(f"{ADMIN}/settings", headers=auth_header(admin_token), json={
            "min_shift_hours": 9,
        })
        assert res.status_code == 400

    async def test_unknown_timezone(self, client: AsyncClient, admin_token):
        res = await client.put(f"{ADMIN}/settings", headers=auth_header(admin_token), json={
            "timezone": "Mars/Olympus_Mons",
        })
        assert res.status_code == 400

    async def test_new_rules_apply_to_shifts(self, client: AsyncClient, admin_token, staff_user):
        """최대 근무 시간을 줄이면 긴 근무를 만들 수 없습니다."""
        await client.put(f"{ADMIN}/settings", headers=auth_header(admin_token), json={
            "max_shift_hours": 4,
        })
        start = tomorrow_at(9)
        res = await client.post(f"{ADMIN}/shifts", headers=auth_header(admin_token), json={
            "user_id": str(staff_user.id),
            "start_time": start.strftime("%Y-%m-%dT%H:%M:%SZ"),
            "end_time": start.replace(hour=15).strftime("%Y-%m-%dT%H:%M:%SZ"),
        })
        assert res.status_code == 400


class TestBackupRestore:
    """백업/복원 테스트."""

    async def test_backup_contents(self, client: AsyncClient, db, admin_token, staff_user):
        await create_shift(db, staff_user, tomorrow_at(9))
        res = await client.get(f"{ADMIN}/settings/backup", headers=auth_header(admin_token))
        assert res.status_code == 200
        data = res.json()
        assert set(data) == {"store", "settings", "users", "shifts", "shift_requests", "backup_date"}
        assert data["store"]["name"] == "Test Store"
        assert len(data["shifts"]) == 1
        assert all("password_hash" not in u for u in data["users"])

    async def test_restore_settings(self, client: AsyncClient, admin_token):
        backup = (await client.get(f"{ADMIN}/settings/backup", headers=auth_header(admin_token))).json()
        await client.put(f"{ADMIN}/settings", headers=auth_header(admin_token), json={
            "min_break_minutes": 60,
        })

        res = await client.post(f"{ADMIN}/settings/restore", headers=auth_header(admin_token), json=backup)
        assert res.status_code == 200
        assert res.json()["min_break_minutes"] == 30

    async def test_restore_logs_single_entry(self, client: AsyncClient, db, admin_token, store):
        """복원은 SETTINGS_UPDATED 감사 로그를 한 건만 남깁니다."""
        backup = (await client.get(f"{ADMIN}/settings/backup", headers=auth_header(admin_token))).json()
        res = await client.post(f"{ADMIN}/settings/restore", headers=auth_header(admin_token), json=backup)
        assert res.status_code == 200

        entries = (await db.execute(
            select(AuditLog).where(AuditLog.action_type == "SETTINGS_UPDATED")
        )).scalars().all()
        assert len(entries) == 1
        assert entries[0].details["restored_from"] == str(store.id)

    async def test_restore_missing_keys(self, client: AsyncClient, admin_token):
        res = await client.post(f"{ADMIN}/settings/restore", headers=auth_header(admin_token), json={
            "settings": {"min_break_minutes": 15},
        })
        assert res.status_code == 400


class TestStoreInfo:
    """매장 정보 테스트."""

    async def test_get_store(self, client: AsyncClient, admin_token):
        res = await client.get(f"{ADMIN}/store", headers=auth_header(admin_token))
        assert res.status_code == 200
        assert res.json()["name"] == "Test Store"

    async def test_update_business_hours_merges(self, client: AsyncClient, admin_token):
        res = await client.put(f"{ADMIN}/store", headers=auth_header(admin_token), json={
            "name": "Shibuya Store",
            "business_hours": {"Monday": {"open": "10:00", "close": "20:00"}},
        })
        assert res.status_code == 200
        res = await client.put(f"{ADMIN}/store", headers=auth_header(admin_token), json={
            "business_hours": {"sunday": {"open": "11:00", "close": "18:00", "is_open": False}},
        })
        hours = res.json()["business_hours"]
        assert res.json()["name"] == "Shibuya Store"
        assert hours["monday"]["open"] == "10:00"
        assert hours["sunday"]["is_open"] is False

    async def test_bad_business_hours_format(self, client: AsyncClient, admin_token):
        res = await client.put(f"{ADMIN}/store", headers=auth_header(admin_token), json={
            "business_hours": {"monday": {"open": "10am", "close": "8pm"}},
        })
        assert res.status_code == 400
