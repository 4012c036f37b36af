"""근무 신청 API 테스트 — 직원 신청/취소, 관리자 승인/반려.

Shift request API tests.
"""

from datetime import timedelta

from httpx import AsyncClient
from sqlalchemy import select

from app.models.notification import Notification
from app.models.shift import Shift, ShiftRequest
from tests.conftest import auth_header, iso, make_token, tomorrow_at

APP_REQUESTS = "/api/v1/app/shift-requests"
ADMIN_REQUESTS = "/api/v1/admin/shift-requests"


async def _submit(client: AsyncClient, token: str, hour: int = 9, hours: int = 5) -> dict:
    start = tomorrow_at(hour)
    res = await client.post(APP_REQUESTS, headers=auth_header(token), json={
        "start_time": iso(start),
        "end_time": iso(start + timedelta(hours=hours)),
        "note": "Can cover mornings",
    })
    assert res.status_code == 201
    return res.json()


class TestStaffShiftRequests:
    """직원 근무 신청 테스트."""

    async def test_create_pending(self, client: AsyncClient, staff_user, staff_token):
        data = await _submit(client, staff_token)
        assert data["status"] == "PENDING"
        assert data["user_id"] == str(staff_user.id)
        assert data["user_name"] == "Test Staff"

    async def test_create_invalid_window(self, client: AsyncClient, staff_token):
        start = tomorrow_at(9)
        res = await client.post(APP_REQUESTS, headers=auth_header(staff_token), json={
            "start_time": iso(start),
            "end_time": iso(start),
        })
        assert res.status_code == 400

    async def test_list_own_with_status_filter(self, client: AsyncClient, staff_token):
        await _submit(client, staff_token)
        res = await client.get(f"{APP_REQUESTS}?status=PENDING", headers=auth_header(staff_token))
        assert len(res.json()) == 1
        res = await client.get(f"{APP_REQUESTS}?status=APPROVED", headers=auth_header(staff_token))
        assert res.json() == []

    async def test_list_unknown_status(self, client: AsyncClient, staff_token):
        res = await client.get(f"{APP_REQUESTS}?status=MAYBE", headers=auth_header(staff_token))
        assert res.status_code == 400

    async def test_delete_pending(self, client: AsyncClient, db, staff_token):
        data = await _submit(client, staff_token)
        res = await client.delete(f"{APP_REQUESTS}/{data['id']}", headers=auth_header(staff_token))
        assert res.status_code == 200
        assert (await db.execute(select(ShiftRequest))).scalars().all() == []

    async def test_delete_someone_elses(self, client: AsyncClient, db, store, staff_token, admin_user):
        data = await _submit(client, staff_token)
        res = await client.delete(
            f"{APP_REQUESTS}/{data['id']}", headers=auth_header(make_token(admin_user))
        )
        assert res.status_code == 403

    async def test_delete_reviewed(self, client: AsyncClient, staff_token, admin_token):
        data = await _submit(client, staff_token)
        await client.patch(
            f"{ADMIN_REQUESTS}/{data['id']}",
            headers=auth_header(admin_token),
            json={"status": "REJECTED"},
        )
        res = await client.delete(f"{APP_REQUESTS}/{data['id']}", headers=auth_header(staff_token))
        assert res.status_code == 400

    async def test_delete_missing(self, client: AsyncClient, staff_token):
        res = await client.delete(
            f"{APP_REQUESTS}/00000000-0000-0000-0000-000000000001", headers=auth_header(staff_token)
        )
        assert res.status_code == 404


class TestAdminShiftRequests:
    """관리자 근무 신청 검토 테스트."""

    async def test_list_store_requests(self, client: AsyncClient, staff_token, admin_token, staff_user):
        await _submit(client, staff_token)
        res = await client.get(ADMIN_REQUESTS, headers=auth_header(admin_token))
        assert res.status_code == 200
        rows = res.json()
        assert len(rows) == 1
        assert rows[0]["user_name"] == "Test Staff"

        res = await client.get(
            f"{ADMIN_REQUESTS}?user_id={staff_user.id}&status=PENDING", headers=auth_header(admin_token)
        )
        assert len(res.json()) == 1

    async def test_staff_cannot_review(self, client: AsyncClient, staff_token):
        data = await _submit(client, staff_token)
        res = await client.patch(
            f"{ADMIN_REQUESTS}/{data['id']}",
            headers=auth_header(staff_token),
            json={"status": "APPROVED"},
        )
        assert res.status_code == 403

    async def test_approve_creates_shift(self, client: AsyncClient, db, staff_user, staff_token, admin_token):
        """승인하면 같은 시간대의 SCHEDULED 근무가 생성됩니다."""
        data = await _submit(client, staff_token)
        res = await client.patch(
            f"{ADMIN_REQUESTS}/{data['id']}",
            headers=auth_header(admin_token),
            json={"status": "APPROVED"},
        )
        assert res.status_code == 200
        assert res.json()["status"] == "APPROVED"
        assert res.json()["reviewed_at"] is not None

        shifts = (await db.execute(select(Shift))).scalars().all()
        assert len(shifts) == 1
        assert shifts[0].user_id == staff_user.id
        assert shifts[0].status == "SCHEDULED"

        types = (await db.execute(select(Notification.type))).scalars().all()
        assert types == ["REQUEST_APPROVED"]

    async def test_reject(self, client: AsyncClient, db, staff_token, admin_token):
        data = await _submit(client, staff_token)
        res = await client.patch(
            f"{ADMIN_REQUESTS}/{data['id']}",
            headers=auth_header(admin_token),
            json={"status": "REJECTED", "note": "Fully staffed"},
        )
        assert res.status_code == 200
        assert res.json()["note"] == "Fully staffed"
        assert (await db.execute(select(Shift))).scalars().all() == []
        types = (await db.execute(select(Notification.type))).scalars().all()
        assert types == ["REQUEST_REJECTED"]

    async def test_review_twice(self, client: AsyncClient, staff_token, admin_token):
        data = await _submit(client, staff_token)
        url = f"{ADMIN_REQUESTS}/{data['id']}"
        await client.patch(url, headers=auth_header(admin_token), json={"status": "APPROVED"})
        res = await client.patch(url, headers=auth_header(admin_token), json={"status": "REJECTED"})
        assert res.status_code == 400

    async def test_review_invalid_status(self, client: AsyncClient, staff_token, admin_token):
        data = await _submit(client, staff_token)
        res = await client.patch(
            f"{ADMIN_REQUESTS}/{data['id']}",
            headers=auth_header(admin_token),
            json={"status": "PENDING"},
        )
        assert res.status_code == 400

    async def test_review_other_store(self, client: AsyncClient, db, other_staff, admin_token):
        """다른 매장의 신청은 404."""
        data = await _submit(client, make_token(other_staff))
        res = await client.patch(
            f"{ADMIN_REQUESTS}/{data['id']}",
            headers=auth_header(admin_token),
            json={"status": "APPROVED"},
        )
        assert res.status_code == 404
