"""알림 API 테스트 — 목록, 개수, 읽음 처리, 삭제, 알림 설정, 관리자 메시지.

Notification API tests.
"""

import pytest
import pytest_asyncio
from httpx import AsyncClient
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.notification import Notification, NotificationPreference
from app.schemas.notification import NotificationPreferenceItem
from app.services.notification_service import notification_service
from tests.conftest import auth_header

APP_NOTIFY = "/api/v1/app/notifications"
ADMIN_NOTIFY = "/api/v1/admin/notifications"


@pytest_asyncio.fixture
async def notifications(db: AsyncSession, staff_user, admin_user) -> list[Notification]:
    """스태프에게 3건 (1건 읽음), 관리자에게 1건."""
    rows = [
        Notification(user_id=staff_user.id, title="Confirmed", message="m1", type="SHIFT_CONFIRMED"),
        Notification(user_id=staff_user.id, title="Changed", message="m2", type="SHIFT_CHANGED"),
        Notification(user_id=staff_user.id, title="Old", message="m3", type="SHIFT_CHANGED", is_read=True),
        Notification(user_id=admin_user.id, title="Admin", message="m4", type="SYSTEM_NOTIFICATION"),
    ]
    db.add_all(rows)
    await db.flush()
    return rows


class TestNotificationList:
    """알림 목록/개수 테스트."""

    async def test_list_own(self, client: AsyncClient, staff_token, notifications):
        res = await client.get(APP_NOTIFY, headers=auth_header(staff_token))
        assert res.status_code == 200
        assert len(res.json()) == 3

    async def test_unread_only_and_type(self, client: AsyncClient, staff_token, notifications):
        res = await client.get(f"{APP_NOTIFY}?unread_only=true", headers=auth_header(staff_token))
        assert len(res.json()) == 2
        res = await client.get(
            f"{APP_NOTIFY}?unread_only=true&type=SHIFT_CHANGED", headers=auth_header(staff_token)
        )
        assert [n["title"] for n in res.json()] == ["Changed"]

    async def test_count(self, client: AsyncClient, staff_token, notifications):
        res = await client.get(f"{APP_NOTIFY}?count=true&unread_only=true", headers=auth_header(staff_token))
        assert res.json() == {"count": 2}

    async def test_limit_bounds(self, client: AsyncClient, staff_token, notifications):
        res = await client.get(f"{APP_NOTIFY}?limit=1", headers=auth_header(staff_token))
        assert len(res.json()) == 1
        res = await client.get(f"{APP_NOTIFY}?limit=101", headers=auth_header(staff_token))
        assert res.status_code == 400

    async def test_unknown_type(self, client: AsyncClient, staff_token):
        res = await client.get(f"{APP_NOTIFY}?type=BIRTHDAY", headers=auth_header(staff_token))
        assert res.status_code == 400


class TestNotificationReadState:
    """읽음 처리/삭제 테스트."""

    async def test_mark_one_read(self, client: AsyncClient, staff_token, notifications):
        target = notifications[0]
        res = await client.patch(
            f"{APP_NOTIFY}/{target.id}", headers=auth_header(staff_token), json={"is_read": True}
        )
        assert res.status_code == 200
        assert res.json()["is_read"] is True

    async def test_mark_unread_again(self, client: AsyncClient, staff_token, notifications):
        target = notifications[2]
        res = await client.patch(
            f"{APP_NOTIFY}/{target.id}", headers=auth_header(staff_token), json={"is_read": False}
        )
        assert res.json()["is_read"] is False

    async def test_read_all(self, client: AsyncClient, staff_token, notifications):
        res = await client.post(f"{APP_NOTIFY}/read-all", headers=auth_header(staff_token))
        assert res.json() == {"count": 2}
        res = await client.get(f"{APP_NOTIFY}?count=true&unread_only=true", headers=auth_header(staff_token))
        assert res.json() == {"count": 0}

    async def test_read_all_by_type(self, client: AsyncClient, staff_token, notifications):
        res = await client.post(
            f"{APP_NOTIFY}/read-all", headers=auth_header(staff_token), json={"type": "SHIFT_CONFIRMED"}
        )
        assert res.json() == {"count": 1}

    async def test_someone_elses_notification(self, client: AsyncClient, staff_token, notifications):
        admin_note = notifications[3]
        res = await client.get(f"{APP_NOTIFY}/{admin_note.id}", headers=auth_header(staff_token))
        assert res.status_code == 403
        res = await client.delete(f"{APP_NOTIFY}/{admin_note.id}", headers=auth_header(staff_token))
        assert res.status_code == 403

    async def test_missing_notification(self, client: AsyncClient, staff_token):
        res = await client.get(
            f"{APP_NOTIFY}/00000000-0000-0000-0000-000000000001", headers=auth_header(staff_token)
        )
        assert res.status_code == 404

    async def test_delete(self, client: AsyncClient, db, staff_token, notifications):
        target = notifications[0]
        res = await client.delete(f"{APP_NOTIFY}/{target.id}", headers=auth_header(staff_token))
        assert res.status_code == 200
        remaining = (await db.execute(select(Notification.id))).scalars().all()
        assert target.id not in remaining


class TestNotificationSettings:
    """알림 설정 테스트."""

    async def test_defaults_follow_store(self, client: AsyncClient, staff_token):
        res = await client.get(f"{APP_NOTIFY}/settings", headers=auth_header(staff_token))
        assert res.status_code == 200
        items = res.json()
        assert len(items) == 7
        assert all(i["email"] is True and i["push"] is False and i["in_app"] is True for i in items)

    async def test_replace(self, client: AsyncClient, staff_token):
        res = await client.post(f"{APP_NOTIFY}/settings", headers=auth_header(staff_token), json={
            "preferences": [{"type": "SHIFT_CHANGED", "email": False, "push": True, "in_app": False}],
        })
        assert res.status_code == 200
        changed = next(i for i in res.json() if i["type"] == "SHIFT_CHANGED")
        assert changed == {"type": "SHIFT_CHANGED", "email": False, "push": True, "in_app": False}

        res = await client.post(f"{APP_NOTIFY}/settings", headers=auth_header(staff_token), json={
            "preferences": [],
        })
        changed = next(i for i in res.json() if i["type"] == "SHIFT_CHANGED")
        assert changed["in_app"] is True

    async def test_duplicate_types(self, client: AsyncClient, staff_token):
        res = await client.post(f"{APP_NOTIFY}/settings", headers=auth_header(staff_token), json={
            "preferences": [{"type": "SHIFT_CHANGED"}, {"type": "SHIFT_CHANGED"}],
        })
        assert res.status_code == 400

    async def test_failed_replace_keeps_previous_rows(self, db, staff_user, monkeypatch):
        """삽입 flush가 실패하면 삭제도 롤백되어 기존 설정이 남습니다."""
        user_id = staff_user.id
        db.add(NotificationPreference(user_id=user_id, type="SHIFT_CHANGED", email=False, push=True, in_app=False))
        await db.commit()

        original_flush = db.flush
        calls: list[int] = []

        async def _flush_fails_once(*args, **kwargs):
            calls.append(1)
            if len(calls) == 1:
                raise SQLAlchemyError("insert failed")
            return await original_flush(*args, **kwargs)

        monkeypatch.setattr(db, "flush", _flush_fails_once)
        with pytest.raises(SQLAlchemyError):
            await notification_service.replace_preferences(db, staff_user, [
                NotificationPreferenceItem(type="ADMIN_MESSAGE", in_app=False),
            ])

        rows = (await db.execute(
            select(NotificationPreference).where(NotificationPreference.user_id == user_id)
        )).scalars().all()
        assert [(r.type, r.email, r.push, r.in_app) for r in rows] == [("SHIFT_CHANGED", False, True, False)]

    async def test_in_app_disabled_skips_row(self, client: AsyncClient, db, staff_token, admin_token):
        await client.post(f"{APP_NOTIFY}/settings", headers=auth_header(staff_token), json={
            "preferences": [{"type": "ADMIN_MESSAGE", "email": False, "in_app": False}],
        })
        res = await client.post(ADMIN_NOTIFY, headers=auth_header(admin_token), json={
            "title": "Staff meeting",
            "message": "Friday 10:00",
        })
        assert res.status_code == 201
        assert res.json() == {"recipients": 1, "in_app_delivered": 0}


class TestAdminMessage:
    """관리자 메시지 발송 테스트."""

    async def test_broadcast_excludes_sender(self, client: AsyncClient, db, admin_token, staff_user, admin_user):
        res = await client.post(ADMIN_NOTIFY, headers=auth_header(admin_token), json={
            "title": "Inventory",
            "message": "Count stock tonight",
        })
        assert res.status_code == 201
        assert res.json() == {"recipients": 1, "in_app_delivered": 1}
        rows = (await db.execute(select(Notification))).scalars().all()
        assert [(r.user_id, r.type) for r in rows] == [(staff_user.id, "ADMIN_MESSAGE")]

    async def test_recipient_from_other_store(self, client: AsyncClient, admin_token, other_staff):
        res = await client.post(ADMIN_NOTIFY, headers=auth_header(admin_token), json={
            "title": "Hi",
            "message": "Wrong store",
            "user_ids": [str(other_staff.id)],
        })
        assert res.status_code == 400

    async def test_staff_cannot_send(self, client: AsyncClient, staff_token):
        res = await client.post(ADMIN_NOTIFY, headers=auth_header(staff_token), json={
            "title": "Hi",
            "message": "Nope",
        })
        assert res.status_code == 403
