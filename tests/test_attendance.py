"""근태 테스트 — 상태 판정 함수, 출퇴근 API, 오늘의 근무 상태.

Attendance tests — Pure status helpers, the clock in/out endpoint and the
current-day status view.
"""

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

from httpx import AsyncClient

from app.models.attendance import Attendance
from app.models.shift import ShiftStatus
from app.services.attendance_service import (
    attendance_service,
    calculate_working_minutes,
    derive_work_status,
    determine_clock_in_status,
)
from tests.conftest import auth_header, create_shift, make_token, tomorrow_at

ATTENDANCE = "/api/v1/app/attendance"

NOON = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


class TestStatusHelpers:
    """순수 함수 테스트."""

    def test_on_time_when_early_or_exact(self):
        start = NOON
        assert determine_clock_in_status(start - timedelta(minutes=5), start) == "ON_TIME"
        assert determine_clock_in_status(start, start) == "ON_TIME"

    def test_late_after_start(self):
        assert determine_clock_in_status(NOON + timedelta(seconds=1), NOON) == "LATE"

    def test_naive_datetimes_treated_as_utc(self):
        naive = NOON.replace(tzinfo=None)
        assert determine_clock_in_status(naive + timedelta(minutes=1), NOON) == "LATE"

    def test_working_minutes_rounded(self):
        assert calculate_working_minutes(NOON, NOON + timedelta(hours=4, seconds=40)) == 241
        assert calculate_working_minutes(NOON, NOON + timedelta(minutes=90)) == 90

    def test_derive_work_status(self):
        assert derive_work_status(None) == "WAITING"
        assert derive_work_status(SimpleNamespace(clock_in_time=None, clock_out_time=None)) == "WAITING"
        assert derive_work_status(SimpleNamespace(clock_in_time=NOON, clock_out_time=None)) == "WORKING"
        assert derive_work_status(SimpleNamespace(clock_in_time=NOON, clock_out_time=NOON)) == "COMPLETED"


class TestClockActions:
    """출퇴근 기록 API 테스트."""

    async def test_clock_in_on_time(self, client: AsyncClient, db, staff_user, staff_token):
        shift = await create_shift(db, staff_user, tomorrow_at(9))
        res = await client.post(ATTENDANCE, headers=auth_header(staff_token), json={
            "action": "clock_in",
            "shift_id": str(shift.id),
        })
        assert res.status_code == 200
        data = res.json()
        assert data["status"] == "ON_TIME"
        assert data["clock_in_time"] is not None
        assert data["shift"]["id"] == str(shift.id)

    async def test_clock_in_late(self, client: AsyncClient, db, staff_user, staff_token):
        start = datetime.now(timezone.utc) - timedelta(hours=1)
        shift = await create_shift(db, staff_user, start)
        res = await client.post(ATTENDANCE, headers=auth_header(staff_token), json={
            "action": "clock_in",
            "shift_id": str(shift.id),
        })
        assert res.json()["status"] == "LATE"

    async def test_clock_out_completes_shift(self, client: AsyncClient, db, staff_user, staff_token):
        shift = await create_shift(db, staff_user, tomorrow_at(9))
        payload = {"shift_id": str(shift.id)}
        await client.post(ATTENDANCE, headers=auth_header(staff_token), json={**payload, "action": "clock_in"})
        res = await client.post(ATTENDANCE, headers=auth_header(staff_token), json={
            **payload, "action": "clock_out", "note": "Closed register",
        })
        assert res.status_code == 200
        data = res.json()
        assert data["clock_out_time"] is not None
        assert data["working_minutes"] == 0
        assert data["note"] == "Closed register"
        assert data["shift"]["status"] == "COMPLETED"

    async def test_clock_out_without_clock_in(self, client: AsyncClient, db, staff_user, staff_token):
        shift = await create_shift(db, staff_user, tomorrow_at(9))
        res = await client.post(ATTENDANCE, headers=auth_header(staff_token), json={
            "action": "clock_out",
            "shift_id": str(shift.id),
        })
        assert res.status_code == 400

    async def test_clock_after_clock_out(self, client: AsyncClient, db, staff_user, staff_token):
        """퇴근 후 재출근/재퇴근은 409."""
        shift = await create_shift(db, staff_user, tomorrow_at(9))
        payload = {"shift_id": str(shift.id)}
        await client.post(ATTENDANCE, headers=auth_header(staff_token), json={**payload, "action": "clock_in"})
        await client.post(ATTENDANCE, headers=auth_header(staff_token), json={**payload, "action": "clock_out"})

        again_in = await client.post(ATTENDANCE, headers=auth_header(staff_token), json={**payload, "action": "clock_in"})
        again_out = await client.post(ATTENDANCE, headers=auth_header(staff_token), json={**payload, "action": "clock_out"})
        assert again_in.status_code == 409
        assert again_out.status_code == 409

    async def test_canceled_shift(self, client: AsyncClient, db, staff_user, staff_token):
        shift = await create_shift(db, staff_user, tomorrow_at(9), status=ShiftStatus.CANCELED)
        res = await client.post(ATTENDANCE, headers=auth_header(staff_token), json={
            "action": "clock_in",
            "shift_id": str(shift.id),
        })
        assert res.status_code == 400

    async def test_someone_elses_shift(self, client: AsyncClient, db, admin_user, staff_token):
        shift = await create_shift(db, admin_user, tomorrow_at(9))
        res = await client.post(ATTENDANCE, headers=auth_header(staff_token), json={
            "action": "clock_in",
            "shift_id": str(shift.id),
        })
        assert res.status_code == 404

    async def test_unknown_action(self, client: AsyncClient, db, staff_user, staff_token):
        shift = await create_shift(db, staff_user, tomorrow_at(9))
        res = await client.post(ATTENDANCE, headers=auth_header(staff_token), json={
            "action": "break_start",
            "shift_id": str(shift.id),
        })
        assert res.status_code == 400

    async def test_history_filter(self, client: AsyncClient, db, staff_user, staff_token):
        shift = await create_shift(db, staff_user, tomorrow_at(9))
        await client.post(ATTENDANCE, headers=auth_header(staff_token), json={
            "action": "clock_in", "shift_id": str(shift.id),
        })
        res = await client.get(f"{ATTENDANCE}?status=ON_TIME", headers=auth_header(staff_token))
        assert len(res.json()) == 1
        res = await client.get(f"{ATTENDANCE}?status=LATE", headers=auth_header(staff_token))
        assert res.json() == []
        res = await client.get(f"{ATTENDANCE}?status=COMPLETED", headers=auth_header(staff_token))
        assert res.status_code == 200
        assert res.json() == []

        other = await client.get(ATTENDANCE, headers=auth_header(make_token(staff_user)))
        assert other.json()[0]["shift"]["id"] == str(shift.id)


class TestCurrentStatus:
    """오늘의 근무 상태 테스트."""

    async def test_no_shift_endpoint(self, client: AsyncClient, staff_token):
        res = await client.get(f"{ATTENDANCE}/current", headers=auth_header(staff_token))
        assert res.status_code == 200
        assert res.json()["status"] == "NO_SHIFT"
        assert res.json()["shift"] is None

    async def test_waiting(self, db, staff_user):
        await create_shift(db, staff_user, NOON.replace(hour=9))
        current = await attendance_service.get_current(db, staff_user, now=NOON.replace(hour=8))
        assert current.status == "WAITING"
        assert current.working_time is None

    async def test_working_time_in_minutes(self, db, staff_user):
        shift = await create_shift(db, staff_user, NOON.replace(hour=9))
        db.add(Attendance(
            shift_id=shift.id,
            user_id=staff_user.id,
            clock_in_time=NOON.replace(hour=9),
            status="ON_TIME",
        ))
        await db.flush()
        current = await attendance_service.get_current(db, staff_user, now=NOON)
        assert current.status == "WORKING"
        assert current.working_time == 180

    async def test_shift_on_another_day(self, db, staff_user):
        await create_shift(db, staff_user, NOON + timedelta(days=1))
        current = await attendance_service.get_current(db, staff_user, now=NOON)
        assert current.status == "NO_SHIFT"
