"""보고서 테스트 — 기간 계산, 신청 충족 판정, 근태/근무/직원 보고서, Excel 내보내기.

Report tests. Shifts are placed in January 2026 so that every shift has
already ended and absences are counted.
"""

from datetime import date, datetime, timedelta, timezone
from io import BytesIO
from types import SimpleNamespace
from zoneinfo import ZoneInfo

import pytest
import pytest_asyncio
from httpx import AsyncClient
from openpyxl import load_workbook
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.attendance import Attendance
from app.models.shift import ShiftRequest, ShiftStatus
from app.services.report_service import request_fulfilled, resolve_period
from app.utils.exceptions import BadRequestError
from tests.conftest import auth_header, create_shift

REPORTS = "/api/v1/admin/reports"
RANGE = "period=custom&from=2026-01-05&to=2026-01-11"


def _at(day: int, hour: int) -> datetime:
    return datetime(2026, 1, day, hour, 0, tzinfo=timezone.utc)


@pytest_asyncio.fixture
async def history(db: AsyncSession, staff_user, admin_user, other_staff) -> None:
    """1/5 정시 출근 4시간, 1/6 결근, 1/7 취소, 다른 매장 근무 1건."""
    worked = await create_shift(db, staff_user, _at(5, 9), status=ShiftStatus.COMPLETED)
    db.add(Attendance(
        shift_id=worked.id,
        user_id=staff_user.id,
        clock_in_time=_at(5, 9) - timedelta(minutes=10),
        clock_out_time=_at(5, 13),
        working_minutes=240,
        status="ON_TIME",
    ))
    await create_shift(db, staff_user, _at(6, 9))
    await create_shift(db, staff_user, _at(7, 9), status=ShiftStatus.CANCELED)
    await create_shift(db, other_staff, _at(5, 9))
    db.add(ShiftRequest(
        user_id=staff_user.id,
        store_id=staff_user.store_id,
        start_time=_at(5, 9) + timedelta(minutes=30),
        end_time=_at(5, 13),
        status="APPROVED",
    ))
    db.add(ShiftRequest(
        user_id=staff_user.id,
        store_id=staff_user.store_id,
        start_time=_at(8, 9),
        end_time=_at(8, 13),
        status="APPROVED",
    ))
    await db.flush()


class TestResolvePeriod:
    """기간 계산 테스트."""

    def test_month(self):
        assert resolve_period("month", None, None, date(2026, 2, 14)) == (
            "month", date(2026, 2, 1), date(2026, 2, 28)
        )

    def test_week_starts_monday(self):
        kind, start, end = resolve_period("week", None, None, date(2026, 10, 18))
        assert (kind, start, end) == ("week", date(2026, 10, 12), date(2026, 10, 18))

    def test_unknown_falls_back_to_month(self):
        kind, start, _ = resolve_period("quarter", None, None, date(2026, 10, 19))
        assert (kind, start) == ("month", date(2026, 10, 1))

    def test_custom_requires_dates(self):
        with pytest.raises(BadRequestError):
            resolve_period("custom", date(2026, 1, 1), None, date(2026, 1, 5))

    def test_custom_reversed(self):
        with pytest.raises(BadRequestError):
            resolve_period("custom", date(2026, 1, 9), date(2026, 1, 1), date(2026, 1, 5))


class TestRequestFulfilled:
    """신청 충족 판정 테스트."""

    def _shift(self, start: datetime, hours: int = 4, status: str = "SCHEDULED", user_id: str = "u1"):
        return SimpleNamespace(
            user_id=user_id, start_time=start, end_time=start + timedelta(hours=hours), status=status
        )

    def _request(self, start: datetime, hours: int = 4):
        return SimpleNamespace(user_id="u1", start_time=start, end_time=start + timedelta(hours=hours))

    def test_within_tolerance(self):
        req = self._request(_at(5, 9))
        assert request_fulfilled(req, [self._shift(_at(5, 10))], ZoneInfo("UTC"))

    def test_outside_tolerance(self):
        req = self._request(_at(5, 9))
        assert not request_fulfilled(req, [self._shift(_at(5, 11))], ZoneInfo("UTC"))

    def test_canceled_or_other_user_ignored(self):
        req = self._request(_at(5, 9))
        shifts = [self._shift(_at(5, 9), status="CANCELED"), self._shift(_at(5, 9), user_id="u2")]
        assert not request_fulfilled(req, shifts, ZoneInfo("UTC"))

    def test_same_local_day_required(self):
        """Asia/Tokyo 기준 날짜가 다르면 충족되지 않습니다."""
        req = self._request(datetime(2026, 1, 5, 14, 30, tzinfo=timezone.utc), hours=2)
        shift = self._shift(datetime(2026, 1, 5, 15, 15, tzinfo=timezone.utc), hours=2)
        assert request_fulfilled(req, [shift], ZoneInfo("UTC"))
        assert not request_fulfilled(req, [shift], ZoneInfo("Asia/Tokyo"))


class TestAttendanceReport:
    """근태 보고서 API 테스트."""

    async def test_summary(self, client: AsyncClient, admin_token, history):
        res = await client.get(f"{REPORTS}/attendance?{RANGE}", headers=auth_header(admin_token))
        assert res.status_code == 200
        body = res.json()
        assert body["period"] == {"type": "custom", "start": "2026-01-05", "end": "2026-01-11"}
        summary = body["summary"]
        assert summary["total_records"] == 1
        assert summary["total_absent_count"] == 1
        assert summary["total_working_hours"] == 4.0
        assert summary["total_estimated_wage"] == 4800

        staff = body["staff_stats"][0]
        assert staff["total_shifts"] == 2
        assert staff["attendance_rate"] == 50.0
        assert staff["punctuality_rate"] == 100.0
        assert staff["average_clock_in_deviation"] == -10.0
        assert len(body["daily_stats"]) == 7

    async def test_custom_without_dates(self, client: AsyncClient, admin_token):
        res = await client.get(f"{REPORTS}/attendance?period=custom", headers=auth_header(admin_token))
        assert res.status_code == 400

    async def test_excel_export(self, client: AsyncClient, admin_token, history):
        res = await client.get(f"{REPORTS}/attendance/export?{RANGE}", headers=auth_header(admin_token))
        assert res.status_code == 200
        assert res.headers["content-type"].startswith(
            "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
        )
        assert "attendance_report.xlsx" in res.headers["content-disposition"]

        wb = load_workbook(BytesIO(res.content))
        assert wb.sheetnames == ["Attendance", "Summary"]
        ws = wb["Attendance"]
        assert ws.cell(row=1, column=1).value == "Name"
        assert ws.cell(row=2, column=1).value == "Test Staff"

    async def test_staff_forbidden(self, client: AsyncClient, staff_token):
        res = await client.get(f"{REPORTS}/attendance", headers=auth_header(staff_token))
        assert res.status_code == 403


class TestShiftAndStaffReports:
    """근무/직원 보고서 API 테스트."""

    async def test_shift_report(self, client: AsyncClient, admin_token, history):
        res = await client.get(f"{REPORTS}/shifts?{RANGE}", headers=auth_header(admin_token))
        assert res.status_code == 200
        body = res.json()
        summary = body["summary"]
        assert summary["total_shifts"] == 2
        assert summary["total_hours"] == 8.0
        assert summary["approved_requests"] == 2
        assert summary["fulfilled_requests"] == 1
        assert summary["request_fulfillment_rate"] == 50.0
        assert body["department_stats"] == [
            {"department": "Kitchen", "total_hours": 8.0, "shifts_count": 2, "staff_count": 1}
        ]

    async def test_shift_report_without_requests(self, client: AsyncClient, admin_token):
        res = await client.get(f"{REPORTS}/shifts?{RANGE}", headers=auth_header(admin_token))
        assert res.json()["summary"]["request_fulfillment_rate"] == 100.0

    async def test_staff_report(self, client: AsyncClient, admin_token, history):
        res = await client.get(f"{REPORTS}/staff?{RANGE}", headers=auth_header(admin_token))
        assert res.status_code == 200
        body = res.json()
        assert body["summary"]["total_staff"] == 2
        assert body["summary"]["active_staff"] == 1
        staff = next(s for s in body["staff_stats"] if s["name"] == "Test Staff")
        assert staff["shifts_count"] == 2
        assert staff["worked_hours"] == 4.0
        assert staff["attendance_rate"] == 50.0
        assert staff["requests_approved"] == 2
        assert staff["requests_fulfilled"] == 1

    async def test_staff_report_ignores_unfinished_clock_ins(self, client: AsyncClient, db, admin_token, staff_user):
        """진행 중인 근무의 출근은 출근율에 포함되지 않습니다."""
        now = datetime.now(timezone.utc).replace(second=0, microsecond=0)
        finished = await create_shift(db, staff_user, now - timedelta(hours=6))
        in_progress = await create_shift(db, staff_user, now - timedelta(hours=1))
        for shift in (finished, in_progress):
            db.add(Attendance(
                shift_id=shift.id,
                user_id=staff_user.id,
                clock_in_time=shift.start_time,
                status="ON_TIME",
            ))
        await db.flush()

        today = now.date()
        query = f"period=custom&from={today - timedelta(days=1)}&to={today + timedelta(days=1)}"
        res = await client.get(f"{REPORTS}/staff?{query}", headers=auth_header(admin_token))
        staff = next(s for s in res.json()["staff_stats"] if s["name"] == "Test Staff")
        assert staff["shifts_count"] == 2
        assert staff["attendance_rate"] == 100.0
