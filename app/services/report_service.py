"""보고서 서비스 — 근태/근무/직원 집계 및 Excel 내보내기.

Report Service — Aggregates attendance, shift and staff statistics for a
period (this month, this week, or a custom date range) in the store
timezone, and exports staff attendance to an Excel workbook.
"""

from calendar import monthrange
from collections import defaultdict
from datetime import date, datetime, timedelta
from io import BytesIO
from typing import Any, Sequence
from uuid import UUID
from zoneinfo import ZoneInfo

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.attendance import Attendance, AttendanceStatus
from app.models.shift import Shift, ShiftRequest, ShiftRequestStatus, ShiftStatus
from app.models.user import DEFAULT_HOURLY_WAGE, User
from app.repositories.attendance_repository import attendance_repository
from app.repositories.shift_repository import shift_repository, shift_request_repository
from app.repositories.store_repository import store_settings_repository
from app.repositories.user_repository import user_repository
from app.utils.exceptions import BadRequestError
from app.utils.timezone import date_bounds, to_utc, utc_now

PERIODS: tuple[str, ...] = ("month", "week", "custom")
UNASSIGNED_DEPARTMENT: str = "Unassigned"
# 신청과 근무의 시작/종료 허용 오차 — Tolerance when matching requests to shifts
FULFILLMENT_TOLERANCE: timedelta = timedelta(hours=1)


def resolve_period(
    period: str,
    date_from: date | None,
    date_to: date | None,
    today: date,
) -> tuple[str, date, date]:
    """보고서 기간을 (유형, 시작일, 종료일)로 계산합니다.

    month is the calendar month of today, week runs Monday through Sunday,
    custom requires both dates. Unknown values fall back to month.

    Raises:
        BadRequestError: custom 기간에 from/to 누락 또는 역순 (Missing or reversed custom dates)
    """
    if period == "custom":
        if date_from is None or date_to is None:
            raise BadRequestError("Custom period requires both from and to")
        if date_from > date_to:
            raise BadRequestError("from must not be after to")
        return period, date_from, date_to
    if period == "week":
        monday: date = today - timedelta(days=today.weekday())
        return period, monday, monday + timedelta(days=6)
    first: date = today.replace(day=1)
    return "month", first, today.replace(day=monthrange(today.year, today.month)[1])


def _hours(start: datetime, end: datetime) -> float:
    return (to_utc(end) - to_utc(start)).total_seconds() / 3600


def _rate(part: int, whole: int, empty: float = 0.0) -> float:
    return round(part / whole * 100, 2) if whole else empty


def request_fulfilled(request: ShiftRequest, shifts: Sequence[Shift], tz: ZoneInfo) -> bool:
    """같은 날 시작/종료가 1시간 이내인 근무가 있으면 충족된 신청입니다."""
    req_start, req_end = to_utc(request.start_time), to_utc(request.end_time)
    for shift in shifts:
        if shift.user_id != request.user_id or shift.status == ShiftStatus.CANCELED.value:
            continue
        start, end = to_utc(shift.start_time), to_utc(shift.end_time)
        if start.astimezone(tz).date() != req_start.astimezone(tz).date():
            continue
        if abs(start - req_start) <= FULFILLMENT_TOLERANCE and abs(end - req_end) <= FULFILLMENT_TOLERANCE:
            return True
    return False


class ReportService:
    """보고서 서비스."""

    async def _context(
        self,
        db: AsyncSession,
        store_id: UUID,
        period: str,
        date_from: date | None,
        date_to: date | None,
    ) -> dict[str, Any]:
        """기간, 시간대, 기간 내 근무를 한 번에 준비합니다."""
        tz_name: str = await store_settings_repository.get_timezone(db, store_id)
        tz: ZoneInfo = ZoneInfo(tz_name)
        now: datetime = utc_now()
        kind, start_date, end_date = resolve_period(period, date_from, date_to, now.astimezone(tz).date())
        start, end = date_bounds(start_date, end_date, tz_name)
        shifts: Sequence[Shift] = await shift_repository.list_starting_between(db, store_id, start, end)
        return {
            "tz": tz,
            "now": now,
            "start": start,
            "end": end,
            "shifts": shifts,
            "period": {
                "type": kind,
                "start": start_date.isoformat(),
                "end": end_date.isoformat(),
            },
            "days": [start_date + timedelta(days=i) for i in range((end_date - start_date).days + 1)],
        }

    # === 근태 보고서 (Attendance report) ===

    async def attendance_report(
        self,
        db: AsyncSession,
        admin: User,
        period: str = "month",
        date_from: date | None = None,
        date_to: date | None = None,
    ) -> dict[str, Any]:
        """직원별/일별 근태 통계.

        Absent means a non-canceled shift that has already ended without a
        clock-in. Estimated wage is worked hours times the hourly wage.
        """
        ctx: dict[str, Any] = await self._context(db, admin.store_id, period, date_from, date_to)
        tz: ZoneInfo = ctx["tz"]
        shifts: list[Shift] = [s for s in ctx["shifts"] if s.status != ShiftStatus.CANCELED.value]
        records: dict[UUID, Attendance] = await attendance_repository.list_for_shifts(db, [s.id for s in shifts])

        staff: dict[UUID, dict[str, Any]] = {}
        daily: dict[str, dict[str, Any]] = {
            day.isoformat(): {
                "date": day.isoformat(),
                "total_staff": 0,
                "on_time_count": 0,
                "late_count": 0,
                "absent_count": 0,
                "total_working_hours": 0.0,
            }
            for day in ctx["days"]
        }

        for shift in shifts:
            user: User = shift.user
            stats = staff.setdefault(user.id, {
                "user_id": str(user.id),
                "name": user.name,
                "department": user.department or UNASSIGNED_DEPARTMENT,
                "hourly_wage": user.hourly_wage or DEFAULT_HOURLY_WAGE,
                "total_shifts": 0,
                "total_working_minutes": 0,
                "on_time_count": 0,
                "late_count": 0,
                "absent_count": 0,
                "deviation_total": 0.0,
            })
            stats["total_shifts"] += 1
            day_stats = daily.get(to_utc(shift.start_time).astimezone(tz).date().isoformat())

            record: Attendance | None = records.get(shift.id)
            if record is None or record.clock_in_time is None:
                if to_utc(shift.end_time) < ctx["now"]:
                    stats["absent_count"] += 1
                    if day_stats is not None:
                        day_stats["absent_count"] += 1
                continue

            key: str = "late_count" if record.status == AttendanceStatus.LATE.value else "on_time_count"
            stats[key] += 1
            stats["deviation_total"] += (to_utc(record.clock_in_time) - to_utc(shift.start_time)).total_seconds() / 60
            minutes: int = record.working_minutes or 0
            stats["total_working_minutes"] += minutes
            if day_stats is not None:
                day_stats["total_staff"] += 1
                day_stats[key] += 1
                day_stats["total_working_hours"] += minutes / 60

        staff_stats: list[dict[str, Any]] = []
        for stats in staff.values():
            attended: int = stats["on_time_count"] + stats["late_count"]
            hours: float = stats["total_working_minutes"] / 60
            staff_stats.append({
                "user_id": stats["user_id"],
                "name": stats["name"],
                "department": stats["department"],
                "total_shifts": stats["total_shifts"],
                "total_working_minutes": stats["total_working_minutes"],
                "total_working_hours": round(hours, 2),
                "on_time_count": stats["on_time_count"],
                "late_count": stats["late_count"],
                "absent_count": stats["absent_count"],
                "attendance_rate": _rate(attended, stats["total_shifts"]),
                "punctuality_rate": _rate(stats["on_time_count"], attended),
                "average_working_hours": round(hours / attended, 2) if attended else 0.0,
                "average_clock_in_deviation": round(stats["deviation_total"] / attended, 2) if attended else 0.0,
                "estimated_wage": round(hours * stats["hourly_wage"]),
            })
        staff_stats.sort(key=lambda s: s["name"])

        daily_stats: list[dict[str, Any]] = []
        for day_stats in daily.values():
            present: int = day_stats["total_staff"]
            daily_stats.append({
                **day_stats,
                "total_working_hours": round(day_stats["total_working_hours"], 2),
                "average_working_hours": round(day_stats["total_working_hours"] / present, 2) if present else 0.0,
                "on_time_rate": _rate(day_stats["on_time_count"], present),
            })

        total_on_time: int = sum(s["on_time_count"] for s in staff_stats)
        total_records: int = total_on_time + sum(s["late_count"] for s in staff_stats)
        return {
            "period": ctx["period"],
            "summary": {
                "total_records": total_records,
                "total_staff": len(staff_stats),
                "total_working_hours": round(sum(s["total_working_minutes"] for s in staff_stats) / 60, 2),
                "total_late_count": sum(s["late_count"] for s in staff_stats),
                "total_absent_count": sum(s["absent_count"] for s in staff_stats),
                "on_time_rate": _rate(total_on_time, total_records),
                "total_estimated_wage": sum(s["estimated_wage"] for s in staff_stats),
            },
            "staff_stats": staff_stats,
            "daily_stats": daily_stats,
        }

    async def export_attendance_excel(
        self,
        db: AsyncSession,
        admin: User,
        period: str = "month",
        date_from: date | None = None,
        date_to: date | None = None,
    ) -> bytes:
        """직원별 근태 통계를 Excel 파일로 내보내기."""
        report: dict[str, Any] = await self.attendance_report(db, admin, period, date_from, date_to)

        wb = Workbook()
        header_font = Font(bold=True, color="FFFFFF", size=11)
        header_fill = PatternFill(start_color="2D3436", end_color="2D3436", fill_type="solid")

        ws = wb.active
        ws.title = "Attendance"
        headers: list[str] = [
            "Name", "Department", "Shifts", "Working Hours", "On Time", "Late", "Absent",
            "Attendance Rate (%)", "Punctuality Rate (%)", "Avg Clock-in Deviation (min)", "Estimated Wage",
        ]
        for col_idx, h in enumerate(headers, 1):
            cell = ws.cell(row=1, column=col_idx, value=h)
            cell.font = header_font
            cell.fill = header_fill
            cell.alignment = Alignment(horizontal="center")

        for s in report["staff_stats"]:
            ws.append([
                s["name"], s["department"], s["total_shifts"], s["total_working_hours"],
                s["on_time_count"], s["late_count"], s["absent_count"], s["attendance_rate"],
                s["punctuality_rate"], s["average_clock_in_deviation"], s["estimated_wage"],
            ])

        for i, w in enumerate([20, 16, 10, 14, 10, 10, 10, 18, 18, 24, 15], 1):
            ws.column_dimensions[ws.cell(row=1, column=i).column_letter].width = w

        summary_ws = wb.create_sheet("Summary")
        summary_ws.append(["Period", f"{report['period']['start']} - {report['period']['end']}"])
        for key, value in report["summary"].items():
            summary_ws.append([key, value])
        summary_ws.column_dimensions["A"].width = 24
        summary_ws.column_dimensions["B"].width = 28

        buffer = BytesIO()
        wb.save(buffer)
        return buffer.getvalue()

    # === 근무 보고서 (Shift report) ===

    async def shift_report(
        self,
        db: AsyncSession,
        admin: User,
        period: str = "month",
        date_from: date | None = None,
        date_to: date | None = None,
    ) -> dict[str, Any]:
        """부서/역할별 근무 시간, 신청 충족률, 일별 분포."""
        ctx: dict[str, Any] = await self._context(db, admin.store_id, period, date_from, date_to)
        tz: ZoneInfo = ctx["tz"]
        shifts: list[Shift] = [s for s in ctx["shifts"] if s.status != ShiftStatus.CANCELED.value]
        approved: Sequence[ShiftRequest] = await shift_request_repository.list_for_store(
            db, admin.store_id, status=ShiftRequestStatus.APPROVED.value, start=ctx["start"], end=ctx["end"]
        )

        def bucket() -> dict[str, Any]:
            return {"total_hours": 0.0, "shifts_count": 0, "staff": set()}

        by_department: dict[str, dict[str, Any]] = defaultdict(bucket)
        by_role: dict[str, dict[str, Any]] = defaultdict(bucket)
        by_day: dict[str, dict[str, Any]] = defaultdict(bucket)
        for shift in shifts:
            hours: float = _hours(shift.start_time, shift.end_time)
            day_key: str = to_utc(shift.start_time).astimezone(tz).date().isoformat()
            for group in (
                by_department[shift.user.department or UNASSIGNED_DEPARTMENT],
                by_role[shift.user.role],
                by_day[day_key],
            ):
                group["total_hours"] += hours
                group["shifts_count"] += 1
                group["staff"].add(shift.user_id)

        def flatten(groups: dict[str, dict[str, Any]], label: str) -> list[dict[str, Any]]:
            return [
                {
                    label: key,
                    "total_hours": round(g["total_hours"], 2),
                    "shifts_count": g["shifts_count"],
                    "staff_count": len(g["staff"]),
                }
                for key, g in sorted(groups.items())
            ]

        fulfilled: int = sum(1 for r in approved if request_fulfilled(r, shifts, tz))
        return {
            "period": ctx["period"],
            "summary": {
                "total_shifts": len(shifts),
                "total_staff": len({s.user_id for s in shifts}),
                "total_hours": round(sum(_hours(s.start_time, s.end_time) for s in shifts), 2),
                "approved_requests": len(approved),
                "fulfilled_requests": fulfilled,
                "request_fulfillment_rate": _rate(fulfilled, len(approved), empty=100.0),
            },
            "department_stats": flatten(by_department, "department"),
            "role_stats": flatten(by_role, "role"),
            "daily_distribution": flatten(by_day, "date"),
        }

    # === 직원 보고서 (Staff report) ===

    async def staff_report(
        self,
        db: AsyncSession,
        admin: User,
        period: str = "month",
        date_from: date | None = None,
        date_to: date | None = None,
    ) -> dict[str, Any]:
        """직원별 근무 실적 — 근무/시간/출근율/정시율/신청 현황."""
        ctx: dict[str, Any] = await self._context(db, admin.store_id, period, date_from, date_to)
        tz: ZoneInfo = ctx["tz"]
        users: Sequence[User] = await user_repository.list_by_store(db, admin.store_id)
        shifts: list[Shift] = [s for s in ctx["shifts"] if s.status != ShiftStatus.CANCELED.value]
        records: dict[UUID, Attendance] = await attendance_repository.list_for_shifts(db, [s.id for s in shifts])
        requests: Sequence[ShiftRequest] = await shift_request_repository.list_for_store(
            db, admin.store_id, start=ctx["start"], end=ctx["end"]
        )
        weeks: float = max(len(ctx["days"]) / 7, 1)

        staff_stats: list[dict[str, Any]] = []
        for user in users:
            own_shifts: list[Shift] = [s for s in shifts if s.user_id == user.id]
            own_records: list[Attendance] = [
                records[s.id] for s in own_shifts
                if s.id in records and records[s.id].clock_in_time is not None
            ]
            ended_ids: set[UUID] = {s.id for s in own_shifts if to_utc(s.end_time) < ctx["now"]}
            attended_ended: int = sum(1 for r in own_records if r.shift_id in ended_ids)
            on_time: int = sum(1 for r in own_records if r.status != AttendanceStatus.LATE.value)
            scheduled_hours: float = sum(_hours(s.start_time, s.end_time) for s in own_shifts)
            worked_hours: float = sum(r.working_minutes or 0 for r in own_records) / 60
            own_requests: list[ShiftRequest] = [r for r in requests if r.user_id == user.id]
            approved: list[ShiftRequest] = [
                r for r in own_requests if r.status == ShiftRequestStatus.APPROVED.value
            ]
            staff_stats.append({
                "user_id": str(user.id),
                "name": user.name,
                "role": user.role,
                "department": user.department or UNASSIGNED_DEPARTMENT,
                "is_active": user.is_active,
                "shifts_count": len(own_shifts),
                "scheduled_hours": round(scheduled_hours, 2),
                "worked_hours": round(worked_hours, 2),
                "avg_weekly_hours": round(scheduled_hours / weeks, 2),
                "attendance_rate": _rate(attended_ended, len(ended_ids)) if ended_ids else 0.0,
                "punctuality_rate": _rate(on_time, len(own_records)),
                "late_count": len(own_records) - on_time,
                "requests_submitted": len(own_requests),
                "requests_approved": len(approved),
                "requests_fulfilled": sum(1 for r in approved if request_fulfilled(r, own_shifts, tz)),
                "estimated_wage": round(worked_hours * (user.hourly_wage or DEFAULT_HOURLY_WAGE)),
            })

        active: list[dict[str, Any]] = [s for s in staff_stats if s["shifts_count"]]
        return {
            "period": ctx["period"],
            "summary": {
                "total_staff": len(staff_stats),
                "active_staff": len(active),
                "total_scheduled_hours": round(sum(s["scheduled_hours"] for s in staff_stats), 2),
                "average_punctuality_rate": (
                    round(sum(s["punctuality_rate"] for s in active) / len(active), 2) if active else 0.0
                ),
                "total_requests": len(requests),
            },
            "staff_stats": staff_stats,
        }


# 싱글턴 인스턴스 — Singleton instance
report_service: ReportService = ReportService()
