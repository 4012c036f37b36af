"""근태 관리 서비스 — 출퇴근 기록 비즈니스 로직.

Attendance Service — Clock-in/clock-out against the caller's shifts,
attendance history and today's work status. Status derivation lives in
pure functions so it can be tested without a database.
"""

from datetime import date, datetime
from typing import Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.attendance import Attendance, AttendanceStatus
from app.models.shift import Shift, ShiftStatus
from app.models.user import User
from app.repositories.attendance_repository import attendance_repository
from app.repositories.shift_repository import shift_repository
from app.repositories.store_repository import store_settings_repository
from app.schemas.attendance import (
    AttendanceActionRequest,
    AttendanceResponse,
    CurrentAttendanceResponse,
    ShiftSummary,
)
from app.utils.exceptions import BadRequestError, DuplicateError, NotFoundError
from app.utils.timezone import date_bounds, local_day_bounds, to_utc, utc_now

# 오늘의 근무 상태 — Work status values for the current-day view
NO_SHIFT: str = "NO_SHIFT"
WAITING: str = "WAITING"
WORKING: str = "WORKING"
COMPLETED: str = "COMPLETED"


def determine_clock_in_status(clock_in_time: datetime, shift_start: datetime) -> str:
    """출근 시각이 근무 시작보다 늦으면 LATE, 아니면 ON_TIME."""
    if to_utc(clock_in_time) > to_utc(shift_start):
        return AttendanceStatus.LATE.value
    return AttendanceStatus.ON_TIME.value


def calculate_working_minutes(clock_in_time: datetime, clock_out_time: datetime) -> int:
    """출퇴근 사이의 근무 시간(분, 반올림)."""
    return round((to_utc(clock_out_time) - to_utc(clock_in_time)).total_seconds() / 60)


def derive_work_status(attendance: Attendance | None) -> str:
    """근태 기록으로부터 WAITING / WORKING / COMPLETED를 판정합니다."""
    if attendance is None or attendance.clock_in_time is None:
        return WAITING
    if attendance.clock_out_time is None:
        return WORKING
    return COMPLETED


def to_shift_summary(shift: Shift) -> ShiftSummary:
    return ShiftSummary(
        id=str(shift.id),
        start_time=to_utc(shift.start_time),
        end_time=to_utc(shift.end_time),
        status=shift.status,
        note=shift.note,
    )


def to_response(record: Attendance, shift: Shift | None = None) -> AttendanceResponse:
    return AttendanceResponse(
        id=str(record.id),
        shift_id=str(record.shift_id),
        user_id=str(record.user_id),
        clock_in_time=to_utc(record.clock_in_time) if record.clock_in_time else None,
        clock_out_time=to_utc(record.clock_out_time) if record.clock_out_time else None,
        working_minutes=record.working_minutes,
        status=record.status,
        note=record.note,
        shift=to_shift_summary(shift) if shift is not None else None,
    )


class AttendanceService:
    """근태 관리 서비스.

    Attendance service handling clock actions, history listing and the
    current-day status view.
    """

    async def list_records(
        self,
        db: AsyncSession,
        current_user: User,
        start_date: date | None = None,
        end_date: date | None = None,
        status: str | None = None,
    ) -> list[AttendanceResponse]:
        """본인의 근태 기록 목록 (근무 시작 내림차순).

        Dates are interpreted in the store timezone and filter on the
        shift's start (lower bound) and end (upper bound).
        """
        tz_name: str = await store_settings_repository.get_timezone(db, current_user.store_id)
        start = end = None
        if start_date is not None:
            start, _ = date_bounds(start_date, start_date, tz_name)
        if end_date is not None:
            _, end = date_bounds(end_date, end_date, tz_name)
        records: Sequence[Attendance] = await attendance_repository.list_for_user(
            db, current_user.id, start=start, end=end, status=status
        )
        return [to_response(r, r.shift) for r in records]

    async def _get_own_shift(self, db: AsyncSession, current_user: User, shift_id: UUID) -> Shift:
        shift: Shift | None = await shift_repository.get_by_id(db, shift_id)
        if shift is None or shift.user_id != current_user.id:
            raise NotFoundError("Shift not found")
        return shift

    async def record(
        self,
        db: AsyncSession,
        current_user: User,
        data: AttendanceActionRequest,
    ) -> AttendanceResponse:
        """출근 또는 퇴근을 기록합니다.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            current_user: 인증된 사용자 (Authenticated user)
            data: clock_in / clock_out 요청 (Clock action request)

        Returns:
            AttendanceResponse: 갱신된 근태 기록 (Updated attendance record)

        Raises:
            NotFoundError: 본인 근무가 아님 (Shift is not the caller's)
            BadRequestError: 취소된 근무, 출근 없이 퇴근 (Canceled shift, clock-out before clock-in)
            DuplicateError: 이미 퇴근 완료 (Already clocked out)
        """
        shift: Shift = await self._get_own_shift(db, current_user, data.shift_id)
        if shift.status == ShiftStatus.CANCELED.value:
            raise BadRequestError("Cannot clock a canceled shift")

        now: datetime = utc_now()
        existing: Attendance | None = await attendance_repository.get_by_shift(db, shift.id)

        if data.action == "clock_in":
            if existing is not None and existing.clock_out_time is not None:
                raise DuplicateError("Already clocked out for this shift")
            values: dict = {
                "clock_in_time": now,
                "status": determine_clock_in_status(now, shift.start_time),
            }
            if data.note is not None:
                values["note"] = data.note
            if existing is None:
                record: Attendance = await attendance_repository.create(db, {
                    "shift_id": shift.id,
                    "user_id": current_user.id,
                    **values,
                })
            else:
                # 퇴근 전 재출근은 출근 시각만 갱신
                record = await attendance_repository.update(db, existing, values)
            return to_response(record, shift)

        if existing is None or existing.clock_in_time is None:
            raise BadRequestError("You must clock in before clocking out")
        if existing.clock_out_time is not None:
            raise DuplicateError("Already clocked out for this shift")

        record = await attendance_repository.update(db, existing, {
            "clock_out_time": now,
            "working_minutes": calculate_working_minutes(existing.clock_in_time, now),
            "note": data.note if data.note is not None else existing.note,
        })
        shift = await shift_repository.update(db, shift, {"status": ShiftStatus.COMPLETED.value})
        return to_response(record, shift)

    async def get_current(
        self,
        db: AsyncSession,
        current_user: User,
        now: datetime | None = None,
    ) -> CurrentAttendanceResponse:
        """매장 시간대 기준 오늘의 근무와 근태 상태를 반환합니다."""
        now = to_utc(now or utc_now())
        tz_name: str = await store_settings_repository.get_timezone(db, current_user.store_id)
        day_start, day_end = local_day_bounds(tz_name, now)
        shift: Shift | None = await shift_repository.get_first_starting_between(
            db, current_user.id, day_start, day_end
        )
        if shift is None:
            return CurrentAttendanceResponse(status=NO_SHIFT, message="No shift scheduled for today")

        record: Attendance | None = await attendance_repository.get_by_shift(db, shift.id)
        status: str = derive_work_status(record)
        working_time: int | None = None
        message: str
        if status == WAITING:
            message = "Not clocked in yet"
        elif status == WORKING:
            message = "Currently working"
            working_time = calculate_working_minutes(record.clock_in_time, now)
        else:
            message = "Shift completed"
            working_time = record.working_minutes

        return CurrentAttendanceResponse(
            status=status,
            message=message,
            shift=to_shift_summary(shift),
            attendance=to_response(record) if record is not None else None,
            working_time=working_time,
        )


# 싱글턴 인스턴스 — Singleton instance
attendance_service: AttendanceService = AttendanceService()
