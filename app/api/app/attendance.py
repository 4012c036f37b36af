"""앱 근태 라우터 — 출퇴근 기록 및 오늘 근무 상태.

App Attendance Router — Clock in/out, attendance history and today's
work status.
"""

from datetime import date
from typing import Annotated, Literal

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user
from app.database import get_db
from app.models.user import User
from app.schemas.attendance import (
    AttendanceActionRequest,
    AttendanceResponse,
    CurrentAttendanceResponse,
)
from app.services.attendance_service import attendance_service

router: APIRouter = APIRouter()


@router.get("", response_model=list[AttendanceResponse])
async def list_my_attendance(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
    start_date: Annotated[date | None, Query()] = None,
    end_date: Annotated[date | None, Query()] = None,
    status: Annotated[Literal["ON_TIME", "LATE", "ABSENT", "COMPLETED"] | None, Query()] = None,
) -> list[AttendanceResponse]:
    """내 근태 기록을 근무와 함께 조회합니다.

    List my attendance records joined with their shifts, filtered on the
    shift window and ordered by shift start (newest first).
    """
    return await attendance_service.list_records(
        db, current_user, start_date=start_date, end_date=end_date, status=status
    )


@router.post("", response_model=AttendanceResponse)
async def record_attendance(
    data: AttendanceActionRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> AttendanceResponse:
    """출근 또는 퇴근을 기록합니다.

    Record a clock_in or clock_out against one of my shifts.

    Args:
        data: 동작(clock_in/clock_out), 근무 ID, 메모 (Action, shift id, note)
        db: 비동기 데이터베이스 세션 (Async database session)
        current_user: 인증된 사용자 (Authenticated user)

    Returns:
        AttendanceResponse: 갱신된 근태 기록 (Updated attendance record)
    """
    result: AttendanceResponse = await attendance_service.record(db, current_user, data)
    await db.commit()
    return result


@router.get("/current", response_model=CurrentAttendanceResponse)
async def get_current_attendance(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> CurrentAttendanceResponse:
    """오늘(매장 시간대 기준) 근무와 출퇴근 상태를 반환합니다."""
    return await attendance_service.get_current(db, current_user)
