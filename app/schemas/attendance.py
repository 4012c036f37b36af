"""근태 관련 Pydantic 요청/응답 스키마 정의.

Attendance Pydantic request/response schema definitions.
"""

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel


class AttendanceActionRequest(BaseModel):
    """출퇴근 기록 요청 스키마.

    Attributes:
        action: clock_in 또는 clock_out (Clock action)
        shift_id: 대상 근무 (Shift being clocked)
        note: 메모 (Optional note; clock_out keeps the existing note when omitted)
    """

    action: Literal["clock_in", "clock_out"]
    shift_id: UUID
    note: str | None = None


class ShiftSummary(BaseModel):
    id: str
    start_time: datetime
    end_time: datetime
    status: str
    note: str | None = None


class AttendanceResponse(BaseModel):
    """근태 기록 응답 스키마."""

    id: str
    shift_id: str
    user_id: str
    clock_in_time: datetime | None = None
    clock_out_time: datetime | None = None
    working_minutes: int | None = None
    status: str
    note: str | None = None
    shift: ShiftSummary | None = None


class CurrentAttendanceResponse(BaseModel):
    """오늘의 근무 상태 응답 스키마.

    status: NO_SHIFT / WAITING / WORKING / COMPLETED
    """

    status: str
    message: str | None = None
    shift: ShiftSummary | None = None
    attendance: AttendanceResponse | None = None
    working_time: int | None = None  # 분 단위 (Minutes)
