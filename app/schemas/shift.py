"""근무 관련 Pydantic 요청/응답 스키마 정의.

Shift-related Pydantic request/response schema definitions.
Covers calendar shifts, admin shift management, shift requests and the
automatic shift generator.
"""

from datetime import date, datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field


# === 근무 (Shift) 스키마 ===

class ShiftEventResponse(BaseModel):
    """캘린더 근무 이벤트 응답 스키마.

    Calendar event for one shift. title is the employee name and color
    marks canceled shifts.
    """

    id: str
    title: str
    start: datetime
    end: datetime
    employee_id: str
    employee_name: str
    status: str
    note: str | None = None
    color: str


class ShiftCreate(BaseModel):
    """근무 생성 요청 스키마 (관리자)."""

    user_id: UUID
    start_time: datetime
    end_time: datetime
    note: str | None = None


class ShiftUpdate(BaseModel):
    """근무 수정 요청 스키마 (부분 업데이트)."""

    user_id: UUID | None = None
    start_time: datetime | None = None
    end_time: datetime | None = None
    status: Literal["SCHEDULED", "CONFIRMED", "COMPLETED", "CANCELED"] | None = None
    note: str | None = None


class ShiftConfirmRequest(BaseModel):
    """근무 확정/취소 요청 스키마."""

    is_confirmed: bool
    note: str | None = None


# === 근무 신청 (Shift Request) 스키마 ===

class ShiftRequestCreate(BaseModel):
    """근무 신청 생성 요청 스키마."""

    start_time: datetime
    end_time: datetime
    note: str | None = None


class ShiftRequestResponse(BaseModel):
    """근무 신청 응답 스키마."""

    id: str
    user_id: str
    user_name: str | None = None
    store_id: str
    start_time: datetime
    end_time: datetime
    status: str
    note: str | None = None
    reviewed_at: datetime | None = None
    created_at: datetime


class ShiftRequestReview(BaseModel):
    """근무 신청 승인/반려 요청 스키마 (관리자)."""

    status: Literal["APPROVED", "REJECTED"]
    note: str | None = None


# === 자동 생성 (Shift Generator) 스키마 ===

class BusinessDay(BaseModel):
    """요일별 영업시간 — HH:MM 형식."""

    open: str = Field(pattern=r"^\d{2}:\d{2}$")
    close: str = Field(pattern=r"^\d{2}:\d{2}$")
    is_open: bool = True


class GeneratorEmployee(BaseModel):
    """자동 생성 대상 직원."""

    id: str
    name: str
    max_hours_per_week: float = 40
    min_hours_per_week: float = 0
    positions: list[str] = Field(default_factory=lambda: ["floor"])
    preferred_days: list[str] = Field(default_factory=list)


class StaffRequirement(BaseModel):
    """요일/시간대별 필요 인원.

    required_positions defaults to {"floor": count} when omitted.
    """

    day_of_week: str
    time_slot: Literal["morning", "afternoon", "evening"]
    count: int = Field(ge=0)
    required_positions: dict[str, int] | None = None


class Availability(BaseModel):
    """직원 가용 시간 — priority 1(낮음)~5(높음)."""

    employee_id: str
    date: date
    start_time: str = Field(pattern=r"^\d{2}:\d{2}$")
    end_time: str = Field(pattern=r"^\d{2}:\d{2}$")
    priority: int = Field(default=3, ge=1, le=5)


class GenerateShiftsRequest(BaseModel):
    """근무 자동 생성 요청 스키마."""

    start_date: date
    end_date: date
    business_hours: dict[str, BusinessDay]
    employees: list[GeneratorEmployee]
    staff_requirements: list[StaffRequirement]
    availability: list[Availability] = Field(default_factory=list)
    max_consecutive_days: int = Field(default=5, ge=1)
    min_rest_hours: int = Field(default=10, ge=0)


class GeneratedShift(BaseModel):
    """생성된 근무 — 저장되지 않은 제안."""

    id: str
    employee_id: str
    employee_name: str
    date: date
    start_time: datetime
    end_time: datetime
    position: str
    time_slot: str
    score: float
    color: str


class GenerateShiftsResponse(BaseModel):
    """근무 자동 생성 응답 스키마."""

    shifts: list[GeneratedShift]
    unfilled: list[dict]
    summary: dict
