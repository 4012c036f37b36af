"""사용자 관련 Pydantic 요청/응답 스키마 정의.

User-related Pydantic request/response schema definitions.
Covers admin staff management and self-service profile endpoints.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, EmailStr, Field

from app.utils.password import MIN_PASSWORD_LENGTH

RoleName = Literal["ADMIN", "STAFF"]


class StaffResponse(BaseModel):
    """직원 응답 스키마.

    Staff member as listed on the admin staff pages.
    """

    id: str
    name: str
    email: str
    role: str
    phone: str | None = None
    department: str | None = None
    hourly_wage: int | None = None
    is_active: bool
    created_at: datetime


class StaffInviteRequest(BaseModel):
    """직원 초대 요청 스키마.

    Attributes:
        name: 이름 (Display name, required)
        email: 이메일 (Login email, must be unused)
        role: 역할 (ADMIN or STAFF)
        phone / department / hourly_wage: 선택 프로필 (Optional profile data)
    """

    name: str = Field(min_length=1, max_length=255)
    email: EmailStr
    role: RoleName
    phone: str | None = None
    department: str | None = None
    hourly_wage: int | None = Field(default=None, ge=0)


class StaffInviteResponse(BaseModel):
    """직원 초대 응답 — 관리자가 전달할 임시 비밀번호 포함."""

    user: StaffResponse
    temporary_password: str
    email_sent: bool


class StaffUpdateRequest(BaseModel):
    """직원 정보 수정 요청 스키마 (부분 업데이트)."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    email: EmailStr | None = None
    role: RoleName | None = None
    phone: str | None = None
    department: str | None = None
    hourly_wage: int | None = Field(default=None, ge=0)


class StaffStatusRequest(BaseModel):
    """직원 활성 상태 변경 요청 스키마."""

    status: Literal["active", "inactive"]


class ProfileResponse(BaseModel):
    """프로필 응답 스키마."""

    id: str
    name: str
    email: str
    role: str
    phone: str | None = None
    image_url: str | None = None
    department: str | None = None
    store_id: str
    created_at: datetime


class ProfileUpdate(BaseModel):
    """프로필 수정 요청 스키마.

    Profile update request. Changing the password requires the current one.

    Attributes:
        name / email / phone / image_url / department: 프로필 필드 (Profile fields)
        current_password: 현재 비밀번호 (Required with new_password)
        new_password: 새 비밀번호 (At least 8 characters)
    """

    name: str | None = Field(default=None, min_length=1, max_length=255)
    email: EmailStr | None = None
    phone: str | None = None
    image_url: str | None = None
    department: str | None = None
    current_password: str | None = None
    new_password: str | None = Field(default=None, min_length=MIN_PASSWORD_LENGTH)
