"""매장/설정 관련 Pydantic 요청/응답 스키마 정의.

Store, store settings, backup/restore and super admin schemas.
"""

from datetime import datetime
from typing import Any, Literal
from uuid import UUID

from pydantic import BaseModel, Field

from app.schemas.shift import BusinessDay


class StoreSettingsResponse(BaseModel):
    """매장 설정 응답 스키마."""

    id: str
    store_id: str
    min_shift_hours: int
    max_shift_hours: int
    min_break_minutes: int
    max_weekly_work_hours: int
    email_notifications: bool
    push_notifications: bool
    timezone: str
    language: str
    updated_at: datetime


class StoreSettingsUpdate(BaseModel):
    """매장 설정 수정 요청 스키마 (부분 업데이트)."""

    min_shift_hours: int | None = Field(default=None, ge=0, le=24)
    max_shift_hours: int | None = Field(default=None, ge=1, le=24)
    min_break_minutes: int | None = Field(default=None, ge=0)
    max_weekly_work_hours: int | None = Field(default=None, ge=1, le=168)
    email_notifications: bool | None = None
    push_notifications: bool | None = None
    timezone: str | None = None
    language: str | None = Field(default=None, max_length=10)


class StoreResponse(BaseModel):
    """매장 응답 스키마."""

    id: str
    name: str
    address: str | None = None
    phone: str | None = None
    business_hours: dict[str, Any]
    created_at: datetime


class StoreUpdate(BaseModel):
    """매장 정보 수정 요청 스키마."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    address: str | None = None
    phone: str | None = None
    business_hours: dict[str, BusinessDay] | None = None


class RestoreRequest(BaseModel):
    """백업 복원 요청 — store와 settings 키가 필수, 설정만 복원."""

    store: dict[str, Any]
    settings: StoreSettingsUpdate


# === 슈퍼 관리자 (Super admin) 스키마 ===

class SuperAdminAction(BaseModel):
    """슈퍼 관리자 작업 요청.

    action:
        promote_to_admin / promote_to_super_admin: user_id 필요
        create_store: name, address, phone 필요
    """

    action: Literal["promote_to_admin", "promote_to_super_admin", "create_store"]
    user_id: UUID | None = None
    name: str | None = None
    address: str | None = None
    phone: str | None = None
