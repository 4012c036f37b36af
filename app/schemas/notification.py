"""알림 관련 Pydantic 요청/응답 스키마 정의.

Notification Pydantic request/response schema definitions.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from app.models.notification import NotificationType


class NotificationResponse(BaseModel):
    """알림 응답 스키마."""

    id: str
    title: str
    message: str
    type: str
    related_id: str | None = None
    link: str | None = None
    is_read: bool
    created_at: datetime


class NotificationUpdate(BaseModel):
    """알림 읽음 상태 변경 요청."""

    is_read: bool


class MarkAllReadRequest(BaseModel):
    """전체 읽음 처리 요청 — type이 주어지면 해당 유형만."""

    type: NotificationType | None = None


class NotificationPreferenceItem(BaseModel):
    """알림 유형별 채널 설정."""

    type: NotificationType
    email: bool = True
    push: bool = False
    in_app: bool = True


class NotificationPreferencesUpdate(BaseModel):
    """알림 설정 일괄 교체 요청."""

    preferences: list[NotificationPreferenceItem]


class AdminMessageRequest(BaseModel):
    """관리자 메시지 발송 요청.

    user_ids가 비어 있으면 매장의 모든 활성 직원에게 발송합니다.
    """

    title: str = Field(min_length=1, max_length=255)
    message: str = Field(min_length=1)
    user_ids: list[UUID] | None = None
    link: str | None = None
