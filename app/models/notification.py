"""알림 및 알림 설정 SQLAlchemy ORM 모델 정의.

Notification and NotificationPreference SQLAlchemy ORM model definitions.

Tables:
    - notifications: 사용자 알림 (In-app notifications)
    - notification_preferences: 유형별 채널 설정 (Per-type channel toggles)
"""

import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, ForeignKey, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class NotificationType(str, enum.Enum):
    """알림 유형 — Notification categories."""

    SHIFT_CONFIRMED = "SHIFT_CONFIRMED"
    SHIFT_CHANGED = "SHIFT_CHANGED"
    REQUEST_APPROVED = "REQUEST_APPROVED"
    REQUEST_REJECTED = "REQUEST_REJECTED"
    SHIFT_REMINDER = "SHIFT_REMINDER"
    SYSTEM_NOTIFICATION = "SYSTEM_NOTIFICATION"
    ADMIN_MESSAGE = "ADMIN_MESSAGE"


class Notification(Base):
    """알림 모델 — 사용자에게 전달되는 인앱 알림.

    Notification model — In-app notification delivered to a user.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        user_id: 수신 사용자 FK (Recipient user)
        title: 알림 제목 (Title)
        message: 알림 내용 (Body)
        type: NotificationType 값 (Notification category)
        related_id: 관련 엔티티 ID (Related shift/request id)
        link: 프론트엔드 이동 경로 (Deep link path)
        is_read: 읽음 여부 (Read flag)
        created_at: 생성 일시 UTC (Creation timestamp)
    """

    __tablename__ = "notifications"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 수신 사용자 FK — Recipient (CASCADE)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    type: Mapped[str] = mapped_column(String(50), nullable=False)
    related_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    link: Mapped[str | None] = mapped_column(String(500), nullable=True)
    is_read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))


class NotificationPreference(Base):
    """알림 설정 모델 — 사용자별, 유형별 채널 on/off.

    Notification preference — Channel toggles per user and notification type.
    """

    __tablename__ = "notification_preferences"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    type: Mapped[str] = mapped_column(String(50), nullable=False)
    email: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    push: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    in_app: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        UniqueConstraint("user_id", "type", name="uq_notification_pref_user_type"),
    )
