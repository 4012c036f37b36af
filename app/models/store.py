"""매장 및 매장 설정 SQLAlchemy ORM 모델 정의.

Store and StoreSettings SQLAlchemy ORM model definitions.
A store is the tenant boundary: every user, shift and request belongs to one.

Tables:
    - stores: 매장 (Stores with business hours)
    - store_settings: 매장별 운영 규칙 (Per-store scheduling rules, 1:1 with stores)
"""

import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base

WEEKDAYS: tuple[str, ...] = (
    "monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday",
)


def default_business_hours() -> dict[str, dict[str, Any]]:
    """기본 영업시간 — 평일 09-18, 토요일 10-17, 일요일 휴무.

    Default business hours: weekdays 09:00-18:00, Saturday 10:00-17:00,
    Sunday closed.
    """
    hours: dict[str, dict[str, Any]] = {}
    for day in WEEKDAYS[:5]:
        hours[day] = {"open": "09:00", "close": "18:00", "is_open": True}
    hours["saturday"] = {"open": "10:00", "close": "17:00", "is_open": True}
    hours["sunday"] = {"open": "10:00", "close": "17:00", "is_open": False}
    return hours


class Store(Base):
    """매장 모델.

    Store model — The unit that owns staff, shifts and settings.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        name: 매장 이름 (Store name)
        address: 주소 (Address)
        phone: 전화번호 (Phone number)
        business_hours: 요일별 영업시간 JSON (Weekday -> {open, close, is_open})
        created_at: 생성 일시 UTC (Creation timestamp)
        updated_at: 수정 일시 UTC (Last update timestamp)
    """

    __tablename__ = "stores"

    # 매장 고유 식별자 — Store unique identifier
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 매장 이름 — Store display name
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    # 주소 — Street address
    address: Mapped[str | None] = mapped_column(String(500), nullable=True)
    # 전화번호 — Contact phone number
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    # 영업시간 — Business hours keyed by lower-case weekday name
    business_hours: Mapped[dict] = mapped_column(JSON, nullable=False, default=default_business_hours)
    # 생성 일시 — Record creation timestamp (UTC)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    # 수정 일시 — Last modification timestamp (UTC, auto-updated)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))


class StoreSettings(Base):
    """매장 설정 모델 — 근무 규칙과 알림 기본값.

    Store settings model — Shift length rules, weekly limits and
    notification channel defaults for a single store.

    Attributes:
        store_id: 매장 FK, 고유 (Owning store, unique)
        min_shift_hours / max_shift_hours: 근무 시간 범위 (Allowed shift length)
        min_break_minutes: 최소 휴게 시간 (Minimum break)
        max_weekly_work_hours: 주간 최대 근무 시간 (Weekly work limit)
        email_notifications / push_notifications: 알림 채널 기본값 (Channel defaults)
        timezone: IANA 타임존 (Used to resolve "today")
        language: UI 언어 코드 (UI language code)
    """

    __tablename__ = "store_settings"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 소속 매장 FK — Owning store (1:1)
    store_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("stores.id", ondelete="CASCADE"), unique=True, nullable=False)
    min_shift_hours: Mapped[int] = mapped_column(Integer, nullable=False, default=2)
    max_shift_hours: Mapped[int] = mapped_column(Integer, nullable=False, default=8)
    min_break_minutes: Mapped[int] = mapped_column(Integer, nullable=False, default=30)
    max_weekly_work_hours: Mapped[int] = mapped_column(Integer, nullable=False, default=40)
    # 알림 채널 기본값 — Defaults for users without explicit preferences
    email_notifications: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    push_notifications: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    timezone: Mapped[str] = mapped_column(String(64), nullable=False, default="Asia/Tokyo")
    language: Mapped[str] = mapped_column(String(10), nullable=False, default="ja")
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    # 관계 — Relationships
    store = relationship("Store")
