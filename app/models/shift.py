"""근무 및 근무 신청 SQLAlchemy ORM 모델 정의.

Shift and ShiftRequest SQLAlchemy ORM model definitions.

Tables:
    - shifts: 확정/예정 근무 (Scheduled work intervals assigned to a user)
    - shift_requests: 근무 희망 신청 (Staff availability windows awaiting review)
"""

import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base


class ShiftStatus(str, enum.Enum):
    """근무 상태 — Shift lifecycle status."""

    SCHEDULED = "SCHEDULED"
    CONFIRMED = "CONFIRMED"
    COMPLETED = "COMPLETED"
    CANCELED = "CANCELED"


class ShiftRequestStatus(str, enum.Enum):
    """근무 신청 상태 — Shift request review status."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class Shift(Base):
    """근무 모델 — 사용자에게 배정된 근무 시간.

    Shift model — A scheduled work interval assigned to a staff member.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        user_id: 근무자 FK (Assigned user)
        store_id: 매장 FK (Store the shift belongs to)
        start_time / end_time: 근무 시작/종료 UTC (Work interval)
        status: SCHEDULED / CONFIRMED / COMPLETED / CANCELED
        note: 메모 (Free text note)
    """

    __tablename__ = "shifts"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 근무자 FK — Assigned user (CASCADE: 사용자 삭제 시 근무도 삭제)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    # 매장 FK — Owning store
    store_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("stores.id", ondelete="CASCADE"), nullable=False, index=True)
    start_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
    end_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=ShiftStatus.SCHEDULED.value)
    note: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    # 관계 — Relationships
    user = relationship("User")


class ShiftRequest(Base):
    """근무 신청 모델 — 직원이 제출한 희망 근무 시간.

    Shift request model — A staff member's proposed availability window.
    Only PENDING requests may be deleted by their owner.

    Attributes:
        user_id: 신청자 FK (Requesting user)
        store_id: 매장 FK (Store)
        start_time / end_time: 희망 시간 (Requested window)
        status: PENDING / APPROVED / REJECTED
        note: 메모 (Note from the requester or reviewer)
        reviewed_by: 검토한 관리자 (Reviewing admin, nullable)
        reviewed_at: 검토 일시 (Review timestamp)
    """

    __tablename__ = "shift_requests"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    store_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("stores.id", ondelete="CASCADE"), nullable=False, index=True)
    start_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=ShiftRequestStatus.PENDING.value)
    note: Mapped[str | None] = mapped_column(Text, nullable=True)
    # 검토자 — Reviewing admin (SET NULL: 관리자 삭제 시 기록 유지)
    reviewed_by: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    reviewed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    # 관계 — Relationships
    user = relationship("User", foreign_keys=[user_id])
