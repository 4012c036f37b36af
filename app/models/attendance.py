"""근태 기록 SQLAlchemy ORM 모델 정의.

Attendance SQLAlchemy ORM model definition.

Tables:
    - attendances: 출퇴근 기록 (Clock-in/out record, 1:1 with shifts)
"""

import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base


class AttendanceStatus(str, enum.Enum):
    """근태 상태 — Punctuality of a clock-in."""

    ON_TIME = "ON_TIME"
    LATE = "LATE"
    ABSENT = "ABSENT"
    COMPLETED = "COMPLETED"


class Attendance(Base):
    """근태 기록 모델 — 근무에 대한 실제 출퇴근 시각.

    Attendance model — Actual clock-in/clock-out against one shift.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        shift_id: 근무 FK, 고유 (Shift, unique: one record per shift)
        user_id: 사용자 FK (Clocking user)
        clock_in_time: 출근 시각 UTC (Clock-in timestamp)
        clock_out_time: 퇴근 시각 UTC (Clock-out timestamp)
        working_minutes: 근무 분 (Minutes between clock-in and clock-out)
        status: ON_TIME / LATE / ABSENT / COMPLETED
        note: 메모 (Note)
    """

    __tablename__ = "attendances"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 근무 FK — One attendance per shift
    shift_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("shifts.id", ondelete="CASCADE"), unique=True, nullable=False)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    clock_in_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    clock_out_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    working_minutes: Mapped[int | None] = mapped_column(Integer, nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=AttendanceStatus.ON_TIME.value)
    note: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    # 관계 — Relationships
    shift = relationship("Shift")
