"""근태 레포지토리 — 출퇴근 기록 DB 쿼리 담당.

Attendance Repository — Lookups by shift and filtered listings joined
with the shift they belong to.
"""

from datetime import datetime
from typing import Sequence
from uuid import UUID

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models.attendance import Attendance
from app.models.shift import Shift
from app.repositories.base import BaseRepository


class AttendanceRepository(BaseRepository[Attendance]):
    """근태 레포지토리.

    Extends:
        BaseRepository[Attendance]
    """

    def __init__(self) -> None:
        super().__init__(Attendance)

    async def get_by_shift(self, db: AsyncSession, shift_id: UUID) -> Attendance | None:
        """근무 ID로 근태 기록을 조회합니다 (근무당 최대 1건)."""
        result = await db.execute(select(Attendance).where(Attendance.shift_id == shift_id))
        return result.scalar_one_or_none()

    async def list_for_user(
        self,
        db: AsyncSession,
        user_id: UUID,
        start: datetime | None = None,
        end: datetime | None = None,
        status: str | None = None,
    ) -> Sequence[Attendance]:
        """사용자의 근태 기록을 근무 시작 시각 내림차순으로 조회합니다.

        List a user's attendance records joined with their shifts.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            user_id: 사용자 UUID (User UUID)
            start: 근무 시작 하한 (Lower bound on shift start)
            end: 근무 종료 상한 (Upper bound on shift end)
            status: 근태 상태 필터 (Attendance status filter)

        Returns:
            Sequence[Attendance]: 근무가 로드된 기록 목록 (Records with shift loaded)
        """
        query: Select = (
            select(Attendance)
            .join(Shift, Attendance.shift_id == Shift.id)
            .options(selectinload(Attendance.shift))
            .where(Attendance.user_id == user_id)
        )
        if start is not None:
            query = query.where(Shift.start_time >= start)
        if end is not None:
            query = query.where(Shift.end_time <= end)
        if status:
            query = query.where(Attendance.status == status)
        result = await db.execute(query.order_by(Shift.start_time.desc()))
        return result.scalars().all()

    async def list_for_shifts(self, db: AsyncSession, shift_ids: list[UUID]) -> dict[UUID, Attendance]:
        """근무 ID 목록에 대한 근태 기록을 {shift_id: record}로 반환합니다."""
        if not shift_ids:
            return {}
        result = await db.execute(select(Attendance).where(Attendance.shift_id.in_(shift_ids)))
        return {record.shift_id: record for record in result.scalars().all()}


# 싱글턴 인스턴스 — Singleton instance
attendance_repository: AttendanceRepository = AttendanceRepository()
