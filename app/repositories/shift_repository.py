"""근무 레포지토리 — 근무 및 근무 신청 DB 쿼리 담당.

Shift Repository — Range queries, overlap detection and request listings.
Relationships needed for responses are eager-loaded with selectinload
because lazy loading is unavailable in async sessions.
"""

from datetime import datetime
from typing import Sequence
from uuid import UUID

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models.shift import Shift, ShiftRequest, ShiftStatus
from app.repositories.base import BaseRepository


class ShiftRepository(BaseRepository[Shift]):
    """근무 레포지토리.

    Extends:
        BaseRepository[Shift]
    """

    def __init__(self) -> None:
        super().__init__(Shift)

    async def get_with_user(self, db: AsyncSession, shift_id: UUID, store_id: UUID | None = None) -> Shift | None:
        """근무를 사용자 정보와 함께 조회합니다."""
        query: Select = self._scope(
            select(Shift).options(selectinload(Shift.user)).where(Shift.id == shift_id),
            store_id,
        )
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def list_in_range(
        self,
        db: AsyncSession,
        store_id: UUID,
        start: datetime | None = None,
        end: datetime | None = None,
        user_id: UUID | None = None,
    ) -> Sequence[Shift]:
        """기간 내 근무 목록을 시작 시각 순으로 조회합니다.

        List store shifts fully inside [start, end], ordered by start time.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            store_id: 매장 UUID (Store scope)
            start: start_time 하한 (Lower bound on start_time, inclusive)
            end: end_time 상한 (Upper bound on end_time, inclusive)
            user_id: 특정 사용자로 제한 (Restrict to one user)

        Returns:
            Sequence[Shift]: 사용자 정보가 로드된 근무 목록 (Shifts with user loaded)
        """
        query: Select = (
            select(Shift)
            .options(selectinload(Shift.user))
            .where(Shift.store_id == store_id)
        )
        if start is not None:
            query = query.where(Shift.start_time >= start)
        if end is not None:
            query = query.where(Shift.end_time <= end)
        if user_id is not None:
            query = query.where(Shift.user_id == user_id)
        result = await db.execute(query.order_by(Shift.start_time.asc()))
        return result.scalars().all()

    async def list_starting_between(
        self,
        db: AsyncSession,
        store_id: UUID,
        start: datetime,
        end: datetime,
    ) -> Sequence[Shift]:
        """[start, end) 안에 시작하는 매장 근무 목록 (보고서용, 사용자 포함)."""
        result = await db.execute(
            select(Shift)
            .options(selectinload(Shift.user))
            .where(Shift.store_id == store_id, Shift.start_time >= start, Shift.start_time < end)
            .order_by(Shift.start_time.asc())
        )
        return result.scalars().all()

    async def find_conflict(
        self,
        db: AsyncSession,
        user_id: UUID,
        start: datetime,
        end: datetime,
        exclude_shift_id: UUID | None = None,
    ) -> Shift | None:
        """같은 사용자의 취소되지 않은 근무 중 겹치는 것을 찾습니다.

        Find a non-canceled shift of the same user overlapping [start, end).
        """
        query: Select = select(Shift).where(
            Shift.user_id == user_id,
            Shift.status != ShiftStatus.CANCELED.value,
            Shift.start_time < end,
            Shift.end_time > start,
        )
        if exclude_shift_id is not None:
            query = query.where(Shift.id != exclude_shift_id)
        result = await db.execute(query.limit(1))
        return result.scalar_one_or_none()

    async def get_first_starting_between(
        self,
        db: AsyncSession,
        user_id: UUID,
        lower: datetime,
        upper: datetime,
    ) -> Shift | None:
        """[lower, upper) 안에 시작하는 사용자의 첫 근무를 조회합니다."""
        result = await db.execute(
            select(Shift)
            .where(
                Shift.user_id == user_id,
                Shift.start_time >= lower,
                Shift.start_time < upper,
                Shift.status != ShiftStatus.CANCELED.value,
            )
            .order_by(Shift.start_time.asc())
            .limit(1)
        )
        return result.scalar_one_or_none()


class ShiftRequestRepository(BaseRepository[ShiftRequest]):
    """근무 신청 레포지토리.

    Extends:
        BaseRepository[ShiftRequest]
    """

    def __init__(self) -> None:
        super().__init__(ShiftRequest)

    async def list_for_user(
        self,
        db: AsyncSession,
        user_id: UUID,
        store_id: UUID,
        status: str | None = None,
    ) -> Sequence[ShiftRequest]:
        """사용자 본인의 신청 목록 — 시작 시각 내림차순."""
        query: Select = select(ShiftRequest).where(
            ShiftRequest.user_id == user_id,
            ShiftRequest.store_id == store_id,
        )
        if status:
            query = query.where(ShiftRequest.status == status)
        result = await db.execute(query.order_by(ShiftRequest.start_time.desc()))
        return result.scalars().all()

    async def list_for_store(
        self,
        db: AsyncSession,
        store_id: UUID,
        status: str | None = None,
        user_id: UUID | None = None,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> Sequence[ShiftRequest]:
        """매장 전체 신청 목록 — 신청자 정보 포함."""
        query: Select = (
            select(ShiftRequest)
            .options(selectinload(ShiftRequest.user))
            .where(ShiftRequest.store_id == store_id)
        )
        if status:
            query = query.where(ShiftRequest.status == status)
        if user_id is not None:
            query = query.where(ShiftRequest.user_id == user_id)
        if start is not None:
            query = query.where(ShiftRequest.start_time >= start)
        if end is not None:
            query = query.where(ShiftRequest.start_time < end)
        result = await db.execute(query.order_by(ShiftRequest.start_time.desc()))
        return result.scalars().all()


# 싱글턴 인스턴스 — Singleton instances
shift_repository: ShiftRepository = ShiftRepository()
shift_request_repository: ShiftRequestRepository = ShiftRequestRepository()
