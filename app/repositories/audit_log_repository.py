"""감사 로그 레포지토리 — 감사 로그 검색 쿼리 담당.

Audit Log Repository — Filtered, windowed search over audit entries.
"""

from datetime import datetime
from typing import Sequence
from uuid import UUID

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models.audit_log import AuditLog
from app.repositories.base import BaseRepository


class AuditLogRepository(BaseRepository[AuditLog]):
    """감사 로그 레포지토리.

    Extends:
        BaseRepository[AuditLog]
    """

    def __init__(self) -> None:
        super().__init__(AuditLog)

    async def search(
        self,
        db: AsyncSession,
        store_id: UUID,
        user_id: UUID | None = None,
        action_type: str | None = None,
        start: datetime | None = None,
        end: datetime | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> tuple[Sequence[AuditLog], int]:
        """감사 로그를 조건으로 검색합니다 (최신순).

        Search a store's audit entries, newest first.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            store_id: 매장 UUID (Store scope)
            user_id: 수행자 필터 (Acting user filter)
            action_type: 작업 유형 필터 (Action type filter)
            start: 생성 일시 하한 (created_at lower bound, inclusive)
            end: 생성 일시 상한 (created_at upper bound, exclusive)
            limit: 최대 개수 (Page size)
            offset: 건너뛸 개수 (Offset)

        Returns:
            tuple[Sequence[AuditLog], int]: (로그 목록, 전체 개수)
        """
        query: Select = (
            select(AuditLog)
            .options(selectinload(AuditLog.user))
            .where(AuditLog.store_id == store_id)
        )
        if user_id is not None:
            query = query.where(AuditLog.user_id == user_id)
        if action_type:
            query = query.where(AuditLog.action_type == action_type)
        if start is not None:
            query = query.where(AuditLog.created_at >= start)
        if end is not None:
            query = query.where(AuditLog.created_at < end)
        query = query.order_by(AuditLog.created_at.desc())
        return await self.get_window(db, query, limit, offset)


# 싱글턴 인스턴스 — Singleton instance
audit_log_repository: AuditLogRepository = AuditLogRepository()
