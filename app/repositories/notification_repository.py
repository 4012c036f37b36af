"""알림 레포지토리 — 알림 및 알림 설정 DB 쿼리 담당.

Notification Repository — Handles notification listing, unread counts,
bulk read marking, and atomic replacement of notification preferences.
"""

from typing import Any, Sequence
from uuid import UUID

from sqlalchemy import Select, delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.notification import Notification, NotificationPreference
from app.repositories.base import BaseRepository


class NotificationRepository(BaseRepository[Notification]):
    """알림 레포지토리.

    Notification repository with user-specific read/unread operations.

    Extends:
        BaseRepository[Notification]
    """

    def __init__(self) -> None:
        super().__init__(Notification)

    def _user_query(
        self,
        user_id: UUID,
        unread_only: bool = False,
        notification_type: str | None = None,
    ) -> Select:
        query: Select = select(Notification).where(Notification.user_id == user_id)
        if unread_only:
            query = query.where(Notification.is_read.is_(False))
        if notification_type:
            query = query.where(Notification.type == notification_type)
        return query

    async def get_user_notifications(
        self,
        db: AsyncSession,
        user_id: UUID,
        unread_only: bool = False,
        notification_type: str | None = None,
        limit: int = 20,
    ) -> Sequence[Notification]:
        """사용자의 알림 목록을 최신순으로 조회합니다.

        Retrieve a user's notifications, newest first.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            user_id: 사용자 UUID (User UUID)
            unread_only: 읽지 않은 알림만 (Only unread notifications)
            notification_type: 알림 유형 필터 (Type filter)
            limit: 최대 개수 (Maximum number of rows)

        Returns:
            Sequence[Notification]: 알림 목록 (List of notifications)
        """
        query: Select = (
            self._user_query(user_id, unread_only, notification_type)
            .order_by(Notification.created_at.desc())
            .limit(limit)
        )
        result = await db.execute(query)
        return result.scalars().all()

    async def count_user_notifications(
        self,
        db: AsyncSession,
        user_id: UUID,
        unread_only: bool = False,
        notification_type: str | None = None,
    ) -> int:
        """조건에 맞는 사용자 알림 수를 반환합니다."""
        return await self.count(db, self._user_query(user_id, unread_only, notification_type))

    async def mark_all_read(
        self,
        db: AsyncSession,
        user_id: UUID,
        notification_type: str | None = None,
    ) -> int:
        """사용자의 읽지 않은 알림을 모두 읽음 처리합니다.

        Mark all unread notifications as read for a user, optionally
        limited to one type.

        Returns:
            int: 업데이트된 알림 수 (Count of updated notifications)
        """
        stmt = (
            update(Notification)
            .where(
                Notification.user_id == user_id,
                Notification.is_read.is_(False),
            )
            .values(is_read=True)
        )
        if notification_type:
            stmt = stmt.where(Notification.type == notification_type)
        result = await db.execute(stmt)
        await db.flush()
        return result.rowcount


class NotificationPreferenceRepository(BaseRepository[NotificationPreference]):
    """알림 설정 레포지토리.

    Extends:
        BaseRepository[NotificationPreference]
    """

    def __init__(self) -> None:
        super().__init__(NotificationPreference)

    async def get_for_user(self, db: AsyncSession, user_id: UUID) -> Sequence[NotificationPreference]:
        result = await db.execute(
            select(NotificationPreference).where(NotificationPreference.user_id == user_id)
        )
        return result.scalars().all()

    async def get_for_type(
        self,
        db: AsyncSession,
        user_id: UUID,
        notification_type: str,
    ) -> NotificationPreference | None:
        result = await db.execute(
            select(NotificationPreference).where(
                NotificationPreference.user_id == user_id,
                NotificationPreference.type == notification_type,
            )
        )
        return result.scalar_one_or_none()

    async def replace_for_user(
        self,
        db: AsyncSession,
        user_id: UUID,
        preferences: list[dict[str, Any]],
    ) -> Sequence[NotificationPreference]:
        """사용자의 알림 설정을 한 트랜잭션 안에서 통째로 교체합니다.

        Replace all of a user's preferences within the current transaction:
        either every row is deleted and re-inserted, or the transaction is
        rolled back and nothing changes.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            user_id: 사용자 UUID (User UUID)
            preferences: [{type, email, push, in_app}] 목록 (New preference rows)

        Returns:
            Sequence[NotificationPreference]: 새 설정 목록 (New rows)

        Raises:
            SQLAlchemyError: 롤백 후 재발생 (Re-raised after rollback)
        """
        try:
            await db.execute(
                delete(NotificationPreference).where(NotificationPreference.user_id == user_id)
            )
            rows: list[NotificationPreference] = [
                NotificationPreference(user_id=user_id, **pref) for pref in preferences
            ]
            db.add_all(rows)
            await db.flush()
        except SQLAlchemyError:
            await db.rollback()
            raise
        return rows


# 싱글턴 인스턴스 — Singleton instances
notification_repository: NotificationRepository = NotificationRepository()
notification_preference_repository: NotificationPreferenceRepository = NotificationPreferenceRepository()
