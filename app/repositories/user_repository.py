"""사용자 레포지토리 — 사용자 관련 DB 쿼리 담당.

User Repository — Handles user lookups by email, store listings and
uniqueness checks used by registration, staff management and profiles.
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.user import User, UserRole
from app.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """사용자 레포지토리.

    Extends:
        BaseRepository[User]
    """

    def __init__(self) -> None:
        super().__init__(User)

    async def get_by_email(self, db: AsyncSession, email: str) -> User | None:
        """이메일(대소문자 무시)로 사용자를 조회합니다.

        Look up a user by email, case-insensitively.
        """
        result = await db.execute(
            select(User).where(func.lower(User.email) == email.strip().lower())
        )
        return result.scalar_one_or_none()

    async def email_taken(
        self,
        db: AsyncSession,
        email: str,
        exclude_user_id: UUID | None = None,
    ) -> bool:
        """다른 사용자가 이미 이메일을 사용 중인지 확인합니다.

        Check whether another user already owns the email.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            email: 확인할 이메일 (Email to check)
            exclude_user_id: 제외할 사용자, 본인 수정 시 사용 (User to ignore on self-update)

        Returns:
            bool: 사용 중이면 True (True if the email is taken)
        """
        query: Select = select(func.count()).select_from(User).where(
            func.lower(User.email) == email.strip().lower()
        )
        if exclude_user_id is not None:
            query = query.where(User.id != exclude_user_id)
        return ((await db.execute(query)).scalar() or 0) > 0

    async def list_by_store(
        self,
        db: AsyncSession,
        store_id: UUID,
        active_only: bool = False,
    ) -> Sequence[User]:
        """매장 소속 사용자를 최근 생성 순으로 조회합니다.

        List a store's users, newest first.
        """
        query: Select = select(User).where(User.store_id == store_id)
        if active_only:
            query = query.where(User.is_active.is_(True))
        result = await db.execute(query.order_by(User.created_at.desc()))
        return result.scalars().all()

    async def get_many(
        self,
        db: AsyncSession,
        store_id: UUID,
        user_ids: list[UUID],
    ) -> Sequence[User]:
        """매장 범위 내에서 여러 사용자를 조회합니다."""
        if not user_ids:
            return []
        result = await db.execute(
            select(User).where(User.store_id == store_id, User.id.in_(user_ids))
        )
        return result.scalars().all()

    async def count_users(self, db: AsyncSession) -> dict[str, int]:
        """전체 사용자 통계 — total / admins / super admins."""
        total: int = (await db.execute(select(func.count()).select_from(User))).scalar() or 0
        admins: int = (
            await db.execute(select(func.count()).select_from(User).where(User.role == UserRole.ADMIN.value))
        ).scalar() or 0
        super_admins: int = (
            await db.execute(select(func.count()).select_from(User).where(User.is_super_admin.is_(True)))
        ).scalar() or 0
        return {"total": total, "admins": admins, "super_admins": super_admins}


# 싱글턴 인스턴스 — Singleton instance
user_repository: UserRepository = UserRepository()
