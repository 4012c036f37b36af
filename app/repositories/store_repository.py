"""매장 레포지토리 — 매장 및 매장 설정 DB 쿼리 담당.

Store Repository — Store lookups and lazy creation of store settings.
"""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.models.store import Store, StoreSettings
from app.repositories.base import BaseRepository


class StoreRepository(BaseRepository[Store]):
    """매장 레포지토리.

    Extends:
        BaseRepository[Store]
    """

    def __init__(self) -> None:
        super().__init__(Store)

    async def get_by_name(self, db: AsyncSession, name: str) -> Store | None:
        result = await db.execute(select(Store).where(Store.name == name).limit(1))
        return result.scalar_one_or_none()

    async def get_or_create_default(self, db: AsyncSession) -> Store:
        """기본 매장을 조회하고, 없으면 생성합니다.

        Return the default store (DEFAULT_STORE_NAME), creating it together
        with default settings when missing.
        """
        store: Store | None = await self.get_by_name(db, settings.DEFAULT_STORE_NAME)
        if store is not None:
            return store
        store = await self.create(db, {"name": settings.DEFAULT_STORE_NAME})
        await store_settings_repository.get_or_create(db, store.id)
        return store


class StoreSettingsRepository(BaseRepository[StoreSettings]):
    """매장 설정 레포지토리.

    Extends:
        BaseRepository[StoreSettings]
    """

    def __init__(self) -> None:
        super().__init__(StoreSettings)

    async def get_by_store(self, db: AsyncSession, store_id: UUID) -> StoreSettings | None:
        result = await db.execute(select(StoreSettings).where(StoreSettings.store_id == store_id))
        return result.scalar_one_or_none()

    async def get_or_create(self, db: AsyncSession, store_id: UUID) -> StoreSettings:
        """매장 설정을 조회하고, 없으면 기본값으로 생성합니다.

        Return a store's settings, creating the default row on first access.
        """
        existing: StoreSettings | None = await self.get_by_store(db, store_id)
        if existing is not None:
            return existing
        return await self.create(db, {"store_id": store_id, "timezone": settings.DEFAULT_TIMEZONE})

    async def get_timezone(self, db: AsyncSession, store_id: UUID) -> str:
        """매장 시간대 — 설정이 없으면 DEFAULT_TIMEZONE."""
        result = await db.execute(select(StoreSettings.timezone).where(StoreSettings.store_id == store_id))
        return result.scalar() or settings.DEFAULT_TIMEZONE


# 싱글턴 인스턴스 — Singleton instances
store_repository: StoreRepository = StoreRepository()
store_settings_repository: StoreSettingsRepository = StoreSettingsRepository()
