"""기본 CRUD 레포지토리 — 모든 레포지토리의 부모 클래스.

Base CRUD Repository — Parent class for all domain repositories.
Provides generic Create, Read, Update, Delete operations with store scoping.

Usage:
    class ShiftRepository(BaseRepository[Shift]):
        def __init__(self) -> None:
            super().__init__(Shift)
"""

from typing import Any, Generic, Sequence, TypeVar
from uuid import UUID

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import Base

# 제네릭 타입 변수 — SQLAlchemy 모델을 나타냄
# Generic type variable representing a SQLAlchemy model
ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """제네릭 CRUD 레포지토리.

    Generic CRUD repository providing common database operations.
    Queries are scoped by store_id when the model has that column and a
    store filter is given.

    Attributes:
        model: SQLAlchemy 모델 클래스 (The SQLAlchemy model class)
    """

    def __init__(self, model: type[ModelType]) -> None:
        self.model: type[ModelType] = model

    def _scope(self, query: Select, store_id: UUID | None) -> Select:
        # 매장 범위 필터 — Apply store scope when the model supports it
        if store_id is not None and hasattr(self.model, "store_id"):
            query = query.where(self.model.store_id == store_id)
        return query

    async def get_by_id(
        self,
        db: AsyncSession,
        record_id: UUID,
        store_id: UUID | None = None,
    ) -> ModelType | None:
        """ID로 단일 레코드를 조회합니다.

        Retrieve a single record by its UUID.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            record_id: 조회할 레코드의 UUID (UUID of the record to retrieve)
            store_id: 매장 범위 필터, None이면 미적용 (Store scope; None skips it)

        Returns:
            ModelType | None: 조회된 레코드 또는 None (Found record or None)
        """
        query: Select = self._scope(select(self.model).where(self.model.id == record_id), store_id)
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def get_all(
        self,
        db: AsyncSession,
        store_id: UUID | None = None,
        filters: dict[str, Any] | None = None,
        order_by: Any | None = None,
    ) -> Sequence[ModelType]:
        """조건에 맞는 모든 레코드를 조회합니다.

        Retrieve all records matching the given equality filters.
        Filters whose value is None are ignored.
        """
        query: Select = self._scope(select(self.model), store_id)
        if filters:
            for column_name, value in filters.items():
                if hasattr(self.model, column_name) and value is not None:
                    query = query.where(getattr(self.model, column_name) == value)
        if order_by is not None:
            query = query.order_by(order_by)
        result = await db.execute(query)
        return result.scalars().all()

    async def count(self, db: AsyncSession, query: Select) -> int:
        """주어진 쿼리의 전체 행 수를 반환합니다."""
        count_query: Select = select(func.count()).select_from(query.order_by(None).subquery())
        return (await db.execute(count_query)).scalar() or 0

    async def get_window(
        self,
        db: AsyncSession,
        query: Select,
        limit: int,
        offset: int = 0,
    ) -> tuple[Sequence[ModelType], int]:
        """limit/offset이 적용된 레코드 목록과 전체 개수를 조회합니다.

        Retrieve one limit/offset window of a query plus the total count.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            query: 기본 SELECT 쿼리 (Base SELECT query)
            limit: 최대 레코드 수 (Maximum number of records)
            offset: 건너뛸 레코드 수 (Records to skip)

        Returns:
            tuple[Sequence[ModelType], int]: (레코드 목록, 전체 개수)
        """
        total: int = await self.count(db, query)
        result = await db.execute(query.offset(offset).limit(limit))
        return result.scalars().all(), total

    async def create(
        self,
        db: AsyncSession,
        obj_data: dict[str, Any],
    ) -> ModelType:
        """새 레코드를 생성합니다.

        Create a new record and flush it so that defaults are populated.
        """
        db_obj: ModelType = self.model(**obj_data)
        db.add(db_obj)
        await db.flush()
        await db.refresh(db_obj)
        return db_obj

    async def update(
        self,
        db: AsyncSession,
        db_obj: ModelType,
        update_data: dict[str, Any],
    ) -> ModelType:
        """기존 레코드를 업데이트합니다.

        Apply the given field values to a loaded record and flush.
        None values are written as-is (callers pass exclude_unset data).
        """
        for field, value in update_data.items():
            if hasattr(db_obj, field):
                setattr(db_obj, field, value)
        await db.flush()
        await db.refresh(db_obj)
        return db_obj

    async def delete(
        self,
        db: AsyncSession,
        db_obj: ModelType,
    ) -> None:
        """레코드를 삭제합니다."""
        await db.delete(db_obj)
        await db.flush()

    async def exists(
        self,
        db: AsyncSession,
        filters: dict[str, Any],
    ) -> bool:
        """주어진 조건에 일치하는 레코드가 존재하는지 확인합니다.

        Check if a record matching the given equality filters exists.
        """
        query: Select = select(func.count()).select_from(self.model)
        for column_name, value in filters.items():
            if hasattr(self.model, column_name):
                query = query.where(getattr(self.model, column_name) == value)
        count: int = (await db.execute(query)).scalar() or 0
        return count > 0
