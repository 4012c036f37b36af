"""초기 데이터 시드 스크립트 — 기본 매장, 매장 설정, 슈퍼 관리자 생성.

Seed script — Creates the default store, its settings and the super admin
account from configuration (DEFAULT_STORE_NAME, SUPER_ADMIN_EMAIL,
SUPER_ADMIN_PASSWORD, SUPER_ADMIN_NAME).

Usage:
    python -m app.seed

Idempotent: an existing store or super admin account is reused.
"""

import asyncio
import logging

import app.models  # noqa: F401  모든 모델을 메타데이터에 등록 (Register all models on the metadata)
from app.database import Base, async_session, engine
from app.models.user import User
from app.services.super_admin_service import super_admin_service

logger = logging.getLogger(__name__)


async def seed() -> None:
    """데이터베이스를 초기 데이터로 시드합니다.

    Seed the database with initial data.
    Creates tables if they don't exist, then makes sure the default store
    and the configured super admin exist.
    """
    # 테이블 생성 — DDL 실행 (Create all tables from ORM metadata)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with async_session() as db:
        admin: User = await super_admin_service.initialize_super_admin(db)
        await db.commit()
        logger.info("Seeded: store=%s, super admin=%s", admin.store_id, admin.email)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s [%(name)s] %(message)s")
    asyncio.run(seed())
