"""슈퍼 관리자 서비스 — 시스템 통계, 권한 승격, 매장 생성, 초기 부트스트랩.

Super Admin Service — System-wide statistics, promotion of users to admin
or super admin, store creation, and bootstrap of the first store and super
admin account (used by the seed script and the setup page).
"""

import logging
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.requests import Request

from app.config import settings
from app.models.audit_log import AuditActionType
from app.models.shift import Shift, ShiftRequest
from app.models.store import Store
from app.models.user import User, UserRole
from app.repositories.store_repository import store_repository, store_settings_repository
from app.repositories.user_repository import user_repository
from app.schemas.settings import SuperAdminAction
from app.services.audit_service import audit_service
from app.utils.exceptions import BadRequestError, DuplicateError, NotFoundError
from app.utils.password import MIN_PASSWORD_LENGTH, hash_password

logger = logging.getLogger(__name__)


class SuperAdminService:
    """슈퍼 관리자 서비스."""

    async def get_stats(self, db: AsyncSession) -> dict[str, int]:
        """시스템 전체 통계."""
        users: dict[str, int] = await user_repository.count_users(db)
        stores: int = (await db.execute(select(func.count()).select_from(Store))).scalar() or 0
        shifts: int = (await db.execute(select(func.count()).select_from(Shift))).scalar() or 0
        requests: int = (await db.execute(select(func.count()).select_from(ShiftRequest))).scalar() or 0
        return {
            "stores": stores,
            "users": users["total"],
            "admins": users["admins"],
            "super_admins": users["super_admins"],
            "shifts": shifts,
            "shift_requests": requests,
        }

    async def perform_action(
        self,
        db: AsyncSession,
        actor: User,
        data: SuperAdminAction,
        request: Request | None = None,
    ) -> dict[str, Any]:
        """슈퍼 관리자 작업을 수행합니다.

        Raises:
            BadRequestError: 필수 값 누락 (Missing user_id or store fields)
            NotFoundError: 대상 사용자 없음 (Target user does not exist)
        """
        if data.action == "create_store":
            if not (data.name and data.address and data.phone):
                raise BadRequestError("name, address and phone are required")
            store: Store = await store_repository.create(db, {
                "name": data.name.strip(),
                "address": data.address,
                "phone": data.phone,
            })
            await store_settings_repository.get_or_create(db, store.id)
            await audit_service.log(
                db, AuditActionType.STORE_UPDATED, actor, request=request,
                target_id=store.id, details={"action": data.action, "name": store.name},
            )
            return {"success": True, "store_id": str(store.id), "name": store.name}

        if data.user_id is None:
            raise BadRequestError("user_id is required")
        target: User | None = await user_repository.get_by_id(db, data.user_id)
        if target is None:
            raise NotFoundError("User not found")

        previous_role: str = target.role
        update_data: dict[str, Any] = {"role": UserRole.ADMIN.value}
        if data.action == "promote_to_super_admin":
            update_data["is_super_admin"] = True
        target = await user_repository.update(db, target, update_data)
        await audit_service.log(
            db, AuditActionType.ROLE_CHANGED, actor, request=request,
            target_id=target.id, store_id=target.store_id,
            details={"action": data.action, "from": previous_role, "to": target.role},
        )
        return {
            "success": True,
            "user_id": str(target.id),
            "role": target.role,
            "is_super_admin": target.is_super_admin,
        }

    async def initialize_super_admin(self, db: AsyncSession) -> User:
        """설정값으로 기본 매장과 슈퍼 관리자를 준비합니다 (멱등).

        Ensure the default store and the configured super admin exist. An
        existing account with the same email is promoted instead of
        recreated.
        """
        store: Store = await store_repository.get_or_create_default(db)
        existing: User | None = await user_repository.get_by_email(db, settings.SUPER_ADMIN_EMAIL)
        if existing is not None:
            if not existing.is_super_admin or existing.role != UserRole.ADMIN.value:
                existing = await user_repository.update(
                    db, existing, {"is_super_admin": True, "role": UserRole.ADMIN.value}
                )
                logger.info("Promoted %s to super admin", existing.email)
            return existing

        admin: User = await user_repository.create(db, {
            "store_id": store.id,
            "name": settings.SUPER_ADMIN_NAME,
            "email": settings.SUPER_ADMIN_EMAIL.lower(),
            "password_hash": hash_password(settings.SUPER_ADMIN_PASSWORD),
            "role": UserRole.ADMIN.value,
            "is_super_admin": True,
        })
        logger.info("Created super admin %s in store %s", admin.email, store.name)
        return admin

    async def needs_setup(self, db: AsyncSession) -> bool:
        """매장이 하나도 없으면 초기 설정이 필요합니다."""
        return not await store_repository.exists(db, {})

    async def setup_first_store(
        self,
        db: AsyncSession,
        store_name: str,
        admin_name: str,
        email: str,
        password: str,
    ) -> User:
        """첫 매장과 슈퍼 관리자를 생성합니다.

        Raises:
            BadRequestError: 이미 설정됨, 입력 누락, 짧은 비밀번호 (Already set up, missing input, short password)
            DuplicateError: 이미 등록된 이메일 (Email already registered)
        """
        if not await self.needs_setup(db):
            raise BadRequestError("Setup has already been completed")
        if not (store_name.strip() and admin_name.strip() and email.strip()):
            raise BadRequestError("All fields are required")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise BadRequestError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
        if await user_repository.email_taken(db, email):
            raise DuplicateError("Email already registered")

        store: Store = await store_repository.create(db, {"name": store_name.strip()})
        await store_settings_repository.get_or_create(db, store.id)
        admin: User = await user_repository.create(db, {
            "store_id": store.id,
            "name": admin_name.strip(),
            "email": email.strip().lower(),
            "password_hash": hash_password(password),
            "role": UserRole.ADMIN.value,
            "is_super_admin": True,
        })
        logger.info("Setup created store %s with super admin %s", store.name, admin.email)
        return admin


# 싱글턴 인스턴스 — Singleton instance
super_admin_service: SuperAdminService = SuperAdminService()
