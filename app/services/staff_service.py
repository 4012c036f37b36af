"""직원 관리 서비스 — 매장 관리자의 직원 CRUD 비즈니스 로직.

Staff Service — Business logic for admin staff management: listing,
invitation with a temporary password, update, deletion and activation.
All operations are limited to the admin's own store.
"""

import logging
from typing import Sequence
from uuid import UUID

import aiosmtplib
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.requests import Request

from app.models.audit_log import AuditActionType
from app.models.store import Store
from app.models.user import User
from app.repositories.auth_repository import auth_repository
from app.repositories.user_repository import user_repository
from app.schemas.user import (
    StaffInviteRequest,
    StaffInviteResponse,
    StaffResponse,
    StaffUpdateRequest,
)
from app.services.audit_service import audit_service
from app.utils.email import is_email_configured, render_invitation, send_email
from app.utils.exceptions import BadRequestError, DuplicateError, ForbiddenError, NotFoundError
from app.utils.password import generate_temporary_password, hash_password

logger = logging.getLogger(__name__)


def to_staff_response(user: User) -> StaffResponse:
    return StaffResponse(
        id=str(user.id),
        name=user.name,
        email=user.email,
        role=user.role,
        phone=user.phone,
        department=user.department,
        hourly_wage=user.hourly_wage,
        is_active=user.is_active,
        created_at=user.created_at,
    )


class StaffService:
    """직원 관리 서비스."""

    async def list_staff(self, db: AsyncSession, admin: User) -> Sequence[User]:
        """관리자 매장의 직원 목록 (최근 생성순)."""
        return await user_repository.list_by_store(db, admin.store_id)

    async def get_staff(self, db: AsyncSession, admin: User, user_id: UUID) -> User:
        """같은 매장의 직원을 조회합니다.

        Raises:
            NotFoundError: 사용자 없음 (User does not exist)
            ForbiddenError: 다른 매장의 사용자 (User belongs to another store)
        """
        user: User | None = await user_repository.get_by_id(db, user_id)
        if user is None:
            raise NotFoundError("User not found")
        if user.store_id != admin.store_id:
            raise ForbiddenError("User belongs to another store")
        return user

    async def invite(
        self,
        db: AsyncSession,
        admin: User,
        data: StaffInviteRequest,
        request: Request | None = None,
    ) -> StaffInviteResponse:
        """직원을 초대합니다.

        Create a user in the admin's store with a random temporary password
        and email an invitation when SMTP is configured. The temporary
        password is also returned so the admin can hand it over.

        Raises:
            DuplicateError: 이미 등록된 이메일 (Email already registered)
        """
        if await user_repository.email_taken(db, data.email):
            raise DuplicateError("Email already registered")

        temporary_password: str = generate_temporary_password()
        user: User = await user_repository.create(db, {
            "store_id": admin.store_id,
            "name": data.name.strip(),
            "email": data.email.lower(),
            "password_hash": hash_password(temporary_password),
            "role": data.role,
            "phone": data.phone,
            "department": data.department,
            "hourly_wage": data.hourly_wage,
        })

        email_sent: bool = False
        if is_email_configured():
            store_name: str = (
                await db.execute(select(Store.name).where(Store.id == admin.store_id))
            ).scalar() or ""
            html, text = render_invitation(user.name, user.email, temporary_password, store_name)
            try:
                await send_email(user.email, "ShiftBoard invitation", html, text)
                email_sent = True
            except (aiosmtplib.SMTPException, OSError) as exc:
                logger.warning("Invitation email to %s failed: %s", user.email, exc)

        await audit_service.log(
            db, AuditActionType.STAFF_INVITED, admin, request=request,
            target_id=user.id, details={"email": user.email, "role": user.role},
        )
        return StaffInviteResponse(
            user=to_staff_response(user),
            temporary_password=temporary_password,
            email_sent=email_sent,
        )

    async def update(
        self,
        db: AsyncSession,
        admin: User,
        user_id: UUID,
        data: StaffUpdateRequest,
        request: Request | None = None,
    ) -> User:
        """직원 정보를 수정합니다.

        Raises:
            DuplicateError: 다른 사용자가 쓰는 이메일 (Email owned by another user)
            BadRequestError: 본인 역할 변경 시도 (Admin demoting themselves)
        """
        user: User = await self.get_staff(db, admin, user_id)
        update_data: dict = data.model_dump(exclude_unset=True)

        if "email" in update_data and update_data["email"] is not None:
            if await user_repository.email_taken(db, update_data["email"], exclude_user_id=user.id):
                raise DuplicateError("Email already registered")
            update_data["email"] = update_data["email"].lower()

        previous_role: str = user.role
        new_role: str | None = update_data.get("role")
        if new_role is not None and new_role != previous_role and user.id == admin.id:
            raise BadRequestError("You cannot change your own role")

        # None으로 비울 수 없는 필드 — Required columns cannot be cleared
        for field in ("name", "email", "role"):
            if field in update_data and update_data[field] is None:
                del update_data[field]

        user = await user_repository.update(db, user, update_data)
        await audit_service.log(
            db, AuditActionType.USER_UPDATED, admin, request=request,
            target_id=user.id, details={"fields": sorted(update_data.keys())},
        )
        if new_role is not None and new_role != previous_role:
            await audit_service.log(
                db, AuditActionType.ROLE_CHANGED, admin, request=request,
                target_id=user.id, details={"from": previous_role, "to": new_role},
            )
        return user

    async def delete(
        self,
        db: AsyncSession,
        admin: User,
        user_id: UUID,
        request: Request | None = None,
    ) -> None:
        """직원을 삭제합니다. 관련 근무/근태/알림은 DB CASCADE로 삭제됩니다.

        Raises:
            BadRequestError: 본인 삭제 시도 (Deleting yourself)
        """
        if user_id == admin.id:
            raise BadRequestError("You cannot delete your own account")
        user: User = await self.get_staff(db, admin, user_id)
        details: dict = {"email": user.email, "name": user.name}
        await user_repository.delete(db, user)
        await audit_service.log(
            db, AuditActionType.USER_DELETED, admin, request=request,
            target_id=user_id, details=details,
        )

    async def set_status(
        self,
        db: AsyncSession,
        admin: User,
        user_id: UUID,
        status: str,
        request: Request | None = None,
    ) -> User:
        """직원 활성 상태를 변경합니다. 비활성화 시 리프레시 토큰을 폐기합니다.

        Raises:
            BadRequestError: 본인 상태 변경 시도 (Changing your own status)
        """
        if user_id == admin.id:
            raise BadRequestError("You cannot change your own status")
        user: User = await self.get_staff(db, admin, user_id)
        is_active: bool = status == "active"
        user = await user_repository.update(db, user, {"is_active": is_active})
        if not is_active:
            await auth_repository.delete_user_refresh_tokens(db, user.id)
        await audit_service.log(
            db, AuditActionType.USER_UPDATED, admin, request=request,
            target_id=user.id, details={"is_active": is_active},
        )
        return user


# 싱글턴 인스턴스 — Singleton instance
staff_service: StaffService = StaffService()
