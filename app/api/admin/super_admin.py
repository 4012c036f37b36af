"""슈퍼 관리자 라우터 — 시스템 통계 및 관리 작업.

Super Admin Router — System-wide statistics and administrative actions
(promote users, create stores). Unauthenticated callers get 401, callers
without the super admin flag get 403.
"""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import require_super_admin
from app.database import get_db
from app.models.user import User
from app.schemas.settings import SuperAdminAction
from app.services.super_admin_service import super_admin_service

router: APIRouter = APIRouter()


@router.get("")
async def get_system_stats(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_super_admin)],
) -> dict[str, int]:
    """시스템 통계 — 매장, 사용자, 관리자, 슈퍼 관리자, 근무, 근무 신청 수."""
    return await super_admin_service.get_stats(db)


@router.post("")
async def perform_super_admin_action(
    data: SuperAdminAction,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_super_admin)],
) -> dict[str, Any]:
    """슈퍼 관리자 작업을 수행합니다.

    Actions:
        - promote_to_admin: 사용자를 ADMIN 으로 승격 (user_id 필수)
        - promote_to_super_admin: ADMIN + 슈퍼 관리자 플래그 (user_id 필수)
        - create_store: 매장 생성 및 기본 설정 (name, address, phone 필수)
    """
    result: dict[str, Any] = await super_admin_service.perform_action(db, current_user, data, request)
    await db.commit()
    return result
