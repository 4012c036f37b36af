"""관리자 직원 관리 라우터 — 직원 목록/초대/수정/삭제/상태 변경.

Admin Staff Router — Store staff management. Non-admin callers receive 401
on every endpoint of this router.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import require_staff_admin
from app.database import get_db
from app.models.user import User
from app.schemas.common import SuccessResponse
from app.schemas.user import (
    StaffInviteRequest,
    StaffInviteResponse,
    StaffResponse,
    StaffStatusRequest,
    StaffUpdateRequest,
)
from app.services.staff_service import staff_service, to_staff_response

router: APIRouter = APIRouter()


@router.get("", response_model=list[StaffResponse])
async def list_staff(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_staff_admin)],
) -> list[StaffResponse]:
    """매장 직원 목록을 조회합니다 (가입일 내림차순).

    List users of the admin's store, newest first.
    """
    users = await staff_service.list_staff(db, current_user)
    return [to_staff_response(u) for u in users]


@router.post("", response_model=StaffInviteResponse, status_code=201)
async def invite_staff(
    data: StaffInviteRequest,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_staff_admin)],
) -> StaffInviteResponse:
    """직원을 초대합니다.

    Invite a staff member. A temporary password is generated and returned;
    an invitation email is sent when SMTP is configured.

    Args:
        data: 이름, 이메일, 역할 등 (Name, email, role and optional fields)
        request: HTTP 요청 (감사 로그용)
        db: 비동기 데이터베이스 세션 (Async database session)
        current_user: 관리자 (Admin user)

    Returns:
        StaffInviteResponse: 생성된 직원, 임시 비밀번호, 메일 발송 여부
                             (Created user, temporary password, email_sent flag)
    """
    result: StaffInviteResponse = await staff_service.invite(db, current_user, data, request)
    await db.commit()
    return result


@router.get("/{user_id}", response_model=StaffResponse)
async def get_staff(
    user_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_staff_admin)],
) -> StaffResponse:
    """직원 상세 조회. 다른 매장 직원이면 403."""
    user: User = await staff_service.get_staff(db, current_user, user_id)
    return to_staff_response(user)


@router.put("/{user_id}", response_model=StaffResponse)
async def update_staff(
    user_id: UUID,
    data: StaffUpdateRequest,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_staff_admin)],
) -> StaffResponse:
    """직원 정보를 수정합니다. 역할 변경은 ROLE_CHANGED 로 기록됩니다."""
    user: User = await staff_service.update(db, current_user, user_id, data, request)
    await db.commit()
    return to_staff_response(user)


@router.delete("/{user_id}", response_model=SuccessResponse)
async def delete_staff(
    user_id: UUID,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_staff_admin)],
) -> SuccessResponse:
    """직원을 삭제합니다. 본인은 삭제할 수 없습니다.

    Delete a staff member. Their shifts, requests, attendance and
    notifications are removed by the database cascade.
    """
    await staff_service.delete(db, current_user, user_id, request)
    await db.commit()
    return SuccessResponse()


@router.patch("/{user_id}/status", response_model=StaffResponse)
async def update_staff_status(
    user_id: UUID,
    data: StaffStatusRequest,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_staff_admin)],
) -> StaffResponse:
    """직원 활성/비활성 상태를 변경합니다."""
    user: User = await staff_service.set_status(db, current_user, user_id, data.status, request)
    await db.commit()
    return to_staff_response(user)
