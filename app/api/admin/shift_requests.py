"""관리자 근무 신청 라우터 — 매장 근무 신청 조회 및 승인/반려.

Admin Shift Requests Router — List the store's shift requests and review
them. Approving a request creates a SCHEDULED shift for its window.
"""

from typing import Annotated, Literal
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import require_admin
from app.database import get_db
from app.models.user import User
from app.schemas.shift import ShiftRequestResponse, ShiftRequestReview
from app.services.shift_request_service import shift_request_service

router: APIRouter = APIRouter()


@router.get("", response_model=list[ShiftRequestResponse])
async def list_shift_requests(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
    status: Annotated[Literal["PENDING", "APPROVED", "REJECTED"] | None, Query()] = None,
    user_id: Annotated[UUID | None, Query()] = None,
) -> list[ShiftRequestResponse]:
    """매장의 근무 신청 목록 (신청자 이름 포함)."""
    return await shift_request_service.list_for_store(
        db, current_user, status=status, user_id=user_id
    )


@router.patch("/{request_id}", response_model=ShiftRequestResponse)
async def review_shift_request(
    request_id: UUID,
    data: ShiftRequestReview,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
) -> ShiftRequestResponse:
    """근무 신청을 승인 또는 반려합니다.

    Review a PENDING request. The requester is notified either way.

    Args:
        request_id: 근무 신청 ID (Shift request id)
        data: APPROVED/REJECTED 와 메모 (Decision and note)
        request: HTTP 요청 (감사 로그용)
        db: 비동기 데이터베이스 세션 (Async database session)
        current_user: 관리자 (Admin user)

    Returns:
        ShiftRequestResponse: 처리된 신청 (Reviewed request)
    """
    result: ShiftRequestResponse = await shift_request_service.review(
        db, current_user, request_id, data, request
    )
    await db.commit()
    return result
