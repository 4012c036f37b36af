"""앱 근무 신청 라우터 — 내 근무 희망 시간 신청/조회/취소.

App Shift Requests Router — Submit, list and withdraw my shift requests.
"""

from typing import Annotated, Literal
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user
from app.database import get_db
from app.models.user import User
from app.schemas.common import SuccessResponse
from app.schemas.shift import ShiftRequestCreate, ShiftRequestResponse
from app.services.shift_request_service import shift_request_service

router: APIRouter = APIRouter()


@router.get("", response_model=list[ShiftRequestResponse])
async def list_my_shift_requests(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
    status: Annotated[Literal["PENDING", "APPROVED", "REJECTED"] | None, Query()] = None,
) -> list[ShiftRequestResponse]:
    """내 근무 신청 목록을 조회합니다 (시작 시각 내림차순).

    List my shift requests, newest window first.
    """
    return await shift_request_service.list_own(db, current_user, status=status)


@router.post("", response_model=ShiftRequestResponse, status_code=201)
async def create_shift_request(
    data: ShiftRequestCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> ShiftRequestResponse:
    """근무 신청을 생성합니다. 상태는 PENDING으로 시작합니다.

    Submit a shift request for the given window.

    Args:
        data: 희망 시작/종료 시각과 메모 (Requested window and note)
        db: 비동기 데이터베이스 세션 (Async database session)
        current_user: 인증된 사용자 (Authenticated user)

    Returns:
        ShiftRequestResponse: 생성된 신청 (Created request)
    """
    result: ShiftRequestResponse = await shift_request_service.create(db, current_user, data)
    await db.commit()
    return result


@router.delete("/{request_id}", response_model=SuccessResponse)
async def delete_shift_request(
    request_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> SuccessResponse:
    """대기 중인 내 근무 신청을 취소합니다.

    Withdraw one of my PENDING requests. Reviewed requests cannot be
    deleted.
    """
    await shift_request_service.delete_own(db, current_user, request_id)
    await db.commit()
    return SuccessResponse()
