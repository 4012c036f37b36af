"""관리자 근무 라우터 — 근무 생성/수정/삭제/확정 및 자동 생성.

Admin Shifts Router — Create, update, delete and confirm shifts, plus the
automatic shift generator.
"""

from typing import Annotated, Any
from uuid import UUID

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import require_admin
from app.database import get_db
from app.models.user import User
from app.schemas.common import SuccessResponse
from app.schemas.shift import (
    GenerateShiftsRequest,
    GenerateShiftsResponse,
    ShiftConfirmRequest,
    ShiftCreate,
    ShiftEventResponse,
    ShiftUpdate,
)
from app.services.shift_generator import shift_generator_service
from app.services.shift_service import shift_service

router: APIRouter = APIRouter()


@router.post("/generate", response_model=GenerateShiftsResponse)
async def generate_shifts(
    data: GenerateShiftsRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
) -> GenerateShiftsResponse:
    """근무표를 자동 생성합니다 (저장하지 않음).

    Generate a shift plan from business hours, employees, staff
    requirements and availability. Nothing is persisted; the caller
    reviews the plan and creates the shifts it wants.
    """
    return await shift_generator_service.generate(db, current_user, data)


@router.get("/generate")
async def get_generation_sample(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
) -> dict[str, Any]:
    """자동 생성 입력 예시(영업시간, 인원 요구, 기본값, 포지션)를 반환합니다."""
    return await shift_generator_service.sample_settings(db, current_user)


@router.post("", response_model=ShiftEventResponse, status_code=201)
async def create_shift(
    data: ShiftCreate,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
) -> ShiftEventResponse:
    """근무를 생성합니다.

    Create a shift for a user of the admin's store.

    Args:
        data: 대상 사용자, 시작/종료 시각, 메모 (User, window and note)
        request: HTTP 요청 (감사 로그용)
        db: 비동기 데이터베이스 세션 (Async database session)
        current_user: 관리자 (Admin user)

    Returns:
        ShiftEventResponse: 생성된 근무 (Created shift as a calendar event)
    """
    result: ShiftEventResponse = await shift_service.create_shift(db, current_user, data, request)
    await db.commit()
    return result


@router.put("/{shift_id}", response_model=ShiftEventResponse)
async def update_shift(
    shift_id: UUID,
    data: ShiftUpdate,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
) -> ShiftEventResponse:
    """근무를 부분 수정합니다. 생성과 같은 검증을 거칩니다."""
    result: ShiftEventResponse = await shift_service.update_shift(
        db, current_user, shift_id, data, request
    )
    await db.commit()
    return result


@router.delete("/{shift_id}", response_model=SuccessResponse)
async def delete_shift(
    shift_id: UUID,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
) -> SuccessResponse:
    """근무를 삭제합니다."""
    await shift_service.delete_shift(db, current_user, shift_id, request)
    await db.commit()
    return SuccessResponse()


@router.patch("/{shift_id}/confirm", response_model=ShiftEventResponse)
async def confirm_shift(
    shift_id: UUID,
    data: ShiftConfirmRequest,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
) -> ShiftEventResponse:
    """근무를 확정(CONFIRMED) 또는 취소(CANCELED)합니다."""
    result: ShiftEventResponse = await shift_service.confirm_shift(
        db, current_user, shift_id, data, request
    )
    await db.commit()
    return result
