"""앱 근무 일정 라우터 — 캘린더용 근무 목록.

App Shifts Router — Calendar feed of the caller's store shifts.
"""

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user
from app.database import get_db
from app.models.user import User
from app.schemas.shift import ShiftEventResponse
from app.services.shift_service import shift_service

router: APIRouter = APIRouter()


@router.get("", response_model=list[ShiftEventResponse])
async def list_shifts(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
    start_date: Annotated[date | None, Query()] = None,
    end_date: Annotated[date | None, Query()] = None,
    show_all: Annotated[bool, Query()] = False,
) -> list[ShiftEventResponse]:
    """근무 일정 목록을 조회합니다.

    List shifts in the caller's store, ordered by start time. Staff (and
    admins without show_all) only see their own shifts.

    Args:
        start_date: 시작일 이후 시작하는 근무 (Shifts starting on/after this date)
        end_date: 종료일 이전에 끝나는 근무 (Shifts ending on/before this date)
        show_all: 관리자 전체 보기 (Admin: include every employee)
    """
    return await shift_service.list_shifts(
        db, current_user, start_date=start_date, end_date=end_date, show_all=show_all
    )
