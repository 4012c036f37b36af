"""관리자 감사 로그 라우터.

Admin Audit Log Router — Searches the store's audit trail, newest first.
"""

from datetime import date
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import require_admin
from app.database import get_db
from app.models.audit_log import AuditActionType
from app.models.user import User
from app.schemas.common import AuditLogPage
from app.services.audit_service import audit_service

router: APIRouter = APIRouter()


@router.get("", response_model=AuditLogPage)
async def list_audit_log(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
    user_id: Annotated[UUID | None, Query()] = None,
    action_type: Annotated[AuditActionType | None, Query()] = None,
    start_date: Annotated[date | None, Query()] = None,
    end_date: Annotated[date | None, Query()] = None,
    limit: Annotated[int, Query(ge=1, le=200)] = 50,
    offset: Annotated[int, Query(ge=0)] = 0,
) -> AuditLogPage:
    """감사 로그를 검색합니다.

    Search audit entries of the admin's store with the acting user.

    Args:
        user_id: 행위자 필터 (Acting user filter)
        action_type: 작업 유형 필터 (Action type filter)
        start_date: 시작일 포함, 매장 시간대 (Inclusive, store timezone)
        end_date: 종료일 포함, 매장 시간대 (Inclusive, store timezone)
        limit: 페이지 크기, 기본 50 (Page size)
        offset: 건너뛸 개수 (Offset)

    Returns:
        AuditLogPage: {data, pagination: {total, limit, offset, has_more}}
    """
    return await audit_service.search(
        db,
        current_user.store_id,
        user_id=user_id,
        action_type=action_type,
        start_date=start_date,
        end_date=end_date,
        limit=limit,
        offset=offset,
    )
