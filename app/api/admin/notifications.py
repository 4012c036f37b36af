"""관리자 알림 라우터 — 매장 직원에게 관리자 메시지 발송.

Admin Notification Router — Sends ADMIN_MESSAGE notifications to selected
users, or to every active user of the store.
"""

from typing import Annotated, Any

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import require_admin
from app.database import get_db
from app.models.user import User
from app.schemas.notification import AdminMessageRequest
from app.services.notification_service import notification_service

router: APIRouter = APIRouter()


@router.post("", status_code=201)
async def send_admin_message(
    data: AdminMessageRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
) -> dict[str, Any]:
    """관리자 메시지를 발송합니다.

    Send an admin message. Each recipient's preferences decide whether it
    is stored in-app and/or emailed.

    Args:
        data: 제목, 본문, 대상 사용자 ID 목록, 링크 (Title, message, user ids, link)
        db: 비동기 데이터베이스 세션 (Async database session)
        current_user: 관리자 (Admin user)

    Returns:
        dict: {recipients, in_app_delivered}
    """
    result: dict[str, Any] = await notification_service.send_admin_message(db, current_user, data)
    await db.commit()
    return result
