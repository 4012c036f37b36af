"""앱 알림 라우터 — 내 알림 및 알림 설정 API.

App Notification Router — My notifications and notification preferences.
Provides list/count, mark read, mark all read, delete, and preference
read/replace operations.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user
from app.database import get_db
from app.models.notification import Notification, NotificationType
from app.models.user import User
from app.schemas.common import CountResponse, SuccessResponse
from app.schemas.notification import (
    MarkAllReadRequest,
    NotificationPreferenceItem,
    NotificationPreferencesUpdate,
    NotificationResponse,
    NotificationUpdate,
)
from app.services.notification_service import notification_service, to_response

router: APIRouter = APIRouter()


@router.get("", response_model=list[NotificationResponse] | CountResponse)
async def list_notifications(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
    unread_only: Annotated[bool, Query()] = False,
    count: Annotated[bool, Query()] = False,
    limit: Annotated[int, Query(ge=1, le=100)] = 20,
    type: Annotated[NotificationType | None, Query()] = None,
) -> list[NotificationResponse] | CountResponse:
    """내 알림 목록을 조회합니다 (최신순).

    List my notifications newest first, or only their number when
    count=true.

    Args:
        unread_only: 읽지 않은 알림만 (Only unread notifications)
        count: 개수만 반환 (Return {"count": n} instead of the list)
        limit: 최대 개수, 기본 20 / 최대 100 (Max items, default 20, at most 100)
        type: 알림 유형 필터 (Notification type filter)
    """
    if count:
        total: int = await notification_service.count_notifications(
            db, current_user.id, unread_only=unread_only, notification_type=type
        )
        return CountResponse(count=total)
    rows = await notification_service.list_notifications(
        db, current_user.id, unread_only=unread_only, notification_type=type, limit=limit
    )
    return [to_response(n) for n in rows]


@router.post("/read-all", response_model=CountResponse)
async def mark_all_read(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
    data: MarkAllReadRequest | None = None,
) -> CountResponse:
    """읽지 않은 알림을 모두 읽음 처리합니다. 갱신된 개수를 반환합니다."""
    updated: int = await notification_service.mark_all_read(
        db, current_user.id, data.type if data is not None else None
    )
    await db.commit()
    return CountResponse(count=updated)


# /settings 는 /{notification_id} 보다 먼저 선언 — must be declared before /{notification_id}
@router.get("/settings", response_model=list[NotificationPreferenceItem])
async def get_notification_settings(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> list[NotificationPreferenceItem]:
    """알림 유형별 설정을 조회합니다.

    Preferences for all notification types. Types without a stored
    preference fall back to the store's email/push defaults.
    """
    return await notification_service.get_preferences(db, current_user)


@router.post("/settings", response_model=list[NotificationPreferenceItem])
async def replace_notification_settings(
    data: NotificationPreferencesUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> list[NotificationPreferenceItem]:
    """알림 설정을 통째로 교체합니다 (단일 트랜잭션).

    Replace all of my preferences in one transaction.
    """
    result: list[NotificationPreferenceItem] = await notification_service.replace_preferences(
        db, current_user, data.preferences
    )
    await db.commit()
    return result


@router.get("/{notification_id}", response_model=NotificationResponse)
async def get_notification(
    notification_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> NotificationResponse:
    """알림 단건 조회."""
    notification: Notification = await notification_service.get_owned(
        db, notification_id, current_user.id
    )
    return to_response(notification)


@router.patch("/{notification_id}", response_model=NotificationResponse)
async def update_notification(
    notification_id: UUID,
    data: NotificationUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> NotificationResponse:
    """알림 읽음 상태를 변경합니다."""
    notification: Notification = await notification_service.set_read(
        db, notification_id, current_user.id, data.is_read
    )
    await db.commit()
    return to_response(notification)


@router.delete("/{notification_id}", response_model=SuccessResponse)
async def delete_notification(
    notification_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> SuccessResponse:
    """알림을 삭제합니다."""
    await notification_service.delete(db, notification_id, current_user.id)
    await db.commit()
    return SuccessResponse()
