"""알림 서비스 — 알림 비즈니스 로직.

Notification Service — Business logic for notification management.
Handles listing, read state, ownership checks, preference resolution and
delivery of new notifications over the enabled channels.
"""

import logging
from typing import Any, Sequence
from uuid import UUID

import aiosmtplib
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.notification import Notification, NotificationPreference, NotificationType
from app.models.store import StoreSettings
from app.models.user import User
from app.repositories.notification_repository import (
    notification_preference_repository,
    notification_repository,
)
from app.repositories.store_repository import store_settings_repository
from app.repositories.user_repository import user_repository
from app.schemas.notification import (
    AdminMessageRequest,
    NotificationPreferenceItem,
    NotificationResponse,
)
from app.utils.email import is_email_configured, render_notification, send_email
from app.utils.exceptions import BadRequestError, ForbiddenError, NotFoundError

logger = logging.getLogger(__name__)

# 알림 목록 최대 개수 — Upper bound for the list limit parameter
MAX_LIST_LIMIT: int = 100


def to_response(notification: Notification) -> NotificationResponse:
    return NotificationResponse(
        id=str(notification.id),
        title=notification.title,
        message=notification.message,
        type=notification.type,
        related_id=notification.related_id,
        link=notification.link,
        is_read=notification.is_read,
        created_at=notification.created_at,
    )


class NotificationService:
    """알림 서비스.

    Notification service providing read/unread operations, preference
    management and multi-channel delivery.
    """

    # --- 조회/읽음 처리 (Listing and read state) ---

    async def list_notifications(
        self,
        db: AsyncSession,
        user_id: UUID,
        unread_only: bool = False,
        notification_type: NotificationType | None = None,
        limit: int = 20,
    ) -> Sequence[Notification]:
        """사용자의 알림 목록을 조회합니다.

        List a user's notifications, newest first.

        Raises:
            BadRequestError: limit이 1~100 범위를 벗어남 (Limit out of range)
        """
        if limit < 1 or limit > MAX_LIST_LIMIT:
            raise BadRequestError(f"limit must be between 1 and {MAX_LIST_LIMIT}")
        return await notification_repository.get_user_notifications(
            db,
            user_id,
            unread_only=unread_only,
            notification_type=notification_type.value if notification_type else None,
            limit=limit,
        )

    async def count_notifications(
        self,
        db: AsyncSession,
        user_id: UUID,
        unread_only: bool = False,
        notification_type: NotificationType | None = None,
    ) -> int:
        return await notification_repository.count_user_notifications(
            db,
            user_id,
            unread_only=unread_only,
            notification_type=notification_type.value if notification_type else None,
        )

    async def get_owned(
        self,
        db: AsyncSession,
        notification_id: UUID,
        user_id: UUID,
    ) -> Notification:
        """본인 알림을 조회합니다.

        Fetch a notification and verify it belongs to the user.

        Raises:
            NotFoundError: 알림 없음 (Notification does not exist)
            ForbiddenError: 다른 사용자의 알림 (Belongs to another user)
        """
        notification: Notification | None = await notification_repository.get_by_id(db, notification_id)
        if notification is None:
            raise NotFoundError("Notification not found")
        if notification.user_id != user_id:
            raise ForbiddenError("You cannot access this notification")
        return notification

    async def set_read(
        self,
        db: AsyncSession,
        notification_id: UUID,
        user_id: UUID,
        is_read: bool,
    ) -> Notification:
        notification: Notification = await self.get_owned(db, notification_id, user_id)
        return await notification_repository.update(db, notification, {"is_read": is_read})

    async def delete(self, db: AsyncSession, notification_id: UUID, user_id: UUID) -> None:
        notification: Notification = await self.get_owned(db, notification_id, user_id)
        await notification_repository.delete(db, notification)

    async def mark_all_read(
        self,
        db: AsyncSession,
        user_id: UUID,
        notification_type: NotificationType | None = None,
    ) -> int:
        """읽지 않은 알림을 모두 읽음 처리합니다."""
        return await notification_repository.mark_all_read(
            db, user_id, notification_type.value if notification_type else None
        )

    # --- 알림 설정 (Preferences) ---

    def _defaults(self, store_settings: StoreSettings | None) -> dict[str, bool]:
        # 매장 설정이 없으면 email=True, push=False
        return {
            "email": store_settings.email_notifications if store_settings is not None else True,
            "push": store_settings.push_notifications if store_settings is not None else False,
            "in_app": True,
        }

    async def get_preferences(self, db: AsyncSession, user: User) -> list[NotificationPreferenceItem]:
        """모든 알림 유형에 대한 채널 설정을 반환합니다.

        Return channel settings for every notification type. Types without
        a stored preference fall back to the store defaults.
        """
        stored: dict[str, NotificationPreference] = {
            pref.type: pref for pref in await notification_preference_repository.get_for_user(db, user.id)
        }
        defaults: dict[str, bool] = self._defaults(
            await store_settings_repository.get_by_store(db, user.store_id)
        )
        items: list[NotificationPreferenceItem] = []
        for notification_type in NotificationType:
            pref: NotificationPreference | None = stored.get(notification_type.value)
            if pref is not None:
                items.append(NotificationPreferenceItem(
                    type=notification_type, email=pref.email, push=pref.push, in_app=pref.in_app,
                ))
            else:
                items.append(NotificationPreferenceItem(type=notification_type, **defaults))
        return items

    async def replace_preferences(
        self,
        db: AsyncSession,
        user: User,
        preferences: list[NotificationPreferenceItem],
    ) -> list[NotificationPreferenceItem]:
        """알림 설정을 원자적으로 교체합니다.

        Atomically replace the user's preferences.

        Raises:
            BadRequestError: 같은 유형이 중복됨 (Duplicate type in payload)
        """
        types: list[str] = [item.type.value for item in preferences]
        if len(types) != len(set(types)):
            raise BadRequestError("Each notification type may appear only once")
        await notification_preference_repository.replace_for_user(
            db,
            user.id,
            [
                {"type": item.type.value, "email": item.email, "push": item.push, "in_app": item.in_app}
                for item in preferences
            ],
        )
        return await self.get_preferences(db, user)

    # --- 발송 (Delivery) ---

    async def send_notification(
        self,
        db: AsyncSession,
        user: User,
        title: str,
        message: str,
        notification_type: NotificationType,
        related_id: UUID | str | None = None,
        link: str | None = None,
    ) -> Notification | None:
        """사용자 설정에 따라 알림을 발송합니다.

        Deliver a notification over the channels the user enabled for this
        type. In-app delivery creates a row; email goes out over SMTP when
        configured. Email failures are logged and never raised.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            user: 수신자 (Recipient)
            title: 제목 (Title)
            message: 내용 (Body)
            notification_type: 알림 유형 (Notification type)
            related_id: 관련 엔티티 ID (Related entity id)
            link: 프론트엔드 경로 (Deep link path)

        Returns:
            Notification | None: 인앱 알림이 꺼져 있으면 None (None when in-app is disabled)
        """
        pref: NotificationPreference | None = await notification_preference_repository.get_for_type(
            db, user.id, notification_type.value
        )
        if pref is not None:
            channels: dict[str, bool] = {"email": pref.email, "push": pref.push, "in_app": pref.in_app}
        else:
            channels = self._defaults(await store_settings_repository.get_by_store(db, user.store_id))

        notification: Notification | None = None
        if channels["in_app"]:
            notification = await notification_repository.create(db, {
                "user_id": user.id,
                "title": title,
                "message": message,
                "type": notification_type.value,
                "related_id": str(related_id) if related_id is not None else None,
                "link": link,
            })

        if channels["email"] and is_email_configured():
            html, text = render_notification(title, message, link)
            try:
                await send_email(user.email, title, html, text)
            except (aiosmtplib.SMTPException, OSError) as exc:
                logger.warning("Notification email to %s failed: %s", user.email, exc)

        if channels["push"]:
            # 푸시 제공자가 설정되지 않음 — No push provider is configured
            logger.debug("Push delivery skipped for user %s (%s)", user.id, notification_type.value)

        return notification

    async def send_admin_message(
        self,
        db: AsyncSession,
        admin: User,
        data: AdminMessageRequest,
    ) -> dict[str, Any]:
        """관리자 메시지를 매장 직원에게 발송합니다.

        Send an ADMIN_MESSAGE to the given users, or to every active user of
        the admin's store when no ids are given.

        Raises:
            BadRequestError: 매장에 없는 사용자 포함 (Unknown recipient ids)
        """
        if data.user_ids:
            recipients: Sequence[User] = await user_repository.get_many(db, admin.store_id, data.user_ids)
            if len(recipients) != len(set(data.user_ids)):
                raise BadRequestError("Some recipients do not belong to this store")
        else:
            recipients = [
                u for u in await user_repository.list_by_store(db, admin.store_id, active_only=True)
                if u.id != admin.id
            ]

        delivered: int = 0
        for recipient in recipients:
            created = await self.send_notification(
                db,
                recipient,
                data.title,
                data.message,
                NotificationType.ADMIN_MESSAGE,
                link=data.link,
            )
            if created is not None:
                delivered += 1
        return {"recipients": len(recipients), "in_app_delivered": delivered}


# 싱글턴 인스턴스 — Singleton instance
notification_service: NotificationService = NotificationService()
