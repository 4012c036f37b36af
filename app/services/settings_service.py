"""매장 설정 서비스 — 매장 정보, 운영 규칙, 백업/복원.

Settings Service — Store profile, store settings (auto-created with
defaults), JSON backup export and settings-only restore.
"""

from datetime import datetime, timezone
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession
from starlette.requests import Request

from app.models.audit_log import AuditActionType
from app.models.store import Store, StoreSettings
from app.models.user import User
from app.repositories.shift_repository import shift_repository, shift_request_repository
from app.repositories.store_repository import store_repository, store_settings_repository
from app.repositories.user_repository import user_repository
from app.schemas.settings import (
    RestoreRequest,
    StoreResponse,
    StoreSettingsResponse,
    StoreSettingsUpdate,
    StoreUpdate,
)
from app.services.audit_service import audit_service
from app.utils.exceptions import BadRequestError, NotFoundError
from app.utils.timezone import is_valid_timezone


def settings_to_response(row: StoreSettings) -> StoreSettingsResponse:
    return StoreSettingsResponse(
        id=str(row.id),
        store_id=str(row.store_id),
        min_shift_hours=row.min_shift_hours,
        max_shift_hours=row.max_shift_hours,
        min_break_minutes=row.min_break_minutes,
        max_weekly_work_hours=row.max_weekly_work_hours,
        email_notifications=row.email_notifications,
        push_notifications=row.push_notifications,
        timezone=row.timezone,
        language=row.language,
        updated_at=row.updated_at,
    )


def store_to_response(store: Store) -> StoreResponse:
    return StoreResponse(
        id=str(store.id),
        name=store.name,
        address=store.address,
        phone=store.phone,
        business_hours=store.business_hours,
        created_at=store.created_at,
    )


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


class SettingsService:
    """매장 설정 서비스."""

    async def get_settings(self, db: AsyncSession, store_id: Any) -> StoreSettings:
        """매장 설정을 조회합니다 (없으면 기본값으로 생성)."""
        return await store_settings_repository.get_or_create(db, store_id)

    async def update_settings(
        self,
        db: AsyncSession,
        admin: User,
        data: StoreSettingsUpdate,
        request: Request | None = None,
        audit_details: dict[str, Any] | None = None,
    ) -> StoreSettings:
        """매장 설정을 부분 수정합니다.

        Apply a partial update to the store settings, creating the row
        first when missing.

        Raises:
            BadRequestError: 최소 근무 시간 > 최대 근무 시간, 잘못된 시간대
                             (min > max shift hours, unknown timezone)
        """
        current: StoreSettings = await store_settings_repository.get_or_create(db, admin.store_id)
        update_data: dict[str, Any] = {
            key: value for key, value in data.model_dump(exclude_unset=True).items() if value is not None
        }

        min_hours: int = update_data.get("min_shift_hours", current.min_shift_hours)
        max_hours: int = update_data.get("max_shift_hours", current.max_shift_hours)
        if min_hours > max_hours:
            raise BadRequestError("min_shift_hours must not exceed max_shift_hours")
        if "timezone" in update_data and not is_valid_timezone(update_data["timezone"]):
            raise BadRequestError(f"Unknown timezone: {update_data['timezone']}")

        updated: StoreSettings = await store_settings_repository.update(db, current, update_data)
        await audit_service.log(
            db, AuditActionType.SETTINGS_UPDATED, admin, request=request,
            target_id=updated.id, details={"fields": sorted(update_data.keys()), **(audit_details or {})},
        )
        return updated

    async def get_store(self, db: AsyncSession, store_id: Any) -> Store:
        store: Store | None = await store_repository.get_by_id(db, store_id)
        if store is None:
            raise NotFoundError("Store not found")
        return store

    async def update_store(
        self,
        db: AsyncSession,
        admin: User,
        data: StoreUpdate,
        request: Request | None = None,
    ) -> Store:
        """매장 정보(이름, 주소, 전화, 영업시간)를 수정합니다."""
        store: Store = await self.get_store(db, admin.store_id)
        update_data: dict[str, Any] = data.model_dump(exclude_unset=True)
        if update_data.get("name") is None:
            update_data.pop("name", None)
        if "business_hours" in update_data:
            if update_data["business_hours"] is None:
                del update_data["business_hours"]
            else:
                # 전달되지 않은 요일은 기존 값 유지 — Keep weekdays that were not sent
                merged: dict[str, Any] = dict(store.business_hours or {})
                merged.update({day.lower(): hours for day, hours in update_data["business_hours"].items()})
                update_data["business_hours"] = merged

        store = await store_repository.update(db, store, update_data)
        await audit_service.log(
            db, AuditActionType.STORE_UPDATED, admin, request=request,
            target_id=store.id, details={"fields": sorted(update_data.keys())},
        )
        return store

    async def build_backup(self, db: AsyncSession, admin: User) -> dict[str, Any]:
        """매장 데이터 백업 JSON을 생성합니다.

        Export the store, its settings, users (without password hashes),
        shifts and shift requests as plain JSON.
        """
        store: Store = await self.get_store(db, admin.store_id)
        settings_row: StoreSettings = await store_settings_repository.get_or_create(db, admin.store_id)
        users = await user_repository.list_by_store(db, admin.store_id)
        shifts = await shift_repository.list_in_range(db, admin.store_id)
        requests = await shift_request_repository.list_for_store(db, admin.store_id)

        return {
            "store": store_to_response(store).model_dump(mode="json"),
            "settings": settings_to_response(settings_row).model_dump(mode="json"),
            "users": [
                {
                    "id": str(u.id),
                    "name": u.name,
                    "email": u.email,
                    "role": u.role,
                    "phone": u.phone,
                    "department": u.department,
                    "hourly_wage": u.hourly_wage,
                    "is_active": u.is_active,
                    "created_at": _iso(u.created_at),
                }
                for u in users
            ],
            "shifts": [
                {
                    "id": str(s.id),
                    "user_id": str(s.user_id),
                    "start_time": _iso(s.start_time),
                    "end_time": _iso(s.end_time),
                    "status": s.status,
                    "note": s.note,
                }
                for s in shifts
            ],
            "shift_requests": [
                {
                    "id": str(r.id),
                    "user_id": str(r.user_id),
                    "start_time": _iso(r.start_time),
                    "end_time": _iso(r.end_time),
                    "status": r.status,
                    "note": r.note,
                }
                for r in requests
            ],
            "backup_date": datetime.now(timezone.utc).isoformat(),
        }

    async def restore(
        self,
        db: AsyncSession,
        admin: User,
        data: RestoreRequest,
        request: Request | None = None,
    ) -> StoreSettings:
        """백업에서 매장 설정만 복원합니다.

        Restore the settings section of a backup. Users, shifts and
        requests in the payload are ignored.
        """
        return await self.update_settings(
            db, admin, data.settings, request=request,
            audit_details={"restored_from": data.store.get("id")},
        )


# 싱글턴 인스턴스 — Singleton instance
settings_service: SettingsService = SettingsService()
