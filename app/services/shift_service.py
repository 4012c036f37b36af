"""근무 서비스 — 근무 조회 및 관리자 근무 관리 비즈니스 로직.

Shift Service — Calendar listing for staff and admins, and admin shift
create/update/delete/confirm with duration and overlap validation.
Affected staff are notified on every change.
"""

from datetime import date, datetime
from typing import Any, Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession
from starlette.requests import Request

from app.models.audit_log import AuditActionType
from app.models.notification import NotificationType
from app.models.shift import Shift, ShiftStatus
from app.models.store import StoreSettings
from app.models.user import User
from app.repositories.shift_repository import shift_repository
from app.repositories.store_repository import store_settings_repository
from app.repositories.user_repository import user_repository
from app.schemas.shift import ShiftConfirmRequest, ShiftCreate, ShiftEventResponse, ShiftUpdate
from app.services.audit_service import audit_service
from app.services.notification_service import notification_service
from app.utils.exceptions import BadRequestError, DuplicateError, NotFoundError
from app.utils.timezone import date_bounds, to_utc

# 캘린더 색상 — Calendar colors
CANCELED_COLOR: str = "#ff5252"
DEFAULT_COLOR: str = "#4285f4"


def to_event(shift: Shift) -> ShiftEventResponse:
    """근무를 캘린더 이벤트로 변환합니다. shift.user가 로드되어 있어야 합니다."""
    employee_name: str = shift.user.name if shift.user is not None else ""
    return ShiftEventResponse(
        id=str(shift.id),
        title=employee_name,
        start=to_utc(shift.start_time),
        end=to_utc(shift.end_time),
        employee_id=str(shift.user_id),
        employee_name=employee_name,
        status=shift.status,
        note=shift.note,
        color=CANCELED_COLOR if shift.status == ShiftStatus.CANCELED.value else DEFAULT_COLOR,
    )


def _format_window(start: datetime, end: datetime) -> str:
    return f"{start:%Y-%m-%d %H:%M} - {end:%H:%M} UTC"


class ShiftService:
    """근무 서비스."""

    async def list_shifts(
        self,
        db: AsyncSession,
        current_user: User,
        start_date: date | None = None,
        end_date: date | None = None,
        show_all: bool = False,
    ) -> list[ShiftEventResponse]:
        """캘린더 근무 목록을 조회합니다.

        List shifts of the caller's store between the given dates (store
        timezone, inclusive). Non-admins, or admins without show_all, only
        see their own shifts.
        """
        tz_name: str = await store_settings_repository.get_timezone(db, current_user.store_id)
        start = end = None
        if start_date is not None:
            start, _ = date_bounds(start_date, start_date, tz_name)
        if end_date is not None:
            _, end = date_bounds(end_date, end_date, tz_name)
        if start is not None and end is not None and start >= end:
            raise BadRequestError("start_date must not be after end_date")

        own_only: bool = not (current_user.is_admin and show_all)
        shifts: Sequence[Shift] = await shift_repository.list_in_range(
            db,
            current_user.store_id,
            start=start,
            end=end,
            user_id=current_user.id if own_only else None,
        )
        return [to_event(s) for s in shifts]

    async def _validate_window(
        self,
        db: AsyncSession,
        store_id: UUID,
        user_id: UUID,
        start: datetime,
        end: datetime,
        exclude_shift_id: UUID | None = None,
    ) -> None:
        """근무 시간 유효성 검사.

        Raises:
            BadRequestError: 종료가 시작보다 이르거나 길이가 매장 규칙 밖
                             (End not after start, or length outside store rules)
            DuplicateError: 같은 사용자의 기존 근무와 겹침 (Overlaps an existing shift)
        """
        if end <= start:
            raise BadRequestError("end_time must be after start_time")
        rules: StoreSettings = await store_settings_repository.get_or_create(db, store_id)
        hours: float = (end - start).total_seconds() / 3600
        if hours < rules.min_shift_hours or hours > rules.max_shift_hours:
            raise BadRequestError(
                f"Shift length must be between {rules.min_shift_hours} and {rules.max_shift_hours} hours"
            )
        conflict: Shift | None = await shift_repository.find_conflict(
            db, user_id, start, end, exclude_shift_id=exclude_shift_id
        )
        if conflict is not None:
            raise DuplicateError("Shift overlaps an existing shift for this user")

    async def _get_store_user(self, db: AsyncSession, store_id: UUID, user_id: UUID) -> User:
        user: User | None = await user_repository.get_by_id(db, user_id, store_id=store_id)
        if user is None:
            raise NotFoundError("User not found in this store")
        return user

    async def get_shift(self, db: AsyncSession, admin: User, shift_id: UUID) -> Shift:
        shift: Shift | None = await shift_repository.get_with_user(db, shift_id, store_id=admin.store_id)
        if shift is None:
            raise NotFoundError("Shift not found")
        return shift

    async def create_shift(
        self,
        db: AsyncSession,
        admin: User,
        data: ShiftCreate,
        request: Request | None = None,
    ) -> ShiftEventResponse:
        """관리자가 근무를 생성하고 해당 직원에게 알립니다."""
        employee: User = await self._get_store_user(db, admin.store_id, data.user_id)
        start: datetime = to_utc(data.start_time)
        end: datetime = to_utc(data.end_time)
        await self._validate_window(db, admin.store_id, employee.id, start, end)

        shift: Shift = await shift_repository.create(db, {
            "user_id": employee.id,
            "store_id": admin.store_id,
            "start_time": start,
            "end_time": end,
            "note": data.note,
            "status": ShiftStatus.SCHEDULED.value,
        })
        await audit_service.log(
            db, AuditActionType.SHIFT_CREATED, admin, request=request,
            target_id=shift.id, details={"user_id": str(employee.id)},
        )
        await notification_service.send_notification(
            db, employee, "New shift assigned",
            f"A shift was added: {_format_window(start, end)}",
            NotificationType.SHIFT_CHANGED, related_id=shift.id, link="/shifts",
        )
        loaded: Shift = await self.get_shift(db, admin, shift.id)
        return to_event(loaded)

    async def update_shift(
        self,
        db: AsyncSession,
        admin: User,
        shift_id: UUID,
        data: ShiftUpdate,
        request: Request | None = None,
    ) -> ShiftEventResponse:
        """근무를 부분 수정합니다. 시간/담당자가 바뀌면 다시 검증합니다."""
        shift: Shift = await self.get_shift(db, admin, shift_id)
        update_data: dict[str, Any] = {
            key: value for key, value in data.model_dump(exclude_unset=True).items()
            if value is not None or key == "note"
        }

        if "user_id" in update_data:
            await self._get_store_user(db, admin.store_id, update_data["user_id"])
        if "start_time" in update_data:
            update_data["start_time"] = to_utc(update_data["start_time"])
        if "end_time" in update_data:
            update_data["end_time"] = to_utc(update_data["end_time"])

        if {"user_id", "start_time", "end_time"} & update_data.keys():
            await self._validate_window(
                db,
                admin.store_id,
                update_data.get("user_id", shift.user_id),
                update_data.get("start_time", to_utc(shift.start_time)),
                update_data.get("end_time", to_utc(shift.end_time)),
                exclude_shift_id=shift.id,
            )

        shift = await shift_repository.update(db, shift, update_data)
        await audit_service.log(
            db, AuditActionType.SHIFT_UPDATED, admin, request=request,
            target_id=shift.id, details={"fields": sorted(update_data.keys())},
        )
        loaded: Shift = await self.get_shift(db, admin, shift.id)
        await notification_service.send_notification(
            db, loaded.user, "Shift updated",
            f"Your shift was changed: {_format_window(to_utc(loaded.start_time), to_utc(loaded.end_time))}",
            NotificationType.SHIFT_CHANGED, related_id=loaded.id, link="/shifts",
        )
        return to_event(loaded)

    async def delete_shift(
        self,
        db: AsyncSession,
        admin: User,
        shift_id: UUID,
        request: Request | None = None,
    ) -> None:
        """근무를 삭제합니다. 근태 기록은 DB CASCADE로 함께 삭제됩니다."""
        shift: Shift = await self.get_shift(db, admin, shift_id)
        employee: User = shift.user
        start, end = to_utc(shift.start_time), to_utc(shift.end_time)
        await shift_repository.delete(db, shift)
        await audit_service.log(
            db, AuditActionType.SHIFT_DELETED, admin, request=request,
            target_id=shift_id, details={"user_id": str(employee.id)},
        )
        await notification_service.send_notification(
            db, employee, "Shift removed",
            f"Your shift was removed: {_format_window(start, end)}",
            NotificationType.SHIFT_CHANGED, link="/shifts",
        )

    async def confirm_shift(
        self,
        db: AsyncSession,
        admin: User,
        shift_id: UUID,
        data: ShiftConfirmRequest,
        request: Request | None = None,
    ) -> ShiftEventResponse:
        """근무를 확정(CONFIRMED)하거나 취소(CANCELED)합니다.

        Raises:
            BadRequestError: 완료된 근무 (Shift already completed)
        """
        shift: Shift = await self.get_shift(db, admin, shift_id)
        if shift.status == ShiftStatus.COMPLETED.value:
            raise BadRequestError("Completed shifts cannot be confirmed or canceled")

        new_status: str = ShiftStatus.CONFIRMED.value if data.is_confirmed else ShiftStatus.CANCELED.value
        update_data: dict[str, Any] = {"status": new_status}
        if data.note is not None:
            update_data["note"] = data.note
        shift = await shift_repository.update(db, shift, update_data)
        await audit_service.log(
            db, AuditActionType.SHIFT_UPDATED, admin, request=request,
            target_id=shift.id, details={"status": new_status},
        )

        loaded: Shift = await self.get_shift(db, admin, shift.id)
        window: str = _format_window(to_utc(loaded.start_time), to_utc(loaded.end_time))
        if data.is_confirmed:
            await notification_service.send_notification(
                db, loaded.user, "Shift confirmed", f"Your shift was confirmed: {window}",
                NotificationType.SHIFT_CONFIRMED, related_id=loaded.id, link="/shifts",
            )
        else:
            await notification_service.send_notification(
                db, loaded.user, "Shift canceled", f"Your shift was canceled: {window}",
                NotificationType.SHIFT_CHANGED, related_id=loaded.id, link="/shifts",
            )
        return to_event(loaded)


# 싱글턴 인스턴스 — Singleton instance
shift_service: ShiftService = ShiftService()
