"""근무 신청 서비스 — 직원 신청 및 관리자 검토 비즈니스 로직.

Shift Request Service — Staff submit availability windows; admins approve
(creating a SCHEDULED shift) or reject them.
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession
from starlette.requests import Request

from app.models.audit_log import AuditActionType
from app.models.notification import NotificationType
from app.models.shift import Shift, ShiftRequest, ShiftRequestStatus, ShiftStatus
from app.models.user import User
from app.repositories.shift_repository import shift_repository, shift_request_repository
from app.schemas.shift import ShiftRequestCreate, ShiftRequestResponse, ShiftRequestReview
from app.services.audit_service import audit_service
from app.services.notification_service import notification_service
from app.utils.exceptions import BadRequestError, ForbiddenError, NotFoundError
from app.utils.timezone import to_utc, utc_now


def to_response(row: ShiftRequest, user_name: str | None = None) -> ShiftRequestResponse:
    return ShiftRequestResponse(
        id=str(row.id),
        user_id=str(row.user_id),
        user_name=user_name,
        store_id=str(row.store_id),
        start_time=to_utc(row.start_time),
        end_time=to_utc(row.end_time),
        status=row.status,
        note=row.note,
        reviewed_at=to_utc(row.reviewed_at) if row.reviewed_at is not None else None,
        created_at=to_utc(row.created_at),
    )


class ShiftRequestService:
    """근무 신청 서비스."""

    # === 직원 (Staff) ===

    async def list_own(
        self,
        db: AsyncSession,
        current_user: User,
        status: str | None = None,
    ) -> list[ShiftRequestResponse]:
        rows: Sequence[ShiftRequest] = await shift_request_repository.list_for_user(
            db, current_user.id, current_user.store_id, status=status
        )
        return [to_response(r, current_user.name) for r in rows]

    async def create(
        self,
        db: AsyncSession,
        current_user: User,
        data: ShiftRequestCreate,
    ) -> ShiftRequestResponse:
        """근무 희망 시간을 신청합니다 (PENDING).

        Raises:
            BadRequestError: 종료가 시작보다 이르거나 같음 (End not after start)
        """
        start, end = to_utc(data.start_time), to_utc(data.end_time)
        if end <= start:
            raise BadRequestError("end_time must be after start_time")
        row: ShiftRequest = await shift_request_repository.create(db, {
            "user_id": current_user.id,
            "store_id": current_user.store_id,
            "start_time": start,
            "end_time": end,
            "note": data.note,
            "status": ShiftRequestStatus.PENDING.value,
        })
        return to_response(row, current_user.name)

    async def delete_own(self, db: AsyncSession, current_user: User, request_id: UUID) -> None:
        """본인의 PENDING 신청을 삭제합니다.

        Raises:
            NotFoundError: 신청 없음 (Request does not exist)
            ForbiddenError: 본인 신청이 아님 (Not the owner)
            BadRequestError: 이미 검토됨 (Already reviewed)
        """
        row: ShiftRequest | None = await shift_request_repository.get_by_id(db, request_id)
        if row is None:
            raise NotFoundError("Shift request not found")
        if row.user_id != current_user.id:
            raise ForbiddenError("You can only delete your own requests")
        if row.status != ShiftRequestStatus.PENDING.value:
            raise BadRequestError("Only pending requests can be deleted")
        await shift_request_repository.delete(db, row)

    # === 관리자 (Admin) ===

    async def list_for_store(
        self,
        db: AsyncSession,
        admin: User,
        status: str | None = None,
        user_id: UUID | None = None,
    ) -> list[ShiftRequestResponse]:
        rows: Sequence[ShiftRequest] = await shift_request_repository.list_for_store(
            db, admin.store_id, status=status, user_id=user_id
        )
        return [to_response(r, r.user.name if r.user is not None else None) for r in rows]

    async def review(
        self,
        db: AsyncSession,
        admin: User,
        request_id: UUID,
        data: ShiftRequestReview,
        request: Request | None = None,
    ) -> ShiftRequestResponse:
        """근무 신청을 승인하거나 반려합니다.

        Approving creates a SCHEDULED shift covering the requested window.
        The requester is notified either way.

        Raises:
            NotFoundError: 신청 없음 또는 다른 매장 (Missing or another store's)
            BadRequestError: PENDING이 아님 (Already reviewed)
        """
        row: ShiftRequest | None = await shift_request_repository.get_by_id(
            db, request_id, store_id=admin.store_id
        )
        if row is None:
            raise NotFoundError("Shift request not found")
        if row.status != ShiftRequestStatus.PENDING.value:
            raise BadRequestError("Shift request has already been reviewed")

        update_data: dict = {
            "status": data.status,
            "reviewed_by": admin.id,
            "reviewed_at": utc_now(),
        }
        if data.note is not None:
            update_data["note"] = data.note
        row = await shift_request_repository.update(db, row, update_data)

        approved: bool = data.status == ShiftRequestStatus.APPROVED.value
        shift: Shift | None = None
        if approved:
            shift = await shift_repository.create(db, {
                "user_id": row.user_id,
                "store_id": row.store_id,
                "start_time": to_utc(row.start_time),
                "end_time": to_utc(row.end_time),
                "status": ShiftStatus.SCHEDULED.value,
                "note": row.note,
            })

        await audit_service.log(
            db,
            AuditActionType.SHIFT_APPROVED if approved else AuditActionType.SHIFT_REJECTED,
            admin,
            request=request,
            target_id=row.id,
            details={"shift_id": str(shift.id)} if shift is not None else None,
        )

        requester: User | None = await db.get(User, row.user_id)
        if requester is not None:
            window: str = f"{to_utc(row.start_time):%Y-%m-%d %H:%M} - {to_utc(row.end_time):%H:%M} UTC"
            if approved:
                await notification_service.send_notification(
                    db, requester, "Shift request approved",
                    f"Your shift request was approved: {window}",
                    NotificationType.REQUEST_APPROVED, related_id=row.id, link="/shifts",
                )
            else:
                await notification_service.send_notification(
                    db, requester, "Shift request rejected",
                    f"Your shift request was rejected: {window}",
                    NotificationType.REQUEST_REJECTED, related_id=row.id, link="/shift-requests",
                )
        return to_response(row, requester.name if requester is not None else None)


# 싱글턴 인스턴스 — Singleton instance
shift_request_service: ShiftRequestService = ShiftRequestService()
