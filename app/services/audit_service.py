"""감사 로그 서비스 — 감사 기록 생성 및 검색.

Audit Service — Records security relevant actions and serves the admin
audit log search. Entries are added to the caller's session and are
committed together with the operation they describe.
"""

import logging
from datetime import date
from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession
from starlette.requests import Request

from app.models.audit_log import AuditActionType, AuditLog
from app.models.user import User
from app.repositories.audit_log_repository import audit_log_repository
from app.repositories.store_repository import store_settings_repository
from app.schemas.common import AuditLogPage, AuditLogResponse, AuditUser, Pagination
from app.utils.timezone import date_bounds

logger = logging.getLogger(__name__)


def client_ip(request: Request | None) -> str | None:
    """프록시 헤더를 고려한 클라이언트 IP.

    x-forwarded-for (first hop), then x-real-ip, then the socket peer.
    """
    if request is None:
        return None
    forwarded: str | None = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    real_ip: str | None = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip.strip()
    return request.client.host if request.client else None


class AuditService:
    """감사 로그 비즈니스 로직."""

    async def log(
        self,
        db: AsyncSession,
        action_type: AuditActionType,
        actor: User | None,
        *,
        request: Request | None = None,
        target_id: UUID | str | None = None,
        details: dict[str, Any] | None = None,
        store_id: UUID | None = None,
    ) -> AuditLog:
        """감사 로그 항목을 세션에 추가합니다.

        Add an audit entry to the session. The caller commits.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            action_type: 작업 유형 (Action performed)
            actor: 작업 수행자 (Acting user; None for anonymous actions)
            request: 요청 객체, IP/User-Agent 추출용 (Request for ip/user agent)
            target_id: 대상 엔티티 ID (Affected entity)
            details: 부가 정보 (Extra JSON context)
            store_id: 매장 범위, 기본값은 수행자의 매장 (Defaults to actor's store)

        Returns:
            AuditLog: 추가된 항목 (The pending entry)
        """
        entry: AuditLog = AuditLog(
            action_type=action_type.value,
            user_id=actor.id if actor is not None else None,
            target_id=str(target_id) if target_id is not None else None,
            details=details,
            ip_address=client_ip(request),
            user_agent=request.headers.get("user-agent") if request is not None else None,
            store_id=store_id if store_id is not None else (actor.store_id if actor is not None else None),
        )
        db.add(entry)
        logger.info(
            "audit %s actor=%s target=%s",
            action_type.value,
            actor.id if actor is not None else None,
            entry.target_id,
        )
        return entry

    async def search(
        self,
        db: AsyncSession,
        store_id: UUID,
        user_id: UUID | None = None,
        action_type: AuditActionType | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> AuditLogPage:
        """감사 로그를 검색합니다. 날짜는 매장 시간대 기준입니다.

        Search the store's audit log. Dates are interpreted in the store's
        timezone and are inclusive.
        """
        tz_name: str = await store_settings_repository.get_timezone(db, store_id)
        start = end = None
        if start_date is not None:
            start, _ = date_bounds(start_date, start_date, tz_name)
        if end_date is not None:
            _, end = date_bounds(end_date, end_date, tz_name)

        entries, total = await audit_log_repository.search(
            db,
            store_id=store_id,
            user_id=user_id,
            action_type=action_type.value if action_type else None,
            start=start,
            end=end,
            limit=limit,
            offset=offset,
        )
        data: list[AuditLogResponse] = [
            AuditLogResponse(
                id=str(entry.id),
                action_type=entry.action_type,
                user_id=str(entry.user_id) if entry.user_id else None,
                user=AuditUser(
                    id=str(entry.user.id),
                    name=entry.user.name,
                    email=entry.user.email,
                    role=entry.user.role,
                ) if entry.user is not None else None,
                target_id=entry.target_id,
                details=entry.details,
                ip_address=entry.ip_address,
                user_agent=entry.user_agent,
                created_at=entry.created_at,
            )
            for entry in entries
        ]
        return AuditLogPage(
            data=data,
            pagination=Pagination(
                total=total,
                limit=limit,
                offset=offset,
                has_more=offset + len(data) < total,
            ),
        )


# 싱글턴 인스턴스 — Singleton instance
audit_service: AuditService = AuditService()
