"""공통 Pydantic 응답 스키마 정의.

Common Pydantic response schema definitions shared across API domains:
generic messages, counts and the audit log page.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel


class MessageResponse(BaseModel):
    """단순 메시지 응답 스키마."""

    message: str


class SuccessResponse(BaseModel):
    """성공 여부 응답 스키마."""

    success: bool = True


class CountResponse(BaseModel):
    """개수 응답 스키마."""

    count: int


# === 감사 로그 (Audit log) 스키마 ===

class AuditUser(BaseModel):
    id: str
    name: str
    email: str
    role: str


class AuditLogResponse(BaseModel):
    """감사 로그 항목 응답 스키마."""

    id: str
    action_type: str
    user_id: str | None = None
    user: AuditUser | None = None
    target_id: str | None = None
    details: dict[str, Any] | None = None
    ip_address: str | None = None
    user_agent: str | None = None
    created_at: datetime


class Pagination(BaseModel):
    total: int
    limit: int
    offset: int
    has_more: bool


class AuditLogPage(BaseModel):
    """감사 로그 검색 응답 — data + pagination."""

    data: list[AuditLogResponse]
    pagination: Pagination
