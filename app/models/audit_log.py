"""감사 로그 SQLAlchemy ORM 모델 정의.

AuditLog SQLAlchemy ORM model definition.

Tables:
    - audit_logs: 관리 작업 이력 (History of security relevant actions)
"""

import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import JSON, DateTime, ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base


class AuditActionType(str, enum.Enum):
    """감사 로그 작업 유형 — Audited action types."""

    USER_LOGIN = "USER_LOGIN"
    USER_LOGOUT = "USER_LOGOUT"
    USER_CREATED = "USER_CREATED"
    USER_UPDATED = "USER_UPDATED"
    USER_DELETED = "USER_DELETED"
    SHIFT_CREATED = "SHIFT_CREATED"
    SHIFT_UPDATED = "SHIFT_UPDATED"
    SHIFT_DELETED = "SHIFT_DELETED"
    SHIFT_APPROVED = "SHIFT_APPROVED"
    SHIFT_REJECTED = "SHIFT_REJECTED"
    STAFF_INVITED = "STAFF_INVITED"
    ROLE_CHANGED = "ROLE_CHANGED"
    SETTINGS_UPDATED = "SETTINGS_UPDATED"
    STORE_UPDATED = "STORE_UPDATED"


class AuditLog(Base):
    """감사 로그 모델.

    Audit log entry — Who did what, to which target, from where.

    Attributes:
        action_type: AuditActionType 값 (Action performed)
        user_id: 작업 수행자 FK (Acting user, SET NULL on delete)
        target_id: 대상 엔티티 ID (Affected entity id)
        details: 부가 정보 JSON (Extra context)
        ip_address / user_agent: 요청 출처 (Request origin)
        store_id: 매장 FK (Store scope)
    """

    __tablename__ = "audit_logs"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    action_type: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    # 작업 수행자 — Acting user (사용자 삭제 후에도 기록 유지)
    user_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    target_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    details: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    ip_address: Mapped[str | None] = mapped_column(String(64), nullable=True)
    user_agent: Mapped[str | None] = mapped_column(String(500), nullable=True)
    store_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("stores.id", ondelete="CASCADE"), nullable=True, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), index=True)

    # 관계 — Relationships
    user = relationship("User")
