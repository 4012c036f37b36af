"""사용자 SQLAlchemy ORM 모델 정의.

User SQLAlchemy ORM model definition.
Two roles exist (ADMIN, STAFF); platform operators additionally carry
the is_super_admin flag.

Tables:
    - users: 사용자 계정 (User accounts scoped to a store)
"""

import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base


class UserRole(str, enum.Enum):
    """사용자 역할 — Store level role."""

    ADMIN = "ADMIN"
    STAFF = "STAFF"


# 보고서 인건비 추정 기본 시급 — Default hourly wage for wage estimates
DEFAULT_HOURLY_WAGE: int = 1000


class User(Base):
    """사용자 모델 — 시스템 사용자 계정 정보.

    User model — System user account information.
    Each user belongs to exactly one store. Email is globally unique and
    is the login identifier.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        store_id: 소속 매장 FK (Owning store)
        name: 이름 (Display name)
        email: 이메일, 로그인 아이디 (Login email, unique)
        password_hash: bcrypt 해시된 비밀번호 (bcrypt-hashed password)
        role: ADMIN 또는 STAFF (Store role)
        is_super_admin: 플랫폼 관리자 여부 (Platform operator flag)
        is_active: 활성 상태 (Inactive users cannot authenticate)
        phone / image_url / department: 프로필 정보 (Profile details)
        hourly_wage: 시급, 보고서용 (Hourly wage used by reports)
        created_at: 생성 일시 UTC (Creation timestamp)
        updated_at: 수정 일시 UTC (Last update timestamp)
    """

    __tablename__ = "users"

    # 사용자 고유 식별자 — User unique identifier (UUID v4, auto-generated)
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 소속 매장 FK — Owning store (CASCADE: 매장 삭제 시 사용자도 삭제)
    store_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("stores.id", ondelete="CASCADE"), nullable=False, index=True)
    # 이름 — Display name
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    # 이메일 — Login identifier (전역 고유, globally unique)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    # 비밀번호 해시 — bcrypt hashed password (평문 저장 금지, never store plaintext)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    # 역할 — ADMIN / STAFF
    role: Mapped[str] = mapped_column(String(20), nullable=False, default=UserRole.STAFF.value)
    # 슈퍼 관리자 — Platform operator flag
    is_super_admin: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    # 활성 상태 — Whether the user account is active
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    image_url: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    department: Mapped[str | None] = mapped_column(String(100), nullable=True)
    # 시급 — Hourly wage (None이면 보고서에서 DEFAULT_HOURLY_WAGE 사용)
    hourly_wage: Mapped[int | None] = mapped_column(Integer, nullable=True)
    # 생성 일시 — Record creation timestamp (UTC)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    # 수정 일시 — Last modification timestamp (UTC, auto-updated)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    # 관계 — Relationships (자식 테이블은 DB 수준 CASCADE로 삭제)
    store = relationship("Store")

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN.value
