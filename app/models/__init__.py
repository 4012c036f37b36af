"""SQLAlchemy ORM 모델 패키지 — 모든 도메인 모델의 중앙 임포트 지점.

SQLAlchemy ORM models package — Central import point for all domain models.
Importing from this package ensures all models are registered with the
SQLAlchemy metadata, which is required for Alembic migrations and
relationship resolution.

Modules:
    store: 매장 및 매장 설정 (Store, StoreSettings)
    user: 사용자 (User)
    shift: 근무 및 근무 신청 (Shift, ShiftRequest)
    attendance: 근태 기록 (Attendance)
    notification: 알림 및 알림 설정 (Notification, NotificationPreference)
    audit_log: 감사 로그 (AuditLog)
    token: 리프레시 토큰 (Refresh tokens)
"""

from app.models.store import Store, StoreSettings
from app.models.user import User, UserRole
from app.models.shift import Shift, ShiftRequest, ShiftRequestStatus, ShiftStatus
from app.models.attendance import Attendance, AttendanceStatus
from app.models.notification import Notification, NotificationPreference, NotificationType
from app.models.audit_log import AuditActionType, AuditLog
from app.models.token import RefreshToken

__all__ = [
    "Store", "StoreSettings",
    "User", "UserRole",
    "Shift", "ShiftRequest", "ShiftRequestStatus", "ShiftStatus",
    "Attendance", "AttendanceStatus",
    "Notification", "NotificationPreference", "NotificationType",
    "AuditActionType", "AuditLog",
    "RefreshToken",
]
