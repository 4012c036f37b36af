"""관리자 API 라우터 패키지 — 모든 관리자 엔드포인트 통합.

Admin API Router package — Aggregates all admin-facing endpoints into a
single router for inclusion in the FastAPI application.

Included routers:
    - staff: 직원 관리 (Staff management, non-admin → 401)
    - shifts: 근무 생성/수정/확정, 자동 생성 (Shift CRUD, confirm, generator)
    - shift_requests: 근무 신청 검토 (Shift request review)
    - settings: 매장 설정, 매장 정보, 백업/복원 (Settings, store, backup/restore)
    - audit_log: 감사 로그 (Audit log search)
    - reports: 근태/근무/직원 리포트 (Attendance, shift and staff reports)
    - notifications: 관리자 메시지 (Admin messages)
    - super_admin: 시스템 통계 및 관리 작업 (Super admin stats and actions)

The HTML setup page (app.api.admin.setup) is mounted at the application
root by app.main.
"""

from fastapi import APIRouter

from app.api.admin.staff import router as staff_router
from app.api.admin.shifts import router as shifts_router
from app.api.admin.shift_requests import router as shift_requests_router
from app.api.admin.settings import router as settings_router
from app.api.admin.audit_log import router as audit_log_router
from app.api.admin.reports import router as reports_router
from app.api.admin.notifications import router as notifications_router
from app.api.admin.super_admin import router as super_admin_router

admin_router: APIRouter = APIRouter()

admin_router.include_router(staff_router, prefix="/staff", tags=["Staff"])
admin_router.include_router(shifts_router, prefix="/shifts", tags=["Shifts"])
admin_router.include_router(shift_requests_router, prefix="/shift-requests", tags=["Shift Requests"])
# 설정: /settings, /settings/backup, /settings/restore, /store
admin_router.include_router(settings_router, tags=["Store Settings"])
admin_router.include_router(audit_log_router, prefix="/audit-log", tags=["Audit Log"])
admin_router.include_router(reports_router, prefix="/reports", tags=["Reports"])
admin_router.include_router(notifications_router, prefix="/notifications", tags=["Admin Notifications"])
admin_router.include_router(super_admin_router, prefix="/super", tags=["Super Admin"])
