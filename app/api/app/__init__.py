"""앱 API 라우터 패키지 — 모든 앱(직원용) 엔드포인트 통합.

App API Router package — Aggregates all app-facing (employee) endpoints
into a single router for inclusion in the FastAPI application.

Included routers:
    - profile: 내 프로필 조회/수정/이미지 (My profile read/update/image)
    - shifts: 근무 캘린더 (Shift calendar)
    - shift_requests: 내 근무 신청 (My shift requests)
    - attendance: 출퇴근 기록 (Clock in/out, history, today's status)
    - notifications: 내 알림 및 알림 설정 (My notifications and preferences)
"""

from fastapi import APIRouter

from app.api.app.profile import router as profile_router
from app.api.app.shifts import router as shifts_router
from app.api.app.shift_requests import router as shift_requests_router
from app.api.app.attendance import router as attendance_router
from app.api.app.notifications import router as notifications_router

app_router: APIRouter = APIRouter()

# 프로필: /profile 엔드포인트 (GET/PUT my profile, POST image)
app_router.include_router(profile_router, tags=["App Profile"])
app_router.include_router(shifts_router, prefix="/shifts", tags=["App Shifts"])
app_router.include_router(shift_requests_router, prefix="/shift-requests", tags=["App Shift Requests"])
app_router.include_router(attendance_router, prefix="/attendance", tags=["App Attendance"])
app_router.include_router(notifications_router, prefix="/notifications", tags=["App Notifications"])
