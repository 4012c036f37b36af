"""관리자 리포트 라우터 — 근태/근무/직원 성과 리포트 및 Excel 내보내기.

Admin Reports Router — Attendance, shift and staff performance reports for
a period (month by default, week starting Monday, or a custom from/to
range), plus an Excel export of the attendance report.
"""

from datetime import date
from io import BytesIO
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import require_admin
from app.database import get_db
from app.models.user import User
from app.services.report_service import report_service

router: APIRouter = APIRouter()


@router.get("/attendance")
async def get_attendance_report(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
    period: Annotated[str, Query()] = "month",
    date_from: Annotated[date | None, Query(alias="from")] = None,
    date_to: Annotated[date | None, Query(alias="to")] = None,
) -> dict:
    """근태 리포트 — 직원별 근무시간, 지각/정시/결근, 예상 급여, 일별 통계."""
    return await report_service.attendance_report(
        db, current_user, period=period, date_from=date_from, date_to=date_to
    )


@router.get("/attendance/export")
async def export_attendance_report(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
    period: Annotated[str, Query()] = "month",
    date_from: Annotated[date | None, Query(alias="from")] = None,
    date_to: Annotated[date | None, Query(alias="to")] = None,
) -> StreamingResponse:
    """근태 리포트를 Excel 파일로 내보냅니다.

    Export the attendance report as an .xlsx workbook.
    """
    excel_bytes: bytes = await report_service.export_attendance_excel(
        db, current_user, period=period, date_from=date_from, date_to=date_to
    )
    return StreamingResponse(
        BytesIO(excel_bytes),
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={"Content-Disposition": "attachment; filename=attendance_report.xlsx"},
    )


@router.get("/shifts")
async def get_shift_report(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
    period: Annotated[str, Query()] = "month",
    date_from: Annotated[date | None, Query(alias="from")] = None,
    date_to: Annotated[date | None, Query(alias="to")] = None,
) -> dict:
    """근무 리포트 — 부서/역할별 시간, 신청 충족률, 일별 분포."""
    return await report_service.shift_report(
        db, current_user, period=period, date_from=date_from, date_to=date_to
    )


@router.get("/staff")
async def get_staff_report(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
    period: Annotated[str, Query()] = "month",
    date_from: Annotated[date | None, Query(alias="from")] = None,
    date_to: Annotated[date | None, Query(alias="to")] = None,
) -> dict:
    """직원 성과 리포트 — 근무 수, 시간, 출근율, 정시율, 근무 신청 실적."""
    return await report_service.staff_report(
        db, current_user, period=period, date_from=date_from, date_to=date_to
    )
