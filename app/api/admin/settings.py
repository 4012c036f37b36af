"""관리자 매장 설정 라우터 — 근무 규칙, 매장 정보, 백업/복원.

Admin Store Settings Router — Shift rules and notification defaults,
store profile and business hours, backup and restore.
"""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import require_admin
from app.database import get_db
from app.models.store import Store, StoreSettings
from app.models.user import User
from app.schemas.settings import (
    RestoreRequest,
    StoreResponse,
    StoreSettingsResponse,
    StoreSettingsUpdate,
    StoreUpdate,
)
from app.services.settings_service import settings_service, settings_to_response, store_to_response

router: APIRouter = APIRouter()


@router.get("/settings", response_model=StoreSettingsResponse)
async def get_settings(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
) -> StoreSettingsResponse:
    """매장 설정을 조회합니다. 없으면 기본값으로 생성됩니다."""
    row: StoreSettings = await settings_service.get_settings(db, current_user.store_id)
    await db.commit()
    return settings_to_response(row)


@router.put("/settings", response_model=StoreSettingsResponse)
async def update_settings(
    data: StoreSettingsUpdate,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
) -> StoreSettingsResponse:
    """매장 설정을 부분 갱신합니다.

    Partially update the store settings. Rejects min_shift_hours greater
    than max_shift_hours and unknown timezones with 400.

    Args:
        data: 변경할 설정 (Fields to change)
        request: HTTP 요청 (감사 로그용)
        db: 비동기 데이터베이스 세션 (Async database session)
        current_user: 관리자 (Admin user)

    Returns:
        StoreSettingsResponse: 갱신된 설정 (Updated settings)
    """
    row: StoreSettings = await settings_service.update_settings(db, current_user, data, request)
    await db.commit()
    return settings_to_response(row)


@router.get("/settings/backup")
async def backup_settings(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
) -> dict[str, Any]:
    """매장 데이터를 JSON으로 백업합니다 (비밀번호 해시 제외)."""
    result: dict[str, Any] = await settings_service.build_backup(db, current_user)
    await db.commit()
    return result


@router.post("/settings/restore", response_model=StoreSettingsResponse)
async def restore_settings(
    data: RestoreRequest,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
) -> StoreSettingsResponse:
    """백업 JSON에서 매장 설정을 복원합니다.

    Only the settings section is restored; store, users and shifts in the
    payload are not applied.
    """
    row: StoreSettings = await settings_service.restore(db, current_user, data, request)
    await db.commit()
    return settings_to_response(row)


@router.get("/store", response_model=StoreResponse)
async def get_store(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
) -> StoreResponse:
    """매장 정보와 영업시간을 조회합니다."""
    store: Store = await settings_service.get_store(db, current_user.store_id)
    return store_to_response(store)


@router.put("/store", response_model=StoreResponse)
async def update_store(
    data: StoreUpdate,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
) -> StoreResponse:
    """매장 이름, 주소, 전화번호, 영업시간을 수정합니다."""
    store: Store = await settings_service.update_store(db, current_user, data, request)
    await db.commit()
    return store_to_response(store)
