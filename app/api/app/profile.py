"""앱 프로필 라우터 — 사용자 프로필 관리 API.

App Profile Router — API endpoints for user profile management.
Provides read and update operations for the current user's profile and
profile image upload.
Follows 3-layer architecture: Router → Service → Repository.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user
from app.database import get_db
from app.models.user import User
from app.schemas.user import ProfileResponse, ProfileUpdate
from app.services.profile_service import profile_service
from app.services.storage_service import storage_service

router: APIRouter = APIRouter()


@router.get("/profile", response_model=ProfileResponse)
async def get_my_profile(
    current_user: Annotated[User, Depends(get_current_user)],
) -> ProfileResponse:
    """내 프로필을 조회합니다.

    Get the current user's profile.

    Args:
        current_user: 인증된 사용자 (Authenticated user)

    Returns:
        ProfileResponse: 프로필 정보 (Profile information)
    """
    return profile_service.to_response(current_user)


@router.put("/profile", response_model=ProfileResponse)
async def update_my_profile(
    data: ProfileUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> ProfileResponse:
    """내 프로필을 업데이트합니다.

    Update the current user's profile. Changing the password requires
    current_password.

    Args:
        data: 업데이트 데이터 (Update data)
        db: 비동기 데이터베이스 세션 (Async database session)
        current_user: 인증된 사용자 (Authenticated user)

    Returns:
        ProfileResponse: 업데이트된 프로필 정보 (Updated profile information)
    """
    result: ProfileResponse = await profile_service.update_profile(
        db, current_user, data
    )
    await db.commit()
    return result


@router.post("/profile/image", response_model=ProfileResponse)
async def upload_my_profile_image(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
    file: UploadFile = File(...),
) -> ProfileResponse:
    """프로필 이미지를 업로드합니다 (jpeg/png/gif/webp, 5MB 이하)."""
    previous_url: str | None = current_user.image_url
    result: ProfileResponse = await profile_service.upload_image(db, current_user, file)
    await db.commit()
    # 커밋 이후에만 이전 파일 삭제 — Old file goes only after the commit
    if previous_url:
        storage_service.delete(previous_url)
    return result
