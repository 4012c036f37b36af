"""프로필 서비스 — 현재 사용자 프로필 조회/수정 비즈니스 로직.

Profile Service — Business logic for the current user's profile read/update
and profile image upload.
"""

from fastapi import UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.user import User
from app.repositories.user_repository import user_repository
from app.schemas.user import ProfileResponse, ProfileUpdate
from app.services.storage_service import storage_service
from app.utils.exceptions import BadRequestError, DuplicateError
from app.utils.password import hash_password, verify_password

# 허용 이미지 형식과 최대 크기 — Accepted image types and size limit
ALLOWED_IMAGE_TYPES: dict[str, str] = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/gif": "gif",
    "image/webp": "webp",
}
MAX_IMAGE_BYTES: int = 5 * 1024 * 1024


class ProfileService:
    """프로필 관련 비즈니스 로직을 처리하는 서비스.

    Service handling profile business logic for the authenticated user.
    """

    def to_response(self, user: User) -> ProfileResponse:
        """사용자 모델을 프로필 응답 스키마로 변환합니다."""
        return ProfileResponse(
            id=str(user.id),
            name=user.name,
            email=user.email,
            role=user.role,
            phone=user.phone,
            image_url=user.image_url,
            department=user.department,
            store_id=str(user.store_id),
            created_at=user.created_at,
        )

    async def update_profile(
        self,
        db: AsyncSession,
        current_user: User,
        data: ProfileUpdate,
    ) -> ProfileResponse:
        """현재 사용자의 프로필을 수정합니다.

        Update the current user's profile. A password change requires the
        current password.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            current_user: 인증된 사용자 모델 (Authenticated user model)
            data: 수정할 프로필 데이터 (Profile update data)

        Returns:
            ProfileResponse: 수정된 프로필 응답 (Updated profile response)

        Raises:
            DuplicateError: 다른 사용자가 쓰는 이메일 (Email owned by another user)
            BadRequestError: 현재 비밀번호 누락/불일치 (Missing or wrong current password)
        """
        update_data: dict = data.model_dump(
            exclude_unset=True, exclude={"current_password", "new_password"}
        )

        if update_data.get("email") is not None:
            if await user_repository.email_taken(db, update_data["email"], exclude_user_id=current_user.id):
                raise DuplicateError("Email already registered")
            update_data["email"] = update_data["email"].lower()

        if data.new_password is not None:
            if not data.current_password:
                raise BadRequestError("Current password is required")
            if not verify_password(data.current_password, current_user.password_hash):
                raise BadRequestError("Current password is incorrect")
            update_data["password_hash"] = hash_password(data.new_password)

        for field in ("name", "email"):
            if field in update_data and update_data[field] is None:
                del update_data[field]

        user: User = await user_repository.update(db, current_user, update_data)
        return self.to_response(user)

    async def upload_image(
        self,
        db: AsyncSession,
        current_user: User,
        file: UploadFile,
    ) -> ProfileResponse:
        """프로필 이미지를 저장하고 image_url을 갱신합니다.

        The previous file is left in place; the caller removes it once the
        new image_url is committed.

        Raises:
            BadRequestError: 지원하지 않는 형식 또는 크기 초과 (Bad type or too large)
        """
        extension: str | None = ALLOWED_IMAGE_TYPES.get(file.content_type or "")
        if extension is None:
            raise BadRequestError("Only JPEG, PNG, GIF and WebP images are allowed")
        content: bytes = await file.read(MAX_IMAGE_BYTES + 1)
        if len(content) > MAX_IMAGE_BYTES:
            raise BadRequestError("Image must be 5MB or smaller")
        if not content:
            raise BadRequestError("Empty file")

        url: str = storage_service.save(content, extension, folder="profiles")
        user: User = await user_repository.update(db, current_user, {"image_url": url})
        return self.to_response(user)


# 싱글턴 인스턴스 — Singleton instance
profile_service: ProfileService = ProfileService()
