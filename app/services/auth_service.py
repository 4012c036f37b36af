"""인증 서비스 — 로그인, 회원가입, 토큰 갱신 비즈니스 로직.

Auth Service — Business logic for login, registration, token refresh,
logout and current user lookup. Admins and staff share one login flow;
authorization is enforced per endpoint.
"""

from datetime import datetime, timedelta, timezone
from uuid import UUID

import jwt
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.requests import Request

from app.config import settings
from app.models.audit_log import AuditActionType
from app.models.store import Store
from app.models.user import User, UserRole
from app.repositories.auth_repository import auth_repository
from app.repositories.store_repository import store_repository
from app.repositories.user_repository import user_repository
from app.schemas.auth import (
    LoginRequest,
    RefreshRequest,
    RegisterRequest,
    TokenResponse,
    UserMeResponse,
)
from app.services.audit_service import audit_service
from app.utils.exceptions import (
    DuplicateError,
    NotFoundError,
    UnauthorizedError,
)
from app.utils.jwt import create_access_token, create_refresh_token, decode_token
from app.utils.password import hash_password, verify_password
from app.utils.timezone import to_utc


class AuthService:
    """인증 관련 비즈니스 로직을 처리하는 서비스.

    Service handling authentication business logic.
    """

    def _build_jwt_payload(self, user: User) -> dict[str, str | bool]:
        """JWT 페이로드를 구성합니다.

        Build the JWT token payload from user data.
        """
        return {
            "sub": str(user.id),
            "store": str(user.store_id),
            "role": user.role,
            "super": user.is_super_admin,
        }

    async def _generate_tokens(
        self,
        db: AsyncSession,
        user: User,
    ) -> TokenResponse:
        """액세스 토큰과 리프레시 토큰을 생성합니다.

        Generate an access/refresh token pair and persist the refresh token.
        Expired refresh tokens of the user are cleaned up on the way.
        """
        payload: dict[str, str | bool] = self._build_jwt_payload(user)
        access_token: str = create_access_token(payload)
        refresh_token: str = create_refresh_token(payload)

        now: datetime = datetime.now(timezone.utc)
        # 만료된 리프레시 토큰 정리 — Clean up expired refresh tokens
        await auth_repository.delete_expired_tokens(db, user.id, now)

        expires_at: datetime = now + timedelta(days=settings.JWT_REFRESH_TOKEN_EXPIRE_DAYS)
        await auth_repository.create_refresh_token(
            db, user_id=user.id, token=refresh_token, expires_at=expires_at
        )

        return TokenResponse(
            access_token=access_token,
            refresh_token=refresh_token,
        )

    async def login(
        self,
        db: AsyncSession,
        data: LoginRequest,
        request: Request | None = None,
    ) -> TokenResponse:
        """이메일/비밀번호 로그인.

        Authenticate with email and password and issue tokens.

        Raises:
            UnauthorizedError: 자격 증명 불일치 또는 비활성 계정
                               (Wrong credentials or deactivated account)
        """
        user: User | None = await user_repository.get_by_email(db, data.email)
        if user is None or not verify_password(data.password, user.password_hash):
            raise UnauthorizedError("Invalid email or password")
        if not user.is_active:
            raise UnauthorizedError("Account is deactivated")

        tokens: TokenResponse = await self._generate_tokens(db, user)
        await audit_service.log(db, AuditActionType.USER_LOGIN, user, request=request, target_id=user.id)
        return tokens

    async def register(
        self,
        db: AsyncSession,
        data: RegisterRequest,
        request: Request | None = None,
    ) -> User:
        """회원가입 — STAFF 역할로 사용자를 생성합니다.

        Self-register a STAFF user in the given store, or in the default
        store when none is given.

        Raises:
            DuplicateError: 이미 등록된 이메일 (Email already registered)
            NotFoundError: 존재하지 않는 매장 (Unknown store)
        """
        if await user_repository.email_taken(db, data.email):
            raise DuplicateError("Email already registered")

        if data.store_id is not None:
            store: Store | None = await store_repository.get_by_id(db, data.store_id)
            if store is None:
                raise NotFoundError("Store not found")
        else:
            store = await store_repository.get_or_create_default(db)

        user: User = await user_repository.create(db, {
            "store_id": store.id,
            "name": data.name.strip(),
            "email": data.email.lower(),
            "password_hash": hash_password(data.password),
            "role": UserRole.STAFF.value,
            "phone": data.phone,
        })
        await audit_service.log(
            db, AuditActionType.USER_CREATED, user, request=request,
            target_id=user.id, details={"source": "register"},
        )
        return user

    async def refresh_tokens(
        self,
        db: AsyncSession,
        data: RefreshRequest,
    ) -> TokenResponse:
        """리프레시 토큰으로 새 토큰 쌍을 발급합니다.

        Exchange a stored refresh token for a new pair. The old token is
        revoked.

        Raises:
            UnauthorizedError: 유효하지 않거나 만료된 리프레시 토큰일 때
                               (Invalid or expired refresh token)
        """
        db_token = await auth_repository.get_refresh_token(db, data.refresh_token)
        if db_token is None:
            raise UnauthorizedError("Invalid refresh token")

        if to_utc(db_token.expires_at) < datetime.now(timezone.utc):
            await auth_repository.delete_refresh_token(db, data.refresh_token)
            raise UnauthorizedError("Refresh token has expired")

        try:
            payload: dict = decode_token(data.refresh_token)
        except jwt.InvalidTokenError:
            await auth_repository.delete_refresh_token(db, data.refresh_token)
            raise UnauthorizedError("Invalid refresh token")

        user_id: str | None = payload.get("sub")
        if user_id is None or payload.get("type") != "refresh":
            raise UnauthorizedError("Invalid refresh token payload")

        user: User | None = await user_repository.get_by_id(db, UUID(user_id))
        if user is None or not user.is_active:
            raise UnauthorizedError("User not found or inactive")

        await auth_repository.delete_refresh_token(db, data.refresh_token)
        return await self._generate_tokens(db, user)

    async def logout(
        self,
        db: AsyncSession,
        refresh_token: str,
        user: User | None = None,
        request: Request | None = None,
    ) -> None:
        """로그아웃 처리 — 리프레시 토큰을 삭제합니다.

        Revoke the refresh token. A USER_LOGOUT entry is recorded when the
        token belonged to a known user.
        """
        db_token = await auth_repository.get_refresh_token(db, refresh_token)
        await auth_repository.delete_refresh_token(db, refresh_token)
        if user is None and db_token is not None:
            user = await user_repository.get_by_id(db, db_token.user_id)
        if user is not None:
            await audit_service.log(db, AuditActionType.USER_LOGOUT, user, request=request, target_id=user.id)

    async def build_me(self, db: AsyncSession, user: User) -> UserMeResponse:
        """현재 로그인한 사용자 프로필을 반환합니다.

        Return the profile of the authenticated user with the store name.
        """
        store_name: str | None = (
            await db.execute(select(Store.name).where(Store.id == user.store_id))
        ).scalar()
        if store_name is None:
            raise NotFoundError("Store not found")
        return UserMeResponse(
            id=str(user.id),
            name=user.name,
            email=user.email,
            role=user.role,
            is_super_admin=user.is_super_admin,
            is_active=user.is_active,
            store_id=str(user.store_id),
            store_name=store_name,
            phone=user.phone,
            image_url=user.image_url,
            department=user.department,
        )


# 싱글턴 인스턴스 — Singleton instance
auth_service: AuthService = AuthService()
