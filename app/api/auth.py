"""인증 라우터 — 회원가입, 로그인, 토큰 갱신, 로그아웃, 내 정보, CSRF 토큰.

Auth Router — Registration, login, token refresh, logout, current user and
CSRF token endpoints. Shared by staff and admin clients.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user
from app.config import settings
from app.database import get_db
from app.middleware.csrf import generate_csrf_token
from app.models.user import User
from app.schemas.auth import (
    CsrfTokenResponse,
    LoginRequest,
    RefreshRequest,
    RegisterRequest,
    RegisterResponse,
    TokenResponse,
    UserMeResponse,
)
from app.services.auth_service import auth_service

router: APIRouter = APIRouter()


@router.post("/register", response_model=RegisterResponse, status_code=201)
async def register(
    data: RegisterRequest,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> RegisterResponse:
    """회원가입 — STAFF 역할 사용자를 생성합니다.

    Self-registration. The new user gets the STAFF role in the requested
    store, or in the default store when no store_id is given.

    Args:
        data: 가입 정보 (Name, email, password, optional phone and store_id)
        request: HTTP 요청 (감사 로그용 IP/User-Agent)
        db: 비동기 데이터베이스 세션 (Async database session)

    Returns:
        RegisterResponse: 안내 메시지와 생성된 사용자 (Message and created user)
    """
    user: User = await auth_service.register(db, data, request)
    await db.commit()
    return RegisterResponse(
        message="User registered successfully",
        user=await auth_service.build_me(db, user),
    )


@router.post("/login", response_model=TokenResponse)
async def login(
    data: LoginRequest,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TokenResponse:
    """로그인 — 이메일/비밀번호로 토큰 쌍을 발급합니다.

    Login with email and password. Issues an access/refresh token pair.
    """
    result: TokenResponse = await auth_service.login(db, data, request)
    await db.commit()
    return result


@router.post("/refresh", response_model=TokenResponse)
async def refresh_token(
    data: RefreshRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TokenResponse:
    """토큰 갱신 — 리프레시 토큰으로 새 토큰 쌍 발급.

    Refresh token endpoint. Issues a new token pair using a refresh token.
    """
    result: TokenResponse = await auth_service.refresh_tokens(db, data)
    await db.commit()
    return result


@router.post("/logout", status_code=204)
async def logout(
    data: RefreshRequest,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> None:
    """로그아웃 — 리프레시 토큰 폐기.

    Logout endpoint. Revokes the given refresh token.
    """
    await auth_service.logout(db, data.refresh_token, request=request)
    await db.commit()


@router.get("/me", response_model=UserMeResponse)
async def get_me(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> UserMeResponse:
    """현재 사용자 프로필 조회.

    Get the profile of the currently authenticated user.
    """
    return await auth_service.build_me(db, current_user)


@router.get("/csrf-token", response_model=CsrfTokenResponse)
async def get_csrf_token(
    current_user: Annotated[User, Depends(get_current_user)],
) -> CsrfTokenResponse:
    """현재 사용자에게 묶인 CSRF 토큰을 발급합니다."""
    return CsrfTokenResponse(
        csrf_token=generate_csrf_token(str(current_user.id)),
        expires_in=settings.CSRF_TOKEN_EXPIRE_MINUTES * 60,
    )
