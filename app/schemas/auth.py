"""인증 관련 Pydantic 요청/응답 스키마 정의.

Authentication-related Pydantic request/response schema definitions.
Covers login, registration, token issuance/refresh, and current user info.
"""

from uuid import UUID

from pydantic import BaseModel, EmailStr, Field

from app.utils.password import MIN_PASSWORD_LENGTH


class LoginRequest(BaseModel):
    """로그인 요청 스키마.

    Login request schema shared by admins and staff.

    Attributes:
        email: 로그인 이메일 (Login email)
        password: 비밀번호 (Plain text password, verified against bcrypt hash)
    """

    email: str  # 로그인 이메일 — 대소문자 무시 (Case-insensitive login email)
    password: str  # 비밀번호 — 평문, 서버에서 bcrypt 해시와 비교 (Plain text, compared to bcrypt hash)


class RegisterRequest(BaseModel):
    """회원가입 요청 스키마.

    Self-registration request schema. New accounts get the STAFF role.

    Attributes:
        name: 이름 (Display name)
        email: 이메일 (Login email, globally unique)
        password: 비밀번호 (At least 8 characters)
        phone: 전화번호 (Optional)
        store_id: 가입할 매장 (Optional; default store when omitted)
    """

    name: str = Field(min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(min_length=MIN_PASSWORD_LENGTH)
    phone: str | None = None
    store_id: UUID | None = None


class TokenResponse(BaseModel):
    """JWT 토큰 발급 응답 스키마.

    Attributes:
        access_token: JWT 액세스 토큰 (Short-lived access token)
        refresh_token: JWT 리프레시 토큰 (Long-lived refresh token)
        token_type: 토큰 유형 (Always "bearer" for Authorization header)
    """

    access_token: str  # JWT 액세스 토큰 — 만료: 30분 기본 (Access token, default TTL: 30min)
    refresh_token: str  # JWT 리프레시 토큰 — 만료: 7일 기본 (Refresh token, default TTL: 7 days)
    token_type: str = "bearer"  # 토큰 유형 — 항상 "bearer" (Token type for Authorization header)


class RefreshRequest(BaseModel):
    """토큰 갱신/로그아웃 요청 스키마."""

    refresh_token: str  # 기존 리프레시 토큰 (Current refresh token)


class UserMeResponse(BaseModel):
    """현재 사용자 정보 응답 스키마 (GET /me).

    Current user info returned by the /me endpoint.
    """

    id: str
    name: str
    email: str
    role: str  # ADMIN / STAFF
    is_super_admin: bool
    is_active: bool
    store_id: str
    store_name: str
    phone: str | None = None
    image_url: str | None = None
    department: str | None = None


class RegisterResponse(BaseModel):
    """회원가입 응답 스키마."""

    message: str
    user: UserMeResponse


class CsrfTokenResponse(BaseModel):
    """CSRF 토큰 응답 — X-CSRF-Token 헤더로 전송할 값."""

    csrf_token: str
    expires_in: int  # 초 단위 유효 기간 (Seconds until expiry)
