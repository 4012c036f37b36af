"""비밀번호 해싱, 검증, 임시 비밀번호 생성 유틸리티 모듈.

Password hashing, verification and temporary password generation.
Uses bcrypt directly; plain text passwords are never stored.
"""

import secrets
import string

import bcrypt

# 최소 비밀번호 길이 — Minimum accepted password length
MIN_PASSWORD_LENGTH: int = 8

_TEMP_PASSWORD_ALPHABET: str = string.ascii_letters + string.digits


def hash_password(password: str) -> str:
    """평문 비밀번호를 bcrypt 해시로 변환합니다.

    Hash a plain text password using bcrypt with a random salt.

    Args:
        password: 평문 비밀번호 (Plain text password to hash)

    Returns:
        str: bcrypt 해시 문자열 (Bcrypt hash string, ~60 chars)
    """
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """평문 비밀번호와 bcrypt 해시를 비교 검증합니다.

    Verify a plain text password against a bcrypt hash.

    Args:
        plain_password: 검증할 평문 비밀번호 (Plain text password to verify)
        hashed_password: 저장된 bcrypt 해시 (Stored bcrypt hash)

    Returns:
        bool: 일치하면 True (True if password matches hash)
    """
    return bcrypt.checkpw(
        plain_password.encode("utf-8"), hashed_password.encode("utf-8")
    )


def generate_temporary_password(length: int = 10) -> str:
    """초대용 임시 비밀번호를 생성합니다.

    Generate a random alphanumeric password for invited staff.
    """
    return "".join(secrets.choice(_TEMP_PASSWORD_ALPHABET) for _ in range(length))
