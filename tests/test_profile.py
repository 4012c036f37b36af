"""프로필 API 테스트 — 조회/수정, 비밀번호 변경, 이미지 업로드.

Profile API tests. Uploads are written to a per-test temporary directory.
"""

from pathlib import Path

import pytest
from httpx import AsyncClient
from sqlalchemy.exc import IntegrityError

from app.services import storage_service as storage_module
from app.services.profile_service import MAX_IMAGE_BYTES
from app.services.storage_service import storage_service
from tests.conftest import auth_header

PROFILE = "/api/v1/app/profile"
AUTH = "/api/v1/auth"
PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


@pytest.fixture
def uploads(tmp_path: Path, monkeypatch) -> Path:
    monkeypatch.setattr(storage_module, "UPLOADS_DIR", tmp_path)
    return tmp_path


class TestProfileUpdate:
    """프로필 조회/수정 테스트."""

    async def test_get_profile(self, client: AsyncClient, staff_token):
        res = await client.get(PROFILE, headers=auth_header(staff_token))
        assert res.status_code == 200
        assert res.json()["email"] == "staff@shiftboard.jp"
        assert res.json()["department"] == "Kitchen"

    async def test_update_fields(self, client: AsyncClient, staff_token):
        res = await client.put(PROFILE, headers=auth_header(staff_token), json={
            "name": "Renamed Staff",
            "email": "Renamed@ShiftBoard.jp",
            "phone": "090-1234-5678",
        })
        assert res.status_code == 200
        body = res.json()
        assert body["name"] == "Renamed Staff"
        assert body["email"] == "renamed@shiftboard.jp"
        assert body["phone"] == "090-1234-5678"

    async def test_email_taken(self, client: AsyncClient, staff_token, admin_user):
        res = await client.put(PROFILE, headers=auth_header(staff_token), json={
            "email": "admin@shiftboard.jp",
        })
        assert res.status_code == 409

    async def test_unauthenticated(self, client: AsyncClient):
        res = await client.get(PROFILE)
        assert res.status_code == 401


class TestPasswordChange:
    """비밀번호 변경 테스트."""

    async def test_requires_current_password(self, client: AsyncClient, staff_token):
        res = await client.put(PROFILE, headers=auth_header(staff_token), json={
            "new_password": "brand-new-pass",
        })
        assert res.status_code == 400

    async def test_wrong_current_password(self, client: AsyncClient, staff_token):
        res = await client.put(PROFILE, headers=auth_header(staff_token), json={
            "current_password": "not-my-password",
            "new_password": "brand-new-pass",
        })
        assert res.status_code == 400

    async def test_new_password_too_short(self, client: AsyncClient, staff_token):
        res = await client.put(PROFILE, headers=auth_header(staff_token), json={
            "current_password": "staff1234",
            "new_password": "short",
        })
        assert res.status_code == 400

    async def test_new_password_takes_effect(self, client: AsyncClient, staff_token):
        res = await client.put(PROFILE, headers=auth_header(staff_token), json={
            "current_password": "staff1234",
            "new_password": "brand-new-pass",
        })
        assert res.status_code == 200

        old = await client.post(f"{AUTH}/login", json={"email": "staff@shiftboard.jp", "password": "staff1234"})
        assert old.status_code == 401
        new = await client.post(f"{AUTH}/login", json={"email": "staff@shiftboard.jp", "password": "brand-new-pass"})
        assert new.status_code == 200


class TestProfileImage:
    """프로필 이미지 업로드 테스트."""

    async def test_upload_sets_image_url(self, client: AsyncClient, staff_token, uploads):
        res = await client.post(
            f"{PROFILE}/image",
            headers=auth_header(staff_token),
            files={"file": ("avatar.png", PNG, "image/png")},
        )
        assert res.status_code == 200
        url = res.json()["image_url"]
        assert url.startswith("/uploads/profiles/") and url.endswith(".png")
        assert (uploads / url[len("/uploads/"):]).read_bytes() == PNG

    async def test_rejects_other_types(self, client: AsyncClient, staff_token, uploads):
        res = await client.post(
            f"{PROFILE}/image",
            headers=auth_header(staff_token),
            files={"file": ("notes.pdf", b"%PDF-1.7", "application/pdf")},
        )
        assert res.status_code == 400
        assert list(uploads.iterdir()) == []

    async def test_rejects_large_file(self, client: AsyncClient, staff_token, uploads):
        res = await client.post(
            f"{PROFILE}/image",
            headers=auth_header(staff_token),
            files={"file": ("big.jpg", b"\xff" * (MAX_IMAGE_BYTES + 1), "image/jpeg")},
        )
        assert res.status_code == 400
        assert "5MB" in res.json()["detail"]

    async def test_replacing_removes_previous_file(self, client: AsyncClient, db, staff_user, staff_token, uploads):
        previous = storage_service.save(PNG, "png", folder="profiles")
        staff_user.image_url = previous
        await db.flush()

        res = await client.post(
            f"{PROFILE}/image",
            headers=auth_header(staff_token),
            files={"file": ("avatar.webp", b"RIFF0000WEBP", "image/webp")},
        )
        assert res.status_code == 200
        assert res.json()["image_url"] != previous
        assert not (uploads / previous[len("/uploads/"):]).exists()

    async def test_failed_commit_keeps_previous_file(
        self, client: AsyncClient, db, staff_user, staff_token, uploads, monkeypatch
    ):
        """커밋이 실패하면 기존 이미지 파일은 그대로 남습니다."""
        previous = storage_service.save(PNG, "png", folder="profiles")
        staff_user.image_url = previous
        await db.flush()

        async def _failing_commit() -> None:
            raise IntegrityError("UPDATE users", {}, Exception("UNIQUE constraint failed"))

        monkeypatch.setattr(db, "commit", _failing_commit)
        res = await client.post(
            f"{PROFILE}/image",
            headers=auth_header(staff_token),
            files={"file": ("avatar.png", PNG, "image/png")},
        )
        assert res.status_code == 409
        assert (uploads / previous[len("/uploads/"):]).exists()
