"""스토리지 서비스 — 로컬 파일 저장.

Storage Service — Stores uploaded files (profile images) under the local
uploads directory, which the application serves at /uploads.
"""

import uuid
from datetime import datetime, timezone
from pathlib import Path

from app.config import settings

# 로컬 업로드 디렉토리 — .env의 LOCAL_UPLOADS_DIR 또는 프로젝트 루트의 uploads/
_PROJECT_ROOT: Path = Path(__file__).resolve().parent.parent.parent
UPLOADS_DIR: Path = Path(settings.LOCAL_UPLOADS_DIR) if settings.LOCAL_UPLOADS_DIR else _PROJECT_ROOT / "uploads"
URL_PREFIX: str = "/uploads/"


class StorageService:
    """파일 업로드 서비스 — 로컬 디스크 저장."""

    def _generate_key(self, extension: str, folder: str) -> str:
        date_prefix = datetime.now(timezone.utc).strftime("%Y/%m/%d")
        return f"{folder}/{date_prefix}/{uuid.uuid4().hex}.{extension}"

    def save(self, data: bytes, extension: str, folder: str) -> str:
        """파일을 저장하고 공개 URL 경로를 반환합니다."""
        key = self._generate_key(extension, folder)
        path = UPLOADS_DIR / key
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        return f"{URL_PREFIX}{key}"

    def delete(self, file_url: str) -> None:
        """save()로 저장된 파일을 삭제합니다. 외부 URL은 무시합니다."""
        if not file_url.startswith(URL_PREFIX):
            return
        path = (UPLOADS_DIR / file_url[len(URL_PREFIX):]).resolve()
        # uploads 디렉토리 밖의 경로는 삭제하지 않음
        if UPLOADS_DIR.resolve() not in path.parents:
            return
        path.unlink(missing_ok=True)


storage_service: StorageService = StorageService()
