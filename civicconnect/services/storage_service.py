"""스토리지 서비스 — S3 또는 로컬 파일 업로드.

Storage Service — Image uploads to S3 or the local uploads directory.
AWS 키가 비어있으면 자동으로 로컬 모드로 전환됩니다.
The portal stores only the returned URL in an issue record, never the bytes.
"""

import asyncio
import logging
import re
import time
from pathlib import Path, PurePosixPath

from botocore.exceptions import BotoCoreError, ClientError

from civicconnect.config import settings
from civicconnect.utils.exceptions import BadRequestError, UpstreamError

logger = logging.getLogger("civicconnect.storage")

# 로컬 업로드 디렉토리 — .env의 LOCAL_UPLOADS_DIR 또는 <project>/uploads/
_PROJECT_ROOT: Path = Path(__file__).resolve().parent.parent.parent
_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def uploads_dir() -> Path:
    return Path(settings.LOCAL_UPLOADS_DIR) if settings.LOCAL_UPLOADS_DIR else _PROJECT_ROOT / "uploads"


def upload_path(folder: str, filename: str) -> str:
    """업로드 경로 생성 — "<folder>/<epoch-ms>_<safe filename>"."""
    safe_name = _UNSAFE_CHARS.sub("_", PurePosixPath(filename).name).strip("._") or "upload"
    return f"{folder}/{int(time.time() * 1000)}_{safe_name}"


class StorageService:
    """파일 업로드 서비스 — S3 또는 로컬 모드 자동 선택."""

    def __init__(self) -> None:
        self._client = None

    @property
    def is_local(self) -> bool:
        return not settings.AWS_ACCESS_KEY_ID or not settings.AWS_S3_BUCKET

    @property
    def client(self):
        if self.is_local:
            return None
        if self._client is None:
            import boto3
            from botocore.config import Config as BotoConfig

            self._client = boto3.client(
                "s3",
                region_name=settings.AWS_S3_REGION,
                aws_access_key_id=settings.AWS_ACCESS_KEY_ID,
                aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
                config=BotoConfig(signature_version="s3v4"),
            )
        return self._client

    def public_url(self, key: str) -> str:
        if self.is_local:
            return f"{settings.PUBLIC_BASE_URL}/uploads/{key}"
        return f"https://{settings.AWS_S3_BUCKET}.s3.{settings.AWS_S3_REGION}.amazonaws.com/{key}"

    def save_local(self, key: str, data: bytes) -> str:
        """로컬 파일 저장. 경로를 반환합니다."""
        root = uploads_dir().resolve()
        path = (root / key).resolve()
        if not path.is_relative_to(root):
            raise BadRequestError(f"Invalid upload path: {key}")
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        return str(path)

    def _put_object(self, key: str, data: bytes, content_type: str) -> None:
        self.client.put_object(
            Bucket=settings.AWS_S3_BUCKET,
            Key=key,
            Body=data,
            ContentType=content_type,
        )

    async def upload_file(
        self,
        data: bytes,
        path: str,
        content_type: str = "application/octet-stream",
    ) -> str:
        """파일을 업로드하고 공개 URL을 반환합니다.

        Upload bytes to the given storage path and return the public URL.

        Raises:
            UpstreamError: 업로드 실패 (S3 or local write failed)
        """
        try:
            if self.is_local:
                await asyncio.to_thread(self.save_local, path, data)
            else:
                await asyncio.to_thread(self._put_object, path, data, content_type)
        except (BotoCoreError, ClientError, OSError) as exc:
            logger.error("Upload of %s failed: %s", path, exc)
            raise UpstreamError("이미지 업로드에 실패했습니다 (Image upload failed)")
        return self.public_url(path)


storage_service: StorageService = StorageService()
