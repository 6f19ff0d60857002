import logging
import uuid
from dataclasses import dataclass
from typing import BinaryIO, Protocol

import boto3

from app.config import settings

logger = logging.getLogger(__name__)


class UploadedFile(Protocol):
    filename: str | None
    content_type: str | None
    file: BinaryIO


@dataclass(frozen=True)
class StoredFile:
    image_key: str | None = None
    image_url: str | None = None


class FileStorageService:
    """Edition banner storage on an S3-compatible bucket."""

    def __init__(self, client=None) -> None:
        self._client = client

    @property
    def client(self):
        if self._client is None:
            self._client = boto3.client(
                "s3",
                region_name=settings.S3_REGION,
                endpoint_url=settings.S3_ENDPOINT_URL or None,
            )
        return self._client

    @staticmethod
    def build_key(filename: str | None) -> str:
        safe_name = (filename or "image").replace("/", "_").replace(" ", "_")
        prefix = settings.S3_KEY_PREFIX.strip("/")
        return f"{prefix}/{uuid.uuid4().hex}-{safe_name}"

    @staticmethod
    def public_url(key: str) -> str:
        public_base = settings.S3_PUBLIC_BASE_URL.rstrip("/")
        if public_base:
            return f"{public_base}/{key}"
        return f"https://{settings.S3_BUCKET}.s3.{settings.S3_REGION}.amazonaws.com/{key}"

    def upload_file(self, file: UploadedFile | None) -> StoredFile:
        """Upload the file and return its key and URL; no file means no image."""
        if file is None or not file.filename:
            return StoredFile()
        if not settings.S3_BUCKET:
            raise ValueError("S3_BUCKET is not set")

        key = self.build_key(file.filename)
        extra_args = {"ContentType": file.content_type} if file.content_type else {}
        self.client.upload_fileobj(file.file, settings.S3_BUCKET, key, ExtraArgs=extra_args)
        logger.info("Uploaded file to storage key=%s", key)
        return StoredFile(image_key=key, image_url=self.public_url(key))

    def delete_file(self, key: str | None) -> None:
        if not key:
            return
        if not settings.S3_BUCKET:
            raise ValueError("S3_BUCKET is not set")
        self.client.delete_object(Bucket=settings.S3_BUCKET, Key=key)
        logger.info("Deleted file from storage key=%s", key)
