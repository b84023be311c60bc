"""S3-compatible object storage for message attachments and project files.

Content ids are object keys: opaque, stable, and never reused. Access URLs are
presigned and time bounded, so callers refresh them on every read.
"""

import asyncio
import re
from dataclasses import dataclass
from typing import Any, Protocol, cast
from uuid import uuid4

import boto3
from botocore.client import Config
from botocore.exceptions import ClientError

from src.projecthub.core.config import Settings
from src.projecthub.core.exceptions import NotFoundError
from src.projecthub.core.logging import get_logger

logger = get_logger(__name__)

_UNSAFE_NAME_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


class S3ClientProtocol(Protocol):
    """Subset of S3 client methods used here."""

    def generate_presigned_url(self, *args: Any, **kwargs: Any) -> str: ...

    def head_object(self, *args: Any, **kwargs: Any) -> dict[str, Any]: ...


@dataclass(frozen=True)
class UploadTarget:
    file_id: str
    upload_url: str
    expires_in: int


@dataclass(frozen=True)
class StoredObject:
    file_id: str
    size: int
    content_type: str | None


def build_s3_client(settings: Settings) -> S3ClientProtocol:
    return cast(
        S3ClientProtocol,
        boto3.client(
            "s3",
            endpoint_url=settings.storage_endpoint_url,
            region_name=settings.storage_region,
            aws_access_key_id=settings.storage_access_key_id,
            aws_secret_access_key=settings.storage_secret_access_key,
            config=Config(signature_version="s3v4"),
        ),
    )


class ObjectStorage:
    """Presigned upload/download against one bucket."""

    def __init__(self, client: S3ClientProtocol, bucket: str, url_expiry: int = 3600):
        self.client = client
        self.bucket = bucket
        self.url_expiry = url_expiry

    @classmethod
    def from_settings(cls, settings: Settings) -> "ObjectStorage":
        return cls(
            build_s3_client(settings),
            settings.storage_bucket,
            url_expiry=settings.storage_url_expiry_seconds,
        )

    @staticmethod
    def new_file_id(file_name: str) -> str:
        safe_name = _UNSAFE_NAME_CHARS.sub("-", file_name).strip("-") or "file"
        return f"uploads/{uuid4().hex}/{safe_name[:120]}"

    def create_upload_target(self, file_name: str, content_type: str) -> UploadTarget:
        """Allocate a content id and a presigned PUT URL for it."""
        file_id = self.new_file_id(file_name)
        upload_url = self.client.generate_presigned_url(
            "put_object",
            Params={"Bucket": self.bucket, "Key": file_id, "ContentType": content_type},
            ExpiresIn=self.url_expiry,
        )
        logger.info("Upload target allocated", file_id=file_id, content_type=content_type)
        return UploadTarget(file_id=file_id, upload_url=upload_url, expires_in=self.url_expiry)

    async def confirm_upload(self, file_id: str) -> StoredObject:
        """Check that an upload completed and return its stored metadata.

        Raises:
            NotFoundError: The object does not exist (upload never finished).
        """
        try:
            head = await asyncio.to_thread(
                self.client.head_object, Bucket=self.bucket, Key=file_id
            )
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code")
            if code in ("404", "NoSuchKey", "NotFound"):
                raise NotFoundError("Upload", file_id) from e
            raise
        return StoredObject(
            file_id=file_id,
            size=int(head.get("ContentLength", 0)),
            content_type=head.get("ContentType"),
        )

    def get_url(self, file_id: str) -> str:
        """Time-bounded download URL for a content id."""
        return self.client.generate_presigned_url(
            "get_object",
            Params={"Bucket": self.bucket, "Key": file_id},
            ExpiresIn=self.url_expiry,
        )
