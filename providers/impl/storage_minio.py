from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Optional

from minio import Minio

from providers.storage import PublishingContext, normalize_prefix

log = logging.getLogger(__name__)


def _strip_http(endpoint: str) -> str:
    # Minio client expects "host:port" (no scheme)
    endpoint = (endpoint or "").strip()
    endpoint = endpoint.replace("http://", "").replace("https://", "")
    endpoint = endpoint.rstrip("/")
    return endpoint


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class MinioStorageContext(PublishingContext):
    """
    MinIO/S3-compatible storage context.

    Env expected:
      - MINIO_ENDPOINT (e.g. http://minio:9000)
      - MINIO_BUCKET   (e.g. releases)
      - MINIO_ACCESS_KEY
      - MINIO_SECRET_KEY

    Optional:
      - MINIO_PREFIX
      - MINIO_REGION (set it to skip the region lookup round trip)

    Notes:
      - MinIO only signs URLs valid for 1 second .. 7 days; anything else
        raises ValueError from the SDK and is left to the caller.
    """

    endpoint: str
    bucket_name: str
    access_key: str
    secret_key: str
    key_prefix: str = ""
    region: Optional[str] = None
    secure: bool = False
    client: Any = None
    clock: Optional[Callable[[], datetime]] = None

    def __post_init__(self) -> None:
        self.key_prefix = normalize_prefix(self.key_prefix)
        if self.clock is None:
            self.clock = _utcnow

        if self.client is None:
            host = _strip_http(self.endpoint)
            if not host:
                raise RuntimeError("MINIO_ENDPOINT is empty or invalid")

            self.client = Minio(
                endpoint=host,
                access_key=self.access_key,
                secret_key=self.secret_key,
                secure=bool(self.secure),
                region=self.region or None,
            )

    @classmethod
    def from_env(cls) -> "MinioStorageContext":
        endpoint = os.getenv("MINIO_ENDPOINT", "http://minio:9000").strip()
        bucket = os.getenv("MINIO_BUCKET", "").strip()
        prefix = os.getenv("MINIO_PREFIX", "").strip()
        access_key = os.getenv("MINIO_ACCESS_KEY", "").strip()
        secret_key = os.getenv("MINIO_SECRET_KEY", "").strip()
        region = os.getenv("MINIO_REGION", "").strip() or None

        if not bucket:
            raise RuntimeError("MINIO_BUCKET not set")
        if not access_key or not secret_key:
            raise RuntimeError("MINIO_ACCESS_KEY / MINIO_SECRET_KEY not set")

        secure = endpoint.lower().startswith("https://")
        return cls(
            endpoint=endpoint,
            bucket_name=bucket,
            access_key=access_key,
            secret_key=secret_key,
            key_prefix=prefix,
            region=region,
            secure=secure,
        )

    def sign_url(self, bucket: str, key: str, expiration: datetime) -> str:
        expires = expiration - self.clock()
        log.debug("[MinIO] presign bucket=%s key=%s expires=%s", bucket, key, expires)
        return self.client.presigned_get_object(
            bucket_name=bucket,
            object_name=key,
            expires=expires,
        )

    def put_file(self, local_path: Path, key: str) -> None:
        log.debug("[MinIO] upload bucket=%s key=%s path=%s", self.bucket_name, key, local_path)
        self.client.fput_object(
            bucket_name=self.bucket_name,
            object_name=key,
            file_path=str(local_path),
        )
