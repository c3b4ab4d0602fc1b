from __future__ import annotations

import logging
import math
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Optional

import boto3
from botocore.config import Config

from providers.storage import PublishingContext, normalize_prefix

log = logging.getLogger(__name__)


def _env(name: str, default: str = "") -> str:
    return (os.getenv(name, default) or "").strip()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class S3StorageContext(PublishingContext):
    """
    Native AWS S3 storage context.

    Uses boto3 credential resolution (env, profile, IRSA).
    No access keys are read by this class.

    Required env:
      - S3_BUCKET

    Optional env:
      - S3_PREFIX (e.g. "repo/" or "")
      - AWS_REGION or AWS_DEFAULT_REGION
    """

    def __init__(
        self,
        bucket: str,
        prefix: str = "",
        region: Optional[str] = None,
        client: Any = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        bucket = (bucket or "").strip()
        if not bucket:
            raise RuntimeError("S3_BUCKET is required for S3 storage context")

        self.bucket_name = bucket
        self.key_prefix = normalize_prefix(prefix)
        self._clock = clock or _utcnow

        if client is None:
            region = (region or _env("AWS_REGION") or _env("AWS_DEFAULT_REGION") or "").strip() or None
            cfg = Config(
                retries={"max_attempts": 8, "mode": "standard"},
                region_name=region,
                signature_version="s3v4",
            )
            client = boto3.client("s3", config=cfg)
        self.s3 = client

    @classmethod
    def from_env(cls) -> "S3StorageContext":
        bucket = _env("S3_BUCKET")
        prefix = _env("S3_PREFIX", "")
        region = _env("AWS_REGION") or _env("AWS_DEFAULT_REGION") or ""
        return cls(bucket=bucket, prefix=prefix, region=region or None)

    def _expires_in(self, expiration: datetime) -> int:
        # boto3 signs relative to "now"; round up so the URL never dies early
        seconds = (expiration - self._clock()).total_seconds()
        return max(1, int(math.ceil(seconds)))

    def sign_url(self, bucket: str, key: str, expiration: datetime) -> str:
        expires_in = self._expires_in(expiration)
        log.debug("[S3] presign bucket=%s key=%s expires_in=%s", bucket, key, expires_in)
        return self.s3.generate_presigned_url(
            ClientMethod="get_object",
            Params={"Bucket": bucket, "Key": key},
            ExpiresIn=expires_in,
        )

    def put_file(self, local_path: Path, key: str) -> None:
        log.debug("[S3] upload bucket=%s key=%s path=%s", self.bucket_name, key, local_path)
        self.s3.upload_file(str(local_path), self.bucket_name, key)
