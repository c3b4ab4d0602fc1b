from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else str(v)


def _env_int(name: str, default: int) -> int:
    raw = _env(name, "")
    if not raw.strip():
        return default
    try:
        return int(raw)
    except Exception:
        return default


# ---------------------------------------------------------------------
# Settings models
# ---------------------------------------------------------------------

@dataclass(frozen=True)
class PresignSettings:
    """
    hours_to_expire:
      - 0 -> no presigned URLs are generated
      - N -> URLs valid for N hours after each completed upload

    Negative values are passed through untouched; the listener clamps them.
    """
    hours_to_expire: int = 0


@dataclass(frozen=True)
class StorageSettings:
    """
    Storage context configuration.

    provider:
      - "s3"     -> S3StorageContext (boto3)
      - "minio"  -> MinioStorageContext
    """
    provider: str

    # Shared addressing
    bucket: str = ""
    prefix: str = ""
    region: Optional[str] = None

    # MinIO (used when provider == "minio")
    minio_endpoint: str = "http://minio:9000"
    minio_access_key: str = ""
    minio_secret_key: str = ""


@dataclass(frozen=True)
class Settings:
    presign: PresignSettings
    storage: StorageSettings


# ---------------------------------------------------------------------
# Loaders
# ---------------------------------------------------------------------

def _load_presign_settings() -> PresignSettings:
    hours = _env_int("PRESIGN_HOURS_TO_EXPIRE", 0)
    return PresignSettings(hours_to_expire=hours)


def _normalize_storage_provider(raw: str) -> str:
    v = (raw or "").strip().lower()
    if v in ("minio", "object_store", "objectstore"):
        return "minio"
    if v in ("s3", "aws", "aws_s3"):
        return "s3"
    return v or "s3"


def _load_storage_settings() -> StorageSettings:
    """
    Storage precedence (DO NOT break this):
      1) STORAGE_MODE (deployment/runtime truth)  <-- must win
      2) STORAGE_PROVIDER (legacy override)
      3) default s3
    """
    raw_mode = (_env("STORAGE_MODE", "") or "").strip()
    raw_provider = (_env("STORAGE_PROVIDER", "") or "").strip()
    provider = _normalize_storage_provider(raw_mode or raw_provider or "s3")

    if provider == "minio":
        bucket = (_env("MINIO_BUCKET", "") or _env("S3_BUCKET", "")).strip()
        prefix = (_env("MINIO_PREFIX", "") or _env("S3_PREFIX", "")).strip()
        region = (_env("MINIO_REGION", "") or "").strip() or None
    else:
        bucket = (_env("S3_BUCKET", "") or "").strip()
        prefix = (_env("S3_PREFIX", "") or "").strip()
        region = (_env("AWS_REGION", "") or _env("AWS_DEFAULT_REGION", "") or "").strip() or None

    minio_endpoint = (_env("MINIO_ENDPOINT", "") or "http://minio:9000").strip().rstrip("/")
    minio_access_key = (_env("MINIO_ACCESS_KEY", "") or "").strip()
    minio_secret_key = (_env("MINIO_SECRET_KEY", "") or "").strip()

    return StorageSettings(
        provider=provider,
        bucket=bucket,
        prefix=prefix,
        region=region,
        minio_endpoint=minio_endpoint,
        minio_access_key=minio_access_key,
        minio_secret_key=minio_secret_key,
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings(
        presign=_load_presign_settings(),
        storage=_load_storage_settings(),
    )
