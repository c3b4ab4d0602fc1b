from __future__ import annotations

from typing import Optional

from core.settings import Settings, get_settings
from providers.impl.storage_minio import MinioStorageContext
from providers.impl.storage_s3 import S3StorageContext
from providers.storage import PublishingContext, StorageContext
from transfer.presigned_url import PresignedUrlTransferListener


def build_storage_context(settings: Optional[Settings] = None) -> PublishingContext:
    s = settings or get_settings()
    st = s.storage

    if st.provider == "s3":
        return S3StorageContext(bucket=st.bucket, prefix=st.prefix, region=st.region)

    if st.provider == "minio":
        if not st.bucket:
            raise RuntimeError("MINIO_BUCKET not set")
        if not st.minio_access_key or not st.minio_secret_key:
            raise RuntimeError("MINIO_ACCESS_KEY / MINIO_SECRET_KEY not set")
        return MinioStorageContext(
            endpoint=st.minio_endpoint,
            bucket_name=st.bucket,
            access_key=st.minio_access_key,
            secret_key=st.minio_secret_key,
            key_prefix=st.prefix,
            region=st.region,
            secure=st.minio_endpoint.lower().startswith("https://"),
        )

    raise RuntimeError(f"Unknown storage provider: {st.provider!r}")


def build_presigned_url_listener(
    context: StorageContext,
    settings: Optional[Settings] = None,
) -> PresignedUrlTransferListener:
    s = settings or get_settings()
    return PresignedUrlTransferListener(context, s.presign.hours_to_expire)
