import pytest

from core.settings import PresignSettings, Settings, StorageSettings
from providers.factory import build_presigned_url_listener, build_storage_context
from providers.impl.storage_minio import MinioStorageContext
from providers.impl.storage_s3 import S3StorageContext


def _settings(provider: str = "s3", hours: int = 24, **storage) -> Settings:
    storage.setdefault("bucket", "releases")
    storage.setdefault("prefix", "repo")
    return Settings(
        presign=PresignSettings(hours_to_expire=hours),
        storage=StorageSettings(provider=provider, **storage),
    )


def test_builds_s3_context():
    ctx = build_storage_context(_settings("s3", region="us-east-1"))

    assert isinstance(ctx, S3StorageContext)
    assert ctx.bucket_name == "releases"
    assert ctx.key_prefix == "repo/"


def test_builds_minio_context():
    ctx = build_storage_context(
        _settings(
            "minio",
            region="us-east-1",
            minio_endpoint="https://minio.example.test",
            minio_access_key="a",
            minio_secret_key="b",
        )
    )

    assert isinstance(ctx, MinioStorageContext)
    assert ctx.secure is True
    assert ctx.key_prefix == "repo/"


def test_minio_without_keys_rejected():
    with pytest.raises(RuntimeError, match="MINIO_ACCESS_KEY"):
        build_storage_context(_settings("minio"))


def test_unknown_provider_rejected():
    with pytest.raises(RuntimeError, match="Unknown storage provider"):
        build_storage_context(_settings("azureblob"))


class FakeStorage:
    bucket_name = "releases"
    key_prefix = ""

    def sign_url(self, bucket, key, expiration):
        return "https://example.test"


def test_listener_takes_window_from_settings():
    listener = build_presigned_url_listener(FakeStorage(), _settings(hours=12))
    assert listener.hours_to_expire == 12


def test_listener_clamps_negative_window_from_settings():
    listener = build_presigned_url_listener(FakeStorage(), _settings(hours=-1))
    assert listener.hours_to_expire == 0
