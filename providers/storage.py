from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Protocol, runtime_checkable


@runtime_checkable
class StorageContext(Protocol):
    """
    Read-only view of an object store connection.

    Owned by the publishing pipeline. Listeners only borrow it to address
    objects (bucket + key prefix) and to ask for signed URLs.
    """

    bucket_name: str
    key_prefix: str

    def sign_url(self, bucket: str, key: str, expiration: datetime) -> str: ...


@runtime_checkable
class PublishingContext(StorageContext, Protocol):
    """
    StorageContext that can also upload files (used by the publisher).
    """

    def put_file(self, local_path: Path, key: str) -> None: ...


def normalize_prefix(prefix: str) -> str:
    prefix = (prefix or "").strip().lstrip("/")
    if prefix and not prefix.endswith("/"):
        prefix = prefix + "/"
    return prefix
