import logging
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from transfer.events import TransferEvent
from transfer.presigned_url import PresignedUrlTransferListener
from transfer.publisher import ObjectPublisher

NOW = datetime(2026, 10, 17, 12, 0, 0, tzinfo=timezone.utc)


class FakeContext:
    def __init__(self, fail_upload: Exception = None, fail_sign: Exception = None):
        self.bucket_name = "releases"
        self.key_prefix = "repo/"
        self.uploads = []
        self.signed = []
        self.fail_upload = fail_upload
        self.fail_sign = fail_sign

    def put_file(self, local_path: Path, key: str) -> None:
        if self.fail_upload:
            raise self.fail_upload
        self.uploads.append((local_path, key))

    def sign_url(self, bucket: str, key: str, expiration: datetime) -> str:
        self.signed.append((bucket, key, expiration))
        if self.fail_sign:
            raise self.fail_sign
        return f"https://signed.example.test/{bucket}/{key}"


class LifecycleListener:
    def __init__(self):
        self.seen = []

    def debug(self, message: str) -> None:
        self.seen.append(("debug", message))

    def transfer_initiated(self, event: TransferEvent) -> None:
        self.seen.append(("initiated", event.resource.name))

    def transfer_started(self, event: TransferEvent) -> None:
        self.seen.append(("started", event.resource.name))

    def transfer_completed(self, event: TransferEvent) -> None:
        self.seen.append(("completed", event.resource.name))

    def transfer_error(self, event: TransferEvent) -> None:
        self.seen.append(("error", event.resource.name, event.exception))


@pytest.fixture
def artifact(tmp_path: Path) -> Path:
    p = tmp_path / "artifact-1.0.jar"
    p.write_bytes(b"PK\x03\x04jar-bytes")
    return p


def test_put_uploads_under_prefix_and_reports_lifecycle(artifact):
    ctx = FakeContext()
    listener = LifecycleListener()
    publisher = ObjectPublisher(ctx)
    publisher.add_transfer_listener(listener)

    key = publisher.put(artifact, "artifact-1.0.jar")

    assert key == "repo/artifact-1.0.jar"
    assert ctx.uploads == [(artifact, "repo/artifact-1.0.jar")]
    assert [s[0] for s in listener.seen] == ["initiated", "started", "debug", "completed"]


def test_completed_event_carries_resource_metadata(artifact):
    events = []

    class Capture:
        def debug(self, message):
            pass

        def transfer_completed(self, event):
            events.append(event)

    publisher = ObjectPublisher(FakeContext())
    publisher.add_transfer_listener(Capture())
    publisher.put(str(artifact), "/artifact-1.0.jar")

    (event,) = events
    assert event.resource.name == "artifact-1.0.jar"
    assert event.resource.content_length == artifact.stat().st_size
    assert event.local_file == artifact


def test_missing_file_fails_before_any_event(tmp_path):
    listener = LifecycleListener()
    publisher = ObjectPublisher(FakeContext())
    publisher.add_transfer_listener(listener)

    with pytest.raises(FileNotFoundError):
        publisher.put(tmp_path / "nope.jar", "nope.jar")

    assert listener.seen == []


def test_upload_failure_fires_error_and_reraises(artifact):
    boom = OSError("connection reset")
    listener = LifecycleListener()
    publisher = ObjectPublisher(FakeContext(fail_upload=boom))
    publisher.add_transfer_listener(listener)

    with pytest.raises(OSError):
        publisher.put(artifact, "artifact-1.0.jar")

    assert listener.seen[-1] == ("error", "artifact-1.0.jar", boom)
    assert "completed" not in [s[0] for s in listener.seen]


def test_presigned_listener_end_to_end(artifact, caplog):
    caplog.set_level(logging.INFO, logger="transfer.presigned_url")
    ctx = FakeContext()
    publisher = ObjectPublisher(ctx)
    publisher.add_transfer_listener(PresignedUrlTransferListener(ctx, 24, clock=lambda: NOW))

    publisher.put(artifact, "artifact-1.0.jar")

    assert ctx.signed == [("releases", "repo/artifact-1.0.jar", NOW + timedelta(hours=24))]
    messages = [r.getMessage() for r in caplog.records if r.name == "transfer.presigned_url"]
    assert messages == [
        "Presigned URL (expires Sun Oct 18 12:00:00 UTC 2026): "
        "https://signed.example.test/releases/repo/artifact-1.0.jar"
    ]


def test_signing_failure_surfaces_from_put(artifact):
    ctx = FakeContext(fail_sign=RuntimeError("SignatureDoesNotMatch"))
    publisher = ObjectPublisher(ctx)
    publisher.add_transfer_listener(PresignedUrlTransferListener(ctx, 1))

    with pytest.raises(RuntimeError, match="SignatureDoesNotMatch"):
        publisher.put(artifact, "artifact-1.0.jar")

    assert ctx.uploads == [(artifact, "repo/artifact-1.0.jar")]


def test_removed_listener_is_not_called(artifact):
    listener = LifecycleListener()
    publisher = ObjectPublisher(FakeContext())
    publisher.add_transfer_listener(listener)
    publisher.remove_transfer_listener(listener)

    publisher.put(artifact, "artifact-1.0.jar")

    assert listener.seen == []
