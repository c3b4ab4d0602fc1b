from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional, Union

from providers.storage import PublishingContext
from transfer.dispatch import TransferEventSupport
from transfer.events import RequestType, Resource, TransferEvent, TransferEventType
from transfer.listener import TransferListener

log = logging.getLogger(__name__)


class ObjectPublisher:
    """
    Uploads local files under the context's key prefix and reports the
    transfer lifecycle to registered listeners.
    """

    def __init__(self, context: PublishingContext, events: Optional[TransferEventSupport] = None):
        self.context = context
        self.events = events or TransferEventSupport()

    def add_transfer_listener(self, listener: TransferListener) -> None:
        self.events.add_listener(listener)

    def remove_transfer_listener(self, listener: TransferListener) -> None:
        self.events.remove_listener(listener)

    def put(self, local_path: Union[str, Path], resource_name: str) -> str:
        """
        Upload local_path as <key_prefix><resource_name>. Returns the full key.

        Upload errors fire a transfer ERROR event and are re-raised.
        """
        path = Path(local_path)
        if not path.is_file():
            raise FileNotFoundError(f"Local file not found: {path}")

        st = os.stat(path)
        resource = Resource(
            name=resource_name.lstrip("/"),
            content_length=st.st_size,
            last_modified=int(st.st_mtime * 1000),
        )
        key = self.context.key_prefix + resource.name

        self.events.fire_transfer_initiated(self._event(resource, TransferEventType.INITIATED, path))
        self.events.fire_transfer_started(self._event(resource, TransferEventType.STARTED, path))
        self.events.fire_debug(f"Uploading {path} to {self.context.bucket_name}/{key}")

        try:
            self.context.put_file(path, key)
        except Exception as exc:
            log.warning("Upload failed bucket=%s key=%s: %s", self.context.bucket_name, key, exc)
            self.events.fire_transfer_error(
                self._event(resource, TransferEventType.ERROR, path, exception=exc)
            )
            raise

        self.events.fire_transfer_completed(self._event(resource, TransferEventType.COMPLETED, path))
        return key

    @staticmethod
    def _event(
        resource: Resource,
        event_type: TransferEventType,
        path: Path,
        exception: Optional[BaseException] = None,
    ) -> TransferEvent:
        return TransferEvent(
            resource=resource,
            event_type=event_type,
            request_type=RequestType.PUT,
            local_file=path,
            exception=exception,
        )
