from __future__ import annotations

from typing import List, Optional

from transfer.events import TransferEvent
from transfer.listener import TransferListener


class TransferEventSupport:
    """
    Fan-out of transfer lifecycle events to registered listeners.

    Calls are synchronous and in registration order. A listener that
    raises stops the fan-out and the error reaches the caller.
    """

    def __init__(self) -> None:
        self._listeners: List[TransferListener] = []

    def add_listener(self, listener: Optional[TransferListener]) -> None:
        if listener is None or listener in self._listeners:
            return
        self._listeners.append(listener)

    def remove_listener(self, listener: TransferListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def has_listener(self, listener: TransferListener) -> bool:
        return listener in self._listeners

    def listeners(self) -> List[TransferListener]:
        return list(self._listeners)

    def fire_debug(self, message: str) -> None:
        for listener in list(self._listeners):
            listener.debug(message)

    def fire_transfer_completed(self, event: TransferEvent) -> None:
        for listener in list(self._listeners):
            listener.transfer_completed(event)

    def fire_transfer_initiated(self, event: TransferEvent) -> None:
        self._fire_optional("transfer_initiated", event)

    def fire_transfer_started(self, event: TransferEvent) -> None:
        self._fire_optional("transfer_started", event)

    def fire_transfer_error(self, event: TransferEvent) -> None:
        self._fire_optional("transfer_error", event)

    def _fire_optional(self, hook: str, event: TransferEvent) -> None:
        for listener in list(self._listeners):
            fn = getattr(listener, hook, None)
            if fn is None:
                continue
            fn(event)
