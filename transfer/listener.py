from __future__ import annotations

from typing import Protocol, runtime_checkable

from transfer.events import TransferEvent


@runtime_checkable
class TransferListener(Protocol):
    """
    The only hooks a transfer listener must implement.

    Dispatchers may also call transfer_initiated / transfer_started /
    transfer_error when a listener happens to define them.
    """

    def debug(self, message: str) -> None: ...

    def transfer_completed(self, event: TransferEvent) -> None: ...
