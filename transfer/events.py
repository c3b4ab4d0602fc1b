from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional


class TransferEventType(str, Enum):
    INITIATED = "initiated"
    STARTED = "started"
    PROGRESS = "progress"
    COMPLETED = "completed"
    ERROR = "error"


class RequestType(str, Enum):
    GET = "get"
    PUT = "put"


@dataclass(frozen=True)
class Resource:
    """
    A transferred object, addressed by its name relative to the key prefix.

    content_length / last_modified use -1 / 0 when unknown.
    """
    name: str
    content_length: int = -1
    last_modified: int = 0


@dataclass(frozen=True)
class TransferEvent:
    resource: Resource
    event_type: TransferEventType
    request_type: RequestType = RequestType.PUT
    local_file: Optional[Path] = None
    exception: Optional[BaseException] = None
