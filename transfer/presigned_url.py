from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from providers.storage import StorageContext
from transfer.events import Resource, TransferEvent

log = logging.getLogger(__name__)

# Classic "date-time" layout, e.g. "Sun Oct 18 23:00:00 UTC 2026"
EXPIRATION_FORMAT = "%a %b %d %H:%M:%S %Z %Y"


class PreconditionViolation(ValueError):
    pass


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PresignedUrlTransferListener:
    """
    Generates presigned URLs for successful transfers.

    hours_to_expire <= 0 disables URL generation; each completed transfer
    then only gets a DEBUG note saying no URL was generated.

    Signing errors from the storage context are not caught here.
    """

    def __init__(
        self,
        context: StorageContext,
        hours_to_expire: int,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        if context is None:
            raise PreconditionViolation("storage context is required")

        # borrowed from the pipeline; never mutated here
        self._context = context
        self._hours_to_expire = max(int(hours_to_expire), 0)
        self._clock = clock or _utcnow

    @property
    def hours_to_expire(self) -> int:
        return self._hours_to_expire

    def debug(self, message: str) -> None:
        log.debug(message)

    def transfer_completed(self, event: TransferEvent) -> None:
        if self._hours_to_expire > 0:
            expiration = self._expiration()
            url = self._generate_presigned_url(event.resource, expiration)

            message = "Presigned URL (expires %s): %s" % (
                expiration.strftime(EXPIRATION_FORMAT),
                url,
            )
            if log.isEnabledFor(logging.INFO):
                log.info(message)
            else:
                self.debug(message)
        else:
            self.debug("No presigned URL generated for " + event.resource.name)

    def _expiration(self) -> datetime:
        return self._clock() + timedelta(hours=self._hours_to_expire)

    def _generate_presigned_url(self, resource: Resource, expiration: datetime) -> str:
        bucket = self._context.bucket_name
        key = self._context.key_prefix + resource.name
        return self._context.sign_url(bucket, key, expiration)
