import logging
from collections.abc import Callable
from datetime import datetime, timezone
from pathlib import Path

import httpx

from pf9_upload.core.config import Settings, get_settings
from pf9_upload.core.exceptions import MissingTokenError
from pf9_upload.core.logging import SUCCESS
from pf9_upload.schemas import UploadResult
from pf9_upload.services.api import build_client
from pf9_upload.services.files import inspect_file
from pf9_upload.services.identity import IdentityService
from pf9_upload.services.presign import PresignService, build_object_key
from pf9_upload.services.transfer import TransferService

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UploadService:
    """Runs one upload: file precheck, identify, presign, transfer.

    Every step raises an :class:`~pf9_upload.core.exceptions.UploadError`
    on failure and nothing after it runs.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        client: httpx.Client | None = None,
        clock: Clock = utcnow,
    ) -> None:
        self.settings = settings or get_settings()
        self._owns_client = client is None
        self.client = client or build_client(self.settings)
        self.clock = clock
        self.identity = IdentityService(self.settings, self.client)
        self.presign = PresignService(self.settings, self.client)
        self.transfer = TransferService(self.settings, self.client)

    def close(self) -> None:
        if self._owns_client:
            self.client.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def run(self, token: str, ticket: str, path: str | Path) -> UploadResult:
        if not token:
            raise MissingTokenError("token is required")
        local_file = inspect_file(path, self.settings)

        identity = self.identity.resolve(token)
        key = build_object_key(
            identity.allowed_prefix, ticket, local_file.name, self.clock()
        )
        url = self.presign.request_upload_url(token, key)
        status = self.transfer.upload(local_file, url)

        logger.info("Upload complete!", extra=SUCCESS)
        return UploadResult(
            object_key=key,
            status_code=status,
            size=local_file.size,
            bucket=identity.bucket,
            customer_id=identity.customer_id,
        )
