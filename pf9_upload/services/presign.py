import json
import logging
from datetime import datetime, timezone

from pydantic import ValidationError

from pf9_upload.core.exceptions import (
    PresignRejectedError,
    PresignUnreachableError,
    PresignUrlMissingError,
)
from pf9_upload.core.logging import SUCCESS
from pf9_upload.schemas import PresignRequest, PresignResponse
from pf9_upload.services.api import ApiService

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y%m%dT%H%M%SZ"


def build_object_key(
    prefix: str,
    ticket: str,
    filename: str,
    now: datetime | None = None,
) -> str:
    """Return ``<prefix><ticket>/<UTC timestamp>_<filename>``.

    ``prefix`` is expected to be normalized already. Keys only have
    second resolution, so two runs for the same ticket and file within one
    second produce the same key.
    """
    moment = now or datetime.now(timezone.utc)
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc)
    return f"{prefix}{ticket}/{moment.strftime(TIMESTAMP_FORMAT)}_{filename}"


def _without_url(payload: dict, raw: str) -> str:
    if "url" not in payload:
        return raw
    redacted = {k: v for k, v in payload.items() if k != "url"}
    return json.dumps({**redacted, "url": "<hidden>"})


class PresignService(ApiService):
    """Requests a short-lived signed PUT URL for an object key."""

    def request_upload_url(self, token: str, key: str) -> str:
        logger.info("Requesting pre-signed URL for %s...", key)
        body = PresignRequest(key=key, expires=self.settings.presign_expires)
        payload, raw = self._request_json(
            "POST",
            self.settings.presign_url,
            PresignUnreachableError,
            json=body.model_dump(),
            headers={**self._token_headers(token), "Content-Type": "application/json"},
        )

        try:
            presign = PresignResponse.model_validate(payload)
        except ValidationError as exc:
            raise PresignUrlMissingError(
                "Could not parse presigned URL from API response.", detail=raw
            ) from exc

        # An explicit error wins even when a url is present too.
        if presign.error:
            raise PresignRejectedError(
                f"Presign API returned error: {presign.error}",
                detail=_without_url(payload, raw),
            )
        if not presign.url:
            raise PresignUrlMissingError(
                "Could not parse presigned URL from API response.", detail=raw
            )

        logger.info("Got presigned URL (hidden).", extra=SUCCESS)
        return presign.url
