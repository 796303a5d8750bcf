import logging

from pydantic import ValidationError

from pf9_upload.core.exceptions import (
    IdentityNotFoundError,
    IdentityUnreachableError,
    MissingTokenError,
    PrefixEmptyError,
    PrefixMissingError,
)
from pf9_upload.core.logging import STEP, SUCCESS
from pf9_upload.schemas import NOT_FOUND_MESSAGE, Identity, WhoAmIResponse
from pf9_upload.services.api import ApiService

logger = logging.getLogger(__name__)


def normalize_prefix(prefix: str) -> str:
    """Strip leading slashes and end the prefix with exactly one slash.

    A prefix made only of slashes normalizes to ``""``.
    """
    stripped = prefix.strip("/")
    return f"{stripped}/" if stripped else ""


class IdentityService(ApiService):
    """Resolves which storage prefix a token may write under."""

    def resolve(self, token: str) -> Identity:
        if not token:
            raise MissingTokenError("token is required")

        logger.info("Identifying customer for token...")
        payload, raw = self._request_json(
            "GET",
            self.settings.whoami_url,
            IdentityUnreachableError,
            headers={**self._token_headers(token), "Accept": "application/json"},
        )

        try:
            whoami = WhoAmIResponse.model_validate(payload)
        except ValidationError as exc:
            raise PrefixMissingError(
                f"whoami returned a malformed response ({exc.error_count()} invalid fields)",
                detail=raw,
            ) from exc

        if whoami.message == NOT_FOUND_MESSAGE:
            raise IdentityNotFoundError(
                f"whoami endpoint returned {NOT_FOUND_MESSAGE} (404). "
                f"Ensure GET {self.settings.whoami_path} route exists on the API.",
                detail=raw,
            )

        if not whoami.allowed_prefix:
            raise PrefixMissingError("whoami did not return allowed_prefix", detail=raw)

        prefix = normalize_prefix(whoami.allowed_prefix)
        if not prefix:
            raise PrefixEmptyError(
                "normalized allowed_prefix is empty; token may be misconfigured.",
                detail=raw,
            )

        logger.info("Customer prefix detected: %s", prefix, extra=SUCCESS)
        if whoami.bucket:
            logger.info("Target bucket from token: %s", whoami.bucket, extra=STEP)
        else:
            logger.info(
                "No bucket returned in whoami (the token record may lack a bucket)",
                extra=STEP,
            )

        return Identity(
            allowed_prefix=prefix,
            bucket=whoami.bucket or None,
            customer_id=whoami.customer_id or None,
        )
