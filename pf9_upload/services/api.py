import json
import logging
from typing import Any

import httpx

from pf9_upload.core.config import Settings, get_settings
from pf9_upload.core.exceptions import UploadError

logger = logging.getLogger(__name__)


class ApiService:
    """Base for services that talk to the upload API over one ``httpx.Client``.

    A client passed in by the caller is shared and left open; otherwise the
    service creates its own and closes it in :meth:`close`.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self._owns_client = client is None
        self.client = client or build_client(self.settings)

    def close(self) -> None:
        if self._owns_client:
            self.client.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _token_headers(self, token: str) -> dict[str, str]:
        return {self.settings.token_header: token}

    def _request_json(
        self,
        method: str,
        url: str,
        unreachable: type[UploadError],
        **kwargs: Any,
    ) -> tuple[dict[str, Any], str]:
        """Send one request and return the decoded JSON object and raw body.

        The HTTP status is not inspected; API errors are recognised from the
        body. A body that is not a JSON object decodes to ``{}``.
        """
        logger.debug("%s %s", method, url)
        try:
            response = self.client.request(method, url, **kwargs)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise unreachable(f"{method} {url} failed: {exc}") from exc

        raw = response.text
        logger.debug("%s %s -> HTTP %d (%d bytes)", method, url, response.status_code, len(raw))
        if not raw.strip():
            raise unreachable(f"{method} {url} returned no response (HTTP {response.status_code})")

        try:
            payload = json.loads(raw)
        except ValueError:
            logger.debug("Response body is not JSON")
            payload = {}
        if not isinstance(payload, dict):
            payload = {}
        return payload, raw


def build_client(settings: Settings) -> httpx.Client:
    if settings.timeout is None:
        return httpx.Client()
    return httpx.Client(timeout=settings.timeout)
