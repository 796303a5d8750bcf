import logging
import os
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from itertools import islice
from pathlib import Path

import httpx

from pf9_upload.core.exceptions import UploadFailedError, UploadNoStatusError
from pf9_upload.schemas import LocalFile
from pf9_upload.services.api import ApiService

logger = logging.getLogger(__name__)

SSE_HEADER = "x-amz-server-side-encryption"
SCRATCH_PREFIX = "s3_upload_resp."


@contextmanager
def scratch_file(directory: Path | None = None) -> Iterator[Path]:
    """Yield a fresh temporary file path and delete it on every exit path."""
    fd, name = tempfile.mkstemp(prefix=SCRATCH_PREFIX, dir=directory)
    os.close(fd)
    path = Path(name)
    try:
        yield path
    finally:
        path.unlink(missing_ok=True)


def read_head(path: Path, max_lines: int) -> str:
    if not path.exists():
        return ""
    with path.open("r", encoding="utf-8", errors="replace") as f:
        return "".join(islice(f, max_lines))


class TransferService(ApiService):
    """PUTs a local file to a signed URL.

    The signed URL was generated expecting server-side encryption, so the
    SSE header must be sent or the storage backend rejects the signature.
    """

    def upload(self, local_file: LocalFile, url: str) -> int:
        logger.info("Uploading %s...", local_file.name)
        with scratch_file(self.settings.scratch_dir) as scratch:
            status = self._put(local_file, url, scratch)
            if not 200 <= status < 300:
                raise UploadFailedError(
                    f"Upload failed with HTTP {status}.",
                    status_code=status,
                    detail=read_head(scratch, self.settings.error_body_max_lines),
                )
        logger.debug("PUT completed with HTTP %d", status)
        return status

    def _put(self, local_file: LocalFile, url: str, scratch: Path) -> int:
        headers = {
            SSE_HEADER: self.settings.sse_algorithm,
            # Signed PUTs do not accept chunked transfer encoding.
            "Content-Length": str(local_file.size),
        }
        # Storage may take long to answer a large PUT; only connecting is bounded.
        timeout = httpx.Timeout(self.settings.timeout, connect=self.settings.connect_timeout)
        status: int | None = None
        try:
            with local_file.path.open("rb") as body, scratch.open("wb") as out:
                with self.client.stream(
                    "PUT", url, content=body, headers=headers, timeout=timeout
                ) as response:
                    status = response.status_code
                    for chunk in response.iter_raw():
                        out.write(chunk)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            if status is None:
                raise UploadNoStatusError(
                    f"Upload failed: no HTTP response from PUT ({type(exc).__name__}).",
                    detail=read_head(scratch, self.settings.error_body_max_lines) or None,
                ) from exc
            logger.warning("Response body truncated after HTTP %d: %s", status, type(exc).__name__)
        return status
