import logging
from pathlib import Path

from pf9_upload.core.config import Settings, get_settings
from pf9_upload.core.exceptions import FileMissingError, FileSizeError, FileTooLargeError
from pf9_upload.core.logging import SUCCESS
from pf9_upload.schemas import LocalFile

logger = logging.getLogger(__name__)


def inspect_file(path: str | Path, settings: Settings | None = None) -> LocalFile:
    """Check that ``path`` is an uploadable file and return it with its size.

    Runs before any network call so an oversized file never reaches the API.
    """
    settings = settings or get_settings()
    file_path = Path(path)
    if not file_path.is_file():
        raise FileMissingError(f"file not found: {file_path}")

    logger.info("Checking file size...")
    try:
        size = file_path.stat().st_size
    except OSError as exc:
        raise FileSizeError(f"could not determine file size: {exc}") from exc

    if size > settings.max_file_bytes:
        raise FileTooLargeError(
            f"file too large: {size} bytes (max {settings.max_file_bytes})"
        )

    logger.info("File size OK (%d bytes).", size, extra=SUCCESS)
    return LocalFile(path=file_path, size=size)
