"""Failure taxonomy for an upload run.

Every failure is terminal. Each class carries its own process exit code so
callers can tell failures apart without parsing messages; ``detail`` holds
the raw diagnostic payload (an API response or a captured response body)
that is echoed to the operator as-is.
"""

from enum import IntEnum


class ExitCode(IntEnum):
    OK = 0
    USAGE = 2
    MISSING_TOKEN = 3
    FILE_MISSING = 4
    FILE_SIZE_UNKNOWN = 5
    FILE_TOO_LARGE = 6
    IDENTITY_UNREACHABLE = 7
    IDENTITY_NOT_FOUND = 8
    PREFIX_MISSING = 9
    PREFIX_EMPTY = 10
    PRESIGN_UNREACHABLE = 11
    PRESIGN_REJECTED = 12
    PRESIGN_URL_MISSING = 13
    UPLOAD_NO_STATUS = 14
    UPLOAD_FAILED = 15
    INTERRUPTED = 130


class UploadError(Exception):
    """Base class for every terminal upload failure."""

    exit_code: ExitCode = ExitCode.UPLOAD_FAILED
    detail_label = "Response"

    def __init__(self, message: str, detail: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail


# Input errors


class MissingTokenError(UploadError):
    exit_code = ExitCode.MISSING_TOKEN


class FileMissingError(UploadError):
    exit_code = ExitCode.FILE_MISSING


class FileSizeError(UploadError):
    """Raised when the size of the local file cannot be determined."""

    exit_code = ExitCode.FILE_SIZE_UNKNOWN


class FileTooLargeError(UploadError):
    exit_code = ExitCode.FILE_TOO_LARGE


# Identity endpoint


class IdentityUnreachableError(UploadError):
    """Raised when the identity endpoint gives no response at all."""

    exit_code = ExitCode.IDENTITY_UNREACHABLE


class IdentityNotFoundError(UploadError):
    exit_code = ExitCode.IDENTITY_NOT_FOUND
    detail_label = "whoami response"


class PrefixMissingError(UploadError):
    exit_code = ExitCode.PREFIX_MISSING
    detail_label = "whoami response"


class PrefixEmptyError(UploadError):
    exit_code = ExitCode.PREFIX_EMPTY
    detail_label = "whoami response"


# Presign endpoint


class PresignUnreachableError(UploadError):
    exit_code = ExitCode.PRESIGN_UNREACHABLE


class PresignRejectedError(UploadError):
    """Raised when the presign endpoint answers with an explicit error."""

    exit_code = ExitCode.PRESIGN_REJECTED
    detail_label = "Presign response"


class PresignUrlMissingError(UploadError):
    exit_code = ExitCode.PRESIGN_URL_MISSING
    detail_label = "Presign response"


# Transfer


class UploadNoStatusError(UploadError):
    exit_code = ExitCode.UPLOAD_NO_STATUS
    detail_label = "Response body"


class UploadFailedError(UploadError):
    exit_code = ExitCode.UPLOAD_FAILED
    detail_label = "Response body"

    def __init__(self, message: str, status_code: int, detail: str | None = None) -> None:
        super().__init__(message, detail)
        self.status_code = status_code
