from pf9_upload.schemas.identity import NOT_FOUND_MESSAGE, Identity, WhoAmIResponse
from pf9_upload.schemas.presign import PresignRequest, PresignResponse
from pf9_upload.schemas.upload import LocalFile, UploadResult

__all__ = [
    "NOT_FOUND_MESSAGE",
    "Identity",
    "WhoAmIResponse",
    "PresignRequest",
    "PresignResponse",
    "LocalFile",
    "UploadResult",
]
