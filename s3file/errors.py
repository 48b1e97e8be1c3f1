from __future__ import annotations

from typing import Any, Dict, Optional

ERROR_ORIGIN = "s3-file-item"


class S3FileItemError(Exception):
    """
    Base error for the s3-file item routes and hooks.

    Rendered to clients as {"code", "message", "origin", "data"} with
    `status_code` as the HTTP status.
    """

    code = "GS3FIERR000"
    status_code = 500
    message = "s3-file item error"

    def __init__(self, data: Optional[Any] = None, message: Optional[str] = None) -> None:
        self.message = message or type(self).message
        super().__init__(self.message)
        self.data = data
        self.origin = ERROR_ORIGIN

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "origin": self.origin,
            "data": self.data,
        }


class NotS3FileItem(S3FileItemError):
    code = "GS3FIERR001"
    status_code = 400
    message = 'Item is not a "s3-file-item"'


class S3ObjectOperationFailed(S3FileItemError):
    code = "GS3FIERR002"
    status_code = 502
    message = "Object store operation failed"
