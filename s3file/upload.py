from __future__ import annotations

import logging
from typing import Dict, Optional

from providers.storage import ObjectStoreClient, ObjectStoreError

log = logging.getLogger(__name__)

DEFAULT_UPLOAD_EXPIRATION_SECONDS = 60


class UploadAuthorizer:
    """
    Issues time-limited direct-upload URLs (presigned PUT) for one key.

    Metadata is attached to the future object for auditability only.
    Failures are logged with the key and re-raised; there is no retry.
    """

    def __init__(self, storage: ObjectStoreClient, expiration_seconds: int = DEFAULT_UPLOAD_EXPIRATION_SECONDS) -> None:
        self._storage = storage
        self.expiration_seconds = expiration_seconds

    async def authorize_upload(
        self,
        key: str,
        metadata: Optional[Dict[str, str]] = None,
        expires_in: Optional[int] = None,
    ) -> str:
        expires = expires_in or self.expiration_seconds
        try:
            return await self._storage.presign_put(key, expires, metadata or {})
        except ObjectStoreError:
            log.error("s3-file-item: failed to get signed url for upload key=%s", key, exc_info=True)
            raise
