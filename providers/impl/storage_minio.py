from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Dict, Optional

from minio import Minio
from minio.commonconfig import REPLACE, CopySource
from minio.error import MinioException
from urllib3.exceptions import HTTPError as TransportError

from core.settings import StorageSettings
from providers.storage import ObjectMetadata, ObjectStoreClient, ObjectStoreError

log = logging.getLogger(__name__)


def _strip_http(endpoint: str) -> str:
    # Minio client expects "host:port" (no scheme)
    endpoint = (endpoint or "").strip()
    endpoint = endpoint.replace("http://", "").replace("https://", "")
    endpoint = endpoint.rstrip("/")
    return endpoint


@dataclass
class MinioObjectStore(ObjectStoreClient):
    """
    MinIO-backed ObjectStoreClient for the local stack.

    Notes:
      - The bucket is expected to exist; it is not auto-created here.
      - Presigned PUT URLs cannot carry signed user metadata with the minio
        client, so upload metadata is dropped.
    """

    endpoint: str
    bucket: str
    access_key: str
    secret_key: str
    secure: bool = False
    region: Optional[str] = None
    cache_control: Optional[str] = None

    def __post_init__(self) -> None:
        host = _strip_http(self.endpoint)
        if not host:
            raise RuntimeError("S3_ENDPOINT_URL is empty or invalid")

        self._client = Minio(
            host,
            access_key=self.access_key,
            secret_key=self.secret_key,
            secure=bool(self.secure),
            region=self.region or None,
        )

    @classmethod
    def from_settings(cls, s: StorageSettings) -> "MinioObjectStore":
        # Derive secure from scheme (best-effort)
        secure = s.endpoint_url.lower().startswith("https://")
        return cls(
            endpoint=s.endpoint_url,
            bucket=s.bucket,
            access_key=s.access_key_id,
            secret_key=s.secret_access_key,
            secure=secure,
            region=s.region or None,
            cache_control=s.cache_control,
        )

    async def _call(self, operation: str, key: str, fn, **kwargs: Any) -> Any:
        try:
            return await asyncio.to_thread(fn, **kwargs)
        except (MinioException, TransportError, ValueError) as e:
            raise ObjectStoreError(operation, key, e) from e

    async def presign_put(
        self,
        key: str,
        expires_in: int,
        metadata: Optional[Dict[str, str]] = None,
    ) -> str:
        if metadata:
            log.debug("minio presigned PUT drops upload metadata for key=%s", key)
        return await self._call(
            "presign_put",
            key,
            self._client.presigned_put_object,
            bucket_name=self.bucket,
            object_name=key,
            expires=timedelta(seconds=max(1, int(expires_in))),
        )

    async def head_object(self, key: str) -> ObjectMetadata:
        stat = await self._call(
            "head_object",
            key,
            self._client.stat_object,
            bucket_name=self.bucket,
            object_name=key,
        )
        return ObjectMetadata(
            size=int(stat.size or 0),
            content_type=stat.content_type or "application/octet-stream",
        )

    async def copy_object(
        self,
        source_key: str,
        dest_key: str,
        metadata: Dict[str, str],
        content_disposition: str,
        content_type: Optional[str] = None,
    ) -> None:
        # standard headers pass through as-is, the rest become x-amz-meta-*
        headers: Dict[str, str] = {str(k): str(v) for k, v in metadata.items()}
        headers["Content-Disposition"] = content_disposition
        if content_type:
            headers["Content-Type"] = content_type
        if self.cache_control:
            headers["Cache-Control"] = self.cache_control

        await self._call(
            "copy_object",
            source_key,
            self._client.copy_object,
            bucket_name=self.bucket,
            object_name=dest_key,
            source=CopySource(bucket_name=self.bucket, object_name=source_key),
            metadata=headers,
            metadata_directive=REPLACE,
        )

    async def delete_object(self, key: str) -> None:
        await self._call(
            "delete_object",
            key,
            self._client.remove_object,
            bucket_name=self.bucket,
            object_name=key,
        )
