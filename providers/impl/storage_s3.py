from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from core.settings import StorageSettings
from providers.storage import ObjectMetadata, ObjectStoreClient, ObjectStoreError

log = logging.getLogger(__name__)


class S3ObjectStore(ObjectStoreClient):
    """
    Native AWS S3 ObjectStoreClient.

    Credentials are passed explicitly from settings; the client is built once
    at startup and shared through app.state.providers.

    boto3 is blocking, so every remote call is pushed onto a worker thread
    with asyncio.to_thread. Retries are disabled: callers own retry policy.
    """

    def __init__(
        self,
        bucket: str,
        region: str,
        access_key_id: str,
        secret_access_key: str,
        use_accelerate_endpoint: bool = False,
        endpoint_url: Optional[str] = None,
        cache_control: Optional[str] = None,
    ):
        bucket = (bucket or "").strip()
        if not bucket:
            raise RuntimeError("S3_BUCKET is required for S3 object store")

        self.bucket = bucket
        self.cache_control = cache_control

        s3_cfg: Dict[str, Any] = {}
        if use_accelerate_endpoint and not endpoint_url:
            s3_cfg["use_accelerate_endpoint"] = True

        cfg = Config(
            retries={"max_attempts": 1, "mode": "standard"},
            region_name=region or None,
            signature_version="s3v4",
            s3=s3_cfg or None,
        )
        self.s3 = boto3.client(
            "s3",
            aws_access_key_id=access_key_id,
            aws_secret_access_key=secret_access_key,
            endpoint_url=endpoint_url or None,
            config=cfg,
        )

    @classmethod
    def from_settings(cls, s: StorageSettings) -> "S3ObjectStore":
        return cls(
            bucket=s.bucket,
            region=s.region,
            access_key_id=s.access_key_id,
            secret_access_key=s.secret_access_key,
            use_accelerate_endpoint=s.use_accelerate_endpoint,
            endpoint_url=s.endpoint_url or None,
            cache_control=s.cache_control,
        )

    async def _call(self, operation: str, key: str, fn, **kwargs: Any) -> Any:
        try:
            return await asyncio.to_thread(fn, **kwargs)
        except (ClientError, BotoCoreError) as e:
            raise ObjectStoreError(operation, key, e) from e

    async def presign_put(
        self,
        key: str,
        expires_in: int,
        metadata: Optional[Dict[str, str]] = None,
    ) -> str:
        params: Dict[str, Any] = {"Bucket": self.bucket, "Key": key}
        if metadata:
            # S3 metadata values must be strings
            params["Metadata"] = {str(k): str(v) for k, v in metadata.items()}

        # ContentDisposition and CacheControl cannot be enforced through a
        # presigned PUT; the uploading client must send those headers itself.
        return await self._call(
            "presign_put",
            key,
            self.s3.generate_presigned_url,
            ClientMethod="put_object",
            Params=params,
            ExpiresIn=max(1, int(expires_in)),
            HttpMethod="PUT",
        )

    async def head_object(self, key: str) -> ObjectMetadata:
        resp = await self._call("head_object", key, self.s3.head_object, Bucket=self.bucket, Key=key)
        return ObjectMetadata(
            size=int(resp.get("ContentLength") or 0),
            content_type=resp.get("ContentType") or "application/octet-stream",
        )

    async def copy_object(
        self,
        source_key: str,
        dest_key: str,
        metadata: Dict[str, str],
        content_disposition: str,
        content_type: Optional[str] = None,
    ) -> None:
        kwargs: Dict[str, Any] = {
            "Bucket": self.bucket,
            "Key": dest_key,
            "CopySource": {"Bucket": self.bucket, "Key": source_key},
            "Metadata": {str(k): str(v) for k, v in metadata.items()},
            "MetadataDirective": "REPLACE",
            "ContentDisposition": content_disposition,
        }
        if content_type:
            kwargs["ContentType"] = content_type
        if self.cache_control:
            kwargs["CacheControl"] = self.cache_control

        await self._call("copy_object", source_key, self.s3.copy_object, **kwargs)

    async def delete_object(self, key: str) -> None:
        await self._call("delete_object", key, self.s3.delete_object, Bucket=self.bucket, Key=key)
