from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Protocol, runtime_checkable


class ObjectStoreError(RuntimeError):
    """
    A remote object store call failed.

    Raised by every ObjectStoreClient implementation, chained to the
    library error that caused it. Nothing at this layer retries.
    """

    def __init__(self, operation: str, key: str, cause: Optional[BaseException] = None) -> None:
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"object store {operation} failed for key '{key}'{detail}")
        self.operation = operation
        self.key = key
        self.cause = cause


@dataclass(frozen=True)
class ObjectMetadata:
    size: int
    content_type: str


@runtime_checkable
class ObjectStoreClient(Protocol):
    """
    Object storage contract used by the s3-file item hooks and routes.

    All operations are remote and awaitable. copy_object replaces the object
    metadata wholesale with `metadata` and re-supplies content type and
    disposition, since some stores cannot preserve metadata across a rename.
    """

    async def presign_put(
        self,
        key: str,
        expires_in: int,
        metadata: Optional[Dict[str, str]] = None,
    ) -> str: ...

    async def head_object(self, key: str) -> ObjectMetadata: ...

    async def copy_object(
        self,
        source_key: str,
        dest_key: str,
        metadata: Dict[str, str],
        content_disposition: str,
        content_type: Optional[str] = None,
    ) -> None: ...

    async def delete_object(self, key: str) -> None: ...
