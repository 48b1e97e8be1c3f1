from typing import Any, Dict, List, Optional, Tuple

from items.memory import InMemoryItemTaskManager
from providers.storage import ObjectMetadata, ObjectStoreError


class FakeObjectStore:
    """
    Records every call; `fail[op] = True` makes that operation raise.
    """

    def __init__(self) -> None:
        self.calls: List[Tuple[str, Dict[str, Any]]] = []
        self.objects: Dict[str, ObjectMetadata] = {}
        self.fail: Dict[str, bool] = {}

    def _record(self, op: str, key: str, **kwargs: Any) -> None:
        self.calls.append((op, {"key": key, **kwargs}))
        if self.fail.get(op):
            raise ObjectStoreError(op, key, RuntimeError("boom"))

    def ops(self, op: Optional[str] = None) -> List[Dict[str, Any]]:
        return [c for name, c in self.calls if op is None or name == op]

    async def presign_put(self, key, expires_in, metadata=None):
        self._record("presign_put", key, expires_in=expires_in, metadata=dict(metadata or {}))
        return f"https://test-bucket.s3.amazonaws.com/{key}?X-Amz-Expires={expires_in}"

    async def head_object(self, key):
        self._record("head_object", key)
        if key not in self.objects:
            raise ObjectStoreError("head_object", key, RuntimeError("404"))
        return self.objects[key]

    async def copy_object(self, source_key, dest_key, metadata, content_disposition, content_type=None):
        self._record(
            "copy_object",
            source_key,
            dest_key=dest_key,
            metadata=dict(metadata),
            content_disposition=content_disposition,
            content_type=content_type,
        )
        if source_key in self.objects:
            self.objects[dest_key] = self.objects[source_key]

    async def delete_object(self, key):
        self._record("delete_object", key)
        self.objects.pop(key, None)


class CountingItemTaskManager(InMemoryItemTaskManager):
    def __init__(self) -> None:
        super().__init__()
        self.update_calls = 0

    async def update_item(self, actor, item_id, fields):
        self.update_calls += 1
        return await super().update_item(actor, item_id, fields)
