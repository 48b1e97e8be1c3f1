from __future__ import annotations

import asyncio
import logging
from typing import Set

from items.models import Item, Member
from items.tasks import ItemTaskManager
from providers.storage import ObjectStoreClient, ObjectStoreError
from s3file.keys import generate_key
from s3file.models import EXTRA_FIELD, ITEM_TYPE, descriptor_of

log = logging.getLogger(__name__)


class LifecycleSynchronizer:
    """
    Mirrors item copy/delete onto the object store.

    - pre_copy: duplicates the object under a fresh key and repoints the
      in-flight copy before it is persisted. Failure aborts the copy.
    - post_delete: removes the object after the record is gone, in a
      detached task. Failure is only ever logged.

    Both handlers are no-ops for items that are not s3-file items.
    """

    def __init__(self, storage: ObjectStoreClient) -> None:
        self._storage = storage
        self._pending: Set[asyncio.Task] = set()

    def register(self, task_manager: ItemTaskManager) -> None:
        task_manager.on_pre_copy(ITEM_TYPE, self.pre_copy)
        task_manager.on_post_delete(ITEM_TYPE, self.post_delete)

    async def pre_copy(self, item: Item, actor: Member) -> None:
        descriptor = descriptor_of(item)
        if descriptor is None:
            return

        new_key = generate_key()
        metadata = {"member": actor.id, "item": item.id}

        try:
            await self._storage.copy_object(
                descriptor.key,
                new_key,
                metadata,
                content_disposition=f'attachment; filename="{descriptor.displayName}"',
                content_type=descriptor.contentType,
            )
        except ObjectStoreError:
            log.error(
                "s3-file-item: failed to copy s3 object '%s' to '%s'",
                descriptor.key,
                new_key,
                exc_info=True,
            )
            raise

        item.extra[EXTRA_FIELD]["key"] = new_key

    async def post_delete(self, item: Item, actor: Member) -> None:
        descriptor = descriptor_of(item)
        if descriptor is None:
            return

        task = asyncio.create_task(self._delete_object(descriptor.key))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _delete_object(self, key: str) -> None:
        try:
            await self._storage.delete_object(key)
        except Exception:
            log.error("s3-file-item: failed to delete s3 object '%s'", key, exc_info=True)

    @property
    def pending(self) -> int:
        return len(self._pending)

    async def drain(self) -> None:
        """
        Wait for in-flight object deletions (shutdown, tests).
        """
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
