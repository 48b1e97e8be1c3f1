from __future__ import annotations

import logging

from items.models import Member
from items.tasks import ItemTaskManager
from providers.storage import ObjectStoreClient, ObjectStoreError
from s3file.errors import NotS3FileItem
from s3file.models import S3FileDescriptor, descriptor_of

log = logging.getLogger(__name__)


class MetadataResolver:
    """
    Lazily fills size/contentType of an s3-file item.

    The first read heads the object and writes both values back onto the
    item in a single update; later reads are served from the record with
    no remote call. A failed head leaves the record untouched.
    """

    def __init__(self, storage: ObjectStoreClient, items: ItemTaskManager) -> None:
        self._storage = storage
        self._items = items

    async def resolve(self, actor: Member, item_id: str) -> S3FileDescriptor:
        item = await self._items.get_item(actor, item_id)

        descriptor = descriptor_of(item)
        if descriptor is None:
            raise NotS3FileItem(data=item_id)

        if descriptor.has_metadata:
            return descriptor

        try:
            head = await self._storage.head_object(descriptor.key)
        except ObjectStoreError:
            log.error("s3-file-item: failed to get s3 object metadata key=%s", descriptor.key, exc_info=True)
            raise

        merged = descriptor.model_copy(update={"size": head.size, "contentType": head.content_type})
        updated = await self._items.update_item(actor, item_id, {"extra": merged.to_extra()})

        return descriptor_of(updated) or merged
