from __future__ import annotations

from typing import Optional

from items.models import Member
from items.tasks import ItemTaskManager
from s3file.keys import generate_key
from s3file.models import (
    DEFAULT_FILENAME_TRUNCATE_LIMIT,
    ITEM_TYPE,
    S3FileDescriptor,
    S3UploadResponse,
    truncate_filename,
)
from s3file.upload import UploadAuthorizer


async def create_upload(
    items: ItemTaskManager,
    uploads: UploadAuthorizer,
    actor: Member,
    filename: str,
    parent_id: Optional[str] = None,
    truncate_limit: int = DEFAULT_FILENAME_TRUNCATE_LIMIT,
) -> S3UploadResponse:
    """
    Upload intent:
      1) mint a key
      2) create the s3-file item pointing at it (no size/contentType yet)
      3) hand back a direct-upload URL scoped to that key

    If the upload URL cannot be issued the item stays in place; it can be
    deleted like any other item.
    """
    name = truncate_filename(filename, truncate_limit)
    descriptor = S3FileDescriptor(displayName=name, key=generate_key())

    item = await items.create_item(
        actor,
        {"name": name, "type": ITEM_TYPE, "extra": descriptor.to_extra()},
        parent_id,
    )

    upload_url = await uploads.authorize_upload(
        descriptor.key,
        {"member": actor.id, "item": item.id},
    )
    return S3UploadResponse(item=item, uploadUrl=upload_url)
