from __future__ import annotations

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Query

from auth.deps import MemberDep
from core.deps import ItemsDep, MetadataDep, ProvidersDep, UploadsDep
from s3file.models import S3MetadataResponse, S3UploadBody, S3UploadResponse
from s3file.service import create_upload

router = APIRouter(tags=["s3-file"])


# ---------------------------------------------------------------------
# POST /s3-upload
# ---------------------------------------------------------------------
@router.post("/s3-upload", response_model=S3UploadResponse)
async def s3_upload(
    body: S3UploadBody,
    member: MemberDep,
    items: ItemsDep,
    uploads: UploadsDep,
    providers: ProvidersDep,
    parent_id: Optional[UUID] = Query(default=None, alias="parentId"),
):
    """Create an s3-file item and return a direct-upload URL for its object."""
    return await create_upload(
        items,
        uploads,
        member,
        body.filename,
        str(parent_id) if parent_id else None,
        truncate_limit=providers.settings.file_item.filename_truncate_limit,
    )


# ---------------------------------------------------------------------
# GET /{id}/s3-metadata
# ---------------------------------------------------------------------
@router.get("/{item_id}/s3-metadata", response_model=S3MetadataResponse)
async def get_s3_metadata(item_id: UUID, member: MemberDep, resolver: MetadataDep):
    descriptor = await resolver.resolve(member, str(item_id))
    return S3MetadataResponse(**descriptor.model_dump())
