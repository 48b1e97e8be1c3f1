from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from items.models import Item

ITEM_TYPE = "s3-file"

# Reserved key under Item.extra for the s3-file descriptor
EXTRA_FIELD = "s3File"

DEFAULT_FILENAME_TRUNCATE_LIMIT = 100


class S3FileDescriptor(BaseModel):
    """
    Ties an item to its object store key.

    - displayName: original filename, truncated when the item is created
    - key: store-relative path; only rewritten when the item is copied
    - size / contentType: filled together, once, from a single head request
    """
    displayName: str
    key: str = Field(min_length=1)
    size: Optional[int] = Field(default=None, ge=0)
    contentType: Optional[str] = None

    @model_validator(mode="after")
    def _size_and_type_together(self) -> "S3FileDescriptor":
        if (self.size is None) != (self.contentType is None):
            raise ValueError("size and contentType must be both set or both unset")
        return self

    @property
    def has_metadata(self) -> bool:
        # size 0 is a real, cached value
        return self.size is not None and bool(self.contentType)

    def to_extra(self) -> Dict[str, Any]:
        return {EXTRA_FIELD: self.model_dump(exclude_none=True)}


def descriptor_of(item: Item) -> Optional[S3FileDescriptor]:
    """
    Return the s3-file descriptor carried by `item`, or None.

    Only items tagged with ITEM_TYPE qualify; an item of another type is
    never treated as a file, whatever its extra payload looks like.
    """
    if item.type != ITEM_TYPE:
        return None
    raw = (item.extra or {}).get(EXTRA_FIELD)
    if not isinstance(raw, dict):
        return None
    try:
        return S3FileDescriptor.model_validate(raw)
    except ValidationError:
        return None


def truncate_filename(filename: str, limit: int = DEFAULT_FILENAME_TRUNCATE_LIMIT) -> str:
    return (filename or "")[:limit]


# ------------------------------------------
# Request/Response Models
# ------------------------------------------


class S3UploadBody(BaseModel):
    model_config = ConfigDict(extra="forbid")

    filename: str = Field(min_length=1)


class S3UploadResponse(BaseModel):
    item: Item
    uploadUrl: str


class S3MetadataResponse(BaseModel):
    displayName: str
    key: str
    size: Optional[int] = None
    contentType: Optional[str] = None
