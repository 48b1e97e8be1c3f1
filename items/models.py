from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Member(BaseModel):
    """
    Acting user for an item operation (the "actor").
    """
    id: str
    name: Optional[str] = None


class Item(BaseModel):
    """
    Item record owned by the item task system.

    - type: tag selecting how `extra` is interpreted
    - extra: per-type payload; each item type reserves its own top-level key
      (e.g. "s3File" for items of type "s3-file")
    """
    id: str
    name: str
    type: str
    extra: Dict[str, Any] = Field(default_factory=dict)
    parentId: Optional[str] = None
    creator: Optional[str] = None
    createdAt: datetime = Field(default_factory=utc_now)
    updatedAt: datetime = Field(default_factory=utc_now)
