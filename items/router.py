from __future__ import annotations

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Query

from auth.deps import MemberDep
from core.deps import ItemsDep
from items.models import Item

router = APIRouter(prefix="/items", tags=["items"])


@router.get("/{item_id}", response_model=Item)
async def get_item(item_id: UUID, member: MemberDep, items: ItemsDep):
    return await items.get_item(member, str(item_id))


@router.post("/{item_id}/copy", response_model=Item)
async def copy_item(
    item_id: UUID,
    member: MemberDep,
    items: ItemsDep,
    parent_id: Optional[UUID] = Query(default=None, alias="parentId"),
):
    """Copy an item; pre-copy hooks run before the copy is persisted."""
    return await items.copy_item(member, str(item_id), str(parent_id) if parent_id else None)


@router.delete("/{item_id}", response_model=Item)
async def delete_item(item_id: UUID, member: MemberDep, items: ItemsDep):
    return await items.delete_item(member, str(item_id))
