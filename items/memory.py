from __future__ import annotations

import logging
import uuid
from collections import defaultdict
from typing import Any, Dict, List, Optional

from items.errors import ItemNotFound
from items.models import Item, Member, utc_now
from items.tasks import ItemHookHandler, ItemTaskManager

log = logging.getLogger(__name__)


def _merge_extra(current: Dict[str, Any], patch: Dict[str, Any]) -> Dict[str, Any]:
    # one level deep per reserved key; anything else is replaced
    merged = dict(current)
    for k, v in patch.items():
        if isinstance(v, dict) and isinstance(merged.get(k), dict):
            merged[k] = {**merged[k], **v}
        else:
            merged[k] = v
    return merged


class InMemoryItemTaskManager(ItemTaskManager):
    """
    Process-local item task system.

    Records live in a dict keyed by item id. Reads hand out deep copies so
    callers cannot mutate stored records except through update_item.
    """

    _UPDATABLE = ("name", "extra")

    def __init__(self) -> None:
        self._items: Dict[str, Item] = {}
        self._pre_copy: Dict[str, List[ItemHookHandler]] = defaultdict(list)
        self._post_delete: Dict[str, List[ItemHookHandler]] = defaultdict(list)

    # -----------------------------
    # Hook registration
    # -----------------------------

    def on_pre_copy(self, item_type: str, handler: ItemHookHandler) -> None:
        self._pre_copy[item_type].append(handler)

    def on_post_delete(self, item_type: str, handler: ItemHookHandler) -> None:
        self._post_delete[item_type].append(handler)

    # -----------------------------
    # Tasks
    # -----------------------------

    def _load(self, item_id: str) -> Item:
        item = self._items.get(item_id)
        if item is None:
            raise ItemNotFound(item_id)
        return item

    async def create_item(self, actor: Member, fields: Dict[str, Any], parent_id: Optional[str] = None) -> Item:
        if parent_id is not None:
            self._load(parent_id)

        item = Item(
            id=str(uuid.uuid4()),
            name=str(fields.get("name") or ""),
            type=str(fields.get("type") or "folder"),
            extra=dict(fields.get("extra") or {}),
            parentId=parent_id,
            creator=actor.id,
        )
        self._items[item.id] = item
        return item.model_copy(deep=True)

    async def get_item(self, actor: Member, item_id: str) -> Item:
        return self._load(item_id).model_copy(deep=True)

    async def update_item(self, actor: Member, item_id: str, fields: Dict[str, Any]) -> Item:
        current = self._load(item_id)
        changes: Dict[str, Any] = {"updatedAt": utc_now()}
        for name in self._UPDATABLE:
            if name not in fields:
                continue
            if name == "extra":
                changes["extra"] = _merge_extra(current.extra, fields["extra"] or {})
            else:
                changes[name] = fields[name]

        updated = current.model_copy(deep=True, update=changes)
        self._items[item_id] = updated
        return updated.model_copy(deep=True)

    async def copy_item(self, actor: Member, item_id: str, parent_id: Optional[str] = None) -> Item:
        source = self._load(item_id)
        if parent_id is not None:
            self._load(parent_id)

        now = utc_now()
        copy = source.model_copy(
            deep=True,
            update={
                "id": str(uuid.uuid4()),
                "parentId": parent_id if parent_id is not None else source.parentId,
                "creator": actor.id,
                "createdAt": now,
                "updatedAt": now,
            },
        )

        # a raising handler aborts the copy before anything is persisted
        for handler in self._pre_copy.get(copy.type, []):
            await handler(copy, actor)

        self._items[copy.id] = copy
        return copy.model_copy(deep=True)

    async def delete_item(self, actor: Member, item_id: str) -> Item:
        item = self._items.pop(item_id, None)
        if item is None:
            raise ItemNotFound(item_id)

        for handler in self._post_delete.get(item.type, []):
            try:
                await handler(item, actor)
            except Exception:
                log.exception("post-delete hook failed for item %s; deletion stands", item_id)
        return item
