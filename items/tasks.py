from __future__ import annotations

from typing import Any, Awaitable, Callable, Dict, Optional, Protocol, runtime_checkable

from items.models import Item, Member

# Handler invoked with the item the operation acts on and the acting member.
ItemHookHandler = Callable[[Item, Member], Awaitable[None]]


@runtime_checkable
class ItemTaskManager(Protocol):
    """
    Item task system contract.

    Lifecycle hooks are registered per item type:
      - pre-copy handlers run on the in-flight copy (already carrying its new
        id) before it is persisted; a raising handler aborts the copy.
      - post-delete handlers run after the record removal has committed; the
        deletion stands regardless of what the handler does.
    """

    async def create_item(self, actor: Member, fields: Dict[str, Any], parent_id: Optional[str] = None) -> Item: ...

    async def get_item(self, actor: Member, item_id: str) -> Item: ...

    async def update_item(self, actor: Member, item_id: str, fields: Dict[str, Any]) -> Item: ...

    async def copy_item(self, actor: Member, item_id: str, parent_id: Optional[str] = None) -> Item: ...

    async def delete_item(self, actor: Member, item_id: str) -> Item: ...

    def on_pre_copy(self, item_type: str, handler: ItemHookHandler) -> None: ...

    def on_post_delete(self, item_type: str, handler: ItemHookHandler) -> None: ...
