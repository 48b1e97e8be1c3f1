from __future__ import annotations


class ItemTaskError(RuntimeError):
    status_code = 500


class ItemNotFound(ItemTaskError):
    status_code = 404

    def __init__(self, item_id: str) -> None:
        super().__init__(f"Item not found: {item_id}")
        self.item_id = item_id
