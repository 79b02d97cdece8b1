from typing import Any, Optional

from server.src.modules.game_store import DocumentStore
from server.src.modules.logging_helpers import logger
from server.src.objects.items import InventoryItem, item_from_dict


class ItemCatalog:
    """Read-only view of the inventory collection."""

    def __init__(self, items: DocumentStore):
        self.items = items

    def get(self, item_id: str) -> Optional[InventoryItem]:
        if not item_id:
            return None
        doc = self.items.find_by_id(item_id)
        if not doc:
            return None
        try:
            return item_from_dict(doc)
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Ignoring malformed inventory item %s: %s", item_id, e)
            return None

    def get_of_kind(self, item_id: str, kind: str) -> Optional[InventoryItem]:
        item = self.get(item_id)
        if item is None or item.kind != kind:
            return None
        return item

    def list_items(self) -> list[dict[str, Any]]:
        return self.items.find()
