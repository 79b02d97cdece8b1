from server.src.modules.attribute_resolver import resolve
from server.src.modules.errors import InvalidRequest, NotFound
from server.src.modules.game_store import GameStore
from server.src.modules.item_catalog import ItemCatalog
from server.src.modules.logging_helpers import logger, write_audit
from server.src.objects.characters import EQUIPMENT_SLOTS, Character


def equip_item(store: GameStore, character_id: str, slot: str, item_id: str | None) -> Character:
    """Put `item_id` in `slot` (empty string unequips) and recompute stats.

    The item is not checked here; a dangling id simply resolves to zero.
    """
    if slot not in EQUIPMENT_SLOTS:
        raise InvalidRequest(f"Unknown equipment slot: {slot!r}")

    doc = store.characters.find_by_id(character_id)
    if not doc:
        raise NotFound("Character not found")

    character = Character.from_dict(doc)
    before = dict(doc.get("equipment") or {})
    setattr(character.equipment, slot, str(item_id or ""))

    resolve(character, ItemCatalog(store.inventory))
    store.characters.save(character.to_dict())

    logger.info("Equip %s slot=%s item=%s", character.id, slot, item_id or "-")
    write_audit(store, "equip", character.id, before, character.to_dict()["equipment"])
    return character
