from typing import Any

from fastapi import APIRouter, Body, Depends, Request
from pydantic import BaseModel, ConfigDict, Field

from server.src.modules.bulk_helpers import apply_character_patches, apply_formations
from server.src.modules.equipment_helpers import equip_item
from server.src.modules.errors import NotFound
from server.src.modules.game_store import GameStore
from server.src.modules.item_catalog import ItemCatalog
from server.src.modules.logging_helpers import logger, write_audit
from server.src.modules.spell_helpers import cast_spell

router = APIRouter(prefix="/api", tags=["game"])


def get_store(request: Request) -> GameStore:
    return GameStore(request.app.state.mongo)


class EquipPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    slot: str
    item_id: str | None = Field(default="", alias="itemId")


class CastPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    caster_id: str = Field(alias="casterId")
    spell_index: Any = Field(alias="spellIndex")
    target_ids: Any = Field(default=None, alias="targetIds")


# ---------- Listings ----------
@router.get("/characters")
def list_characters(store: GameStore = Depends(get_store)):
    return store.characters.find()

@router.get("/monsters")
def list_monsters(store: GameStore = Depends(get_store)):
    return store.monsters.find()

@router.get("/inventory")
def list_inventory(store: GameStore = Depends(get_store)):
    return ItemCatalog(store.inventory).list_items()


# ---------- Characters ----------
@router.patch("/characters/formation")
def update_formations(body: dict = Body(...), store: GameStore = Depends(get_store)):
    modified = apply_formations(store, body.get("formations"))
    write_audit(store, "formation", "-", None, {"modified": modified})
    return {"message": "Formation updated.", "modifiedCount": modified}

@router.patch("/characters/bulk")
def bulk_update_characters(body: dict = Body(...), store: GameStore = Depends(get_store)):
    patches = body.get("characters")
    modified = apply_character_patches(store, patches)
    logger.info("Bulk save: %s patches, %s modified", len(patches), modified)
    write_audit(store, "bulk", "-", None, {"patches": len(patches), "modified": modified})
    return {"ok": True, "modifiedCount": modified}

@router.patch("/characters/{character_id}/equipment")
def update_equipment(character_id: str, payload: EquipPayload, store: GameStore = Depends(get_store)):
    return equip_item(store, character_id, payload.slot, payload.item_id).to_dict()

@router.get("/characters/{character_id}/position")
def get_position(character_id: str, store: GameStore = Depends(get_store)):
    doc = store.characters.find_by_id(character_id)
    if not doc:
        raise NotFound("Character not found")
    pos = doc.get("position") or {}
    return {"position": {"x": pos.get("x", 0), "y": pos.get("y", 0)}}


# ---------- Spells ----------
@router.post("/spells/cast")
def cast(payload: CastPayload, store: GameStore = Depends(get_store)):
    result = cast_spell(store, payload.caster_id, payload.spell_index, payload.target_ids)
    return result.to_dict()
