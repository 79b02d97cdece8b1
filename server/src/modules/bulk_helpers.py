from __future__ import annotations

from numbers import Number
from typing import Any

from pymongo import UpdateOne

from server.src.modules.attribute_resolver import derived_attributes
from server.src.modules.errors import InvalidRequest
from server.src.modules.item_catalog import ItemCatalog
from server.src.modules.logging_helpers import logger
from server.src.objects.characters import (
    Attributes, CURRENT_POOLS, DERIVED_ATTRIBUTES, EQUIPMENT_SLOTS, Equipment, FORMATIONS,
)

# Stats a patch may set through its `attributes` object. Current pools have
# their own top-level keys; derived stats only change through equipment.
PATCHABLE_ATTRIBUTES = tuple(
    name for name in Attributes.__dataclass_fields__
    if name not in CURRENT_POOLS and name not in DERIVED_ATTRIBUTES
)


def _is_number(value: Any) -> bool:
    return isinstance(value, Number) and not isinstance(value, bool)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _drop(cid: str, field: str, reason: str) -> None:
    logger.warning("Bulk patch %s: dropping %s (%s)", cid or "?", field, reason)


def build_patch_update(patch: Any, catalog=None) -> tuple[str, dict[str, Any]]:
    """Flatten one sparse patch into `(character_id, $set fields)`.

    Only keys present with a non-null value end up in the set; nested objects
    become dotted paths so sibling fields stay untouched. A field with a bad
    value is dropped on its own; an entry without an id yields nothing.
    """
    if not isinstance(patch, dict):
        _drop("", "entry", "not an object")
        return "", {}
    cid = str(patch.get("id") or "").strip()
    if not cid:
        _drop("", "entry", "missing id")
        return "", {}

    upd: dict[str, Any] = {}

    level = patch.get("level")
    if level is not None:
        if _is_int(level) and level >= 1:
            upd["level"] = level
        else:
            _drop(cid, "level", "must be an integer >= 1")
    xp = patch.get("experience_total")
    if xp is not None:
        if _is_int(xp) and xp >= 0:
            upd["experience_total"] = xp
        else:
            _drop(cid, "experience_total", "must be an integer >= 0")
    for pool in CURRENT_POOLS:
        value = patch.get(pool)
        if value is None:
            continue
        if _is_number(value):
            upd[f"attributes.{pool}"] = value
        else:
            _drop(cid, pool, "must be a number")
    formation = patch.get("formation")
    if formation:
        if formation in FORMATIONS:
            upd["formation"] = formation
        else:
            _drop(cid, "formation", f"must be one of {', '.join(FORMATIONS)}")

    attrs = patch.get("attributes")
    if isinstance(attrs, dict):
        for name in PATCHABLE_ATTRIBUTES:
            value = attrs.get(name)
            if value is None:
                continue
            if _is_number(value):
                upd[f"attributes.{name}"] = value
            else:
                _drop(cid, f"attributes.{name}", "must be a number")
    elif attrs is not None:
        _drop(cid, "attributes", "not an object")

    pos = patch.get("position")
    if isinstance(pos, dict):
        for axis in ("x", "y"):
            value = pos.get(axis)
            if value is None:
                continue
            if _is_int(value):
                upd[f"position.{axis}"] = value
            else:
                _drop(cid, f"position.{axis}", "must be an integer")
    elif pos is not None:
        _drop(cid, "position", "not an object")

    equipment = patch.get("equipment")
    if isinstance(equipment, dict):
        bad = [s for s in EQUIPMENT_SLOTS if equipment.get(s) is not None and not isinstance(equipment[s], str)]
        if bad:
            _drop(cid, "equipment", f"non-string slot {', '.join(bad)}")
        else:
            eq = Equipment.from_dict(equipment)
            upd["equipment"] = {slot: getattr(eq, slot) for slot in EQUIPMENT_SLOTS}
            if catalog is not None:
                for name, value in derived_attributes(eq, catalog).items():
                    upd[f"attributes.{name}"] = value
    elif equipment is not None:
        _drop(cid, "equipment", "not an object")

    return cid, upd


def build_bulk_ops(patches: Any, catalog=None) -> list[UpdateOne]:
    """One UpdateOne per patch with something to set. Only a non-list is rejected."""
    if not isinstance(patches, list):
        raise InvalidRequest('Expected an array "characters"')
    ops = []
    for patch in patches:
        cid, upd = build_patch_update(patch, catalog)
        if upd:
            ops.append(UpdateOne({"id": cid}, {"$set": upd}))
    return ops


def build_formation_ops(formations: Any) -> list[UpdateOne]:
    if not isinstance(formations, list):
        raise InvalidRequest("Invalid format. Expected an array.")
    patches = []
    for entry in formations:
        if not isinstance(entry, dict):
            _drop("", "entry", "not an object")
            continue
        patches.append({"id": entry.get("id"), "formation": entry.get("formation")})
    return build_bulk_ops(patches)


def apply_character_patches(store, patches: Any) -> int:
    """Apply sparse patches; each document is updated atomically and
    independently. Unknown ids are no-ops. Returns the modified count."""
    ops = build_bulk_ops(patches, ItemCatalog(store.inventory))
    return store.characters.bulk_apply(ops)


def apply_formations(store, formations: Any) -> int:
    return store.characters.bulk_apply(build_formation_ops(formations))
