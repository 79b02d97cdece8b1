from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List

from server.src.modules.errors import InvalidRequest, NotFound
from server.src.modules.game_store import GameStore
from server.src.modules.logging_helpers import logger, write_audit
from server.src.objects.characters import RESOURCE_POOLS, Attributes, Character, CharacterSpell


@dataclass
class CastResult:
    caster: Character
    targets: List[Character]

    def to_dict(self) -> dict[str, Any]:
        return {
            "caster": self.caster.to_dict(),
            "targets": [t.to_dict() for t in self.targets],
        }


def deduct_cost(attrs: Attributes, cost: int) -> int:
    attrs.mana_current = max(0, attrs.mana_current - cost)
    return attrs.mana_current


def split_share(total: int, target_count: int) -> int:
    """Even integer share per target; the remainder is dropped."""
    if target_count <= 0:
        raise InvalidRequest("targetIds must not be empty")
    return total // target_count


def restore_pool(attrs: Attributes, pool: str, amount: int) -> int:
    """Add `amount` to the pool's current value, clamped to [0, max]."""
    current_field, max_field = RESOURCE_POOLS[pool]
    current = getattr(attrs, current_field)
    new_value = max(0, min(current + amount, getattr(attrs, max_field)))
    setattr(attrs, current_field, new_value)
    return new_value


def _select_spell(caster: Character, spell_index: Any) -> CharacterSpell:
    if not isinstance(spell_index, int) or isinstance(spell_index, bool):
        raise InvalidRequest("Spell does not exist")
    if spell_index < 0 or spell_index >= len(caster.spells):
        raise InvalidRequest("Spell does not exist")
    return caster.spells[spell_index]


def _validate_targets(target_ids: Any) -> list[str]:
    if not isinstance(target_ids, list) or not target_ids:
        raise InvalidRequest("targetIds must be a non-empty array")
    if not all(isinstance(t, str) and t for t in target_ids):
        raise InvalidRequest("targetIds must contain character ids")
    return target_ids


def cast_spell(store: GameStore, caster_id: str, spell_index: Any, target_ids: Any) -> CastResult:
    """Spend the caster's mana and split the spell's effect across targets.

    The caster is loaded first and saved last. Targets that do not exist are
    left out of the result.
    """
    doc = store.characters.find_by_id(caster_id)
    if not doc:
        raise NotFound("Caster not found")
    caster = Character.from_dict(doc)

    spell = _select_spell(caster, spell_index)
    target_ids = _validate_targets(target_ids)
    pool = spell.effect.attribute
    if pool not in RESOURCE_POOLS:
        raise InvalidRequest(f"Spell effect cannot restore {pool!r}")

    deduct_cost(caster.attributes, spell.cost)
    share = split_share(spell.effect.value, len(target_ids))

    current_field = RESOURCE_POOLS[pool][0]
    current_path = f"attributes.{current_field}"
    caster_fields = {"attributes.mana_current": caster.attributes.mana_current}

    targets: List[Character] = []
    found = {d["id"]: d for d in store.characters.find_many(target_ids)}
    for tid in dict.fromkeys(target_ids):
        tdoc = found.get(tid)
        if tdoc is None:
            continue
        if tdoc["id"] == caster.id:
            # apply to the in-memory caster so the final write keeps it
            restore_pool(caster.attributes, pool, share)
            caster_fields[current_path] = getattr(caster.attributes, current_field)
            targets.append(caster)
            continue
        target = Character.from_dict(tdoc)
        restore_pool(target.attributes, pool, share)
        # only the restored pool is written; other fields may have moved since the read
        store.characters.set_fields(target.id, {current_path: getattr(target.attributes, current_field)})
        targets.append(target)

    store.characters.set_fields(caster.id, caster_fields)

    logger.info(
        "Cast %r by %s: cost=%s share=%s pool=%s targets=%s",
        spell.name, caster.id, spell.cost, share, pool, [t.id for t in targets],
    )
    write_audit(store, "cast", caster.id, {"spell": spell.name, "target_ids": target_ids},
                {"share": share, "mana_current": caster.attributes.mana_current})
    return CastResult(caster=caster, targets=targets)
