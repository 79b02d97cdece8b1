from __future__ import annotations

from typing import Dict

from server.src.objects.characters import Character, Equipment
from server.src.objects.items import Armor, Weapon


def derived_attributes(equipment: Equipment, catalog) -> Dict[str, int]:
    """Attack from the weapon slot, defenses from the armor slot.

    A slot that is empty, points at a missing item, or at an item of the wrong
    kind contributes zero. The accessory slot is stored but not resolved.
    """
    out = {"attack": 0, "defense": 0, "magic_defense": 0}

    weapon = catalog.get_of_kind(equipment.weapon, "weapon") if equipment.weapon else None
    if isinstance(weapon, Weapon):
        out["attack"] = weapon.attack_power or 0

    armor = catalog.get_of_kind(equipment.armor, "armor") if equipment.armor else None
    if isinstance(armor, Armor):
        out["defense"] = armor.defense or 0
        out["magic_defense"] = armor.magic_defense or 0

    return out


def resolve(character: Character, catalog) -> Character:
    """Overwrite the derived attributes of `character` from its equipment.

    No persistence happens here; the caller saves the returned character.
    """
    for name, value in derived_attributes(character.equipment, catalog).items():
        setattr(character.attributes, name, value)
    return character.clamp_pools()
