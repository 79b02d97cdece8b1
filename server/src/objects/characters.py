from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List

FORMATIONS = ("vanguard", "rearguard")
EQUIPMENT_SLOTS = ("weapon", "armor", "accessory")
DERIVED_ATTRIBUTES = ("attack", "defense", "magic_defense")
CURRENT_POOLS = ("vitality_current", "mana_current")

# pool name -> (current field, max field)
RESOURCE_POOLS: Dict[str, tuple[str, str]] = {
    "vitality": ("vitality_current", "vitality"),
    "mana": ("mana_current", "mana"),
}


@dataclass
class Attributes:
    vitality: int = 0
    vitality_current: int = 0
    mana: int = 0
    mana_current: int = 0
    strength: int = 0
    agility: int = 0
    energy: int = 0
    intellect: int = 0
    spirit: int = 0
    attack: int = 0
    defense: int = 0
    magic_defense: int = 0
    attack_extra: int = 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any] | None):
        data = data or {}
        return cls(**{k: data[k] for k in cls.__dataclass_fields__ if data.get(k) is not None})


@dataclass
class Equipment:
    weapon: str = ""
    armor: str = ""
    accessory: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any] | None):
        data = data or {}
        return cls(**{slot: str(data.get(slot) or "") for slot in EQUIPMENT_SLOTS})


@dataclass
class Position:
    x: int = 0
    y: int = 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any] | None):
        data = data or {}
        return cls(x=int(data.get("x") or 0), y=int(data.get("y") or 0))


@dataclass
class SpellEffect:
    effect_type: str
    value: int
    attribute: str = "vitality"


@dataclass
class CharacterSpell:
    name: str
    description: str
    cost: int
    effect: SpellEffect

    @classmethod
    def from_dict(cls, data: Dict[str, Any]):
        eff = dict(data.get("effect") or {})
        return cls(
            name=data.get("name", ""),
            description=data.get("description", ""),
            cost=int(data.get("cost") or 0),
            effect=SpellEffect(
                effect_type=eff.get("effect_type", "heal"),
                value=int(eff.get("value") or 0),
                attribute=eff.get("attribute") or "vitality",
            ),
        )


@dataclass
class Character:
    id: str
    name: str
    image: str
    attributes: Attributes = field(default_factory=Attributes)
    equipment: Equipment = field(default_factory=Equipment)
    experience_total: int = 0
    level: int = 1
    formation: str = "vanguard"
    position: Position = field(default_factory=Position)
    spells: List[CharacterSpell] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]):
        return cls(
            id=str(data["id"]),
            name=data.get("name", ""),
            image=data.get("image", ""),
            attributes=Attributes.from_dict(data.get("attributes")),
            equipment=Equipment.from_dict(data.get("equipment")),
            experience_total=max(0, int(data.get("experience_total") or 0)),
            level=max(1, int(data.get("level") or 1)),
            formation=data.get("formation") or "vanguard",
            position=Position.from_dict(data.get("position")),
            spells=[CharacterSpell.from_dict(s) for s in (data.get("spells") or [])],
        )

    def clamp_pools(self) -> "Character":
        """Keep every current pool within [0, max]."""
        attrs = self.attributes
        for current, maximum in RESOURCE_POOLS.values():
            cur = getattr(attrs, current)
            setattr(attrs, current, max(0, min(cur, getattr(attrs, maximum))))
        return self
