from dataclasses import dataclass, asdict
from typing import Any, ClassVar, Dict, Union

_BASE_FIELDS = ("id", "name", "quantity", "buy_price", "sell_price")


@dataclass(frozen=True)
class AbsoluteEffect:
    effect_type: str
    attribute: str
    value: int


@dataclass(frozen=True)
class RelativeEffect:
    effect_type: str
    attribute: str
    percentage: float


ConsumableEffect = Union[AbsoluteEffect, RelativeEffect]


def _present(data: Dict[str, Any], key: str) -> bool:
    return data.get(key) is not None


def effect_from_dict(data: Dict[str, Any]) -> ConsumableEffect:
    """Build a consumable effect. Exactly one of `value` / `percentage`."""
    if not isinstance(data, dict):
        raise ValueError("effect must be an object")
    has_value = _present(data, "value")
    has_pct = _present(data, "percentage")
    if has_value == has_pct:
        raise ValueError('effect must carry either "value" or "percentage", not both and not neither')
    effect_type = str(data.get("effect_type") or "").strip()
    attribute = str(data.get("attribute") or "").strip()
    if not effect_type or not attribute:
        raise ValueError("effect requires effect_type and attribute")
    if has_value:
        return AbsoluteEffect(effect_type, attribute, data["value"])
    return RelativeEffect(effect_type, attribute, data["percentage"])


@dataclass(frozen=True)
class _ItemBase:
    id: str
    name: str
    quantity: int
    buy_price: int
    sell_price: int

    kind: ClassVar[str] = ""

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["kind"] = self.kind
        return d


@dataclass(frozen=True)
class Weapon(_ItemBase):
    attack_power: int = 0

    kind: ClassVar[str] = "weapon"


@dataclass(frozen=True)
class Armor(_ItemBase):
    defense: int = 0
    magic_defense: int = 0

    kind: ClassVar[str] = "armor"


@dataclass(frozen=True)
class Consumable(_ItemBase):
    description: str = ""
    effect: ConsumableEffect | None = None

    kind: ClassVar[str] = "consumable"

    def to_dict(self) -> Dict[str, Any]:
        d = super().to_dict()
        d["effect"] = asdict(self.effect) if self.effect is not None else None
        return d


InventoryItem = Union[Weapon, Armor, Consumable]

ITEM_KINDS: Dict[str, type] = {cls.kind: cls for cls in (Weapon, Armor, Consumable)}

_KIND_FIELDS = {
    "weapon": ("attack_power",),
    "armor": ("defense", "magic_defense"),
    "consumable": ("description", "effect"),
}


def item_from_dict(data: Dict[str, Any]) -> InventoryItem:
    kind = data.get("kind")
    cls = ITEM_KINDS.get(kind)
    if cls is None:
        raise ValueError(f"Unknown item kind: {kind!r}")

    allowed = set(_BASE_FIELDS) | set(_KIND_FIELDS[kind]) | {"kind", "_id"}
    illegal = sorted(k for k in data if k not in allowed)
    if illegal:
        raise ValueError(f"Fields not legal for {kind}: {', '.join(illegal)}")
    missing = [k for k in _BASE_FIELDS + _KIND_FIELDS[kind] if k not in data]
    if missing:
        raise ValueError(f"Missing fields for {kind}: {', '.join(missing)}")

    quantity = int(data["quantity"])
    if quantity < 0:
        raise ValueError("quantity must be >= 0")

    base = dict(
        id=str(data["id"]),
        name=data["name"],
        quantity=quantity,
        buy_price=data["buy_price"],
        sell_price=data["sell_price"],
    )
    if cls is Weapon:
        return Weapon(**base, attack_power=data["attack_power"])
    if cls is Armor:
        return Armor(**base, defense=data["defense"], magic_defense=data["magic_defense"])
    return Consumable(
        **base,
        description=data["description"],
        effect=effect_from_dict(data["effect"]),
    )
