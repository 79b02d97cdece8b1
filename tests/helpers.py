from contextlib import asynccontextmanager

from httpx import ASGITransport, AsyncClient
from pymongo.errors import PyMongoError

from db_mongo import MongoContext
from main import app
from settings import get_settings
from server.src.objects.items import item_from_dict

MONGO = MongoContext.from_settings(get_settings()).open()
app.state.mongo = MONGO


@asynccontextmanager
async def game_client(raise_app_exceptions: bool = True):
    transport = ASGITransport(app=app, raise_app_exceptions=raise_app_exceptions)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


def make_character(cid: str, **overrides):
    attrs = {
        "vitality": 50, "vitality_current": 40, "mana": 20, "mana_current": 20,
        "strength": 10, "agility": 8, "energy": 7, "intellect": 6, "spirit": 5,
        "attack": 0, "defense": 0, "magic_defense": 0, "attack_extra": 0,
    }
    attrs.update(overrides.pop("attributes", {}))
    doc = {
        "id": cid,
        "name": overrides.pop("name", cid.title()),
        "image": f"{cid}.png",
        "attributes": attrs,
        "equipment": {"weapon": "", "armor": "", "accessory": ""},
        "experience_total": 0,
        "level": 1,
        "formation": "vanguard",
        "position": {"x": 0, "y": 0},
        "spells": [],
    }
    doc.update(overrides)
    return doc


def heal_spell(value: int = 10, cost: int = 4, attribute: str = "vitality"):
    return {
        "name": "Cure",
        "description": "Restores HP",
        "cost": cost,
        "effect": {"effect_type": "heal", "attribute": attribute, "value": value},
    }


def weapon(iid: str, attack_power: int):
    return {"id": iid, "kind": "weapon", "name": f"Weapon {iid}", "quantity": 1,
            "buy_price": 100, "sell_price": 50, "attack_power": attack_power}


def armor(iid: str, defense: int, magic_defense: int):
    return {"id": iid, "kind": "armor", "name": f"Armor {iid}", "quantity": 1,
            "buy_price": 100, "sell_price": 50, "defense": defense, "magic_defense": magic_defense}


def potion(iid: str, value: int = 50):
    return {"id": iid, "kind": "consumable", "name": "Potion", "quantity": 5,
            "buy_price": 50, "sell_price": 25, "description": "Restores HP",
            "effect": {"effect_type": "heal", "attribute": "vitality", "value": value}}


class StubCatalog:
    """In-memory stand-in for ItemCatalog."""

    def __init__(self, *docs):
        self.items = {d["id"]: item_from_dict(d) for d in docs}
        self.lookups = 0

    def get(self, item_id):
        self.lookups += 1
        return self.items.get(item_id) if item_id else None

    def get_of_kind(self, item_id, kind):
        item = self.get(item_id)
        if item is None or item.kind != kind:
            return None
        return item


def seed(store, characters=(), items=()):
    for doc in items:
        store.inventory.insert(doc)
    for doc in characters:
        store.characters.insert(doc)


class BrokenCollection:
    """Collection whose every call fails the way an unreachable server does."""

    def __init__(self, name: str):
        self.name = name

    def __getattr__(self, attr):
        def fail(*args, **kwargs):
            raise PyMongoError("connection refused")
        return fail
