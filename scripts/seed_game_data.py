import sys, os
# add project root (one level up from /scripts) to import path
sys.path.append(os.path.dirname(os.path.dirname(__file__)))

from db_mongo import MongoContext
from settings import get_settings
from server.src.modules.attribute_resolver import resolve
from server.src.modules.game_store import GameStore
from server.src.modules.item_catalog import ItemCatalog
from server.src.objects.characters import Character
from server.src.objects.items import item_from_dict
from server.src.objects.monsters import Monster

ITEMS = [
    {"id": "item_0001", "kind": "weapon", "name": "Dagger", "quantity": 2, "buy_price": 60, "sell_price": 30, "attack_power": 8},
    {"id": "item_0002", "kind": "weapon", "name": "Long Sword", "quantity": 1, "buy_price": 200, "sell_price": 100, "attack_power": 14},
    {"id": "item_0003", "kind": "weapon", "name": "Staff", "quantity": 1, "buy_price": 80, "sell_price": 40, "attack_power": 5},
    {"id": "item_0004", "kind": "armor", "name": "Leather Armor", "quantity": 2, "buy_price": 50, "sell_price": 25, "defense": 4, "magic_defense": 1},
    {"id": "item_0005", "kind": "armor", "name": "Cloth Robe", "quantity": 1, "buy_price": 40, "sell_price": 20, "defense": 2, "magic_defense": 5},
    {"id": "item_0006", "kind": "consumable", "name": "Potion", "quantity": 10, "buy_price": 50, "sell_price": 25,
     "description": "Restores 50 HP.", "effect": {"effect_type": "heal", "attribute": "vitality", "value": 50}},
    {"id": "item_0007", "kind": "consumable", "name": "Ether", "quantity": 3, "buy_price": 150, "sell_price": 75,
     "description": "Restores a quarter of MP.", "effect": {"effect_type": "restore", "attribute": "mana", "percentage": 25}},
]

CURE = {"name": "Cure", "description": "Restores HP split among the chosen allies.", "cost": 4,
        "effect": {"effect_type": "heal", "attribute": "vitality", "value": 30}}


def _hero(cid, name, image, vit, mp, stats, weapon="", armor="", spells=(), formation="vanguard"):
    strength, agility, energy, intellect, spirit = stats
    return {
        "id": cid, "name": name, "image": image,
        "attributes": {
            "vitality": vit, "vitality_current": vit, "mana": mp, "mana_current": mp,
            "strength": strength, "agility": agility, "energy": energy,
            "intellect": intellect, "spirit": spirit, "attack_extra": 0,
        },
        "equipment": {"weapon": weapon, "armor": armor, "accessory": ""},
        "formation": formation,
        "spells": list(spells),
    }


CHARACTERS = [
    _hero("pj_0001", "Luneth", "luneth.png", 35, 0, (12, 10, 9, 5, 5), weapon="item_0002", armor="item_0004"),
    _hero("pj_0002", "Arc", "arc.png", 28, 12, (6, 7, 6, 10, 12), weapon="item_0003", armor="item_0005",
          spells=[CURE], formation="rearguard"),
    _hero("pj_0003", "Refia", "refia.png", 30, 6, (9, 9, 8, 8, 8), weapon="item_0001", armor="item_0004"),
    _hero("pj_0004", "Ingus", "ingus.png", 40, 0, (13, 6, 10, 4, 6), weapon="item_0002"),
]

MONSTERS = [
    {"id": "mon_0001", "name": "Goblin", "image": "goblin.png", "level": 1, "vitality": 8,
     "strength": 4, "agility": 3, "energy": 2, "intellect": 1, "spirit": 1, "attack": 6, "defense": 1,
     "magic_defense": 0, "attack_extra": 0, "experience_reward": 6, "currency_reward": 6},
    {"id": "mon_0002", "name": "Carbuncle", "image": "carbuncle.png", "level": 3, "vitality": 40,
     "strength": 6, "agility": 8, "energy": 5, "intellect": 9, "spirit": 7, "attack": 9, "defense": 3,
     "magic_defense": 6, "attack_extra": 0, "experience_reward": 28, "currency_reward": 40},
    {"id": "mon_0003", "name": "Land Turtle", "image": "land_turtle.png", "level": 6, "vitality": 300,
     "strength": 20, "agility": 4, "energy": 18, "intellect": 3, "spirit": 5, "attack": 22, "defense": 12,
     "magic_defense": 4, "attack_extra": 0, "experience_reward": 240, "currency_reward": 600},
]


def seed(store: GameStore) -> None:
    for raw in ITEMS:
        item = item_from_dict(raw)
        store.inventory.collection.update_one({"id": item.id}, {"$set": item.to_dict()}, upsert=True)
    for raw in MONSTERS:
        monster = Monster.from_dict(raw)
        store.monsters.collection.update_one({"id": monster.id}, {"$set": monster.to_dict()}, upsert=True)
    catalog = ItemCatalog(store.inventory)
    for raw in CHARACTERS:
        character = resolve(Character.from_dict(raw), catalog)
        store.characters.collection.update_one({"id": character.id}, {"$set": character.to_dict()}, upsert=True)


if __name__ == "__main__":
    with MongoContext.from_settings(get_settings()) as ctx:
        ctx.ensure_indexes()
        seed(GameStore(ctx))
    print("seeded")
