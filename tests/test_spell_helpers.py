import pytest

from server.src.modules.errors import InvalidRequest, NotFound
from server.src.modules.spell_helpers import cast_spell, restore_pool, split_share
from server.src.objects.characters import Attributes
from tests.helpers import heal_spell, make_character, seed


def _party(store, caster_mana=20, spell=None, targets=()):
    caster = make_character("caster", attributes={"mana_current": caster_mana},
                            spells=[spell or heal_spell()])
    seed(store, characters=[caster, *targets])


def test_split_share_drops_remainder():
    assert split_share(10, 3) == 3
    assert split_share(9, 3) == 3
    assert split_share(2, 5) == 0


def test_split_share_rejects_zero_targets():
    with pytest.raises(InvalidRequest):
        split_share(10, 0)


def test_restore_pool_clamps_to_max():
    attrs = Attributes(vitality=50, vitality_current=48)
    assert restore_pool(attrs, "vitality", 10) == 50


def test_restore_pool_other_pool():
    attrs = Attributes(mana=30, mana_current=5)
    assert restore_pool(attrs, "mana", 10) == 15
    assert attrs.vitality_current == 0


def test_mana_cost_floors_at_zero(store):
    _party(store, caster_mana=10, spell=heal_spell(cost=12), targets=[make_character("t1")])
    result = cast_spell(store, "caster", 0, ["t1"])
    assert result.caster.attributes.mana_current == 0
    assert store.characters.find_by_id("caster")["attributes"]["mana_current"] == 0


def test_even_split_across_three_targets(store):
    targets = [make_character(t, attributes={"vitality": 50, "vitality_current": 40}) for t in ("t1", "t2", "t3")]
    _party(store, spell=heal_spell(value=10), targets=targets)

    result = cast_spell(store, "caster", 0, ["t1", "t2", "t3"])

    assert [t.attributes.vitality_current for t in result.targets] == [43, 43, 43]
    for tid in ("t1", "t2", "t3"):
        assert store.characters.find_by_id(tid)["attributes"]["vitality_current"] == 43
    assert result.caster.attributes.mana_current == 16


def test_heal_clamps_to_max(store):
    _party(store, spell=heal_spell(value=10),
           targets=[make_character("t1", attributes={"vitality": 50, "vitality_current": 48})])
    result = cast_spell(store, "caster", 0, ["t1"])
    assert result.targets[0].attributes.vitality_current == 50


def test_missing_targets_are_dropped(store):
    _party(store, spell=heal_spell(value=10), targets=[make_character("t1")])
    result = cast_spell(store, "caster", 0, ["t1", "ghost"])
    assert [t.id for t in result.targets] == ["t1"]
    # share still divides by the ids sent
    assert result.targets[0].attributes.vitality_current == 45


def test_caster_can_heal_itself(store):
    caster = make_character("caster", attributes={"vitality_current": 30}, spells=[heal_spell(value=10)])
    seed(store, characters=[caster])
    result = cast_spell(store, "caster", 0, ["caster"])
    saved = store.characters.find_by_id("caster")["attributes"]
    assert saved["vitality_current"] == 40
    assert saved["mana_current"] == 16
    assert result.targets[0] is result.caster


def test_mana_restoring_spell(store):
    spell = heal_spell(value=8, cost=0, attribute="mana")
    _party(store, spell=spell, targets=[make_character("t1", attributes={"mana": 20, "mana_current": 2})])
    result = cast_spell(store, "caster", 0, ["t1"])
    assert result.targets[0].attributes.mana_current == 10
    assert result.targets[0].attributes.vitality_current == 40


def test_unknown_caster(store):
    with pytest.raises(NotFound):
        cast_spell(store, "nobody", 0, ["t1"])


@pytest.mark.parametrize("index", [1, -1, "0", None, True])
def test_invalid_spell_index(store, index):
    _party(store, targets=[make_character("t1")])
    with pytest.raises(InvalidRequest):
        cast_spell(store, "caster", index, ["t1"])


@pytest.mark.parametrize("target_ids", [[], None, "t1", [3]])
def test_invalid_targets(store, target_ids):
    _party(store)
    with pytest.raises(InvalidRequest):
        cast_spell(store, "caster", 0, target_ids)
    assert store.characters.find_by_id("caster")["attributes"]["mana_current"] == 20


def test_effect_on_non_pool_is_rejected(store):
    _party(store, spell=heal_spell(attribute="strength"), targets=[make_character("t1")])
    with pytest.raises(InvalidRequest):
        cast_spell(store, "caster", 0, ["t1"])


def test_cast_keeps_edits_made_after_the_read(store, monkeypatch):
    _party(store, spell=heal_spell(value=10), targets=[make_character("t1")])
    read_many = store.characters.find_many

    def read_then_edit(ids):
        docs = read_many(ids)
        # another request lands between our read and our write
        store.characters.collection.update_one({"id": "t1"}, {"$set": {"attributes.strength": 99}})
        store.characters.collection.update_one({"id": "caster"}, {"$set": {"equipment.weapon": "w9"}})
        return docs

    monkeypatch.setattr(store.characters, "find_many", read_then_edit)
    cast_spell(store, "caster", 0, ["t1"])

    t1 = store.characters.find_by_id("t1")
    assert t1["attributes"]["strength"] == 99
    assert t1["attributes"]["vitality_current"] == 50
    caster = store.characters.find_by_id("caster")
    assert caster["equipment"]["weapon"] == "w9"
    assert caster["attributes"]["mana_current"] == 16
