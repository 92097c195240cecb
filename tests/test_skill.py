import pytest
from skilltree.engine.errors import MalformedDocument
from skilltree.engine.skill import SkillDefinition, export_skill, import_skill, looks_like_skill
from skilltree.engine.settings import Settings
from skilltree.engine.store import SkillTreeStore

def test_new_definition_defaults():
    d = SkillDefinition.new("Fireball")
    assert d.id == "Octoio:Skill:Fireball:1"
    assert d.type == "Skill"
    assert d.entity.icon_reference.id == "Octoio:Image:DefaultIcon:1"
    assert (d.entity.cast_distance.min, d.entity.cast_distance.max) == (1, 1)
    assert d.entity.target_type == "None"
    assert d.entity.quality == "None"

def test_export_fills_execution_root(scenario):
    store, _ = scenario
    data = export_skill(store, SkillDefinition.new("Cleave"))
    assert data["key"] == "Cleave"
    assert data["entity"]["execution_root"] == store.export_document()
    assert looks_like_skill(data)

def test_export_does_not_touch_definition(scenario):
    store, _ = scenario
    d = SkillDefinition.new("Cleave")
    export_skill(store, d)
    assert d.entity.execution_root is None

def test_import_round_trip(scenario):
    store, _ = scenario
    d = SkillDefinition.new("Cleave")
    d.entity.cooldown = 4
    d.entity.categories = ["Offense"]
    data = export_skill(store, d)
    other = SkillTreeStore()
    loaded = import_skill(other, data)
    assert loaded.entity.cooldown == 4
    assert other.export_document() == store.export_document()
    assert export_skill(other, loaded) == data

def test_bad_envelope_rejected(scenario):
    store, _ = scenario
    before = store.export_document()
    with pytest.raises(MalformedDocument):
        import_skill(store, {"type": "Skill", "entity": {"quality": "Mythic"}})
    with pytest.raises(MalformedDocument) as exc:
        import_skill(store, {"type": "Skill", "entity": {}})
    assert exc.value.path == "$.entity.execution_root"
    assert store.export_document() == before

def test_bad_tree_reports_envelope_path(scenario):
    store, _ = scenario
    before = store.export_document()
    data = {"type": "Skill", "entity": {"execution_root": {"kind": "Requirement", "children": [{"kind": "?"}]}}}
    with pytest.raises(MalformedDocument) as exc:
        import_skill(store, data)
    assert exc.value.path == "$.entity.execution_root.children[0]"
    assert store.export_document() == before

def test_store_uses_default_owner():
    store = SkillTreeStore(settings=Settings(default_owner="Guild"))
    assert store.new_skill("Dash").id == "Guild:Skill:Dash:1"
    assert store.new_skill("Dash").entity.icon_reference.owner == "Guild"
    assert store.entity_reference("Sound", "Step", 2).id == "Guild:Sound:Step:2"
