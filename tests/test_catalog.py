import json
import logging
import pytest
from skilltree.engine.catalog import EntityCatalog

def _entity(owner, etype, key, version=1, **extra):
    return {"id": f"{owner}:{etype}:{key}:{version}", "owner": owner, "type": etype,
            "key": key, "version": version, "entity": extra}

@pytest.fixture
def asset_dir(tmp_path):
    root = tmp_path / "assets"
    (root / "sounds").mkdir(parents=True)
    (root / "characters").mkdir()
    (root / "sounds" / "chime_v1.json").write_text(json.dumps(_entity("Octoio", "Sound", "Chime")), encoding="utf-8")
    (root / "sounds" / "chime_v3.json").write_text(json.dumps(_entity("Octoio", "Sound", "Chime", 3)), encoding="utf-8")
    (root / "sounds" / "boom.json").write_text(json.dumps(_entity("Octoio", "Sound", "Boom", 2)), encoding="utf-8")
    (root / "characters" / "slime.yaml").write_text(
        "id: Octoio:Character:Slime:1\nowner: Octoio\ntype: Character\nkey: Slime\nversion: 1\n", encoding="utf-8")
    (root / "notes.json").write_text(json.dumps({"title": "not an entity"}), encoding="utf-8")
    (root / "broken.json").write_text("{oops", encoding="utf-8")
    (root / "odd.json").write_text(json.dumps(_entity("Octoio", "Spaceship", "X")), encoding="utf-8")
    (root / "readme.txt").write_text("ignored", encoding="utf-8")
    return root

def test_scan_groups_by_type(asset_dir, caplog):
    with caplog.at_level(logging.WARNING, logger="skilltree.engine.catalog"):
        catalog = EntityCatalog.scan(asset_dir)
    assert catalog.types() == {"Character": 1, "Sound": 3}
    assert len(catalog) == 4
    assert "broken.json" in caplog.text
    assert "odd.json" in caplog.text

def test_lookup_and_versions(asset_dir):
    catalog = EntityCatalog.scan(asset_dir)
    assert [r.key for r in catalog.lookup("Sound")] == ["Boom", "Chime", "Chime"]
    assert catalog.versions("Sound", "Chime") == [1, 3]
    assert catalog.lookup("Weapon") == []

def test_resolve(asset_dir):
    catalog = EntityCatalog.scan(asset_dir)
    assert catalog.resolve("Sound", "Chime").version == 3
    assert catalog.resolve("Sound", "Chime", 1).id == "Octoio:Sound:Chime:1"
    assert catalog.resolve("Sound", "Chime", 2) is None
    assert catalog.resolve("Character", "Slime").type == "Character"
    assert catalog.resolve("Sound", "Missing") is None

def test_paths_recorded(asset_dir):
    catalog = EntityCatalog.scan(asset_dir)
    assert catalog.paths["Octoio:Character:Slime:1"].name == "slime.yaml"

def test_missing_folder(tmp_path):
    assert len(EntityCatalog.scan(tmp_path / "nothing")) == 0
