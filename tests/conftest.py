import logging
import pytest
from skilltree.engine import settings as settings_mod
from skilltree.engine.store import SkillTreeStore

@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    # never touch the real ~/.skilltree
    monkeypatch.setattr(settings_mod, "SETTINGS_PATH", tmp_path / "home" / ".skilltree" / "settings.json")
    yield
    pkg_logger = logging.getLogger("skilltree")
    pkg_logger.handlers.clear()
    pkg_logger.setLevel(logging.NOTSET)

@pytest.fixture
def store():
    return SkillTreeStore()

@pytest.fixture
def scenario(store):
    """Requirement -> Sequence -> [H1, H2]"""
    root = store.add_node("Requirement", None)
    seq = store.add_node("Sequence", root)
    h1 = store.add_node("Hit", seq)
    h2 = store.add_node("Hit", seq)
    store.rename_node(h1, "H1")
    store.rename_node(h2, "H2")
    return store, {"root": root, "seq": seq, "h1": h1, "h2": h2}

@pytest.fixture
def wide_store(store):
    """Requirement -> Parallel -> [Hit, Delay, Status, Sequence -> [Sound, Summon]]"""
    root = store.add_node("Requirement", None)
    par = store.add_node("Parallel", root)
    ids = {"root": root, "par": par}
    ids["hit"] = store.add_node("Hit", par)
    ids["delay"] = store.add_node("Delay", par)
    ids["status"] = store.add_node("Status", par)
    ids["seq"] = store.add_node("Sequence", par)
    ids["sound"] = store.add_node("Sound", ids["seq"])
    ids["summon"] = store.add_node("Summon", ids["seq"])
    return store, ids
