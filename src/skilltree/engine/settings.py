from __future__ import annotations
from pathlib import Path
from typing import Optional
from pydantic import BaseModel, Field

SETTINGS_PATH = Path.home() / ".skilltree" / "settings.json"

class Settings(BaseModel):
    default_owner: str = "Octoio"
    rank_sep: int = Field(default=200, ge=0)  # px between layout ranks
    node_sep: int = Field(default=320, ge=0)  # px between sibling subtrees
    layout_on_import: bool = True
    indent: int = Field(default=2, ge=0)

def load_settings(path: Optional[Path] = None) -> Settings:
    path = path or SETTINGS_PATH
    if path.exists():
        return Settings.model_validate_json(path.read_text(encoding="utf-8"))
    path.parent.mkdir(parents=True, exist_ok=True)
    s = Settings()
    path.write_text(s.model_dump_json(indent=2), encoding="utf-8")
    return s

def save_settings(s: Settings, path: Optional[Path] = None) -> None:
    path = path or SETTINGS_PATH
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(s.model_dump_json(indent=2), encoding="utf-8")
