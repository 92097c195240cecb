from __future__ import annotations
from pathlib import Path
import json
from skilltree.engine.serializer import document_json_schema
from skilltree.engine.skill import SkillDefinition
from skilltree.engine.settings import Settings

def export_schemas(out_dir: Path) -> list[Path]:
    out_dir.mkdir(parents=True, exist_ok=True)
    schemas = {
        "ExecutionTree.schema.json": document_json_schema(),
        "SkillDefinition.schema.json": SkillDefinition.model_json_schema(),
        "Settings.schema.json": Settings.model_json_schema(),
    }
    written = []
    for name, schema in schemas.items():
        path = out_dir / name
        path.write_text(json.dumps(schema, indent=2), encoding="utf-8")
        written.append(path)
    return written

if __name__ == "__main__":
    root = Path(__file__).resolve().parents[3] / "docs" / "schemas"
    export_schemas(root)
    print(f"Exported schemas to {root}")
