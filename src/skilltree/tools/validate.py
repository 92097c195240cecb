from __future__ import annotations
from pathlib import Path
import json
from typing import List
import yaml
import typer
from skilltree.engine.errors import IOFailure, MalformedDocument
from skilltree.engine.files import iter_files, load_data
from skilltree.engine.graph import check_invariants
from skilltree.engine.skill import import_skill, looks_like_skill
from skilltree.engine.store import SkillTreeStore

app = typer.Typer(add_completion=False)

def load_document_file(store: SkillTreeStore, path: Path, layout: bool = False) -> None:
    """Load a tree document or a skill envelope (JSON/YAML) into ``store``."""
    try:
        data = load_data(path)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise MalformedDocument("$", f"cannot parse {path.name}: {e}") from e
    if looks_like_skill(data):
        import_skill(store, data, layout=layout)
    else:
        store.import_document(data, layout=layout)

def validate_document_file(path: Path) -> List[str]:
    """Error messages for one file; empty when it imports cleanly."""
    store = SkillTreeStore()
    try:
        load_document_file(store, path)
    except (MalformedDocument, IOFailure) as e:
        return [f"{path}: {e}"]
    return [f"{path}: {msg}" for msg in check_invariants(store.tree)]

def _is_document(path: Path) -> bool:
    try:
        data = load_data(path)
    except (IOFailure, json.JSONDecodeError, yaml.YAMLError):
        return True  # let validation report it
    return looks_like_skill(data) or (isinstance(data, dict) and "kind" in data)

@app.command("validate-files")
def validate_files(paths: List[Path] = typer.Argument(...)):
    ok = True
    for fp in paths:
        for msg in validate_document_file(fp):
            ok = False
            typer.echo(f"[ERROR] {msg}", err=True)
    if not ok:
        raise typer.Exit(code=1)
    typer.echo("Selected files validated successfully.")

@app.command("validate-folder")
def validate_folder(folder: Path = typer.Argument(...)):
    """Validate every skill or tree document under a folder, ignoring other entity files."""
    ok = True
    count = 0
    for fp in iter_files(folder):
        if not _is_document(fp):
            continue
        count += 1
        for msg in validate_document_file(fp):
            ok = False
            typer.echo(f"[ERROR] {msg}", err=True)
    if not ok:
        raise typer.Exit(code=1)
    typer.echo(f"{count} document(s) validated successfully.")

if __name__ == "__main__":
    app()
