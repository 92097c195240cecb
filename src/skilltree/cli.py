import json
import logging
from pathlib import Path
from typing import List, Optional
import typer
from skilltree.engine.catalog import EntityCatalog
from skilltree.engine.errors import IOFailure, MalformedDocument
from skilltree.engine.files import write_text
from skilltree.engine.settings import load_settings
from skilltree.engine.store import SkillTreeStore
from skilltree.logging_config import setup_logger
from skilltree.tools.validate import load_document_file, validate_document_file

app = typer.Typer(add_completion=False)

@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output to stderr")):
    # stdout carries command output only; the quiet default keeps it parseable
    setup_logger(level=logging.DEBUG if verbose else logging.WARNING)

def _open(path: Path, layout: bool = False) -> SkillTreeStore:
    store = SkillTreeStore(settings=load_settings())
    try:
        load_document_file(store, path, layout=layout)
    except (MalformedDocument, IOFailure) as e:
        typer.echo(f"[ERROR] {path}: {e}", err=True)
        raise typer.Exit(code=1)
    return store

def _emit(text: str, out: Optional[Path]) -> None:
    if out is None:
        typer.echo(text)
        return
    try:
        write_text(out, text + "\n")
    except IOFailure as e:
        typer.echo(f"[ERROR] {e}", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"Wrote {out}")

@app.command()
def show(file: Path):
    """Print a document as an indented outline in execution order."""
    store = _open(file)
    typer.echo(store.render_outline())

@app.command()
def layout(file: Path, out: Optional[Path] = typer.Option(None, "--out")):
    """Auto-layout a document and report the node positions."""
    store = _open(file, layout=True)
    rows = [{"id": n.id, "kind": n.kind, "x": int(n.position.x), "y": int(n.position.y)} for n in store.preorder()]
    _emit(json.dumps(rows, indent=2), out)

@app.command()
def validate(files: List[Path] = typer.Argument(...)):
    ok = True
    for fp in files:
        errors = validate_document_file(fp)
        for msg in errors:
            typer.echo(f"[ERROR] {msg}", err=True)
        if errors:
            ok = False
        else:
            typer.echo(f"[OK] {fp}")
    if not ok:
        raise typer.Exit(code=1)

@app.command("format")
def format_document(file: Path, out: Optional[Path] = typer.Option(None, "--out")):
    """Rewrite a tree document in canonical form."""
    store = _open(file)
    _emit(store.export_json(), out)

@app.command()
def scan(folder: Path):
    """Count the entity files of each type under a folder."""
    catalog = EntityCatalog.scan(folder)
    counts = catalog.types()
    if not counts:
        typer.echo("No entities found.")
        return
    for entity_type, count in counts.items():
        typer.echo(f"{entity_type}: {count}")

@app.command("export-schemas")
def export_schemas_cmd(out: Path = typer.Option(Path("docs/schemas"), "--out")):
    from skilltree.tools.export_schemas import export_schemas
    export_schemas(out)
    typer.echo(f"Exported schemas to {out}")

if __name__ == "__main__":
    app()
