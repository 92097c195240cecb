from __future__ import annotations
import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Union
import yaml
from .errors import IOFailure

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

def read_text(path: PathLike) -> str:
    p = Path(path)
    try:
        return p.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.error("read failed for %s: %s", p, e)
        raise IOFailure(str(p), "read", str(e)) from e

def write_text(path: PathLike, text: str) -> None:
    p = Path(path)
    try:
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(text, encoding="utf-8")
    except OSError as e:
        logger.error("write failed for %s: %s", p, e)
        raise IOFailure(str(p), "write", str(e)) from e

async def read_text_async(path: PathLike) -> str:
    return await asyncio.to_thread(read_text, path)

async def write_text_async(path: PathLike, text: str) -> None:
    await asyncio.to_thread(write_text, path, text)

def load_data(path: PathLike) -> Any:
    """Parsed JSON or YAML by file suffix. Parse errors propagate to the caller."""
    p = Path(path)
    text = read_text(p)
    if p.suffix.lower() in (".yaml", ".yml"):
        return yaml.safe_load(text)
    return json.loads(text)

def iter_files(root: Path, exts=(".json", ".yaml", ".yml")):
    if not root.exists():
        return
    for p in sorted(root.rglob("*")):
        if p.is_file() and p.suffix.lower() in exts:
            yield p
