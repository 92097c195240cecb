from __future__ import annotations
import json
import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional
import yaml
from pydantic import ValidationError
from skilltree.engine.errors import IOFailure
from skilltree.engine.files import iter_files, load_data
from skilltree.engine.schema_models import EntityReference

logger = logging.getLogger(__name__)

ENTITY_KEYS = ("type", "owner", "key", "id")

class EntityCatalog:
    """
    Named game assets found on disk, grouped by entity type.
    Node payloads only store the references; nothing here is consulted when
    a tree is edited or imported.
    """

    def __init__(self, refs: Iterable[EntityReference] = ()):
        self._by_type: Dict[str, Dict[str, EntityReference]] = {}
        self.paths: Dict[str, Path] = {}
        for ref in refs:
            self.add(ref)

    @classmethod
    def scan(cls, folder: Path) -> EntityCatalog:
        catalog = cls()
        for fp in iter_files(Path(folder)):
            try:
                data = load_data(fp)
            except (IOFailure, json.JSONDecodeError, yaml.YAMLError) as e:
                logger.warning("skipping %s: %s", fp, e)
                continue
            if not isinstance(data, dict) or not all(k in data for k in ENTITY_KEYS):
                continue
            try:
                ref = EntityReference.model_validate({k: data[k] for k in (*ENTITY_KEYS, "version") if k in data})
            except ValidationError as e:
                logger.warning("skipping %s: not a valid entity reference (%s)", fp, e.errors()[0]["msg"])
                continue
            catalog.add(ref, fp)
        logger.info("catalog scan of %s found %d entities", folder, len(catalog))
        return catalog

    def add(self, ref: EntityReference, path: Optional[Path] = None) -> None:
        self._by_type.setdefault(ref.type, {})[ref.id] = ref
        if path is not None:
            self.paths[ref.id] = path

    def __len__(self) -> int:
        return sum(len(v) for v in self._by_type.values())

    def types(self) -> Dict[str, int]:
        return {t: len(refs) for t, refs in sorted(self._by_type.items())}

    def lookup(self, entity_type: str) -> List[EntityReference]:
        refs = self._by_type.get(entity_type, {}).values()
        return sorted(refs, key=lambda r: (r.key, r.version))

    def versions(self, entity_type: str, key: str) -> List[int]:
        return sorted({r.version for r in self.lookup(entity_type) if r.key == key})

    def resolve(self, entity_type: str, key: str, version: Optional[int] = None) -> Optional[EntityReference]:
        """Reference for a key; the highest available version when none is requested."""
        matches = [r for r in self.lookup(entity_type) if r.key == key]
        if not matches:
            return None
        if version is None:
            return max(matches, key=lambda r: r.version)
        return next((r for r in matches if r.version == version), None)
