"""
Canonical nested-tree document <-> flat node/edge graph.

Document shape: every node is an object carrying its ``kind``, its payload
fields and a ``children`` array in execution order. The top-level object is
the Requirement root.
"""
from __future__ import annotations
import json
import logging
from typing import Any, Dict, List, Optional, Tuple
from pydantic import TypeAdapter, ValidationError
from .errors import MalformedDocument
from .graph import Edge, Node, Position, Tree, edge_id_for, new_node_id
from .ordering import OrderingPolicy, ordered_children
from .schema_models import ActionNode, NODE_KINDS, PAYLOAD_TYPES

logger = logging.getLogger(__name__)

# placeholder grid for imported nodes; auto layout supplies real coordinates
IMPORT_X_STEP = 500
IMPORT_Y_STEP = 800

ActionNodeAdapter = TypeAdapter(ActionNode)

# -----------------------------
# Export
# -----------------------------

def export_node(tree: Tree, node_id: str, policy: Optional[OrderingPolicy] = None) -> Dict[str, Any]:
    nodes = tree.node_map()
    seen: set[str] = set()

    def emit(nid: str) -> Dict[str, Any]:
        seen.add(nid)
        out = nodes[nid].data.model_dump(mode="json")
        out["children"] = [emit(c) for c in ordered_children(tree, nid, policy) if c not in seen]
        return out

    return emit(node_id)

def export_tree(tree: Tree, policy: Optional[OrderingPolicy] = None) -> Optional[Dict[str, Any]]:
    """Nested document rooted at the Requirement node; None for a tree without a root."""
    root = tree.root()
    if root is None:
        if tree.nodes:
            logger.warning("export skipped: %d node(s) but no Requirement root", len(tree.nodes))
        return None
    return export_node(tree, root.id, policy)

def dumps(tree: Tree, indent: Optional[int] = 2, policy: Optional[OrderingPolicy] = None) -> str:
    return json.dumps(export_tree(tree, policy), indent=indent)

# -----------------------------
# Import
# -----------------------------

def _validate_node(data: Any, path: str, depth: int) -> Tuple[Any, List[Any]]:
    if not isinstance(data, dict):
        raise MalformedDocument(path, f"expected an object, got {type(data).__name__}")
    kind = data.get("kind")
    if kind is None:
        raise MalformedDocument(path, "missing 'kind'")
    if kind not in NODE_KINDS:
        raise MalformedDocument(path, f"unknown kind {kind!r}; expected one of {list(NODE_KINDS)}")
    if depth == 0 and kind != "Requirement":
        raise MalformedDocument(path, f"root must be a Requirement node, got {kind!r}")
    if depth > 0 and kind == "Requirement":
        raise MalformedDocument(path, "Requirement is only allowed at the root")
    children = data.get("children", [])
    if not isinstance(children, list):
        raise MalformedDocument(f"{path}.children", f"expected an array, got {type(children).__name__}")
    fields = {k: v for k, v in data.items() if k != "children"}
    try:
        payload = PAYLOAD_TYPES[kind].model_validate(fields)
    except ValidationError as e:
        raise MalformedDocument(path, str(e)) from e
    return payload, children

def import_document(data: Any) -> Tree:
    """
    Build a fresh Tree from a nested document. Nothing is returned unless the
    whole document validates, so callers can swap it in atomically.
    """
    tree = Tree()
    stack: List[Tuple[Any, str, Optional[str], int, int]] = [(data, "$", None, 0, 0)]
    while stack:
        raw, path, parent_id, index, depth = stack.pop()
        payload, children = _validate_node(raw, path, depth)
        nid = new_node_id()
        if parent_id is None:
            pos = Position(x=0, y=0)
        else:
            parent_pos = tree.get_node(parent_id).position
            pos = Position(x=parent_pos.x + index * IMPORT_X_STEP, y=parent_pos.y + IMPORT_Y_STEP)
        tree.nodes.append(Node(id=nid, data=payload, position=pos))
        if parent_id is not None:
            tree.edges.append(Edge(id=edge_id_for(parent_id, nid), source=parent_id, target=nid))
        # reversed so siblings are created, and their edges appended, in document order
        for i in reversed(range(len(children))):
            stack.append((children[i], f"{path}.children[{i}]", nid, i, depth + 1))
    return tree

def parse_json(text: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedDocument("$", f"invalid JSON: {e}") from e

def loads(text: str) -> Tree:
    return import_document(parse_json(text))

# -----------------------------
# Schema
# -----------------------------

def document_json_schema() -> Dict[str, Any]:
    """JSON schema of the nested document: the node union plus a recursive children array."""
    schema = ActionNodeAdapter.json_schema()
    defs = schema.get("$defs", {})
    for model in PAYLOAD_TYPES.values():
        node_def = defs.get(model.__name__)
        if node_def is None:
            continue
        node_def.setdefault("properties", {})["children"] = {
            "type": "array",
            "items": {"$ref": "#"},
            "default": [],
        }
    schema["title"] = "SkillExecutionTree"
    return schema
