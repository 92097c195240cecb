from __future__ import annotations
from typing import List, Optional
from pydantic import BaseModel
from .graph import Node, Tree
from .ordering import OrderingPolicy, ordered_children

def _ref_key(ref) -> str:
    return ref.key if ref is not None and ref.key else "-"

def describe(data: BaseModel) -> str:
    """One-line summary of a payload, e.g. ``Damage -> Enemy (Circle)``."""
    kind = data.kind
    if kind == "Requirement":
        return f"{data.operator}, {len(data.requirements)} clause(s)"
    if kind in ("Sequence", "Parallel"):
        return f"x{data.loop}"
    if kind == "Hit":
        return f"{data.hit_type} -> {data.target} ({data.target_mechanic.type})"
    if kind == "Status":
        return f"{_ref_key(data.status)} -> {data.target} ({data.target_mechanic.type})"
    if kind == "Sound":
        return _ref_key(data.sound)
    if kind == "Summon":
        off = data.position_offset
        return f"{_ref_key(data.summon_entity)} at ({off.x:g}, {off.y:g}, {off.z:g})"
    if kind == "Delay":
        return f"{data.delay:g}s"
    if kind == "Animation":
        return f"{len(data.animations)} clip(s), {data.duration:g}s"
    return ""

def preorder(tree: Tree, policy: Optional[OrderingPolicy] = None) -> List[Node]:
    """Nodes reachable from the root in execution (document) order."""
    root = tree.root()
    if root is None:
        return []
    nodes = tree.node_map()
    out: List[Node] = []
    seen: set[str] = set()
    stack = [root.id]
    while stack:
        nid = stack.pop()
        if nid in seen:
            continue
        seen.add(nid)
        out.append(nodes[nid])
        stack.extend(reversed(ordered_children(tree, nid, policy)))
    return out

def render_outline(tree: Tree, policy: Optional[OrderingPolicy] = None) -> str:
    root = tree.root()
    if root is None:
        return "(empty)"
    lines: List[str] = []
    stack = [(root.id, 0)]
    nodes = tree.node_map()
    seen: set[str] = set()
    while stack:
        nid, depth = stack.pop()
        if nid in seen:
            continue
        seen.add(nid)
        data = nodes[nid].data
        label = f"{data.kind}: {data.name}" if data.name else data.kind
        detail = describe(data)
        lines.append("  " * depth + f"- {label}" + (f" [{detail}]" if detail else ""))
        for child in reversed(ordered_children(tree, nid, policy)):
            stack.append((child, depth + 1))
    return "\n".join(lines)
