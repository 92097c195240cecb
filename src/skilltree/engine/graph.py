from __future__ import annotations
from typing import Dict, List, Optional, Set
from uuid import uuid4
from pydantic import BaseModel, Field
from .schema_models import ActionNode

def new_node_id() -> str:
    return f"node_{uuid4().hex[:9]}"

def edge_id_for(source: str, target: str) -> str:
    return f"e{source}-{target}"

class Position(BaseModel):
    x: float = 0.0
    y: float = 0.0

class Node(BaseModel):
    id: str
    data: ActionNode
    # presentation state; x doubles as the sibling-order key
    position: Position = Field(default_factory=Position)

    @property
    def kind(self) -> str:
        return self.data.kind

class Edge(BaseModel):
    id: str
    source: str
    target: str

class Tree(BaseModel):
    """
    Working set of the editor: a flat node/edge collection that the store
    keeps shaped as a single rooted tree.
    """
    nodes: List[Node] = Field(default_factory=list)
    edges: List[Edge] = Field(default_factory=list)

    def node_map(self) -> Dict[str, Node]:
        return {n.id: n for n in self.nodes}

    def get_node(self, node_id: str) -> Optional[Node]:
        return next((n for n in self.nodes if n.id == node_id), None)

    def has_node(self, node_id: str) -> bool:
        return any(n.id == node_id for n in self.nodes)

    def root(self) -> Optional[Node]:
        targets = {e.target for e in self.edges}
        return next((n for n in self.nodes if n.kind == "Requirement" and n.id not in targets), None)

    def parent_edge(self, node_id: str) -> Optional[Edge]:
        return next((e for e in self.edges if e.target == node_id), None)

    def parent_of(self, node_id: str) -> Optional[str]:
        e = self.parent_edge(node_id)
        return e.source if e else None

    def child_edges(self, parent_id: str) -> List[Edge]:
        # edge-list order; callers wanting execution order go through an OrderingPolicy
        return [e for e in self.edges if e.source == parent_id]

    def subtree_ids(self, node_id: str) -> Set[str]:
        out: Set[str] = set()
        stack = [node_id]
        while stack:
            cur = stack.pop()
            if cur in out:
                continue
            out.add(cur)
            stack.extend(e.target for e in self.edges if e.source == cur)
        return out

    def copy_tree(self) -> Tree:
        return self.model_copy(deep=True)

def check_invariants(tree: Tree) -> list[str]:
    """Return one message per violated tree invariant; empty when the tree is valid."""
    errs: list[str] = []
    if not tree.nodes:
        if tree.edges:
            errs.append(f"empty tree has {len(tree.edges)} dangling edge(s)")
        return errs

    ids = [n.id for n in tree.nodes]
    if len(set(ids)) != len(ids):
        errs.append("duplicate node ids")
    known = set(ids)

    requirement_ids = [n.id for n in tree.nodes if n.kind == "Requirement"]
    if len(requirement_ids) != 1:
        errs.append(f"expected exactly one Requirement node, found {len(requirement_ids)}")

    incoming: Dict[str, int] = {nid: 0 for nid in ids}
    for e in tree.edges:
        if e.source not in known or e.target not in known:
            errs.append(f"edge {e.id} references a missing node")
            continue
        incoming[e.target] += 1

    for rid in requirement_ids:
        if incoming.get(rid, 0) != 0:
            errs.append(f"root {rid} has an incoming edge")
    for nid, count in incoming.items():
        if nid in requirement_ids:
            continue
        if count != 1:
            errs.append(f"node {nid} has {count} parents")

    if len(requirement_ids) == 1:
        reachable = tree.subtree_ids(requirement_ids[0])
        orphans = known - reachable
        if orphans:
            errs.append(f"nodes not reachable from the root (orphaned or cyclic): {sorted(orphans)}")
    return errs
