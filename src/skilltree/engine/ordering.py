"""
Sibling ordering for the execution tree.

Children carry no explicit index. The default policy reads a parent's
children left to right by the x coordinate of each child on the canvas;
siblings sharing the same x fall back to edge insertion order (the edge's
slot in Tree.edges). Reordering exchanges the complete sort key of two
siblings, x and edge slot, so the swap is visible even between tied nodes
and applying it twice restores the original order.
"""
from __future__ import annotations
import logging
from typing import Dict, List, Literal, Optional, Protocol, runtime_checkable
from .graph import Edge, Tree

logger = logging.getLogger(__name__)

Direction = Literal["left", "right"]

# horizontal step used when a node must become the rightmost sibling
SIBLING_STEP = 250

@runtime_checkable
class OrderingPolicy(Protocol):
    def ordered_child_edges(self, tree: Tree, parent_id: str) -> List[Edge]: ...
    def exchange(self, tree: Tree, first_id: str, second_id: str) -> None: ...
    def move_to_end(self, tree: Tree, node_id: str) -> None: ...

def _swap_edge_slots(tree: Tree, first_id: str, second_id: str) -> None:
    slots = {e.target: i for i, e in enumerate(tree.edges)}
    i, j = slots.get(first_id), slots.get(second_id)
    if i is None or j is None:
        return
    tree.edges[i], tree.edges[j] = tree.edges[j], tree.edges[i]

def _move_edge_to_end(tree: Tree, node_id: str) -> None:
    edge = tree.parent_edge(node_id)
    if edge is None:
        return
    tree.edges.remove(edge)
    tree.edges.append(edge)

class PositionOrdering:
    """Order by position.x, ties broken by edge insertion order."""

    def ordered_child_edges(self, tree: Tree, parent_id: str) -> List[Edge]:
        nodes = tree.node_map()
        keyed = []
        for slot, e in enumerate(tree.edges):
            if e.source != parent_id:
                continue
            child = nodes.get(e.target)
            if child is None:
                continue
            keyed.append(((child.position.x, slot), e))
        keyed.sort(key=lambda pair: pair[0])
        return [e for _, e in keyed]

    def exchange(self, tree: Tree, first_id: str, second_id: str) -> None:
        a, b = tree.get_node(first_id), tree.get_node(second_id)
        if a is None or b is None:
            return
        a.position.x, b.position.x = b.position.x, a.position.x
        _swap_edge_slots(tree, first_id, second_id)

    def move_to_end(self, tree: Tree, node_id: str) -> None:
        node = tree.get_node(node_id)
        parent_id = tree.parent_of(node_id)
        if node is None or parent_id is None:
            return
        nodes = tree.node_map()
        xs = [nodes[e.target].position.x for e in tree.child_edges(parent_id)
              if e.target != node_id and e.target in nodes]
        if xs:
            node.position.x = max(node.position.x, max(xs) + SIBLING_STEP)
        _move_edge_to_end(tree, node_id)

class InsertionOrdering:
    """
    Order by edge slot only; canvas coordinates are ignored. Useful for
    headless editing where nodes never get meaningful positions.
    """

    def ordered_child_edges(self, tree: Tree, parent_id: str) -> List[Edge]:
        known = {n.id for n in tree.nodes}
        return [e for e in tree.edges if e.source == parent_id and e.target in known]

    def exchange(self, tree: Tree, first_id: str, second_id: str) -> None:
        _swap_edge_slots(tree, first_id, second_id)

    def move_to_end(self, tree: Tree, node_id: str) -> None:
        _move_edge_to_end(tree, node_id)

DEFAULT_ORDERING = PositionOrdering()

def ordered_children(tree: Tree, parent_id: str, policy: Optional[OrderingPolicy] = None) -> List[str]:
    policy = policy or DEFAULT_ORDERING
    return [e.target for e in policy.ordered_child_edges(tree, parent_id)]

def sibling_orders(tree: Tree, policy: Optional[OrderingPolicy] = None) -> Dict[str, List[str]]:
    """Ordered child ids for every node that has children."""
    policy = policy or DEFAULT_ORDERING
    parents = []
    for e in tree.edges:
        if e.source not in parents:
            parents.append(e.source)
    return {pid: ordered_children(tree, pid, policy) for pid in parents}

def reorder_node(tree: Tree, node_id: str, direction: Direction,
                 policy: Optional[OrderingPolicy] = None) -> bool:
    """
    Swap a node with its immediate left or right sibling. Returns False
    (and changes nothing) for unknown or parentless nodes, an unknown
    direction, or a move past either end of the sibling list.
    """
    policy = policy or DEFAULT_ORDERING
    parent_id = tree.parent_of(node_id)
    if parent_id is None or not tree.has_node(node_id):
        logger.debug("reorder %s ignored: no such child node", node_id)
        return False
    if direction not in ("left", "right"):
        logger.debug("reorder %s ignored: bad direction %r", node_id, direction)
        return False
    siblings = ordered_children(tree, parent_id, policy)
    idx = siblings.index(node_id)
    swap_idx = idx - 1 if direction == "left" else idx + 1
    if swap_idx < 0 or swap_idx >= len(siblings):
        return False
    policy.exchange(tree, node_id, siblings[swap_idx])
    logger.debug("reorder %s %s: swapped with %s", node_id, direction, siblings[swap_idx])
    return True
