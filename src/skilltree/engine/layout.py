"""
Layered top-to-bottom auto layout for the execution tree.

Phases:
  1. Order capture: each parent's children are read in their current
     sibling order and registered as increasing edge weights (1, 2, 3, ...).
  2. Graph build: a networkx DiGraph of laid-out nodes; edges that point at
     missing nodes, add a second parent or close a cycle are skipped.
  3. Rank assignment: depth from the nearest root (roots on rank 0).
  4. Coordinate assignment: every subtree owns a horizontal span wide enough
     for its node and its children; children are packed left to right in
     weight order inside the parent's span with node_sep between spans, and
     the parent is centred over its span. Ranks are stacked with rank_sep
     between the tallest boxes of consecutive ranks.

Solver centres are converted to top-left corners and rounded to integer
pixels. The pass is a pure function: it returns new Node objects and never
touches edges, ids or payload data.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

import networkx as nx

from .errors import LayoutDegenerate
from .graph import Edge, Node, Position, Tree
from .ordering import DEFAULT_ORDERING, OrderingPolicy

logger = logging.getLogger(__name__)

Size = Tuple[float, float]
SizeHints = Mapping[str, Size]
LayoutFn = Callable[..., Dict[str, Position]]

DEFAULT_SIZE: Size = (200, 100)
KIND_SIZES: Dict[str, Size] = {
    "Sequence": (280, 150),
    "Parallel": (280, 150),
    "Hit": (320, 250),
    "Status": (320, 250),
}

@dataclass
class LayoutOptions:
    rank_sep: float = 200
    node_sep: float = 320
    default_size: Size = DEFAULT_SIZE
    kind_sizes: Dict[str, Size] = field(default_factory=lambda: dict(KIND_SIZES))

    @classmethod
    def from_settings(cls, settings) -> LayoutOptions:
        return cls(rank_sep=settings.rank_sep, node_sep=settings.node_sep)

def node_size(node: Node, options: LayoutOptions, size_hints: Optional[SizeHints] = None) -> Size:
    """Measured canvas size when known, otherwise the size class of the node kind."""
    if size_hints:
        hint = size_hints.get(node.id)
        if hint and hint[0] > 0 and hint[1] > 0:
            return (float(hint[0]), float(hint[1]))
    w, h = options.kind_sizes.get(node.kind, options.default_size)
    return (float(w), float(h))

def _skip(edge: Edge, reason: str) -> None:
    logger.warning("layout: %s", LayoutDegenerate(edge.id, reason))

def build_layout_graph(nodes: Sequence[Node], edges: Sequence[Edge],
                       options: LayoutOptions,
                       size_hints: Optional[SizeHints] = None,
                       policy: Optional[OrderingPolicy] = None) -> nx.DiGraph:
    """DiGraph of the drawable forest with per-node sizes and per-edge order weights."""
    policy = policy or DEFAULT_ORDERING
    g = nx.DiGraph()
    for n in nodes:
        w, h = node_size(n, options, size_hints)
        g.add_node(n.id, width=w, height=h)

    accepted: set[str] = set()
    for e in edges:
        if e.source not in g or e.target not in g:
            _skip(e, "references a missing node")
            continue
        if e.source == e.target:
            _skip(e, "self loop")
            continue
        if g.in_degree(e.target) > 0:
            _skip(e, f"second parent for {e.target}")
            continue
        if nx.has_path(g, e.target, e.source):
            _skip(e, "closes a cycle")
            continue
        g.add_edge(e.source, e.target)
        accepted.add(e.id)

    # pre-layout sibling order becomes the edge weight
    snapshot = Tree.model_construct(nodes=list(nodes), edges=list(edges))
    for parent_id in list(g.nodes):
        rank = 0
        for e in policy.ordered_child_edges(snapshot, parent_id):
            if e.id in accepted and g.has_edge(e.source, e.target):
                rank += 1
                g.edges[e.source, e.target]["weight"] = rank
    return g

def _ordered_successors(g: nx.DiGraph, node_id: str) -> List[str]:
    return sorted(g.successors(node_id), key=lambda c: g.edges[node_id, c].get("weight", 0))

def layout_positions(nodes: Sequence[Node], edges: Sequence[Edge],
                     size_hints: Optional[SizeHints] = None,
                     options: Optional[LayoutOptions] = None,
                     policy: Optional[OrderingPolicy] = None) -> Dict[str, Position]:
    """Top-left position for every node id."""
    if not nodes:
        return {}
    options = options or LayoutOptions()
    g = build_layout_graph(nodes, edges, options, size_hints, policy)

    roots = [n.id for n in nodes if g.in_degree(n.id) == 0]

    # ranks and per-rank heights
    depth: Dict[str, int] = {}
    order: List[str] = []
    for r in roots:
        stack = [(r, 0)]
        while stack:
            nid, d = stack.pop()
            depth[nid] = d
            order.append(nid)
            for c in reversed(_ordered_successors(g, nid)):
                stack.append((c, d + 1))

    rank_height: Dict[int, float] = {}
    for nid, d in depth.items():
        rank_height[d] = max(rank_height.get(d, 0.0), g.nodes[nid]["height"])
    rank_top: Dict[int, float] = {}
    y = 0.0
    for d in range(max(rank_height) + 1 if rank_height else 0):
        rank_top[d] = y
        y += rank_height.get(d, 0.0) + options.rank_sep

    # subtree spans, children before parents
    span: Dict[str, float] = {}
    for nid in reversed(order):
        kids = _ordered_successors(g, nid)
        kids_w = sum(span[c] for c in kids) + options.node_sep * max(0, len(kids) - 1)
        span[nid] = max(g.nodes[nid]["width"], kids_w)

    centers: Dict[str, Tuple[float, float]] = {}

    def place(nid: str, left: float) -> None:
        kids = _ordered_successors(g, nid)
        d = depth[nid]
        centers[nid] = (left + span[nid] / 2, rank_top[d] + rank_height[d] / 2)
        if not kids:
            return
        kids_w = sum(span[c] for c in kids) + options.node_sep * (len(kids) - 1)
        cursor = left + (span[nid] - kids_w) / 2
        for c in kids:
            place(c, cursor)
            cursor += span[c] + options.node_sep

    left = 0.0
    for r in roots:
        place(r, left)
        left += span[r] + options.node_sep

    out: Dict[str, Position] = {}
    for nid, (cx, cy) in centers.items():
        w, h = g.nodes[nid]["width"], g.nodes[nid]["height"]
        out[nid] = Position(x=int(round(cx - w / 2)), y=int(round(cy - h / 2)))
    return out

def auto_layout(nodes: Sequence[Node], edges: Sequence[Edge],
                size_hints: Optional[SizeHints] = None,
                options: Optional[LayoutOptions] = None,
                policy: Optional[OrderingPolicy] = None,
                layout_fn: Optional[LayoutFn] = None) -> List[Node]:
    """
    Copies of ``nodes`` with recomputed positions, in the same list order.
    ``layout_fn`` swaps in another layered algorithm with the
    ``layout_positions`` signature.
    """
    layout_fn = layout_fn or layout_positions
    positions = layout_fn(nodes, edges, size_hints=size_hints, options=options, policy=policy)
    out: List[Node] = []
    for n in nodes:
        copy = n.model_copy(deep=True)
        pos = positions.get(n.id)
        if pos is not None:
            copy.position = Position(x=pos.x, y=pos.y)
        out.append(copy)
    return out

def iter_boxes(nodes: Iterable[Node], options: Optional[LayoutOptions] = None,
               size_hints: Optional[SizeHints] = None) -> Iterable[Tuple[str, float, float, float, float]]:
    """(id, left, top, right, bottom) per node, handy for overlap checks."""
    options = options or LayoutOptions()
    for n in nodes:
        w, h = node_size(n, options, size_hints)
        yield (n.id, n.position.x, n.position.y, n.position.x + w, n.position.y + h)
