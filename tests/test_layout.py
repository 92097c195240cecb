import logging
from itertools import combinations
from skilltree.engine.graph import Edge, Node, Position
from skilltree.engine.layout import LayoutOptions, auto_layout, iter_boxes, layout_positions, node_size
from skilltree.engine.ordering import sibling_orders
from skilltree.engine.schema_models import default_payload
from skilltree.engine.settings import Settings

def _positions(nodes):
    return {n.id: (n.position.x, n.position.y) for n in nodes}

def test_empty_input():
    assert auto_layout([], []) == []
    assert layout_positions([], []) == {}

def test_single_root_lands_at_origin():
    nodes = [Node(id="r", data=default_payload("Requirement"), position=Position(x=999, y=999))]
    out = auto_layout(nodes, [])
    assert _positions(out) == {"r": (0, 0)}

def test_known_coordinates_for_two_children():
    nodes = [
        Node(id="r", data=default_payload("Requirement")),
        Node(id="a", data=default_payload("Delay"), position=Position(x=10)),
        Node(id="b", data=default_payload("Delay"), position=Position(x=20)),
    ]
    edges = [Edge(id="1", source="r", target="a"), Edge(id="2", source="r", target="b")]
    out = auto_layout(nodes, edges)
    # 200 + 320 + 200 wide, parent centred over it; second rank starts 100 + 200 down
    assert _positions(out) == {"r": (260, 0), "a": (0, 300), "b": (520, 300)}

def test_order_preserved(wide_store):
    store, ids = wide_store
    store.reorder_node(ids["seq"], "left")
    store.reorder_node(ids["hit"], "right")
    before = sibling_orders(store.tree)
    store.auto_layout()
    assert sibling_orders(store.tree) == before

def test_parents_above_children_and_no_overlap(wide_store):
    store, ids = wide_store
    store.auto_layout()
    opts = LayoutOptions()
    nodes = store.tree.node_map()
    for e in store.edges:
        parent, child = nodes[e.source], nodes[e.target]
        _, h = node_size(parent, opts)
        assert parent.position.y + h < child.position.y
    for a, b in combinations(list(iter_boxes(store.nodes, opts)), 2):
        _, l1, t1, r1, b1 = a
        _, l2, t2, r2, b2 = b
        assert r1 <= l2 or r2 <= l1 or b1 <= t2 or b2 <= t1

def test_idempotent(wide_store):
    store, _ = wide_store
    once = auto_layout(store.nodes, store.edges)
    twice = auto_layout(once, store.edges)
    assert _positions(once) == _positions(twice)

def test_pure_function(wide_store):
    store, _ = wide_store
    snapshot = store.tree.copy_tree()
    out = auto_layout(store.nodes, store.edges)
    assert store.tree == snapshot
    assert [n.id for n in out] == [n.id for n in store.nodes]
    assert [n.data for n in out] == [n.data for n in store.nodes]
    assert all(a is not b for a, b in zip(out, store.nodes))

def test_positions_are_integers(wide_store):
    store, _ = wide_store
    for n in auto_layout(store.nodes, store.edges):
        assert n.position.x == int(n.position.x)
        assert n.position.y == int(n.position.y)

def test_edges_to_missing_nodes_are_skipped(scenario, caplog):
    store, ids = scenario
    edges = list(store.edges) + [Edge(id="ghost", source=ids["seq"], target="nowhere")]
    with caplog.at_level(logging.WARNING, logger="skilltree.engine.layout"):
        out = auto_layout(store.nodes, edges)
    assert len(out) == len(store.nodes)
    assert "missing node" in caplog.text

def test_cycles_and_second_parents_do_not_abort():
    nodes = [Node(id=i, data=default_payload("Sequence")) for i in ("a", "b", "c")]
    edges = [
        Edge(id="1", source="a", target="b"),
        Edge(id="2", source="b", target="a"),
        Edge(id="3", source="c", target="b"),
    ]
    pos = layout_positions(nodes, edges)
    assert set(pos) == {"a", "b", "c"}
    assert pos["a"].y < pos["b"].y

def test_size_hints_override_kind_sizes(scenario):
    store, ids = scenario
    hints = {ids["h1"]: (1000, 50)}
    out = {n.id: n for n in auto_layout(store.nodes, store.edges, size_hints=hints)}
    h1, h2 = out[ids["h1"]], out[ids["h2"]]
    assert h2.position.x >= h1.position.x + 1000 + 320

def test_size_classes():
    opts = LayoutOptions()
    assert node_size(Node(id="s", data=default_payload("Sequence")), opts) == (280, 150)
    assert node_size(Node(id="h", data=default_payload("Status")), opts) == (320, 250)
    assert node_size(Node(id="d", data=default_payload("Delay")), opts) == (200, 100)
    # unusable hints fall back to the size class
    assert node_size(Node(id="d", data=default_payload("Delay")), opts, {"d": (0, 0)}) == (200, 100)

def test_options_from_settings():
    opts = LayoutOptions.from_settings(Settings(rank_sep=50, node_sep=60))
    assert (opts.rank_sep, opts.node_sep) == (50, 60)

def test_pluggable_layout_function(scenario):
    store, _ = scenario

    def stacked(nodes, edges, size_hints=None, options=None, policy=None):
        return {n.id: Position(x=0, y=i * 10) for i, n in enumerate(nodes)}

    out = auto_layout(store.nodes, store.edges, layout_fn=stacked)
    assert [n.position.y for n in out] == [0, 10, 20, 30]
