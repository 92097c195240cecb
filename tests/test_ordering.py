import pytest
from skilltree.engine.graph import Edge, Node, Position, Tree
from skilltree.engine.ordering import (
    InsertionOrdering, OrderingPolicy, PositionOrdering, ordered_children, reorder_node, sibling_orders,
)
from skilltree.engine.schema_models import default_payload

def _tree(xs):
    """Sequence parent "p" with children c0..cN at the given x positions, edges in index order."""
    nodes = [Node(id="p", data=default_payload("Sequence"))]
    edges = []
    for i, x in enumerate(xs):
        nodes.append(Node(id=f"c{i}", data=default_payload("Delay"), position=Position(x=x, y=100)))
        edges.append(Edge(id=f"e{i}", source="p", target=f"c{i}"))
    return Tree(nodes=nodes, edges=edges)

def test_policies_satisfy_protocol():
    assert isinstance(PositionOrdering(), OrderingPolicy)
    assert isinstance(InsertionOrdering(), OrderingPolicy)

def test_children_sorted_by_x():
    tree = _tree([300, 100, 200])
    assert ordered_children(tree, "p") == ["c1", "c2", "c0"]

def test_equal_x_falls_back_to_edge_order():
    tree = _tree([50, 50, 50])
    assert ordered_children(tree, "p") == ["c0", "c1", "c2"]
    tree.edges.reverse()
    assert ordered_children(tree, "p") == ["c2", "c1", "c0"]

def test_missing_child_nodes_are_skipped():
    tree = _tree([0, 10])
    tree.edges.append(Edge(id="ghost", source="p", target="nope"))
    assert ordered_children(tree, "p") == ["c0", "c1"]

def test_reorder_symmetry():
    tree = _tree([0, 100, 200, 300])
    before = ordered_children(tree, "p")
    assert reorder_node(tree, "c1", "left")
    assert ordered_children(tree, "p") == ["c1", "c0", "c2", "c3"]
    assert reorder_node(tree, "c1", "right")
    assert ordered_children(tree, "p") == before

def test_reorder_right_then_left_restores():
    tree = _tree([0, 100, 200])
    assert reorder_node(tree, "c1", "right")
    assert ordered_children(tree, "p") == ["c0", "c2", "c1"]
    assert reorder_node(tree, "c1", "left")
    assert ordered_children(tree, "p") == ["c0", "c1", "c2"]

def test_reorder_boundaries_are_noops():
    tree = _tree([0, 100, 200])
    snapshot = tree.copy_tree()
    assert reorder_node(tree, "c0", "left") is False
    assert reorder_node(tree, "c2", "right") is False
    assert tree == snapshot

def test_reorder_with_tied_positions():
    tree = _tree([80, 80, 80])
    assert reorder_node(tree, "c2", "left")
    assert ordered_children(tree, "p") == ["c0", "c2", "c1"]
    assert reorder_node(tree, "c2", "right")
    assert ordered_children(tree, "p") == ["c0", "c1", "c2"]

@pytest.mark.parametrize("node_id,direction", [
    ("missing", "left"),
    ("p", "left"),       # root has no siblings
    ("c1", "up"),
])
def test_reorder_invalid_calls_do_nothing(node_id, direction):
    tree = _tree([0, 100, 200])
    snapshot = tree.copy_tree()
    assert reorder_node(tree, node_id, direction) is False
    assert tree == snapshot

def test_insertion_ordering_ignores_positions():
    tree = _tree([300, 200, 100])
    policy = InsertionOrdering()
    assert ordered_children(tree, "p", policy) == ["c0", "c1", "c2"]
    assert reorder_node(tree, "c0", "right", policy)
    assert ordered_children(tree, "p", policy) == ["c1", "c0", "c2"]
    # positions untouched
    assert tree.get_node("c0").position.x == 300

def test_move_to_end_places_node_last():
    tree = _tree([0, 100, 200])
    PositionOrdering().move_to_end(tree, "c0")
    assert ordered_children(tree, "p") == ["c1", "c2", "c0"]

def test_sibling_orders():
    tree = _tree([200, 100])
    assert sibling_orders(tree) == {"p": ["c1", "c0"]}
