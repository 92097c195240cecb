from __future__ import annotations
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union
from skilltree.engine.errors import InvalidParent, SkillTreeError
from skilltree.engine.files import read_text_async, write_text_async
from skilltree.engine.graph import Edge, Node, Position, Tree, edge_id_for, new_node_id
from skilltree.engine.layout import LayoutFn, LayoutOptions, SizeHints, auto_layout
from skilltree.engine.ordering import DEFAULT_ORDERING, Direction, OrderingPolicy, ordered_children, reorder_node
from skilltree.engine.outline import preorder, render_outline
from skilltree.engine.schema_models import EntityReference, PAYLOAD_TYPES, default_payload
from skilltree.engine.serializer import export_tree, import_document, parse_json
from skilltree.engine.settings import Settings
from skilltree.engine.skill import SkillDefinition
from skilltree.engine.targeting import default_target_for_mechanic, default_target_mechanic

logger = logging.getLogger(__name__)

ROOT_POSITION = (100, 100)
# offsets for a new child: below-right of a childless parent, or next to the rightmost sibling
FIRST_CHILD_OFFSET = (150, 200)
NEXT_SIBLING_OFFSET = (250, 100)

# fields owned by the graph, never by a payload update
_IMMUTABLE_FIELDS = ("id", "kind")

class SkillTreeStore:
    """
    Owns one execution tree and applies editor intents to it.

    Every mutation runs to completion on the calling thread and either
    succeeds or leaves the tree untouched:
      - add_node / move_node raise InvalidParent before changing anything.
      - update_node validates the merged payload first (pydantic
        ValidationError propagates), then swaps it in.
      - import_document builds a fresh Tree and only then replaces the
        current one.
    Operations addressed at an unknown node id are no-ops that return False.
    """

    def __init__(self, settings: Optional[Settings] = None,
                 ordering: Optional[OrderingPolicy] = None,
                 layout_fn: Optional[LayoutFn] = None):
        self.settings = settings or Settings()
        self.ordering = ordering or DEFAULT_ORDERING
        self.layout_options = LayoutOptions.from_settings(self.settings)
        self.layout_fn = layout_fn
        self.tree = Tree()

    # ---- reads ----

    @property
    def nodes(self) -> List[Node]:
        return self.tree.nodes

    @property
    def edges(self) -> List[Edge]:
        return self.tree.edges

    def get_node(self, node_id: str) -> Optional[Node]:
        return self.tree.get_node(node_id)

    def root_id(self) -> Optional[str]:
        root = self.tree.root()
        return root.id if root else None

    def ordered_children(self, parent_id: str) -> List[str]:
        return ordered_children(self.tree, parent_id, self.ordering)

    def preorder(self) -> List[Node]:
        return preorder(self.tree, self.ordering)

    def render_outline(self) -> str:
        return render_outline(self.tree, self.ordering)

    # ---- structural mutations ----

    def add_node(self, kind: str, parent_id: Optional[str] = None) -> str:
        data = default_payload(kind)
        if parent_id is None:
            if self.tree.nodes:
                raise InvalidParent(None, "the tree already has a root")
            if kind != "Requirement":
                raise InvalidParent(None, f"the root must be a Requirement node, not {kind}")
            pos = Position(x=ROOT_POSITION[0], y=ROOT_POSITION[1])
        else:
            parent = self.tree.get_node(parent_id)
            if parent is None:
                raise InvalidParent(parent_id, "no such node")
            if kind == "Requirement":
                raise InvalidParent(parent_id, "a Requirement node can only be the root")
            pos = self._child_position(parent)

        nid = new_node_id()
        self.tree.nodes.append(Node(id=nid, data=data, position=pos))
        if parent_id is not None:
            self.tree.edges.append(Edge(id=edge_id_for(parent_id, nid), source=parent_id, target=nid))
        logger.debug("added %s %s under %s", kind, nid, parent_id)
        return nid

    def _child_position(self, parent: Node) -> Position:
        siblings = self.ordered_children(parent.id)
        if not siblings:
            dx, dy = FIRST_CHILD_OFFSET
            return Position(x=parent.position.x + dx, y=parent.position.y + dy)
        nodes = self.tree.node_map()
        rightmost = max((nodes[s] for s in siblings), key=lambda n: n.position.x)
        dx, dy = NEXT_SIBLING_OFFSET
        return Position(x=rightmost.position.x + dx, y=rightmost.position.y + dy)

    def remove_node(self, node_id: str) -> bool:
        """Delete a node with its whole subtree; removing the root clears the tree."""
        if not self.tree.has_node(node_id):
            logger.debug("remove %s ignored: no such node", node_id)
            return False
        doomed = self.tree.subtree_ids(node_id)
        self.tree.nodes = [n for n in self.tree.nodes if n.id not in doomed]
        self.tree.edges = [e for e in self.tree.edges
                           if e.source not in doomed and e.target not in doomed]
        logger.debug("removed %s (%d node(s))", node_id, len(doomed))
        return True

    def move_node(self, node_id: str, new_parent_id: str) -> bool:
        """Re-attach a subtree as the last child of another node."""
        node = self.tree.get_node(node_id)
        if node is None:
            logger.debug("move %s ignored: no such node", node_id)
            return False
        old_edge = self.tree.parent_edge(node_id)
        if old_edge is None:
            raise InvalidParent(new_parent_id, "the root cannot be moved")
        if not self.tree.has_node(new_parent_id):
            raise InvalidParent(new_parent_id, "no such node")
        if new_parent_id in self.tree.subtree_ids(node_id):
            raise InvalidParent(new_parent_id, "a node cannot move under itself or its descendants")

        self.tree.edges.remove(old_edge)
        self.tree.edges.append(Edge(id=edge_id_for(new_parent_id, node_id), source=new_parent_id, target=node_id))
        self.ordering.move_to_end(self.tree, node_id)
        logger.debug("moved %s from %s to %s", node_id, old_edge.source, new_parent_id)
        return True

    def reorder_node(self, node_id: str, direction: Direction) -> bool:
        return reorder_node(self.tree, node_id, direction, self.ordering)

    # ---- payload mutations ----

    def update_node(self, node_id: str, partial: Mapping[str, Any]) -> bool:
        """Merge fields into a node payload. ``id`` and ``kind`` are never changed."""
        node = self.tree.get_node(node_id)
        if node is None:
            logger.debug("update %s ignored: no such node", node_id)
            return False
        changes = {k: v for k, v in partial.items() if k not in _IMMUTABLE_FIELDS}
        merged = {**node.data.model_dump(), **changes}
        node.data = PAYLOAD_TYPES[node.kind].model_validate(merged)
        logger.debug("updated %s: %s", node_id, sorted(changes))
        return True

    def rename_node(self, node_id: str, name: str) -> bool:
        return self.update_node(node_id, {"name": name})

    def change_target_mechanic(self, node_id: str, mechanic_type: str, reset_target: bool = False) -> bool:
        """
        Replace a Hit/Status node's target mechanic with fresh defaults of another
        variant. With ``reset_target`` the effect target follows the mechanic too.
        """
        node = self.tree.get_node(node_id)
        if node is None or node.kind not in ("Hit", "Status"):
            logger.debug("target mechanic change on %s ignored", node_id)
            return False
        mechanic = default_target_mechanic(mechanic_type)
        update: Dict[str, Any] = {"target_mechanic": mechanic}
        if reset_target:
            update["target"] = default_target_for_mechanic(mechanic_type)
        node.data = node.data.model_copy(update=update)
        return True

    # ---- layout ----

    def preview_layout(self, size_hints: Optional[SizeHints] = None) -> List[Node]:
        """Laid-out copies of the nodes; the store keeps its current positions."""
        return auto_layout(self.tree.nodes, self.tree.edges, size_hints=size_hints,
                           options=self.layout_options, policy=self.ordering, layout_fn=self.layout_fn)

    def auto_layout(self, size_hints: Optional[SizeHints] = None) -> None:
        self.tree.nodes = self.preview_layout(size_hints)

    # ---- documents ----

    def export_document(self) -> Optional[Dict[str, Any]]:
        doc = export_tree(self.tree, self.ordering)
        logger.info("exported %d node(s)", len(self.tree.nodes) if doc else 0)
        return doc

    def export_json(self, indent: Optional[int] = None) -> str:
        return json.dumps(self.export_document(), indent=self.settings.indent if indent is None else indent)

    def import_document(self, data: Any, layout: Optional[bool] = None) -> None:
        tree = import_document(data)
        if self.settings.layout_on_import if layout is None else layout:
            tree.nodes = auto_layout(tree.nodes, tree.edges, options=self.layout_options,
                                     policy=self.ordering, layout_fn=self.layout_fn)
        self.tree = tree
        logger.info("imported %d node(s)", len(tree.nodes))

    def import_json(self, text: str, layout: Optional[bool] = None) -> None:
        self.import_document(parse_json(text), layout=layout)

    def clear(self) -> None:
        self.tree = Tree()

    def new_skill(self, key: str) -> SkillDefinition:
        return SkillDefinition.new(key, owner=self.settings.default_owner)

    def entity_reference(self, entity_type: str, key: str, version: int = 1) -> EntityReference:
        return EntityReference.for_key(self.settings.default_owner, entity_type, key, version)

    # ---- file access ----

    async def load(self, path: Union[str, Path], layout: Optional[bool] = None) -> None:
        text = await read_text_async(path)
        self.import_json(text, layout=layout)

    async def save(self, path: Union[str, Path]) -> None:
        if self.tree.root() is None:
            raise SkillTreeError("nothing to save: the tree has no root")
        await write_text_async(path, self.export_json())
