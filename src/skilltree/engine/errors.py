from __future__ import annotations
from typing import Optional

class SkillTreeError(Exception):
    """Base class for execution tree errors surfaced to the editor."""

class InvalidParent(SkillTreeError):
    def __init__(self, parent_id: Optional[str], reason: str):
        self.parent_id = parent_id
        self.reason = reason
        super().__init__(f"invalid parent {parent_id!r}: {reason}")

class MalformedDocument(SkillTreeError):
    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")

class IOFailure(SkillTreeError):
    def __init__(self, path: str, operation: str, reason: str):
        self.path = path
        self.operation = operation
        self.reason = reason
        super().__init__(f"failed to {operation} {path}: {reason}")

class LayoutDegenerate(SkillTreeError):
    # Recovered inside the layout engine; never escapes it.
    def __init__(self, edge_id: str, reason: str):
        self.edge_id = edge_id
        self.reason = reason
        super().__init__(f"edge {edge_id}: {reason}")
