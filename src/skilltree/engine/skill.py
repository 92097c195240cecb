from __future__ import annotations
from typing import Any, Dict, List, Literal, Optional
from pydantic import BaseModel, Field, ValidationError
from skilltree.engine.errors import MalformedDocument
from skilltree.engine.schema_models import EntityReference, FloatRange, Vector3

QualityType = Literal["None", "Common", "Uncommon", "Rare", "Epic", "Legendary"]
SkillCategory = Literal["None", "All", "Offense", "Defense", "Utility", "Healing"]
SkillTargetType = Literal["Self", "Ally", "Enemy", "Any", "Position", "None"]
SkillIndicatorPosition = Literal["Character", "Mouse", "FromCharacterToMouse"]

DEFAULT_OWNER = "Octoio"

def default_icon(owner: str = DEFAULT_OWNER) -> EntityReference:
    return EntityReference.for_key(owner, "Image", "DefaultIcon")

class Metadata(BaseModel):
    title: str = ""
    description: str = ""

class SkillCost(BaseModel):
    mana: float = 0

class SkillIndicator(BaseModel):
    model_reference: Optional[EntityReference] = None
    position: SkillIndicatorPosition = "Character"
    scale: Vector3 = Field(default_factory=lambda: Vector3(x=1, y=1, z=1))

class Skill(BaseModel):
    metadata: Metadata = Field(default_factory=Metadata)
    quality: QualityType = "None"
    icon_reference: EntityReference = Field(default_factory=default_icon)
    categories: List[SkillCategory] = Field(default_factory=list)
    cost: SkillCost = Field(default_factory=SkillCost)
    cooldown: float = Field(default=0, ge=0)
    target_type: SkillTargetType = "None"
    # nested execution tree document, validated by the serializer on import
    execution_root: Optional[Dict[str, Any]] = None
    cast_distance: FloatRange = Field(default_factory=lambda: FloatRange(min=1, max=1))
    indicators: List[SkillIndicator] = Field(default_factory=list)

class SkillDefinition(BaseModel):
    """Entity envelope a skill is stored in alongside the other game assets."""
    id: str = ""
    owner: str = DEFAULT_OWNER
    type: Literal["Skill"] = "Skill"
    key: str = ""
    version: int = 1
    entity: Skill = Field(default_factory=Skill)

    @classmethod
    def new(cls, key: str, owner: str = DEFAULT_OWNER, version: int = 1) -> SkillDefinition:
        return cls(id=f"{owner}:Skill:{key}:{version}", owner=owner, key=key, version=version,
                   entity=Skill(icon_reference=default_icon(owner)))

def export_skill(store, definition: SkillDefinition) -> Dict[str, Any]:
    """Envelope as a JSON-ready dict with ``execution_root`` taken from the store's tree."""
    out = definition.model_copy(deep=True)
    out.entity.execution_root = store.export_document()
    return out.model_dump(mode="json")

def import_skill(store, data: Any, layout: Optional[bool] = None) -> SkillDefinition:
    """
    Validate a skill envelope and load its execution tree into ``store``.
    The store is untouched unless both the envelope and the tree are valid.
    """
    try:
        definition = SkillDefinition.model_validate(data)
    except ValidationError as e:
        raise MalformedDocument("$", str(e)) from e
    root = definition.entity.execution_root
    if root is None:
        raise MalformedDocument("$.entity.execution_root", "missing execution tree")
    try:
        store.import_document(root, layout=layout)
    except MalformedDocument as e:
        raise MalformedDocument("$.entity.execution_root" + e.path[1:], e.reason) from e
    return definition

def looks_like_skill(data: Any) -> bool:
    return isinstance(data, dict) and data.get("type") == "Skill" and "entity" in data
