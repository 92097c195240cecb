from __future__ import annotations
from typing import Any, List, Literal, Optional, Union
from typing_extensions import Annotated
from pydantic import BaseModel, BeforeValidator, Field, model_validator

# Enums
NodeKind = Literal["Requirement", "Sequence", "Parallel", "Hit", "Status",
                   "Sound", "Summon", "Delay", "Animation"]
NODE_KINDS: tuple[str, ...] = ("Requirement", "Sequence", "Parallel", "Hit", "Status",
                               "Sound", "Summon", "Delay", "Animation")
COMPOSITE_KINDS = {"Requirement", "Sequence", "Parallel"}

EntityType = Literal[
    "Model", "Skill", "Weapon", "Equipment", "Image", "Status", "Cursor", "Stat",
    "Quality", "AudioClip", "Sound", "SoundBank", "DropTable", "Character",
    "AnimationSource", "Animation",
]
HitType = Literal["Damage", "Heal", "Threat", "Mana"]
EffectTarget = Literal["Ally", "Enemy", "Any"]
CharacterTeam = Literal["Ally", "Enemy"]
TargetMechanicType = Literal["Self", "Team", "Selected", "Circle", "Rectangle"]
TARGET_MECHANIC_TYPES: tuple[str, ...] = ("Self", "Team", "Selected", "Circle", "Rectangle")
StatusDurationType = Literal["Chrono", "Logical", "Room", "Dungeon"]
RequirementOperator = Literal["All", "Any"]
CharacterType = Literal["Adventurer", "Slime", "Boar"]
StatType = Literal[
    "Vit", "Str", "Int", "Dex", "Armor", "MagicResist", "Health", "Mana",
    "DamageTakenModifier", "DamageModifier", "MovementSpeed", "MovementSpeedModifier",
    "AttackSpeed", "AttackPower", "AbilityPower", "CriticalChance", "CriticalDamage",
    "CooldownReduction", "DodgeChance", "ManaRegen", "HealthRegen",
    "ExperienceModifier", "GoldModifier", "LifeSteal",
]
WeaponCategory = Literal[
    "None", "OneHandMace", "TwoHandMace", "OneHandAxe", "TwoHandAxe",
    "OneHandSword", "TwoHandSword", "Dagger", "Fist", "Bow", "Staff", "Wand", "Shield",
]

# -----------------------------
# Shared value types
# -----------------------------

class EntityReference(BaseModel):
    """Versioned pointer into the external asset catalog."""
    id: str = ""
    key: str = ""
    owner: str = ""
    type: EntityType
    version: int = 1

    @classmethod
    def for_key(cls, owner: str, type: str, key: str, version: int = 1) -> EntityReference:
        return cls(id=f"{owner}:{type}:{key}:{version}", key=key, owner=owner, type=type, version=version)

class Vector3(BaseModel):
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

class FloatRange(BaseModel):
    min: float = 0.0
    max: float = 0.0

    @model_validator(mode="after")
    def _validate(self):
        if self.min > self.max:
            raise ValueError(f"range min {self.min} is greater than max {self.max}")
        return self

class Scaler(BaseModel):
    # base + stat_value * lerp(scaling.min, scaling.max, ...) evaluated by the game engine
    stat: StatType = "AttackPower"
    base: float = 0.0
    scaling: FloatRange = Field(default_factory=FloatRange)

class StatusDuration(BaseModel):
    type: StatusDurationType = "Chrono"
    value: float = 0.0

# -----------------------------
# Targeting
# -----------------------------

class MechanicSelf(BaseModel):
    type: Literal["Self"] = "Self"

class MechanicTeam(BaseModel):
    type: Literal["Team"] = "Team"
    team: CharacterTeam = "Ally"

class MechanicSelected(BaseModel):
    type: Literal["Selected"] = "Selected"

class MechanicCircle(BaseModel):
    type: Literal["Circle"] = "Circle"
    hit_count: int = Field(default=1, ge=1)
    radius: float = Field(default=5.0, ge=0)

class MechanicRectangle(BaseModel):
    type: Literal["Rectangle"] = "Rectangle"
    hit_count: int = Field(default=1, ge=1)
    width: float = Field(default=5.0, ge=0)
    height: float = Field(default=5.0, ge=0)

TargetMechanic = Annotated[
    Union[MechanicSelf, MechanicTeam, MechanicSelected, MechanicCircle, MechanicRectangle],
    Field(discriminator="type")
]

# -----------------------------
# Requirement clauses
# -----------------------------

class CharacterRequirement(BaseModel):
    type: Literal["Character"] = "Character"
    character: CharacterType = "Adventurer"

class WeaponCategoryRequirement(BaseModel):
    type: Literal["WeaponCategory"] = "WeaponCategory"
    weapon_category: WeaponCategory = "None"

RequirementClause = Annotated[
    Union[CharacterRequirement, WeaponCategoryRequirement],
    Field(discriminator="type")
]

# -----------------------------
# Action node payloads
# -----------------------------

def _coerce_loop(v: Any) -> int:
    # empty, zero, negative or unparsable input all mean "run once"
    if v is None or v == "":
        return 1
    try:
        n = int(float(v))
    except (TypeError, ValueError):
        return 1
    return n if n >= 1 else 1

LoopCount = Annotated[int, BeforeValidator(_coerce_loop)]

class RequirementNode(BaseModel):
    kind: Literal["Requirement"] = "Requirement"
    name: str = ""
    operator: RequirementOperator = "All"
    requirements: List[RequirementClause] = Field(default_factory=list)

class SequenceNode(BaseModel):
    kind: Literal["Sequence"] = "Sequence"
    name: str = ""
    loop: LoopCount = 1

class ParallelNode(BaseModel):
    kind: Literal["Parallel"] = "Parallel"
    name: str = ""
    loop: LoopCount = 1

class HitNode(BaseModel):
    kind: Literal["Hit"] = "Hit"
    name: str = ""
    hit_type: HitType = "Damage"
    target: EffectTarget = "Enemy"
    target_mechanic: TargetMechanic = Field(default_factory=MechanicSelf)
    hit_sound: Optional[EntityReference] = None
    can_crit: bool = True
    can_miss: bool = True
    scalers: List[Scaler] = Field(default_factory=list)

class StatusNode(BaseModel):
    kind: Literal["Status"] = "Status"
    name: str = ""
    target: EffectTarget = "Ally"
    target_mechanic: TargetMechanic = Field(default_factory=MechanicSelf)
    status: Optional[EntityReference] = None
    durations: List[StatusDuration] = Field(default_factory=list)
    scalers: List[Scaler] = Field(default_factory=list)

class SoundNode(BaseModel):
    kind: Literal["Sound"] = "Sound"
    name: str = ""
    sound: Optional[EntityReference] = None

class SummonNode(BaseModel):
    kind: Literal["Summon"] = "Summon"
    name: str = ""
    summon_entity: Optional[EntityReference] = None
    position_offset: Vector3 = Field(default_factory=Vector3)

    @model_validator(mode="after")
    def _validate(self):
        if self.summon_entity is not None and self.summon_entity.type != "Character":
            raise ValueError(f"summon_entity must reference a Character, got '{self.summon_entity.type}'")
        return self

class DelayNode(BaseModel):
    kind: Literal["Delay"] = "Delay"
    name: str = ""
    delay: float = Field(default=1.0, ge=0)

class AnimationNode(BaseModel):
    kind: Literal["Animation"] = "Animation"
    name: str = ""
    animations: List[EntityReference] = Field(default_factory=list)
    duration: float = Field(default=1.0, ge=0)
    show_progress: bool = False

ActionNode = Annotated[
    Union[
        RequirementNode, SequenceNode, ParallelNode,
        HitNode, StatusNode, SoundNode, SummonNode,
        DelayNode, AnimationNode
    ],
    Field(discriminator="kind")
]

PAYLOAD_TYPES: dict[str, type[BaseModel]] = {
    "Requirement": RequirementNode,
    "Sequence": SequenceNode,
    "Parallel": ParallelNode,
    "Hit": HitNode,
    "Status": StatusNode,
    "Sound": SoundNode,
    "Summon": SummonNode,
    "Delay": DelayNode,
    "Animation": AnimationNode,
}

def default_payload(kind: str) -> BaseModel:
    """Fresh payload for a new node of this kind, named "New <Kind>"."""
    try:
        model = PAYLOAD_TYPES[kind]
    except KeyError:
        raise ValueError(f"unknown node kind '{kind}'; expected one of {list(NODE_KINDS)}") from None
    return model(name=f"New {kind}")
