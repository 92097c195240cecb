from __future__ import annotations
from typing import Tuple
from pydantic import BaseModel
from .schema_models import (
    MechanicSelf, MechanicTeam, MechanicSelected, MechanicCircle, MechanicRectangle,
    TARGET_MECHANIC_TYPES,
)

_MECHANIC_DEFAULTS = {
    "Self": MechanicSelf,
    "Team": MechanicTeam,
    "Selected": MechanicSelected,
    "Circle": MechanicCircle,
    "Rectangle": MechanicRectangle,
}

_TARGET_FOR_MECHANIC = {
    "Team": "Ally",
    "Circle": "Enemy",
    "Rectangle": "Enemy",
    "Selected": "Any",
}

def default_target_mechanic(mechanic_type: str) -> BaseModel:
    """
    Fresh mechanic of the given variant. Switching variants never carries
    fields over from the previous mechanic.
    """
    factory = _MECHANIC_DEFAULTS.get(mechanic_type)
    if factory is None:
        raise ValueError(f"unknown target mechanic '{mechanic_type}'; expected one of {list(TARGET_MECHANIC_TYPES)}")
    return factory()

def default_target_for_mechanic(mechanic_type: str) -> str:
    return _TARGET_FOR_MECHANIC.get(mechanic_type, "Enemy")

def default_targeting(mechanic_type: str = "Self") -> Tuple[str, BaseModel]:
    return default_target_for_mechanic(mechanic_type), default_target_mechanic(mechanic_type)
