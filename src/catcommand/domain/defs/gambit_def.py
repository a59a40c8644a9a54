"""Gambit template structures."""
from __future__ import annotations

from dataclasses import dataclass

from catcommand.core.types import ActionType, ConditionType, TargetType


@dataclass(slots=True)
class GambitDef:
    """A gambit as written in a persona or enemy template."""

    priority: int
    condition: ConditionType
    target: TargetType
    action: ActionType
    active: bool = True
