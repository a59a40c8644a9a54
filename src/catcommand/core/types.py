"""Shared type aliases for the core and domain layers."""
from typing import Literal, Tuple

Faction = Literal["allies", "enemies"]

BattleStatus = Literal["PREPARATION", "FIGHTING", "VICTORY", "DEFEAT", "ROOM_CLEARED"]

ConditionType = Literal[
    "ALWAYS",
    "HP_BELOW_30",
    "HP_BELOW_50",
    "ENEMY_HP_ABOVE_50",
    "ENEMY_IS_BLOCKING",
    "MANA_FULL",
]

TargetType = Literal[
    "SELF",
    "ALLY_LOWEST_HP",
    "ENEMY_CLOSEST",
    "ENEMY_LOWEST_HP",
    "ENEMY_STRONGEST",
]

ActionType = Literal["ATTACK", "HEAL", "BLOCK", "DODGE", "CHARGE", "WAIT"]

# Cycling order used by the gambit editor.
CONDITIONS: Tuple[ConditionType, ...] = (
    "ALWAYS",
    "HP_BELOW_30",
    "HP_BELOW_50",
    "ENEMY_HP_ABOVE_50",
    "ENEMY_IS_BLOCKING",
    "MANA_FULL",
)

TARGETS: Tuple[TargetType, ...] = (
    "ENEMY_CLOSEST",
    "ENEMY_LOWEST_HP",
    "ENEMY_STRONGEST",
    "SELF",
    "ALLY_LOWEST_HP",
)

ACTIONS: Tuple[ActionType, ...] = ("ATTACK", "HEAL", "BLOCK", "DODGE", "CHARGE", "WAIT")

__all__ = [
    "ACTIONS",
    "ActionType",
    "BattleStatus",
    "CONDITIONS",
    "ConditionType",
    "Faction",
    "TARGETS",
    "TargetType",
]
