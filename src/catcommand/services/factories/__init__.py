"""Factory helpers for runtime units."""

from .id_factory import make_instance_id
from .unit_factory import create_empty_gambit, create_enemy_unit, create_gambits, create_player_unit

__all__ = [
    "create_empty_gambit",
    "create_enemy_unit",
    "create_gambits",
    "create_player_unit",
    "make_instance_id",
]
