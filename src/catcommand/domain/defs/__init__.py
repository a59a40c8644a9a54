"""Domain definition exports."""

from .enemy_def import EnemyDef
from .gambit_def import GambitDef
from .persona_def import PersonaDef
from .room_def import RoomDef

__all__ = [
    "EnemyDef",
    "GambitDef",
    "PersonaDef",
    "RoomDef",
]
