"""Service layer exports."""

from .errors import FactoryError, GambitEditError, SaveLoadError
from .battle_service import BattleService, BattleView, UnitView
from .dungeon_service import DungeonService
from .gambit_service import GambitService
from .save_service import SaveService
from .controllers import BattleController, GambitEdit, RunSession

__all__ = [
    "FactoryError",
    "GambitEditError",
    "SaveLoadError",
    "BattleService",
    "BattleView",
    "UnitView",
    "DungeonService",
    "GambitService",
    "SaveService",
    "BattleController",
    "GambitEdit",
    "RunSession",
]
