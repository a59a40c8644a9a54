"""Repository exports."""

from .enemies_repo import EnemiesRepository
from .personas_repo import PersonasRepository
from .rooms_repo import RoomsRepository

__all__ = [
    "EnemiesRepository",
    "PersonasRepository",
    "RoomsRepository",
]
