"""Room definition data structures."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


@dataclass(slots=True)
class RoomDef:
    """Describes one dungeon room and the roster that waits inside."""

    id: str
    number: int
    name: str
    description: str
    enemy_ids: Tuple[str, ...]
