"""Base stat model used by content templates."""
from __future__ import annotations

from dataclasses import dataclass

from .stats import Stats


@dataclass(slots=True)
class BaseStats:
    """Represents template stats before a unit is stamped out."""

    max_hp: int
    attack: int
    defense: int
    speed: int

    def to_stats(self) -> Stats:
        """Return fresh runtime stats at full health."""
        return Stats(
            max_hp=self.max_hp,
            hp=self.max_hp,
            attack=self.attack,
            defense=self.defense,
            speed=self.speed,
        )
