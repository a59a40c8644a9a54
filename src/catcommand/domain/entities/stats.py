"""Stat models for runtime units."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class Stats:
    """Stores basic combat stats."""

    max_hp: int
    hp: int
    attack: int
    defense: int
    speed: int

    @property
    def hp_ratio(self) -> float:
        return self.hp / self.max_hp
