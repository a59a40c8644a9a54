"""Enemy definition structures."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from catcommand.domain.entities import BaseStats

from .gambit_def import GambitDef


@dataclass(slots=True)
class EnemyDef:
    """Minimal enemy definition."""

    id: str
    name: str
    icon: str
    base_stats: BaseStats
    gambits: Tuple[GambitDef, ...]
