"""Persona definition structures."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from catcommand.domain.entities import BaseStats

from .gambit_def import GambitDef


@dataclass(slots=True)
class PersonaDef:
    """Playable character template used at roster creation."""

    id: str
    name: str
    icon: str
    description: str
    base_stats: BaseStats
    gambits: Tuple[GambitDef, ...]
