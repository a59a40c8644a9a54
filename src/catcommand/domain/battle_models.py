"""Battle domain models."""
from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Iterator, List

from catcommand.core.types import ActionType, BattleStatus, ConditionType, Faction, TargetType
from catcommand.domain.entities import Stats


@dataclass(slots=True)
class StatusEffects:
    """Per-unit combat flags."""

    blocking: bool = False
    dodging: bool = False
    charged: bool = False

    def clear(self) -> None:
        self.blocking = False
        self.dodging = False
        self.charged = False


@dataclass(slots=True)
class Gambit:
    """A prioritized condition -> target -> action rule."""

    gambit_id: str
    active: bool
    priority: int
    condition: ConditionType
    target: TargetType
    action: ActionType


@dataclass(slots=True)
class Unit:
    """Represents an individual participant in battle."""

    instance_id: str
    name: str
    icon: str
    faction: Faction
    stats: Stats
    gambits: List[Gambit] = field(default_factory=list)
    is_dead: bool = False
    status: StatusEffects = field(default_factory=StatusEffects)
    last_triggered_gambit_id: str | None = None
    source_id: str | None = None  # persona or enemy definition id

    @property
    def label(self) -> str:
        return f"{self.icon} {self.name}"

    @property
    def is_alive(self) -> bool:
        return not self.is_dead

    def sorted_gambits(self) -> List[Gambit]:
        """Return gambits by ascending priority; equal priorities keep list order."""
        return sorted(self.gambits, key=lambda gambit: gambit.priority)


@dataclass(slots=True)
class DungeonState:
    """Position of the party inside a multi-room run."""

    room: int
    max_rooms: int


@dataclass(slots=True)
class BattleState:
    """Snapshot of a battle between two rosters."""

    allies: List[Unit]
    enemies: List[Unit]
    dungeon: DungeonState
    tick: int = 0
    log: List[str] = field(default_factory=list)
    status: BattleStatus = "PREPARATION"

    def roster(self, faction: Faction) -> List[Unit]:
        return self.allies if faction == "allies" else self.enemies

    def opponents(self, faction: Faction) -> List[Unit]:
        return self.enemies if faction == "allies" else self.allies

    def living(self, faction: Faction) -> List[Unit]:
        return [unit for unit in self.roster(faction) if unit.is_alive]

    def living_opponents(self, unit: Unit) -> List[Unit]:
        return [other for other in self.opponents(unit.faction) if other.is_alive]

    def iter_units(self) -> Iterator[Unit]:
        yield from self.allies
        yield from self.enemies

    def find_unit(self, instance_id: str) -> Unit | None:
        for unit in self.iter_units():
            if unit.instance_id == instance_id:
                return unit
        return None

    def snapshot(self) -> BattleState:
        """Return a fully independent copy of this state."""
        return copy.deepcopy(self)
