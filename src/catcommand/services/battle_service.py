"""Battle service handling deterministic gambit-driven combat."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Tuple

from catcommand.core.rng import RNG
from catcommand.core.types import BattleStatus, Faction
from catcommand.domain.battle_models import BattleState, Unit
from catcommand.domain.gambit_rules import apply_damage, evaluate_condition, execute_action, resolve_target

logger = logging.getLogger(__name__)

HUNGER_THRESHOLD = 20

_END_BANNERS = {
    "VICTORY": "=== VICTORY! ===",
    "DEFEAT": "=== DEFEAT! ===",
    "ROOM_CLEARED": "=== ROOM CLEARED! ===",
}


@dataclass(slots=True)
class UnitView:
    """Presentation view for a single unit."""

    instance_id: str
    name: str
    icon: str
    faction: Faction
    hp: int
    max_hp: int
    is_dead: bool
    blocking: bool
    dodging: bool
    charged: bool
    last_triggered_gambit_id: str | None


@dataclass(slots=True)
class BattleView:
    """Presentation view for the current battle state."""

    tick: int
    status: BattleStatus
    room: int
    max_rooms: int
    allies: List[UnitView]
    enemies: List[UnitView]
    recent_log: Tuple[str, ...]


class BattleService:
    """Resolves rounds: every living unit runs its first matching gambit, fastest first."""

    def __init__(self, *, hunger_threshold: int = HUNGER_THRESHOLD) -> None:
        self._hunger_threshold = hunger_threshold

    # -----------------------
    # Battle Lifecycle
    # -----------------------
    def begin_fight(self, state: BattleState) -> BattleState:
        """Leave preparation and start the fight."""
        if state.status != "PREPARATION":
            return state
        new_state = state.snapshot()
        new_state.status = "FIGHTING"
        new_state.log.append("⚔️ FIGHT!")
        return new_state

    def tick(self, state: BattleState, rng: RNG) -> BattleState:
        """Advance exactly one round and return the new snapshot.

        The input state is never modified. Outside of FIGHTING this is a no-op
        that hands back the same object.
        """
        if state.status != "FIGHTING":
            return state

        new_state = state.snapshot()
        new_state.tick += 1
        new_state.log.append(f"--- Tick {new_state.tick} ---")
        logger.debug("Tick %s started (room %s)", new_state.tick, new_state.dungeon.room)

        for unit in self._turn_order(new_state):
            if unit.is_dead:
                continue
            self._process_unit_turn(unit, new_state, rng)
            if self._finish_if_over(new_state):
                return new_state

        self._apply_hunger(new_state)
        self._finish_if_over(new_state)
        return new_state

    def check_end(self, state: BattleState) -> BattleStatus:
        """Return the status implied by the rosters.

        Enemy wipe is checked first, so a mutual wipe counts for the allies.
        """
        if not state.living("enemies"):
            if state.dungeon.room >= state.dungeon.max_rooms:
                return "VICTORY"
            return "ROOM_CLEARED"
        if not state.living("allies"):
            return "DEFEAT"
        return "FIGHTING"

    def get_battle_view(self, state: BattleState, *, log_lines: int = 10) -> BattleView:
        """Return structured information for rendering."""
        recent = state.log[-log_lines:] if log_lines > 0 else []
        return BattleView(
            tick=state.tick,
            status=state.status,
            room=state.dungeon.room,
            max_rooms=state.dungeon.max_rooms,
            allies=[self._to_view(unit) for unit in state.allies],
            enemies=[self._to_view(unit) for unit in state.enemies],
            recent_log=tuple(recent),
        )

    # -----------------------
    # Helpers
    # -----------------------
    def _turn_order(self, state: BattleState) -> List[Unit]:
        living = [unit for unit in state.iter_units() if unit.is_alive]
        # sorted() is stable: equal speeds keep allies-then-enemies roster order.
        return sorted(living, key=lambda unit: -unit.stats.speed)

    def _process_unit_turn(self, unit: Unit, state: BattleState, rng: RNG) -> None:
        unit.status.blocking = False
        unit.status.dodging = False
        unit.last_triggered_gambit_id = None

        for gambit in unit.sorted_gambits():
            if not evaluate_condition(gambit, unit, state):
                continue
            target = resolve_target(gambit.target, unit, state)
            if target is None:
                continue
            execute_action(gambit.action, unit, target, state.log, rng)
            unit.last_triggered_gambit_id = gambit.gambit_id
            return

        state.log.append(f"{unit.label} is confused and does nothing...")

    def _apply_hunger(self, state: BattleState) -> None:
        damage = state.tick - self._hunger_threshold
        if damage <= 0:
            return
        state.log.append(f"☠️ Hunger gnaws at everyone for {damage} damage!")
        for unit in list(state.iter_units()):
            if unit.is_alive:
                apply_damage(unit, damage, state.log)

    def _finish_if_over(self, state: BattleState) -> bool:
        result = self.check_end(state)
        if result == "FIGHTING":
            return False
        state.status = result
        state.log.append(_END_BANNERS[result])
        logger.debug("Battle ended with %s on tick %s", result, state.tick)
        return True

    def _to_view(self, unit: Unit) -> UnitView:
        return UnitView(
            instance_id=unit.instance_id,
            name=unit.name,
            icon=unit.icon,
            faction=unit.faction,
            hp=unit.stats.hp,
            max_hp=unit.stats.max_hp,
            is_dead=unit.is_dead,
            blocking=unit.status.blocking,
            dodging=unit.status.dodging,
            charged=unit.status.charged,
            last_triggered_gambit_id=unit.last_triggered_gambit_id,
        )
