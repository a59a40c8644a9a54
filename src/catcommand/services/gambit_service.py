"""Service for editing ally gambits between battles."""
from __future__ import annotations

from typing import Callable, Tuple

from catcommand.core.rng import RNG
from catcommand.core.types import ACTIONS, CONDITIONS, TARGETS, ActionType
from catcommand.domain.battle_models import BattleState, Gambit, Unit
from catcommand.services.errors import GambitEditError
from catcommand.services.factories import create_empty_gambit

MAX_GAMBIT_SLOTS = 8


class GambitService:
    """Edit operations on ally gambits.

    Every operation is only allowed during PREPARATION and returns a new
    snapshot; the state passed in is left untouched.
    """

    def cycle_condition(self, state: BattleState, unit_id: str, gambit_id: str) -> BattleState:
        def _apply(gambit: Gambit) -> None:
            gambit.condition = CONDITIONS[(CONDITIONS.index(gambit.condition) + 1) % len(CONDITIONS)]

        return self._edit_gambit(state, unit_id, gambit_id, _apply)

    def cycle_target(self, state: BattleState, unit_id: str, gambit_id: str) -> BattleState:
        def _apply(gambit: Gambit) -> None:
            gambit.target = TARGETS[(TARGETS.index(gambit.target) + 1) % len(TARGETS)]

        return self._edit_gambit(state, unit_id, gambit_id, _apply)

    def set_action(self, state: BattleState, unit_id: str, gambit_id: str, action: ActionType) -> BattleState:
        """Choose the action; picking one also switches the gambit on."""
        if action not in ACTIONS:
            raise GambitEditError(f"Unknown action '{action}'.")

        def _apply(gambit: Gambit) -> None:
            gambit.action = action
            gambit.active = True

        return self._edit_gambit(state, unit_id, gambit_id, _apply)

    def toggle_active(self, state: BattleState, unit_id: str, gambit_id: str) -> BattleState:
        def _apply(gambit: Gambit) -> None:
            gambit.active = not gambit.active

        return self._edit_gambit(state, unit_id, gambit_id, _apply)

    def set_priority(self, state: BattleState, unit_id: str, gambit_id: str, priority: int) -> BattleState:
        if priority < 1:
            raise GambitEditError("Priority must be 1 or higher.")

        def _apply(gambit: Gambit) -> None:
            gambit.priority = priority

        return self._edit_gambit(state, unit_id, gambit_id, _apply)

    def add_gambit_slot(self, state: BattleState, unit_id: str, rng: RNG) -> Tuple[BattleState, Gambit]:
        """Append an inactive slot that runs after every existing gambit."""
        new_state, unit = self._editable_copy(state, unit_id)
        if len(unit.gambits) >= MAX_GAMBIT_SLOTS:
            raise GambitEditError(f"{unit.name} already has {MAX_GAMBIT_SLOTS} gambit slots.")
        priority = max((gambit.priority for gambit in unit.gambits), default=0) + 1
        gambit = create_empty_gambit(priority, rng)
        unit.gambits.append(gambit)
        return new_state, gambit

    def remove_gambit(self, state: BattleState, unit_id: str, gambit_id: str) -> BattleState:
        new_state, unit = self._editable_copy(state, unit_id)
        gambit = self._find_gambit(unit, gambit_id)
        unit.gambits.remove(gambit)
        return new_state

    def _edit_gambit(
        self, state: BattleState, unit_id: str, gambit_id: str, apply: Callable[[Gambit], None]
    ) -> BattleState:
        new_state, unit = self._editable_copy(state, unit_id)
        apply(self._find_gambit(unit, gambit_id))
        return new_state

    def _editable_copy(self, state: BattleState, unit_id: str) -> Tuple[BattleState, Unit]:
        if state.status != "PREPARATION":
            raise GambitEditError("Gambits can only be changed while preparing for battle.")
        new_state = state.snapshot()
        for unit in new_state.allies:
            if unit.instance_id == unit_id:
                return new_state, unit
        if any(enemy.instance_id == unit_id for enemy in new_state.enemies):
            raise GambitEditError("Enemy gambits cannot be edited.")
        raise GambitEditError(f"Unit '{unit_id}' not found.")

    @staticmethod
    def _find_gambit(unit: Unit, gambit_id: str) -> Gambit:
        for gambit in unit.gambits:
            if gambit.gambit_id == gambit_id:
                return gambit
        raise GambitEditError(f"Gambit '{gambit_id}' not found on {unit.name}.")
