"""UI-agnostic controller that separates state progression from rendering."""
from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Deque, List, Literal, Sequence

from catcommand.core.rng import RNG
from catcommand.core.types import ActionType
from catcommand.domain.battle_models import BattleState, Unit
from catcommand.domain.defs import PersonaDef
from catcommand.services.battle_service import BattleService, BattleView
from catcommand.services.dungeon_service import DungeonService
from catcommand.services.gambit_service import GambitService

GambitEditType = Literal["cycle_condition", "cycle_target", "set_action", "toggle_active", "set_priority", "add", "remove"]

HISTORY_LIMIT = 50


@dataclass(slots=True)
class GambitEdit:
    """Represents a structured gambit edit chosen by the player."""

    edit_type: GambitEditType
    unit_id: str
    gambit_id: str | None = None
    action: ActionType | None = None
    priority: int | None = None


@dataclass(slots=True)
class RunSession:
    """The live run: current snapshot, its RNG and the most recent snapshots."""

    state: BattleState
    rng: RNG
    history: Deque[BattleState] = field(default_factory=lambda: deque(maxlen=HISTORY_LIMIT))
    name: str = "Run"
    created_at: str | None = None


class BattleController:
    """
    UI-agnostic controller for run progression.

    Wraps BattleService, DungeonService and GambitService and only exposes
    structured state and operations. Rendering, prompts and pacing belong to
    the presentation layer.
    """

    def __init__(
        self,
        battle_service: BattleService,
        dungeon_service: DungeonService,
        gambit_service: GambitService,
    ) -> None:
        self._battle = battle_service
        self._dungeon = dungeon_service
        self._gambits = gambit_service

    def start_run(self, persona_ids: Sequence[str], seed: int, *, name: str = "Run") -> RunSession:
        rng = RNG(seed)
        state = self._dungeon.start_run(persona_ids, rng)
        return RunSession(state=state, rng=rng, history=_new_history(state), name=name)

    def resume_run(self, state: BattleState, rng: RNG, *, name: str, created_at: str | None) -> RunSession:
        return RunSession(state=state, rng=rng, history=_new_history(state), name=name, created_at=created_at)

    def list_personas(self) -> List[PersonaDef]:
        return self._dungeon.list_personas()

    def get_battle_view(self, session: RunSession, *, log_lines: int = 10) -> BattleView:
        """Return structured view of current battle state for rendering."""
        return self._battle.get_battle_view(session.state, log_lines=log_lines)

    def is_preparing(self, session: RunSession) -> bool:
        return session.state.status == "PREPARATION"

    def is_fighting(self, session: RunSession) -> bool:
        return session.state.status == "FIGHTING"

    def needs_room_advance(self, session: RunSession) -> bool:
        return session.state.status == "ROOM_CLEARED"

    def is_run_over(self, session: RunSession) -> bool:
        return session.state.status in ("VICTORY", "DEFEAT")

    def begin_fight(self, session: RunSession) -> BattleState:
        return self._commit(session, self._battle.begin_fight(session.state))

    def step(self, session: RunSession) -> BattleState:
        """Advance one round; a no-op when the battle is not running."""
        return self._commit(session, self._battle.tick(session.state, session.rng))

    def advance_room(self, session: RunSession) -> BattleState:
        return self._commit(session, self._dungeon.advance_room(session.state, session.rng))

    def editable_units(self, session: RunSession) -> List[Unit]:
        if not self.is_preparing(session):
            return []
        return [unit for unit in session.state.allies if unit.is_alive]

    def apply_gambit_edit(self, session: RunSession, edit: GambitEdit) -> BattleState:
        """
        Apply a gambit edit and return the new state.

        Raises GambitEditError when the edit is not allowed.
        """
        state = session.state
        if edit.edit_type == "add":
            new_state, _ = self._gambits.add_gambit_slot(state, edit.unit_id, session.rng)
            return self._commit(session, new_state)

        if not edit.gambit_id:
            raise ValueError(f"{edit.edit_type} edit requires gambit_id.")

        if edit.edit_type == "cycle_condition":
            new_state = self._gambits.cycle_condition(state, edit.unit_id, edit.gambit_id)
        elif edit.edit_type == "cycle_target":
            new_state = self._gambits.cycle_target(state, edit.unit_id, edit.gambit_id)
        elif edit.edit_type == "toggle_active":
            new_state = self._gambits.toggle_active(state, edit.unit_id, edit.gambit_id)
        elif edit.edit_type == "remove":
            new_state = self._gambits.remove_gambit(state, edit.unit_id, edit.gambit_id)
        elif edit.edit_type == "set_action":
            if edit.action is None:
                raise ValueError("set_action edit requires action.")
            new_state = self._gambits.set_action(state, edit.unit_id, edit.gambit_id, edit.action)
        elif edit.edit_type == "set_priority":
            if edit.priority is None:
                raise ValueError("set_priority edit requires priority.")
            new_state = self._gambits.set_priority(state, edit.unit_id, edit.gambit_id, edit.priority)
        else:
            raise ValueError(f"Unknown edit type: {edit.edit_type}")
        return self._commit(session, new_state)

    def _commit(self, session: RunSession, new_state: BattleState) -> BattleState:
        if new_state is not session.state:
            session.state = new_state
            session.history.append(new_state)
        return new_state


def _new_history(state: BattleState) -> Deque[BattleState]:
    return deque([state], maxlen=HISTORY_LIMIT)
