"""Application service for dungeon runs and room transitions."""
from __future__ import annotations

import logging
import math
from typing import List, Sequence

from catcommand.core.rng import RNG
from catcommand.data.repositories import EnemiesRepository, PersonasRepository, RoomsRepository
from catcommand.domain.battle_models import BattleState, DungeonState, Unit
from catcommand.domain.defs import PersonaDef, RoomDef
from catcommand.services.errors import FactoryError
from catcommand.services.factories import create_enemy_unit, create_player_unit

logger = logging.getLogger(__name__)

MAX_PARTY_SIZE = 3
ROOM_HEAL_RATIO = 0.30


class DungeonService:
    """Builds runs from the content tables and moves the party between rooms."""

    def __init__(
        self,
        *,
        personas_repo: PersonasRepository,
        enemies_repo: EnemiesRepository,
        rooms_repo: RoomsRepository,
    ) -> None:
        self._personas_repo = personas_repo
        self._enemies_repo = enemies_repo
        self._rooms_repo = rooms_repo

    @property
    def max_rooms(self) -> int:
        return self._rooms_repo.room_count()

    def list_personas(self) -> List[PersonaDef]:
        return self._personas_repo.ordered()

    def start_run(self, persona_ids: Sequence[str], rng: RNG) -> BattleState:
        """Create the party and enter room 1 in preparation mode."""
        if not persona_ids:
            raise ValueError("A run needs at least one persona.")
        if len(persona_ids) > MAX_PARTY_SIZE:
            raise ValueError(f"A party holds at most {MAX_PARTY_SIZE} personas.")

        allies = [create_player_unit(persona_id, self._personas_repo, rng) for persona_id in persona_ids]
        state = BattleState(
            allies=allies,
            enemies=self.get_enemies_for_room(1, rng),
            dungeon=DungeonState(room=1, max_rooms=self.max_rooms),
        )
        state.log.extend(f"{ally.label} enters the dungeon!" for ally in allies)
        state.log.extend(self._room_entry_lines(state.dungeon, state.enemies))
        logger.debug("Run started with %s", [ally.source_id for ally in allies])
        return state

    def advance_room(self, state: BattleState, rng: RNG) -> BattleState:
        """Move a party that cleared its room into the next one.

        Returns the input unchanged unless the status is ROOM_CLEARED and a
        further room exists.
        """
        if state.status != "ROOM_CLEARED" or state.dungeon.room >= state.dungeon.max_rooms:
            return state

        next_room = state.dungeon.room + 1
        allies = state.snapshot().allies
        for ally in allies:
            ally.status.clear()
            ally.last_triggered_gambit_id = None
            if ally.is_alive:
                heal = math.floor(ally.stats.max_hp * ROOM_HEAL_RATIO)
                ally.stats.hp = min(ally.stats.max_hp, ally.stats.hp + heal)

        enemies = self.get_enemies_for_room(next_room, rng)
        new_state = BattleState(
            allies=allies,
            enemies=enemies,
            dungeon=DungeonState(room=next_room, max_rooms=state.dungeon.max_rooms),
            tick=0,
            log=["💤 The party catches its breath and licks its wounds."],
            status="PREPARATION",
        )
        new_state.log.extend(self._room_entry_lines(new_state.dungeon, enemies))
        logger.debug("Advanced to room %s/%s", next_room, new_state.dungeon.max_rooms)
        return new_state

    def get_enemies_for_room(self, room_number: int, rng: RNG) -> List[Unit]:
        """Spawn a fresh roster for the room."""
        room_def = self._get_room(room_number)
        return [create_enemy_unit(enemy_id, self._enemies_repo, rng) for enemy_id in room_def.enemy_ids]

    def get_room_description(self, room_number: int) -> str:
        room_def = self._get_room(room_number)
        return f"{room_def.name}: {room_def.description}"

    def _get_room(self, room_number: int) -> RoomDef:
        try:
            return self._rooms_repo.get_by_number(room_number)
        except KeyError as exc:
            raise FactoryError(f"Room {room_number} not found.") from exc

    def _room_entry_lines(self, dungeon: DungeonState, enemies: Sequence[Unit]) -> List[str]:
        return [
            f"🚪 Room {dungeon.room}/{dungeon.max_rooms}",
            self.get_room_description(dungeon.room),
            f"{', '.join(enemy.label for enemy in enemies)} appear!",
        ]
