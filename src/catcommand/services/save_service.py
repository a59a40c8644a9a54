"""Serialization helpers for manual save/load of runs."""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Tuple

from catcommand.core.rng import RNG
from catcommand.core.types import ACTIONS, CONDITIONS, TARGETS, BattleStatus, Faction
from catcommand.domain.battle_models import BattleState, DungeonState, Gambit, StatusEffects, Unit
from catcommand.domain.entities import Stats
from catcommand.services.errors import SaveLoadError

logger = logging.getLogger(__name__)

SavePayload = Dict[str, Any]
_VALID_STATUSES: tuple[BattleStatus, ...] = ("PREPARATION", "FIGHTING", "VICTORY", "DEFEAT", "ROOM_CLEARED")


class SaveService:
    """Converts a run (battle snapshot + RNG) to/from a validated, versioned payload."""

    SAVE_VERSION = 1

    def serialize(
        self,
        state: BattleState,
        rng: RNG,
        *,
        name: str,
        created_at: str | None = None,
    ) -> SavePayload:
        """Return a JSON-serializable payload for disk persistence."""
        saved_at = datetime.now(timezone.utc).isoformat()
        payload: SavePayload = {
            "save_version": self.SAVE_VERSION,
            "metadata": {
                "name": name,
                "room": state.dungeon.room,
                "max_rooms": state.dungeon.max_rooms,
                "status": state.status,
                "tick": state.tick,
                "allies": [unit.name for unit in state.allies],
                "created_at": created_at or saved_at,
                "saved_at": saved_at,
            },
            "rng": rng.export_state(),
            "state": self._serialize_state(state),
        }
        logger.debug("Serialized run '%s' at room %s", name, state.dungeon.room)
        return payload

    def deserialize(self, payload: Mapping[str, Any]) -> Tuple[BattleState, RNG]:
        """Rehydrate a BattleState + RNG from a persisted payload."""
        if not isinstance(payload, Mapping):
            raise SaveLoadError("Save data must be a JSON object.")
        if payload.get("save_version") != self.SAVE_VERSION:
            raise SaveLoadError("Save format changed. Please start a new run.")
        rng_payload = payload.get("rng")
        state_payload = payload.get("state")
        if not isinstance(rng_payload, Mapping) or not isinstance(state_payload, Mapping):
            raise SaveLoadError("Save data is missing required sections.")

        rng = RNG(self._require_int(rng_payload.get("seed"), "rng.seed"))
        try:
            rng.restore_state(dict(rng_payload))
        except ValueError as exc:
            raise SaveLoadError(f"Invalid RNG state: {exc}") from exc

        status = state_payload.get("status")
        if status not in _VALID_STATUSES:
            raise SaveLoadError(f"state.status '{status}' is not a valid battle status.")
        dungeon_payload = self._require_mapping(state_payload.get("dungeon"), "state.dungeon")
        dungeon = DungeonState(
            room=self._require_int(dungeon_payload.get("room"), "state.dungeon.room"),
            max_rooms=self._require_int(dungeon_payload.get("max_rooms"), "state.dungeon.max_rooms"),
        )
        if not 1 <= dungeon.room <= dungeon.max_rooms:
            raise SaveLoadError("state.dungeon.room is out of range.")
        if status == "ROOM_CLEARED" and dungeon.room >= dungeon.max_rooms:
            raise SaveLoadError("A cleared final room must be saved as VICTORY.")

        state = BattleState(
            allies=self._coerce_units(state_payload.get("allies"), "allies"),
            enemies=self._coerce_units(state_payload.get("enemies"), "enemies"),
            dungeon=dungeon,
            tick=self._require_int(state_payload.get("tick"), "state.tick"),
            log=self._coerce_str_list(state_payload.get("log"), "state.log"),
            status=status,
        )
        logger.debug("Loaded run at room %s (%s)", dungeon.room, status)
        return state, rng

    def _serialize_state(self, state: BattleState) -> Dict[str, Any]:
        return {
            "tick": state.tick,
            "status": state.status,
            "dungeon": {"room": state.dungeon.room, "max_rooms": state.dungeon.max_rooms},
            "allies": [self._serialize_unit(unit) for unit in state.allies],
            "enemies": [self._serialize_unit(unit) for unit in state.enemies],
            "log": list(state.log),
        }

    @staticmethod
    def _serialize_unit(unit: Unit) -> Dict[str, Any]:
        return {
            "instance_id": unit.instance_id,
            "name": unit.name,
            "icon": unit.icon,
            "source_id": unit.source_id,
            "is_dead": unit.is_dead,
            "stats": {
                "max_hp": unit.stats.max_hp,
                "hp": unit.stats.hp,
                "attack": unit.stats.attack,
                "defense": unit.stats.defense,
                "speed": unit.stats.speed,
            },
            "status": {
                "blocking": unit.status.blocking,
                "dodging": unit.status.dodging,
                "charged": unit.status.charged,
            },
            "gambits": [
                {
                    "gambit_id": gambit.gambit_id,
                    "active": gambit.active,
                    "priority": gambit.priority,
                    "condition": gambit.condition,
                    "target": gambit.target,
                    "action": gambit.action,
                }
                for gambit in unit.gambits
            ],
        }

    def _coerce_units(self, value: object, faction: Faction) -> List[Unit]:
        if not isinstance(value, list):
            raise SaveLoadError(f"state.{faction} must be a list.")
        units: List[Unit] = []
        for index, entry in enumerate(value):
            context = f"state.{faction}[{index}]"
            mapping = self._require_mapping(entry, context)
            stats_payload = self._require_mapping(mapping.get("stats"), f"{context}.stats")
            stats = Stats(
                max_hp=self._require_int(stats_payload.get("max_hp"), f"{context}.stats.max_hp"),
                hp=self._require_int(stats_payload.get("hp"), f"{context}.stats.hp"),
                attack=self._require_int(stats_payload.get("attack"), f"{context}.stats.attack"),
                defense=self._require_int(stats_payload.get("defense"), f"{context}.stats.defense"),
                speed=self._require_int(stats_payload.get("speed"), f"{context}.stats.speed"),
            )
            if stats.max_hp <= 0 or not 0 <= stats.hp <= stats.max_hp:
                raise SaveLoadError(f"{context}.stats hp must be between 0 and max_hp.")
            status_payload = self._require_mapping(mapping.get("status"), f"{context}.status")
            source_id = mapping.get("source_id")
            if source_id is not None and not isinstance(source_id, str):
                raise SaveLoadError(f"{context}.source_id must be a string.")
            units.append(
                Unit(
                    instance_id=self._require_str(mapping.get("instance_id"), f"{context}.instance_id"),
                    name=self._require_str(mapping.get("name"), f"{context}.name"),
                    icon=self._require_str(mapping.get("icon"), f"{context}.icon"),
                    faction=faction,
                    stats=stats,
                    gambits=self._coerce_gambits(mapping.get("gambits"), f"{context}.gambits"),
                    is_dead=self._require_bool(mapping.get("is_dead"), f"{context}.is_dead"),
                    status=StatusEffects(
                        blocking=self._require_bool(status_payload.get("blocking"), f"{context}.status.blocking"),
                        dodging=self._require_bool(status_payload.get("dodging"), f"{context}.status.dodging"),
                        charged=self._require_bool(status_payload.get("charged"), f"{context}.status.charged"),
                    ),
                    source_id=source_id,
                )
            )
        return units

    def _coerce_gambits(self, value: object, context: str) -> List[Gambit]:
        if not isinstance(value, list):
            raise SaveLoadError(f"{context} must be a list.")
        gambits: List[Gambit] = []
        for index, entry in enumerate(value):
            entry_context = f"{context}[{index}]"
            mapping = self._require_mapping(entry, entry_context)
            condition = mapping.get("condition")
            target = mapping.get("target")
            action = mapping.get("action")
            if condition not in CONDITIONS or target not in TARGETS or action not in ACTIONS:
                raise SaveLoadError(f"{entry_context} has an unknown condition, target or action.")
            gambits.append(
                Gambit(
                    gambit_id=self._require_str(mapping.get("gambit_id"), f"{entry_context}.gambit_id"),
                    active=self._require_bool(mapping.get("active"), f"{entry_context}.active"),
                    priority=self._require_int(mapping.get("priority"), f"{entry_context}.priority"),
                    condition=condition,
                    target=target,
                    action=action,
                )
            )
        return gambits

    @staticmethod
    def _require_mapping(value: object, context: str) -> Mapping[str, Any]:
        if not isinstance(value, Mapping):
            raise SaveLoadError(f"{context} must be an object.")
        return value

    @staticmethod
    def _require_str(value: object, context: str) -> str:
        if not isinstance(value, str):
            raise SaveLoadError(f"{context} must be a string.")
        return value

    @staticmethod
    def _require_int(value: object, context: str) -> int:
        if isinstance(value, bool) or not isinstance(value, int):
            raise SaveLoadError(f"{context} must be an integer.")
        return value

    @staticmethod
    def _require_bool(value: object, context: str) -> bool:
        if not isinstance(value, bool):
            raise SaveLoadError(f"{context} must be a boolean.")
        return value

    @staticmethod
    def _coerce_str_list(value: object, context: str) -> List[str]:
        if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
            raise SaveLoadError(f"{context} must be a list of strings.")
        return list(value)
