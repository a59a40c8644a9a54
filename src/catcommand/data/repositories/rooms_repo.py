"""Repository for dungeon room definitions."""
from __future__ import annotations

from typing import Dict

from catcommand.data.errors import DataReferenceError, DataValidationError
from catcommand.data.json_loader import load_json
from catcommand.data import paths
from catcommand.data.repositories.base import RepositoryBase
from catcommand.domain.defs import RoomDef


class RoomsRepository(RepositoryBase[RoomDef]):
    """Loads and validates rooms and their enemy rosters."""

    def __init__(self, base_path=None) -> None:
        super().__init__("rooms.json", base_path)
        self._by_number: Dict[int, RoomDef] = {}

    def _build(self, raw: dict[str, object]) -> Dict[str, RoomDef]:
        enemy_ids = self._load_enemy_ids()
        definitions: Dict[str, RoomDef] = {}
        by_number: Dict[int, RoomDef] = {}
        for room_id, payload in raw.items():
            if not isinstance(room_id, str) or not room_id.strip():
                raise DataValidationError("room id must be a non-empty string.")
            context = f"room '{room_id}'"
            mapping = self._require_mapping(payload, context)
            self._assert_required(mapping, {"number", "name", "description", "enemy_ids"}, context)

            number = self._require_int(mapping["number"], f"{context} number")
            if number in by_number:
                raise DataValidationError(f"{context} reuses room number {number}.")
            name = self._require_str(mapping["name"], f"{context} name").strip()
            if not name:
                raise DataValidationError(f"{context} name must not be empty.")

            roster = self._require_str_list(mapping["enemy_ids"], f"{context} enemy_ids")
            if not roster:
                raise DataValidationError(f"{context} enemy_ids must not be empty.")
            for enemy_id in roster:
                if enemy_id not in enemy_ids:
                    raise DataReferenceError(f"{context} enemy '{enemy_id}' not found in enemies.json.")

            room = RoomDef(
                id=room_id,
                number=number,
                name=name,
                description=self._require_str(mapping["description"], f"{context} description"),
                enemy_ids=tuple(roster),
            )
            definitions[room_id] = room
            by_number[number] = room

        if sorted(by_number) != list(range(1, len(by_number) + 1)):
            raise DataValidationError("room numbers must be contiguous and start at 1.")
        self._by_number = by_number
        return definitions

    def get_by_number(self, number: int) -> RoomDef:
        """Return the room at the given 1-based position."""
        self._ensure_loaded()
        try:
            return self._by_number[number]
        except KeyError as exc:
            raise KeyError(number) from exc

    def room_count(self) -> int:
        self._ensure_loaded()
        return len(self._by_number)

    def _load_enemy_ids(self) -> set[str]:
        definitions_dir = paths.get_definitions_path(self._base_path)
        raw = load_json(definitions_dir / "enemies.json")
        if not isinstance(raw, dict):
            raise DataValidationError("enemies.json must be an object.")
        return {key for key in raw.keys() if isinstance(key, str)}
