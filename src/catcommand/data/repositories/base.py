"""Base repository implementation for JSON content tables."""
from __future__ import annotations

from pathlib import Path
from typing import Dict, Generic, List, TypeVar

from catcommand.core.types import ACTIONS, CONDITIONS, TARGETS
from catcommand.data.errors import DataValidationError
from catcommand.data.json_loader import load_json
from catcommand.data import paths
from catcommand.domain.defs import GambitDef
from catcommand.domain.entities import BaseStats

T = TypeVar("T")


class RepositoryBase(Generic[T]):
    """Common caching and loading behavior for repositories."""

    def __init__(self, filename: str, base_path: Path | str | None = None) -> None:
        self._filename = filename
        self._base_path = Path(base_path) if base_path is not None else None
        self._definitions: Dict[str, T] | None = None

    def _get_file_path(self) -> Path:
        definitions_dir = paths.get_definitions_path(self._base_path)
        return definitions_dir / self._filename

    def _load_raw(self) -> dict[str, object]:
        file_path = self._get_file_path()
        raw = load_json(file_path)
        if not isinstance(raw, dict):
            raise DataValidationError(f"Expected top-level object in {file_path}")
        return raw

    def _build(self, raw: dict[str, object]) -> Dict[str, T]:
        """Convert a raw dict into typed definitions."""
        raise NotImplementedError

    def _ensure_loaded(self) -> None:
        if self._definitions is None:
            raw = self._load_raw()
            self._definitions = self._build(raw)

    def get(self, def_id: str) -> T:
        """Return a definition by id."""
        self._ensure_loaded()
        assert self._definitions is not None
        try:
            return self._definitions[def_id]
        except KeyError as exc:
            raise KeyError(def_id) from exc

    def all(self) -> list[T]:
        """Return all definitions sorted deterministically by id."""
        self._ensure_loaded()
        assert self._definitions is not None
        return [self._definitions[key] for key in sorted(self._definitions.keys())]

    @staticmethod
    def _require_mapping(value: object, context: str) -> dict[str, object]:
        if not isinstance(value, dict):
            raise DataValidationError(f"{context} must be an object/dict.")
        return value

    @staticmethod
    def _require_str(value: object, context: str) -> str:
        if not isinstance(value, str):
            raise DataValidationError(f"{context} must be a string.")
        return value

    @staticmethod
    def _require_int(value: object, context: str) -> int:
        # bool is an int subclass; reject it explicitly.
        if isinstance(value, bool) or not isinstance(value, int):
            raise DataValidationError(f"{context} must be an integer.")
        return value

    @staticmethod
    def _require_bool(value: object, context: str) -> bool:
        if not isinstance(value, bool):
            raise DataValidationError(f"{context} must be a boolean.")
        return value

    @staticmethod
    def _require_str_list(value: object, context: str) -> List[str]:
        if not isinstance(value, list):
            raise DataValidationError(f"{context} must be a list.")
        result: List[str] = []
        for item in value:
            if not isinstance(item, str):
                raise DataValidationError(f"{context} entries must be strings.")
            result.append(item)
        return result

    @staticmethod
    def _assert_required(payload: dict[str, object], required: set[str], context: str) -> None:
        missing = required - payload.keys()
        if missing:
            raise DataValidationError(f"{context} missing fields: {sorted(missing)}")

    def _parse_base_stats(self, value: object, context: str) -> BaseStats:
        mapping = self._require_mapping(value, context)
        self._assert_required(mapping, {"max_hp", "attack", "defense", "speed"}, context)
        max_hp = self._require_int(mapping["max_hp"], f"{context}.max_hp")
        if max_hp <= 0:
            raise DataValidationError(f"{context}.max_hp must be > 0.")
        attack = self._require_int(mapping["attack"], f"{context}.attack")
        defense = self._require_int(mapping["defense"], f"{context}.defense")
        if attack < 0 or defense < 0:
            raise DataValidationError(f"{context} attack and defense must be >= 0.")
        return BaseStats(
            max_hp=max_hp,
            attack=attack,
            defense=defense,
            speed=self._require_int(mapping["speed"], f"{context}.speed"),
        )

    def _parse_gambits(self, value: object, context: str) -> tuple[GambitDef, ...]:
        if not isinstance(value, list):
            raise DataValidationError(f"{context} must be a list.")
        gambits: List[GambitDef] = []
        for index, entry in enumerate(value):
            entry_context = f"{context}[{index}]"
            mapping = self._require_mapping(entry, entry_context)
            self._assert_required(mapping, {"priority", "condition", "target", "action"}, entry_context)
            condition = self._require_str(mapping["condition"], f"{entry_context}.condition")
            if condition not in CONDITIONS:
                raise DataValidationError(f"{entry_context}.condition '{condition}' is not a known condition.")
            target = self._require_str(mapping["target"], f"{entry_context}.target")
            if target not in TARGETS:
                raise DataValidationError(f"{entry_context}.target '{target}' is not a known target.")
            action = self._require_str(mapping["action"], f"{entry_context}.action")
            if action not in ACTIONS:
                raise DataValidationError(f"{entry_context}.action '{action}' is not a known action.")
            gambits.append(
                GambitDef(
                    priority=self._require_int(mapping["priority"], f"{entry_context}.priority"),
                    condition=condition,  # type: ignore[arg-type]
                    target=target,  # type: ignore[arg-type]
                    action=action,  # type: ignore[arg-type]
                    active=self._require_bool(mapping.get("active", True), f"{entry_context}.active"),
                )
            )
        return tuple(gambits)
