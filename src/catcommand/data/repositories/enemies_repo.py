"""Enemies repository."""
from __future__ import annotations

from typing import Dict

from catcommand.data.errors import DataValidationError
from catcommand.data.repositories.base import RepositoryBase
from catcommand.domain.defs import EnemyDef


class EnemiesRepository(RepositoryBase[EnemyDef]):
    """Loads and validates enemy templates."""

    def __init__(self, base_path=None) -> None:
        super().__init__("enemies.json", base_path)

    def _build(self, raw: dict[str, object]) -> Dict[str, EnemyDef]:
        enemies: Dict[str, EnemyDef] = {}
        for raw_id, payload in raw.items():
            if not isinstance(raw_id, str) or not raw_id.strip():
                raise DataValidationError("Enemy IDs must be non-empty strings.")
            context = f"enemy '{raw_id}'"
            enemy_data = self._require_mapping(payload, context)
            self._assert_required(enemy_data, {"name", "icon", "base_stats", "gambits"}, context)
            gambits = self._parse_gambits(enemy_data["gambits"], f"{context} gambits")
            if not any(gambit.active for gambit in gambits):
                raise DataValidationError(f"{context} needs at least one active gambit.")
            enemies[raw_id] = EnemyDef(
                id=raw_id,
                name=self._require_str(enemy_data["name"], f"{context} name"),
                icon=self._require_str(enemy_data["icon"], f"{context} icon"),
                base_stats=self._parse_base_stats(enemy_data["base_stats"], f"{context} base_stats"),
                gambits=gambits,
            )
        return enemies
