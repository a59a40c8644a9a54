"""Persona repository."""
from __future__ import annotations

from typing import Dict

from catcommand.data.errors import DataValidationError
from catcommand.data.repositories.base import RepositoryBase
from catcommand.domain.defs import PersonaDef


class PersonasRepository(RepositoryBase[PersonaDef]):
    """Loads playable persona templates."""

    def __init__(self, base_path=None) -> None:
        super().__init__("personas.json", base_path)

    def _build(self, raw: dict[str, object]) -> Dict[str, PersonaDef]:
        personas: Dict[str, PersonaDef] = {}
        for raw_id, payload in raw.items():
            if not isinstance(raw_id, str) or not raw_id.strip():
                raise DataValidationError("Persona IDs must be non-empty strings.")
            context = f"persona '{raw_id}'"
            persona_data = self._require_mapping(payload, context)
            self._assert_required(persona_data, {"name", "icon", "base_stats", "gambits"}, context)
            personas[raw_id] = PersonaDef(
                id=raw_id,
                name=self._require_str(persona_data["name"], f"{context} name"),
                icon=self._require_str(persona_data["icon"], f"{context} icon"),
                description=self._require_str(persona_data.get("description", ""), f"{context} description"),
                base_stats=self._parse_base_stats(persona_data["base_stats"], f"{context} base_stats"),
                gambits=self._parse_gambits(persona_data["gambits"], f"{context} gambits"),
            )
        return personas

    def ordered(self) -> list[PersonaDef]:
        """Return personas in file order, which is the selection-screen order."""
        self._ensure_loaded()
        assert self._definitions is not None
        return list(self._definitions.values())
