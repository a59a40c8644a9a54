"""Factories that stamp battle units out of persona and enemy templates."""
from __future__ import annotations

from typing import Iterable, List

from catcommand.core.rng import RNG
from catcommand.data.repositories import EnemiesRepository, PersonasRepository
from catcommand.domain.battle_models import Gambit, StatusEffects, Unit
from catcommand.domain.defs import GambitDef
from catcommand.services.errors import FactoryError

from .id_factory import make_instance_id


def create_player_unit(persona_id: str, personas_repo: PersonasRepository, rng: RNG) -> Unit:
    """Instantiate an ally unit from a persona template."""
    try:
        persona_def = personas_repo.get(persona_id)
    except KeyError as exc:
        raise FactoryError(f"Persona '{persona_id}' not found.") from exc

    return Unit(
        instance_id=make_instance_id("ally", rng),
        name=persona_def.name,
        icon=persona_def.icon,
        faction="allies",
        stats=persona_def.base_stats.to_stats(),
        gambits=create_gambits(persona_def.gambits, rng),
        status=StatusEffects(),
        source_id=persona_def.id,
    )


def create_enemy_unit(enemy_id: str, enemies_repo: EnemiesRepository, rng: RNG) -> Unit:
    """Instantiate an enemy unit using the provided repository."""
    try:
        enemy_def = enemies_repo.get(enemy_id)
    except KeyError as exc:
        raise FactoryError(f"Enemy '{enemy_id}' not found.") from exc

    return Unit(
        instance_id=make_instance_id("enemy", rng),
        name=enemy_def.name,
        icon=enemy_def.icon,
        faction="enemies",
        stats=enemy_def.base_stats.to_stats(),
        gambits=create_gambits(enemy_def.gambits, rng),
        status=StatusEffects(),
        source_id=enemy_def.id,
    )


def create_gambits(gambit_defs: Iterable[GambitDef], rng: RNG) -> List[Gambit]:
    return [
        Gambit(
            gambit_id=make_instance_id("gambit", rng),
            active=gambit_def.active,
            priority=gambit_def.priority,
            condition=gambit_def.condition,
            target=gambit_def.target,
            action=gambit_def.action,
        )
        for gambit_def in gambit_defs
    ]


def create_empty_gambit(priority: int, rng: RNG) -> Gambit:
    """Return an inactive placeholder slot."""
    return Gambit(
        gambit_id=make_instance_id("gambit", rng),
        active=False,
        priority=priority,
        condition="ALWAYS",
        target="ENEMY_CLOSEST",
        action="WAIT",
    )
