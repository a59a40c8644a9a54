from __future__ import annotations

import pytest

from catcommand.core.rng import RNG
from catcommand.data.repositories import EnemiesRepository, PersonasRepository, RoomsRepository
from catcommand.services.dungeon_service import DungeonService
from catcommand.services.errors import FactoryError


def _build_service() -> DungeonService:
    return DungeonService(
        personas_repo=PersonasRepository(),
        enemies_repo=EnemiesRepository(),
        rooms_repo=RoomsRepository(),
    )


def _cleared_run(service: DungeonService, persona_ids=("brutus",), *, room: int = 1):
    state = service.start_run(list(persona_ids), RNG(10))
    state.status = "ROOM_CLEARED"
    state.dungeon.room = room
    state.tick = 12
    for enemy in state.enemies:
        enemy.stats.hp = 0
        enemy.is_dead = True
    return state


def test_start_run_enters_room_one() -> None:
    service = _build_service()
    state = service.start_run(["mitzie", "luna"], RNG(3))

    assert state.status == "PREPARATION"
    assert state.tick == 0
    assert (state.dungeon.room, state.dungeon.max_rooms) == (1, 5)
    assert [ally.source_id for ally in state.allies] == ["mitzie", "luna"]
    assert [enemy.source_id for enemy in state.enemies] == ["toaster"]
    assert all(ally.faction == "allies" for ally in state.allies)
    assert all(enemy.faction == "enemies" for enemy in state.enemies)
    assert "🚪 Room 1/5" in state.log


@pytest.mark.parametrize("persona_ids", [[], ["mitzie", "brutus", "luna", "mitzie"]])
def test_start_run_rejects_bad_party_size(persona_ids) -> None:
    with pytest.raises(ValueError):
        _build_service().start_run(persona_ids, RNG(1))


def test_start_run_unknown_persona() -> None:
    with pytest.raises(FactoryError):
        _build_service().start_run(["garfield"], RNG(1))


def test_advance_room_heals_thirty_percent() -> None:
    service = _build_service()
    state = _cleared_run(service)
    state.allies[0].stats.hp = 50

    new_state = service.advance_room(state, RNG(4))

    assert new_state.allies[0].stats.hp == 80
    assert new_state.status == "PREPARATION"
    assert new_state.dungeon.room == 2
    assert new_state.tick == 0
    assert [enemy.source_id for enemy in new_state.enemies] == ["roomba", "toaster"]
    assert all(enemy.stats.hp == enemy.stats.max_hp for enemy in new_state.enemies)


def test_advance_room_heal_is_capped() -> None:
    service = _build_service()
    state = _cleared_run(service)
    state.allies[0].stats.hp = 95

    new_state = service.advance_room(state, RNG(4))

    assert new_state.allies[0].stats.hp == 100


def test_advance_room_clears_every_flag() -> None:
    service = _build_service()
    state = _cleared_run(service)
    status = state.allies[0].status
    status.blocking = status.dodging = status.charged = True

    new_state = service.advance_room(state, RNG(4))

    flags = new_state.allies[0].status
    assert (flags.blocking, flags.dodging, flags.charged) == (False, False, False)


def test_fallen_allies_stay_down() -> None:
    service = _build_service()
    state = _cleared_run(service, ("brutus", "luna"))
    luna = state.allies[1]
    luna.stats.hp = 0
    luna.is_dead = True

    new_state = service.advance_room(state, RNG(4))

    assert new_state.allies[1].is_dead
    assert new_state.allies[1].stats.hp == 0


def test_advance_room_leaves_input_untouched() -> None:
    service = _build_service()
    state = _cleared_run(service)
    state.allies[0].stats.hp = 50

    service.advance_room(state, RNG(4))

    assert state.allies[0].stats.hp == 50
    assert state.status == "ROOM_CLEARED"
    assert state.dungeon.room == 1


def test_advance_room_is_noop_unless_cleared() -> None:
    service = _build_service()
    state = service.start_run(["mitzie"], RNG(2))
    assert service.advance_room(state, RNG(2)) is state


def test_advance_into_final_room() -> None:
    service = _build_service()
    state = _cleared_run(service, room=4)

    new_state = service.advance_room(state, RNG(9))

    assert (new_state.dungeon.room, new_state.dungeon.max_rooms) == (5, 5)
    assert [enemy.source_id for enemy in new_state.enemies] == ["vacuum", "blender"]


def test_room_description() -> None:
    assert _build_service().get_room_description(1).startswith("The Kitchen: ")


def test_unknown_room_raises() -> None:
    with pytest.raises(FactoryError):
        _build_service().get_enemies_for_room(99, RNG(1))


def test_advance_room_past_last_room_is_noop() -> None:
    service = _build_service()
    state = _cleared_run(service, room=5)

    assert service.advance_room(state, RNG(9)) is state
