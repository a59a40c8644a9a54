from __future__ import annotations

import json

import pytest

from catcommand.core.rng import RNG
from catcommand.data.repositories import EnemiesRepository, PersonasRepository, RoomsRepository
from catcommand.services.battle_service import BattleService
from catcommand.services.dungeon_service import DungeonService
from catcommand.services.errors import SaveLoadError
from catcommand.services.save_service import SaveService


def _start_run():
    service = DungeonService(
        personas_repo=PersonasRepository(),
        enemies_repo=EnemiesRepository(),
        rooms_repo=RoomsRepository(),
    )
    rng = RNG(31)
    return service.start_run(["mitzie", "brutus"], rng), rng


def test_save_payload_metadata() -> None:
    state, rng = _start_run()

    payload = SaveService().serialize(state, rng, name="Morning run")

    metadata = payload["metadata"]
    assert payload["save_version"] == SaveService.SAVE_VERSION
    assert metadata["name"] == "Morning run"
    assert (metadata["room"], metadata["max_rooms"]) == (1, 5)
    assert metadata["status"] == "PREPARATION"
    assert metadata["allies"] == ["Commander Mitzie", "Sir Brutus"]
    assert metadata["created_at"] == metadata["saved_at"]


def test_created_at_is_preserved() -> None:
    state, rng = _start_run()
    payload = SaveService().serialize(state, rng, name="Run", created_at="2020-01-01T00:00:00+00:00")
    assert payload["metadata"]["created_at"] == "2020-01-01T00:00:00+00:00"


def test_loaded_run_continues_identically() -> None:
    state, rng = _start_run()
    battle = BattleService()
    state = battle.begin_fight(state)
    state = battle.tick(state, rng)

    save_service = SaveService()
    payload = json.loads(json.dumps(save_service.serialize(state, rng, name="Run")))
    loaded_state, loaded_rng = save_service.deserialize(payload)

    assert loaded_state.log == state.log
    assert [u.stats.hp for u in loaded_state.iter_units()] == [u.stats.hp for u in state.iter_units()]
    assert [u.faction for u in loaded_state.enemies] == ["enemies"]

    expected = battle.tick(state, rng)
    actual = battle.tick(loaded_state, loaded_rng)
    assert actual.log == expected.log


def test_wrong_version_rejected() -> None:
    state, rng = _start_run()
    payload = SaveService().serialize(state, rng, name="Run")
    payload["save_version"] = 99
    with pytest.raises(SaveLoadError):
        SaveService().deserialize(payload)


def test_bad_gambit_rejected() -> None:
    state, rng = _start_run()
    payload = SaveService().serialize(state, rng, name="Run")
    payload["state"]["allies"][0]["gambits"][0]["action"] = "FIREBALL"
    with pytest.raises(SaveLoadError):
        SaveService().deserialize(payload)


def test_bad_hp_rejected() -> None:
    state, rng = _start_run()
    payload = SaveService().serialize(state, rng, name="Run")
    payload["state"]["enemies"][0]["stats"]["hp"] = 10_000
    with pytest.raises(SaveLoadError):
        SaveService().deserialize(payload)


def test_missing_sections_rejected() -> None:
    with pytest.raises(SaveLoadError):
        SaveService().deserialize({"save_version": SaveService.SAVE_VERSION})
    with pytest.raises(SaveLoadError):
        SaveService().deserialize([])  # type: ignore[arg-type]


def test_cleared_final_room_is_rejected() -> None:
    state, rng = _start_run()
    state.status = "ROOM_CLEARED"
    state.dungeon.room = state.dungeon.max_rooms
    payload = SaveService().serialize(state, rng, name="Run")
    with pytest.raises(SaveLoadError):
        SaveService().deserialize(payload)


def test_cleared_middle_room_loads() -> None:
    state, rng = _start_run()
    state.status = "ROOM_CLEARED"
    state.dungeon.room = 3
    payload = SaveService().serialize(state, rng, name="Run")
    loaded_state, _ = SaveService().deserialize(payload)
    assert loaded_state.status == "ROOM_CLEARED"
    assert loaded_state.dungeon.room == 3
