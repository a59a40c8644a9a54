"""Controller tests: run flow without any presentation code."""
from __future__ import annotations

import pytest

from catcommand.data.repositories import EnemiesRepository, PersonasRepository, RoomsRepository
from catcommand.services import BattleController, BattleService, DungeonService, GambitEdit, GambitService
from catcommand.services.controllers.battle_controller import HISTORY_LIMIT
from catcommand.services.errors import GambitEditError


def _build_battle_controller() -> BattleController:
    dungeon_service = DungeonService(
        personas_repo=PersonasRepository(),
        enemies_repo=EnemiesRepository(),
        rooms_repo=RoomsRepository(),
    )
    return BattleController(BattleService(), dungeon_service, GambitService())


def test_start_run_records_history() -> None:
    controller = _build_battle_controller()
    session = controller.start_run(["mitzie"], 42, name="Test")

    assert controller.is_preparing(session)
    assert list(session.history) == [session.state]
    assert session.name == "Test"
    assert [persona.id for persona in controller.list_personas()] == ["mitzie", "brutus", "luna"]


def test_step_is_noop_before_fight() -> None:
    controller = _build_battle_controller()
    session = controller.start_run(["mitzie"], 42)
    before = session.state

    assert controller.step(session) is before
    assert len(session.history) == 1


def test_fight_until_room_cleared_then_advance() -> None:
    controller = _build_battle_controller()
    session = controller.start_run(["mitzie", "brutus", "luna"], 7)
    controller.begin_fight(session)

    for _ in range(100):
        if not controller.is_fighting(session):
            break
        controller.step(session)

    assert controller.needs_room_advance(session)
    cleared = session.state
    controller.advance_room(session)

    assert session.state.dungeon.room == 2
    assert controller.is_preparing(session)
    assert session.history[-2] is cleared
    # earlier snapshots are kept intact
    assert session.history[0].status == "PREPARATION"
    assert session.history[0].tick == 0


def test_gambit_edits_through_controller() -> None:
    controller = _build_battle_controller()
    session = controller.start_run(["mitzie"], 3)
    unit = controller.editable_units(session)[0]
    gambit_id = unit.sorted_gambits()[0].gambit_id

    controller.apply_gambit_edit(
        session, GambitEdit(edit_type="set_action", unit_id=unit.instance_id, gambit_id=gambit_id, action="BLOCK")
    )
    controller.apply_gambit_edit(session, GambitEdit(edit_type="add", unit_id=unit.instance_id))

    edited = session.state.find_unit(unit.instance_id)
    assert edited is not None
    assert edited.sorted_gambits()[0].action == "BLOCK"
    assert len(edited.gambits) == len(unit.gambits) + 1


def test_gambit_edit_requires_gambit_id() -> None:
    controller = _build_battle_controller()
    session = controller.start_run(["mitzie"], 3)
    unit_id = session.state.allies[0].instance_id
    with pytest.raises(ValueError):
        controller.apply_gambit_edit(session, GambitEdit(edit_type="toggle_active", unit_id=unit_id))


def test_no_edits_while_fighting() -> None:
    controller = _build_battle_controller()
    session = controller.start_run(["mitzie"], 3)
    unit = session.state.allies[0]
    controller.begin_fight(session)

    assert controller.editable_units(session) == []
    with pytest.raises(GambitEditError):
        controller.apply_gambit_edit(
            session,
            GambitEdit(edit_type="toggle_active", unit_id=unit.instance_id, gambit_id=unit.gambits[0].gambit_id),
        )


def test_history_keeps_only_recent_snapshots() -> None:
    controller = _build_battle_controller()
    session = controller.start_run(["mitzie"], 3)
    unit = session.state.allies[0]
    gambit_id = unit.gambits[0].gambit_id

    for _ in range(HISTORY_LIMIT + 5):
        controller.apply_gambit_edit(
            session, GambitEdit(edit_type="toggle_active", unit_id=unit.instance_id, gambit_id=gambit_id)
        )

    assert len(session.history) == HISTORY_LIMIT
    assert session.history[-1] is session.state
