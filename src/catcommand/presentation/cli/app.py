"""Console-driven UI loops for Cat-Command."""
from __future__ import annotations

import logging
import secrets
from typing import Any, Dict, List, Literal, Sequence, Tuple

from catcommand.core.types import ACTIONS
from catcommand.data.repositories import EnemiesRepository, PersonasRepository, RoomsRepository
from catcommand.domain.battle_models import BattleState, Unit
from catcommand.domain.defs import PersonaDef
from catcommand.services import (
    BattleController,
    BattleService,
    DungeonService,
    GambitEdit,
    GambitEditError,
    GambitService,
    RunSession,
    SaveLoadError,
    SaveService,
)
from catcommand.services.dungeon_service import MAX_PARTY_SIZE
from catcommand.presentation.cli import config
from catcommand.presentation.cli.game_loop import run_battle_loop
from catcommand.presentation.cli.render import (
    ACTION_LABELS,
    debug_enabled,
    format_gambit,
    render_battle_view,
    render_bullet_lines,
    render_heading,
    render_menu,
)
from catcommand.presentation.cli.save_slots import SaveSlotStore, SlotMetadata

MenuAction = Literal["new_run", "load_run", "quit"]
PrepAction = Literal["fight", "edit", "save", "log", "quit"]
_MAX_RANDOM_SEED = 2**31 - 1


def main() -> None:
    """Start the interactive CLI session."""
    if debug_enabled():
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    settings = config.load_config()
    controller = _build_controller()
    slot_store = SaveSlotStore()
    save_service = SaveService()
    print("=== Cat-Command ===")
    while True:
        action = _prompt_menu("Main Menu", _main_menu_options())
        if action == "quit":
            break
        if action == "new_run":
            session = _start_new_run(controller)
        else:
            session = _load_run(controller, save_service, slot_store)
            if session is None:
                continue
        _run_session(controller, session, settings, save_service, slot_store)
    print("Goodbye!")


def _main_menu_options() -> List[Tuple[str, MenuAction]]:
    return [("New Run", "new_run"), ("Load Run", "load_run"), ("Quit", "quit")]


def _preparation_menu_options() -> List[Tuple[str, PrepAction]]:
    return [
        ("Fight!", "fight"),
        ("Edit Gambits", "edit"),
        ("Save Run", "save"),
        ("Show Full Log", "log"),
        ("Quit to Main Menu", "quit"),
    ]


def _build_controller() -> BattleController:
    """Construct the controller with concrete repositories."""
    personas_repo = PersonasRepository()
    enemies_repo = EnemiesRepository()
    rooms_repo = RoomsRepository()
    dungeon_service = DungeonService(
        personas_repo=personas_repo,
        enemies_repo=enemies_repo,
        rooms_repo=rooms_repo,
    )
    return BattleController(BattleService(), dungeon_service, GambitService())


def _prompt_menu(title: str, options: Sequence[Tuple[str, Any]]) -> Any:
    render_menu(title, [label for label, _ in options])
    index = _prompt_choice(len(options))
    return options[index][1]


def _prompt_choice(choice_count: int) -> int:
    while True:
        raw = input("Select an option: ").strip()
        try:
            index = int(raw) - 1
        except ValueError:
            print("Please enter a number.")
            continue
        if 0 <= index < choice_count:
            return index
        print(f"Please enter a value between 1 and {choice_count}.")


def _prompt_seed() -> int:
    while True:
        raw_value = input("Enter seed (blank for random): ").strip()
        if not raw_value:
            return secrets.randbelow(_MAX_RANDOM_SEED)
        try:
            return int(raw_value)
        except ValueError:
            print("Invalid seed. Please enter a valid integer.")


def _parse_party_selection(raw: str, personas: Sequence[PersonaDef]) -> List[str] | None:
    """Turn '1,3' into persona ids; None when the input is not a valid party."""
    parts = [part.strip() for part in raw.split(",") if part.strip()]
    if not parts or len(parts) > MAX_PARTY_SIZE:
        return None
    chosen: List[str] = []
    for part in parts:
        try:
            index = int(part) - 1
        except ValueError:
            return None
        if not 0 <= index < len(personas):
            return None
        persona_id = personas[index].id
        if persona_id in chosen:
            return None
        chosen.append(persona_id)
    return chosen


def _prompt_party(personas: Sequence[PersonaDef]) -> List[str]:
    render_heading("Choose your warriors")
    for idx, persona in enumerate(personas, start=1):
        stats = persona.base_stats
        print(
            f"{idx}. {persona.icon} {persona.name} - \"{persona.description}\" "
            f"(HP {stats.max_hp}, ATK {stats.attack}, DEF {stats.defense}, SPD {stats.speed})"
        )
    while True:
        raw = input(f"Pick up to {MAX_PARTY_SIZE} (e.g. 1,3): ")
        chosen = _parse_party_selection(raw, personas)
        if chosen:
            return chosen
        print("Invalid party selection.")


def _start_new_run(controller: BattleController) -> RunSession:
    personas = controller.list_personas()
    persona_ids = _prompt_party(personas)
    seed = _prompt_seed()
    name = input("Name this run (default Run): ").strip() or "Run"
    session = controller.start_run(persona_ids, seed, name=name)
    print(f"Run started with seed: {seed}")
    return session


def _run_session(
    controller: BattleController,
    session: RunSession,
    settings: Dict[str, Any],
    save_service: SaveService,
    slot_store: SaveSlotStore,
) -> None:
    """Drive one run until it is won, lost or abandoned."""
    log_lines = settings["log_lines"]
    debug = debug_enabled()
    while True:
        render_battle_view(controller.get_battle_view(session, log_lines=log_lines), debug=debug)

        if controller.is_run_over(session):
            outcome = "The appliances are defeated. Play again!" if session.state.status == "VICTORY" else "Try again!"
            print(f"\n{outcome}")
            return

        if controller.needs_room_advance(session):
            input("Press Enter to move on to the next room...")
            controller.advance_room(session)
            continue

        if controller.is_fighting(session):
            _fight(controller, session, settings)
            continue

        action = _prompt_menu("Preparation", _preparation_menu_options())
        if action == "fight":
            controller.begin_fight(session)
        elif action == "edit":
            _edit_gambits_loop(controller, session)
        elif action == "save":
            _save_run(save_service, slot_store, session)
        elif action == "log":
            render_heading("Combat Log")
            render_bullet_lines(session.state.log)
        else:
            return


def _fight(controller: BattleController, session: RunSession, settings: Dict[str, Any]) -> None:
    log_lines = settings["log_lines"]
    debug = debug_enabled()

    def _on_tick(_: BattleState) -> None:
        render_battle_view(controller.get_battle_view(session, log_lines=log_lines), debug=debug)

    run_battle_loop(controller, session, on_tick=_on_tick, interval=settings["tick_interval_seconds"])


def _edit_gambits_loop(controller: BattleController, session: RunSession) -> None:
    debug = debug_enabled()
    while True:
        units = controller.editable_units(session)
        if not units:
            print("Nobody can be edited right now.")
            return
        options: List[Tuple[str, Unit | None]] = [(unit.label, unit) for unit in units]
        options.append(("Back", None))
        unit = _prompt_menu("Edit whose gambits?", options)
        if unit is None:
            return
        _edit_unit_gambits(controller, session, unit.instance_id, debug=debug)


def _edit_unit_gambits(controller: BattleController, session: RunSession, unit_id: str, *, debug: bool) -> None:
    while True:
        unit = session.state.find_unit(unit_id)
        assert unit is not None
        gambits = unit.sorted_gambits()
        options: List[Tuple[str, str | None]] = [
            (format_gambit(gambit, debug=debug), gambit.gambit_id) for gambit in gambits
        ]
        options.append(("Add empty slot", "__add__"))
        options.append(("Back", None))
        choice = _prompt_menu(f"{unit.label} gambits", options)
        if choice is None:
            return
        try:
            if choice == "__add__":
                controller.apply_gambit_edit(session, GambitEdit(edit_type="add", unit_id=unit_id))
                continue
            edit = _prompt_gambit_edit(unit_id, choice)
            if edit is not None:
                controller.apply_gambit_edit(session, edit)
        except GambitEditError as exc:
            print(f"Cannot edit: {exc}")


def _prompt_gambit_edit(unit_id: str, gambit_id: str) -> GambitEdit | None:
    options: List[Tuple[str, str | None]] = [
        ("Next condition", "cycle_condition"),
        ("Next target", "cycle_target"),
        ("Choose action", "set_action"),
        ("Toggle on/off", "toggle_active"),
        ("Set priority", "set_priority"),
        ("Remove", "remove"),
        ("Back", None),
    ]
    edit_type = _prompt_menu("Change", options)
    if edit_type is None:
        return None
    if edit_type == "set_action":
        action = _prompt_menu("Action", [(ACTION_LABELS[action], action) for action in ACTIONS])
        return GambitEdit(edit_type="set_action", unit_id=unit_id, gambit_id=gambit_id, action=action)
    if edit_type == "set_priority":
        return GambitEdit(edit_type="set_priority", unit_id=unit_id, gambit_id=gambit_id, priority=_prompt_priority())
    return GambitEdit(edit_type=edit_type, unit_id=unit_id, gambit_id=gambit_id)


def _prompt_priority() -> int:
    while True:
        raw = input("Priority (1 runs first): ").strip()
        try:
            value = int(raw)
        except ValueError:
            print("Please enter a number.")
            continue
        if value >= 1:
            return value
        print("Priority must be 1 or higher.")


def _format_slot_label(slot: SlotMetadata) -> str:
    if not slot.exists:
        return f"Slot {slot.slot}: (empty)"
    if slot.is_corrupt or slot.metadata is None:
        return f"Slot {slot.slot}: (corrupt)"
    meta = slot.metadata
    allies = ", ".join(str(name) for name in meta.get("allies", []))
    return (
        f"Slot {slot.slot}: {meta.get('name', 'Run')} - room {meta.get('room')}/{meta.get('max_rooms')} "
        f"{meta.get('status')} [{allies}] saved {meta.get('saved_at', '?')}"
    )


def _save_run(save_service: SaveService, slot_store: SaveSlotStore, session: RunSession) -> None:
    slots = slot_store.list_slots()
    options: List[Tuple[str, int | None]] = [(_format_slot_label(slot), slot.slot) for slot in slots]
    options.append(("Cancel", None))
    slot_index = _prompt_menu("Save to slot", options)
    if slot_index is None:
        return
    payload = save_service.serialize(session.state, session.rng, name=session.name, created_at=session.created_at)
    try:
        slot_store.write_slot(slot_index, payload)
    except OSError as exc:
        print(f"Could not save to slot {slot_index}: {exc}")
        return
    session.created_at = payload["metadata"]["created_at"]
    print(f"Saved to slot {slot_index}.")


def _load_run(
    controller: BattleController, save_service: SaveService, slot_store: SaveSlotStore
) -> RunSession | None:
    slots = [slot for slot in slot_store.list_slots() if slot.exists and not slot.is_corrupt]
    if not slots:
        print("No saved runs yet.")
        return None
    options: List[Tuple[str, int | None]] = [(_format_slot_label(slot), slot.slot) for slot in slots]
    options.append(("Cancel", None))
    slot_index = _prompt_menu("Load which run?", options)
    if slot_index is None:
        return None
    try:
        payload = slot_store.read_slot(slot_index)
        state, rng = save_service.deserialize(payload)
    except (OSError, ValueError, SaveLoadError) as exc:
        print(f"Could not load slot {slot_index}: {exc}")
        return None
    metadata = payload.get("metadata", {})
    return controller.resume_run(
        state,
        rng,
        name=str(metadata.get("name", "Run")),
        created_at=metadata.get("created_at"),
    )
