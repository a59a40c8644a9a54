"""Shared CLI rendering helpers."""
from __future__ import annotations

import os
from typing import Dict, Iterable, Sequence

from catcommand.core.types import ActionType, ConditionType, TargetType
from catcommand.domain.battle_models import Gambit
from catcommand.services.battle_service import BattleView, UnitView

CONDITION_LABELS: Dict[ConditionType, str] = {
    "ALWAYS": "Always",
    "HP_BELOW_30": "HP < 30%",
    "HP_BELOW_50": "HP < 50%",
    "ENEMY_HP_ABOVE_50": "Enemy HP > 50%",
    "ENEMY_IS_BLOCKING": "Enemy is blocking",
    "MANA_FULL": "Mana full",
}

TARGET_LABELS: Dict[TargetType, str] = {
    "SELF": "Self",
    "ALLY_LOWEST_HP": "Ally (lowest HP)",
    "ENEMY_CLOSEST": "Closest enemy",
    "ENEMY_LOWEST_HP": "Enemy (lowest HP)",
    "ENEMY_STRONGEST": "Strongest enemy",
}

ACTION_LABELS: Dict[ActionType, str] = {
    "ATTACK": "Attack",
    "HEAL": "Heal",
    "BLOCK": "Block",
    "DODGE": "Dodge",
    "CHARGE": "Charge",
    "WAIT": "Wait",
}

_HP_BAR_WIDTH = 20


def debug_enabled() -> bool:
    """Return True only when CATCOMMAND_DEBUG is explicitly set to '1'."""
    return os.getenv("CATCOMMAND_DEBUG") == "1"


def render_heading(title: str) -> None:
    """Print a consistent section heading."""
    print(f"\n=== {title} ===")


def render_menu(title: str, options: Sequence[str]) -> None:
    """Display a menu section with numbered options."""
    render_heading(title)
    for idx, label in enumerate(options, start=1):
        print(f"{idx}. {label}")


def render_bullet_lines(lines: Iterable[str]) -> None:
    """Print bullet-prefixed lines."""
    for line in lines:
        print(f"- {line}")


def format_hp_bar(hp: int, max_hp: int, width: int = _HP_BAR_WIDTH) -> str:
    filled = round(width * hp / max_hp) if max_hp > 0 else 0
    if hp > 0:
        filled = max(1, filled)
    return "[" + "#" * filled + "." * (width - filled) + "]"


def format_status_flags(view: UnitView) -> str:
    flags = []
    if view.blocking:
        flags.append("BLOCK")
    if view.dodging:
        flags.append("DODGE")
    if view.charged:
        flags.append("CHARGED")
    return f" <{' '.join(flags)}>" if flags else ""


def format_unit_line(view: UnitView, *, debug: bool = False) -> str:
    """One line per unit: icon, name, hp bar and active flags."""
    if view.is_dead:
        line = f"{view.icon} {view.name}  (defeated)"
    else:
        hp_bar = format_hp_bar(view.hp, view.max_hp)
        line = f"{view.icon} {view.name}  {hp_bar} {view.hp}/{view.max_hp}{format_status_flags(view)}"
    if debug:
        line += f"  [{view.instance_id}]"
    return line


def format_gambit(gambit: Gambit, *, triggered: bool = False, debug: bool = False) -> str:
    """Render a gambit as 'IF condition -> target -> action'."""
    text = (
        f"P{gambit.priority}: IF {CONDITION_LABELS[gambit.condition]} "
        f"-> {TARGET_LABELS[gambit.target]} -> {ACTION_LABELS[gambit.action]}"
    )
    if not gambit.active:
        text += " (off)"
    if triggered:
        text = "> " + text
    if debug:
        text += f"  [{gambit.gambit_id}]"
    return text


def format_status_banner(view: BattleView) -> str:
    banner = f"Room {view.room}/{view.max_rooms} | {view.status}"
    if view.status == "FIGHTING":
        banner += f" | Tick {view.tick}"
    return banner


def render_battle_view(view: BattleView, *, debug: bool = False) -> None:
    """Print the arena: banner, both rosters and the recent combat log."""
    render_heading(format_status_banner(view))
    for ally in view.allies:
        print(format_unit_line(ally, debug=debug))
    print("   -- vs --")
    for enemy in view.enemies:
        print(format_unit_line(enemy, debug=debug))
    if view.recent_log:
        print()
        for entry in view.recent_log:
            print(f"  {entry}")
