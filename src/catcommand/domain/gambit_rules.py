"""Rule engine primitives: conditions, target selection and actions."""
from __future__ import annotations

import math
from typing import List, Sequence

from catcommand.core.rng import RNG
from catcommand.core.types import ActionType, TargetType
from catcommand.domain.battle_models import BattleState, Gambit, Unit

VARIANCE_MIN = 0.8
VARIANCE_MAX = 1.2
CHARGE_MULTIPLIER = 3
BLOCK_DEFENSE_MULTIPLIER = 2
HEAL_BASE_AMOUNT = 12


def evaluate_condition(gambit: Gambit, unit: Unit, state: BattleState) -> bool:
    """Return True when the gambit's condition holds for the acting unit."""
    if not gambit.active:
        return False

    condition = gambit.condition
    if condition == "ALWAYS":
        return True
    if condition == "HP_BELOW_30":
        return unit.stats.hp_ratio < 0.30
    if condition == "HP_BELOW_50":
        return unit.stats.hp_ratio < 0.50
    if condition == "ENEMY_HP_ABOVE_50":
        return any(enemy.stats.hp_ratio > 0.50 for enemy in state.living_opponents(unit))
    if condition == "ENEMY_IS_BLOCKING":
        return any(enemy.status.blocking for enemy in state.living_opponents(unit))
    if condition == "MANA_FULL":
        # Placeholder: there is no mana pool, so this never blocks a gambit.
        return True
    return False


def resolve_target(target_type: TargetType, unit: Unit, state: BattleState) -> Unit | None:
    """Pick the unit a gambit acts on, or None when nobody qualifies."""
    if target_type == "SELF":
        return unit
    if target_type == "ALLY_LOWEST_HP":
        return _lowest_hp(state.living(unit.faction))
    if target_type == "ENEMY_CLOSEST":
        enemies = state.living_opponents(unit)
        return enemies[0] if enemies else None
    if target_type == "ENEMY_LOWEST_HP":
        return _lowest_hp(state.living_opponents(unit))
    if target_type == "ENEMY_STRONGEST":
        return _strongest(state.living_opponents(unit))
    return None


def execute_action(action: ActionType, actor: Unit, target: Unit, log: List[str], rng: RNG) -> None:
    """Apply an action to the working copy and record it in the combat log."""
    if action == "ATTACK":
        _attack(actor, target, log, rng)
    elif action == "HEAL":
        _heal(actor, target, log, rng)
    elif action == "BLOCK":
        actor.status.blocking = True
        log.append(f"{actor.label} takes a defensive stance!")
    elif action == "DODGE":
        actor.status.dodging = True
        log.append(f"{actor.label} gets ready to dodge!")
    elif action == "CHARGE":
        actor.status.charged = True
        log.append(f"{actor.label} is charging up power!")
    elif action == "WAIT":
        log.append(f"{actor.label} is waiting...")


def roll_variance(rng: RNG) -> float:
    return rng.uniform(VARIANCE_MIN, VARIANCE_MAX)


def compute_damage(raw_damage: int, defense: int, *, blocking: bool) -> int:
    """Apply defense to raw damage; a hit always deals at least 1."""
    if blocking:
        return max(1, raw_damage - defense * BLOCK_DEFENSE_MULTIPLIER)
    return max(1, raw_damage - defense)


def apply_damage(target: Unit, damage: int, log: List[str]) -> None:
    """Subtract hp (floored at 0) and log a defeat when the target drops."""
    target.stats.hp = max(0, target.stats.hp - damage)
    if target.stats.hp <= 0:
        target.is_dead = True
        log.append(f"{target.label} has been defeated!")


def _attack(actor: Unit, target: Unit, log: List[str], rng: RNG) -> None:
    if target.status.dodging:
        log.append(f"{target.label} dodges {actor.label}'s attack!")
        return

    multiplier = roll_variance(rng)
    charged = actor.status.charged
    if charged:
        multiplier *= CHARGE_MULTIPLIER
        actor.status.charged = False

    raw_damage = math.floor(actor.stats.attack * multiplier)
    blocking = target.status.blocking
    damage = compute_damage(raw_damage, target.stats.defense, blocking=blocking)

    verb = "unleashes a CHARGED attack on" if charged else "attacks"
    suffix = " (blocked)" if blocking else ""
    log.append(f"{actor.label} {verb} {target.label} for {damage} damage!{suffix}")
    apply_damage(target, damage, log)


def _heal(actor: Unit, target: Unit, log: List[str], rng: RNG) -> None:
    amount = math.floor(HEAL_BASE_AMOUNT * roll_variance(rng))
    applied = max(0, min(amount, target.stats.max_hp - target.stats.hp))
    if applied == 0:
        log.append(f"{actor.label} tries to heal {target.label}, but they are already at full health!")
        return
    target.stats.hp += applied
    log.append(f"{actor.label} heals {target.label} for {applied} HP!")


def _lowest_hp(candidates: Sequence[Unit]) -> Unit | None:
    lowest: Unit | None = None
    for candidate in candidates:
        if lowest is None or candidate.stats.hp < lowest.stats.hp:
            lowest = candidate
    return lowest


def _strongest(candidates: Sequence[Unit]) -> Unit | None:
    strongest: Unit | None = None
    for candidate in candidates:
        if strongest is None or candidate.stats.attack > strongest.stats.attack:
            strongest = candidate
    return strongest
