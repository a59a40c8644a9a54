"""Fixed-interval driver that ticks a running battle."""
from __future__ import annotations

import time
from typing import Callable

from catcommand.domain.battle_models import BattleState
from catcommand.services.controllers import BattleController, RunSession

DEFAULT_TICK_INTERVAL = 1.0


def run_battle_loop(
    controller: BattleController,
    session: RunSession,
    *,
    on_tick: Callable[[BattleState], None],
    interval: float = DEFAULT_TICK_INTERVAL,
    sleep: Callable[[float], None] = time.sleep,
    max_ticks: int | None = None,
) -> BattleState:
    """Tick once per interval while the battle is FIGHTING.

    Stops as soon as the status leaves FIGHTING, or after max_ticks rounds
    when a limit is given. Returns the last snapshot.
    """
    ticks = 0
    while controller.is_fighting(session):
        if max_ticks is not None and ticks >= max_ticks:
            break
        sleep(interval)
        state = controller.step(session)
        ticks += 1
        on_tick(state)
    return session.state
