# src/atom_sims/core/state.py

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple

from .errors import InvalidTransition


class GameState(str, Enum):
    PLACEMENT = "placement"
    RUNNING = "running"
    LEVEL_COMPLETE = "level_complete"
    RESTART_LEVEL = "restart_level"


class Trigger(str, Enum):
    TOGGLE = "toggle"        # start/stop
    WIN = "win"
    CONTINUE = "continue"    # next level
    RESET = "reset"
    RESTARTED = "restarted"  # restart cleanup done


TRANSITIONS: Dict[Tuple[GameState, Trigger], GameState] = {
    (GameState.PLACEMENT, Trigger.TOGGLE): GameState.RUNNING,
    (GameState.RUNNING, Trigger.TOGGLE): GameState.PLACEMENT,
    (GameState.RUNNING, Trigger.WIN): GameState.LEVEL_COMPLETE,
    (GameState.LEVEL_COMPLETE, Trigger.CONTINUE): GameState.PLACEMENT,
    (GameState.PLACEMENT, Trigger.RESET): GameState.RESTART_LEVEL,
    (GameState.RUNNING, Trigger.RESET): GameState.RESTART_LEVEL,
    (GameState.LEVEL_COMPLETE, Trigger.RESET): GameState.RESTART_LEVEL,
    (GameState.RESTART_LEVEL, Trigger.RESTARTED): GameState.PLACEMENT,
}


def next_state(state: GameState, trigger: Trigger) -> GameState:
    try:
        return TRANSITIONS[(state, trigger)]
    except KeyError:
        raise InvalidTransition(state, trigger) from None


@dataclass
class GameStateMachine:
    """
    Level life-cycle. Requests are validated against TRANSITIONS when made but
    only take effect at the next scheduling point (`apply_pending`), never
    in the middle of a tick.

    Intended usage:
        sm.request(Trigger.TOGGLE)
        ...
        for old, new in sm.apply_pending(): ...
    """
    state: GameState = GameState.PLACEMENT
    _pending: List[Trigger] = field(default_factory=list)

    @property
    def is_running(self) -> bool:
        return self.state is GameState.RUNNING

    @property
    def pending(self) -> Optional[GameState]:
        """State the machine will be in once pending requests are applied."""
        if not self._pending:
            return None
        return self._projected()

    def _projected(self) -> GameState:
        state = self.state
        for trigger in self._pending:
            state = next_state(state, trigger)
            if state is GameState.RESTART_LEVEL:
                state = next_state(state, Trigger.RESTARTED)
        return state

    def request(self, trigger: Trigger) -> GameState:
        """Queue a trigger. Raises InvalidTransition if it does not apply to the projected state."""
        target = next_state(self._projected(), trigger)
        self._pending.append(trigger)
        return target

    def apply_pending(self) -> List[Tuple[GameState, GameState]]:
        changes: List[Tuple[GameState, GameState]] = []
        pending, self._pending = self._pending, []
        for trigger in pending:
            old = self.state
            self.state = next_state(old, trigger)
            changes.append((old, self.state))
            # restart is a pass-through state
            if self.state is GameState.RESTART_LEVEL:
                old = self.state
                self.state = next_state(old, Trigger.RESTARTED)
                changes.append((old, self.state))
        return changes

    def reset(self) -> None:
        self.state = GameState.PLACEMENT
        self._pending.clear()
