from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Optional

from .state import GameState
if TYPE_CHECKING:
    from .world import World


class SimAction(str, Enum):
    CONTINUE = "continue"
    STOP = "stop"
    ADVANCE = "advance"


@dataclass
class SimDecision:
    action: SimAction
    reason: str = ""


@dataclass
class RunPolicy:
    """
    Decides what a headless run does after each tick.

    Stop conditions:
      - n_steps reached
      - level complete (unless play_through, which advances instead while
        there are levels left)
      - nothing has moved for max_idle_steps ticks while running (the board
        is settled and can no longer change)

    Intended usage:
        policy = RunPolicy(...)
        policy.reset()  # per run
        for step in ...:
            world.step(dt)
            decision = policy.decide(step=step, world=world)
    """

    n_steps: Optional[int] = None
    stop_on_complete: bool = True
    play_through: bool = False
    max_idle_steps: Optional[int] = None

    _idle_steps: int = 0

    def reset(self) -> None:
        self._idle_steps = 0

    def decide(self, *, step: int, world: World) -> SimDecision:
        """
        Return what the run should do *after* observing the current state.
        Priority: ADVANCE/STOP on completion > STOP on step limit > STOP when idle > CONTINUE
        """
        if world.state is GameState.LEVEL_COMPLETE:
            self._idle_steps = 0
            index = world.levels.index
            if self.play_through and index is not None and index + 1 < len(world.levels):
                return SimDecision(
                    action=SimAction.ADVANCE,
                    reason=f"level {index} complete, moving to level {index + 1}",
                )
            if self.stop_on_complete:
                return SimDecision(action=SimAction.STOP, reason=f"level {index} complete")

        if self.n_steps is not None and step >= self.n_steps:
            return SimDecision(
                action=SimAction.STOP,
                reason=f"stop: step {step} >= n_steps {self.n_steps}",
            )

        if self.max_idle_steps is not None and world.state is GameState.RUNNING:
            if any(a.is_moving for a in world.atoms.values()):
                self._idle_steps = 0
            else:
                self._idle_steps += 1
            if self._idle_steps >= self.max_idle_steps:
                return SimDecision(
                    action=SimAction.STOP,
                    reason=f"stop: no moving atoms for {self._idle_steps} steps",
                )

        return SimDecision(action=SimAction.CONTINUE)
