"""
Tide cycle: Low -> Mid -> High -> Low, one step per fixed period.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from config import TIDE_CYCLE_SECONDS, TIDE_STATES
from game.sim.scheduler import ScheduledTask

if TYPE_CHECKING:
    from game.session import SimContext

logger = logging.getLogger(__name__)


class TideCycle:
    """
    Cyclic environmental modifier.

    The scheduled transition is the only way the tide changes during play; `restore()`
    exists for loading a save and deliberately leaves the transition timer's phase alone.
    """

    def __init__(self, ctx: "SimContext", cycle_seconds: float = TIDE_CYCLE_SECONDS):
        self.ctx = ctx
        self.states = TIDE_STATES
        self.cycle_ms = int(round(float(cycle_seconds) * 1000))
        self.index = 0
        self._task: Optional[ScheduledTask] = None

    @property
    def label(self) -> str:
        return self.states[self.index]

    def start(self, now_ms: int) -> ScheduledTask:
        if self._task is None or self._task.cancelled:
            self._task = self.ctx.scheduler.every(
                "tide", self.cycle_ms, self._on_period, start_ms=now_ms
            )
        return self._task

    def _on_period(self, due_ms: int) -> None:
        self.advance()

    def advance(self) -> str:
        """One transition: move to the next state, recompute the rate, notify the display."""
        self.index = (self.index + 1) % len(self.states)
        logger.info("tide turned %s", self.label)
        self.ctx.rates.recalculate()
        self.ctx.display.on_tide_changed(self.label)
        return self.label

    def restore(self, index: int) -> None:
        if not 0 <= int(index) < len(self.states):
            raise ValueError(f"tide index out of range: {index}")
        self.index = int(index)
