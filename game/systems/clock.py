"""
Accrual clock.

Two independent periodic credits:
- idle tick, from session start: whole timber only (floor of the rate)
- open tick, once the play screen is opened: the unrounded rate

After opening both run, so the player receives floor(rate) + rate per period.
"""
from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING, Optional

from config import ACCRUAL_PERIOD_MS
from game.sim.scheduler import ScheduledTask

if TYPE_CHECKING:
    from game.session import SimContext

logger = logging.getLogger(__name__)


class GameClock:
    def __init__(self, ctx: "SimContext", period_ms: int = ACCRUAL_PERIOD_MS):
        self.ctx = ctx
        self.period_ms = int(period_ms)
        self._idle_task: Optional[ScheduledTask] = None
        self._open_task: Optional[ScheduledTask] = None

    @property
    def opened(self) -> bool:
        return self._open_task is not None

    def start(self, now_ms: int) -> None:
        if self._idle_task is None:
            self._idle_task = self.ctx.scheduler.every(
                "accrual_idle", self.period_ms, self._idle_tick, start_ms=now_ms
            )

    def open(self, now_ms: int) -> bool:
        """Start the fractional accrual path. Opening twice does not stack a second timer."""
        if self._open_task is not None:
            return False
        self._open_task = self.ctx.scheduler.every(
            "accrual_open", self.period_ms, self._open_tick, start_ms=now_ms
        )
        logger.debug("fractional accrual started")
        return True

    def _idle_tick(self, due_ms: int) -> None:
        amount = max(0, math.floor(self.ctx.ledger.rate))
        self.ctx.ledger.credit(amount, reason="accrual")

    def _open_tick(self, due_ms: int) -> None:
        self.ctx.ledger.credit(max(0.0, self.ctx.ledger.rate), reason="accrual_fractional")
