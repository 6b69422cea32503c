"""
Raid mini-session: a time-boxed burst where every hit pays a little and the end pays more.
"""
from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING, Optional

from config import (
    RAID_DURATION_MS, RAID_POLL_MS, RAID_HIT_REWARD, RAID_MIN_REWARD,
    RAID_SCORE_MULTIPLIER, RAID_PER_BUILDING_REWARD,
)
from game.sim.scheduler import ScheduledTask

if TYPE_CHECKING:
    from game.session import SimContext

logger = logging.getLogger(__name__)


def raid_reward(score: int, building_count: int) -> int:
    return max(
        RAID_MIN_REWARD,
        math.floor(score * RAID_SCORE_MULTIPLIER + building_count * RAID_PER_BUILDING_REWARD),
    )


class RaidSession:
    """Idle -> Active -> Idle. A running raid cannot be cancelled."""

    def __init__(self, ctx: "SimContext", duration_ms: int = RAID_DURATION_MS, poll_ms: int = RAID_POLL_MS):
        self.ctx = ctx
        self.duration_ms = int(duration_ms)
        self.poll_ms = int(poll_ms)
        self.active = False
        self.end_time_ms = 0
        self.score = 0
        self.last_result: Optional[tuple[int, int]] = None  # (score, reward) of the previous raid
        self._poll_task: Optional[ScheduledTask] = None

    def start(self, now_ms: int) -> bool:
        """Begin a raid. Returns False (and does nothing) if one is already running."""
        if self.active:
            return False
        self.active = True
        self.score = 0
        self.end_time_ms = int(now_ms) + self.duration_ms
        self._poll_task = self.ctx.scheduler.every(
            "raid_expiry",
            self.poll_ms,
            self.check_expiry,
            start_ms=now_ms,
            stop_when=lambda: not self.active,
        )
        logger.info("raid started, ends at %d", self.end_time_ms)
        self.ctx.display.on_raid_started(self.end_time_ms)
        return True

    def register_hit(self, now_ms: int) -> bool:
        """Score a hit and pay the instant reward. Hits after expiry are refused."""
        self.check_expiry(now_ms)
        if not self.active:
            return False
        self.score += 1
        self.ctx.ledger.credit(RAID_HIT_REWARD, reason="raid_hit")
        return True

    def remaining_ms(self, now_ms: int) -> int:
        if not self.active:
            return 0
        return max(0, self.end_time_ms - int(now_ms))

    def check_expiry(self, now_ms: int) -> bool:
        """End the raid if its time is up. Returns True if this call ended it."""
        if not self.active or int(now_ms) <= self.end_time_ms:
            return False
        self._finish()
        return True

    def _finish(self) -> None:
        self.active = False
        if self._poll_task is not None:
            self._poll_task.cancel()
            self._poll_task = None

        reward = raid_reward(self.score, len(self.ctx.registry))
        self.ctx.ledger.credit(reward, reason="raid_reward")
        self.last_result = (self.score, reward)
        logger.info("raid finished: score=%d reward=%d", self.score, reward)
        self.ctx.display.on_raid_ended(self.score, reward)
