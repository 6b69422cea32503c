"""
Console display for headless runs: every display notification becomes a log line.
"""
from __future__ import annotations

import logging
import math

from game.sim.contracts import DisplayListener
from game.systems.rates import format_rate

logger = logging.getLogger("isles.display")


class ConsoleDisplay(DisplayListener):
    def __init__(self, verbose: bool = False):
        self.verbose = verbose
        self._last_whole_timber = None

    def on_resource_changed(self, amount: float) -> None:
        whole = math.floor(amount)
        if self.verbose and whole != self._last_whole_timber:
            logger.info("timber %d", whole)
        self._last_whole_timber = whole

    def on_rate_changed(self, rate: float) -> None:
        logger.info("rate %s/s", format_rate(rate))

    def on_tide_changed(self, label: str) -> None:
        logger.info("tide %s", label)

    def on_raid_started(self, end_time_ms: int) -> None:
        logger.info("raid started (ends at %dms)", end_time_ms)

    def on_raid_ended(self, score: int, reward: int) -> None:
        logger.info("raid finished: score %d, reward %d timber", score, reward)

    def on_notice(self, text: str) -> None:
        logger.info("%s", text)
