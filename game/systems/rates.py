"""
Accrual rate derived from the building set and the tide.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterable

from config import HUT_BASE_RATE, HUT_LEVEL_BONUS, MILL_RATE, TIDE_RATE_MULTIPLIERS
from game.entities.building import Building, BuildingType

if TYPE_CHECKING:
    from game.session import SimContext

logger = logging.getLogger(__name__)


def compute_rate(buildings: Iterable[Building], tide_label: str) -> float:
    """
    Timber per second for a building set under a given tide.

    The hut level bonus is summed over *all* huts into one shared per-hut rate, which
    is then multiplied by the hut count, so hut income grows faster than linearly.
    """
    buildings = list(buildings)
    huts = [b for b in buildings if b.type == BuildingType.HUT]
    mills = [b for b in buildings if b.type == BuildingType.MILL]

    hut_rate = HUT_BASE_RATE
    for hut in huts:
        hut_rate += (hut.level - 1) * HUT_LEVEL_BONUS

    rate = len(huts) * hut_rate + len(mills) * MILL_RATE
    return rate * TIDE_RATE_MULTIPLIERS.get(tide_label, 1.0)


def format_rate(rate: float) -> str:
    """Display form only; the stored rate is never rounded."""
    return f"{rate:.2f}"


class RateCalculator:
    def __init__(self, ctx: "SimContext"):
        self.ctx = ctx

    def recalculate(self) -> float:
        rate = compute_rate(self.ctx.registry.buildings, self.ctx.tide.label)
        self.ctx.ledger.rate = rate
        logger.debug("accrual rate now %s/s", format_rate(rate))
        self.ctx.display.on_rate_changed(rate)
        return rate
