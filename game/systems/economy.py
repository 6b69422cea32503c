"""
Economy system for timber, spending, and transactions.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from config import STARTING_TIMBER, TRANSACTION_LOG_LIMIT
from game.errors import InsufficientResources

if TYPE_CHECKING:
    from game.session import SimContext

logger = logging.getLogger(__name__)


class ResourceLedger:
    """Owns the player's timber stock and the current accrual rate."""

    def __init__(self, ctx: "SimContext", timber: float = STARTING_TIMBER):
        self.ctx = ctx
        self.timber = float(timber)
        # Accrual parameter written by RateCalculator, read by GameClock.
        self.rate = 0.0
        self.transaction_log = []

    def current(self) -> float:
        return self.timber

    def can_afford(self, amount: float) -> bool:
        """Check if the player can pay `amount`."""
        return self.timber >= amount

    def credit(self, amount: float, reason: str = "credit"):
        """Add timber."""
        if amount < 0:
            raise ValueError(f"credit amount must be non-negative, got {amount}")
        if amount == 0:
            return
        self.timber += amount
        self._record(reason, amount)

    def debit(self, amount: float, reason: str = "debit"):
        """Spend timber, or raise InsufficientResources without touching the stock."""
        if amount < 0:
            raise ValueError(f"debit amount must be non-negative, got {amount}")
        if not self.can_afford(amount):
            raise InsufficientResources(amount, self.timber, reason.replace("_", " "))
        self.timber -= amount
        self._record(reason, -amount)

    def reset(self, timber: float):
        """Replace the stock wholesale (state restore)."""
        self.timber = float(timber)
        self.transaction_log.clear()
        self._record("restore", 0.0)

    def _record(self, reason: str, delta: float):
        self.transaction_log.append({
            "type": reason,
            "delta": delta,
            "balance": self.timber,
        })
        if len(self.transaction_log) > TRANSACTION_LOG_LIMIT:
            del self.transaction_log[: len(self.transaction_log) - TRANSACTION_LOG_LIMIT]
        self.ctx.display.on_resource_changed(self.timber)

    def get_recent_transactions(self, count: int = 5) -> list:
        """Get the most recent transactions."""
        return self.transaction_log[-count:]
