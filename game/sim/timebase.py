"""
Simulation clock used by every scheduled gameplay task.

The windowed game leaves it unset and reads pygame's ticks. Headless runs and tests pin it
with `set_sim_now_ms` and step it forward themselves, so timers fire at exact sim times.
Save timestamps are the one exception and use `wall_clock_ms()`.
"""

from __future__ import annotations

import time
from typing import Optional

import pygame

_pinned_ms: Optional[int] = None


def set_sim_now_ms(ms: Optional[int]) -> None:
    """Pin sim time to `ms`; None releases it back to pygame ticks."""
    global _pinned_ms
    _pinned_ms = None if ms is None else int(ms)


def now_ms() -> int:
    if _pinned_ms is not None:
        return _pinned_ms
    return pygame.time.get_ticks()


def wall_clock_ms() -> int:
    """Epoch milliseconds, for save timestamps only."""
    return int(time.time() * 1000)
