"""
Cancellable periodic tasks driven by simulation time.

Each recurring concern (tide, accrual ticks, raid expiry poll) owns one task.
The scheduler never reads the clock itself; the owner pumps it with `run_due(now_ms)`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Optional

logger = logging.getLogger(__name__)


@dataclass
class ScheduledTask:
    name: str
    period_ms: int
    callback: Callable[[int], None]
    next_due_ms: int
    stop_when: Optional[Callable[[], bool]] = None
    cancelled: bool = False
    fired: int = 0
    _order: int = field(default=0, repr=False)

    def cancel(self) -> None:
        self.cancelled = True


class Scheduler:
    """Fires due tasks in chronological order; ties go to the earlier-registered task."""

    def __init__(self):
        self._tasks: list[ScheduledTask] = []
        self._registered = 0

    def every(
        self,
        name: str,
        period_ms: int,
        callback: Callable[[int], None],
        *,
        start_ms: int,
        stop_when: Optional[Callable[[], bool]] = None,
    ) -> ScheduledTask:
        """Run `callback(due_ms)` every `period_ms`, first at `start_ms + period_ms`."""
        if period_ms <= 0:
            raise ValueError(f"period_ms must be positive, got {period_ms}")
        self._registered += 1
        task = ScheduledTask(
            name=name,
            period_ms=int(period_ms),
            callback=callback,
            next_due_ms=int(start_ms) + int(period_ms),
            stop_when=stop_when,
            _order=self._registered,
        )
        self._tasks.append(task)
        logger.debug("scheduled %s every %dms (first due %d)", name, task.period_ms, task.next_due_ms)
        return task

    def run_due(self, now_ms: int) -> int:
        """Fire every occurrence due at or before `now_ms`. Returns how many fired."""
        fired = 0
        while True:
            self._prune()
            due = [t for t in self._tasks if t.next_due_ms <= now_ms]
            if not due:
                return fired
            task = min(due, key=lambda t: (t.next_due_ms, t._order))
            if task.stop_when is not None and task.stop_when():
                task.cancel()
                continue
            due_ms = task.next_due_ms
            task.next_due_ms += task.period_ms
            task.fired += 1
            task.callback(due_ms)
            fired += 1

    def _prune(self) -> None:
        self._tasks = [t for t in self._tasks if not t.cancelled]

    def active_tasks(self) -> list[ScheduledTask]:
        self._prune()
        return list(self._tasks)

    def get(self, name: str) -> Optional[ScheduledTask]:
        return next((t for t in self._tasks if t.name == name and not t.cancelled), None)
