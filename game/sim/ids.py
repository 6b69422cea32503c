"""
Building id allocation.

Ids come from a process-local counter (`b1`, `b2`, ...). Ids restored from a save are
reported back via `observe()` so freshly issued ids never collide with them.
"""

from __future__ import annotations

import itertools
import re


class IdAllocator:
    def __init__(self, prefix: str = "b"):
        self._prefix = prefix
        self._pattern = re.compile(rf"^{re.escape(prefix)}(\d+)$")
        self._counter = itertools.count(1)
        self._last = 0

    def next_id(self) -> str:
        self._last = next(self._counter)
        return f"{self._prefix}{self._last}"

    def observe(self, building_id: str) -> None:
        """Make sure later ids skip past an externally supplied one."""
        m = self._pattern.match(str(building_id))
        if not m:
            return
        n = int(m.group(1))
        if n > self._last:
            self._counter = itertools.count(n + 1)
            self._last = n
