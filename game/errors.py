"""
Recoverable gameplay errors.

Every error here is local: the operation that raised it made no state change,
and the session reports it outward as a notice.
"""

from __future__ import annotations


class GameError(Exception):
    """Base class for rejected player actions and failed loads."""


class InsufficientResources(GameError):
    def __init__(self, needed: float, available: float, action: str = "that"):
        self.needed = needed
        self.available = available
        self.action = action
        super().__init__(f"Not enough timber for {action}! Need {needed:g}, have {int(available)}")


class NotFound(GameError):
    def __init__(self, building_id: str):
        self.building_id = building_id
        super().__init__(f"No building with id {building_id!r}")


class NoSavedState(GameError):
    def __init__(self, slot: str):
        self.slot = slot
        super().__init__("No save found")


class CorruptSave(GameError):
    """The saved payload could not be decoded; in-memory state is unchanged."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Load failed: {reason}")
