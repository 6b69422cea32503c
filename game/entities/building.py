"""
Building entities for the island.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Tuple

from config import BUILDING_COSTS, UPGRADE_BASE_COSTS, UPGRADE_COST_GROWTH


class BuildingType(str, Enum):
    HUT = "hut"
    MILL = "mill"

    @classmethod
    def parse(cls, value) -> "BuildingType":
        """Accept an enum member or its name in any case ("hut", "Mill")."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"Unknown building type: {value!r}") from None

    @property
    def label(self) -> str:
        return self.value.title()

    @property
    def placement_cost(self) -> int:
        return BUILDING_COSTS[self.value]

    @property
    def upgrade_base_cost(self) -> int:
        return UPGRADE_BASE_COSTS[self.value]


def snap_to_grid(x: float, z: float) -> Tuple[int, int]:
    """Round a ground point to the nearest integer cell (halves round up)."""
    return (math.floor(x + 0.5), math.floor(z + 0.5))


def upgrade_cost(building_type: BuildingType, current_level: int) -> float:
    """
    Cost of going from `current_level` to `current_level + 1`.

    Levels restored from a save are not range-checked; past float range the cost is `math.inf`.
    """
    try:
        return math.floor(building_type.upgrade_base_cost * UPGRADE_COST_GROWTH ** current_level)
    except OverflowError:
        return math.inf


def visual_hint(level: int) -> Tuple[float, Tuple[float, float, float]]:
    """
    Presentation-only upgrade hint: (vertical scale, HSL tint).

    Carries no simulation meaning; renderers may ignore it.
    """
    scale_y = 1 + level * 0.25
    hue = 0.07 - level * 0.02
    return scale_y, (hue, 0.6, 0.3)


@dataclass
class Building:
    """A placed structure. Level only ever goes up, one step per upgrade."""

    id: str
    type: BuildingType
    level: int
    position: Tuple[int, int]

    @property
    def x(self) -> int:
        return self.position[0]

    @property
    def z(self) -> int:
        return self.position[1]

    @property
    def next_upgrade_cost(self) -> float:
        return upgrade_cost(self.type, self.level)
