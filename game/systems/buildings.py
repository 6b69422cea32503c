"""
Building registry: placement, upgrades, and removal.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterable, List, Optional, Tuple

from game.entities.building import Building, BuildingType, snap_to_grid
from game.errors import NotFound

if TYPE_CHECKING:
    from game.session import SimContext

logger = logging.getLogger(__name__)


class BuildingRegistry:
    """
    Owns the placed buildings in placement order.

    Placement does not check for overlap with existing buildings.
    """

    def __init__(self, ctx: "SimContext"):
        self.ctx = ctx
        self.buildings: List[Building] = []

    def __len__(self) -> int:
        return len(self.buildings)

    def __iter__(self):
        return iter(self.buildings)

    def place(self, building_type, position: Tuple[float, float]) -> Building:
        """Buy and place a level-1 building at the grid cell nearest `position`."""
        btype = BuildingType.parse(building_type)
        cost = btype.placement_cost
        self.ctx.ledger.debit(cost, reason=f"{btype.value}_placement")

        building = Building(
            id=self.ctx.ids.next_id(),
            type=btype,
            level=1,
            position=snap_to_grid(position[0], position[1]),
        )
        self.buildings.append(building)
        logger.info("placed %s %s at %s", btype.label, building.id, building.position)

        self.ctx.render.on_building_placed(building.id, btype.value, building.level, building.position)
        self.ctx.rates.recalculate()
        return building

    def upgrade(self, building_id: str) -> int:
        """Raise a building one level. Returns the new level."""
        building = self.find_by_id(building_id)
        if building is None:
            raise NotFound(building_id)

        cost = building.next_upgrade_cost
        self.ctx.ledger.debit(cost, reason=f"{building.type.value}_upgrade")
        building.level += 1
        logger.info("upgraded %s to level %d for %d timber", building.id, building.level, cost)

        self.ctx.rates.recalculate()
        self.ctx.render.on_building_upgraded(building.id, building.level)
        return building.level

    def remove_most_recent(self) -> Optional[Building]:
        if not self.buildings:
            return None
        building = self.buildings.pop()
        logger.info("removed %s %s", building.type.label, building.id)
        self.ctx.render.on_building_removed(building.id)
        self.ctx.rates.recalculate()
        return building

    def find_by_id(self, building_id: str) -> Optional[Building]:
        return next((b for b in self.buildings if b.id == building_id), None)

    def replace_all(self, buildings: Iterable[Building]) -> None:
        """Swap in a restored building set; ids are reserved so new ones never collide."""
        for old in self.buildings:
            self.ctx.render.on_building_removed(old.id)
        self.buildings = list(buildings)
        for b in self.buildings:
            self.ctx.ids.observe(b.id)
        self.ctx.render.on_state_restored(list(self.buildings))

    def count_by_type(self) -> dict:
        counts = {t.value: 0 for t in BuildingType}
        for b in self.buildings:
            counts[b.type.value] += 1
        return counts
