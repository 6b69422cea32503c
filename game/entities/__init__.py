"""
Game entities package.
"""
from .building import Building, BuildingType, snap_to_grid, upgrade_cost, visual_hint
