"""
Top-down island view: draws buildings and resolves screen clicks to ground/buildings.

Implements both collaborator roles the simulation needs from a renderer
(RenderListener + Picker). Holds only presentation copies of building data.
"""
from __future__ import annotations

import colorsys
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

import pygame

from config import (
    BUILDING_COLORS, BUILDING_FOOTPRINT, COLOR_GRID, COLOR_ISLAND, COLOR_SEA, COLOR_BLACK,
    ISLAND_RADIUS, PIXELS_PER_UNIT, PLACEMENT_HALF_EXTENT,
)
from game.entities.building import visual_hint
from game.sim.contracts import GridPos, RenderListener, ScreenPoint

# Visible island radius per tide (world units); the shoreline eases toward it each frame.
TIDE_SHORELINE = {"Low": ISLAND_RADIUS, "Mid": ISLAND_RADIUS - 1.5, "High": ISLAND_RADIUS - 3.0}
SHORELINE_EASE = 0.02


@dataclass
class BuildingSprite:
    building_id: str
    building_type: str
    level: int
    position: GridPos

    @property
    def color(self) -> Tuple[int, int, int]:
        if self.level <= 1:
            return BUILDING_COLORS.get(self.building_type, (128, 128, 128))
        _, (h, s, l) = visual_hint(self.level)
        r, g, b = colorsys.hls_to_rgb(h % 1.0, l, s)
        return int(r * 255), int(g * 255), int(b * 255)


class IslandView(RenderListener):
    def __init__(self, screen_width: int, screen_height: int, top_margin: int = 40):
        self.center = (screen_width // 2, top_margin + (screen_height - top_margin) // 2)
        self.sprites: Dict[str, BuildingSprite] = {}
        self._shoreline = float(ISLAND_RADIUS)

    # Coordinates
    def world_to_screen(self, x: float, z: float) -> Tuple[int, int]:
        cx, cy = self.center
        return int(cx + x * PIXELS_PER_UNIT), int(cy + z * PIXELS_PER_UNIT)

    def screen_to_world(self, screen_point: ScreenPoint) -> Tuple[float, float]:
        cx, cy = self.center
        return (screen_point[0] - cx) / PIXELS_PER_UNIT, (screen_point[1] - cy) / PIXELS_PER_UNIT

    # Picker
    def resolve_ground_position(self, screen_point: ScreenPoint) -> Optional[Tuple[float, float]]:
        x, z = self.screen_to_world(screen_point)
        if abs(x) > PLACEMENT_HALF_EXTENT or abs(z) > PLACEMENT_HALF_EXTENT:
            return None
        return x, z

    def resolve_building_at(self, screen_point: ScreenPoint) -> Optional[str]:
        x, z = self.screen_to_world(screen_point)
        half = BUILDING_FOOTPRINT / 2
        # Most recently placed first: it is drawn on top.
        for sprite in reversed(list(self.sprites.values())):
            bx, bz = sprite.position
            if abs(x - bx) <= half and abs(z - bz) <= half:
                return sprite.building_id
        return None

    # RenderListener
    def on_building_placed(self, building_id, building_type, level, position):
        self.sprites[building_id] = BuildingSprite(building_id, building_type, level, tuple(position))

    def on_building_upgraded(self, building_id, new_level):
        sprite = self.sprites.get(building_id)
        if sprite is not None:
            sprite.level = new_level

    def on_building_removed(self, building_id):
        self.sprites.pop(building_id, None)

    # Frame
    def update(self, tide_label: str):
        target = TIDE_SHORELINE.get(tide_label, ISLAND_RADIUS)
        self._shoreline += (target - self._shoreline) * SHORELINE_EASE

    def render(self, surface: pygame.Surface):
        surface.fill(COLOR_SEA)
        pygame.draw.circle(surface, COLOR_ISLAND, self.center, int(self._shoreline * PIXELS_PER_UNIT))

        left, top = self.world_to_screen(-PLACEMENT_HALF_EXTENT, -PLACEMENT_HALF_EXTENT)
        right, bottom = self.world_to_screen(PLACEMENT_HALF_EXTENT, PLACEMENT_HALF_EXTENT)
        for i in range(-PLACEMENT_HALF_EXTENT, PLACEMENT_HALF_EXTENT + 1, 2):
            gx, gy = self.world_to_screen(i, i)
            pygame.draw.line(surface, COLOR_GRID, (gx, top), (gx, bottom))
            pygame.draw.line(surface, COLOR_GRID, (left, gy), (right, gy))

        size = int(BUILDING_FOOTPRINT * PIXELS_PER_UNIT)
        for sprite in self.sprites.values():
            scale_y, _ = visual_hint(sprite.level) if sprite.level > 1 else (1.0, None)
            height = int(size * scale_y)
            sx, sy = self.world_to_screen(*sprite.position)
            rect = pygame.Rect(sx - size // 2, sy + size // 2 - height, size, height)
            pygame.draw.rect(surface, sprite.color, rect)
            pygame.draw.rect(surface, COLOR_BLACK, rect, 1)
