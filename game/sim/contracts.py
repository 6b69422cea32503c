"""
Thin, stable contracts between the simulation and its collaborators.

The simulation pushes notifications into listeners and asks the picker for positions;
nothing the listeners do feeds back into simulation state. Each base class is a working
no-op, so front ends override only what they render.
"""

from __future__ import annotations

from typing import Optional, Protocol, Sequence, Tuple

GridPos = Tuple[int, int]
ScreenPoint = Tuple[int, int]


class RenderListener:
    """Told when a building's visual representation must change."""

    def on_building_placed(self, building_id: str, building_type: str, level: int, position: GridPos) -> None:
        pass

    def on_building_upgraded(self, building_id: str, new_level: int) -> None:
        pass

    def on_building_removed(self, building_id: str) -> None:
        pass

    def on_state_restored(self, buildings: Sequence) -> None:
        """Whole building set replaced (load); default re-adds each building."""
        for b in buildings:
            self.on_building_placed(b.id, b.type.value, b.level, b.position)


class DisplayListener:
    """Receives the numbers and messages the HUD shows."""

    def on_resource_changed(self, amount: float) -> None:
        pass

    def on_rate_changed(self, rate: float) -> None:
        pass

    def on_tide_changed(self, label: str) -> None:
        pass

    def on_raid_started(self, end_time_ms: int) -> None:
        pass

    def on_raid_ended(self, score: int, reward: int) -> None:
        pass

    def on_notice(self, text: str) -> None:
        pass


class Picker(Protocol):
    def resolve_ground_position(self, screen_point: ScreenPoint) -> Optional[Tuple[float, float]]:
        ...

    def resolve_building_at(self, screen_point: ScreenPoint) -> Optional[str]:
        ...


class AmbientAudio(Protocol):
    def start_ambient(self) -> None:
        ...

    def stop_ambient(self) -> None:
        ...


class NullPicker:
    """Resolves nothing; used by headless runs."""

    def resolve_ground_position(self, screen_point: ScreenPoint) -> Optional[Tuple[float, float]]:
        return None

    def resolve_building_at(self, screen_point: ScreenPoint) -> Optional[str]:
        return None


class NullAudio:
    def start_ambient(self) -> None:
        pass

    def stop_ambient(self) -> None:
        pass
