"""
Game session: the explicit context shared by every system, plus the user-intent surface.

Front ends (pygame engine, headless runner, tests) talk only to `GameSession`. Systems
hold a reference to the `SimContext` and reach each other through it, never via globals.
"""
from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Optional, TypeVar

from config import SAVE_SLOT, STARTING_TIMBER, TIDE_CYCLE_SECONDS
from game.entities.building import Building, BuildingType
from game.errors import GameError, NoSavedState, NotFound
from game.persistence import MemoryStore, PersistenceCodec, SaveBlob, SaveStore
from game.sim.contracts import (
    AmbientAudio, DisplayListener, NullAudio, NullPicker, Picker, RenderListener, ScreenPoint,
)
from game.sim.ids import IdAllocator
from game.sim.scheduler import Scheduler
from game.sim.timebase import now_ms as sim_now_ms
from game.systems.buildings import BuildingRegistry
from game.systems.clock import GameClock
from game.systems.economy import ResourceLedger
from game.systems.raid import RaidSession
from game.systems.rates import RateCalculator, format_rate
from game.systems.tide import TideCycle

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SimContext:
    """Everything the simulation owns, wired together once."""

    def __init__(
        self,
        *,
        render: Optional[RenderListener] = None,
        display: Optional[DisplayListener] = None,
        starting_timber: float = STARTING_TIMBER,
        tide_cycle_seconds: float = TIDE_CYCLE_SECONDS,
    ):
        # Every mutation (intents and scheduled callbacks) runs under this lock.
        self.lock = threading.RLock()
        self.scheduler = Scheduler()
        self.ids = IdAllocator()
        self.render = render or RenderListener()
        self.display = display or DisplayListener()

        self.ledger = ResourceLedger(self, starting_timber)
        self.registry = BuildingRegistry(self)
        self.tide = TideCycle(self, tide_cycle_seconds)
        self.rates = RateCalculator(self)
        self.raid = RaidSession(self)
        self.clock = GameClock(self)


class GameSession:
    """Main session class."""

    def __init__(
        self,
        *,
        render: Optional[RenderListener] = None,
        display: Optional[DisplayListener] = None,
        picker: Optional[Picker] = None,
        audio: Optional[AmbientAudio] = None,
        store: Optional[SaveStore] = None,
        slot: str = SAVE_SLOT,
        now_ms: Optional[int] = None,
        starting_timber: float = STARTING_TIMBER,
        tide_cycle_seconds: float = TIDE_CYCLE_SECONDS,
    ):
        self.ctx = SimContext(
            render=render,
            display=display,
            starting_timber=starting_timber,
            tide_cycle_seconds=tide_cycle_seconds,
        )
        self.picker = picker or NullPicker()
        self.audio = audio or NullAudio()
        self.store = store if store is not None else MemoryStore()
        self.slot = slot
        self.codec = PersistenceCodec()

        self.selected_build_type = BuildingType.HUT
        self.unlocked = False

        start = self._now() if now_ms is None else int(now_ms)
        self.ctx.clock.start(start)
        self.ctx.tide.start(start)
        self.ctx.rates.recalculate()
        self.refresh_display()

    # Shortcuts
    @property
    def ledger(self) -> ResourceLedger:
        return self.ctx.ledger

    @property
    def registry(self) -> BuildingRegistry:
        return self.ctx.registry

    @property
    def tide(self) -> TideCycle:
        return self.ctx.tide

    @property
    def raid(self) -> RaidSession:
        return self.ctx.raid

    @property
    def clock(self) -> GameClock:
        return self.ctx.clock

    @staticmethod
    def _now() -> int:
        return sim_now_ms()

    def _attempt(self, action: Callable[..., T], *args) -> Optional[T]:
        """Run a mutating action; report a GameError as a notice instead of raising."""
        try:
            return action(*args)
        except NotFound as e:
            logger.debug("ignored: %s", e)
            return None
        except GameError as e:
            logger.info("rejected: %s", e)
            self.ctx.display.on_notice(str(e))
            return None

    # Time
    def update(self, now_ms: Optional[int] = None) -> int:
        """Fire every scheduled task due by `now_ms` (defaults to sim time)."""
        now = self._now() if now_ms is None else int(now_ms)
        with self.ctx.lock:
            return self.ctx.scheduler.run_due(now)

    # Screens
    def unlock(self) -> bool:
        """First user interaction: start the ambient soundscape once."""
        with self.ctx.lock:
            if self.unlocked:
                return False
            self.unlocked = True
        try:
            self.audio.start_ambient()
        except Exception as e:
            # Audio is a pure consumer; losing it must not stop the game.
            logger.warning("ambient audio failed to start: %s", e)
        return True

    def open_game(self) -> None:
        """Enter the play screen: fractional accrual starts alongside the idle tick."""
        with self.ctx.lock:
            self.ctx.clock.open(self._now())
            self.ctx.rates.recalculate()
            self.refresh_display()

    def close(self) -> None:
        """Process teardown: stop audio and every scheduled task."""
        with self.ctx.lock:
            for task in self.ctx.scheduler.active_tasks():
                task.cancel()
        self.audio.stop_ambient()

    # Building intents
    def select_build_type(self, building_type) -> Optional[BuildingType]:
        try:
            self.selected_build_type = BuildingType.parse(building_type)
        except ValueError as e:
            self.ctx.display.on_notice(str(e))
            return None
        return self.selected_build_type

    def place(self, building_type, position) -> Optional[Building]:
        with self.ctx.lock:
            return self._attempt(self.ctx.registry.place, building_type, position)

    def request_placement(self, screen_point: ScreenPoint) -> Optional[Building]:
        ground = self.picker.resolve_ground_position(screen_point)
        if ground is None:
            return None
        return self.place(self.selected_build_type, ground)

    def request_upgrade(self, building_id: str) -> Optional[int]:
        with self.ctx.lock:
            return self._attempt(self.ctx.registry.upgrade, building_id)

    def request_remove_last(self) -> Optional[Building]:
        with self.ctx.lock:
            return self.ctx.registry.remove_most_recent()

    # Raid intents
    def request_raid_start(self) -> bool:
        with self.ctx.lock:
            return self.ctx.raid.start(self._now())

    def request_raid_hit(self) -> bool:
        with self.ctx.lock:
            return self.ctx.raid.register_hit(self._now())

    def request_pointer(self, screen_point: ScreenPoint) -> Any:
        """
        Route a click: a raid hit while a raid runs, else upgrade the building under
        the pointer, else place the selected type on the ground.
        """
        with self.ctx.lock:
            now = self._now()
            self.ctx.raid.check_expiry(now)
            if self.ctx.raid.active:
                return self.ctx.raid.register_hit(now)

            building_id = self.picker.resolve_building_at(screen_point)
            if building_id is not None:
                return self.request_upgrade(building_id)
            return self.request_placement(screen_point)

    # Persistence intents
    def request_save(self) -> SaveBlob:
        with self.ctx.lock:
            blob = self.codec.encode(self.ctx.ledger, self.ctx.registry, self.ctx.tide)
            self.store.write(self.slot, self.codec.dumps(blob))
        logger.info("saved %d buildings to slot %s", len(blob.buildings), self.slot)
        self.ctx.display.on_notice("Saved!")
        return blob

    def request_load(self) -> Optional[SaveBlob]:
        return self._attempt(self._load)

    def _load(self) -> SaveBlob:
        with self.ctx.lock:
            text = self.store.read(self.slot)
            if text is None:
                raise NoSavedState(self.slot)
            # Decode fully before touching live state.
            blob = self.codec.loads(text)
            self.codec.apply(blob, self.ctx)
            self.refresh_display()
        self.ctx.display.on_notice("Loaded save")
        return blob

    # Display
    def refresh_display(self) -> None:
        d = self.ctx.display
        d.on_resource_changed(self.ctx.ledger.current())
        d.on_rate_changed(self.ctx.ledger.rate)
        d.on_tide_changed(self.ctx.tide.label)

    def get_game_state(self) -> dict:
        """Read-only snapshot for HUD/debug output."""
        with self.ctx.lock:
            now = self._now()
            raid = self.ctx.raid
            return {
                "timber": self.ctx.ledger.current(),
                "rate": self.ctx.ledger.rate,
                "rate_display": format_rate(self.ctx.ledger.rate),
                "tide": self.ctx.tide.label,
                "buildings": len(self.ctx.registry),
                "building_counts": self.ctx.registry.count_by_type(),
                "selected_build_type": self.selected_build_type.value,
                "raid_active": raid.active,
                "raid_score": raid.score,
                "raid_remaining_ms": raid.remaining_ms(now),
                "opened": self.ctx.clock.opened,
            }
