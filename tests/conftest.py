import os

import pytest

# Headless pygame for anything that touches the mixer/display.
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

from game.persistence import MemoryStore
from game.session import GameSession
from game.sim.contracts import DisplayListener, RenderListener
from game.sim.timebase import set_sim_now_ms


class RecordingDisplay(DisplayListener):
    def __init__(self):
        self.events = []

    def on_resource_changed(self, amount):
        self.events.append(("resource", amount))

    def on_rate_changed(self, rate):
        self.events.append(("rate", rate))

    def on_tide_changed(self, label):
        self.events.append(("tide", label))

    def on_raid_started(self, end_time_ms):
        self.events.append(("raid_started", end_time_ms))

    def on_raid_ended(self, score, reward):
        self.events.append(("raid_ended", score, reward))

    def on_notice(self, text):
        self.events.append(("notice", text))

    def of(self, kind):
        return [e for e in self.events if e[0] == kind]

    @property
    def notices(self):
        return [e[1] for e in self.of("notice")]


class RecordingRender(RenderListener):
    def __init__(self):
        self.events = []

    def on_building_placed(self, building_id, building_type, level, position):
        self.events.append(("placed", building_id, building_type, level, position))

    def on_building_upgraded(self, building_id, new_level):
        self.events.append(("upgraded", building_id, new_level))

    def on_building_removed(self, building_id):
        self.events.append(("removed", building_id))


class FakePicker:
    def __init__(self, ground=None, building_id=None):
        self.ground = ground
        self.building_id = building_id

    def resolve_ground_position(self, screen_point):
        return self.ground

    def resolve_building_at(self, screen_point):
        return self.building_id


class FakeAudio:
    def __init__(self):
        self.started = 0
        self.stopped = 0

    def start_ambient(self):
        self.started += 1

    def stop_ambient(self):
        self.stopped += 1


@pytest.fixture(autouse=True)
def sim_time():
    """Every test runs on simulation time starting at 0."""
    set_sim_now_ms(0)
    yield
    set_sim_now_ms(None)


@pytest.fixture
def display():
    return RecordingDisplay()


@pytest.fixture
def render():
    return RecordingRender()


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def make_session(display, render, store):
    def _make(**kwargs):
        kwargs.setdefault("display", display)
        kwargs.setdefault("render", render)
        kwargs.setdefault("store", store)
        kwargs.setdefault("now_ms", 0)
        return GameSession(**kwargs)

    return _make


@pytest.fixture
def session(make_session):
    return make_session()


def advance_to(session, now_ms):
    """Move sim time and fire everything due."""
    set_sim_now_ms(now_ms)
    return session.update(now_ms)


@pytest.fixture
def advance():
    return advance_to
