import json

from conftest import FakeAudio, FakePicker

from game.entities.building import BuildingType
from game.sim.timebase import set_sim_now_ms


def test_pointer_on_ground_places_selected_type(make_session, display):
    picker = FakePicker(ground=(3.4, -2.6))
    session = make_session(picker=picker, starting_timber=100)
    session.select_build_type("mill")

    placed = session.request_pointer((640, 360))
    assert placed.type == BuildingType.MILL
    assert placed.position == (3, -3)
    assert session.ledger.current() == 70


def test_pointer_on_building_upgrades_it(make_session):
    picker = FakePicker(ground=(0, 0))
    session = make_session(picker=picker)
    hut = session.request_pointer((0, 0))

    picker.building_id = hut.id
    assert session.request_pointer((0, 0)) == 2
    assert hut.level == 2
    assert len(session.registry) == 1


def test_pointer_during_raid_scores_hits(make_session):
    picker = FakePicker(ground=(0, 0))
    session = make_session(picker=picker)
    session.request_raid_start()

    assert session.request_pointer((0, 0)) is True
    assert session.raid.score == 1
    assert len(session.registry) == 0


def test_pointer_after_raid_expiry_places_again(make_session):
    picker = FakePicker(ground=(0, 0))
    session = make_session(picker=picker)
    session.request_raid_start()
    set_sim_now_ms(25000)

    placed = session.request_pointer((0, 0))
    assert not session.raid.active
    assert placed is not None and placed.type == BuildingType.HUT


def test_pointer_off_the_island_does_nothing(make_session):
    session = make_session(picker=FakePicker(ground=None))
    assert session.request_pointer((5, 5)) is None
    assert session.ledger.current() == 50


def test_rejections_become_notices(make_session, display):
    session = make_session(picker=FakePicker(ground=(0, 0)), starting_timber=5)
    assert session.request_placement((0, 0)) is None
    assert display.notices[-1].startswith("Not enough timber")
    assert session.ledger.current() == 5


def test_upgrade_of_unknown_building_is_silent(session, display):
    assert session.request_upgrade("ghost") is None
    assert display.notices == []


def test_invalid_build_type_keeps_selection(session, display):
    assert session.select_build_type("castle") is None
    assert session.selected_build_type == BuildingType.HUT
    assert display.notices


def test_remove_last_intent(session):
    session.place("hut", (0, 0))
    removed = session.request_remove_last()
    assert removed is not None
    assert session.request_remove_last() is None


def test_unlock_starts_ambient_once(make_session):
    audio = FakeAudio()
    session = make_session(audio=audio)
    assert session.unlock() is True
    assert session.unlock() is False
    assert audio.started == 1

    session.close()
    assert audio.stopped == 1
    assert session.ctx.scheduler.active_tasks() == []


def test_display_receives_initial_state(display, make_session):
    make_session()
    assert ("resource", 50) in display.events
    assert ("tide", "Low") in display.events
    assert ("rate", 0.0) in display.events


def test_game_state_snapshot(session):
    session.place("hut", (0, 0))
    session.request_raid_start()
    state = session.get_game_state()
    assert state["timber"] == 40
    assert state["buildings"] == 1
    assert state["building_counts"] == {"hut": 1, "mill": 0}
    assert state["tide"] == "Low"
    assert state["raid_active"] is True
    assert state["raid_remaining_ms"] == 20000
    assert state["opened"] is False


def test_upgrading_restored_giant_level_is_refused(session, store, display):
    store.write(session.slot, json.dumps({
        "resources": {"timber": 10},
        "buildings": [{"id": "a", "pos": [0, 4, 0], "type": "hut", "level": 5000}],
    }))
    session.request_load()

    assert session.request_upgrade("a") is None
    assert session.registry.find_by_id("a").level == 5000
    assert session.ledger.current() == 10
    assert display.notices[-1].startswith("Not enough timber")
