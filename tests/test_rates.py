import itertools

import pytest

from game.entities.building import Building, BuildingType
from game.systems.rates import compute_rate, format_rate


_ids = itertools.count(1)


def _b(btype, level):
    return Building(id=f"t{next(_ids)}", type=btype, level=level, position=(0, 0))


def test_worked_example_at_mid_tide():
    buildings = [_b(BuildingType.HUT, 1), _b(BuildingType.HUT, 3), _b(BuildingType.MILL, 1)]
    # hut_rate = 0.2 + 0 + 2 * 0.05 = 0.3 ; rate = 2 * 0.3 + 0.6
    assert compute_rate(buildings, "Mid") == pytest.approx(1.2)


def test_tide_multipliers():
    buildings = [_b(BuildingType.MILL, 1)]
    assert compute_rate(buildings, "Low") == pytest.approx(0.66)
    assert compute_rate(buildings, "Mid") == pytest.approx(0.6)
    assert compute_rate(buildings, "High") == pytest.approx(0.54)


def test_hut_bonus_is_shared_across_all_huts():
    # One level-5 hut lifts the rate of every hut: 3 * (0.2 + 4 * 0.05)
    buildings = [_b(BuildingType.HUT, 5), _b(BuildingType.HUT, 1), _b(BuildingType.HUT, 1)]
    assert compute_rate(buildings, "Mid") == pytest.approx(1.2)


def test_mill_level_does_not_change_rate():
    assert compute_rate([_b(BuildingType.MILL, 4)], "Mid") == pytest.approx(0.6)


def test_no_buildings_no_rate():
    assert compute_rate([], "Low") == 0


def test_format_rate_rounds_for_display_only(session):
    session.registry.place("hut", (0, 0))
    # 0.2 * 1.1 at low tide
    assert session.ledger.rate == pytest.approx(0.22)
    assert format_rate(0.666) == "0.67"
    assert session.get_game_state()["rate_display"] == "0.22"


def test_rate_recomputed_on_place_upgrade_remove(make_session, display):
    session = make_session(starting_timber=200)
    before = len(display.of("rate"))

    hut = session.registry.place("hut", (0, 0))
    session.registry.upgrade(hut.id)
    session.registry.remove_most_recent()

    rates = [e[1] for e in display.of("rate")[before:]]
    assert rates == pytest.approx([0.22, 0.275, 0.0])
    assert session.ledger.rate == 0


def test_accrual_ticks_do_not_recompute_rate(session, display, advance):
    session.registry.place("mill", (0, 0))
    before = len(display.of("rate"))
    advance(session, 5000)
    assert len(display.of("rate")) == before


def test_session_worked_example(make_session, advance):
    session = make_session(starting_timber=200)
    h1 = session.registry.place("hut", (0, 0))
    h2 = session.registry.place("hut", (2, 0))
    session.registry.place("mill", (4, 0))
    session.registry.upgrade(h2.id)
    session.registry.upgrade(h2.id)
    assert (h1.level, h2.level) == (1, 3)

    advance(session, 40000)  # Low -> Mid
    assert session.tide.label == "Mid"
    assert session.ledger.rate == pytest.approx(1.2)
