import pytest


def test_idle_tick_credits_whole_timber_only(make_session, advance):
    session = make_session(starting_timber=100)
    session.registry.place("mill", (0, 0))
    session.registry.place("mill", (3, 0))  # 40 left, rate 1.32 at low tide

    advance(session, 3000)
    assert session.ledger.current() == 43


def test_rate_below_one_accrues_nothing_before_open(session, advance):
    session.registry.place("hut", (0, 0))
    advance(session, 10000)
    assert session.ledger.current() == 40


def test_open_adds_fractional_ticks_alongside_idle(make_session, advance):
    session = make_session(starting_timber=100)
    session.registry.place("mill", (0, 0))
    session.registry.place("mill", (3, 0))
    advance(session, 3000)

    session.open_game()
    assert session.clock.opened
    advance(session, 5000)
    # two idle ticks (1 each) + two open ticks (1.32 each)
    assert session.ledger.current() == pytest.approx(43 + 2 + 2 * 1.32)


def test_open_is_idempotent(make_session, advance):
    session = make_session(starting_timber=100)
    session.registry.place("mill", (0, 0))
    session.open_game()
    session.open_game()
    advance(session, 1000)
    # idle floor(0.66) = 0, one fractional 0.66
    assert session.ledger.current() == pytest.approx(70.66)


def test_no_buildings_no_growth(session, advance):
    session.open_game()
    advance(session, 10000)
    assert session.ledger.current() == 50
