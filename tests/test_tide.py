import pytest


def test_starts_low(session):
    assert session.tide.index == 0
    assert session.tide.label == "Low"


def test_cycles_one_step_per_period(session, display, advance):
    advance(session, 39999)
    assert session.tide.label == "Low"

    seen = []
    for t in (40000, 80000, 120000):
        advance(session, t)
        seen.append((session.tide.index, session.tide.label))

    assert seen == [(1, "Mid"), (2, "High"), (0, "Low")]
    assert [e[1] for e in display.of("tide")][-3:] == ["Mid", "High", "Low"]


def test_large_time_jump_fires_every_missed_transition(session, advance):
    advance(session, 40000 * 4)
    assert session.tide.index == 1
    assert session.ctx.scheduler.get("tide").fired == 4


def test_transition_recomputes_rate(session, advance):
    session.registry.place("mill", (0, 0))
    assert session.ledger.rate == pytest.approx(0.66)
    advance(session, 40000)
    assert session.ledger.rate == pytest.approx(0.6)
    advance(session, 80000)
    assert session.ledger.rate == pytest.approx(0.54)


def test_configurable_period(make_session, advance):
    session = make_session(tide_cycle_seconds=5)
    advance(session, 5000)
    assert session.tide.label == "Mid"


def test_restore_keeps_transition_phase(session, advance):
    advance(session, 50000)  # Mid, next turn due at 80000
    session.tide.restore(2)
    assert session.tide.label == "High"
    advance(session, 79999)
    assert session.tide.label == "High"
    advance(session, 80000)
    assert session.tide.label == "Low"


def test_restore_rejects_out_of_range(session):
    with pytest.raises(ValueError):
        session.tide.restore(3)
    assert session.tide.index == 0
