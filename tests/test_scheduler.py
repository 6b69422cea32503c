import pytest

from game.sim.ids import IdAllocator
from game.sim.scheduler import Scheduler


def test_fires_in_chronological_order_with_due_times():
    sched = Scheduler()
    log = []
    sched.every("slow", 300, lambda t: log.append(("slow", t)), start_ms=0)
    sched.every("fast", 100, lambda t: log.append(("fast", t)), start_ms=0)

    assert sched.run_due(300) == 4
    assert log == [("fast", 100), ("fast", 200), ("slow", 300), ("fast", 300)]


def test_ties_go_to_first_registered():
    sched = Scheduler()
    log = []
    sched.every("a", 100, lambda t: log.append("a"), start_ms=0)
    sched.every("b", 100, lambda t: log.append("b"), start_ms=0)
    sched.run_due(100)
    assert log == ["a", "b"]


def test_cancel_and_stop_condition():
    sched = Scheduler()
    hits = []
    state = {"on": True}
    sched.every("cond", 100, hits.append, start_ms=0, stop_when=lambda: not state["on"])
    task = sched.every("manual", 100, hits.append, start_ms=0)

    sched.run_due(100)
    assert hits == [100, 100]

    state["on"] = False
    task.cancel()
    assert sched.run_due(1000) == 0
    assert sched.active_tasks() == []


def test_callback_may_cancel_its_own_task():
    sched = Scheduler()
    fired = []

    def once(t):
        fired.append(t)
        sched.get("once").cancel()

    sched.every("once", 50, once, start_ms=10)
    sched.run_due(500)
    assert fired == [60]


def test_period_must_be_positive():
    with pytest.raises(ValueError):
        Scheduler().every("bad", 0, lambda t: None, start_ms=0)


def test_id_allocator_skips_observed_ids():
    ids = IdAllocator()
    assert ids.next_id() == "b1"
    ids.observe("b10")
    ids.observe("b3")
    ids.observe("1718000000000_42")
    assert ids.next_id() == "b11"
