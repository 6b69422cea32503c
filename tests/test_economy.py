import pytest

from game.errors import InsufficientResources


def test_starting_stock_is_fifty(session):
    assert session.ledger.current() == 50


def test_credit_and_debit(session, display):
    ledger = session.ledger
    ledger.credit(5, reason="grant")
    assert ledger.current() == 55

    ledger.debit(20, reason="purchase")
    assert ledger.current() == 35

    assert display.of("resource")[-2:] == [("resource", 55), ("resource", 35)]
    recent = ledger.get_recent_transactions(2)
    assert [t["type"] for t in recent] == ["grant", "purchase"]
    assert recent[1]["delta"] == -20 and recent[1]["balance"] == 35


def test_debit_of_exact_balance_is_allowed(session):
    session.ledger.debit(50)
    assert session.ledger.current() == 0


def test_overdraft_is_rejected_without_partial_spend(session):
    ledger = session.ledger
    with pytest.raises(InsufficientResources) as exc:
        ledger.debit(50.5, reason="hut_placement")
    assert ledger.current() == 50
    assert exc.value.needed == 50.5
    assert exc.value.available == 50


def test_negative_amounts_are_programming_errors(session):
    with pytest.raises(ValueError):
        session.ledger.credit(-1)
    with pytest.raises(ValueError):
        session.ledger.debit(-1)


def test_transaction_log_is_bounded(session, monkeypatch):
    import game.systems.economy as economy

    monkeypatch.setattr(economy, "TRANSACTION_LOG_LIMIT", 10)
    for _ in range(25):
        session.ledger.credit(1)
    assert len(session.ledger.transaction_log) == 10
    assert session.ledger.transaction_log[-1]["balance"] == 75
