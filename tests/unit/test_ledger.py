"""
Tests for the assertion ledger and bundled backtrack frames.
"""
import pytest
from dsolvers.nra import (
    AssertionLedger,
    BacktrackStack,
    CheckpointUnderflowError,
    Interval,
    Literal,
    Polarity,
    ScopedIntervalStore,
)


def lit(atom, polarity=Polarity.TRUE):
    return Literal(atom, polarity)


def test_assert_appends_in_order():
    ledger = AssertionLedger()
    assert ledger.assert_literal(lit(1))
    assert ledger.assert_literal(lit(2, Polarity.FALSE))
    assert ledger.literals == (lit(1), lit(2, Polarity.FALSE))


def test_pop_checkpoint_truncates_tail():
    ledger = AssertionLedger()
    ledger.assert_literal(lit(1))
    ledger.push_checkpoint()
    ledger.assert_literal(lit(2))
    ledger.push_checkpoint()
    ledger.assert_literal(lit(3))
    ledger.assert_literal(lit(4))
    assert ledger.checkpoint_sizes == [1, 2]

    ledger.pop_checkpoint()
    assert ledger.literals == (lit(1), lit(2))
    ledger.pop_checkpoint()
    assert ledger.literals == (lit(1),)
    assert ledger.checkpoint_sizes == []


def test_pop_checkpoint_underflow():
    with pytest.raises(CheckpointUnderflowError):
        AssertionLedger().pop_checkpoint()


def test_self_deduction_is_not_appended():
    ledger = AssertionLedger()
    ledger.record_deduction(lit(5))

    assert ledger.assert_literal(lit(5)) is False
    assert len(ledger) == 0
    # Opposite polarity is a different fact
    assert ledger.assert_literal(lit(5, Polarity.FALSE)) is True
    assert len(ledger) == 1


def test_deductions_are_scoped_by_checkpoints():
    ledger = AssertionLedger()
    ledger.record_deduction(lit(1))
    ledger.push_checkpoint()
    ledger.record_deduction(lit(2))
    assert ledger.has_deduction(2)

    ledger.pop_checkpoint()
    assert ledger.has_deduction(1)
    assert not ledger.has_deduction(2)
    assert ledger.assert_literal(lit(2))


@pytest.fixture
def stack():
    store = ScopedIntervalStore()
    store.initialize(1, Interval(0.0, 10.0))
    return BacktrackStack(store, AssertionLedger())


def test_backtrack_stack_lockstep(stack):
    for _ in range(3):
        stack.push()
        assert len(stack.ledger.checkpoint_sizes) == stack.store.depth == stack.depth
    for _ in range(3):
        stack.pop()
        assert len(stack.ledger.checkpoint_sizes) == stack.store.depth == stack.depth
    assert stack.depth == 0


def test_backtrack_stack_restores_both(stack):
    stack.ledger.assert_literal(lit(1))
    before_store = stack.store.snapshot()
    before_ledger = stack.ledger.literals

    frame = stack.push()
    assert frame.ledger_size == 1
    assert frame.store_depth == 0
    stack.ledger.assert_literal(lit(2))
    stack.store.set(1, Interval(4.0, 5.0))
    stack.pop()

    assert stack.store.snapshot() == before_store
    assert stack.ledger.literals == before_ledger


def test_backtrack_stack_underflow(stack):
    with pytest.raises(CheckpointUnderflowError):
        stack.pop()
