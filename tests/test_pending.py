"""
Tests for optimistic changes (confirm / revert).
"""

from dataclasses import dataclass

import pytest

from statusboard.core.exceptions import InvalidInputError
from statusboard.core.pending import PendingChange, PendingState
from statusboard.core.reorder import Direction, move_one


@dataclass
class Item:
    id: str
    order_index: float


@pytest.fixture
def change():
    items = [Item("A", 1.0), Item("B", 2.0)]
    reordering = move_one(items, "B", Direction.UP)
    return PendingChange.for_reordering(items, reordering, description="move B up")


def test_new_change_is_pending(change):
    assert change.is_pending
    assert change.state is PendingState.PENDING
    assert [i.id for i in change.current] == ["B", "A"]


def test_confirm_keeps_proposed(change):
    result = change.confirm()

    assert change.state is PendingState.CONFIRMED
    assert [i.id for i in result] == ["B", "A"]
    assert change.current is change.proposed


def test_revert_restores_snapshot(change):
    result = change.revert()

    assert change.state is PendingState.REVERTED
    assert [(i.id, i.order_index) for i in result] == [("A", 1.0), ("B", 2.0)]
    assert change.current is change.snapshot


def test_resolves_only_once(change):
    change.confirm()

    with pytest.raises(InvalidInputError):
        change.revert()
    with pytest.raises(InvalidInputError):
        change.confirm()


def test_plain_values():
    change = PendingChange(snapshot=1, proposed=2)

    assert change.current == 2
    assert change.revert() == 1
    assert change.current == 1
    assert "reverted" in repr(change)
