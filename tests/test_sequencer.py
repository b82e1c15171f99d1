"""
Tests for fractional position keys.

Covers key_between, append_key, renumber and is_strictly_ordered.
"""

import pytest

from statusboard.core.constants import MAX_EXACT_KEY, SEED_KEY
from statusboard.core.exceptions import PrecisionExhaustedError
from statusboard.core.sequencer import (
    PositionUpdate,
    append_key,
    is_strictly_ordered,
    key_between,
    renumber,
)


# --- key_between ---

def test_key_between_empty_collection_seeds():
    assert key_between(None, None) == SEED_KEY


def test_key_between_midpoint():
    key = key_between(1.0, 2.0)
    assert 1.0 < key < 2.0
    assert key == 1.5


def test_key_between_no_predecessor():
    """Moving to the top puts the item one step before its successor."""
    assert key_between(None, 1.0) == 0.0
    assert key_between(None, -3.0) == -4.0


def test_key_between_no_successor():
    assert key_between(5.0, None) == 6.0


def test_key_between_ties_are_exhausted():
    with pytest.raises(PrecisionExhaustedError):
        key_between(1.0, 1.0)


def test_key_between_inverted_neighbours_are_exhausted():
    with pytest.raises(PrecisionExhaustedError):
        key_between(2.0, 1.0)


def test_key_between_gap_below_epsilon():
    with pytest.raises(PrecisionExhaustedError) as exc_info:
        key_between(1.0, 1.0 + 1e-10)

    assert exc_info.value.before == 1.0


def test_key_between_custom_epsilon():
    assert key_between(0.0, 0.5, epsilon=0.1) == 0.25
    with pytest.raises(PrecisionExhaustedError):
        key_between(0.0, 0.05, epsilon=0.1)


def test_repeated_midpoints_raise_before_colliding():
    """Bisecting toward one neighbour never returns a key equal to it."""
    low, high = 1.0, 2.0
    with pytest.raises(PrecisionExhaustedError):
        for _ in range(60):
            key = key_between(low, high)
            assert low < key < high
            high = key


def test_key_between_huge_magnitude_exhausts():
    # At 2**60 a step of 1.0 is lost to rounding
    with pytest.raises(PrecisionExhaustedError):
        key_between(float(2 ** 60), None)


# --- append_key ---

def test_append_key_empty():
    assert append_key([]) == SEED_KEY


def test_append_key_after_max():
    assert append_key([3.0, 1.0, 2.0]) == 4.0


def test_append_key_accepts_generator():
    assert append_key(k for k in [0.0, 0.5]) == 1.5


# --- renumber ---

def test_renumber_even_spacing():
    updates = renumber(["a", "b", "c"])

    assert updates == [
        PositionUpdate("a", 0.0),
        PositionUpdate("b", 1000.0),
        PositionUpdate("c", 2000.0),
    ]


def test_renumber_custom_spacing_and_start():
    updates = renumber([1, 2], spacing=10.0, start=5.0)
    assert [u.order_index for u in updates] == [5.0, 15.0]


def test_renumber_empty():
    assert renumber([]) == []


def test_renumber_rejects_non_positive_spacing():
    with pytest.raises(ValueError):
        renumber([1, 2], spacing=0)


def test_renumber_out_of_exact_range():
    with pytest.raises(PrecisionExhaustedError):
        renumber([1, 2], spacing=float(MAX_EXACT_KEY))


# --- is_strictly_ordered ---

def test_is_strictly_ordered():
    assert is_strictly_ordered([])
    assert is_strictly_ordered([1.0])
    assert is_strictly_ordered([0.0, 0.5, 1.0])
    assert not is_strictly_ordered([1.0, 1.0])
    assert not is_strictly_ordered([2.0, 1.0])
