"""
FILE: statusboard/core/sequencer.py
PURPOSE: Fractional position keys for ordered collections
EXPORTS:
  - key_between(before, after, epsilon) -> float
  - append_key(keys) -> float
  - renumber(ids, spacing, start) -> List[PositionUpdate]
  - is_strictly_ordered(keys) -> bool
  - PositionUpdate (named tuple)
DEPENDENCIES:
  - statusboard.core.constants (key defaults)
  - statusboard.core.exceptions (PrecisionExhaustedError)
NOTES:
  - Pure functions, no I/O, no logging
  - Keys are floats; the midpoint between two neighbours halves the gap
  - PrecisionExhaustedError means "renumber and try again"
"""

from typing import Any, Iterable, List, NamedTuple, Optional, Sequence

from .constants import (
    SEED_KEY,
    KEY_STEP,
    PRECISION_EPSILON,
    RENORMALIZE_SPACING,
    MAX_EXACT_KEY,
)
from .exceptions import PrecisionExhaustedError


class PositionUpdate(NamedTuple):
    """New position key for one item."""

    id: Any
    order_index: float


def key_between(
    before: Optional[float],
    after: Optional[float],
    epsilon: float = PRECISION_EPSILON,
) -> float:
    """
    Position key for an item inserted between two neighbours.

    Args:
        before: Key of the item that will precede the new one (None = start)
        after: Key of the item that will follow the new one (None = end)
        epsilon: Smallest gap that may still be split

    Returns:
        A key strictly greater than before and strictly less than after

    Raises:
        PrecisionExhaustedError: If no distinct key fits. Tied or inverted
            neighbours count as exhausted too.
    """
    if before is None and after is None:
        return SEED_KEY

    if before is None:
        key = after - KEY_STEP
    elif after is None:
        key = before + KEY_STEP
    else:
        if after - before < epsilon:
            raise PrecisionExhaustedError(before, after)
        key = (before + after) / 2

    # Large magnitudes can swallow the step or the midpoint
    if (before is not None and key <= before) or (after is not None and key >= after):
        raise PrecisionExhaustedError(before, after)

    return key


def append_key(keys: Iterable[float], epsilon: float = PRECISION_EPSILON) -> float:
    """Key that sorts after every key in keys (seed key when empty)."""
    keys = list(keys)
    return key_between(max(keys) if keys else None, None, epsilon=epsilon)


def renumber(
    ids: Sequence[Any],
    spacing: float = RENORMALIZE_SPACING,
    start: float = 0.0,
) -> List[PositionUpdate]:
    """
    Evenly spaced keys for ids in the given order (0, 1000, 2000, ...).

    Raises:
        PrecisionExhaustedError: If the collection doesn't fit the exactly
            representable key range.
    """
    if spacing <= 0:
        raise ValueError("spacing must be positive")

    last = start + spacing * max(len(ids) - 1, 0)
    if last >= MAX_EXACT_KEY:
        raise PrecisionExhaustedError(start, last)

    return [PositionUpdate(item_id, start + spacing * i) for i, item_id in enumerate(ids)]


def is_strictly_ordered(keys: Sequence[float]) -> bool:
    """True if every key is strictly greater than the one before it."""
    return all(a < b for a, b in zip(keys, keys[1:]))
