"""
FILE: statusboard/core/reorder.py
PURPOSE: Turn a desired ordering into position key assignments
EXPORTS:
  - Direction (enum: up, down)
  - Reordering (result dataclass)
  - move_one(items, item_id, direction) -> Reordering
  - move_to(items, item_id, index) -> Reordering
  - insert_at(items, item, index) -> Reordering
  - apply_full_order(items, ordered_ids) -> Reordering
  - apply_positions(items, reordering) -> List[item]
DEPENDENCIES:
  - statusboard.core.sequencer (key_between, renumber)
  - statusboard.core.exceptions (NotFoundError, InvalidOrderError, PrecisionExhaustedError)
  - bisect, dataclasses, enum (stdlib)
NOTES:
  - Items are anything with .id and .order_index (BoardStatus, Task)
  - Inputs are never mutated; results are new values
  - Ties between equal keys are broken by input sequence
  - PrecisionExhaustedError triggers one full renumbering and a retry
  - Persisting the result is the caller's job (see service.py)
"""

from bisect import bisect_left
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Set, Tuple

from .constants import PRECISION_EPSILON, RENORMALIZE_SPACING
from .exceptions import NotFoundError, InvalidOrderError, PrecisionExhaustedError
from .sequencer import PositionUpdate, key_between, renumber, is_strictly_ordered


class Direction(str, Enum):
    """Single-step move direction."""

    UP = "up"
    DOWN = "down"


@dataclass(frozen=True)
class Reordering:
    """
    Outcome of a reorder operation.

    Attributes:
        order: Item ids in their final order
        positions: Final key for every item
        updates: Only the items whose key changed, in final order
        renormalized: True if the collection had to be renumbered
    """

    order: Tuple[Any, ...]
    positions: Dict[Any, float]
    updates: Tuple[PositionUpdate, ...]
    renormalized: bool = False

    @property
    def changed(self) -> bool:
        return bool(self.updates)


def _sorted_items(items) -> list:
    # sorted() is stable, so equal keys keep their input (creation) order
    return sorted(items, key=lambda item: item.order_index)


def _build(order, original, keys, renormalized) -> Reordering:
    updates = tuple(
        PositionUpdate(item_id, keys[item_id])
        for item_id in order
        if keys[item_id] != original[item_id]
    )
    return Reordering(
        order=tuple(order),
        positions={item_id: keys[item_id] for item_id in order},
        updates=updates,
        renormalized=renormalized,
    )


def move_one(
    items: Sequence[Any],
    item_id: Any,
    direction: Direction,
    epsilon: float = PRECISION_EPSILON,
    spacing: float = RENORMALIZE_SPACING,
) -> Reordering:
    """
    Move one item a single step up or down.

    The moved item gets a fresh key between its new neighbours instead of
    swapping keys with the item it passes, so repeated moves never
    produce duplicate keys.

    Args:
        items: Collection to reorder
        item_id: ID of the item to move
        direction: Direction.UP or Direction.DOWN

    Returns:
        Reordering (no updates if the item is already at that boundary)

    Raises:
        NotFoundError: If item_id isn't in items
    """
    direction = Direction(direction)
    ordered = _sorted_items(items)
    ids = [item.id for item in ordered]
    original = {item.id: item.order_index for item in ordered}

    if item_id not in original:
        raise NotFoundError(item_id)

    index = ids.index(item_id)
    target = index - 1 if direction is Direction.UP else index + 1
    if target < 0 or target >= len(ids):
        return _build(ids, original, original, renormalized=False)

    new_ids = list(ids)
    new_ids[index], new_ids[target] = new_ids[target], new_ids[index]

    def place(keys: Dict[Any, float]) -> float:
        before = keys[new_ids[target - 1]] if target > 0 else None
        after = keys[new_ids[target + 1]] if target + 1 < len(new_ids) else None
        return key_between(before, after, epsilon=epsilon)

    keys = dict(original)
    renormalized = False
    if not is_strictly_ordered([original[i] for i in ids]):
        keys = dict(renumber(ids, spacing=spacing))
        renormalized = True

    try:
        keys[item_id] = place(keys)
    except PrecisionExhaustedError:
        if renormalized:
            raise
        keys = dict(renumber(ids, spacing=spacing))
        renormalized = True
        keys[item_id] = place(keys)

    return _build(new_ids, original, keys, renormalized)


def _validate_order(ids: Sequence[Any], ordered_ids: Sequence[Any]) -> None:
    known = set(ids)
    seen: Set[Any] = set()
    duplicates = []
    extra = []
    for item_id in ordered_ids:
        if item_id in seen:
            duplicates.append(item_id)
            continue
        seen.add(item_id)
        if item_id not in known:
            extra.append(item_id)
    missing = [item_id for item_id in ids if item_id not in seen]

    if missing or extra or duplicates:
        raise InvalidOrderError(missing=missing, extra=extra, duplicates=duplicates)


def _increasing_run(order: Sequence[Any], keys: Dict[Any, float]) -> Set[Any]:
    """Ids forming the longest run whose keys already increase along order."""
    tails: List[float] = []
    tail_index: List[int] = []
    previous = [-1] * len(order)

    for i, item_id in enumerate(order):
        key = keys[item_id]
        pos = bisect_left(tails, key)
        if pos == len(tails):
            tails.append(key)
            tail_index.append(i)
        else:
            tails[pos] = key
            tail_index[pos] = i
        previous[i] = tail_index[pos - 1] if pos > 0 else -1

    kept = set()
    i = tail_index[-1] if tail_index else -1
    while i != -1:
        kept.add(order[i])
        i = previous[i]
    return kept


def _bisect_run(
    run: Sequence[Any],
    low: Optional[float],
    high: Optional[float],
    out: Dict[Any, float],
    epsilon: float,
) -> None:
    """Give every id in run a key between low and high, middle first."""
    if not run:
        return
    mid = len(run) // 2
    key = key_between(low, high, epsilon=epsilon)
    out[run[mid]] = key
    _bisect_run(run[:mid], low, key, out, epsilon)
    _bisect_run(run[mid + 1:], key, high, out, epsilon)


def _assign(order: Sequence[Any], keys: Dict[Any, float], epsilon: float) -> Dict[Any, float]:
    anchors = _increasing_run(order, keys)
    result: Dict[Any, float] = {}
    pending: List[Any] = []
    low = None

    for item_id in order:
        if item_id in anchors:
            _bisect_run(pending, low, keys[item_id], result, epsilon)
            result[item_id] = keys[item_id]
            low = keys[item_id]
            pending = []
        else:
            pending.append(item_id)
    _bisect_run(pending, low, None, result, epsilon)

    return result


def apply_full_order(
    items: Sequence[Any],
    ordered_ids: Sequence[Any],
    epsilon: float = PRECISION_EPSILON,
    spacing: float = RENORMALIZE_SPACING,
) -> Reordering:
    """
    Assign keys so the collection sorts exactly as ordered_ids.

    Items whose current keys already increase along the new order keep
    them; the rest get keys bisected between those anchors. A plain
    drag of one item therefore changes one key.

    Args:
        items: Collection to reorder
        ordered_ids: Every id of items exactly once, in the desired order

    Returns:
        Reordering whose order equals ordered_ids

    Raises:
        InvalidOrderError: If ordered_ids has missing, unknown or repeated ids
    """
    ordered = _sorted_items(items)
    ids = [item.id for item in ordered]
    _validate_order(ids, ordered_ids)

    original = {item.id: item.order_index for item in ordered}
    order = list(ordered_ids)

    try:
        keys = _assign(order, original, epsilon)
        renormalized = False
    except PrecisionExhaustedError:
        # Renumber in the current order, then retry the same target order
        keys = _assign(order, dict(renumber(ids, spacing=spacing)), epsilon)
        renormalized = True

    return _build(order, original, keys, renormalized)


def move_to(
    items: Sequence[Any],
    item_id: Any,
    index: int,
    epsilon: float = PRECISION_EPSILON,
    spacing: float = RENORMALIZE_SPACING,
) -> Reordering:
    """
    Drop one item at index (drag and drop inside one collection).

    Index is clamped to the collection bounds.

    Raises:
        NotFoundError: If item_id isn't in items
    """
    ids = [item.id for item in _sorted_items(items)]
    if item_id not in ids:
        raise NotFoundError(item_id)

    ids.remove(item_id)
    index = max(0, min(index, len(ids)))
    ids.insert(index, item_id)

    return apply_full_order(items, ids, epsilon=epsilon, spacing=spacing)


def insert_at(
    items: Sequence[Any],
    item: Any,
    index: Optional[int] = None,
    epsilon: float = PRECISION_EPSILON,
    spacing: float = RENORMALIZE_SPACING,
) -> Reordering:
    """
    Place an item arriving from another collection at index.

    Used when a task is dropped into a different status column. The
    arriving item's old key is kept if it already fits.

    Args:
        items: Target collection (without the arriving item)
        item: The arriving item
        index: Drop position, None appends at the end
    """
    others = [other for other in items if other.id != item.id]
    ids = [other.id for other in _sorted_items(others)]
    if index is None:
        index = len(ids)
    index = max(0, min(index, len(ids)))
    ids.insert(index, item.id)

    return apply_full_order(others + [item], ids, epsilon=epsilon, spacing=spacing)


def apply_positions(items: Sequence[Any], reordering: Reordering) -> list:
    """
    New items carrying the reordering's keys, in final order.

    Items must be dataclasses. Items unknown to the reordering keep
    their key and sort after the known ones.
    """
    rank = {item_id: i for i, item_id in enumerate(reordering.order)}
    updated = [
        replace(item, order_index=reordering.positions[item.id])
        if item.id in reordering.positions else item
        for item in items
    ]
    return sorted(updated, key=lambda item: (rank.get(item.id, len(rank)), item.order_index))
