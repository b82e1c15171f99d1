"""
FILE: statusboard/core/guard.py
PURPOSE: Board status invariants, independent of storage
EXPORTS:
  - Verdict (result dataclass)
  - can_delete(status, task_count) -> Verdict
  - validate_create(existing, proposed_name) -> Verdict
  - validate_rename(existing, status_id, new_name) -> Verdict
  - validate_defaults(statuses) -> Verdict
  - next_order_index(existing) -> float
DEPENDENCIES:
  - statusboard.core.models (BoardStatus)
  - statusboard.core.sequencer (append_key)
  - statusboard.core.exceptions (refusal reasons)
NOTES:
  - Checks return Verdict values; callers decide whether to raise
  - Names are trimmed, then compared exactly (case-sensitive)
"""

from dataclasses import dataclass
from typing import Any, Iterable, Optional

from .constants import PRECISION_EPSILON
from .exceptions import (
    BoardError,
    DefaultStatusError,
    DefaultStatusProtectedError,
    InvalidInputError,
    NameCollisionError,
    StatusInUseError,
)
from .models import BoardStatus
from .sequencer import append_key


@dataclass(frozen=True)
class Verdict:
    """Allowed, or refused with a reason."""

    allowed: bool
    reason: Optional[BoardError] = None

    def __bool__(self) -> bool:
        return self.allowed

    def raise_for_reason(self) -> None:
        """Raise the refusal reason, if any."""
        if not self.allowed and self.reason is not None:
            raise self.reason


OK = Verdict(True)


def _refuse(reason: BoardError) -> Verdict:
    return Verdict(False, reason)


def can_delete(status: BoardStatus, task_count: int) -> Verdict:
    """
    Check whether a status may be deleted.

    The default status is protected regardless of task count; any other
    status must be empty.
    """
    if status.is_default:
        return _refuse(DefaultStatusProtectedError(status.id, status.name))
    if task_count > 0:
        return _refuse(StatusInUseError(status.id, status.name, task_count))
    return OK


def _check_name(
    existing: Iterable[BoardStatus],
    name: str,
    ignore_id: Any = None,
) -> Verdict:
    name = (name or "").strip()
    if not name:
        return _refuse(InvalidInputError("Status name cannot be empty"))
    for status in existing:
        if ignore_id is not None and status.id == ignore_id:
            continue
        if status.name.strip() == name:
            return _refuse(NameCollisionError(name))
    return OK


def validate_create(existing: Iterable[BoardStatus], proposed_name: str) -> Verdict:
    """Name must be non-empty and not already used on the board."""
    return _check_name(existing, proposed_name)


def validate_rename(existing: Iterable[BoardStatus], status_id: Any, new_name: str) -> Verdict:
    """Like validate_create, ignoring the status being renamed."""
    return _check_name(existing, new_name, ignore_id=status_id)


def validate_defaults(statuses: Iterable[BoardStatus]) -> Verdict:
    """Exactly one status must be the default."""
    count = sum(1 for status in statuses if status.is_default)
    if count != 1:
        return _refuse(DefaultStatusError(count))
    return OK


def next_order_index(
    existing: Iterable[BoardStatus],
    epsilon: float = PRECISION_EPSILON,
) -> float:
    """Key that appends a new status after all existing ones."""
    return append_key((status.order_index for status in existing), epsilon=epsilon)
