"""
FILE: statusboard/core/pending.py
PURPOSE: Optimistic state changes with confirm/revert
EXPORTS:
  - PendingState (enum)
  - PendingChange (class)
DEPENDENCIES:
  - statusboard.core.reorder (Reordering, apply_positions)
  - statusboard.core.exceptions (InvalidInputError)
NOTES:
  - Holds the snapshot taken before a change and the proposed state
  - The caller shows `proposed` right away, then confirms once storage
    accepted it or reverts to `snapshot` if it didn't
  - Resolves exactly once
"""

from enum import Enum
from typing import Generic, TypeVar

from .exceptions import InvalidInputError
from .reorder import Reordering, apply_positions

T = TypeVar("T")


class PendingState(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    REVERTED = "reverted"


class PendingChange(Generic[T]):
    """
    A computed-but-unconfirmed state next to the state it replaces.

    Attributes:
        snapshot: State before the change
        proposed: State after the change
        state: PENDING until confirm() or revert() is called
    """

    def __init__(self, snapshot: T, proposed: T, description: str = ""):
        self.snapshot = snapshot
        self.proposed = proposed
        self.description = description
        self.state = PendingState.PENDING

    @classmethod
    def for_reordering(cls, items, reordering: Reordering, description: str = "") -> "PendingChange":
        """Pending change from a coordinator result."""
        return cls(
            snapshot=list(items),
            proposed=apply_positions(items, reordering),
            description=description,
        )

    @property
    def is_pending(self) -> bool:
        return self.state is PendingState.PENDING

    @property
    def current(self) -> T:
        """State to display right now."""
        return self.snapshot if self.state is PendingState.REVERTED else self.proposed

    def _resolve(self, state: PendingState) -> None:
        if not self.is_pending:
            raise InvalidInputError(
                f"Change '{self.description or 'unnamed'}' already {self.state.value}"
            )
        self.state = state

    def confirm(self) -> T:
        """Accept the proposed state."""
        self._resolve(PendingState.CONFIRMED)
        return self.proposed

    def revert(self) -> T:
        """Discard the proposed state and return the snapshot."""
        self._resolve(PendingState.REVERTED)
        return self.snapshot

    def __repr__(self) -> str:
        return f"PendingChange({self.description!r}, state={self.state.value})"
