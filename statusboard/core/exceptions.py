"""
FILE: statusboard/core/exceptions.py
PURPOSE: Custom exception classes for error handling
EXPORTS:
  - BoardError (base exception)
  - NotFoundError, BoardNotFoundError, StatusNotFoundError, TaskNotFoundError
  - InvalidOrderError
  - PrecisionExhaustedError
  - NameCollisionError
  - DefaultStatusProtectedError, StatusInUseError, DefaultStatusError
  - InvalidInputError
DEPENDENCIES:
  - None (stdlib only)
NOTES:
  - All exceptions inherit from BoardError for easy catching
  - Exceptions include context (IDs, names) for helpful error messages
  - Guard checks return these as Verdict.reason instead of raising
"""


class BoardError(Exception):
    """Base exception for all statusboard errors."""
    pass


class NotFoundError(BoardError):
    """Referenced item is absent from the working collection."""

    def __init__(self, item_id, kind: str = "Item"):
        self.item_id = item_id
        self.kind = kind
        super().__init__(f"{kind} {item_id} not found")


class BoardNotFoundError(NotFoundError):
    """Board with given ID doesn't exist."""

    def __init__(self, board_id):
        super().__init__(board_id, kind="Board")
        self.board_id = board_id


class StatusNotFoundError(NotFoundError):
    """Status with given ID doesn't exist."""

    def __init__(self, status_id):
        super().__init__(status_id, kind="Status")
        self.status_id = status_id


class TaskNotFoundError(NotFoundError):
    """Task with given ID doesn't exist."""

    def __init__(self, task_id):
        super().__init__(task_id, kind="Task")
        self.task_id = task_id


class InvalidOrderError(BoardError):
    """Supplied ordering doesn't match the collection's id set."""

    def __init__(self, missing=(), extra=(), duplicates=()):
        self.missing = tuple(missing)
        self.extra = tuple(extra)
        self.duplicates = tuple(duplicates)
        parts = []
        if self.missing:
            parts.append(f"missing {list(self.missing)}")
        if self.extra:
            parts.append(f"unknown {list(self.extra)}")
        if self.duplicates:
            parts.append(f"repeated {list(self.duplicates)}")
        super().__init__("Invalid order: " + ", ".join(parts))


class PrecisionExhaustedError(BoardError):
    """No distinct position key fits between two neighbours."""

    def __init__(self, before, after):
        self.before = before
        self.after = after
        super().__init__(f"No room for a position key between {before} and {after}")


class NameCollisionError(BoardError):
    """A status with the same name already exists on the board."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Status '{name}' already exists")


class DefaultStatusProtectedError(BoardError):
    """The default status can't be deleted."""

    def __init__(self, status_id, name: str):
        self.status_id = status_id
        self.name = name
        super().__init__(f"Status '{name}' is the default status and can't be deleted")


class StatusInUseError(BoardError):
    """Status still has tasks."""

    def __init__(self, status_id, name: str, task_count: int):
        self.status_id = status_id
        self.name = name
        self.task_count = task_count
        super().__init__(
            f"Status '{name}' still has {task_count} task(s). Move or delete them first"
        )


class DefaultStatusError(BoardError):
    """Board doesn't have exactly one default status."""

    def __init__(self, count: int):
        self.count = count
        super().__init__(f"Board must have exactly one default status, found {count}")


class InvalidInputError(BoardError):
    """Input validation failed."""

    def __init__(self, message: str):
        super().__init__(message)
