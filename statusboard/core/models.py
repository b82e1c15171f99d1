"""
FILE: statusboard/core/models.py
PURPOSE: Domain models for boards, statuses, tasks and filters
EXPORTS:
  - Color (enum, 8-value palette)
  - Priority (enum with rank)
  - Board (dataclass)
  - BoardStatus (dataclass)
  - Task (dataclass)
  - FilterState (frozen dataclass)
DEPENDENCIES:
  - dataclasses (stdlib)
  - enum (stdlib)
  - json (stdlib)
  - datetime (stdlib)
NOTES:
  - Storage-backed models have from_row() for SQLite row conversion
  - Storage-backed models have to_dict()/to_json() for serialization
  - Labels stored as a JSON array in SQLite, exposed as a tuple
  - Due dates stored as ISO-8601 date strings
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Optional, Tuple, FrozenSet, Any, Dict
import json

from .exceptions import InvalidInputError


class Color(str, Enum):
    """Status color palette."""

    GRAY = "gray"
    BLUE = "blue"
    GREEN = "green"
    YELLOW = "yellow"
    ORANGE = "orange"
    RED = "red"
    PURPLE = "purple"
    PINK = "pink"

    @classmethod
    def parse(cls, value: str) -> "Color":
        try:
            return cls(value.strip().lower())
        except ValueError:
            raise InvalidInputError(
                f"Invalid color '{value}'. Must be one of: {', '.join(c.value for c in cls)}"
            )


class Priority(str, Enum):
    """Task priority. Higher rank sorts first."""

    URGENT = "urgent"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        return _PRIORITY_RANK[self]

    @classmethod
    def parse(cls, value: str) -> "Priority":
        try:
            return cls(value.strip().lower())
        except ValueError:
            raise InvalidInputError(
                f"Invalid priority '{value}'. Must be one of: {', '.join(p.value for p in cls)}"
            )


_PRIORITY_RANK = {
    Priority.URGENT: 4,
    Priority.HIGH: 3,
    Priority.MEDIUM: 2,
    Priority.LOW: 1,
}


def _parse_date(value) -> Optional[date]:
    if value is None or isinstance(value, date):
        return value
    return date.fromisoformat(value)


@dataclass
class Board:
    """A board owning an ordered set of statuses."""

    id: int
    name: str
    created_at: Optional[str] = None

    @classmethod
    def from_row(cls, row) -> "Board":
        """Convert SQLite row to Board object."""
        return cls(
            id=row["id"],
            name=row["name"],
            created_at=row["created_at"],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "created_at": self.created_at}

    def to_json(self) -> str:
        """Serialize board to JSON string."""
        return json.dumps(self.to_dict(), indent=2)


@dataclass
class BoardStatus:
    """A board column (e.g., To Do, In Progress, Done)."""

    id: Any
    board_id: Any
    name: str
    color: Color = Color.GRAY
    order_index: float = 0.0
    is_default: bool = False
    is_done: bool = False
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_row(cls, row) -> "BoardStatus":
        """Convert SQLite row to BoardStatus object."""
        return cls(
            id=row["id"],
            board_id=row["board_id"],
            name=row["name"],
            color=Color(row["color"]),
            order_index=row["order_index"],
            is_default=bool(row["is_default"]),
            is_done=bool(row["is_done"]),
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "board_id": self.board_id,
            "name": self.name,
            "color": self.color.value,
            "order_index": self.order_index,
            "is_default": self.is_default,
            "is_done": self.is_done,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    def to_json(self) -> str:
        """Serialize status to JSON string."""
        return json.dumps(self.to_dict(), indent=2)


@dataclass
class Task:
    """A task card living in one status column."""

    id: Any
    board_id: Any
    title: str
    status_id: Any
    priority: Optional[Priority] = None
    assignee_id: Optional[str] = None
    labels: Tuple[str, ...] = ()
    due_date: Optional[date] = None
    order_index: float = 0.0
    description: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    def __post_init__(self):
        self.labels = tuple(self.labels or ())
        self.due_date = _parse_date(self.due_date)
        if isinstance(self.priority, str) and not isinstance(self.priority, Priority):
            self.priority = Priority(self.priority)

    @classmethod
    def from_row(cls, row) -> "Task":
        """Convert SQLite row to Task object."""
        return cls(
            id=row["id"],
            board_id=row["board_id"],
            title=row["title"],
            status_id=row["status_id"],
            priority=Priority(row["priority"]) if row["priority"] else None,
            assignee_id=row["assignee_id"],
            labels=tuple(json.loads(row["labels"])) if row["labels"] else (),
            due_date=row["due_date"],
            order_index=row["order_index"],
            description=row["description"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "board_id": self.board_id,
            "title": self.title,
            "status_id": self.status_id,
            "priority": self.priority.value if self.priority else None,
            "assignee_id": self.assignee_id,
            "labels": list(self.labels),
            "due_date": self.due_date.isoformat() if self.due_date else None,
            "order_index": self.order_index,
            "description": self.description,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    def to_json(self) -> str:
        """Serialize task to JSON string."""
        return json.dumps(self.to_dict(), indent=2)


@dataclass(frozen=True)
class FilterState:
    """
    Composite task filter. Client-held, never persisted.

    Empty sets and None tri-states mean "no constraint".
    """

    status: FrozenSet[Any] = field(default_factory=frozenset)
    priority: FrozenSet[Priority] = field(default_factory=frozenset)
    assignee: FrozenSet[Any] = field(default_factory=frozenset)
    has_labels: Optional[bool] = None
    is_overdue: Optional[bool] = None
    search: str = ""

    def __post_init__(self):
        # Frozen, so normalise through object.__setattr__
        object.__setattr__(self, "status", frozenset(self.status))
        object.__setattr__(
            self,
            "priority",
            frozenset(Priority(p) for p in self.priority),
        )
        object.__setattr__(self, "assignee", frozenset(self.assignee))
        object.__setattr__(self, "search", (self.search or "").strip())
