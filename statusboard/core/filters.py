"""
FILE: statusboard/core/filters.py
PURPOSE: Evaluate a FilterState against tasks, plus column sorting
EXPORTS:
  - matches(task, filters, now, done_status_ids) -> bool
  - apply(tasks, filters, now, done_status_ids) -> List[Task]
  - has_active(filters) -> bool
  - clear() -> FilterState
  - done_status_ids(statuses) -> FrozenSet
  - is_overdue(task, now, done_status_ids) -> bool
  - toggle_status / toggle_priority / toggle_assignee -> FilterState
  - toggle_has_labels / toggle_overdue -> FilterState
  - SortOption (enum), sort_tasks(tasks, sort_by) -> List[Task]
DEPENDENCIES:
  - statusboard.core.models (Task, BoardStatus, FilterState, Priority)
  - statusboard.core.constants (UNASSIGNED)
  - dataclasses, datetime, enum (stdlib)
NOTES:
  - AND across dimensions, OR inside a set dimension
  - Empty set / None tri-state / empty search = no constraint
  - "now" is always passed in; nothing here reads the clock
  - Terminal statuses come from BoardStatus.is_done, never from names
"""

from dataclasses import replace
from datetime import date, datetime
from enum import Enum
from typing import Any, FrozenSet, Iterable, List, Union

from .constants import UNASSIGNED
from .models import BoardStatus, FilterState, Priority, Task


class SortOption(str, Enum):
    """Column sort modes."""

    ORDER = "order"
    PRIORITY = "priority"
    DUE_DATE = "due_date"


def _as_date(now: Union[date, datetime]) -> date:
    return now.date() if isinstance(now, datetime) else now


def done_status_ids(statuses: Iterable[BoardStatus]) -> FrozenSet[Any]:
    """IDs of the statuses marked as terminal."""
    return frozenset(status.id for status in statuses if status.is_done)


def is_overdue(
    task: Task,
    now: Union[date, datetime],
    done_status_ids: FrozenSet[Any] = frozenset(),
) -> bool:
    """Due date in the past and the task isn't in a terminal status."""
    return (
        task.due_date is not None
        and task.due_date < _as_date(now)
        and task.status_id not in done_status_ids
    )


def _matches_assignee(task: Task, assignees: FrozenSet[Any]) -> bool:
    if task.assignee_id is None:
        return UNASSIGNED in assignees
    return task.assignee_id in assignees


def _matches_search(task: Task, query: str) -> bool:
    query = query.lower()
    return query in task.title.lower() or (
        task.description is not None and query in task.description.lower()
    )


def matches(
    task: Task,
    filters: FilterState,
    now: Union[date, datetime],
    done_status_ids: FrozenSet[Any] = frozenset(),
) -> bool:
    """
    Check a single task against every populated filter dimension.

    Args:
        task: Task to test
        filters: Filter state
        now: Evaluation time for the overdue check
        done_status_ids: Statuses that suppress the overdue flag

    Returns:
        True if the task passes all dimensions
    """
    if filters.status and task.status_id not in filters.status:
        return False

    if filters.priority and task.priority not in filters.priority:
        return False

    if filters.assignee and not _matches_assignee(task, filters.assignee):
        return False

    if filters.has_labels is not None and bool(task.labels) != filters.has_labels:
        return False

    if filters.is_overdue is not None:
        if is_overdue(task, now, done_status_ids) != filters.is_overdue:
            return False

    if filters.search and not _matches_search(task, filters.search):
        return False

    return True


def apply(
    tasks: Iterable[Task],
    filters: FilterState,
    now: Union[date, datetime],
    done_status_ids: FrozenSet[Any] = frozenset(),
) -> List[Task]:
    """Tasks that match, in their input order."""
    return [task for task in tasks if matches(task, filters, now, done_status_ids)]


def has_active(filters: FilterState) -> bool:
    """True if any dimension constrains the result."""
    return bool(
        filters.status
        or filters.priority
        or filters.assignee
        or filters.has_labels is not None
        or filters.is_overdue is not None
        or filters.search
    )


def clear() -> FilterState:
    """The empty filter (matches every task)."""
    return FilterState()


def _toggle(values: FrozenSet[Any], value: Any) -> FrozenSet[Any]:
    return values - {value} if value in values else values | {value}


def toggle_status(filters: FilterState, status_id: Any) -> FilterState:
    return replace(filters, status=_toggle(filters.status, status_id))


def toggle_priority(filters: FilterState, priority: Priority) -> FilterState:
    return replace(filters, priority=_toggle(filters.priority, Priority(priority)))


def toggle_assignee(filters: FilterState, assignee_id: Any) -> FilterState:
    return replace(filters, assignee=_toggle(filters.assignee, assignee_id))


def toggle_has_labels(filters: FilterState) -> FilterState:
    # Checkbox semantics: unset <-> True
    return replace(filters, has_labels=None if filters.has_labels is True else True)


def toggle_overdue(filters: FilterState) -> FilterState:
    return replace(filters, is_overdue=None if filters.is_overdue is True else True)


def sort_tasks(tasks: Iterable[Task], sort_by: SortOption = SortOption.ORDER) -> List[Task]:
    """
    Sort tasks for display. Stable; missing values sort last.

    ORDER uses the position key, PRIORITY puts urgent first,
    DUE_DATE puts the earliest due date first.
    """
    sort_by = SortOption(sort_by)
    tasks = list(tasks)

    if sort_by is SortOption.PRIORITY:
        return sorted(tasks, key=lambda t: -t.priority.rank if t.priority else 0)
    if sort_by is SortOption.DUE_DATE:
        return sorted(tasks, key=lambda t: (t.due_date is None, t.due_date or date.min))
    return sorted(tasks, key=lambda t: t.order_index)
