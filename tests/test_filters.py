"""
Tests for task filtering and sorting.

All tests inject `now` so the overdue checks are deterministic.
"""

from datetime import date, datetime

import pytest

from statusboard.core import filters
from statusboard.core.constants import UNASSIGNED
from statusboard.core.filters import SortOption
from statusboard.core.models import BoardStatus, FilterState, Priority, Task

NOW = date(2024, 6, 15)
DONE = frozenset({3})


def make_task(task_id, **kwargs):
    kwargs.setdefault("status_id", 1)
    kwargs.setdefault("order_index", float(task_id))
    title = kwargs.pop("title", f"Task {task_id}")
    return Task(id=task_id, board_id=1, title=title, **kwargs)


def ids(tasks):
    return [t.id for t in tasks]


@pytest.fixture
def tasks():
    return [
        make_task(1, priority="high", assignee_id="sam", labels=("backend",)),
        make_task(2, priority="low", due_date=date(2024, 6, 1)),
        make_task(3, priority="high", status_id=2, description="Fix the login page"),
        make_task(4, status_id=3, due_date=date(2024, 6, 1), assignee_id="kim"),
        make_task(5, priority="urgent", due_date=date(2024, 6, 15), labels=("ui", "bug")),
    ]


# --- matches / apply ---

def test_empty_filter_matches_everything(tasks):
    assert ids(filters.apply(tasks, FilterState(), NOW, DONE)) == [1, 2, 3, 4, 5]


def test_priority_filter():
    """[1 high, 2 low, 3 high] filtered to high gives [1, 3]."""
    tasks = [
        make_task(1, priority=Priority.HIGH),
        make_task(2, priority=Priority.LOW),
        make_task(3, priority=Priority.HIGH),
    ]

    result = filters.apply(tasks, FilterState(priority={Priority.HIGH}), NOW)

    assert ids(result) == [1, 3]


def test_priority_filter_excludes_tasks_without_priority(tasks):
    result = filters.apply(tasks, FilterState(priority={"high", "urgent"}), NOW, DONE)
    assert ids(result) == [1, 3, 5]


def test_status_filter_is_or_within_dimension(tasks):
    result = filters.apply(tasks, FilterState(status={2, 3}), NOW, DONE)
    assert ids(result) == [3, 4]


def test_dimensions_combine_with_and(tasks):
    state = FilterState(status={1}, priority={Priority.HIGH})
    assert ids(filters.apply(tasks, state, NOW, DONE)) == [1]


def test_assignee_filter(tasks):
    assert ids(filters.apply(tasks, FilterState(assignee={"kim"}), NOW, DONE)) == [4]


def test_unassigned_sentinel(tasks):
    result = filters.apply(tasks, FilterState(assignee={UNASSIGNED}), NOW, DONE)
    assert ids(result) == [2, 3, 5]


def test_unassigned_with_named_assignee(tasks):
    result = filters.apply(tasks, FilterState(assignee={UNASSIGNED, "sam"}), NOW, DONE)
    assert ids(result) == [1, 2, 3, 5]


def test_has_labels_true(tasks):
    assert ids(filters.apply(tasks, FilterState(has_labels=True), NOW, DONE)) == [1, 5]


def test_has_labels_false_means_no_labels(tasks):
    assert ids(filters.apply(tasks, FilterState(has_labels=False), NOW, DONE)) == [2, 3, 4]


def test_overdue_true(tasks):
    """Task 4 is past due but in the done status; task 5 is due today."""
    assert ids(filters.apply(tasks, FilterState(is_overdue=True), NOW, DONE)) == [2]


def test_overdue_false_means_not_overdue(tasks):
    result = filters.apply(tasks, FilterState(is_overdue=False), NOW, DONE)
    assert ids(result) == [1, 3, 4, 5]


def test_overdue_without_done_statuses(tasks):
    result = filters.apply(tasks, FilterState(is_overdue=True), NOW)
    assert ids(result) == [2, 4]


def test_overdue_accepts_datetime(tasks):
    now = datetime(2024, 6, 16, 0, 0, 1)
    result = filters.apply(tasks, FilterState(is_overdue=True), now, DONE)
    assert ids(result) == [2, 5]


def test_search_title_and_description(tasks):
    assert ids(filters.apply(tasks, FilterState(search="LOGIN"), NOW, DONE)) == [3]
    assert ids(filters.apply(tasks, FilterState(search="task 2"), NOW, DONE)) == [2]


def test_search_is_trimmed():
    state = FilterState(search="  login  ")
    assert state.search == "login"


def test_blank_search_matches_everything(tasks):
    assert len(filters.apply(tasks, FilterState(search="   "), NOW, DONE)) == 5


def test_apply_keeps_input_order(tasks):
    reversed_tasks = list(reversed(tasks))
    result = filters.apply(reversed_tasks, FilterState(priority={"high"}), NOW, DONE)
    assert ids(result) == [3, 1]


# --- is_overdue / done_status_ids ---

def test_is_overdue():
    task = make_task(1, due_date="2024-06-14")

    assert filters.is_overdue(task, NOW)
    assert not filters.is_overdue(task, date(2024, 6, 14))
    assert not filters.is_overdue(task, NOW, frozenset({1}))
    assert not filters.is_overdue(make_task(2), NOW)


def test_done_status_ids():
    statuses = [
        BoardStatus(id=1, board_id=1, name="To Do", is_default=True),
        BoardStatus(id=2, board_id=1, name="Done", is_done=True),
    ]
    assert filters.done_status_ids(statuses) == frozenset({2})


# --- has_active / clear / toggles ---

def test_has_active():
    assert not filters.has_active(FilterState())
    assert filters.has_active(FilterState(status={1}))
    assert filters.has_active(FilterState(has_labels=False))
    assert filters.has_active(FilterState(search="x"))


def test_clear():
    assert filters.clear() == FilterState()
    assert not filters.has_active(filters.clear())


def test_toggle_status_adds_and_removes():
    state = filters.toggle_status(FilterState(), 2)
    assert state.status == frozenset({2})

    state = filters.toggle_status(state, 2)
    assert state.status == frozenset()


def test_toggle_priority_accepts_strings():
    state = filters.toggle_priority(FilterState(), "high")
    assert state.priority == frozenset({Priority.HIGH})


def test_toggle_assignee():
    state = filters.toggle_assignee(FilterState(), UNASSIGNED)
    assert state.assignee == frozenset({UNASSIGNED})


def test_toggle_tri_states():
    state = filters.toggle_has_labels(FilterState())
    assert state.has_labels is True
    assert filters.toggle_has_labels(state).has_labels is None

    state = filters.toggle_overdue(FilterState(is_overdue=False))
    assert state.is_overdue is True
    assert filters.toggle_overdue(state).is_overdue is None


def test_toggles_do_not_mutate():
    original = FilterState()
    filters.toggle_status(original, 1)
    assert original == FilterState()


# --- sort_tasks ---

def test_sort_by_order():
    tasks = [make_task(1, order_index=3.0), make_task(2, order_index=1.0), make_task(3, order_index=2.0)]
    assert ids(filters.sort_tasks(tasks, SortOption.ORDER)) == [2, 3, 1]


def test_sort_by_priority_urgent_first_none_last(tasks):
    assert ids(filters.sort_tasks(tasks, SortOption.PRIORITY)) == [5, 1, 3, 2, 4]


def test_sort_by_due_date_earliest_first_none_last(tasks):
    assert ids(filters.sort_tasks(tasks, "due_date")) == [2, 4, 5, 1, 3]
