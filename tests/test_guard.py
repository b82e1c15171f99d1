"""
Tests for status lifecycle rules (delete, naming, default status).
"""

import pytest

from statusboard.core import guard
from statusboard.core.exceptions import (
    DefaultStatusError,
    DefaultStatusProtectedError,
    InvalidInputError,
    NameCollisionError,
    StatusInUseError,
)
from statusboard.core.models import BoardStatus


@pytest.fixture
def statuses():
    return [
        BoardStatus(id=1, board_id=1, name="To Do", order_index=1.0, is_default=True),
        BoardStatus(id=2, board_id=1, name="In Progress", order_index=2.0),
        BoardStatus(id=3, board_id=1, name="Done", order_index=3.0, is_done=True),
    ]


# --- can_delete ---

def test_cannot_delete_default_status(statuses):
    verdict = guard.can_delete(statuses[0], task_count=0)

    assert not verdict
    assert isinstance(verdict.reason, DefaultStatusProtectedError)


def test_default_protection_wins_over_task_count(statuses):
    verdict = guard.can_delete(statuses[0], task_count=5)
    assert isinstance(verdict.reason, DefaultStatusProtectedError)


def test_cannot_delete_status_in_use(statuses):
    verdict = guard.can_delete(statuses[1], task_count=3)

    assert not verdict.allowed
    assert isinstance(verdict.reason, StatusInUseError)
    assert verdict.reason.task_count == 3


def test_can_delete_empty_status(statuses):
    verdict = guard.can_delete(statuses[1], task_count=0)

    assert verdict
    assert verdict.reason is None


def test_raise_for_reason(statuses):
    with pytest.raises(StatusInUseError):
        guard.can_delete(statuses[2], task_count=1).raise_for_reason()

    guard.can_delete(statuses[2], task_count=0).raise_for_reason()


# --- validate_create / validate_rename ---

def test_create_with_new_name(statuses):
    assert guard.validate_create(statuses, "Review")


def test_create_collision_after_trim(statuses):
    verdict = guard.validate_create(statuses, "  Done ")

    assert not verdict
    assert isinstance(verdict.reason, NameCollisionError)
    assert verdict.reason.name == "Done"


def test_create_names_are_case_sensitive(statuses):
    assert guard.validate_create(statuses, "done")


def test_create_empty_name(statuses):
    verdict = guard.validate_create(statuses, "   ")

    assert not verdict
    assert isinstance(verdict.reason, InvalidInputError)


def test_rename_to_own_name_is_allowed(statuses):
    assert guard.validate_rename(statuses, 2, "In Progress")


def test_rename_to_other_status_name(statuses):
    verdict = guard.validate_rename(statuses, 2, "Done")
    assert isinstance(verdict.reason, NameCollisionError)


def test_rename_default_status_is_allowed(statuses):
    assert guard.validate_rename(statuses, 1, "Backlog")


# --- validate_defaults ---

def test_exactly_one_default(statuses):
    assert guard.validate_defaults(statuses)


def test_no_default(statuses):
    statuses[0].is_default = False

    verdict = guard.validate_defaults(statuses)

    assert isinstance(verdict.reason, DefaultStatusError)
    assert verdict.reason.count == 0


def test_two_defaults(statuses):
    statuses[1].is_default = True

    with pytest.raises(DefaultStatusError):
        guard.validate_defaults(statuses).raise_for_reason()


# --- next_order_index ---

def test_next_order_index_appends(statuses):
    assert guard.next_order_index(statuses) == 4.0


def test_next_order_index_empty_board():
    assert guard.next_order_index([]) == 1.0
