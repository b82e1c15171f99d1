"""
FILE: statusboard/core/service.py
PURPOSE: Business logic layer for boards, statuses and tasks
EXPORTS:
  - get_config() -> Config / set_config(config) -> None
  - create_board(name) -> Board
  - list_boards() -> List[Board]
  - get_board(board_id) -> Board
  - find_board_by_name_or_raise(name) -> Board
  - delete_board(board_id) -> None
  - list_statuses(board_id) -> List[BoardStatus]
  - find_status_by_name_or_raise(board_id, name) -> BoardStatus
  - add_status(board_id, name, color) -> BoardStatus
  - rename_status(status_id, new_name) -> BoardStatus
  - recolor_status(status_id, color) -> BoardStatus
  - set_default_status(status_id) -> List[BoardStatus]
  - set_done_status(status_id) -> List[BoardStatus]
  - delete_status(status_id) -> None
  - move_status(status_id, direction) -> List[BoardStatus]
  - move_status_to(status_id, index) -> List[BoardStatus]
  - reorder_statuses(board_id, ordered_ids) -> List[BoardStatus]
  - create_task(board_id, title, ...) -> Task
  - get_task(task_id) -> Task
  - update_task(task_id, ...) -> Task
  - delete_task(task_id) -> None
  - move_task(task_id, direction) -> List[Task]
  - move_task_to(task_id, status_id, index) -> List[Task]
  - reorder_tasks(status_id, ordered_ids) -> List[Task]
  - list_tasks(board_id, filters, now, sort_by) -> List[Task]
  - board_columns(board_id, filters, now, sort_by) -> List[Tuple[BoardStatus, List[Task]]]
DEPENDENCIES:
  - statusboard.core.repository (storage)
  - statusboard.core.guard, reorder, sequencer, filters, pending (pure core)
  - statusboard.core.config (Config)
  - loguru (logging)
NOTES:
  - All functions validate input and raise descriptive errors
  - No direct database access (use repository layer)
  - Returns domain objects, never dicts or raw SQL results
  - Position writes go through PendingChange: confirmed after the
    repository commit, reverted if it fails
"""

import sqlite3
from dataclasses import replace
from datetime import date, datetime
from typing import Any, Callable, Iterable, List, Optional, Sequence, Tuple, Union

from loguru import logger

from . import filters as filtering
from . import guard, reorder, repository, sequencer
from .config import Config
from .exceptions import (
    BoardNotFoundError,
    InvalidInputError,
    StatusNotFoundError,
    TaskNotFoundError,
)
from .models import Board, BoardStatus, Color, FilterState, Priority, Task
from .pending import PendingChange
from .reorder import Direction, Reordering
from .filters import SortOption


_config: Optional[Config] = None

# Marks keyword arguments the caller didn't pass (None clears a field)
_UNCHANGED: Any = object()


def get_config() -> Config:
    """Active configuration (loaded from YAML on first use)."""
    global _config
    if _config is None:
        _config = Config.load()
    return _config


def set_config(config: Optional[Config]) -> None:
    """Replace the active configuration (None reloads it lazily)."""
    global _config
    _config = config


def _commit(
    items: Sequence[Any],
    reordering: Reordering,
    write: Callable[[Sequence[sequencer.PositionUpdate]], None],
    description: str,
) -> list:
    """Apply a reordering optimistically, then persist it."""
    change = PendingChange.for_reordering(items, reordering, description=description)
    if not reordering.changed:
        return change.confirm()

    if reordering.renormalized:
        logger.info("Renormalized {} position(s) for {}", len(reordering.updates), description)

    try:
        write(reordering.updates)
    except sqlite3.Error:
        change.revert()
        logger.warning("Reverted {}: storage rejected the new positions", description)
        raise

    logger.debug("Committed {} ({} update(s))", description, len(reordering.updates))
    return change.confirm()


# --- Board Operations ---


def create_board(name: str) -> Board:
    """
    Create a board with the configured starting statuses.

    Args:
        name: Board name (required, unique, case-insensitive)

    Returns:
        Newly created Board object

    Raises:
        InvalidInputError: If name is empty or already used
        NameCollisionError: If the configured status names repeat

    Notes:
        - The first configured status becomes the default status
        - The status named like config.done_status_name is the terminal one
    """
    name = name.strip()
    if not name:
        raise InvalidInputError("Board name cannot be empty")
    if repository.get_board_by_name(name):
        raise InvalidInputError(f"Board '{name}' already exists")

    config = get_config()
    if not config.default_statuses:
        raise InvalidInputError("Config default_statuses must name at least one status")

    # Check every configured name before anything is written
    statuses: List[BoardStatus] = []
    palette = list(Color)
    for i, status_name in enumerate(config.default_statuses):
        guard.validate_create(statuses, status_name).raise_for_reason()
        status_name = status_name.strip()
        statuses.append(
            BoardStatus(
                id=None,
                board_id=None,
                name=status_name,
                color=palette[i % len(palette)],
                order_index=guard.next_order_index(statuses, epsilon=config.precision_epsilon),
                is_default=(i == 0),
                is_done=(status_name == config.done_status_name),
            )
        )
    guard.validate_defaults(statuses).raise_for_reason()

    board = repository.create_board(name, statuses)
    logger.info("Created board {} '{}' with {} status(es)", board.id, board.name, len(statuses))
    return board


def list_boards() -> List[Board]:
    """List all boards."""
    return repository.list_boards()


def get_board(board_id: int) -> Board:
    """
    Fetch a board.

    Raises:
        BoardNotFoundError: If board_id doesn't exist
    """
    board = repository.get_board(board_id)
    if not board:
        raise BoardNotFoundError(board_id)
    return board


def find_board_by_name_or_raise(name: str) -> Board:
    """
    Find board by name (case-insensitive) or raise a helpful error.

    Raises:
        InvalidInputError: If no board matches, listing the available boards
    """
    board = repository.get_board_by_name(name.strip())
    if not board:
        available = ", ".join(b.name for b in repository.list_boards()) or "none"
        raise InvalidInputError(f"Board '{name}' not found. Available boards: {available}")
    return board


def delete_board(board_id: int) -> None:
    """
    Delete a board with all of its statuses and tasks.

    Raises:
        BoardNotFoundError: If board_id doesn't exist
    """
    repository.delete_board(board_id)
    logger.info("Deleted board {}", board_id)


# --- Status Operations ---


def list_statuses(board_id: int) -> List[BoardStatus]:
    """
    List a board's statuses in display order.

    Raises:
        BoardNotFoundError: If board_id doesn't exist
    """
    get_board(board_id)
    return repository.list_statuses(board_id)


def _get_status(status_id: int) -> BoardStatus:
    status = repository.get_status(status_id)
    if not status:
        raise StatusNotFoundError(status_id)
    return status


def find_status_by_name_or_raise(board_id: int, name: str) -> BoardStatus:
    """
    Find a status on a board by name.

    Exact (trimmed) match first, then a unique case-insensitive match.

    Raises:
        InvalidInputError: If nothing (or more than one status) matches
    """
    statuses = list_statuses(board_id)
    wanted = name.strip()

    for status in statuses:
        if status.name == wanted:
            return status

    loose = [s for s in statuses if s.name.lower() == wanted.lower()]
    if len(loose) == 1:
        return loose[0]

    available = ", ".join(s.name for s in statuses) or "none"
    raise InvalidInputError(f"Status '{name}' not found. Available statuses: {available}")


def add_status(board_id: int, name: str, color: Union[Color, str] = Color.GRAY) -> BoardStatus:
    """
    Append a new status to a board.

    Args:
        board_id: Board to add the status to
        name: Status name (trimmed, unique on the board, case-sensitive)
        color: One of the palette colors

    Returns:
        Newly created BoardStatus, positioned after all existing ones

    Raises:
        BoardNotFoundError: If board_id doesn't exist
        InvalidInputError: If name is empty or color unknown
        NameCollisionError: If the board already has a status with that name
    """
    color = color if isinstance(color, Color) else Color.parse(color)
    statuses = list_statuses(board_id)

    guard.validate_create(statuses, name).raise_for_reason()

    status = repository.create_status(
        board_id=board_id,
        name=name.strip(),
        color=color.value,
        order_index=guard.next_order_index(statuses, epsilon=get_config().precision_epsilon),
    )
    logger.info("Added status {} '{}' to board {}", status.id, status.name, board_id)
    return status


def rename_status(status_id: int, new_name: str) -> BoardStatus:
    """
    Rename a status (the default status may be renamed too).

    Raises:
        StatusNotFoundError: If status_id doesn't exist
        InvalidInputError: If new_name is empty
        NameCollisionError: If another status on the board has that name
    """
    status = _get_status(status_id)
    statuses = repository.list_statuses(status.board_id)

    guard.validate_rename(statuses, status_id, new_name).raise_for_reason()

    status.name = new_name.strip()
    repository.update_status(status)
    return _get_status(status_id)


def recolor_status(status_id: int, color: Union[Color, str]) -> BoardStatus:
    """
    Change a status's color.

    Raises:
        StatusNotFoundError: If status_id doesn't exist
        InvalidInputError: If color isn't in the palette
    """
    status = _get_status(status_id)
    status.color = color if isinstance(color, Color) else Color.parse(color)
    repository.update_status(status)
    return _get_status(status_id)


def set_default_status(status_id: int) -> List[BoardStatus]:
    """
    Make a status the board's default (the previous default loses the flag).

    Returns:
        The board's statuses after the change
    """
    status = _get_status(status_id)
    repository.set_default_status(status.board_id, status_id)

    statuses = repository.list_statuses(status.board_id)
    guard.validate_defaults(statuses).raise_for_reason()
    return statuses


def set_done_status(status_id: int) -> List[BoardStatus]:
    """
    Mark a status as the board's terminal ("done") status.

    Tasks in it are never reported as overdue.
    """
    status = _get_status(status_id)
    repository.set_done_status(status.board_id, status_id)
    return repository.list_statuses(status.board_id)


def delete_status(status_id: int) -> None:
    """
    Delete a status.

    Raises:
        StatusNotFoundError: If status_id doesn't exist
        DefaultStatusProtectedError: If it's the board's default status
        StatusInUseError: If tasks still reference it
    """
    status = _get_status(status_id)
    task_count = repository.count_tasks_for_status(status_id)

    guard.can_delete(status, task_count).raise_for_reason()

    repository.delete_status(status_id)
    logger.info("Deleted status {} '{}'", status_id, status.name)


def move_status(status_id: int, direction: Union[Direction, str]) -> List[BoardStatus]:
    """
    Move a status one step left/up or right/down.

    Returns:
        The board's statuses in their new order (unchanged at a boundary)
    """
    status = _get_status(status_id)
    statuses = repository.list_statuses(status.board_id)
    config = get_config()

    reordering = reorder.move_one(
        statuses,
        status_id,
        Direction(direction),
        epsilon=config.precision_epsilon,
        spacing=config.renormalize_spacing,
    )
    return _commit(
        statuses,
        reordering,
        repository.update_status_positions,
        f"move status {status_id} {Direction(direction).value}",
    )


def move_status_to(status_id: int, index: int) -> List[BoardStatus]:
    """Drop a status at a 0-based index (clamped)."""
    status = _get_status(status_id)
    statuses = repository.list_statuses(status.board_id)
    config = get_config()

    reordering = reorder.move_to(
        statuses,
        status_id,
        index,
        epsilon=config.precision_epsilon,
        spacing=config.renormalize_spacing,
    )
    return _commit(
        statuses,
        reordering,
        repository.update_status_positions,
        f"move status {status_id} to {index}",
    )


def reorder_statuses(board_id: int, ordered_ids: Sequence[int]) -> List[BoardStatus]:
    """
    Apply a complete new status order.

    Raises:
        BoardNotFoundError: If board_id doesn't exist
        InvalidOrderError: If ordered_ids isn't exactly the board's status ids
    """
    statuses = list_statuses(board_id)
    config = get_config()

    reordering = reorder.apply_full_order(
        statuses,
        list(ordered_ids),
        epsilon=config.precision_epsilon,
        spacing=config.renormalize_spacing,
    )
    return _commit(
        statuses,
        reordering,
        repository.update_status_positions,
        f"reorder statuses of board {board_id}",
    )


# --- Task Operations ---


def _clean_labels(labels: Optional[Iterable[str]]) -> Tuple[str, ...]:
    seen = []
    for label in labels or ():
        label = label.strip()
        if label and label not in seen:
            seen.append(label)
    return tuple(seen)


def _parse_due(due_date: Union[date, str, None]) -> Optional[date]:
    if due_date is None or isinstance(due_date, date):
        return due_date
    try:
        return date.fromisoformat(due_date.strip())
    except ValueError:
        raise InvalidInputError(f"Invalid due date '{due_date}'. Use YYYY-MM-DD")


def _parse_priority(priority: Union[Priority, str, None]) -> Optional[Priority]:
    if priority is None or isinstance(priority, Priority):
        return priority
    return Priority.parse(priority)


def _status_on_board(board_id: int, status_id: Optional[int]) -> BoardStatus:
    if status_id is None:
        statuses = list_statuses(board_id)
        guard.validate_defaults(statuses).raise_for_reason()
        return next(s for s in statuses if s.is_default)

    status = _get_status(status_id)
    if status.board_id != board_id:
        raise InvalidInputError(f"Status {status_id} doesn't belong to board {board_id}")
    return status


def create_task(
    board_id: int,
    title: str,
    status_id: Optional[int] = None,
    priority: Union[Priority, str, None] = None,
    assignee_id: Optional[str] = None,
    labels: Optional[Iterable[str]] = None,
    due_date: Union[date, str, None] = None,
    description: Optional[str] = None,
) -> Task:
    """
    Create a new task at the end of its status column.

    Args:
        board_id: Board the task belongs to
        title: Task title (required, must not be empty)
        status_id: Column to place task in (defaults to the board's default status)
        priority: urgent, high, medium, low or None
        assignee_id: User id or None for unassigned
        labels: Label names (trimmed, duplicates dropped)
        due_date: date or YYYY-MM-DD string
        description: Optional task description

    Returns:
        Newly created Task object

    Raises:
        BoardNotFoundError: If board_id doesn't exist
        StatusNotFoundError: If status_id doesn't exist
        InvalidInputError: If title, priority or due date is invalid
    """
    title = title.strip()
    if not title:
        raise InvalidInputError("Task title cannot be empty")

    get_board(board_id)
    status = _status_on_board(board_id, status_id)
    parsed_due = _parse_due(due_date)
    column = repository.list_tasks_by_status(status.id)

    task = repository.create_task(
        board_id=board_id,
        status_id=status.id,
        title=title,
        order_index=sequencer.append_key(
            (t.order_index for t in column), epsilon=get_config().precision_epsilon
        ),
        priority=_parse_priority(priority).value if priority else None,
        assignee_id=(assignee_id or "").strip() or None,
        labels=_clean_labels(labels),
        due_date=parsed_due.isoformat() if parsed_due else None,
        description=(description or "").strip() or None,
    )
    logger.debug("Created task {} in status {}", task.id, status.id)
    return task


def get_task(task_id: int) -> Task:
    """
    Fetch a task.

    Raises:
        TaskNotFoundError: If task_id doesn't exist
    """
    task = repository.get_task(task_id)
    if not task:
        raise TaskNotFoundError(task_id)
    return task


def update_task(
    task_id: int,
    title: Any = _UNCHANGED,
    description: Any = _UNCHANGED,
    priority: Any = _UNCHANGED,
    assignee_id: Any = _UNCHANGED,
    labels: Any = _UNCHANGED,
    due_date: Any = _UNCHANGED,
) -> Task:
    """
    Update task attributes. Fields not passed stay as they are; None clears.

    Status and position change through move_task / move_task_to.

    Raises:
        TaskNotFoundError: If task_id doesn't exist
        InvalidInputError: If a new value is invalid
    """
    task = get_task(task_id)

    if title is not _UNCHANGED:
        title = (title or "").strip()
        if not title:
            raise InvalidInputError("Task title cannot be empty")
        task.title = title
    if description is not _UNCHANGED:
        task.description = (description or "").strip() or None
    if priority is not _UNCHANGED:
        task.priority = _parse_priority(priority)
    if assignee_id is not _UNCHANGED:
        task.assignee_id = (assignee_id or "").strip() or None
    if labels is not _UNCHANGED:
        task.labels = _clean_labels(labels)
    if due_date is not _UNCHANGED:
        task.due_date = _parse_due(due_date)

    repository.update_task(task)
    return get_task(task_id)


def delete_task(task_id: int) -> None:
    """
    Delete a task.

    Raises:
        TaskNotFoundError: If task_id doesn't exist
    """
    repository.delete_task(task_id)
    logger.info("Deleted task {}", task_id)


def move_task(task_id: int, direction: Union[Direction, str]) -> List[Task]:
    """
    Move a task one step up or down inside its column.

    Returns:
        The column's tasks in their new order
    """
    task = get_task(task_id)
    column = repository.list_tasks_by_status(task.status_id)
    config = get_config()

    reordering = reorder.move_one(
        column,
        task_id,
        Direction(direction),
        epsilon=config.precision_epsilon,
        spacing=config.renormalize_spacing,
    )
    return _commit(
        column,
        reordering,
        repository.update_task_positions,
        f"move task {task_id} {Direction(direction).value}",
    )


def move_task_to(task_id: int, status_id: int, index: Optional[int] = None) -> List[Task]:
    """
    Drop a task into a column at a 0-based index (None = end).

    Works inside one column and across columns of the same board.

    Returns:
        The target column's tasks in their new order

    Raises:
        TaskNotFoundError: If task_id doesn't exist
        StatusNotFoundError: If status_id doesn't exist
        InvalidInputError: If the status is on another board
    """
    task = get_task(task_id)
    status = _status_on_board(task.board_id, status_id)
    column = repository.list_tasks_by_status(status.id)
    config = get_config()
    options = dict(epsilon=config.precision_epsilon, spacing=config.renormalize_spacing)

    if task.status_id == status.id:
        target = len(column) - 1 if index is None else index
        reordering = reorder.move_to(column, task_id, target, **options)
        return _commit(
            column,
            reordering,
            repository.update_task_positions,
            f"move task {task_id} to {target}",
        )

    reordering = reorder.insert_at(column, task, index, **options)
    arriving = column + [replace(task, status_id=status.id)]
    change = PendingChange.for_reordering(
        arriving, reordering, description=f"move task {task_id} to status {status.id}"
    )
    new_key = reordering.positions[task_id]
    updates = [u for u in reordering.updates if u.id != task_id]
    updates.append(sequencer.PositionUpdate(task_id, new_key))

    try:
        repository.relocate_task(task_id, status.id, updates)
    except sqlite3.Error:
        change.revert()
        logger.warning("Reverted {}", change.description)
        raise

    return change.confirm()


def reorder_tasks(status_id: int, ordered_ids: Sequence[int]) -> List[Task]:
    """
    Apply a complete new order to one column.

    Raises:
        StatusNotFoundError: If status_id doesn't exist
        InvalidOrderError: If ordered_ids isn't exactly the column's task ids
    """
    _get_status(status_id)
    column = repository.list_tasks_by_status(status_id)
    config = get_config()

    reordering = reorder.apply_full_order(
        column,
        list(ordered_ids),
        epsilon=config.precision_epsilon,
        spacing=config.renormalize_spacing,
    )
    return _commit(
        column,
        reordering,
        repository.update_task_positions,
        f"reorder tasks of status {status_id}",
    )


def list_tasks(
    board_id: int,
    filters: Optional[FilterState] = None,
    now: Union[date, datetime, None] = None,
    sort_by: Union[SortOption, str] = SortOption.ORDER,
) -> List[Task]:
    """
    List a board's tasks, filtered and sorted.

    Args:
        board_id: Board to list
        filters: FilterState (None = no filtering)
        now: Evaluation time for the overdue filter (defaults to now)
        sort_by: SortOption; ORDER keeps column grouping

    Returns:
        Matching tasks. With SortOption.ORDER they are grouped by column
        in column order; other sorts are stable over that grouping.
    """
    statuses = list_statuses(board_id)
    tasks = repository.list_tasks(board_id)

    if filters is not None:
        tasks = filtering.apply(
            tasks,
            filters,
            now or datetime.now(),
            filtering.done_status_ids(statuses),
        )

    if SortOption(sort_by) is SortOption.ORDER:
        return tasks
    return filtering.sort_tasks(tasks, sort_by)


def board_columns(
    board_id: int,
    filters: Optional[FilterState] = None,
    now: Union[date, datetime, None] = None,
    sort_by: Union[SortOption, str] = SortOption.ORDER,
) -> List[Tuple[BoardStatus, List[Task]]]:
    """
    Board view: every status with its (filtered, sorted) tasks.

    Columns hidden by a status filter are still returned, empty.
    """
    statuses = list_statuses(board_id)
    tasks = list_tasks(board_id, filters=filters, now=now)

    columns = []
    for status in statuses:
        column = [t for t in tasks if t.status_id == status.id]
        columns.append((status, filtering.sort_tasks(column, sort_by)))
    return columns
