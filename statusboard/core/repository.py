"""
FILE: statusboard/core/repository.py
PURPOSE: Database operations and SQLite connection management
EXPORTS:
  - get_connection() -> Connection
  - init_database(conn) -> None
  - create_board(name, statuses) -> Board
  - get_board(board_id) -> Board | None
  - get_board_by_name(name) -> Board | None
  - list_boards() -> List[Board]
  - delete_board(board_id) -> None
  - create_status(board_id, name, color, order_index, is_default, is_done) -> BoardStatus
  - get_status(status_id) -> BoardStatus | None
  - list_statuses(board_id) -> List[BoardStatus]
  - update_status(status) -> None
  - set_default_status(board_id, status_id) -> None
  - set_done_status(board_id, status_id) -> None
  - delete_status(status_id) -> None
  - count_tasks_for_status(status_id) -> int
  - update_status_positions(updates) -> None
  - create_task(...) -> Task
  - get_task(task_id) -> Task | None
  - list_tasks(board_id) -> List[Task]
  - list_tasks_by_status(status_id) -> List[Task]
  - update_task(task) -> None
  - update_task_positions(updates) -> None
  - relocate_task(task_id, status_id, updates) -> None
  - delete_task(task_id) -> None
DEPENDENCIES:
  - sqlite3 (stdlib)
  - loguru (debug logging)
  - statusboard.core.models (Board, BoardStatus, Task)
  - statusboard.core.exceptions (BoardNotFoundError, StatusNotFoundError, TaskNotFoundError)
NOTES:
  - Database stored at $STATUSBOARD_HOME/statusboard.db (default ~/.statusboard)
  - Auto-creates directory and initializes schema on first run
  - Returns domain objects (Task, etc.), never raw rows
  - Statuses and tasks come back ordered by order_index, then id
  - No ordering logic here: keys are computed by reorder.py / guard.py
"""

import json
import sqlite3
from datetime import datetime
from typing import Iterable, List, Optional

from loguru import logger

from .config import home_dir
from .constants import DB_FILENAME
from .models import Board, BoardStatus, Task
from .exceptions import BoardNotFoundError, StatusNotFoundError, TaskNotFoundError
from .sequencer import PositionUpdate


# Database file location
DB_DIR = home_dir()
DB_PATH = DB_DIR / DB_FILENAME

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS boards (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL UNIQUE,
    created_at TEXT
);

CREATE TABLE IF NOT EXISTS board_statuses (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    board_id INTEGER NOT NULL REFERENCES boards(id) ON DELETE CASCADE,
    name TEXT NOT NULL,
    color TEXT NOT NULL DEFAULT 'gray',
    order_index REAL NOT NULL DEFAULT 0,
    is_default INTEGER NOT NULL DEFAULT 0,
    is_done INTEGER NOT NULL DEFAULT 0,
    created_at TEXT,
    updated_at TEXT,
    UNIQUE (board_id, name)
);

CREATE TABLE IF NOT EXISTS tasks (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    board_id INTEGER NOT NULL REFERENCES boards(id) ON DELETE CASCADE,
    status_id INTEGER NOT NULL REFERENCES board_statuses(id),
    title TEXT NOT NULL,
    description TEXT,
    priority TEXT CHECK (priority IN ('urgent', 'high', 'medium', 'low')),
    assignee_id TEXT,
    labels TEXT,
    due_date TEXT,
    order_index REAL NOT NULL DEFAULT 0,
    created_at TEXT,
    updated_at TEXT
);

CREATE INDEX IF NOT EXISTS idx_tasks_status ON tasks (status_id, order_index);
"""


def get_connection() -> sqlite3.Connection:
    """
    Get SQLite connection to the statusboard database.

    Creates the data directory if it doesn't exist.
    Enables row_factory for dict-like row access.
    Enables foreign key constraints.
    Initializes database schema on first connection.
    """
    DB_DIR.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(DB_PATH)
    conn.row_factory = sqlite3.Row

    # Required for ON DELETE CASCADE and the status reference on tasks
    conn.execute("PRAGMA foreign_keys = ON")

    init_database(conn)

    return conn


def init_database(conn: sqlite3.Connection) -> None:
    """
    Initialize database schema if tables don't exist.

    Safe to call multiple times (uses CREATE TABLE IF NOT EXISTS).
    """
    cursor = conn.execute(
        "SELECT name FROM sqlite_master WHERE type='table' AND name='tasks'"
    )
    if cursor.fetchone() is None:
        logger.debug("Initializing schema at {}", DB_PATH)
        conn.executescript(SCHEMA_SQL)
        conn.commit()


def _now() -> str:
    return datetime.now().isoformat()


# --- Board Operations ---


def create_board(name: str, statuses: Iterable[BoardStatus] = ()) -> Board:
    """
    Create a new board, seeding it with the given statuses.

    Args:
        name: Board name
        statuses: Unsaved statuses (ids and board_id ignored)

    Note:
        Board and statuses are written in one transaction, so a failed
        insert leaves no partial board behind.

    Raises:
        sqlite3.IntegrityError: If board name already exists
    """
    now = _now()
    conn = get_connection()
    with conn:
        cursor = conn.execute(
            "INSERT INTO boards (name, created_at) VALUES (?, ?)",
            (name, now),
        )
        board_id = cursor.lastrowid
        conn.executemany(
            """
            INSERT INTO board_statuses
                (board_id, name, color, order_index, is_default, is_done, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """,
            [
                (board_id, s.name, s.color.value, s.order_index,
                 int(s.is_default), int(s.is_done), now, now)
                for s in statuses
            ],
        )

    board = get_board(board_id)
    if not board:
        raise BoardNotFoundError(board_id)

    return board


def get_board(board_id: int) -> Optional[Board]:
    """Fetch single board by ID, or None."""
    conn = get_connection()
    row = conn.execute("SELECT * FROM boards WHERE id = ?", (board_id,)).fetchone()

    return Board.from_row(row) if row else None


def get_board_by_name(name: str) -> Optional[Board]:
    """Fetch single board by name (case-insensitive), or None."""
    conn = get_connection()
    row = conn.execute(
        "SELECT * FROM boards WHERE name = ? COLLATE NOCASE", (name,)
    ).fetchone()

    return Board.from_row(row) if row else None


def list_boards() -> List[Board]:
    """List all boards, oldest first."""
    conn = get_connection()
    rows = conn.execute("SELECT * FROM boards ORDER BY id").fetchall()

    return [Board.from_row(row) for row in rows]


def delete_board(board_id: int) -> None:
    """
    Delete board by ID.

    Statuses and tasks go with it (ON DELETE CASCADE).

    Raises:
        BoardNotFoundError: If board doesn't exist
    """
    if not get_board(board_id):
        raise BoardNotFoundError(board_id)

    conn = get_connection()
    # Tasks reference statuses without cascade, so drop them first
    conn.execute("DELETE FROM tasks WHERE board_id = ?", (board_id,))
    conn.execute("DELETE FROM boards WHERE id = ?", (board_id,))
    conn.commit()


# --- Status Operations ---


def create_status(
    board_id: int,
    name: str,
    color: str,
    order_index: float,
    is_default: bool = False,
    is_done: bool = False,
) -> BoardStatus:
    """
    Create a new status on a board.

    Raises:
        sqlite3.IntegrityError: If the name is taken on this board
    """
    conn = get_connection()
    now = _now()

    cursor = conn.execute(
        """
        INSERT INTO board_statuses
            (board_id, name, color, order_index, is_default, is_done, created_at, updated_at)
        VALUES (?, ?, ?, ?, ?, ?, ?, ?)
        """,
        (board_id, name, color, order_index, int(is_default), int(is_done), now, now),
    )
    conn.commit()

    status = get_status(cursor.lastrowid)
    if not status:
        raise StatusNotFoundError(cursor.lastrowid)

    return status


def get_status(status_id: int) -> Optional[BoardStatus]:
    """Fetch single status by ID, or None."""
    conn = get_connection()
    row = conn.execute(
        "SELECT * FROM board_statuses WHERE id = ?", (status_id,)
    ).fetchone()

    return BoardStatus.from_row(row) if row else None


def list_statuses(board_id: int) -> List[BoardStatus]:
    """List a board's statuses ordered by position (id breaks ties)."""
    conn = get_connection()
    rows = conn.execute(
        "SELECT * FROM board_statuses WHERE board_id = ? ORDER BY order_index, id",
        (board_id,),
    ).fetchall()

    return [BoardStatus.from_row(row) for row in rows]


def update_status(status: BoardStatus) -> None:
    """
    Update name, color and position of an existing status.

    Note:
        Automatically updates updated_at timestamp.
        Default/done flags change through set_default_status/set_done_status.
    """
    conn = get_connection()
    conn.execute(
        """
        UPDATE board_statuses
        SET name = ?, color = ?, order_index = ?, updated_at = ?
        WHERE id = ?
        """,
        (status.name, status.color.value, status.order_index, _now(), status.id),
    )
    conn.commit()


def _set_flag(column: str, board_id: int, status_id: int) -> None:
    conn = get_connection()
    now = _now()
    with conn:
        conn.execute(
            f"UPDATE board_statuses SET {column} = 0, updated_at = ? "
            f"WHERE board_id = ? AND {column} = 1",
            (now, board_id),
        )
        conn.execute(
            f"UPDATE board_statuses SET {column} = 1, updated_at = ? WHERE id = ?",
            (now, status_id),
        )


def set_default_status(board_id: int, status_id: int) -> None:
    """Make status_id the board's only default status (one transaction)."""
    _set_flag("is_default", board_id, status_id)


def set_done_status(board_id: int, status_id: int) -> None:
    """Make status_id the board's only terminal status (one transaction)."""
    _set_flag("is_done", board_id, status_id)


def delete_status(status_id: int) -> None:
    """
    Delete status by ID.

    Raises:
        StatusNotFoundError: If status doesn't exist
        sqlite3.IntegrityError: If tasks still reference it

    Note:
        Deletion rules (default status, tasks present) are checked by
        guard.can_delete in the service layer.
    """
    if not get_status(status_id):
        raise StatusNotFoundError(status_id)

    conn = get_connection()
    conn.execute("DELETE FROM board_statuses WHERE id = ?", (status_id,))
    conn.commit()


def count_tasks_for_status(status_id: int) -> int:
    """Number of tasks currently in a status."""
    conn = get_connection()
    row = conn.execute(
        "SELECT COUNT(*) FROM tasks WHERE status_id = ?", (status_id,)
    ).fetchone()

    return row[0]


def update_status_positions(updates: Iterable[PositionUpdate]) -> None:
    """Write a batch of status keys in one transaction."""
    _update_positions("board_statuses", updates)


# --- Task Operations ---


def create_task(
    board_id: int,
    status_id: int,
    title: str,
    order_index: float,
    priority: Optional[str] = None,
    assignee_id: Optional[str] = None,
    labels: Iterable[str] = (),
    due_date: Optional[str] = None,
    description: Optional[str] = None,
) -> Task:
    """
    Create a new task.

    Note:
        Sets created_at and updated_at automatically.
    """
    conn = get_connection()
    now = _now()

    cursor = conn.execute(
        """
        INSERT INTO tasks
            (board_id, status_id, title, description, priority, assignee_id,
             labels, due_date, order_index, created_at, updated_at)
        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """,
        (
            board_id,
            status_id,
            title,
            description,
            priority,
            assignee_id,
            json.dumps(list(labels)),
            due_date,
            order_index,
            now,
            now,
        ),
    )
    conn.commit()

    task = get_task(cursor.lastrowid)
    if not task:
        raise TaskNotFoundError(cursor.lastrowid)

    return task


def get_task(task_id: int) -> Optional[Task]:
    """Fetch single task by ID, or None."""
    conn = get_connection()
    row = conn.execute("SELECT * FROM tasks WHERE id = ?", (task_id,)).fetchone()

    return Task.from_row(row) if row else None


def list_tasks(board_id: int) -> List[Task]:
    """
    List a board's tasks.

    Returns:
        Tasks grouped by their status's position, then by their own
    """
    conn = get_connection()
    rows = conn.execute(
        """
        SELECT t.* FROM tasks t
        JOIN board_statuses s ON s.id = t.status_id
        WHERE t.board_id = ?
        ORDER BY s.order_index, s.id, t.order_index, t.id
        """,
        (board_id,),
    ).fetchall()

    return [Task.from_row(row) for row in rows]


def list_tasks_by_status(status_id: int) -> List[Task]:
    """List the tasks of one status column, ordered by position."""
    conn = get_connection()
    rows = conn.execute(
        "SELECT * FROM tasks WHERE status_id = ? ORDER BY order_index, id",
        (status_id,),
    ).fetchall()

    return [Task.from_row(row) for row in rows]


def update_task(task: Task) -> None:
    """
    Update existing task.

    Note:
        Automatically updates updated_at timestamp.
        Updates all fields (title, status, priority, labels, position, etc.)
    """
    conn = get_connection()
    conn.execute(
        """
        UPDATE tasks
        SET title = ?,
            description = ?,
            status_id = ?,
            priority = ?,
            assignee_id = ?,
            labels = ?,
            due_date = ?,
            order_index = ?,
            updated_at = ?
        WHERE id = ?
        """,
        (
            task.title,
            task.description,
            task.status_id,
            task.priority.value if task.priority else None,
            task.assignee_id,
            json.dumps(list(task.labels)),
            task.due_date.isoformat() if task.due_date else None,
            task.order_index,
            _now(),
            task.id,
        ),
    )
    conn.commit()


def update_task_positions(updates: Iterable[PositionUpdate]) -> None:
    """Write a batch of task keys in one transaction."""
    _update_positions("tasks", updates)


def relocate_task(task_id: int, status_id: int, updates: Iterable[PositionUpdate]) -> None:
    """
    Move a task into another status and write the column's new keys.

    Args:
        task_id: Task changing columns
        status_id: Target status
        updates: Keys for the target column, including the moved task

    Note:
        One transaction, so the task never sits in the new column
        without its key.
    """
    now = _now()
    conn = get_connection()
    with conn:
        conn.execute(
            "UPDATE tasks SET status_id = ?, updated_at = ? WHERE id = ?",
            (status_id, now, task_id),
        )
        conn.executemany(
            "UPDATE tasks SET order_index = ?, updated_at = ? WHERE id = ?",
            [(update.order_index, now, update.id) for update in updates],
        )
    logger.debug("Relocated task {} to status {}", task_id, status_id)


def delete_task(task_id: int) -> None:
    """
    Delete task by ID.

    Raises:
        TaskNotFoundError: If task doesn't exist
    """
    if not get_task(task_id):
        raise TaskNotFoundError(task_id)

    conn = get_connection()
    conn.execute("DELETE FROM tasks WHERE id = ?", (task_id,))
    conn.commit()


def _update_positions(table: str, updates: Iterable[PositionUpdate]) -> None:
    rows = [(update.order_index, _now(), update.id) for update in updates]
    if not rows:
        return

    conn = get_connection()
    with conn:
        conn.executemany(
            f"UPDATE {table} SET order_index = ?, updated_at = ? WHERE id = ?",
            rows,
        )
    logger.debug("Wrote {} position(s) to {}", len(rows), table)
