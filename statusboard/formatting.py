"""
FILE: statusboard/formatting.py
PURPOSE: Shared formatting utilities for CLI output
EXPORTS:
  - COLOR_STYLES / PRIORITY_STYLES: rich styles for palette and priorities
  - StatusFormatter: Tables and JSON for statuses
  - TaskFormatter: Tables and JSON for tasks
  - BoardFormatter: Kanban view (one table column per status)
  - parse_id_list: Parse comma-separated IDs
DEPENDENCIES:
  - rich (for table formatting)
  - json (for JSON serialization)
  - statusboard.core.models (Board, BoardStatus, Task, Color, Priority)
  - statusboard.core.filters (is_overdue)
NOTES:
  - Centralized formatting logic for consistency
  - Read-only: never calls the service layer
"""

import json
from datetime import date, datetime
from typing import Any, Dict, FrozenSet, List, Optional, Sequence, Tuple, Union

from rich.table import Table
from rich.text import Text

from .core.filters import is_overdue
from .core.models import Board, BoardStatus, Color, Priority, Task


COLOR_STYLES = {
    Color.GRAY: "grey50",
    Color.BLUE: "blue",
    Color.GREEN: "green",
    Color.YELLOW: "yellow",
    Color.ORANGE: "orange1",
    Color.RED: "red",
    Color.PURPLE: "purple",
    Color.PINK: "pink1",
}

PRIORITY_STYLES = {
    Priority.URGENT: "bold red",
    Priority.HIGH: "orange1",
    Priority.MEDIUM: "yellow",
    Priority.LOW: "dim",
}


def status_label(status: BoardStatus) -> Text:
    """Colored status name with default/done markers."""
    text = Text("● ", style=COLOR_STYLES.get(status.color, "white"))
    text.append(status.name, style="bold")
    if status.is_default:
        text.append(" (default)", style="dim")
    if status.is_done:
        text.append(" ✓", style="green")
    return text


def priority_label(priority: Optional[Priority]) -> str:
    if not priority:
        return "-"
    style = PRIORITY_STYLES[priority]
    return f"[{style}]{priority.value}[/{style}]"


def due_label(task: Task, now: Union[date, datetime], done_ids: FrozenSet[Any]) -> str:
    if not task.due_date:
        return "-"
    if is_overdue(task, now, done_ids):
        return f"[red]{task.due_date.isoformat()} (overdue)[/red]"
    return task.due_date.isoformat()


class StatusFormatter:
    """Status display formatting."""

    @staticmethod
    def create_table(statuses: List[BoardStatus], title: str = "Statuses") -> Table:
        table = Table(title=title, show_header=True, header_style="bold cyan")
        table.add_column("ID", style="cyan", width=6, no_wrap=True)
        table.add_column("Status")
        table.add_column("Color", style="magenta", width=8)
        table.add_column("Position", style="dim", justify="right")

        for status in statuses:
            table.add_row(
                str(status.id),
                status_label(status),
                status.color.value,
                f"{status.order_index:g}",
            )

        return table

    @staticmethod
    def to_json_array(statuses: List[BoardStatus]) -> str:
        return json.dumps([s.to_dict() for s in statuses], indent=2)

    @staticmethod
    def to_raw_lines(statuses: List[BoardStatus]) -> List[str]:
        return [f"{s.id}: {s.name}" for s in statuses]


class TaskFormatter:
    """Centralized task display formatting."""

    @staticmethod
    def create_table(
        tasks: List[Task],
        statuses: Sequence[BoardStatus],
        now: Union[date, datetime],
        title: str = "Tasks",
    ) -> Table:
        """
        Create Rich table for tasks.

        Args:
            tasks: Tasks to display, already filtered and sorted
            statuses: The board's statuses (for names and the done marker)
            now: Reference time for overdue highlighting
            title: Table title

        Returns:
            Rich Table object ready for display
        """
        names = {s.id: s.name for s in statuses}
        done_ids = frozenset(s.id for s in statuses if s.is_done)

        table = Table(title=title, show_header=True, header_style="bold cyan")
        table.add_column("ID", style="cyan", width=6, no_wrap=True)
        table.add_column("Title", style="white")
        table.add_column("Status", style="blue")
        table.add_column("Priority", width=8)
        table.add_column("Assignee", style="yellow")
        table.add_column("Labels", style="magenta")
        table.add_column("Due")

        for task in tasks:
            table.add_row(
                str(task.id),
                task.title,
                names.get(task.status_id, f"[dim]ID:{task.status_id}[/dim]"),
                priority_label(task.priority),
                task.assignee_id or "[dim]unassigned[/dim]",
                ", ".join(task.labels) or "-",
                due_label(task, now, done_ids),
            )

        return table

    @staticmethod
    def to_json_array(tasks: List[Task]) -> str:
        """Convert task list to JSON array string."""
        return json.dumps([t.to_dict() for t in tasks], indent=2)

    @staticmethod
    def to_raw_lines(tasks: List[Task]) -> List[str]:
        return [f"{t.id}: {t.title}" for t in tasks]


class BoardFormatter:
    """Kanban board view."""

    @staticmethod
    def create_table(
        board: Board,
        columns: List[Tuple[BoardStatus, List[Task]]],
        now: Union[date, datetime],
    ) -> Table:
        """One table column per status, one cell per task."""
        done_ids = frozenset(s.id for s, _ in columns if s.is_done)
        table = Table(title=board.name, show_header=True, show_lines=False)

        for status, tasks in columns:
            header = status_label(status)
            header.append(f" ({len(tasks)})", style="dim")
            table.add_column(header, overflow="fold")

        height = max((len(tasks) for _, tasks in columns), default=0)
        for row in range(height):
            cells = []
            for _, tasks in columns:
                if row < len(tasks):
                    cells.append(BoardFormatter.card(tasks[row], now, done_ids))
                else:
                    cells.append("")
            table.add_row(*cells)

        return table

    @staticmethod
    def card(task: Task, now: Union[date, datetime], done_ids: FrozenSet[Any]) -> Text:
        text = Text(f"#{task.id} ", style="cyan")
        text.append(task.title)
        if task.priority:
            text.append(f" [{task.priority.value}]", style=PRIORITY_STYLES[task.priority])
        if is_overdue(task, now, done_ids):
            text.append(" overdue", style="red")
        return text

    @staticmethod
    def to_json(board: Board, columns: List[Tuple[BoardStatus, List[Task]]]) -> str:
        data: Dict[str, Any] = board.to_dict()
        data["columns"] = [
            {"status": status.to_dict(), "tasks": [t.to_dict() for t in tasks]}
            for status, tasks in columns
        ]
        return json.dumps(data, indent=2)


def parse_id_list(ids_str: str) -> List[int]:
    """
    Parse comma-separated IDs.

    Args:
        ids_str: Comma-separated string like "1,2,3" or "5"

    Returns:
        List of integer IDs, in the given order

    Raises:
        ValueError: If any ID is not a valid integer
    """
    ids = []
    for id_str in ids_str.split(","):
        id_str = id_str.strip()
        if id_str:
            ids.append(int(id_str))
    return ids
