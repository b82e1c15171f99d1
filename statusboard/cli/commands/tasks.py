"""
FILE: statusboard/cli/commands/tasks.py
PURPOSE: Task management commands (add, ls, show, edit, mv, up, down, reorder, rm)
"""

import json
from datetime import datetime
from typing import Any, Dict, List, Optional

import typer
from rich.panel import Panel
from rich.text import Text

from ..main import app, console, emit, error_console, resolve_board
from ...core import service
from ...core.constants import UNASSIGNED
from ...core.exceptions import BoardError, TaskNotFoundError
from ...core.filters import SortOption, done_status_ids, has_active, is_overdue
from ...core.models import FilterState, Priority, Task
from ...core.reorder import Direction
from ...formatting import TaskFormatter, parse_id_list, priority_label

BOARD_OPTION_HELP = "Board name (default: first board)"


def build_filters(
    board_id: int,
    statuses: Optional[List[str]],
    priorities: Optional[List[str]],
    assignees: Optional[List[str]],
    unassigned: bool,
    has_labels: Optional[bool],
    overdue: Optional[bool],
    search: str,
) -> Optional[FilterState]:
    """
    Turn command-line filter options into a FilterState.

    Status names are resolved on the board; --unassigned adds the
    unassigned sentinel to the assignee set.

    Returns:
        FilterState, or None when no option was given
    """
    assignee_set = set(assignees or [])
    if unassigned:
        assignee_set.add(UNASSIGNED)

    filters = FilterState(
        status=frozenset(
            service.find_status_by_name_or_raise(board_id, name).id for name in statuses or []
        ),
        priority=frozenset(Priority.parse(p) for p in priorities or []),
        assignee=frozenset(assignee_set),
        has_labels=has_labels,
        is_overdue=overdue,
        search=search,
    )
    return filters if has_active(filters) else None


def _print_column(tasks: List[Task], board_id: int, json_output: bool, raw: bool, message: str) -> None:
    """Shared output for commands that return a reordered column."""
    if json_output:
        emit(TaskFormatter.to_json_array(tasks))
    elif raw:
        for line in TaskFormatter.to_raw_lines(tasks):
            emit(line)
    else:
        console.print(message)
        statuses = service.list_statuses(board_id)
        console.print(TaskFormatter.create_table(tasks, statuses, datetime.now()))


@app.command()
def add(
    title: str = typer.Argument(..., help="Task title"),
    board_name: Optional[str] = typer.Option(None, "--board", "-b", help=BOARD_OPTION_HELP),
    status_name: Optional[str] = typer.Option(None, "--status", "-s", help="Status name (default: board's default status)"),
    priority: Optional[str] = typer.Option(None, "--priority", "-p", help="urgent, high, medium or low"),
    assignee: Optional[str] = typer.Option(None, "--assignee", "-a", help="Assignee user id"),
    labels: Optional[List[str]] = typer.Option(None, "--label", "-l", help="Label (repeatable)"),
    due: Optional[str] = typer.Option(None, "--due", "-d", help="Due date (YYYY-MM-DD)"),
    description: Optional[str] = typer.Option(None, "--desc", help="Task description"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    Create a new task at the end of a status column.

    Example:
        statusboard add "Write documentation"
        statusboard add "Fix bug" -b Work -s "In Progress" -p high -l backend
        statusboard add "Ship release" --due 2024-07-01 --assignee sam
    """
    try:
        board = resolve_board(board_name)
        status_id = None
        if status_name:
            status_id = service.find_status_by_name_or_raise(board.id, status_name).id

        task = service.create_task(
            board_id=board.id,
            title=title,
            status_id=status_id,
            priority=priority,
            assignee_id=assignee,
            labels=labels,
            due_date=due,
            description=description,
        )

        if json_output:
            emit(task.to_json())
        elif raw:
            emit(f"{task.id}: {task.title}")
        else:
            console.print(f"[green]✓[/green] Created task {task.id}: {task.title}")

    except BoardError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


@app.command()
def ls(
    board_name: Optional[str] = typer.Option(None, "--board", "-b", help=BOARD_OPTION_HELP),
    statuses: Optional[List[str]] = typer.Option(None, "--status", "-s", help="Only these statuses (repeatable)"),
    priorities: Optional[List[str]] = typer.Option(None, "--priority", "-p", help="Only these priorities (repeatable)"),
    assignees: Optional[List[str]] = typer.Option(None, "--assignee", "-a", help="Only these assignees (repeatable)"),
    unassigned: bool = typer.Option(False, "--unassigned", help="Include tasks with no assignee"),
    has_labels: Optional[bool] = typer.Option(None, "--has-labels/--no-labels", help="With or without labels"),
    overdue: Optional[bool] = typer.Option(None, "--overdue/--not-overdue", help="Overdue or not overdue"),
    search: str = typer.Option("", "--search", help="Case-insensitive title/description search"),
    sort: SortOption = typer.Option(SortOption.ORDER, "--sort", help="order, priority or due_date"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    List tasks, optionally filtered and sorted.

    Filters combine with AND; repeated values of one filter combine with OR.

    Example:
        statusboard ls
        statusboard ls -p high -p urgent --unassigned
        statusboard ls --overdue --sort due_date
        statusboard ls --search login --json
    """
    try:
        board = resolve_board(board_name)
        filters = build_filters(
            board.id, statuses, priorities, assignees, unassigned, has_labels, overdue, search
        )
        now = datetime.now()
        tasks = service.list_tasks(board.id, filters=filters, now=now, sort_by=sort)

        if json_output:
            emit(TaskFormatter.to_json_array(tasks))

        elif raw:
            for line in TaskFormatter.to_raw_lines(tasks):
                emit(line)

        else:
            if not tasks:
                console.print("[dim]No tasks found[/dim]")
                return

            board_statuses = service.list_statuses(board.id)
            console.print(TaskFormatter.create_table(tasks, board_statuses, now, title=board.name))
            suffix = " (filtered)" if filters is not None else ""
            console.print(f"\n[dim]Total: {len(tasks)} task(s){suffix}[/dim]")

    except BoardError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


@app.command()
def show(
    task_id: int = typer.Argument(..., help="Task ID to view"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    Show full details for a task.

    Example:
        statusboard show 5
    """
    try:
        task = service.get_task(task_id)

        if json_output:
            emit(task.to_json())
            return

        statuses = service.list_statuses(task.board_id)
        status_name = next((s.name for s in statuses if s.id == task.status_id), f"#{task.status_id}")
        overdue = is_overdue(task, datetime.now(), done_status_ids(statuses))

        if raw:
            emit(f"Task #{task.id}")
            emit(f"Title: {task.title}")
            if task.description:
                emit(f"Description: {task.description}")
            emit(f"Status: {status_name}")
            if task.priority:
                emit(f"Priority: {task.priority.value}")
            emit(f"Assignee: {task.assignee_id or UNASSIGNED}")
            if task.labels:
                emit(f"Labels: {', '.join(task.labels)}")
            if task.due_date:
                emit(f"Due: {task.due_date.isoformat()}{' (overdue)' if overdue else ''}")
            emit(f"Created: {task.created_at}")
        else:
            details = Text()
            details.append(f"Task #{task.id}\n", style="bold cyan")
            details.append(f"{task.title}\n\n", style="bold white")

            if task.description:
                details.append("Description:\n", style="dim")
                details.append(f"{task.description}\n\n", style="white")

            details.append("Status: ", style="dim")
            details.append(f"{status_name}\n", style="blue")

            details.append("Priority: ", style="dim")
            details.append_text(Text.from_markup(priority_label(task.priority)))
            details.append("\n")

            details.append("Assignee: ", style="dim")
            details.append(f"{task.assignee_id or UNASSIGNED}\n", style="yellow")

            if task.labels:
                details.append("Labels: ", style="dim")
                details.append(f"{', '.join(task.labels)}\n", style="magenta")

            if task.due_date:
                details.append("Due: ", style="dim")
                details.append(
                    f"{task.due_date.isoformat()}{' (overdue)' if overdue else ''}\n",
                    style="red" if overdue else "white",
                )

            details.append("Created: ", style="dim")
            details.append(f"{task.created_at or '-'}", style="white")

            console.print(Panel(details, border_style="cyan", padding=(1, 2)))

    except BoardError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


@app.command()
def edit(
    task_id: int = typer.Argument(..., help="Task ID to edit"),
    title: Optional[str] = typer.Option(None, "--title", "-t", help="New title"),
    description: Optional[str] = typer.Option(None, "--desc", help="New description"),
    priority: Optional[str] = typer.Option(None, "--priority", "-p", help="urgent, high, medium or low"),
    assignee: Optional[str] = typer.Option(None, "--assignee", "-a", help="New assignee"),
    labels: Optional[List[str]] = typer.Option(None, "--label", "-l", help="Replace labels (repeatable)"),
    due: Optional[str] = typer.Option(None, "--due", "-d", help="New due date (YYYY-MM-DD)"),
    no_priority: bool = typer.Option(False, "--no-priority", help="Clear the priority"),
    unassign: bool = typer.Option(False, "--unassign", help="Clear the assignee"),
    clear_labels: bool = typer.Option(False, "--clear-labels", help="Remove all labels"),
    clear_due: bool = typer.Option(False, "--clear-due", help="Clear the due date"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    Update task fields. Options not given are left unchanged.

    Example:
        statusboard edit 5 --title "New title"
        statusboard edit 5 -p urgent -l backend -l api
        statusboard edit 5 --unassign --clear-due
    """
    changes: Dict[str, Any] = {}
    if title is not None:
        changes["title"] = title
    if description is not None:
        changes["description"] = description
    if priority is not None or no_priority:
        changes["priority"] = None if no_priority else priority
    if assignee is not None or unassign:
        changes["assignee_id"] = None if unassign else assignee
    if labels or clear_labels:
        changes["labels"] = [] if clear_labels else labels
    if due is not None or clear_due:
        changes["due_date"] = None if clear_due else due

    if not changes:
        error_console.print("[yellow]Nothing to change[/yellow] (see: statusboard edit --help)")
        raise typer.Exit(1)

    try:
        task = service.update_task(task_id, **changes)

        if json_output:
            emit(task.to_json())
        elif raw:
            emit(f"{task.id}: {task.title}")
        else:
            console.print(f"[green]✓[/green] Updated task {task.id}: {task.title}")

    except BoardError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


@app.command()
def mv(
    task_id: int = typer.Argument(..., help="Task ID to move"),
    status_name: str = typer.Argument(..., help="Target status name"),
    index: Optional[int] = typer.Option(None, "--index", "-i", help="Position in the column (0-based, default: end)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    Move a task to a status, optionally at a position.

    Example:
        statusboard mv 5 "In Progress"
        statusboard mv 5 "To Do" --index 0
    """
    try:
        task = service.get_task(task_id)
        status = service.find_status_by_name_or_raise(task.board_id, status_name)
        column = service.move_task_to(task_id, status.id, index)
        _print_column(
            column,
            task.board_id,
            json_output,
            raw,
            f"[green]✓[/green] Moved task {task_id} to {status.name}",
        )

    except BoardError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


def _step(task_id: int, direction: Direction, json_output: bool, raw: bool) -> None:
    try:
        task = service.get_task(task_id)
        column = service.move_task(task_id, direction)
        _print_column(
            column,
            task.board_id,
            json_output,
            raw,
            f"[green]✓[/green] Moved task {task_id} {direction.value}",
        )

    except BoardError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


@app.command()
def up(
    task_id: int = typer.Argument(..., help="Task ID"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    Move a task one position up in its column.

    Example:
        statusboard up 5
    """
    _step(task_id, Direction.UP, json_output, raw)


@app.command()
def down(
    task_id: int = typer.Argument(..., help="Task ID"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    Move a task one position down in its column.

    Example:
        statusboard down 5
    """
    _step(task_id, Direction.DOWN, json_output, raw)


@app.command()
def reorder(
    status_name: str = typer.Argument(..., help="Status whose column to reorder"),
    task_ids: str = typer.Argument(..., help="All task IDs of the column in the new order (comma-separated)"),
    board_name: Optional[str] = typer.Option(None, "--board", "-b", help=BOARD_OPTION_HELP),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    Set the complete task order of one column.

    Every task ID in the column must appear exactly once.

    Example:
        statusboard reorder "To Do" 7,5,6
    """
    try:
        ids = parse_id_list(task_ids)
    except ValueError:
        error_console.print(f"[red]Error:[/red] Invalid task ID list: '{task_ids}'")
        raise typer.Exit(1)

    try:
        board = resolve_board(board_name)
        status = service.find_status_by_name_or_raise(board.id, status_name)
        column = service.reorder_tasks(status.id, ids)
        _print_column(
            column, board.id, json_output, raw, f"[green]✓[/green] Reordered {status.name}"
        )

    except BoardError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


@app.command()
def rm(
    task_ids: str = typer.Argument(..., help="Task ID(s) to delete (comma-separated)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
    yes: bool = typer.Option(False, "-y", "--yes", help="Skip confirmation prompt"),
):
    """
    Delete one or more tasks permanently.

    Confirms before deleting multiple tasks (use -y to skip).

    Example:
        statusboard rm 5
        statusboard rm 3,5,7 --yes
    """
    try:
        ids = parse_id_list(task_ids)
    except ValueError:
        error_console.print(f"[red]Error:[/red] Invalid task ID list: '{task_ids}'")
        raise typer.Exit(1)

    if not ids:
        error_console.print("[red]Error:[/red] No task IDs given")
        raise typer.Exit(1)

    if len(ids) > 1 and not yes:
        console.print(f"[yellow]About to delete {len(ids)} task(s)[/yellow]")
        if not typer.confirm("Continue?", default=False):
            console.print("[yellow]Cancelled[/yellow]")
            raise typer.Exit(0)

    deleted = []
    errors = []
    for task_id in ids:
        try:
            task = service.get_task(task_id)
            service.delete_task(task_id)
            deleted.append({"id": task.id, "title": task.title})
        except TaskNotFoundError as e:
            errors.append(str(e))
        except BoardError as e:
            errors.append(f"Task {task_id}: {e}")

    if json_output:
        emit(json.dumps(deleted, indent=2))
    elif raw:
        for item in deleted:
            emit(f"Deleted task {item['id']}: {item['title']}")
    elif deleted:
        console.print(f"[green]✓ Deleted {len(deleted)} task(s)[/green]")

    for error in errors:
        error_console.print(f"[red]Error:[/red] {error}")

    if errors:
        raise typer.Exit(1)
