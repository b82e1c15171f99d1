"""
FILE: statusboard/cli/commands/boards.py
PURPOSE: Board management commands (board add, board ls, board show, board rm)
"""

import json
from datetime import datetime
from typing import List, Optional

import typer
from rich.table import Table

from ..main import board_app, console, emit, error_console, resolve_board
from ...core import service
from ...core.exceptions import BoardError
from ...core.filters import SortOption
from ...formatting import BoardFormatter
from .tasks import build_filters


@board_app.command("add")
def board_add(
    name: str = typer.Argument(..., help="Board name"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    Create a new board with the configured starting statuses.

    Example:
        statusboard board add "Work"
        statusboard board add "Personal" --json
    """
    try:
        board = service.create_board(name)

        if json_output:
            emit(board.to_json())
        elif raw:
            emit(f"{board.id}: {board.name}")
        else:
            statuses = service.list_statuses(board.id)
            console.print(f"[green]✓[/green] Created board {board.id}: {board.name}")
            console.print(f"[dim]Statuses: {', '.join(s.name for s in statuses)}[/dim]")

    except BoardError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


@board_app.command("ls")
def board_ls(
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    List all boards.

    Example:
        statusboard board ls
        statusboard board ls --json
    """
    try:
        boards = service.list_boards()

        if json_output:
            emit(json.dumps([b.to_dict() for b in boards], indent=2))

        elif raw:
            for board in boards:
                emit(f"{board.id}: {board.name}")

        else:
            if not boards:
                console.print("[dim]No boards found[/dim]")
                return

            table = Table(title="Boards")
            table.add_column("ID", style="cyan", no_wrap=True)
            table.add_column("Name", style="white")
            table.add_column("Created", style="dim")

            for board in boards:
                created_display = board.created_at.split("T")[0] if board.created_at else ""
                table.add_row(str(board.id), board.name, created_display)

            console.print(table)
            console.print(f"\n[dim]Total: {len(boards)} board(s)[/dim]")

    except BoardError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


@board_app.command("show")
def board_show(
    board_name: Optional[str] = typer.Option(None, "--board", "-b", help="Board name (default: first board)"),
    statuses: Optional[List[str]] = typer.Option(None, "--status", "-s", help="Only these statuses (repeatable)"),
    priorities: Optional[List[str]] = typer.Option(None, "--priority", "-p", help="Only these priorities (repeatable)"),
    assignees: Optional[List[str]] = typer.Option(None, "--assignee", "-a", help="Only these assignees (repeatable)"),
    unassigned: bool = typer.Option(False, "--unassigned", help="Include tasks with no assignee"),
    has_labels: Optional[bool] = typer.Option(None, "--has-labels/--no-labels", help="With or without labels"),
    overdue: Optional[bool] = typer.Option(None, "--overdue/--not-overdue", help="Overdue or not overdue"),
    search: str = typer.Option("", "--search", help="Case-insensitive title/description search"),
    sort: SortOption = typer.Option(SortOption.ORDER, "--sort", help="Sort within columns"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    Show a board as status columns.

    Example:
        statusboard board show
        statusboard board show -b Work --priority high --sort due_date
        statusboard board show --overdue
    """
    try:
        board = resolve_board(board_name)
        filters = build_filters(
            board.id, statuses, priorities, assignees, unassigned, has_labels, overdue, search
        )
        now = datetime.now()
        columns = service.board_columns(board.id, filters=filters, now=now, sort_by=sort)

        if json_output:
            emit(BoardFormatter.to_json(board, columns))
        elif raw:
            for status, tasks in columns:
                emit(f"{status.name}:")
                for task in tasks:
                    emit(f"  {task.id}: {task.title}")
        else:
            console.print(BoardFormatter.create_table(board, columns, now))
            total = sum(len(tasks) for _, tasks in columns)
            suffix = " (filtered)" if filters is not None else ""
            console.print(f"\n[dim]Total: {total} task(s){suffix}[/dim]")

    except BoardError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


@board_app.command("rm")
def board_rm(
    name: str = typer.Argument(..., help="Board name"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
    yes: bool = typer.Option(False, "-y", "--yes", help="Skip confirmation prompt"),
):
    """
    Delete a board with all of its statuses and tasks.

    Example:
        statusboard board rm "Old"
        statusboard board rm "Old" --yes
    """
    try:
        board = service.find_board_by_name_or_raise(name)
        task_count = len(service.list_tasks(board.id))

        if not yes:
            console.print(
                f"[yellow]About to delete board '{board.name}' and {task_count} task(s)[/yellow]"
            )
            if not typer.confirm("Continue?", default=False):
                console.print("[yellow]Cancelled[/yellow]")
                raise typer.Exit(0)

        service.delete_board(board.id)

        if json_output:
            emit(board.to_json())
        elif raw:
            emit(f"Deleted board {board.id}: {board.name}")
        else:
            console.print(f"[green]✓[/green] Deleted board {board.id}: {board.name}")

    except BoardError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
