"""
FILE: statusboard/cli/commands/statuses.py
PURPOSE: Status (column) commands (status add/ls/rename/color/default/done/up/down/mv/reorder/rm)
"""

from typing import List, Optional

import typer

from ..main import console, emit, error_console, resolve_board, status_app
from ...core import service
from ...core.exceptions import BoardError
from ...core.models import BoardStatus, Color
from ...core.reorder import Direction
from ...formatting import StatusFormatter, parse_id_list

BOARD_OPTION_HELP = "Board name (default: first board)"


def _find_status(board_name: Optional[str], name: str) -> BoardStatus:
    board = resolve_board(board_name)
    return service.find_status_by_name_or_raise(board.id, name)


def _print_statuses(statuses: List[BoardStatus], json_output: bool, raw: bool, message: str) -> None:
    """Shared output for commands that return the board's statuses."""
    if json_output:
        emit(StatusFormatter.to_json_array(statuses))
    elif raw:
        for line in StatusFormatter.to_raw_lines(statuses):
            emit(line)
    else:
        console.print(message)
        console.print(StatusFormatter.create_table(statuses))


@status_app.command("add")
def status_add(
    name: str = typer.Argument(..., help="Status name"),
    color: Color = typer.Option(Color.GRAY, "--color", "-c", help="Status color"),
    board_name: Optional[str] = typer.Option(None, "--board", "-b", help=BOARD_OPTION_HELP),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    Add a status at the end of a board.

    Example:
        statusboard status add "Review"
        statusboard status add "Blocked" --color red -b Work
    """
    try:
        board = resolve_board(board_name)
        status = service.add_status(board.id, name, color)

        if json_output:
            emit(status.to_json())
        elif raw:
            emit(f"{status.id}: {status.name}")
        else:
            console.print(f"[green]✓[/green] Added status {status.id}: {status.name}")

    except BoardError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


@status_app.command("ls")
def status_ls(
    board_name: Optional[str] = typer.Option(None, "--board", "-b", help=BOARD_OPTION_HELP),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    List a board's statuses in order.

    Example:
        statusboard status ls
        statusboard status ls -b Work --json
    """
    try:
        board = resolve_board(board_name)
        statuses = service.list_statuses(board.id)
        _print_statuses(statuses, json_output, raw, f"[dim]Board: {board.name}[/dim]")

    except BoardError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


@status_app.command("rename")
def status_rename(
    name: str = typer.Argument(..., help="Current status name"),
    new_name: str = typer.Argument(..., help="New status name"),
    board_name: Optional[str] = typer.Option(None, "--board", "-b", help=BOARD_OPTION_HELP),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    Rename a status.

    Example:
        statusboard status rename "Review" "Code review"
    """
    try:
        status = _find_status(board_name, name)
        updated = service.rename_status(status.id, new_name)

        if json_output:
            emit(updated.to_json())
        elif raw:
            emit(f"{updated.id}: {updated.name}")
        else:
            console.print(f"[green]✓[/green] Renamed status {status.id}: {status.name} → {updated.name}")

    except BoardError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


@status_app.command("color")
def status_color(
    name: str = typer.Argument(..., help="Status name"),
    color: Color = typer.Argument(..., help="New color"),
    board_name: Optional[str] = typer.Option(None, "--board", "-b", help=BOARD_OPTION_HELP),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    Change a status's color.

    Example:
        statusboard status color "Review" purple
    """
    try:
        status = _find_status(board_name, name)
        updated = service.recolor_status(status.id, color)

        if json_output:
            emit(updated.to_json())
        elif raw:
            emit(f"{updated.id}: {updated.name} {updated.color.value}")
        else:
            console.print(f"[green]✓[/green] Status {updated.name} is now {updated.color.value}")

    except BoardError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


@status_app.command("default")
def status_default(
    name: str = typer.Argument(..., help="Status name"),
    board_name: Optional[str] = typer.Option(None, "--board", "-b", help=BOARD_OPTION_HELP),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    Make a status the board's default (new tasks land there).

    Example:
        statusboard status default "Backlog"
    """
    try:
        status = _find_status(board_name, name)
        statuses = service.set_default_status(status.id)
        _print_statuses(
            statuses, json_output, raw, f"[green]✓[/green] {status.name} is now the default status"
        )

    except BoardError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


@status_app.command("done")
def status_done(
    name: str = typer.Argument(..., help="Status name"),
    board_name: Optional[str] = typer.Option(None, "--board", "-b", help=BOARD_OPTION_HELP),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    Mark the board's terminal status (its tasks are never overdue).

    Example:
        statusboard status done "Shipped"
    """
    try:
        status = _find_status(board_name, name)
        statuses = service.set_done_status(status.id)
        _print_statuses(
            statuses, json_output, raw, f"[green]✓[/green] {status.name} is now the done status"
        )

    except BoardError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


def _move(board_name: Optional[str], name: str, direction: Direction, json_output: bool, raw: bool) -> None:
    try:
        status = _find_status(board_name, name)
        statuses = service.move_status(status.id, direction)
        _print_statuses(
            statuses, json_output, raw, f"[green]✓[/green] Moved {status.name} {direction.value}"
        )

    except BoardError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


@status_app.command("up")
def status_up(
    name: str = typer.Argument(..., help="Status name"),
    board_name: Optional[str] = typer.Option(None, "--board", "-b", help=BOARD_OPTION_HELP),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    Move a status one position earlier (left on the board).

    Example:
        statusboard status up "Review"
    """
    _move(board_name, name, Direction.UP, json_output, raw)


@status_app.command("down")
def status_down(
    name: str = typer.Argument(..., help="Status name"),
    board_name: Optional[str] = typer.Option(None, "--board", "-b", help=BOARD_OPTION_HELP),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    Move a status one position later (right on the board).

    Example:
        statusboard status down "Review"
    """
    _move(board_name, name, Direction.DOWN, json_output, raw)


@status_app.command("mv")
def status_mv(
    name: str = typer.Argument(..., help="Status name"),
    index: int = typer.Argument(..., help="Target position (0-based, clamped)"),
    board_name: Optional[str] = typer.Option(None, "--board", "-b", help=BOARD_OPTION_HELP),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    Drop a status at a position.

    Example:
        statusboard status mv "Review" 0
    """
    try:
        status = _find_status(board_name, name)
        statuses = service.move_status_to(status.id, index)
        _print_statuses(
            statuses, json_output, raw, f"[green]✓[/green] Moved {status.name} to position {index}"
        )

    except BoardError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


@status_app.command("reorder")
def status_reorder(
    status_ids: str = typer.Argument(..., help="All status IDs in the new order (comma-separated)"),
    board_name: Optional[str] = typer.Option(None, "--board", "-b", help=BOARD_OPTION_HELP),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    Set the complete status order of a board.

    Every status ID must appear exactly once.

    Example:
        statusboard status reorder 3,1,2
    """
    try:
        ids = parse_id_list(status_ids)
    except ValueError:
        error_console.print(f"[red]Error:[/red] Invalid status ID list: '{status_ids}'")
        raise typer.Exit(1)

    try:
        board = resolve_board(board_name)
        statuses = service.reorder_statuses(board.id, ids)
        _print_statuses(statuses, json_output, raw, "[green]✓[/green] Reordered statuses")

    except BoardError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


@status_app.command("rm")
def status_rm(
    name: str = typer.Argument(..., help="Status name"),
    board_name: Optional[str] = typer.Option(None, "--board", "-b", help=BOARD_OPTION_HELP),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    Delete a status.

    The default status and statuses that still hold tasks are refused.

    Example:
        statusboard status rm "Blocked"
    """
    try:
        status = _find_status(board_name, name)
        service.delete_status(status.id)

        if json_output:
            emit(status.to_json())
        elif raw:
            emit(f"Deleted status {status.id}: {status.name}")
        else:
            console.print(f"[green]✓[/green] Deleted status {status.id}: {status.name}")

    except BoardError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
