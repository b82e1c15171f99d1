"""
FILE: statusboard/cli/main.py
PURPOSE: Typer-based CLI for one-shot board management commands
EXPORTS:
  - app (Typer application)
  - board_app, status_app (sub-command groups)
  - console, error_console (rich consoles)
  - configure_logging(level) -> None
  - emit(text) -> None (JSON and --raw output)
  - resolve_board(name) -> Board
  - main() (entry point)
DEPENDENCIES:
  - typer (CLI framework)
  - rich (formatted output)
  - loguru (logging sink setup)
  - statusboard.core.service (business logic)
NOTES:
  - Commands live in cli/commands/ and register themselves on import
  - Error messages go to stderr
  - Exit codes: 0=success, 1=error
  - Logs go to stderr; level from --log-level or config.yaml
"""

import sys
from typing import Optional

import typer
from loguru import logger
from rich.console import Console

from ..core import service
from ..core.constants import LOG_LEVELS
from ..core.exceptions import InvalidInputError
from ..core.models import Board

# Typer app setup
app = typer.Typer(
    name="statusboard",
    help="Terminal task board with ordered status columns",
    add_completion=False,
)

board_app = typer.Typer(name="board", help="Board management commands")
app.add_typer(board_app, name="board")

status_app = typer.Typer(name="status", help="Status (column) management commands")
app.add_typer(status_app, name="status")

# Rich console for formatted output
console = Console()
error_console = Console(stderr=True)


def configure_logging(level: str = "WARNING") -> None:
    """Configure loguru logger with the specified level."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=level.upper(),
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {message}",
    )


def emit(text: str) -> None:
    """Print machine-readable output (JSON or --raw lines) without markup or wrapping."""
    console.print(text, markup=False, emoji=False, highlight=False, soft_wrap=True)


def resolve_board(name: Optional[str]) -> Board:
    """
    Board named on the command line, or the first board if none was named.

    Raises:
        InvalidInputError: If the name doesn't match or no board exists yet
    """
    if name:
        return service.find_board_by_name_or_raise(name)

    boards = service.list_boards()
    if not boards:
        raise InvalidInputError('No boards yet. Create one with: statusboard board add "Name"')
    return boards[0]


@app.callback(invoke_without_command=True)
def default_command(
    ctx: typer.Context,
    log_level: Optional[str] = typer.Option(
        None, "--log-level", help="Log level (DEBUG, INFO, WARNING, ERROR)"
    ),
):
    """
    Set up logging; show help when no command is given.
    """
    level = (log_level or service.get_config().log_level).upper()
    if level not in LOG_LEVELS:
        error_console.print(
            f"[red]Error:[/red] Unknown log level '{log_level}'. Use one of: {', '.join(LOG_LEVELS)}"
        )
        raise typer.Exit(1)
    configure_logging(level)

    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())


# Import command modules to register commands with app
# Commands are decorated with @app.command() in their modules
from .commands import (  # noqa: E402
    # System commands
    version,
    help,
    # Board commands
    board_add,
    board_ls,
    board_show,
    board_rm,
    # Status commands
    status_add,
    status_ls,
    status_rename,
    status_color,
    status_default,
    status_done,
    status_up,
    status_down,
    status_mv,
    status_reorder,
    status_rm,
    # Task commands
    add,
    ls,
    show,
    edit,
    mv,
    up,
    down,
    reorder,
    rm,
)


def main():
    """Main entry point for CLI."""
    app()
