"""
FILE: statusboard/cli/commands/__init__.py
PURPOSE: CLI command modules
"""

# Export all command handlers for easy importing
from .system import (
    version,
    help,
)
from .boards import (
    board_add,
    board_ls,
    board_show,
    board_rm,
)
from .statuses import (
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
)
from .tasks import (
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

__all__ = [
    "version",
    "help",
    "board_add",
    "board_ls",
    "board_show",
    "board_rm",
    "status_add",
    "status_ls",
    "status_rename",
    "status_color",
    "status_default",
    "status_done",
    "status_up",
    "status_down",
    "status_mv",
    "status_reorder",
    "status_rm",
    "add",
    "ls",
    "show",
    "edit",
    "mv",
    "up",
    "down",
    "reorder",
    "rm",
]
