"""
FILE: statusboard/cli/commands/system.py
PURPOSE: System commands (version, help)
"""

# Import shared objects from main module
# These will be available after main.py imports this module
from ..main import app, console
from ... import __version__


@app.command()
def version():
    """Show statusboard version."""
    console.print(f"statusboard v{__version__}")


@app.command()
def help():
    """Show available commands and usage."""
    console.print("\n[bold cyan]statusboard[/bold cyan] - Terminal task board\n")
    console.print(f"[dim]Version {__version__}[/dim]\n")

    console.print("[bold]Usage:[/bold]")
    console.print("  statusboard [command] [options]\n")

    console.print("[bold]Commands:[/bold]")

    commands = [
        ("board add", "Create a board with default statuses", 'statusboard board add "Work"'),
        ("board ls", "List boards", "statusboard board ls"),
        ("board show", "Kanban view of a board", "statusboard board show [-b Work] [--overdue]"),
        ("board rm", "Delete a board", 'statusboard board rm "Work"'),
        ("status add", "Add a status column", 'statusboard status add "Review" --color purple'),
        ("status ls", "List statuses in order", "statusboard status ls"),
        ("status rename", "Rename a status", 'statusboard status rename Review "Code review"'),
        ("status color", "Recolor a status", "statusboard status color Review pink"),
        ("status default", "Make a status the default", 'statusboard status default "To Do"'),
        ("status done", "Mark the terminal status", "statusboard status done Done"),
        ("status up/down", "Move a status one step", "statusboard status up Review"),
        ("status mv", "Drop a status at a position", "statusboard status mv Review 0"),
        ("status reorder", "Set the full status order", "statusboard status reorder 3,1,2"),
        ("status rm", "Delete an empty status", "statusboard status rm Review"),
        ("add", "Create a task", 'statusboard add "Fix bug" -p high -l backend'),
        ("ls", "List and filter tasks", "statusboard ls -p high --unassigned --sort due_date"),
        ("show", "View task details", "statusboard show 5"),
        ("edit", "Update task fields", 'statusboard edit 5 --title "New title"'),
        ("mv", "Move task to a status", 'statusboard mv 5 "In Progress" [--index 0]'),
        ("up/down", "Move task one step in its column", "statusboard up 5"),
        ("reorder", "Set a column's full task order", 'statusboard reorder "To Do" 7,5,6'),
        ("rm", "Delete task(s)", "statusboard rm 3,5,7"),
        ("version", "Show version", "statusboard version"),
        ("help", "Show this help message", "statusboard help"),
    ]

    for cmd, desc, example in commands:
        console.print(f"  [green]{cmd:15}[/green] {desc}")
        console.print(f"                  [dim]{example}[/dim]\n")

    console.print("[bold]Global Options:[/bold]")
    console.print("  [yellow]--json[/yellow]        Output as JSON (for scripting)")
    console.print("  [yellow]--raw[/yellow]         Plain text output (no colors)")
    console.print("  [yellow]-b, --board[/yellow]   Board name (default: first board)")
    console.print("  [yellow]--log-level[/yellow]   Log level, before the command")
    console.print("  [yellow]--help[/yellow]        Show detailed help for a command\n")
