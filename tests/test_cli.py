"""
Test suite for the command-line interface.

Runs `python -m statusboard` in a subprocess against a temporary
STATUSBOARD_HOME, so each test starts with an empty database.
"""

import json
import os
import subprocess
import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).parent.parent


# Helper function for subprocess calls with proper encoding
def run_cli(*args, home):
    """Run a statusboard command, return the CompletedProcess."""
    env = dict(os.environ)
    env["STATUSBOARD_HOME"] = str(home)
    env["PYTHONIOENCODING"] = "utf-8"
    return subprocess.run(
        [sys.executable, "-m", "statusboard", *args],
        capture_output=True,
        text=True,
        encoding="utf-8",
        errors="replace",
        cwd=PROJECT_ROOT,
        env=env,
    )


@pytest.fixture
def home(tmp_path):
    return tmp_path


@pytest.fixture
def cli(home):
    def run(*args):
        return run_cli(*args, home=home)
    return run


@pytest.fixture
def board(cli):
    result = cli("board", "add", "Work", "--json")
    assert result.returncode == 0, result.stderr
    return json.loads(result.stdout)


def raw_lines(result):
    return [line for line in result.stdout.splitlines() if line.strip()]


# --- System ---

def test_version(cli):
    result = cli("version")

    assert result.returncode == 0
    assert "statusboard v" in result.stdout


def test_help_lists_commands(cli):
    result = cli("help")

    assert result.returncode == 0
    assert "board show" in result.stdout
    assert "reorder" in result.stdout


def test_bad_config_values_fall_back(cli, home):
    (home / "config.yaml").write_text(
        "precision_epsilon: tiny\nlog_level: verbose\ndefault_statuses: Todo\n"
    )

    result = cli("board", "add", "Work", "--raw")
    assert result.returncode == 0, result.stderr
    assert "precision_epsilon" in result.stderr

    statuses = raw_lines(cli("status", "ls", "--raw"))
    assert [line.split(": ", 1)[1] for line in statuses] == ["To Do", "In Progress", "Done"]


def test_unknown_log_level_option(cli):
    result = cli("--log-level", "verbose", "version")

    assert result.returncode == 1
    assert "Unknown log level" in result.stderr


# --- Boards ---

def test_board_add_and_ls(cli, board):
    assert board["name"] == "Work"

    result = cli("board", "ls", "--raw")

    assert result.returncode == 0
    assert raw_lines(result) == [f"{board['id']}: Work"]


def test_board_add_duplicate(cli, board):
    result = cli("board", "add", "work")

    assert result.returncode == 1
    assert "Error" in result.stderr


def test_commands_without_board(cli):
    result = cli("ls")

    assert result.returncode == 1
    assert "No boards yet" in result.stderr


def test_board_show_json(cli, board):
    cli("add", "First task")

    result = cli("board", "show", "--json")

    assert result.returncode == 0, result.stderr
    data = json.loads(result.stdout)
    assert [c["status"]["name"] for c in data["columns"]] == ["To Do", "In Progress", "Done"]
    assert [t["title"] for t in data["columns"][0]["tasks"]] == ["First task"]


def test_board_rm(cli, board):
    result = cli("board", "rm", "Work", "--yes", "--raw")

    assert result.returncode == 0
    assert raw_lines(cli("board", "ls", "--raw")) == []


# --- Statuses ---

def test_status_ls(cli, board):
    result = cli("status", "ls", "--json")

    assert result.returncode == 0
    statuses = json.loads(result.stdout)
    assert [s["name"] for s in statuses] == ["To Do", "In Progress", "Done"]
    assert [s["is_default"] for s in statuses] == [True, False, False]


def test_status_add_and_move(cli, board):
    assert cli("status", "add", "Review", "--color", "purple").returncode == 0

    result = cli("status", "up", "Review", "--raw")

    assert result.returncode == 0, result.stderr
    names = [line.split(": ", 1)[1] for line in raw_lines(result)]
    assert names == ["To Do", "In Progress", "Review", "Done"]


def test_status_add_duplicate_name(cli, board):
    result = cli("status", "add", "Done")

    assert result.returncode == 1
    assert "already exists" in result.stderr


def test_status_rm_default_refused(cli, board):
    result = cli("status", "rm", "To Do")

    assert result.returncode == 1
    assert "default" in result.stderr


def test_status_rm_in_use_refused(cli, board):
    cli("add", "Busy", "--status", "Done")

    result = cli("status", "rm", "Done")

    assert result.returncode == 1
    assert "task(s)" in result.stderr


def test_status_reorder(cli, board):
    statuses = json.loads(cli("status", "ls", "--json").stdout)
    ids = [s["id"] for s in reversed(statuses)]

    result = cli("status", "reorder", ",".join(str(i) for i in ids), "--json")

    assert result.returncode == 0, result.stderr
    assert [s["id"] for s in json.loads(result.stdout)] == ids


def test_status_reorder_incomplete(cli, board):
    result = cli("status", "reorder", "1")

    assert result.returncode == 1
    assert "Invalid order" in result.stderr


# --- Tasks ---

def test_add_and_ls(cli, board):
    result = cli("add", "Write docs", "-p", "high", "-l", "docs", "--json")

    assert result.returncode == 0, result.stderr
    task = json.loads(result.stdout)
    assert task["priority"] == "high"
    assert task["labels"] == ["docs"]

    assert raw_lines(cli("ls", "--raw")) == [f"{task['id']}: Write docs"]


def test_add_invalid_priority(cli, board):
    result = cli("add", "Task", "--priority", "someday")

    assert result.returncode == 1
    assert "Invalid priority" in result.stderr


def test_ls_filters(cli, board):
    cli("add", "high one", "-p", "high")
    cli("add", "low one", "-p", "low", "-a", "sam")
    cli("add", "high two", "-p", "high", "-l", "ui")

    high = json.loads(cli("ls", "-p", "high", "--json").stdout)
    assert [t["title"] for t in high] == ["high one", "high two"]

    unassigned = json.loads(cli("ls", "--unassigned", "--json").stdout)
    assert [t["title"] for t in unassigned] == ["high one", "high two"]

    labelled = json.loads(cli("ls", "--has-labels", "--json").stdout)
    assert [t["title"] for t in labelled] == ["high two"]

    found = json.loads(cli("ls", "--search", "LOW", "--json").stdout)
    assert [t["title"] for t in found] == ["low one"]


def test_ls_overdue(cli, board):
    cli("add", "late", "--due", "2000-01-01")
    cli("add", "late but done", "--due", "2000-01-01", "--status", "Done")
    cli("add", "no date")

    result = cli("ls", "--overdue", "--json")

    assert [t["title"] for t in json.loads(result.stdout)] == ["late"]


def test_ls_sort_by_priority(cli, board):
    cli("add", "low", "-p", "low")
    cli("add", "urgent", "-p", "urgent")

    result = cli("ls", "--sort", "priority", "--raw")

    assert [line.split(": ", 1)[1] for line in raw_lines(result)] == ["urgent", "low"]


def test_up_and_down(cli, board):
    ids = [json.loads(cli("add", title, "--json").stdout)["id"] for title in ("A", "B", "C")]

    result = cli("up", str(ids[1]), "--raw")
    assert result.returncode == 0, result.stderr
    assert [line.split(": ", 1)[1] for line in raw_lines(result)] == ["B", "A", "C"]

    result = cli("down", str(ids[1]), "--raw")
    assert [line.split(": ", 1)[1] for line in raw_lines(result)] == ["A", "B", "C"]


def test_mv_to_other_status(cli, board):
    task = json.loads(cli("add", "Move me", "--json").stdout)

    result = cli("mv", str(task["id"]), "In Progress", "--json")

    assert result.returncode == 0, result.stderr
    column = json.loads(result.stdout)
    assert [t["title"] for t in column] == ["Move me"]

    shown = json.loads(cli("show", str(task["id"]), "--json").stdout)
    assert shown["status_id"] == column[0]["status_id"]


def test_reorder_column(cli, board):
    ids = [json.loads(cli("add", title, "--json").stdout)["id"] for title in ("A", "B", "C")]
    new_order = [ids[2], ids[0], ids[1]]

    result = cli("reorder", "To Do", ",".join(str(i) for i in new_order), "--json")

    assert result.returncode == 0, result.stderr
    assert [t["id"] for t in json.loads(result.stdout)] == new_order


def test_edit(cli, board):
    task = json.loads(cli("add", "Old", "-a", "sam", "--json").stdout)

    result = cli("edit", str(task["id"]), "--title", "New", "--unassign", "--json")

    assert result.returncode == 0, result.stderr
    edited = json.loads(result.stdout)
    assert edited["title"] == "New"
    assert edited["assignee_id"] is None


def test_show_missing_task(cli, board):
    result = cli("show", "999")

    assert result.returncode == 1
    assert "not found" in result.stderr


def test_rm_multiple(cli, board):
    ids = [json.loads(cli("add", title, "--json").stdout)["id"] for title in ("A", "B")]

    result = cli("rm", f"{ids[0]},{ids[1]}", "--yes", "--json")

    assert result.returncode == 0, result.stderr
    assert [t["title"] for t in json.loads(result.stdout)] == ["A", "B"]
    assert raw_lines(cli("ls", "--raw")) == []
