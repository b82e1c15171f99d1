"""
FILE: statusboard/core/constants.py
PURPOSE: Constants used throughout the application
EXPORTS:
  - SEED_KEY, KEY_STEP: Position keys for empty collections and ends
  - PRECISION_EPSILON: Smallest usable gap between neighbouring keys
  - RENORMALIZE_SPACING: Gap between keys after a full renumbering
  - MAX_EXACT_KEY: Largest key that floats still represent exactly
  - UNASSIGNED: Assignee filter sentinel for tasks without an assignee
  - DEFAULT_STATUS_NAMES, DONE_STATUS_NAME: Statuses seeded on new boards
  - LOG_LEVELS: loguru level names
DEPENDENCIES:
  - None (stdlib only)
NOTES:
  - Centralized constants to avoid magic numbers
  - Config values in core/config.py default to these
"""

# Ordering keys
SEED_KEY = 1.0
KEY_STEP = 1.0
PRECISION_EPSILON = 1e-9
RENORMALIZE_SPACING = 1000.0
MAX_EXACT_KEY = float(2 ** 53)

# Filter sentinels
UNASSIGNED = "unassigned"

# New board defaults
DEFAULT_STATUS_NAMES = ("To Do", "In Progress", "Done")
DONE_STATUS_NAME = "Done"

# Logging levels accepted from config and --log-level
LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")

# Storage
HOME_ENV_VAR = "STATUSBOARD_HOME"
DB_FILENAME = "statusboard.db"
CONFIG_FILENAME = "config.yaml"
