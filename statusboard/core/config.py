"""
FILE: statusboard/core/config.py
PURPOSE: Runtime configuration loaded from YAML
EXPORTS:
  - Config (dataclass)
  - home_dir() -> Path
DEPENDENCIES:
  - yaml (PyYAML)
  - loguru (warnings for unreadable config)
  - statusboard.core.constants (defaults)
NOTES:
  - Lives at $STATUSBOARD_HOME/config.yaml (default ~/.statusboard)
  - Missing file = defaults; unknown keys are ignored
  - A bad value falls back to that field's default with a warning
"""

import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, List, Optional

import yaml
from loguru import logger

from .constants import (
    CONFIG_FILENAME,
    DEFAULT_STATUS_NAMES,
    DONE_STATUS_NAME,
    HOME_ENV_VAR,
    LOG_LEVELS,
    PRECISION_EPSILON,
    RENORMALIZE_SPACING,
)


def home_dir() -> Path:
    """Data directory for the database and config file."""
    override = os.environ.get(HOME_ENV_VAR)
    return Path(override).expanduser() if override else Path.home() / ".statusboard"


@dataclass
class Config:
    """Runtime configuration for statusboard."""

    # Ordering
    precision_epsilon: float = PRECISION_EPSILON
    renormalize_spacing: float = RENORMALIZE_SPACING

    # New boards get these statuses; the first one is the default
    default_statuses: List[str] = field(default_factory=lambda: list(DEFAULT_STATUS_NAMES))
    done_status_name: str = DONE_STATUS_NAME

    # Logging
    log_level: str = "WARNING"

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "Config":
        """Load config from YAML file, falling back to defaults."""
        cfg_path = Path(path) if path else home_dir() / CONFIG_FILENAME
        if not cfg_path.exists():
            return cls()

        try:
            with open(cfg_path, "r") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning("Ignoring unreadable config {}: {}", cfg_path, e)
            return cls()

        if not isinstance(data, dict):
            logger.warning("Ignoring config {}: expected a mapping", cfg_path)
            return cls()

        cfg = cls()
        known = {f.name for f in fields(cls)}
        for key, value in data.items():
            if key not in known:
                continue
            try:
                setattr(cfg, key, _coerce(key, value))
            except (TypeError, ValueError) as e:
                logger.warning(
                    "Ignoring {}={!r} in {}: {}; using {!r}",
                    key, value, cfg_path, e, getattr(cfg, key),
                )
        return cfg


def _coerce(key: str, value: Any) -> Any:
    """Convert one config value to the type its field expects."""
    if key in ("precision_epsilon", "renormalize_spacing"):
        if isinstance(value, bool):
            raise TypeError("expected a number")
        number = float(value)
        if not number > 0:
            raise ValueError("must be positive")
        return number

    if key == "default_statuses":
        if not isinstance(value, list):
            raise TypeError("expected a list of status names")
        if not all(isinstance(name, str) for name in value):
            raise TypeError("status names must be strings")
        return list(value)

    if key == "log_level":
        level = str(value).upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"unknown level (use one of {', '.join(LOG_LEVELS)})")
        return level

    if not isinstance(value, str):
        raise TypeError("expected a string")
    return value
