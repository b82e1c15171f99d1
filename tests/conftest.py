"""Shared pytest configuration and fixtures for tests."""

import sys
import io
from pathlib import Path

import pytest

# Fix Windows console encoding
if sys.platform == "win32":
    sys.stdout = io.TextIOWrapper(sys.stdout.buffer, encoding='utf-8')
    sys.stderr = io.TextIOWrapper(sys.stderr.buffer, encoding='utf-8')

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from statusboard.core import service  # noqa: E402
from statusboard.core.config import Config  # noqa: E402


@pytest.fixture(autouse=True)
def default_config():
    """Run every test with built-in defaults, not the user's config.yaml."""
    service.set_config(Config())
    yield service.get_config()
    service.set_config(None)
