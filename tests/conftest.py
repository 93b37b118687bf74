"""Pytest configuration and fixtures for vue-type-check tests."""

from __future__ import annotations

import os
import shlex
import shutil
import sys
from pathlib import Path

import pytest

# Set a fixed terminal width to prevent line wrapping issues in CI
# This must be set before any Rich imports
os.environ.setdefault("COLUMNS", "200")
os.environ.setdefault("LINES", "50")
# Disable Rich's terminal detection to ensure consistent output
os.environ.setdefault("TERM", "dumb")

FIXTURES_DIR = Path(__file__).parent / "fixtures"
FAKE_SERVER = FIXTURES_DIR / "fake_language_server.py"


@pytest.fixture
def fake_server_args() -> list[str]:
    """Argument vector starting the fake language server."""
    return [sys.executable, str(FAKE_SERVER)]


@pytest.fixture
def fake_server_command(fake_server_args: list[str]) -> str:
    """The fake language server as a --server-command string."""
    return shlex.join(fake_server_args)


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """A copy of the fixture Vue project in a temporary directory."""
    target = tmp_path / "project"
    shutil.copytree(FIXTURES_DIR / "project", target)
    return target
