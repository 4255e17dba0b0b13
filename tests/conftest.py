"""Shared test fixtures for the task board tests."""

import sys
from pathlib import Path

import pytest

# Ensure the repo root (pkg/, taskboard_server.py) is importable
sys.path.insert(0, str(Path(__file__).parent.parent))

from pkg.taskboard.store import DocumentStore  # noqa: E402


@pytest.fixture
def store(tmp_path):
    return DocumentStore(str(tmp_path / "taskboard.db"))
