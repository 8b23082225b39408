"""
Pytest configuration and fixtures for sqlshape tests.

This module provides shared fixtures used across unit and integration tests:
a temporary directory, a database file inside it, and an open connection.
"""

import sqlite3
import tempfile
from pathlib import Path
from typing import Generator

import pytest

from sqlshape.store import connect


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def db_path(temp_dir: Path) -> Path:
    """Path to a database file that doesn't exist yet."""
    return temp_dir / "test.db"


@pytest.fixture
def conn(db_path: Path) -> Generator[sqlite3.Connection, None, None]:
    """An open connection to a fresh database file."""
    connection = connect(db_path)
    yield connection
    connection.close()


@pytest.fixture
def sample_config_yaml() -> str:
    """Return a complete configuration YAML for testing."""
    return """
path: ./app.db
foreign_keys: false
timeout_seconds: 10
log_level: DEBUG
json_logs: true
"""
