"""
SQLite handle helpers for sqlshape.

Repositories accept any sqlite3.Connection; this module opens one the way
they expect and offers read-only introspection used by the CLI.

Connections opened here:
    - Autocommit: every statement is durable as soon as it returns
    - Row factory: rows are sqlite3.Row, so dict(row) maps column -> value
    - Foreign keys: enforced when the config asks for it

The caller owns the connection. Repositories never close it.
"""

import sqlite3
from pathlib import Path
from typing import Any

from sqlshape.config import DatabaseConfig
from sqlshape.errors import StorageConnectionError
from sqlshape.log import get_logger
from sqlshape.sql import check_identifier

log = get_logger(__name__)


def connect(target: DatabaseConfig | str | Path) -> sqlite3.Connection:
    """
    Open a database file.

    Args:
        target: A DatabaseConfig, or a path to the SQLite file
                (created if it doesn't exist; ":memory:" also works)

    Returns:
        An autocommit sqlite3.Connection yielding sqlite3.Row rows

    Raises:
        StorageConnectionError: If the file cannot be opened
    """
    config = target if isinstance(target, DatabaseConfig) else DatabaseConfig(path=target)
    db_path = str(config.path)

    try:
        conn = sqlite3.connect(
            db_path,
            timeout=config.timeout_seconds,
            isolation_level=None,
            check_same_thread=False,
        )
        conn.row_factory = sqlite3.Row
        if config.foreign_keys:
            conn.execute("PRAGMA foreign_keys = ON")
    except sqlite3.Error as e:
        raise StorageConnectionError(
            db_path=db_path,
            operation="connect",
            message=f"Failed to connect to database: {e}",
        ) from e

    log.debug("db.connect", path=db_path, foreign_keys=config.foreign_keys)
    return conn


def list_tables(conn: sqlite3.Connection) -> list[str]:
    """Names of all user tables, sorted."""
    cursor = conn.execute(
        "SELECT name FROM sqlite_master "
        "WHERE type = 'table' AND name NOT LIKE 'sqlite_%' ORDER BY name"
    )
    return [row[0] for row in cursor]


def table_columns(conn: sqlite3.Connection, table: str) -> list[dict[str, Any]]:
    """
    Describe the columns of a table.

    Returns:
        One dict per column with name, type, not_null, default and
        primary_key keys, in table order. Empty if the table doesn't exist.
    """
    check_identifier(table)
    cursor = conn.execute(f"PRAGMA table_info({table})")
    return [
        {
            "name": row[1],
            "type": row[2],
            "not_null": bool(row[3]),
            "default": row[4],
            "primary_key": bool(row[5]),
        }
        for row in cursor
    ]


def fetch_rows(
    conn: sqlite3.Connection,
    table: str,
    limit: int = 100,
) -> list[dict[str, Any]]:
    """Raw rows of a table as dicts, without validating against any model."""
    check_identifier(table)
    cursor = conn.execute(f"SELECT * FROM {table} LIMIT ?", (limit,))
    columns = [d[0] for d in cursor.description or ()]
    return [dict(zip(columns, row)) for row in cursor]
