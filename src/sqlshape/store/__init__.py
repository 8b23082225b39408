"""
Storage module for sqlshape.

Opens SQLite database files for repositories and inspects their contents.
All tables live in a single .db file; the connection is shared by every
repository built on it and owned by the caller.
"""

from sqlshape.store.db import connect, fetch_rows, list_tables, table_columns

__all__ = [
    "connect",
    "fetch_rows",
    "list_tables",
    "table_columns",
]
