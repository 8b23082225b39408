"""
sqlshape - Schema-driven SQLite tables and repositories for Pydantic models.

sqlshape derives a CREATE TABLE statement from a Pydantic model and wraps the
table in a small typed repository:
- Column types, PRIMARY KEY, UNIQUE and named multi-column UNIQUE constraints
  come from the model
- Four operations: get_all, get_all_where, get_by_id and create
- Every result is parsed back into the model

Example usage:
    >>> conn = connect("app.db")
    >>> users = BaseRepository(conn, "users", User, NewUser)
    >>> users.create({"email": "a@b.com", "name": "A"})
    User(id=1, email='a@b.com', name='A')
"""

from sqlshape.errors import (
    InvalidIdentifierError,
    RecordNotFoundError,
    SqlshapeError,
    UnsupportedFieldTypeError,
)
from sqlshape.repository import BaseRepository
from sqlshape.schema import (
    Field,
    FieldFeatures,
    FieldType,
    TableDefinition,
    UniqueConstraint,
    column,
    model_to_table,
)
from sqlshape.sql import field_to_sql, unique_constraint_to_sql, where_to_sql
from sqlshape.store import connect

__version__ = "0.1.0"
__author__ = "sqlshape Contributors"

__all__ = [
    "__version__",
    "__author__",
    "BaseRepository",
    "Field",
    "FieldFeatures",
    "FieldType",
    "InvalidIdentifierError",
    "RecordNotFoundError",
    "SqlshapeError",
    "TableDefinition",
    "UniqueConstraint",
    "UnsupportedFieldTypeError",
    "column",
    "connect",
    "field_to_sql",
    "model_to_table",
    "unique_constraint_to_sql",
    "where_to_sql",
]
