"""
SQL rendering for sqlshape.

Turns table definitions, filters and column lists into SQL text. Values
never appear in the rendered text: filters and inserts reference named
parameters (``$name``) that the caller binds when executing.

Identifiers, on the other hand, are spliced in as-is, so every table and
column name passing through here is checked first.
"""

import re
from collections.abc import Iterable, Mapping
from typing import Any

from sqlshape.errors import InvalidIdentifierError
from sqlshape.schema import Field, TableDefinition, UniqueConstraint

IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

# Always-true condition used for an empty filter
MATCH_ALL = "1=1"


def check_identifier(identifier: str) -> str:
    """
    Ensure a table or column name is safe to splice into SQL.

    Returns:
        The identifier unchanged

    Raises:
        InvalidIdentifierError: If it is not a plain SQL identifier
    """
    if not isinstance(identifier, str) or not IDENTIFIER_PATTERN.match(identifier):
        raise InvalidIdentifierError(identifier=str(identifier))
    return identifier


# =============================================================================
# Fragments
# =============================================================================


def field_to_sql(field: Field) -> str:
    """Render a column definition, e.g. ``count INTEGER NOT NULL DEFAULT 0``."""
    sql = f"{field.name} {field.type.value}"
    if field.not_null:
        sql += " NOT NULL"
    if field.primary_key:
        sql += " PRIMARY KEY"
    if field.unique:
        sql += " UNIQUE"
    if field.default is not None:
        sql += f" DEFAULT {field.default}"
    return sql


def unique_constraint_to_sql(constraint: UniqueConstraint) -> str:
    """Render a named table constraint, e.g. ``CONSTRAINT pair UNIQUE (a,b)``."""
    return f"CONSTRAINT {constraint.name} UNIQUE ({','.join(constraint.fields)})"


def where_to_sql(where: Mapping[str, Any]) -> str:
    """
    Render a filter mapping as a WHERE condition.

    ``None`` values test for NULL; every other key is compared against the
    named parameter of the same name.

    Example:
        >>> where_to_sql({"status": "active", "deleted_at": None})
        'status = $status AND deleted_at IS NULL'
    """
    if not where:
        return MATCH_ALL

    clauses = []
    for key, value in where.items():
        check_identifier(key)
        if value is None:
            clauses.append(f"{key} IS NULL")
        else:
            clauses.append(f"{key} = ${key}")
    return " AND ".join(clauses)


# =============================================================================
# Statements
# =============================================================================


def create_table_sql(name: str, table: TableDefinition) -> str:
    """Render an idempotent CREATE TABLE statement."""
    check_identifier(name)
    for field in table.fields:
        check_identifier(field.name)
    for constraint in table.unique_constraints:
        check_identifier(constraint.name)

    parts = [field_to_sql(f) for f in table.fields]
    parts += [unique_constraint_to_sql(c) for c in table.unique_constraints]
    return f"CREATE TABLE IF NOT EXISTS {name} ({','.join(parts)})"


def select_sql(name: str, where: Mapping[str, Any] | None = None) -> str:
    """Render ``SELECT *`` over a table, filtered when ``where`` is given."""
    check_identifier(name)
    sql = f"SELECT * FROM {name}"
    if where is not None:
        sql += f" WHERE {where_to_sql(where)}"
    return sql


def select_by_id_sql(name: str) -> str:
    """Render the lookup of a single row by its ``id`` column."""
    check_identifier(name)
    return f"SELECT * FROM {name} WHERE id = $id"


def insert_sql(name: str, columns: Iterable[str]) -> str:
    """Render an INSERT binding each column to the parameter of its name."""
    check_identifier(name)
    columns = [check_identifier(c) for c in columns]
    if not columns:
        return f"INSERT INTO {name} DEFAULT VALUES"
    placeholders = ",".join(f"${c}" for c in columns)
    return f"INSERT INTO {name} ({','.join(columns)}) VALUES ({placeholders})"
