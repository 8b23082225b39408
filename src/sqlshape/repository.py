"""
Generic repository for sqlshape.

A BaseRepository binds one table to two Pydantic models:
    - schema (T): the full stored row, used to parse every query result
    - create_schema (V): the caller-supplied subset of columns for inserts

The table is created from ``schema`` when the repository is constructed.
Every method then runs exactly one statement (create runs two: the insert
and the read-back) and returns parsed models.

Usage:
    class User(BaseModel):
        id: int = column(primary_key=True)
        email: str = column(unique=True)
        name: str

    class NewUser(BaseModel):
        email: str
        name: str

    users = BaseRepository(conn, "users", User, NewUser)
    alice = users.create({"email": "a@b.com", "name": "A"})
    assert users.get_by_id(alice.id) == alice

Errors from the driver (sqlite3.IntegrityError on a UNIQUE violation,
sqlite3.OperationalError on an unknown column, ...) and from Pydantic
(ValidationError on a row that doesn't fit ``schema``) are not caught here.
"""

import sqlite3
from collections.abc import Mapping
from datetime import date, datetime
from typing import Any, Generic, TypeVar

from pydantic import BaseModel

from sqlshape.errors import RecordNotFoundError
from sqlshape.log import get_logger
from sqlshape.schema import TableDefinition, model_to_table
from sqlshape.sql import (
    check_identifier,
    create_table_sql,
    insert_sql,
    select_by_id_sql,
    select_sql,
)

T = TypeVar("T", bound=BaseModel)
V = TypeVar("V", bound=BaseModel)

# Values accepted in a filter mapping
FilterValue = str | int | float | bool | date | datetime | None

log = get_logger(__name__)


def _bind_value(value: Any) -> Any:
    """Convert a filter value into something sqlite3 binds natively."""
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return value


class BaseRepository(Generic[T, V]):
    """
    Typed create/read access to one table.

    The database handle is shared: several repositories may use the same
    connection, and none of them closes it.
    """

    def __init__(
        self,
        database: sqlite3.Connection,
        name: str,
        schema: type[T],
        create_schema: type[V],
    ) -> None:
        """
        Bind the repository and create its table if needed.

        Args:
            database: Open SQLite connection (owned by the caller)
            name: Table name
            schema: Model of a full stored row
            create_schema: Model of the input accepted by create()

        Raises:
            UnsupportedFieldTypeError: If ``schema`` has an unmappable field
            InvalidIdentifierError: If the table or a column name is malformed
        """
        self._database = database
        self._name = check_identifier(name)
        self._schema = schema
        self._create_schema = create_schema
        self._table = model_to_table(schema)

        sql = create_table_sql(name, self._table)
        log.info("table.create", table=name, sql=sql)
        self._database.execute(sql)

    @property
    def name(self) -> str:
        return self._name

    @property
    def schema(self) -> type[T]:
        return self._schema

    @property
    def create_schema(self) -> type[V]:
        return self._create_schema

    @property
    def table(self) -> TableDefinition:
        """The table definition derived from ``schema``."""
        return self._table

    # =========================================================================
    # Internals
    # =========================================================================

    def _execute(self, sql: str, params: Mapping[str, Any] | None = None) -> sqlite3.Cursor:
        log.debug("sql.execute", table=self._name, sql=sql)
        if params is None:
            return self._database.execute(sql)
        return self._database.execute(sql, dict(params))

    def _parse(self, cursor: sqlite3.Cursor, row: Any) -> T:
        columns = [d[0] for d in cursor.description]
        return self._schema.model_validate(dict(zip(columns, row)))

    # =========================================================================
    # Read Operations
    # =========================================================================

    def get_all(self) -> list[T]:
        """Every row of the table, parsed as ``schema``."""
        cursor = self._execute(select_sql(self._name))
        return [self._parse(cursor, row) for row in cursor.fetchall()]

    def get_all_where(self, where: Mapping[str, FilterValue]) -> list[T]:
        """
        Rows matching every key of ``where``.

        A ``None`` value matches NULL; any other value is compared for
        equality. An empty mapping matches every row.

        Args:
            where: Column name -> value to match
        """
        params = {key: _bind_value(value) for key, value in where.items()}
        cursor = self._execute(select_sql(self._name, where), params)
        return [self._parse(cursor, row) for row in cursor.fetchall()]

    def get_by_id(self, id: int) -> T | None:
        """
        The row whose ``id`` column equals ``id``.

        Returns:
            The parsed row, or None if no row matches
        """
        cursor = self._execute(select_by_id_sql(self._name), {"id": id})
        row = cursor.fetchone()
        if row is None:
            return None
        return self._parse(cursor, row)

    # =========================================================================
    # Write Operations
    # =========================================================================

    def create(self, data: V | Mapping[str, Any]) -> T:
        """
        Insert a row and return it as stored.

        Args:
            data: A ``create_schema`` instance, or a mapping validated
                  against it. Only the fields it sets become inserted
                  columns; the rest take their column DEFAULT.

        Returns:
            The new row, read back by its rowid

        Raises:
            ValidationError: If ``data`` doesn't fit ``create_schema``
            sqlite3.IntegrityError: If a NOT NULL/UNIQUE/PRIMARY KEY
                                    constraint rejects the row
            RecordNotFoundError: If the inserted row cannot be read back
        """
        if not isinstance(data, self._create_schema):
            data = self._create_schema.model_validate(data)
        values = data.model_dump(mode="json", by_alias=True, exclude_unset=True)

        cursor = self._execute(insert_sql(self._name, values), values)
        row_id = cursor.lastrowid

        created = self.get_by_id(row_id)
        if created is None:
            raise RecordNotFoundError(
                table=self._name,
                row_id=row_id,
            )
        return created
