"""
Schema definitions for sqlshape.

This module defines the table-definition models and the translator that
derives them from a Pydantic model:
- FieldType/Field: One column, its SQL type and its constraints
- UniqueConstraint: A named multi-column UNIQUE constraint
- TableDefinition: Every column and constraint of one table
- column(): Structured per-field SQL metadata for model authors

The translator reads the model's JSON schema, so whatever Pydantic reports
as a property (in declaration order) becomes a column.

Design Decisions:
    - Only integer, number, string and date kinds map to columns; anything
      else raises UnsupportedFieldTypeError instead of guessing
    - A field is NOT NULL when its declared kind admits null; this polarity
      is kept as-is for compatibility with existing tables
    - Pydantic defaults are rendered as SQL literals from a closed set of
      kinds, while sql_default is trusted and copied verbatim
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field as PydanticField

from sqlshape.errors import UnsupportedFieldTypeError

# Key under which column() stores its metadata in the JSON schema
SQL_METADATA_KEY = "sqlshape"


# =============================================================================
# Enums
# =============================================================================


class FieldType(str, Enum):
    """SQLite column type of a field."""

    INTEGER = "INTEGER"
    TEXT = "TEXT"
    DATE = "DATE"


# JSON schema kind -> column type
KIND_FIELD_TYPES: dict[str, FieldType] = {
    "integer": FieldType.INTEGER,
    "number": FieldType.INTEGER,
    "string": FieldType.TEXT,
}

# JSON schema string formats with a dedicated column type
FORMAT_FIELD_TYPES: dict[str, FieldType] = {
    "date": FieldType.DATE,
}


class FieldFeatures:
    """
    Markers recognised in a field description.

    ``unique`` and ``primary`` match anywhere in the text, so
    ``Field(description="primary key")`` marks the primary key. Group
    markers are read from the comma-separated tokens, e.g.
    ``Field(description="unique_pair,unique_other")``; since they contain
    ``unique`` they also make the column UNIQUE on its own. Prefer
    ``column()`` for precise control.
    """

    unique = "unique"
    primary = "primary"

    @staticmethod
    def named_uniqueness(name: str) -> str:
        """Marker adding a field to the uniqueness group ``name``."""
        return f"unique_{name}"


# =============================================================================
# Table Definition Models
# =============================================================================


class Field(BaseModel):
    """
    A single column derived from a model field.

    Attributes:
        name: Column name (the model field name)
        type: SQLite column type
        not_null: Whether the column carries NOT NULL
        primary_key: Whether the column is the PRIMARY KEY
        unique: Whether the column carries a single-column UNIQUE
        default: SQL literal for the DEFAULT clause, if any
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str
    type: FieldType
    not_null: bool = False
    primary_key: bool = False
    unique: bool = False
    default: str | None = None


class UniqueConstraint(BaseModel):
    """
    A named UNIQUE constraint spanning one or more columns.

    Attributes:
        name: Constraint name, unique within the table
        fields: Member columns in the order they were declared
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str
    fields: tuple[str, ...]


class TableDefinition(BaseModel):
    """Columns and constraints of one table."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    fields: tuple[Field, ...]
    unique_constraints: tuple[UniqueConstraint, ...] = ()

    @property
    def column_names(self) -> list[str]:
        """Names of all columns in declaration order."""
        return [f.name for f in self.fields]

    def get_field(self, name: str) -> Field | None:
        """Look up a column by name."""
        for f in self.fields:
            if f.name == name:
                return f
        return None


# =============================================================================
# Column Metadata
# =============================================================================


def column(
    default: Any = ...,
    *,
    primary_key: bool = False,
    unique: bool = False,
    unique_groups: list[str] | tuple[str, ...] = (),
    sql_default: str | None = None,
    **kwargs: Any,
) -> Any:
    """
    Declare a model field together with its SQL metadata.

    A thin wrapper over ``pydantic.Field`` that records the column flags in
    the field's JSON schema, where the translator picks them up.

    Args:
        default: Pydantic default (``...`` for a required field)
        primary_key: Emit PRIMARY KEY for this column
        unique: Emit a single-column UNIQUE for this column
        unique_groups: Names of multi-column UNIQUE constraints to join
        sql_default: Raw SQL literal for the DEFAULT clause (not escaped)
        **kwargs: Passed through to ``pydantic.Field``

    Example:
        class User(BaseModel):
            id: int = column(primary_key=True)
            email: str = column(unique=True)
    """
    metadata: dict[str, Any] = {}
    if primary_key:
        metadata["primary_key"] = True
    if unique:
        metadata["unique"] = True
    if unique_groups:
        metadata["unique_groups"] = list(unique_groups)
    if sql_default is not None:
        metadata["sql_default"] = sql_default

    extra = dict(kwargs.pop("json_schema_extra", None) or {})
    if metadata:
        extra[SQL_METADATA_KEY] = metadata
    return PydanticField(default, json_schema_extra=extra or None, **kwargs)


# =============================================================================
# Translation
# =============================================================================


def _resolve_kind(prop: dict[str, Any]) -> tuple[list[dict[str, Any]], bool]:
    """Split a property schema into its non-null variants and a null flag."""
    if "anyOf" in prop:
        variants = prop["anyOf"]
    elif isinstance(prop.get("type"), list):
        variants = [{**prop, "type": t} for t in prop["type"]]
    else:
        return [prop], False

    kinds = [v for v in variants if v.get("type") != "null"]
    return kinds, len(kinds) != len(variants)


def _kind_label(variant: dict[str, Any]) -> str:
    """Describe a JSON schema variant for error messages."""
    if "$ref" in variant:
        return variant["$ref"].rsplit("/", 1)[-1]
    if "format" in variant:
        return f"{variant.get('type')}({variant['format']})"
    return str(variant.get("type", "any"))


def _field_type(model: str, name: str, kinds: list[dict[str, Any]]) -> FieldType:
    """Map the non-null variants of a property to a column type."""
    if len(kinds) != 1:
        raise UnsupportedFieldTypeError(
            model=model,
            field_name=name,
            kind="|".join(_kind_label(k) for k in kinds) or "null",
        )

    kind = kinds[0]
    field_type = KIND_FIELD_TYPES.get(kind.get("type", ""))
    if field_type is FieldType.TEXT and kind.get("format") in FORMAT_FIELD_TYPES:
        field_type = FORMAT_FIELD_TYPES[kind["format"]]
    if field_type is None:
        raise UnsupportedFieldTypeError(
            model=model,
            field_name=name,
            kind=_kind_label(kind),
        )
    return field_type


def default_to_sql(value: Any) -> str | None:
    """
    Render a Pydantic default as an SQL literal.

    Only numbers, strings and booleans are rendered; ``None`` (and any
    other value) yields no DEFAULT clause.
    """
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str):
        return "'" + value.replace("'", "''") + "'"
    return None


def _description_tokens(description: str) -> list[str]:
    if not description:
        return []
    return [token.strip() for token in description.split(",")]


def model_to_table(schema: type[BaseModel]) -> TableDefinition:
    """
    Derive the table definition of a Pydantic model.

    Args:
        schema: The model describing a full stored row

    Returns:
        TableDefinition with one Field per model property, in declaration
        order, and the UniqueConstraints named by the fields

    Raises:
        UnsupportedFieldTypeError: If a property has no column type
    """
    json_schema = schema.model_json_schema()
    fields: list[Field] = []
    groups: dict[str, list[str]] = {}

    prefix = FieldFeatures.named_uniqueness("")

    for name, prop in json_schema.get("properties", {}).items():
        kinds, nullable = _resolve_kind(prop)
        metadata = prop.get(SQL_METADATA_KEY, {})
        description = prop.get("description") or ""
        tokens = _description_tokens(description)

        if "sql_default" in metadata:
            default = metadata["sql_default"]
        else:
            default = default_to_sql(prop.get("default"))

        fields.append(
            Field(
                name=name,
                type=_field_type(schema.__name__, name, kinds),
                not_null=nullable,
                primary_key=(
                    bool(metadata.get("primary_key"))
                    or FieldFeatures.primary in description
                ),
                unique=bool(metadata.get("unique")) or FieldFeatures.unique in description,
                default=default,
            )
        )

        group_names = list(metadata.get("unique_groups", []))
        group_names += [t[len(prefix):] for t in tokens if t.startswith(prefix)]
        for group in group_names:
            members = groups.setdefault(group, [])
            if name not in members:
                members.append(name)

    return TableDefinition(
        fields=tuple(fields),
        unique_constraints=tuple(
            UniqueConstraint(name=group, fields=tuple(members))
            for group, members in groups.items()
        ),
    )
