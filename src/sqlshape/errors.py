"""
Exception hierarchy for sqlshape.

All sqlshape exceptions inherit from SqlshapeError, allowing callers to catch
every library-specific failure with a single except clause.

Exception Categories:
    - SchemaError: A model cannot be translated into a table definition
    - RepositoryError: A repository operation broke its own contract
    - StorageError: The database file or its configuration is unusable

Errors raised by the SQLite driver while executing statements
(sqlite3.IntegrityError, sqlite3.OperationalError, ...) and validation
errors raised by Pydantic while parsing rows are NOT wrapped. They reach
the caller exactly as the driver or validator produced them.
"""

from dataclasses import dataclass, field
from typing import Any


# =============================================================================
# Error Codes
# =============================================================================

# Schema errors: 1xxx
ERROR_SCHEMA = 1000
ERROR_SCHEMA_UNSUPPORTED_TYPE = 1001
ERROR_SCHEMA_INVALID_IDENTIFIER = 1002

# Repository errors: 2xxx
ERROR_REPOSITORY = 2000
ERROR_REPOSITORY_RECORD_NOT_FOUND = 2001

# Storage errors: 3xxx
ERROR_STORAGE = 3000
ERROR_STORAGE_CONNECTION = 3001
ERROR_STORAGE_CONFIG = 3002


# =============================================================================
# Base Exception
# =============================================================================


@dataclass
class SqlshapeError(Exception):
    """
    Base exception for all sqlshape errors.

    Attributes:
        message: Human-readable error description
        code: Numeric error code for programmatic handling
        suggestion: Optional hint for how to resolve the error
        context: Optional dict with additional debugging info
    """

    message: str = ""
    code: int = 0
    suggestion: str | None = None
    context: dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        """Format error for display."""
        parts = [f"[E{self.code}] {self.message}"]
        if self.suggestion:
            parts.append(f"\nSuggestion: {self.suggestion}")
        return "".join(parts)

    def __repr__(self) -> str:
        """Format error for debugging."""
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"code={self.code}, "
            f"context={self.context!r})"
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "code": self.code,
            "suggestion": self.suggestion,
            "context": self.context,
        }


# =============================================================================
# Schema Errors
# =============================================================================


@dataclass
class SchemaError(SqlshapeError):
    """
    Base class for schema translation errors.

    Raised while deriving a table definition, i.e. at repository
    construction time, before any statement reaches the database.

    Attributes:
        model: Name of the model being translated
        field_name: Name of the offending field (if applicable)
    """

    model: str = ""
    field_name: str | None = None

    def __post_init__(self) -> None:
        """Set defaults after dataclass init."""
        if self.code == 0:
            self.code = ERROR_SCHEMA
        self.context.update({
            "model": self.model,
            "field_name": self.field_name,
        })


@dataclass
class UnsupportedFieldTypeError(SchemaError):
    """Raised when a field's kind has no SQL column type."""

    kind: str = ""

    def __post_init__(self) -> None:
        """Set defaults after dataclass init."""
        if not self.message:
            self.message = (
                f"Unsupported type for field {self.field_name!r} "
                f"of {self.model}: {self.kind}"
            )
        if self.code == 0:
            self.code = ERROR_SCHEMA_UNSUPPORTED_TYPE
        if not self.suggestion:
            self.suggestion = "Use int, float, str or date (optionally | None)"
        super().__post_init__()
        self.context["kind"] = self.kind


@dataclass
class InvalidIdentifierError(SchemaError):
    """Raised when a table or column name cannot be spliced into SQL."""

    identifier: str = ""

    def __post_init__(self) -> None:
        """Set defaults after dataclass init."""
        if not self.message:
            self.message = f"Invalid SQL identifier: {self.identifier!r}"
        if self.code == 0:
            self.code = ERROR_SCHEMA_INVALID_IDENTIFIER
        if not self.suggestion:
            self.suggestion = "Use letters, digits and underscores only"
        super().__post_init__()
        self.context["identifier"] = self.identifier


# =============================================================================
# Repository Errors
# =============================================================================


@dataclass
class RepositoryError(SqlshapeError):
    """
    Base class for repository errors.

    Attributes:
        table: Name of the table the repository manages
    """

    table: str = ""

    def __post_init__(self) -> None:
        """Set defaults after dataclass init."""
        if self.code == 0:
            self.code = ERROR_REPOSITORY
        self.context["table"] = self.table


@dataclass
class RecordNotFoundError(RepositoryError):
    """Raised when a freshly inserted row cannot be read back."""

    row_id: int | None = None

    def __post_init__(self) -> None:
        """Set defaults after dataclass init."""
        if not self.message:
            self.message = (
                f"Row {self.row_id} inserted into {self.table} "
                "could not be read back"
            )
        if self.code == 0:
            self.code = ERROR_REPOSITORY_RECORD_NOT_FOUND
        if not self.suggestion:
            self.suggestion = "Make sure the table's id column aliases the rowid"
        super().__post_init__()
        self.context["row_id"] = self.row_id


# =============================================================================
# Storage Errors
# =============================================================================


@dataclass
class StorageError(SqlshapeError):
    """
    Base class for database handle and configuration errors.

    Attributes:
        operation: The operation that failed (e.g., "connect", "load_config")
    """

    operation: str = ""

    def __post_init__(self) -> None:
        """Set defaults after dataclass init."""
        if self.code == 0:
            self.code = ERROR_STORAGE
        self.context["operation"] = self.operation


@dataclass
class StorageConnectionError(StorageError):
    """Raised when the database file cannot be opened."""

    db_path: str = ""

    def __post_init__(self) -> None:
        """Set defaults after dataclass init."""
        if not self.message:
            self.message = f"Failed to connect to database: {self.db_path}"
        if self.code == 0:
            self.code = ERROR_STORAGE_CONNECTION
        if not self.suggestion:
            self.suggestion = "Check that the database path is valid and writable"
        super().__post_init__()
        self.context["db_path"] = self.db_path


@dataclass
class ConfigError(StorageError):
    """Raised when a configuration document is invalid."""

    source: str = ""
    underlying_error: str = ""

    def __post_init__(self) -> None:
        """Set defaults after dataclass init."""
        if not self.message:
            self.message = f"Invalid configuration in {self.source}: {self.underlying_error}"
        if self.code == 0:
            self.code = ERROR_STORAGE_CONFIG
        super().__post_init__()
        self.context.update({
            "source": self.source,
            "underlying_error": self.underlying_error,
        })
