"""
Configuration for sqlshape.

A DatabaseConfig describes how to open the database file. It can be built
directly, loaded from YAML, or left at its defaults. The SQLSHAPE_DB
environment variable overrides the file path in every case.

Example YAML:
    path: ./app.db
    foreign_keys: true
    timeout_seconds: 10
    log_level: DEBUG
"""

import os
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from sqlshape.errors import ConfigError

DEFAULT_DB_PATH = "sqlshape.db"
DB_PATH_ENV = "SQLSHAPE_DB"


class DatabaseConfig(BaseModel):
    """
    How to open and log against the database.

    Attributes:
        path: SQLite database file (created on first connect)
        foreign_keys: Enable foreign key enforcement on connect
        timeout_seconds: How long the driver waits on a locked database
        log_level: Minimum log level used by configure_logging()
        json_logs: Emit JSON log lines instead of console text
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    path: Path = Field(
        default=Path(DEFAULT_DB_PATH),
        description="SQLite database file",
    )
    foreign_keys: bool = Field(
        default=True,
        description="Enable foreign key enforcement",
    )
    timeout_seconds: float = Field(
        default=5.0,
        description="Busy timeout passed to the SQLite driver",
        ge=0,
    )
    log_level: str = Field(
        default="WARNING",
        description="Minimum log level",
    )
    json_logs: bool = Field(
        default=False,
        description="Render logs as JSON lines",
    )


def _apply_env(data: dict) -> dict:
    env_path = os.environ.get(DB_PATH_ENV)
    if env_path:
        data = {**data, "path": env_path}
    return data


def _validate(data: object, source: str) -> DatabaseConfig:
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(
            operation="load_config",
            source=source,
            underlying_error="expected a mapping at the top level",
        )
    try:
        return DatabaseConfig.model_validate(_apply_env(data))
    except ValidationError as e:
        raise ConfigError(
            operation="load_config",
            source=source,
            underlying_error=str(e),
        ) from e


def load_config(path: Path | str | None = None) -> DatabaseConfig:
    """
    Load a database configuration from a YAML file.

    Args:
        path: Path to the YAML file, or None for the defaults

    Returns:
        Validated DatabaseConfig

    Raises:
        FileNotFoundError: If the file doesn't exist
        ConfigError: If the YAML doesn't match the schema
    """
    if path is None:
        return _validate({}, "<defaults>")

    path = Path(path)
    with path.open() as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(
                operation="load_config",
                source=str(path),
                underlying_error=str(e),
            ) from e

    return _validate(data, str(path))


def load_config_from_string(content: str) -> DatabaseConfig:
    """Load a database configuration from a YAML string."""
    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigError(
            operation="load_config",
            source="<string>",
            underlying_error=str(e),
        ) from e
    return _validate(data, "<string>")
