"""
Unit tests for configuration loading.

Tests cover:
- Defaults
- YAML loading from strings and files
- SQLSHAPE_DB override
- Invalid documents
"""

from pathlib import Path

import pytest

from sqlshape.config import (
    DB_PATH_ENV,
    DEFAULT_DB_PATH,
    DatabaseConfig,
    load_config,
    load_config_from_string,
)
from sqlshape.errors import ConfigError


@pytest.fixture(autouse=True)
def no_db_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the caller's environment out of these tests."""
    monkeypatch.delenv(DB_PATH_ENV, raising=False)


class TestDatabaseConfig:
    """Tests for the DatabaseConfig model."""

    def test_defaults(self) -> None:
        """Every field has a default."""
        config = DatabaseConfig()
        assert config.path == Path(DEFAULT_DB_PATH)
        assert config.foreign_keys is True
        assert config.timeout_seconds == 5.0
        assert config.log_level == "WARNING"
        assert config.json_logs is False

    def test_frozen(self) -> None:
        """Configs are immutable."""
        config = DatabaseConfig()
        with pytest.raises(Exception):
            config.path = Path("other.db")  # type: ignore[misc]

    def test_negative_timeout_rejected(self) -> None:
        """Timeouts can't be negative."""
        with pytest.raises(Exception):
            DatabaseConfig(timeout_seconds=-1)


class TestLoadConfig:
    """Tests for the YAML loaders."""

    def test_from_string(self, sample_config_yaml: str) -> None:
        """All keys are read."""
        config = load_config_from_string(sample_config_yaml)
        assert config.path == Path("./app.db")
        assert config.foreign_keys is False
        assert config.timeout_seconds == 10
        assert config.log_level == "DEBUG"
        assert config.json_logs is True

    def test_from_file(self, temp_dir: Path, sample_config_yaml: str) -> None:
        """Files are read the same way as strings."""
        path = temp_dir / "sqlshape.yaml"
        path.write_text(sample_config_yaml)
        assert load_config(path) == load_config_from_string(sample_config_yaml)

    def test_none_gives_defaults(self) -> None:
        """No file means the defaults."""
        assert load_config(None) == DatabaseConfig()

    def test_empty_document(self) -> None:
        """An empty document means the defaults."""
        assert load_config_from_string("") == DatabaseConfig()

    def test_missing_file(self, temp_dir: Path) -> None:
        """A missing file is a FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_config(temp_dir / "missing.yaml")

    def test_unknown_key(self) -> None:
        """Unknown keys are rejected."""
        with pytest.raises(ConfigError) as exc_info:
            load_config_from_string("path: x.db\npool_size: 4\n")
        assert "pool_size" in exc_info.value.underlying_error

    def test_not_a_mapping(self) -> None:
        """The top level must be a mapping."""
        with pytest.raises(ConfigError) as exc_info:
            load_config_from_string("- a\n- b\n")
        assert "mapping" in str(exc_info.value)

    def test_bad_yaml(self) -> None:
        """YAML syntax errors become ConfigError."""
        with pytest.raises(ConfigError):
            load_config_from_string("path: [unclosed\n")

    def test_bad_yaml_file(self, temp_dir: Path) -> None:
        """YAML syntax errors in files name the file."""
        path = temp_dir / "broken.yaml"
        path.write_text("path: [unclosed\n")
        with pytest.raises(ConfigError) as exc_info:
            load_config(path)
        assert exc_info.value.source == str(path)


class TestEnvironmentOverride:
    """Tests for SQLSHAPE_DB."""

    def test_env_overrides_default(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """The variable replaces the default path."""
        monkeypatch.setenv(DB_PATH_ENV, "/tmp/env.db")
        assert load_config().path == Path("/tmp/env.db")

    def test_env_overrides_file(
        self,
        monkeypatch: pytest.MonkeyPatch,
        sample_config_yaml: str,
    ) -> None:
        """The variable wins over the document and keeps other keys."""
        monkeypatch.setenv(DB_PATH_ENV, "/tmp/env.db")
        config = load_config_from_string(sample_config_yaml)
        assert config.path == Path("/tmp/env.db")
        assert config.log_level == "DEBUG"

    def test_empty_env_ignored(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """An empty variable is ignored."""
        monkeypatch.setenv(DB_PATH_ENV, "")
        assert load_config().path == Path(DEFAULT_DB_PATH)
