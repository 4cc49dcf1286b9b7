"""
Tests for configuration module.
"""

from __future__ import annotations

import os
from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from easyconfig.config import Settings, clear_settings_cache, get_settings
from easyconfig.storage import MySQLStorage, PropertiesStorage, SQLiteStorage
from easyconfig.types import DEFAULT_TABLE, StorageKind


class TestSettingsValidation:
    """Tests for Settings validation."""

    def test_settings_loads_from_env(self, mock_env_vars: dict[str, str]) -> None:
        """Test that settings correctly loads from environment variables."""
        settings = get_settings()

        assert settings.STORAGE_BACKEND is StorageKind.PROPERTIES
        assert settings.PROPERTIES_PATH == Path(mock_env_vars["PROPERTIES_PATH"])
        assert settings.CONFIG_MODULE == "app"
        assert settings.LOG_LEVEL == "ERROR"

    def test_defaults(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            settings = Settings(_env_file=None)

        assert settings.STORAGE_BACKEND is StorageKind.PROPERTIES
        assert settings.DB_PORT == 3306
        assert settings.DB_TABLE == DEFAULT_TABLE
        assert settings.CONFIG_MODULE == "DEFAULT"

    def test_mysql_requires_user_and_database(self) -> None:
        with patch.dict(os.environ, {"STORAGE_BACKEND": "mysql"}, clear=True):
            with pytest.raises(ValidationError) as exc_info:
                Settings(_env_file=None)

        error_str = str(exc_info.value)
        assert "DB_USER" in error_str
        assert "DB_NAME" in error_str

    def test_invalid_backend(self) -> None:
        with patch.dict(os.environ, {"STORAGE_BACKEND": "redis"}, clear=True):
            with pytest.raises(ValidationError):
                Settings(_env_file=None)

    def test_invalid_table_name(self) -> None:
        with patch.dict(os.environ, {"DB_TABLE": "items;--"}, clear=True):
            with pytest.raises(ValidationError):
                Settings(_env_file=None)

    def test_port_range(self) -> None:
        with patch.dict(os.environ, {"DB_PORT": "70000"}, clear=True):
            with pytest.raises(ValidationError):
                Settings(_env_file=None)


class TestBuildStorage:
    """Tests for building Storage descriptors from settings."""

    def test_properties(self, mock_env_vars: dict[str, str]) -> None:
        storage = get_settings().build_storage()

        assert isinstance(storage, PropertiesStorage)
        assert storage.path == Path(mock_env_vars["PROPERTIES_PATH"])

    def test_sqlite(self, mock_env_vars: dict[str, str]) -> None:
        with patch.dict(os.environ, {"STORAGE_BACKEND": "sqlite", "DB_TABLE": "CFG"}):
            clear_settings_cache()
            storage = get_settings().build_storage()

        assert isinstance(storage, SQLiteStorage)
        assert storage.path == Path(mock_env_vars["SQLITE_PATH"])
        assert storage.table == "CFG"

    def test_mysql(self) -> None:
        env_vars = {
            "STORAGE_BACKEND": "mysql",
            "DB_HOST": "db.internal",
            "DB_PORT": "3307",
            "DB_USER": "cfg",
            "DB_PASSWORD": "secret",
            "DB_NAME": "settings",
        }
        with patch.dict(os.environ, env_vars, clear=True):
            storage = Settings(_env_file=None).build_storage()

        assert storage == MySQLStorage(
            host="db.internal",
            port=3307,
            user="cfg",
            password="secret",
            database="settings",
        )


class TestSettingsCache:
    """Tests for settings caching."""

    def test_get_settings_returns_cached_instance(
        self, mock_env_vars: dict[str, str]
    ) -> None:
        assert get_settings() is get_settings()

    def test_clear_settings_cache(self, mock_env_vars: dict[str, str]) -> None:
        first = get_settings()
        clear_settings_cache()
        assert get_settings() is not first


class TestRedactedDisplay:
    """Tests for redacted settings display."""

    def test_password_redacted(self) -> None:
        with patch.dict(os.environ, {"DB_PASSWORD": "hunter2"}, clear=True):
            display = Settings(_env_file=None).redacted_display()

        assert display["DB_PASSWORD"] == "***"
        assert "hunter2" not in str(display)

    def test_unset_password_shown_as_none(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            display = Settings(_env_file=None).redacted_display()

        assert display["DB_PASSWORD"] is None
        assert display["STORAGE_BACKEND"] == "properties"
