"""
Pytest configuration and fixtures for easy-config tests.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Generator
from unittest.mock import patch

import pytest

from easyconfig.config import clear_settings_cache
from easyconfig.handlers.relational import RelationalHandler
from easyconfig.storage import PropertiesStorage, SQLiteStorage, initialize


@pytest.fixture
def temp_dir(tmp_path: Path) -> Path:
    """Provide a temporary directory for test outputs."""
    return tmp_path


@pytest.fixture
def properties_path(temp_dir: Path) -> Path:
    """Path of a properties file that does not exist yet."""
    return temp_dir / "cfg.properties"


@pytest.fixture
def properties_storage(properties_path: Path) -> PropertiesStorage:
    return PropertiesStorage(properties_path)


@pytest.fixture
def sqlite_storage(temp_dir: Path) -> SQLiteStorage:
    return SQLiteStorage(temp_dir / "config.db")


@pytest.fixture
def sqlite_handler(sqlite_storage: SQLiteStorage) -> Generator[RelationalHandler, None, None]:
    """A relational handler for module "svc" on a fresh SQLite database."""
    handler = initialize(sqlite_storage, "svc")
    assert isinstance(handler, RelationalHandler)
    yield handler
    handler.close()


@pytest.fixture
def mock_env_vars(temp_dir: Path) -> Generator[dict[str, str], None, None]:
    """Point the settings at a properties file inside temp_dir."""
    env_vars = {
        "STORAGE_BACKEND": "properties",
        "PROPERTIES_PATH": str(temp_dir / "env.properties"),
        "SQLITE_PATH": str(temp_dir / "env.db"),
        "CONFIG_MODULE": "app",
        "LOG_LEVEL": "ERROR",
    }

    with patch.dict(os.environ, env_vars, clear=False):
        clear_settings_cache()
        yield env_vars


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """Automatically reset settings cache before and after each test."""
    clear_settings_cache()
    yield
    clear_settings_cache()
