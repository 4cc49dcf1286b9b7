"""
Configuration management using pydantic-settings.

Loads the storage selection and logging options from environment variables
and .env files, and builds the matching Storage descriptor.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from easyconfig.handlers.schema import is_valid_identifier
from easyconfig.storage import MySQLStorage, PropertiesStorage, SQLiteStorage, Storage
from easyconfig.types import DEFAULT_MODULE, DEFAULT_TABLE, StorageKind


class Settings(BaseSettings):
    """Settings loaded from environment variables.

    Storage:
        STORAGE_BACKEND: properties, mysql or sqlite
        PROPERTIES_PATH: Properties file (properties backend)
        DB_HOST, DB_PORT, DB_USER, DB_PASSWORD, DB_NAME: MySQL connection
        DB_TABLE: Config table name (mysql and sqlite backends)
        SQLITE_PATH: Database file (sqlite backend)
        CONFIG_MODULE: Module namespace used by the CLI

    Logging:
        LOG_LEVEL: Logging level
        LOG_FILE: Optional JSON-lines log file
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    STORAGE_BACKEND: StorageKind = Field(
        default=StorageKind.PROPERTIES, description="Storage backend"
    )

    PROPERTIES_PATH: Path = Field(
        default=Path("config.properties"), description="Properties file path"
    )

    DB_HOST: str = Field(default="127.0.0.1", description="MySQL host")
    DB_PORT: int = Field(default=3306, ge=1, le=65535, description="MySQL port")
    DB_USER: str | None = Field(default=None, description="MySQL user")
    DB_PASSWORD: str = Field(default="", description="MySQL password")
    DB_NAME: str | None = Field(default=None, description="MySQL database name")
    DB_TABLE: str = Field(default=DEFAULT_TABLE, description="Config table name")

    SQLITE_PATH: Path = Field(
        default=Path("easy_config.db"), description="SQLite database path"
    )

    CONFIG_MODULE: str = Field(default=DEFAULT_MODULE, description="Default module namespace")

    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="WARNING", description="Logging level"
    )
    LOG_FILE: Path | None = Field(default=None, description="JSON log file")

    @field_validator("DB_TABLE")
    @classmethod
    def validate_table_name(cls, v: str) -> str:
        """Table names are interpolated into SQL, so only identifiers are allowed."""
        if not is_valid_identifier(v):
            raise ValueError("DB_TABLE must be a plain SQL identifier")
        return v

    @model_validator(mode="after")
    def validate_mysql_settings(self) -> Settings:
        """MySQL needs a user and a database name."""
        if self.STORAGE_BACKEND is StorageKind.MYSQL:
            missing = [
                name
                for name, value in (("DB_USER", self.DB_USER), ("DB_NAME", self.DB_NAME))
                if not value
            ]
            if missing:
                raise ValueError(
                    f"MySQL storage requires: {', '.join(missing)}"
                )
        return self

    def build_storage(self) -> Storage:
        """Build the Storage descriptor for the selected backend."""
        if self.STORAGE_BACKEND is StorageKind.MYSQL:
            return MySQLStorage(
                host=self.DB_HOST,
                port=self.DB_PORT,
                user=self.DB_USER or "",
                password=self.DB_PASSWORD,
                database=self.DB_NAME or "",
                table=self.DB_TABLE,
            )
        if self.STORAGE_BACKEND is StorageKind.SQLITE:
            return SQLiteStorage(path=self.SQLITE_PATH, table=self.DB_TABLE)
        return PropertiesStorage(path=self.PROPERTIES_PATH)

    def redacted_display(self) -> dict[str, str | int | None]:
        """Return settings with the database password redacted for display."""
        return {
            "STORAGE_BACKEND": self.STORAGE_BACKEND.value,
            "PROPERTIES_PATH": str(self.PROPERTIES_PATH),
            "DB_HOST": self.DB_HOST,
            "DB_PORT": self.DB_PORT,
            "DB_USER": self.DB_USER,
            "DB_PASSWORD": "***" if self.DB_PASSWORD else None,
            "DB_NAME": self.DB_NAME,
            "DB_TABLE": self.DB_TABLE,
            "SQLITE_PATH": str(self.SQLITE_PATH),
            "CONFIG_MODULE": self.CONFIG_MODULE,
            "LOG_LEVEL": self.LOG_LEVEL,
            "LOG_FILE": str(self.LOG_FILE) if self.LOG_FILE else None,
        }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings singleton.

    Raises:
        ValidationError: If settings are missing or invalid.
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing)."""
    get_settings.cache_clear()
