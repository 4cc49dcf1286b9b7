"""
Core types for easy-config.

- Item: a single (module, key, value) configuration entry
- StorageKind: the backend families a Storage descriptor can select
- Module and table defaults shared by every backend
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

DEFAULT_MODULE = "DEFAULT"
DEFAULT_TABLE = "EASY_CONFIG_ITEMS"


class StorageKind(str, Enum):
    """Backend families."""

    PROPERTIES = "properties"
    MYSQL = "mysql"
    SQLITE = "sqlite"


@dataclass(frozen=True)
class Item:
    """A single configuration entry as returned by Handler.list()."""

    module: str
    key: str
    value: str

    def to_dict(self) -> dict[str, str]:
        """Convert to a plain dict."""
        return {"module": self.module, "key": self.key, "value": self.value}


def normalize_module(module: str | None) -> str:
    """Return the module name, falling back to DEFAULT_MODULE when blank."""
    if module is None or not module.strip():
        return DEFAULT_MODULE
    return module
