"""
Handler implementations.

- PropertiesHandler: flat key=value file with an in-memory snapshot
- RelationalHandler: config table (MySQL or SQLite) with a read-through cache
"""

from easyconfig.handlers.base import Handler
from easyconfig.handlers.properties import PropertiesHandler
from easyconfig.handlers.relational import RelationalHandler

__all__ = ["Handler", "PropertiesHandler", "RelationalHandler"]
