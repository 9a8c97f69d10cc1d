"""Database layer for rcdash application."""

from rcdash.database.base import Database
from rcdash.database.factories import (
    create_database,
    create_memory_database,
    create_sqlite_database,
)

__all__ = ["Database", "create_database", "create_memory_database", "create_sqlite_database"]
