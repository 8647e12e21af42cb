"""Database layer for bonusledger application."""

from bonusledger.database.base import Database
from bonusledger.database.factories import create_database, create_sqlite_database

__all__ = ["Database", "create_database", "create_sqlite_database"]
