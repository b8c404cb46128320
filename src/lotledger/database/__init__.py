"""Database layer for lotledger application."""

from lotledger.database.base import Database
from lotledger.database.factories import create_sqlite_database

__all__ = ["Database", "create_sqlite_database"]
