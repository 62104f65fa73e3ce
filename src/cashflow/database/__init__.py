"""Database layer for cashflow application."""

from cashflow.database.base import Database
from cashflow.database.factories import create_sqlite_database

__all__ = ["Database", "create_sqlite_database"]
