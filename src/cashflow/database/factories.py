"""Database factory functions for creating database instances."""

import os
from pathlib import Path
from typing import Optional

from cashflow.database.sqlalchemy_db import SQLAlchemyDatabase

DB_PATH_ENV_VAR = "CASHFLOW_DB_PATH"


def default_database_path() -> Path:
    """Return ~/.cashflow/cashflow.db, the per-user application data file."""
    return Path.home() / ".cashflow" / "cashflow.db"


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a SQLite database instance.

    Args:
        database_path: Path to SQLite database file. If None, checks CASHFLOW_DB_PATH
            environment variable, then defaults to ~/.cashflow/cashflow.db

    Returns:
        SQLAlchemyDatabase instance configured for SQLite
    """
    if database_path is None:
        database_path = os.environ.get(DB_PATH_ENV_VAR)

    if database_path is None:
        path = default_database_path()
        path.parent.mkdir(parents=True, exist_ok=True)
        database_path = str(path)

    database_url = f"sqlite:///{database_path}"
    return SQLAlchemyDatabase(database_url)
