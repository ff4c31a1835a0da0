"""Database factory functions for creating database instances."""

import os
from pathlib import Path
from typing import Optional

from servicebook.database.sqlalchemy_db import SQLAlchemyDatabase

DATA_DIR_NAME = ".servicebook"


def default_data_dir() -> Path:
    """Return ~/.servicebook, creating it if needed."""
    data_dir = Path.home() / DATA_DIR_NAME
    data_dir.mkdir(exist_ok=True)
    return data_dir


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a SQLite database instance.

    Args:
        database_path: Path to SQLite database file. If None, checks SERVICEBOOK_DB_PATH
            environment variable, then defaults to ~/.servicebook/servicebook.db

    Returns:
        SQLAlchemyDatabase instance configured for SQLite
    """
    if database_path is None:
        database_path = os.environ.get("SERVICEBOOK_DB_PATH")

    if database_path is None:
        database_path = str(default_data_dir() / "servicebook.db")

    database_url = f"sqlite:///{database_path}"
    return SQLAlchemyDatabase(database_url)
