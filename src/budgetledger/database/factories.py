"""Database factory functions for creating database instances."""

import os
from pathlib import Path
from typing import Optional

from budgetledger.database.sqlalchemy_db import SQLAlchemyDatabase


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a SQLite database instance.

    Args:
        database_path: Path to SQLite database file. If None, checks BUDGETLEDGER_DB_PATH
            environment variable, then defaults to ~/.budgetledger/budgetledger.db

    Returns:
        SQLAlchemyDatabase instance configured for SQLite, with foreign keys
        enforced and savepoints available for nested units of work
    """
    if database_path is None:
        # Check environment variable
        database_path = os.environ.get("BUDGETLEDGER_DB_PATH")

    if database_path is None:
        # Default to ~/.budgetledger/budgetledger.db
        home = Path.home()
        db_dir = home / ".budgetledger"
        db_dir.mkdir(exist_ok=True)
        database_path = str(db_dir / "budgetledger.db")

    database_url = f"sqlite:///{database_path}"
    return SQLAlchemyDatabase(database_url)
