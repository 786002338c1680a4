"""Database layer for budgetledger application."""

from budgetledger.database.base import Database
from budgetledger.database.factories import create_sqlite_database

__all__ = ["Database", "create_sqlite_database"]
