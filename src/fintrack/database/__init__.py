"""Persistence layer for fintrack."""

from fintrack.database.base import BalanceAdjustments, Database
from fintrack.database.factories import create_sqlite_database
from fintrack.database.sqlalchemy_db import SQLAlchemyDatabase

__all__ = ["BalanceAdjustments", "Database", "SQLAlchemyDatabase", "create_sqlite_database"]
