"""Database factory functions for creating database instances."""

from pathlib import Path
from typing import Optional

from fintrack.config import get_settings
from fintrack.database.sqlalchemy_db import SQLAlchemyDatabase

DEFAULT_DB_DIR = Path.home() / ".fintrack"


def resolve_database_path(database_path: Optional[str] = None) -> Path:
    """Pick the SQLite file to use.

    An explicit path wins, then FINTRACK_DB_PATH, then ~/.fintrack/fintrack.db.
    The parent directory is created if it does not exist yet.
    """
    path = database_path or get_settings().app.db_path
    resolved = Path(path).expanduser() if path else DEFAULT_DB_DIR / "fintrack.db"
    resolved.parent.mkdir(parents=True, exist_ok=True)
    return resolved


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a SQLite database instance.

    Args:
        database_path: Path to SQLite database file (see ``resolve_database_path``)

    Returns:
        SQLAlchemyDatabase instance configured for SQLite
    """
    return SQLAlchemyDatabase(f"sqlite:///{resolve_database_path(database_path)}")
