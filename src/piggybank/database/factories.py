"""Database factory functions for creating database instances."""

import os
from pathlib import Path
from typing import Optional
from uuid import UUID

from piggybank.database.sqlalchemy_db import SQLAlchemyDatabase
from piggybank.logging_config import get_logger

logger = get_logger(__name__)

# Owner used when no PIGGYBANK_OWNER / --owner is given (single-user setups)
DEFAULT_OWNER_ID = UUID("00000000-0000-0000-0000-000000000001")


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a SQLite database instance.

    Args:
        database_path: Path to SQLite database file. If None, checks PIGGYBANK_DB_PATH
            environment variable, then defaults to ~/.piggybank/piggybank.db

    Returns:
        SQLAlchemyDatabase instance configured for SQLite
    """
    if database_path is None:
        # Check environment variable
        database_path = os.environ.get("PIGGYBANK_DB_PATH")

    if database_path is None:
        # Default to ~/.piggybank/piggybank.db
        home = Path.home()
        db_dir = home / ".piggybank"
        db_dir.mkdir(exist_ok=True)
        database_path = str(db_dir / "piggybank.db")

    logger.debug("Using SQLite database at %s", database_path)
    db = SQLAlchemyDatabase(f"sqlite:///{database_path}")
    db.database_path = database_path
    return db


def create_database(
    database_url: Optional[str] = None, isolation_level: Optional[str] = None
) -> SQLAlchemyDatabase:
    """Create a database from a SQLAlchemy URL.

    Args:
        database_url: SQLAlchemy URL. If None, checks PIGGYBANK_DB_URL and
            falls back to the SQLite file from create_sqlite_database.
        isolation_level: Engine isolation level. If None, checks
            PIGGYBANK_DB_ISOLATION.

    Returns:
        SQLAlchemyDatabase instance
    """
    if database_url is None:
        database_url = os.environ.get("PIGGYBANK_DB_URL")
    if isolation_level is None:
        isolation_level = os.environ.get("PIGGYBANK_DB_ISOLATION") or None

    if database_url is None:
        return create_sqlite_database()

    logger.debug("Using database URL %s", database_url)
    return SQLAlchemyDatabase(database_url, isolation_level=isolation_level)
