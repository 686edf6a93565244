"""Database layer for piggybank application."""

from piggybank.database.base import Database, NewSplit
from piggybank.database.factories import (
    DEFAULT_OWNER_ID,
    create_database,
    create_sqlite_database,
)

__all__ = [
    "DEFAULT_OWNER_ID",
    "Database",
    "NewSplit",
    "create_database",
    "create_sqlite_database",
]
