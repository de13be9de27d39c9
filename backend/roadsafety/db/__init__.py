"""Database module for SQLAlchemy connections and table definitions."""

from .connection import init_db, get_db_engine, check_db_health, close_db
from .tables import (
    metadata,
    accidents_table,
    hotspots_table,
    countermeasures_table,
    projects_table,
)

__all__ = [
    "init_db",
    "get_db_engine",
    "check_db_health",
    "close_db",
    "metadata",
    "accidents_table",
    "hotspots_table",
    "countermeasures_table",
    "projects_table",
]
