"""SQLite storage for exported members via SQLAlchemy Core."""

from hafrag.infrastructure.database.engine import create_db_engine, init_database
from hafrag.infrastructure.database.schema import exported_members, metadata

__all__ = [
    "create_db_engine",
    "exported_members",
    "init_database",
    "metadata",
]
