"""SQLite database engine and layer/widget schema via SQLAlchemy Core."""

from strata.infrastructure.database.engine import create_db_engine, init_database
from strata.infrastructure.database.schema import layers, metadata, widgets

__all__ = [
    "create_db_engine",
    "init_database",
    "layers",
    "metadata",
    "widgets",
]
