"""Database engine setup for SQLite with WAL mode.

The DB is stored at {site_root}/.strata/strata.db.

SQLAlchemy Core (not ORM) is used: layer metadata is read in bulk and
cached, so identity maps and sessions buy nothing.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine

from strata.infrastructure.database.schema import metadata

DATA_DIRNAME = ".strata"
DB_FILENAME = "strata.db"


def create_db_engine(db_path: Path) -> Engine:
    """Create a SQLite engine with WAL mode enabled."""
    engine = create_engine(f"sqlite:///{db_path}", echo=False)

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn: Any, _: Any) -> None:
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    return engine


def init_database(site_root: Path) -> Engine:
    """Initialize the strata database at ``{site_root}/.strata/strata.db``.

    Creates the ``.strata/`` directory (and its ``plugins/`` folder) and
    all tables from :data:`schema.metadata`.

    Idempotent — safe to call on an existing site.
    """
    data_dir = site_root / DATA_DIRNAME
    data_dir.mkdir(parents=True, exist_ok=True)
    (data_dir / "plugins").mkdir(exist_ok=True)

    engine = create_db_engine(data_dir / DB_FILENAME)
    metadata.create_all(engine)
    return engine
