"""SQLite storage for imported namespace records via SQLAlchemy Core."""

from nsmgr.infrastructure.database.engine import create_db_engine, init_database
from nsmgr.infrastructure.database.schema import metadata, namespace_mgr

__all__ = [
    "create_db_engine",
    "init_database",
    "metadata",
    "namespace_mgr",
]
