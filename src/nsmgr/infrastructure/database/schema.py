"""SQLAlchemy Core table definitions for the nsmgr database.

One row per namespace. ``ns_config`` holds the namespace record as JSON,
minus the columns stored separately (id and owner).
"""

from __future__ import annotations

from sqlalchemy import Boolean, Column, Integer, MetaData, Table, Text

metadata = MetaData()

namespace_mgr = Table(
    "namespace_mgr",
    metadata,
    Column("ns_id", Integer, primary_key=True, autoincrement=False),
    Column("ns_name", Text, nullable=False, unique=True),
    Column("ns_owner", Text, nullable=False, default="core", server_default="core"),
    Column("ns_read_only", Boolean, nullable=False, default=False, server_default="0"),
    Column("ns_config", Text, nullable=False),  # JSON object
)
