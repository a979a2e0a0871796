"""Create the namespace_mgr table.

Revision ID: 001_namespace_mgr
Revises: None
Create Date: 2026-09-14
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision: str = "001_namespace_mgr"
down_revision: str | None = None
branch_labels: tuple[str, ...] | None = None
depends_on: tuple[str, ...] | None = None


def upgrade() -> None:
    op.create_table(
        "namespace_mgr",
        sa.Column("ns_id", sa.Integer, primary_key=True, autoincrement=False),
        sa.Column("ns_name", sa.Text, nullable=False, unique=True),
        sa.Column("ns_owner", sa.Text, nullable=False, server_default="core"),
        sa.Column("ns_read_only", sa.Boolean, nullable=False, server_default="0"),
        sa.Column("ns_config", sa.Text, nullable=False),
    )


def downgrade() -> None:
    op.drop_table("namespace_mgr")
