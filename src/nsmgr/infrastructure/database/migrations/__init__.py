"""Alembic migrations for the nsmgr database.

Configured programmatically — there is no alembic.ini. The revision
scripts live in ``versions/`` next to this module.
"""

from __future__ import annotations

from pathlib import Path

from alembic.config import Config


def db_url(db_path: Path) -> str:
    return f"sqlite:///{db_path}"


def build_config(db_path: Path) -> Config:
    """Build an Alembic Config pointing at our migration scripts."""
    cfg = Config()
    cfg.set_main_option("script_location", str(Path(__file__).parent))
    cfg.set_main_option("sqlalchemy.url", db_url(db_path))
    return cfg


def stamp_head(db_path: Path) -> None:
    """Mark a freshly created database as being at the head revision."""
    from alembic import command

    command.stamp(build_config(db_path), "head")
