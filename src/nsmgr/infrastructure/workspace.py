"""Workspace — the single dependency injected into every service.

Owns the resolved settings, the database engine, and the plugin
manager. Both the engine and the plugin manager are created lazily so
commands that never touch them (``--help``, ``apply``) stay cheap.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING

from nsmgr.infrastructure.database.engine import init_database
from nsmgr.infrastructure.database.migrations import stamp_head

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

    from sqlalchemy import Connection
    from sqlalchemy.engine import Engine

    from nsmgr.config.settings import NsmgrSettings
    from nsmgr.plugins.manager import PluginManager

logger = logging.getLogger(__name__)


class Workspace:
    """Settings plus lazily created storage and plugins."""

    def __init__(self, settings: NsmgrSettings) -> None:
        self._settings = settings
        self._engine: Engine | None = None
        self._plugins: PluginManager | None = None

    @property
    def settings(self) -> NsmgrSettings:
        return self._settings

    @property
    def root(self) -> Path:
        return self._settings.root

    @property
    def engine(self) -> Engine:
        """The database engine; creates and stamps the database on first use."""
        if self._engine is None:
            db_path = self._settings.db_path
            is_new = not db_path.exists()
            self._engine = init_database(db_path)
            if is_new:
                stamp_head(db_path)
                logger.debug("Created namespace database at %s", db_path)
        return self._engine

    @property
    def plugins(self) -> PluginManager:
        """Plugin manager with entry-point and built-in plugins registered."""
        if self._plugins is None:
            from nsmgr.plugins.builtins.recent_changes import RecentChangesPlugin
            from nsmgr.plugins.manager import PluginManager

            pm = PluginManager()
            pm.discover_and_load()
            pm.register_plugin(RecentChangesPlugin(), name="recent-changes-builtin")
            self._plugins = pm
        return self._plugins

    @contextmanager
    def transaction(self) -> Iterator[Connection]:
        """Database transaction: commit on success, roll back on error."""
        with self.engine.begin() as conn:
            yield conn

    def close(self) -> None:
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
