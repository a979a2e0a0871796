"""RegistryService — the ``namespace_mgr`` table.

Imports a namespace map (or the map reconstructed from a settings
snapshot) into one row per namespace, lists and shows rows, and keeps
the schema at the Alembic head revision.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from alembic import command
from alembic.runtime.migration import MigrationContext
from alembic.script import ScriptDirectory
from sqlalchemy import delete, insert, inspect, select

from nsmgr.domain.errors import NamespaceConfigError
from nsmgr.domain.namespaces import DEFAULT_OWNER, parse_namespace_map
from nsmgr.domain.reconstruct import reconstruct_namespace_map
from nsmgr.infrastructure.database.migrations import build_config
from nsmgr.infrastructure.database.schema import namespace_mgr
from nsmgr.infrastructure.documents import load_namespace_map, load_settings
from nsmgr.services.base import BaseService
from nsmgr.services.result import ServiceError, ServiceResult

if TYPE_CHECKING:
    from pathlib import Path

    from sqlalchemy import Row

    from nsmgr.domain.namespaces import NamespaceConfig, NamespaceMap

logger = logging.getLogger(__name__)

# Stored in their own columns, not in the JSON blob.
_COLUMN_KEYS = ("id", "owner")


def _config_blob(conf: NamespaceConfig) -> str:
    document = conf.to_document()
    for key in _COLUMN_KEYS:
        document.pop(key, None)
    return json.dumps(document, sort_keys=True)


def _row_summary(row: Row[Any]) -> dict[str, Any]:
    return {
        "id": row.ns_id,
        "name": row.ns_name,
        "owner": row.ns_owner,
        "read_only": bool(row.ns_read_only),
    }


class RegistryService(BaseService):
    """Stores namespace definitions in the database."""

    def _load_source(
        self,
        map_path: Path | None,
        snapshot_path: Path | None,
    ) -> tuple[str, NamespaceMap]:
        admin = self._settings.namespaces.global_admin
        if snapshot_path is not None:
            document = reconstruct_namespace_map(
                load_settings(snapshot_path),
                ignore=self._settings.dump.ignore,
                fallback_admin=admin,
            )
            return str(snapshot_path), parse_namespace_map(document, default_admin=admin)
        path = map_path or self._settings.map_path
        return str(path), load_namespace_map(path, default_admin=admin)

    def import_config(
        self,
        *,
        map_path: Path | None = None,
        snapshot_path: Path | None = None,
    ) -> ServiceResult:
        """Replace the table contents with the namespaces of a map or snapshot.

        A snapshot, when given, takes precedence over *map_path*.
        """
        op = "import_config"

        try:
            source, namespace_map = self._load_source(map_path, snapshot_path)
        except NamespaceConfigError as exc:
            return self._failure(op, exc)

        rows = [
            {
                "ns_id": conf.id,
                "ns_name": name,
                "ns_owner": conf.owner or DEFAULT_OWNER,
                "ns_read_only": conf.id < 0,
                "ns_config": _config_blob(conf),
            }
            for name, conf in namespace_map.namespaces.items()
        ]

        with self._workspace.transaction() as conn:
            conn.execute(delete(namespace_mgr))
            if rows:
                conn.execute(insert(namespace_mgr), rows)

        logger.info("Imported %d namespaces from %s", len(rows), source)
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "source": source,
                "count": len(rows),
                "items": [
                    {
                        "id": r["ns_id"],
                        "name": r["ns_name"],
                        "owner": r["ns_owner"],
                        "read_only": r["ns_read_only"],
                    }
                    for r in rows
                ],
            },
        )

    def list_namespaces(self) -> ServiceResult:
        """All stored namespaces, ordered by id."""
        op = "list_namespaces"
        with self._workspace.transaction() as conn:
            rows = conn.execute(select(namespace_mgr).order_by(namespace_mgr.c.ns_id)).fetchall()
        items = [_row_summary(row) for row in rows]
        return ServiceResult(ok=True, op=op, data={"count": len(items), "items": items})

    def get_namespace(self, name: str) -> ServiceResult:
        """One stored namespace with its decoded configuration."""
        op = "get_namespace"
        with self._workspace.transaction() as conn:
            row = conn.execute(
                select(namespace_mgr).where(namespace_mgr.c.ns_name == name)
            ).first()

        if row is None:
            return ServiceResult(
                ok=False,
                op=op,
                error=ServiceError(
                    code="NOT_FOUND",
                    message=f"Namespace not found: {name}",
                    detail={"name": name},
                ),
            )

        data = _row_summary(row)
        data["config"] = json.loads(row.ns_config)
        return ServiceResult(ok=True, op=op, data=data)

    # ------------------------------------------------------------------
    # Schema migrations
    # ------------------------------------------------------------------

    def _table_exists(self) -> bool:
        """Tables created outside Alembic have no version row yet."""
        return namespace_mgr.name in inspect(self._workspace.engine).get_table_names()

    def check_pending(self) -> ServiceResult:
        """List pending migrations without applying them."""
        op = "upgrade"

        try:
            cfg = build_config(self._settings.db_path)
            script = ScriptDirectory.from_config(cfg)
            head = script.get_current_head()

            with self._workspace.engine.connect() as conn:
                current = MigrationContext.configure(conn).get_current_revision()

            pending: list[dict[str, Any]] = []
            if current != head and head is not None:
                rev = script.get_revision(head)
                while rev is not None and rev.revision != current:
                    pending.append({"revision": rev.revision, "description": rev.doc or ""})
                    down = rev.down_revision
                    if down is None:
                        break
                    rev = script.get_revision(str(down))
        except Exception as exc:
            return ServiceResult(
                ok=False,
                op=op,
                error=ServiceError(
                    code="CHECK_FAILED",
                    message=f"Failed to check migrations: {exc}",
                ),
            )

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "pending_count": len(pending),
                "pending": pending,
                "current": current,
                "head": head,
            },
        )

    def upgrade(self) -> ServiceResult:
        """Bring the schema to the head revision."""
        op = "upgrade"

        check = self.check_pending()
        if not check.ok:
            return check

        pending_count = check.data["pending_count"]
        if pending_count == 0:
            return ServiceResult(
                ok=True,
                op=op,
                data={
                    "applied_count": 0,
                    "current": check.data["head"],
                    "message": "Database is already up to date",
                },
            )

        try:
            cfg = build_config(self._settings.db_path)
            if check.data["current"] is None and self._table_exists():
                command.stamp(cfg, "head")
            else:
                command.upgrade(cfg, "head")
        except Exception as exc:
            return ServiceResult(
                ok=False,
                op=op,
                error=ServiceError(
                    code="MIGRATION_FAILED",
                    message=f"Migration failed: {exc}",
                ),
            )

        logger.info("Database upgraded to %s", check.data["head"])
        return ServiceResult(
            ok=True,
            op=op,
            data={"applied_count": pending_count, "current": check.data["head"]},
        )
