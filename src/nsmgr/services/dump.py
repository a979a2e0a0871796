"""DumpService — diagnostics over a wiki settings snapshot.

Reconstructs the namespace map a snapshot was built from, prints single
variables, and looks up a user's groups.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from nsmgr.domain.errors import NamespaceConfigError
from nsmgr.domain.namespaces import GLOBAL_ADMIN_KEY
from nsmgr.domain.reconstruct import reconstruct_namespace_map
from nsmgr.infrastructure.documents import load_settings
from nsmgr.services.base import BaseService
from nsmgr.services.result import ServiceError, ServiceResult

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

logger = logging.getLogger(__name__)


class DumpService(BaseService):
    """Read-only views over a settings snapshot."""

    def _snapshot(self, snapshot_path: Path | None) -> Path:
        return snapshot_path or self._settings.snapshot_path

    def dump_config(
        self,
        snapshot_path: Path | None = None,
        *,
        ignore: Iterable[str] | None = None,
    ) -> ServiceResult:
        """Rebuild the namespace map document that describes the snapshot."""
        op = "dump_config"
        ignored = list(self._settings.dump.ignore if ignore is None else ignore)

        try:
            settings = load_settings(self._snapshot(snapshot_path))
            document = reconstruct_namespace_map(
                settings,
                ignore=ignored,
                fallback_admin=self._settings.namespaces.global_admin,
            )
        except NamespaceConfigError as exc:
            return self._failure(op, exc)

        count = sum(1 for key in document if key != GLOBAL_ADMIN_KEY)
        logger.debug("Reconstructed %d namespaces (ignored: %s)", count, ignored)
        return ServiceResult(ok=True, op=op, data={"document": document, "count": count})

    def show_variable(self, name: str, snapshot_path: Path | None = None) -> ServiceResult:
        """Return a single settings variable."""
        op = "show_variable"

        try:
            settings = load_settings(self._snapshot(snapshot_path))
            value = settings.variable(name)
        except NamespaceConfigError as exc:
            return self._failure(op, exc)

        return ServiceResult(ok=True, op=op, data={"name": name.lstrip("$"), "value": value})

    def user_groups(self, user_id: int, snapshot_path: Path | None = None) -> ServiceResult:
        """Return the groups the snapshot lists for *user_id*."""
        op = "user_groups"

        try:
            settings = load_settings(self._snapshot(snapshot_path))
        except NamespaceConfigError as exc:
            return self._failure(op, exc)

        groups = settings.user_groups.get(user_id)
        if groups is None:
            return ServiceResult(
                ok=False,
                op=op,
                error=ServiceError(
                    code="UNKNOWN_USER",
                    message=f"No user with id {user_id}",
                    detail={"user_id": user_id},
                ),
            )
        return ServiceResult(ok=True, op=op, data={"user_id": user_id, "groups": list(groups)})
