"""ApplyService — run the bootstrap step against a namespace map.

Pipeline: LOAD MAP → LOAD BASE SETTINGS → APPLY → HOOKS → REPORT
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from nsmgr.domain.bootstrap import RECENT_CHANGES_PAGE, apply_namespace_map
from nsmgr.domain.errors import NamespaceConfigError
from nsmgr.infrastructure.documents import load_namespace_map, load_settings
from nsmgr.services.base import BaseService
from nsmgr.services.result import ServiceResult

if TYPE_CHECKING:
    from pathlib import Path

    from nsmgr.domain.namespaces import NamespaceMap
    from nsmgr.domain.settings import WikiSettings

logger = logging.getLogger(__name__)


class ApplyService(BaseService):
    """Applies a namespace map to wiki settings."""

    def _load_map(self, map_path: Path | None) -> NamespaceMap:
        path = map_path or self._settings.map_path
        return load_namespace_map(path, default_admin=self._settings.namespaces.global_admin)

    def _bootstrap(
        self,
        map_path: Path | None,
        base: Path | None,
        warnings: list[str],
    ) -> tuple[NamespaceMap, WikiSettings]:
        namespace_map = self._load_map(map_path)
        settings = apply_namespace_map(namespace_map, load_settings(base))
        self._call_hook(
            "post_apply",
            warnings,
            settings=settings,
            namespaces=list(namespace_map.namespaces),
        )
        return namespace_map, settings

    def apply(
        self,
        map_path: Path | None = None,
        *,
        base: Path | None = None,
        variable: str | None = None,
    ) -> ServiceResult:
        """Apply the map and return the resulting settings (or one variable of them).

        *base* is a settings snapshot to apply on top of; without it the
        map is applied to empty settings.
        """
        op = "apply"
        warnings: list[str] = []

        try:
            namespace_map, settings = self._bootstrap(map_path, base, warnings)
            data: dict[str, Any] = {
                "namespaces": list(namespace_map.namespaces),
                "global_admin": namespace_map.global_admin,
            }
            if variable is not None:
                data["variable"] = variable.lstrip("$")
                data["value"] = settings.variable(variable)
            else:
                data["settings"] = settings.to_document()
        except NamespaceConfigError as exc:
            return self._failure(op, exc, warnings)

        logger.info("Applied %d namespaces", len(namespace_map))
        return ServiceResult(ok=True, op=op, data=data, warnings=warnings)

    def check(self, map_path: Path | None = None) -> ServiceResult:
        """Validate a namespace map without printing the settings."""
        op = "check"

        try:
            namespace_map = self._load_map(map_path)
            apply_namespace_map(namespace_map)
        except NamespaceConfigError as exc:
            return self._failure(op, exc)

        items = [
            {
                "name": name,
                "id": conf.id,
                "talk_id": conf.talk_id,
                "constant": conf.constant,
                "group": conf.group,
                "permission": conf.permission,
                "locked": conf.is_locked_down,
            }
            for name, conf in namespace_map.namespaces.items()
        ]
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "count": len(items),
                "global_admin": namespace_map.global_admin,
                "items": items,
            },
        )

    def recent_changes(
        self,
        map_path: Path | None = None,
        *,
        page: str = RECENT_CHANGES_PAGE,
        base: Path | None = None,
    ) -> ServiceResult:
        """Query conditions plugins add for changes-list *page*."""
        op = "recent_changes"
        warnings: list[str] = []

        try:
            _, settings = self._bootstrap(map_path, base, warnings)
        except NamespaceConfigError as exc:
            return self._failure(op, exc, warnings)

        conds: list[str] = []
        self._call_hook("changes_list_query", warnings, name=page, conds=conds, settings=settings)
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "page": page,
                "hidden": list(settings.namespace_hide_from_rc),
                "conditions": conds,
            },
            warnings=warnings,
        )
