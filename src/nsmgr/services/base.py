"""BaseService — shared foundation for nsmgr services.

Every service receives a :class:`Workspace` at construction time and
owns its own transaction boundaries via ``self._workspace.transaction()``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from nsmgr.services.result import ServiceError, ServiceResult

if TYPE_CHECKING:
    from nsmgr.config.settings import NsmgrSettings
    from nsmgr.domain.errors import NamespaceConfigError
    from nsmgr.infrastructure.workspace import Workspace

logger = logging.getLogger(__name__)


class BaseService:
    """Base for all service-layer classes.

    Usage::

        class RegistryService(BaseService):
            def list_namespaces(self) -> ServiceResult:
                with self._workspace.transaction() as conn:
                    ...
    """

    def __init__(self, workspace: Workspace) -> None:
        self._workspace = workspace

    @property
    def _settings(self) -> NsmgrSettings:
        return self._workspace.settings

    @staticmethod
    def _failure(
        op: str,
        exc: NamespaceConfigError,
        warnings: list[str] | None = None,
    ) -> ServiceResult:
        """Turn a domain error into a failed result."""
        logger.debug("%s failed: %s", op, exc.message)
        return ServiceResult(
            ok=False,
            op=op,
            warnings=warnings or [],
            error=ServiceError(code=exc.code, message=exc.message, detail=exc.detail),
        )

    def _call_hook(self, hook_name: str, warnings: list[str], **kwargs: Any) -> None:
        """Dispatch a plugin hook.

        INVARIANT: Plugin failures are warnings, never errors.
        """
        self._workspace.plugins.call(hook_name, warnings, **kwargs)
