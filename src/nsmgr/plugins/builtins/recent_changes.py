"""Built-in plugin that hides secured namespaces from RecentChanges.

Secured namespaces (and their talk pages) are listed in
``wgNamespaceHideFromRC`` by the bootstrap step; this plugin turns that
list into a query condition for the ``Recentchanges`` special page only.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from nsmgr.domain.bootstrap import recent_changes_conditions
from nsmgr.plugins.hookspecs import hookimpl

if TYPE_CHECKING:
    from nsmgr.domain.settings import WikiSettings

logger = logging.getLogger(__name__)


class RecentChangesPlugin:
    """Adds ``rc_namespace NOT IN (...)`` for hidden namespaces."""

    @hookimpl
    def changes_list_query(self, name: str, conds: list[str], settings: WikiSettings) -> None:
        added = recent_changes_conditions(name, settings)
        if added:
            logger.debug("Hiding namespaces %s from %s", settings.namespace_hide_from_rc, name)
        conds.extend(added)
