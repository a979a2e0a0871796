"""Pluggy hook specifications for nsmgr.

The hooks mirror the points where the wiki host calls into a namespace
extension: once the namespace map has been applied, and while a
changes-list page (RecentChanges, Watchlist) builds its query.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pluggy

if TYPE_CHECKING:
    from nsmgr.domain.settings import WikiSettings

PROJECT_NAME = "nsmgr"

hookspec = pluggy.HookspecMarker(PROJECT_NAME)
hookimpl = pluggy.HookimplMarker(PROJECT_NAME)


class NsmgrHookSpec:
    """Hook specifications for the nsmgr plugin system."""

    @hookspec
    def post_apply(self, settings: WikiSettings, namespaces: list[str]) -> None:
        """Called after a namespace map is applied.

        Implementations may adjust *settings* in place.
        """

    @hookspec
    def changes_list_query(self, name: str, conds: list[str], settings: WikiSettings) -> None:
        """Called while a changes-list page builds its query.

        *name* is the special page name (e.g. ``Recentchanges``).
        Implementations append SQL conditions to *conds*.
        """
