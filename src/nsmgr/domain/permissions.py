"""Owning-group resolution for locked-down namespaces.

Three rules decide which group owns a namespace:

1. A lockdown entry for ``*`` naming exactly one group designates the
   global admin group. A later ``*`` entry naming a different group is a
   conflict; an entry naming several groups is ambiguous.
2. For any other locked right, the groups besides the admin group are
   the owners. More than one is an error; none means the admin owns it.
3. Without an explicit owner, the single non-admin group *granted* the
   namespace's permission owns it. More than one is an error.

INVARIANT: at most one admin group per configuration.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping

from nsmgr.domain.errors import (
    AdminGroupConflictError,
    AmbiguousGroupError,
    ExtraGroupsError,
    MultipleAdminsError,
)

ADMIN_RIGHT = "*"
EVERYONE = "*"

logger = logging.getLogger(__name__)

PermissionMap = dict[str, dict[str, bool]]


def build_permission_map(group_permissions: Mapping[str, Mapping[str, bool]]) -> PermissionMap:
    """Invert ``{group: {right: granted}}`` into ``{right: {group: granted}}``."""
    permission_map: PermissionMap = {}
    for group, rights in group_permissions.items():
        for right, granted in rights.items():
            permission_map.setdefault(right, {})[group] = granted
    return permission_map


def is_open_entry(groups: Iterable[str]) -> bool:
    """True for lockdown entries that grant a right to everyone."""
    return list(groups) == [EVERYONE]


class GroupResolver:
    """Carries the admin group across the namespaces of one configuration."""

    def __init__(self, admin_group: str | None = None) -> None:
        self.admin_group = admin_group

    def designate_admin(self, namespace: str, group: str) -> None:
        """Apply rule 1 for a single-group ``*`` entry."""
        if self.admin_group is None or self.admin_group == group:
            self.admin_group = group
            return
        msg = (
            f"New admin group ({group}) doesn't match previous one "
            f"({self.admin_group}) in {namespace} namespace."
        )
        raise AdminGroupConflictError(
            msg, namespace=namespace, previous=self.admin_group, found=group
        )

    def observe_lockdown(self, namespace: str, right: str, groups: Iterable[str]) -> str | None:
        """Feed one lockdown entry through rules 1 and 2.

        Returns the owning group for a regular right, or None for ``*``.
        """
        groups = list(groups)
        if right == ADMIN_RIGHT:
            if len(groups) > 1:
                msg = f"Don't know how to handle multiple admins for {namespace} namespace."
                raise MultipleAdminsError(msg, namespace=namespace, groups=groups)
            if groups:
                self.designate_admin(namespace, groups[0])
            return None
        return self.owning_group(namespace, groups)

    def owning_group(self, namespace: str, groups: Iterable[str]) -> str | None:
        """Rule 2: the one non-admin group among *groups*, else the admin."""
        candidates = [group for group in groups if group != self.admin_group]
        if len(candidates) > 1:
            msg = f"Found extra groups ({', '.join(candidates)}) in '{namespace}' namespace."
            raise ExtraGroupsError(msg, namespace=namespace, groups=candidates)
        if not candidates:
            return self.admin_group
        return candidates[0]

    def infer_group(
        self,
        namespace: str,
        permission: str,
        permission_map: Mapping[str, Mapping[str, bool]],
    ) -> str | None:
        """Rule 3: the one non-admin group granted *permission*, if any."""
        grants = permission_map.get(permission)
        if not grants:
            return None
        candidates = [
            group
            for group, granted in grants.items()
            if granted and group != self.admin_group and group != EVERYONE
        ]
        if len(candidates) > 1:
            msg = (
                f"There is more than one group with the '{permission}' permission: "
                f"{', '.join(candidates)}"
            )
            raise AmbiguousGroupError(
                msg, namespace=namespace, permission=permission, groups=candidates
            )
        if candidates:
            logger.debug("Inferred group %s for %s from %s", candidates[0], namespace, permission)
            return candidates[0]
        return None
