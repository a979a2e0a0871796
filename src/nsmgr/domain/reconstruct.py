"""Rebuild a namespace map from wiki settings (the reverse of bootstrap).

Walks every subject namespace the settings know about and reads back
what the bootstrap step would have written for it. The output is a plain
JSON-ready document that :func:`nsmgr.domain.namespaces.parse_namespace_map`
accepts, so a wiki's current setup can be captured and replayed.

The admin group is resolved in a first pass over all ``*`` lockdown
entries, so the result does not depend on namespace order.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import Any

from nsmgr.domain.bootstrap import FLOW_BOARD_MODEL
from nsmgr.domain.canonical import TALK_CONSTANT_SUFFIX, display_name, is_subject, talk_id
from nsmgr.domain.errors import ProtectionConflictError
from nsmgr.domain.namespaces import DEFAULT_ADMIN_GROUP, GLOBAL_ADMIN_KEY
from nsmgr.domain.permissions import (
    ADMIN_RIGHT,
    GroupResolver,
    build_permission_map,
    is_open_entry,
)
from nsmgr.domain.settings import WikiSettings

DEFAULT_IGNORED: tuple[str, ...] = (
    "Form",
    "Gadget",
    "Gadget_definition",
    "Concept",
    "Campaign",
    "Property",
    "Widget",
)


def _subject_namespaces(
    settings: WikiSettings, ignored: frozenset[str]
) -> Iterator[tuple[int, str]]:
    for ns_id, raw_name in settings.canonical_namespaces().items():
        name = display_name(raw_name)
        if not is_subject(ns_id) or name in ignored:
            continue
        yield ns_id, name


def _constant_names(settings: WikiSettings) -> dict[int, str]:
    names: dict[int, str] = {}
    for constant, value in settings.all_constants().items():
        if constant.endswith(TALK_CONSTANT_SUFFIX):
            continue
        names.setdefault(value, constant)
    return names


def _aliases_by_namespace(settings: WikiSettings) -> dict[int, list[str]]:
    by_namespace: dict[int, list[str]] = {}
    for alias, ns_id in settings.namespace_aliases.items():
        by_namespace.setdefault(ns_id, []).append(alias)
    return by_namespace


def _protection(settings: WikiSettings, ns_id: int, name: str) -> str | None:
    rights = settings.namespace_protection.get(ns_id)
    if not rights:
        return None
    if len(rights) > 1:
        msg = (
            "Can only handle one permission for now in wgNamespaceProtection! "
            f"Found {len(rights)} on {name}."
        )
        raise ProtectionConflictError(msg, namespace=name, rights=list(rights))
    return rights[0]


def _read_lockdown(
    settings: WikiSettings, resolver: GroupResolver, ns_id: int, name: str
) -> tuple[bool | list[str], str | None]:
    entries = settings.namespace_permission_lockdown.get(ns_id)
    if not entries:
        return False, None

    rights: list[str] = []
    group: str | None = None
    for right, groups in entries.items():
        if is_open_entry(groups):
            continue
        owner = resolver.observe_lockdown(name, right, groups)
        if right != ADMIN_RIGHT:
            rights.append(right)
            group = owner

    if rights:
        return rights, group
    # Admin-only lockdown: locked, but no rights granted to the owning group.
    return ([] if ADMIN_RIGHT in entries else False), group


def resolve_admin_group(
    settings: WikiSettings,
    *,
    ignore: Iterable[str] = (),
    fallback: str = DEFAULT_ADMIN_GROUP,
) -> str:
    """Find the admin group designated by ``*`` lockdown entries.

    Raises:
        AdminGroupConflictError: Two namespaces designate different groups.
        MultipleAdminsError: One ``*`` entry lists several groups.
    """
    ignored = frozenset(DEFAULT_IGNORED) | frozenset(ignore)
    resolver = GroupResolver()
    for ns_id, name in _subject_namespaces(settings, ignored):
        groups = settings.namespace_permission_lockdown.get(ns_id, {}).get(ADMIN_RIGHT)
        if groups is not None:
            resolver.observe_lockdown(name, ADMIN_RIGHT, groups)
    return resolver.admin_group or fallback


def reconstruct_namespace_map(
    settings: WikiSettings,
    *,
    ignore: Iterable[str] = (),
    fallback_admin: str = DEFAULT_ADMIN_GROUP,
) -> dict[str, Any]:
    """Build a namespace map document describing *settings*.

    Talk namespaces, virtual namespaces (negative ids) and the names in
    :data:`DEFAULT_IGNORED` plus *ignore* are skipped.
    """
    ignored = frozenset(DEFAULT_IGNORED) | frozenset(ignore)
    admin = resolve_admin_group(settings, ignore=ignore, fallback=fallback_admin)
    resolver = GroupResolver(admin)
    permission_map = build_permission_map(settings.group_permissions)
    constants = _constant_names(settings)
    aliases = _aliases_by_namespace(settings)

    document: dict[str, Any] = {GLOBAL_ADMIN_KEY: admin}
    for ns_id, name in _subject_namespaces(settings, ignored):
        talk = talk_id(ns_id)
        record: dict[str, Any] = {"id": ns_id}
        if ns_id in constants:
            record["constant"] = constants[ns_id]
        record["alias"] = aliases.get(ns_id, [])

        lockdown, group = _read_lockdown(settings, resolver, ns_id, name)
        if lockdown is not False:
            record["lockdown"] = lockdown

        permission = _protection(settings, ns_id, name)
        if permission is not None:
            record["permission"] = permission
            if group is None:
                group = resolver.infer_group(name, permission, permission_map)
        if group is not None:
            record["group"] = group

        record["useCollection"] = ns_id in settings.collection_article_namespaces
        if settings.namespace_content_models.get(talk) == FLOW_BOARD_MODEL:
            record["useFlowForTalk"] = True
        if ns_id in settings.namespace_content_models:
            record["contentModel"] = settings.namespace_content_models[ns_id]
        if ns_id in settings.namespaces_with_subpages:
            record["hasSubpages"] = settings.namespaces_with_subpages[ns_id]
        if ns_id in settings.namespaces_to_be_searched_default:
            record["defaultSearch"] = settings.namespaces_to_be_searched_default[ns_id]
        if ns_id in settings.visual_editor_available_namespaces:
            record["useVE"] = settings.visual_editor_available_namespaces[ns_id]
        if ns_id in settings.namespaces_with_semantic_links:
            record["useSMW"] = settings.namespaces_with_semantic_links[ns_id]
        if ns_id in settings.uf_allowed_namespaces:
            record["userFunctions"] = settings.uf_allowed_namespaces[ns_id]
        if ns_id in settings.cirrus_search_namespace_weights:
            record["searchWeight"] = settings.cirrus_search_namespace_weights[ns_id]
        if ns_id in settings.approved_revs_namespaces:
            record["useApprovedRevs"] = True
        elif settings.approved_revs_enabled_namespaces.get(ns_id) is False:
            record["useApprovedRevs"] = False
        if ns_id in settings.page_triage_namespaces:
            record["usePageTriage"] = True
        if ns_id in settings.page_images_namespaces:
            record["usePageImages"] = True
        if ns_id in settings.page_forms_autoedit_namespaces:
            record["autoEdit"] = True
        if ns_id in settings.content_namespaces:
            record["content"] = True
        if ns_id in settings.nonincludable_namespaces:
            record["includable"] = False

        document[name] = record
    return clean_defaults(document)


def clean_defaults(document: dict[str, Any]) -> dict[str, Any]:
    """Fill in the keys every dumped record carries, in place."""
    for record in document.values():
        if not isinstance(record, dict):
            continue
        record.setdefault("alias", [])
        record.setdefault("group", None)
        record.setdefault("includable", True)
        record.setdefault("lockdown", False)
        record.setdefault("permission", None)
    return document
