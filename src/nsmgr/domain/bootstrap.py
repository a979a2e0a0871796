"""Apply a namespace map to wiki settings.

:func:`apply_namespace_map` is the bootstrap step: it takes the parsed map
and a :class:`WikiSettings` (the host's current configuration) and returns
a new settings object with every namespace wired in. The input settings
are never mutated.

Per namespace, in map order: secure (permissions, protection, lockdown),
check constants, aliases, extension switches, and finally the namespace
names themselves. PageTriage curation modules are synced at the end.
"""

from __future__ import annotations

import logging

from nsmgr.domain.canonical import CORE_NAMESPACES, TALK_SUFFIX
from nsmgr.domain.errors import ConstantMismatchError
from nsmgr.domain.namespaces import NamespaceConfig, NamespaceMap
from nsmgr.domain.permissions import ADMIN_RIGHT, EVERYONE
from nsmgr.domain.settings import WikiSettings

FLOW_BOARD_MODEL = "flow-board"
RECENT_CHANGES_PAGE = "Recentchanges"
EDIT_PROTECTED_GRANT = "editprotected"

# Rights left open on a locked namespace unless ``read`` itself is locked.
_OPEN_SUBJECT_RIGHTS = ("read",)
_OPEN_TALK_RIGHTS = ("read", "createtalk", "edit")

logger = logging.getLogger(__name__)


def _append_unique(values: list[int], value: int) -> None:
    if value not in values:
        values.append(value)


def _set_if_unset(settings: WikiSettings, namespace_id: int, right: str) -> None:
    lockdown = settings.namespace_permission_lockdown.setdefault(namespace_id, {})
    lockdown.setdefault(right, [EVERYONE])


def _secure_namespace(settings: WikiSettings, admin: str, conf: NamespaceConfig) -> None:
    const, talk = conf.id, conf.talk_id

    if conf.includable is False:
        _append_unique(settings.nonincludable_namespaces, const)

    if not (conf.group and conf.permission is not None):
        return

    permission = conf.permission
    settings.group_permissions.setdefault(EVERYONE, {})[permission] = False
    settings.group_permissions.setdefault(conf.group, {})[permission] = True
    settings.group_permissions.setdefault(admin, {})[permission] = True
    settings.grant_permissions.setdefault(EDIT_PROTECTED_GRANT, {})[permission] = True
    settings.namespace_protection[const] = [permission]
    settings.namespace_protection[talk] = [permission]
    _append_unique(settings.namespace_hide_from_rc, const)
    _append_unique(settings.namespace_hide_from_rc, talk)

    if not conf.is_locked_down:
        return

    for ns_id in (const, talk):
        lockdown = settings.namespace_permission_lockdown.setdefault(ns_id, {})
        lockdown[ADMIN_RIGHT] = [admin]
        for right in conf.lockdown_rights:
            lockdown[right] = [conf.group, admin]

    if "read" not in conf.lockdown_rights:
        for right in _OPEN_SUBJECT_RIGHTS:
            _set_if_unset(settings, const, right)
        for right in _OPEN_TALK_RIGHTS:
            _set_if_unset(settings, talk, right)


def _check_constant(settings: WikiSettings, name: str, value: int) -> None:
    known = settings.all_constants()
    if name not in known:
        settings.constants[name] = value
    elif known[name] != value:
        msg = f"{name} must be set to {known[name]}"
        raise ConstantMismatchError(msg, constant=name, expected=known[name], found=value)


def _setup_aliases(settings: WikiSettings, conf: NamespaceConfig) -> None:
    for alias in conf.alias:
        settings.namespace_aliases[alias] = conf.id
        settings.namespace_aliases[f"{alias}{TALK_SUFFIX}"] = conf.talk_id
        settings.namespace_aliases[f"{alias} talk"] = conf.talk_id


def _setup_extensions(settings: WikiSettings, conf: NamespaceConfig) -> None:
    const = conf.id

    settings.namespaces_with_subpages[const] = conf.has_subpages
    settings.namespaces_to_be_searched_default[const] = conf.default_search
    settings.visual_editor_available_namespaces[const] = conf.use_ve
    settings.namespaces_with_semantic_links[const] = conf.use_smw
    settings.uf_allowed_namespaces[const] = conf.user_functions

    if conf.use_flow_for_talk:
        settings.namespace_content_models[conf.talk_id] = FLOW_BOARD_MODEL
    if conf.content_model:
        settings.namespace_content_models[const] = conf.content_model
    if conf.content:
        _append_unique(settings.content_namespaces, const)
    if conf.use_collection:
        _append_unique(settings.collection_article_namespaces, const)

    if conf.use_approved_revs is not None:
        settings.approved_revs_enabled_namespaces[const] = conf.use_approved_revs
        if conf.use_approved_revs:
            _append_unique(settings.approved_revs_namespaces, const)

    if conf.use_page_triage is True:
        _append_unique(settings.page_triage_namespaces, const)
    elif conf.use_page_triage is False and const in settings.page_triage_namespaces:
        settings.page_triage_namespaces.remove(const)

    if conf.use_page_images:
        _append_unique(settings.page_images_namespaces, const)
    if conf.auto_edit:
        _append_unique(settings.page_forms_autoedit_namespaces, const)
    if conf.search_weight is not None:
        settings.cirrus_search_namespace_weights[const] = conf.search_weight


def _reset_globals(settings: WikiSettings) -> None:
    settings.approved_revs_enabled_namespaces = {}
    settings.approved_revs_namespaces = []


def _sync_curation_modules(settings: WikiSettings) -> None:
    for module in settings.page_triage_curation_modules.values():
        module["namespace"] = list(settings.page_triage_namespaces)


def apply_namespace(settings: WikiSettings, admin: str, name: str, conf: NamespaceConfig) -> None:
    """Wire a single namespace into *settings* (mutates it)."""
    _secure_namespace(settings, admin, conf)
    _check_constant(settings, conf.constant, conf.id)
    _check_constant(settings, conf.talk_constant, conf.talk_id)
    _setup_aliases(settings, conf)
    _setup_extensions(settings, conf)

    if conf.id not in CORE_NAMESPACES:
        settings.extra_namespaces[conf.id] = name
        settings.extra_namespaces[conf.talk_id] = f"{name}{TALK_SUFFIX}"
    logger.debug("Applied namespace %s (%d)", name, conf.id)


def apply_namespace_map(
    namespace_map: NamespaceMap,
    settings: WikiSettings | None = None,
) -> WikiSettings:
    """Return a copy of *settings* with every namespace of *namespace_map* applied.

    Raises:
        ConstantMismatchError: A namespace constant clashes with a known one.
    """
    result = settings.model_copy(deep=True) if settings is not None else WikiSettings()

    if namespace_map.reset_globals:
        _reset_globals(result)

    for name, conf in namespace_map.namespaces.items():
        apply_namespace(result, namespace_map.global_admin, name, conf)

    _sync_curation_modules(result)
    return result


def recent_changes_conditions(page_name: str, settings: WikiSettings) -> list[str]:
    """SQL conditions that keep hidden namespaces out of Special:RecentChanges."""
    if page_name != RECENT_CHANGES_PAGE or not settings.namespace_hide_from_rc:
        return []
    hidden = ", ".join(str(ns_id) for ns_id in settings.namespace_hide_from_rc)
    return [f"rc_namespace NOT IN ({hidden})"]
