"""Tests for rebuilding a namespace map from wiki settings."""

from typing import Any

import pytest

from nsmgr.domain.bootstrap import apply_namespace_map
from nsmgr.domain.errors import (
    AdminGroupConflictError,
    AmbiguousGroupError,
    MultipleAdminsError,
    ProtectionConflictError,
)
from nsmgr.domain.namespaces import parse_namespace_map
from nsmgr.domain.reconstruct import (
    clean_defaults,
    reconstruct_namespace_map,
    resolve_admin_group,
)
from nsmgr.domain.settings import WikiSettings


def _custom(**fields: Any) -> WikiSettings:
    """Settings with one custom namespace ``X`` (3000) plus *fields*."""
    return WikiSettings(
        extra_namespaces={3000: "X", 3001: "X_talk"},
        constants={"NS_X": 3000, "NS_X_TALK": 3001},
        **fields,
    )


@pytest.fixture
def applied(sample_map: dict[str, Any]) -> WikiSettings:
    return apply_namespace_map(parse_namespace_map(sample_map))


class TestWalk:
    def test_subject_namespaces_only(self, applied: WikiSettings) -> None:
        doc = reconstruct_namespace_map(applied)
        names = [key for key in doc if key != "globalAdmin"]
        assert names == [
            "Main",
            "User",
            "Project",
            "File",
            "MediaWiki",
            "Template",
            "Help",
            "Category",
            "Private",
            "Docs",
        ]

    def test_default_ignored(self) -> None:
        settings = WikiSettings(extra_namespaces={102: "Property", 103: "Property_talk"})
        assert "Property" not in reconstruct_namespace_map(settings)

    def test_user_ignored(self, applied: WikiSettings) -> None:
        doc = reconstruct_namespace_map(applied, ignore=["Docs", "Main"])
        assert "Docs" not in doc
        assert "Main" not in doc
        assert "Private" in doc

    def test_identity(self, applied: WikiSettings) -> None:
        doc = reconstruct_namespace_map(applied)
        assert doc["Main"]["id"] == 0
        assert doc["Main"]["constant"] == "NS_MAIN"
        assert doc["Private"]["id"] == 3000
        assert doc["Private"]["constant"] == "NS_PRIVATE"


class TestSecuredNamespace:
    def test_lockdown_group_and_permission(self, applied: WikiSettings) -> None:
        record = reconstruct_namespace_map(applied)["Private"]
        assert record["lockdown"] == ["read", "edit"]
        assert record["group"] == "staff"
        assert record["permission"] == "private-edit"

    def test_global_admin(self, applied: WikiSettings) -> None:
        assert reconstruct_namespace_map(applied)["globalAdmin"] == "sysop"

    def test_fallback_admin_without_lockdown(self) -> None:
        doc = reconstruct_namespace_map(_custom(), fallback_admin="wikiadmin")
        assert doc["globalAdmin"] == "wikiadmin"

    def test_admin_only_lockdown(self) -> None:
        settings = _custom(
            namespace_permission_lockdown={3000: {"*": ["sysop"], "read": ["*"]}},
        )
        record = reconstruct_namespace_map(settings)["X"]
        assert record["lockdown"] == []
        assert record["group"] is None

    def test_open_entries_ignored(self) -> None:
        settings = _custom(
            namespace_permission_lockdown={
                3000: {"*": ["sysop"], "edit": ["staff", "sysop"], "read": ["*"]},
            },
        )
        record = reconstruct_namespace_map(settings)["X"]
        assert record["lockdown"] == ["edit"]
        assert record["group"] == "staff"

    def test_group_inferred_from_permission(self) -> None:
        settings = _custom(
            namespace_protection={3000: ["x-edit"]},
            group_permissions={"*": {"x-edit": False}, "xers": {"x-edit": True}},
        )
        record = reconstruct_namespace_map(settings)["X"]
        assert record["permission"] == "x-edit"
        assert record["group"] == "xers"

    def test_ambiguous_group(self) -> None:
        settings = _custom(
            namespace_protection={3000: ["x-edit"]},
            group_permissions={"xers": {"x-edit": True}, "others": {"x-edit": True}},
        )
        with pytest.raises(AmbiguousGroupError):
            reconstruct_namespace_map(settings)

    def test_protection_conflict(self) -> None:
        settings = _custom(namespace_protection={3000: ["x-edit", "y-edit"]})
        with pytest.raises(ProtectionConflictError) as exc_info:
            reconstruct_namespace_map(settings)
        assert exc_info.value.code == "PROTECTION_CONFLICT"
        assert "Found 2 on X" in exc_info.value.message


class TestResolveAdminGroup:
    def test_order_independent(self) -> None:
        settings = WikiSettings(
            extra_namespaces={3000: "A", 3001: "A_talk", 3002: "B", 3003: "B_talk"},
            namespace_permission_lockdown={
                3000: {"edit": ["staff", "wikiadmin"]},
                3002: {"*": ["wikiadmin"]},
            },
        )
        assert resolve_admin_group(settings) == "wikiadmin"

    def test_conflict(self) -> None:
        settings = WikiSettings(
            extra_namespaces={3000: "A", 3001: "A_talk", 3002: "B", 3003: "B_talk"},
            namespace_permission_lockdown={3000: {"*": ["sysop"]}, 3002: {"*": ["other"]}},
        )
        with pytest.raises(AdminGroupConflictError):
            resolve_admin_group(settings)

    def test_ignored_namespaces_skipped(self) -> None:
        settings = WikiSettings(
            extra_namespaces={3000: "A", 3001: "A_talk", 3002: "B", 3003: "B_talk"},
            namespace_permission_lockdown={3000: {"*": ["sysop"]}, 3002: {"*": ["other"]}},
        )
        assert resolve_admin_group(settings, ignore=["B"]) == "sysop"

    def test_multiple_admins(self) -> None:
        settings = _custom(namespace_permission_lockdown={3000: {"*": ["sysop", "other"]}})
        with pytest.raises(MultipleAdminsError):
            resolve_admin_group(settings)


class TestExtensionFlags:
    def test_flags_read_back(self) -> None:
        settings = _custom(
            namespace_aliases={"Ex": 3000, "Ex talk": 3001},
            namespaces_with_subpages={3000: True},
            namespaces_to_be_searched_default={3000: True},
            visual_editor_available_namespaces={3000: True},
            namespaces_with_semantic_links={3000: False},
            uf_allowed_namespaces={3000: True},
            namespace_content_models={3001: "flow-board"},
            collection_article_namespaces=[3000],
            approved_revs_namespaces=[3000],
            page_triage_namespaces=[3000],
            page_images_namespaces=[3000],
            page_forms_autoedit_namespaces=[3000],
            content_namespaces=[3000],
            nonincludable_namespaces=[3000],
            cirrus_search_namespace_weights={3000: 0.5},
        )
        record = reconstruct_namespace_map(settings)["X"]
        assert record["alias"] == ["Ex"]
        assert record["hasSubpages"] is True
        assert record["defaultSearch"] is True
        assert record["useVE"] is True
        assert record["useSMW"] is False
        assert record["userFunctions"] is True
        assert record["useFlowForTalk"] is True
        assert record["useCollection"] is True
        assert record["useApprovedRevs"] is True
        assert record["usePageTriage"] is True
        assert record["usePageImages"] is True
        assert record["autoEdit"] is True
        assert record["content"] is True
        assert record["includable"] is False
        assert record["searchWeight"] == 0.5
        assert "contentModel" not in record

    def test_approved_revs_disabled(self) -> None:
        settings = _custom(approved_revs_enabled_namespaces={3000: False})
        assert reconstruct_namespace_map(settings)["X"]["useApprovedRevs"] is False

    def test_content_model(self) -> None:
        settings = _custom(namespace_content_models={3000: "json"})
        assert reconstruct_namespace_map(settings)["X"]["contentModel"] == "json"


class TestCleanDefaults:
    def test_fills_missing_keys(self) -> None:
        doc = clean_defaults({"globalAdmin": "sysop", "X": {"id": 3000}})
        assert doc["X"] == {
            "id": 3000,
            "alias": [],
            "group": None,
            "includable": True,
            "lockdown": False,
            "permission": None,
        }
        assert doc["globalAdmin"] == "sysop"

    def test_keeps_existing(self) -> None:
        doc = clean_defaults({"X": {"id": 3000, "group": "staff", "includable": False}})
        assert doc["X"]["group"] == "staff"
        assert doc["X"]["includable"] is False


class TestReload:
    def test_dump_loads_back(self, applied: WikiSettings) -> None:
        doc = reconstruct_namespace_map(applied)
        nsmap = parse_namespace_map(doc)
        private = nsmap.namespaces["Private"]
        assert private.id == 3000
        assert private.group == "staff"
        assert private.lockdown == ["read", "edit"]
        assert nsmap.namespaces["Docs"].content is True

    def test_reapply_reproduces_security(self, applied: WikiSettings) -> None:
        again = apply_namespace_map(parse_namespace_map(reconstruct_namespace_map(applied)))
        assert again.namespace_permission_lockdown == applied.namespace_permission_lockdown
        assert again.namespace_protection == applied.namespace_protection
        assert again.group_permissions == applied.group_permissions

    def test_admin_only_lockdown_survives_reapply(self) -> None:
        applied = apply_namespace_map(
            parse_namespace_map(
                {
                    "Secret": {
                        "id": 3000,
                        "constant": "NS_SECRET",
                        "group": "staff",
                        "permission": "secret-edit",
                        "lockdown": [],
                    }
                }
            )
        )
        assert applied.namespace_permission_lockdown[3000]["*"] == ["sysop"]

        doc = reconstruct_namespace_map(applied)
        assert doc["Secret"]["lockdown"] == []
        again = apply_namespace_map(parse_namespace_map(doc))
        assert again.namespace_permission_lockdown == applied.namespace_permission_lockdown
