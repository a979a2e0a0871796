"""Tests for owning-group resolution."""

import pytest

from nsmgr.domain.errors import (
    AdminGroupConflictError,
    AmbiguousGroupError,
    ExtraGroupsError,
    MultipleAdminsError,
)
from nsmgr.domain.permissions import GroupResolver, build_permission_map, is_open_entry


class TestBuildPermissionMap:
    def test_inverts_groups_and_rights(self) -> None:
        pmap = build_permission_map(
            {"*": {"edit": False}, "staff": {"edit": True, "read": True}}
        )
        assert pmap == {"edit": {"*": False, "staff": True}, "read": {"staff": True}}

    def test_empty(self) -> None:
        assert build_permission_map({}) == {}


class TestIsOpenEntry:
    def test_everyone(self) -> None:
        assert is_open_entry(["*"]) is True

    def test_groups(self) -> None:
        assert is_open_entry(["staff"]) is False
        assert is_open_entry(["*", "staff"]) is False
        assert is_open_entry([]) is False


class TestAdminDesignation:
    def test_star_entry_designates_admin(self) -> None:
        resolver = GroupResolver()
        assert resolver.observe_lockdown("Private", "*", ["sysop"]) is None
        assert resolver.admin_group == "sysop"

    def test_same_admin_twice(self) -> None:
        resolver = GroupResolver()
        resolver.observe_lockdown("Private", "*", ["sysop"])
        resolver.observe_lockdown("Secret", "*", ["sysop"])
        assert resolver.admin_group == "sysop"

    def test_conflicting_admin(self) -> None:
        resolver = GroupResolver()
        resolver.observe_lockdown("Private", "*", ["sysop"])
        with pytest.raises(AdminGroupConflictError) as exc_info:
            resolver.observe_lockdown("Secret", "*", ["bureaucrat"])
        err = exc_info.value
        assert err.code == "ADMIN_CONFLICT"
        assert "bureaucrat" in err.message
        assert "Secret" in err.message
        assert err.detail["previous"] == "sysop"

    def test_preset_admin_conflicts_too(self) -> None:
        with pytest.raises(AdminGroupConflictError):
            GroupResolver("sysop").observe_lockdown("Private", "*", ["staff"])

    def test_multiple_admins(self) -> None:
        with pytest.raises(MultipleAdminsError) as exc_info:
            GroupResolver().observe_lockdown("Private", "*", ["sysop", "bureaucrat"])
        assert exc_info.value.code == "MULTIPLE_ADMINS"
        assert exc_info.value.namespace == "Private"

    def test_empty_star_entry_designates_nothing(self) -> None:
        resolver = GroupResolver()
        assert resolver.observe_lockdown("Private", "*", []) is None
        assert resolver.admin_group is None


class TestOwningGroup:
    def test_single_non_admin_group(self) -> None:
        resolver = GroupResolver("sysop")
        assert resolver.observe_lockdown("Private", "edit", ["staff", "sysop"]) == "staff"

    def test_only_admin_means_admin_owns(self) -> None:
        resolver = GroupResolver("sysop")
        assert resolver.observe_lockdown("Private", "edit", ["sysop"]) == "sysop"

    def test_extra_groups(self) -> None:
        resolver = GroupResolver("sysop")
        with pytest.raises(ExtraGroupsError) as exc_info:
            resolver.observe_lockdown("Private", "edit", ["staff", "editors", "sysop"])
        assert exc_info.value.code == "EXTRA_GROUPS"
        assert exc_info.value.detail["groups"] == ["staff", "editors"]

    def test_without_admin_every_group_counts(self) -> None:
        resolver = GroupResolver()
        with pytest.raises(ExtraGroupsError):
            resolver.observe_lockdown("Private", "edit", ["staff", "sysop"])


class TestInferGroup:
    def test_single_granted_group(self) -> None:
        pmap = build_permission_map(
            {"*": {"doc-edit": False}, "docs": {"doc-edit": True}, "sysop": {"doc-edit": True}}
        )
        assert GroupResolver("sysop").infer_group("Docs", "doc-edit", pmap) == "docs"

    def test_denied_groups_ignored(self) -> None:
        pmap = build_permission_map({"docs": {"doc-edit": True}, "staff": {"doc-edit": False}})
        assert GroupResolver("sysop").infer_group("Docs", "doc-edit", pmap) == "docs"

    def test_everyone_ignored(self) -> None:
        pmap = build_permission_map({"*": {"doc-edit": True}})
        assert GroupResolver("sysop").infer_group("Docs", "doc-edit", pmap) is None

    def test_unknown_permission(self) -> None:
        assert GroupResolver("sysop").infer_group("Docs", "doc-edit", {}) is None

    def test_ambiguous(self) -> None:
        pmap = build_permission_map({"docs": {"doc-edit": True}, "staff": {"doc-edit": True}})
        with pytest.raises(AmbiguousGroupError) as exc_info:
            GroupResolver("sysop").infer_group("Docs", "doc-edit", pmap)
        err = exc_info.value
        assert err.code == "AMBIGUOUS_GROUP"
        assert err.detail["permission"] == "doc-edit"
        assert "docs, staff" in err.message
