"""Tests for RegistryService — the namespace_mgr table."""

from collections.abc import Callable
from pathlib import Path
from typing import Any

from alembic.runtime.migration import MigrationContext

from nsmgr.infrastructure.database.engine import init_database
from nsmgr.infrastructure.workspace import Workspace
from nsmgr.services.registry import RegistryService

WriteJson = Callable[[Path, Any], Path]


class TestImportConfig:
    def test_imports_map(self, workspace: Workspace, map_path: Path) -> None:
        result = RegistryService(workspace).import_config(map_path=map_path)
        assert result.ok, result.error
        assert result.data["count"] == 3
        assert result.data["source"] == str(map_path)

    def test_default_map(self, workspace: Workspace) -> None:
        assert RegistryService(workspace).import_config().data["count"] == 3

    def test_rows(self, workspace: Workspace, map_path: Path) -> None:
        svc = RegistryService(workspace)
        svc.import_config(map_path=map_path)
        items = svc.list_namespaces().data["items"]
        assert items == [
            {"id": 12, "name": "Help", "owner": "core", "read_only": False},
            {"id": 3000, "name": "Private", "owner": "core", "read_only": False},
            {"id": 3002, "name": "Docs", "owner": "core", "read_only": False},
        ]

    def test_config_blob(self, workspace: Workspace, map_path: Path) -> None:
        svc = RegistryService(workspace)
        svc.import_config(map_path=map_path)
        config = svc.get_namespace("Private").data["config"]
        assert "id" not in config
        assert "owner" not in config
        assert config["constant"] == "NS_PRIVATE"
        assert config["group"] == "staff"
        assert config["lockdown"] == ["read", "edit"]
        assert config["hasSubpages"] is True

    def test_owner_and_read_only(
        self, workspace: Workspace, tmp_path: Path, write_json: WriteJson
    ) -> None:
        path = write_json(
            tmp_path / "m.json",
            {
                "Virtual": {"id": -10, "constant": "NS_VIRTUAL"},
                "Forms": {"id": 3010, "constant": "NS_FORMS", "owner": "PageForms"},
            },
        )
        svc = RegistryService(workspace)
        svc.import_config(map_path=path)
        virtual = svc.get_namespace("Virtual").data
        forms = svc.get_namespace("Forms").data
        assert virtual["read_only"] is True
        assert forms["owner"] == "PageForms"
        assert forms["read_only"] is False

    def test_reimport_replaces(
        self, workspace: Workspace, map_path: Path, tmp_path: Path, write_json: WriteJson
    ) -> None:
        svc = RegistryService(workspace)
        svc.import_config(map_path=map_path)
        path = write_json(tmp_path / "m.json", {"Only": {"id": 3020, "constant": "NS_ONLY"}})
        svc.import_config(map_path=path)
        items = svc.list_namespaces().data["items"]
        assert [item["name"] for item in items] == ["Only"]

    def test_import_from_snapshot(self, workspace: Workspace, snapshot_path: Path) -> None:
        svc = RegistryService(workspace)
        result = svc.import_config(snapshot_path=snapshot_path)
        assert result.ok, result.error
        assert result.data["count"] == 10
        assert svc.get_namespace("Main").data["id"] == 0
        assert svc.get_namespace("Private").data["config"]["permission"] == "private-edit"

    def test_invalid_map_keeps_rows(
        self, workspace: Workspace, map_path: Path, tmp_path: Path, write_json: WriteJson
    ) -> None:
        svc = RegistryService(workspace)
        svc.import_config(map_path=map_path)
        bad = write_json(tmp_path / "bad.json", {"Broken": {"constant": "NS_BROKEN"}})
        result = svc.import_config(map_path=bad)
        assert result.error is not None
        assert result.error.code == "MISSING_FIELD"
        assert svc.list_namespaces().data["count"] == 3

    def test_duplicate_ids_rejected(
        self, workspace: Workspace, map_path: Path, tmp_path: Path, write_json: WriteJson
    ) -> None:
        svc = RegistryService(workspace)
        svc.import_config(map_path=map_path)
        path = write_json(
            tmp_path / "dup.json",
            {"A": {"id": 3000, "constant": "NS_A"}, "B": {"id": 3000, "constant": "NS_B"}},
        )
        result = svc.import_config(map_path=path)
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "INVALID_CONFIG"
        assert svc.list_namespaces().data["count"] == 3


class TestQueries:
    def test_empty_table(self, workspace: Workspace) -> None:
        result = RegistryService(workspace).list_namespaces()
        assert result.ok
        assert result.data == {"count": 0, "items": []}

    def test_not_found(self, workspace: Workspace) -> None:
        result = RegistryService(workspace).get_namespace("Nowhere")
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "NOT_FOUND"
        assert result.error.detail == {"name": "Nowhere"}


class TestUpgrade:
    def test_fresh_database_up_to_date(self, workspace: Workspace) -> None:
        result = RegistryService(workspace).upgrade()
        assert result.ok
        assert result.data["applied_count"] == 0
        assert result.data["current"] == "001_namespace_mgr"

    def test_check_pending(self, workspace: Workspace) -> None:
        result = RegistryService(workspace).check_pending()
        assert result.ok
        assert result.data["pending_count"] == 0
        assert result.data["current"] == result.data["head"] == "001_namespace_mgr"

    def test_unversioned_database_is_stamped(self, workspace: Workspace) -> None:
        init_database(workspace.settings.db_path).dispose()
        svc = RegistryService(workspace)
        pending = svc.check_pending()
        assert pending.data["current"] is None
        assert pending.data["pending_count"] == 1

        result = svc.upgrade()
        assert result.ok, result.error
        assert result.data["applied_count"] == 1
        with workspace.engine.connect() as conn:
            assert MigrationContext.configure(conn).get_current_revision() == "001_namespace_mgr"
