"""Shared pytest fixtures and test helpers for nsmgr tests."""

from __future__ import annotations

import copy
import json
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from nsmgr.config.settings import NsmgrSettings
from nsmgr.infrastructure.workspace import Workspace

SAMPLE_MAP: dict[str, Any] = {
    "globalAdmin": "sysop",
    "lockdownDefaults": ["read", "edit"],
    "defaults": {"hasSubpages": True},
    "Help": {"id": 12, "constant": "NS_HELP", "alias": ["H"]},
    "Private": {
        "id": 3000,
        "constant": "NS_PRIVATE",
        "group": "staff",
        "permission": "private-edit",
        "lockdown": True,
    },
    "Docs": {
        "id": 3002,
        "constant": "NS_DOCS",
        "alias": "D",
        "content": True,
        "useVE": True,
        "defaultSearch": True,
    },
}


def _write_json(path: Path, document: Any) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(document), encoding="utf-8")
    return path


@pytest.fixture
def sample_map() -> dict[str, Any]:
    """A fresh copy of the sample namespace map."""
    return copy.deepcopy(SAMPLE_MAP)


@pytest.fixture
def write_json() -> Callable[[Path, Any], Path]:
    """Helper that writes a JSON document and returns its path."""
    return _write_json


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    """Temporary project directory holding ``ns.json``."""
    _write_json(tmp_path / "ns.json", SAMPLE_MAP)
    return tmp_path


@pytest.fixture
def map_path(project_root: Path) -> Path:
    return project_root / "ns.json"


@pytest.fixture
def workspace(project_root: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Workspace]:
    """Workspace rooted at the temporary project directory."""
    monkeypatch.delenv("NSMGR_CONFIG", raising=False)
    settings = NsmgrSettings.from_cli(root=project_root)
    ws = Workspace(settings)
    try:
        yield ws
    finally:
        ws.close()


@pytest.fixture
def snapshot_path(workspace: Workspace, map_path: Path) -> Path:
    """A settings snapshot produced by applying the sample map."""
    from nsmgr.services.apply import ApplyService

    result = ApplyService(workspace).apply(map_path)
    assert result.ok, result.error
    settings = dict(result.data["settings"])
    settings["userGroups"] = {"1": ["sysop", "staff"], "2": []}
    return _write_json(workspace.root / "settings.json", settings)


@pytest.fixture
def _isolated_project(project_root: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to the temporary project so the CLI uses it.

    Use via ``@pytest.mark.usefixtures("_isolated_project")`` on command
    test classes.
    """
    monkeypatch.delenv("NSMGR_CONFIG", raising=False)
    monkeypatch.chdir(project_root)
