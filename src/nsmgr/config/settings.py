"""Unified settings — CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — CLI flags passed by Click
  2. Env vars     — ``NSMGR_*`` prefix
  3. TOML file    — ``nsmgr.toml`` found by walking up from the cwd
  4. Code defaults — baked into the section models

Relative paths in the TOML sections (map file, settings snapshot,
database) are resolved against :attr:`NsmgrSettings.root`, the directory
holding ``nsmgr.toml``.
"""

from __future__ import annotations

import os
import threading
import tomllib
from pathlib import Path
from typing import Any

import click
from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from nsmgr.config.models import DatabaseConfig, DumpConfig, NamespacesConfig

CONFIG_FILENAME = "nsmgr.toml"
CONFIG_ENV_VAR = "NSMGR_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Locate ``nsmgr.toml``: ``$NSMGR_CONFIG`` first, then walk up from *start*."""
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        candidate = Path(env_path)
        return candidate if candidate.is_file() else None

    directory = (start or Path.cwd()).resolve()
    for folder in (directory, *directory.parents):
        candidate = folder / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from an ``nsmgr.toml`` file."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            try:
                self._data = tomllib.loads(toml_path.read_text(encoding="utf-8"))
            except tomllib.TOMLDecodeError as exc:
                msg = f"Invalid TOML in {toml_path}: {exc}"
                raise click.ClickException(msg) from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        return self._data.get(field_name), field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return self._data


# TOML path handed to settings_customise_sources during construction.
_tls = threading.local()


class NsmgrSettings(BaseSettings):
    """Settings for the whole nsmgr CLI, frozen after construction.

    Attributes:
        root: Directory that relative paths resolve against (parent of
            ``nsmgr.toml``, or the cwd when there is none).
        config_path: The TOML file in use, if any.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "NSMGR_",
        "env_nested_delimiter": "__",
    }

    root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    # --- TOML sections ---
    namespaces: NamespacesConfig = Field(default_factory=NamespacesConfig)
    dump: DumpConfig = Field(default_factory=DumpConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert TOML source between env vars and defaults."""
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, getattr(_tls, "toml_path", None)),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        root: Path | None = None,
        **cli_flags: Any,
    ) -> NsmgrSettings:
        """Construct settings from a CLI invocation.

        An explicit *config_path* wins over discovery. *root* defaults to
        the config file's directory.
        """
        toml_path: Path | None
        if config_path:
            explicit = Path(config_path)
            toml_path = explicit if explicit.is_file() else None
        else:
            toml_path = find_config(root)

        if root is None:
            root = toml_path.parent if toml_path else Path.cwd()

        _tls.toml_path = toml_path
        try:
            return cls(root=root, config_path=toml_path, **cli_flags)
        finally:
            _tls.toml_path = None

    def resolve(self, path: str | Path) -> Path:
        """Resolve *path* against :attr:`root` unless it is absolute."""
        candidate = Path(path)
        return candidate if candidate.is_absolute() else self.root / candidate

    @property
    def map_path(self) -> Path:
        return self.resolve(self.namespaces.map_file)

    @property
    def snapshot_path(self) -> Path:
        return self.resolve(self.dump.settings_file)

    @property
    def db_path(self) -> Path:
        return self.resolve(self.database.path)
