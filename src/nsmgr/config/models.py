"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, nsmgr.toml only contains overrides.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from nsmgr.domain.namespaces import DEFAULT_ADMIN_GROUP

# --- nsmgr.toml sections ---


class NamespacesConfig(BaseModel):
    """[namespaces] section."""

    model_config = {"frozen": True}

    map_file: str = "ns.json"
    global_admin: str = DEFAULT_ADMIN_GROUP


class DumpConfig(BaseModel):
    """[dump] section."""

    model_config = {"frozen": True}

    settings_file: str = "settings.json"
    ignore: list[str] = Field(default_factory=list)


class DatabaseConfig(BaseModel):
    """[database] section."""

    model_config = {"frozen": True}

    path: str = ".nsmgr/nsmgr.db"
