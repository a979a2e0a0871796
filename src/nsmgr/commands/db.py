"""Command group: db — the namespace_mgr table."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from nsmgr.commands._base import NsGroup

if TYPE_CHECKING:
    from nsmgr.commands._context import AppContext


@click.group(
    cls=NsGroup,
    examples="""\
  nsmgr db upgrade
  nsmgr db import --map ns.json
  nsmgr db list
  nsmgr db show Help""",
)
def db() -> None:
    """Store namespace definitions in the nsmgr database."""


@db.command(
    examples="""\
  nsmgr db upgrade
  nsmgr db upgrade --check""",
)
@click.option(
    "--check", "check_only", is_flag=True, help="Show pending migrations without applying."
)
@click.pass_obj
def upgrade(app: AppContext, check_only: bool) -> None:
    """Run pending database migrations."""
    from nsmgr.services.registry import RegistryService

    svc = RegistryService(app.workspace)
    app.emit(svc.check_pending() if check_only else svc.upgrade())


@db.command(
    "import",
    examples="""\
  nsmgr db import
  nsmgr db import --map ns.json
  nsmgr db import --settings settings.json""",
)
@click.option(
    "--map",
    "map_file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Namespace map to import (default: [namespaces] map_file).",
)
@click.option(
    "--settings",
    "snapshot",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Import the map reconstructed from a settings snapshot.",
)
@click.pass_obj
def import_cmd(app: AppContext, map_file: Path | None, snapshot: Path | None) -> None:
    """Replace the stored namespaces with those of a map or snapshot."""
    if map_file is not None and snapshot is not None:
        raise click.UsageError("--map and --settings are mutually exclusive.")

    from nsmgr.services.registry import RegistryService

    svc = RegistryService(app.workspace)
    app.emit(svc.import_config(map_path=map_file, snapshot_path=snapshot))


@db.command(
    "list",
    examples="""\
  nsmgr db list
  nsmgr -q db list""",
)
@click.pass_obj
def list_cmd(app: AppContext) -> None:
    """List stored namespaces."""
    from nsmgr.services.registry import RegistryService

    app.emit(RegistryService(app.workspace).list_namespaces())


@db.command(
    examples="""\
  nsmgr db show Help
  nsmgr --json db show Help""",
)
@click.argument("name")
@click.pass_obj
def show(app: AppContext, name: str) -> None:
    """Show one stored namespace and its configuration."""
    from nsmgr.services.registry import RegistryService

    app.emit(RegistryService(app.workspace).get_namespace(name))
