"""Command: dump — diagnostics over a wiki settings snapshot."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from nsmgr.commands._base import NsCommand

if TYPE_CHECKING:
    from nsmgr.commands._context import AppContext


def _split_list(value: str | None) -> list[str]:
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]


@click.command(
    cls=NsCommand,
    examples="""\
  nsmgr dump --json > ns.json
  nsmgr dump --settings LocalSettings.json --json --ignore Help,Project
  nsmgr dump --var wgNamespacePermissionLockdown
  nsmgr dump --user 1""",
)
@click.option(
    "--settings",
    "snapshot",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Settings snapshot to read (default: [dump] settings_file).",
)
@click.option("--json", "as_json", is_flag=True, help="Dump the namespace map as JSON.")
@click.option("--var", "variable", default=None, help="Print one settings variable.")
@click.option("--user", "user_id", type=int, default=None, help="Print a user's groups.")
@click.option("--ignore", default=None, help="Comma-separated namespaces to leave out.")
@click.pass_obj
def dump(
    app: AppContext,
    snapshot: Path | None,
    as_json: bool,
    variable: str | None,
    user_id: int | None,
    ignore: str | None,
) -> None:
    """Reconstruct the namespace map from settings, or inspect them."""
    chosen = sum([as_json, variable is not None, user_id is not None])
    if chosen != 1:
        raise click.UsageError("Pass exactly one of --json, --var or --user.")

    from nsmgr.services.dump import DumpService

    svc = DumpService(app.workspace)
    if variable is not None:
        app.emit(svc.show_variable(variable, snapshot))
    elif user_id is not None:
        app.emit(svc.user_groups(user_id, snapshot))
    else:
        extra = _split_list(ignore)
        ignored = [*app.settings.dump.ignore, *extra] if extra else None
        app.emit(svc.dump_config(snapshot, ignore=ignored))
