"""Commands: apply, check and rc-filter — run a namespace map."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from nsmgr.commands._base import NsCommand
from nsmgr.domain.bootstrap import RECENT_CHANGES_PAGE

if TYPE_CHECKING:
    from nsmgr.commands._context import AppContext

_MAP_FILE = click.argument(
    "map_file",
    required=False,
    type=click.Path(dir_okay=False, path_type=Path),
)
_BASE = click.option(
    "--base",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Settings snapshot to apply the map on top of.",
)


@click.command(
    cls=NsCommand,
    examples="""\
  nsmgr apply
  nsmgr apply ns.json --base settings.json
  nsmgr apply --var wgNamespaceProtection
  nsmgr --json apply ns.json""",
)
@_MAP_FILE
@_BASE
@click.option("--var", "variable", default=None, help="Print only this settings variable.")
@click.pass_obj
def apply(app: AppContext, map_file: Path | None, base: Path | None, variable: str | None) -> None:
    """Apply a namespace map and print the resulting wiki settings.

    MAP_FILE defaults to [namespaces] map_file from nsmgr.toml.
    """
    from nsmgr.services.apply import ApplyService

    app.emit(ApplyService(app.workspace).apply(map_file, base=base, variable=variable))


@click.command(
    cls=NsCommand,
    examples="""\
  nsmgr check
  nsmgr check ns.json
  nsmgr -v check ns.json""",
)
@_MAP_FILE
@click.pass_obj
def check(app: AppContext, map_file: Path | None) -> None:
    """Validate a namespace map without printing settings."""
    from nsmgr.services.apply import ApplyService

    app.emit(ApplyService(app.workspace).check(map_file))


@click.command(
    "rc-filter",
    cls=NsCommand,
    examples="""\
  nsmgr rc-filter
  nsmgr rc-filter ns.json --page Watchlist""",
)
@_MAP_FILE
@_BASE
@click.option(
    "--page",
    default=RECENT_CHANGES_PAGE,
    show_default=True,
    help="Special page building the changes list.",
)
@click.pass_obj
def rc_filter(app: AppContext, map_file: Path | None, base: Path | None, page: str) -> None:
    """Show the query conditions added to a changes-list page."""
    from nsmgr.services.apply import ApplyService

    app.emit(ApplyService(app.workspace).recent_changes(map_file, page=page, base=base))
