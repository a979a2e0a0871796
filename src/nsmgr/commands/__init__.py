"""Subcommand modules for nsmgr.

register_commands() uses deferred imports to keep ``nsmgr --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register the command group and standalone commands on the root CLI group."""
    # --- Groups ---
    from nsmgr.commands.db import db

    cli.add_command(db)

    # --- Standalone commands ---
    from nsmgr.commands.apply import apply, check, rc_filter
    from nsmgr.commands.dump import dump

    cli.add_command(apply)
    cli.add_command(check)
    cli.add_command(rc_filter)
    cli.add_command(dump)
