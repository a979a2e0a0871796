"""Rich Console factory and theme for nsmgr output.

Consoles render to a StringIO buffer so renderers keep a
``str``-returning contract. Outside a terminal (tests, pipes) Rich
emits no color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

NSMGR_THEME = Theme(
    {
        "ns.ok": "bold green",
        "ns.error": "bold red",
        "ns.warning": "bold yellow",
        "ns.op": "bold cyan",
        "ns.key": "dim",
        "ns.id": "bold blue",
        "ns.name": "bold",
        "ns.group": "magenta",
        "ns.right": "yellow",
        "ns.locked": "red",
        "ns.path": "dim",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes.
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=NSMGR_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()
