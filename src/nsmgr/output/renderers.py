"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO). The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from nsmgr.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from nsmgr.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    # Namespace listings: names only
    items = result.data.get("items")
    if items and isinstance(items, list):
        return "\n".join(str(item["name"]) for item in items if "name" in item)

    if "value" in result.data:
        return _dumps(result.data["value"])
    if "groups" in result.data:
        return "\n".join(result.data["groups"])

    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _dumps(value: Any) -> str:
    return json.dumps(value, indent=4)


def _document(console: Console, value: Any) -> None:
    """Write JSON as-is: no wrapping or markup, so it can be piped and reloaded."""
    console.out(_dumps(value), highlight=False)


def _status_line(console: Console, result: ServiceResult) -> None:
    label = Text("OK", style="ns.ok")
    op = Text(f"  {result.op}", style="ns.op")
    console.print(label, op, sep="", end="")
    console.print()


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="ns.key")
    if key == "id" or key.endswith("_id"):
        v = Text(str(value), style="ns.id")
    elif key in ("source", "path"):
        v = Text(str(value), style="ns.path")
    elif key in ("group", "global_admin", "owner"):
        v = Text(str(value), style="ns.group")
    elif isinstance(value, (dict, list)):
        v = Text(json.dumps(value, separators=(",", ":")))
    else:
        v = Text(str(value))
    console.print(k, v, sep="", end="")
    console.print()


def _namespace_table(items: list[dict[str, Any]], columns: list[str]) -> Table:
    """Build a Rich Table for namespace rows."""
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("ID", style="ns.id", justify="right", no_wrap=True)
    table.add_column("Name", style="ns.name")
    for col in columns:
        table.add_column(col.replace("_", " ").title())

    for item in items:
        row = [str(item.get("id", "")), str(item.get("name", ""))]
        for col in columns:
            value = item.get(col)
            if isinstance(value, bool):
                row.append("yes" if value else "")
            else:
                row.append("" if value is None else str(value))
        table.add_row(*row)
    return table


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="ns.error")
    op = Text(f"  {result.op}", style="ns.op")
    dash = Text(" — ")
    console.print(label, op, dash, msg, sep="")

    if err and verbose:
        console.print(Text(f"  code: {err.code}", style="dim"))
        if err.detail:
            console.print(Text("  detail:", style="dim"))
            for k, v in err.detail.items():
                console.print(f"    {k}: {v}")


# ── Bootstrap renderers ──────────────────────────────────────────────


def _render_apply(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Print the resulting settings (or the one requested variable) as JSON."""
    d = result.data
    _document(console, d["value"] if "variable" in d else d.get("settings", {}))


def _render_check(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    d = result.data
    _field(console, "count", d.get("count", 0))
    _field(console, "global_admin", d.get("global_admin", ""))
    items = d.get("items", [])
    if items:
        console.print()
        columns = ["talk_id", "group", "permission", "locked"]
        if verbose:
            columns.insert(0, "constant")
        console.print(_namespace_table(items, columns))


def _render_recent_changes(
    result: ServiceResult, console: Console, *, verbose: bool = False
) -> None:
    _status_line(console, result)
    d = result.data
    _field(console, "page", d.get("page", ""))
    _field(console, "hidden", d.get("hidden", []))
    conditions = d.get("conditions", [])
    if not conditions:
        _field(console, "conditions", "none")
    for cond in conditions:
        console.print(f"  {cond}")


# ── Dump renderers ───────────────────────────────────────────────────


def _render_dump(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Print the reconstructed namespace map, ready to save as a map file."""
    _document(console, result.data.get("document", {}))


def _render_variable(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _document(console, result.data.get("value"))


def _render_user_groups(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    d = result.data
    _field(console, "user_id", d.get("user_id", ""))
    groups = d.get("groups", [])
    _field(console, "groups", ", ".join(groups) if groups else "none")


# ── Registry renderers ───────────────────────────────────────────────


def _render_import(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    d = result.data
    _field(console, "source", d.get("source", ""))
    _field(console, "count", d.get("count", 0))
    items = d.get("items", [])
    if verbose and items:
        console.print()
        console.print(_namespace_table(items, ["owner", "read_only"]))


def _render_list(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    items = result.data.get("items", [])
    if not items:
        console.print(Text("No namespaces stored.", style="dim"))
        return
    console.print(_namespace_table(items, ["owner", "read_only"]))


def _render_namespace(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    d = result.data
    for key in ("id", "name", "owner", "read_only"):
        if key in d:
            _field(console, key, d[key])
    config = d.get("config", {})
    if config:
        console.print()
        console.print(Text("  config:", style="ns.key"))
        for key, value in config.items():
            _field(console, f"  {key}", value)


def _render_upgrade(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render upgrade/migration results."""
    _status_line(console, result)
    d = result.data
    for key in ("applied_count", "pending_count", "current", "head", "message"):
        if key in d:
            _field(console, key, d[key])
    if verbose and d.get("pending"):
        console.print()
        for p in d["pending"]:
            console.print(f"  {p['revision']}: {p['description']}")


# ── Generic fallback ──────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    # Bootstrap
    "apply": _render_apply,
    "check": _render_check,
    "recent_changes": _render_recent_changes,
    # Dump
    "dump_config": _render_dump,
    "show_variable": _render_variable,
    "user_groups": _render_user_groups,
    # Registry
    "import_config": _render_import,
    "list_namespaces": _render_list,
    "get_namespace": _render_namespace,
    "upgrade": _render_upgrade,
}
