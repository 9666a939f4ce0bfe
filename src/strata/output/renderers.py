"""Operation-specific Rich renderers for ServiceResult.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json as _json
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from strata.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from strata.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich."""
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

    items = result.data.get("items")
    if items and isinstance(items, list):
        return "\n".join(str(item.get("id") or item.get("name", "")) for item in items)
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    console.print(Text("OK", style="strata.ok"), Text(f"  {result.op}", style="strata.op"))


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    if isinstance(value, (dict, list)):
        value = _json.dumps(value, separators=(",", ":"))
    style = "strata.name" if key in ("id", "name") else ""
    console.print(Text.assemble((f"  {key}: ", "strata.key"), (str(value), style)))


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print the telemetry span tree (verbose only)."""
    if not result.meta or "telemetry" not in result.meta:
        return
    console.print()
    console.print(Text("  meta:", style="dim"))
    _render_span(console, result.meta["telemetry"], indent=4)


def _render_span(console: Console, span: dict[str, Any], indent: int) -> None:
    extras = ", ".join(f"{k}={v}" for k, v in span.get("annotations", {}).items())
    line = f"{' ' * indent}{span.get('duration_ms', 0.0):>8.2f}ms  {span.get('name', '?')}"
    console.print(Text(f"{line}  ({extras})" if extras else line, style="dim"))
    for child in span.get("children", []):
        _render_span(console, child, indent + 4)


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    console.print(
        Text("ERROR", style="strata.error"), Text(f"  {result.op}", style="strata.op"), Text(" — "), Text(msg)
    )
    if verbose and err and err.detail:
        for key, value in err.detail.items():
            _field(console, key, value)


# ── Renderers ─────────────────────────────────────────────────────────


def _render_layers(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    items = result.data.get("items", [])
    if not items:
        console.print("No layers.", style="dim")
        return
    table = Table(show_header=True, pad_edge=False)
    table.add_column("Layer", style="strata.name", no_wrap=True)
    table.add_column("Rule", style="strata.rule")
    table.add_column("Widgets", justify="right")
    if verbose:
        table.add_column("Description", style="dim")
    for item in items:
        rule = Text(item["rule"]) if item["rule"] else Text("(never active)", style="strata.draft")
        row: list[Any] = [Text(item["name"]), rule, str(item["widgets"])]
        if verbose:
            row.append(item["description"])
        table.add_row(*row)
    console.print(table)


def _render_widgets(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    items = result.data.get("items", [])
    if not items:
        console.print("No widgets.", style="dim")
        return
    table = Table(show_header=True, pad_edge=False)
    table.add_column("ID", style="strata.name", no_wrap=True)
    table.add_column("Type")
    table.add_column("Layer")
    table.add_column("Zone", style="strata.zone")
    table.add_column("State")
    if verbose:
        table.add_column("Title", style="dim")
    for item in items:
        if item["stale"]:
            state = Text("stale layer", style="strata.stale")
        elif item["published"]:
            state = Text("published")
        else:
            state = Text("draft", style="strata.draft")
        row: list[Any] = [Text(item[k]) for k in ("id", "type", "layer", "zone")] + [state]
        if verbose:
            row.append(item["title"])
        table.add_row(*row)
    console.print(table)


def _render_preview(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    _status_line(console, result)
    _field(console, "path", d["path"])
    _field(console, "result", d["result"])
    if not d["layered"]:
        console.print("  layers not applied (admin request, admin theme, or partial result)", style="dim")
        return
    _field(console, "evaluations", d["evaluations"])
    _field(console, "placed", d["placed"])
    if d["skipped_stale"]:
        _field(console, "skipped_stale", d["skipped_stale"])

    for zone, count in d["zones"].items():
        console.print()
        console.print(Text(f"  {zone}", style="strata.zone"), Text(f" ({count})", style="dim"))
        for item in (i for i in d["items"] if i["zone"] == zone):
            classes = " ".join("." + c for c in item["classes"])
            console.print(Text(f"    {item['position']}. {item['id']} [{item['type']}]  {classes}"))
            if verbose:
                console.print(Text(f"       alternates: {', '.join(item['alternates'])}", style="dim"))
    if verbose:
        _render_meta(console, result)


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)
    if verbose:
        _render_meta(console, result)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    "list_layers": _render_layers,
    "list_widgets": _render_widgets,
    "preview": _render_preview,
}
