"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console backed by StringIO. Renderers are
dispatched by ``result.op`` in :func:`render_result`; unknown ops fall
through to a generic key-value renderer.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from pantryform.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from pantryform.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text when Rich detects no terminal, which is the case
    inside Click's CliRunner and piped output.
    """
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode.

    A generated form prints its URL; a sweep prints one URL per form.
    """
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} - {msg}"

    if result.op == "sweep":
        return "\n".join(str(item.get("url", "")) for item in result.data.get("generated", []))
    if result.op == "guidelines":
        return "\n".join(str(item.get("item_key", "")) for item in result.data.get("items", []))
    url = result.data.get("url")
    if url:
        return str(url)
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    label = Text("OK", style="pantry.ok")
    op = Text(f"  {result.op}", style="pantry.op")
    console.print(label, op, end="")
    console.print()


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="pantry.key")
    if key.endswith("_id"):
        v = Text(str(value), style="pantry.id")
    elif key in ("path", "url"):
        v = Text(str(value), style="pantry.path")
    else:
        v = Text(str(value))
    console.print(k, v, end="")
    console.print()


def _render_counts(console: Console, counts: dict[str, Any]) -> None:
    for key in ("adult_dogs", "puppies", "adult_cats", "kittens"):
        _field(console, key, counts.get(key, 0))
    if counts.get("dog_sizes"):
        _field(console, "dog_sizes", counts["dog_sizes"])
    if counts.get("other_species"):
        _field(console, "other_species", ", ".join(counts["other_species"]))


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="pantry.error")
    op = Text(f"  {result.op}", style="pantry.op")
    console.print(label, op, Text(" - "), msg)
    if err:
        console.print(Text(f"  code: {err.code}", style="dim"))

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")


# ── Form renderers ────────────────────────────────────────────────────


def _render_generate(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render generate and on_submit results."""
    _status_line(console, result)
    d = result.data
    _field(console, "row", d.get("row"))
    if d.get("skipped"):
        reason = d.get("reason", "already generated")
        console.print(Text(f"  skipped: {reason}", style="pantry.skip"))
        if d.get("url"):
            _field(console, "url", d["url"])
        return
    for key in ("form_id", "file_id", "url"):
        if key in d:
            _field(console, key, d[key])
    if d.get("regenerated"):
        _field(console, "regenerated", "yes")
    if verbose:
        _field(console, "path", d.get("path", ""))
        _field(console, "recommended_items", d.get("recommended_count", 0))
        _render_counts(console, d.get("counts", {}))


def _render_preview(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render the household summary and the recommended line items."""
    _status_line(console, result)
    d = result.data
    _field(console, "row", d.get("row"))
    _field(console, "form_id", d.get("form_id") or "(not assigned)")
    if d.get("requested"):
        _field(console, "requested", ", ".join(d["requested"]))
    _render_counts(console, d.get("counts", {}))

    recommended: dict[str, str] = d.get("recommended", {})
    if recommended:
        console.print()
        table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
        table.add_column("Placeholder", style="pantry.item", no_wrap=True)
        table.add_column("Value", style="pantry.qty")
        for token, value in recommended.items():
            table.add_row(token, value)
        console.print(table)

    if verbose:
        console.print()
        table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
        table.add_column("Placeholder", no_wrap=True)
        table.add_column("Value")
        for token, value in d.get("placeholders", {}).items():
            table.add_row(token, str(value))
        console.print(table)


def _render_sweep(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    d = result.data
    generated = d.get("generated", [])
    _field(console, "rows", d.get("count", 0))
    _field(console, "generated", len(generated))
    _field(console, "skipped", len(d.get("skipped", [])))
    _field(console, "failed", len(d.get("failed", [])))

    if generated and verbose:
        console.print()
        table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
        table.add_column("Row", justify="right")
        table.add_column("Form ID", style="pantry.id", no_wrap=True)
        table.add_column("URL", style="pantry.path")
        for item in generated:
            table.add_row(str(item.get("row", "")), str(item.get("form_id", "")), item["url"])
        console.print(table)

    for row in d.get("failed", []):
        console.print(f"  [pantry.error]failed[/pantry.error] row={row}")


def _render_guidelines(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    items = result.data.get("items", [])
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Item", style="pantry.item", no_wrap=True)
    table.add_column("Placeholder")
    table.add_column("Per Pet", style="pantry.qty", justify="right")
    table.add_column("Household Max", style="pantry.qty", justify="right")
    table.add_column("Amount")
    if verbose:
        table.add_column("Notes", style="dim")

    for item in items:
        amount = ""
        if item.get("amount_placeholder"):
            amount = f"{item['amount_placeholder']} = {item.get('amount_given') or ''}"
        row = [
            str(item.get("display_name", "")),
            str(item.get("placeholder", "")),
            _number(item.get("per_pet")),
            _number(item.get("household_max")),
            amount,
        ]
        if verbose:
            row.append(str(item.get("notes", "")))
        table.add_row(*row)

    console.print(table)
    console.print(f"\n{result.data.get('count', len(items))} items")


def _number(value: Any) -> str:
    if value is None:
        return "-"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


# ── Generic fallback ──────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, (dict, list)):
            _field(console, key, json.dumps(value, separators=(",", ":")))
        else:
            _field(console, key, value)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    "generate": _render_generate,
    "on_submit": _render_generate,
    "preview": _render_preview,
    "sweep": _render_sweep,
    "guidelines": _render_guidelines,
}
