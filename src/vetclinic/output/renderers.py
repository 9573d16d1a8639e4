"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO).  The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json as _json
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from vetclinic.output.console import create_console, get_output, style_for_kind

if TYPE_CHECKING:
    from rich.console import Console

    from vetclinic.services.result import ServiceResult


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
    """Render minimal output for ``--quiet`` mode: one name per line for lists."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    items = result.data.get("items")
    if items and isinstance(items, list):
        return "\n".join(str(item.get("name", "")) for item in items if isinstance(item, dict))

    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    """Print the OK status line."""
    label = Text("OK", style="vet.ok")
    op = Text(f"  {result.op}", style="vet.op")
    console.print(label, op, end="")
    console.print()


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="vet.key")
    if key == "id":
        v = Text(str(value), style="vet.id")
    elif key in ("name", "owner"):
        v = Text(str(value), style="vet.name")
    elif key == "price":
        v = Text(str(value), style="vet.price")
    elif key == "kind":
        v = Text(str(value), style=style_for_kind(str(value)))
    elif isinstance(value, (dict, list)):
        v = Text(_json.dumps(value, separators=(",", ":")))
    else:
        v = Text(str(value))
    console.print(Text.assemble(k, v))


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print meta block including telemetry span tree (verbose only)."""
    if not result.meta:
        return

    console.print()
    console.print(Text("  meta:", style="dim"))

    for k, v in result.meta.items():
        if k == "telemetry":
            _render_telemetry_tree(console, v, indent=4)
        else:
            console.print(f"    {k}: {v}")


def _render_telemetry_tree(
    console: Console,
    span_data: dict[str, Any],
    indent: int = 4,
) -> None:
    """Render a hierarchical span tree with color-coded timing."""
    prefix = " " * indent
    name = span_data.get("name", "?")
    duration = span_data.get("duration_ms", 0.0)

    if duration > 1000:
        style = "bold red"
    elif duration > 100:
        style = "yellow"
    else:
        style = "dim"

    line = f"{prefix}[{style}]{duration:>8.2f}ms[/{style}]  {name}"
    counts = span_data.get("counts") or {}
    if counts:
        line += "  (" + ", ".join(f"{key}={value}" for key, value in counts.items()) + ")"

    console.print(line)

    for child in span_data.get("children", []):
        _render_telemetry_tree(console, child, indent=indent + 4)


def _trait_text(item: dict[str, Any]) -> str:
    """Kind-specific field of an animal dict, as displayed in tables."""
    for key, label in (("breed", "breed"), ("indoor", "indoor"), ("can_fly", "can fly")):
        if key in item:
            value = item[key]
            if isinstance(value, bool):
                return f"{label}: {'true' if value else 'false'}"
            return f"{label}: {value}"
    return ""


def _animal_table(items: list[dict[str, Any]], *, verbose: bool = False) -> Table:
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("ID", style="vet.id", no_wrap=True)
    table.add_column("Name", style="vet.name")
    table.add_column("Kind")
    table.add_column("Age", justify="right")
    table.add_column("Details")
    table.add_column("Owner")
    if verbose:
        table.add_column("Price", style="vet.price")

    for item in items:
        kind = str(item.get("kind", ""))
        row: list[Any] = [
            str(item.get("id", "")),
            str(item.get("name", "")),
            Text(kind, style=style_for_kind(kind)),
            str(item.get("age", "")),
            _trait_text(item),
            str(item.get("owner") or "—"),
        ]
        if verbose:
            row.append(str(item.get("price", "")))
        table.add_row(*row)
    return table


def _owner_table(items: list[dict[str, Any]]) -> Table:
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Name", style="vet.name")
    table.add_column("ID", style="vet.id", no_wrap=True)
    table.add_column("Phone")
    table.add_column("Pets")

    for item in items:
        table.add_row(
            str(item.get("name", "")),
            str(item.get("id", "")),
            str(item.get("phone_number", "")),
            ", ".join(item.get("pets", [])),
        )
    return table


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="vet.error")
    op = Text(f"  {result.op}", style="vet.op")
    sep = Text(" — ")
    console.print(label, op, sep, msg)

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")


# ── Mutation renderers ────────────────────────────────────────────────


def _render_animal(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render add_animal: the new record and its description."""
    _status_line(console, result)
    d = result.data
    for key in ("id", "name", "kind", "owner"):
        if d.get(key) is not None:
            _field(console, key, d[key])
    if "description" in d:
        _field(console, "description", d["description"])
    if verbose:
        _render_meta(console, result)


def _render_mutation(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render add_owner/assign/delete results."""
    _status_line(console, result)
    mutation_keys = (
        "id",
        "name",
        "kind",
        "phone_number",
        "owner",
        "previous_owner",
        "removed_pets",
        "saved",
    )
    for key in mutation_keys:
        if key in result.data and result.data[key] is not None:
            _field(console, key, result.data[key])
    if verbose:
        _render_meta(console, result)


# ── Query renderers ───────────────────────────────────────────────────


def _render_animal_list(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    items = result.data.get("items", [])
    if "owner" in result.data:
        console.print(Text(f"Pets of {result.data['owner']}", style="vet.name"))
    console.print(_animal_table(items, verbose=verbose))
    console.print(f"\n{result.data.get('count', len(items))} animals")
    if verbose:
        _render_meta(console, result)


def _render_owner_list(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    items = result.data.get("items", [])
    console.print(_owner_table(items))
    console.print(f"\n{result.data.get('count', len(items))} owners")
    if verbose:
        _render_meta(console, result)


def _render_owner_of(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    d = result.data
    _field(console, "id", d.get("id"))
    _field(console, "name", d.get("name"))
    owner = d.get("owner")
    if owner:
        _field(console, "owner", owner["name"])
        _field(console, "phone_number", owner["phone_number"])
    else:
        _field(console, "owner", "none")
    if verbose:
        _render_meta(console, result)


def _render_service(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    console.print(f"  {result.data.get('message', '')}")


# ── Storage renderers ─────────────────────────────────────────────────


def _render_load(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    d = result.data
    for key in ("source", "data_dir", "animals", "owners"):
        if key in d:
            _field(console, key, d[key])
    report = d.get("report") or {}
    skipped = report.get("skipped") or {}
    if any(skipped.values()):
        _field(console, "skipped", ", ".join(f"{k}={v}" for k, v in skipped.items() if v))
    if verbose and report.get("files_missing"):
        _field(console, "files_missing", ", ".join(report["files_missing"]))
    if verbose:
        _render_meta(console, result)


def _render_save(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    d = result.data
    for key in ("animals", "owners", "relations"):
        if key in d:
            _field(console, key, d[key])
    if verbose:
        for path in d.get("files", []):
            console.print(f"    {path}")
        _render_meta(console, result)


# ── Generic fallback ──────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)
    if verbose:
        _render_meta(console, result)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    # Mutations
    "add_animal": _render_animal,
    "add_owner": _render_mutation,
    "assign_owner": _render_mutation,
    "delete_animal": _render_mutation,
    "delete_owner": _render_mutation,
    # Query
    "list_animals": _render_animal_list,
    "pets_of": _render_animal_list,
    "list_owners": _render_owner_list,
    "owner_of": _render_owner_of,
    "provide_service": _render_service,
    # Storage
    "load_all": _render_load,
    "save_all": _render_save,
}
