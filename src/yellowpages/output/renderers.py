"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO). The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json as _json
from typing import TYPE_CHECKING, Any

from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from yellowpages.output.console import create_console, get_output, style_for_lifecycle

if TYPE_CHECKING:
    from rich.console import Console

    from yellowpages.services.result import ServiceResult


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
        if verbose:
            _render_meta(console, result)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


_LIST_KEYS = ("services", "systems", "owners", "results", "orphans")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode: ids only."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    for key in _LIST_KEYS:
        items = result.data.get(key)
        if isinstance(items, list):
            return "\n".join(_extract_id(item) for item in items if _extract_id(item))

    if "id" in result.data:
        return str(result.data["id"])
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _extract_id(item: Any) -> str:
    if isinstance(item, dict) and item.get("id") is not None:
        return str(item["id"])
    return ""


def _status_line(console: Console, result: ServiceResult, message: str = "") -> None:
    label = Text("OK", style="yp.ok")
    op = Text(f"  {result.op}", style="yp.op")
    console.print(label, op, Text(f"  {message}") if message else "", end="")
    console.print()


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="yp.key")
    if key == "id" or key.endswith("_id"):
        v = Text(str(value), style="yp.id")
    elif key == "name":
        v = Text(str(value), style="yp.name")
    else:
        v = Text(str(value))
    console.print(k, v, end="")
    console.print()


def _name_and_id(name: str, record_id: str) -> Text:
    text = Text(name, style="yp.name")
    text.append(f"  {record_id}", style="yp.id")
    return text


def _edge_suffix(api: str | None, description: str | None) -> str:
    suffix = f" ({api})" if api else ""
    if description:
        suffix += f" - {description}"
    return suffix


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
    annotations = span_data.get("annotations") or {}
    if annotations:
        line += "  (" + ", ".join(f"{k}={v}" for k, v in annotations.items()) + ")"
    console.print(line)

    for child in span_data.get("children", []):
        _render_telemetry_tree(console, child, indent=indent + 4)


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="yp.error")
    op = Text(f"  {result.op}", style="yp.op")
    console.print(label, op, Text(f" — {msg}"))

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")


# ── Mutation renderers ────────────────────────────────────────────────


def _render_added(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render add_service / add_system / add_owner."""
    kind = result.op.removeprefix("add_")
    record = result.data.get(kind, {})
    _status_line(console, result, f"{kind.capitalize()} added")
    _field(console, "id", result.data.get("id", ""))
    _field(console, "name", record.get("name", ""))


def _render_updated(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    _field(console, "id", result.data.get("id", ""))
    if "fields_changed" in result.data:
        _field(console, "fields_changed", ", ".join(result.data["fields_changed"]) or "-")
    if "api" in result.data:
        api = result.data["api"]
        _field(console, "api", f"{api.get('name')} ({api.get('type')})")
    if "dependency" in result.data:
        _field(console, "depends_on", result.data["dependency"].get("service", ""))


def _render_removed(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    kind = result.op.removeprefix("remove_")
    _status_line(console, result, f"Removed {kind} {result.data.get('name', '')}")
    _field(console, "id", result.data.get("id", ""))


def _render_init(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    path = result.data.get("path", "")
    if result.data.get("created"):
        _status_line(console, result, "Catalog created")
        _field(console, "path", path)
        console.print(Text("  Next: yp service add --name <name>", style="yp.hint"))
    else:
        console.print(Text("Catalog already exists at ", style="dim"), Text(str(path)))


def _render_onboard(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    file = result.data.get("file", "")
    if result.data.get("updated"):
        _status_line(console, result, f"Added yellowpages instructions to {file}")
    else:
        console.print(Text(f"{file} already has yellowpages instructions.", style="dim"))


# ── List renderers ────────────────────────────────────────────────────


def _render_service_list(
    result: ServiceResult, console: Console, *, verbose: bool = False
) -> None:
    services = result.data.get("services", [])
    if not services:
        console.print(Text("No services found.", style="dim"))
        return

    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Name", style="yp.name")
    table.add_column("ID", style="yp.id", no_wrap=True)
    table.add_column("Lifecycle")
    table.add_column("Description")
    if verbose:
        table.add_column("Tags", style="dim")
    for s in services:
        lifecycle = str(s.get("lifecycle") or "")
        row: list[Any] = [
            s.get("name", ""),
            s.get("id", ""),
            Text(lifecycle, style=style_for_lifecycle(lifecycle)),
            s.get("description") or "",
        ]
        if verbose:
            row.append(", ".join(s.get("tags") or []))
        table.add_row(*row)
    console.print(table)
    console.print(f"\n{result.data.get('count', len(services))} services")


def _render_system_list(
    result: ServiceResult, console: Console, *, verbose: bool = False
) -> None:
    systems = result.data.get("systems", [])
    if not systems:
        console.print(Text("No systems found.", style="dim"))
        return

    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Name", style="yp.name")
    table.add_column("ID", style="yp.id", no_wrap=True)
    table.add_column("Services", justify="right")
    table.add_column("Description")
    for s in systems:
        table.add_row(
            s.get("name", ""),
            s.get("id", ""),
            str(s.get("serviceCount", 0)),
            s.get("description") or "",
        )
    console.print(table)


def _render_owner_list(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    owners = result.data.get("owners", [])
    if not owners:
        console.print(Text("No owners found.", style="dim"))
        return

    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Name", style="yp.name")
    table.add_column("ID", style="yp.id", no_wrap=True)
    table.add_column("Type")
    table.add_column("Contact", style="dim")
    for o in owners:
        contact = " ".join(c for c in (o.get("email"), o.get("slack")) if c)
        table.add_row(o.get("name", ""), o.get("id", ""), o.get("type", ""), contact)
    console.print(table)


# ── Show renderers ────────────────────────────────────────────────────


def _render_show_service(
    result: ServiceResult, console: Console, *, verbose: bool = False
) -> None:
    d = result.data
    svc = d["service"]
    lines: list[str] = []
    if svc.get("description"):
        lines.append(svc["description"])
        lines.append("")
    if d.get("owner"):
        lines.append(f"Owner:     {d['owner']['name']}")
    elif svc.get("owner"):
        lines.append(f"Owner:     {svc['owner']} (missing)")
    if d.get("system"):
        lines.append(f"System:    {d['system']['name']}")
    elif svc.get("system"):
        lines.append(f"System:    {svc['system']} (missing)")
    for key, label in (("lifecycle", "Lifecycle"), ("repo", "Repo")):
        if svc.get(key):
            lines.append(f"{label + ':':<11}{svc[key]}")
    if svc.get("tags"):
        lines.append(f"Tags:      {', '.join(svc['tags'])}")

    apis = svc.get("apis") or []
    if apis:
        lines.append("")
        lines.append("APIs")
        for api in apis:
            desc = f" - {api['description']}" if api.get("description") else ""
            lines.append(f"  {api['name']} ({api.get('type', 'other')}){desc}")

    if d.get("dependencies"):
        lines.append("")
        lines.append("Dependencies")
        for dep in d["dependencies"]:
            lines.append(f"  → {dep['name']}{_edge_suffix(dep.get('api'), dep.get('description'))}")

    if d.get("dependents"):
        lines.append("")
        lines.append("Dependents")
        for dep in d["dependents"]:
            lines.append(f"  ← {dep['name']}{_edge_suffix(dep.get('api'), dep.get('description'))}")

    title = f"{svc.get('name', '?')} — {svc.get('id', '?')}"
    style = style_for_lifecycle(svc.get("lifecycle"))
    body = Text("\n".join(lines) or "-")
    console.print(Panel(body, title=title, border_style=style or "dim", expand=False))


def _render_show_system(
    result: ServiceResult, console: Console, *, verbose: bool = False
) -> None:
    d = result.data
    system = d["system"]
    lines: list[str] = []
    if system.get("description"):
        lines.extend([system["description"], ""])
    if d.get("owner"):
        lines.append(f"Owner: {d['owner']['name']}")
    services = d.get("services", [])
    lines.append(f"Services ({len(services)})")
    for s in services:
        lifecycle = f" [{s['lifecycle']}]" if s.get("lifecycle") else ""
        lines.append(f"  • {s['name']}{lifecycle}")
    title = f"{system.get('name', '?')} — {system.get('id', '?')}"
    console.print(Panel(Text("\n".join(lines)), title=title, border_style="dim", expand=False))


def _render_show_owner(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    owner = d["owner"]
    lines = [f"Type: {owner.get('type', '')}"]
    if owner.get("email"):
        lines.append(f"Email: {owner['email']}")
    if owner.get("slack"):
        lines.append(f"Slack: {owner['slack']}")
    for key in ("systems", "services"):
        items = d.get(key, [])
        if items:
            lines.append("")
            lines.append(f"{key.capitalize()} ({len(items)})")
            lines.extend(f"  • {item['name']}" for item in items)
    title = f"{owner.get('name', '?')} — {owner.get('id', '?')}"
    console.print(Panel(Text("\n".join(lines)), title=title, border_style="dim", expand=False))


# ── Graph renderers ───────────────────────────────────────────────────


def _add_dep_nodes(tree: Tree, nodes: list[dict[str, Any]], arrow: str) -> None:
    for node in nodes:
        label = Text(f"{arrow} ")
        label.append(node["name"], style="yp.name")
        suffix = _edge_suffix(node.get("api"), node.get("description"))
        if suffix:
            label.append(suffix, style="dim")
        branch = tree.add(label)
        _add_dep_nodes(branch, node.get("children", []), arrow)


def _render_deps(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    service = d["service"]
    direction = d.get("direction")
    console.print(_name_and_id(service["name"], service["id"]))

    sections: list[tuple[str, str, str]] = []
    if direction != "down":
        sections.append(("dependents", "Depended on by", "←"))
    if direction != "up":
        sections.append(("dependencies", "Depends on", "→"))

    for key, heading, arrow in sections:
        console.print()
        nodes = d.get(key, [])
        if not nodes:
            console.print(Text(f"{heading}: none", style="dim"))
            continue
        tree = Tree(Text(heading, style="bold"))
        _add_dep_nodes(tree, nodes, arrow)
        console.print(tree)


def _render_orphans(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    orphans = result.data.get("orphans", [])
    if not orphans:
        console.print("[yp.ok]OK[/yp.ok]  No orphaned services.")
        return
    console.print(Text(f"Orphaned services ({len(orphans)})", style="bold"))
    for o in orphans:
        console.print(Text("  • "), _name_and_id(o["name"], o["id"]))


def _render_export_graph(
    result: ServiceResult, console: Console, *, verbose: bool = False
) -> None:
    _status_line(console, result)
    for key in ("format", "output_file", "node_count", "edge_count"):
        if key in result.data:
            _field(console, key, result.data[key])
    if result.data.get("missing"):
        _field(console, "missing", ", ".join(result.data["missing"]))


# ── Lint renderer ─────────────────────────────────────────────────────


def _render_lint(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render lint findings grouped into errors and warnings."""
    findings = result.data.get("results", [])
    errors = result.data.get("errors", 0)
    warnings = result.data.get("warnings", 0)

    if not findings and errors == 0:
        console.print("[yp.ok]OK[/yp.ok]  Catalog is clean.")
        if warnings:
            console.print(Text(f"{warnings} warnings hidden", style="dim"))
        return

    groups = (("error", "Errors", "yp.error"), ("warning", "Warnings", "yp.warning"))
    for severity, heading, style in groups:
        items = [f for f in findings if f.get("severity") == severity]
        if not items:
            continue
        console.print(f"\n[{style}]{heading}[/{style}]")
        for f in items:
            console.print(
                Text(f"  {f.get('entityKind', '')} "),
                Text(str(f.get("entity", "")), style="yp.name"),
                Text(f": {f.get('message', '')}"),
            )
            if f.get("fix"):
                console.print(Text(f"    fix: {f['fix']}", style="yp.hint"))

    console.print(f"\n{errors} errors, {warnings} warnings")


# ── Search renderer ───────────────────────────────────────────────────


def _render_search(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    results = result.data.get("results", [])
    query = result.data.get("query")
    if not results:
        msg = f'No results for "{query}"' if query else "No results matching filters"
        console.print(Text(msg, style="dim"))
        return

    for kind in ("service", "system", "owner"):
        items = [r for r in results if r.get("kind") == kind]
        if not items:
            continue
        console.print(f"\n[bold]{kind}s[/bold]")
        for item in items:
            line = Text("  • ")
            line.append_text(_name_and_id(item["name"], item["id"]))
            if item.get("score"):
                line.append(f"  ({item['score']:.1f})", style="yp.score")
            console.print(line)
            if item.get("description"):
                console.print(Text(f"    {item['description']}", style="dim"))

    console.print(f"\n{result.data.get('count', len(results))} result(s)")


# ── Discover renderer ─────────────────────────────────────────────────


def _render_discover(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    added = d.get("added", [])
    updated = d.get("updated", [])
    dry_run = d.get("dry_run", False)

    if d.get("discovered", 0) == 0:
        console.print(Text("No services discovered.", style="dim"))
        return

    add_heading, update_heading = ("Would add", "Would update") if dry_run else ("Added", "Updated")
    for heading, items in ((add_heading, added), (update_heading, updated)):
        if not items:
            continue
        console.print(f"\n[bold]{heading}[/bold]")
        for item in items:
            line = Text("  • ")
            line.append(item["name"], style="yp.name")
            if item.get("id"):
                line.append(f"  {item['id']}", style="yp.id")
            if item.get("source"):
                line.append(f"  [{item['source']}]", style="dim")
            console.print(line)

    if d.get("unchanged"):
        console.print(Text(f"\n{d['unchanged']} service(s) unchanged", style="dim"))
    console.print(
        f"\nDiscovered {d.get('discovered', 0)}, "
        f"{'would add' if dry_run else 'added'} {len(added)}, "
        f"{'would update' if dry_run else 'updated'} {len(updated)}"
    )
    if dry_run:
        console.print("[yp.warning]Dry run[/yp.warning]  no changes made.")


# ── Fallback ──────────────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, (dict, list)):
            _field(console, key, _json.dumps(value, separators=(",", ":")))
        else:
            _field(console, key, value)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    # Setup
    "init": _render_init,
    "onboard": _render_onboard,
    # Mutations
    "add_service": _render_added,
    "add_system": _render_added,
    "add_owner": _render_added,
    "update_service": _render_updated,
    "add_api": _render_updated,
    "add_dependency": _render_updated,
    "remove_service": _render_removed,
    "remove_system": _render_removed,
    "remove_owner": _render_removed,
    # Query
    "list_services": _render_service_list,
    "list_systems": _render_system_list,
    "list_owners": _render_owner_list,
    "show_service": _render_show_service,
    "show_system": _render_show_system,
    "show_owner": _render_show_owner,
    "search": _render_search,
    # Graph
    "deps": _render_deps,
    "orphans": _render_orphans,
    "export_graph": _render_export_graph,
    # Integrity
    "lint": _render_lint,
    "discover": _render_discover,
}
