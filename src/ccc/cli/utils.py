"""
CLI utility helpers: output formatting.
"""

from __future__ import annotations

import json
from typing import Any

import typer
from rich.console import Console
from rich.table import Table

from ccc.core.protocols import Capability

console = Console()
err_console = Console(stderr=True)


def capability_names(flags: Capability) -> list[str]:
    """Names of the single capabilities set in ``flags``."""
    return [c.name for c in Capability if c.value and c in flags]


def output_rows(
    rows: list[dict[str, Any]],
    *,
    as_json: bool = False,
    title: str = "",
) -> None:
    """Render a list of dicts as a Rich table, or as JSON."""
    if as_json:
        typer.echo(json.dumps(rows, indent=2, default=str))
        return
    if not rows:
        console.print("[dim]No items.[/dim]")
        return
    table = Table(title=title or None, show_lines=False, pad_edge=False)
    for col in rows[0]:
        table.add_column(col, overflow="fold")
    for row in rows:
        table.add_row(*(_cell(v) for v in row.values()))
    console.print(table)


def _cell(value: Any) -> str:
    if isinstance(value, bool):
        return "[green]✓[/green]" if value else "[dim]·[/dim]"
    if isinstance(value, list):
        return " ".join(str(v) for v in value) or "-"
    return str(value)
