"""
Root Typer application for the ``ccc`` CLI.

Every command reads the trait registry; none of them build containers.
"""

from __future__ import annotations

import typer
from typer import Typer

from ccc.cli.utils import capability_names, console, err_console, output_rows
from ccc.core.protocols import Capability

app = Typer(
    name="ccc",
    help="ccc: one operation vocabulary over many container backends.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# ── Version callback ─────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        from ccc import __version__

        typer.echo(f"ccc {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(  # noqa: UP007
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """ccc CLI: inspect traits, backends and their capability matrix."""
    from ccc.core.logging import configure_from_settings

    configure_from_settings()


def _parse_capability(name: str | None) -> Capability | None:
    if name is None:
        return None
    try:
        return Capability[name.upper()]
    except KeyError:
        choices = ", ".join(capability_names(~Capability.NONE))
        err_console.print(f"[bold red]Error[/bold red]: unknown capability {name!r} (choose from {choices})")
        raise typer.Exit(code=1) from None


# ── Commands ─────────────────────────────────────────────────────────────


@app.command("traits")
def list_traits_cmd(
    capability: str | None = typer.Option(
        None, "--capability", "-c", help="Only traits available under this capability."
    ),
    as_json: bool = typer.Option(False, "--json", help="Output as JSON."),
) -> None:
    """List every operation in the trait vocabulary."""
    from ccc.framework.registry import get_trait, list_traits

    wanted = _parse_capability(capability)
    rows = []
    for name in list_traits():
        trait = get_trait(name)
        if wanted is not None and not trait.capability & wanted:
            continue
        rows.append(
            {
                "trait": name,
                "capabilities": capability_names(trait.capability) or ["entry/range"],
                "required_for": capability_names(trait.required_for),
                "summary": trait.__doc__,
            }
        )
    output_rows(rows, as_json=as_json, title="Traits")


@app.command("backends")
def list_backends_cmd(
    as_json: bool = typer.Option(False, "--json", help="Output as JSON."),
) -> None:
    """List registered backends and the capabilities they advertise."""
    from ccc.framework.registry import capability_matrix, list_backends

    matrix = capability_matrix()
    rows = [
        {
            "backend": cls.__name__,
            "module": cls.__module__,
            "capabilities": capability_names(cls.capabilities),
            "traits": sum(matrix[cls.__name__].values()),
        }
        for cls in list_backends()
    ]
    output_rows(rows, as_json=as_json, title="Backends")


@app.command("matrix")
def matrix_cmd(
    as_json: bool = typer.Option(False, "--json", help="Output as JSON."),
) -> None:
    """Show which backend implements which trait."""
    from ccc.framework.registry import capability_matrix

    matrix = capability_matrix()
    if as_json:
        output_rows([{"backend": name, **row} for name, row in matrix.items()], as_json=True)
        return
    backends = list(matrix)
    if not backends:
        console.print("[dim]No backends registered.[/dim]")
        return
    rows = [
        {"trait": trait, **{b: matrix[b][trait] for b in backends}}
        for trait in matrix[backends[0]]
    ]
    output_rows(rows, title="Capability matrix")


# ── Sub-command registration ─────────────────────────────────────────────

from ccc.cli.config import app as config_app  # noqa: E402

app.add_typer(config_app, name="config", help="Settings inspection.")
