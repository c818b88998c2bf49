"""CLI entry point for ral - inspect and change resources on this host."""

from pathlib import Path
from typing import Annotated, List, NoReturn, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ral import __version__
from ral.config import RalConfig, resolve_config
from ral.constants import CONFIG_FILENAME, NAME_ATTR
from ral.core.attributes import AttrMap, ChangeList
from ral.core.provider import Provider
from ral.core.registry import ProviderRegistry
from ral.core.resource import Resource
from ral.exceptions import RalError
from ral.logging import configure_logging

app = typer.Typer(
    name="ral",
    help="Inspect and change resources (users, packages, files, ...) on this host.",
    no_args_is_help=True,
    add_completion=False,
)

console = Console()
err_console = Console(stderr=True)


def _fail(message: str) -> NoReturn:
    err_console.print(f"[red]Error:[/red] {escape(message)}")
    raise typer.Exit(1)


@app.callback()
def main(
    ctx: typer.Context,
    config_path: Annotated[
        Optional[Path],
        typer.Option(
            "--config",
            "-c",
            help=f"Path to {CONFIG_FILENAME} (default: search from the current directory).",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log debug output to stderr."),
    ] = False,
) -> None:
    """Inspect and change resources on this host."""
    if ctx.invoked_subcommand in ("init", "version"):
        return
    try:
        config = resolve_config(config_path)
    except RalError as e:
        _fail(str(e))
    configure_logging("debug" if verbose else config.log_level)
    ctx.obj = config


def _load_providers(ctx: typer.Context) -> None:
    config: RalConfig = ctx.obj
    ProviderRegistry.clear()
    ProviderRegistry.load(config)


def _get_provider(ctx: typer.Context, type_name: str) -> Provider:
    _load_providers(ctx)
    try:
        return ProviderRegistry.get(type_name)
    except RalError as e:
        _fail(str(e))


def _print_resource(type_name: str, rsrc: Resource) -> None:
    attrs = rsrc.to_dict()
    attrs.pop(NAME_ATTR)
    console.print(f"{escape(type_name)} {{ '{escape(rsrc.name)}':")
    width = max((len(k) for k in attrs), default=0)
    for key, value in attrs.items():
        console.print(f"  {escape(key.ljust(width))} => '{escape(value)}',")
    console.print("}")


def _parse_assignments(provider: Provider, assignments: list[str]) -> AttrMap:
    should = AttrMap()
    for assignment in assignments:
        if "=" not in assignment:
            _fail(f"expected ATTR=VALUE but got '{assignment}'")
        attr, text = assignment.split("=", 1)
        if attr == NAME_ATTR:
            _fail("the name can not be changed")
        res = provider.parse(attr, text)
        if not res:
            _fail(res.err().detail)
        should[attr] = res.unwrap()
    return should


def _print_changes(changes: ChangeList) -> None:
    if not changes:
        console.print("[dim]No changes[/dim]")
        return
    for change in changes:
        console.print(f"  [yellow]~[/yellow] {escape(str(change))}")
    console.print(f"\n[bold]Summary:[/bold] {len(changes)} changed")


@app.command()
def providers(ctx: typer.Context) -> None:
    """List the providers that are loaded and suitable on this host."""
    _load_providers(ctx)
    loaded = ProviderRegistry.all()
    if not loaded:
        console.print("[yellow]No providers found.[/yellow]")
        config: RalConfig = ctx.obj
        dirs = ", ".join(str(d) for d in config.data_dirs)
        console.print(f"[dim]Searched data dirs: {escape(dirs)}[/dim]")
        return

    table = Table(title="Providers", show_header=True, header_style="bold cyan")
    table.add_column("Type", style="cyan")
    table.add_column("Provider", style="green")
    table.add_column("Source", style="dim")
    for provider in loaded:
        table.add_row(provider.spec.type_name, provider.qualified_name, provider.source)
    console.print(table)


@app.command()
def describe(
    ctx: typer.Context,
    type_name: Annotated[str, typer.Argument(metavar="TYPE", help="Resource type, e.g. user.")],
) -> None:
    """Show the attributes a resource type has."""
    provider = _get_provider(ctx, type_name)
    spec = provider.spec
    table = Table(title=f"{type_name} ({provider.qualified_name})", show_header=True,
                  header_style="bold cyan")
    table.add_column("Attribute", style="cyan")
    table.add_column("Type", style="green")
    table.add_column("Access")
    table.add_column("Description", style="dim")
    for attr in spec.attrs.values():
        table.add_row(attr.name, str(attr.type), attr.access.value, attr.desc)
    console.print(table)


@app.command()
def show(
    ctx: typer.Context,
    type_name: Annotated[str, typer.Argument(metavar="TYPE", help="Resource type, e.g. user.")],
    name: Annotated[
        Optional[str],
        typer.Argument(help="Resource name; all resources of the type if omitted."),
    ] = None,
) -> None:
    """Show one resource, or all resources of a type.

    Examples:
      ral show user
      ral show user root
    """
    provider = _get_provider(ctx, type_name)
    if name is None:
        for rsrc in provider.instances():
            _print_resource(type_name, rsrc)
        return

    rsrc = provider.find(name)
    if rsrc is None:
        _fail(f"{type_name} '{name}' not found")
    _print_resource(type_name, rsrc)


@app.command()
def diff(
    ctx: typer.Context,
    type_name: Annotated[str, typer.Argument(metavar="TYPE", help="Resource type, e.g. user.")],
    name: Annotated[str, typer.Argument(help="Resource name.")],
    assignments: Annotated[
        List[str],
        typer.Argument(metavar="ATTR=VALUE...", help="Desired attribute values."),
    ],
) -> None:
    """Show what `ral set` would change, without changing anything."""
    provider = _get_provider(ctx, type_name)
    should = _parse_assignments(provider, assignments)
    rsrc = provider.find(name) or provider.create(name)
    changes = ChangeList()
    rsrc.check(changes, should, provider.spec.properties)
    _print_changes(changes)


@app.command("set")
def set_(
    ctx: typer.Context,
    type_name: Annotated[str, typer.Argument(metavar="TYPE", help="Resource type, e.g. user.")],
    name: Annotated[str, typer.Argument(help="Resource name.")],
    assignments: Annotated[
        List[str],
        typer.Argument(metavar="ATTR=VALUE...", help="Desired attribute values."),
    ],
) -> None:
    """Change a resource so its attributes have the given values.

    Examples:
      ral set user alice shell=/bin/zsh
      ral set package tmux ensure=present
    """
    provider = _get_provider(ctx, type_name)
    should = _parse_assignments(provider, assignments)
    rsrc = provider.find(name) or provider.create(name)

    res = rsrc.update(should)
    provider.flush()
    if not res:
        _fail(res.err().detail)

    console.print(f"[green]Updated {escape(type_name)} '{escape(name)}'[/green]")
    _print_changes(res.unwrap())
    _print_resource(type_name, rsrc)


@app.command()
def init(
    path: Annotated[
        Path,
        typer.Argument(help=f"Where to write the config (default: ./{CONFIG_FILENAME})."),
    ] = Path(CONFIG_FILENAME),
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Overwrite an existing file."),
    ] = False,
) -> None:
    """Write a default configuration file."""
    if path.exists() and not force:
        _fail(f"{path} already exists (use --force to overwrite)")
    RalConfig.default().save(path)
    console.print(f"[green]Wrote {escape(str(path))}[/green]")


@app.command()
def version() -> None:
    """Show the version of ral."""
    console.print(f"ral {__version__}")
