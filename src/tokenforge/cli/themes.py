"""
Theme registry CLI commands.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape
from rich.table import Table

from tokenforge.core.errors import TokenForgeError
from tokenforge.core.loader import load_override
from tokenforge.core.registry import ThemeRegistry, create_default_registry
from tokenforge.serialization.codecs import default_formats

from .utils import console, fail, load_project_manifest

themes_app = typer.Typer(help="Inspect registered themes", no_args_is_help=True)

ProjectOption = Annotated[
    Path, typer.Option("--project", "-p", help="Project directory containing tokenforge.toml")
]


def _registry(project: Path) -> tuple[ThemeRegistry, dict[str, str]]:
    """Default registry plus the project's theme files; also returns name -> source."""
    manifest = load_project_manifest(project)
    registry = create_default_registry()
    sources = {name: "built-in" for name in registry.names()}
    try:
        for name, path in manifest.theme_paths().items():
            registry.register(name, load_override(path))
            sources[name] = manifest.themes[name]
    except TokenForgeError as e:
        raise fail(str(e)) from e
    return registry, sources


@themes_app.command("list")
def list_themes(project: ProjectOption = Path(".")) -> None:
    """List registered themes."""
    registry, sources = _registry(project)

    table = Table(title="Themes")
    table.add_column("Name", style="cyan")
    table.add_column("Display name")
    table.add_column("Mode")
    table.add_column("Version")
    table.add_column("Source")
    for name in registry.names():
        meta = registry.get_merged(name).metadata
        table.add_row(name, escape(meta.name), meta.mode.value, meta.version, escape(sources[name]))
    console.print(table)


@themes_app.command("show")
def show_theme(
    name: Annotated[str, typer.Argument(help="Theme name (or 'system')")],
    project: ProjectOption = Path("."),
    fmt: Annotated[str, typer.Option("--format", "-f", help="Output format: json, yaml or toml")] = "json",
) -> None:
    """Print the merged token store for a theme."""
    registry, _ = _registry(project)
    try:
        store = registry.get_merged(registry.resolve_theme_name(name))
        codec = default_formats().get(fmt)
    except TokenForgeError as e:
        raise fail(str(e)) from e
    typer.echo(codec.encode(store.to_dict(), True))
