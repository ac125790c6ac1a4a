"""
tokenforge CLI utilities.

Shared helpers used across CLI modules.
"""

from __future__ import annotations

import logging
import platform
from collections.abc import Iterable
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape

from tokenforge._version import get_version
from tokenforge.core.errors import TokenForgeError, ValidationIssue
from tokenforge.core.manifest import BuildManifest, get_manifest_path, load_manifest
from tokenforge.serialization.codecs import default_compressions, default_formats

console = Console()
err_console = Console(stderr=True)

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def version_callback(value: bool) -> None:
    """Display version, environment and available codecs."""
    if value:
        typer.echo(f"tokenforge version {get_version()}")
        typer.echo("")
        typer.echo("Environment:")
        typer.echo(f"  Python:        {platform.python_implementation()} {platform.python_version()}")
        typer.echo(f"  Platform:      {platform.system()} {platform.release()}")
        typer.echo("")
        typer.echo("Codecs:")
        typer.echo(f"  Formats:       {', '.join(default_formats().names())}")
        typer.echo(f"  Compression:   {', '.join(['none', *default_compressions().names()])}")
        raise typer.Exit()


def setup_logging(verbose: bool) -> None:
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING, format=LOG_FORMAT)


def fail(message: str, code: int = 1) -> typer.Exit:
    """Print an error to stderr and return the Exit to raise."""
    err_console.print(f"[red]Error:[/red] {escape(message)}")
    return typer.Exit(code)


def print_validation_issues(issues: Iterable[ValidationIssue]) -> None:
    """Print every issue, one per line."""
    issues = list(issues)
    err_console.print(f"[red]Validation failed ({len(issues)} issue(s)):[/red]")
    for issue in issues:
        err_console.print(f"  ERROR: {escape(str(issue))}")


def load_project_manifest(project: Path) -> BuildManifest:
    """Load ``tokenforge.toml`` from ``project``, or defaults when there is none."""
    if not get_manifest_path(project).exists():
        return BuildManifest(root=project)
    try:
        return load_manifest(project)
    except TokenForgeError as e:
        raise fail(str(e)) from e
