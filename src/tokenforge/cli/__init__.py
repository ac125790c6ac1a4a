"""
tokenforge CLI package.

- build.py: build artifacts for every theme in a project
- themes.py: inspect registered themes
- tokens.py: validate, serialize, deserialize, diff, bump and resolve token files
- utils.py: shared utilities
"""

from __future__ import annotations

from typing import Annotated

import typer

from tokenforge._version import get_version
from tokenforge.cli.build import build_command
from tokenforge.cli.themes import themes_app
from tokenforge.cli.tokens import tokens_app
from tokenforge.cli.utils import setup_logging, version_callback

__version__ = get_version()

app = typer.Typer(
    help="""tokenforge – design token build pipeline

Command Types:
  • Build: build
    → Merge themes and write CSS, Tailwind, TypeScript and JSON Schema artifacts

  • Themes: themes list, themes show
    → Inspect built-in and project themes

  • Token files: tokens validate|serialize|deserialize|diff|bump|resolve
""",
    no_args_is_help=True,
)


@app.callback()
def main_callback(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            callback=version_callback,
            is_eager=True,
            help="Show version and environment information",
        ),
    ] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging")] = False,
) -> None:
    """tokenforge CLI main callback for global options."""
    setup_logging(verbose)


app.command(name="build")(build_command)
app.add_typer(themes_app, name="themes")
app.add_typer(tokens_app, name="tokens")


def main() -> None:
    app(standalone_mode=True)


__all__ = [
    "__version__",
    "app",
    "main",
    "themes_app",
    "tokens_app",
    "get_version",
    "version_callback",
]
