"""
Build command: merge themes and write every requested artifact.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape
from rich.table import Table

from tokenforge.core.errors import TokenForgeError
from tokenforge.core.pipeline import MULTI_THEME_CSS, BuildPipeline

from .utils import console, err_console, fail, load_project_manifest


def build_command(
    project: Annotated[
        Path, typer.Option("--project", "-p", help="Project directory containing tokenforge.toml")
    ] = Path("."),
    theme: Annotated[
        list[str] | None,
        typer.Option("--theme", "-t", help="Theme to build (repeatable; default: [build].themes)"),
    ] = None,
    output: Annotated[
        Path | None, typer.Option("--output", "-o", help="Output directory (default: [project].output_dir)")
    ] = None,
    multi_theme: Annotated[
        bool,
        typer.Option("--multi-theme/--no-multi-theme", help="Also write one stylesheet scoped per theme"),
    ] = True,
) -> None:
    """Build artifacts for each theme into <output>/<theme>/."""
    manifest = load_project_manifest(project)
    themes = theme or manifest.build.themes
    out_dir = output or manifest.output_path

    try:
        pipeline = BuildPipeline.from_manifest(manifest)
        results = pipeline.build(themes)
    except TokenForgeError as e:
        raise fail(str(e)) from e

    written = pipeline.write(results, out_dir)
    if multi_theme and "css" in pipeline.requests:
        css_options = pipeline.requests.get("css") or None
        out_dir.mkdir(parents=True, exist_ok=True)
        path = out_dir / MULTI_THEME_CSS
        path.write_text(pipeline.build_multi_theme_css(list(results), css_options), encoding="utf-8")
        written.append(path)

    table = Table(title="Artifacts")
    table.add_column("Theme", style="cyan")
    table.add_column("Transformer")
    table.add_column("File")
    for name, result in results.items():
        for transformer, artifact in result.report.artifacts.items():
            table.add_row(name, transformer, str(out_dir / name / artifact.filename))
    console.print(table)

    failed = False
    for name, result in results.items():
        for transformer, error in result.report.errors.items():
            failed = True
            err_console.print(f"[red]{escape(name)} / {escape(transformer)}:[/red] {escape(str(error))}")

    console.print(f"Wrote {len(written)} file(s) to {escape(str(out_dir))}")
    if failed:
        raise typer.Exit(1)
