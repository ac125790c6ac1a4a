"""
Token file CLI commands.

Validate, serialize, deserialize, diff, version and resolve token files.
"""

from __future__ import annotations

import asyncio
import json
from enum import StrEnum
from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape

from tokenforge.core.diff import diff_tokens, format_report, summarize
from tokenforge.core.errors import TokenForgeError, TokenValidationError
from tokenforge.core.ir import PathRef
from tokenforge.core.loader import load_token_store, load_tree, write_tree
from tokenforge.core.resolver import resolve
from tokenforge.core.schema import validate
from tokenforge.core.versioning import suggest_version, with_version
from tokenforge.serialization.serializer import SerializationOptions, deserialize, serialize
from tokenforge.serialization.storage import envelope_summary, parse_envelope
from tokenforge.transformers import JSONSchemaTransformer

from .utils import console, fail, print_validation_issues

tokens_app = typer.Typer(help="Work with token files", no_args_is_help=True)

TokenFile = Annotated[Path, typer.Argument(help="Token file (.json, .yaml, .yml or .toml)")]


class ReportFormat(StrEnum):
    MARKDOWN = "markdown"
    TEXT = "text"


@tokens_app.command("validate")
def validate_command(
    file: TokenFile,
    schema: Annotated[
        Path | None,
        typer.Option("--schema", "-s", help="Schema document (default: the generated JSON Schema)"),
    ] = None,
) -> None:
    """Validate a token store, printing every issue."""
    try:
        store = load_token_store(file)
        schema_doc = load_tree(schema) if schema else JSONSchemaTransformer().transform(store).schema
    except TokenForgeError as e:
        raise fail(str(e)) from e

    result = validate(store, schema_doc)
    if not result.valid:
        print_validation_issues(result.errors)
        raise typer.Exit(1)
    console.print(f"[green]OK:[/green] {escape(str(file))} is valid.")


@tokens_app.command("serialize")
def serialize_command(
    file: TokenFile,
    fmt: Annotated[str, typer.Option("--format", "-f", help="json, yaml, toml or binary")] = "json",
    compression: Annotated[
        str, typer.Option("--compression", "-c", help="none, gzip or brotli")
    ] = "none",
    minify: Annotated[bool, typer.Option("--minify", help="Compact payload encoding")] = False,
    output: Annotated[
        Path | None, typer.Option("--output", "-o", help="Envelope file (default: stdout)")
    ] = None,
) -> None:
    """Serialize a token store into an envelope document."""
    options = SerializationOptions(format=fmt, compression=compression, minify=minify)
    try:
        store = load_token_store(file)
        envelope = asyncio.run(serialize(store, options))
    except TokenValidationError as e:
        print_validation_issues(e.issues)
        raise typer.Exit(1) from e
    except TokenForgeError as e:
        raise fail(str(e)) from e

    text = envelope.to_json()
    if output is None:
        typer.echo(text)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text, encoding="utf-8")
    console.print(f"Wrote envelope to {escape(str(output))}")
    console.print_json(json.dumps(envelope_summary(envelope)))


@tokens_app.command("deserialize")
def deserialize_command(
    envelope_file: Annotated[Path, typer.Argument(help="Envelope document written by 'serialize'")],
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Token file to write; format from suffix (default: JSON on stdout)"),
    ] = None,
    no_validate: Annotated[bool, typer.Option("--no-validate", help="Skip re-validation")] = False,
) -> None:
    """Verify and decode an envelope back into a token file."""
    try:
        envelope = parse_envelope(envelope_file.read_text(encoding="utf-8"))
        store = asyncio.run(deserialize(envelope, validate=not no_validate))
        if output is not None:
            write_tree(store.to_dict(), output)
    except FileNotFoundError as e:
        raise fail(f"Envelope not found: {envelope_file}") from e
    except TokenValidationError as e:
        print_validation_issues(e.issues)
        raise typer.Exit(1) from e
    except TokenForgeError as e:
        raise fail(str(e)) from e

    if output is None:
        typer.echo(json.dumps(store.to_dict(), indent=2))
    else:
        console.print(f"Wrote tokens to {escape(str(output))}")


@tokens_app.command("diff")
def diff_command(
    old: Annotated[Path, typer.Argument(help="Previous token file")],
    new: Annotated[Path, typer.Argument(help="Current token file")],
    fmt: Annotated[ReportFormat, typer.Option("--format", "-f", help="Report format")] = ReportFormat.MARKDOWN,
    include_metadata: Annotated[
        bool, typer.Option("--include-metadata", help="Also compare metadata fields")
    ] = False,
    fail_on_breaking: Annotated[
        bool, typer.Option("--fail-on-breaking", help="Exit 1 when breaking changes are found")
    ] = False,
) -> None:
    """Report added, modified and removed tokens with impact analysis."""
    try:
        diffs = diff_tokens(load_tree(old), load_tree(new), ignore_metadata=not include_metadata)
    except TokenForgeError as e:
        raise fail(str(e)) from e

    summary = summarize(diffs)
    typer.echo(format_report(diffs, summary, fmt.value))
    if fail_on_breaking and summary.breaking:
        raise typer.Exit(1)


@tokens_app.command("bump")
def bump_command(
    old: Annotated[Path, typer.Argument(help="Previous token file (its metadata.version is the base)")],
    new: Annotated[Path, typer.Argument(help="Current token file")],
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write the current tokens stamped with the new version"),
    ] = None,
) -> None:
    """Suggest the next semantic version from the changes between two token files."""
    try:
        old_store = load_token_store(old)
        new_store = load_token_store(new)
        version, bump = suggest_version(old_store, new_store)
        if output is not None:
            write_tree(with_version(new_store, version).to_dict(), output)
    except TokenForgeError as e:
        raise fail(str(e)) from e

    if bump is None:
        console.print(f"No token changes; version stays {version}")
    else:
        console.print(f"{old_store.metadata.version} -> {version} ({bump})")
    if output is not None:
        console.print(f"Wrote tokens to {escape(str(output))}")


@tokens_app.command("resolve")
def resolve_command(
    file: TokenFile,
    path: Annotated[str, typer.Argument(help="Dotted token path, e.g. colors.primary.500")],
    fallback: Annotated[
        str | None, typer.Option("--fallback", help="Value when the path does not resolve")
    ] = None,
) -> None:
    """Resolve a token path to its value."""
    try:
        tree = load_tree(file)
    except TokenForgeError as e:
        raise fail(str(e)) from e

    value = resolve(PathRef(token=path, fallback=fallback), tree)
    if not value:
        raise fail(f"Token not found: {path}")
    typer.echo(value)
