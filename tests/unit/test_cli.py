"""Tests for CLI commands."""

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from tokenforge.cli import app


@pytest.fixture
def cli_runner():
    """Return a CLI test runner."""
    return CliRunner()


@pytest.fixture
def test_project(tmp_path: Path, write_yaml):
    """Create a project with one extra theme."""
    write_yaml("themes/brand.yaml", {"metadata": {"name": "Brand"}, "colors": {"primary": {"500": "#e11d48"}}})
    (tmp_path / "tokenforge.toml").write_text(
        """
[project]
name = "acme"
output_dir = "out"

[themes]
brand = "themes/brand.yaml"

[build]
themes = ["light", "dark", "brand"]
transformers = ["css", "typescript"]
"""
    )
    return tmp_path


@pytest.fixture
def tokens_file(tmp_path: Path, base_store) -> Path:
    path = tmp_path / "tokens.json"
    path.write_text(json.dumps(base_store.to_dict()), encoding="utf-8")
    return path


def test_version(cli_runner: CliRunner):
    result = cli_runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert "tokenforge version" in result.stdout
    assert "json, yaml" in result.stdout


def test_get_version_reads_checkout_pyproject():
    import tomllib

    from tokenforge._version import get_version

    pyproject = Path(__file__).resolve().parents[2] / "pyproject.toml"
    with pyproject.open("rb") as f:
        expected = tomllib.load(f)["project"]["version"]

    assert get_version() == expected
    assert get_version(pyproject) == expected


@pytest.mark.parametrize(
    "content",
    ['[project]\nname = "other"\nversion = "9.9.9"\n', "not = [toml", None],
)
def test_get_version_ignores_foreign_pyproject(tmp_path: Path, monkeypatch, content):
    from importlib.metadata import PackageNotFoundError

    import tokenforge._version as version_module

    def not_installed(name):
        raise PackageNotFoundError(name)

    monkeypatch.setattr(version_module, "_metadata_version", not_installed)
    pyproject = tmp_path / "pyproject.toml"
    if content is not None:
        pyproject.write_text(content, encoding="utf-8")

    assert version_module.get_version(pyproject) == version_module.FALLBACK_VERSION


# =============================================================================
# build
# =============================================================================


def test_build_without_manifest_uses_defaults(cli_runner: CliRunner, tmp_path: Path):
    """No tokenforge.toml: light and dark, every transformer, into ./dist."""
    result = cli_runner.invoke(app, ["build", "--project", str(tmp_path)])
    assert result.exit_code == 0, result.output

    dist = tmp_path / "dist"
    for theme in ("light", "dark"):
        for filename in ("tokens.css", "tailwind.config.js", "tokens.d.ts", "tokens.schema.json"):
            assert (dist / theme / filename).is_file()
    assert '[data-theme="dark"]' in (dist / "themes.css").read_text(encoding="utf-8")
    assert "Wrote 9 file(s)" in result.stdout


def test_build_with_manifest(cli_runner: CliRunner, test_project: Path):
    result = cli_runner.invoke(app, ["build", "--project", str(test_project)])
    assert result.exit_code == 0, result.output

    out = test_project / "out"
    assert sorted(p.name for p in out.iterdir()) == ["brand", "dark", "light", "themes.css"]
    assert "--color-primary-500: #e11d48;" in (out / "brand" / "tokens.css").read_text(encoding="utf-8")
    assert not (out / "brand" / "tailwind.config.js").exists()


def test_build_selected_theme(cli_runner: CliRunner, test_project: Path, tmp_path: Path):
    out = tmp_path / "custom"
    result = cli_runner.invoke(
        app,
        ["build", "-p", str(test_project), "-t", "brand", "-o", str(out), "--no-multi-theme"],
    )
    assert result.exit_code == 0, result.output
    assert sorted(p.name for p in out.iterdir()) == ["brand"]


def test_build_unknown_theme(cli_runner: CliRunner, test_project: Path):
    result = cli_runner.invoke(app, ["build", "-p", str(test_project), "-t", "sepia"])
    assert result.exit_code == 1
    assert "Theme not registered" in result.output


def test_build_reports_failed_artifacts(cli_runner: CliRunner, tmp_path: Path, write_yaml):
    write_yaml("broken.yaml", {"colors": "red"})
    (tmp_path / "tokenforge.toml").write_text(
        '[themes]\nbroken = "broken.yaml"\n\n'
        '[build]\nthemes = ["light", "broken"]\ntransformers = ["css", "json-schema"]\n'
    )

    result = cli_runner.invoke(app, ["build", "-p", str(tmp_path), "--no-multi-theme"])

    assert result.exit_code == 1
    assert "broken / css" in result.output
    assert (tmp_path / "dist" / "light" / "tokens.css").is_file()
    assert (tmp_path / "dist" / "broken" / "tokens.schema.json").is_file()


def test_build_bad_manifest(cli_runner: CliRunner, tmp_path: Path):
    (tmp_path / "tokenforge.toml").write_text("[build\n")
    result = cli_runner.invoke(app, ["build", "-p", str(tmp_path)])
    assert result.exit_code == 1
    assert "Invalid TOML" in result.output


# =============================================================================
# themes
# =============================================================================


def test_themes_list(cli_runner: CliRunner, test_project: Path):
    result = cli_runner.invoke(app, ["themes", "list", "-p", str(test_project)])
    assert result.exit_code == 0, result.output
    assert "light" in result.stdout
    assert "brand" in result.stdout
    assert "built-in" in result.stdout
    assert "DARK" in result.stdout


def test_themes_show_json(cli_runner: CliRunner, tmp_path: Path):
    result = cli_runner.invoke(app, ["themes", "show", "dark", "-p", str(tmp_path)])
    assert result.exit_code == 0, result.output

    data = json.loads(result.stdout)
    assert data["metadata"]["id"] == "dark"
    assert data["colors"]["background"]["default"] == "#0a0a0a"


def test_themes_show_project_theme_yaml(cli_runner: CliRunner, test_project: Path):
    result = cli_runner.invoke(app, ["themes", "show", "brand", "-p", str(test_project), "--format", "yaml"])
    assert result.exit_code == 0, result.output
    assert "name: Brand" in result.stdout


def test_themes_show_unknown(cli_runner: CliRunner, tmp_path: Path):
    result = cli_runner.invoke(app, ["themes", "show", "sepia", "-p", str(tmp_path)])
    assert result.exit_code == 1
    assert "sepia" in result.output


# =============================================================================
# tokens
# =============================================================================


def test_tokens_validate_success(cli_runner: CliRunner, tokens_file: Path):
    result = cli_runner.invoke(app, ["tokens", "validate", str(tokens_file)])
    assert result.exit_code == 0, result.output
    assert "OK:" in result.stdout


def test_tokens_validate_reports_issues(cli_runner: CliRunner, tmp_path: Path, base_store):
    data = base_store.to_dict()
    data["colors"]["primary"]["500"] = "blue"
    data["typography"]["fontWeight"]["bold"] = 750
    path = tmp_path / "bad.json"
    path.write_text(json.dumps(data), encoding="utf-8")

    result = cli_runner.invoke(app, ["tokens", "validate", str(path)])

    assert result.exit_code == 1
    assert "Validation failed (2 issue(s))" in result.output
    assert "colors.primary.500" in result.output


def test_tokens_validate_custom_schema(cli_runner: CliRunner, tokens_file: Path, tmp_path: Path):
    schema = tmp_path / "schema.json"
    schema.write_text(json.dumps({"type": "object", "required": ["opacity"]}), encoding="utf-8")

    result = cli_runner.invoke(app, ["tokens", "validate", str(tokens_file), "--schema", str(schema)])

    assert result.exit_code == 1
    assert "opacity" in result.output


def test_tokens_validate_missing_file(cli_runner: CliRunner, tmp_path: Path):
    result = cli_runner.invoke(app, ["tokens", "validate", str(tmp_path / "nope.json")])
    assert result.exit_code == 1
    assert "Token file not found" in result.output


def test_tokens_serialize_to_stdout(cli_runner: CliRunner, tokens_file: Path):
    result = cli_runner.invoke(app, ["tokens", "serialize", str(tokens_file), "-f", "yaml", "-c", "gzip"])
    assert result.exit_code == 0, result.output

    wire = json.loads(result.stdout)
    assert wire["format"] == "yaml"
    assert wire["dataEncoding"] == "base64"
    assert wire["metadata"]["compression"] == "gzip"


def test_tokens_serialize_unknown_format(cli_runner: CliRunner, tokens_file: Path):
    result = cli_runner.invoke(app, ["tokens", "serialize", str(tokens_file), "-f", "xml"])
    assert result.exit_code == 1
    assert "Unsupported format" in result.output


def test_tokens_serialize_deserialize_round_trip(
    cli_runner: CliRunner, tokens_file: Path, tmp_path: Path, base_store
):
    envelope = tmp_path / "tokens.envelope.json"
    restored = tmp_path / "restored.yaml"

    first = cli_runner.invoke(
        app, ["tokens", "serialize", str(tokens_file), "-f", "binary", "-c", "brotli", "-o", str(envelope)]
    )
    assert first.exit_code == 0, first.output
    assert envelope.is_file()

    second = cli_runner.invoke(app, ["tokens", "deserialize", str(envelope), "-o", str(restored)])
    assert second.exit_code == 0, second.output

    from tokenforge.core.loader import load_token_store

    assert load_token_store(restored).to_dict() == base_store.to_dict()


def test_tokens_deserialize_to_stdout(cli_runner: CliRunner, tokens_file: Path, tmp_path: Path):
    envelope = tmp_path / "env.json"
    cli_runner.invoke(app, ["tokens", "serialize", str(tokens_file), "-o", str(envelope)])

    result = cli_runner.invoke(app, ["tokens", "deserialize", str(envelope)])

    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout)["metadata"]["id"] == "base"


def test_tokens_deserialize_tampered(cli_runner: CliRunner, tokens_file: Path, tmp_path: Path):
    envelope = tmp_path / "env.json"
    cli_runner.invoke(app, ["tokens", "serialize", str(tokens_file), "-o", str(envelope)])
    wire = json.loads(envelope.read_text(encoding="utf-8"))
    wire["data"] = wire["data"].replace("#3b82f6", "#000000")
    envelope.write_text(json.dumps(wire), encoding="utf-8")

    result = cli_runner.invoke(app, ["tokens", "deserialize", str(envelope)])

    assert result.exit_code == 1
    assert "Checksum mismatch" in result.output


def test_tokens_deserialize_missing(cli_runner: CliRunner, tmp_path: Path):
    result = cli_runner.invoke(app, ["tokens", "deserialize", str(tmp_path / "nope.json")])
    assert result.exit_code == 1
    assert "Envelope not found" in result.output


def test_tokens_diff(cli_runner: CliRunner, tmp_path: Path, write_yaml):
    old = write_yaml("old.yaml", {"colors": {"primary": {"500": "#3b82f6"}}, "spacing": {"4": "1rem"}})
    new = write_yaml("new.yaml", {"colors": {"primary": {"500": "#e11d48"}}, "spacing": {"4": "1rem", "5": "1.25rem"}})

    result = cli_runner.invoke(app, ["tokens", "diff", str(old), str(new), "--format", "text"])

    assert result.exit_code == 0, result.output
    assert "TOKEN DIFF REPORT" in result.stdout
    assert "MODIFIED: colors.primary.500" in result.stdout
    assert "ADDED: spacing.5" in result.stdout


def test_tokens_diff_fail_on_breaking(cli_runner: CliRunner, write_yaml):
    old = write_yaml("old.yaml", {"spacing": {"4": "1rem", "8": "2rem"}})
    new = write_yaml("new.yaml", {"spacing": {"4": "1rem"}})

    relaxed = cli_runner.invoke(app, ["tokens", "diff", str(old), str(new)])
    strict = cli_runner.invoke(app, ["tokens", "diff", str(old), str(new), "--fail-on-breaking"])

    assert relaxed.exit_code == 0
    assert "# Token Diff Report" in relaxed.stdout
    assert strict.exit_code == 1


def test_tokens_bump(cli_runner: CliRunner, tmp_path: Path, write_yaml):
    meta = {"id": "acme", "name": "Acme", "category": "test", "version": "1.4.2"}
    old = write_yaml("old.yaml", {"metadata": meta, "colors": {"primary": {"500": "#3b82f6"}}})
    new = write_yaml("new.yaml", {"metadata": meta, "colors": {"primary": {"500": "#e11d48"}}})
    stamped = tmp_path / "stamped.json"

    result = cli_runner.invoke(app, ["tokens", "bump", str(old), str(new), "--output", str(stamped)])

    assert result.exit_code == 0, result.output
    assert "1.4.2 -> 1.5.0 (minor)" in result.stdout
    data = json.loads(stamped.read_text(encoding="utf-8"))
    assert data["metadata"]["version"] == "1.5.0"
    assert data["colors"]["primary"]["500"] == "#e11d48"


def test_tokens_bump_breaking_and_unchanged(cli_runner: CliRunner, tokens_file: Path, tmp_path: Path, base_store):
    tree = base_store.to_dict()
    del tree["colors"]["primary"]["950"]
    trimmed = tmp_path / "trimmed.json"
    trimmed.write_text(json.dumps(tree), encoding="utf-8")

    breaking = cli_runner.invoke(app, ["tokens", "bump", str(tokens_file), str(trimmed)])
    unchanged = cli_runner.invoke(app, ["tokens", "bump", str(tokens_file), str(tokens_file)])

    assert breaking.exit_code == 0, breaking.output
    assert "1.0.0 -> 2.0.0 (major)" in breaking.stdout
    assert "No token changes; version stays 1.0.0" in unchanged.stdout


def test_tokens_bump_invalid_version(cli_runner: CliRunner, write_yaml):
    meta = {"id": "acme", "name": "Acme", "category": "test", "version": "latest"}
    old = write_yaml("old.yaml", {"metadata": meta, "spacing": {"4": "1rem"}})

    result = cli_runner.invoke(app, ["tokens", "bump", str(old), str(old)])

    assert result.exit_code == 1
    assert "Invalid semantic version" in result.output


def test_tokens_resolve(cli_runner: CliRunner, tokens_file: Path):
    result = cli_runner.invoke(app, ["tokens", "resolve", str(tokens_file), "colors.primary.500"])
    assert result.exit_code == 0
    assert result.stdout.strip() == "#3b82f6"


def test_tokens_resolve_fallback_and_missing(cli_runner: CliRunner, tokens_file: Path):
    fallback = cli_runner.invoke(
        app, ["tokens", "resolve", str(tokens_file), "colors.brand.500", "--fallback", "#111111"]
    )
    missing = cli_runner.invoke(app, ["tokens", "resolve", str(tokens_file), "colors.brand.500"])

    assert fallback.stdout.strip() == "#111111"
    assert missing.exit_code == 1
    assert "Token not found: colors.brand.500" in missing.output
