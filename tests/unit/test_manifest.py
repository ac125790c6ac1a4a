"""Tests for tokenforge.toml parsing and token file loading."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

MANIFEST = """
[project]
name = "acme"
version = "2.1.0"
output_dir = "build"

[themes]
brand = "themes/brand.yaml"

[build]
themes = ["light", "brand"]
transformers = ["css", "tailwind", "typescript"]
prefix = "acme-"

[build.options.tailwind]
mode = "replace"

[build.options.css]
prefix = "custom-"

[serialization]
format = "yaml"
compression = "gzip"
minify = true
"""


def write_manifest(root: Path, content: str = MANIFEST) -> Path:
    path = root / "tokenforge.toml"
    path.write_text(content, encoding="utf-8")
    return path


class TestLoadManifest:
    """Tests for load_manifest()."""

    def test_full_manifest(self, tmp_path: Path) -> None:
        from tokenforge.core.manifest import load_manifest

        manifest = load_manifest(write_manifest(tmp_path))

        assert manifest.root == tmp_path
        assert manifest.project.name == "acme"
        assert manifest.project.version == "2.1.0"
        assert manifest.output_path == tmp_path / "build"
        assert manifest.theme_paths() == {"brand": tmp_path / "themes" / "brand.yaml"}
        assert manifest.build.themes == ["light", "brand"]
        assert manifest.serialization.format == "yaml"
        assert manifest.serialization.compression == "gzip"
        assert manifest.serialization.minify is True

    def test_accepts_directory(self, tmp_path: Path) -> None:
        from tokenforge.core.manifest import load_manifest

        write_manifest(tmp_path)

        assert load_manifest(tmp_path).project.name == "acme"

    def test_requests_apply_prefix_without_overriding_options(self, tmp_path: Path) -> None:
        from tokenforge.core.manifest import load_manifest

        requests = load_manifest(write_manifest(tmp_path)).build.requests()

        assert requests == {
            "css": {"prefix": "custom-"},
            "tailwind": {"mode": "replace", "prefix": "acme-"},
            "typescript": {},
        }

    def test_defaults(self, tmp_path: Path) -> None:
        from tokenforge.core.manifest import DEFAULT_TRANSFORMERS, load_manifest

        manifest = load_manifest(write_manifest(tmp_path, "[project]\nname = 'x'\n"))

        assert manifest.project.output_dir == "dist"
        assert manifest.themes == {}
        assert manifest.build.themes == ["light", "dark"]
        assert manifest.build.transformers == DEFAULT_TRANSFORMERS
        assert manifest.serialization.format == "json"

    def test_missing_manifest(self, tmp_path: Path) -> None:
        from tokenforge.core.errors import ManifestError
        from tokenforge.core.manifest import load_manifest

        with pytest.raises(ManifestError, match="Manifest not found"):
            load_manifest(tmp_path)

    @pytest.mark.parametrize(
        "content",
        [
            "[project\n",
            "project = 'flat'\n",
            "[build]\nthemes = 'light'\n",
            "[build]\ntransformers = ['css', 3]\n",
            "[themes]\nbrand = 3\n",
            "[build]\noptions = { css = 'x' }\n",
        ],
    )
    def test_malformed_manifest(self, tmp_path: Path, content: str) -> None:
        from tokenforge.core.errors import ManifestError
        from tokenforge.core.manifest import load_manifest

        with pytest.raises(ManifestError):
            load_manifest(write_manifest(tmp_path, content))


class TestLoader:
    """Tests for token file loading."""

    @pytest.mark.parametrize("suffix", [".json", ".yaml", ".yml", ".toml"])
    def test_write_then_load(self, tmp_path: Path, base_store, suffix: str) -> None:
        from tokenforge.core.loader import load_token_store, write_tree

        path = write_tree(base_store.to_dict(), tmp_path / f"tokens{suffix}")

        assert load_token_store(path).to_dict() == base_store.to_dict()

    def test_load_override_allows_partial_metadata(self, write_yaml) -> None:
        from tokenforge.core.loader import load_override

        path = write_yaml("brand.yaml", {"metadata": {"name": "Brand"}, "colors": {"white": "#fefefe"}})

        assert load_override(path) == {"metadata": {"name": "Brand"}, "colors": {"white": "#fefefe"}}

    def test_yaml_numeric_keys_load_as_strings(self, tmp_path: Path) -> None:
        from tokenforge.core.loader import load_token_store

        path = tmp_path / "tokens.yaml"
        path.write_text(
            "metadata: {id: acme, name: Acme, category: test}\n"
            "colors:\n  primary:\n    500: '#111111'\n    900: '#222222'\n"
            "spacing:\n  4: 1rem\n",
            encoding="utf-8",
        )

        store = load_token_store(path)

        assert store.tree["colors"]["primary"] == {"500": "#111111", "900": "#222222"}
        assert store.tree["spacing"] == {"4": "1rem"}

    def test_empty_file_is_empty_tree(self, tmp_path: Path) -> None:
        from tokenforge.core.loader import load_tree

        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")

        assert load_tree(path) == {}

    def test_missing_file(self, tmp_path: Path) -> None:
        from tokenforge.core.errors import DecodeError
        from tokenforge.core.loader import load_tree

        with pytest.raises(DecodeError, match="not found"):
            load_tree(tmp_path / "nope.json")

    def test_unsupported_suffix(self, tmp_path: Path) -> None:
        from tokenforge.core.errors import UnsupportedFormatError
        from tokenforge.core.loader import load_tree

        with pytest.raises(UnsupportedFormatError):
            load_tree(tmp_path / "tokens.xml")

    @pytest.mark.parametrize(("name", "content"), [("bad.json", "{oops"), ("list.json", "[1, 2]")])
    def test_malformed_file(self, tmp_path: Path, name: str, content: str) -> None:
        from tokenforge.core.errors import DecodeError
        from tokenforge.core.loader import load_tree

        path = tmp_path / name
        path.write_text(content, encoding="utf-8")

        with pytest.raises(DecodeError) as exc_info:
            load_tree(path)

        assert exc_info.value.context.file == path

    def test_invalid_store_metadata(self, tmp_path: Path) -> None:
        from tokenforge.core.errors import DecodeError
        from tokenforge.core.loader import load_token_store

        path = tmp_path / "tokens.json"
        path.write_text(json.dumps({"metadata": {"id": "x"}, "colors": {}}), encoding="utf-8")

        with pytest.raises(DecodeError, match="Invalid token store"):
            load_token_store(path)
