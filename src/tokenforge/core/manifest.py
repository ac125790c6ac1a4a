import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .errors import ErrorContext, ManifestError

MANIFEST_FILE = "tokenforge.toml"

DEFAULT_TRANSFORMERS = ["css", "tailwind", "typescript", "json-schema"]


@dataclass
class ProjectConfig:
    """[project] table."""

    name: str = "tokens"
    version: str = "1.0.0"
    output_dir: str = "dist"


# =============================================================================
# Build Configuration
# =============================================================================


@dataclass
class BuildConfig:
    """Which themes to build and which artifacts to emit.

    Examples in tokenforge.toml:

        [build]
        themes = ["light", "dark", "brand"]
        transformers = ["css", "typescript"]
        prefix = "tf-"

        # Per-transformer options
        [build.options.tailwind]
        mode = "replace"
    """

    themes: list[str] = field(default_factory=lambda: ["light", "dark"])
    transformers: list[str] = field(default_factory=lambda: list(DEFAULT_TRANSFORMERS))
    prefix: str = ""
    options: dict[str, dict[str, Any]] = field(default_factory=dict)

    def requests(self) -> dict[str, dict[str, Any]]:
        """Transformer name -> options, with ``prefix`` applied where it is an option."""
        requests: dict[str, dict[str, Any]] = {}
        for name in self.transformers:
            opts = dict(self.options.get(name, {}))
            if self.prefix and name in ("css", "tailwind"):
                opts.setdefault("prefix", self.prefix)
            requests[name] = opts
        return requests


@dataclass
class SerializationConfig:
    """[serialization] table; defaults for `tokens serialize`."""

    format: str = "json"
    compression: str = "none"
    minify: bool = False


@dataclass
class BuildManifest:
    root: Path
    project: ProjectConfig = field(default_factory=ProjectConfig)
    themes: dict[str, str] = field(default_factory=dict)  # name -> override file
    build: BuildConfig = field(default_factory=BuildConfig)
    serialization: SerializationConfig = field(default_factory=SerializationConfig)

    @property
    def output_path(self) -> Path:
        return self.root / self.project.output_dir

    def theme_paths(self) -> dict[str, Path]:
        """Override files resolved against the manifest directory."""
        return {name: self.root / rel for name, rel in self.themes.items()}


def get_manifest_path(project_root: Path) -> Path:
    return project_root / MANIFEST_FILE


def _table(data: dict[str, Any], key: str, path: Path) -> dict[str, Any]:
    value = data.get(key, {})
    if not isinstance(value, dict):
        raise ManifestError(f"[{key}] must be a table", ErrorContext(file=path))
    return value


def _string_list(table: dict[str, Any], key: str, default: list[str], path: Path) -> list[str]:
    value = table.get(key, default)
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ManifestError(f"{key} must be a list of strings", ErrorContext(file=path))
    return list(value)


def load_manifest(path: Path) -> BuildManifest:
    path = Path(path)
    if path.is_dir():
        path = get_manifest_path(path)
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        raise ManifestError(f"Manifest not found: {path}") from None
    except tomllib.TOMLDecodeError as e:
        raise ManifestError(f"Invalid TOML: {e}", ErrorContext(file=path)) from e

    project_data = _table(data, "project", path)
    themes_data = _table(data, "themes", path)
    build_data = _table(data, "build", path)
    serialization_data = _table(data, "serialization", path)

    project = ProjectConfig(
        name=project_data.get("name", "tokens"),
        version=project_data.get("version", "1.0.0"),
        output_dir=project_data.get("output_dir", "dist"),
    )

    for name, rel in themes_data.items():
        if not isinstance(rel, str):
            raise ManifestError(f"themes.{name} must be a file path", ErrorContext(file=path))

    options = build_data.get("options", {})
    if not isinstance(options, dict) or not all(isinstance(v, dict) for v in options.values()):
        raise ManifestError("build.options must be a table of tables", ErrorContext(file=path))

    build = BuildConfig(
        themes=_string_list(build_data, "themes", ["light", "dark"], path),
        transformers=_string_list(build_data, "transformers", DEFAULT_TRANSFORMERS, path),
        prefix=build_data.get("prefix", ""),
        options=options,
    )

    serialization = SerializationConfig(
        format=serialization_data.get("format", "json"),
        compression=serialization_data.get("compression", "none"),
        minify=serialization_data.get("minify", False),
    )

    return BuildManifest(
        root=path.parent,
        project=project,
        themes=dict(themes_data),
        build=build,
        serialization=serialization,
    )
