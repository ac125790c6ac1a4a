"""
Build pipeline.

Composes a theme registry with a set of transformer requests: every theme
is merged once, run through each requested transformer, and the artifacts
are written to ``<out_dir>/<theme>/<filename>``.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from tokenforge.transformers import (
    CSSVariableOptions,
    TransformReport,
    generate_multi_theme_css,
    run_transformers,
)

from .errors import ThemeNotFoundError
from .ir import TokenStore
from .loader import load_override
from .manifest import BuildManifest
from .registry import ThemeRegistry, create_default_registry

logger = logging.getLogger(__name__)

MULTI_THEME_CSS = "themes.css"


@dataclass
class BuildResult:
    """Merged store and transformer report for one theme."""

    theme: str
    tokens: TokenStore
    report: TransformReport

    @property
    def ok(self) -> bool:
        return self.report.ok


class BuildPipeline:
    """
    Build artifacts for registered themes.

    Example:
        pipeline = BuildPipeline(create_default_registry(), ["css", "typescript"])
        results = pipeline.build(["light", "dark"])
        pipeline.write(results, Path("dist"))
    """

    def __init__(self, registry: ThemeRegistry, requests: Mapping[str, Any] | Iterable[str]):
        self.registry = registry
        self.requests: dict[str, Any] = (
            dict(requests) if isinstance(requests, Mapping) else {name: None for name in requests}
        )

    @classmethod
    def from_manifest(cls, manifest: BuildManifest, registry: ThemeRegistry | None = None) -> BuildPipeline:
        """Register the manifest's theme files on top of the default registry."""
        registry = registry or create_default_registry()
        for name, path in manifest.theme_paths().items():
            registry.register(name, load_override(path))
        return cls(registry, manifest.build.requests())

    def _stores(self, theme_names: Iterable[str] | None) -> dict[str, TokenStore]:
        names = list(theme_names) if theme_names is not None else self.registry.names()
        stores: dict[str, TokenStore] = {}
        for name in names:
            resolved = self.registry.resolve_theme_name(name)
            if not self.registry.is_registered(resolved):
                raise ThemeNotFoundError(resolved)
            stores[resolved] = self.registry.get_merged(resolved)
        return stores

    def build(self, theme_names: Iterable[str] | None = None) -> dict[str, BuildResult]:
        """
        Merge and transform each theme.

        Args:
            theme_names: Themes to build; all registered themes when None

        Returns:
            Theme name -> BuildResult. Failed artifacts are recorded in each
            report rather than raised.

        Raises:
            ThemeNotFoundError: If a named theme is not registered
        """
        results: dict[str, BuildResult] = {}
        for name, store in self._stores(theme_names).items():
            report = run_transformers(store, self.requests)
            results[name] = BuildResult(name, store, report)
            logger.info(
                "Built theme %s: %d artifact(s), %d error(s)",
                name,
                len(report.artifacts),
                len(report.errors),
            )
        return results

    def build_multi_theme_css(
        self,
        theme_names: Iterable[str] | None = None,
        options: CSSVariableOptions | Mapping[str, Any] | None = None,
    ) -> str:
        """One stylesheet with every theme scoped under ``[data-theme="<name>"]``."""
        stores = self._stores(theme_names)
        results = generate_multi_theme_css(stores.values(), options)
        return "\n".join(result.full for result in results.values())

    def write(self, results: Mapping[str, BuildResult], out_dir: Path) -> list[Path]:
        """Write every produced artifact; returns the written paths."""
        written: list[Path] = []
        for name, result in results.items():
            theme_dir = Path(out_dir) / name
            theme_dir.mkdir(parents=True, exist_ok=True)
            for artifact in result.report.artifacts.values():
                path = theme_dir / artifact.filename
                path.write_text(artifact.content, encoding="utf-8")
                logger.info("Wrote %s", path)
                written.append(path)
        return written
