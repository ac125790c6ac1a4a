"""
CSS custom property transformer.

Emits one ``--name: value;`` declaration per scalar leaf of the styled
categories, scoped to a selector (``:root`` by default), plus optional
utility classes and breakpoint media queries.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from tokenforge.core.ir import TokenStore
from tokenforge.core.overlays import kebab_case

from .base import (
    TokenTransformer,
    TransformOptions,
    banner,
    css_value,
    iter_leaves,
    register_transformer,
)

# category -> (variable name stem, section comment)
SECTIONS: tuple[tuple[str, str, str], ...] = (
    ("spacing", "spacing", "Spacing"),
    ("borderRadius", "radius", "Border Radius"),
    ("shadows", "shadow", "Shadows"),
    ("zIndex", "z-index", "Z-Index"),
    ("transitions", "transition", "Transitions"),
)


class CSSVariableOptions(TransformOptions):
    prefix: str = ""
    selector: str = ":root"
    generate_utility_classes: bool = True
    generate_media_queries: bool = True


@dataclass
class CSSVariableResult:
    variables: str
    utilities: str
    media_queries: str
    full: str
    declarations: dict[str, str] = field(default_factory=dict)


def variable_name(prefix: str, stem: str, path: Iterable[str]) -> str:
    """``--{prefix}{stem}-{path-joined-by-hyphens}`` with camelCase segments kebabed."""
    parts = [stem, *(kebab_case(p) for p in path)] if stem else [kebab_case(p) for p in path]
    return f"--{prefix}{'-'.join(parts)}"


@register_transformer
class CSSVariableTransformer(TokenTransformer[CSSVariableOptions, CSSVariableResult]):
    name = "css"
    filename = "tokens.css"
    options_model = CSSVariableOptions

    def transform(self, tokens: TokenStore, options: CSSVariableOptions | Mapping[str, Any] | None = None) -> CSSVariableResult:
        opts = self.resolve_options(options)
        sections = self.collect(tokens, opts.prefix)
        declarations = {name: value for _, entries in sections for name, value in entries}

        variables = self.render_variables(tokens, sections, opts)
        utilities = self.generate_utilities(tokens, opts) if opts.generate_utility_classes else ""
        media_queries = self.generate_media_queries(tokens, opts) if opts.generate_media_queries else ""

        parts = [variables]
        if utilities:
            parts.append(utilities)
        if media_queries:
            parts.append(media_queries)
        full = "\n".join(parts)
        return CSSVariableResult(variables, utilities, media_queries, full, declarations)

    def render(self, result: CSSVariableResult) -> str:
        return result.full

    # -------------------------------------------------------------------------
    # Declarations
    # -------------------------------------------------------------------------

    def collect(self, tokens: TokenStore, prefix: str) -> list[tuple[str, list[tuple[str, str]]]]:
        """Declarations grouped by section title, in emission order."""
        sections: list[tuple[str, list[tuple[str, str]]]] = []

        colors = self.category(tokens, "colors")
        sections.append(("Colors", self._leaves(colors, prefix, "color")))

        typography = self.category(tokens, "typography")
        typo: list[tuple[str, str]] = []
        for key, value in typography.items():
            if isinstance(value, Mapping):
                typo.extend(self._leaves(value, prefix, kebab_case(key)))
            else:
                rendered = css_value(value)
                if rendered is not None:
                    typo.append((variable_name(prefix, "", [key]), rendered))
        sections.append(("Typography", typo))

        for category, stem, title in SECTIONS:
            sections.append((title, self._leaves(self.category(tokens, category), prefix, stem)))

        presets = self.category(tokens, "animation").get("presets", {})
        if isinstance(presets, Mapping):
            sections.append(("Animations", self._leaves(presets, prefix, "animation")))

        breakpoints = self._breakpoints(tokens)
        sections.append(("Breakpoints", self._leaves(breakpoints, prefix, "breakpoint")))
        return [(title, entries) for title, entries in sections if entries]

    def _leaves(self, tree: Mapping[str, Any], prefix: str, stem: str) -> list[tuple[str, str]]:
        entries = []
        for path, value in iter_leaves(tree):
            rendered = css_value(value)
            if rendered is not None:
                entries.append((variable_name(prefix, stem, path), rendered))
        return entries

    def _breakpoints(self, tokens: TokenStore) -> Mapping[str, Any]:
        breakpoints = self.category(tokens, "responsive").get("breakpoints", {})
        return breakpoints if isinstance(breakpoints, Mapping) else {}

    def render_variables(
        self,
        tokens: TokenStore,
        sections: list[tuple[str, list[tuple[str, str]]]],
        opts: CSSVariableOptions,
    ) -> str:
        lines: list[str] = []
        if opts.include_comments:
            lines.append(banner("CSS Variables Generated from Design Tokens", tokens, opts.generated_at))
            lines.append("")
        lines.append(f"{opts.selector} {{")
        for index, (title, entries) in enumerate(sections):
            if index:
                lines.append("")
            if opts.include_comments:
                lines.append(f"  /* {title} */")
            lines.extend(f"  {name}: {value};" for name, value in entries)
        lines.append("}")
        return "\n".join(lines) + "\n"

    # -------------------------------------------------------------------------
    # Utilities and media queries
    # -------------------------------------------------------------------------

    def generate_utilities(self, tokens: TokenStore, opts: CSSVariableOptions) -> str:
        prefix = opts.prefix
        lines: list[str] = []
        if opts.include_comments:
            lines.append("/* Utility Classes */")

        colors = self.category(tokens, "colors")
        color_paths = [path for path, value in iter_leaves(colors) if isinstance(value, str)]
        for util, prop in (("text", "color"), ("bg", "background-color"), ("border", "border-color")):
            for path in color_paths:
                suffix = "-".join(kebab_case(p) for p in path)
                lines.append(f".{util}-{suffix} {{ {prop}: var({variable_name(prefix, 'color', path)}); }}")

        spacing = self.category(tokens, "spacing")
        for key in spacing:
            var = f"var({variable_name(prefix, 'spacing', [str(key)])})"
            for util, props in (
                ("p", ("padding",)),
                ("px", ("padding-left", "padding-right")),
                ("py", ("padding-top", "padding-bottom")),
                ("pt", ("padding-top",)),
                ("pr", ("padding-right",)),
                ("pb", ("padding-bottom",)),
                ("pl", ("padding-left",)),
                ("m", ("margin",)),
                ("mx", ("margin-left", "margin-right")),
                ("my", ("margin-top", "margin-bottom")),
                ("mt", ("margin-top",)),
                ("mr", ("margin-right",)),
                ("mb", ("margin-bottom",)),
                ("ml", ("margin-left",)),
                ("gap", ("gap",)),
            ):
                body = " ".join(f"{p}: {var};" for p in props)
                lines.append(f".{util}-{key} {{ {body} }}")

        typography = self.category(tokens, "typography")
        for key, util, prop, stem in (
            ("fontSize", "text", "font-size", "font-size"),
            ("fontWeight", "font", "font-weight", "font-weight"),
            ("lineHeight", "leading", "line-height", "line-height"),
        ):
            scale = typography.get(key, {})
            if isinstance(scale, Mapping):
                for name in scale:
                    lines.append(f".{util}-{name} {{ {prop}: var({variable_name(prefix, stem, [str(name)])}); }}")
        return "\n".join(lines) + "\n" if lines else ""

    def generate_media_queries(self, tokens: TokenStore, opts: CSSVariableOptions) -> str:
        breakpoints = self._breakpoints(tokens)
        if not breakpoints:
            return ""
        lines: list[str] = []
        if opts.include_comments:
            lines.append("/* Responsive Media Queries */")
        for name, width in breakpoints.items():
            lines.append(f"@media (min-width: {width}) {{")
            lines.append(f"  {opts.selector} {{")
            lines.append(f"    --{opts.prefix}current-breakpoint: {name};")
            lines.append("  }")
            lines.append("}")
        return "\n".join(lines) + "\n"


def generate_multi_theme_css(
    stores: Iterable[TokenStore],
    options: CSSVariableOptions | Mapping[str, Any] | None = None,
) -> dict[str, CSSVariableResult]:
    """Render each store under ``[data-theme="<id>"]``, keyed by theme id."""
    transformer = CSSVariableTransformer()
    base = transformer.resolve_options(options)
    results: dict[str, CSSVariableResult] = {}
    for store in stores:
        opts = base.model_copy(update={"selector": f'[data-theme="{store.metadata.id}"]'})
        results[store.metadata.id] = transformer.transform(store, opts)
    return results
