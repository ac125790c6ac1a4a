"""
Tailwind configuration transformer.

Builds a Tailwind config as a plain dict mirroring the resolved categories,
then renders it as a ``module.exports = {...}`` JavaScript module. The
safelist holds compiled regex patterns for class names that are built at
runtime and therefore invisible to Tailwind's static scan.
"""

from __future__ import annotations

import json
import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Literal

from pydantic import Field

from tokenforge.core.ir import TokenStore

from .base import (
    TokenTransformer,
    TransformOptions,
    banner,
    is_color_scale,
    register_transformer,
)

DEFAULT_CONTENT = [
    "./src/**/*.{js,ts,jsx,tsx,mdx}",
    "./pages/**/*.{js,ts,jsx,tsx,mdx}",
    "./components/**/*.{js,ts,jsx,tsx,mdx}",
    "./app/**/*.{js,ts,jsx,tsx,mdx}",
]

_JS_IDENTIFIER = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")


class TailwindConfigOptions(TransformOptions):
    mode: Literal["extend", "replace"] = "extend"
    content: list[str] = Field(default_factory=lambda: list(DEFAULT_CONTENT))
    prefix: str = ""
    important: bool | str = False
    include_plugins: bool = True
    plugins: list[str] = Field(default_factory=list, description="Extra plugin module names")
    generate_safelist: bool = True


@dataclass(frozen=True)
class JsRequire:
    """A ``require('<module>')`` expression in the rendered module."""

    module: str


@dataclass
class TailwindConfigResult:
    config: dict[str, Any]
    module: str
    full: str


def _strings(tree: Mapping[str, Any]) -> dict[str, Any]:
    """Nested copy keeping string leaves and non-empty branches."""
    out: dict[str, Any] = {}
    for key, value in tree.items():
        if isinstance(value, Mapping):
            nested = _strings(value)
            if nested:
                out[str(key)] = nested
        elif isinstance(value, str):
            out[str(key)] = value
    return out


def _flat(tree: Any) -> dict[str, Any]:
    """One level of scalar entries rendered as strings (lists kept)."""
    if not isinstance(tree, Mapping):
        return {}
    out: dict[str, Any] = {}
    for key, value in tree.items():
        if isinstance(value, bool) or value is None or isinstance(value, Mapping):
            continue
        out[str(key)] = list(value) if isinstance(value, (list, tuple)) else str(value)
    return out


def _alternation(values: list[str]) -> str:
    return "|".join(re.escape(v) for v in values)


@register_transformer
class TailwindConfigTransformer(TokenTransformer[TailwindConfigOptions, TailwindConfigResult]):
    name = "tailwind"
    filename = "tailwind.config.js"
    options_model = TailwindConfigOptions

    def transform(
        self, tokens: TokenStore, options: TailwindConfigOptions | Mapping[str, Any] | None = None
    ) -> TailwindConfigResult:
        opts = self.resolve_options(options)
        config = self.build_config(tokens, opts)
        module = self.render_module(tokens, config, opts)
        return TailwindConfigResult(config=config, module=module, full=module)

    def render(self, result: TailwindConfigResult) -> str:
        return result.full

    # -------------------------------------------------------------------------
    # Config dict
    # -------------------------------------------------------------------------

    def build_config(self, tokens: TokenStore, opts: TailwindConfigOptions) -> dict[str, Any]:
        config: dict[str, Any] = {"content": list(opts.content)}
        if opts.prefix:
            config["prefix"] = opts.prefix
        if opts.important is not False:
            config["important"] = opts.important

        theme = self.theme_section(tokens)
        config["theme"] = {"extend": theme} if opts.mode == "extend" else theme

        plugins: list[JsRequire] = []
        if opts.include_plugins:
            if tokens.tree.get("typography"):
                plugins.append(JsRequire("@tailwindcss/typography"))
            if self.category(tokens, "components").get("forms"):
                plugins.append(JsRequire("@tailwindcss/forms"))
        plugins.extend(JsRequire(p) for p in opts.plugins)
        config["plugins"] = plugins

        if opts.generate_safelist:
            config["safelist"] = self.safelist(tokens)
        return config

    def theme_section(self, tokens: TokenStore) -> dict[str, Any]:
        colors = self.category(tokens, "colors")
        typography = self.category(tokens, "typography")
        animation = self.category(tokens, "animation")
        transitions = self.category(tokens, "transitions")
        responsive = self.category(tokens, "responsive")

        theme: dict[str, Any] = {
            "colors": _strings(colors),
            "fontFamily": _flat(typography.get("fontFamily")),
            "fontSize": _flat(typography.get("fontSize")),
            "fontWeight": _flat(typography.get("fontWeight")),
            "lineHeight": _flat(typography.get("lineHeight")),
            "spacing": _flat(self.category(tokens, "spacing")),
            "screens": _flat(responsive.get("breakpoints")),
            "borderRadius": _flat(self.category(tokens, "borderRadius")),
            "boxShadow": _flat(self.category(tokens, "shadows")),
            "zIndex": _flat(self.category(tokens, "zIndex")),
            "keyframes": dict(animation.get("keyframes") or {}),
            "animation": _flat(animation.get("presets")),
            "transitionProperty": _flat(transitions.get("property")),
            "transitionDuration": _flat(transitions.get("duration")),
            "transitionTimingFunction": _flat(
                transitions.get("timingFunction", transitions.get("timing"))
            ),
        }
        return {key: value for key, value in theme.items() if value}

    def safelist(self, tokens: TokenStore) -> list[Any]:
        """Regex patterns for color and spacing utilities plus component variant classes."""
        entries: list[Any] = []
        colors = self.category(tokens, "colors")
        scales = [str(name) for name, value in colors.items() if is_color_scale(value)]
        if scales:
            steps = sorted({step for name in scales for step in colors[name]}, key=int)
            entries.append(
                {"pattern": re.compile(f"^(bg|text|border)-({_alternation(scales)})-({_alternation(steps)})$")}
            )
        spacing = [str(key) for key in self.category(tokens, "spacing")]
        if spacing:
            entries.append({"pattern": re.compile(f"^(p|m|gap)-({_alternation(spacing)})$")})

        for component, spec in self.category(tokens, "components").items():
            variants = spec.get("variants") if isinstance(spec, Mapping) else None
            if isinstance(variants, (list, tuple)):
                entries.extend(f"{component}-{variant}" for variant in variants)
        return entries

    # -------------------------------------------------------------------------
    # JS rendering
    # -------------------------------------------------------------------------

    def render_module(self, tokens: TokenStore, config: dict[str, Any], opts: TailwindConfigOptions) -> str:
        lines: list[str] = []
        if opts.include_comments:
            lines.append("/** @type {import('tailwindcss').Config} */")
            lines.append(banner("Tailwind Configuration Generated from Design Tokens", tokens, opts.generated_at))
        lines.append(f"module.exports = {to_js(config)};")
        return "\n".join(lines) + "\n"


def _js_key(key: str) -> str:
    return key if _JS_IDENTIFIER.match(key) else json.dumps(key)


def to_js(value: Any, indent: int = 0) -> str:
    """Render a config value as a JavaScript expression."""
    pad = "  " * (indent + 1)
    end = "  " * indent
    if isinstance(value, JsRequire):
        return f"require({json.dumps(value.module)})"
    if isinstance(value, re.Pattern):
        return "/" + value.pattern.replace("/", "\\/") + "/"
    if isinstance(value, Mapping):
        if not value:
            return "{}"
        items = [f"{pad}{_js_key(str(k))}: {to_js(v, indent + 1)}," for k, v in value.items()]
        return "{\n" + "\n".join(items) + f"\n{end}}}"
    if isinstance(value, (list, tuple)):
        if not value:
            return "[]"
        items = [f"{pad}{to_js(v, indent + 1)}," for v in value]
        return "[\n" + "\n".join(items) + f"\n{end}]"
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, (int, float)):
        return json.dumps(value)
    return json.dumps(str(value))
