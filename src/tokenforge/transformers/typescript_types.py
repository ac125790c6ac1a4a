"""
TypeScript declaration transformer.

Emits interfaces per token category, utility types (including a
``TokenPath`` union of every leaf path) and a ``declare module`` block.
Color-scale shaped mappings get literal-union key types.
"""

from __future__ import annotations

import json
import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Literal

from tokenforge.core.ir import METADATA_KEY, ThemeMode, TokenStore

from .base import (
    TokenTransformer,
    TransformOptions,
    is_color_scale,
    iter_leaves,
    register_transformer,
)

_TS_IDENTIFIER = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")

EXPORTED_TYPES = (
    "DesignTokens",
    "ColorTokens",
    "TypographyTokens",
    "SpacingTokens",
    "BrandingTokens",
    "AccessibilityTokens",
    "ResponsiveTokens",
    "TokenPath",
    "ColorScale",
    "SpacingScale",
)


class TypeScriptTypeOptions(TransformOptions):
    include_jsdoc: bool = True
    generate_literals: bool = True
    module_name: str = "@tokenforge/tokens"
    export_type: Literal["named", "default"] = "named"
    namespace: str | None = None
    generate_utility_types: bool = True


@dataclass
class TypeScriptTypesResult:
    types: str
    utilities: str
    declarations: str
    full: str


def ts_key(key: str) -> str:
    return key if _TS_IDENTIFIER.match(key) else ts_literal(key)


def ts_literal(value: str) -> str:
    return "'" + value.replace("\\", "\\\\").replace("'", "\\'") + "'"


def ts_type(value: Any) -> str:
    """TypeScript type for an observed leaf value."""
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (list, tuple)):
        inner = {ts_type(v) for v in value}
        return f"{inner.pop()}[]" if len(inner) == 1 else "unknown[]"
    if isinstance(value, Mapping):
        return record_type(value)
    return "unknown"


def record_type(mapping: Mapping[str, Any]) -> str:
    """``Record<string, T>`` with T inferred from the values."""
    types = sorted({ts_type(v) for v in mapping.values()}) or ["string"]
    return f"Record<string, {' | '.join(types)}>"


@register_transformer
class TypeScriptTypeTransformer(TokenTransformer[TypeScriptTypeOptions, TypeScriptTypesResult]):
    name = "typescript"
    filename = "tokens.d.ts"
    options_model = TypeScriptTypeOptions

    def transform(
        self, tokens: TokenStore, options: TypeScriptTypeOptions | Mapping[str, Any] | None = None
    ) -> TypeScriptTypesResult:
        opts = self.resolve_options(options)
        types = self.core_types(tokens, opts)
        utilities = self.utility_types(tokens, opts) if opts.generate_utility_types else ""
        declarations = self.module_declarations(opts)
        full = "\n".join(part for part in (types, utilities, declarations) if part)
        return TypeScriptTypesResult(types, utilities, declarations, full)

    def render(self, result: TypeScriptTypesResult) -> str:
        return result.full

    def _doc(self, opts: TypeScriptTypeOptions, text: str, indent: str = "") -> list[str]:
        if not opts.include_jsdoc:
            return []
        return [f"{indent}/**", f"{indent} * {text}", f"{indent} */"]

    def _interface(self, opts: TypeScriptTypeOptions, name: str, doc: str, body: list[str], extends: str = "") -> str:
        lines = self._doc(opts, doc)
        lines.append(f"export interface {name}{f' extends {extends}' if extends else ''} {{")
        lines.extend(body)
        lines.append("}")
        return "\n".join(lines) + "\n"

    # -------------------------------------------------------------------------
    # Interfaces
    # -------------------------------------------------------------------------

    def core_types(self, tokens: TokenStore, opts: TypeScriptTypeOptions) -> str:
        meta = tokens.metadata
        parts: list[str] = []
        if opts.include_comments:
            header = [
                "// " + "=" * 77,
                "// GENERATED TOKEN TYPES",
                f"// Generated from token system: {meta.name}",
                f"// Category: {meta.category} | Mode: {meta.mode}",
                f"// Version: {meta.version}",
            ]
            if opts.generated_at:
                header.append(f"// Generated: {opts.generated_at}")
            header.append("// " + "=" * 77)
            parts.append("\n".join(header) + "\n")

        parts.append(self.color_types(tokens, opts))
        parts.append(self.typography_types(tokens, opts))
        parts.append(self.spacing_types(tokens, opts))
        parts.append(self.branding_types(tokens, opts))
        parts.append(self.accessibility_types(tokens, opts))
        parts.append(self.responsive_types(tokens, opts))
        parts.append(self.main_interface(opts))
        return "\n".join(parts)

    def color_types(self, tokens: TokenStore, opts: TypeScriptTypeOptions) -> str:
        body: list[str] = []
        for key, value in self.category(tokens, "colors").items():
            if isinstance(value, Mapping):
                body.extend(self._doc(opts, f"{key} color scale", "  "))
                if opts.generate_literals and is_color_scale(value):
                    keys = " | ".join(ts_literal(str(k)) for k in value)
                    body.append(f"  {ts_key(str(key))}: Record<{keys}, string>;")
                else:
                    body.append(f"  {ts_key(str(key))}: Record<string, string>;")
            else:
                body.append(f"  {ts_key(str(key))}: {ts_type(value)};")
        return self._interface(opts, "ColorTokens", "Color token definitions", body)

    def typography_types(self, tokens: TokenStore, opts: TypeScriptTypeOptions) -> str:
        body: list[str] = []
        for key, value in self.category(tokens, "typography").items():
            if key == "fontFamily" and isinstance(value, Mapping):
                body.append("  fontFamily: {")
                body.extend(f"    {ts_key(str(k))}: {ts_type(v)};" for k, v in value.items())
                body.append("  };")
            elif isinstance(value, Mapping):
                body.append(f"  {ts_key(str(key))}: {record_type(value)};")
            else:
                body.append(f"  {ts_key(str(key))}: {ts_type(value)};")
        return self._interface(opts, "TypographyTokens", "Typography token definitions", body)

    def spacing_types(self, tokens: TokenStore, opts: TypeScriptTypeOptions) -> str:
        spacing = self.category(tokens, "spacing")
        lines = self._doc(opts, "Spacing token definitions")
        if opts.generate_literals and spacing:
            keys = " | ".join(ts_literal(str(k)) for k in spacing)
            lines.append(f"export interface SpacingTokens extends Record<{keys}, string> {{")
            lines.extend(f"  {ts_key(str(k))}: string;" for k in spacing)
            lines.append("}")
        else:
            lines.append("export interface SpacingTokens extends Record<string, string> {}")
        return "\n".join(lines) + "\n"

    def branding_types(self, tokens: TokenStore, opts: TypeScriptTypeOptions) -> str:
        body = [f"  {ts_key(str(k))}: {ts_type(v)};" for k, v in self.category(tokens, "branding").items()]
        body.append("  [key: string]: unknown;")
        return self._interface(opts, "BrandingTokens", "Branding token definitions", body)

    def accessibility_types(self, tokens: TokenStore, opts: TypeScriptTypeOptions) -> str:
        body = [
            f"  {ts_key(str(k))}: {ts_type(v)};" for k, v in self.category(tokens, "accessibility").items()
        ]
        return self._interface(opts, "AccessibilityTokens", "Accessibility token definitions", body)

    def responsive_types(self, tokens: TokenStore, opts: TypeScriptTypeOptions) -> str:
        body: list[str] = []
        breakpoints = self.category(tokens, "responsive").get("breakpoints")
        if isinstance(breakpoints, Mapping):
            body.append("  breakpoints: {")
            body.extend(f"    {ts_key(str(k))}: string;" for k in breakpoints)
            body.append("  };")
        return self._interface(opts, "ResponsiveTokens", "Responsive token definitions", body)

    def main_interface(self, opts: TypeScriptTypeOptions) -> str:
        modes = " | ".join(ts_literal(m.value) for m in ThemeMode)
        body = [
            "  colors: ColorTokens;",
            "  typography: TypographyTokens;",
            "  spacing: SpacingTokens;",
            "  branding: BrandingTokens;",
            "  accessibility: AccessibilityTokens;",
            "  responsive: ResponsiveTokens;",
            "  metadata: {",
            "    id: string;",
            "    name: string;",
            "    category: string;",
            f"    mode: {modes};",
            "    version: string;",
            "  };",
        ]
        return self._interface(opts, "DesignTokens", "Complete design token system interface", body)

    # -------------------------------------------------------------------------
    # Utilities and module block
    # -------------------------------------------------------------------------

    def token_paths(self, tokens: TokenStore) -> list[str]:
        """Every leaf path in the tree except metadata."""
        return [".".join(path) for path, _ in iter_leaves(tokens.tree) if path[0] != METADATA_KEY]

    def utility_types(self, tokens: TokenStore, opts: TypeScriptTypeOptions) -> str:
        lines: list[str] = []
        if opts.include_comments:
            lines.extend(["// " + "=" * 77, "// UTILITY TYPES", "// " + "=" * 77, ""])
        lines.extend(self._doc(opts, "Extract color scale keys"))
        lines.append("export type ColorScale<T extends keyof ColorTokens> = keyof ColorTokens[T];")
        lines.append("")
        lines.extend(self._doc(opts, "Extract spacing keys"))
        lines.append("export type SpacingScale = keyof SpacingTokens;")
        lines.append("")
        lines.extend(self._doc(opts, "Every token leaf path"))
        paths = self.token_paths(tokens)
        if paths:
            lines.append("export type TokenPath =")
            lines.extend(f"  | {json.dumps(p)}" for p in paths)
            lines[-1] += ";"
        else:
            lines.append("export type TokenPath = never;")
        return "\n".join(lines) + "\n"

    def module_declarations(self, opts: TypeScriptTypeOptions) -> str:
        lines = self._doc(opts, f"Module declarations for {opts.module_name}")
        indent = ""
        if opts.namespace:
            lines.append(f"declare namespace {opts.namespace} {{")
            indent = "  "
        lines.append(f"{indent}declare module {ts_literal(opts.module_name)} {{")
        if opts.export_type == "named":
            lines.append(f"{indent}  export {{")
            lines.extend(f"{indent}    {name}," for name in EXPORTED_TYPES)
            lines.append(f"{indent}  }};")
        else:
            lines.append(f"{indent}  const tokens: DesignTokens;")
            lines.append(f"{indent}  export default tokens;")
        lines.append(f"{indent}}}")
        if opts.namespace:
            lines.append("}")
        return "\n".join(lines) + "\n"
