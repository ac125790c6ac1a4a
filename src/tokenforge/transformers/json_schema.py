"""
JSON Schema transformer.

Produces a validation document for the token system: per-category schemas
with value patterns (hex colors, CSS units, font weights, breakpoints).
Either one unified document, or one document per category (each with its
own ``$id``) referenced from the main document by ``$ref``.
"""

from __future__ import annotations

import copy
import json
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, Literal

from tokenforge.core.ir import TokenStore
from tokenforge.core.schema import DURATION_PATTERN, HEX_COLOR_PATTERN, METADATA_SCHEMA, draft_uri

from .base import TokenTransformer, TransformOptions, register_transformer

SIZE_PATTERN = r"^\d*\.?\d+(px|rem|em)$"
RADIUS_PATTERN = r"^\d*\.?\d+(px|rem|em|%)$"
BREAKPOINT_PATTERN = r"^\d+(px|em|rem)$"
LINE_HEIGHT_PATTERN = r"^\d*\.?\d+(px|rem|em|%)?$"
SCALE_STEP_PATTERN = r"^(50|100|200|300|400|500|600|700|800|900|950)$"
NAME_PATTERN = r"^[a-zA-Z0-9_-]+$"

REQUIRED_CATEGORIES = ("colors", "typography", "spacing")
STRICT_REQUIRED_CATEGORIES = (*REQUIRED_CATEGORIES, "branding", "accessibility", "responsive")

# Always emitted; the rest only when the store has them
CORE_CATEGORIES = ("colors", "typography", "spacing", "branding", "accessibility", "responsive")


class JSONSchemaOptions(TransformOptions):
    draft: Literal["07", "2019-09", "2020-12"] = "2020-12"
    include_examples: bool = True
    include_descriptions: bool = True
    strict_required: bool = False
    schema_id: str = "https://tokenforge.dev/schemas/design-tokens.json"
    split_schemas: bool = False


@dataclass
class JSONSchemaResult:
    schema: dict[str, Any]
    full: str
    schemas: dict[str, dict[str, Any]] = field(default_factory=dict)

    def documents(self) -> dict[str, dict[str, Any]]:
        """Split documents keyed by ``$id``, for ``$ref`` lookups."""
        return {doc["$id"]: doc for doc in self.schemas.values()}


def category_id(schema_id: str, category: str) -> str:
    """``https://x/design-tokens.json`` -> ``https://x/design-tokens/colors.json``"""
    stem = schema_id[: -len(".json")] if schema_id.endswith(".json") else schema_id.rstrip("/")
    return f"{stem}/{category}.json"


# =============================================================================
# Category schemas
# =============================================================================


def _string_map(pattern: str | None = None, key_pattern: str = NAME_PATTERN) -> dict[str, Any]:
    leaf: dict[str, Any] = {"type": "string"}
    if pattern:
        leaf["pattern"] = pattern
    return {"type": "object", "patternProperties": {key_pattern: leaf}, "additionalProperties": False}


def colors_schema() -> dict[str, Any]:
    return {
        "type": "object",
        "patternProperties": {
            NAME_PATTERN: {
                "type": ["string", "object"],
                "patternProperties": {
                    SCALE_STEP_PATTERN: {"type": "string", "pattern": HEX_COLOR_PATTERN},
                },
                "additionalProperties": {"type": "string"},
            },
        },
        "additionalProperties": False,
    }


def typography_schema() -> dict[str, Any]:
    return {
        "type": "object",
        "properties": {
            "fontFamily": {
                "type": "object",
                "patternProperties": {
                    NAME_PATTERN: {"type": "array", "items": {"type": "string"}, "minItems": 1},
                },
                "additionalProperties": False,
            },
            "fontSize": _string_map(SIZE_PATTERN),
            "fontWeight": {
                "type": "object",
                "patternProperties": {
                    NAME_PATTERN: {"type": "integer", "minimum": 100, "maximum": 900, "multipleOf": 100},
                },
                "additionalProperties": False,
            },
            "lineHeight": {
                "type": "object",
                "patternProperties": {
                    NAME_PATTERN: {"type": ["number", "string"], "pattern": LINE_HEIGHT_PATTERN},
                },
                "additionalProperties": False,
            },
            "letterSpacing": {"type": "object", "additionalProperties": {"type": "string"}},
        },
        "required": ["fontFamily", "fontSize"],
        "additionalProperties": False,
    }


def spacing_schema() -> dict[str, Any]:
    return _string_map(SIZE_PATTERN, r"^[0-9]+(\.[0-9]+)?$|^px$")


def border_radius_schema() -> dict[str, Any]:
    return _string_map(RADIUS_PATTERN)


def shadows_schema() -> dict[str, Any]:
    return _string_map()


def z_index_schema() -> dict[str, Any]:
    return {
        "type": "object",
        "patternProperties": {NAME_PATTERN: {"type": ["integer", "string"], "pattern": r"^-?\d+$"}},
        "additionalProperties": False,
    }


def animation_schema() -> dict[str, Any]:
    return {
        "type": "object",
        "properties": {
            "keyframes": {
                "type": "object",
                "additionalProperties": {"type": "object", "additionalProperties": {"type": "object"}},
            },
            "presets": {"type": "object", "additionalProperties": {"type": "string"}},
        },
        "additionalProperties": False,
    }


def transitions_schema() -> dict[str, Any]:
    strings = {"type": "object", "additionalProperties": {"type": "string"}}
    return {
        "type": "object",
        "properties": {
            "property": strings,
            "duration": {
                "type": "object",
                "additionalProperties": {"type": "string", "pattern": DURATION_PATTERN},
            },
            "timing": strings,
            "timingFunction": strings,
        },
        "additionalProperties": False,
    }


def branding_schema() -> dict[str, Any]:
    return {
        "type": "object",
        "properties": {
            "name": {"type": "string"},
            "organizationName": {"type": "string"},
            "logo": {"type": ["string", "object"]},
            "favicon": {"type": "string"},
            "brandColors": {"type": "object", "additionalProperties": {"type": "string"}},
        },
        "additionalProperties": True,
    }


def accessibility_schema() -> dict[str, Any]:
    return {
        "type": "object",
        "properties": {
            "wcagLevel": {"type": "string", "enum": ["A", "AA", "AAA"]},
            "focusOutline": {"type": "string"},
            "focusOutlineOffset": {"type": "string"},
            "minTouchTarget": {"type": "string"},
            "reducedMotion": {"type": "boolean"},
            "highContrast": {"type": "boolean"},
        },
        "additionalProperties": True,
    }


def responsive_schema() -> dict[str, Any]:
    return {
        "type": "object",
        "properties": {
            "breakpoints": {
                "type": "object",
                "patternProperties": {NAME_PATTERN: {"type": "string", "pattern": BREAKPOINT_PATTERN}},
                "additionalProperties": False,
            },
        },
        "required": ["breakpoints"],
        "additionalProperties": False,
    }


def components_schema() -> dict[str, Any]:
    return {
        "type": "object",
        "additionalProperties": {
            "type": "object",
            "properties": {"variants": {"type": "array", "items": {"type": "string"}}},
        },
    }


CATEGORY_SCHEMAS: dict[str, tuple[Callable[[], dict[str, Any]], str, str]] = {
    "colors": (colors_schema, "Color Tokens Schema", "Color token definitions with scales from 50 to 950"),
    "typography": (typography_schema, "Typography Tokens Schema", "Typography token definitions"),
    "spacing": (spacing_schema, "Spacing Tokens Schema", "Spacing scale"),
    "borderRadius": (border_radius_schema, "Border Radius Tokens Schema", "Border radius token definitions"),
    "shadows": (shadows_schema, "Shadow Tokens Schema", "Box shadow token definitions"),
    "zIndex": (z_index_schema, "Z-Index Tokens Schema", "Z-index layering scale"),
    "animation": (animation_schema, "Animation Tokens Schema", "Animation token definitions"),
    "transitions": (transitions_schema, "Transition Tokens Schema", "Transition token definitions"),
    "branding": (branding_schema, "Branding Tokens Schema", "Branding and identity tokens"),
    "accessibility": (accessibility_schema, "Accessibility Tokens Schema", "Accessibility configuration tokens"),
    "responsive": (responsive_schema, "Responsive Tokens Schema", "Responsive design tokens"),
    "components": (components_schema, "Component Tokens Schema", "Component variant declarations"),
}


def metadata_schema() -> dict[str, Any]:
    schema = copy.deepcopy(METADATA_SCHEMA)
    schema["properties"]["id"]["pattern"] = NAME_PATTERN
    schema["properties"]["version"]["pattern"] = r"^\d+\.\d+\.\d+"
    return schema


@register_transformer
class JSONSchemaTransformer(TokenTransformer[JSONSchemaOptions, JSONSchemaResult]):
    name = "json-schema"
    filename = "tokens.schema.json"
    options_model = JSONSchemaOptions

    def transform(
        self, tokens: TokenStore, options: JSONSchemaOptions | Mapping[str, Any] | None = None
    ) -> JSONSchemaResult:
        opts = self.resolve_options(options)
        categories = self.categories(tokens)

        if not opts.split_schemas:
            inline = {name: self.category_schema(tokens, name, opts) for name in categories}
            schema = self.main_schema(tokens, opts, inline)
            return JSONSchemaResult(schema=schema, full=json.dumps(schema, indent=2))

        schemas = {name: self.wrap(tokens, name, opts) for name in categories}
        refs = {name: {"$ref": doc["$id"]} for name, doc in schemas.items()}
        schema = self.main_schema(tokens, opts, refs)
        return JSONSchemaResult(
            schema=schema,
            full=json.dumps({"main": schema, **schemas}, indent=2),
            schemas=schemas,
        )

    def render(self, result: JSONSchemaResult) -> str:
        return result.full

    def categories(self, tokens: TokenStore) -> list[str]:
        return [name for name in CATEGORY_SCHEMAS if name in CORE_CATEGORIES or name in tokens.tree]

    def category_schema(self, tokens: TokenStore, name: str, opts: JSONSchemaOptions) -> dict[str, Any]:
        builder, _, description = CATEGORY_SCHEMAS[name]
        schema = builder()
        if opts.include_descriptions:
            schema["description"] = description
        value = tokens.tree.get(name)
        if opts.include_examples and isinstance(value, Mapping) and value:
            schema["examples"] = [copy.deepcopy(dict(value))]
        return schema

    def wrap(self, tokens: TokenStore, name: str, opts: JSONSchemaOptions) -> dict[str, Any]:
        _, title, _ = CATEGORY_SCHEMAS[name]
        return {
            "$schema": draft_uri(opts.draft),
            "$id": category_id(opts.schema_id, name),
            "title": title,
            **self.category_schema(tokens, name, opts),
        }

    def main_schema(
        self,
        tokens: TokenStore,
        opts: JSONSchemaOptions,
        categories: dict[str, dict[str, Any]],
    ) -> dict[str, Any]:
        schema: dict[str, Any] = {
            "$schema": draft_uri(opts.draft),
            "$id": opts.schema_id,
            "title": "Design Token System",
            "type": "object",
        }
        if opts.include_comments:
            comment = f"Generated from {tokens.metadata.name} {tokens.metadata.version}"
            if opts.generated_at:
                comment += f" at {opts.generated_at}"
            schema["$comment"] = comment
        if opts.include_descriptions:
            schema["description"] = "Complete design token system for theming and styling"

        schema["properties"] = {"metadata": metadata_schema(), **categories}
        required = STRICT_REQUIRED_CATEGORIES if opts.strict_required else REQUIRED_CATEGORIES
        schema["required"] = ["metadata", *required]
        # Unknown top-level categories survive merging, so only strict mode closes the object
        schema["additionalProperties"] = not opts.strict_required
        return schema
