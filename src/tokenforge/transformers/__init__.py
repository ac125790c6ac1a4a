"""
Artifact transformers.

Importing this package registers the built-in transformers in
``TRANSFORMERS``: css, tailwind, typescript, json-schema.
"""

from .base import (
    TRANSFORMERS,
    Artifact,
    TokenTransformer,
    TransformOptions,
    TransformReport,
    get_transformer,
    is_color_scale,
    register_transformer,
    run_transformers,
)
from .css_variables import (
    CSSVariableOptions,
    CSSVariableResult,
    CSSVariableTransformer,
    generate_multi_theme_css,
)
from .json_schema import JSONSchemaOptions, JSONSchemaResult, JSONSchemaTransformer
from .tailwind_config import TailwindConfigOptions, TailwindConfigResult, TailwindConfigTransformer
from .typescript_types import TypeScriptTypeOptions, TypeScriptTypesResult, TypeScriptTypeTransformer

__all__ = [
    # Framework
    "TRANSFORMERS",
    "Artifact",
    "TokenTransformer",
    "TransformOptions",
    "TransformReport",
    "get_transformer",
    "is_color_scale",
    "register_transformer",
    "run_transformers",
    # CSS
    "CSSVariableOptions",
    "CSSVariableResult",
    "CSSVariableTransformer",
    "generate_multi_theme_css",
    # Tailwind
    "TailwindConfigOptions",
    "TailwindConfigResult",
    "TailwindConfigTransformer",
    # TypeScript
    "TypeScriptTypeOptions",
    "TypeScriptTypesResult",
    "TypeScriptTypeTransformer",
    # JSON Schema
    "JSONSchemaOptions",
    "JSONSchemaResult",
    "JSONSchemaTransformer",
]
