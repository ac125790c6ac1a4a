"""Core tokenforge functionality: IR, merge engine, resolver, overlays, registry, schema, diff, versioning."""

from . import ir
from .diff import diff_tokens, format_report, summarize
from .errors import (
    DecodeError,
    ErrorContext,
    IntegrityError,
    InvalidThemeError,
    ManifestError,
    StorageError,
    ThemeNotFoundError,
    TokenForgeError,
    TokenValidationError,
    TransformError,
    UnsupportedFormatError,
    ValidationIssue,
    VersionError,
)
from .merge import deep_merge, merge
from .registry import ColorModeProvider, ThemeRegistry, create_default_registry
from .resolver import get_value, resolve
from .schema import ValidationResult, generate_schema, validate
from .versioning import Bump, Migration, SemanticVersion, TokenVersionManager, suggest_version

__all__ = [
    "ir",
    # Errors
    "TokenForgeError",
    "TransformError",
    "TokenValidationError",
    "ValidationIssue",
    "IntegrityError",
    "UnsupportedFormatError",
    "DecodeError",
    "ThemeNotFoundError",
    "InvalidThemeError",
    "StorageError",
    "ManifestError",
    "VersionError",
    "ErrorContext",
    # Engine
    "deep_merge",
    "merge",
    "get_value",
    "resolve",
    "ColorModeProvider",
    "ThemeRegistry",
    "create_default_registry",
    "ValidationResult",
    "generate_schema",
    "validate",
    "diff_tokens",
    "format_report",
    "summarize",
    "Bump",
    "Migration",
    "SemanticVersion",
    "TokenVersionManager",
    "suggest_version",
]
