"""
tokenforge - design token build pipeline.

Merges themeable token stores, resolves component overlays, and compiles
the result into CSS variables, Tailwind config, TypeScript declarations
and JSON Schema. Stores can be serialized with compression and checksums.
"""

from __future__ import annotations

# Re-export commonly used types for convenience
from ._version import get_version
from .core import ir
from .core.errors import (
    IntegrityError,
    ThemeNotFoundError,
    TokenForgeError,
    TokenValidationError,
    TransformError,
)
from .core.ir import TokenStore

__version__ = get_version()

__all__ = [
    "__version__",
    "ir",
    "TokenStore",
    "TokenForgeError",
    "TransformError",
    "TokenValidationError",
    "IntegrityError",
    "ThemeNotFoundError",
]
