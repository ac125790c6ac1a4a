"""
Intermediate representation for design tokens.

Frozen pydantic models shared by the merge engine, resolver, overlays,
transformers and serializer.
"""

from .envelope import ENVELOPE_VERSION, EnvelopeMetadata, SerializedEnvelope
from .references import LiteralRef, PathRef, RawRef, TokenRef, as_reference, ref
from .responsive import (
    BREAKPOINT_ORDER,
    DEFAULT_BREAKPOINTS,
    Breakpoint,
    ResponsiveValue,
)
from .tokens import CATEGORIES, METADATA_KEY, ThemeMode, TokenMetadata, TokenStore, stringify_keys

__all__ = [
    # Tokens
    "CATEGORIES",
    "METADATA_KEY",
    "ThemeMode",
    "TokenMetadata",
    "TokenStore",
    "stringify_keys",
    # References
    "LiteralRef",
    "PathRef",
    "RawRef",
    "TokenRef",
    "as_reference",
    "ref",
    # Responsive
    "BREAKPOINT_ORDER",
    "DEFAULT_BREAKPOINTS",
    "Breakpoint",
    "ResponsiveValue",
    # Envelope
    "ENVELOPE_VERSION",
    "EnvelopeMetadata",
    "SerializedEnvelope",
]
