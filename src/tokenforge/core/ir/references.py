"""
Token reference types.

A reference is either a literal value or a dotted path into a resolved tree
with a fallback. The two cases are separate frozen models so dispatch is an
isinstance check on a named type rather than key probing.

Examples:
    - LiteralRef(value="transparent")
    - PathRef(token="colors.primary.500", fallback="#3b82f6")
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class LiteralRef(BaseModel):
    """A literal CSS value used as-is."""

    model_config = ConfigDict(frozen=True)

    value: str

    def __str__(self) -> str:
        return self.value


class PathRef(BaseModel):
    """A dotted path into a resolved token tree, with an optional fallback."""

    model_config = ConfigDict(frozen=True)

    token: str = Field(description="Dotted path, e.g. 'colors.primary.500'")
    fallback: str | None = Field(default=None, description="Value used when the path is absent")

    def __str__(self) -> str:
        return f"{{{self.token}}}"

    @property
    def segments(self) -> list[str]:
        return self.token.split(".")


TokenRef = LiteralRef | PathRef

# Raw overlay values as written in presets: "#fff" or {"token": ..., "fallback": ...}
RawRef = str | Mapping[str, Any] | LiteralRef | PathRef


def as_reference(raw: Any) -> TokenRef:
    """Coerce a raw overlay value into a LiteralRef or PathRef.

    Strings become literals, ``{"token", "fallback"}`` mappings become path
    references, and existing references pass through. Anything else becomes
    an empty literal so that resolution stays total.
    """
    if isinstance(raw, (LiteralRef, PathRef)):
        return raw
    if isinstance(raw, str):
        return LiteralRef(value=raw)
    if isinstance(raw, Mapping) and isinstance(raw.get("token"), str):
        fallback = raw.get("fallback")
        return PathRef(token=raw["token"], fallback=None if fallback is None else str(fallback))
    return LiteralRef(value="")


def ref(token: str, fallback: str | None = None) -> PathRef:
    """Shorthand for building a PathRef in presets."""
    return PathRef(token=token, fallback=fallback)
