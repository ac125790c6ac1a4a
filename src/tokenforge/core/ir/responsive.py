"""
Responsive value types.

A ResponsiveValue holds a required ``base`` value plus optional per-breakpoint
overrides. Resolution is a mobile-first cascade (see
``tokenforge.core.overlays.resolve_responsive``).
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import StrEnum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class Breakpoint(StrEnum):
    """Breakpoints in cascade order."""

    BASE = "base"
    SM = "sm"
    MD = "md"
    LG = "lg"
    XL = "xl"
    XXL = "2xl"


BREAKPOINT_ORDER: tuple[Breakpoint, ...] = tuple(Breakpoint)

DEFAULT_BREAKPOINTS: dict[str, str] = {
    Breakpoint.SM: "640px",
    Breakpoint.MD: "768px",
    Breakpoint.LG: "1024px",
    Breakpoint.XL: "1280px",
    Breakpoint.XXL: "1536px",
}


class ResponsiveValue(BaseModel, Generic[T]):
    """A value that can change at each breakpoint."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    base: T
    sm: T | None = None
    md: T | None = None
    lg: T | None = None
    xl: T | None = None
    xxl: T | None = Field(default=None, alias="2xl")

    def at(self, breakpoint: Breakpoint) -> T | None:
        """Explicit value for a breakpoint, without cascading."""
        if breakpoint is Breakpoint.XXL:
            return self.xxl
        return getattr(self, breakpoint.value)

    def defined(self) -> list[tuple[Breakpoint, T]]:
        """Explicitly defined (breakpoint, value) pairs in cascade order."""
        pairs: list[tuple[Breakpoint, T]] = []
        for bp in BREAKPOINT_ORDER:
            value = self.at(bp)
            if value is not None:
                pairs.append((bp, value))
        return pairs

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> ResponsiveValue[Any]:
        """Build from ``{"base": ..., "md": ..., "2xl": ...}``."""
        return cls.model_validate(dict(data))
