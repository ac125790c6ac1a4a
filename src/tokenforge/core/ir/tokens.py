"""
Token store IR types.

A TokenStore is the canonical nested value tree for one design theme plus
its immutable metadata. The tree is a plain mapping so it can be merged,
walked, and serialized without conversion; metadata is a frozen model so an
invalid theme can never be registered or serialized.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# Fixed top-level semantic categories, in artifact emission order
CATEGORIES: tuple[str, ...] = (
    "colors",
    "typography",
    "spacing",
    "borderRadius",
    "shadows",
    "zIndex",
    "animation",
    "transitions",
    "branding",
    "accessibility",
    "responsive",
    "components",
)

METADATA_KEY = "metadata"


def stringify_keys(value: Any) -> Any:
    """
    Deep-copy a tree with every mapping key converted to ``str``.

    YAML reads unquoted scale steps such as ``500:`` as integers; token paths
    are always strings.
    """
    if isinstance(value, Mapping):
        return {str(k): stringify_keys(v) for k, v in value.items()}
    if isinstance(value, list):
        return [stringify_keys(v) for v in value]
    return copy.deepcopy(value)


class ThemeMode(StrEnum):
    """Color mode a token store was designed for."""

    LIGHT = "LIGHT"
    DARK = "DARK"


class TokenMetadata(BaseModel):
    """Identity of a token store."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1, description="Stable theme identifier (e.g. 'oslo-dark')")
    name: str = Field(min_length=1, description="Human readable theme name")
    category: str = Field(min_length=1, description="Theme category (e.g. 'enterprise')")
    mode: ThemeMode = Field(default=ThemeMode.LIGHT, description="LIGHT or DARK")
    version: str = Field(min_length=1, default="1.0.0", description="Token set version")


class TokenStore(BaseModel):
    """
    A resolved design token tree with metadata.

    The tree holds the category mappings (``colors``, ``typography``, ...);
    ``metadata`` is kept separately and re-attached by ``to_dict()``.
    """

    model_config = ConfigDict(frozen=True)

    tree: dict[str, Any] = Field(default_factory=dict)
    metadata: TokenMetadata

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> TokenStore:
        """Build a store from a plain mapping that carries a ``metadata`` key."""
        tree = {str(k): stringify_keys(v) for k, v in data.items() if k != METADATA_KEY}
        metadata = data.get(METADATA_KEY)
        if isinstance(metadata, TokenMetadata):
            return cls(tree=tree, metadata=metadata)
        return cls(tree=tree, metadata=TokenMetadata.model_validate(metadata))

    def to_dict(self) -> dict[str, Any]:
        """Return a deep copy of the tree with metadata attached."""
        data = copy.deepcopy(self.tree)
        data[METADATA_KEY] = self.metadata.model_dump(mode="json")
        return data

    def category(self, name: str) -> Any:
        """Get a top-level category, or an empty mapping when absent."""
        return self.tree.get(name, {})

    def __contains__(self, name: object) -> bool:
        return name in self.tree
