"""
Token tree merge engine.

Merges a base token store with any number of override trees:
1. Mappings present on both sides are merged recursively
2. Any other override value replaces the base value (lists included)
3. Overrides apply left to right, so the last writer wins

Merging is total and side-effect free. Type mismatches resolve by
replacement and the result shares no mutable containers with its inputs.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping
from typing import Any

from .ir import TokenStore


def deep_merge(base: Mapping[str, Any], *overrides: Mapping[str, Any]) -> dict[str, Any]:
    """
    Deep-merge plain mapping trees.

    Args:
        base: Tree to start from
        *overrides: Partial trees applied in order

    Returns:
        A new tree; neither ``base`` nor any override is modified
    """
    result: dict[str, Any] = copy.deepcopy(dict(base))
    for override in overrides:
        _merge_into(result, override)
    return result


def _merge_into(target: dict[str, Any], override: Mapping[str, Any]) -> None:
    for key, value in override.items():
        current = target.get(key)
        if isinstance(current, dict) and isinstance(value, Mapping):
            _merge_into(current, value)
        elif isinstance(value, Mapping):
            target[key] = copy.deepcopy(dict(value))
        else:
            target[key] = copy.deepcopy(value)


def merge(base: TokenStore, *overrides: Mapping[str, Any] | TokenStore) -> TokenStore:
    """
    Merge override trees onto a token store.

    A TokenStore override contributes its full tree including metadata.
    A partial ``metadata`` mapping merges like any other branch.

    Returns:
        New TokenStore with all overrides applied
    """
    if not overrides:
        return base
    trees = [o.to_dict() if isinstance(o, TokenStore) else o for o in overrides]
    return TokenStore.from_dict(deep_merge(base.to_dict(), *trees))
