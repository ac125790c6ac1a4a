"""
Token reference resolution.

Resolves literal values and ``{token, fallback}`` path references against a
resolved token tree. Resolution is total: absence yields the fallback or an
empty string, never an exception.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from .ir import LiteralRef, PathRef, TokenStore, as_reference

TreeLike = TokenStore | Mapping[str, Any]


def _tree_of(tree: TreeLike | None) -> Mapping[str, Any]:
    if isinstance(tree, TokenStore):
        return tree.tree
    if isinstance(tree, Mapping):
        return tree
    return {}


def get_value(tree: TreeLike | None, path: str) -> Any | None:
    """
    Look up a raw value by dotted path.

    Numeric segments also match integer keys, so ``colors.primary.500``
    finds ``{"primary": {500: ...}}`` as well as ``{"primary": {"500": ...}}``.

    Returns:
        The value at ``path`` (scalar, list or mapping) or None when absent
    """
    node: Any = _tree_of(tree)
    if not path:
        return None
    for segment in path.split("."):
        if not isinstance(node, Mapping):
            return None
        if segment in node:
            node = node[segment]
        elif segment.isdigit() and int(segment) in node:
            node = node[int(segment)]
        else:
            return None
    return node


def resolve(reference: Any, tree: TreeLike | None) -> str:
    """
    Resolve a token reference to a string.

    Literals are returned unchanged. Path references return the leaf when it
    is a non-empty string, otherwise the fallback or ``""``.
    """
    resolved = as_reference(reference)
    if isinstance(resolved, LiteralRef):
        return resolved.value
    if isinstance(resolved, PathRef):
        value = get_value(tree, resolved.token)
        if isinstance(value, str) and value:
            return value
        return resolved.fallback or ""
    return ""


def make_resolver(tree: TreeLike | None) -> Callable[[Any], str]:
    """Bind ``resolve`` to a tree for helpers that take a one-argument resolver."""

    def _resolve(reference: Any) -> str:
        return resolve(reference, tree)

    return _resolve
