"""
Token diff analysis.

Compares two token trees leaf by leaf, classifies each change by impact and
maps it to the components likely affected. Lists are compared as whole
leaves.
"""

from __future__ import annotations

import json
import math
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from .ir import METADATA_KEY, TokenStore
from .resolver import get_value


class DiffType(StrEnum):
    ADDED = "added"
    MODIFIED = "modified"
    REMOVED = "removed"
    UNCHANGED = "unchanged"


class Impact(StrEnum):
    BREAKING = "breaking"
    MINOR = "minor"
    PATCH = "patch"


class RiskLevel(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


_IMPACT_ORDER = {Impact.BREAKING: 0, Impact.MINOR: 1, Impact.PATCH: 2, None: 3}
_TYPE_ORDER = {DiffType.REMOVED: 0, DiffType.MODIFIED: 1, DiffType.ADDED: 2, DiffType.UNCHANGED: 3}

# Token path prefix -> components that consume it
COMPONENT_TOKEN_MAP: dict[str, list[str]] = {
    "colors.primary": ["Button", "Link", "Badge"],
    "colors.danger": ["Button", "Alert", "Toast"],
    "spacing": ["Card", "Container", "Grid"],
    "typography.fontSize": ["Text", "Heading", "Button"],
    "borderRadius": ["Card", "Button", "Input"],
    "shadows": ["Card", "Modal", "Dropdown"],
}


@dataclass
class TokenDiff:
    path: str
    type: DiffType
    old_value: Any = None
    new_value: Any = None
    category: str = "root"
    impact: Impact | None = None
    affected_components: list[str] = field(default_factory=list)


@dataclass
class DiffSummary:
    total_changes: int = 0
    added: int = 0
    modified: int = 0
    removed: int = 0
    breaking: int = 0
    categories: dict[str, int] = field(default_factory=dict)
    components: list[str] = field(default_factory=list)
    risk_level: RiskLevel = RiskLevel.LOW
    estimated_effort: int = 0


def _tree(tokens: TokenStore | Mapping[str, Any]) -> Mapping[str, Any]:
    return tokens.to_dict() if isinstance(tokens, TokenStore) else tokens


def walk_leaves(tree: Mapping[str, Any], prefix: str = "") -> Iterator[tuple[str, Any]]:
    """Yield ``(dotted_path, value)`` for every non-mapping leaf."""
    for key, value in tree.items():
        path = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(value, Mapping):
            yield from walk_leaves(value, path)
        elif value is not None:
            yield path, value


def affected_components(path: str) -> list[str]:
    """Components mapped to ``path``, an ancestor of it, or a descendant of it."""
    found: list[str] = []
    for prefix, components in COMPONENT_TOKEN_MAP.items():
        if path == prefix or path.startswith(f"{prefix}.") or prefix.startswith(f"{path}."):
            found.extend(c for c in components if c not in found)
    return found


def assess_impact(change: DiffType, path: str, old_value: Any, new_value: Any) -> Impact:
    if change is DiffType.REMOVED:
        return Impact.BREAKING
    if change is DiffType.ADDED:
        return Impact.PATCH
    if type(old_value) is not type(new_value):
        return Impact.BREAKING
    if "color" in path or "spacing" in path:
        return Impact.MINOR
    return Impact.PATCH


def diff_tokens(
    old: TokenStore | Mapping[str, Any],
    new: TokenStore | Mapping[str, Any],
    *,
    ignore_metadata: bool = True,
    include_unchanged: bool = False,
) -> list[TokenDiff]:
    """
    Compute leaf-level differences between two token trees.

    Returns:
        Diffs sorted by impact (breaking first) then change type
    """
    old_tree, new_tree = _tree(old), _tree(new)
    diffs: list[TokenDiff] = []
    seen: set[str] = set()

    def skip(path: str) -> bool:
        return ignore_metadata and path.split(".")[0] == METADATA_KEY

    def make(change: DiffType, path: str, old_value: Any = None, new_value: Any = None) -> TokenDiff:
        return TokenDiff(
            path=path,
            type=change,
            old_value=old_value,
            new_value=new_value,
            category=path.split(".")[0] or "root",
            impact=None if change is DiffType.UNCHANGED else assess_impact(change, path, old_value, new_value),
            affected_components=[] if change is DiffType.UNCHANGED else affected_components(path),
        )

    for path, value in walk_leaves(old_tree):
        if skip(path):
            continue
        seen.add(path)
        current = get_value(new_tree, path)
        if current is None:
            diffs.append(make(DiffType.REMOVED, path, old_value=value))
        elif current != value or type(current) is not type(value):
            diffs.append(make(DiffType.MODIFIED, path, old_value=value, new_value=current))
        elif include_unchanged:
            diffs.append(make(DiffType.UNCHANGED, path, old_value=value, new_value=current))

    for path, value in walk_leaves(new_tree):
        if skip(path) or path in seen:
            continue
        diffs.append(make(DiffType.ADDED, path, new_value=value))

    diffs.sort(key=lambda d: (_IMPACT_ORDER[d.impact], _TYPE_ORDER[d.type]))
    return diffs


def summarize(diffs: list[TokenDiff]) -> DiffSummary:
    """Count changes and estimate risk and effort."""
    summary = DiffSummary()
    for diff in diffs:
        if diff.type is DiffType.UNCHANGED:
            continue
        summary.total_changes += 1
        if diff.type is DiffType.ADDED:
            summary.added += 1
        elif diff.type is DiffType.MODIFIED:
            summary.modified += 1
        elif diff.type is DiffType.REMOVED:
            summary.removed += 1
        if diff.impact is Impact.BREAKING:
            summary.breaking += 1
        summary.categories[diff.category] = summary.categories.get(diff.category, 0) + 1
        for component in diff.affected_components:
            if component not in summary.components:
                summary.components.append(component)

    if summary.breaking > 0 or summary.removed > 5:
        summary.risk_level = RiskLevel.HIGH
    elif summary.modified > 10 or summary.removed > 0:
        summary.risk_level = RiskLevel.MEDIUM

    summary.estimated_effort = math.ceil(
        summary.breaking * 4 + summary.removed * 2 + summary.modified * 0.5 + summary.added * 0.25
    )
    return summary


def _show(value: Any) -> str:
    return json.dumps(value, default=str)


def _format_text(diff: TokenDiff) -> str:
    lines = [f"{diff.type.upper()}: {diff.path}"]
    if diff.type is DiffType.MODIFIED:
        lines.append(f"  Old: {_show(diff.old_value)}")
        lines.append(f"  New: {_show(diff.new_value)}")
    elif diff.type is DiffType.REMOVED:
        lines.append(f"  Value: {_show(diff.old_value)}")
    elif diff.type is DiffType.ADDED:
        lines.append(f"  Value: {_show(diff.new_value)}")
    if diff.impact:
        lines.append(f"  Impact: {diff.impact}")
    if diff.affected_components:
        lines.append(f"  Affects: {', '.join(diff.affected_components)}")
    return "\n".join(lines)


def _format_markdown(diff: TokenDiff) -> str:
    lines = [f"### {diff.type.upper()}: `{diff.path}`", ""]
    if diff.type is DiffType.MODIFIED:
        lines.append(f"- **Old**: `{_show(diff.old_value)}`")
        lines.append(f"- **New**: `{_show(diff.new_value)}`")
    elif diff.type is DiffType.REMOVED:
        lines.append(f"- **Value**: `{_show(diff.old_value)}`")
    elif diff.type is DiffType.ADDED:
        lines.append(f"- **Value**: `{_show(diff.new_value)}`")
    if diff.impact:
        lines.append(f"- **Impact**: {diff.impact}")
    if diff.affected_components:
        lines.append(f"- **Affects**: {', '.join(diff.affected_components)}")
    return "\n".join(lines) + "\n"


def format_report(diffs: list[TokenDiff], summary: DiffSummary | None = None, fmt: str = "markdown") -> str:
    """Render a diff report as ``markdown`` or ``text``."""
    summary = summary or summarize(diffs)
    changes = [d for d in diffs if d.type is not DiffType.UNCHANGED]

    if fmt == "text":
        out = [
            "TOKEN DIFF REPORT",
            "=================",
            "",
            "SUMMARY",
            "-------",
            f"Total Changes: {summary.total_changes}",
            f"Added: {summary.added}",
            f"Modified: {summary.modified}",
            f"Removed: {summary.removed}",
            f"Breaking Changes: {summary.breaking}",
            "",
            "IMPACT ANALYSIS",
            "---------------",
            f"Risk Level: {summary.risk_level.upper()}",
            f"Estimated Effort: {summary.estimated_effort} hours",
            f"Affected Components: {', '.join(summary.components)}",
            "",
            "DETAILED CHANGES",
            "----------------",
            "",
        ]
        out.extend(_format_text(d) + "\n" for d in changes)
        return "\n".join(out)

    out = [
        "# Token Diff Report",
        "",
        "## Summary",
        "",
        f"- **Total Changes**: {summary.total_changes}",
        f"- **Added**: {summary.added}",
        f"- **Modified**: {summary.modified}",
        f"- **Removed**: {summary.removed}",
        f"- **Breaking Changes**: {summary.breaking}",
        "",
        "## Impact Analysis",
        "",
        f"- **Risk Level**: {summary.risk_level.upper()}",
        f"- **Estimated Effort**: {summary.estimated_effort} hours",
        f"- **Affected Components**: {len(summary.components)}",
    ]
    out.extend(f"  - {c}" for c in summary.components)
    out.append("")
    if summary.categories:
        out.extend(["## Changes by Category", ""])
        out.extend(f"- **{cat}**: {count} changes" for cat, count in summary.categories.items())
        out.append("")
    out.extend(["## Detailed Changes", ""])
    for change in (DiffType.REMOVED, DiffType.MODIFIED, DiffType.ADDED):
        group = [d for d in changes if d.type is change]
        if group:
            out.extend([f"### {change.capitalize()} Tokens", ""])
            out.extend(_format_markdown(d) for d in group)
    return "\n".join(out)
