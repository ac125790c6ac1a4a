"""
Token versioning.

Semantic versions for token stores, a version history that picks each bump
from a token diff, and migrations between versions:
- MAJOR when any change is breaking (removed tokens, changed value types)
- MINOR for added tokens and color or spacing edits
- PATCH for every other change

Recorded stores carry their version in ``metadata.version``.
"""

from __future__ import annotations

import copy
import functools
import json
import logging
import re
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

import yaml
from pydantic import ValidationError

from .diff import DiffType, Impact, TokenDiff, diff_tokens
from .errors import UnsupportedFormatError, VersionError
from .ir import METADATA_KEY, TokenStore
from .resolver import get_value

logger = logging.getLogger(__name__)

_DOTTED = r"[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*"
SEMVER_PATTERN = re.compile(rf"^v?(\d+)\.(\d+)\.(\d+)(?:-({_DOTTED}))?(?:\+({_DOTTED}))?$")

TreeMigration = Callable[[dict[str, Any]], dict[str, Any]]


class Bump(StrEnum):
    MAJOR = "major"
    MINOR = "minor"
    PATCH = "patch"


def _identifier_key(part: str) -> tuple[int, int, str]:
    # Numeric prerelease identifiers sort before alphanumeric ones
    return (0, int(part), "") if part.isdigit() else (1, 0, part)


@functools.total_ordering
@dataclass(frozen=True, eq=False)
class SemanticVersion:
    """
    A ``MAJOR.MINOR.PATCH[-prerelease][+build]`` version.

    Ordering follows semver precedence: a prerelease sorts before its
    release and build metadata is ignored.
    """

    major: int
    minor: int
    patch: int
    prerelease: str | None = None
    build: str | None = None

    @classmethod
    def parse(cls, text: str | SemanticVersion) -> SemanticVersion:
        """
        Parse a version string; a leading ``v`` is accepted.

        Raises:
            VersionError: If ``text`` is not a semantic version
        """
        if isinstance(text, SemanticVersion):
            return text
        match = SEMVER_PATTERN.match(text.strip()) if isinstance(text, str) else None
        if match is None:
            raise VersionError(f"Invalid semantic version: {text!r}")
        major, minor, patch, prerelease, build = match.groups()
        return cls(int(major), int(minor), int(patch), prerelease, build)

    def __str__(self) -> str:
        version = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            version += f"-{self.prerelease}"
        if self.build:
            version += f"+{self.build}"
        return version

    def increment(self, bump: Bump | str) -> SemanticVersion:
        """Next version for ``bump``; prerelease and build are dropped."""
        bump = Bump(bump)
        if bump is Bump.MAJOR:
            return SemanticVersion(self.major + 1, 0, 0)
        if bump is Bump.MINOR:
            return SemanticVersion(self.major, self.minor + 1, 0)
        return SemanticVersion(self.major, self.minor, self.patch + 1)

    def _key(self) -> tuple[Any, ...]:
        if self.prerelease is None:
            return (self.major, self.minor, self.patch, 1, ())
        parts = tuple(_identifier_key(p) for p in self.prerelease.split("."))
        return (self.major, self.minor, self.patch, 0, parts)

    def compare(self, other: str | SemanticVersion) -> int:
        """Return -1, 0 or 1 as this version sorts before, with, or after ``other``."""
        mine, theirs = self._key(), SemanticVersion.parse(other)._key()
        return (mine > theirs) - (mine < theirs)

    def is_compatible(self, other: str | SemanticVersion) -> bool:
        """Same major version; for ``0.x`` the minor version must match too."""
        other = SemanticVersion.parse(other)
        if self.major != other.major:
            return False
        return self.major != 0 or self.minor == other.minor

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SemanticVersion):
            return NotImplemented
        return self._key() == other._key()

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, SemanticVersion):
            return NotImplemented
        return self._key() < other._key()

    def __hash__(self) -> int:
        return hash(self._key())


# =============================================================================
# Bumps
# =============================================================================


def bump_for(diffs: Iterable[TokenDiff]) -> Bump | None:
    """Version bump implied by a diff, or None when nothing changed."""
    changes = [d for d in diffs if d.type is not DiffType.UNCHANGED]
    if not changes:
        return None
    if any(d.impact is Impact.BREAKING for d in changes):
        return Bump.MAJOR
    if any(d.impact is Impact.MINOR or d.type is DiffType.ADDED for d in changes):
        return Bump.MINOR
    return Bump.PATCH


def suggest_version(old: TokenStore, new: TokenStore) -> tuple[SemanticVersion, Bump | None]:
    """
    Next version for ``new`` given the previous store ``old``.

    The bump applies to ``old.metadata.version``. Without changes the old
    version is returned with a None bump.
    """
    current = SemanticVersion.parse(old.metadata.version)
    bump = bump_for(diff_tokens(old, new))
    return (current if bump is None else current.increment(bump)), bump


def with_version(tokens: TokenStore, version: str | SemanticVersion) -> TokenStore:
    """Copy of ``tokens`` with ``metadata.version`` replaced."""
    metadata = tokens.metadata.model_copy(update={"version": str(version)})
    return tokens.model_copy(update={"metadata": metadata})


# =============================================================================
# Migrations
# =============================================================================


@dataclass(frozen=True)
class Migration:
    """
    Tree rewrite from one version to a later one.

    ``migrate`` and ``rollback`` receive a private copy of the full tree
    (metadata included) and return the rewritten tree.
    """

    from_version: str
    to_version: str
    migrate: TreeMigration
    rollback: TreeMigration | None = None
    description: str = ""
    breaking: bool = False

    def __post_init__(self) -> None:
        if SemanticVersion.parse(self.from_version) >= SemanticVersion.parse(self.to_version):
            raise VersionError(f"Migration must move forward: {self.from_version} -> {self.to_version}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "from_version": self.from_version,
            "to_version": self.to_version,
            "description": self.description,
            "breaking": self.breaking,
            "reversible": self.rollback is not None,
        }


def migration_path(
    migrations: Iterable[Migration],
    from_version: str | SemanticVersion,
    to_version: str | SemanticVersion,
) -> list[Migration]:
    """
    Chain of migrations leading from ``from_version`` up to ``to_version``.

    Raises:
        VersionError: If no chain of consecutive migrations connects them
    """
    start, target = SemanticVersion.parse(from_version), SemanticVersion.parse(to_version)
    by_start = {SemanticVersion.parse(m.from_version): m for m in migrations}
    path: list[Migration] = []
    current = start
    while current != target:
        step = by_start.get(current)
        if step is None or SemanticVersion.parse(step.to_version) > target:
            raise VersionError(f"No migration path from {start} to {target}")
        path.append(step)
        current = SemanticVersion.parse(step.to_version)
    return path


def can_migrate(
    migrations: Iterable[Migration],
    from_version: str | SemanticVersion,
    to_version: str | SemanticVersion,
) -> bool:
    try:
        migration_path(migrations, from_version, to_version)
    except VersionError:
        return False
    return True


def rename_keys(category: str, renames: Mapping[str, str]) -> TreeMigration:
    """Migration that renames keys of one category; a renamed key wins over an existing one."""

    def apply(tree: dict[str, Any]) -> dict[str, Any]:
        section = tree.get(category)
        if isinstance(section, dict):
            renamed = {k: v for k, v in section.items() if k not in renames}
            renamed.update({renames[k]: v for k, v in section.items() if k in renames})
            tree[category] = renamed
        return tree

    return apply


def _add_accessibility(tree: dict[str, Any]) -> dict[str, Any]:
    if "accessibility" not in tree:
        focus = get_value(tree, "colors.primary.500")
        tree["accessibility"] = {
            "wcagLevel": "AA",
            "focusOutline": f"2px solid {focus if isinstance(focus, str) else '#0066cc'}",
            "focusOutlineOffset": "2px",
            "minTouchTarget": "44px",
        }
    return tree


PALETTE_RENAMES = {"blue": "primary", "green": "success", "red": "error", "yellow": "warning", "gray": "neutral"}

LEGACY_MIGRATIONS: tuple[Migration, ...] = (
    Migration(
        from_version="1.0.0",
        to_version="2.0.0",
        migrate=rename_keys("colors", PALETTE_RENAMES),
        rollback=rename_keys("colors", {new: old for old, new in PALETTE_RENAMES.items()}),
        description="Rename palette colors to semantic names",
        breaking=True,
    ),
    Migration(
        from_version="2.0.0",
        to_version="2.1.0",
        migrate=_add_accessibility,
        description="Add accessibility tokens for WCAG compliance",
    ),
)


# =============================================================================
# Version history
# =============================================================================


@dataclass
class TokenVersion:
    """One recorded version of a token store."""

    version: str
    created_at: str
    parent: str | None = None
    description: str | None = None
    created_by: str | None = None
    bump: Bump | None = None
    tags: list[str] = field(default_factory=list)
    changes: list[TokenDiff] = field(default_factory=list)

    @property
    def breaking(self) -> bool:
        return self.bump is Bump.MAJOR

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON/YAML export."""
        return {
            "version": self.version,
            "created_at": self.created_at,
            "parent": self.parent,
            "description": self.description,
            "created_by": self.created_by,
            "bump": str(self.bump) if self.bump else None,
            "breaking": self.breaking,
            "tags": list(self.tags),
            "changes": [
                {
                    "path": c.path,
                    "type": str(c.type),
                    "impact": str(c.impact) if c.impact else None,
                    "old_value": c.old_value,
                    "new_value": c.new_value,
                }
                for c in self.changes
            ],
        }


class TokenVersionManager:
    """
    Version history for one token system.

    The first recorded store gets ``initial_version``; each later store is
    diffed against the current one to choose the bump.

    Example:
        manager = TokenVersionManager()
        manager.create_version(store, description="Initial palette")
        entry = manager.create_version(rebranded)
        entry.version  # "1.1.0" when colors changed
    """

    def __init__(
        self,
        initial_version: str = "1.0.0",
        *,
        max_versions: int | None = None,
        migrations: Iterable[Migration] = (),
    ):
        self.initial_version = SemanticVersion.parse(initial_version)
        self.max_versions = max_versions
        self._versions: dict[str, tuple[TokenVersion, TokenStore]] = {}
        self._migrations: list[Migration] = []
        self._current: str | None = None
        for migration in migrations:
            self.add_migration(migration)

    @property
    def current_version(self) -> str | None:
        return self._current

    def current_tokens(self) -> TokenStore | None:
        entry = self._versions.get(self._current) if self._current else None
        return entry[1] if entry else None

    def create_version(
        self,
        tokens: TokenStore,
        *,
        description: str | None = None,
        created_by: str | None = None,
        breaking: bool = False,
        bump: Bump | str | None = None,
        tags: Iterable[str] = (),
    ) -> TokenVersion:
        """
        Record ``tokens`` as the next version and make it current.

        ``bump`` forces the increment; ``breaking`` forces a major one.

        Raises:
            VersionError: If nothing changed since the current version, or
                the computed version is already recorded
        """
        previous = self.current_tokens()
        changes: list[TokenDiff] = []
        chosen: Bump | None = None
        if previous is None:
            number = self.initial_version
        else:
            changes = diff_tokens(previous, tokens)
            if bump is not None:
                chosen = Bump(bump)
            elif breaking:
                chosen = Bump.MAJOR
            else:
                chosen = bump_for(changes)
            if chosen is None:
                raise VersionError(f"No token changes since version {self._current}")
            number = SemanticVersion.parse(self._current).increment(chosen)

        key = str(number)
        if key in self._versions:
            raise VersionError(f"Version {key} is already recorded")

        entry = TokenVersion(
            version=key,
            created_at=datetime.now(UTC).isoformat(),
            parent=self._current,
            description=description,
            created_by=created_by,
            bump=chosen,
            tags=list(dict.fromkeys(tags)),
            changes=changes,
        )
        self._versions[key] = (entry, with_version(tokens, key))
        self._current = key
        logger.info("Recorded token version %s (%s)", key, chosen or "initial")
        self._prune()
        return entry

    def get_version(self, version: str | SemanticVersion) -> tuple[TokenVersion, TokenStore] | None:
        return self._versions.get(str(SemanticVersion.parse(version)))

    def list_versions(self) -> list[TokenVersion]:
        """Recorded versions, newest first."""
        entries = [entry for entry, _ in self._versions.values()]
        return sorted(entries, key=lambda e: SemanticVersion.parse(e.version), reverse=True)

    def switch_to(self, version: str | SemanticVersion) -> TokenStore:
        """
        Make a recorded version current and return its store.

        Raises:
            VersionError: If the version was never recorded or was pruned
        """
        found = self.get_version(version)
        if found is None:
            raise VersionError(f"Version {version} not found")
        self._current = found[0].version
        logger.info("Switched to token version %s", self._current)
        return found[1]

    def tag(self, version: str | SemanticVersion, *tags: str) -> None:
        found = self.get_version(version)
        if found is None:
            raise VersionError(f"Version {version} not found")
        entry = found[0]
        for tag in tags:
            if tag not in entry.tags:
                entry.tags.append(tag)

    def versions_by_tag(self, tag: str) -> list[TokenVersion]:
        return [entry for entry in self.list_versions() if tag in entry.tags]

    # -------------------------------------------------------------------------
    # Migrations
    # -------------------------------------------------------------------------

    @property
    def migrations(self) -> list[Migration]:
        return list(self._migrations)

    def add_migration(self, migration: Migration) -> None:
        self._migrations.append(migration)
        self._migrations.sort(key=lambda m: SemanticVersion.parse(m.from_version))

    def can_migrate(self, from_version: str | SemanticVersion, to_version: str | SemanticVersion) -> bool:
        """True when ``migrate`` would find a chain, in either direction."""
        start, target = SemanticVersion.parse(from_version), SemanticVersion.parse(to_version)
        if start <= target:
            return can_migrate(self._migrations, start, target)
        try:
            path = migration_path(self._migrations, target, start)
        except VersionError:
            return False
        return all(m.rollback is not None for m in path)

    def migrate(
        self,
        tokens: TokenStore,
        from_version: str | SemanticVersion,
        to_version: str | SemanticVersion,
    ) -> TokenStore:
        """
        Rewrite ``tokens`` from one version to another.

        Upgrades apply ``migrate`` along the chain; downgrades apply each
        ``rollback`` in reverse. The result carries ``to_version``.

        Raises:
            VersionError: If no chain exists, a step has no rollback, or the
                migrated tree has invalid metadata
        """
        start, target = SemanticVersion.parse(from_version), SemanticVersion.parse(to_version)
        if start == target:
            return tokens

        steps: list[tuple[TreeMigration, str]]
        if start < target:
            steps = [(m.migrate, m.to_version) for m in migration_path(self._migrations, start, target)]
        else:
            path = migration_path(self._migrations, target, start)
            for m in path:
                if m.rollback is None:
                    raise VersionError(f"Migration {m.from_version} -> {m.to_version} cannot be rolled back")
            steps = [(m.rollback, m.from_version) for m in reversed(path)]

        tree = tokens.to_dict()
        for func, reached in steps:
            tree = func(copy.deepcopy(tree))
            logger.debug("Migrated tokens to %s", reached)

        metadata = tree.get(METADATA_KEY)
        tree[METADATA_KEY] = {**(metadata if isinstance(metadata, Mapping) else {}), "version": str(target)}
        try:
            return TokenStore.from_dict(tree)
        except ValidationError as e:
            raise VersionError(f"Migrated tokens have invalid metadata: {e}") from e

    # -------------------------------------------------------------------------
    # History
    # -------------------------------------------------------------------------

    def _prune(self) -> None:
        if not self.max_versions or len(self._versions) <= self.max_versions:
            return
        keep = {entry.version for entry in self.list_versions()[: self.max_versions]}
        if self._current:
            keep.add(self._current)
        for version in [v for v in self._versions if v not in keep]:
            del self._versions[version]
            logger.debug("Pruned token version %s", version)

    def history(self) -> dict[str, Any]:
        return {
            "current_version": self._current,
            "versions": [entry.to_dict() for entry in self.list_versions()],
            "migrations": [m.to_dict() for m in self._migrations],
        }

    def export_history(self, fmt: str = "json") -> str:
        """
        Render the version history as ``json`` or ``yaml``.

        Raises:
            UnsupportedFormatError: For any other format
        """
        if fmt == "json":
            return json.dumps(self.history(), indent=2, default=str)
        if fmt == "yaml":
            return yaml.safe_dump(self.history(), sort_keys=False)
        raise UnsupportedFormatError("history format", fmt, ["json", "yaml"])
