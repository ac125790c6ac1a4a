"""Tests for token versioning and migrations."""

from __future__ import annotations

import json

import pytest
import yaml


class TestSemanticVersion:
    """Tests for SemanticVersion."""

    def test_parse_and_format(self) -> None:
        from tokenforge.core.versioning import SemanticVersion

        version = SemanticVersion.parse("v1.2.3-beta.1+build.5")

        assert (version.major, version.minor, version.patch) == (1, 2, 3)
        assert version.prerelease == "beta.1"
        assert version.build == "build.5"
        assert str(version) == "1.2.3-beta.1+build.5"

    @pytest.mark.parametrize("text", ["1.2", "1.2.3.4", "one.two.three", "", "1.2.3-"])
    def test_invalid_versions(self, text: str) -> None:
        from tokenforge.core.errors import VersionError
        from tokenforge.core.versioning import SemanticVersion

        with pytest.raises(VersionError, match="Invalid semantic version"):
            SemanticVersion.parse(text)

    @pytest.mark.parametrize(
        ("bump", "expected"),
        [("major", "2.0.0"), ("minor", "1.3.0"), ("patch", "1.2.4")],
    )
    def test_increment_resets_lower_parts(self, bump: str, expected: str) -> None:
        from tokenforge.core.versioning import SemanticVersion

        assert str(SemanticVersion.parse("1.2.3-rc.1+b7").increment(bump)) == expected

    @pytest.mark.parametrize(
        ("lower", "higher"),
        [
            ("1.0.0", "2.0.0"),
            ("1.9.0", "1.10.0"),
            ("1.0.0-alpha", "1.0.0"),
            ("1.0.0-alpha.2", "1.0.0-alpha.10"),
            ("1.0.0-alpha.9", "1.0.0-beta"),
        ],
    )
    def test_ordering(self, lower: str, higher: str) -> None:
        from tokenforge.core.versioning import SemanticVersion

        low, high = SemanticVersion.parse(lower), SemanticVersion.parse(higher)

        assert low < high
        assert low.compare(high) == -1
        assert high.compare(lower) == 1

    def test_build_metadata_ignored_for_equality(self) -> None:
        from tokenforge.core.versioning import SemanticVersion

        assert SemanticVersion.parse("1.0.0+a") == SemanticVersion.parse("1.0.0+b")
        assert SemanticVersion.parse("1.0.0").compare("1.0.0+z") == 0

    @pytest.mark.parametrize(
        ("a", "b", "compatible"),
        [("1.2.0", "1.9.3", True), ("1.2.0", "2.0.0", False), ("0.2.0", "0.2.5", True), ("0.2.0", "0.3.0", False)],
    )
    def test_is_compatible(self, a: str, b: str, compatible: bool) -> None:
        from tokenforge.core.versioning import SemanticVersion

        assert SemanticVersion.parse(a).is_compatible(b) is compatible


class TestBumps:
    """Tests for choosing a bump from a token diff."""

    @pytest.mark.parametrize(
        ("change", "expected"),
        [
            ({"spacing": {"4": "1rem"}}, "major"),
            ({"spacing": {"1": "0.25rem", "4": "1.25rem"}}, "minor"),
            ({"borderRadius": {"md": "0.375rem", "lg": "0.5rem"}}, "minor"),
            ({"borderRadius": {"md": "0.5rem"}}, "patch"),
            ({"typography": {"fontWeight": {"bold": "700"}}}, "major"),
        ],
    )
    def test_bump_for(self, small_store, change: dict, expected: str) -> None:
        from tokenforge.core.diff import diff_tokens
        from tokenforge.core.ir import TokenStore
        from tokenforge.core.merge import merge
        from tokenforge.core.versioning import bump_for

        old = merge(small_store, {"borderRadius": {"md": "0.375rem"}})
        tree = old.to_dict()
        tree.update(change)
        if "typography" in change:
            tree["typography"] = {**old.tree["typography"], **change["typography"]}

        assert bump_for(diff_tokens(old, TokenStore.from_dict(tree))) == expected

    def test_no_changes_is_no_bump(self, base_store) -> None:
        from tokenforge.core.versioning import suggest_version

        version, bump = suggest_version(base_store, base_store)

        assert bump is None
        assert str(version) == "1.0.0"

    def test_suggest_version_for_breaking_change(self, base_store) -> None:
        from tokenforge.core.ir import TokenStore
        from tokenforge.core.versioning import Bump, suggest_version

        tree = base_store.to_dict()
        del tree["colors"]["primary"]["950"]

        version, bump = suggest_version(base_store, TokenStore.from_dict(tree))

        assert bump is Bump.MAJOR
        assert str(version) == "2.0.0"

    def test_with_version(self, small_store) -> None:
        from tokenforge.core.versioning import with_version

        stamped = with_version(small_store, "3.1.0")

        assert stamped.metadata.version == "3.1.0"
        assert stamped.metadata.id == "small"
        assert small_store.metadata.version == "1.0.0"


class TestTokenVersionManager:
    """Tests for the version history."""

    def test_first_version_uses_initial_version(self, small_store) -> None:
        from tokenforge.core.versioning import TokenVersionManager

        manager = TokenVersionManager()

        entry = manager.create_version(small_store, description="Initial palette")

        assert entry.version == "1.0.0"
        assert entry.parent is None
        assert entry.bump is None
        assert manager.current_version == "1.0.0"
        assert manager.current_tokens().metadata.version == "1.0.0"

    def test_bumps_follow_changes(self, small_store) -> None:
        from tokenforge.core.ir import TokenStore
        from tokenforge.core.merge import merge
        from tokenforge.core.versioning import Bump, TokenVersionManager

        manager = TokenVersionManager()
        manager.create_version(small_store)

        recolored = merge(small_store, {"colors": {"brand": {"500": "#2563eb"}}})
        minor = manager.create_version(recolored)
        rounded = merge(recolored, {"borderRadius": {"md": "0.375rem"}})
        addition = manager.create_version(rounded)
        tree = rounded.to_dict()
        del tree["spacing"]["1"]
        major = manager.create_version(TokenStore.from_dict(tree))

        assert (minor.version, minor.bump) == ("1.1.0", Bump.MINOR)
        assert [c.path for c in minor.changes] == ["colors.brand.500"]
        assert addition.version == "1.2.0"
        assert (major.version, major.parent, major.breaking) == ("2.0.0", "1.2.0", True)
        assert manager.current_tokens().metadata.version == "2.0.0"

    def test_explicit_bump_and_breaking_flag(self, small_store) -> None:
        from tokenforge.core.merge import merge
        from tokenforge.core.versioning import TokenVersionManager

        manager = TokenVersionManager("0.1.0")
        manager.create_version(small_store)

        forced = manager.create_version(merge(small_store, {"borderRadius": {"sm": "2px"}}), bump="minor")
        breaking = manager.create_version(merge(small_store, {"borderRadius": {"sm": "4px"}}), breaking=True)

        assert forced.version == "0.2.0"
        assert breaking.version == "1.0.0"

    def test_unchanged_tokens_rejected(self, small_store) -> None:
        from tokenforge.core.errors import VersionError
        from tokenforge.core.versioning import TokenVersionManager

        manager = TokenVersionManager()
        manager.create_version(small_store)

        with pytest.raises(VersionError, match="No token changes"):
            manager.create_version(small_store)

    def test_switch_to_and_duplicate_version(self, small_store) -> None:
        from tokenforge.core.errors import VersionError
        from tokenforge.core.merge import merge
        from tokenforge.core.versioning import TokenVersionManager

        manager = TokenVersionManager()
        manager.create_version(small_store)
        manager.create_version(merge(small_store, {"colors": {"white": "#fefefe"}}))

        restored = manager.switch_to("v1.0.0")

        assert manager.current_version == "1.0.0"
        assert restored.tree["colors"]["white"] == "#ffffff"
        with pytest.raises(VersionError, match="already recorded"):
            manager.create_version(merge(small_store, {"colors": {"white": "#fafafa"}}))
        with pytest.raises(VersionError, match="not found"):
            manager.switch_to("9.9.9")

    def test_list_tags_and_prune(self, small_store) -> None:
        from tokenforge.core.merge import merge
        from tokenforge.core.versioning import TokenVersionManager

        manager = TokenVersionManager(max_versions=2)
        manager.create_version(small_store, tags=["initial"])
        manager.create_version(merge(small_store, {"colors": {"white": "#fefefe"}}))
        manager.create_version(merge(small_store, {"colors": {"white": "#fdfdfd"}}))
        manager.tag("1.2.0", "stable", "stable")

        assert [v.version for v in manager.list_versions()] == ["1.2.0", "1.1.0"]
        assert manager.get_version("1.0.0") is None
        assert [v.version for v in manager.versions_by_tag("stable")] == ["1.2.0"]
        assert manager.list_versions()[0].tags == ["stable"]

    def test_export_history(self, small_store) -> None:
        from tokenforge.core.merge import merge
        from tokenforge.core.versioning import LEGACY_MIGRATIONS, TokenVersionManager

        manager = TokenVersionManager(migrations=LEGACY_MIGRATIONS)
        manager.create_version(small_store)
        manager.create_version(merge(small_store, {"colors": {"brand": {"500": "#2563eb"}}}))

        history = json.loads(manager.export_history())

        assert history["current_version"] == "1.1.0"
        assert [v["version"] for v in history["versions"]] == ["1.1.0", "1.0.0"]
        assert history["versions"][0]["changes"][0]["impact"] == "minor"
        assert history["migrations"][0]["from_version"] == "1.0.0"
        assert yaml.safe_load(manager.export_history("yaml")) == history

    def test_export_history_unknown_format(self) -> None:
        from tokenforge.core.errors import UnsupportedFormatError
        from tokenforge.core.versioning import TokenVersionManager

        with pytest.raises(UnsupportedFormatError):
            TokenVersionManager().export_history("xml")


class TestMigrations:
    """Tests for migration chains."""

    @pytest.fixture
    def legacy_store(self):
        from tokenforge.core.ir import TokenStore

        return TokenStore.from_dict(
            {
                "metadata": {"id": "legacy", "name": "Legacy", "category": "test", "version": "1.0.0"},
                "colors": {"blue": {"500": "#3b82f6"}, "gray": {"500": "#737373"}, "white": "#ffffff"},
            }
        )

    def test_migration_must_move_forward(self) -> None:
        from tokenforge.core.errors import VersionError
        from tokenforge.core.versioning import Migration

        with pytest.raises(VersionError):
            Migration(from_version="2.0.0", to_version="1.0.0", migrate=lambda tree: tree)

    def test_migration_path(self) -> None:
        from tokenforge.core.versioning import LEGACY_MIGRATIONS, can_migrate, migration_path

        path = migration_path(LEGACY_MIGRATIONS, "1.0.0", "2.1.0")

        assert [(m.from_version, m.to_version) for m in path] == [("1.0.0", "2.0.0"), ("2.0.0", "2.1.0")]
        assert migration_path(LEGACY_MIGRATIONS, "2.0.0", "2.0.0") == []
        assert can_migrate(LEGACY_MIGRATIONS, "1.0.0", "2.0.0")
        assert not can_migrate(LEGACY_MIGRATIONS, "1.0.0", "3.0.0")
        assert not can_migrate(LEGACY_MIGRATIONS, "2.1.0", "1.0.0")

    def test_upgrade(self, legacy_store) -> None:
        from tokenforge.core.versioning import LEGACY_MIGRATIONS, TokenVersionManager

        manager = TokenVersionManager(migrations=LEGACY_MIGRATIONS)

        upgraded = manager.migrate(legacy_store, "1.0.0", "2.1.0")

        assert upgraded.metadata.version == "2.1.0"
        assert set(upgraded.tree["colors"]) == {"primary", "neutral", "white"}
        assert upgraded.tree["accessibility"]["focusOutline"] == "2px solid #3b82f6"
        assert "blue" in legacy_store.tree["colors"]

    def test_rollback(self, legacy_store) -> None:
        from tokenforge.core.versioning import LEGACY_MIGRATIONS, TokenVersionManager

        manager = TokenVersionManager(migrations=LEGACY_MIGRATIONS)
        upgraded = manager.migrate(legacy_store, "1.0.0", "2.0.0")

        restored = manager.migrate(upgraded, "2.0.0", "1.0.0")

        assert restored.to_dict() == legacy_store.to_dict()

    def test_rollback_requires_every_step_reversible(self, legacy_store) -> None:
        from tokenforge.core.errors import VersionError
        from tokenforge.core.versioning import LEGACY_MIGRATIONS, TokenVersionManager

        manager = TokenVersionManager(migrations=LEGACY_MIGRATIONS)

        assert manager.can_migrate("2.0.0", "1.0.0")
        assert not manager.can_migrate("2.1.0", "1.0.0")
        with pytest.raises(VersionError, match="cannot be rolled back"):
            manager.migrate(legacy_store, "2.1.0", "1.0.0")

    def test_same_version_is_identity(self, legacy_store) -> None:
        from tokenforge.core.versioning import TokenVersionManager

        assert TokenVersionManager().migrate(legacy_store, "1.0.0", "v1.0.0") is legacy_store

    def test_invalid_result_is_version_error(self, legacy_store) -> None:
        from tokenforge.core.errors import VersionError
        from tokenforge.core.versioning import Migration, TokenVersionManager

        def drop_metadata(tree):
            tree["metadata"] = {"id": ""}
            return tree

        manager = TokenVersionManager(migrations=[Migration("1.0.0", "1.1.0", drop_metadata)])

        with pytest.raises(VersionError, match="invalid metadata"):
            manager.migrate(legacy_store, "1.0.0", "1.1.0")
