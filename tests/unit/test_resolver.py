"""Tests for token reference resolution."""

from __future__ import annotations

import pytest


class TestGetValue:
    """Tests for dotted path lookup."""

    def test_nested_lookup(self, base_store) -> None:
        from tokenforge.core.resolver import get_value

        assert get_value(base_store, "colors.primary.500") == "#3b82f6"
        assert get_value(base_store, "typography.fontWeight.bold") == 700

    def test_returns_branches(self, base_store) -> None:
        from tokenforge.core.resolver import get_value

        assert get_value(base_store, "colors.background") == {"default": "#ffffff", "paper": "#fafafa"}

    def test_numeric_segment_matches_int_key(self) -> None:
        from tokenforge.core.resolver import get_value

        assert get_value({"colors": {"primary": {500: "#abc123"}}}, "colors.primary.500") == "#abc123"

    @pytest.mark.parametrize("path", ["", "colors.missing", "colors.white.deeper", "nope"])
    def test_absent_paths(self, base_store, path: str) -> None:
        from tokenforge.core.resolver import get_value

        assert get_value(base_store, path) is None

    def test_none_tree(self) -> None:
        from tokenforge.core.resolver import get_value

        assert get_value(None, "colors.white") is None


class TestResolve:
    """Tests for resolve()."""

    def test_literal_passthrough(self, base_store) -> None:
        from tokenforge.core.ir import LiteralRef
        from tokenforge.core.resolver import resolve

        assert resolve("transparent", base_store) == "transparent"
        assert resolve(LiteralRef(value="1px solid"), base_store) == "1px solid"

    def test_path_hit(self, base_store) -> None:
        from tokenforge.core.ir import ref
        from tokenforge.core.resolver import resolve

        assert resolve(ref("colors.primary.500", "#000000"), base_store) == "#3b82f6"

    def test_mapping_reference(self, base_store) -> None:
        from tokenforge.core.resolver import resolve

        raw = {"token": "colors.error.500", "fallback": "#ff0000"}
        assert resolve(raw, base_store) == "#ef4444"

    def test_fallback_when_absent(self) -> None:
        from tokenforge.core.ir import ref
        from tokenforge.core.resolver import resolve

        assert resolve(ref("colors.primary.500", "#3b82f6"), {}) == "#3b82f6"

    def test_empty_string_without_fallback(self) -> None:
        from tokenforge.core.ir import ref
        from tokenforge.core.resolver import resolve

        assert resolve(ref("colors.primary.500"), {}) == ""

    def test_non_string_leaf_uses_fallback(self, base_store) -> None:
        from tokenforge.core.ir import ref
        from tokenforge.core.resolver import resolve

        # Branches and numbers are not CSS strings
        assert resolve(ref("colors.primary", "fallback"), base_store) == "fallback"
        assert resolve(ref("zIndex.modal", "1400"), base_store) == "1400"

    def test_empty_leaf_uses_fallback(self) -> None:
        from tokenforge.core.ir import ref
        from tokenforge.core.resolver import resolve

        assert resolve(ref("colors.brand", "#111111"), {"colors": {"brand": ""}}) == "#111111"

    @pytest.mark.parametrize("raw", [None, 42, ["a"], {"fallback": "x"}])
    def test_total_for_unrecognized_input(self, base_store, raw) -> None:
        from tokenforge.core.resolver import resolve

        assert resolve(raw, base_store) == ""

    def test_make_resolver_binds_tree(self, base_store) -> None:
        from tokenforge.core.ir import ref
        from tokenforge.core.resolver import make_resolver

        resolver = make_resolver(base_store)

        assert resolver(ref("spacing.4")) == "1rem"
        assert resolver("auto") == "auto"


class TestReferences:
    """Tests for reference coercion."""

    def test_as_reference_kinds(self) -> None:
        from tokenforge.core.ir import LiteralRef, PathRef, as_reference

        assert as_reference("#fff") == LiteralRef(value="#fff")
        assert as_reference({"token": "a.b", "fallback": 3}) == PathRef(token="a.b", fallback="3")
        existing = PathRef(token="x")
        assert as_reference(existing) is existing

    def test_path_ref_segments(self) -> None:
        from tokenforge.core.ir import ref

        reference = ref("colors.primary.500")

        assert reference.segments == ["colors", "primary", "500"]
        assert str(reference) == "{colors.primary.500}"
