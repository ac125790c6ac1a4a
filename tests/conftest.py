"""Shared pytest fixtures for tokenforge tests."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from tokenforge.core.ir import TokenStore
from tokenforge.core.registry import ThemeRegistry, create_default_registry
from tokenforge.core.theme_presets import base_store as _base_store


@pytest.fixture
def base_store() -> TokenStore:
    """Return the built-in base token store."""
    return _base_store()


@pytest.fixture
def small_store() -> TokenStore:
    """Return a minimal store with one color scale and a spacing scale."""
    return TokenStore.from_dict(
        {
            "metadata": {"id": "small", "name": "Small", "category": "test", "mode": "LIGHT"},
            "colors": {
                "white": "#ffffff",
                "brand": {"100": "#dbeafe", "500": "#3b82f6", "900": "#1e3a8a"},
            },
            "typography": {
                "fontFamily": {"sans": ["Inter", "sans-serif"]},
                "fontSize": {"base": "1rem"},
                "fontWeight": {"bold": 700},
            },
            "spacing": {"1": "0.25rem", "4": "1rem"},
            "responsive": {"breakpoints": {"md": "768px"}},
        }
    )


@pytest.fixture
def registry() -> ThemeRegistry:
    """Return a fresh default registry (light + dark)."""
    return create_default_registry()


@pytest.fixture
def write_yaml(tmp_path: Path):
    """Write a mapping as YAML under tmp_path and return the path."""
    import yaml

    def _write(name: str, data: dict[str, Any]) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")
        return path

    return _write
