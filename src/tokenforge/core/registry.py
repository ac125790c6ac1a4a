"""
Theme registry.

Holds named override trees on top of a base token store and caches the
merged result per theme. Registration replaces the entry and swaps in a
fresh cache, so a reader racing a registration sees either the old or the
new store, never a partial merge.
"""

from __future__ import annotations

import copy
import logging
import threading
from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

from pydantic import ValidationError

from .errors import InvalidThemeError, ThemeNotFoundError
from .ir import TokenStore, stringify_keys
from .merge import merge
from .theme_presets import BUILTIN_OVERRIDES, base_store

logger = logging.getLogger(__name__)

SYSTEM_THEME = "system"
COLOR_MODES = ("light", "dark")
DEFAULT_COLOR_MODE = "light"


@runtime_checkable
class ColorModeProvider(Protocol):
    """Platform preference source consulted for the ``system`` theme."""

    def get_system_color_mode(self) -> str: ...


class StaticColorModeProvider:
    """Provider that always reports the same mode."""

    def __init__(self, mode: str = DEFAULT_COLOR_MODE):
        self.mode = mode

    def get_system_color_mode(self) -> str:
        return self.mode


class ThemeRegistry:
    """
    Named theme overrides plus a merged-store cache.

    Example:
        registry = ThemeRegistry(base_store())
        registry.register("brand", {"colors": {"primary": {"500": "#e11d48"}}})
        store = registry.get_merged("brand")
    """

    def __init__(
        self,
        base: TokenStore,
        color_mode_provider: ColorModeProvider | None = None,
    ):
        self.base = base
        self.color_mode_provider = color_mode_provider
        self._overrides: dict[str, dict[str, Any]] = {}
        self._cache: dict[str, TokenStore] = {}
        self._generation = 0
        self._lock = threading.Lock()

    # -------------------------------------------------------------------------
    # Index
    # -------------------------------------------------------------------------

    def register(self, name: str, override: Mapping[str, Any] | TokenStore) -> None:
        """
        Insert or replace a theme and invalidate every cached merge.

        The override is merged once up front; that store seeds the new cache.

        Raises:
            InvalidThemeError: If the merged metadata does not validate
        """
        tree = override.to_dict() if isinstance(override, TokenStore) else stringify_keys(dict(override))
        try:
            merged = merge(self.base, {"metadata": {"id": name}}, tree)
        except ValidationError as e:
            raise InvalidThemeError(name, str(e)) from e
        with self._lock:
            self._overrides[name] = tree
            self._cache = {name: merged}
            self._generation += 1
        logger.info("Registered theme %r", name)

    def unregister(self, name: str) -> bool:
        with self._lock:
            removed = self._overrides.pop(name, None) is not None
            if removed:
                self._cache = {}
                self._generation += 1
        if removed:
            logger.info("Unregistered theme %r", name)
        return removed

    def names(self) -> list[str]:
        with self._lock:
            return list(self._overrides)

    def is_registered(self, name: str) -> bool:
        with self._lock:
            return name in self._overrides

    def get(self, name: str) -> dict[str, Any]:
        """Return a copy of the raw override tree for ``name``."""
        with self._lock:
            override = self._overrides.get(name)
        if override is None:
            raise ThemeNotFoundError(name)
        return copy.deepcopy(override)

    # -------------------------------------------------------------------------
    # Merged stores
    # -------------------------------------------------------------------------

    def get_merged(self, name: str) -> TokenStore:
        """
        Return the merged store for a theme, computing and caching it on miss.

        Raises:
            ThemeNotFoundError: If ``name`` is not registered
        """
        with self._lock:
            cached = self._cache.get(name)
            if cached is not None:
                logger.debug("Theme cache hit: %s", name)
                return cached
            override = self._overrides.get(name)
            generation = self._generation
            cache = self._cache
        if override is None:
            raise ThemeNotFoundError(name)

        logger.debug("Theme cache miss: %s", name)
        merged = merge(self.base, {"metadata": {"id": name}}, override)

        with self._lock:
            if self._generation == generation and self._cache is cache:
                # Another reader may have filled the slot meanwhile
                merged = cache.setdefault(name, merged)
        return merged

    def resolve_theme_name(self, name: str) -> str:
        """
        Map ``system`` to the provider's color mode.

        A missing provider, a provider error or an answer other than
        ``light``/``dark`` yields ``light``. Other names pass through.
        """
        if name != SYSTEM_THEME:
            return name
        if self.color_mode_provider is None:
            logger.warning("No color mode provider; using %r for system theme", DEFAULT_COLOR_MODE)
            return DEFAULT_COLOR_MODE
        try:
            mode = self.color_mode_provider.get_system_color_mode()
        except Exception as e:
            logger.warning("System color mode unavailable (%s); using %r", e, DEFAULT_COLOR_MODE)
            return DEFAULT_COLOR_MODE
        if mode not in COLOR_MODES:
            logger.warning("Invalid system color mode %r; using %r", mode, DEFAULT_COLOR_MODE)
            return DEFAULT_COLOR_MODE
        return mode

    def get_with_fallback(self, name: str, fallback_name: str = DEFAULT_COLOR_MODE) -> TokenStore:
        """
        Return a merged store, never raising for unknown themes.

        Resolution order: the named theme (after ``system`` resolution), then
        ``fallback_name``, then the base store.
        """
        resolved = self.resolve_theme_name(name)
        for candidate in (resolved, fallback_name):
            if self.is_registered(candidate):
                try:
                    return self.get_merged(candidate)
                except ThemeNotFoundError:
                    # Unregistered concurrently
                    continue
        logger.debug("Theme %r not registered; using base store", name)
        return self.base


def create_default_registry(provider: ColorModeProvider | None = None) -> ThemeRegistry:
    """Build a registry over the built-in base store with light and dark registered."""
    registry = ThemeRegistry(base_store(), color_mode_provider=provider)
    for name, override in BUILTIN_OVERRIDES.items():
        registry.register(name, override)
    return registry
