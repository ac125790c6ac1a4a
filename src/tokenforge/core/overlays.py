"""
Component overlay maps.

Overlays are declarative property sets that point into a resolved token
tree:
- VariantMap: component -> variant -> property -> reference
- StateMap: component -> interaction state -> property -> reference
- ResponsiveMap: key -> ResponsiveValue of references

Maps are immutable values; ``register`` returns a new map. Resolution never
raises: unknown components, variants, states or breakpoints resolve to empty
results or the base value.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from enum import StrEnum
from typing import Any

from .ir import BREAKPOINT_ORDER, DEFAULT_BREAKPOINTS, Breakpoint, ResponsiveValue
from .resolver import TreeLike, make_resolver, resolve

PropertySet = dict[str, str]
RawProperties = Mapping[str, Any]


class InteractionState(StrEnum):
    """Interaction states a component can be styled for."""

    DEFAULT = "default"
    HOVER = "hover"
    FOCUS = "focus"
    ACTIVE = "active"
    DISABLED = "disabled"
    LOADING = "loading"
    ERROR = "error"
    SUCCESS = "success"
    READONLY = "readonly"


# States rendered as [data-<state>="true"] attribute selectors instead of pseudo-classes
ATTRIBUTE_STATES: tuple[InteractionState, ...] = (
    InteractionState.LOADING,
    InteractionState.ERROR,
    InteractionState.SUCCESS,
    InteractionState.READONLY,
)

_CAMEL_RE = re.compile(r"([A-Z])")


def kebab_case(name: str) -> str:
    """Convert camelCase to kebab-case (``backgroundColor`` -> ``background-color``)."""
    return _CAMEL_RE.sub(r"-\1", name).lower()


def _freeze(entries: Mapping[str, Mapping[str, RawProperties]]) -> dict[str, dict[str, dict[str, Any]]]:
    return {
        outer: {inner: dict(props) for inner, props in by_key.items()}
        for outer, by_key in entries.items()
    }


class _KeyedOverlay:
    """Shared storage for component -> key -> property maps."""

    def __init__(self, entries: Mapping[str, Mapping[str, RawProperties]] | None = None):
        self._entries = _freeze(entries or {})

    def register(self, component: str, key: str, properties: RawProperties):
        """Return a new map with ``properties`` set for (component, key)."""
        entries = _freeze(self._entries)
        entries.setdefault(component, {})[str(key)] = dict(properties)
        return type(self)(entries)

    def components(self) -> list[str]:
        return list(self._entries)

    def keys_for(self, component: str) -> list[str]:
        return list(self._entries.get(component, {}))

    def raw(self, component: str, key: str) -> dict[str, Any]:
        """Unresolved references for (component, key), or an empty dict."""
        return dict(self._entries.get(component, {}).get(str(key), {}))

    def resolve(self, component: str, key: str, tree: TreeLike | None) -> PropertySet:
        return {prop: resolve(reference, tree) for prop, reference in self.raw(component, key).items()}

    def to_dict(self) -> dict[str, dict[str, dict[str, Any]]]:
        return _freeze(self._entries)

    def __contains__(self, component: object) -> bool:
        return component in self._entries

    def __eq__(self, other: object) -> bool:
        return type(other) is type(self) and other._entries == self._entries  # type: ignore[attr-defined]

    def __repr__(self) -> str:
        return f"{type(self).__name__}(components={self.components()!r})"


class VariantMap(_KeyedOverlay):
    """Component variant overlays (``button.primary.background`` -> reference)."""

    def variants(self, component: str) -> list[str]:
        return self.keys_for(component)

    def css_variables(self, component: str, tree: TreeLike | None, prefix: str = "") -> PropertySet:
        """
        Custom properties for every variant of a component.

        Names follow ``--{prefix}{component}-{variant}-{property}``.
        """
        variables: PropertySet = {}
        for variant in self.variants(component):
            for prop, value in self.resolve(component, variant, tree).items():
                variables[f"--{prefix}{component}-{variant}-{prop}"] = value
        return variables


class StateMap(_KeyedOverlay):
    """Component interaction-state overlays."""

    def states(self, component: str) -> list[str]:
        return self.keys_for(component)


def merge_state_tokens(base: PropertySet, state: PropertySet | None = None) -> PropertySet:
    """
    Layer state properties over base properties.

    Returns ``base`` itself when no state is given; otherwise a new dict in
    which state properties win.
    """
    if state is None:
        return base
    return {**base, **state}


def resolve_component(
    variant_map: VariantMap,
    state_map: StateMap,
    component: str,
    variant: str,
    state: str | None,
    tree: TreeLike | None,
) -> PropertySet:
    """
    Resolve a component's properties for a variant and interaction state.

    Layers: variant properties, then the ``default`` state, then the
    requested state.
    """
    properties = variant_map.resolve(component, variant, tree)
    properties = merge_state_tokens(
        properties, state_map.resolve(component, InteractionState.DEFAULT, tree)
    )
    if state and state != InteractionState.DEFAULT:
        properties = merge_state_tokens(properties, state_map.resolve(component, state, tree))
    return properties


def generate_state_css(selector: str, state: str, properties: Mapping[str, str]) -> str:
    """Render one CSS rule for a state; ``default`` uses the bare selector."""
    state_selector = selector if state == InteractionState.DEFAULT else f"{selector}:{state}"
    lines = [f"  {kebab_case(prop)}: {value};" for prop, value in properties.items()]
    return f"{state_selector} {{\n" + "\n".join(lines) + "\n}"


def generate_component_state_css(
    selector: str,
    component: str,
    state_map: StateMap,
    tree: TreeLike | None,
) -> str:
    """
    Render CSS for every state of a component.

    Interaction states become pseudo-class rules; loading, error, success
    and readonly become ``[data-<state>="true"]`` attribute rules.
    """
    blocks: list[str] = []
    special: list[str] = []
    for state in state_map.states(component):
        properties = state_map.resolve(component, state, tree)
        if state in ATTRIBUTE_STATES:
            special.append(
                generate_state_css(f'{selector}[data-{state}="true"]', InteractionState.DEFAULT, properties)
            )
        else:
            blocks.append(generate_state_css(selector, state, properties))
    return "\n\n".join(blocks + special)


# =============================================================================
# Responsive overlays
# =============================================================================


def _as_responsive(value: Any) -> ResponsiveValue[Any]:
    if isinstance(value, ResponsiveValue):
        return value
    if isinstance(value, Mapping) and "base" in value:
        return ResponsiveValue.from_mapping(value)
    return ResponsiveValue(base=value)


def resolve_responsive(value: Any, breakpoint: str) -> Any:
    """
    Resolve a responsive value at a breakpoint (mobile-first cascade).

    Walks ``base, sm, md, lg, xl, 2xl`` up to and including ``breakpoint``
    and keeps the last defined value. Unknown breakpoint names resolve to
    ``base``.
    """
    responsive = _as_responsive(value)
    try:
        target = Breakpoint(breakpoint)
    except ValueError:
        return responsive.base
    result = responsive.base
    for bp in BREAKPOINT_ORDER[: BREAKPOINT_ORDER.index(target) + 1]:
        explicit = responsive.at(bp)
        if explicit is not None:
            result = explicit
    return result


def generate_responsive_css(
    property: str,
    value: Any,
    selector: str,
    tree: TreeLike | None = None,
    breakpoints: Mapping[str, str] | None = None,
) -> str:
    """
    Render a base rule plus one ``@media (min-width: ...)`` block per
    explicitly defined breakpoint.
    """
    widths = {**DEFAULT_BREAKPOINTS, **(breakpoints or {})}
    resolver = make_resolver(tree)
    responsive = _as_responsive(value)

    css = [f"{selector} {{\n  {property}: {resolver(responsive.base)};\n}}"]
    for bp, explicit in responsive.defined():
        if bp is Breakpoint.BASE or bp.value not in widths:
            continue
        css.append(
            f"@media (min-width: {widths[bp.value]}) {{\n"
            f"  {selector} {{\n    {property}: {resolver(explicit)};\n  }}\n}}"
        )
    return "\n\n".join(css)


class ResponsiveMap:
    """Named responsive values whose entries are token references."""

    def __init__(self, entries: Mapping[str, Any] | None = None):
        self._entries: dict[str, ResponsiveValue[Any]] = {
            key: _as_responsive(value) for key, value in (entries or {}).items()
        }

    def register(self, key: str, value: Any) -> ResponsiveMap:
        entries: dict[str, Any] = dict(self._entries)
        entries[key] = value
        return ResponsiveMap(entries)

    def keys(self) -> list[str]:
        return list(self._entries)

    def get(self, key: str) -> ResponsiveValue[Any] | None:
        return self._entries.get(key)

    def resolve(self, key: str, breakpoint: str, tree: TreeLike | None) -> str:
        """Resolve ``key`` at ``breakpoint``; unknown keys resolve to ``""``."""
        value = self._entries.get(key)
        if value is None:
            return ""
        return resolve(resolve_responsive(value, breakpoint), tree)

    def custom_properties(self, tree: TreeLike | None, prefix: str = "") -> dict[str, dict[str, str]]:
        """
        Resolved values per breakpoint, keyed by custom property name.

        Example: ``{"--container-padding": {"base": "1rem", "md": "1.5rem"}}``
        """
        resolver: Callable[[Any], str] = make_resolver(tree)
        properties: dict[str, dict[str, str]] = {}
        for key, value in self._entries.items():
            properties[f"--{prefix}{kebab_case(key)}"] = {
                bp.value: resolver(explicit) for bp, explicit in value.defined()
            }
        return properties

    def __contains__(self, key: object) -> bool:
        return key in self._entries
