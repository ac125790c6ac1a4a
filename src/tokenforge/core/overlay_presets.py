"""
Built-in component overlay presets.

Variant maps for button/input/card/badge/alert, state maps for
button/input/link/card/checkbox, and responsive typography/spacing/layout
maps. Every reference carries a fallback so the presets render against an
empty tree.
"""

from __future__ import annotations

from .ir import ref
from .overlays import ResponsiveMap, StateMap, VariantMap


def _solid(scale: str, base: str, hover: str, active: str, disabled: str, muted: str) -> dict:
    """Solid button variant over a color scale."""
    return {
        "background": ref(f"colors.{scale}.500", base),
        "backgroundHover": ref(f"colors.{scale}.600", hover),
        "backgroundActive": ref(f"colors.{scale}.700", active),
        "backgroundDisabled": ref(f"colors.{scale}.300", disabled),
        "text": ref("colors.white", "#ffffff"),
        "textDisabled": ref(f"colors.{scale}.100", muted),
        "border": ref(f"colors.{scale}.500", base),
        "borderHover": ref(f"colors.{scale}.600", hover),
        "focusRing": ref(f"colors.{scale}.500", base),
    }


def _tinted(scale: str, background: str, text: str, border: str) -> dict:
    """Badge-style variant: light background, dark text."""
    return {
        "background": ref(f"colors.{scale}.100", background),
        "text": ref(f"colors.{scale}.900", text),
        "border": ref(f"colors.{scale}.200", border),
    }


def _alert(scale: str, background: str, text: str, border: str, icon: str) -> dict:
    return {
        "background": ref(f"colors.{scale}.50", background),
        "text": ref(f"colors.{scale}.900", text),
        "border": ref(f"colors.{scale}.200", border),
        "icon": ref(f"colors.{scale}.500", icon),
    }


TRANSPARENT = ref("colors.transparent", "transparent")

BUTTON_VARIANTS = {
    "primary": _solid("primary", "#3b82f6", "#2563eb", "#1d4ed8", "#93bbfc", "#dbeafe"),
    "success": _solid("success", "#10b981", "#059669", "#047857", "#86efac", "#d1fae5"),
    "danger": _solid("error", "#ef4444", "#dc2626", "#b91c1c", "#fca5a5", "#fee2e2"),
    "secondary": {
        "background": ref("colors.neutral.200", "#e5e5e5"),
        "backgroundHover": ref("colors.neutral.300", "#d4d4d4"),
        "backgroundActive": ref("colors.neutral.400", "#a3a3a3"),
        "backgroundDisabled": ref("colors.neutral.100", "#f5f5f5"),
        "text": ref("colors.neutral.900", "#171717"),
        "textDisabled": ref("colors.neutral.400", "#a3a3a3"),
        "border": ref("colors.neutral.300", "#d4d4d4"),
        "borderHover": ref("colors.neutral.400", "#a3a3a3"),
        "focusRing": ref("colors.neutral.500", "#737373"),
    },
    "ghost": {
        "background": TRANSPARENT,
        "backgroundHover": ref("colors.neutral.100", "#f5f5f5"),
        "backgroundActive": ref("colors.neutral.200", "#e5e5e5"),
        "backgroundDisabled": TRANSPARENT,
        "text": ref("colors.neutral.900", "#171717"),
        "textDisabled": ref("colors.neutral.400", "#a3a3a3"),
        "border": TRANSPARENT,
        "borderHover": TRANSPARENT,
        "focusRing": ref("colors.neutral.500", "#737373"),
    },
    "outline": {
        "background": TRANSPARENT,
        "backgroundHover": ref("colors.neutral.50", "#fafafa"),
        "backgroundActive": ref("colors.neutral.100", "#f5f5f5"),
        "backgroundDisabled": TRANSPARENT,
        "text": ref("colors.neutral.900", "#171717"),
        "textDisabled": ref("colors.neutral.400", "#a3a3a3"),
        "border": ref("colors.neutral.300", "#d4d4d4"),
        "borderHover": ref("colors.neutral.400", "#a3a3a3"),
        "focusRing": ref("colors.neutral.500", "#737373"),
    },
}

INPUT_VARIANTS = {
    "default": {
        "background": ref("colors.white", "#ffffff"),
        "backgroundDisabled": ref("colors.neutral.50", "#fafafa"),
        "text": ref("colors.neutral.900", "#171717"),
        "textPlaceholder": ref("colors.neutral.400", "#a3a3a3"),
        "border": ref("colors.neutral.300", "#d4d4d4"),
        "borderFocus": ref("colors.primary.500", "#3b82f6"),
        "borderError": ref("colors.error.500", "#ef4444"),
        "focusRing": ref("colors.primary.500", "#3b82f6"),
    },
    "filled": {
        "background": ref("colors.neutral.100", "#f5f5f5"),
        "backgroundDisabled": ref("colors.neutral.200", "#e5e5e5"),
        "text": ref("colors.neutral.900", "#171717"),
        "textPlaceholder": ref("colors.neutral.500", "#737373"),
        "border": TRANSPARENT,
        "borderFocus": ref("colors.primary.500", "#3b82f6"),
        "borderError": ref("colors.error.500", "#ef4444"),
        "focusRing": ref("colors.primary.500", "#3b82f6"),
    },
    "unstyled": {
        "background": TRANSPARENT,
        "text": ref("colors.neutral.900", "#171717"),
        "textPlaceholder": ref("colors.neutral.400", "#a3a3a3"),
        "border": TRANSPARENT,
        "focusRing": TRANSPARENT,
    },
}

CARD_VARIANTS = {
    "default": {
        "background": ref("colors.white", "#ffffff"),
        "text": ref("colors.neutral.900", "#171717"),
        "border": ref("colors.neutral.200", "#e5e5e5"),
        "shadow": ref("shadows.md", "0 4px 6px -1px rgba(0, 0, 0, 0.1)"),
    },
    "elevated": {
        "background": ref("colors.white", "#ffffff"),
        "text": ref("colors.neutral.900", "#171717"),
        "border": TRANSPARENT,
        "shadow": ref("shadows.lg", "0 10px 15px -3px rgba(0, 0, 0, 0.1)"),
    },
    "outlined": {
        "background": ref("colors.white", "#ffffff"),
        "text": ref("colors.neutral.900", "#171717"),
        "border": ref("colors.neutral.300", "#d4d4d4"),
        "shadow": ref("shadows.none", "none"),
    },
    "filled": {
        "background": ref("colors.neutral.50", "#fafafa"),
        "text": ref("colors.neutral.900", "#171717"),
        "border": TRANSPARENT,
        "shadow": ref("shadows.none", "none"),
    },
}

BADGE_VARIANTS = {
    "primary": _tinted("primary", "#dbeafe", "#1e3a8a", "#bfdbfe"),
    "secondary": _tinted("neutral", "#f5f5f5", "#404040", "#e5e5e5"),
    "success": _tinted("success", "#d1fae5", "#064e3b", "#a7f3d0"),
    "warning": _tinted("warning", "#fef3c7", "#78350f", "#fde68a"),
    "danger": _tinted("error", "#fee2e2", "#7f1d1d", "#fecaca"),
    "info": _tinted("info", "#dbeafe", "#1e3a8a", "#bfdbfe"),
}

ALERT_VARIANTS = {
    "info": _alert("info", "#eff6ff", "#1e3a8a", "#bfdbfe", "#3b82f6"),
    "success": _alert("success", "#f0fdf4", "#064e3b", "#a7f3d0", "#10b981"),
    "warning": _alert("warning", "#fffbeb", "#78350f", "#fde68a", "#f59e0b"),
    "error": _alert("error", "#fef2f2", "#7f1d1d", "#fecaca", "#ef4444"),
}

DISABLED_STATE = {
    "opacity": ref("opacity.disabled", "0.5"),
    "cursor": ref("cursors.notAllowed", "not-allowed"),
    "pointerEvents": ref("interactions.none", "none"),
}

FOCUS_OUTLINE = {
    "outline": ref("accessibility.focusOutline", "2px solid"),
    "outlineOffset": ref("accessibility.focusOutlineOffset", "2px"),
    "outlineColor": ref("colors.primary.500", "#3b82f6"),
}

BUTTON_STATES = {
    "default": {
        "transition": ref("transitions.button", "all 150ms ease-in-out"),
        "cursor": ref("cursors.pointer", "pointer"),
        "userSelect": ref("interactions.userSelect.none", "none"),
    },
    "hover": {
        "transform": ref("transforms.scale.sm", "scale(1.02)"),
        "boxShadow": ref("shadows.hover", "0 10px 15px -3px rgba(0, 0, 0, 0.1)"),
    },
    "focus": {
        "outline": ref("accessibility.focusOutline", "2px solid transparent"),
        "outlineOffset": ref("accessibility.focusOutlineOffset", "2px"),
        "outlineColor": ref("colors.primary.500", "#3b82f6"),
    },
    "active": {"transform": ref("transforms.scale.press", "scale(0.98)")},
    "disabled": DISABLED_STATE,
    "loading": {
        "cursor": ref("cursors.wait", "wait"),
        "pointerEvents": ref("interactions.none", "none"),
    },
}

INPUT_STATES = {
    "default": {
        "transition": ref("transitions.input", "border-color 150ms ease-in-out"),
        "cursor": ref("cursors.text", "text"),
    },
    "hover": {"borderColor": ref("colors.neutral.400", "#a3a3a3")},
    "focus": {
        "outline": ref("accessibility.focusOutline", "none"),
        "borderColor": ref("colors.primary.500", "#3b82f6"),
    },
    "disabled": {
        "opacity": ref("opacity.disabled", "0.5"),
        "cursor": ref("cursors.notAllowed", "not-allowed"),
        "backgroundColor": ref("colors.neutral.50", "#fafafa"),
    },
    "readonly": {
        "cursor": ref("cursors.default", "default"),
        "backgroundColor": ref("colors.neutral.50", "#fafafa"),
    },
    "error": {"borderColor": ref("colors.error.500", "#ef4444")},
    "success": {"borderColor": ref("colors.success.500", "#10b981")},
}

LINK_STATES = {
    "default": {
        "transition": ref("transitions.link", "color 150ms ease-in-out"),
        "cursor": ref("cursors.pointer", "pointer"),
        "textDecoration": ref("typography.textDecoration.none", "none"),
    },
    "hover": {
        "textDecoration": ref("typography.textDecoration.underline", "underline"),
        "color": ref("colors.primary.600", "#2563eb"),
    },
    "focus": FOCUS_OUTLINE,
    "active": {"color": ref("colors.primary.700", "#1d4ed8")},
    "disabled": DISABLED_STATE,
}

CARD_STATES = {
    "default": {"transition": ref("transitions.card", "all 200ms ease-in-out")},
    "hover": {
        "transform": ref("transforms.card.hover", "translateY(-2px)"),
        "boxShadow": ref("shadows.xl", "0 20px 25px -5px rgba(0, 0, 0, 0.1)"),
    },
    "focus": FOCUS_OUTLINE,
    "active": {
        "transform": ref("transforms.card.active", "translateY(0)"),
        "boxShadow": ref("shadows.md", "0 4px 6px -1px rgba(0, 0, 0, 0.1)"),
    },
}

CHECKBOX_STATES = {
    "default": {
        "transition": ref("transitions.checkbox", "all 150ms ease-in-out"),
        "cursor": ref("cursors.pointer", "pointer"),
    },
    "hover": {
        "borderColor": ref("colors.primary.600", "#2563eb"),
        "backgroundColor": ref("colors.primary.50", "#eff6ff"),
    },
    "focus": FOCUS_OUTLINE,
    "active": {"transform": ref("transforms.scale.sm", "scale(0.95)")},
    "disabled": {
        "opacity": ref("opacity.disabled", "0.5"),
        "cursor": ref("cursors.notAllowed", "not-allowed"),
    },
}

RESPONSIVE_TYPOGRAPHY = {
    "displayLarge": {
        "base": ref("typography.fontSize.4xl", "2.25rem"),
        "md": ref("typography.fontSize.5xl", "3rem"),
        "lg": ref("typography.fontSize.6xl", "3.75rem"),
        "xl": ref("typography.fontSize.7xl", "4.5rem"),
    },
    "headingLarge": {
        "base": ref("typography.fontSize.xl", "1.25rem"),
        "md": ref("typography.fontSize.2xl", "1.5rem"),
        "lg": ref("typography.fontSize.3xl", "1.875rem"),
    },
    "headingMedium": {
        "base": ref("typography.fontSize.lg", "1.125rem"),
        "md": ref("typography.fontSize.xl", "1.25rem"),
        "lg": ref("typography.fontSize.2xl", "1.5rem"),
    },
    "body": {
        "base": ref("typography.fontSize.sm", "0.875rem"),
        "md": ref("typography.fontSize.base", "1rem"),
    },
    "caption": {
        "base": ref("typography.fontSize.xs", "0.75rem"),
        "md": ref("typography.fontSize.sm", "0.875rem"),
    },
    "lineHeightBody": {
        "base": ref("typography.lineHeight.normal", "1.5"),
        "lg": ref("typography.lineHeight.relaxed", "1.625"),
    },
}

RESPONSIVE_SPACING = {
    "containerPadding": {
        "base": ref("spacing.4", "1rem"),
        "md": ref("spacing.6", "1.5rem"),
        "lg": ref("spacing.8", "2rem"),
        "xl": ref("spacing.12", "3rem"),
    },
    "sectionPadding": {
        "base": ref("spacing.8", "2rem"),
        "md": ref("spacing.12", "3rem"),
        "lg": ref("spacing.16", "4rem"),
        "xl": ref("spacing.20", "5rem"),
    },
    "cardPadding": {
        "base": ref("spacing.4", "1rem"),
        "md": ref("spacing.6", "1.5rem"),
        "lg": ref("spacing.8", "2rem"),
    },
    "gridGap": {
        "base": ref("spacing.4", "1rem"),
        "md": ref("spacing.6", "1.5rem"),
        "lg": ref("spacing.8", "2rem"),
    },
    "stackGap": {
        "base": ref("spacing.2", "0.5rem"),
        "md": ref("spacing.3", "0.75rem"),
        "lg": ref("spacing.4", "1rem"),
    },
}

RESPONSIVE_LAYOUT = {
    "containerMaxWidth": {
        "base": "100%",
        "sm": ref("responsive.breakpoints.sm", "640px"),
        "md": ref("responsive.breakpoints.md", "768px"),
        "lg": ref("responsive.breakpoints.lg", "1024px"),
        "xl": ref("responsive.breakpoints.xl", "1280px"),
        "2xl": ref("responsive.breakpoints.2xl", "1536px"),
    },
    "gridColumns": {"base": "1", "sm": "2", "md": "3", "lg": "4", "xl": "6", "2xl": "12"},
    "sidebarWidth": {"base": "0", "md": "240px", "lg": "280px", "xl": "320px"},
    "modalWidth": {"base": "90vw", "sm": "480px", "md": "640px", "lg": "768px", "xl": "1024px"},
}


def default_variant_map() -> VariantMap:
    return VariantMap(
        {
            "button": BUTTON_VARIANTS,
            "input": INPUT_VARIANTS,
            "card": CARD_VARIANTS,
            "badge": BADGE_VARIANTS,
            "alert": ALERT_VARIANTS,
        }
    )


def default_state_map() -> StateMap:
    return StateMap(
        {
            "button": BUTTON_STATES,
            "input": INPUT_STATES,
            "link": LINK_STATES,
            "card": CARD_STATES,
            "checkbox": CHECKBOX_STATES,
        }
    )


def default_responsive_maps() -> dict[str, ResponsiveMap]:
    """Responsive maps keyed by group: typography, spacing, layout."""
    return {
        "typography": ResponsiveMap(RESPONSIVE_TYPOGRAPHY),
        "spacing": ResponsiveMap(RESPONSIVE_SPACING),
        "layout": ResponsiveMap(RESPONSIVE_LAYOUT),
    }
