"""
Built-in token store and theme overrides.

The base store carries every category; ``light`` and ``dark`` are override
trees registered on top of it by ``create_default_registry``.
"""

from __future__ import annotations

from typing import Any

from .ir import TokenStore

BASE_TOKENS: dict[str, Any] = {
    "metadata": {
        "id": "base",
        "name": "Base",
        "category": "foundation",
        "mode": "LIGHT",
        "version": "1.0.0",
    },
    "colors": {
        "white": "#ffffff",
        "black": "#000000",
        "transparent": "transparent",
        "primary": {
            "50": "#eff6ff",
            "100": "#dbeafe",
            "200": "#bfdbfe",
            "300": "#93c5fd",
            "400": "#60a5fa",
            "500": "#3b82f6",
            "600": "#2563eb",
            "700": "#1d4ed8",
            "800": "#1e40af",
            "900": "#1e3a8a",
            "950": "#172554",
        },
        "neutral": {
            "50": "#fafafa",
            "100": "#f5f5f5",
            "200": "#e5e5e5",
            "300": "#d4d4d4",
            "400": "#a3a3a3",
            "500": "#737373",
            "600": "#525252",
            "700": "#404040",
            "800": "#262626",
            "900": "#171717",
            "950": "#0a0a0a",
        },
        "success": {"50": "#f0fdf4", "100": "#d1fae5", "500": "#10b981", "600": "#059669", "900": "#064e3b"},
        "warning": {"50": "#fffbeb", "100": "#fef3c7", "500": "#f59e0b", "600": "#d97706", "900": "#78350f"},
        "error": {"50": "#fef2f2", "100": "#fee2e2", "500": "#ef4444", "600": "#dc2626", "900": "#7f1d1d"},
        "info": {"50": "#eff6ff", "100": "#dbeafe", "500": "#3b82f6", "600": "#2563eb", "900": "#1e3a8a"},
        "background": {"default": "#ffffff", "paper": "#fafafa"},
        "text": {"primary": "#171717", "secondary": "#525252"},
    },
    "typography": {
        "fontFamily": {
            "sans": ["Inter", "system-ui", "sans-serif"],
            "mono": ["JetBrains Mono", "monospace"],
        },
        "fontSize": {
            "xs": "0.75rem",
            "sm": "0.875rem",
            "base": "1rem",
            "lg": "1.125rem",
            "xl": "1.25rem",
            "2xl": "1.5rem",
            "3xl": "1.875rem",
            "4xl": "2.25rem",
        },
        "fontWeight": {"normal": 400, "medium": 500, "semibold": 600, "bold": 700},
        "lineHeight": {"tight": "1.25", "normal": "1.5", "relaxed": "1.625"},
    },
    "spacing": {
        "0": "0px",
        "1": "0.25rem",
        "2": "0.5rem",
        "3": "0.75rem",
        "4": "1rem",
        "6": "1.5rem",
        "8": "2rem",
        "12": "3rem",
        "16": "4rem",
    },
    "borderRadius": {
        "none": "0px",
        "sm": "0.125rem",
        "md": "0.375rem",
        "lg": "0.5rem",
        "full": "9999px",
    },
    "shadows": {
        "none": "none",
        "sm": "0 1px 2px 0 rgba(0, 0, 0, 0.05)",
        "md": "0 4px 6px -1px rgba(0, 0, 0, 0.1)",
        "lg": "0 10px 15px -3px rgba(0, 0, 0, 0.1)",
    },
    "zIndex": {"base": 0, "dropdown": 1000, "modal": 1400, "toast": 1700},
    "animation": {
        "presets": {
            "fadeIn": "fadeIn 200ms ease-out",
            "spin": "spin 1s linear infinite",
        },
        "keyframes": {
            "fadeIn": {"from": {"opacity": "0"}, "to": {"opacity": "1"}},
            "spin": {"from": {"transform": "rotate(0deg)"}, "to": {"transform": "rotate(360deg)"}},
        },
    },
    "transitions": {
        "duration": {"fast": "150ms", "normal": "200ms", "slow": "300ms"},
        "timing": {"ease": "cubic-bezier(0.4, 0, 0.2, 1)", "linear": "linear"},
        "property": {"colors": "color, background-color, border-color", "all": "all"},
    },
    "branding": {
        "name": "tokenforge",
        "logo": {"primary": "/assets/logo.svg"},
    },
    "accessibility": {
        "focusOutline": "2px solid",
        "focusOutlineOffset": "2px",
        "minTouchTarget": "44px",
        "reducedMotion": False,
    },
    "responsive": {
        "breakpoints": {
            "sm": "640px",
            "md": "768px",
            "lg": "1024px",
            "xl": "1280px",
            "2xl": "1536px",
        },
    },
    "components": {
        "button": {"variants": ["primary", "secondary", "success", "danger", "ghost", "outline"]},
        "badge": {"variants": ["primary", "secondary", "success", "warning", "danger", "info"]},
    },
}

LIGHT_OVERRIDE: dict[str, Any] = {
    "metadata": {"name": "Light", "category": "foundation", "mode": "LIGHT"},
}

DARK_OVERRIDE: dict[str, Any] = {
    "metadata": {"name": "Dark", "category": "foundation", "mode": "DARK"},
    "colors": {
        "background": {"default": "#0a0a0a", "paper": "#171717"},
        "text": {"primary": "#fafafa", "secondary": "#a3a3a3"},
        "neutral": {
            "50": "#0a0a0a",
            "100": "#171717",
            "200": "#262626",
            "300": "#404040",
            "400": "#525252",
            "500": "#737373",
            "600": "#a3a3a3",
            "700": "#d4d4d4",
            "800": "#e5e5e5",
            "900": "#f5f5f5",
            "950": "#fafafa",
        },
    },
    "shadows": {
        "sm": "0 1px 2px 0 rgba(0, 0, 0, 0.4)",
        "md": "0 4px 6px -1px rgba(0, 0, 0, 0.5)",
        "lg": "0 10px 15px -3px rgba(0, 0, 0, 0.6)",
    },
}

BUILTIN_OVERRIDES: dict[str, dict[str, Any]] = {
    "light": LIGHT_OVERRIDE,
    "dark": DARK_OVERRIDE,
}


def base_store() -> TokenStore:
    """Build a fresh copy of the built-in base store."""
    return TokenStore.from_dict(BASE_TOKENS)
