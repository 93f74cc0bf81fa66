"""hyprlock theme switcher."""

from .app import ThemeApp, load_themes
from .registry import ThemeEntry, apply_theme, detect_current_theme, discover_themes, next_theme_index

__all__ = [
    "ThemeApp",
    "ThemeEntry",
    "apply_theme",
    "detect_current_theme",
    "discover_themes",
    "load_themes",
    "next_theme_index",
]
