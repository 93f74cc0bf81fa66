"""UI theme definitions and style-token lookup.

Renderers never concatenate raw color codes; they ask the active theme for a
semantic token (``emphasis``, ``warning``, ``muted`` ...) instead.
"""

from __future__ import annotations

from dataclasses import dataclass, fields


@dataclass(frozen=True)
class UITheme:
    """Semantic ANSI palette used by renderers."""

    name: str
    reset: str
    reverse: str
    border: str
    title: str
    version: str
    unsaved: str
    tab_active: str
    tab_inactive: str
    marker: str
    emphasis: str
    value: str
    success: str
    danger: str
    warning: str
    accent: str
    muted: str
    help: str
    error: str

    def style(self, token: str, text: str) -> str:
        """Wrap ``text`` in the escape code of ``token`` followed by a reset."""
        code = self.code(token)
        if not code:
            return text
        return f"{code}{text}{self.reset}"

    def code(self, token: str) -> str:
        """Return the raw escape code for ``token``; unknown tokens map to ``value``."""
        if token in _TOKEN_NAMES:
            return getattr(self, token)
        return self.value


DEFAULT_THEME = UITheme(
    name="default",
    reset="\033[0m",
    reverse="\033[7m",
    border="\033[1;35m",
    title="\033[1;37m",
    version="\033[1;36m",
    unsaved="\033[1;33m",
    tab_active="\033[1;36m\033[7m",
    tab_inactive="\033[1;30m",
    marker="\033[1;36m",
    emphasis="\033[1m",
    value="\033[1;37m",
    success="\033[1;32m",
    danger="\033[1;31m",
    warning="\033[1;33m",
    accent="\033[1;36m",
    muted="\033[1;30m",
    help="\033[1;36m",
    error="\033[1;31m",
)

PLAIN_THEME = UITheme(
    name="plain",
    reset="\033[0m",
    reverse="\033[7m",
    border="",
    title="",
    version="",
    unsaved="",
    tab_active="\033[7m",
    tab_inactive="",
    marker="",
    emphasis="",
    value="",
    success="",
    danger="",
    warning="",
    accent="",
    muted="",
    help="",
    error="",
)

_TOKEN_NAMES = frozenset(f.name for f in fields(UITheme) if f.name != "name")


def resolve_theme(*, no_color: bool = False) -> UITheme:
    """Return concrete theme for the requested color mode."""
    return PLAIN_THEME if no_color else DEFAULT_THEME


__all__ = [
    "UITheme",
    "DEFAULT_THEME",
    "PLAIN_THEME",
    "resolve_theme",
]
