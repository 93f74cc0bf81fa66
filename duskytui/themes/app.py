"""Interactive hyprlock theme picker with an optional highlighted preview."""

from __future__ import annotations

import logging
from pathlib import Path

from .. import __version__
from ..errors import FatalStartupError, SaveError
from ..highlight import DEFAULT_STYLE, preview_lines
from ..input import KeyComboBinding
from ..render import MAX_DISPLAY_ROWS, Frame, ListFrameContext, RowView, render_list_frame
from ..runtime.router import ListRouter, ListRouterCallbacks
from ..scroll import compute_scroll_window
from ..state import AppState
from ..ui_theme import UITheme
from .registry import ThemeEntry, apply_theme, detect_current_theme, discover_themes

logger = logging.getLogger(__name__)

APP_TITLE = "Hyprlock Theme Manager"
HELP_LINE = "[Enter] Apply  [p] Preview  [↑/↓ j/k] Nav  [q] Quit"


def load_themes(themes_root: Path) -> list[ThemeEntry]:
    if not Path(themes_root).is_dir():
        raise FatalStartupError(f"Themes directory not found: {themes_root}")
    return discover_themes(themes_root)


class ThemeApp:
    def __init__(
        self,
        themes_root: Path,
        target: Path,
        theme: UITheme,
        *,
        themes: list[ThemeEntry] | None = None,
        show_preview: bool = False,
        preview_style: str = DEFAULT_STYLE,
        home: Path | None = None,
    ) -> None:
        self.themes_root = Path(themes_root)
        self.target = Path(target)
        self.theme = theme
        self.preview_style = preview_style
        self.home = home
        self.themes = themes if themes is not None else load_themes(self.themes_root)
        self.state = AppState(show_preview=show_preview)
        self.current_index = detect_current_theme(self.target, self.themes, home)
        if self.current_index is not None:
            self.state.selected_idx = self.current_index
        self.router = ListRouter(
            self.state,
            ListRouterCallbacks(item_count=lambda: len(self.themes), activate=self.apply_selected),
            extra_bindings=(KeyComboBinding(("p", "P"), self.toggle_preview),),
        )

    def toggle_preview(self) -> None:
        self.state.show_preview = not self.state.show_preview

    def apply_selected(self) -> None:
        if not self.themes:
            return
        entry = self.themes[self.state.selected_idx]
        try:
            apply_theme(entry, self.target, self.themes_root, self.home)
        except SaveError as exc:
            logger.error("applying %s failed: %s", entry.name, exc)
            self.state.set_status(str(exc), error=True)
            return
        self.state.request_exit(f"Applied theme: {entry.name}")

    def handle_key(self, key: str) -> None:
        self.router.handle_key(key)

    def _preview_panel(self) -> list[str]:
        if not self.state.show_preview or not self.themes:
            return []
        entry = self.themes[self.state.selected_idx]
        theme = self.theme
        lines = [
            "",
            f"{theme.style('border', '── Preview:')} {theme.style('emphasis', entry.name)} {theme.style('border', '──')}",
        ]
        body = preview_lines(
            entry.fragment,
            style=self.preview_style,
            no_color=theme.name == "plain",
        )
        lines.extend(f"  {line}" for line in body)
        return lines

    def render(self) -> Frame:
        window = compute_scroll_window(
            self.state.selected_idx,
            len(self.themes),
            self.state.visible_rows or MAX_DISPLAY_ROWS,
            self.state.scroll_offset,
        )
        self.state.selected_idx = window.selected
        self.state.scroll_offset = window.offset
        rows = []
        for idx, entry in enumerate(self.themes):
            label = entry.name
            if idx == self.current_index:
                label = f"{label} (current)"
            rows.append(RowView(label=label))
        frame = render_list_frame(
            ListFrameContext(
                title=APP_TITLE,
                status_token=f"v{__version__}",
                dirty=False,
                rows=rows,
                window=window,
                theme=self.theme,
                help_line=HELP_LINE,
                panel_lines=self._preview_panel(),
                status_message=self.state.status_message,
                status_is_error=self.state.status_is_error,
            )
        )
        self.state.first_item_row = frame.first_item_row
        self.state.visible_rows = frame.visible_rows
        return frame
