"""Tabbed ``logind.conf`` editor.

Values are loaded once at startup into the item schema; saving patches only
the keys whose value differs from what is on disk, then asks
``systemd-logind`` to reload.
"""

from __future__ import annotations

import logging
from pathlib import Path

from .. import __version__
from ..errors import FatalStartupError, SaveError
from ..input import KeyComboBinding
from ..model import Item, adjust_item, reset_items
from ..patch.ini import apply_settings_patch, parse_settings, read_settings_file
from ..reload import signal_logind
from ..render import MAX_DISPLAY_ROWS, Frame, ListFrameContext, render_list_frame, row_from_item
from ..runtime.router import ListRouter, ListRouterCallbacks
from ..scroll import compute_scroll_window
from ..state import AppState, FileCache
from ..ui_theme import UITheme
from .schema import build_power_schema

logger = logging.getLogger(__name__)

APP_TITLE = "Dusky Power Manager"
HELP_LINE = "[Tab] Switch  [r]eset  [s] Save  [←/→ h/l] Adjust  [Enter] Toggle  [q] Quit"


class PowerApp:
    def __init__(self, path: Path, theme: UITheme, *, notify=signal_logind) -> None:
        self.path = Path(path)
        self.theme = theme
        self.notify = notify
        self.state = AppState(tabs=build_power_schema())
        self.router = ListRouter(
            self.state,
            ListRouterCallbacks(
                item_count=lambda: len(self.active_items()),
                adjust=self.adjust_selected,
                save=self.save,
            ),
            extra_bindings=(
                KeyComboBinding(("s", "S"), self.save),
                KeyComboBinding(("r", "R"), self.reset_active_tab),
            ),
        )

    def load(self) -> None:
        """Read the settings file; a missing or unreadable file is fatal."""
        try:
            text = read_settings_file(self.path)
        except OSError as exc:
            raise FatalStartupError(f"Config not readable: {self.path} ({exc})") from exc
        values = parse_settings(text)
        for item in self.all_items():
            item.load(values.get(item.key) if item.key else None)
        # Cache canonical spellings so "008" and "8" count as unchanged. Values
        # that were clamped or replaced keep their on-disk text so a save fixes them.
        canonical = {
            item.key: formatted
            for item in self.all_items()
            if item.key in values
            and (formatted := item.formatted()) is not None
            and item.kind.parses_exactly(values[item.key])
        }
        self.state.file_cache = FileCache({**values, **canonical})
        self.state.dirty = bool(self.state.file_cache.pending_changes(self.candidate_values()))
        logger.info("loaded %d setting(s) from %s", len(values), self.path)

    def all_items(self) -> list[Item]:
        return [item for tab in self.state.tabs for item in tab.items]

    def active_items(self) -> list[Item]:
        return self.state.tabs[self.state.active_tab].items

    def selected_item(self) -> Item | None:
        items = self.active_items()
        if not 0 <= self.state.selected_idx < len(items):
            return None
        return items[self.state.selected_idx]

    def adjust_selected(self, direction: int) -> bool:
        item = self.selected_item()
        if item is None:
            return False
        return adjust_item(item, direction)

    def reset_active_tab(self) -> None:
        if reset_items(self.active_items()):
            self.state.dirty = True
            self.state.set_status(f"Defaults restored for {self.state.tabs[self.state.active_tab].name}.")

    def candidate_values(self) -> dict[str, str]:
        return {
            item.key: formatted
            for item in self.all_items()
            if item.key is not None and (formatted := item.formatted()) is not None
        }

    def save(self) -> bool:
        try:
            result = apply_settings_patch(self.path, self.candidate_values(), self.state.file_cache)
        except SaveError as exc:
            logger.error("save failed: %s", exc)
            self.state.set_status(str(exc), error=True)
            return False
        self.state.dirty = False
        if result is None:
            self.state.set_status("No changes to save.")
            return True
        reload = self.notify()
        if reload.ok:
            self.state.set_status("Saved. systemd-logind reloaded.")
        else:
            self.state.set_status("Saved. Restart systemd-logind to apply.")
        return True

    def handle_key(self, key: str) -> None:
        self.router.handle_key(key)

    def render(self) -> Frame:
        items = self.active_items()
        window = compute_scroll_window(
            self.state.selected_idx,
            len(items),
            self.state.visible_rows or MAX_DISPLAY_ROWS,
            self.state.scroll_offset,
        )
        self.state.selected_idx = window.selected
        self.state.scroll_offset = window.offset
        frame = render_list_frame(
            ListFrameContext(
                title=APP_TITLE,
                status_token=f"v{__version__}",
                dirty=self.state.dirty,
                rows=[row_from_item(item) for item in items],
                window=window,
                theme=self.theme,
                tab_names=[tab.name for tab in self.state.tabs],
                active_tab=self.state.active_tab,
                help_line=HELP_LINE,
                footer_lines=[f"{self.theme.style('help', ' File:')} {self.theme.style('emphasis', str(self.path))}"],
                status_message=self.state.status_message,
                status_is_error=self.state.status_is_error,
            )
        )
        self.state.tab_zones = frame.tab_zones
        self.state.tab_row = frame.tab_row
        self.state.first_item_row = frame.first_item_row
        self.state.visible_rows = frame.visible_rows
        return frame
