"""Shared list-mode key and mouse routing.

``ListRouter`` owns navigation, tab switching, adjust events and the
unsaved-changes prompt. Tool-specific actions are injected as callbacks and
extra key bindings, so every tool gets identical list behavior.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from ..input import KeyComboBinding, KeyComboRegistry, parse_mouse_token
from ..render import ADJUST_THRESHOLD, MAX_DISPLAY_ROWS
from ..scroll import compute_scroll_window, edge_selection, page_selection, step_selection
from ..state import AppState, Mode

CONFIRM_EXIT_PROMPT = "Unsaved changes. Save? [y/Enter] save & quit  [n] discard  [Esc] back"
QUIT_KEYS = ("q", "Q", "CTRL_C")


@dataclass(frozen=True)
class ListRouterCallbacks:
    """External operations used by ``ListRouter``.

    ``adjust`` receives +1/-1 and returns whether the selected value changed.
    ``activate`` replaces the default Enter behavior (adjust forward).
    ``save`` returns whether persisting succeeded.
    """

    item_count: Callable[[], int]
    adjust: Callable[[int], bool] | None = None
    activate: Callable[[], None] | None = None
    save: Callable[[], bool] | None = None
    on_selection_change: Callable[[], None] | None = None


class ListRouter:
    def __init__(
        self,
        state: AppState,
        callbacks: ListRouterCallbacks,
        *,
        extra_bindings: tuple[KeyComboBinding, ...] = (),
    ) -> None:
        self.state = state
        self.callbacks = callbacks
        self._resume_mode = Mode.BROWSING
        self.browse_registry = KeyComboRegistry().register_bindings(
            KeyComboBinding(("UP", "k", "K"), lambda: self.move(-1)),
            KeyComboBinding(("DOWN", "j", "J"), lambda: self.move(1)),
            KeyComboBinding(("PAGE_UP",), lambda: self.page(-1)),
            KeyComboBinding(("PAGE_DOWN",), lambda: self.page(1)),
            KeyComboBinding(("HOME", "g"), lambda: self.jump(to_end=False)),
            KeyComboBinding(("END", "G"), lambda: self.jump(to_end=True)),
            KeyComboBinding(("TAB",), lambda: self.switch_tab(1)),
            KeyComboBinding(("SHIFT_TAB",), lambda: self.switch_tab(-1)),
            KeyComboBinding(("RIGHT", "l", "L"), lambda: self.adjust(1)),
            KeyComboBinding(("LEFT", "h", "H"), lambda: self.adjust(-1)),
            KeyComboBinding(("BACKSPACE", "ALT_ENTER"), lambda: self.adjust(-1)),
            KeyComboBinding(("ENTER",), self.activate),
            KeyComboBinding(QUIT_KEYS, self.request_quit),
        )
        self.browse_registry.register_bindings(*extra_bindings)
        self.confirm_registry = KeyComboRegistry().register_bindings(
            KeyComboBinding(("y", "Y", "ENTER"), self._confirm_save_and_quit),
            KeyComboBinding(("n", "N"), self._confirm_discard_and_quit),
            KeyComboBinding(("ESC",), self._confirm_back),
        )

    def _rows(self) -> int:
        return self.state.visible_rows or MAX_DISPLAY_ROWS

    def sync_window(self) -> None:
        """Clamp selection and scroll offset to the current item count."""
        window = compute_scroll_window(
            self.state.selected_idx,
            self.callbacks.item_count(),
            self._rows(),
            self.state.scroll_offset,
        )
        self.state.selected_idx = window.selected
        self.state.scroll_offset = window.offset

    def _select(self, index: int) -> None:
        previous = self.state.selected_idx
        self.state.selected_idx = index
        self.sync_window()
        if self.state.selected_idx != previous and self.callbacks.on_selection_change is not None:
            self.callbacks.on_selection_change()

    def move(self, delta: int) -> None:
        count = self.callbacks.item_count()
        if count <= 0:
            return
        self._select(step_selection(self.state.selected_idx, delta, count))

    def page(self, direction: int) -> None:
        count = self.callbacks.item_count()
        if count <= 0:
            return
        self._select(page_selection(self.state.selected_idx, direction, count, self._rows()))

    def jump(self, *, to_end: bool) -> None:
        self._select(edge_selection(self.callbacks.item_count(), to_end=to_end))

    def switch_tab(self, delta: int) -> None:
        tab_count = len(self.state.tabs)
        if tab_count <= 1:
            return
        self.set_tab((self.state.active_tab + delta) % tab_count)

    def set_tab(self, index: int) -> None:
        # Values stay in memory; switching never discards unsaved edits.
        if index == self.state.active_tab or not 0 <= index < len(self.state.tabs):
            return
        self.state.active_tab = index
        self.state.selected_idx = 0
        self.state.scroll_offset = 0
        self.sync_window()

    def adjust(self, direction: int) -> None:
        if self.callbacks.adjust is None or self.callbacks.item_count() <= 0:
            return
        if self.callbacks.adjust(direction):
            self.state.dirty = True

    def activate(self) -> None:
        if self.callbacks.activate is not None:
            self.callbacks.activate()
            return
        self.adjust(1)

    def request_quit(self) -> None:
        if not self.state.dirty:
            self.state.request_exit()
            return
        self._resume_mode = self.state.mode
        self.state.mode = Mode.CONFIRM_EXIT
        self.state.set_status(CONFIRM_EXIT_PROMPT)

    def _confirm_save_and_quit(self) -> None:
        self.state.mode = self._resume_mode
        if self.callbacks.save is not None and not self.callbacks.save():
            return
        self.state.request_exit()

    def _confirm_discard_and_quit(self) -> None:
        self.state.mode = Mode.BROWSING
        self.state.request_exit()

    def _confirm_back(self) -> None:
        self.state.mode = self._resume_mode
        self.state.clear_status()

    def handle_mouse(self, key: str) -> bool:
        event = parse_mouse_token(key)
        if event is None:
            return False
        if event.is_wheel:
            self.move(-1 if event.button == "UP" else 1)
            return True
        if event.action != "down":
            return True

        state = self.state
        if state.tab_row is not None and event.row == state.tab_row:
            for idx, (start, end) in enumerate(state.tab_zones):
                if start <= event.col <= end:
                    self.set_tab(idx)
                    return True
            return True

        first = state.first_item_row
        if first <= 0 or not first <= event.row < first + self._rows():
            return True
        clicked = state.scroll_offset + (event.row - first)
        if not 0 <= clicked < self.callbacks.item_count():
            return True
        self._select(clicked)
        if event.col > ADJUST_THRESHOLD:
            if event.button == "LEFT":
                self.adjust(1)
            elif event.button == "RIGHT":
                self.adjust(-1)
        return True

    def handle_key(self, key: str) -> bool:
        """Route one key token; return whether it was consumed."""
        if self.state.mode == Mode.CONFIRM_EXIT:
            self.confirm_registry.dispatch(key)
            return True
        if self.state.mode != Mode.BROWSING:
            return False
        if key.startswith("MOUSE_"):
            return self.handle_mouse(key)
        return self.browse_registry.dispatch(key)
