"""Keybind editor: pick a bind from the base file (or create one), edit it
on a single line, resolve conflicts, and append the result to the overlay.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from .. import __version__
from ..errors import FatalStartupError, SaveError
from ..input import KeyComboBinding, LineEditor
from ..reload import ReloadResult, reload_hyprland
from ..render import (
    BOX_INNER_WIDTH,
    MAX_DISPLAY_ROWS,
    Frame,
    ListFrameContext,
    PanelFrameContext,
    RowView,
    render_list_frame,
    render_panel_frame,
)
from ..runtime.router import ListRouter, ListRouterCallbacks
from ..scroll import compute_scroll_window
from ..state import AppState, Mode
from ..ui_theme import UITheme
from .conflicts import read_config_lines
from .session import EditTarget, KeybindEditSession, SubmitResult, SubmitStatus
from .syntax import is_bind_statement

logger = logging.getLogger(__name__)

APP_TITLE = "Keybind Editor"
CREATE_MARKER = "[+] Create New Keybind"
HELP_LINE = "[Enter] Edit/Create  [/] Filter  [↑/↓ j/k] Nav  [q] Quit"
EDIT_HELP_LINE = "[Enter] Save  [Esc] Cancel  [←/→ Home/End] Move  [Ctrl-U/K/W] Delete"

EXAMPLES = (
    "1. bindd = $mainMod, Q, Launch Terminal, exec, uwsm-app -- kitty",
    "2. bindd = $mainMod, C, Close Window, killactive,",
    "3. binded = $mainMod SHIFT, L, Move Right, movewindow, r",
    "4. bindeld = , XF86AudioRaiseVolume, Vol Up, exec, swayosd-client --output-volume raise",
    "5. bindd = $mainMod, S, Screenshot, exec, slurp | grim -g - - | wl-copy",
)
FLAGS = (
    ("d", "has description", "(Easier for discerning what the keybind does)"),
    ("l", "locked", "(Works over lockscreen)"),
    ("e", "repeat", "(Repeats when held)"),
    ("o", "long press", "(Triggers on hold)"),
    ("m", "mouse", "(For mouse clicks)"),
)


@dataclass(frozen=True)
class BindEntry:
    line_number: int
    line: str


def load_bind_entries(source: Path) -> list[BindEntry]:
    return [
        BindEntry(line_number=number, line=line.strip())
        for number, line in enumerate(read_config_lines(source), start=1)
        if is_bind_statement(line)
    ]


def ensure_overlay(overlay: Path) -> None:
    """Create the overlay file and its parent directories when missing."""
    overlay = Path(overlay)
    try:
        overlay.parent.mkdir(parents=True, exist_ok=True)
        if not overlay.exists():
            overlay.touch()
            logger.info("created overlay %s", overlay)
    except OSError as exc:
        raise FatalStartupError(f"Cannot create file: {overlay} ({exc})") from exc


class KeybindApp:
    def __init__(
        self,
        source: Path,
        overlay: Path,
        theme: UITheme,
        *,
        clock: Callable[[], datetime] = datetime.now,
        reload: Callable[[], ReloadResult] = reload_hyprland,
    ) -> None:
        self.source = Path(source)
        self.overlay = Path(overlay)
        self.theme = theme
        self.clock = clock
        self.reload = reload
        self.entries = load_bind_entries(self.source)
        self.state = AppState()
        self.filter_editor = LineEditor()
        self.filtering = False
        self.line_editor = LineEditor()
        self.session: KeybindEditSession | None = None
        self.router = ListRouter(
            self.state,
            ListRouterCallbacks(
                item_count=lambda: len(self.visible_rows()),
                activate=self.open_selected,
                save=self.flush_pending,
            ),
            extra_bindings=(
                KeyComboBinding(("/",), self.open_filter),
                KeyComboBinding(("ESC",), self.clear_filter),
            ),
        )

    # -- browsing ---------------------------------------------------------

    def visible_rows(self) -> list[BindEntry | None]:
        """Rows shown in the list; ``None`` is the create-new row."""
        query = self.filter_editor.text.strip().lower()
        rows: list[BindEntry | None] = [None]
        rows.extend(entry for entry in self.entries if not query or query in entry.line.lower())
        return rows

    def open_filter(self) -> None:
        self.filtering = True
        self.state.mode = Mode.EDITING
        self.filter_editor.cursor = len(self.filter_editor.text)

    def clear_filter(self) -> None:
        if not self.filter_editor.text:
            return
        self.filter_editor.set_text("")
        self.state.selected_idx = 0
        self.state.scroll_offset = 0

    def _handle_filter_key(self, key: str) -> None:
        if key == "ENTER":
            self.filtering = False
            self.state.mode = Mode.BROWSING
            return
        if key == "ESC":
            self.filtering = False
            self.state.mode = Mode.BROWSING
            self.clear_filter()
            return
        if key in {"UP", "DOWN"}:
            self.router.move(-1 if key == "UP" else 1)
            return
        if key == "CTRL_C":
            self.router.request_quit()
            return
        before = self.filter_editor.text
        if self.filter_editor.handle_key(key) and self.filter_editor.text != before:
            self.state.selected_idx = 0
            self.state.scroll_offset = 0

    def open_selected(self) -> None:
        rows = self.visible_rows()
        if not 0 <= self.state.selected_idx < len(rows):
            return
        entry = rows[self.state.selected_idx]
        if entry is None:
            target = EditTarget()
        else:
            target = EditTarget.from_line(entry.line, (self.source, entry.line_number))
        self.session = KeybindEditSession(self.overlay, self.source, target, clock=self.clock)
        self.line_editor = LineEditor.seeded(self.session.current_input)
        self.state.mode = Mode.EDITING
        self.state.clear_status()

    # -- editing ----------------------------------------------------------

    def _sync_dirty(self) -> None:
        self.state.dirty = bool(self.session is not None and self.session.pending)

    def _end_session(self) -> None:
        self.session = None
        self.state.mode = Mode.BROWSING
        self._sync_dirty()

    def cancel_edit(self) -> None:
        stacked = self.session is not None and bool(self.session.pending)
        self._end_session()
        if stacked:
            self.state.set_status("Edit cancelled. Stacked edits discarded.")
        else:
            self.state.set_status("Edit cancelled.")

    def _after_submit(self, result: SubmitResult) -> None:
        session = self.session
        if session is None:
            return
        if result.status is SubmitStatus.INVALID:
            self.state.set_status(f"[ERR] {result.message}", error=True)
            return
        notice = ""
        if result.correction is not None and result.correction.corrected:
            notice = result.correction.message()
            self.line_editor.set_text(session.current_input)
            self.state.set_status(notice)
        elif result.status is not SubmitStatus.ACCEPTED:
            self.state.set_status(result.message)
        if result.status is SubmitStatus.CONFLICT:
            self.state.mode = Mode.CONFLICT_PROMPT
            return
        if result.status is SubmitStatus.EDITING:
            self.line_editor = LineEditor.seeded(session.current_input)
            self.state.mode = Mode.EDITING
            self._sync_dirty()
            return
        self.commit(notice)

    def submit(self) -> None:
        if self.session is None:
            return
        self._after_submit(self.session.submit(self.line_editor.text))

    def resolve_conflict(self, choice: str) -> None:
        if self.session is None:
            return
        self.state.clear_status()
        self._after_submit(self.session.resolve_conflict(choice))

    def commit(self, notice: str = "") -> bool:
        """Write the accepted line; ``notice`` is kept in front of the saved message."""
        session = self.session
        if session is None:
            return False
        try:
            path = session.commit()
        except SaveError as exc:
            logger.error("keybind save failed: %s", exc)
            self.state.mode = Mode.EDITING
            self.state.set_status(str(exc), error=True)
            return False
        stacked = bool(session.pending)
        self._end_session()
        message = f"Saved to {path}."
        if notice:
            message = f"{notice} {message}"
        if stacked:
            message += " Stacked edits were also applied."
        result = self.reload()
        if not result.attempted:
            message += " Run hyprctl reload to apply changes."
        elif result.ok:
            message += " Hyprland reloaded."
        else:
            first_line = result.output.splitlines()[0] if result.output else ""
            message += f" Reload FAILED {first_line}".rstrip()
        self.state.set_status(message, error=result.attempted and not result.ok)
        return True

    def flush_pending(self) -> bool:
        """Persist stacked edits only; used by the unsaved-changes prompt."""
        if self.session is None:
            return True
        try:
            self.session.flush_pending()
        except SaveError as exc:
            logger.error("flushing stacked edits failed: %s", exc)
            self.state.set_status(str(exc), error=True)
            return False
        self._end_session()
        return True

    def _handle_edit_key(self, key: str) -> None:
        if key == "ENTER":
            self.submit()
        elif key == "ESC":
            self.cancel_edit()
        elif key == "CTRL_C":
            self.router.request_quit()
        elif not key.startswith("MOUSE_"):
            self.line_editor.handle_key(key)

    def _handle_conflict_key(self, key: str) -> None:
        if key.startswith("MOUSE_"):
            return
        if key == "CTRL_C":
            self.router.request_quit()
            return
        lowered = key.lower()
        self.resolve_conflict(lowered if lowered in {"y", "e"} else "n")

    def handle_key(self, key: str) -> None:
        mode = self.state.mode
        if mode == Mode.EDITING and self.filtering:
            self._handle_filter_key(key)
        elif mode == Mode.EDITING:
            self._handle_edit_key(key)
        elif mode == Mode.CONFLICT_PROMPT:
            self._handle_conflict_key(key)
        else:
            self.router.handle_key(key)

    # -- rendering --------------------------------------------------------

    def _cursor_line(self, editor: LineEditor, prefix: str) -> str:
        width = BOX_INNER_WIDTH - len(prefix) - 1
        visible, col = editor.viewport(width)
        under = visible[col] if col < len(visible) else " "
        return (
            f"{self.theme.style('accent', prefix)}{visible[:col]}"
            f"{self.theme.reverse}{under}{self.theme.reset}{visible[col + 1:]}"
        )

    def _render_list(self) -> Frame:
        rows = self.visible_rows()
        window = compute_scroll_window(
            self.state.selected_idx,
            len(rows),
            self.state.visible_rows or MAX_DISPLAY_ROWS,
            self.state.scroll_offset,
        )
        self.state.selected_idx = window.selected
        self.state.scroll_offset = window.offset
        theme = self.theme
        panel: list[str] = []
        if self.filtering:
            panel.append(self._cursor_line(self.filter_editor, " Filter: "))
        elif self.filter_editor.text:
            panel.append(f"{theme.style('accent', ' Filter: ')}{self.filter_editor.text}  {theme.style('muted', '[Esc] clear')}")
        frame = render_list_frame(
            ListFrameContext(
                title=APP_TITLE,
                status_token=f"v{__version__}",
                dirty=self.state.dirty,
                rows=[RowView(label=CREATE_MARKER if entry is None else entry.line) for entry in rows],
                window=window,
                theme=theme,
                help_line=HELP_LINE,
                footer_lines=[
                    f"{theme.style('help', ' Source:')}  {self.source}",
                    f"{theme.style('help', ' Overlay:')} {self.overlay}",
                ],
                panel_lines=panel,
                status_message=self.state.status_message,
                status_is_error=self.state.status_is_error,
            )
        )
        self.state.first_item_row = frame.first_item_row
        self.state.visible_rows = frame.visible_rows
        return frame

    def _instruction_lines(self) -> list[str]:
        theme = self.theme
        lines = [
            theme.style("accent", "INSTRUCTIONS:"),
            " - Edit the line below directly. Keep the commas!",
            f" - Default Format: {theme.style('success', 'bindd = MODS, KEY, DESC, DISPATCHER, ARG')}",
            f" - {theme.style('warning', 'NOTE:')} Keys are CASE SENSITIVE! (e.g. \"S\" is Shift+s, \"s\" is just s)",
            "",
            f" {theme.style('emphasis', 'EXAMPLES:')}",
        ]
        lines.extend(f"   {example}" for example in EXAMPLES)
        lines.append("")
        lines.append(theme.style("accent", "FLAGS REFERENCE (Append to bind, e.g. binddl, binddel):"))
        for flag, name, hint in FLAGS:
            lines.append(f"  {theme.style('emphasis', flag)}  {name:<16} {theme.style('muted', hint)}")
        return lines

    def _render_editor(self) -> Frame:
        session = self.session
        assert session is not None
        theme = self.theme
        body: list[str] = []
        if not session.target.is_new:
            body.append(f" {theme.style('warning', 'Original:')} {session.target.line}")
            body.append("")
        if session.pending:
            count = len(session.pending)
            body.append(
                f"{theme.style('accent', '[INFO]')} You have {count} pending edit(s) that will be saved after this."
            )
            body.append("")
        body.extend(self._instruction_lines())
        body.append("")
        body.append(self._cursor_line(self.line_editor, "> "))
        body.append("")
        body.append(theme.style("help", f" {EDIT_HELP_LINE}"))
        if session.target.is_new:
            heading = theme.style("success", "CREATING NEW KEYBIND")
        else:
            heading = theme.style("accent", "EDITING KEYBIND (One-Line)")
        return render_panel_frame(
            PanelFrameContext(
                title=APP_TITLE,
                status_token=f"v{__version__}",
                dirty=self.state.dirty,
                heading=heading,
                body_lines=body,
                theme=theme,
                status_message=self.state.status_message,
                status_is_error=self.state.status_is_error,
            )
        )

    def _render_conflict(self) -> Frame:
        session = self.session
        assert session is not None
        conflict = session.conflict
        theme = self.theme
        body = [f" {theme.style('emphasis', 'Your line:')} {session.candidate}"]
        if conflict is not None:
            body.append(f"  [{conflict.source.label}] {conflict.line}")
        body.extend(
            [
                "",
                theme.style("emphasis", "OPTIONS:"),
                f"  {theme.style('danger', '[y]')} Overwrite conflict (Unbind it)",
                f"  {theme.style('warning', '[e]')} Edit the conflicting line instead (Saves current edit to stack)",
                f"  {theme.style('success', '[n]')} Edit my line again",
            ]
        )
        return render_panel_frame(
            PanelFrameContext(
                title=APP_TITLE,
                status_token=f"v{__version__}",
                dirty=self.state.dirty,
                heading=theme.style("danger", "CONFLICT FOUND"),
                body_lines=body,
                theme=theme,
                status_message=self.state.status_message,
                status_is_error=self.state.status_is_error,
            )
        )

    def render(self) -> Frame:
        mode = self.state.mode
        if self.session is not None and mode == Mode.CONFLICT_PROMPT:
            return self._render_conflict()
        if self.session is not None and mode in {Mode.EDITING, Mode.CONFIRM_EXIT} and not self.filtering:
            return self._render_editor()
        return self._render_list()
