"""Terminal control helpers for the TUI session.

Owns raw-mode lifecycle, alternate-screen switching, cursor visibility and
SGR mouse reporting. Restoring is idempotent so every exit path may call it.
"""

from __future__ import annotations

import os
import termios
import tty

MOUSE_ON = b"\x1b[?1000h\x1b[?1002h\x1b[?1006h"
MOUSE_OFF = b"\x1b[?1000l\x1b[?1002l\x1b[?1006l"
ENTER_TUI = b"\x1b[?1049h\x1b[?25l\x1b[2J\x1b[H"
LEAVE_TUI = b"\x1b[?25h\x1b[?1049l"


class TerminalController:
    def __init__(self, stdin_fd: int, stdout_fd: int) -> None:
        self.stdin_fd = stdin_fd
        self.stdout_fd = stdout_fd
        self._saved_tty_state = termios.tcgetattr(stdin_fd)
        self._active = False

    @property
    def active(self) -> bool:
        return self._active

    def enable_tui_mode(self) -> None:
        if self._active:
            return
        tty.setraw(self.stdin_fd, termios.TCSAFLUSH)
        self._active = True
        # Enter alternate screen, hide cursor, then enable mouse reporting.
        os.write(self.stdout_fd, ENTER_TUI + MOUSE_ON)

    def disable_tui_mode(self) -> None:
        """Restore the saved tty state; a second call is a no-op."""
        if not self._active:
            return
        self._active = False
        try:
            os.write(self.stdout_fd, MOUSE_OFF + LEAVE_TUI)
        finally:
            termios.tcsetattr(self.stdin_fd, termios.TCSAFLUSH, self._saved_tty_state)

