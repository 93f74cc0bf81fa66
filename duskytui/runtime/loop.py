"""Main interactive event loop for the terminal UI.

Render a full frame, block on one decoded key, dispatch, repeat. The loop
is wiring only; tool behavior lives in the injected callbacks.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from ..input import read_key
from ..patch.atomic import remove_live_temp_files
from ..render import Frame, write_frame
from .session import CleanupRegistry, signal_exit_handlers
from .terminal import TerminalController

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RuntimeLoopCallbacks:
    """Injected operations used by ``run_main_loop``."""

    render: Callable[[], Frame]
    handle_key: Callable[[str], None]
    should_quit: Callable[[], bool]


def run_main_loop(
    stdin_fd: int,
    stdout_fd: int,
    callbacks: RuntimeLoopCallbacks,
    *,
    read_key_fn: Callable[[int], str] = read_key,
) -> None:
    """Run until ``should_quit`` reports true; empty key tokens are ignored."""
    while not callbacks.should_quit():
        write_frame(stdout_fd, callbacks.render())
        key = read_key_fn(stdin_fd)
        if not key:
            continue
        logger.debug("key %r", key)
        callbacks.handle_key(key)


def run_session(
    stdin_fd: int,
    stdout_fd: int,
    callbacks: RuntimeLoopCallbacks,
    *,
    read_key_fn: Callable[[int], str] = read_key,
    terminal_factory: Callable[[int, int], TerminalController] = TerminalController,
    cleanup: CleanupRegistry | None = None,
) -> None:
    """Run the loop inside raw mode with exactly-once terminal/temp-file cleanup.

    Signals become ``SystemExit`` and propagate to the caller after cleanup.
    """
    registry = cleanup if cleanup is not None else CleanupRegistry()
    registry.register(remove_live_temp_files)
    with signal_exit_handlers():
        terminal = terminal_factory(stdin_fd, stdout_fd)
        registry.register(terminal.disable_tui_mode)
        try:
            terminal.enable_tui_mode()
            run_main_loop(stdin_fd, stdout_fd, callbacks, read_key_fn=read_key_fn)
        finally:
            registry.run()
