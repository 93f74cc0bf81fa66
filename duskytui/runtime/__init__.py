"""Runtime orchestration: terminal control, session cleanup, routing and loop."""

from .loop import RuntimeLoopCallbacks, run_main_loop, run_session
from .router import ListRouter, ListRouterCallbacks
from .session import CleanupRegistry, signal_exit_handlers
from .terminal import TerminalController

__all__ = [
    "CleanupRegistry",
    "ListRouter",
    "ListRouterCallbacks",
    "RuntimeLoopCallbacks",
    "TerminalController",
    "run_main_loop",
    "run_session",
    "signal_exit_handlers",
]
