"""Session lifecycle: exactly-once cleanup and signal-to-exit translation.

Termination signals are converted to ``SystemExit(128 + signum)`` so that
``finally`` blocks and the cleanup registry run on every exit path.
"""

from __future__ import annotations

import contextlib
import logging
import signal
from collections.abc import Callable, Iterator

logger = logging.getLogger(__name__)

EXIT_SIGNALS = (signal.SIGTERM, signal.SIGHUP, signal.SIGINT)


class CleanupRegistry:
    """Callbacks run once, newest first, no matter how often ``run`` is called."""

    def __init__(self) -> None:
        self._callbacks: list[Callable[[], object]] = []
        self._ran = False

    @property
    def ran(self) -> bool:
        return self._ran

    def register(self, callback: Callable[[], object]) -> Callable[[], object]:
        self._callbacks.append(callback)
        return callback

    def run(self) -> None:
        if self._ran:
            return
        self._ran = True
        for callback in reversed(self._callbacks):
            try:
                callback()
            except Exception:
                # Remaining callbacks must still restore the terminal.
                logger.exception("cleanup step %r failed", callback)


def _raise_exit(signum: int, _frame: object) -> None:
    raise SystemExit(128 + signum)


@contextlib.contextmanager
def signal_exit_handlers(signals: tuple[signal.Signals, ...] = EXIT_SIGNALS) -> Iterator[None]:
    """Install exit-raising handlers for ``signals`` and restore the old ones afterwards."""
    previous = {}
    for signum in signals:
        previous[signum] = signal.signal(signum, _raise_exit)
    try:
        yield
    finally:
        for signum, handler in previous.items():
            signal.signal(signum, handler)
