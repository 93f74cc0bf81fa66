"""Logging setup for a terminal session.

The TUI owns stdout/stderr while running, so records go to a file when one
is configured and are dropped otherwise.
"""

from __future__ import annotations

import logging
from pathlib import Path

LOGGER_NAME = "duskytui"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(log_file: Path | None = None, verbose: bool = False) -> logging.Logger:
    """Attach a file handler (or a ``NullHandler``) to the package logger.

    Calling this again replaces the handlers installed by the previous call.
    """
    package_logger = logging.getLogger(LOGGER_NAME)
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()

    package_logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    package_logger.propagate = False
    if log_file is None:
        package_logger.addHandler(logging.NullHandler())
        return package_logger

    path = Path(log_file).expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    package_logger.addHandler(handler)
    return package_logger
