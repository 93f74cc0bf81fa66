"""Exception taxonomy shared by all duskytui tools.

Fatal startup errors abort before the terminal enters raw mode.
Save errors abort only the save in progress and are shown on the status line.
"""

from __future__ import annotations


class DuskyError(Exception):
    """Base class for every error raised by duskytui itself."""


class FatalStartupError(DuskyError):
    """A precondition for running a tool is not met."""

    exit_code = 1


class SaveError(DuskyError):
    """Persisting a configuration change failed; on-disk content is unchanged."""


class SchemaError(DuskyError):
    """A static item schema is inconsistent (duplicate label, unknown tab)."""
