"""Crash-safe configuration rewriting.

``ini`` patches section-scoped ``Key=Value`` settings, ``single_line``
replaces one assignment in a small fragment, and ``atomic`` performs the
temp-file-then-copy write both rely on.
"""

from .atomic import remove_live_temp_files, replace_with_regular_file, write_via_temp_copy
from .ini import PatchResult, apply_settings_patch, parse_settings, patch_settings_text
from .single_line import expand_home, find_first_assignment, home_shorthand, replace_first_assignment

__all__ = [
    "PatchResult",
    "apply_settings_patch",
    "expand_home",
    "find_first_assignment",
    "home_shorthand",
    "parse_settings",
    "patch_settings_text",
    "remove_live_temp_files",
    "replace_first_assignment",
    "replace_with_regular_file",
    "write_via_temp_copy",
]
