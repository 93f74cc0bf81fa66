"""hyprlock theme discovery, current-theme detection and applying.

A theme is a directory ``<root>/<theme>/`` holding ``hyprlock.conf`` and an
optional ``theme.json`` whose ``name`` field is the display name. Applying a
theme points the target config's ``source = ...`` line at the fragment.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path

from ..errors import SaveError
from ..patch.atomic import replace_with_regular_file, write_via_temp_copy
from ..patch.single_line import expand_home, find_first_assignment, home_shorthand, replace_first_assignment

logger = logging.getLogger(__name__)

FRAGMENT_NAME = "hyprlock.conf"
METADATA_NAME = "theme.json"
SOURCE_KEY = "source"


@dataclass(frozen=True)
class ThemeEntry:
    name: str
    directory: Path

    @property
    def fragment(self) -> Path:
        return self.directory / FRAGMENT_NAME


def theme_display_name(directory: Path) -> str:
    """Return ``theme.json``'s ``name`` field, falling back to the directory name."""
    metadata = directory / METADATA_NAME
    try:
        data = json.loads(metadata.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return directory.name
    except (OSError, ValueError) as exc:
        logger.info("ignoring unreadable %s: %s", metadata, exc)
        return directory.name
    name = data.get("name") if isinstance(data, dict) else None
    if isinstance(name, str) and name.strip():
        return name.strip()
    return directory.name


def discover_themes(root: Path) -> list[ThemeEntry]:
    """List themes under ``root`` sorted by fragment path."""
    fragments = sorted(path for path in Path(root).glob(f"*/{FRAGMENT_NAME}") if path.is_file())
    return [ThemeEntry(name=theme_display_name(path.parent), directory=path.parent) for path in fragments]


def _resolve(path: Path) -> Path | None:
    try:
        return path.resolve(strict=True)
    except OSError:
        return None


def current_fragment(target: Path, home: Path | None = None) -> Path | None:
    """Return the fragment ``target`` currently uses (symlink or ``source`` line)."""
    target = Path(target)
    if target.is_symlink():
        return _resolve(target)
    if not target.is_file():
        return None
    try:
        text = target.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        logger.info("cannot read %s: %s", target, exc)
        return None
    value = find_first_assignment(text, SOURCE_KEY)
    if not value:
        return None
    return _resolve(expand_home(value.strip(), home))


def detect_current_theme(target: Path, themes: list[ThemeEntry], home: Path | None = None) -> int | None:
    fragment = current_fragment(target, home)
    if fragment is None:
        return None
    for idx, theme in enumerate(themes):
        if theme.directory == fragment.parent or _resolve(theme.directory) == fragment.parent:
            return idx
    return None


def _links_into(target: Path, root: Path) -> bool:
    if not target.is_symlink():
        return False
    resolved = _resolve(target)
    root_resolved = _resolve(root)
    if resolved is None or root_resolved is None:
        return False
    return root_resolved in resolved.parents


def apply_theme(
    theme: ThemeEntry,
    target: Path,
    themes_root: Path,
    home: Path | None = None,
) -> None:
    """Point ``target`` at ``theme``; raises ``SaveError`` on failure."""
    if not os.access(theme.fragment, os.R_OK):
        raise SaveError(f"Theme fragment not readable: {theme.fragment}")
    home_dir = Path(home) if home is not None else Path.home()
    entry = home_shorthand(Path(theme.fragment).resolve(), home_dir.resolve())
    target = Path(target)

    if _links_into(target, themes_root):
        # Writing through the link would overwrite another theme's fragment.
        replace_with_regular_file(target, f"{SOURCE_KEY} = {entry}\n")
    else:
        try:
            existing = target.read_text(encoding="utf-8", errors="replace") if target.exists() else ""
        except OSError as exc:
            raise SaveError(f"Failed to read {target}: {exc}") from exc
        write_via_temp_copy(target, replace_first_assignment(existing, SOURCE_KEY, entry))
    logger.info("applied theme %s to %s", theme.name, target)


def next_theme_index(current: int | None, count: int) -> int:
    if count <= 0:
        raise ValueError("no themes to toggle")
    if current is None:
        return 0
    return (current + 1) % count
