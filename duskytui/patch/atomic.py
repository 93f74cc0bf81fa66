"""Temp-file-then-copy writes that keep symlinks and inodes intact.

Content is first written to a temporary file next to the target, then copied
onto the target path. Copying (instead of renaming) writes through symlinks
and keeps hard-link identity. Live temp files are tracked so an interrupted
session can remove them during exit cleanup.
"""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from pathlib import Path

from ..errors import SaveError

logger = logging.getLogger(__name__)

_LIVE_TEMP_FILES: set[Path] = set()


def live_temp_files() -> frozenset[Path]:
    return frozenset(_LIVE_TEMP_FILES)


def remove_live_temp_files() -> None:
    """Delete every temp file still registered by an interrupted write."""
    for path in list(_LIVE_TEMP_FILES):
        _discard_temp(path)


def _discard_temp(path: Path) -> None:
    _LIVE_TEMP_FILES.discard(path)
    try:
        path.unlink()
    except FileNotFoundError:
        pass
    except OSError as exc:
        logger.warning("could not remove temp file %s: %s", path, exc)


def write_via_temp_copy(target: Path, content: str) -> None:
    """Replace the content of ``target`` with ``content``.

    Raises ``SaveError`` when the temp file cannot be created or written, in
    which case the target is untouched. The temp file is removed on every
    path, including ``KeyboardInterrupt`` and ``SystemExit``.
    """
    target = Path(target)
    try:
        fd, tmp_name = tempfile.mkstemp(prefix=f"{target.name}.tmp.", dir=target.parent)
    except OSError as exc:
        raise SaveError(f"Failed to create temp file next to {target}: {exc}") from exc

    tmp_path = Path(tmp_name)
    _LIVE_TEMP_FILES.add(tmp_path)
    try:
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="") as handle:
                handle.write(content)
                handle.flush()
                os.fsync(handle.fileno())
        except OSError as exc:
            raise SaveError(f"Failed to write temp file {tmp_path}: {exc}") from exc

        try:
            shutil.copyfile(tmp_path, target)
        except OSError as exc:
            raise SaveError(f"Failed to update {target}: {exc}") from exc
        logger.info("wrote %d bytes to %s", len(content.encode("utf-8")), target)
    finally:
        _discard_temp(tmp_path)


def replace_with_regular_file(target: Path, content: str) -> None:
    """Write ``content`` into a fresh regular file at ``target`` (replacing a symlink).

    Used only where writing through the existing link would modify a file
    that must not change.
    """
    target = Path(target)
    try:
        fd, tmp_name = tempfile.mkstemp(prefix=f"{target.name}.tmp.", dir=target.parent)
    except OSError as exc:
        raise SaveError(f"Failed to create temp file next to {target}: {exc}") from exc

    tmp_path = Path(tmp_name)
    _LIVE_TEMP_FILES.add(tmp_path)
    try:
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="") as handle:
                handle.write(content)
            os.chmod(tmp_path, 0o644)
            os.replace(tmp_path, target)
        except OSError as exc:
            raise SaveError(f"Failed to replace {target}: {exc}") from exc
        logger.info("replaced symlink %s with a regular file", target)
    finally:
        _discard_temp(tmp_path)
