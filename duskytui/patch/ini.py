"""Section-scoped ``Key=Value`` patching for logind-style settings files.

Only lines inside the target section are considered. Active assignments
(``Key=Value``) and commented ones (``#Key=Value``) both count as matches.
Every other line passes through byte-for-byte, line endings included.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path

from ..errors import SaveError
from ..state import FileCache
from .atomic import write_via_temp_copy

logger = logging.getLogger(__name__)

DEFAULT_SECTION = "Login"

_SECTION_RE = re.compile(r"^\s*\[([^\]]*)\]")
_ASSIGN_RE = re.compile(
    r"^(?P<indent>[ \t]*)(?P<hash>#[ \t]*)?(?P<key>[A-Za-z][A-Za-z0-9_]*)"
    r"(?P<before>[ \t]*)=(?P<after>[ \t]*)(?P<rest>.*)$"
)


@dataclass(frozen=True)
class _Assignment:
    index: int
    key: str
    commented: bool
    indent: str
    before: str
    after: str
    value: str
    comment: str
    ending: str


@dataclass(frozen=True)
class PatchResult:
    text: str
    replaced: tuple[str, ...] = ()
    appended: tuple[str, ...] = ()

    @property
    def changed(self) -> bool:
        return bool(self.replaced or self.appended)


def _split_ending(line: str) -> tuple[str, str]:
    if line.endswith("\r\n"):
        return line[:-2], "\r\n"
    if line.endswith("\n") or line.endswith("\r"):
        return line[:-1], line[-1]
    return line, ""


def _split_inline_comment(rest: str) -> tuple[str, str]:
    """Split ``value  # note`` into the value and the comment including its gap."""
    idx = rest.find("#")
    if idx < 0:
        return rest.rstrip(), ""
    value = rest[:idx]
    stripped = value.rstrip()
    return stripped, rest[len(stripped):]


def _parse_assignment(index: int, line: str) -> _Assignment | None:
    body, ending = _split_ending(line)
    match = _ASSIGN_RE.match(body)
    if match is None:
        return None
    commented = match.group("hash") is not None
    value, comment = _split_inline_comment(match.group("rest"))
    return _Assignment(
        index=index,
        key=match.group("key"),
        commented=commented,
        indent=match.group("indent"),
        before=match.group("before"),
        after=match.group("after"),
        value=value,
        comment="" if commented else comment,
        ending=ending,
    )


def _section_bounds(lines: list[str], section: str) -> tuple[int, int] | None:
    """Return ``[start, end)`` line indices of the body of ``[section]``."""
    start: int | None = None
    for idx, line in enumerate(lines):
        match = _SECTION_RE.match(line)
        if match is None:
            continue
        if start is not None:
            return start, idx
        if match.group(1).strip() == section:
            start = idx + 1
    if start is None:
        return None
    return start, len(lines)


def _section_assignments(lines: list[str], section: str) -> list[_Assignment]:
    bounds = _section_bounds(lines, section)
    if bounds is None:
        return []
    found: list[_Assignment] = []
    for idx in range(*bounds):
        assignment = _parse_assignment(idx, lines[idx])
        if assignment is not None:
            found.append(assignment)
    return found


def normalize_value(value: str) -> str:
    """Drop every whitespace character, matching how values are compared on load."""
    return "".join(value.split())


def parse_settings(text: str, section: str = DEFAULT_SECTION) -> dict[str, str]:
    """Read ``key -> value`` from ``[section]``.

    Active assignments win over commented ones; among equals, the last wins.
    Inline comments and all whitespace are stripped from values.
    """
    lines = text.splitlines(keepends=True)
    commented: dict[str, str] = {}
    active: dict[str, str] = {}
    for assignment in _section_assignments(lines, section):
        target = commented if assignment.commented else active
        target[assignment.key] = normalize_value(assignment.value)
    return {**commented, **active}


def _line_ending_for(lines: list[str]) -> str:
    for line in lines:
        _, ending = _split_ending(line)
        if ending:
            return ending
    return "\n"


def patch_settings_text(
    text: str,
    changes: dict[str, str],
    section: str = DEFAULT_SECTION,
) -> PatchResult:
    """Apply ``changes`` to ``text`` and report which keys were replaced or appended.

    Per key only one line is rewritten: the last active assignment in the
    section, otherwise the first commented one. Missing keys are appended
    after the last non-blank line of the section, and the section header is
    created at the end of the file when it does not exist.
    """
    if not changes:
        return PatchResult(text=text)

    lines = text.splitlines(keepends=True)
    newline = _line_ending_for(lines)

    targets: dict[str, _Assignment] = {}
    for assignment in _section_assignments(lines, section):
        if assignment.key not in changes:
            continue
        if assignment.key not in targets or not assignment.commented:
            targets[assignment.key] = assignment

    replaced: list[str] = []
    for key, assignment in targets.items():
        value = changes[key]
        if not assignment.commented and assignment.value == value:
            continue
        lines[assignment.index] = (
            f"{assignment.indent}{key}{assignment.before}={assignment.after}"
            f"{value}{assignment.comment}{assignment.ending}"
        )
        replaced.append(key)

    missing = [key for key in changes if key not in targets]
    if missing:
        additions = [f"{key}={changes[key]}{newline}" for key in missing]
        bounds = _section_bounds(lines, section)
        if lines and not _split_ending(lines[-1])[1]:
            lines[-1] += newline
        if bounds is None:
            if lines:
                lines.append(newline)
            lines.append(f"[{section}]{newline}")
            lines.extend(additions)
        else:
            start, end = bounds
            insert_at = start
            for idx in range(end - 1, start - 1, -1):
                if lines[idx].strip():
                    insert_at = idx + 1
                    break
            lines[insert_at:insert_at] = additions

    result = PatchResult(
        text="".join(lines),
        replaced=tuple(replaced),
        appended=tuple(missing),
    )
    if result.changed:
        logger.debug("patched [%s]: replaced=%s appended=%s", section, result.replaced, result.appended)
    return result


def read_settings_file(path: Path) -> str:
    # newline="" keeps CRLF endings intact for the patcher.
    with open(path, encoding="utf-8", errors="replace", newline="") as handle:
        return handle.read()


def apply_settings_patch(
    path: Path,
    changes: dict[str, str],
    cache: FileCache,
    section: str = DEFAULT_SECTION,
) -> PatchResult | None:
    """Persist the values in ``changes`` that differ from ``cache``.

    Returns ``None`` when nothing differs from disk, so no write happens.
    Raises ``SaveError`` if the file cannot be read or written.
    """
    pending = cache.pending_changes(changes)
    if not pending:
        return None
    try:
        text = read_settings_file(path)
    except OSError as exc:
        raise SaveError(f"Failed to read {path}: {exc}") from exc

    result = patch_settings_text(text, pending, section)
    if result.changed:
        write_via_temp_copy(Path(path), result.text)
    cache.update(pending)
    logger.info("saved %d setting(s) to %s", len(pending), path)
    return result
