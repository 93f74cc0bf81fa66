"""Conflict detection and the stack of edits stashed while resolving conflicts."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from .syntax import is_bind_statement, normalize_combo, parse_bind_line, unbind_directive

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConfigSource:
    label: str
    path: Path


@dataclass(frozen=True)
class LineMatch:
    line_number: int
    line: str
    mods: str
    key: str


@dataclass(frozen=True)
class Conflict:
    source: ConfigSource
    match: LineMatch

    @property
    def line(self) -> str:
        return self.match.line

    def unbind(self) -> str:
        return unbind_directive(self.match.mods, self.match.key)


@dataclass(frozen=True)
class EditBlock:
    """One stashed edit: header comment, optional unbind of its target, and the line."""

    timestamp: str
    line: str
    original: str | None = None
    unbind_target: tuple[str, str] | None = None

    def render(self) -> str:
        kind = "Create" if self.original is None else "Edit"
        parts = ["", f"# [{self.timestamp}] Stacked {kind} (Saved from conflict)"]
        if self.original is not None:
            parts.append(f"# Original: {self.original}")
        if self.unbind_target is not None:
            parts.append(unbind_directive(*self.unbind_target))
        parts.append(self.line)
        return "\n".join(parts) + "\n"


@dataclass
class PendingEditStack:
    """Edits saved from conflicts, most recently stashed first."""

    blocks: list[EditBlock] = field(default_factory=list)

    def push(self, block: EditBlock) -> None:
        self.blocks.insert(0, block)

    def clear(self) -> None:
        self.blocks.clear()

    def __len__(self) -> int:
        return len(self.blocks)

    def unbind_targets(self) -> frozenset[tuple[str, str]]:
        return frozenset(block.unbind_target for block in self.blocks if block.unbind_target is not None)

    def render(self) -> str:
        return "".join(block.render() for block in self.blocks)


def find_conflict(
    lines: Iterable[str],
    mods: str,
    key: str,
    *,
    suppressed: frozenset[tuple[str, str]] = frozenset(),
    exclude_line: int | None = None,
) -> LineMatch | None:
    """Return the latest bind line whose normalized combo equals ``(mods, key)``.

    Lines whose exact raw ``(mods, key)`` is in ``suppressed`` are already
    scheduled for unbinding and never match. ``exclude_line`` (1-based) skips
    the line currently being edited.
    """
    if not key.strip():
        return None
    wanted = normalize_combo(mods, key)
    latest: LineMatch | None = None
    for number, line in enumerate(lines, start=1):
        if number == exclude_line or not is_bind_statement(line):
            continue
        parsed = parse_bind_line(line)
        if parsed is None or normalize_combo(parsed.mods, parsed.key) != wanted:
            continue
        if (parsed.mods, parsed.key) in suppressed:
            continue
        latest = LineMatch(line_number=number, line=parsed.raw, mods=parsed.mods, key=parsed.key)
    return latest


def read_config_lines(path: Path) -> list[str]:
    """Read ``path`` as lines; a missing or unreadable file has no lines."""
    try:
        return Path(path).read_text(encoding="utf-8", errors="replace").splitlines()
    except OSError as exc:
        logger.warning("cannot read %s for conflict check: %s", path, exc)
        return []


def check_conflict(
    mods: str,
    key: str,
    sources: Sequence[ConfigSource],
    stack: PendingEditStack,
    *,
    editing: tuple[Path, int] | None = None,
) -> Conflict | None:
    """Check ``sources`` in order (overlay first) and return the first conflict found."""
    suppressed = stack.unbind_targets()
    for source in sources:
        exclude = None
        if editing is not None and Path(editing[0]) == Path(source.path):
            exclude = editing[1]
        match = find_conflict(
            read_config_lines(source.path),
            mods,
            key,
            suppressed=suppressed,
            exclude_line=exclude,
        )
        if match is not None:
            logger.info("conflict for %s, %s in %s:%d", mods, key, source.path, match.line_number)
            return Conflict(source=source, match=match)
    return None
