"""Stacked keybind edit session.

The session is terminal-free: the app feeds it editor input and conflict
choices, and it tracks the current target, the pending stack, and the final
overlay text. Conflict chains can be arbitrarily deep because choosing
"edit the conflict" stashes the current edit and re-seeds the session with
the conflicting line.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from ..errors import SaveError
from ..patch.atomic import write_via_temp_copy
from .conflicts import Conflict, ConfigSource, EditBlock, PendingEditStack, check_conflict
from .syntax import NEW_BIND_TEMPLATE, Correction, autocorrect, parse_bind_line, unbind_directive, validate_input

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M"


class SubmitStatus(enum.Enum):
    INVALID = "invalid"
    CONFLICT = "conflict"
    ACCEPTED = "accepted"
    EDITING = "editing"


@dataclass(frozen=True)
class SubmitResult:
    status: SubmitStatus
    message: str = ""
    conflict: Conflict | None = None
    correction: Correction | None = None


@dataclass(frozen=True)
class EditTarget:
    """The line being edited: ``None`` fields mean a new keybind is being created."""

    line: str | None = None
    mods: str = ""
    key: str = ""
    origin: tuple[Path, int] | None = None

    @property
    def is_new(self) -> bool:
        return self.line is None

    @classmethod
    def from_line(cls, line: str, origin: tuple[Path, int] | None = None) -> EditTarget:
        parsed = parse_bind_line(line)
        mods = parsed.mods if parsed is not None else ""
        key = parsed.key if parsed is not None else ""
        return cls(line=line.rstrip("\r\n"), mods=mods, key=key, origin=origin)


class KeybindEditSession:
    def __init__(
        self,
        overlay: Path,
        source: Path,
        target: EditTarget | None = None,
        *,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.overlay = Path(overlay)
        self.source = Path(source)
        self.sources = (
            ConfigSource("CUSTOM", self.overlay),
            ConfigSource("SOURCE", self.source),
        )
        self.clock = clock
        self.target = target if target is not None else EditTarget()
        self.current_input = NEW_BIND_TEMPLATE if self.target.is_new else (self.target.line or "")
        self.pending = PendingEditStack()
        self.conflict: Conflict | None = None
        self.candidate = ""
        self.accepted_line: str | None = None
        self.conflict_unbind: str | None = None

    def _timestamp(self) -> str:
        return self.clock().strftime(TIMESTAMP_FORMAT)

    def submit(self, text: str) -> SubmitResult:
        """Validate, auto-correct and conflict-check one line of editor input."""
        self.current_input = text
        error = validate_input(text)
        if error is not None:
            return SubmitResult(SubmitStatus.INVALID, message=error)

        correction = autocorrect(text)
        line = correction.line
        if correction.corrected:
            logger.info("%s", correction.message())
            self.current_input = line
        parsed = parse_bind_line(line)
        if parsed is None:
            return SubmitResult(SubmitStatus.INVALID, message="Missing '=' after the bind keyword.")

        conflict = check_conflict(
            parsed.mods,
            parsed.key,
            self.sources,
            self.pending,
            editing=self.target.origin,
        )
        if conflict is not None:
            self.conflict = conflict
            self.candidate = line
            return SubmitResult(
                SubmitStatus.CONFLICT,
                message=f"Conflict found in [{conflict.source.label}]",
                conflict=conflict,
                correction=correction,
            )

        self.accepted_line = line
        return SubmitResult(SubmitStatus.ACCEPTED, correction=correction)

    def resolve_conflict(self, choice: str) -> SubmitResult:
        """Apply a conflict choice: ``y`` overwrite, ``e`` edit the conflict, else retry."""
        conflict = self.conflict
        if conflict is None:
            raise RuntimeError("no conflict to resolve")
        self.conflict = None
        choice = choice.lower()

        if choice == "y":
            self.conflict_unbind = conflict.unbind()
            self.accepted_line = self.candidate
            return SubmitResult(SubmitStatus.ACCEPTED, conflict=conflict)

        if choice == "e":
            self.stash_current(self.candidate)
            origin = (conflict.source.path, conflict.match.line_number)
            self.target = EditTarget.from_line(conflict.line, origin)
            self.current_input = self.target.line or ""
            return SubmitResult(
                SubmitStatus.EDITING,
                message="Current edit stacked; now editing the conflicting line.",
                conflict=conflict,
            )

        self.current_input = self.candidate
        return SubmitResult(SubmitStatus.EDITING, message="Edit your line again.")

    def stash_current(self, line: str) -> None:
        target = self.target
        unbind_target = None if target.is_new else (target.mods, target.key)
        self.pending.push(
            EditBlock(
                timestamp=self._timestamp(),
                line=line,
                original=target.line,
                unbind_target=unbind_target,
            )
        )

    def render_commit(self, existing: str) -> str:
        """Return the overlay text after appending the accepted edit and the stack."""
        if self.accepted_line is None:
            raise RuntimeError("no accepted line to commit")
        target = self.target
        parts = [existing]
        if existing and not existing.endswith("\n"):
            parts.append("\n")
        parts.append(f"\n# [{self._timestamp()}] {'Create' if target.is_new else 'Edit'}\n")
        if not target.is_new:
            parts.append(f"# Original: {target.line}\n")
            parts.append(unbind_directive(target.mods, target.key) + "\n")
        if self.conflict_unbind is not None:
            parts.append(f"# Resolving Conflict:\n{self.conflict_unbind}\n")
        parts.append(f"{self.accepted_line}\n")
        parts.append(self.pending.render())
        return "".join(parts)

    def render_pending_only(self, existing: str) -> str:
        parts = [existing]
        if existing and not existing.endswith("\n"):
            parts.append("\n")
        parts.append(self.pending.render())
        return "".join(parts)

    def _read_overlay(self) -> str:
        try:
            return self.overlay.read_text(encoding="utf-8", errors="replace")
        except FileNotFoundError:
            return ""
        except OSError as exc:
            raise SaveError(f"Failed to read {self.overlay}: {exc}") from exc

    def commit(self) -> Path:
        """Append the accepted edit plus stacked edits to the overlay file."""
        content = self.render_commit(self._read_overlay())
        write_via_temp_copy(self.overlay, content)
        logger.info("committed keybind edit (%d stacked) to %s", len(self.pending), self.overlay)
        return self.overlay

    def flush_pending(self) -> Path | None:
        """Write only the stacked edits; used when quitting mid-chain."""
        if not self.pending:
            return None
        content = self.render_pending_only(self._read_overlay())
        write_via_temp_copy(self.overlay, content)
        logger.info("flushed %d stacked edit(s) to %s", len(self.pending), self.overlay)
        return self.overlay
