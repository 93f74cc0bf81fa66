"""Hyprland bind-line parsing, bind-type auto-correction and combo normalization.

A bind line looks like ``bind<flags> = MODS, KEY[, DESC], DISPATCHER[, ARG]``.
Only the keyword and the first two comma fields matter for conflict checks;
the rest of the line is carried verbatim.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from ..model import trim

BIND_STATEMENT_RE = re.compile(r"^\s*bind[a-z]*\s*=")
BIND_KEYWORD_RE = re.compile(r"^bind[a-z]*$")
NEW_BIND_TEMPLATE = "bindd = "
PLACEHOLDER_KEY = "KEY"

MODIFIER_ALIASES = {
    "$mainmod": "super",
    "win": "super",
    "logo": "super",
    "mod4": "super",
    "control": "ctrl",
    "mod1": "alt",
}
_MODIFIER_SPLIT_RE = re.compile(r"[\s_+]+")


@dataclass(frozen=True)
class BindLine:
    raw: str
    keyword: str
    content: str
    fields: tuple[str, ...]

    @property
    def mods(self) -> str:
        return self.fields[0] if self.fields else ""

    @property
    def key(self) -> str:
        return self.fields[1] if len(self.fields) > 1 else ""

    @property
    def field_count(self) -> int:
        return len(self.fields)


@dataclass(frozen=True)
class Correction:
    line: str
    original_type: str
    fixed_type: str

    @property
    def corrected(self) -> bool:
        return self.original_type != self.fixed_type

    def message(self) -> str:
        return f'[AUTO-FIX] Bind type corrected: "{self.original_type}" → "{self.fixed_type}"'


def is_bind_statement(line: str) -> bool:
    return BIND_STATEMENT_RE.match(line) is not None


def parse_bind_line(line: str) -> BindLine | None:
    """Split ``line`` at its first ``=``; ``None`` when there is no ``=``."""
    text = line.rstrip("\r\n")
    keyword, sep, content = text.partition("=")
    if not sep:
        return None
    fields = tuple(trim(part) for part in content.split(","))
    return BindLine(raw=text, keyword=trim(keyword), content=content, fields=fields)


def autocorrect(line: str) -> Correction:
    """Fix the ``d`` (description) flag so it matches the number of fields.

    Five or more comma fields imply a description, so ``d`` is added when
    missing. Exactly four fields with ``d`` present means the flag is
    spurious and every ``d`` is removed, except for ``bindm``.
    """
    parsed = parse_bind_line(line)
    if parsed is None or not BIND_KEYWORD_RE.match(parsed.keyword):
        keyword = parsed.keyword if parsed is not None else ""
        return Correction(line=line, original_type=keyword, fixed_type=keyword)

    original_type = parsed.keyword
    flags = original_type[len("bind"):]
    fixed_type = original_type
    if parsed.field_count >= 5:
        if "d" not in flags:
            fixed_type = f"bind{flags}d"
    elif parsed.field_count == 4:
        if "d" in flags and original_type != "bindm":
            fixed_type = "bind" + flags.replace("d", "")

    if fixed_type == original_type:
        return Correction(line=line, original_type=original_type, fixed_type=fixed_type)
    return Correction(
        line=f"{fixed_type} = {parsed.content.lstrip()}",
        original_type=original_type,
        fixed_type=fixed_type,
    )


def normalize_modifiers(mods: str) -> frozenset[str]:
    names = (part for part in _MODIFIER_SPLIT_RE.split(trim(mods).lower()) if part)
    return frozenset(MODIFIER_ALIASES.get(name, name) for name in names)


def normalize_combo(mods: str, key: str) -> tuple[frozenset[str], str]:
    """Return a comparison form where equivalent notations compare equal."""
    return normalize_modifiers(mods), trim(key).lower()


def unbind_directive(mods: str, key: str) -> str:
    return f"unbind = {mods}, {key}"


def validate_input(line: str) -> str | None:
    """Return an error message for unusable editor input, else ``None``."""
    if not trim(line) or trim(line) == trim(NEW_BIND_TEMPLATE):
        return "Input invalid or unchanged template."
    parsed = parse_bind_line(line)
    if parsed is None:
        return "Missing '=' after the bind keyword."
    if not parsed.key or parsed.key == PLACEHOLDER_KEY:
        return "Invalid Key defined."
    return None
