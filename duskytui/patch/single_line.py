"""Single-field replacement for ``key = value`` fragments such as ``source = ...``."""

from __future__ import annotations

import re
from pathlib import Path


def home_shorthand(path: Path | str, home: Path | None = None) -> str:
    """Render ``path`` as ``~/...`` when it lives under the home directory."""
    home_dir = Path(home) if home is not None else Path.home()
    candidate = Path(path)
    try:
        relative = candidate.relative_to(home_dir)
    except ValueError:
        return str(candidate)
    if not relative.parts:
        return "~"
    return f"~/{relative.as_posix()}"


def expand_home(text: str, home: Path | None = None) -> Path:
    home_dir = Path(home) if home is not None else Path.home()
    if text == "~":
        return home_dir
    if text.startswith("~/"):
        return home_dir / text[2:]
    return Path(text)


def _assignment_re(key: str) -> re.Pattern[str]:
    return re.compile(rf"^(?P<head>[ \t]*{re.escape(key)}[ \t]*=[ \t]*)(?P<value>[^\r\n]*?)(?P<tail>[ \t]*(?:\r\n|\n|\r)?)$")


def find_first_assignment(text: str, key: str) -> str | None:
    """Return the value of the first active ``key = value`` line, if any."""
    pattern = _assignment_re(key)
    for line in text.splitlines(keepends=True):
        match = pattern.match(line)
        if match is not None:
            return match.group("value")
    return None


def replace_first_assignment(text: str, key: str, value: str) -> str:
    """Rewrite the value of the first active ``key = ...`` line.

    All other lines, including later assignments of the same key, are left
    untouched. When no line matches, ``key = value`` is appended.
    """
    pattern = _assignment_re(key)
    lines = text.splitlines(keepends=True)
    for idx, line in enumerate(lines):
        match = pattern.match(line)
        if match is None:
            continue
        lines[idx] = f"{match.group('head')}{value}{match.group('tail')}"
        return "".join(lines)

    if lines and not lines[-1].endswith(("\n", "\r")):
        lines[-1] += "\n"
    lines.append(f"{key} = {value}\n")
    return "".join(lines)
