"""Theme-fragment preview loading, sanitization, and syntax highlighting.

Control bytes are escaped before highlighting so a preview can never move
the cursor or ring the bell. Unreadable files yield a placeholder line.
"""

from __future__ import annotations

import logging
import re
from functools import lru_cache
from pathlib import Path

from pygments import highlight as pygments_highlight
from pygments.formatters import Terminal256Formatter
from pygments.lexer import Lexer
from pygments.lexers import IniLexer, get_lexer_for_filename
from pygments.styles import get_style_by_name
from pygments.util import ClassNotFound

logger = logging.getLogger(__name__)

DEFAULT_STYLE = "monokai"
PREVIEW_LINES = 8
UNREADABLE_PLACEHOLDER = "(preview unavailable)"

_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]")


def read_text(path: Path) -> str:
    for encoding in ("utf-8", "utf-8-sig", "latin-1"):
        try:
            return path.read_text(encoding=encoding)
        except UnicodeDecodeError:
            continue
    return path.read_bytes().decode("utf-8", errors="replace")


def sanitize_terminal_text(source: str) -> str:
    """Escape terminal control bytes to avoid side effects (bell, cursor moves, etc.)."""
    if _CONTROL_RE.search(source) is None:
        return source
    return _CONTROL_RE.sub(lambda match: f"\\x{ord(match.group()):02x}", source)


@lru_cache(maxsize=16)
def _formatter(style: str) -> Terminal256Formatter:
    try:
        get_style_by_name(style)
    except ClassNotFound:
        logger.warning("unknown pygments style %r, using %s", style, DEFAULT_STYLE)
        style = DEFAULT_STYLE
    return Terminal256Formatter(style=style)


def _lexer_for(path: Path) -> Lexer:
    try:
        return get_lexer_for_filename(path.name)
    except ClassNotFound:
        # hyprlock fragments use a key = value syntax close enough to INI.
        return IniLexer()


def highlight_text(text: str, path: Path, style: str = DEFAULT_STYLE) -> str:
    if not text:
        return ""
    return pygments_highlight(sanitize_terminal_text(text), _lexer_for(path), _formatter(style))


def preview_lines(
    path: Path,
    *,
    style: str = DEFAULT_STYLE,
    limit: int = PREVIEW_LINES,
    no_color: bool = False,
) -> list[str]:
    """Return the first ``limit`` lines of ``path``, highlighted unless ``no_color``."""
    try:
        text = read_text(path)
    except OSError as exc:
        logger.info("preview of %s unavailable: %s", path, exc)
        return [UNREADABLE_PLACEHOLDER]
    head = "\n".join(text.splitlines()[:limit])
    if no_color:
        return sanitize_terminal_text(head).splitlines()
    return highlight_text(head, path, style).rstrip("\n").splitlines()
