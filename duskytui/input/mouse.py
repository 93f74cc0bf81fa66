"""SGR extended mouse protocol decoding.

``ESC [ < button ; col ; row M|m`` payloads become ``MOUSE_*:col:row`` key
tokens. Malformed payloads decode to the empty token (no event): terminals
occasionally emit partial or reordered sequences and that must never be fatal.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

MOUSE_BUTTON_PRIMARY = 0
MOUSE_BUTTON_MIDDLE = 1
MOUSE_BUTTON_SECONDARY = 2
MOUSE_WHEEL_UP = 64
MOUSE_WHEEL_DOWN = 65

_MOTION_FLAG = 0b0010_0000
_WHEEL_FLAG = 0b0100_0000
_MODIFIER_BITS = 0b0001_1100

_SGR_PAYLOAD_RE = re.compile(r"([0-9]+);([0-9]+);([0-9]+)", re.ASCII)

_BUTTON_NAMES = {
    MOUSE_BUTTON_PRIMARY: "LEFT",
    MOUSE_BUTTON_MIDDLE: "MIDDLE",
    MOUSE_BUTTON_SECONDARY: "RIGHT",
}


@dataclass(frozen=True)
class MouseEvent:
    """Decoded mouse token; ``action`` is ``down``, ``up``, ``drag`` or ``wheel``."""

    action: str
    button: str
    col: int
    row: int

    @property
    def is_wheel(self) -> bool:
        return self.action == "wheel"


def decode_sgr_mouse(payload: str, terminator: str) -> str:
    """Translate the payload between ``<`` and the terminator into a mouse token."""
    if terminator not in {"M", "m"}:
        return ""
    match = _SGR_PAYLOAD_RE.fullmatch(payload)
    if match is None:
        return ""
    btn, col, row = (int(part) for part in match.groups())
    if col < 1 or row < 1:
        return ""

    btn &= ~_MODIFIER_BITS
    if btn & _WHEEL_FLAG:
        if btn == MOUSE_WHEEL_UP:
            return f"MOUSE_WHEEL_UP:{col}:{row}"
        if btn == MOUSE_WHEEL_DOWN:
            return f"MOUSE_WHEEL_DOWN:{col}:{row}"
        return ""

    if btn & _MOTION_FLAG:
        # Motion with no button held is hover, which is not reported.
        if (btn & 0b11) not in _BUTTON_NAMES:
            return ""
        return f"MOUSE_DRAG:{col}:{row}"

    name = _BUTTON_NAMES.get(btn & 0b11)
    if name is None:
        return ""
    suffix = "DOWN" if terminator == "M" else "UP"
    return f"MOUSE_{name}_{suffix}:{col}:{row}"


def parse_mouse_col_row(mouse_key: str) -> tuple[int | None, int | None]:
    """Parse ``MOUSE_*:col:row`` key tokens into integer coordinates."""
    parts = mouse_key.split(":")
    if len(parts) < 3:
        return None, None
    try:
        return int(parts[1]), int(parts[2])
    except ValueError:
        return None, None


def parse_mouse_token(mouse_key: str) -> MouseEvent | None:
    """Turn a ``MOUSE_*`` key token back into a structured event."""
    if not mouse_key.startswith("MOUSE_"):
        return None
    col, row = parse_mouse_col_row(mouse_key)
    if col is None or row is None:
        return None
    name = mouse_key.split(":", 1)[0][len("MOUSE_"):]
    if name == "DRAG":
        return MouseEvent(action="drag", button="LEFT", col=col, row=row)
    if name in {"WHEEL_UP", "WHEEL_DOWN"}:
        return MouseEvent(action="wheel", button=name[len("WHEEL_"):], col=col, row=row)
    button, _, suffix = name.rpartition("_")
    if button not in _BUTTON_NAMES.values() or suffix not in {"DOWN", "UP"}:
        return None
    return MouseEvent(action=suffix.lower(), button=button, col=col, row=row)
