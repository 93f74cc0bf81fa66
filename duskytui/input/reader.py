"""Low-level terminal input decoding.

Reads raw bytes from stdin and translates them into normalized key tokens.
Handles ESC-sequence timing, xterm modifier parameters, UTF-8 characters and
SGR mouse events. The empty string means "no event".
"""

from __future__ import annotations

import os
import select

from .mouse import decode_sgr_mouse

ESC_SEQUENCE_TIMEOUT_MS = 100
MAX_SEQUENCE_BYTES = 32
_PENDING_BYTES: list[bytes] = []

_CONTROL_KEYS = {
    b"\t": "TAB",
    b"\r": "ENTER",
    b"\n": "ENTER",
    b"\x7f": "BACKSPACE",
    b"\x08": "BACKSPACE",
}

_CSI_FINAL_KEYS = {
    "A": "UP",
    "B": "DOWN",
    "C": "RIGHT",
    "D": "LEFT",
    "H": "HOME",
    "F": "END",
    "Z": "SHIFT_TAB",
}

_SS3_KEYS = {
    "A": "UP",
    "B": "DOWN",
    "C": "RIGHT",
    "D": "LEFT",
    "H": "HOME",
    "F": "END",
}

_TILDE_KEYS = {
    "1": "HOME",
    "7": "HOME",
    "4": "END",
    "8": "END",
    "2": "INSERT",
    "3": "DELETE",
    "5": "PAGE_UP",
    "6": "PAGE_DOWN",
}

_MODIFIER_PREFIXES = {
    "2": "SHIFT_",
    "3": "ALT_",
    "5": "CTRL_",
    "9": "ALT_",
}


def _read_ready_byte(fd: int, timeout_ms: int) -> bytes | None:
    if _PENDING_BYTES:
        return _PENDING_BYTES.pop(0)
    ready, _, _ = select.select([fd], [], [], max(0.0, timeout_ms / 1000.0))
    if not ready:
        return None
    ch = os.read(fd, 1)
    if not ch:
        return None
    return ch


def decode_csi(params: str, final: str) -> str:
    """Map the parameter bytes and final byte of a CSI sequence to a key token."""
    if params.startswith("<"):
        return decode_sgr_mouse(params[1:], final)
    if final == "~":
        base, _, modifier = params.partition(";")
        key = _TILDE_KEYS.get(base)
        if key is None:
            return ""
        return _MODIFIER_PREFIXES.get(modifier, "") + key
    key = _CSI_FINAL_KEYS.get(final)
    if key is None:
        return ""
    _, _, modifier = params.partition(";")
    return _MODIFIER_PREFIXES.get(modifier, "") + key


def _read_csi(fd: int) -> str:
    collected: list[bytes] = []
    while True:
        part = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if part is None:
            return ""
        code = part[0]
        if collected[:1] == [b"<"]:
            # SGR mouse reports end only at M/m; swallow stray bytes up to it.
            if part in (b"M", b"m"):
                if len(collected) > MAX_SEQUENCE_BYTES:
                    return ""
                return decode_csi(b"".join(collected).decode("latin-1"), chr(code))
            if len(collected) <= MAX_SEQUENCE_BYTES:
                collected.append(part)
            continue
        if 0x40 <= code <= 0x7E:
            return decode_csi(b"".join(collected).decode("latin-1"), chr(code))
        if not 0x20 <= code <= 0x3F or len(collected) >= MAX_SEQUENCE_BYTES:
            return ""
        collected.append(part)


def _read_escape(fd: int) -> str:
    seq = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
    if seq is None:
        return "ESC"
    if seq == b"[":
        return _read_csi(fd)
    if seq == b"O":
        final = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if final is None:
            return "ALT_O"
        return _SS3_KEYS.get(final.decode("latin-1"), "")
    if seq in {b"\r", b"\n"}:
        return "ALT_ENTER"
    if 0x20 <= seq[0] < 0x7F:
        return f"ALT_{seq.decode('ascii')}"
    # Another ESC or a control byte: report this ESC and keep the byte.
    _PENDING_BYTES.append(seq)
    return "ESC"


def _read_utf8(fd: int, lead: bytes) -> str:
    first = lead[0]
    if first >= 0xF0:
        extra = 3
    elif first >= 0xE0:
        extra = 2
    elif first >= 0xC0:
        extra = 1
    else:
        extra = 0
    data = lead
    for _ in range(extra):
        part = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if part is None:
            break
        data += part
    return data.decode("utf-8", errors="replace")


def read_key(fd: int, timeout_ms: int | None = None) -> str:
    if _PENDING_BYTES:
        ch = _PENDING_BYTES.pop(0)
    else:
        if timeout_ms is not None:
            ready, _, _ = select.select([fd], [], [], max(0.0, timeout_ms / 1000.0))
            if not ready:
                return ""

        ch = os.read(fd, 1)
        if not ch:
            return ""

    control = _CONTROL_KEYS.get(ch)
    if control is not None:
        return control
    if ch == b"\x1b":
        return _read_escape(fd)
    code = ch[0]
    if code < 0x20:
        return f"CTRL_{chr(code + 0x40)}"
    if code >= 0x80:
        return _read_utf8(fd, ch)
    return ch.decode("ascii")
