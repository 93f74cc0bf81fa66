"""Input-layer public API.

Low-level terminal decoding (``read_key``) plus the key registry, mouse token
helpers and line editor used by the routers.
"""

from .key_registry import KeyComboBinding, KeyComboRegistry
from .line_editor import LineEditor
from .mouse import MouseEvent, parse_mouse_col_row, parse_mouse_token
from .reader import ESC_SEQUENCE_TIMEOUT_MS, _PENDING_BYTES, read_key

__all__ = [
    "read_key",
    "_PENDING_BYTES",
    "ESC_SEQUENCE_TIMEOUT_MS",
    "KeyComboBinding",
    "KeyComboRegistry",
    "LineEditor",
    "MouseEvent",
    "parse_mouse_col_row",
    "parse_mouse_token",
]
