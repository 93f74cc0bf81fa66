from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from .model import Tab


class Mode(Enum):
    BROWSING = "browsing"
    EDITING = "editing"
    CONFLICT_PROMPT = "conflict_prompt"
    CONFIRM_EXIT = "confirm_exit"


@dataclass
class FileCache:
    """Last-known on-disk key/value pairs of the edited file."""

    values: dict[str, str] = field(default_factory=dict)

    def get(self, key: str) -> str | None:
        return self.values.get(key)

    def pending_changes(self, candidates: dict[str, str]) -> dict[str, str]:
        """Return the subset of ``candidates`` whose value differs from disk."""
        return {key: value for key, value in candidates.items() if self.values.get(key) != value}

    def update(self, changes: dict[str, str]) -> None:
        self.values.update(changes)


@dataclass
class AppState:
    tabs: list[Tab] = field(default_factory=list)
    active_tab: int = 0
    selected_idx: int = 0
    scroll_offset: int = 0
    dirty: bool = False
    mode: Mode = Mode.BROWSING
    status_message: str = ""
    status_is_error: bool = False
    show_preview: bool = False
    tab_zones: tuple[tuple[int, int], ...] = ()
    tab_row: int | None = None
    first_item_row: int = 0
    visible_rows: int = 0
    file_cache: FileCache = field(default_factory=FileCache)
    quit: bool = False
    exit_code: int = 0
    exit_message: str = ""

    def set_status(self, message: str, *, error: bool = False) -> None:
        self.status_message = message
        self.status_is_error = error

    def clear_status(self) -> None:
        self.status_message = ""
        self.status_is_error = False

    def request_exit(self, message: str = "", code: int = 0) -> None:
        self.quit = True
        self.exit_message = message
        self.exit_code = code
