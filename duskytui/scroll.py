"""Scroll-window model shared by every list view.

All functions are pure: they take the current selection/offset and return new
values, which keeps viewport math unit-testable without a terminal.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ScrollWindow:
    """Clamped selection plus the visible slice ``[start, end)`` of a list."""

    selected: int
    offset: int
    start: int
    end: int

    @property
    def has_more_above(self) -> bool:
        return self.start > 0

    def has_more_below(self, item_count: int) -> bool:
        return self.end < item_count


def compute_scroll_window(
    selected: int,
    item_count: int,
    viewport_rows: int,
    offset: int = 0,
) -> ScrollWindow:
    """Clamp ``selected`` and move ``offset`` so the selection stays visible.

    The offset snaps up to the selection when it moves above the viewport,
    advances so the selection is the last visible row when it moves below,
    and is always kept within ``[0, max(0, item_count - viewport_rows)]``.
    """
    rows = max(1, viewport_rows)
    if item_count <= 0:
        return ScrollWindow(selected=0, offset=0, start=0, end=0)

    selected = max(0, min(selected, item_count - 1))
    if selected < offset:
        offset = selected
    elif selected >= offset + rows:
        offset = selected - rows + 1

    max_offset = max(0, item_count - rows)
    offset = max(0, min(offset, max_offset))
    end = min(item_count, offset + rows)
    return ScrollWindow(selected=selected, offset=offset, start=offset, end=end)


def step_selection(selected: int, delta: int, item_count: int, *, wrap: bool = True) -> int:
    """Move by ``delta`` rows, wrapping around the list ends when ``wrap`` is set."""
    if item_count <= 0:
        return 0
    if wrap:
        return (selected + delta) % item_count
    return max(0, min(selected + delta, item_count - 1))


def page_selection(selected: int, direction: int, item_count: int, page_rows: int) -> int:
    """Move one page up or down, clamping at the list ends."""
    return step_selection(selected, direction * max(1, page_rows), item_count, wrap=False)


def edge_selection(item_count: int, *, to_end: bool) -> int:
    """Return the index of the first or last row."""
    if item_count <= 0 or not to_end:
        return 0
    return item_count - 1
