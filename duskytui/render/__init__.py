"""Rendering engine for boxed list and panel frames.

Frame builders are pure: they take a render context and return a ``Frame``
holding the composed ANSI text plus the click hit-boxes the router needs to
map mouse coordinates back to tabs and rows. Writing happens separately.
"""

from __future__ import annotations

import os
from collections.abc import Sequence
from dataclasses import dataclass

from ..ansi import center_padding, display_width, fit_ansi_line
from ..model import BoolKind, CycleKind, IntRangeKind, Item, LineKind
from ..scroll import ScrollWindow
from ..ui_theme import UITheme

BOX_INNER_WIDTH = 76
MAX_DISPLAY_ROWS = 12
LABEL_WIDTH = 32
ADJUST_THRESHOLD = 38

CURSOR_HOME = "\033[H"
CLEAR_EOL = "\033[K"
CLEAR_EOS = "\033[J"
SELECTED_MARKER = " ➤ "
UNSET_MARKER = "⚠ UNSET"

DESTRUCTIVE_VALUES = frozenset({"poweroff", "reboot", "halt", "kexec"})
SLEEP_VALUES = frozenset({"suspend", "hibernate", "hybrid-sleep", "suspend-then-hibernate", "sleep"})
QUIET_VALUES = frozenset({"ignore", "infinity"})


@dataclass(frozen=True)
class RowView:
    """Display data for one list row.

    ``kind`` is ``"none"`` for plain list entries without a value column.
    """

    label: str
    kind: str = "none"
    value: str | None = None


@dataclass
class ListFrameContext:
    title: str
    status_token: str
    dirty: bool
    rows: Sequence[RowView]
    window: ScrollWindow
    theme: UITheme
    max_rows: int = MAX_DISPLAY_ROWS
    tab_names: Sequence[str] = ()
    active_tab: int = 0
    help_line: str = ""
    footer_lines: Sequence[str] = ()
    panel_lines: Sequence[str] = ()
    status_message: str = ""
    status_is_error: bool = False
    label_width: int = LABEL_WIDTH
    box_width: int = BOX_INNER_WIDTH


@dataclass
class PanelFrameContext:
    title: str
    status_token: str
    dirty: bool
    heading: str
    body_lines: Sequence[str]
    theme: UITheme
    status_message: str = ""
    status_is_error: bool = False
    box_width: int = BOX_INNER_WIDTH


@dataclass(frozen=True)
class Frame:
    text: str
    lines: tuple[str, ...]
    tab_zones: tuple[tuple[int, int], ...] = ()
    tab_row: int | None = None
    first_item_row: int = 0
    visible_rows: int = 0
    window: ScrollWindow | None = None


def row_from_item(item: Item) -> RowView:
    """Build the display row for a schema item."""
    if isinstance(item.kind, BoolKind):
        kind = "bool"
    elif isinstance(item.kind, IntRangeKind):
        kind = "int"
    elif isinstance(item.kind, CycleKind):
        kind = "cycle"
    elif isinstance(item.kind, LineKind):
        kind = "line"
    else:
        raise TypeError(f"unsupported value kind: {item.kind!r}")
    return RowView(label=item.label, kind=kind, value=item.formatted())


def display_value(row: RowView, theme: UITheme) -> str:
    """Render the value column of ``row`` with its kind-specific styling."""
    if row.value is None:
        return theme.style("warning", UNSET_MARKER)
    if row.kind == "bool":
        truthy = row.value.lower() in {"yes", "true", "on", "1"}
        return theme.style("success", "YES") if truthy else theme.style("danger", "NO")
    if row.value in DESTRUCTIVE_VALUES:
        return theme.style("danger", row.value)
    if row.value in SLEEP_VALUES:
        return theme.style("accent", row.value)
    if row.value in QUIET_VALUES:
        return theme.style("muted", row.value)
    return theme.style("value", row.value)


def _boxed(theme: UITheme, content: str, box_width: int) -> str:
    return f"{theme.border}│{theme.reset}{fit_ansi_line(content, box_width)}{theme.border}│{theme.reset}"


def _header_lines(
    theme: UITheme,
    title: str,
    status_token: str,
    dirty: bool,
    box_width: int,
) -> list[str]:
    h_line = "─" * box_width
    status_text = "UNSAVED" if dirty else status_token
    status_style = "unsaved" if dirty else "version"
    visible = display_width(title) + 1 + display_width(status_text)
    left, right = center_padding(visible, box_width)
    title_line = (
        f"{theme.border}│{' ' * left}{theme.reset}{theme.style('title', title)} "
        f"{theme.style(status_style, status_text)}{theme.border}{' ' * right}│{theme.reset}"
    )
    return [f"{theme.border}┌{h_line}┐{theme.reset}", title_line]


def _tab_strip(
    theme: UITheme,
    tab_names: Sequence[str],
    active_tab: int,
    box_width: int,
) -> tuple[str, tuple[tuple[int, int], ...]]:
    parts: list[str] = []
    zones: list[tuple[int, int]] = []
    col = 3
    for idx, name in enumerate(tab_names):
        width = display_width(name)
        zones.append((col, col + width + 1))
        if idx == active_tab:
            parts.append(f"{theme.tab_active} {name} {theme.reset}{theme.border}│ {theme.reset}")
        else:
            parts.append(f"{theme.tab_inactive} {name} {theme.reset}{theme.border}│ {theme.reset}")
        col += width + 4
    return _boxed(theme, " " + "".join(parts), box_width), tuple(zones)


def _status_line(theme: UITheme, message: str, is_error: bool) -> str:
    if not message:
        return ""
    return theme.style("error" if is_error else "accent", f" {message}")


def _compose(lines: list[str]) -> str:
    body = "".join(f"{line}{CLEAR_EOL}\r\n" for line in lines[:-1])
    if lines:
        body += f"{lines[-1]}{CLEAR_EOL}"
    return f"{CURSOR_HOME}{body}{CLEAR_EOS}"


def _item_line(row: RowView, selected: bool, ctx: ListFrameContext) -> str:
    theme = ctx.theme
    if row.kind == "none":
        label_width = ctx.box_width - len(SELECTED_MARKER) - 1
    else:
        label_width = ctx.label_width
    label = fit_ansi_line(row.label, label_width)
    if selected:
        line = f"{theme.marker}{SELECTED_MARKER}{theme.reverse}{label}{theme.reset}"
    else:
        line = f"    {label}"
    if row.kind != "none":
        line += f" : {display_value(row, theme)}"
    return line


def render_list_frame(ctx: ListFrameContext) -> Frame:
    """Compose a full list frame of constant height for ``ctx``."""
    theme = ctx.theme
    h_line = "─" * ctx.box_width
    lines = _header_lines(theme, ctx.title, ctx.status_token, ctx.dirty, ctx.box_width)

    tab_zones: tuple[tuple[int, int], ...] = ()
    tab_row: int | None = None
    if ctx.tab_names:
        strip, tab_zones = _tab_strip(theme, ctx.tab_names, ctx.active_tab, ctx.box_width)
        lines.append(strip)
        tab_row = len(lines)
    lines.append(f"{theme.border}└{h_line}┘{theme.reset}")

    window = ctx.window
    count = len(ctx.rows)
    if window.has_more_above:
        lines.append(theme.style("muted", "    ▲ (more above)"))
    else:
        lines.append("")

    first_item_row = len(lines) + 1
    for idx in range(window.start, window.end):
        lines.append(_item_line(ctx.rows[idx], idx == window.selected, ctx))
    for _ in range(window.end - window.start, ctx.max_rows):
        lines.append("")

    if count > ctx.max_rows:
        position = f"[{window.selected + 1}/{count}]"
        if window.has_more_below(count):
            lines.append(theme.style("muted", f"    ▼ (more below) {position}"))
        else:
            lines.append(theme.style("muted", f"                   {position}"))
    else:
        lines.append("")

    lines.append("")
    if ctx.help_line:
        lines.append(theme.style("help", f" {ctx.help_line}"))
    lines.extend(ctx.footer_lines)
    lines.extend(ctx.panel_lines)
    lines.append(_status_line(theme, ctx.status_message, ctx.status_is_error))

    return Frame(
        text=_compose(lines),
        lines=tuple(lines),
        tab_zones=tab_zones,
        tab_row=tab_row,
        first_item_row=first_item_row,
        visible_rows=ctx.max_rows,
        window=window,
    )


def render_panel_frame(ctx: PanelFrameContext) -> Frame:
    """Compose a header box followed by free-form body lines."""
    theme = ctx.theme
    h_line = "─" * ctx.box_width
    lines = _header_lines(theme, ctx.title, ctx.status_token, ctx.dirty, ctx.box_width)
    if ctx.heading:
        lines.append(f"{theme.border}├{h_line}┤{theme.reset}")
        lines.append(_boxed(theme, f" {ctx.heading}", ctx.box_width))
    lines.append(f"{theme.border}└{h_line}┘{theme.reset}")
    lines.extend(ctx.body_lines)
    lines.append(_status_line(theme, ctx.status_message, ctx.status_is_error))
    return Frame(text=_compose(lines), lines=tuple(lines))


def write_frame(fd: int, frame: Frame) -> None:
    os.write(fd, frame.text.encode("utf-8", errors="replace"))


__all__ = [
    "ADJUST_THRESHOLD",
    "BOX_INNER_WIDTH",
    "Frame",
    "LABEL_WIDTH",
    "ListFrameContext",
    "MAX_DISPLAY_ROWS",
    "PanelFrameContext",
    "RowView",
    "UNSET_MARKER",
    "display_value",
    "render_list_frame",
    "render_panel_frame",
    "row_from_item",
    "write_frame",
]
