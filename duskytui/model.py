"""Editable item model: value kinds, items, tabs, and schema registration.

Each ``ValueKind`` variant is a frozen dataclass carrying its own constraint
payload (bounds for integers, options for cycles) and implementing the same
small protocol: ``parse`` on-disk text, ``parses_exactly`` to tell a faithful
spelling from one that was clamped or replaced, ``format`` a value back to
text, and ``step`` a value forward or backward.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Union

from .errors import SchemaError

_BASE10_RE = re.compile(r"[+-]?[0-9]+", re.ASCII)

_TRUE_WORDS = frozenset({"yes", "true", "on", "1"})
_FALSE_WORDS = frozenset({"no", "false", "off", "0"})


def trim(text: str) -> str:
    """Return ``text`` without leading/trailing whitespace."""
    return text.strip()


def parse_base10_int(text: str) -> int | None:
    """Parse a decimal integer, tolerating leading zeros (``"008"`` is 8).

    Returns ``None`` for anything that is not an optionally signed run of
    ASCII digits.
    """
    candidate = trim(text)
    if not _BASE10_RE.fullmatch(candidate):
        return None
    return int(candidate, 10)


@dataclass(frozen=True)
class BoolKind:
    true_literal: str = "yes"
    false_literal: str = "no"

    def parse(self, text: str) -> bool | None:
        word = trim(text).lower()
        if word in _TRUE_WORDS:
            return True
        if word in _FALSE_WORDS:
            return False
        return None

    def parses_exactly(self, text: str) -> bool:
        return self.parse(text) is not None

    def format(self, value: bool) -> str:
        return self.true_literal if value else self.false_literal

    def step(self, value: bool, direction: int) -> bool:
        return not value


@dataclass(frozen=True)
class IntRangeKind:
    minimum: int
    maximum: int

    def __post_init__(self) -> None:
        if self.minimum > self.maximum:
            raise SchemaError(f"empty integer range [{self.minimum}, {self.maximum}]")

    def clamp(self, value: int) -> int:
        return max(self.minimum, min(self.maximum, value))

    def parse(self, text: str) -> int:
        # Non-numeric content resets to the minimum instead of guessing intent.
        parsed = parse_base10_int(text)
        if parsed is None:
            return self.minimum
        return self.clamp(parsed)

    def parses_exactly(self, text: str) -> bool:
        """Whether ``text`` is a number already inside the range."""
        parsed = parse_base10_int(text)
        return parsed is not None and parsed == self.clamp(parsed)

    def format(self, value: int) -> str:
        return str(value)

    def step(self, value: int, direction: int) -> int:
        return self.clamp(value + direction)


@dataclass(frozen=True)
class CycleKind:
    options: tuple[str, ...]

    def __post_init__(self) -> None:
        if not self.options:
            raise SchemaError("cycle kind needs at least one option")

    def parse(self, text: str) -> str:
        return trim(text)

    def parses_exactly(self, text: str) -> bool:
        return True

    def format(self, value: str) -> str:
        return value

    def step(self, value: str, direction: int) -> str:
        count = len(self.options)
        try:
            idx = self.options.index(value)
        except ValueError:
            # Values outside the option list enter the cycle at its ends.
            return self.options[0] if direction > 0 else self.options[-1]
        return self.options[(idx + direction) % count]


@dataclass(frozen=True)
class LineKind:
    """Free-form single-line text; not adjustable with left/right."""

    def parse(self, text: str) -> str:
        return text.rstrip("\r\n")

    def parses_exactly(self, text: str) -> bool:
        return True

    def format(self, value: str) -> str:
        return value

    def step(self, value: str, direction: int) -> str:
        return value


ValueKind = Union[BoolKind, IntRangeKind, CycleKind, LineKind]


@dataclass
class Item:
    """One editable row. ``value is None`` means the key is unset on disk."""

    label: str
    kind: ValueKind
    key: str | None = None
    default: object | None = None
    value: object | None = None

    def formatted(self) -> str | None:
        if self.value is None:
            return None
        return self.kind.format(self.value)

    def load(self, text: str | None) -> None:
        """Replace the value from on-disk text; missing, blank or unparseable text marks it unset."""
        self.value = None if text is None or not trim(text) else self.kind.parse(text)


@dataclass
class Tab:
    name: str
    items: list[Item] = field(default_factory=list)


def adjust_item(item: Item, direction: int) -> bool:
    """Step ``item`` in ``direction`` and return whether its value changed.

    Unset items start from their default; unset items without a default are
    left alone.
    """
    current = item.value
    if current is None:
        current = item.default
        if current is None:
            return False
    new_value = item.kind.step(current, direction)
    if new_value == item.value:
        return False
    item.value = new_value
    return True


def reset_items(items: list[Item]) -> bool:
    """Restore declared defaults where they differ; return whether anything changed."""
    changed = False
    for item in items:
        if item.default is None or item.value == item.default:
            continue
        item.value = item.default
        changed = True
    return changed


class SchemaBuilder:
    """Collects items into tabs in registration order."""

    def __init__(self, tab_names: list[str]) -> None:
        self.tabs = [Tab(name) for name in tab_names]
        self._labels: set[str] = set()

    def register(
        self,
        tab_index: int,
        label: str,
        kind: ValueKind,
        *,
        key: str | None = None,
        default: object | None = None,
    ) -> Item:
        if not 0 <= tab_index < len(self.tabs):
            raise SchemaError(f"unknown tab index {tab_index} for {label!r}")
        if label in self._labels:
            raise SchemaError(f"duplicate item label {label!r}")
        item = Item(label=label, kind=kind, key=key, default=default)
        self.tabs[tab_index].items.append(item)
        self._labels.add(label)
        return item

    def build(self) -> list[Tab]:
        return self.tabs
