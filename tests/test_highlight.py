"""Tests for preview sanitization and pygments highlighting."""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from duskytui.ansi import strip_ansi
from duskytui.highlight import (
    UNREADABLE_PLACEHOLDER,
    highlight_text,
    preview_lines,
    sanitize_terminal_text,
)


class SanitizeTests(unittest.TestCase):
    def test_control_bytes_are_escaped(self) -> None:
        self.assertEqual(sanitize_terminal_text("a\x07b\x1b[2Jc"), "a\\x07b\\x1b[2Jc")
        self.assertEqual(sanitize_terminal_text("tab\tok\n"), "tab\tok\n")


class HighlightTests(unittest.TestCase):
    def test_highlight_keeps_text_and_adds_color(self) -> None:
        source = "general {\n    color = rgba(0,0,0,1)\n}\n"
        result = highlight_text(source, Path("hyprlock.conf"))
        self.assertIn("\x1b[", result)
        self.assertEqual(strip_ansi(result), source)

    def test_unknown_style_falls_back(self) -> None:
        result = highlight_text("key = value\n", Path("x.conf"), style="no-such-style")
        self.assertEqual(strip_ansi(result), "key = value\n")

    def test_empty_text(self) -> None:
        self.assertEqual(highlight_text("", Path("x.conf")), "")


class PreviewLinesTests(unittest.TestCase):
    def test_preview_is_limited_and_plain_when_no_color(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "hyprlock.conf"
            path.write_text("".join(f"line {idx}\n" for idx in range(20)), encoding="utf-8")
            plain = preview_lines(path, limit=3, no_color=True)
            colored = preview_lines(path, limit=3)
        self.assertEqual(plain, ["line 0", "line 1", "line 2"])
        self.assertEqual([strip_ansi(line) for line in colored], plain)

    def test_unreadable_file_yields_placeholder(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            self.assertEqual(preview_lines(Path(tmp) / "absent.conf"), [UNREADABLE_PLACEHOLDER])

    def test_latin1_content_is_readable(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "theme.conf"
            path.write_bytes(b"caf\xe9\n")
            self.assertEqual(preview_lines(path, no_color=True), ["café"])


if __name__ == "__main__":
    unittest.main()
