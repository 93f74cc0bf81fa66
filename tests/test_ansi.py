"""Regression tests for ANSI-aware width and clipping primitives.

These protect box alignment in every frame from styled or wide text.
"""

import unittest

from duskytui import ansi as ansi_mod


class DisplayWidthTests(unittest.TestCase):
    def test_escape_sequences_have_no_width(self) -> None:
        self.assertEqual(ansi_mod.display_width("\x1b[1;36mabc\x1b[0m"), 3)
        self.assertEqual(ansi_mod.strip_ansi("\x1b[7mx\x1b[0m"), "x")

    def test_wide_and_combining_characters(self) -> None:
        self.assertEqual(ansi_mod.display_width("日本"), 4)
        self.assertEqual(ansi_mod.display_width("é"), 1)

    def test_tabs_expand_to_stops(self) -> None:
        self.assertEqual(ansi_mod.display_width("ab\tc"), 9)


class ClipTests(unittest.TestCase):
    def test_clip_keeps_escapes_and_cuts_text(self) -> None:
        clipped = ansi_mod.clip_ansi_line("\x1b[31mabcdef\x1b[0m", 3)
        self.assertEqual(clipped, "\x1b[31mabc\x1b[0m")

    def test_wide_character_never_straddles_the_edge(self) -> None:
        self.assertEqual(ansi_mod.clip_ansi_line("a日", 2), "a")

    def test_fit_pads_to_exact_width(self) -> None:
        self.assertEqual(ansi_mod.fit_ansi_line("ab", 5), "ab   ")
        self.assertEqual(ansi_mod.display_width(ansi_mod.fit_ansi_line("a日本語", 4)), 4)
        self.assertEqual(ansi_mod.clip_ansi_line("abc", 0), "")

    def test_center_padding(self) -> None:
        self.assertEqual(ansi_mod.center_padding(10, 15), (2, 3))
        self.assertEqual(ansi_mod.center_padding(20, 15), (0, 0))


if __name__ == "__main__":
    unittest.main()
