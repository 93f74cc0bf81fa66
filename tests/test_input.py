"""Regression tests for raw-key decoding.

Covers ESC timing, CSI/SS3 sequences with modifiers, control-key tokens and
UTF-8 characters arriving one byte at a time.
"""

import os
import time
import unittest

from duskytui.input import reader
from duskytui.input.reader import decode_csi


class ReadKeyTests(unittest.TestCase):
    def setUp(self) -> None:
        reader._PENDING_BYTES.clear()

    def tearDown(self) -> None:
        reader._PENDING_BYTES.clear()

    def _read_all(self, payload: bytes, count: int) -> list[str]:
        read_fd, write_fd = os.pipe()
        try:
            os.write(write_fd, payload)
            return [reader.read_key(read_fd, timeout_ms=20) for _ in range(count)]
        finally:
            os.close(read_fd)
            os.close(write_fd)

    def test_single_escape_returns_esc_without_second_keypress(self) -> None:
        read_fd, write_fd = os.pipe()
        try:
            os.write(write_fd, b"\x1b")
            started = time.monotonic()
            key = reader.read_key(read_fd, timeout_ms=20)
            elapsed = time.monotonic() - started
        finally:
            os.close(read_fd)
            os.close(write_fd)

        self.assertEqual(key, "ESC")
        self.assertLess(elapsed, 0.5)

    def test_arrow_and_navigation_sequences(self) -> None:
        keys = self._read_all(b"\x1b[A\x1b[B\x1b[C\x1b[D\x1b[5~\x1b[6~\x1b[H\x1b[F", 8)
        self.assertEqual(keys, ["UP", "DOWN", "RIGHT", "LEFT", "PAGE_UP", "PAGE_DOWN", "HOME", "END"])

    def test_ss3_arrows_are_recognized(self) -> None:
        self.assertEqual(self._read_all(b"\x1bOA\x1bOB", 2), ["UP", "DOWN"])

    def test_shift_tab_and_control_keys(self) -> None:
        keys = self._read_all(b"\x1b[Z\t\r\x7f\x03\x15", 6)
        self.assertEqual(keys, ["SHIFT_TAB", "TAB", "ENTER", "BACKSPACE", "CTRL_C", "CTRL_U"])

    def test_alt_enter_and_alt_letter(self) -> None:
        self.assertEqual(self._read_all(b"\x1b\r\x1bx", 2), ["ALT_ENTER", "ALT_x"])

    def test_double_escape_keeps_second_escape(self) -> None:
        self.assertEqual(self._read_all(b"\x1b\x1b", 2), ["ESC", "ESC"])

    def test_utf8_character_is_assembled(self) -> None:
        self.assertEqual(self._read_all("é➤".encode("utf-8"), 2), ["é", "➤"])

    def test_timeout_without_input_returns_empty_token(self) -> None:
        read_fd, write_fd = os.pipe()
        try:
            key = reader.read_key(read_fd, timeout_ms=10)
        finally:
            os.close(read_fd)
            os.close(write_fd)
        self.assertEqual(key, "")

    def test_sgr_mouse_sequence_becomes_mouse_token(self) -> None:
        self.assertEqual(self._read_all(b"\x1b[<0;40;7M", 1), ["MOUSE_LEFT_DOWN:40:7"])

    def test_malformed_mouse_sequence_is_swallowed_whole(self) -> None:
        keys = self._read_all(b"\x1b[<0;a;5Mx", 3)
        self.assertEqual(keys, ["", "x", ""])


class DecodeCsiTests(unittest.TestCase):
    def test_modifier_parameters_prefix_the_key(self) -> None:
        self.assertEqual(decode_csi("1;5", "C"), "CTRL_RIGHT")
        self.assertEqual(decode_csi("1;2", "A"), "SHIFT_UP")
        self.assertEqual(decode_csi("1;3", "D"), "ALT_LEFT")
        self.assertEqual(decode_csi("3;5", "~"), "CTRL_DELETE")

    def test_unknown_sequences_decode_to_nothing(self) -> None:
        self.assertEqual(decode_csi("", "Q"), "")
        self.assertEqual(decode_csi("99", "~"), "")


if __name__ == "__main__":
    unittest.main()
