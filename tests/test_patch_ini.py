"""Tests for section-scoped ``Key=Value`` patching of logind-style files."""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from duskytui.errors import SaveError
from duskytui.patch.ini import apply_settings_patch, parse_settings, patch_settings_text, read_settings_file
from duskytui.state import FileCache

SAMPLE = """\
# logind.conf
[Login]
#NAutoVTs=6
#IdleAction=ignore
HandlePowerKey=poweroff   # keep
#HandleLidSwitch=suspend
HandleLidSwitch=lock

[Other]
IdleAction=halt
"""


class ParseSettingsTests(unittest.TestCase):
    def test_active_wins_over_commented_and_scope_is_section(self) -> None:
        values = parse_settings(SAMPLE)
        self.assertEqual(values["HandleLidSwitch"], "lock")
        self.assertEqual(values["HandlePowerKey"], "poweroff")
        # The commented default is still reported for keys with no active line.
        self.assertEqual(values["IdleAction"], "ignore")
        self.assertNotIn("halt", values.values())

    def test_missing_section_has_no_values(self) -> None:
        self.assertEqual(parse_settings("[Other]\nIdleAction=halt\n"), {})

    def test_whitespace_inside_values_is_dropped(self) -> None:
        self.assertEqual(parse_settings("[Login]\nIdleActionSec = 30 min\n")["IdleActionSec"], "30min")


class PatchSettingsTextTests(unittest.TestCase):
    def test_commented_line_is_uncommented_in_place(self) -> None:
        result = patch_settings_text(SAMPLE, {"IdleAction": "suspend"})
        lines = result.text.splitlines()
        self.assertIn("IdleAction=suspend", lines)
        self.assertNotIn("#IdleAction=ignore", lines)
        self.assertEqual(lines.index("IdleAction=suspend"), 3)
        self.assertEqual(sum(1 for line in lines if line.startswith("IdleAction=")), 2)
        # The [Other] section is untouched.
        self.assertTrue(result.text.endswith("[Other]\nIdleAction=halt\n"))
        self.assertEqual(result.replaced, ("IdleAction",))

    def test_last_active_line_is_the_target(self) -> None:
        result = patch_settings_text(SAMPLE, {"HandleLidSwitch": "ignore"})
        self.assertIn("#HandleLidSwitch=suspend\nHandleLidSwitch=ignore\n", result.text)

    def test_inline_comment_and_spacing_preserved(self) -> None:
        result = patch_settings_text(SAMPLE, {"HandlePowerKey": "suspend"})
        self.assertIn("HandlePowerKey=suspend   # keep\n", result.text)
        spaced = patch_settings_text("[Login]\n  KillUserProcesses = no\n", {"KillUserProcesses": "yes"})
        self.assertEqual(spaced.text, "[Login]\n  KillUserProcesses = yes\n")

    def test_missing_key_is_appended_to_section(self) -> None:
        result = patch_settings_text(SAMPLE, {"ReserveVT": "4"})
        self.assertIn("HandleLidSwitch=lock\nReserveVT=4\n\n[Other]", result.text)
        self.assertEqual(result.appended, ("ReserveVT",))
        self.assertEqual(parse_settings(result.text)["ReserveVT"], "4")

    def test_missing_section_is_created(self) -> None:
        result = patch_settings_text("# empty\n", {"IdleAction": "lock"})
        self.assertEqual(result.text, "# empty\n\n[Login]\nIdleAction=lock\n")
        no_newline = patch_settings_text("[Login]\nA=1", {"B": "2"})
        self.assertEqual(no_newline.text, "[Login]\nA=1\nB=2\n")

    def test_equal_value_is_not_rewritten(self) -> None:
        result = patch_settings_text(SAMPLE, {"HandleLidSwitch": "lock"})
        self.assertFalse(result.changed)
        self.assertEqual(result.text, SAMPLE)

    def test_patch_is_idempotent(self) -> None:
        changes = {"IdleAction": "suspend", "ReserveVT": "4", "HandlePowerKey": "ignore"}
        once = patch_settings_text(SAMPLE, changes).text
        twice = patch_settings_text(once, changes)
        self.assertEqual(twice.text, once)
        self.assertFalse(twice.changed)

    def test_crlf_endings_are_kept(self) -> None:
        text = "[Login]\r\n#IdleAction=ignore\r\nHandlePowerKey=poweroff\r\n"
        result = patch_settings_text(text, {"IdleAction": "lock", "ReserveVT": "2"})
        self.assertEqual(
            result.text,
            "[Login]\r\nIdleAction=lock\r\nHandlePowerKey=poweroff\r\nReserveVT=2\r\n",
        )

    def test_round_trip_for_present_and_absent_keys(self) -> None:
        for key in ("HandlePowerKey", "IdleAction", "ReserveVT"):
            with self.subTest(key=key):
                patched = patch_settings_text(SAMPLE, {key: "custom"}).text
                self.assertEqual(parse_settings(patched)[key], "custom")


class ApplySettingsPatchTests(unittest.TestCase):
    def test_only_changed_values_are_written(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "logind.conf"
            path.write_text(SAMPLE, encoding="utf-8")
            cache = FileCache(parse_settings(SAMPLE))

            self.assertIsNone(apply_settings_patch(path, {"HandleLidSwitch": "lock"}, cache))
            result = apply_settings_patch(path, {"HandleLidSwitch": "lock", "IdleAction": "suspend"}, cache)

            self.assertIsNotNone(result)
            self.assertIn("IdleAction=suspend\n", path.read_text(encoding="utf-8"))
            self.assertEqual(cache.get("IdleAction"), "suspend")
            self.assertIsNone(apply_settings_patch(path, {"IdleAction": "suspend"}, cache))

    def test_reading_keeps_crlf_endings(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "logind.conf"
            path.write_bytes(b"[Login]\r\n#IdleAction=ignore\r\n")
            self.assertEqual(read_settings_file(path), "[Login]\r\n#IdleAction=ignore\r\n")

            apply_settings_patch(path, {"IdleAction": "lock"}, FileCache({"IdleAction": "ignore"}))
            self.assertEqual(path.read_bytes(), b"[Login]\r\nIdleAction=lock\r\n")

    def test_missing_file_is_a_save_error(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(SaveError):
                apply_settings_patch(Path(tmp) / "absent.conf", {"IdleAction": "lock"}, FileCache())


if __name__ == "__main__":
    unittest.main()
