from __future__ import annotations

import subprocess
import unittest
from unittest import mock

from duskytui.reload import reload_hyprland, run_reload_command, signal_logind


class ReloadCommandTests(unittest.TestCase):
    def test_missing_program_is_not_attempted(self) -> None:
        with mock.patch("duskytui.reload.shutil.which", return_value=None), mock.patch(
            "duskytui.reload.subprocess.run"
        ) as run_mock:
            result = reload_hyprland()
        self.assertFalse(result.attempted)
        self.assertFalse(result.ok)
        run_mock.assert_not_called()

    def test_success_and_failure_are_reported(self) -> None:
        ok = subprocess.CompletedProcess(["hyprctl", "reload"], 0, stdout="ok\n", stderr="")
        bad = subprocess.CompletedProcess(["hyprctl", "reload"], 1, stdout="", stderr="config error\n")
        with mock.patch("duskytui.reload.shutil.which", return_value="/usr/bin/hyprctl"), mock.patch(
            "duskytui.reload.subprocess.run", side_effect=[ok, bad]
        ) as run_mock:
            first = reload_hyprland()
            second = reload_hyprland()
        self.assertTrue(first.ok)
        self.assertEqual(first.output, "ok")
        self.assertFalse(second.ok)
        self.assertEqual(second.output, "config error")
        run_mock.assert_called_with(["hyprctl", "reload"], capture_output=True, text=True, check=False)

    def test_start_failure_is_not_raised(self) -> None:
        with mock.patch("duskytui.reload.shutil.which", return_value="/usr/bin/pkill"), mock.patch(
            "duskytui.reload.subprocess.run", side_effect=PermissionError("denied")
        ):
            result = run_reload_command(["pkill", "-HUP", "-x", "systemd-logind"])
        self.assertTrue(result.attempted)
        self.assertFalse(result.ok)

    def test_signal_logind_sends_hup(self) -> None:
        done = subprocess.CompletedProcess([], 0, stdout="", stderr="")
        with mock.patch("duskytui.reload.shutil.which", return_value="/usr/bin/pkill"), mock.patch(
            "duskytui.reload.subprocess.run", return_value=done
        ) as run_mock:
            self.assertTrue(signal_logind().ok)
        self.assertEqual(run_mock.call_args.args[0], ["pkill", "-HUP", "-x", "systemd-logind"])


if __name__ == "__main__":
    unittest.main()
