"""End-to-end tests for the stacked keybind edit session.

The clock is fixed so committed headers are deterministic.
"""

from __future__ import annotations

import tempfile
import unittest
from datetime import datetime
from pathlib import Path

from duskytui.keybinds.session import EditTarget, KeybindEditSession, SubmitStatus

FIXED = datetime(2026, 3, 4, 5, 6)


def fixed_clock() -> datetime:
    return FIXED


class KeybindSessionTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        root = Path(self._tmp.name)
        self.overlay = root / "overlay.conf"
        self.source = root / "source.conf"
        self.overlay.write_text("", encoding="utf-8")
        self.source.write_text("", encoding="utf-8")

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _session(self, target: EditTarget | None = None) -> KeybindEditSession:
        return KeybindEditSession(self.overlay, self.source, target, clock=fixed_clock)

    def test_create_autocorrects_and_appends_one_bind(self) -> None:
        session = self._session()
        self.assertEqual(session.current_input, "bindd = ")

        result = session.submit("bindd = SUPER, Q, exec, kitty")
        self.assertIs(result.status, SubmitStatus.ACCEPTED)
        assert result.correction is not None
        self.assertTrue(result.correction.corrected)
        session.commit()

        text = self.overlay.read_text(encoding="utf-8")
        self.assertEqual(text, "\n# [2026-03-04 05:06] Create\nbind = SUPER, Q, exec, kitty\n")
        self.assertEqual(text.splitlines().count("bind = SUPER, Q, exec, kitty"), 1)

    def test_overwrite_conflict_in_overlay_unbinds_before_new_bind(self) -> None:
        self.overlay.write_text("bind = SUPER, Q, exec, foo\n", encoding="utf-8")
        self.source.write_text("bind = SUPER, Q, exec, base\n", encoding="utf-8")
        target = EditTarget.from_line("bind = SUPER, Q, exec, base", (self.source, 1))
        session = self._session(target)

        result = session.submit("bind = SUPER, Q, exec, bar")
        self.assertIs(result.status, SubmitStatus.CONFLICT)
        self.assertEqual(result.message, "Conflict found in [CUSTOM]")

        self.assertIs(session.resolve_conflict("y").status, SubmitStatus.ACCEPTED)
        session.commit()

        self.assertEqual(
            self.overlay.read_text(encoding="utf-8"),
            "bind = SUPER, Q, exec, foo\n"
            "\n# [2026-03-04 05:06] Edit\n"
            "# Original: bind = SUPER, Q, exec, base\n"
            "unbind = SUPER, Q\n"
            "# Resolving Conflict:\n"
            "unbind = SUPER, Q\n"
            "bind = SUPER, Q, exec, bar\n",
        )

    def test_editing_a_line_without_changing_its_combo_has_no_conflict(self) -> None:
        self.source.write_text("bind = SUPER, Q, exec, base\n", encoding="utf-8")
        target = EditTarget.from_line("bind = SUPER, Q, exec, base", (self.source, 1))
        session = self._session(target)
        self.assertIs(session.submit("bind = SUPER, Q, exec, other").status, SubmitStatus.ACCEPTED)

    def test_invalid_input_is_reported(self) -> None:
        session = self._session()
        result = session.submit("bindd = ")
        self.assertIs(result.status, SubmitStatus.INVALID)
        self.assertEqual(result.message, "Input invalid or unchanged template.")

    def test_retry_choice_keeps_candidate_for_editing(self) -> None:
        self.source.write_text("bind = SUPER, Q, exec, base\n", encoding="utf-8")
        session = self._session()
        session.submit("bind = SUPER, Q, exec, new")
        result = session.resolve_conflict("n")
        self.assertIs(result.status, SubmitStatus.EDITING)
        self.assertEqual(session.current_input, "bind = SUPER, Q, exec, new")
        self.assertEqual(len(session.pending), 0)

    def test_resolving_without_conflict_is_an_error(self) -> None:
        with self.assertRaises(RuntimeError):
            self._session().resolve_conflict("y")

    def test_edit_conflict_chain_stacks_and_commits_in_order(self) -> None:
        self.source.write_text(
            "bind = SUPER, Q, exec, term\nbind = SUPER, E, exec, files\n",
            encoding="utf-8",
        )
        # Create SUPER+Q, which collides with the terminal bind.
        session = self._session()
        self.assertIs(session.submit("bind = SUPER, Q, exec, browser").status, SubmitStatus.CONFLICT)

        # Edit the terminal bind instead; the browser bind is stacked.
        result = session.resolve_conflict("e")
        self.assertIs(result.status, SubmitStatus.EDITING)
        self.assertEqual(session.current_input, "bind = SUPER, Q, exec, term")
        self.assertEqual(len(session.pending), 1)

        # Move the terminal to SUPER+E, which collides with the file manager.
        self.assertIs(session.submit("bind = SUPER, E, exec, term").status, SubmitStatus.CONFLICT)
        session.resolve_conflict("e")
        self.assertEqual(len(session.pending), 2)
        self.assertEqual(session.target.origin, (self.source, 2))

        # Move the file manager to a free combo.
        self.assertIs(session.submit("bind = SUPER, F, exec, files").status, SubmitStatus.ACCEPTED)
        session.commit()

        self.assertEqual(
            self.overlay.read_text(encoding="utf-8"),
            "\n# [2026-03-04 05:06] Edit\n"
            "# Original: bind = SUPER, E, exec, files\n"
            "unbind = SUPER, E\n"
            "bind = SUPER, F, exec, files\n"
            "\n# [2026-03-04 05:06] Stacked Edit (Saved from conflict)\n"
            "# Original: bind = SUPER, Q, exec, term\n"
            "unbind = SUPER, Q\n"
            "bind = SUPER, E, exec, term\n"
            "\n# [2026-03-04 05:06] Stacked Create (Saved from conflict)\n"
            "bind = SUPER, Q, exec, browser\n",
        )

    def test_stacked_unbind_suppresses_later_conflict(self) -> None:
        self.source.write_text(
            "bind = SUPER, Q, exec, term\nbind = SUPER, E, exec, files\n",
            encoding="utf-8",
        )
        target = EditTarget.from_line("bind = SUPER, Q, exec, term", (self.source, 1))
        session = self._session(target)
        self.assertIs(session.submit("bind = SUPER, E, exec, term").status, SubmitStatus.CONFLICT)
        session.resolve_conflict("e")
        # SUPER+Q is scheduled for unbinding by the stacked edit, so it is free.
        self.assertIs(session.submit("bind = SUPER, Q, exec, files").status, SubmitStatus.ACCEPTED)

    def test_flush_pending_writes_only_stacked_blocks(self) -> None:
        self.source.write_text("bind = SUPER, Q, exec, term\n", encoding="utf-8")
        session = self._session()
        self.assertIsNone(session.flush_pending())
        session.submit("bind = SUPER, Q, exec, browser")
        session.resolve_conflict("e")
        session.flush_pending()
        self.assertEqual(
            self.overlay.read_text(encoding="utf-8"),
            "\n# [2026-03-04 05:06] Stacked Create (Saved from conflict)\nbind = SUPER, Q, exec, browser\n",
        )


if __name__ == "__main__":
    unittest.main()
