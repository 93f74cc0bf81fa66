"""Tests for value kinds, item adjustment and schema registration."""

from __future__ import annotations

import unittest

from duskytui.errors import SchemaError
from duskytui.model import (
    BoolKind,
    CycleKind,
    IntRangeKind,
    Item,
    LineKind,
    SchemaBuilder,
    adjust_item,
    parse_base10_int,
    reset_items,
    trim,
)


class ParsingTests(unittest.TestCase):
    def test_trim_is_pure(self) -> None:
        original = "  value\t"
        self.assertEqual(trim(original), "value")
        self.assertEqual(original, "  value\t")

    def test_base10_ignores_leading_zeros(self) -> None:
        self.assertEqual(parse_base10_int("008"), 8)
        self.assertEqual(parse_base10_int(" -07 "), -7)
        self.assertIsNone(parse_base10_int("0x10"))
        self.assertIsNone(parse_base10_int("1.5"))
        self.assertIsNone(parse_base10_int(""))

    def test_int_range_parse_clamps_and_resets_garbage(self) -> None:
        kind = IntRangeKind(0, 12)
        self.assertEqual(kind.parse("09"), 9)
        self.assertEqual(kind.parse("40"), 12)
        self.assertEqual(kind.parse("-3"), 0)
        self.assertEqual(kind.parse("six"), 0)

    def test_bool_parse_accepts_common_literals(self) -> None:
        kind = BoolKind()
        for text in ("yes", "TRUE", "on", "1"):
            self.assertIs(kind.parse(text), True)
        for text in ("no", "False", "off", "0"):
            self.assertIs(kind.parse(text), False)
        self.assertIsNone(kind.parse("maybe"))
        self.assertEqual(kind.format(True), "yes")

    def test_empty_kinds_are_schema_errors(self) -> None:
        with self.assertRaises(SchemaError):
            IntRangeKind(5, 1)
        with self.assertRaises(SchemaError):
            CycleKind(())


class AdjustTests(unittest.TestCase):
    def test_cycle_forward_then_back_is_identity(self) -> None:
        options = ("a", "b", "c", "d")
        kind = CycleKind(options)
        for value in options:
            self.assertEqual(kind.step(kind.step(value, 1), -1), value)
            self.assertEqual(kind.step(kind.step(value, -1), 1), value)
        self.assertEqual(kind.step("d", 1), "a")
        self.assertEqual(kind.step("a", -1), "d")

    def test_stepping_through_every_option_returns_home(self) -> None:
        options = ("ignore", "poweroff", "reboot", "suspend", "lock")
        kind = CycleKind(options)
        for start in options:
            for direction in (1, -1):
                value = start
                seen = []
                for _ in range(len(options)):
                    value = kind.step(value, direction)
                    seen.append(value)
                self.assertEqual(value, start)
                self.assertEqual(sorted(seen), sorted(options))

    def test_cycle_unknown_value_enters_at_ends(self) -> None:
        kind = CycleKind(("a", "b", "c"))
        self.assertEqual(kind.step("zzz", 1), "a")
        self.assertEqual(kind.step("zzz", -1), "c")

    def test_int_step_saturates(self) -> None:
        item = Item("VT", IntRangeKind(0, 2), key="ReserveVT", value=2)
        self.assertFalse(adjust_item(item, 1))
        self.assertTrue(adjust_item(item, -1))
        self.assertEqual(item.value, 1)

    def test_bool_toggles_either_direction(self) -> None:
        item = Item("Kill", BoolKind(), key="KillUserProcesses", value=False)
        self.assertTrue(adjust_item(item, -1))
        self.assertIs(item.value, True)

    def test_unset_item_starts_from_default(self) -> None:
        item = Item("Idle", CycleKind(("ignore", "lock", "suspend")), key="IdleAction", default="ignore")
        self.assertTrue(adjust_item(item, 1))
        self.assertEqual(item.value, "lock")
        bare = Item("Bare", CycleKind(("x", "y")), key="Bare")
        self.assertFalse(adjust_item(bare, 1))
        self.assertIsNone(bare.value)

    def test_line_kind_is_not_adjustable(self) -> None:
        item = Item("Note", LineKind(), key="Note", value="hello")
        self.assertFalse(adjust_item(item, 1))

    def test_reset_restores_defaults_only_where_declared(self) -> None:
        with_default = Item("A", IntRangeKind(0, 9), key="A", default=3, value=7)
        no_default = Item("B", IntRangeKind(0, 9), key="B", value=5)
        self.assertTrue(reset_items([with_default, no_default]))
        self.assertEqual(with_default.value, 3)
        self.assertEqual(no_default.value, 5)
        self.assertFalse(reset_items([with_default]))

    def test_load_marks_missing_keys_unset(self) -> None:
        item = Item("VT", IntRangeKind(0, 12), key="ReserveVT", value=4)
        item.load(None)
        self.assertIsNone(item.value)
        self.assertIsNone(item.formatted())
        item.load("06")
        self.assertEqual(item.formatted(), "6")

    def test_blank_text_loads_as_unset(self) -> None:
        item = Item("Power", CycleKind(("ignore", "poweroff")), key="HandlePowerKey", value="ignore")
        item.load("")
        self.assertIsNone(item.value)
        item.load("  ")
        self.assertIsNone(item.value)

    def test_parses_exactly_flags_clamped_and_replaced_text(self) -> None:
        kind = IntRangeKind(0, 12)
        self.assertTrue(kind.parses_exactly("008"))
        self.assertFalse(kind.parses_exactly("20"))
        self.assertFalse(kind.parses_exactly("six"))
        self.assertTrue(BoolKind().parses_exactly("on"))
        self.assertFalse(BoolKind().parses_exactly("maybe"))
        self.assertTrue(CycleKind(("a",)).parses_exactly("zzz"))


class SchemaBuilderTests(unittest.TestCase):
    def test_registration_order_and_validation(self) -> None:
        schema = SchemaBuilder(["One", "Two"])
        schema.register(0, "First", BoolKind(), key="First")
        schema.register(1, "Second", BoolKind(), key="Second")
        schema.register(0, "Third", BoolKind(), key="Third")
        tabs = schema.build()
        self.assertEqual([item.label for item in tabs[0].items], ["First", "Third"])
        with self.assertRaises(SchemaError):
            schema.register(0, "First", BoolKind())
        with self.assertRaises(SchemaError):
            schema.register(5, "Other", BoolKind())


if __name__ == "__main__":
    unittest.main()
