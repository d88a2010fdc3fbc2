"""
Test suite for ZR# runtime values and the symbol table.

Tests cover:
- Rendering used by print
- The INT32 < INT64 < FLOAT promotion lattice
- Declared-type conversions, including checked narrowing
- Symbol table binding, rebinding and capacity

Author: xwest
"""

import unittest
import sys
import os

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

from zrlang.diagnostics import CapacityError
from zrlang.interpreter.values import (
    INT32_MAX, INT32_MIN, INT64_MAX, INT64_MIN, VOID, Value, ValueType,
    convert_to, promote_pair, wrap_int64,
)
from zrlang.interpreter.symbol_table import SymbolTable


class TestValues(unittest.TestCase):
    """Test cases for Value and the conversion helpers."""

    def test_render(self):
        self.assertEqual(Value.float_(5.5).render(), "5.50")
        self.assertEqual(Value.float_(1.0 / 3.0).render(), "0.33")
        self.assertEqual(Value.int64(-7).render(), "-7")
        self.assertEqual(Value.int32(12).render(), "12")
        self.assertEqual(Value.bool_(True).render(), "true")
        self.assertEqual(Value.bool_(False).render(), "false")
        self.assertEqual(Value.string("hi").render(), "hi")
        self.assertEqual(VOID.render(), "void")

    def test_error_value(self):
        error = Value.error("boom", "R002")
        self.assertTrue(error.is_error)
        self.assertEqual(error.message, "boom")
        self.assertEqual(error.code, "R002")
        self.assertIsNone(Value.int64(1).message)

    def test_promote_int32_with_int64(self):
        a, b = promote_pair(Value.int32(3), Value.int64(4))
        self.assertEqual(a.type, ValueType.INT64)
        self.assertEqual(b.type, ValueType.INT64)

    def test_promote_int_with_float(self):
        a, b = promote_pair(Value.int32(3), Value.float_(2.5))
        self.assertEqual((a.type, b.type), (ValueType.FLOAT, ValueType.FLOAT))
        self.assertEqual(a.payload, 3.0)

    def test_legacy_int_behaves_like_int64(self):
        a, b = promote_pair(Value(ValueType.INT, 2), Value.int32(1))
        self.assertEqual(a.type, ValueType.INT64)

    def test_promote_rejects_non_numeric(self):
        self.assertIsNone(promote_pair(Value.int64(1), Value.string("1")))
        self.assertIsNone(promote_pair(Value.bool_(True), Value.int64(1)))

    def test_widening_conversions(self):
        value, reason = convert_to(Value.int32(5), ValueType.INT64)
        self.assertEqual(value, Value.int64(5))
        self.assertIsNone(reason)

        value, reason = convert_to(Value.int64(5), ValueType.FLOAT)
        self.assertEqual(value, Value.float_(5.0))

    def test_narrowing_in_range(self):
        value, reason = convert_to(Value.int64(INT32_MAX), ValueType.INT32)
        self.assertEqual(value, Value.int32(INT32_MAX))
        value, reason = convert_to(Value.int64(INT32_MIN), ValueType.INT32)
        self.assertEqual(value.type, ValueType.INT32)

    def test_narrowing_overflow(self):
        value, reason = convert_to(Value.int64(40000000000), ValueType.INT32)
        self.assertIsNone(value)
        self.assertEqual(reason, "overflow")

    def test_refused_conversions(self):
        for source, target in [
            (Value.float_(1.5), ValueType.INT64),
            (Value.float_(1.0), ValueType.INT32),
            (Value.string("1"), ValueType.INT64),
            (Value.int64(1), ValueType.BOOL),
            (Value.bool_(True), ValueType.STRING),
        ]:
            with self.subTest(source=source, target=target):
                self.assertEqual(convert_to(source, target), (None, "mismatch"))

    def test_wrap_int64(self):
        self.assertEqual(wrap_int64(INT64_MAX + 1), INT64_MIN)
        self.assertEqual(wrap_int64(INT64_MIN - 1), INT64_MAX)
        self.assertEqual(wrap_int64(-5), -5)


class TestSymbolTable(unittest.TestCase):
    """Test cases for the flat symbol table."""

    def setUp(self):
        self.table = SymbolTable(capacity=2)

    def test_define_and_lookup(self):
        self.table.define("x", Value.int64(1))
        self.assertIn("x", self.table)
        self.assertEqual(self.table.get_value("x"), Value.int64(1))
        self.assertEqual(self.table.lookup("x").type, ValueType.INT64)
        self.assertIsNone(self.table.lookup("y"))
        self.assertIsNone(self.table.get_value("y"))

    def test_rebinding_replaces_entry(self):
        self.table.define("x", Value.int64(1))
        self.table.define("x", Value.string("now a string"))
        self.assertEqual(len(self.table), 1)
        self.assertEqual(self.table.get_value("x").type, ValueType.STRING)

    def test_capacity(self):
        self.table.define("a", Value.int64(1))
        self.table.define("b", Value.int64(2))
        # Rebinding does not take a new slot
        self.table.define("a", Value.int64(3))

        with self.assertRaises(CapacityError) as ctx:
            self.table.define("c", Value.int64(4))
        self.assertEqual(ctx.exception.code, "C001")

    def test_errors_are_never_stored(self):
        with self.assertRaises(ValueError):
            self.table.define("x", Value.error("nope"))
        self.assertNotIn("x", self.table)

    def test_clear(self):
        self.table.define("a", Value.int64(1))
        self.table.clear()
        self.assertEqual(len(self.table), 0)
        self.assertEqual(self.table.names(), [])


def run_value_tests():
    """Run all value and symbol table tests."""
    loader = unittest.TestLoader()
    suite = unittest.TestSuite()
    suite.addTest(loader.loadTestsFromTestCase(TestValues))
    suite.addTest(loader.loadTestsFromTestCase(TestSymbolTable))

    runner = unittest.TextTestRunner(verbosity=2)
    return runner.run(suite)


if __name__ == "__main__":
    print("Running ZR# Value Tests...")
    print("=" * 60)

    result = run_value_tests()

    print("\n" + "=" * 60)
    if result.wasSuccessful():
        print("✅ All tests passed!")
    else:
        print("❌ Some tests failed.")
