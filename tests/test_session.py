"""
Test suite for ZR# sessions, configuration and logging.

Tests cover:
- Running source text and files through a Session
- Session isolation and teardown
- InterpreterConfig validation and overrides
- Log level names, record format and the TRACE level

Author: xwest
"""

import io
import os
import re
import sys
import tempfile
import unittest

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

from zrlang.config import DEFAULT_CONFIG, InterpreterConfig
from zrlang.diagnostics import CapacityError
from zrlang.lexer.lexer import tokenize_string
from zrlang.log import TRACE, configure_logging, parse_level
from zrlang.session import Session


class TestSession(unittest.TestCase):

    def setUp(self):
        self.output = io.StringIO()
        self.errors = io.StringIO()

    def test_run_source(self):
        with Session(output=self.output, errors=self.errors) as session:
            result = session.run_source('let x: int32 = 40; print x + 2; print "ok";')
        self.assertTrue(result.ok)
        self.assertEqual(self.output.getvalue(), "42\nok\n")
        self.assertEqual(self.errors.getvalue(), "")

    def test_run_source_reports_errors(self):
        with Session(output=self.output, errors=self.errors) as session:
            result = session.run_source("print nope;\nprint 1;", "snippet.zr")

        self.assertFalse(result.ok)
        self.assertEqual(self.output.getvalue(), "1\n")
        report = self.errors.getvalue()
        self.assertIn("ERROR[R003]: Undefined variable 'nope'", report)
        self.assertIn("--> snippet.zr:1:7", report)

    def test_oversized_literal_is_a_runtime_error(self):
        with Session(output=self.output, errors=self.errors) as session:
            result = session.run_source("print " + "9" * 5000 + ";\nprint 1;")

        self.assertEqual([e.code for e in result.errors], ["R007"])
        self.assertEqual(self.output.getvalue(), "1\n")
        self.assertIn("ERROR[R007]", self.errors.getvalue())

    def test_run_source_resolves_against_directory(self):
        with tempfile.TemporaryDirectory() as tmp:
            with open(os.path.join(tmp, "lib.zr"), "w", encoding="utf-8") as f:
                f.write("let shared = 3;")
            with Session(output=self.output, errors=self.errors) as session:
                result = session.run_source('loadin "lib"; print shared * 2;', directory=tmp)
        self.assertEqual(self.output.getvalue(), "6\n")
        self.assertEqual(len(result.modules), 1)

    def test_state_persists_across_runs_in_one_session(self):
        with Session(output=self.output, errors=self.errors) as session:
            session.run_source("let counter = 1;")
            session.run_source("print counter + 1;")
        self.assertEqual(self.output.getvalue(), "2\n")

    def test_sessions_are_isolated(self):
        first = Session(output=self.output, errors=self.errors)
        second = Session(output=self.output, errors=self.errors)
        first.run_source("let only_here = 1;")
        second.run_source("print only_here;")

        self.assertIn("only_here", first.symbols)
        self.assertNotIn("only_here", second.symbols)
        self.assertIn("R003", self.errors.getvalue())

    def test_close(self):
        session = Session(output=self.output, errors=self.errors)
        session.run_source("let a = 1;")
        session.close()
        self.assertEqual(len(session.symbols), 0)
        with self.assertRaises(RuntimeError):
            session.run_source("print 1;")
        # Closing twice is harmless
        session.close()

    def test_symbol_capacity_is_fatal(self):
        config = InterpreterConfig(max_symbols=2)
        with Session(config, output=self.output, errors=self.errors) as session:
            with self.assertRaises(CapacityError) as ctx:
                session.run_source("let a = 1; let b = 2; let a = 3; let c = 4;")
        self.assertEqual(ctx.exception.code, "C001")


class TestConfig(unittest.TestCase):

    def test_defaults(self):
        self.assertEqual(DEFAULT_CONFIG.source_extension, ".zr")
        self.assertEqual(DEFAULT_CONFIG.library_dir, "files")
        self.assertEqual(DEFAULT_CONFIG.max_block_statements, 1000)
        self.assertEqual(DEFAULT_CONFIG.max_nesting_depth, 100)
        self.assertEqual(DEFAULT_CONFIG.max_symbols, 256)
        self.assertEqual(DEFAULT_CONFIG.max_path_length, 1024)
        self.assertFalse(DEFAULT_CONFIG.strict)

    def test_with_overrides(self):
        config = DEFAULT_CONFIG.with_overrides(max_modules=5, strict=None)
        self.assertEqual(config.max_modules, 5)
        self.assertFalse(config.strict)
        self.assertEqual(DEFAULT_CONFIG.max_modules, 64)

    def test_unknown_override(self):
        with self.assertRaises(ValueError):
            DEFAULT_CONFIG.with_overrides(colour="blue")

    def test_validation(self):
        with self.assertRaises(ValueError):
            InterpreterConfig(max_symbols=0)
        with self.assertRaises(ValueError):
            InterpreterConfig(max_nesting_depth=0)
        with self.assertRaises(ValueError):
            InterpreterConfig(source_extension="zr")


class TestLogging(unittest.TestCase):

    def setUp(self):
        self.stream = io.StringIO()

    def tearDown(self):
        configure_logging("error")

    def test_parse_level(self):
        self.assertEqual(parse_level("warn"), 30)
        self.assertEqual(parse_level("TRACE"), TRACE)
        self.assertEqual(parse_level(10), 10)
        with self.assertRaises(ValueError):
            parse_level("loud")

    def test_record_format(self):
        configure_logging("info", self.stream)
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "main.zr")
            with open(path, "w", encoding="utf-8") as f:
                f.write("print 1;")
            with Session(output=io.StringIO(), errors=io.StringIO()) as session:
                session.run_file(path)

        line = self.stream.getvalue().splitlines()[0]
        self.assertRegex(
            line,
            r"^\[\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}\] \[INFO\] "
            r"\[registry\.py:\d+:register\] registered module .*main\.zr$"
        )

    def test_trace_logs_tokens(self):
        configure_logging("trace", self.stream)
        tokenize_string("let a = 1;")
        self.assertIn("[TRACE]", self.stream.getvalue())
        self.assertIn("token LET('let')", self.stream.getvalue())

    def test_default_level_is_quiet(self):
        configure_logging(stream=self.stream)
        Session(output=io.StringIO(), errors=io.StringIO()).run_source("print 1/0;")
        self.assertEqual(self.stream.getvalue(), "")

    def test_reconfigure_replaces_handler(self):
        configure_logging("trace", self.stream)
        configure_logging("trace", self.stream)
        tokenize_string("x")
        lines = [l for l in self.stream.getvalue().splitlines() if "IDENTIFIER" in l]
        self.assertEqual(len(lines), 1)


def run_session_tests():
    """Run all session, configuration and logging tests."""
    loader = unittest.TestLoader()
    suite = unittest.TestSuite()
    for case in (TestSession, TestConfig, TestLogging):
        suite.addTest(loader.loadTestsFromTestCase(case))

    runner = unittest.TextTestRunner(verbosity=2)
    return runner.run(suite)


if __name__ == "__main__":
    print("Running ZR# Session Tests...")
    print("=" * 60)

    result = run_session_tests()

    print("\n" + "=" * 60)
    if result.wasSuccessful():
        print("✅ All tests passed!")
    else:
        print("❌ Some tests failed.")
